"""
EPP CLI Main Entry Point

Command-line interface for nic.at EPP operations.
"""

import getpass
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click
import yaml

from epp_at import EPPClient, __version__
from epp_at.config import SessionConfig, create_sample_config
from epp_at.exceptions import (
    EPPAuthenticationError,
    EPPCommandError,
    EPPConnectionError,
    EPPError,
    EPPObjectNotFound,
    EPPValidationError,
)
from epp_at_cli.output import OutputFormatter, print_error, print_info, print_success

logger = logging.getLogger("epp.cli")


# Global state for the CLI run
class CLIState:
    formatter: Optional[OutputFormatter] = None


state = CLIState()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option("--config", "-c", type=click.Path(exists=True), help="Config file path")
@click.option("--profile", "-p", default="default", help="Config profile to use")
@click.option("--host", "-H", help="EPP server hostname")
@click.option("--port", type=int, help="EPP server port (default 700)")
@click.option("--client-id", "-u", help="Client/registrar ID")
@click.option("--password", "-P", help="Password (prompted for if not set)")
@click.option("--timeout", type=float, help="Connect timeout in seconds (default 30)")
@click.option("--format", "-f", type=click.Choice(["table", "json"]), default="table", help="Output format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config, profile, host, port, client_id, password, timeout, format, quiet, debug):
    """
    nic.at EPP Client

    Connect to the nic.at EPP server and manage domains and contacts.

    \b
    Configuration:
      Use a config file at ~/.epp-at/config.yaml or pass options directly.
      Run 'epp-at config init' to create a sample config file.

    \b
    Examples:
      epp-at --host epp.nic.at -u REG-1 domain check example.at
      epp-at -c config.yaml domain info example.at
      epp-at --profile test poll req
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    state.formatter = OutputFormatter(format=format, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj["options"] = {
        "config": config,
        "profile": profile,
        "host": host,
        "port": port,
        "client_id": client_id,
        "password": password,
        "timeout": timeout,
    }


def get_config(ctx) -> SessionConfig:
    """
    Resolve the session configuration on first use.

    Commands that need no server, such as `config init`, never load it.
    An unreadable config file is reported and exits with status 1.
    """
    if "config" in ctx.obj:
        return ctx.obj["config"]

    options = ctx.obj["options"]
    profile = options["profile"]
    try:
        if options["config"]:
            session_config = SessionConfig.from_file(Path(options["config"]), profile)
        else:
            session_config = SessionConfig.find_and_load(profile)
    except (ValueError, yaml.YAMLError) as e:
        print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    # Command-line options override the config file
    if session_config is None:
        session_config = SessionConfig(host=options["host"], profile=profile)
    elif options["host"]:
        session_config.host = options["host"]
    if options["port"] is not None:
        session_config.port = options["port"]
    if options["client_id"]:
        session_config.client_id = options["client_id"]
    if options["password"]:
        session_config.password = options["password"]
    if options["timeout"] is not None:
        session_config.timeout = options["timeout"]

    ctx.obj["config"] = session_config
    return session_config


def get_client(ctx) -> EPPClient:
    """
    Build an EPP client from the resolved configuration.

    Exits if host or client ID is missing; prompts for the password.
    """
    config = get_config(ctx)

    if not config.host:
        print_error("No server host specified. Use --host or config file.")
        sys.exit(1)

    if not config.client_id:
        print_error("No client ID specified. Use --client-id or config file.")
        sys.exit(1)

    if not config.password:
        config.password = getpass.getpass("Password: ")

    return EPPClient(config)


def run_command(ctx, action: Callable[[EPPClient], Any], login: bool = True) -> Any:
    """
    Run one action inside a fresh session.

    Connects (and logs in unless `login` is False), calls `action(client)`,
    then logs out and closes whatever the outcome. EPP failures are
    reported and exit with status 1.
    """
    client = get_client(ctx)
    try:
        client.connect()
        if login:
            client.login()
        return action(client)
    except EPPConnectionError as e:
        print_error(f"Connection failed: {e}")
        sys.exit(1)
    except EPPAuthenticationError as e:
        print_error(f"Authentication failed: {e}")
        sys.exit(1)
    except EPPObjectNotFound as e:
        print_error(f"Object not found: {e}")
        sys.exit(1)
    except EPPCommandError as e:
        print_error(f"Command failed: {e}")
        for condition in e.conditions:
            print_error(f"  {condition}")
        sys.exit(1)
    except EPPValidationError as e:
        print_error(f"Invalid input: {e}")
        sys.exit(1)
    finally:
        if client.is_logged_in:
            try:
                client.logout()
            except EPPError as e:
                logger.warning(f"Logout failed: {e}")
        client.close()


# =============================================================================
# Config Commands
# =============================================================================

@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command("init")
@click.option("--path", "-p", type=click.Path(), default="~/.epp-at/config.yaml", help="Config file path")
def config_init(path):
    """Create sample configuration file."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists():
        if not click.confirm(f"{path} already exists. Overwrite?"):
            return

    path.write_text(create_sample_config())

    print_success(f"Created config file: {path}")
    print_info("Edit the file to configure your EPP connection settings.")


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Show current configuration (password hidden)."""
    config = get_config(ctx)
    info = {
        "Profile": config.profile,
        "Host": config.host or "(not set)",
        "Port": config.port,
        "Client ID": config.client_id or "(not set)",
        "Password": "(set)" if config.password else "(not set)",
        "Certificate": config.cert_file or "(not set)",
        "Key": config.key_file or "(not set)",
        "CA": config.ca_file or "(not set)",
        "Timeout": config.timeout,
        "Verify Server": config.verify_server,
    }
    state.formatter.output(info)


# =============================================================================
# Session Commands
# =============================================================================

@cli.command()
@click.pass_context
def hello(ctx):
    """Send hello and show the server greeting."""
    greeting = run_command(ctx, lambda client: client.hello(), login=False)
    state.formatter.output(greeting)


@cli.command()
@click.option("--new-password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="New password")
@click.pass_context
def passwd(ctx, new_password):
    """Change the registrar password (login with newPW)."""
    run_command(ctx, lambda client: client.change_password(new_password), login=False)
    state.formatter.success("Password changed")


# =============================================================================
# Domain Commands
# =============================================================================

@cli.group()
def domain():
    """Domain management commands."""
    pass


@domain.command("check")
@click.argument("names", nargs=-1, required=True)
@click.pass_context
def domain_check(ctx, names):
    """
    Check domain availability.

    NAMES: One or more domain names to check.
    """
    result = run_command(ctx, lambda client: client.domain_check(list(names)))
    state.formatter.output(result.results)


@domain.command("info")
@click.argument("name")
@click.option("--auth-info", "-a", help="Auth info for domains of other registrars")
@click.pass_context
def domain_info(ctx, name, auth_info):
    """
    Get domain information.

    NAME: Domain name to query.
    """
    result = run_command(ctx, lambda client: client.domain_info(name, auth_info=auth_info))
    state.formatter.output(result)


@domain.command("delete")
@click.argument("name")
@click.option("--confirm", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def domain_delete(ctx, name, confirm):
    """
    Delete a domain.

    NAME: Domain name to delete.
    """
    if not confirm:
        if not click.confirm(f"Are you sure you want to delete {name}?"):
            return

    run_command(ctx, lambda client: client.domain_delete(name))
    state.formatter.success(f"Domain deleted: {name}")


@domain.command("withdraw")
@click.argument("name")
@click.option("--hold", is_flag=True, help="Set clientHold instead of using the withdraw extension")
@click.pass_context
def domain_withdraw(ctx, name, hold):
    """
    Withdraw a domain.

    NAME: Domain name to withdraw.
    """
    if hold:
        run_command(ctx, lambda client: client.domain_withdraw(name))
    else:
        run_command(ctx, lambda client: client.domain_withdraw_proper(name))
    state.formatter.success(f"Domain withdrawn: {name}")


# =============================================================================
# Contact Commands
# =============================================================================

@cli.group()
def contact():
    """Contact management commands."""
    pass


@contact.command("info")
@click.argument("id")
@click.option("--auth-info", "-a", help="Auth info")
@click.pass_context
def contact_info(ctx, id, auth_info):
    """
    Get contact information.

    ID: Contact handle to query.
    """
    result = run_command(ctx, lambda client: client.contact_info(id, auth_info=auth_info))
    state.formatter.output(result)


@contact.command("delete")
@click.argument("id")
@click.option("--confirm", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def contact_delete(ctx, id, confirm):
    """
    Delete a contact.

    ID: Contact handle to delete.
    """
    if not confirm:
        if not click.confirm(f"Are you sure you want to delete contact {id}?"):
            return

    run_command(ctx, lambda client: client.contact_delete(id))
    state.formatter.success(f"Contact deleted: {id}")


# =============================================================================
# Poll Commands
# =============================================================================

@cli.group()
def poll():
    """Poll message commands."""
    pass


@poll.command("req")
@click.pass_context
def poll_req(ctx):
    """Request the next poll message."""
    _, message = run_command(ctx, lambda client: client.poll_request())
    if message is None:
        state.formatter.info("No messages")
        return
    state.formatter.output(message)


@poll.command("ack")
@click.argument("msg_id")
@click.pass_context
def poll_ack(ctx, msg_id):
    """
    Acknowledge a poll message.

    MSG_ID: Message ID to acknowledge.
    """
    run_command(ctx, lambda client: client.poll_ack(msg_id))
    state.formatter.success(f"Message acknowledged: {msg_id}")


# =============================================================================
# Entry Point
# =============================================================================

def main():
    """Main entry point."""
    try:
        cli()
    except EPPError as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
