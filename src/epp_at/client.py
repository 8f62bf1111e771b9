"""
EPP Client

High-level EPP client for nic.at registry operations.
"""

import logging
from typing import List, Optional, Tuple, Union

from epp_at.builders import ContactBuilder, DomainBuilder, PollBuilder
from epp_at.codes import SUCCESS_NO_MESSAGES
from epp_at.config import SessionConfig
from epp_at.exceptions import EPPNotLoggedIn, EPPValidationError, raise_for_response
from epp_at.models import (
    ContactChange,
    ContactCreate,
    ContactCreateResult,
    ContactInfo,
    ContactUpdate,
    DSData,
    DomainCheckResult,
    DomainCreate,
    DomainCreateResult,
    DomainInfo,
    DomainTransferResult,
    DomainUpdate,
    DomainUpdateBlock,
    EPPResponse,
    Greeting,
    PollMessage,
    SecDNSUpdate,
    StatusValue,
)
from epp_at.session import EPPSession
from epp_at.validators import (
    validate_contact_id,
    validate_country_code,
    validate_domain_name,
    validate_email,
    validate_phone,
)
from epp_at.xml_parser import XMLParser

logger = logging.getLogger("epp.client")


class EPPClient:
    """
    High-level EPP client.

    Provides a clean API over one EPPSession:
    - Session: connect, login, logout, hello, change_password
    - Domain: check, info, create, update, delete, transfer, withdraw, DNSSEC
    - Contact: create, info, update, delete
    - Poll: request, acknowledge

    Failure result codes raise the matching EPPCommandError subclass; the
    session stays usable afterwards.

    Example:
        config = SessionConfig(host="epp.nic.at", client_id="reg", password="secret")

        with EPPClient(config) as client:
            result = client.domain_check(["example.at", "test.at"])
            for item in result.results:
                print(f"{item.name}: {'available' if item.available else 'taken'}")
    """

    def __init__(self, config: SessionConfig, session: EPPSession = None):
        """
        Initialize EPP client.

        Args:
            config: Session settings
            session: Pre-built session (default: new EPPSession from config)
        """
        self.config = config
        self.session = session or EPPSession(config)

    @property
    def is_connected(self) -> bool:
        return self.session.is_connected

    @property
    def is_logged_in(self) -> bool:
        return self.session.is_logged_in

    @property
    def greeting(self) -> Optional[Greeting]:
        return self.session.greeting

    def _execute(self, payload: bytes, reason: str) -> Tuple[EPPResponse, bytes]:
        """Send a command, raise on failure, return parsed and raw response."""
        if not self.session.is_logged_in:
            raise EPPNotLoggedIn()
        raw = self.session.send_command(payload)
        response = XMLParser.parse_response(raw)
        if not response.success:
            logger.debug(f"Command failed: [{response.code}] {response.message}")
        raise_for_response(response, reason)
        return response, raw

    # =========================================================================
    # Connection Management
    # =========================================================================

    def connect(self) -> Greeting:
        """Connect to the server and read the greeting."""
        return self.session.connect()

    def login(self) -> EPPResponse:
        """Log in with the configured credentials."""
        return self.session.login()

    def logout(self) -> EPPResponse:
        """Log out of the server."""
        return self.session.logout()

    def close(self) -> None:
        """Close the connection."""
        self.session.close()

    def __enter__(self):
        """Context manager entry: connect and log in."""
        self.session.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: log out and close."""
        return self.session.__exit__(exc_type, exc_val, exc_tb)

    # =========================================================================
    # Session Commands
    # =========================================================================

    def hello(self) -> Greeting:
        """Send hello and return the server greeting."""
        return self.session.hello()

    def change_password(self, new_password: str) -> EPPResponse:
        """Log in and set a new password (connected, not yet logged in)."""
        return self.session.change_password(new_password)

    # =========================================================================
    # Poll Commands
    # =========================================================================

    def poll_request(self) -> Tuple[EPPResponse, Optional[PollMessage]]:
        """
        Request next poll message.

        Returns:
            Tuple of (EPPResponse, PollMessage or None if queue is empty)
        """
        response, raw = self._execute(
            PollBuilder.build_request(cl_trid=self.session.next_trid()),
            "poll request failed",
        )

        if response.code == SUCCESS_NO_MESSAGES:
            return response, None

        return response, XMLParser.parse_poll_message(raw)

    def poll_ack(self, msg_id: str) -> EPPResponse:
        """Acknowledge (dequeue) a poll message."""
        response, _ = self._execute(
            PollBuilder.build_ack(msg_id=msg_id, cl_trid=self.session.next_trid()),
            "poll ack failed",
        )
        return response

    # =========================================================================
    # Domain Commands
    # =========================================================================

    def domain_check(self, names: Union[str, List[str]]) -> DomainCheckResult:
        """
        Check domain availability.

        Raises:
            EPPValidationError: If no names are given or one is malformed
        """
        if isinstance(names, str):
            names = [names]
        if not names:
            raise EPPValidationError("At least one domain name is required")
        for name in names:
            validate_domain_name(name)

        _, raw = self._execute(
            DomainBuilder.build_check(names, cl_trid=self.session.next_trid()),
            "domain check failed",
        )
        return XMLParser.parse_domain_check(raw)

    def domain_info(self, name: str, auth_info: str = None) -> DomainInfo:
        """Get domain information."""
        _, raw = self._execute(
            DomainBuilder.build_info(name, cl_trid=self.session.next_trid(), auth_info=auth_info),
            "domain info failed",
        )
        return XMLParser.parse_domain_info(raw)

    def domain_create(self, create_data: DomainCreate) -> DomainCreateResult:
        """Create a domain."""
        validate_domain_name(create_data.name)

        _, raw = self._execute(
            DomainBuilder.build_create(create_data, cl_trid=self.session.next_trid()),
            "domain create failed",
        )
        return XMLParser.parse_domain_create(raw)

    def domain_update(self, update_data: DomainUpdate) -> EPPResponse:
        """Update a domain."""
        response, _ = self._execute(
            DomainBuilder.build_update(update_data, cl_trid=self.session.next_trid()),
            "domain update failed",
        )
        return response

    def domain_delete(self, name: str) -> EPPResponse:
        """Delete a domain."""
        response, _ = self._execute(
            DomainBuilder.build_delete(name, cl_trid=self.session.next_trid()),
            "domain delete failed",
        )
        return response

    def domain_transfer_request(self, name: str, auth_info: str) -> DomainTransferResult:
        """Request a domain transfer (result may be pending, 1001)."""
        return self._domain_transfer(name, "request", auth_info)

    def domain_transfer_query(self, name: str) -> DomainTransferResult:
        """Query domain transfer status."""
        return self._domain_transfer(name, "query")

    def domain_transfer_cancel(self, name: str) -> DomainTransferResult:
        """Cancel a pending domain transfer."""
        return self._domain_transfer(name, "cancel")

    def _domain_transfer(self, name: str, op: str, auth_info: str = None) -> DomainTransferResult:
        _, raw = self._execute(
            DomainBuilder.build_transfer(name, op, cl_trid=self.session.next_trid(), auth_info=auth_info),
            f"domain transfer {op} failed",
        )
        return XMLParser.parse_domain_transfer(raw)

    def domain_withdraw(self, name: str) -> EPPResponse:
        """Withdraw a domain by adding clientHold."""
        update_data = DomainUpdate(
            name=name,
            add=DomainUpdateBlock(status=[StatusValue("clientHold")]),
        )
        return self.domain_update(update_data)

    def domain_withdraw_proper(self, name: str) -> EPPResponse:
        """Withdraw a domain with the nic.at withdraw command extension."""
        response, _ = self._execute(
            DomainBuilder.build_withdraw(name, cl_trid=self.session.next_trid()),
            "domain withdraw failed",
        )
        return response

    def domain_update_dnssec(
        self,
        name: str,
        add: List[DSData] = None,
        rem: List[DSData] = None,
        chg: List[DSData] = None,
    ) -> EPPResponse:
        """Add, remove or replace DS records of a domain."""
        update_data = DomainUpdate(
            name=name,
            sec_dns=SecDNSUpdate(add=add or [], rem=rem or [], chg=chg or []),
        )
        return self.domain_update(update_data)

    # =========================================================================
    # Contact Commands
    # =========================================================================

    def contact_create(self, create_data: ContactCreate) -> ContactCreateResult:
        """Create a contact. Street lines are normalized to 3 x 35."""
        validate_contact_id(create_data.id)
        validate_email(create_data.email)
        validate_country_code(create_data.postal_info.cc)
        validate_phone(create_data.voice)
        validate_phone(create_data.fax)

        _, raw = self._execute(
            ContactBuilder.build_create(create_data, cl_trid=self.session.next_trid()),
            "contact create failed",
        )
        return XMLParser.parse_contact_create(raw)

    def contact_info(self, id: str, auth_info: str = None) -> ContactInfo:
        """Get contact information."""
        _, raw = self._execute(
            ContactBuilder.build_info(id, cl_trid=self.session.next_trid(), auth_info=auth_info),
            "contact info failed",
        )
        return XMLParser.parse_contact_info(raw)

    def contact_update(
        self,
        id: str,
        add_status: List[StatusValue] = None,
        rem_status: List[StatusValue] = None,
        chg: ContactChange = None,
    ) -> EPPResponse:
        """Update a contact. Blocks left as None are not sent."""
        update_data = ContactUpdate(id=id, add_status=add_status, rem_status=rem_status, chg=chg)
        response, _ = self._execute(
            ContactBuilder.build_update(update_data, cl_trid=self.session.next_trid()),
            "contact update failed",
        )
        return response

    def contact_delete(self, id: str) -> EPPResponse:
        """Delete a contact."""
        response, _ = self._execute(
            ContactBuilder.build_delete(id, cl_trid=self.session.next_trid()),
            "contact delete failed",
        )
        return response
