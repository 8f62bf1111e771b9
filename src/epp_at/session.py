"""
EPP Session

Drives one EPP session over a single connection:
connect -> greeting -> login -> command* -> logout -> close.

A session is not thread-safe. EPP is strictly request/response, so only
one command may be in flight; callers that need concurrency use one
session per worker.
"""

import enum
import logging
from typing import Callable, Optional

from epp_at.builders import SessionBuilder
from epp_at.codes import SUCCESS
from epp_at.config import SessionConfig
from epp_at.connection import EPPConnection
from epp_at.exceptions import (
    EPPAlreadyLoggedIn,
    EPPAuthenticationError,
    EPPConnectionError,
    EPPError,
    EPPGreetingError,
    EPPNotConnected,
    EPPValidationError,
    EPPXMLError,
)
from epp_at.models import EPPResponse, Greeting
from epp_at.trid import TransactionIDGenerator
from epp_at.xml_parser import XMLParser

logger = logging.getLogger("epp.session")


class SessionState(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"


class EPPSession:
    """
    EPP session engine.

    Owns the connection, generates transaction IDs and tracks the session
    state. Command builders call `send_command` with serialized XML and
    get the raw response bytes back.

    Transport errors close the connection and put the session back in
    DISCONNECTED. Failure result codes are left to the caller and do not
    affect the session.

    Example:
        session = EPPSession(SessionConfig(host="epp.nic.at", client_id="reg", password="pw"))
        session.connect()
        session.login()
        raw = session.send_command(DomainBuilder.build_check(["example.at"], session.next_trid()))
        session.logout()
        session.close()
    """

    def __init__(
        self,
        config: SessionConfig,
        connection: Optional[EPPConnection] = None,
        trid_generator: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize EPP session.

        Args:
            config: Session settings (server, credentials, login options)
            connection: Transport to use (default: EPPConnection from config)
            trid_generator: Callable returning fresh clTRIDs
        """
        self.config = config
        self._connection = connection or EPPConnection(
            host=config.host,
            port=config.port,
            cert_file=config.cert_file,
            key_file=config.key_file,
            ca_file=config.ca_file,
            timeout=config.timeout,
            verify_server=config.verify_server,
        )
        self._next_trid = trid_generator or TransactionIDGenerator(prefix=config.trid_prefix)
        self._state = SessionState.DISCONNECTED
        self._greeting: Optional[Greeting] = None

    @property
    def state(self) -> SessionState:
        if self._state is not SessionState.DISCONNECTED and not self._connection.is_connected:
            self._state = SessionState.DISCONNECTED
        return self._state

    @property
    def is_connected(self) -> bool:
        return self.state is not SessionState.DISCONNECTED

    @property
    def is_logged_in(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def greeting(self) -> Optional[Greeting]:
        """Server greeting received on connect."""
        return self._greeting

    @property
    def password(self) -> Optional[str]:
        return self.config.password

    def next_trid(self) -> str:
        """Return a fresh client transaction ID."""
        return self._next_trid()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def connect(self) -> Greeting:
        """
        Open the connection and consume the server greeting.

        Returns:
            Parsed server greeting

        Raises:
            EPPConnectError: If dial or TLS handshake fails
            EPPGreetingError: If the greeting is missing or not a greeting
        """
        if self.is_connected:
            return self._greeting

        raw = self._connection.connect()
        try:
            self._greeting = XMLParser.parse_greeting(raw)
        except EPPXMLError as e:
            self._connection.close()
            raise EPPGreetingError(f"Invalid server greeting: {e}") from e

        self._state = SessionState.CONNECTED
        logger.info(f"Session opened with {self._greeting.server_id or self.config.host}")
        return self._greeting

    def close(self) -> None:
        """Close the connection. Safe to call repeatedly."""
        self._connection.close()
        self._state = SessionState.DISCONNECTED

    def send_command(self, payload: bytes) -> bytes:
        """
        Send one serialized command and return the raw response.

        Args:
            payload: Complete EPP XML document

        Returns:
            Raw response XML

        Raises:
            EPPNotConnected: If there is no open connection
            EPPConnectionError: On transport failure (session is closed)
        """
        if not self.is_connected:
            raise EPPNotConnected()

        try:
            return self._connection.send_and_receive(payload)
        except EPPConnectionError:
            self.close()
            raise

    def request(self, payload: bytes) -> EPPResponse:
        """Send a command and parse the response envelope."""
        return XMLParser.parse_response(self.send_command(payload))

    # =========================================================================
    # Session Commands
    # =========================================================================

    def hello(self) -> Greeting:
        """Send <hello/> and return the fresh greeting."""
        raw = self.send_command(SessionBuilder.build_hello())
        self._greeting = XMLParser.parse_greeting(raw)
        return self._greeting

    def login(self) -> EPPResponse:
        """
        Authenticate with the configured credentials.

        Raises:
            EPPNotConnected: If connect() has not succeeded (nothing is sent)
            EPPAlreadyLoggedIn: If already authenticated
            EPPAuthenticationError: Unless the result code is 1000
        """
        return self._login(new_password=None)

    def change_password(self, new_password: str) -> EPPResponse:
        """
        Log in while setting a new password.

        On success the stored password is replaced, so later logins use it.
        On failure the stored password is unchanged.

        Raises:
            EPPValidationError: If new_password is empty (nothing is sent)
        """
        if not new_password:
            raise EPPValidationError("New password must not be empty", value=new_password)

        response = self._login(new_password=new_password)
        self.config.password = new_password
        logger.info(f"Password changed for {self.config.client_id}")
        return response

    def logout(self) -> EPPResponse:
        """
        End the session on the server.

        The result is returned but not checked; call close() afterwards.
        The session leaves AUTHENTICATED once the command is sent, even if
        the reply cannot be parsed.
        """
        raw = self.send_command(SessionBuilder.build_logout(cl_trid=self.next_trid()))
        if self.is_connected:
            self._state = SessionState.CONNECTED
        logger.info("Logged out")
        return XMLParser.parse_response(raw)

    def _login(self, new_password: Optional[str]) -> EPPResponse:
        if not self.is_connected:
            raise EPPNotConnected()
        if self.is_logged_in:
            raise EPPAlreadyLoggedIn()

        payload = SessionBuilder.build_login(
            client_id=self.config.client_id,
            password=self.config.password,
            new_password=new_password,
            version=self.config.version,
            lang=self.config.lang,
            obj_uris=self.config.obj_uris,
            ext_uris=self.config.ext_uris,
            cl_trid=self.next_trid(),
        )
        response = self.request(payload)

        if response.code != SUCCESS:
            raise EPPAuthenticationError(
                message=response.message,
                code=response.code,
                reason="login failed",
                conditions=response.conditions,
            )

        self._state = SessionState.AUTHENTICATED
        logger.info(f"Logged in as {self.config.client_id}")
        return response

    def __enter__(self):
        """Context manager entry: connect and log in."""
        self.connect()
        try:
            self.login()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: log out if possible, then close."""
        if self.is_logged_in:
            try:
                self.logout()
            except EPPError as e:
                logger.warning(f"Logout failed during close: {e}")
        self.close()
        return False
