"""
EPP Connection

Handles the TLS connection to an EPP server: dial, greeting read, frame I/O
and close. Any transport failure closes the connection.
"""

import logging
import socket
import ssl
from typing import Optional

from epp_at.exceptions import (
    EPPConnectError,
    EPPConnectionError,
    EPPFrameError,
    EPPGreetingError,
    EPPXMLError,
)
from epp_at.framing import HEADER_SIZE, MAX_FRAME_SIZE, FrameReader, FrameWriter

logger = logging.getLogger("epp.connection")


class EPPConnection:
    """
    TLS connection to EPP server.

    Handles:
    - TLS 1.2+ connection with optional client certificate
    - Server greeting read on connect
    - Frame-based I/O
    - Idempotent close

    The timeout applies to the TCP dial and TLS handshake only. Once
    connected the socket is blocking without a deadline.
    """

    def __init__(
        self,
        host: str,
        port: int = 700,
        cert_file: str = None,
        key_file: str = None,
        ca_file: str = None,
        timeout: float = 30,
        verify_server: bool = True,
    ):
        """
        Initialize EPP connection.

        Args:
            host: EPP server hostname (also used for SNI and verification)
            port: EPP server port (default: 700)
            cert_file: Path to client certificate (PEM)
            key_file: Path to client private key (PEM)
            ca_file: Path to CA certificate(s) (PEM)
            timeout: Dial and handshake timeout in seconds
            verify_server: Whether to verify server certificate
        """
        self.host = host
        self.port = port
        self.cert_file = cert_file
        self.key_file = key_file
        self.ca_file = ca_file
        self.timeout = timeout
        self.verify_server = verify_server

        self._socket: Optional[socket.socket] = None
        self._frame_reader: Optional[FrameReader] = None
        self._frame_writer: Optional[FrameWriter] = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        """Check if connected to server."""
        return self._connected and self._socket is not None

    def connect(self) -> bytes:
        """
        Establish TLS connection and read the server greeting.

        Returns:
            Raw greeting XML

        Raises:
            EPPConnectError: If dial or handshake fails
            EPPGreetingError: If the greeting frame cannot be read
        """
        if self._connected:
            raise EPPConnectError("Already connected")

        logger.debug(f"Connecting to {self.host}:{self.port}")
        try:
            context = self._create_ssl_context()
            self._socket = self._open_socket(context)
            # Dial timeout only; commands block without a deadline
            self._socket.settimeout(None)
        except ssl.SSLError as e:
            self._cleanup()
            raise EPPConnectError(f"TLS error: {e}") from e
        except socket.timeout as e:
            self._cleanup()
            raise EPPConnectError(f"Connection timeout to {self.host}:{self.port}") from e
        except OSError as e:
            self._cleanup()
            raise EPPConnectError(f"Socket error: {e}") from e

        self._frame_reader = FrameReader(self._socket.recv)
        self._frame_writer = FrameWriter(self._socket.send)
        self._connected = True

        cipher = self.get_cipher()
        if cipher:
            logger.debug(f"TLS cipher: {cipher[0]}, version: {cipher[1]}")

        try:
            greeting = self._frame_reader.read_frame()
        except (EPPFrameError, OSError) as e:
            self._cleanup()
            raise EPPGreetingError(f"Failed to read server greeting: {e}") from e

        logger.info(f"Connected to {self.host}:{self.port}")
        return greeting

    def close(self) -> None:
        """Close connection. Safe to call repeatedly or before connect."""
        if self._socket is None and not self._connected:
            return

        logger.debug(f"Disconnecting from {self.host}:{self.port}")
        self._cleanup()
        logger.info(f"Disconnected from {self.host}:{self.port}")

    def send(self, data: bytes) -> None:
        """
        Send EPP frame to server.

        Args:
            data: XML data to send

        Raises:
            EPPXMLError: If the payload is too large to frame (nothing is sent)
            EPPConnectionError: If not connected or send fails
        """
        if not self.is_connected:
            raise EPPConnectionError("Not connected")
        if len(data) + HEADER_SIZE > MAX_FRAME_SIZE:
            raise EPPXMLError(f"Payload too large: {len(data)} bytes (max {MAX_FRAME_SIZE - HEADER_SIZE})")

        try:
            self._frame_writer.write_frame(data)
        except EPPFrameError:
            self._cleanup()
            raise
        except OSError as e:
            self._cleanup()
            raise EPPConnectionError(f"Send failed: {e}") from e

        logger.debug(f"Sent {len(data)} bytes")

    def receive(self) -> bytes:
        """
        Receive EPP frame from server.

        Returns:
            XML data received

        Raises:
            EPPConnectionError: If not connected or receive fails
        """
        if not self.is_connected:
            raise EPPConnectionError("Not connected")

        try:
            data = self._frame_reader.read_frame()
        except EPPFrameError:
            self._cleanup()
            raise
        except OSError as e:
            self._cleanup()
            raise EPPConnectionError(f"Receive failed: {e}") from e

        logger.debug(f"Received {len(data)} bytes")
        return data

    def send_and_receive(self, data: bytes) -> bytes:
        """
        Send request and receive response.

        Args:
            data: XML request data

        Returns:
            XML response data
        """
        self.send(data)
        return self.receive()

    def get_cipher(self) -> Optional[tuple]:
        """
        Get current cipher info.

        Returns:
            Tuple of (cipher_name, protocol_version, bits) or None
        """
        if not isinstance(self._socket, ssl.SSLSocket):
            return None
        return self._socket.cipher()

    def _open_socket(self, context: ssl.SSLContext) -> socket.socket:
        """Dial the server and complete the TLS handshake."""
        sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        try:
            return context.wrap_socket(sock, server_hostname=self.host)
        except OSError:
            sock.close()
            raise

    def _create_ssl_context(self) -> ssl.SSLContext:
        """
        Create SSL context for EPP connection.

        Returns:
            Configured SSL context
        """
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.minimum_version = ssl.TLSVersion.TLSv1_2

        if self.verify_server:
            context.verify_mode = ssl.CERT_REQUIRED
            context.check_hostname = True
        else:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        if self.ca_file:
            context.load_verify_locations(self.ca_file)
        else:
            context.load_default_certs()

        if self.cert_file and self.key_file:
            context.load_cert_chain(certfile=self.cert_file, keyfile=self.key_file)
        elif self.cert_file:
            # Cert and key in same file
            context.load_cert_chain(certfile=self.cert_file)

        return context

    def _cleanup(self) -> None:
        """Clean up connection resources."""
        self._connected = False
        self._frame_reader = None
        self._frame_writer = None

        if self._socket is not None:
            sock, self._socket = self._socket, None
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                # Peer already gone
                pass
            sock.close()

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
