"""
EPP Client Exceptions

Exception hierarchy for EPP operations.

Transport errors (EPPConnectionError and subclasses) are fatal to the session.
Protocol errors (EPPCommandError and subclasses) carry the result code and
leave the session usable.
"""

from typing import List, Optional


class EPPError(Exception):
    """Base EPP exception."""

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


# =============================================================================
# Transport Errors
# =============================================================================

class EPPConnectionError(EPPError):
    """Connection to EPP server failed or was lost."""

    def __init__(self, message: str = "Connection failed"):
        super().__init__(message)


class EPPConnectError(EPPConnectionError):
    """TCP dial or TLS handshake failed."""


class EPPGreetingError(EPPConnectionError):
    """Server greeting could not be read or parsed."""

    def __init__(self, message: str = "Failed to read server greeting"):
        super().__init__(message)


class EPPFrameError(EPPConnectionError):
    """EPP frame encoding/decoding error."""

    def __init__(self, message: str = "Frame error"):
        super().__init__(message)


class EPPMalformedFrame(EPPFrameError):
    """Frame header is invalid (length < 4 or too large)."""


class EPPTruncatedFrame(EPPFrameError):
    """Stream closed before the full frame arrived."""


# =============================================================================
# Local Errors
# =============================================================================

class EPPXMLError(EPPError):
    """XML parsing or building error."""

    def __init__(self, message: str = "XML error"):
        super().__init__(message)


class EPPValidationError(EPPError):
    """Client-side input validation failed (2005)."""

    def __init__(self, message: str, value: str = None):
        super().__init__(message, code=2005)
        self.value = value


class EPPSessionError(EPPError):
    """Session used in the wrong state."""

    def __init__(self, message: str = "Session error"):
        super().__init__(message, code=2002)


class EPPNotConnected(EPPSessionError):
    """No transport connection."""

    def __init__(self):
        super().__init__("Command use error: not connected")


class EPPNotLoggedIn(EPPSessionError):
    """Not logged in (2002)."""

    def __init__(self):
        super().__init__("Command use error: not logged in")


class EPPAlreadyLoggedIn(EPPSessionError):
    """Already logged in (2002)."""

    def __init__(self):
        super().__init__("Command use error: already logged in")


# =============================================================================
# Protocol Errors
# =============================================================================

class EPPCommandError(EPPError):
    """Command completed with a failure result code."""

    def __init__(
        self,
        message: str,
        code: int,
        reason: str = None,
        conditions: Optional[List] = None,
    ):
        super().__init__(message, code)
        self.reason = reason
        self.conditions = list(conditions or [])

    def __str__(self):
        base = f"[{self.code}] {self.message}"
        if self.reason:
            base += f" - {self.reason}"
        for condition in self.conditions:
            base += f"\nCondition: {condition}"
        return base


class EPPAuthenticationError(EPPCommandError):
    """Authentication failed (2200)."""

    def __init__(self, message: str = "Authentication error", code: int = 2200, **kwargs):
        super().__init__(message, code, **kwargs)


class EPPAuthorizationError(EPPCommandError):
    """Not authorized for operation (2201)."""

    def __init__(self, message: str = "Authorization error", code: int = 2201, **kwargs):
        super().__init__(message, code, **kwargs)


class EPPObjectNotFound(EPPCommandError):
    """Object does not exist (2303)."""

    def __init__(self, message: str = "Object does not exist", code: int = 2303, **kwargs):
        super().__init__(message, code, **kwargs)


class EPPObjectExists(EPPCommandError):
    """Object already exists (2302)."""

    def __init__(self, message: str = "Object exists", code: int = 2302, **kwargs):
        super().__init__(message, code, **kwargs)


class EPPParameterError(EPPCommandError):
    """Invalid or missing parameter (2003-2005, 2306)."""

    def __init__(self, message: str = "Parameter value error", code: int = 2005, **kwargs):
        super().__init__(message, code, **kwargs)


# EPP Response Code Mapping
ERROR_CLASSES = {
    2003: EPPParameterError,
    2004: EPPParameterError,
    2005: EPPParameterError,
    2200: EPPAuthenticationError,
    2201: EPPAuthorizationError,
    2202: EPPAuthorizationError,
    2302: EPPObjectExists,
    2303: EPPObjectNotFound,
    2306: EPPParameterError,
    2501: EPPAuthenticationError,
}


def raise_for_response(response, reason: str = None) -> None:
    """
    Raise the matching EPPCommandError subclass for a failed response.

    Does nothing when the response carries a success code.

    Args:
        response: EPPResponse to check
        reason: Optional context describing the failed operation
    """
    if response.success:
        return

    exc_class = ERROR_CLASSES.get(response.code, EPPCommandError)
    raise exc_class(
        message=response.message,
        code=response.code,
        reason=reason,
        conditions=response.conditions,
    )
