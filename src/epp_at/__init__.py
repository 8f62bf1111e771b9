"""
nic.at EPP Client

Python EPP client (RFC 5730-5734) for the nic.at registry: TLS transport,
RFC 5734 framing, session state machine and command builders.
"""

__version__ = "1.0.0"

from epp_at.address import normalize_street
from epp_at.client import EPPClient
from epp_at.codes import is_success
from epp_at.config import SessionConfig
from epp_at.connection import EPPConnection
from epp_at.session import EPPSession, SessionState
from epp_at.trid import TransactionIDGenerator
from epp_at.models import (
    Condition,
    ContactChange,
    ContactCreate,
    ContactInfo,
    Disclose,
    DomainChange,
    DomainContact,
    DomainCreate,
    DomainInfo,
    DomainUpdate,
    DomainUpdateBlock,
    DSData,
    EPPResponse,
    Greeting,
    HostAttr,
    PollMessage,
    PostalInfo,
    SecDNSUpdate,
    StatusValue,
)
from epp_at.exceptions import (
    EPPError,
    EPPConnectionError,
    EPPConnectError,
    EPPGreetingError,
    EPPFrameError,
    EPPMalformedFrame,
    EPPTruncatedFrame,
    EPPSessionError,
    EPPNotConnected,
    EPPNotLoggedIn,
    EPPAlreadyLoggedIn,
    EPPXMLError,
    EPPValidationError,
    EPPCommandError,
    EPPAuthenticationError,
    EPPAuthorizationError,
    EPPObjectNotFound,
    EPPObjectExists,
    EPPParameterError,
)

__all__ = [
    # Core
    "EPPClient",
    "EPPSession",
    "SessionState",
    "EPPConnection",
    "SessionConfig",
    "TransactionIDGenerator",
    "normalize_street",
    "is_success",
    # Models
    "Condition",
    "ContactChange",
    "ContactCreate",
    "ContactInfo",
    "Disclose",
    "DomainChange",
    "DomainContact",
    "DomainCreate",
    "DomainInfo",
    "DomainUpdate",
    "DomainUpdateBlock",
    "DSData",
    "EPPResponse",
    "Greeting",
    "HostAttr",
    "PollMessage",
    "PostalInfo",
    "SecDNSUpdate",
    "StatusValue",
    # Exceptions
    "EPPError",
    "EPPConnectionError",
    "EPPConnectError",
    "EPPGreetingError",
    "EPPFrameError",
    "EPPMalformedFrame",
    "EPPTruncatedFrame",
    "EPPSessionError",
    "EPPNotConnected",
    "EPPNotLoggedIn",
    "EPPAlreadyLoggedIn",
    "EPPXMLError",
    "EPPValidationError",
    "EPPCommandError",
    "EPPAuthenticationError",
    "EPPAuthorizationError",
    "EPPObjectNotFound",
    "EPPObjectExists",
    "EPPParameterError",
]
