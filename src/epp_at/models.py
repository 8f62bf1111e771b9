"""
EPP Client Models

Data classes for EPP requests and responses.

Optional blocks (update add/rem/chg, disclose, postal info in a change) are
`None` when absent. An empty container is a present-but-empty block, and
`street=None` differs from `street=[]`.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from epp_at.codes import is_pending, is_success


# =============================================================================
# Common Models
# =============================================================================

@dataclass
class StatusValue:
    """Status with optional comment text."""
    status: str
    reason: Optional[str] = None


@dataclass
class Condition:
    """Structured rejection reason from a response extension."""
    message: str
    details: Optional[str] = None
    code: Optional[str] = None
    severity: Optional[str] = None

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Response Models
# =============================================================================

@dataclass
class Greeting:
    """EPP server greeting."""
    server_id: str
    server_date: Optional[datetime] = None
    version: List[str] = field(default_factory=list)
    lang: List[str] = field(default_factory=list)
    obj_uris: List[str] = field(default_factory=list)
    ext_uris: List[str] = field(default_factory=list)


@dataclass
class EPPResponse:
    """Generic EPP response."""
    code: int
    message: str
    cl_trid: Optional[str] = None
    sv_trid: Optional[str] = None
    conditions: List[Condition] = field(default_factory=list)
    raw_xml: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if response indicates success."""
        return is_success(self.code)

    @property
    def pending(self) -> bool:
        """Check if the action completes later (1001)."""
        return is_pending(self.code)


# -----------------------------------------------------------------------------
# Domain Response Models
# -----------------------------------------------------------------------------

@dataclass
class DomainCheckItem:
    """Single domain check result."""
    name: str
    available: bool
    reason: Optional[str] = None


@dataclass
class DomainCheckResult:
    """Domain check response."""
    results: List[DomainCheckItem] = field(default_factory=list)

    def is_available(self, name: str) -> bool:
        """Check if specific domain is available."""
        for item in self.results:
            if item.name.lower() == name.lower():
                return item.available
        return False


@dataclass
class DomainContact:
    """Domain contact association."""
    id: str
    type: str  # admin, tech, billing


@dataclass
class DomainInfo:
    """Domain info response."""
    name: str
    roid: str = ""
    status: List[str] = field(default_factory=list)
    registrant: Optional[str] = None
    contacts: List[DomainContact] = field(default_factory=list)
    nameservers: List[str] = field(default_factory=list)
    cl_id: str = ""
    cr_id: Optional[str] = None
    cr_date: Optional[datetime] = None
    ex_date: Optional[datetime] = None
    auth_info: Optional[str] = None


@dataclass
class DomainCreateResult:
    """Domain create response."""
    name: str
    cr_date: Optional[datetime] = None
    ex_date: Optional[datetime] = None


@dataclass
class DomainTransferResult:
    """Domain transfer response."""
    name: str
    tr_status: str
    re_id: Optional[str] = None
    re_date: Optional[datetime] = None
    ac_id: Optional[str] = None
    ac_date: Optional[datetime] = None
    key_date: Optional[str] = None
    pending: bool = False


# -----------------------------------------------------------------------------
# Contact Response Models
# -----------------------------------------------------------------------------

@dataclass
class ContactInfo:
    """Contact info response."""
    id: str
    roid: str = ""
    status: List[str] = field(default_factory=list)
    postal_info: Optional["PostalInfo"] = None
    voice: Optional[str] = None
    fax: Optional[str] = None
    email: Optional[str] = None
    cl_id: str = ""
    cr_id: Optional[str] = None
    cr_date: Optional[datetime] = None
    up_id: Optional[str] = None
    up_date: Optional[datetime] = None
    auth_info: Optional[str] = None
    disclose: Optional["Disclose"] = None
    contact_type: Optional[str] = None  # nic.at: privateperson, organisation, role


@dataclass
class ContactCreateResult:
    """Contact create response."""
    id: str
    cr_date: Optional[datetime] = None


# -----------------------------------------------------------------------------
# Poll Response Models
# -----------------------------------------------------------------------------

@dataclass
class PollMessage:
    """Poll message."""
    id: str
    count: int
    qdate: Optional[datetime] = None
    message: Optional[str] = None
    data: Optional[str] = None  # Serialized resData, if any


# =============================================================================
# Request Models
# =============================================================================

@dataclass
class PostalInfo:
    """Contact postal information."""
    name: str
    city: str
    cc: str  # Country code (2-letter ISO)
    pc: Optional[str] = None  # Postal Code
    type: str = "int"  # int or loc
    org: Optional[str] = None
    street: Optional[List[str]] = None
    sp: Optional[str] = None  # State/Province


@dataclass
class Disclose:
    """Contact disclosure preferences."""
    flag: bool
    voice: bool = False
    fax: bool = False
    email: bool = False


@dataclass
class ContactCreate:
    """Contact create request."""
    id: str
    email: str
    postal_info: PostalInfo
    voice: Optional[str] = None
    fax: Optional[str] = None
    disclose: Optional[Disclose] = None
    contact_type: Optional[str] = None  # nic.at extension


@dataclass
class ContactChange:
    """Changed fields of a contact update (<contact:chg>)."""
    postal_info: Optional[PostalInfo] = None
    voice: Optional[str] = None
    fax: Optional[str] = None
    email: Optional[str] = None
    auth_info: Optional[str] = None
    disclose: Optional[Disclose] = None


@dataclass
class ContactUpdate:
    """Contact update request. Absent blocks are None."""
    id: str
    add_status: Optional[List[StatusValue]] = None
    rem_status: Optional[List[StatusValue]] = None
    chg: Optional[ContactChange] = None


@dataclass
class HostAttr:
    """Nameserver given as host attribute with optional glue addresses."""
    name: str
    addresses: List[str] = field(default_factory=list)


@dataclass
class DomainCreate:
    """Domain create request."""
    name: str
    registrant: Optional[str] = None
    contacts: List[DomainContact] = field(default_factory=list)
    nameservers: List[HostAttr] = field(default_factory=list)
    period: Optional[int] = None
    period_unit: str = "y"
    auth_info: Optional[str] = None


@dataclass
class DomainUpdateBlock:
    """Add or remove block of a domain update."""
    nameservers: List[str] = field(default_factory=list)
    contacts: List[DomainContact] = field(default_factory=list)
    status: List[StatusValue] = field(default_factory=list)


@dataclass
class DomainChange:
    """Changed fields of a domain update (<domain:chg>)."""
    registrant: Optional[str] = None
    auth_info: Optional[str] = None


@dataclass
class DSData:
    """DNSSEC delegation signer record (RFC 5910)."""
    key_tag: int
    alg: int
    digest_type: int
    digest: str


@dataclass
class SecDNSUpdate:
    """secDNS-1.1 update extension. Empty lists are omitted."""
    add: List[DSData] = field(default_factory=list)
    rem: List[DSData] = field(default_factory=list)
    chg: List[DSData] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.add or self.rem or self.chg)


@dataclass
class DomainUpdate:
    """Domain update request. Absent blocks are None."""
    name: str
    add: Optional[DomainUpdateBlock] = None
    rem: Optional[DomainUpdateBlock] = None
    chg: Optional[DomainChange] = None
    sec_dns: Optional[SecDNSUpdate] = None
