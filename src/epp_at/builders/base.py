"""
Shared helpers for EPP command builders.
"""

from lxml import etree

# Namespace URIs
EPP_NS = "urn:ietf:params:xml:ns:epp-1.0"
DOMAIN_NS = "urn:ietf:params:xml:ns:domain-1.0"
CONTACT_NS = "urn:ietf:params:xml:ns:contact-1.0"
SECDNS_NS = "urn:ietf:params:xml:ns:secDNS-1.1"

# nic.at extensions
AT_EXT_EPP_NS = "http://www.nic.at/xsd/at-ext-epp-1.0"
AT_EXT_CONTACT_NS = "http://www.nic.at/xsd/at-ext-contact-1.0"
AT_EXT_DOMAIN_NS = "http://www.nic.at/xsd/at-ext-domain-1.0"

DEFAULT_OBJ_URIS = [DOMAIN_NS, CONTACT_NS]
DEFAULT_EXT_URIS = [AT_EXT_EPP_NS, AT_EXT_CONTACT_NS, AT_EXT_DOMAIN_NS]


def epp(tag: str) -> str:
    """Qualified name in the EPP namespace."""
    return "{%s}%s" % (EPP_NS, tag)


def create_epp_root() -> etree._Element:
    """Create <epp> root element."""
    return etree.Element(epp("epp"), nsmap={None: EPP_NS})


def create_command(verb: str = None):
    """
    Create <epp><command> and optionally the verb element inside it.

    Returns:
        Tuple of (root, command, verb element or None)
    """
    root = create_epp_root()
    command = etree.SubElement(root, epp("command"))
    verb_elem = etree.SubElement(command, epp(verb)) if verb else None
    return root, command, verb_elem


def object_element(parent: etree._Element, ns: str, prefix: str, tag: str) -> etree._Element:
    """Create an object-level element that declares its own prefix."""
    return etree.SubElement(parent, "{%s}%s" % (ns, tag), nsmap={prefix: ns})


def sub(parent: etree._Element, ns: str, tag: str, text: str = None, **attrib) -> etree._Element:
    """Add a namespaced child with optional text and attributes."""
    elem = etree.SubElement(parent, "{%s}%s" % (ns, tag), **attrib)
    if text is not None:
        elem.text = text
    return elem


def add_extension(command: etree._Element) -> etree._Element:
    """Add <extension> to a command."""
    return etree.SubElement(command, epp("extension"))


def add_cl_trid(command: etree._Element, cl_trid: str) -> None:
    """Add client transaction ID to command."""
    etree.SubElement(command, epp("clTRID")).text = cl_trid


def to_bytes(root: etree._Element) -> bytes:
    """Convert element tree to XML bytes."""
    return etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=False
    )
