"""
EPP XML Parser

Parses EPP XML responses per RFC 5730-5733.
"""

import logging
from datetime import datetime
from typing import List, Optional

from dateutil import parser as date_parser
from lxml import etree

from epp_at.exceptions import EPPXMLError
from epp_at.models import (
    Condition,
    ContactCreateResult,
    ContactInfo,
    Disclose,
    DomainCheckItem,
    DomainCheckResult,
    DomainContact,
    DomainCreateResult,
    DomainInfo,
    DomainTransferResult,
    EPPResponse,
    Greeting,
    PollMessage,
    PostalInfo,
)

logger = logging.getLogger("epp.parser")

# Namespaces
NS = {
    "epp": "urn:ietf:params:xml:ns:epp-1.0",
    "domain": "urn:ietf:params:xml:ns:domain-1.0",
    "contact": "urn:ietf:params:xml:ns:contact-1.0",
}

# Secure parser
_parser = etree.XMLParser(
    resolve_entities=False,
    no_network=True,
    remove_blank_text=True,
)


def _parse_datetime(text: Optional[str]) -> Optional[datetime]:
    """Parse ISO 8601 timestamp, None if missing or unparsable."""
    if not text:
        return None
    try:
        return date_parser.isoparse(text.strip())
    except ValueError:
        logger.debug(f"Unparsable timestamp: {text!r}")
        return None


def _find_text(elem: etree._Element, path: str, default: str = None) -> Optional[str]:
    """Find element and return text."""
    found = elem.find(path, NS)
    if found is not None and found.text:
        return found.text
    return default


def _find_date(elem: etree._Element, path: str) -> Optional[datetime]:
    return _parse_datetime(_find_text(elem, path))


def _find_all_text(elem: etree._Element, path: str) -> List[str]:
    """Find all elements and return their text."""
    return [e.text for e in elem.findall(path, NS) if e.text]


def _find_local(elem: etree._Element, name: str) -> List[etree._Element]:
    """Find descendants by local name, whatever their namespace."""
    return elem.xpath(".//*[local-name()=$name]", name=name)


def _local_text(elem: etree._Element, name: str) -> Optional[str]:
    """Text of the first child with the given local name."""
    for child in elem:
        if isinstance(child.tag, str) and etree.QName(child).localname == name:
            return child.text
    return None


def _parse_xml(xml_data: bytes) -> etree._Element:
    """Parse XML with secure parser."""
    try:
        return etree.fromstring(xml_data, _parser)
    except etree.XMLSyntaxError as e:
        raise EPPXMLError(f"XML parse error: {e}") from e


def _res_data(root: etree._Element, path: str) -> etree._Element:
    found = root.find(path, NS)
    if found is None:
        raise EPPXMLError(f"No {path.lstrip('./')} element found")
    return found


class XMLParser:
    """
    Parses EPP XML responses.

    All methods are static and return structured response objects.
    """

    @staticmethod
    def parse_greeting(xml_data: bytes) -> Greeting:
        """
        Parse EPP greeting.

        Args:
            xml_data: Raw XML bytes

        Returns:
            Greeting object
        """
        root = _parse_xml(xml_data)

        greeting = root.find("epp:greeting", NS)
        if greeting is None:
            raise EPPXMLError("No greeting element found")

        return Greeting(
            server_id=_find_text(greeting, "epp:svID", ""),
            server_date=_find_date(greeting, "epp:svDate"),
            version=_find_all_text(greeting, "epp:svcMenu/epp:version"),
            lang=_find_all_text(greeting, "epp:svcMenu/epp:lang"),
            obj_uris=_find_all_text(greeting, "epp:svcMenu/epp:objURI"),
            ext_uris=_find_all_text(greeting, "epp:svcMenu/epp:svcExtension/epp:extURI"),
        )

    @staticmethod
    def parse_response(xml_data: bytes) -> EPPResponse:
        """
        Parse EPP response envelope.

        Args:
            xml_data: Raw XML bytes

        Returns:
            EPPResponse with code, message, trIDs and conditions
        """
        root = _parse_xml(xml_data)

        response = root.find("epp:response", NS)
        if response is None:
            raise EPPXMLError("No response element found")

        result = response.find("epp:result", NS)
        if result is None:
            raise EPPXMLError("No result element found")

        try:
            code = int(result.get("code", ""))
        except ValueError as e:
            raise EPPXMLError(f"Invalid result code: {result.get('code')!r}") from e
        msg = _find_text(result, "epp:msg", "")

        cl_trid = None
        sv_trid = None
        trn_id = response.find("epp:trID", NS)
        if trn_id is not None:
            cl_trid = _find_text(trn_id, "epp:clTRID")
            sv_trid = _find_text(trn_id, "epp:svTRID")

        return EPPResponse(
            code=code,
            message=msg,
            cl_trid=cl_trid,
            sv_trid=sv_trid,
            conditions=XMLParser.parse_conditions(response),
            raw_xml=xml_data.decode("utf-8", errors="replace"),
        )

    @staticmethod
    def parse_conditions(response: etree._Element) -> List[Condition]:
        """Extract <condition> entries from the response extension."""
        extension = response.find("epp:extension", NS)
        if extension is None:
            return []

        conditions = []
        for cond in _find_local(extension, "condition"):
            conditions.append(Condition(
                message=_local_text(cond, "msg") or "",
                details=_local_text(cond, "details"),
                code=cond.get("code"),
                severity=cond.get("severity"),
            ))
        return conditions

    # =========================================================================
    # Domain Responses
    # =========================================================================

    @staticmethod
    def parse_domain_check(xml_data: bytes) -> DomainCheckResult:
        """Parse domain check response."""
        root = _parse_xml(xml_data)
        check_data = _res_data(root, ".//domain:chkData")

        results = []
        for cd in check_data.findall("domain:cd", NS):
            name_elem = cd.find("domain:name", NS)
            if name_elem is not None:
                results.append(DomainCheckItem(
                    name=name_elem.text,
                    available=name_elem.get("avail", "0") in ("1", "true"),
                    reason=_find_text(cd, "domain:reason"),
                ))

        return DomainCheckResult(results=results)

    @staticmethod
    def parse_domain_create(xml_data: bytes) -> DomainCreateResult:
        """Parse domain create response."""
        root = _parse_xml(xml_data)
        cre_data = _res_data(root, ".//domain:creData")

        return DomainCreateResult(
            name=_find_text(cre_data, "domain:name", ""),
            cr_date=_find_date(cre_data, "domain:crDate"),
            ex_date=_find_date(cre_data, "domain:exDate"),
        )

    @staticmethod
    def parse_domain_info(xml_data: bytes) -> DomainInfo:
        """Parse domain info response."""
        root = _parse_xml(xml_data)
        info_data = _res_data(root, ".//domain:infData")

        contacts = [
            DomainContact(id=c.text, type=c.get("type", ""))
            for c in info_data.findall("domain:contact", NS)
            if c.text
        ]

        nameservers = _find_all_text(info_data, "domain:ns/domain:hostObj")
        nameservers += _find_all_text(info_data, "domain:ns/domain:hostAttr/domain:hostName")

        return DomainInfo(
            name=_find_text(info_data, "domain:name", ""),
            roid=_find_text(info_data, "domain:roid", ""),
            status=[s.get("s", "") for s in info_data.findall("domain:status", NS)],
            registrant=_find_text(info_data, "domain:registrant"),
            contacts=contacts,
            nameservers=nameservers,
            cl_id=_find_text(info_data, "domain:clID", ""),
            cr_id=_find_text(info_data, "domain:crID"),
            cr_date=_find_date(info_data, "domain:crDate"),
            ex_date=_find_date(info_data, "domain:exDate"),
            auth_info=_find_text(info_data, "domain:authInfo/domain:pw"),
        )

    @staticmethod
    def parse_domain_transfer(xml_data: bytes) -> DomainTransferResult:
        """Parse domain transfer response (trnData plus optional keydate)."""
        root = _parse_xml(xml_data)
        trn_data = _res_data(root, ".//domain:trnData")
        response = XMLParser.parse_response(xml_data)

        key_date = None
        extension = root.find("epp:response/epp:extension", NS)
        if extension is not None:
            key_dates = _find_local(extension, "keydate")
            if key_dates:
                key_date = key_dates[0].text

        return DomainTransferResult(
            name=_find_text(trn_data, "domain:name", ""),
            tr_status=_find_text(trn_data, "domain:trStatus", ""),
            re_id=_find_text(trn_data, "domain:reID"),
            re_date=_find_date(trn_data, "domain:reDate"),
            ac_id=_find_text(trn_data, "domain:acID"),
            ac_date=_find_date(trn_data, "domain:acDate"),
            key_date=key_date,
            pending=response.pending,
        )

    # =========================================================================
    # Contact Responses
    # =========================================================================

    @staticmethod
    def parse_contact_create(xml_data: bytes) -> ContactCreateResult:
        """Parse contact create response."""
        root = _parse_xml(xml_data)
        cre_data = _res_data(root, ".//contact:creData")

        return ContactCreateResult(
            id=_find_text(cre_data, "contact:id", ""),
            cr_date=_find_date(cre_data, "contact:crDate"),
        )

    @staticmethod
    def parse_contact_info(xml_data: bytes) -> ContactInfo:
        """Parse contact info response, including the nic.at contact type."""
        root = _parse_xml(xml_data)
        info_data = _res_data(root, ".//contact:infData")

        postal_info = None
        pi = info_data.find("contact:postalInfo", NS)
        if pi is not None:
            postal_info = PostalInfo(
                name=_find_text(pi, "contact:name", ""),
                org=_find_text(pi, "contact:org"),
                street=_find_all_text(pi, "contact:addr/contact:street"),
                city=_find_text(pi, "contact:addr/contact:city", ""),
                sp=_find_text(pi, "contact:addr/contact:sp"),
                pc=_find_text(pi, "contact:addr/contact:pc"),
                cc=_find_text(pi, "contact:addr/contact:cc", ""),
                type=pi.get("type", "int"),
            )

        disclose = None
        disc = info_data.find("contact:disclose", NS)
        if disc is not None:
            disclose = Disclose(
                flag=disc.get("flag", "0") in ("1", "true"),
                voice=disc.find("contact:voice", NS) is not None,
                fax=disc.find("contact:fax", NS) is not None,
                email=disc.find("contact:email", NS) is not None,
            )

        contact_type = None
        extension = root.find("epp:response/epp:extension", NS)
        if extension is not None:
            for inf in _find_local(extension, "infData"):
                contact_type = _local_text(inf, "type")

        return ContactInfo(
            id=_find_text(info_data, "contact:id", ""),
            roid=_find_text(info_data, "contact:roid", ""),
            status=[s.get("s", "") for s in info_data.findall("contact:status", NS)],
            postal_info=postal_info,
            voice=_find_text(info_data, "contact:voice"),
            fax=_find_text(info_data, "contact:fax"),
            email=_find_text(info_data, "contact:email"),
            cl_id=_find_text(info_data, "contact:clID", ""),
            cr_id=_find_text(info_data, "contact:crID"),
            cr_date=_find_date(info_data, "contact:crDate"),
            up_id=_find_text(info_data, "contact:upID"),
            up_date=_find_date(info_data, "contact:upDate"),
            auth_info=_find_text(info_data, "contact:authInfo/contact:pw"),
            disclose=disclose,
            contact_type=contact_type,
        )

    # =========================================================================
    # Poll Responses
    # =========================================================================

    @staticmethod
    def parse_poll_message(xml_data: bytes) -> Optional[PollMessage]:
        """Parse poll response; None when there is no message queue."""
        root = _parse_xml(xml_data)

        msg_q = root.find("epp:response/epp:msgQ", NS)
        if msg_q is None:
            return None

        data = None
        res_data = root.find("epp:response/epp:resData", NS)
        if res_data is not None:
            data = "".join(
                etree.tostring(child, encoding="unicode") for child in res_data
            )

        return PollMessage(
            id=msg_q.get("id", ""),
            count=int(msg_q.get("count", "0")),
            qdate=_find_date(msg_q, "epp:qDate"),
            message=_find_text(msg_q, "epp:msg"),
            data=data,
        )
