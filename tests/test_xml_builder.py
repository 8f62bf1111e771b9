"""
Tests for EPP command builders.
"""

import pytest
from lxml import etree
from epp_at.builders import ContactBuilder, DomainBuilder, PollBuilder, SessionBuilder
from epp_at.models import (
    ContactChange,
    ContactCreate,
    ContactUpdate,
    Disclose,
    DomainChange,
    DomainContact,
    DomainCreate,
    DomainUpdate,
    DomainUpdateBlock,
    DSData,
    HostAttr,
    PostalInfo,
    SecDNSUpdate,
    StatusValue,
)

NS = {
    "epp": "urn:ietf:params:xml:ns:epp-1.0",
    "domain": "urn:ietf:params:xml:ns:domain-1.0",
    "contact": "urn:ietf:params:xml:ns:contact-1.0",
    "secDNS": "urn:ietf:params:xml:ns:secDNS-1.1",
    "at-ext-epp": "http://www.nic.at/xsd/at-ext-epp-1.0",
    "at-ext-contact": "http://www.nic.at/xsd/at-ext-contact-1.0",
}


def parse_xml(xml_bytes: bytes) -> etree._Element:
    """Parse XML bytes to element."""
    return etree.fromstring(xml_bytes)


def get_text(element, xpath):
    """Get text from element by xpath."""
    result = element.xpath(xpath, namespaces=NS)
    if result:
        if isinstance(result[0], str):
            return result[0]
        return result[0].text
    return None


def get_all_text(element, xpath):
    return [e.text for e in element.xpath(xpath, namespaces=NS)]


def make_postal_info(**kwargs):
    values = dict(name="Max Mustermann", city="Wien", cc="AT", pc="1010", street=["Karlsplatz 1"])
    values.update(kwargs)
    return PostalInfo(**values)


class TestSessionCommands:
    """Tests for session command builders."""

    def test_build_hello(self):
        root = parse_xml(SessionBuilder.build_hello())
        assert root.find("epp:hello", NS) is not None

    def test_xml_declaration(self):
        xml = SessionBuilder.build_hello()
        assert xml.startswith(b"<?xml version='1.0' encoding='UTF-8'?>")

    def test_build_login(self):
        xml = SessionBuilder.build_login(client_id="REG-1", password="secret", cl_trid="TEST-001")
        root = parse_xml(xml)

        assert get_text(root, "//epp:login/epp:clID") == "REG-1"
        assert get_text(root, "//epp:login/epp:pw") == "secret"
        assert get_text(root, "//epp:options/epp:version") == "1.0"
        assert get_text(root, "//epp:options/epp:lang") == "en"
        assert get_all_text(root, "//epp:svcs/epp:objURI") == [NS["domain"], NS["contact"]]
        assert get_all_text(root, "//epp:svcExtension/epp:extURI") == [
            "http://www.nic.at/xsd/at-ext-epp-1.0",
            "http://www.nic.at/xsd/at-ext-contact-1.0",
            "http://www.nic.at/xsd/at-ext-domain-1.0",
        ]
        assert get_text(root, "//epp:command/epp:clTRID") == "TEST-001"
        assert root.find(".//epp:newPW", NS) is None

    def test_build_login_new_password(self):
        xml = SessionBuilder.build_login(
            client_id="REG-1", password="old", new_password="new", cl_trid="T",
        )
        root = parse_xml(xml)
        assert get_text(root, "//epp:pw") == "old"
        assert get_text(root, "//epp:newPW") == "new"

    def test_build_login_without_extensions(self):
        xml = SessionBuilder.build_login(client_id="REG-1", password="pw", cl_trid="T", ext_uris=[])
        assert parse_xml(xml).find(".//epp:svcExtension", NS) is None

    def test_build_logout(self):
        root = parse_xml(SessionBuilder.build_logout(cl_trid="TEST-002"))
        assert root.find("epp:command/epp:logout", NS) is not None
        assert get_text(root, "//epp:clTRID") == "TEST-002"


class TestPollCommands:
    """Tests for poll command builders."""

    def test_build_request(self):
        root = parse_xml(PollBuilder.build_request(cl_trid="T"))
        poll = root.find("epp:command/epp:poll", NS)
        assert poll.get("op") == "req"
        assert poll.get("msgID") is None

    def test_build_ack(self):
        root = parse_xml(PollBuilder.build_ack(msg_id="12345", cl_trid="T"))
        poll = root.find("epp:command/epp:poll", NS)
        assert poll.get("op") == "ack"
        assert poll.get("msgID") == "12345"


class TestDomainCommands:
    """Tests for domain command builders."""

    def test_build_check(self):
        xml = DomainBuilder.build_check(["example.at", "test.at"], cl_trid="T")
        root = parse_xml(xml)
        assert get_all_text(root, "//domain:check/domain:name") == ["example.at", "test.at"]

    def test_object_prefix_declared(self):
        """Object elements carry their own namespace prefix."""
        xml = DomainBuilder.build_check(["example.at"], cl_trid="T")
        assert b'xmlns:domain="urn:ietf:params:xml:ns:domain-1.0"' in xml
        assert b"<domain:check" in xml

    def test_build_info(self):
        root = parse_xml(DomainBuilder.build_info("example.at", cl_trid="T", auth_info="abc123"))
        assert get_text(root, "//domain:info/domain:name") == "example.at"
        assert get_text(root, "//domain:info/domain:name/@hosts") == "all"
        assert get_text(root, "//domain:authInfo/domain:pw") == "abc123"

    def test_build_create(self):
        create_data = DomainCreate(
            name="example.at",
            registrant="REG-C1",
            contacts=[DomainContact(id="TECH-1", type="tech")],
            nameservers=[
                HostAttr(name="ns1.example.at", addresses=["192.0.2.1", "2001:db8::1"]),
                HostAttr(name="ns2.provider.at"),
            ],
            auth_info="s3cret",
        )
        root = parse_xml(DomainBuilder.build_create(create_data, cl_trid="T"))

        assert get_text(root, "//domain:create/domain:name") == "example.at"
        assert get_text(root, "//domain:create/domain:registrant") == "REG-C1"
        assert get_text(root, "//domain:contact[@type='tech']") == "TECH-1"
        assert get_all_text(root, "//domain:hostAttr/domain:hostName") == ["ns1.example.at", "ns2.provider.at"]
        assert get_text(root, "//domain:hostAddr[@ip='v4']") == "192.0.2.1"
        assert get_text(root, "//domain:hostAddr[@ip='v6']") == "2001:db8::1"
        assert get_text(root, "//domain:authInfo/domain:pw") == "s3cret"
        assert root.find(".//domain:period", NS) is None

    def test_build_create_with_period(self):
        create_data = DomainCreate(name="example.at", period=2)
        root = parse_xml(DomainBuilder.build_create(create_data, cl_trid="T"))
        assert get_text(root, "//domain:period") == "2"
        assert get_text(root, "//domain:period/@unit") == "y"

    def test_build_update(self):
        update_data = DomainUpdate(
            name="example.at",
            add=DomainUpdateBlock(nameservers=["ns3.example.at"], status=[StatusValue("clientHold", "payment")]),
            rem=DomainUpdateBlock(contacts=[DomainContact(id="TECH-1", type="tech")]),
            chg=DomainChange(registrant="REG-C2"),
        )
        root = parse_xml(DomainBuilder.build_update(update_data, cl_trid="T"))

        assert get_text(root, "//domain:add/domain:ns/domain:hostObj") == "ns3.example.at"
        assert get_text(root, "//domain:add/domain:status/@s") == "clientHold"
        assert get_text(root, "//domain:add/domain:status") == "payment"
        assert get_text(root, "//domain:rem/domain:contact") == "TECH-1"
        assert get_text(root, "//domain:chg/domain:registrant") == "REG-C2"
        assert root.find(".//epp:extension", NS) is None

    def test_build_update_absent_blocks(self):
        """None blocks are omitted, empty blocks are sent empty."""
        update_data = DomainUpdate(name="example.at", add=DomainUpdateBlock())
        root = parse_xml(DomainBuilder.build_update(update_data, cl_trid="T"))

        add = root.find(".//domain:add", NS)
        assert add is not None
        assert len(add) == 0
        assert root.find(".//domain:rem", NS) is None
        assert root.find(".//domain:chg", NS) is None

    def test_build_update_dnssec(self):
        ds = DSData(key_tag=12345, alg=13, digest_type=2, digest="ABCDEF")
        old = DSData(key_tag=1, alg=8, digest_type=2, digest="0123")
        update_data = DomainUpdate(name="example.at", sec_dns=SecDNSUpdate(add=[ds], rem=[old]))
        root = parse_xml(DomainBuilder.build_update(update_data, cl_trid="T"))

        update = root.find(".//epp:extension/secDNS:update", NS)
        assert update is not None
        assert [etree.QName(child).localname for child in update] == ["rem", "add"]
        assert get_text(update, "secDNS:add/secDNS:dsData/secDNS:keyTag") == "12345"
        assert get_text(update, "secDNS:add/secDNS:dsData/secDNS:alg") == "13"
        assert get_text(update, "secDNS:add/secDNS:dsData/secDNS:digestType") == "2"
        assert get_text(update, "secDNS:add/secDNS:dsData/secDNS:digest") == "ABCDEF"
        assert get_text(update, "secDNS:rem/secDNS:dsData/secDNS:keyTag") == "1"

    def test_build_update_empty_dnssec_omitted(self):
        update_data = DomainUpdate(name="example.at", sec_dns=SecDNSUpdate())
        root = parse_xml(DomainBuilder.build_update(update_data, cl_trid="T"))
        assert root.find(".//epp:extension", NS) is None

    def test_build_delete(self):
        root = parse_xml(DomainBuilder.build_delete("example.at", cl_trid="T"))
        assert get_text(root, "//domain:delete/domain:name") == "example.at"

    def test_build_transfer(self):
        root = parse_xml(DomainBuilder.build_transfer("example.at", "request", cl_trid="T", auth_info="key"))
        assert get_text(root, "//epp:transfer/@op") == "request"
        assert get_text(root, "//domain:transfer/domain:name") == "example.at"
        assert get_text(root, "//domain:transfer/domain:authInfo/domain:pw") == "key"

    def test_build_transfer_invalid_op(self):
        with pytest.raises(ValueError):
            DomainBuilder.build_transfer("example.at", "steal", cl_trid="T")

    def test_build_withdraw(self):
        root = parse_xml(DomainBuilder.build_withdraw("example.at", cl_trid="T"))
        assert get_text(root, "//epp:withdraw/domain:withdraw/domain:name") == "example.at"
        assert get_text(root, "//epp:extension/at-ext-epp:withdraw/at-ext-epp:domain") == "example.at"
        assert get_text(root, "//epp:command/epp:clTRID") == "T"


class TestContactCommands:
    """Tests for contact command builders."""

    def test_build_create(self):
        create_data = ContactCreate(
            id="CONT-1",
            email="max@example.at",
            postal_info=make_postal_info(org="Example GmbH"),
            voice="+43.15551234",
            disclose=Disclose(flag=False, voice=True, email=True),
            contact_type="privateperson",
        )
        root = parse_xml(ContactBuilder.build_create(create_data, cl_trid="T"))

        create = root.find(".//contact:create", NS)
        assert [etree.QName(child).localname for child in create] == [
            "id", "postalInfo", "voice", "email", "authInfo", "disclose",
        ]
        assert get_text(create, "contact:postalInfo/@type") == "int"
        assert get_text(create, "contact:postalInfo/contact:name") == "Max Mustermann"
        assert get_text(create, "contact:postalInfo/contact:org") == "Example GmbH"
        assert get_text(create, "contact:postalInfo/contact:addr/contact:cc") == "AT"
        assert get_text(create, "contact:authInfo/contact:pw") is None
        assert get_text(create, "contact:disclose/@flag") == "0"
        assert create.find("contact:disclose/contact:voice", NS) is not None
        assert create.find("contact:disclose/contact:fax", NS) is None
        assert get_text(root, "//epp:extension/at-ext-contact:create/at-ext-contact:type") == "privateperson"

    def test_build_create_normalizes_street(self):
        create_data = ContactCreate(
            id="CONT-1",
            email="max@example.at",
            postal_info=make_postal_info(
                street=["Mariahilfer Strasse 123 Stiege 4 Tuer 17 Hinterhof links"],
            ),
        )
        root = parse_xml(ContactBuilder.build_create(create_data, cl_trid="T"))

        streets = get_all_text(root, "//contact:street")
        assert streets == ["Mariahilfer Strasse 123 Stiege 4", "Tuer 17 Hinterhof links"]

    def test_build_create_leaves_input_unchanged(self):
        street = ["x" * 50]
        create_data = ContactCreate(id="CONT-1", email="a@b.at", postal_info=make_postal_info(street=street))
        ContactBuilder.build_create(create_data, cl_trid="T")
        assert create_data.postal_info.street == ["x" * 50]

    def test_build_create_without_extension(self):
        create_data = ContactCreate(id="CONT-1", email="a@b.at", postal_info=make_postal_info())
        root = parse_xml(ContactBuilder.build_create(create_data, cl_trid="T"))
        assert root.find(".//epp:extension", NS) is None

    def test_build_info(self):
        root = parse_xml(ContactBuilder.build_info("CONT-1", cl_trid="T"))
        assert get_text(root, "//contact:info/contact:id") == "CONT-1"
        assert root.find(".//contact:authInfo", NS) is None

    def test_build_update_absent_blocks(self):
        """Only the blocks that are set appear."""
        update_data = ContactUpdate(id="CONT-1", chg=ContactChange(email="new@example.at"))
        root = parse_xml(ContactBuilder.build_update(update_data, cl_trid="T"))

        assert root.find(".//contact:add", NS) is None
        assert root.find(".//contact:rem", NS) is None
        assert get_text(root, "//contact:chg/contact:email") == "new@example.at"
        assert root.find(".//contact:chg/contact:postalInfo", NS) is None

    def test_build_update_status(self):
        update_data = ContactUpdate(
            id="CONT-1",
            add_status=[StatusValue("clientDeleteProhibited")],
            rem_status=[],
        )
        root = parse_xml(ContactBuilder.build_update(update_data, cl_trid="T"))

        assert get_text(root, "//contact:add/contact:status/@s") == "clientDeleteProhibited"
        rem = root.find(".//contact:rem", NS)
        assert rem is not None and len(rem) == 0
        assert root.find(".//contact:chg", NS) is None

    def test_build_update_postal_info_normalized(self):
        chg = ContactChange(postal_info=make_postal_info(street=["a", "b", "c", "d"]))
        root = parse_xml(ContactBuilder.build_update(ContactUpdate(id="CONT-1", chg=chg), cl_trid="T"))
        assert get_all_text(root, "//contact:chg//contact:street") == ["a b c d"]

    def test_build_delete(self):
        root = parse_xml(ContactBuilder.build_delete("CONT-1", cl_trid="T"))
        assert get_text(root, "//contact:delete/contact:id") == "CONT-1"
