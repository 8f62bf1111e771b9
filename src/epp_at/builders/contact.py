"""
Contact command builders (RFC 5733 with nic.at contact extension).

Street lines are normalized to the registry's 3 x 35 limit before
serialization.
"""

from dataclasses import replace
from typing import List, Optional

from lxml import etree

from epp_at.address import normalize_street
from epp_at.builders.base import (
    AT_EXT_CONTACT_NS,
    CONTACT_NS,
    add_cl_trid,
    add_extension,
    create_command,
    object_element,
    sub,
    to_bytes,
)
from epp_at.models import (
    ContactCreate,
    ContactUpdate,
    Disclose,
    PostalInfo,
    StatusValue,
)


def normalize_postal_info(postal_info: PostalInfo) -> PostalInfo:
    """Return a copy of postal info with street lines normalized."""
    return replace(postal_info, street=normalize_street(postal_info.street))


def _add_postal_info(parent: etree._Element, postal_info: PostalInfo) -> None:
    postal_info = normalize_postal_info(postal_info)

    pi = sub(parent, CONTACT_NS, "postalInfo", type=postal_info.type)
    sub(pi, CONTACT_NS, "name", postal_info.name)
    if postal_info.org:
        sub(pi, CONTACT_NS, "org", postal_info.org)

    addr = sub(pi, CONTACT_NS, "addr")
    for line in postal_info.street or []:
        sub(addr, CONTACT_NS, "street", line)
    sub(addr, CONTACT_NS, "city", postal_info.city)
    if postal_info.sp:
        sub(addr, CONTACT_NS, "sp", postal_info.sp)
    if postal_info.pc:
        sub(addr, CONTACT_NS, "pc", postal_info.pc)
    sub(addr, CONTACT_NS, "cc", postal_info.cc)


def _add_disclose(parent: etree._Element, disclose: Disclose) -> None:
    elem = sub(parent, CONTACT_NS, "disclose", flag="1" if disclose.flag else "0")
    if disclose.voice:
        sub(elem, CONTACT_NS, "voice")
    if disclose.fax:
        sub(elem, CONTACT_NS, "fax")
    if disclose.email:
        sub(elem, CONTACT_NS, "email")


def _add_status_list(parent: etree._Element, statuses: List[StatusValue]) -> None:
    for status in statuses:
        elem = sub(parent, CONTACT_NS, "status", s=status.status)
        if status.reason:
            elem.text = status.reason


class ContactBuilder:
    """Builds contact commands."""

    @staticmethod
    def build_create(create_data: ContactCreate, cl_trid: str) -> bytes:
        """
        Build contact:create command.

        nic.at does not use contact auth info, so an empty <contact:pw/> is
        sent. The contact type, when given, goes into the at-ext-contact
        extension.
        """
        root, command, create = create_command("create")

        contact_create = object_element(create, CONTACT_NS, "contact", "create")
        sub(contact_create, CONTACT_NS, "id", create_data.id)
        _add_postal_info(contact_create, create_data.postal_info)
        if create_data.voice:
            sub(contact_create, CONTACT_NS, "voice", create_data.voice)
        if create_data.fax:
            sub(contact_create, CONTACT_NS, "fax", create_data.fax)
        sub(contact_create, CONTACT_NS, "email", create_data.email)

        auth = sub(contact_create, CONTACT_NS, "authInfo")
        sub(auth, CONTACT_NS, "pw", "")

        if create_data.disclose is not None:
            _add_disclose(contact_create, create_data.disclose)

        if create_data.contact_type:
            extension = add_extension(command)
            at_create = object_element(extension, AT_EXT_CONTACT_NS, "at-ext-contact", "create")
            sub(at_create, AT_EXT_CONTACT_NS, "type", create_data.contact_type)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_info(id: str, cl_trid: str, auth_info: Optional[str] = None) -> bytes:
        """Build contact:info command."""
        root, command, info = create_command("info")

        contact_info = object_element(info, CONTACT_NS, "contact", "info")
        sub(contact_info, CONTACT_NS, "id", id)
        if auth_info:
            auth = sub(contact_info, CONTACT_NS, "authInfo")
            sub(auth, CONTACT_NS, "pw", auth_info)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_update(update_data: ContactUpdate, cl_trid: str) -> bytes:
        """
        Build contact:update command.

        Blocks set to None are left out entirely; an empty block is sent as
        an empty element.
        """
        root, command, update = create_command("update")

        contact_update = object_element(update, CONTACT_NS, "contact", "update")
        sub(contact_update, CONTACT_NS, "id", update_data.id)

        if update_data.add_status is not None:
            add = sub(contact_update, CONTACT_NS, "add")
            _add_status_list(add, update_data.add_status)

        if update_data.rem_status is not None:
            rem = sub(contact_update, CONTACT_NS, "rem")
            _add_status_list(rem, update_data.rem_status)

        chg_data = update_data.chg
        if chg_data is not None:
            chg = sub(contact_update, CONTACT_NS, "chg")
            if chg_data.postal_info is not None:
                _add_postal_info(chg, chg_data.postal_info)
            if chg_data.voice:
                sub(chg, CONTACT_NS, "voice", chg_data.voice)
            if chg_data.fax:
                sub(chg, CONTACT_NS, "fax", chg_data.fax)
            if chg_data.email:
                sub(chg, CONTACT_NS, "email", chg_data.email)
            if chg_data.auth_info is not None:
                auth = sub(chg, CONTACT_NS, "authInfo")
                sub(auth, CONTACT_NS, "pw", chg_data.auth_info)
            if chg_data.disclose is not None:
                _add_disclose(chg, chg_data.disclose)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_delete(id: str, cl_trid: str) -> bytes:
        """Build contact:delete command."""
        root, command, delete = create_command("delete")

        contact_delete = object_element(delete, CONTACT_NS, "contact", "delete")
        sub(contact_delete, CONTACT_NS, "id", id)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)
