"""
Domain command builders (RFC 5731), DNSSEC update (RFC 5910) and the nic.at
withdraw extension.
"""

from typing import List, Optional

from lxml import etree

from epp_at.builders.base import (
    AT_EXT_EPP_NS,
    DOMAIN_NS,
    SECDNS_NS,
    add_cl_trid,
    add_extension,
    create_command,
    object_element,
    sub,
    to_bytes,
)
from epp_at.models import (
    DSData,
    DomainContact,
    DomainCreate,
    DomainUpdate,
    DomainUpdateBlock,
    SecDNSUpdate,
)

TRANSFER_OPS = ("request", "query", "approve", "reject", "cancel")


def _add_contacts(parent: etree._Element, contacts: List[DomainContact]) -> None:
    for contact in contacts:
        sub(parent, DOMAIN_NS, "contact", contact.id, type=contact.type)


def _add_update_block(parent: etree._Element, tag: str, block: DomainUpdateBlock) -> None:
    elem = sub(parent, DOMAIN_NS, tag)
    if block.nameservers:
        ns = sub(elem, DOMAIN_NS, "ns")
        for host in block.nameservers:
            sub(ns, DOMAIN_NS, "hostObj", host)
    _add_contacts(elem, block.contacts)
    for status in block.status:
        s = sub(elem, DOMAIN_NS, "status", s=status.status)
        if status.reason:
            s.text = status.reason


def _add_ds_data(parent: etree._Element, records: List[DSData]) -> None:
    for record in records:
        ds = sub(parent, SECDNS_NS, "dsData")
        sub(ds, SECDNS_NS, "keyTag", str(record.key_tag))
        sub(ds, SECDNS_NS, "alg", str(record.alg))
        sub(ds, SECDNS_NS, "digestType", str(record.digest_type))
        sub(ds, SECDNS_NS, "digest", record.digest)


def _add_sec_dns_update(command: etree._Element, sec_dns: SecDNSUpdate) -> None:
    extension = add_extension(command)
    update = object_element(extension, SECDNS_NS, "secDNS", "update")
    # RFC 5910 order: rem, add, chg
    if sec_dns.rem:
        _add_ds_data(sub(update, SECDNS_NS, "rem"), sec_dns.rem)
    if sec_dns.add:
        _add_ds_data(sub(update, SECDNS_NS, "add"), sec_dns.add)
    if sec_dns.chg:
        _add_ds_data(sub(update, SECDNS_NS, "chg"), sec_dns.chg)


class DomainBuilder:
    """Builds domain commands."""

    @staticmethod
    def build_check(names: List[str], cl_trid: str) -> bytes:
        """Build domain:check command."""
        root, command, check = create_command("check")

        domain_check = object_element(check, DOMAIN_NS, "domain", "check")
        for name in names:
            sub(domain_check, DOMAIN_NS, "name", name)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_info(name: str, cl_trid: str, auth_info: Optional[str] = None, hosts: str = "all") -> bytes:
        """
        Build domain:info command.

        Args:
            name: Domain name
            cl_trid: Client transaction ID
            auth_info: Auth info (for full details of foreign domains)
            hosts: Hosts to return - "all", "del", "sub", "none"
        """
        root, command, info = create_command("info")

        domain_info = object_element(info, DOMAIN_NS, "domain", "info")
        sub(domain_info, DOMAIN_NS, "name", name, hosts=hosts)
        if auth_info:
            auth = sub(domain_info, DOMAIN_NS, "authInfo")
            sub(auth, DOMAIN_NS, "pw", auth_info)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_create(create_data: DomainCreate, cl_trid: str) -> bytes:
        """
        Build domain:create command.

        nic.at expects nameservers in hostAttr form.
        """
        root, command, create = create_command("create")

        domain_create = object_element(create, DOMAIN_NS, "domain", "create")
        sub(domain_create, DOMAIN_NS, "name", create_data.name)

        if create_data.period is not None:
            sub(domain_create, DOMAIN_NS, "period", str(create_data.period), unit=create_data.period_unit)

        if create_data.nameservers:
            ns = sub(domain_create, DOMAIN_NS, "ns")
            for host in create_data.nameservers:
                host_attr = sub(ns, DOMAIN_NS, "hostAttr")
                sub(host_attr, DOMAIN_NS, "hostName", host.name)
                for address in host.addresses:
                    ip = "v6" if ":" in address else "v4"
                    sub(host_attr, DOMAIN_NS, "hostAddr", address, ip=ip)

        if create_data.registrant:
            sub(domain_create, DOMAIN_NS, "registrant", create_data.registrant)

        _add_contacts(domain_create, create_data.contacts)

        if create_data.auth_info:
            auth = sub(domain_create, DOMAIN_NS, "authInfo")
            sub(auth, DOMAIN_NS, "pw", create_data.auth_info)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_update(update_data: DomainUpdate, cl_trid: str) -> bytes:
        """
        Build domain:update command.

        Blocks set to None are left out; a present but empty block is sent
        as an empty element. A non-empty secDNS update is attached as an
        extension.
        """
        root, command, update = create_command("update")

        domain_update = object_element(update, DOMAIN_NS, "domain", "update")
        sub(domain_update, DOMAIN_NS, "name", update_data.name)

        if update_data.add is not None:
            _add_update_block(domain_update, "add", update_data.add)
        if update_data.rem is not None:
            _add_update_block(domain_update, "rem", update_data.rem)

        chg_data = update_data.chg
        if chg_data is not None:
            chg = sub(domain_update, DOMAIN_NS, "chg")
            if chg_data.registrant:
                sub(chg, DOMAIN_NS, "registrant", chg_data.registrant)
            if chg_data.auth_info:
                auth = sub(chg, DOMAIN_NS, "authInfo")
                sub(auth, DOMAIN_NS, "pw", chg_data.auth_info)

        if update_data.sec_dns is not None and not update_data.sec_dns.is_empty():
            _add_sec_dns_update(command, update_data.sec_dns)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_delete(name: str, cl_trid: str) -> bytes:
        """Build domain:delete command."""
        root, command, delete = create_command("delete")

        domain_delete = object_element(delete, DOMAIN_NS, "domain", "delete")
        sub(domain_delete, DOMAIN_NS, "name", name)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_transfer(name: str, op: str, cl_trid: str, auth_info: Optional[str] = None) -> bytes:
        """
        Build domain:transfer command.

        Args:
            name: Domain name
            op: Operation - "request", "query", "approve", "reject", "cancel"
            cl_trid: Client transaction ID
            auth_info: Auth info (required for request)
        """
        if op not in TRANSFER_OPS:
            raise ValueError(f"Invalid transfer operation: {op}")

        root, command, transfer = create_command("transfer")
        transfer.set("op", op)

        domain_transfer = object_element(transfer, DOMAIN_NS, "domain", "transfer")
        sub(domain_transfer, DOMAIN_NS, "name", name)
        if auth_info:
            auth = sub(domain_transfer, DOMAIN_NS, "authInfo")
            sub(auth, DOMAIN_NS, "pw", auth_info)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_withdraw(name: str, cl_trid: str) -> bytes:
        """Build nic.at withdraw command with the at-ext-epp extension."""
        root, command, withdraw = create_command("withdraw")

        domain_withdraw = object_element(withdraw, DOMAIN_NS, "domain", "withdraw")
        sub(domain_withdraw, DOMAIN_NS, "name", name)

        extension = add_extension(command)
        at_withdraw = object_element(extension, AT_EXT_EPP_NS, "at-ext-epp", "withdraw")
        sub(at_withdraw, AT_EXT_EPP_NS, "domain", name)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)
