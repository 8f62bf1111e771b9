"""
Session command builders: hello, login, logout.
"""

from typing import List

from lxml import etree

from epp_at.builders.base import (
    DEFAULT_EXT_URIS,
    DEFAULT_OBJ_URIS,
    EPP_NS,
    add_cl_trid,
    create_command,
    create_epp_root,
    epp,
    sub,
    to_bytes,
)


class SessionBuilder:
    """Builds session management commands."""

    @staticmethod
    def build_hello() -> bytes:
        """Build hello command."""
        root = create_epp_root()
        etree.SubElement(root, epp("hello"))
        return to_bytes(root)

    @staticmethod
    def build_login(
        client_id: str,
        password: str,
        cl_trid: str,
        new_password: str = None,
        version: str = "1.0",
        lang: str = "en",
        obj_uris: List[str] = None,
        ext_uris: List[str] = None,
    ) -> bytes:
        """
        Build login command.

        Args:
            client_id: Client identifier
            password: Current password
            cl_trid: Client transaction ID
            new_password: New password (password change on login)
            version: EPP version
            lang: Language
            obj_uris: Object URIs to use (default: domain, contact)
            ext_uris: Extension URIs to use (default: nic.at extensions);
                      an empty list omits <svcExtension>
        """
        if obj_uris is None:
            obj_uris = DEFAULT_OBJ_URIS
        if ext_uris is None:
            ext_uris = DEFAULT_EXT_URIS

        root, command, login = create_command("login")

        sub(login, EPP_NS, "clID", client_id)
        sub(login, EPP_NS, "pw", password)
        if new_password is not None:
            sub(login, EPP_NS, "newPW", new_password)

        options = sub(login, EPP_NS, "options")
        sub(options, EPP_NS, "version", version)
        sub(options, EPP_NS, "lang", lang)

        svcs = sub(login, EPP_NS, "svcs")
        for uri in obj_uris:
            sub(svcs, EPP_NS, "objURI", uri)

        if ext_uris:
            svc_ext = sub(svcs, EPP_NS, "svcExtension")
            for uri in ext_uris:
                sub(svc_ext, EPP_NS, "extURI", uri)

        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_logout(cl_trid: str) -> bytes:
        """Build logout command."""
        root, command, _ = create_command("logout")
        add_cl_trid(command, cl_trid)
        return to_bytes(root)
