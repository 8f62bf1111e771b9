"""
Tests for the EPP session engine, driven by a scripted transport.
"""

import pytest
from lxml import etree

from epp_at.builders import DomainBuilder
from epp_at.exceptions import (
    EPPAlreadyLoggedIn,
    EPPAuthenticationError,
    EPPConnectError,
    EPPConnectionError,
    EPPGreetingError,
    EPPNotConnected,
    EPPTruncatedFrame,
    EPPValidationError,
    EPPXMLError,
)
from epp_at.session import SessionState
from conftest import GREETING_XML, make_response

EPP = "{urn:ietf:params:xml:ns:epp-1.0}"


def login_element(payload: bytes):
    return etree.fromstring(payload).find(f"{EPP}command/{EPP}login")


class TestLifecycle:
    """Tests for connect/close and state transitions."""

    def test_initial_state(self, make_session):
        session, _ = make_session()
        assert session.state is SessionState.DISCONNECTED
        assert session.greeting is None

    def test_connect_reads_greeting(self, make_session):
        session, _ = make_session()
        greeting = session.connect()

        assert greeting.server_id == "nic.at EPP Server"
        assert session.greeting is greeting
        assert session.state is SessionState.CONNECTED

    def test_connect_twice_reuses_connection(self, make_session):
        session, conn = make_session()
        session.connect()
        session.connect()
        assert conn.connect_calls == 1

    def test_connect_failure(self, make_session):
        session, _ = make_session(connect_error=EPPConnectError("refused"))
        with pytest.raises(EPPConnectError):
            session.connect()
        assert session.state is SessionState.DISCONNECTED

    def test_invalid_greeting(self, make_session):
        """A greeting that is not a <greeting> closes the connection."""
        session, conn = make_session(greeting=make_response())
        with pytest.raises(EPPGreetingError):
            session.connect()
        assert session.state is SessionState.DISCONNECTED
        assert not conn.is_connected

    def test_close_twice(self, make_session):
        session, _ = make_session()
        session.connect()
        session.close()
        session.close()
        assert session.state is SessionState.DISCONNECTED

    def test_close_without_connect(self, make_session):
        session, _ = make_session()
        session.close()
        assert session.state is SessionState.DISCONNECTED


class TestLogin:
    """Tests for login, logout and password change."""

    def test_login(self, make_session):
        session, conn = make_session([make_response()])
        session.connect()
        response = session.login()

        assert response.code == 1000
        assert session.state is SessionState.AUTHENTICATED

        login = login_element(conn.sent[0])
        assert login.findtext(f"{EPP}clID") == "REG-1"
        assert login.findtext(f"{EPP}pw") == "secret"
        assert login.find(f"{EPP}newPW") is None

    def test_login_before_connect_sends_nothing(self, make_session):
        session, conn = make_session([make_response()])
        with pytest.raises(EPPNotConnected):
            session.login()
        assert conn.sent == []

    def test_login_twice(self, make_session):
        session, conn = make_session([make_response()])
        session.connect()
        session.login()
        with pytest.raises(EPPAlreadyLoggedIn):
            session.login()
        assert len(conn.sent) == 1

    def test_login_rejected(self, make_session):
        """Failure code raises but the connection stays usable."""
        session, _ = make_session([
            make_response(2200, "Authentication error"),
            make_response(),
        ])
        session.connect()

        with pytest.raises(EPPAuthenticationError) as exc:
            session.login()
        assert exc.value.code == 2200
        assert session.state is SessionState.CONNECTED

        session.login()
        assert session.state is SessionState.AUTHENTICATED

    def test_login_requires_exact_success(self, make_session):
        """Only 1000 authenticates; other success codes do not."""
        session, _ = make_session([make_response(1001, "Pending")])
        session.connect()
        with pytest.raises(EPPAuthenticationError):
            session.login()
        assert session.state is SessionState.CONNECTED

    def test_logout(self, make_session):
        session, _ = make_session([make_response(), make_response(1500, "Ending session")])
        session.connect()
        session.login()
        response = session.logout()

        assert response.code == 1500
        assert session.state is SessionState.CONNECTED

    def test_logout_malformed_reply(self, make_session):
        """An unparseable logout reply still ends the login."""
        session, _ = make_session([make_response(), b"<epp><garbage"])
        session.connect()
        session.login()

        with pytest.raises(EPPXMLError):
            session.logout()
        assert session.state is SessionState.CONNECTED
        assert session.is_connected

    def test_change_password(self, make_session, config):
        session, conn = make_session([make_response()])
        session.connect()
        session.change_password("n3w-secret")

        login = login_element(conn.sent[0])
        assert login.findtext(f"{EPP}pw") == "secret"
        assert login.findtext(f"{EPP}newPW") == "n3w-secret"
        assert session.password == "n3w-secret"
        assert config.password == "n3w-secret"
        assert session.is_logged_in

    def test_change_password_rejected(self, make_session):
        """Stored password is kept when the server refuses the change."""
        session, _ = make_session([make_response(2200, "Authentication error")])
        session.connect()
        with pytest.raises(EPPAuthenticationError):
            session.change_password("n3w-secret")
        assert session.password == "secret"

    @pytest.mark.parametrize("new_password", ["", None])
    def test_change_password_empty(self, make_session, new_password):
        """An empty new password is refused before anything is sent."""
        session, conn = make_session([make_response()])
        session.connect()

        with pytest.raises(EPPValidationError):
            session.change_password(new_password)
        assert conn.sent == []
        assert session.password == "secret"
        assert session.state is SessionState.CONNECTED

    def test_next_login_uses_changed_password(self, make_session):
        session, conn = make_session([
            make_response(),
            make_response(1500, "Ending session"),
            make_response(),
        ])
        session.connect()
        session.change_password("n3w-secret")
        session.logout()
        session.close()

        session.connect()
        session.login()

        login = login_element(conn.sent[2])
        assert login.findtext(f"{EPP}pw") == "n3w-secret"
        assert login.find(f"{EPP}newPW") is None
        assert session.is_logged_in

    def test_next_login_after_rejected_change(self, make_session):
        session, conn = make_session([
            make_response(2200, "Authentication error"),
            make_response(),
        ])
        session.connect()
        with pytest.raises(EPPAuthenticationError):
            session.change_password("n3w-secret")

        session.login()

        login = login_element(conn.sent[1])
        assert login.findtext(f"{EPP}pw") == "secret"
        assert login.find(f"{EPP}newPW") is None
        assert session.is_logged_in

    def test_context_manager(self, make_session):
        session, conn = make_session([make_response(), make_response(1500, "Ending session")])
        with session:
            assert session.is_logged_in
        assert session.state is SessionState.DISCONNECTED
        assert len(conn.sent) == 2

    def test_context_manager_login_failure_closes(self, make_session):
        session, conn = make_session([make_response(2200, "Authentication error")])
        with pytest.raises(EPPAuthenticationError):
            with session:
                pass
        assert not conn.is_connected


class TestSendCommand:
    """Tests for command exchange."""

    def test_send_command(self, make_session):
        check = make_response(cl_trid="ABC")
        session, conn = make_session([make_response(), check])
        session.connect()
        session.login()

        payload = DomainBuilder.build_check(["example.at"], cl_trid=session.next_trid())
        assert session.send_command(payload) == check
        assert conn.sent[-1] == payload

    def test_not_connected(self, make_session):
        session, _ = make_session()
        with pytest.raises(EPPNotConnected):
            session.send_command(b"<epp/>")

    def test_hello_before_login(self, make_session):
        """hello only needs a connection."""
        session, conn = make_session([GREETING_XML])
        session.connect()
        greeting = session.hello()
        assert greeting.server_id == "nic.at EPP Server"
        assert b"<hello/>" in conn.sent[0]

    def test_transport_error_disconnects(self, make_session):
        session, _ = make_session([make_response(), EPPTruncatedFrame("cut")])
        session.connect()
        session.login()

        with pytest.raises(EPPConnectionError):
            session.send_command(b"<epp/>")
        assert session.state is SessionState.DISCONNECTED

        with pytest.raises(EPPNotConnected):
            session.send_command(b"<epp/>")

    def test_failure_code_keeps_session(self, make_session):
        """Protocol errors are left to the caller; session is unaffected."""
        session, _ = make_session([
            make_response(),
            make_response(2303, "Object does not exist"),
            make_response(),
        ])
        session.connect()
        session.login()

        response = session.request(b"<epp/>")
        assert response.code == 2303
        assert not response.success
        assert session.is_logged_in

        assert session.request(b"<epp/>").success

    def test_trids_are_unique(self, make_session):
        session, _ = make_session()
        trids = {session.next_trid() for _ in range(100)}
        assert len(trids) == 100