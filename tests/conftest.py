"""
Shared test fixtures: canned server XML and a scripted in-memory transport.
"""

import random

import pytest

from epp_at.config import SessionConfig
from epp_at.exceptions import EPPConnectionError
from epp_at.session import EPPSession
from epp_at.trid import TransactionIDGenerator


GREETING_XML = b'''<?xml version="1.0" encoding="UTF-8"?>
<epp xmlns="urn:ietf:params:xml:ns:epp-1.0">
    <greeting>
        <svID>nic.at EPP Server</svID>
        <svDate>2025-01-15T10:00:00Z</svDate>
        <svcMenu>
            <version>1.0</version>
            <lang>en</lang>
            <objURI>urn:ietf:params:xml:ns:domain-1.0</objURI>
            <objURI>urn:ietf:params:xml:ns:contact-1.0</objURI>
            <svcExtension>
                <extURI>http://www.nic.at/xsd/at-ext-epp-1.0</extURI>
                <extURI>http://www.nic.at/xsd/at-ext-contact-1.0</extURI>
            </svcExtension>
        </svcMenu>
    </greeting>
</epp>'''


def make_response(
    code: int = 1000,
    msg: str = "Command completed successfully",
    res_data: str = "",
    extension: str = "",
    msg_q: str = "",
    cl_trid: str = "TEST-1",
) -> bytes:
    """Build a response document; res_data/extension are inner XML."""
    if res_data:
        res_data = f"<resData>{res_data}</resData>"
    if extension:
        extension = f"<extension>{extension}</extension>"
    return f'''<?xml version="1.0" encoding="UTF-8"?>
<epp xmlns="urn:ietf:params:xml:ns:epp-1.0">
    <response>
        <result code="{code}"><msg>{msg}</msg></result>
        {msg_q}{res_data}{extension}
        <trID><clTRID>{cl_trid}</clTRID><svTRID>SV-0001</svTRID></trID>
    </response>
</epp>'''.encode("utf-8")


class FakeConnection:
    """
    Scripted transport.

    Replies are handed out in order; an exception in the script is raised
    instead and drops the connection, like a real transport failure.
    """

    def __init__(self, responses=None, greeting=GREETING_XML, connect_error=None):
        self.greeting = greeting
        self.responses = list(responses or [])
        self.connect_error = connect_error
        self.sent = []
        self.connect_calls = 0
        self.close_calls = 0
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> bytes:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        self._connected = True
        return self.greeting

    def close(self) -> None:
        self.close_calls += 1
        self._connected = False

    def send_and_receive(self, data: bytes) -> bytes:
        if not self._connected:
            raise EPPConnectionError("Not connected")
        self.sent.append(data)
        reply = self.responses.pop(0)
        if isinstance(reply, Exception):
            self._connected = False
            raise reply
        return reply


@pytest.fixture
def config():
    return SessionConfig(host="epp.test.nic.at", client_id="REG-1", password="secret")


@pytest.fixture
def trid_generator():
    return TransactionIDGenerator(prefix="TEST", clock=lambda: 1700000000, rng=random.Random(0))


@pytest.fixture
def make_session(config, trid_generator):
    """Factory: session over a FakeConnection with the given replies."""
    def factory(responses=None, **kwargs):
        connection = FakeConnection(responses, **kwargs)
        session = EPPSession(config, connection=connection, trid_generator=trid_generator)
        return session, connection
    return factory
