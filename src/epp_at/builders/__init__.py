"""
EPP command builders.

One builder class per command family. All of them return serialized XML
ready for EPPSession.send_command.
"""

from epp_at.builders.contact import ContactBuilder
from epp_at.builders.domain import DomainBuilder
from epp_at.builders.poll import PollBuilder
from epp_at.builders.session import SessionBuilder

__all__ = [
    "ContactBuilder",
    "DomainBuilder",
    "PollBuilder",
    "SessionBuilder",
]
