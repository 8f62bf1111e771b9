"""
Poll command builders.
"""

from epp_at.builders.base import add_cl_trid, create_command, to_bytes


class PollBuilder:
    """Builds poll request/acknowledge commands."""

    @staticmethod
    def build_request(cl_trid: str) -> bytes:
        """Build poll request command."""
        root, command, poll = create_command("poll")
        poll.set("op", "req")
        add_cl_trid(command, cl_trid)
        return to_bytes(root)

    @staticmethod
    def build_ack(msg_id: str, cl_trid: str) -> bytes:
        """Build poll acknowledge command."""
        root, command, poll = create_command("poll")
        poll.set("op", "ack")
        poll.set("msgID", msg_id)
        add_cl_trid(command, cl_trid)
        return to_bytes(root)
