"""
EPP Framing

Handles EPP frame encoding/decoding per RFC 5734.
Each EPP message is prefixed with a 4-byte length header (network byte order)
that counts the header itself.
"""

import struct

from epp_at.exceptions import EPPFrameError, EPPMalformedFrame, EPPTruncatedFrame


# Maximum frame size (10MB - reasonable limit)
MAX_FRAME_SIZE = 10 * 1024 * 1024

# Minimum frame size (header only)
HEADER_SIZE = 4
MIN_FRAME_SIZE = HEADER_SIZE


def encode_frame(data: bytes) -> bytes:
    """
    Encode data with EPP 4-byte length prefix.

    Args:
        data: XML data to encode

    Returns:
        Framed data with length prefix

    Raises:
        EPPMalformedFrame: If data is too large
    """
    total_length = len(data) + HEADER_SIZE

    if total_length > MAX_FRAME_SIZE:
        raise EPPMalformedFrame(f"Frame too large: {total_length} bytes (max {MAX_FRAME_SIZE})")

    return struct.pack("!I", total_length) + data


def decode_frame_header(header: bytes) -> int:
    """
    Decode EPP frame header to get total length.

    Args:
        header: 4-byte header

    Returns:
        Total frame length (including header)

    Raises:
        EPPMalformedFrame: If header is invalid
    """
    if len(header) != HEADER_SIZE:
        raise EPPMalformedFrame(f"Invalid header length: {len(header)} (expected {HEADER_SIZE})")

    length = struct.unpack("!I", header)[0]

    if length < MIN_FRAME_SIZE:
        raise EPPMalformedFrame(f"Frame length too small: {length}")

    if length > MAX_FRAME_SIZE:
        raise EPPMalformedFrame(f"Frame length too large: {length}")

    return length


def read_frame(read_func) -> bytes:
    """
    Read a complete EPP frame using provided read function.

    Reads exactly one header and exactly the payload it announces, never
    more, so nothing is buffered past the frame boundary.

    Args:
        read_func: Function returning up to n bytes, b"" on EOF (e.g. sock.recv)

    Returns:
        Frame payload (without header)

    Raises:
        EPPTruncatedFrame: If the stream ends mid-frame
        EPPMalformedFrame: If the header is invalid
    """
    header = _read_exactly(read_func, HEADER_SIZE)
    if len(header) != HEADER_SIZE:
        raise EPPTruncatedFrame(f"Connection closed while reading header ({len(header)} of {HEADER_SIZE} bytes)")

    payload_length = decode_frame_header(header) - HEADER_SIZE
    if payload_length == 0:
        return b""

    payload = _read_exactly(read_func, payload_length)
    if len(payload) != payload_length:
        raise EPPTruncatedFrame(f"Incomplete frame: got {len(payload)}, expected {payload_length}")

    return payload


def _read_exactly(read_func, length: int) -> bytes:
    """Read up to `length` bytes, stopping early only on EOF."""
    chunks = []
    remaining = length

    while remaining > 0:
        chunk = read_func(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)

    return b"".join(chunks)


class FrameReader:
    """Frame reader bound to a connection's read function."""

    def __init__(self, read_func):
        self.read_func = read_func

    def read_frame(self) -> bytes:
        """Read next complete frame payload."""
        return read_frame(self.read_func)


class FrameWriter:
    """
    Frame writer for EPP connections.
    """

    def __init__(self, write_func):
        """
        Initialize frame writer.

        Args:
            write_func: Function that writes bytes and returns the count written
        """
        self.write_func = write_func

    def write_frame(self, data: bytes) -> int:
        """
        Write a complete frame.

        Args:
            data: Frame payload

        Returns:
            Number of bytes written (including header)

        Raises:
            EPPFrameError: If write fails
        """
        frame = encode_frame(data)
        total_written = 0

        while total_written < len(frame):
            written = self.write_func(frame[total_written:])
            if written is None or written <= 0:
                raise EPPFrameError("Failed to write frame")
            total_written += written

        return total_written
