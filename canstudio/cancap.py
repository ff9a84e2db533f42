"""Conversion of CAN frames into libpcap capture records.

Each frame is stored with the SocketCAN link-layer header: a big-endian
identifier with the extended-format flag in its top bit, the data length,
three reserved bytes and the frame data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterable

from canstudio.pcap import write_file_header, write_packet

__all__ = [
    "CAN_LINKTYPE",
    "CAN_SNAPLEN",
    "CanFrame",
    "encode_can_record",
    "write_can_capture",
]

CAN_LINKTYPE = 0xE3
CAN_SNAPLEN = 0xFFFF

_EXTENDED_FLAG = 0x80
_MAX_CAN_ID = 0x1FFFFFFF
_MAX_DATA_LENGTH = 0xFF
_RESERVED = bytes(3)
_MICROS_PER_SECOND = 1_000_000


@dataclass(frozen=True)
class CanFrame:
    """A CAN frame: identifier, data and whether it uses the extended format."""

    can_id: int
    data: bytes = b""
    extended: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.can_id <= _MAX_CAN_ID:
            raise ValueError(f"CAN identifier out of range: {self.can_id:#x}")
        data = bytes(self.data)
        if len(data) > _MAX_DATA_LENGTH:
            raise ValueError(f"CAN data too long: {len(data)} bytes")
        object.__setattr__(self, "data", data)


def encode_can_record(frame: CanFrame) -> bytes:
    """Return the capture record bytes for ``frame``."""
    identifier = bytearray(frame.can_id.to_bytes(4, "big"))
    if frame.extended:
        identifier[0] |= _EXTENDED_FLAG
    return bytes(identifier) + bytes([len(frame.data)]) + _RESERVED + frame.data


def write_can_capture(
    stream: BinaryIO, records: Iterable[tuple[int, CanFrame]]
) -> int:
    """Write a CAN capture file and return the number of bytes written.

    ``records`` yields ``(timestamp, frame)`` pairs with the timestamp in
    microseconds.
    """
    total = write_file_header(stream, CAN_LINKTYPE, CAN_SNAPLEN, True)
    for timestamp, frame in records:
        if timestamp < 0:
            raise ValueError(f"negative timestamp: {timestamp}")
        sec, usec = divmod(timestamp, _MICROS_PER_SECOND)
        total += write_packet(stream, sec, usec, encode_can_record(frame))
    return total