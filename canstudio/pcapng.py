"""Writers for pcapng capture blocks.

Blocks are written in the host byte order; the section header carries the
byte-order magic so that readers can swap fields when needed.
"""

from __future__ import annotations

import struct
import time
from typing import BinaryIO

from canstudio.pcap import _write

__all__ = [
    "PCAPNG_MAGIC",
    "SECTION_HEADER_BLOCK_TYPE",
    "INTERFACE_DESCRIPTION_BLOCK_TYPE",
    "INTERFACE_STATISTICS_BLOCK_TYPE",
    "ENHANCED_PACKET_BLOCK_TYPE",
    "write_section_header_block",
    "write_interface_description_block",
    "write_enhanced_packet_block",
    "write_interface_statistics_block",
]

PCAPNG_MAGIC = 0x1A2B3C4D
PCAPNG_MAJOR_VERSION = 1
PCAPNG_MINOR_VERSION = 0

SECTION_HEADER_BLOCK_TYPE = 0x0A0D0D0A
INTERFACE_DESCRIPTION_BLOCK_TYPE = 0x00000001
INTERFACE_STATISTICS_BLOCK_TYPE = 0x00000005
ENHANCED_PACKET_BLOCK_TYPE = 0x00000006

OPT_ENDOFOPT = 0
OPT_COMMENT = 1
EPB_FLAGS = 2
SHB_HARDWARE = 2
SHB_OS = 3
SHB_USERAPPL = 4
IDB_NAME = 2
IDB_DESCRIPTION = 3
IDB_IF_SPEED = 8
IDB_TSRESOL = 9
IDB_FILTER = 11
IDB_OS = 12
ISB_STARTTIME = 2
ISB_ENDTIME = 3
ISB_IFRECV = 4
ISB_IFDROP = 5

UNKNOWN_SECTION_LENGTH = 0xFFFFFFFFFFFFFFFF

_U16_MAX = 0xFFFF
_U32_MASK = 0xFFFFFFFF
_U64_MASK = 0xFFFFFFFFFFFFFFFF

# block type, total length, byte-order magic, major, minor, section length
_SHB = struct.Struct("=IIIHHQ")
# block type, total length, link type, reserved, snap length
_IDB = struct.Struct("=IIHHI")
# block type, total length, interface id, timestamp high, timestamp low
_ISB = struct.Struct("=IIIII")
# block type, total length, interface id, ts high, ts low, caplen, len
_EPB = struct.Struct("=IIIIIII")
_OPTION = struct.Struct("=HH")
_U32 = struct.Struct("=I")
_U64 = struct.Struct("=Q")
_U32_PAIR = struct.Struct("=II")


def _padding(length: int) -> bytes:
    return bytes(-length % 4)


def _encode(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _option(code: int, value: bytes) -> bytes:
    return _OPTION.pack(code, len(value)) + value + _padding(len(value))


def _string_option(code: int, value: str | bytes | None) -> bytes:
    raw = _encode(value)
    if not 0 < len(raw) < _U16_MAX:
        return b""
    return _option(code, raw)


def _terminate(options: bytes) -> bytes:
    """Append the end-of-options marker when there are any options."""
    if not options:
        return b""
    return options + _OPTION.pack(OPT_ENDOFOPT, 0)


def _split_timestamp(timestamp: int) -> tuple[int, int]:
    timestamp &= _U64_MASK
    return (timestamp >> 32) & _U32_MASK, timestamp & _U32_MASK


def write_section_header_block(
    stream: BinaryIO,
    comment: str | bytes | None = None,
    hardware: str | bytes | None = None,
    os_name: str | bytes | None = None,
    app_name: str | bytes | None = None,
    section_length: int = UNKNOWN_SECTION_LENGTH,
) -> int:
    """Write a section header block and return the number of bytes written."""
    options = _terminate(
        _string_option(OPT_COMMENT, comment)
        + _string_option(SHB_HARDWARE, hardware)
        + _string_option(SHB_OS, os_name)
        + _string_option(SHB_USERAPPL, app_name)
    )
    total = _SHB.size + len(options) + _U32.size
    header = _SHB.pack(
        SECTION_HEADER_BLOCK_TYPE,
        total,
        PCAPNG_MAGIC,
        PCAPNG_MAJOR_VERSION,
        PCAPNG_MINOR_VERSION,
        section_length & _U64_MASK,
    )
    return _write(stream, header + options + _U32.pack(total))


def write_interface_description_block(
    stream: BinaryIO,
    link_type: int,
    snap_len: int,
    comment: str | bytes | None = None,
    name: str | bytes | None = None,
    description: str | bytes | None = None,
    filter_string: str | bytes | None = None,
    os_name: str | bytes | None = None,
    if_speed: int = 0,
    tsresol: int = 0,
) -> int:
    """Write an interface description block and return the bytes written.

    ``if_speed`` and ``tsresol`` are only written when non-zero. The filter
    is stored as a libpcap filter string, prefixed with its code byte 0.
    """
    parts = [
        _string_option(OPT_COMMENT, comment),
        _string_option(IDB_NAME, name),
        _string_option(IDB_DESCRIPTION, description),
    ]
    if if_speed:
        parts.append(_option(IDB_IF_SPEED, _U64.pack(if_speed & _U64_MASK)))
    resolution = tsresol & 0xFF
    if resolution:
        parts.append(_option(IDB_TSRESOL, bytes([resolution])))
    raw_filter = _encode(filter_string)
    if 0 < len(raw_filter) < _U16_MAX - 1:
        parts.append(_option(IDB_FILTER, b"\x00" + raw_filter))
    parts.append(_string_option(IDB_OS, os_name))

    options = _terminate(b"".join(parts))
    total = _IDB.size + len(options) + _U32.size
    header = _IDB.pack(
        INTERFACE_DESCRIPTION_BLOCK_TYPE,
        total,
        link_type & _U16_MAX,
        0,
        snap_len & _U32_MASK,
    )
    return _write(stream, header + options + _U32.pack(total))


def write_enhanced_packet_block(
    stream: BinaryIO,
    sec: int,
    usec: int,
    data: bytes,
    orig_len: int | None = None,
    interface_id: int = 0,
    ts_mul: int = 1_000_000,
    comment: str | bytes | None = None,
    flags: int = 0,
) -> int:
    """Write an enhanced packet block and return the bytes written.

    The timestamp is ``sec * ts_mul + usec`` in units of the interface's
    resolution. The captured length is ``len(data)``; ``orig_len``
    defaults to it. ``flags`` is only written when non-zero.
    """
    payload = bytes(data)
    if orig_len is None:
        orig_len = len(payload)
    parts = [_string_option(OPT_COMMENT, comment)]
    if flags:
        parts.append(_option(EPB_FLAGS, _U32.pack(flags & _U32_MASK)))
    options = _terminate(b"".join(parts))

    padded = payload + _padding(len(payload))
    total = _EPB.size + len(padded) + len(options) + _U32.size
    high, low = _split_timestamp(sec * ts_mul + usec)
    header = _EPB.pack(
        ENHANCED_PACKET_BLOCK_TYPE,
        total,
        interface_id & _U32_MASK,
        high,
        low,
        len(payload) & _U32_MASK,
        orig_len & _U32_MASK,
    )
    return _write(stream, header + padded + options + _U32.pack(total))


def write_interface_statistics_block(
    stream: BinaryIO,
    interface_id: int = 0,
    comment: str | bytes | None = None,
    start_time: int = 0,
    end_time: int = 0,
    if_recv: int | None = None,
    if_drop: int | None = None,
    now: int | None = None,
) -> int:
    """Write an interface statistics block and return the bytes written.

    ``now`` is the block timestamp in microseconds since the epoch and
    defaults to the current time. Start and end times are written when
    non-zero; received and dropped counts when given.
    """
    if now is None:
        now = time.time_ns() // 1000
    parts = [_string_option(OPT_COMMENT, comment)]
    if start_time:
        parts.append(_option(ISB_STARTTIME, _U32_PAIR.pack(*_split_timestamp(start_time))))
    if end_time:
        parts.append(_option(ISB_ENDTIME, _U32_PAIR.pack(*_split_timestamp(end_time))))
    if if_recv is not None and if_recv != _U64_MASK:
        parts.append(_option(ISB_IFRECV, _U64.pack(if_recv & _U64_MASK)))
    if if_drop is not None and if_drop != _U64_MASK:
        parts.append(_option(ISB_IFDROP, _U64.pack(if_drop & _U64_MASK)))
    options = _terminate(b"".join(parts))

    total = _ISB.size + len(options) + _U32.size
    high, low = _split_timestamp(now)
    header = _ISB.pack(
        INTERFACE_STATISTICS_BLOCK_TYPE,
        total,
        interface_id & _U32_MASK,
        high,
        low,
    )
    return _write(stream, header + options + _U32.pack(total))