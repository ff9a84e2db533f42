"""Writers for classic libpcap capture files.

Records are written in the host byte order, as readers are expected to
detect it from the magic number and swap fields when needed.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

__all__ = [
    "CaptureWriteError",
    "PCAP_MAGIC",
    "PCAP_SWAPPED_MAGIC",
    "PCAP_NSEC_MAGIC",
    "PCAP_SWAPPED_NSEC_MAGIC",
    "write_file_header",
    "write_packet",
    "write_block",
]

PCAP_MAGIC = 0xA1B2C3D4
PCAP_SWAPPED_MAGIC = 0xD4C3B2A1
PCAP_NSEC_MAGIC = 0xA1B23C4D
PCAP_SWAPPED_NSEC_MAGIC = 0x4D3CB2A1

VERSION_MAJOR = 2
VERSION_MINOR = 4

# magic, version major, version minor, thiszone, sigfigs, snaplen, network
_FILE_HEADER = struct.Struct("=IHHiIII")
# ts_sec, ts_usec, incl_len, orig_len
_RECORD_HEADER = struct.Struct("=IIII")
_U32 = struct.Struct("=I")

_U32_MASK = 0xFFFFFFFF


class CaptureWriteError(OSError):
    """Raised when data cannot be written to a capture stream.

    ``errno`` holds the operating-system error code, or 0 for a short write.
    """


def _write(stream: BinaryIO, data: bytes) -> int:
    """Write all of ``data`` to ``stream`` and return the number of bytes."""
    try:
        written = stream.write(data)
    except OSError as exc:
        raise CaptureWriteError(exc.errno or 0, f"write failed: {exc}") from exc
    if written is not None and written != len(data):
        raise CaptureWriteError(
            0, f"short write: {written} of {len(data)} bytes written"
        )
    return len(data)


def write_file_header(
    stream: BinaryIO, link_type: int, snap_len: int, ts_nsecs: bool = False
) -> int:
    """Write a libpcap file header and return the number of bytes written.

    With ``ts_nsecs`` the nanosecond-resolution magic number is used.
    """
    header = _FILE_HEADER.pack(
        PCAP_NSEC_MAGIC if ts_nsecs else PCAP_MAGIC,
        VERSION_MAJOR,
        VERSION_MINOR,
        0,
        0,
        snap_len & _U32_MASK,
        link_type & _U32_MASK,
    )
    return _write(stream, header)


def write_packet(
    stream: BinaryIO,
    sec: int,
    usec: int,
    data: bytes,
    orig_len: int | None = None,
) -> int:
    """Write one packet record and return the number of bytes written.

    The captured length is ``len(data)``; ``orig_len`` defaults to it.
    """
    payload = bytes(data)
    if orig_len is None:
        orig_len = len(payload)
    header = _RECORD_HEADER.pack(
        sec & _U32_MASK,
        usec & _U32_MASK,
        len(payload) & _U32_MASK,
        orig_len & _U32_MASK,
    )
    return _write(stream, header) + _write(stream, payload)


def write_block(stream: BinaryIO, data: bytes) -> int:
    """Write a pre-formatted pcapng block and return its length.

    The block must be a multiple of four bytes long and carry the same
    total length at its start and at its end; otherwise ``ValueError``
    is raised and nothing is written.
    """
    block = bytes(data)
    if len(block) % 4 != 0:
        raise ValueError("block length is not a multiple of 4")
    if len(block) < 2 * _U32.size:
        raise ValueError("block is too short to hold its total length")
    (leading,) = _U32.unpack_from(block, _U32.size)
    (trailing,) = _U32.unpack_from(block, len(block) - _U32.size)
    if leading != trailing:
        raise ValueError("leading and trailing block total lengths differ")
    return _write(stream, block)