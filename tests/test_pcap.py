import errno
import io
import struct

import pytest

from canstudio.pcap import (
    PCAP_MAGIC,
    PCAP_NSEC_MAGIC,
    CaptureWriteError,
    write_block,
    write_file_header,
    write_packet,
)

FILE_HEADER = struct.Struct("=IHHiIII")
RECORD_HEADER = struct.Struct("=IIII")


class ShortStream:
    def write(self, data):
        return max(len(data) - 1, 0)


class FailingStream:
    def write(self, data):
        raise OSError(errno.ENOSPC, "No space left on device")


def test_file_header_nsec_fields():
    buf = io.BytesIO()
    count = write_file_header(buf, 0xE3, 0xFFFF, True)
    raw = buf.getvalue()
    assert count == len(raw)
    assert FILE_HEADER.unpack(raw) == (PCAP_NSEC_MAGIC, 2, 4, 0, 0, 0xFFFF, 0xE3)


def test_file_header_usec_magic():
    buf = io.BytesIO()
    write_file_header(buf, 1, 65535, False)
    magic = struct.unpack_from("=I", buf.getvalue())[0]
    assert magic == PCAP_MAGIC
    assert magic == 0xA1B2C3D4


def test_file_header_size():
    buf = io.BytesIO()
    assert write_file_header(buf, 1, 100, False) == 24


def test_packet_round_trip():
    payload = b"\x98\xfe\xf1\x00\x08\x00\x00\x00abcdefgh"
    buf = io.BytesIO()
    count = write_packet(buf, 12, 345, payload, len(payload))
    raw = buf.getvalue()
    assert count == len(raw)
    header = RECORD_HEADER.unpack_from(raw)
    assert header == (12, 345, len(payload), len(payload))
    assert raw[RECORD_HEADER.size:] == payload


def test_packet_orig_len_defaults_to_data_length():
    buf = io.BytesIO()
    write_packet(buf, 1, 2, b"xyz")
    _, _, incl, orig = RECORD_HEADER.unpack_from(buf.getvalue())
    assert incl == orig == 3


def test_packet_orig_len_kept_when_larger():
    buf = io.BytesIO()
    write_packet(buf, 1, 2, b"ab", 10)
    _, _, incl, orig = RECORD_HEADER.unpack_from(buf.getvalue())
    assert (incl, orig) == (2, 10)


def test_packet_seconds_truncated_to_32_bits():
    buf = io.BytesIO()
    write_packet(buf, (1 << 32) + 7, 0, b"")
    assert RECORD_HEADER.unpack_from(buf.getvalue())[0] == 7


def test_header_then_packets_accumulate():
    buf = io.BytesIO()
    total = write_file_header(buf, 0xE3, 0xFFFF, True)
    total += write_packet(buf, 0, 0, b"a")
    total += write_packet(buf, 0, 1, b"bc")
    assert total == len(buf.getvalue())


def _block(total_start, total_end, body=b""):
    return struct.pack("=II", 1, total_start) + body + struct.pack("=I", total_end)


def test_write_block_valid():
    block = _block(16, 16, b"\x00\x00\x00\x00")
    buf = io.BytesIO()
    assert write_block(buf, block) == len(block)
    assert buf.getvalue() == block


def test_write_block_mismatched_lengths():
    buf = io.BytesIO()
    with pytest.raises(ValueError):
        write_block(buf, _block(16, 20, b"\x00\x00\x00\x00"))
    assert buf.getvalue() == b""


def test_write_block_unaligned():
    buf = io.BytesIO()
    with pytest.raises(ValueError):
        write_block(buf, _block(12, 12) + b"\x00")
    assert buf.getvalue() == b""


def test_write_block_too_short():
    with pytest.raises(ValueError):
        write_block(io.BytesIO(), b"\x00\x00\x00\x00")


def test_short_write_raises_with_zero_errno():
    with pytest.raises(CaptureWriteError) as info:
        write_file_header(ShortStream(), 1, 1, False)
    assert info.value.errno == 0


def test_os_error_is_wrapped_with_errno():
    with pytest.raises(CaptureWriteError) as info:
        write_packet(FailingStream(), 0, 0, b"data")
    assert info.value.errno == errno.ENOSPC