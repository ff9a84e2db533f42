# canstudio

A small toolkit for working with CAN and J1939 traffic from Python. It uses
only the standard library.

## Modules

- `canstudio.pcap`: writes classic libpcap data to any binary stream.
  `write_file_header(stream, link_type, snap_len, ts_nsecs=False)` writes the
  file header (version 2.4, with the nanosecond magic number when `ts_nsecs`
  is true), `write_packet(stream, sec, usec, data, orig_len=None)` writes one
  record, and `write_block(stream, data)` writes a pre-formatted pcapng block
  after checking that its length is a multiple of four and that its leading
  and trailing total lengths agree (`ValueError` otherwise). A failed or
  short write raises `CaptureWriteError`, whose `errno` is the operating
  system's code or 0 for a short write. Each function returns the number of
  bytes written.
- `canstudio.pcapng`: writes pcapng blocks:
  `write_section_header_block`, `write_interface_description_block`,
  `write_enhanced_packet_block` and `write_interface_statistics_block`.
  String options are written when non-empty, numeric options when non-zero
  (or, for received and dropped counts, when given), and an end-of-options
  marker follows whenever any option is present. The statistics block takes
  its timestamp from `now` (microseconds since the epoch) or the current time.
- `canstudio.cancap`: `CanFrame(can_id, data=b"", extended=False)` holds a
  CAN frame (identifier up to 29 bits, at most 255 data bytes).
  `encode_can_record(frame)` gives its SocketCAN-style record: a big-endian
  identifier with `0x80` set in the first byte for extended frames, the data
  length, three reserved bytes and the data. `write_can_capture(stream,
  records)` writes a file header with link type `0xE3`, snap length `0xFFFF`
  and the nanosecond magic number, then one record for each
  `(timestamp_in_microseconds, frame)` pair; negative timestamps raise
  `ValueError`.
- `canstudio.hexinput`: `parse_id(text)` accepts exactly eight hex digits
  and `parse_data(text)` accepts pairs of hex digits, each optionally
  preceded by one whitespace character. Anything else raises
  `HexFormatError`.
- `canstudio.tokens`: `split_tokens(text)` splits on spaces,
  `strip_comment(line)` drops everything from the first `#`, and
  `parse_parameters(tokens)` yields `(key, value)` pairs from `key: value`
  tokens, raising `ParameterError` when a key lacks its single trailing colon
  or a value is missing.
- `canstudio.commands`: `Command(name, action, action_with_args)` builds a
  tree of commands with `add`, `find` and `names`; `dispatch(root, line)`
  runs the handler the line names, ignores blank lines and comments, and
  raises `CommandError` when no command matches or the arguments do not suit
  it.
- `canstudio.params`: checked parsers `parse_byte`, `parse_priority` (0 to
  7), `parse_period`, `parse_source_address` (hexadecimal, one byte) and
  `parse_dtc`, which builds a `Dtc(spn, fmi, oc)` from `spn: N oc: N fmi: N`
  tokens. Errors raise `ParameterError`.

## Writing a pcap file

```python
from canstudio.pcap import write_file_header, write_packet

with open("out.pcap", "wb") as stream:
    write_file_header(stream, link_type=0xE3, snap_len=0xFFFF, ts_nsecs=False)
    write_packet(stream, sec=1, usec=250, data=b"\x00" * 8, orig_len=8)
```

## Writing a CAN capture

```python
from canstudio.cancap import CanFrame, write_can_capture

frames = [(0, CanFrame(0x18FEF100, b"\xff\xff\x00\x12\x34\xff\xff\xff", extended=True))]
with open("can.pcap", "wb") as stream:
    write_can_capture(stream, frames)
```

## Parsing frames typed by hand

```python
from canstudio.hexinput import parse_id, parse_data, HexFormatError

identifier = parse_id("18FEF100")
payload = parse_data("FF FF 00 12 34 FF FF FF")

try:
    parse_id("18FEF1")
except HexFormatError as error:
    print(error)
```

## Dispatching commands

```python
from canstudio.commands import Command, dispatch
from canstudio.params import parse_dtc

root = Command().add(Command("add").add(Command("dtc", action_with_args=parse_dtc)))
dtc = dispatch(root, "add dtc spn: 87 oc: 3 fmi: 8  # a comment")
```

## What the package does not do

It has no command-line programs. It does not read trace files, talk to CAN
interfaces, decode or encode J1939 frames, load a frame database or
reassemble multi-packet transfers. The command tree comes with no commands
of its own; callers register their handlers.

## Running the tests

Install the `test` extra and run `pytest` from the project root.