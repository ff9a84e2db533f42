"""CAN and J1939 helpers: pcap and pcapng writing, CAN capture records, hex input parsing and command handling."""

__version__ = "0.1.0"
__all__ = ["cancap", "commands", "hexinput", "params", "pcap", "pcapng", "tokens"]