"""Parsing of the values given to frame and diagnostic commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from canstudio.tokens import ParameterError, parse_parameters

__all__ = [
    "Dtc",
    "parse_byte",
    "parse_priority",
    "parse_period",
    "parse_source_address",
    "parse_dtc",
]

PRIORITY_MASK = 0x07
SRC_ADDR_MASK = 0xFF
DTC_OC_MASK = 0x7F
DTC_FMI_MASK = 0x1F

SPN_KEY = "spn"
OC_KEY = "oc"
FMI_KEY = "fmi"

_BYTE_MASK = 0xFF
_U32_MASK = 0xFFFFFFFF

_DECIMAL = re.compile(r"\s*([+-]?)([0-9]+)", re.ASCII)
_HEXADECIMAL = re.compile(
    r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]+)", re.ASCII
)


class _OutOfRange(Exception):
    """Internal marker for numbers that cannot be held."""


def _leading_number(value: str, base: int) -> int:
    """Read the unsigned number at the start of ``value``.

    Leading whitespace is skipped and reading stops at the first character
    that is not a digit. Raises ``ValueError`` when no digits are found and
    ``_OutOfRange`` when the number is negative or does not fit 32 bits.
    """
    pattern = _HEXADECIMAL if base == 16 else _DECIMAL
    match = pattern.match(value)
    if match is None:
        raise ValueError(value)
    sign, digits = match.groups()
    number = int(digits, base)
    if sign == "-" and number != 0:
        raise _OutOfRange(value)
    if number > _U32_MASK:
        raise _OutOfRange(value)
    return number


def _parse_masked(value: str, label: str, mask: int, base: int = 10) -> int:
    try:
        number = _leading_number(value, base)
    except _OutOfRange:
        raise ParameterError(f"{label} out of range: {value!r}") from None
    except ValueError:
        raise ParameterError(f"{label} is not a number: {value!r}") from None
    if number != number & mask:
        raise ParameterError(f"{label} out of range: {value!r}")
    return number


@dataclass(frozen=True)
class Dtc:
    """A diagnostic trouble code: SPN, failure mode and occurrence count."""

    spn: int
    fmi: int
    oc: int

    def __post_init__(self) -> None:
        if not 0 <= self.spn <= _U32_MASK:
            raise ValueError(f"SPN out of range: {self.spn}")
        if self.fmi != self.fmi & DTC_FMI_MASK:
            raise ValueError(f"Failure Mode Identifier out of range: {self.fmi}")
        if self.oc != self.oc & DTC_OC_MASK:
            raise ValueError(f"Occurrence Count out of range: {self.oc}")


def parse_byte(value: str, label: str) -> int:
    """Return ``value`` read as a decimal number that fits in one byte.

    ``label`` names the value in the error message.
    """
    return _parse_masked(value, label, _BYTE_MASK)


def parse_priority(value: str) -> int:
    """Return ``value`` read as a decimal frame priority (0 to 7)."""
    return _parse_masked(value, "Priority", PRIORITY_MASK)


def parse_period(value: str) -> int:
    """Return ``value`` read as a decimal period in milliseconds."""
    return _parse_masked(value, "Period", _U32_MASK)


def parse_source_address(value: str) -> int:
    """Return ``value`` read as a hexadecimal source address (one byte)."""
    return _parse_masked(value, "Source address", SRC_ADDR_MASK, base=16)


def parse_dtc(tokens: Iterable[str]) -> Dtc:
    """Build a ``Dtc`` from ``spn: N oc: N fmi: N`` parameter tokens.

    Unknown keys are ignored. ``ParameterError`` is raised for malformed or
    out-of-range values and when the SPN (non-zero), the occurrence count or
    the failure mode identifier is missing.
    """
    spn = 0
    oc: int | None = None
    fmi: int | None = None

    for key, value in parse_parameters(tokens):
        if key == SPN_KEY:
            spn = _parse_masked(value, "Spn", _U32_MASK)
        elif key == OC_KEY:
            oc = _parse_masked(value, "Occurrence Count", DTC_OC_MASK)
        elif key == FMI_KEY:
            fmi = _parse_masked(value, "Failure Mode Identifier", DTC_FMI_MASK)

    if spn == 0:
        raise ParameterError("SPN not set")
    if oc is None:
        raise ParameterError("Occurrence Count not set")
    if fmi is None:
        raise ParameterError("Failure Mode Identifier not set")
    return Dtc(spn=spn, fmi=fmi, oc=oc)