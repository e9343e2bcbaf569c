"""
Counter source for netrate
Reads cumulative receive/send byte counters for one interface from the
kernel statistics table (/proc/net/dev)

The table has one line per interface:

    eth0: 1234 10 0 0 0 0 0 0 5678 12 0 0 0 0 0 0

After splitting on whitespace, token 1 is the received-byte counter and
token 9 is the sent-byte counter. These positions are fixed and are not
detected from the header.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .errors import NetRateError

PROC_NET_DEV = "/proc/net/dev"

U64_MAX = 2**64 - 1

RECV_FIELD = 1
SEND_FIELD = 9

ASCII_WHITESPACE = " \t\n\x0c\r"
_FIELD_SEPARATOR = re.compile(r"[ \t\n\x0c\r]+")


@dataclass(frozen=True)
class ByteState:
    """Cumulative byte counters of one interface"""

    received: int = 0
    sent: int = 0

    def __sub__(self, other: "ByteState") -> "ByteState":
        """Field-wise subtraction clamped at zero (counter resets give 0)"""
        return ByteState(
            received=self.received - other.received
            if self.received >= other.received
            else 0,
            sent=self.sent - other.sent if self.sent >= other.sent else 0,
        )


class ParseErrorKind(Enum):
    SOURCE_UNAVAILABLE = "source unavailable"
    DEVICE_NOT_FOUND = "device not found"
    TOO_FEW_FIELDS = "too few fields"
    BAD_FIELD = "bad field"


class ParseError(NetRateError):
    """The statistics table could not be turned into a ByteState"""

    def __init__(self, kind: ParseErrorKind, source: str, detail: str = ""):
        self.kind = kind
        self.source = source
        message = f'Failed to parse "{source}": {kind.value}'
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


def parse_counter(token: str) -> int:
    """Parse a non-negative base-10 u64, raising ValueError otherwise"""
    if not (token.isascii() and token.isdigit()):
        raise ValueError(f"not a non-negative integer: {token!r}")
    value = int(token)
    if value > U64_MAX:
        raise ValueError(f"out of range: {token!r}")
    return value


def parse_net_dev(text: str, interface_name: str, source: str = PROC_NET_DEV) -> ByteState:
    """Extract the counters of interface_name from the table text"""
    for line in text.split("\n"):
        line = line.strip(ASCII_WHITESPACE)
        if not line.startswith(interface_name):
            continue

        tokens = _FIELD_SEPARATOR.split(line)
        if len(tokens) <= RECV_FIELD:
            raise ParseError(ParseErrorKind.TOO_FEW_FIELDS, source, line)

        try:
            received = parse_counter(tokens[RECV_FIELD])
        except ValueError as e:
            raise ParseError(ParseErrorKind.BAD_FIELD, source, f"recv bytes: {e}") from e

        if len(tokens) <= SEND_FIELD:
            raise ParseError(ParseErrorKind.TOO_FEW_FIELDS, source, line)

        try:
            sent = parse_counter(tokens[SEND_FIELD])
        except ValueError as e:
            raise ParseError(ParseErrorKind.BAD_FIELD, source, f"send bytes: {e}") from e

        return ByteState(received=received, sent=sent)

    raise ParseError(ParseErrorKind.DEVICE_NOT_FOUND, source, interface_name)


def read_counters(interface_name: str, source_path: str = PROC_NET_DEV) -> ByteState:
    """Read the current counters of interface_name from source_path"""
    try:
        with open(source_path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(ParseErrorKind.SOURCE_UNAVAILABLE, str(source_path), str(e)) from e

    return parse_net_dev(text, interface_name, str(source_path))
