"""
Kernel IPv4 route table parsing.

Reads ``/proc/net/route`` and locates the default route. Example content::

    Iface   Destination     Gateway         Flags   RefCnt  Use     Metric  Mask            MTU     Window  IRTT
    eth0    00000000        0101EB0A        0003    0       0       1024    00000000        0       0       0
    eth0    0001EB0A        00000000        0001    0       0       0       00FFFFFF        0       0       0
    docker0 000011AC        00000000        0001    0       0       0       0000FFFF        0       0       0

Addresses are 8 hex digits in little-endian byte order.
"""

import logging
import re
import socket
import struct
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from inspect_proxy.errors import DefaultRouteNotFoundError, RouteTableError

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_TABLE_PATH = "/proc/net/route"

# All-zero destination network marks the catch-all route
DEFAULT_DESTINATION = "00000000"

ROUTE_COLUMNS = (
    "Iface",
    "Destination",
    "Gateway",
    "Flags",
    "RefCnt",
    "Use",
    "Metric",
    "Mask",
    "MTU",
    "Window",
    "IRTT",
)

_HEX_ADDRESS_PATTERN = re.compile(r"[0-9A-Fa-f]{8}")
_HEX_ADDRESS_COLUMNS = (1, 2, 7)
_FLAGS_COLUMN = 3
_DECIMAL_COLUMNS = (4, 5, 6, 8, 9, 10)


def decode_hex_address(value: str) -> str:
    """
    Decode a little-endian hex IPv4 address into dotted notation.

    Args:
        value: 8 hex digits as found in the route table

    Returns:
        The dotted IPv4 string

    Raises:
        ValueError: If the value is not 8 hex digits

    Examples:
        >>> decode_hex_address("0101EB0A")
        '10.235.1.1'
        >>> decode_hex_address("00000000")
        '0.0.0.0'
    """
    if len(value) != 8:
        raise ValueError(f"Invalid hex address: '{value}'")
    return socket.inet_ntoa(struct.pack("<I", int(value, 16)))


@dataclass(frozen=True)
class RouteRecord:
    """One route table line, columns kept in source order."""

    columns: Tuple[str, ...]

    @classmethod
    def parse(cls, line: str) -> "RouteRecord":
        columns = line.rstrip("\n").split("\t")
        # The kernel pads the last column with trailing whitespace
        columns[-1] = columns[-1].rstrip()
        if columns[-1] == "":
            columns.pop()
        if len(columns) != len(ROUTE_COLUMNS):
            raise RouteTableError(
                f"Malformed route line, expected {len(ROUTE_COLUMNS)} "
                f"columns but got {len(columns)}: {line!r}"
            )

        record = cls(columns=tuple(columns))
        record.validate()
        return record

    def validate(self) -> None:
        """
        Check that every numeric column parses.

        Raises:
            RouteTableError: If a hex or decimal column is malformed
        """
        for index in _HEX_ADDRESS_COLUMNS:
            value = self.columns[index]
            if not _HEX_ADDRESS_PATTERN.fullmatch(value):
                raise RouteTableError(
                    f"Malformed {ROUTE_COLUMNS[index]} column: {value!r}"
                )
        try:
            int(self.columns[_FLAGS_COLUMN], 16)
            for index in _DECIMAL_COLUMNS:
                int(self.columns[index])
        except ValueError as e:
            raise RouteTableError(f"Malformed route line: {e}") from e

    @property
    def interface_name(self) -> str:
        return self.columns[0]

    @property
    def destination(self) -> str:
        return self.columns[1]

    @property
    def gateway(self) -> str:
        return self.columns[2]

    @property
    def flags(self) -> int:
        return int(self.columns[3], 16)

    @property
    def ref_count(self) -> int:
        return int(self.columns[4])

    @property
    def use(self) -> int:
        return int(self.columns[5])

    @property
    def metric(self) -> int:
        return int(self.columns[6])

    @property
    def mask(self) -> str:
        return self.columns[7]

    @property
    def mtu(self) -> int:
        return int(self.columns[8])

    @property
    def window(self) -> int:
        return int(self.columns[9])

    @property
    def irtt(self) -> int:
        return int(self.columns[10])

    @property
    def destination_address(self) -> str:
        return decode_hex_address(self.destination)

    @property
    def gateway_address(self) -> str:
        return decode_hex_address(self.gateway)

    @property
    def mask_address(self) -> str:
        return decode_hex_address(self.mask)

    @property
    def is_default(self) -> bool:
        return self.destination == DEFAULT_DESTINATION


def read_route_table(path: str = DEFAULT_ROUTE_TABLE_PATH) -> List[str]:
    """
    Read the raw route table, dropping the header line.

    Blank lines (such as the one left by the final newline) are skipped.

    Args:
        path: Location of the route table

    Returns:
        Route lines in file order

    Raises:
        RouteTableError: If the table cannot be read
    """
    try:
        # Interface names are raw bytes; keep them comparable to psutil's
        with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
            lines = f.read().split("\n")
    except OSError as e:
        raise RouteTableError(f"Failed to read route table {path}: {e}") from e

    return [line for line in lines[1:] if line.strip()]


def find_default_route(lines: Iterable[str], source: str = "") -> RouteRecord:
    """
    Return the first route whose destination is the all-zero network.

    Args:
        lines: Raw route lines without the header
        source: Where the lines came from, used in the error message

    Returns:
        The default route

    Raises:
        DefaultRouteNotFoundError: If no line has a zero destination
        RouteTableError: If a line is malformed
    """
    for line in lines:
        record = RouteRecord.parse(line)
        if record.is_default:
            return record

    raise DefaultRouteNotFoundError(source)
