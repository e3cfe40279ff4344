"""
Routing events derived from RIS Live UPDATE messages.

An UPDATE can announce routes, withdraw routes, or both at once. The
deriver splits it into at most one Announce and at most one Withdraw, both
stamped with the envelope's timestamp and the reporting peer's AS number.
"""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv4Interface, IPv6Address, IPv6Interface
from typing import Union

IPAddress = Union[IPv4Address, IPv6Address]
IPPrefix = Union[IPv4Interface, IPv6Interface]


@dataclass(frozen=True)
class AnnouncementVector:
    """Prefixes reachable through one next hop."""

    next_hop: IPAddress
    prefixes: tuple[IPPrefix, ...]


@dataclass(frozen=True)
class Announce:
    """
    Route announcement.

    Attributes:
        timestamp: seconds since the epoch, as reported by the collector
        origin_asn: AS number of the peer that sent the update
        as_path: AS numbers in hop order, exactly as received
        vectors: next hop / prefix groups in wire order
        origin: BGP ORIGIN attribute, passed through unparsed
        communities: BGP communities as tuples of ints, passed through
    """

    timestamp: float
    origin_asn: int
    as_path: tuple[int, ...]
    vectors: tuple[AnnouncementVector, ...]
    origin: str | None = None
    communities: tuple[tuple[int, ...], ...] = ()

    @property
    def prefixes(self) -> list[IPPrefix]:
        return [prefix for vector in self.vectors for prefix in vector.prefixes]


@dataclass(frozen=True)
class Withdraw:
    """Route withdrawal. Duplicate prefixes are kept."""

    timestamp: float
    origin_asn: int
    prefixes: tuple[IPPrefix, ...]


RoutingEvent = Union[Announce, Withdraw]
