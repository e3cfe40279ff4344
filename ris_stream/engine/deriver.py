"""
Derive routing events from decoded RIS Live envelopes.

The wire format never says "this is an announcement". The presence of a
``path`` key implies one, and ``withdrawals`` may ride along in the same
message. This module makes those rules explicit:

1. community, origin and announcements are only valid alongside a path
2. a path requires at least one announcement entry
3. withdrawals are independent of the announcement block

Every address is parsed here. A bad one fails the whole message with an
InvalidAddress naming where it was found; nothing is silently dropped.
"""

from __future__ import annotations

import ipaddress

from ris_stream.errors import (
    InconsistentAnnouncement,
    InvalidAddress,
    MissingAnnouncementEntries,
)
from ris_stream.events import (
    Announce,
    AnnouncementVector,
    IPAddress,
    IPPrefix,
    RoutingEvent,
    Withdraw,
)
from ris_stream.feeds.ris.envelope import AnnounceBlock, RawEnvelope


def derive(envelope: RawEnvelope) -> list[RoutingEvent]:
    """
    Split an envelope into routing events.

    Returns an empty list, [Announce], [Withdraw] or [Announce, Withdraw].
    """
    announce = envelope.payload.announce
    withdrawals = envelope.payload.withdrawals

    _check_announce_block(announce)

    events: list[RoutingEvent] = []

    if announce.path is not None:
        events.append(
            Announce(
                timestamp=envelope.timestamp,
                origin_asn=envelope.peer_asn,
                as_path=tuple(announce.path),
                vectors=_vectors(announce),
                origin=announce.origin,
                communities=announce.community or (),
            )
        )

    if withdrawals is not None:
        events.append(
            Withdraw(
                timestamp=envelope.timestamp,
                origin_asn=envelope.peer_asn,
                prefixes=tuple(
                    parse_prefix(text, f"withdrawals[{i}]")
                    for i, text in enumerate(withdrawals)
                ),
            )
        )

    return events


def _check_announce_block(announce: AnnounceBlock) -> None:
    if announce.path is not None:
        if not announce.announcements:
            raise MissingAnnouncementEntries()
        return

    present = [
        name
        for name in ("community", "origin", "announcements")
        if getattr(announce, name) is not None
    ]
    if present:
        raise InconsistentAnnouncement(present)


def _vectors(announce: AnnounceBlock) -> tuple[AnnouncementVector, ...]:
    vectors = []
    for i, entry in enumerate(announce.announcements or ()):
        where = f"announcements[{i}]"
        vectors.append(
            AnnouncementVector(
                next_hop=parse_address(entry.next_hop, f"{where}.next_hop"),
                prefixes=tuple(
                    parse_prefix(text, f"{where}.prefixes[{j}]")
                    for j, text in enumerate(entry.prefixes)
                ),
            )
        )
    return tuple(vectors)


def parse_address(text: str, field: str) -> IPAddress:
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        raise InvalidAddress(field, text) from None


def parse_prefix(text: str, field: str) -> IPPrefix:
    """
    Parse an ``address/length`` prefix.

    The address is kept as written, host bits included, so the rendered
    text matches the wire. A bare address or a netmask in place of the
    length is invalid.
    """
    _, slash, length = text.partition("/")
    if not slash or not (length.isascii() and length.isdigit()):
        raise InvalidAddress(field, text)
    try:
        return ipaddress.ip_interface(text)
    except ValueError:
        raise InvalidAddress(field, text) from None
