"""
RIS Live envelope decoder.

RIS Live wraps every BGP message it relays in a packet of the form::

    {"type": "ris_message", "data": {"timestamp": ..., "peer": ...,
     "peer_asn": "3333", "id": ..., "host": "rrc00", "type": "UPDATE", ...}}

This module turns one such text frame into a RawEnvelope. Only the shape of
the message is checked here. Whether the announce and withdraw fields make
sense together is the deriver's job (see ris_stream.engine.deriver).

Fields that are explicitly ``null`` on the wire are treated as absent.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ris_stream.errors import (
    InvalidAsn,
    MalformedEnvelope,
    UnrecognizedPacketKind,
    UnsupportedMessageType,
)

PACKET_KIND = "ris_message"
UPDATE = "UPDATE"

MAX_ASN = 2**32 - 1


@dataclass(frozen=True)
class AnnouncementEntry:
    """A set of prefixes reachable through one next hop, still as text."""

    next_hop: str
    prefixes: tuple[str, ...]


@dataclass(frozen=True)
class AnnounceBlock:
    """
    The announcement half of an UPDATE.

    The wire format makes this all-or-nothing: when ``path`` is absent the
    other three fields should be absent too. That rule is not enforced here.
    """

    path: tuple[int, ...] | None = None
    community: tuple[tuple[int, ...], ...] | None = None
    origin: str | None = None
    announcements: tuple[AnnouncementEntry, ...] | None = None


@dataclass(frozen=True)
class UpdatePayload:
    announce: AnnounceBlock
    withdrawals: tuple[str, ...] | None = None


@dataclass(frozen=True)
class RawEnvelope:
    """A decoded ``ris_message`` carrying an UPDATE."""

    timestamp: float
    peer: str
    peer_asn: int
    id: str
    host: str
    payload: UpdatePayload


def decode(raw_text: str | bytes) -> RawEnvelope:
    """
    Decode one RIS Live text frame.

    Raises:
        MalformedEnvelope: invalid JSON or a field of the wrong shape
        UnrecognizedPacketKind: the packet is not a ris_message
        UnsupportedMessageType: the message is not an UPDATE
        InvalidAsn: peer_asn is not a decimal 32-bit number
    """
    if isinstance(raw_text, (bytes, bytearray)):
        try:
            raw_text = raw_text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedEnvelope(f"not valid UTF-8: {exc}") from None

    try:
        packet = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise MalformedEnvelope(f"invalid JSON: {exc}") from None

    if not isinstance(packet, dict):
        raise MalformedEnvelope("packet is not a JSON object")

    if "type" not in packet:
        raise MalformedEnvelope("missing field 'type'")
    if packet["type"] != PACKET_KIND:
        raise UnrecognizedPacketKind(packet["type"])

    data = packet.get("data")
    if not isinstance(data, dict):
        raise MalformedEnvelope("'data' must be an object")

    if "type" not in data:
        raise MalformedEnvelope("missing field 'data.type'")
    if data["type"] != UPDATE:
        raise UnsupportedMessageType(data["type"])

    timestamp = _require(data, "timestamp", (int, float))
    peer = _require(data, "peer", str)
    peer_asn = _parse_asn(_require(data, "peer_asn", str))
    msg_id = _require(data, "id", str)
    host = _require(data, "host", str)

    return RawEnvelope(
        timestamp=float(timestamp),
        peer=peer,
        peer_asn=peer_asn,
        id=msg_id,
        host=host,
        payload=_decode_update(data),
    )


def _decode_update(data: dict[str, Any]) -> UpdatePayload:
    path = data.get("path")
    if path is not None:
        path = tuple(_asn_list(path, "path"))

    community = data.get("community")
    if community is not None:
        if not isinstance(community, list):
            raise MalformedEnvelope("'community' must be a list")
        # Standard communities are pairs, large communities triples; both pass through.
        community = tuple(
            tuple(_asn_list(values, f"community[{i}]")) for i, values in enumerate(community)
        )

    origin = data.get("origin")
    if origin is not None and not isinstance(origin, str):
        raise MalformedEnvelope("'origin' must be a string")

    announcements = data.get("announcements")
    if announcements is not None:
        if not isinstance(announcements, list):
            raise MalformedEnvelope("'announcements' must be a list")
        announcements = tuple(
            _decode_entry(entry, f"announcements[{i}]")
            for i, entry in enumerate(announcements)
        )

    withdrawals = data.get("withdrawals")
    if withdrawals is not None:
        withdrawals = tuple(_string_list(withdrawals, "withdrawals"))

    return UpdatePayload(
        announce=AnnounceBlock(
            path=path,
            community=community,
            origin=origin,
            announcements=announcements,
        ),
        withdrawals=withdrawals,
    )


def _decode_entry(entry: Any, where: str) -> AnnouncementEntry:
    if not isinstance(entry, dict):
        raise MalformedEnvelope(f"'{where}' must be an object")

    next_hop = entry.get("next_hop")
    if not isinstance(next_hop, str):
        raise MalformedEnvelope(f"'{where}.next_hop' must be a string")

    if "prefixes" not in entry:
        raise MalformedEnvelope(f"missing field '{where}.prefixes'")
    prefixes = _string_list(entry["prefixes"], f"{where}.prefixes")
    if not prefixes:
        raise MalformedEnvelope(f"'{where}.prefixes' must not be empty")

    return AnnouncementEntry(next_hop=next_hop, prefixes=tuple(prefixes))


def _require(data: dict[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in data or data[key] is None:
        raise MalformedEnvelope(f"missing field '{key}'")
    value = data[key]
    # bool is an int subclass; JSON true/false is never a timestamp
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedEnvelope(f"field '{key}' has wrong type {type(value).__name__}")
    return value


def _parse_asn(text: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise InvalidAsn(text)
    value = int(text)
    if value > MAX_ASN:
        raise InvalidAsn(text)
    return value


def _asn_list(value: Any, where: str) -> list[int]:
    if not isinstance(value, list):
        raise MalformedEnvelope(f"'{where}' must be a list")
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= MAX_ASN:
            raise MalformedEnvelope(f"'{where}' holds a non 32-bit value {item!r}")
    return list(value)


def _string_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedEnvelope(f"'{where}' must be a list of strings")
    return list(value)
