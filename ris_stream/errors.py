"""
Error taxonomy for the RIS Live ingestion pipeline.

Every failure raised while turning a raw message into routing events is a
subclass of either DecodeError (the envelope itself is unusable) or
DeriveError (the envelope decoded but its contents are inconsistent or
carry unparseable addresses). Both derive from ValueError so callers that
only care about "bad input" can catch that.

The stream processor catches these per message. Nothing in this module
should ever escape as an unrecoverable fault.
"""

from __future__ import annotations

from typing import Iterable


class DecodeError(ValueError):
    """Base class for envelope decoding failures."""


class MalformedEnvelope(DecodeError):
    """Invalid JSON, a missing required field or a field of the wrong type."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"malformed envelope: {detail}")
        self.detail = detail


class UnrecognizedPacketKind(DecodeError):
    """The top-level packet is not a ``ris_message``."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"unrecognized packet kind {kind!r}")
        self.kind = kind


class UnsupportedMessageType(DecodeError):
    """The wrapped BGP message is not an ``UPDATE``."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"unsupported message type {kind!r}")
        self.kind = kind


class InvalidAsn(DecodeError):
    """``peer_asn`` is not a decimal 32-bit AS number."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid peer_asn {value!r}")
        self.value = value


class DeriveError(ValueError):
    """Base class for failures while deriving routing events."""


class InconsistentAnnouncement(DeriveError):
    """Announcement attributes are present without an AS path."""

    def __init__(self, present: Iterable[str]) -> None:
        self.present = tuple(present)
        super().__init__(
            "announcement attributes without a path: " + ", ".join(self.present)
        )


class MissingAnnouncementEntries(DeriveError):
    """An AS path is present but there are no announcement entries."""

    def __init__(self) -> None:
        super().__init__("path present but announcements missing or empty")


class InvalidAddress(DeriveError):
    """An IP address or CIDR prefix could not be parsed."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"invalid address in {field}: {value!r}")
        self.field = field
        self.value = value
