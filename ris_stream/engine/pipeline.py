"""
Stream processor: raw RIS Live frames in, routing events out.

Each message goes through decode -> derive -> publish on its own. A message
that fails to decode or derive is logged, counted and dropped; the next one
is processed as if nothing happened. In strict mode the first such failure
is raised instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ris_stream.engine.deriver import derive
from ris_stream.engine.event_bus import EventBus
from ris_stream.errors import (
    DecodeError,
    DeriveError,
    UnrecognizedPacketKind,
    UnsupportedMessageType,
)
from ris_stream.events import Announce, RoutingEvent, Withdraw
from ris_stream.feeds.ris.envelope import decode

LOG = logging.getLogger(__name__)


def process_message(raw: str | bytes) -> list[RoutingEvent]:
    """Decode and derive a single message. Errors propagate."""
    return derive(decode(raw))


@dataclass
class ProcessingStats:
    messages: int = 0
    events: int = 0
    announcements: int = 0
    withdrawals: int = 0
    skipped: int = 0
    decode_errors: int = 0
    derive_errors: int = 0

    @property
    def errors(self) -> int:
        return self.decode_errors + self.derive_errors


class StreamProcessor:
    """
    Runs the pipeline over a source of raw messages and publishes the
    resulting events on an EventBus.
    """

    def __init__(self, event_bus: EventBus, strict: bool = False) -> None:
        self.event_bus = event_bus
        self.strict = strict
        self.stats = ProcessingStats()

    def process(self, raw: str | bytes) -> list[RoutingEvent]:
        """
        Process one message and publish its events in order.

        Raises DecodeError or DeriveError; nothing is published in that case.
        """
        events = process_message(raw)
        for event in events:
            self.event_bus.publish(event)
            self.stats.events += 1
            if isinstance(event, Announce):
                self.stats.announcements += 1
            elif isinstance(event, Withdraw):
                self.stats.withdrawals += 1
        return events

    def run(self, messages: Iterable[str | bytes], limit: int | None = None) -> ProcessingStats:
        """
        Consume ``messages`` until exhausted or ``limit`` messages were read.
        """
        if limit is not None and limit <= 0:
            return self.stats

        for raw in messages:
            self.stats.messages += 1
            try:
                self.process(raw)
            except (UnrecognizedPacketKind, UnsupportedMessageType) as exc:
                self.stats.skipped += 1
                LOG.debug("skipping message: %s", exc)
            except DecodeError as exc:
                self.stats.decode_errors += 1
                LOG.warning("dropping undecodable message: %s", exc)
                if self.strict:
                    raise
            except DeriveError as exc:
                self.stats.derive_errors += 1
                LOG.warning("dropping inconsistent message: %s", exc)
                if self.strict:
                    raise

            if limit is not None and self.stats.messages >= limit:
                break

        return self.stats
