# ris_stream/output/adapter.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from ris_stream.events import Announce, RoutingEvent, Withdraw

from .base import Adapter
from .line_adapter import AnnounceLineAdapter, WithdrawLineAdapter

LOG = logging.getLogger(__name__)


class EventAdapter:
    """Dispatch events to the adapter registered for their class."""

    def __init__(self):
        self.adapters: dict[type, Adapter] = {
            Announce: AnnounceLineAdapter(),
            Withdraw: WithdrawLineAdapter(),
        }

    def transform(self, event: RoutingEvent) -> list[str]:
        adapter = self.adapters.get(type(event))
        if adapter:
            return list(adapter.transform(event))
        return []


class RenderedLines:
    """
    The lines of one event, produced on demand.

    Nothing is formatted until iteration, and every iteration starts again
    from the first line.
    """

    def __init__(self, event: RoutingEvent, adapter: EventAdapter):
        self.event = event
        self._adapter = adapter

    def __iter__(self) -> Iterator[str]:
        adapter = self._adapter.adapters.get(type(self.event))
        if adapter is None:
            return iter(())
        return iter(adapter.transform(self.event))

    def __repr__(self) -> str:
        return f"RenderedLines({self.event!r})"


_DEFAULT = EventAdapter()


def render(event: RoutingEvent) -> RenderedLines:
    """Render one event into its canonical lines, one per prefix."""
    return RenderedLines(event, _DEFAULT)


def write_event_lines(events: Iterable[RoutingEvent], output: TextIO | str | Path) -> int:
    """
    Write the lines of every event, in order, to a stream or file path.

    Returns the number of lines written.
    """
    if isinstance(output, (str, Path)):
        output_file = Path(output)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with output_file.open("w", encoding="utf-8") as f:
            return write_event_lines(events, f)

    count = 0
    for event in events:
        for line in render(event):
            output.write(line + "\n")
            count += 1
    LOG.debug("wrote %d lines", count)
    return count
