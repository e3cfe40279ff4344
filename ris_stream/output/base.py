# ris_stream/output/base.py
from __future__ import annotations
from typing import Iterable

from ris_stream.events import RoutingEvent


class Adapter:
    """Turns one routing event into zero or more text lines.

    Subclasses handle a single event class and yield nothing for any other.
    """

    def transform(self, event: RoutingEvent) -> Iterable[str]:
        """Yield the event's lines in prefix order."""
        return []
