"""
Looking-glass style line adapters.

One line per announced or withdrawn prefix::

     65000|A 10.0.0.0/24         |65001  65002
     65000|W 10.0.0.0/24

Column widths are fixed: peer AS right-aligned in 6, prefix left-aligned in
20, each path hop left-aligned in 6. Values wider than their column are
never truncated.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from ris_stream.events import Announce, RoutingEvent, Withdraw

from .base import Adapter


def format_path(as_path: Iterable[int]) -> str:
    return " ".join(f"{asn:<6}" for asn in as_path)


class AnnounceLineAdapter(Adapter):
    """Render an Announce as ``asn|A prefix|path`` lines."""

    def transform(self, event: RoutingEvent) -> Iterator[str]:
        if not isinstance(event, Announce):
            return

        path = format_path(event.as_path)
        for vector in event.vectors:
            for prefix in vector.prefixes:
                yield f"{event.origin_asn:>6}|A {str(prefix):<20}|{path}"


class WithdrawLineAdapter(Adapter):
    """Render a Withdraw as ``asn|W prefix`` lines."""

    def transform(self, event: RoutingEvent) -> Iterator[str]:
        if not isinstance(event, Withdraw):
            return

        for prefix in event.prefixes:
            yield f"{event.origin_asn:>6}|W {str(prefix):<20}"
