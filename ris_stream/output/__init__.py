# ris_stream/output/__init__.py
from .base import Adapter
from .adapter import EventAdapter, RenderedLines, render, write_event_lines
from .line_adapter import AnnounceLineAdapter, WithdrawLineAdapter, format_path

__all__ = [
    "Adapter",
    "EventAdapter",
    "RenderedLines",
    "render",
    "write_event_lines",
    "AnnounceLineAdapter",
    "WithdrawLineAdapter",
    "format_path",
]
