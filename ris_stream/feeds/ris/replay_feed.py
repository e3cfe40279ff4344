"""
Offline replay of captured RIS Live traffic.

A capture is a text file with one raw JSON packet per line, as produced by
dumping RIS Live frames to disk. Blank lines are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

LOG = logging.getLogger(__name__)


class ReplayFeed:
    """Iterate the raw packets of a capture file. Can be iterated repeatedly."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def __iter__(self) -> Iterator[str]:
        LOG.info("replaying %s", self.path)
        with self.path.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    yield line
