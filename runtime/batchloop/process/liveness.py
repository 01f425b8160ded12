"""Liveness sinks.

FileLivenessSink writes the current UTC time into a file on every ping, for
exec-style probes that compare the file's age against a threshold.
"""

from __future__ import annotations

from pathlib import Path

from batchloop.contracts.interfaces import LivenessSink
from batchloop.utils import format_rfc3339, utcnow


class FileLivenessSink(LivenessSink):
    def __init__(self, path: Path):
        self.path = path

    def ping(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(format_rfc3339(utcnow()) + "\n", encoding="utf-8")


class NullLivenessSink(LivenessSink):
    def ping(self) -> None:
        return None
