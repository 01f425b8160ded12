"""OS termination signals as a poll-able flag.

Signal handlers only set the flag. The batch loop polls it at iteration
boundaries and between sleep slices, so a handler already running is
always allowed to finish.
"""

from __future__ import annotations

import signal
import sys
from types import FrameType
from typing import Any

from batchloop.contracts.interfaces import SignalSource


def _default_signals() -> tuple[int, ...]:
    if sys.platform == "win32":
        return (signal.SIGINT,)
    return (signal.SIGTERM, signal.SIGINT)


class TerminationFlag(SignalSource):
    def __init__(self, signals: tuple[int, ...] | None = None):
        self._signals = signals if signals is not None else _default_signals()
        self._requested = False
        self._previous: dict[int, Any] = {}

    def termination_requested(self) -> bool:
        return self._requested

    def request(self) -> None:
        self._requested = True

    def install(self) -> "TerminationFlag":
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self._handle)
        return self

    def uninstall(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous)
        self._previous.clear()

    def __enter__(self) -> "TerminationFlag":
        return self.install()

    def __exit__(self, *exc: object) -> None:
        self.uninstall()

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        self._requested = True
