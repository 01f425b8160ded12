"""Interruptible sleep between batch iterations.

Long sleeps are cut into fixed slices so that a termination request is seen
within one slice, and so the process keeps reporting liveness while idle.
The final remainder (at most one slice) is slept without a further check.

Elapsed wall-clock time is not tracked: every slice sleeps its nominal
length, so a long sleep can overrun the requested total by the time spent
in signal checks and pings.
"""

from __future__ import annotations

import time
from typing import Callable

from batchloop.contracts.interfaces import LivenessSink, SignalSource

SLICE_SECONDS = 10
PING_EVERY_SLICES = 4


class InterruptibleSleeper:
    def __init__(
        self,
        *,
        signals: SignalSource,
        liveness: LivenessSink,
        slice_seconds: int = SLICE_SECONDS,
        ping_every: int = PING_EVERY_SLICES,
        sleep_fn: Callable[[float], None] = time.sleep,
    ):
        if slice_seconds <= 0:
            raise ValueError("slice_seconds must be positive")
        if ping_every <= 0:
            raise ValueError("ping_every must be positive")
        self._signals = signals
        self._liveness = liveness
        self._slice = slice_seconds
        self._ping_every = ping_every
        self._sleep = sleep_fn

    def sleep(self, total_seconds: int) -> None:
        """Sleep `total_seconds`; return early if termination is requested."""
        remaining = total_seconds
        slices = 0
        while remaining > self._slice:
            if self._signals.termination_requested():
                return
            self._sleep(self._slice)
            remaining -= self._slice
            slices += 1
            # Pings here fire whether or not the batch itself pings.
            if slices == self._ping_every:
                self._liveness.ping()
                slices = 0
        if remaining > 0:
            self._sleep(remaining)
