"""Run-mode state machine.

Each iteration of the batch loop ends in one of three decisions:

    stop | rerun_now | sleep_then_rerun

The handler only says whether it wants to run again. What that means is
decided here, from the configured run mode:

    mode            rerun               no rerun
    continuous      rerun_now           sleep_then_rerun
    once            stop                stop
    complete        rerun_now           stop
    complete-slow   sleep_then_rerun    stop
"""

from __future__ import annotations

from enum import Enum

from batchloop.errors import ConfigurationError


class RunMode(str, Enum):
    CONTINUOUS = "continuous"
    ONCE = "once"
    TO_COMPLETION = "complete"
    TO_COMPLETION_SLOW = "complete-slow"

    @classmethod
    def parse(cls, value: object, *, batch_name: str = "?") -> "RunMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = "|".join(m.value for m in cls)
            raise ConfigurationError(
                f"Batch {batch_name} has invalid mode={value} configured (expected {allowed})",
                details={"batch": batch_name, "mode": value},
            ) from None

    @property
    def sleeps(self) -> bool:
        """True if some outcome of this mode sleeps before the next iteration."""
        return self in (RunMode.CONTINUOUS, RunMode.TO_COMPLETION_SLOW)


class LoopDecision(str, Enum):
    STOP = "stop"
    RERUN_NOW = "rerun_now"
    SLEEP_THEN_RERUN = "sleep_then_rerun"


# (mode, rerun) -> decision
_DISPATCH: dict[tuple[RunMode, bool], LoopDecision] = {
    (RunMode.CONTINUOUS, True): LoopDecision.RERUN_NOW,
    (RunMode.CONTINUOUS, False): LoopDecision.SLEEP_THEN_RERUN,
    (RunMode.ONCE, True): LoopDecision.STOP,
    (RunMode.ONCE, False): LoopDecision.STOP,
    (RunMode.TO_COMPLETION, True): LoopDecision.RERUN_NOW,
    (RunMode.TO_COMPLETION, False): LoopDecision.STOP,
    (RunMode.TO_COMPLETION_SLOW, True): LoopDecision.SLEEP_THEN_RERUN,
    (RunMode.TO_COMPLETION_SLOW, False): LoopDecision.STOP,
}


def decide(mode: RunMode, rerun: bool) -> LoopDecision:
    return _DISPATCH[(mode, bool(rerun))]
