"""Capability interfaces consumed by the batch loop.

The loop never owns its collaborators. It borrows them per call:
- BatchHandler: one unit of work, re-resolved by name every iteration
- SignalSource: poll-able termination request
- LivenessSink: heartbeat for external monitoring

Concrete implementations live in `process/` and `registry/`; tests use fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from batchloop.errors import HandlerContractError


class BatchHandler(ABC):
    @abstractmethod
    def run(self) -> bool | None:
        """Do one unit of work. Return True to be invoked again without the batch being finished."""


class SignalSource(ABC):
    @abstractmethod
    def termination_requested(self) -> bool:
        """True once the process has been asked to stop. Must not block."""


class LivenessSink(ABC):
    @abstractmethod
    def ping(self) -> None:
        """Report that the process is alive."""


def coerce_rerun(handler_name: str, result: Any) -> bool:
    """Map a handler result onto the rerun flag (None means stop)."""
    if result is None:
        return False
    if isinstance(result, bool):
        return result
    raise HandlerContractError(handler_name, result)
