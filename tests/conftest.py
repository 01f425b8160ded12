from __future__ import annotations

from typing import Callable

import pytest

from batchloop.contracts.interfaces import BatchHandler, LivenessSink, SignalSource
from batchloop.registry.registry import HandlerRegistry
from batchloop.scheduler.sleeper import InterruptibleSleeper


class EventLog:
    """Ordered record of everything the loop touched."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def add(self, kind: str, value: object = None) -> None:
        self.events.append((kind, value))

    def kinds(self) -> list[str]:
        return [k for k, _ in self.events]

    def count(self, kind: str) -> int:
        return sum(1 for k, _ in self.events if k == kind)

    def values(self, kind: str) -> list[object]:
        return [v for k, v in self.events if k == kind]


class CallbackSignals(SignalSource):
    def __init__(self, log: EventLog, predicate: Callable[[], bool]):
        self._log = log
        self._predicate = predicate

    def termination_requested(self) -> bool:
        answer = bool(self._predicate())
        self._log.add("check", answer)
        return answer


class RecordingSink(LivenessSink):
    def __init__(self, log: EventLog):
        self._log = log

    def ping(self) -> None:
        self._log.add("ping")


class ScriptedHandler(BatchHandler):
    """Returns the scripted results in order, then repeats the last one."""

    def __init__(self, log: EventLog, results: list[object]):
        self._log = log
        self._results = list(results)
        self.calls = 0

    def run(self):
        result = self._results[min(self.calls, len(self._results) - 1)]
        self.calls += 1
        self._log.add("run", result)
        return result


@pytest.fixture
def log() -> EventLog:
    return EventLog()


@pytest.fixture
def sink(log: EventLog) -> RecordingSink:
    return RecordingSink(log)


@pytest.fixture
def recorded_sleep(log: EventLog) -> Callable[[float], None]:
    return lambda seconds: log.add("sleep", seconds)


@pytest.fixture
def make_sleeper(log: EventLog, sink: RecordingSink, recorded_sleep):
    def _make(signals: SignalSource) -> InterruptibleSleeper:
        return InterruptibleSleeper(signals=signals, liveness=sink, sleep_fn=recorded_sleep)

    return _make


@pytest.fixture
def registry_with():
    def _make(name: str, handler: BatchHandler) -> HandlerRegistry:
        registry = HandlerRegistry(allow_imports=False)
        registry.register_instance(name, handler)
        return registry

    return _make
