"""Batch runner: the iteration loop.

Per iteration, in strict order:
- stop if termination was requested
- resolve the handler by name and run it once
- ping, if the batch pings
- apply the run-mode decision (stop, rerun now, or sleep then rerun)

There is no iteration cap. Handler exceptions are not caught here; they end
the loop and surface to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from batchloop.config.logging import NOTICE
from batchloop.config.settings import BatchConfig
from batchloop.contracts.interfaces import LivenessSink, SignalSource, coerce_rerun
from batchloop.errors import ConfigurationError
from batchloop.executor.state_machine import LoopDecision, RunMode, decide
from batchloop.registry.registry import HandlerRegistry
from batchloop.scheduler.sleeper import InterruptibleSleeper

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    SIGNAL = "signal"
    ONCE = "once"
    COMPLETED = "completed"


@dataclass(frozen=True)
class LoopOutcome:
    reason: StopReason
    iterations: int


@dataclass
class _LoopState:
    iterations: int = 0


class BatchRunner:
    def __init__(
        self,
        config: BatchConfig,
        *,
        handlers: HandlerRegistry,
        signals: SignalSource,
        liveness: LivenessSink,
        sleeper: InterruptibleSleeper | None = None,
    ):
        run_mode = RunMode.parse(config.run_mode, batch_name=config.name)
        if config.sleep_seconds < 0:
            raise ConfigurationError(f"Batch {config.name} has negative sleepSeconds={config.sleep_seconds}")
        handlers.require(config.handler)

        self._config = config
        self._mode = run_mode
        self._handlers = handlers
        self._signals = signals
        self._liveness = liveness
        self._sleeper = sleeper or InterruptibleSleeper(signals=signals, liveness=liveness)

    def run(self) -> LoopOutcome:
        cfg = self._config
        log_ctx = {"batch": cfg.name, "mode": self._mode.value, "handler": cfg.handler}

        logger.log(NOTICE, "Batch %s started, mode=%s", cfg.name, self._mode.value, extra={**log_ctx, "event": "batch_started"})
        if self._mode.sleeps:
            logger.log(
                NOTICE,
                "Sleep interval: %d seconds",
                cfg.sleep_seconds,
                extra={**log_ctx, "event": "batch_sleep_interval", "sleep_seconds": cfg.sleep_seconds},
            )

        state = _LoopState()
        while True:
            if self._signals.termination_requested():
                logger.info("Performing graceful shutdown on termination signal", extra={**log_ctx, "event": "batch_shutdown_signal"})
                return self._finish(StopReason.SIGNAL, state, log_ctx)

            handler = self._handlers.get(cfg.handler)
            rerun = coerce_rerun(cfg.handler, handler.run())
            state.iterations += 1

            if cfg.ping_enabled:
                self._liveness.ping()

            decision = decide(self._mode, rerun)
            if decision is LoopDecision.STOP:
                reason = StopReason.ONCE if self._mode is RunMode.ONCE else StopReason.COMPLETED
                return self._finish(reason, state, log_ctx)
            if decision is LoopDecision.SLEEP_THEN_RERUN:
                self._sleeper.sleep(cfg.sleep_seconds)

    def _finish(self, reason: StopReason, state: _LoopState, log_ctx: dict[str, str]) -> LoopOutcome:
        logger.debug(
            "Batch %s stopped after %d iteration(s)",
            self._config.name,
            state.iterations,
            extra={**log_ctx, "event": "batch_stopped", "reason": reason.value, "iteration": state.iterations},
        )
        return LoopOutcome(reason=reason, iterations=state.iterations)
