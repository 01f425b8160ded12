"""Batch runtime error types.

The runtime is fail-closed: a batch refuses to start when its configuration
cannot be fully resolved. Configuration errors are raised before the loop
starts; handler errors are never caught by the loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


class BatchRuntimeError(Exception):
    """Base class for runtime errors."""


class ConfigurationError(BatchRuntimeError):
    def __init__(self, message: str, details: Any | None = None):
        self.details = details
        super().__init__(message)


@dataclass(frozen=True)
class SchemaViolation:
    path: str
    message: str


class SchemaValidationError(ConfigurationError):
    def __init__(self, kind: str, violations: Iterable[SchemaViolation]):
        self.kind = kind
        self.violations = list(violations)
        super().__init__(f"{kind} failed schema validation ({len(self.violations)} violation(s))")


class HandlerNotFoundError(ConfigurationError):
    def __init__(self, handler_name: str):
        self.handler_name = handler_name
        super().__init__(f"Batch handler not found: {handler_name}")


class HandlerContractError(BatchRuntimeError):
    def __init__(self, handler_name: str, result: Any):
        self.handler_name = handler_name
        self.result = result
        super().__init__(
            f"Batch handler {handler_name} returned {type(result).__name__}; expected bool or None"
        )
