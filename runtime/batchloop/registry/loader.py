"""Handler reference loader (`package.module:attr` -> handler factory).

A handler reference names an importable attribute:
- a BatchHandler subclass (or any class with `run()`): instantiated per lookup
- a plain function: called per lookup, its return value is the rerun flag
- any other object with `run()`: shared across lookups
"""

from __future__ import annotations

import importlib
import inspect
from dataclasses import dataclass
from typing import Any, Callable

from batchloop.contracts.interfaces import BatchHandler
from batchloop.errors import HandlerNotFoundError

HandlerFactory = Callable[[], Any]


@dataclass(frozen=True)
class FunctionHandler(BatchHandler):
    func: Callable[[], Any]

    def run(self) -> Any:
        return self.func()


def is_import_ref(ref: str) -> bool:
    module, sep, attr = ref.partition(":")
    return bool(sep and module and attr)


def import_handler_factory(ref: str) -> HandlerFactory:
    if not is_import_ref(ref):
        raise HandlerNotFoundError(ref)
    module_name, _, attr_path = ref.partition(":")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerNotFoundError(ref) from e
    for part in attr_path.split("."):
        if not hasattr(target, part):
            raise HandlerNotFoundError(ref)
        target = getattr(target, part)

    if inspect.isclass(target):
        return target
    if callable(getattr(target, "run", None)):
        return lambda: target
    if callable(target):
        return lambda: FunctionHandler(target)
    raise HandlerNotFoundError(ref)


def noop_handler() -> None:
    """Does nothing and asks not to be rerun. Useful for smoke-testing a deployment."""
    return None
