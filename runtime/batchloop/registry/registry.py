"""In-memory registry of batch handlers.

Handlers are registered as factories so that each lookup can hand back a
freshly wired instance. The batch loop resolves its handler through `get`
on every iteration and never keeps the reference beyond that call.

Unregistered names of the form `package.module:attr` are imported on first
use and then cached as a factory.
"""

from __future__ import annotations

from typing import Any, Iterable

from batchloop.errors import ConfigurationError, HandlerNotFoundError
from batchloop.registry.loader import HandlerFactory, import_handler_factory, is_import_ref


class HandlerRegistry:
    def __init__(self, factories: dict[str, HandlerFactory] | None = None, *, allow_imports: bool = True):
        self._factories: dict[str, HandlerFactory] = dict(factories or {})
        self._allow_imports = allow_imports

    def register(self, name: str, factory: HandlerFactory) -> None:
        if not name:
            raise ConfigurationError("Handler name must be a non-empty string")
        if name in self._factories:
            raise ConfigurationError(f"Duplicate handler name: {name}")
        self._factories[name] = factory

    def register_instance(self, name: str, handler: Any) -> None:
        self.register(name, lambda: handler)

    def has(self, name: str) -> bool:
        try:
            self._factory(name)
        except HandlerNotFoundError:
            return False
        return True

    def require(self, name: str) -> None:
        """Resolve the factory for `name` without creating a handler."""
        self._factory(name)

    def get(self, name: str) -> Any:
        return self._factory(name)()

    def names(self) -> Iterable[str]:
        return sorted(self._factories)

    def _factory(self, name: str) -> HandlerFactory:
        factory = self._factories.get(name)
        if factory is not None:
            return factory
        if not (self._allow_imports and is_import_ref(name)):
            raise HandlerNotFoundError(name)
        factory = import_handler_factory(name)
        self._factories[name] = factory
        return factory
