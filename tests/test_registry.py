import sys
import types

import pytest

from batchloop.contracts.interfaces import BatchHandler, coerce_rerun
from batchloop.errors import ConfigurationError, HandlerContractError, HandlerNotFoundError
from batchloop.registry.loader import FunctionHandler, import_handler_factory, is_import_ref
from batchloop.registry.registry import HandlerRegistry


class CountingHandler(BatchHandler):
    instances = 0

    def __init__(self):
        type(self).instances += 1

    def run(self):
        return True


@pytest.fixture
def fake_jobs(monkeypatch):
    module = types.ModuleType("fake_jobs")
    module.CountingHandler = CountingHandler
    module.drain = lambda: False
    module.shared = CountingHandler.__new__(CountingHandler)
    module.nested = types.SimpleNamespace(handler=lambda: None)
    module.not_a_handler = 42
    monkeypatch.setitem(sys.modules, "fake_jobs", module)
    CountingHandler.instances = 0
    return module


def test_factory_called_per_lookup():
    registry = HandlerRegistry(allow_imports=False)
    registry.register("job", CountingHandler)
    CountingHandler.instances = 0

    first, second = registry.get("job"), registry.get("job")

    assert first is not second
    assert CountingHandler.instances == 2


def test_registered_instance_is_shared():
    registry = HandlerRegistry()
    handler = CountingHandler()
    registry.register_instance("job", handler)

    assert registry.get("job") is handler
    assert list(registry.names()) == ["job"]


def test_duplicate_and_empty_names_rejected():
    registry = HandlerRegistry()
    registry.register("job", CountingHandler)

    with pytest.raises(ConfigurationError):
        registry.register("job", CountingHandler)
    with pytest.raises(ConfigurationError):
        registry.register("", CountingHandler)


def test_unknown_plain_name():
    registry = HandlerRegistry()

    assert not registry.has("missing")
    with pytest.raises(HandlerNotFoundError) as exc:
        registry.require("missing")
    assert exc.value.handler_name == "missing"


def test_import_refs_disabled():
    registry = HandlerRegistry(allow_imports=False)

    assert not registry.has("fake_jobs:drain")
    with pytest.raises(HandlerNotFoundError):
        registry.get("fake_jobs:drain")


def test_has_agrees_with_get_for_import_refs(fake_jobs):
    registry = HandlerRegistry()

    assert registry.has("fake_jobs:drain")
    assert not registry.has("fake_jobs:absent")
    assert not registry.has("no_such_module_xyz:thing")
    with pytest.raises(HandlerNotFoundError):
        registry.get("fake_jobs:absent")


def test_import_class_is_instantiated_per_lookup(fake_jobs):
    registry = HandlerRegistry()

    registry.get("fake_jobs:CountingHandler")
    registry.get("fake_jobs:CountingHandler")

    assert CountingHandler.instances == 2


def test_import_function_is_wrapped(fake_jobs):
    handler = HandlerRegistry().get("fake_jobs:drain")

    assert isinstance(handler, FunctionHandler)
    assert handler.run() is False


def test_import_object_with_run_is_shared(fake_jobs):
    registry = HandlerRegistry()

    assert registry.get("fake_jobs:shared") is fake_jobs.shared


def test_import_nested_attribute(fake_jobs):
    assert HandlerRegistry().get("fake_jobs:nested.handler").run() is None


@pytest.mark.parametrize(
    "ref",
    ["fake_jobs:absent", "fake_jobs:not_a_handler", "no_such_module_xyz:thing", "fake_jobs", ":drain"],
)
def test_bad_import_refs(fake_jobs, ref):
    with pytest.raises(HandlerNotFoundError):
        import_handler_factory(ref)


def test_is_import_ref():
    assert is_import_ref("a.b:c")
    assert not is_import_ref("a.b")
    assert not is_import_ref("a:")


@pytest.mark.parametrize("result, expected", [(True, True), (False, False), (None, False)])
def test_coerce_rerun(result, expected):
    assert coerce_rerun("job", result) is expected


@pytest.mark.parametrize("result", [1, "true", [], {}])
def test_coerce_rerun_rejects_other_types(result):
    with pytest.raises(HandlerContractError):
        coerce_rerun("job", result)
