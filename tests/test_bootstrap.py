import importlib

import pytest

from lambda_bridge.hookspecs import hookimpl
from lambda_bridge.loop import RuntimeEventLoop
from lambda_bridge.types import Message

bootstrap_module = importlib.import_module("lambda_bridge.bootstrap")


class _PluginFunctions:
    @hookimpl
    def register_functions(self, catalog) -> None:
        catalog.add("from_plugin", lambda event: event)


def test_build_hooks_registers_builtin_tracing_plugin() -> None:
    hooks = bootstrap_module.build_hooks(load_entrypoints=False)

    assert hooks.hook_report()["propagate_trace"] == ["builtin:xray"]


def test_build_hooks_loads_entrypoint_group(monkeypatch: pytest.MonkeyPatch) -> None:
    groups: list[str] = []

    def _load(self, group: str, name: str | None = None) -> int:
        groups.append(group)
        return 0

    monkeypatch.setattr("pluggy.PluginManager.load_setuptools_entrypoints", _load)

    bootstrap_module.build_hooks()

    assert groups == ["lambda_bridge"]


def test_build_catalog_merges_specs_and_plugins() -> None:
    hooks = bootstrap_module.build_hooks(load_entrypoints=False)
    hooks.register(_PluginFunctions(), name="functions")

    catalog = bootstrap_module.build_catalog(hooks, ["json:dumps"])

    assert catalog.names() == {"dumps", "from_plugin"}


def test_build_event_loop_uses_given_settings(make_settings) -> None:
    loop = bootstrap_module.build_event_loop(["json:dumps"], settings=make_settings(), load_entrypoints=False)

    assert isinstance(loop, RuntimeEventLoop)
    assert not loop.is_running()


def test_example_plugin_registers_functions_and_invokes_with_model() -> None:
    handlers = importlib.import_module("examples.handlers")
    hooks = bootstrap_module.build_hooks(load_entrypoints=False)
    hooks.register(handlers.plugin, name="examples")

    catalog = bootstrap_module.build_catalog(hooks, [])
    greet = catalog.get("greet")

    assert catalog.names() == {"greet", "word_count", "heartbeat"}
    assert greet.input_type is handlers.Greeting
    assert greet.invoke(Message(handlers.Greeting(name="Ada", language="fr"))) == {"message": "Bonjour, Ada!"}
    assert catalog.get("heartbeat").is_supplier
