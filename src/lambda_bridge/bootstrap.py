"""Runtime bootstrap helpers."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from lambda_bridge import tracing
from lambda_bridge.config import Settings, load_settings
from lambda_bridge.hook_runtime import HookRuntime
from lambda_bridge.loop import RuntimeEventLoop
from lambda_bridge.registry import FunctionCatalog


def build_hooks(*, load_entrypoints: bool = True) -> HookRuntime:
    """Create the hook runtime with the builtin and installed plugins."""

    hooks = HookRuntime()
    hooks.register(tracing.plugin, name="builtin:xray")
    if load_entrypoints:
        loaded = hooks.load_entrypoints()
        if loaded:
            logger.info("plugins.loaded count={}", loaded)
    return hooks


def build_catalog(hooks: HookRuntime, function_specs: Iterable[str] = ()) -> FunctionCatalog:
    """Collect functions from `module:attribute` specs and plugin hooks."""

    catalog = FunctionCatalog()
    for spec in function_specs:
        registered = catalog.load(spec)
        logger.info("function.register name={} source={}", registered.name, registered.source)
    hooks.call_many("register_functions", catalog=catalog)
    return catalog


def build_event_loop(
    function_specs: Iterable[str] = (),
    *,
    settings: Settings | None = None,
    load_entrypoints: bool = True,
) -> RuntimeEventLoop:
    """Build a runtime event loop wired with settings, plugins and functions."""

    settings = settings or load_settings()
    hooks = build_hooks(load_entrypoints=load_entrypoints)
    catalog = build_catalog(hooks, function_specs)
    return RuntimeEventLoop(settings, catalog, hooks=hooks)
