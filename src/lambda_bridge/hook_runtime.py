"""Hook execution runtime with per-plugin fault isolation."""

from __future__ import annotations

from typing import Any

import pluggy
from loguru import logger

from lambda_bridge.hookspecs import LAMBDA_BRIDGE_HOOK_NAMESPACE, LambdaBridgeHookSpecs


class HookRuntime:
    """Safe wrapper around pluggy hook execution."""

    def __init__(self, plugin_manager: pluggy.PluginManager | None = None) -> None:
        if plugin_manager is None:
            plugin_manager = pluggy.PluginManager(LAMBDA_BRIDGE_HOOK_NAMESPACE)
            plugin_manager.add_hookspecs(LambdaBridgeHookSpecs)
        self._plugin_manager = plugin_manager

    def register(self, plugin: object, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def load_entrypoints(self) -> int:
        """Load plugins published under the `lambda_bridge` entry point group."""

        return self._plugin_manager.load_setuptools_entrypoints(LAMBDA_BRIDGE_HOOK_NAMESPACE)

    def call_many(self, hook_name: str, **kwargs: Any) -> list[Any]:
        """Run all implementations and collect successful return values."""

        results: list[Any] = []
        for impl in self._iter_hookimpls(hook_name):
            call_kwargs = self._kwargs_for_impl(impl, kwargs)
            try:
                value = impl.function(**call_kwargs)
            except Exception as error:
                self._log_hook_failure(hook_name, impl)
                if hook_name != "on_error":
                    self.notify_error(stage=f"{hook_name}:{impl.plugin_name or '<unknown>'}", error=error)
                continue
            results.append(value)
        return results

    def notify_error(self, *, stage: str, error: BaseException, request_id: str | None = None) -> None:
        """Call on_error hooks, swallowing observer failures."""

        self.call_many("on_error", stage=stage, error=error, request_id=request_id)

    def hook_report(self) -> dict[str, list[str]]:
        """Build a hook->plugins mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name, hook_caller in sorted(self._plugin_manager.hook.__dict__.items()):
            if hook_name.startswith("_") or not hasattr(hook_caller, "get_hookimpls"):
                continue
            plugin_names = [impl.plugin_name for impl in hook_caller.get_hookimpls()]
            if plugin_names:
                report[hook_name] = plugin_names
        return report

    def _iter_hookimpls(self, hook_name: str) -> list[Any]:
        hook = getattr(self._plugin_manager.hook, hook_name, None)
        if hook is None or not hasattr(hook, "get_hookimpls"):
            return []
        return list(reversed(hook.get_hookimpls()))

    @staticmethod
    def _log_hook_failure(hook_name: str, impl: Any) -> None:
        logger.opt(exception=True).warning(
            "hook.call_failed hook={} plugin={}",
            hook_name,
            impl.plugin_name or "<unknown>",
        )

    @staticmethod
    def _kwargs_for_impl(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {name: kwargs[name] for name in impl.argnames if name in kwargs}
