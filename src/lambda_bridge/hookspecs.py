"""Pluggy hook namespace and runtime hook specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from lambda_bridge.registry import FunctionCatalog

LAMBDA_BRIDGE_HOOK_NAMESPACE = "lambda_bridge"
hookspec = pluggy.HookspecMarker(LAMBDA_BRIDGE_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(LAMBDA_BRIDGE_HOOK_NAMESPACE)


class LambdaBridgeHookSpecs:
    """Hook contract for lambda-bridge extensions."""

    @hookspec
    def register_functions(self, catalog: FunctionCatalog) -> None:
        """Register functions into the catalog before the loop starts."""

    @hookspec
    def propagate_trace(self, trace_id: str) -> None:
        """Receive the trace id of the invocation about to run."""

    @hookspec
    def on_error(self, stage: str, error: BaseException, request_id: str | None) -> None:
        """Observe invocation failures before they are reported upstream."""
