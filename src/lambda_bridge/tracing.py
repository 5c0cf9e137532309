"""Builtin trace propagation plugin."""

from __future__ import annotations

import os

from loguru import logger

from lambda_bridge.hookspecs import hookimpl

XRAY_TRACE_ENV = "_X_AMZN_TRACE_ID"


class XRayTracePlugin:
    """Expose the invocation trace id where the AWS X-Ray SDK looks for it."""

    @hookimpl
    def propagate_trace(self, trace_id: str) -> None:
        logger.debug("trace.propagate trace_id={}", trace_id)
        os.environ[XRAY_TRACE_ENV] = trace_id


plugin = XRayTracePlugin()
