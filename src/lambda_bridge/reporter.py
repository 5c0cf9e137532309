"""Convert invocation failures into runtime API error reports."""

from __future__ import annotations

import traceback

from loguru import logger

from lambda_bridge.errors import ErrorReportingError
from lambda_bridge.hook_runtime import HookRuntime
from lambda_bridge.transport import InvocationTransport
from lambda_bridge.types import ErrorReport


def _encodable(text: str) -> str:
    # Lone surrogates from decoded payloads cannot be written as UTF-8 JSON.
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def build_error_report(error: BaseException) -> ErrorReport:
    return ErrorReport(
        error_message=_encodable(str(error)),
        error_type=_encodable(type(error).__name__),
        stack_trace=_encodable("".join(traceback.format_exception(error))),
    )


class ErrorReporter:
    """Post structured error reports for failed invocations."""

    def __init__(self, transport: InvocationTransport, hooks: HookRuntime | None = None) -> None:
        self._transport = transport
        self._hooks = hooks

    def report(self, request_id: str, error: BaseException) -> ErrorReport:
        report = build_error_report(error)
        logger.error(
            "invocation.failed request_id={} type={} message={}",
            request_id,
            report.error_type,
            report.error_message,
        )
        if self._hooks is not None:
            self._hooks.notify_error(stage="invocation", error=error, request_id=request_id)
        body = report.to_bytes()
        try:
            self._transport.report_error(request_id, body)
        except Exception as exc:
            raise ErrorReportingError(request_id, exc) from exc
        return report
