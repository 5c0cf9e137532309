"""Background runtime API event loop."""

from __future__ import annotations

import threading

import requests
from loguru import logger

from lambda_bridge.codec import JsonCodec
from lambda_bridge.config import Settings
from lambda_bridge.errors import ConfigurationError, ErrorReportingError
from lambda_bridge.hook_runtime import HookRuntime
from lambda_bridge.reporter import ErrorReporter
from lambda_bridge.resolver import FunctionResolver
from lambda_bridge.state import LoopState
from lambda_bridge.transport import InvocationTransport
from lambda_bridge.types import (
    FunctionRegistry,
    InvocationEvent,
    IterationOutcome,
    OutcomeKind,
    RuntimeEndpoint,
)

WORKER_THREAD_NAME = "lambda-bridge-event-loop"


def endpoint_from_settings(settings: Settings) -> RuntimeEndpoint:
    host = (settings.runtime_api or "").strip()
    if not host:
        raise ConfigurationError("AWS_LAMBDA_RUNTIME_API is not set")
    return RuntimeEndpoint(host=host)


class RuntimeEventLoop:
    """Poll, invoke and respond, one invocation at a time, on a worker thread."""

    def __init__(
        self,
        settings: Settings,
        catalog: FunctionRegistry,
        *,
        codec: JsonCodec | None = None,
        hooks: HookRuntime | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._codec = codec or JsonCodec()
        self._hooks = hooks or HookRuntime()
        self._session = session
        self._resolver = FunctionResolver(catalog, settings)
        self._state = LoopState()
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._worker: threading.Thread | None = None
        self._transport: InvocationTransport | None = None
        self._reporter: ErrorReporter | None = None
        self.fatal_outcome: IterationOutcome | None = None

    def start(self) -> None:
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                logger.warning("runtime.loop.start ignored reason=worker_alive")
                return
            endpoint = endpoint_from_settings(self._settings)
            if not self._state.start():
                return
            self._cancel = threading.Event()
            self.fatal_outcome = None
            self._transport = None
            self._ensure_transport(endpoint)
            self._worker = threading.Thread(
                target=self._run,
                args=(self._cancel,),
                name=WORKER_THREAD_NAME,
                daemon=True,
            )
            self._worker.start()

    def stop(self) -> None:
        self._cancel.set()
        if self._state.stop():
            logger.info("runtime.loop.stop")
        transport = self._transport
        if transport is not None:
            transport.close()

    def is_running(self) -> bool:
        return self._state.is_running()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker; return True once it has exited."""
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def process_next(self, cancel: threading.Event | None = None) -> IterationOutcome:
        """Run one poll/resolve/invoke/respond cycle."""

        if cancel is None:
            cancel = self._cancel
        transport = self._ensure_transport()
        was_running = self.is_running()
        event = transport.poll(cancel)
        if event is None:
            if was_running and not cancel.is_set() and not self.is_running():
                return IterationOutcome(OutcomeKind.TRANSPORT_FAILED, error=transport.last_error)
            return IterationOutcome(OutcomeKind.SKIPPED, error=transport.last_error)

        with logger.contextualize(request_id=event.request_id):
            try:
                self._invoke(event, transport)
            except Exception as exc:
                return self._report_failure(event.request_id, exc)
        return IterationOutcome(OutcomeKind.RESPONDED, request_id=event.request_id)

    def _run(self, cancel: threading.Event) -> None:
        logger.info("runtime.loop.enter endpoint={}", self._transport.endpoint.next_url if self._transport else "-")
        delay = self._settings.poll_retry_delay_seconds
        while self.is_running():
            outcome = self.process_next(cancel)
            if outcome.fatal:
                self._halt(outcome)
                break
            if outcome.kind is OutcomeKind.SKIPPED and delay > 0:
                cancel.wait(delay)
        logger.info("runtime.loop.exit")

    def _invoke(self, event: InvocationEvent, transport: InvocationTransport) -> None:
        logger.info("invocation.start content_type={}", event.content_type)
        if event.trace_id:
            self._hooks.call_many("propagate_trace", trace_id=event.trace_id)

        function = self._resolver.locate(event.content_type, event.headers)
        message = self._codec.decode(event.body, function.input_type, function.is_supplier, headers=event.headers)
        logger.debug("invocation.message payload_type={}", type(message.payload).__name__)

        result = function.invoke(message)
        logger.debug("invocation.result function={} type={}", function.name, type(result).__name__)
        body = self._codec.encode(message, result, function.output_type)
        transport.respond(event.request_id, body)

    def _report_failure(self, request_id: str, error: Exception) -> IterationOutcome:
        reporter = self._reporter or ErrorReporter(self._ensure_transport(), self._hooks)
        try:
            reporter.report(request_id, error)
        except ErrorReportingError as reporting_error:
            logger.opt(exception=reporting_error).critical("runtime.error_report.failed request_id={}", request_id)
            return IterationOutcome(OutcomeKind.REPORTING_FAILED, request_id=request_id, error=reporting_error)
        return IterationOutcome(OutcomeKind.INVOCATION_FAILED, request_id=request_id, error=error)

    def _halt(self, outcome: IterationOutcome) -> None:
        self.fatal_outcome = outcome
        self._state.stop()
        logger.error("runtime.loop.halt reason={} request_id={}", outcome.kind, outcome.request_id or "-")

    def _ensure_transport(self, endpoint: RuntimeEndpoint | None = None) -> InvocationTransport:
        if self._transport is None:
            self._transport = InvocationTransport(
                endpoint or endpoint_from_settings(self._settings),
                self._state,
                session=self._session,
                connect_timeout=self._settings.connect_timeout_seconds,
            )
            self._reporter = ErrorReporter(self._transport, self._hooks)
        return self._transport
