"""HTTP client for the Lambda runtime API invocation endpoints."""

from __future__ import annotations

import platform
import threading
from importlib.metadata import PackageNotFoundError, version

import requests
from loguru import logger

from lambda_bridge.state import LoopState
from lambda_bridge.types import InvocationEvent, RuntimeEndpoint

PRODUCT_NAME = "lambda-bridge"
UNKNOWN_VERSION = "UNKNOWN-VERSION"


def package_version() -> str:
    try:
        return version(PRODUCT_NAME)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


def default_user_agent() -> str:
    return f"{PRODUCT_NAME}/{platform.python_version()}-{package_version()}"


def _is_socket_failure(error: BaseException) -> bool:
    return isinstance(error, (requests.ConnectionError, ConnectionError))


class InvocationTransport:
    """Blocking calls for next-event, response and error endpoints."""

    def __init__(
        self,
        endpoint: RuntimeEndpoint,
        state: LoopState,
        *,
        session: requests.Session | None = None,
        user_agent: str | None = None,
        connect_timeout: float | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._state = state
        self.last_error: BaseException | None = None
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent or default_user_agent()
        # Next-event is a long poll, so only the connect phase is bounded.
        self._timeout = (connect_timeout, None)

    def poll(self, cancel: threading.Event) -> InvocationEvent | None:
        """Fetch the next event; None means skip this iteration."""

        self.last_error = None
        if cancel.is_set():
            return None
        logger.debug("runtime.poll url={}", self.endpoint.next_url)
        try:
            response = self._session.get(self.endpoint.next_url, timeout=self._timeout)
            response.raise_for_status()
        except Exception as exc:
            self.last_error = exc
            if cancel.is_set():
                logger.debug("runtime.poll.cancelled")
                return None
            if _is_socket_failure(exc):
                logger.error("runtime.poll.disconnected error={}", exc)
                self._state.stop()
                return None
            logger.opt(exception=True).warning("runtime.poll.failed error={}", exc)
            return None

        event = InvocationEvent.from_headers(response.content, response.headers)
        logger.debug("runtime.poll.received request_id={} headers={}", event.request_id, dict(event.headers))
        return event

    def respond(self, request_id: str, body: bytes) -> int:
        """Post a function result; the status is only logged."""

        response = self._session.post(self.endpoint.response_url(request_id), data=body, timeout=self._timeout)
        logger.info("runtime.response status={} request_id={}", response.status_code, request_id)
        return response.status_code

    def report_error(self, request_id: str, body: bytes) -> int:
        """Post an error report; any failure propagates to the caller."""

        response = self._session.post(
            self.endpoint.error_url(request_id),
            data=body,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )
        response.raise_for_status()
        logger.info("runtime.error status={} request_id={}", response.status_code, request_id)
        return response.status_code

    def close(self) -> None:
        """Drop pooled connections; an in-flight call may still complete."""

        self._session.close()
