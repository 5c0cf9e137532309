"""Application-level exception types for lambda-bridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for lambda-bridge."""


class ConfigurationError(BridgeError):
    """Raised when required runtime configuration is missing or invalid."""


class FunctionLoadError(ConfigurationError):
    """Raised when a `module:attribute` function spec cannot be imported."""


class FunctionNotFoundError(BridgeError):
    """Raised when no registered function matches any handler identifier."""


class ErrorReportingError(BridgeError):
    """Raised when an invocation error cannot be posted to the runtime API."""

    def __init__(self, request_id: str | None, cause: BaseException) -> None:
        super().__init__(f"Failed to report error for request {request_id}: {cause}")
        self.request_id = request_id
        self.cause = cause
