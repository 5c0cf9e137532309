"""Data types shared by the runtime loop components."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from requests.structures import CaseInsensitiveDict

RUNTIME_API_VERSION = "2018-06-01"
DEFAULT_CONTENT_TYPE = "application/json"

REQUEST_ID_HEADER = "Lambda-Runtime-Aws-Request-Id"
TRACE_ID_HEADER = "Lambda-Runtime-Trace-Id"
DEADLINE_HEADER = "Lambda-Runtime-Deadline-Ms"
FUNCTION_ARN_HEADER = "Lambda-Runtime-Invoked-Function-Arn"
FUNCTION_DEFINITION_KEY = "function.definition"


@dataclass(frozen=True)
class RuntimeEndpoint:
    """URLs of the runtime API invocation endpoints for one host."""

    host: str
    version: str = RUNTIME_API_VERSION

    @property
    def base_url(self) -> str:
        return f"http://{self.host}/{self.version}/runtime/invocation"

    @property
    def next_url(self) -> str:
        return f"{self.base_url}/next"

    def response_url(self, request_id: str) -> str:
        return f"{self.base_url}/{request_id}/response"

    def error_url(self, request_id: str) -> str:
        return f"{self.base_url}/{request_id}/error"


@dataclass(frozen=True)
class InvocationEvent:
    """One polled event: raw body plus the control headers."""

    body: bytes
    request_id: str
    content_type: str = DEFAULT_CONTENT_TYPE
    trace_id: str | None = None
    deadline_ms: int | None = None
    function_arn: str | None = None
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)

    @classmethod
    def from_headers(cls, body: bytes, headers: Mapping[str, str]) -> InvocationEvent:
        normalized: CaseInsensitiveDict[str] = CaseInsensitiveDict(headers)
        deadline = normalized.get(DEADLINE_HEADER)
        return cls(
            body=body,
            request_id=normalized.get(REQUEST_ID_HEADER, ""),
            content_type=normalized.get("Content-Type") or DEFAULT_CONTENT_TYPE,
            trace_id=normalized.get(TRACE_ID_HEADER) or None,
            deadline_ms=int(deadline) if deadline and deadline.isdigit() else None,
            function_arn=normalized.get(FUNCTION_ARN_HEADER) or None,
            headers=normalized,
        )

    def header(self, name: str) -> str | None:
        return self.headers.get(name)


@dataclass
class Message:
    """Payload handed to and returned from registered functions."""

    payload: Any
    headers: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class FunctionHandle(Protocol):
    """Resolved reference to one registered function."""

    @property
    def name(self) -> str: ...

    @property
    def input_type(self) -> Any: ...

    @property
    def output_type(self) -> Any: ...

    @property
    def is_supplier(self) -> bool: ...

    @property
    def function_definition(self) -> str: ...

    def invoke(self, message: Message) -> Any: ...


class ErrorReport(BaseModel):
    """Error body posted to the runtime API error endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    error_message: str = Field(default="", alias="errorMessage")
    error_type: str = Field(default="", alias="errorType")
    stack_trace: str = Field(default="", alias="stackTrace")

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class OutcomeKind(StrEnum):
    RESPONDED = "responded"
    SKIPPED = "skipped"
    INVOCATION_FAILED = "invocation_failed"
    TRANSPORT_FAILED = "transport_failed"
    REPORTING_FAILED = "reporting_failed"


_FATAL_KINDS = frozenset({OutcomeKind.TRANSPORT_FAILED, OutcomeKind.REPORTING_FAILED})


@dataclass(frozen=True)
class IterationOutcome:
    """Result of one poll/resolve/invoke/respond cycle."""

    kind: OutcomeKind
    request_id: str | None = None
    error: BaseException | None = None

    @property
    def fatal(self) -> bool:
        return self.kind in _FATAL_KINDS


class FunctionRegistry(Protocol):
    """Lookup contract the resolver needs from a function catalog."""

    def lookup(self, identifier: str | None, content_type: str | None = None) -> FunctionHandle | None: ...

    def names(self) -> set[str]: ...
