"""Conversion between raw invocation bodies and function messages."""

from __future__ import annotations

import inspect
import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_json

from lambda_bridge.types import Message


def _is_model_type(target: Any) -> bool:
    return inspect.isclass(target) and issubclass(target, BaseModel)


class JsonCodec:
    """Default codec: JSON bodies, with raw bytes and text passed through."""

    def decode(
        self,
        body: bytes,
        target_shape: Any,
        is_supplier: bool,
        headers: Mapping[str, Any] | None = None,
    ) -> Message:
        message_headers = dict(headers or {})
        if is_supplier or target_shape is bytes:
            return Message(payload=body, headers=message_headers)
        if target_shape is str:
            return Message(payload=body.decode("utf-8"), headers=message_headers)
        if _is_model_type(target_shape):
            return Message(payload=target_shape.model_validate_json(body), headers=message_headers)
        if not body.strip():
            return Message(payload=None, headers=message_headers)
        return Message(payload=json.loads(body), headers=message_headers)

    def encode(self, input_message: Message, output_message: Any, target_shape: Any = Any) -> bytes:
        _ = (input_message, target_shape)
        payload = output_message.payload if isinstance(output_message, Message) else output_message
        if payload is None:
            return b"null"
        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)
        if isinstance(payload, str):
            return payload.encode("utf-8")
        if isinstance(payload, BaseModel):
            return payload.model_dump_json().encode("utf-8")
        return to_json(payload)
