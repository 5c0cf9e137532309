from __future__ import annotations

from typing import Any

import pytest

from lambda_bridge.errors import FunctionLoadError
from lambda_bridge.registry import FunctionCatalog
from lambda_bridge.types import Message


def test_register_infers_signature_types(catalog: FunctionCatalog) -> None:
    @catalog.register()
    def greet(name: str) -> str:
        return f"hello {name}"

    @catalog.register("tick")
    def supplier() -> int:
        return 1

    greet_fn = catalog.get("greet")
    tick_fn = catalog.get("tick")
    assert greet_fn is not None and tick_fn is not None
    assert greet_fn.input_type is str
    assert greet_fn.output_type is str
    assert not greet_fn.is_supplier
    assert tick_fn.is_supplier
    assert tick_fn.input_type is None
    assert catalog.names() == {"greet", "tick"}


def test_untyped_function_defaults_to_any(catalog: FunctionCatalog) -> None:
    registered = catalog.add("raw", lambda event: event)

    assert registered.input_type is Any
    assert registered.output_type is Any


def test_lookup_by_name_and_default(catalog: FunctionCatalog) -> None:
    catalog.add("only", lambda event: event)

    assert catalog.lookup("only", "application/json") is catalog.get("only")
    assert catalog.lookup(None, "application/json") is catalog.get("only")
    assert catalog.lookup("  ", "application/json") is catalog.get("only")
    assert catalog.lookup("missing", "application/json") is None

    catalog.add("second", lambda event: event)
    assert catalog.lookup(None, "application/json") is None


def test_lookup_honors_content_types(catalog: FunctionCatalog) -> None:
    catalog.add("csv", lambda event: event, content_types=["Text/CSV"])

    assert catalog.lookup("csv", "text/csv; charset=utf-8") is not None
    assert catalog.lookup("csv", "application/json") is None


def test_invoke_passes_payload_message_or_nothing(catalog: FunctionCatalog) -> None:
    @catalog.register("payload")
    def payload(event: dict) -> dict:
        return {"got": event}

    @catalog.register("message")
    def whole(message: Message) -> str:
        return message.headers["k"]

    @catalog.register("supplier")
    def supplier() -> str:
        return "made"

    message = Message(payload={"a": 1}, headers={"k": "v"})

    assert catalog.get("payload").invoke(message) == {"got": {"a": 1}}
    assert catalog.get("message").invoke(message) == "v"
    assert catalog.get("supplier").invoke(message) == "made"


def test_invoke_logs_and_reraises(catalog: FunctionCatalog, monkeypatch: pytest.MonkeyPatch) -> None:
    logs: list[str] = []

    def _capture(message: str, *args: object, **kwargs: object) -> None:
        logs.append(message)

    monkeypatch.setattr("lambda_bridge.registry.logger.info", _capture)
    monkeypatch.setattr("lambda_bridge.registry.logger.exception", _capture)

    @catalog.register("fail")
    def fail(event: dict) -> None:
        raise KeyError("missing")

    with pytest.raises(KeyError):
        catalog.get("fail").invoke(Message(payload={}))

    assert logs == [
        "function.call.start name={} supplier={}",
        "function.call.error name={}",
        "function.call.end name={} duration={:.3f}ms",
    ]


def test_function_definition_names_module_and_qualname(catalog: FunctionCatalog) -> None:
    def handler(event: dict) -> dict:
        return event

    registered = catalog.add("h", handler)

    assert registered.function_definition.startswith("h (")
    assert "handler" in registered.function_definition


def test_load_from_module_spec(catalog: FunctionCatalog) -> None:
    registered = catalog.load("json:dumps")
    aliased = catalog.load("json:loads=parse")

    assert registered.name == "dumps"
    assert aliased.name == "parse"
    assert registered.source == "json"
    assert catalog.names() == {"dumps", "parse"}


@pytest.mark.parametrize("spec", ["json", "json:", "missing_module_xyz:fn", "json:not_there", "json:decoder"])
def test_load_rejects_bad_specs(catalog: FunctionCatalog, spec: str) -> None:
    with pytest.raises(FunctionLoadError):
        catalog.load(spec)


def test_add_rejects_blank_name(catalog: FunctionCatalog) -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        catalog.add(" ", lambda: None)
