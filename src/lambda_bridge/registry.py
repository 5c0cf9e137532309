"""In-process function catalog."""

from __future__ import annotations

import importlib
import inspect
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, get_type_hints

from loguru import logger

from lambda_bridge.errors import FunctionLoadError
from lambda_bridge.types import Message


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().casefold()


def _signature_types(func: Callable[..., Any]) -> tuple[Any, Any, bool]:
    """Return (input_type, output_type, is_supplier) from a function signature."""

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return Any, Any, False
    try:
        hints = get_type_hints(func)
    except Exception:
        hints = {}
    params = [
        param
        for param in signature.parameters.values()
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
    ]
    output_type = hints.get("return", Any)
    if not params:
        return None, output_type, True
    return hints.get(params[0].name, Any), output_type, False


@dataclass(frozen=True)
class RegisteredFunction:
    """Function metadata and invocation handle."""

    name: str
    func: Callable[..., Any]
    input_type: Any = Any
    output_type: Any = Any
    is_supplier: bool = False
    content_types: frozenset[str] | None = None
    source: str = "local"

    @property
    def function_definition(self) -> str:
        module = getattr(self.func, "__module__", "<unknown>")
        qualname = getattr(self.func, "__qualname__", repr(self.func))
        return f"{self.name} ({module}:{qualname})"

    def accepts(self, content_type: str | None) -> bool:
        if self.content_types is None:
            return True
        return _media_type(content_type) in self.content_types

    def invoke(self, message: Message) -> Any:
        logger.info("function.call.start name={} supplier={}", self.name, self.is_supplier)
        start = time.monotonic()
        try:
            if self.is_supplier:
                return self.func()
            if self.input_type is Message:
                return self.func(message)
            return self.func(message.payload)
        except Exception:
            logger.exception("function.call.error name={}", self.name)
            raise
        finally:
            duration = time.monotonic() - start
            logger.info("function.call.end name={} duration={:.3f}ms", self.name, duration * 1000)


class FunctionCatalog:
    """Registry of functions the runtime loop can dispatch to."""

    def __init__(self) -> None:
        self._functions: dict[str, RegisteredFunction] = {}

    def add(
        self,
        name: str,
        func: Callable[..., Any],
        *,
        content_types: Iterable[str] | None = None,
        source: str = "local",
    ) -> RegisteredFunction:
        name = name.strip()
        if not name:
            raise ValueError("Function name must not be empty")
        input_type, output_type, is_supplier = _signature_types(func)
        registered = RegisteredFunction(
            name=name,
            func=func,
            input_type=input_type,
            output_type=output_type,
            is_supplier=is_supplier,
            content_types=frozenset(_media_type(item) for item in content_types) if content_types else None,
            source=source,
        )
        if name in self._functions:
            logger.warning("function.register.replace name={}", name)
        self._functions[name] = registered
        return registered

    def register(
        self,
        name: str | None = None,
        *,
        content_types: Iterable[str] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of `add`; the function name is used when `name` is omitted."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add(name or func.__name__, func, content_types=content_types)
            return func

        return decorator

    def load(self, spec: str) -> RegisteredFunction:
        """Import and register a function from a `module:attribute[=name]` spec."""

        target, _, alias = spec.partition("=")
        module_name, _, attr_path = target.strip().partition(":")
        if not module_name or not attr_path:
            raise FunctionLoadError(f"Invalid function spec {spec!r}, expected 'module:attribute'")
        try:
            obj: Any = importlib.import_module(module_name)
            for part in attr_path.split("."):
                obj = getattr(obj, part)
        except (ImportError, AttributeError) as exc:
            raise FunctionLoadError(f"Cannot load function {spec!r}: {exc}") from exc
        if not callable(obj):
            raise FunctionLoadError(f"Function spec {spec!r} does not point to a callable")
        return self.add(alias.strip() or attr_path.rsplit(".", 1)[-1], obj, source=module_name)

    def get(self, name: str) -> RegisteredFunction | None:
        return self._functions.get(name)

    def names(self) -> set[str]:
        return set(self._functions)

    def lookup(self, identifier: str | None, content_type: str | None = None) -> RegisteredFunction | None:
        """Find a function by name; a blank name selects the only registered function."""

        if identifier is None or not identifier.strip():
            if len(self._functions) != 1:
                return None
            candidate = next(iter(self._functions.values()))
        else:
            candidate = self._functions.get(identifier.strip())
        if candidate is None or not candidate.accepts(content_type):
            return None
        return candidate

    def __len__(self) -> int:
        return len(self._functions)
