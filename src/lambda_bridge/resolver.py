"""Handler resolution with an ordered fallback chain."""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from lambda_bridge.config import Settings
from lambda_bridge.errors import FunctionNotFoundError
from lambda_bridge.types import FUNCTION_DEFINITION_KEY, FunctionHandle, FunctionRegistry

DEFAULT_FUNCTION = "<default function>"


class FunctionResolver:
    """Locate the function for one event.

    Identifiers are tried in this order, stopping at the first match:

    1. ``DEFAULT_HANDLER``
    2. ``_HANDLER``
    3. the catalog default (no identifier)
    4. ``function.definition`` from configuration
    5. ``function.definition`` header of the event

    Sources with no value are skipped.
    """

    def __init__(self, catalog: FunctionRegistry, settings: Settings) -> None:
        self._catalog = catalog
        self._settings = settings

    def candidates(self, headers: Mapping[str, str] | None = None) -> list[tuple[str, str | None]]:
        header_value = headers.get(FUNCTION_DEFINITION_KEY) if headers is not None else None
        return [
            ("DEFAULT_HANDLER", self._settings.default_handler),
            ("_HANDLER", self._settings.handler),
            (DEFAULT_FUNCTION, None),
            (f"'{FUNCTION_DEFINITION_KEY}' property", self._settings.function_definition),
            (f"'{FUNCTION_DEFINITION_KEY}' header", header_value),
        ]

    def locate(self, content_type: str, headers: Mapping[str, str] | None = None) -> FunctionHandle:
        tried: list[str] = []
        for source, identifier in self.candidates(headers):
            if source != DEFAULT_FUNCTION and (identifier is None or not identifier.strip()):
                logger.debug("function.resolve.skip source={} reason=unset", source)
                tried.append(f"{source}=<unset>")
                continue
            function = self._catalog.lookup(identifier, content_type)
            if function is not None:
                logger.info(
                    "function.resolve.located source={} function={}",
                    source,
                    function.function_definition,
                )
                return function
            logger.debug("function.resolve.miss source={} identifier={}", source, identifier)
            tried.append(source if identifier is None else f"{source}={identifier!r}")

        available = sorted(self._catalog.names())
        raise FunctionNotFoundError(
            "Failed to locate function for content type "
            f"{content_type!r}. Tried: {', '.join(tried)}. "
            f"Functions available in catalog are: {available}"
        )
