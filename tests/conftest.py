from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fakes import RUNTIME_API

from lambda_bridge.config import Settings
from lambda_bridge.registry import FunctionCatalog

_ENV_KEYS = (
    "AWS_LAMBDA_RUNTIME_API",
    "DEFAULT_HANDLER",
    "_HANDLER",
    "function.definition",
    "FUNCTION_DEFINITION",
    "_X_AMZN_TRACE_ID",
)


@pytest.fixture(autouse=True)
def _clean_lambda_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "runtime_api": RUNTIME_API,
            "default_handler": None,
            "handler": None,
            "function_definition": None,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def catalog() -> FunctionCatalog:
    return FunctionCatalog()
