from __future__ import annotations

import pytest

from lambda_bridge.config import Settings


def test_settings_read_lambda_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "127.0.0.1:9001")
    monkeypatch.setenv("DEFAULT_HANDLER", "primary")
    monkeypatch.setenv("_HANDLER", "handlers.main")
    monkeypatch.setenv("function.definition", "fallback")
    monkeypatch.setenv("LAMBDA_BRIDGE_LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.runtime_api == "127.0.0.1:9001"
    assert settings.default_handler == "primary"
    assert settings.handler == "handlers.main"
    assert settings.function_definition == "fallback"
    assert settings.log_level == "debug"


def test_function_definition_accepts_upper_snake_alias(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FUNCTION_DEFINITION", "from_env")

    assert Settings(_env_file=None).function_definition == "from_env"


def test_settings_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.runtime_api is None
    assert settings.default_handler is None
    assert settings.handler is None
    assert settings.poll_retry_delay_seconds == 0.0
    assert settings.log_format == "text"


def test_settings_accept_field_names() -> None:
    settings = Settings(_env_file=None, runtime_api="host:1", handler="fn")

    assert settings.runtime_api == "host:1"
    assert settings.handler == "fn"
