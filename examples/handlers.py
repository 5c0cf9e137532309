"""Example functions and plugin for lambda-bridge.

Run them against a local runtime API emulator:

    AWS_LAMBDA_RUNTIME_API=127.0.0.1:9001 _HANDLER=greet \
        lambda-bridge run -f examples.handlers:greet -f examples.handlers:word_count

or expose them through the plugin below by publishing it under the
``lambda_bridge`` entry point group.
"""

from __future__ import annotations

from pydantic import BaseModel

from lambda_bridge import FunctionCatalog, Message
from lambda_bridge.hookspecs import hookimpl


class Greeting(BaseModel):
    name: str
    language: str = "en"


def greet(request: Greeting) -> dict[str, str]:
    prefix = {"en": "Hello", "fr": "Bonjour"}.get(request.language, "Hello")
    return {"message": f"{prefix}, {request.name}!"}


def word_count(message: Message) -> dict[str, int]:
    text = str(message.payload.get("text", "")) if isinstance(message.payload, dict) else ""
    return {"words": len(text.split())}


def heartbeat() -> str:
    return "ok"


class ExamplePlugin:
    @hookimpl
    def register_functions(self, catalog: FunctionCatalog) -> None:
        catalog.add("greet", greet)
        catalog.add("word_count", word_count)
        catalog.add("heartbeat", heartbeat)

    @hookimpl
    def on_error(self, stage: str, error: BaseException, request_id: str | None) -> None:
        print(f"[{stage}] {request_id}: {type(error).__name__}")


plugin = ExamplePlugin()
