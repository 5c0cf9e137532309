"""lambda-bridge - run in-process Python functions behind the Lambda runtime API."""

from lambda_bridge.config import Settings
from lambda_bridge.loop import RuntimeEventLoop
from lambda_bridge.registry import FunctionCatalog
from lambda_bridge.types import Message

__version__ = "0.1.0"

__all__ = ["FunctionCatalog", "Message", "RuntimeEventLoop", "Settings"]
