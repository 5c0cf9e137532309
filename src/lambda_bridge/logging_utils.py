"""Runtime logging helpers."""

from __future__ import annotations

import sys
from typing import Literal

import loguru
from loguru import logger

LogProfile = Literal["text", "json"]

_TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<6} | {name}:{function}:{line} | {extra[request_id]} | {message}"
)
_CONFIGURED: tuple[LogProfile, str] | None = None


def _inject_context(record: loguru.Record) -> None:
    record["extra"].setdefault("request_id", "-")


def configure_logging(*, profile: LogProfile = "text", level: str = "INFO") -> None:
    """Configure process-level logging once per profile/level pair."""

    global _CONFIGURED
    level = level.upper()
    if _CONFIGURED == (profile, level):
        return

    logger.remove()
    logger.configure(patcher=_inject_context)
    if profile == "json":
        logger.add(sys.stderr, level=level, serialize=True, backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=level, format=_TEXT_FORMAT, backtrace=False, diagnose=False)
    _CONFIGURED = (profile, level)
