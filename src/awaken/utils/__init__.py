"""Utility functions for the awaken package"""

import re
import logging
from typing import TypeVar, Union

T = TypeVar('T')

NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: Union[str, int] = "INFO"):
    """Basic console logging for scripts and the hosting app"""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class AsyncContextManagerMixin:
    """Mixin class for async context manager support"""

    async def __aenter__(self: T) -> T:
        if hasattr(self, 'initialize'):
            await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if hasattr(self, 'close'):
            await self.close()


_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)


def strip_json_fences(text: str) -> str:
    """Strip markdown code fences (or surrounding prose) from model JSON output."""
    text = text.strip()
    match = _JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


__all__ = ["AsyncContextManagerMixin", "configure_logging", "strip_json_fences"]
