"""Core components: types, errors, configuration and the fallback invoker"""

from .types import *
from .exceptions import *
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL_PRIORITIES,
    GatewayConfig,
    ConfigManager,
    load_config,
    prioritize,
)
from .fallback import ModelFallbackInvoker

__all__ = [
    "GatewayConfig",
    "ConfigManager",
    "load_config",
    "prioritize",
    "DEFAULT_BASE_URL",
    "DEFAULT_MODEL_PRIORITIES",
    "ModelFallbackInvoker",
]
