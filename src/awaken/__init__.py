"""
awaken - Sage commentary for a reflective journal, served through an
LLM gateway with model fallback
"""

from .core.types import (
    MessageRole,
    Message,
    SageKey,
    Category,
    FanOutPolicy,
    CompletionRequest,
    CompletionResponse,
    PersonaConfig,
    PersonaInsight,
)
from .core.config import GatewayConfig, ConfigManager, load_config
from .core.exceptions import (
    AwakenException,
    LLMConfigurationError,
    LLMProviderError,
    LLMRateLimitError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMTimeoutError,
    AnalysisError,
)
from .core.fallback import ModelFallbackInvoker
from .middleware.retry import FixedDelay, ExponentialBackoff
from .sages import SAGES, PersonaAggregator
from .topics import TopicGenerator, GeneratedTopic, JournalExcerpt
from .analysis import HistoryAnalyzer, InsightType, AnalysisResult
from .client import SageClient
from .utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Types
    "MessageRole",
    "Message",
    "SageKey",
    "Category",
    "FanOutPolicy",
    "CompletionRequest",
    "CompletionResponse",
    "PersonaConfig",
    "PersonaInsight",
    # Configuration
    "GatewayConfig",
    "ConfigManager",
    "load_config",
    # Exceptions
    "AwakenException",
    "LLMConfigurationError",
    "LLMProviderError",
    "LLMRateLimitError",
    "LLMAuthenticationError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "AnalysisError",
    # Core components
    "ModelFallbackInvoker",
    "FixedDelay",
    "ExponentialBackoff",
    "SAGES",
    "PersonaAggregator",
    "TopicGenerator",
    "GeneratedTopic",
    "JournalExcerpt",
    "HistoryAnalyzer",
    "InsightType",
    "AnalysisResult",
    "SageClient",
    "configure_logging",
]
