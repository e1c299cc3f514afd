# src/awaken/core/config.py
import os
import logging
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field, replace

from .exceptions import LLMConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# Ordered by preference; everything after the first entry is a fallback.
DEFAULT_MODEL_PRIORITIES: Tuple[str, ...] = (
    "google/gemini-2.5-pro",
    "google/gemini-2.0-flash-exp:free",
    "x-ai/grok-4.1-fast",
    "openai/gpt-4o-mini:free",
    "anthropic/claude-3-haiku:free",
    "meta-llama/llama-3.1-8b-instruct:free",
)


def prioritize(models: List[str], preferred: Optional[str] = None) -> Tuple[str, ...]:
    """Build an immutable priority list, moving ``preferred`` to the front"""
    ordered: List[str] = []
    for model in ([preferred] if preferred else []) + list(models):
        if model and model not in ordered:
            ordered.append(model)
    return tuple(ordered)


@dataclass(frozen=True)
class GatewayConfig:
    """Configuration for the LLM gateway and the fallback chain"""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model_priorities: Tuple[str, ...] = DEFAULT_MODEL_PRIORITIES
    default_model: Optional[str] = None
    provider: str = "openrouter"
    fallback_delay: float = 2.0
    sequential_pause: float = 1.0
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: float = 60.0
    app_url: Optional[str] = None
    app_title: str = "Awaken Entries"
    log_level: str = "INFO"
    extra_headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.api_key:
            logger.error("OpenRouter API key is missing")
            raise LLMConfigurationError("OpenRouter API key is required")
        priorities = prioritize(list(self.model_priorities), self.default_model)
        if not priorities:
            logger.error("No models configured for the fallback chain")
            raise LLMConfigurationError("At least one model must be configured")
        for name in ("fallback_delay", "sequential_pause"):
            value = getattr(self, name)
            if value < 0:
                logger.error(f"{name} must not be negative, got {value}")
                raise LLMConfigurationError(
                    f"{name} must not be negative", details={name: value}
                )
        # frozen dataclass, so bypass __setattr__ to store the normalized tuple
        object.__setattr__(self, "model_priorities", priorities)

    @property
    def preferred_model(self) -> str:
        return self.model_priorities[0]

    def with_overrides(self, **changes: Any) -> "GatewayConfig":
        """Copy of this config with some fields replaced"""
        return replace(self, **changes)


class ConfigManager:
    """Loads the gateway configuration from YAML or the environment"""

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.config_path = config_path or self._find_config_file()

    def _find_config_file(self) -> Optional[str]:
        possible_paths = [
            Path(self.environ["AWAKEN_CONFIG"]) if self.environ.get("AWAKEN_CONFIG") else None,
            Path("config/awaken.yaml"),
            Path(__file__).parent.parent.parent.parent / "config" / "awaken.yaml",
        ]
        for path in possible_paths:
            if path is not None and path.exists():
                return str(path)
        return None

    def load(self) -> GatewayConfig:
        """Build the config. Raises LLMConfigurationError when the API key is missing."""
        if self.config_path and Path(self.config_path).exists():
            settings = self._load_from_yaml(self.config_path)
        else:
            settings = {}
        settings = self._apply_env(settings)

        if not settings.get("api_key"):
            logger.error("OPENROUTER_API_KEY is not set; cannot reach the LLM gateway")
            raise LLMConfigurationError("Missing OPENROUTER_API_KEY")

        return GatewayConfig(**settings)

    def _load_from_yaml(self, config_path: str) -> Dict[str, Any]:
        """Load settings from a YAML file"""
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        logger.debug(f"Loading gateway configuration from {config_path}")

        gateway = config.get('gateway', {})
        gateway_settings = gateway.get('settings', {})
        fallback = config.get('fallback', {})
        global_config = config.get('global', {})

        settings: Dict[str, Any] = {}
        for key in ('api_key', 'base_url', 'default_model', 'provider', 'app_url', 'app_title'):
            if gateway.get(key):
                settings[key] = gateway[key]
        if gateway.get('models'):
            settings['model_priorities'] = tuple(gateway['models'])
        for key in ('temperature', 'max_tokens', 'timeout'):
            if key in gateway_settings:
                settings[key] = gateway_settings[key]
        if 'delay' in fallback:
            settings['fallback_delay'] = float(fallback['delay'])
        if 'sequential_pause' in fallback:
            settings['sequential_pause'] = float(fallback['sequential_pause'])
        if global_config.get('log_level'):
            settings['log_level'] = global_config['log_level']
        return settings

    def _apply_env(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        """Fill settings from environment variables"""
        settings = dict(settings)
        env = self.environ

        if env.get("OPENROUTER_API_KEY"):
            settings['api_key'] = env["OPENROUTER_API_KEY"]
        if env.get("OPENROUTER_API_URL"):
            settings['base_url'] = env["OPENROUTER_API_URL"]
        if env.get("OPENROUTER_MODEL"):
            settings['default_model'] = env["OPENROUTER_MODEL"]
        if env.get("AWAKEN_FALLBACK_DELAY"):
            try:
                settings['fallback_delay'] = float(env["AWAKEN_FALLBACK_DELAY"])
            except ValueError:
                raise LLMConfigurationError(
                    f"AWAKEN_FALLBACK_DELAY must be a number, got {env['AWAKEN_FALLBACK_DELAY']!r}"
                )
        if env.get("AWAKEN_LOG_LEVEL"):
            settings['log_level'] = env["AWAKEN_LOG_LEVEL"]
        return settings


def load_config(config_path: Optional[str] = None) -> GatewayConfig:
    """Load the gateway config at application startup"""
    return ConfigManager(config_path).load()
