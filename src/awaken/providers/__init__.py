"""Gateway provider implementations."""

from typing import Type, Dict
from .base import BaseGatewayProvider
from .openrouter import OpenRouterProvider


# Registry of available providers
PROVIDERS: Dict[str, Type[BaseGatewayProvider]] = {
    "openrouter": OpenRouterProvider,
}


def get_provider(provider_name: str) -> Type[BaseGatewayProvider]:
    """Get provider class by name."""
    provider_class = PROVIDERS.get(provider_name.lower())
    if not provider_class:
        raise ValueError(f"Unknown provider: {provider_name}")
    return provider_class


__all__ = [
    "BaseGatewayProvider",
    "OpenRouterProvider",
    "get_provider",
    "PROVIDERS",
]
