# src/awaken/providers/base.py
from abc import ABC, abstractmethod
from typing import Optional
import logging

from ..core.config import GatewayConfig
from ..core.types import CompletionRequest, CompletionResponse
from ..middleware.base import MiddlewareChain
from ..middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)


class BaseGatewayProvider(ABC):
    """Base class for chat-completion gateways with middleware support"""

    name = "base"

    def __init__(self, config: GatewayConfig, middleware_chain: Optional[MiddlewareChain] = None):
        self.config = config
        self.client = None
        self.total_requests = 0
        self.error_count = 0
        self.middleware_chain = middleware_chain or MiddlewareChain([LoggingMiddleware()])

    async def initialize(self):
        """Initialize the provider client"""
        await self._initialize_provider()

    @abstractmethod
    async def _initialize_provider(self):
        """Provider-specific initialization"""
        pass

    async def complete(self, request: CompletionRequest, model: str) -> CompletionResponse:
        """Run one chat completion against ``model`` through the middleware chain"""

        async def handler(processed_request: CompletionRequest) -> CompletionResponse:
            self.total_requests += 1
            try:
                return await self._do_complete(processed_request, model)
            except Exception:
                self.error_count += 1
                raise

        return await self.middleware_chain.execute_request(
            request=request,
            handler=handler,
            context={'model': model, 'provider': self.name}
        )

    @abstractmethod
    async def _do_complete(self, request: CompletionRequest, model: str) -> CompletionResponse:
        """Provider-specific completion implementation"""
        pass

    async def close(self):
        """Close the provider client"""
        await self._close_provider()

    @abstractmethod
    async def _close_provider(self):
        """Provider-specific close implementation"""
        pass
