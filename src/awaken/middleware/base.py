"""
Base middleware interface for gateway request/response processing.
"""

from abc import ABC, abstractmethod
from typing import Optional, Callable, Awaitable, List
import logging

from ..core.types import CompletionRequest, CompletionResponse

logger = logging.getLogger(__name__)


class Middleware(ABC):
    """Base class for middleware components."""

    @abstractmethod
    async def process_request(
        self,
        request: CompletionRequest,
        context: dict
    ) -> CompletionRequest:
        """
        Process request before it reaches the gateway.

        Args:
            request: The completion request
            context: Shared context for the request lifecycle (holds the model id)

        Returns:
            Modified request or original request
        """
        pass

    @abstractmethod
    async def process_response(
        self,
        response: CompletionResponse,
        context: dict
    ) -> CompletionResponse:
        """Process response after it comes back from the gateway."""
        pass

    @abstractmethod
    async def process_error(
        self,
        error: Exception,
        context: dict
    ) -> Exception:
        """Observe or translate an error. Errors are never suppressed here."""
        pass


class MiddlewareChain:
    """
    Chain of middleware components that process requests/responses in order.
    """

    def __init__(self, middlewares: Optional[List[Middleware]] = None):
        self.middlewares = middlewares or []

    def add(self, middleware: Middleware):
        """Add middleware to the chain."""
        self.middlewares.append(middleware)
        return self

    def remove(self, middleware_type: type):
        """Remove middleware of a specific type."""
        self.middlewares = [
            m for m in self.middlewares
            if not isinstance(m, middleware_type)
        ]
        return self

    async def execute_request(
        self,
        request: CompletionRequest,
        handler: Callable[[CompletionRequest], Awaitable[CompletionResponse]],
        context: Optional[dict] = None
    ) -> CompletionResponse:
        """
        Run the request through the chain, call the handler, and run the
        response back through the chain in reverse order.

        The error raised by the handler (possibly translated by middleware)
        always reaches the caller, so the fallback invoker still sees the
        gateway's status code.
        """
        context = context if context is not None else {}

        processed_request = request
        for middleware in self.middlewares:
            processed_request = await middleware.process_request(processed_request, context)

        try:
            response = await handler(processed_request)
        except Exception as e:
            error = await self._process_error(e, context)
            if error is e:
                raise
            raise error from e

        processed_response = response
        for middleware in reversed(self.middlewares):
            try:
                processed_response = await middleware.process_response(
                    processed_response, context
                )
            except Exception as e:
                logger.error(f"Error in middleware {middleware.__class__.__name__}: {e}")
                continue

        return processed_response

    async def _process_error(self, error: Exception, context: dict) -> Exception:
        """Process error through middleware chain."""
        current_error = error

        for middleware in reversed(self.middlewares):
            try:
                result = await middleware.process_error(current_error, context)
                if result is not None:
                    current_error = result
            except Exception as e:
                logger.error(f"Error in error handler {middleware.__class__.__name__}: {e}")
                continue

        return current_error
