"""
Middleware components for the gateway provider.
Handles cross-cutting concerns like logging and the pacing of fallbacks.
"""

from .base import Middleware, MiddlewareChain
from .logging import LoggingMiddleware
from .retry import DelayPolicy, FixedDelay, ExponentialBackoff

__all__ = [
    "Middleware",
    "MiddlewareChain",
    "LoggingMiddleware",
    "DelayPolicy",
    "FixedDelay",
    "ExponentialBackoff",
]
