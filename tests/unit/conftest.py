"""
Shared fixtures: a scripted gateway provider and a sleep that only records.
"""

from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from awaken.core.config import GatewayConfig
from awaken.core.exceptions import LLMProviderError, LLMRateLimitError
from awaken.core.fallback import ModelFallbackInvoker
from awaken.core.types import CompletionRequest, CompletionResponse
from awaken.middleware.base import MiddlewareChain
from awaken.providers.base import BaseGatewayProvider


Outcome = Union[str, Exception, Callable[[CompletionRequest, str], Union[str, Exception]]]


class FakeProvider(BaseGatewayProvider):
    """
    Answers from a per-model script. An outcome is the reply text, an
    exception to raise, or a callable receiving (request, model).
    """

    name = "fake"

    def __init__(self, config: GatewayConfig, script: Optional[Dict[str, Outcome]] = None, default: Outcome = "ok"):
        super().__init__(config, MiddlewareChain())
        self.script = script or {}
        self.default = default
        self.calls: List[Tuple[str, CompletionRequest]] = []
        self.initialized = False
        self.closed = False

    async def _initialize_provider(self):
        self.initialized = True

    async def _do_complete(self, request: CompletionRequest, model: str) -> CompletionResponse:
        self.calls.append((model, request))
        outcome = self.script.get(model, self.default)
        if callable(outcome) and not isinstance(outcome, Exception):
            outcome = outcome(request, model)
        if isinstance(outcome, Exception):
            raise outcome
        return CompletionResponse(
            content=outcome,
            model=model,
            provider=self.name,
            raw={"choices": [{"message": {"content": outcome}}]},
        )

    async def _close_provider(self):
        self.closed = True

    @property
    def models_called(self) -> List[str]:
        return [model for model, _ in self.calls]


class RecordingSleep:
    """Stands in for asyncio.sleep without waiting"""

    def __init__(self, events: Optional[list] = None):
        self.delays: List[float] = []
        self.events = events

    async def __call__(self, seconds: float):
        self.delays.append(seconds)
        if self.events is not None:
            self.events.append(("sleep", seconds))


def rate_limited(model: str = "model") -> LLMRateLimitError:
    return LLMRateLimitError(f"{model} is rate limited")


def server_error(status: int = 500) -> LLMProviderError:
    return LLMProviderError(f"gateway error {status}", status_code=status)


@pytest.fixture
def config():
    return GatewayConfig(
        api_key="test-key",
        model_priorities=("model-a", "model-b", "model-c"),
        fallback_delay=2.0,
        sequential_pause=1.0,
    )


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_invoker(config, sleep):
    def factory(script=None, default="ok", **overrides):
        cfg = config.with_overrides(**overrides) if overrides else config
        provider = FakeProvider(cfg, script, default)
        return ModelFallbackInvoker(provider, cfg, sleep=sleep), provider
    return factory
