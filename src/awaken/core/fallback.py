# src/awaken/core/fallback.py
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, TYPE_CHECKING

from .config import GatewayConfig
from .types import CompletionRequest, CompletionResponse
from .exceptions import is_rate_limited
from ..middleware.retry import DelayPolicy, FixedDelay

if TYPE_CHECKING:
    from ..providers.base import BaseGatewayProvider


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ModelFallbackInvoker:
    """
    Calls the gateway with the most preferred model and, when that model is
    rate limited, moves on to the next one in the priority list.

    Only HTTP 429 triggers a fallback. Any other error, or a 429 from the
    last model in the list, is raised to the caller unchanged.
    """

    def __init__(
        self,
        provider: "BaseGatewayProvider",
        config: GatewayConfig,
        delay_policy: Optional[DelayPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider
        self.config = config
        self.delay_policy = delay_policy or FixedDelay(config.fallback_delay)
        self._sleep = sleep

    @property
    def models(self) -> Tuple[str, ...]:
        return self.config.model_priorities

    async def invoke(self, request: CompletionRequest, start_index: int = 0) -> CompletionResponse:
        """
        Run ``request`` against the priority list starting at ``start_index``.

        Returns:
            The response of the first model that answered

        Raises:
            The error of the last attempted model
        """
        models = self.models
        if not 0 <= start_index < len(models):
            raise ValueError(f"start_index {start_index} outside model list of length {len(models)}")

        index = start_index
        attempt = 0
        while True:
            model = models[index]
            logger.info(f"Trying model {model} (priority {index + 1}/{len(models)})")
            try:
                response = await self.provider.complete(request, model)
            except Exception as e:
                is_last = index == len(models) - 1
                if not is_rate_limited(e) or is_last:
                    if is_rate_limited(e):
                        logger.error(f"Model {model} rate limited and no fallback models remain")
                    else:
                        logger.error(f"Model {model} failed without fallback: {e}")
                    raise

                delay = self.delay_policy.delay(attempt)
                logger.warning(
                    f"Model {model} rate limited; falling back to {models[index + 1]} in {delay:.2f}s"
                )
                await self._sleep(delay)
                index += 1
                attempt += 1
                continue

            response.attempts = attempt + 1
            if attempt:
                logger.info(f"Model {model} succeeded after {attempt} fallback(s)")
            return response
