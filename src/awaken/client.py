# src/awaken/client.py
from typing import List, Optional, Sequence, Union
import asyncio
import logging

from .core.config import GatewayConfig
from .core.fallback import ModelFallbackInvoker, Sleep
from .core.types import (
    Category,
    CompletionRequest,
    CompletionResponse,
    FanOutPolicy,
    Message,
    PersonaInsight,
    SageKey,
)
from .middleware.retry import DelayPolicy
from .providers import get_provider
from .providers.base import BaseGatewayProvider
from .sages.aggregator import PersonaAggregator
from .topics.generator import TopicGenerator
from .topics.models import GeneratedTopic, JournalExcerpt
from .analysis.analyzer import HistoryAnalyzer
from .analysis.models import AnalysisResult, InsightType
from .utils import AsyncContextManagerMixin


logger = logging.getLogger(__name__)


class SageClient(AsyncContextManagerMixin):
    """
    Entry point for the hosting application.

    Built once at startup from a GatewayConfig and closed on shutdown;
    nothing here is global, so tests and workers can hold their own client.
    """

    def __init__(
        self,
        config: GatewayConfig,
        provider: Optional[BaseGatewayProvider] = None,
        delay_policy: Optional[DelayPolicy] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self.provider = provider or get_provider(config.provider)(config)
        self.invoker = ModelFallbackInvoker(self.provider, config, delay_policy=delay_policy, sleep=sleep)
        self.sages = PersonaAggregator(
            self.invoker,
            sequential_pause=config.sequential_pause,
            temperature=config.temperature,
            sleep=sleep,
        )
        self.topics = TopicGenerator(self.invoker)
        self.analyzer = HistoryAnalyzer(self.invoker)
        self._initialized = False

    async def initialize(self):
        if self._initialized:
            return
        logger.info(
            f"Initializing SageClient with {len(self.config.model_priorities)} models, "
            f"preferred {self.config.preferred_model}"
        )
        await self.provider.initialize()
        self._initialized = True

    async def close(self):
        await self.provider.close()
        self._initialized = False
        logger.info("SageClient closed")

    async def complete(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> CompletionResponse:
        """Raw chat completion through the fallback chain"""
        request = CompletionRequest(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            extra_params=kwargs,
        )
        return await self.invoker.invoke(request)

    async def get_insight(
        self,
        content: str,
        sage: Union[SageKey, str],
        category: Union[Category, str],
    ) -> PersonaInsight:
        return await self.sages.get_insight(content, sage, category)

    async def get_all_insights(
        self,
        content: str,
        category: Union[Category, str],
        sages: Optional[Sequence[Union[SageKey, str]]] = None,
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        return await self.sages.gather_insights(content, category, sages, policy)

    async def get_blessings(self, content: str, policy: Optional[FanOutPolicy] = None) -> List[PersonaInsight]:
        return await self.sages.gather_blessings(content, policy=policy)

    async def get_feedback(
        self,
        content: str,
        category: Union[Category, str],
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        return await self.sages.gather_feedback(content, category, policy=policy)

    async def get_summary(self, content: str, insights: Sequence[PersonaInsight]) -> str:
        return await self.sages.summarize(content, insights)

    async def get_dynamic_topics(
        self,
        history: Optional[Sequence[JournalExcerpt]] = None,
    ) -> List[GeneratedTopic]:
        return await self.topics.generate(history)

    async def analyze_history(
        self,
        entries: Sequence[JournalExcerpt],
        insight_type: Union[InsightType, str],
    ) -> AnalysisResult:
        return await self.analyzer.analyze(entries, insight_type)
