# src/awaken/sages/aggregator.py
import asyncio
import logging
from typing import Awaitable, Callable, List, Mapping, Optional, Sequence, Union

from ..core.types import (
    Category,
    CompletionRequest,
    FanOutPolicy,
    PersonaConfig,
    PersonaInsight,
    SageKey,
)
from ..core.fallback import ModelFallbackInvoker
from .personas import SAGES, DEFAULT_SAGE_ORDER, get_persona
from .prompts import (
    INSIGHT,
    DEEP_INSIGHT,
    BLESSING,
    FEEDBACK,
    SUMMARY_FALLBACK,
    SageFlow,
    build_sage_messages,
    build_summary_messages,
)


logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
SageKeyLike = Union[SageKey, str]


class PersonaAggregator:
    """
    Fans one piece of user writing out to several sage personas.

    Each persona call goes through the fallback invoker on its own, so one
    persona running out of models never blocks the others.
    """

    def __init__(
        self,
        invoker: ModelFallbackInvoker,
        personas: Mapping[SageKey, PersonaConfig] = SAGES,
        sequential_pause: Optional[float] = None,
        default_policy: FanOutPolicy = FanOutPolicy.PLACEHOLDER,
        temperature: float = 0.7,
        sleep: Sleep = asyncio.sleep,
    ):
        self.invoker = invoker
        self.personas = personas
        if sequential_pause is None:
            sequential_pause = invoker.config.sequential_pause
        self.sequential_pause = sequential_pause
        self.default_policy = default_policy
        self.temperature = temperature
        self._sleep = sleep

    def _resolve(self, sage_keys: Optional[Sequence[SageKeyLike]]) -> List[PersonaConfig]:
        keys = DEFAULT_SAGE_ORDER if sage_keys is None else sage_keys
        return [get_persona(key, self.personas) for key in keys]

    async def _ask(
        self,
        persona: PersonaConfig,
        flow: SageFlow,
        content: str,
        category: Optional[Category],
    ) -> PersonaInsight:
        request = CompletionRequest(
            messages=build_sage_messages(persona, flow, content, category),
            temperature=self.temperature,
            max_tokens=flow.max_tokens,
        )
        response = await self.invoker.invoke(request)
        text = response.content.strip() if response.content else ""
        return PersonaInsight.from_persona(persona, text or flow.default_text)

    async def get_insight(
        self,
        content: str,
        sage_key: SageKeyLike,
        category: Union[Category, str],
    ) -> PersonaInsight:
        """Single persona. Failures propagate to the caller."""
        persona = self._resolve([sage_key])[0]
        return await self._ask(persona, INSIGHT, content, Category(category))

    async def gather_insights(
        self,
        content: str,
        category: Union[Category, str],
        sage_keys: Optional[Sequence[SageKeyLike]] = None,
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        """One insight per requested persona, in request order"""
        return await self.fan_out(DEEP_INSIGHT, content, Category(category), sage_keys, policy)

    async def gather_blessings(
        self,
        content: str,
        sage_keys: Optional[Sequence[SageKeyLike]] = None,
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        """Blessings for a finished free-write"""
        return await self.fan_out(BLESSING, content, None, sage_keys, policy)

    async def gather_feedback(
        self,
        content: str,
        category: Union[Category, str],
        sage_keys: Optional[Sequence[SageKeyLike]] = None,
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        """Feedback on a completed journal entry"""
        return await self.fan_out(FEEDBACK, content, Category(category), sage_keys, policy)

    async def fan_out(
        self,
        flow: SageFlow,
        content: str,
        category: Optional[Category],
        sage_keys: Optional[Sequence[SageKeyLike]] = None,
        policy: Optional[FanOutPolicy] = None,
    ) -> List[PersonaInsight]:
        personas = self._resolve(sage_keys)
        policy = FanOutPolicy(policy or self.default_policy)
        logger.info(f"Fanning out {flow.name} to {len(personas)} sages ({policy.value})")

        if policy is FanOutPolicy.SEQUENTIAL:
            return await self._sequential(personas, flow, content, category)

        results = await asyncio.gather(
            *(self._ask(persona, flow, content, category) for persona in personas),
            return_exceptions=True,
        )

        insights: List[PersonaInsight] = []
        for persona, result in zip(personas, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error(f"Error getting {flow.name} from {persona.key.value}: {result}")
                if policy is FanOutPolicy.PLACEHOLDER:
                    insights.append(
                        PersonaInsight.from_persona(persona, flow.placeholder_text, is_placeholder=True)
                    )
                continue
            insights.append(result)
        return insights

    async def _sequential(
        self,
        personas: Sequence[PersonaConfig],
        flow: SageFlow,
        content: str,
        category: Optional[Category],
    ) -> List[PersonaInsight]:
        insights: List[PersonaInsight] = []
        for position, persona in enumerate(personas):
            if position:
                await self._sleep(self.sequential_pause)
            try:
                insights.append(await self._ask(persona, flow, content, category))
            except Exception as e:
                logger.error(f"Error getting {flow.name} from {persona.key.value}: {e}")
        return insights

    async def summarize(self, content: str, insights: Sequence[PersonaInsight]) -> str:
        """Fuse the sages' words into one short line. Never raises."""
        request = CompletionRequest(
            messages=build_summary_messages(content, insights),
            temperature=self.temperature,
            max_tokens=300,
        )
        try:
            response = await self.invoker.invoke(request)
        except Exception as e:
            logger.error(f"Error getting summary: {e}")
            return SUMMARY_FALLBACK
        return response.content.strip() or SUMMARY_FALLBACK
