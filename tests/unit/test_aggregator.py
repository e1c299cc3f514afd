"""
Unit tests for the persona aggregator.
"""

import asyncio

import pytest

from awaken.core.fallback import ModelFallbackInvoker
from awaken.core.types import Category, CompletionResponse, FanOutPolicy, PersonaInsight, SageKey
from awaken.sages import SAGES, DEFAULT_SAGE_ORDER, PersonaAggregator, get_persona
from awaken.sages.prompts import BLESSING, DEEP_INSIGHT, FEEDBACK, INSIGHT, SUMMARY_FALLBACK

from .conftest import FakeProvider, RecordingSleep, rate_limited, server_error


def sage_of(request) -> SageKey:
    """Which persona a request was built for, from its system prompt"""
    system = request.messages[0].content
    for key, persona in SAGES.items():
        if system.startswith(f"你是{persona.display_name}"):
            return key
    raise AssertionError("request has no sage system prompt")


def replies(failing=(), events=None, error_factory=lambda: server_error(500)):
    """Provider outcome: echo the sage's name, fail for the sages in ``failing``"""
    def outcome(request, model):
        key = sage_of(request)
        if events is not None:
            events.append(("call", key))
        if key in failing:
            return error_factory()
        return f"{SAGES[key].display_name} says hello"
    return outcome


@pytest.fixture
def make_aggregator(make_invoker):
    def factory(outcome, sleep=None, **kwargs):
        invoker, provider = make_invoker(default=outcome)
        aggregator = PersonaAggregator(invoker, sleep=sleep or RecordingSleep(), **kwargs)
        return aggregator, provider
    return factory


class TestPersonaConfig:

    def test_four_sages_in_fixed_order(self):
        assert DEFAULT_SAGE_ORDER == (SageKey.CONFUCIUS, SageKey.LAOZI, SageKey.BUDDHA, SageKey.PLATO)

    def test_sages_are_read_only(self):
        with pytest.raises(TypeError):
            SAGES[SageKey.PLATO] = SAGES[SageKey.LAOZI]

    def test_every_sage_has_display_fields(self):
        for key, persona in SAGES.items():
            assert persona.key is key
            assert persona.display_name
            assert persona.emoji
            assert persona.system_prompt.startswith(f"你是{persona.display_name}")


class TestSingleInsight:

    @pytest.mark.asyncio
    async def test_returns_insight_for_sage(self, make_aggregator):
        aggregator, provider = make_aggregator(replies())

        insight = await aggregator.get_insight("雨后的空气", "laozi", "gratitude")

        assert insight.persona_key is SageKey.LAOZI
        assert insight.display_name == "老子"
        assert insight.emoji == "☯️"
        assert insight.text == "老子 says hello"
        assert not insight.is_placeholder

    @pytest.mark.asyncio
    async def test_messages_carry_persona_context_and_content(self, make_aggregator):
        aggregator, provider = make_aggregator(replies())

        await aggregator.get_insight("雨后的空气", SageKey.PLATO, Category.PHILOSOPHICAL)

        _, request = provider.calls[0]
        system, user = request.messages
        assert system.content.startswith(SAGES[SageKey.PLATO].system_prompt)
        assert "用户正在进行哲思写作练习" in system.content
        assert "100-150字" in system.content
        assert user.content == "我的写作内容：\n\n雨后的空气"
        assert request.temperature == 0.7
        assert request.max_tokens == INSIGHT.max_tokens

    @pytest.mark.asyncio
    async def test_failure_propagates(self, make_aggregator):
        aggregator, _ = make_aggregator(replies(failing={SageKey.BUDDHA}))

        with pytest.raises(Exception):
            await aggregator.get_insight("x", "buddha", "gratitude")

    @pytest.mark.asyncio
    async def test_empty_answer_gets_default_text(self, make_aggregator):
        aggregator, _ = make_aggregator(lambda request, model: "   ")

        insight = await aggregator.get_insight("x", "confucius", "gratitude")

        assert insight.text == INSIGHT.default_text


class TestPlaceholderPolicy:

    @pytest.mark.asyncio
    async def test_all_succeed(self, make_aggregator):
        aggregator, provider = make_aggregator(replies())

        insights = await aggregator.gather_insights("今天很感恩", "gratitude")

        assert [i.persona_key for i in insights] == list(DEFAULT_SAGE_ORDER)
        assert all(not i.is_placeholder for i in insights)
        assert len(provider.calls) == 4

    @pytest.mark.asyncio
    async def test_failed_persona_gets_placeholder(self, make_aggregator):
        aggregator, _ = make_aggregator(replies(failing={SageKey.LAOZI}))

        insights = await aggregator.gather_insights("今天很感恩", "gratitude")

        assert [i.persona_key for i in insights] == list(DEFAULT_SAGE_ORDER)
        laozi = insights[1]
        assert laozi.is_placeholder
        assert laozi.display_name == "老子"
        assert laozi.emoji == "☯️"
        assert laozi.text == DEEP_INSIGHT.placeholder_text
        assert laozi.text

    @pytest.mark.asyncio
    async def test_total_failure_still_returns_full_set(self, make_aggregator):
        aggregator, _ = make_aggregator(replies(failing=set(DEFAULT_SAGE_ORDER)))

        insights = await aggregator.gather_insights("今天很感恩", "gratitude")

        assert len(insights) == 4
        assert all(i.is_placeholder and i.text for i in insights)

    @pytest.mark.asyncio
    async def test_rate_limited_persona_falls_back_independently(self, make_aggregator):
        def outcome(request, model):
            if sage_of(request) is SageKey.PLATO and model == "model-a":
                return rate_limited(model)
            return f"{model} answered"

        aggregator, provider = make_aggregator(outcome)

        insights = await aggregator.gather_insights("x", "gratitude")

        assert insights[3].text == "model-b answered"
        assert [i.text for i in insights[:3]] == ["model-a answered"] * 3
        assert len(provider.calls) == 5

    @pytest.mark.asyncio
    async def test_requested_subset_in_request_order(self, make_aggregator):
        aggregator, _ = make_aggregator(replies())

        insights = await aggregator.gather_insights("x", "gratitude", ["plato", "confucius"])

        assert [i.persona_key for i in insights] == [SageKey.PLATO, SageKey.CONFUCIUS]

    @pytest.mark.asyncio
    async def test_unknown_sage_rejected_before_any_call(self, make_aggregator):
        aggregator, provider = make_aggregator(replies())

        with pytest.raises(ValueError):
            await aggregator.gather_insights("x", "gratitude", ["confucius", "socrates"])
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, make_aggregator):
        aggregator, _ = make_aggregator(replies())

        with pytest.raises(ValueError):
            await aggregator.gather_insights("x", "anger")


class TestDropFailedPolicy:

    @pytest.mark.asyncio
    async def test_failed_persona_is_omitted(self, make_aggregator):
        aggregator, _ = make_aggregator(replies(failing={SageKey.BUDDHA}))

        insights = await aggregator.gather_insights("x", "gratitude", policy=FanOutPolicy.DROP_FAILED)

        assert [i.persona_key for i in insights] == [SageKey.CONFUCIUS, SageKey.LAOZI, SageKey.PLATO]
        assert [i.text for i in insights] == ["孔子 says hello", "老子 says hello", "柏拉图 says hello"]

    @pytest.mark.asyncio
    async def test_exhausted_fallbacks_are_omitted(self, make_aggregator):
        aggregator, _ = make_aggregator(
            replies(failing={SageKey.CONFUCIUS}, error_factory=lambda: rate_limited())
        )

        insights = await aggregator.gather_insights("x", "gratitude", policy="drop_failed")

        assert len(insights) == 3
        assert SageKey.CONFUCIUS not in [i.persona_key for i in insights]


class TestSequentialPolicy:

    @pytest.mark.asyncio
    async def test_pause_between_consecutive_calls(self, make_aggregator):
        events = []
        aggregator, _ = make_aggregator(replies(events=events), sleep=RecordingSleep(events))

        insights = await aggregator.gather_insights("x", "gratitude", policy=FanOutPolicy.SEQUENTIAL)

        assert len(insights) == 4
        assert events == [
            ("call", SageKey.CONFUCIUS),
            ("sleep", 1.0),
            ("call", SageKey.LAOZI),
            ("sleep", 1.0),
            ("call", SageKey.BUDDHA),
            ("sleep", 1.0),
            ("call", SageKey.PLATO),
        ]

    @pytest.mark.asyncio
    async def test_failure_skips_persona_and_continues(self, make_aggregator):
        sleep = RecordingSleep()
        aggregator, provider = make_aggregator(replies(failing={SageKey.LAOZI}), sleep=sleep)

        insights = await aggregator.gather_insights("x", "gratitude", policy=FanOutPolicy.SEQUENTIAL)

        assert [i.persona_key for i in insights] == [SageKey.CONFUCIUS, SageKey.BUDDHA, SageKey.PLATO]
        assert len(provider.calls) == 4
        assert sleep.delays == [1.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_pause_is_configurable(self, make_aggregator):
        sleep = RecordingSleep()
        aggregator, _ = make_aggregator(replies(), sleep=sleep, sequential_pause=0.25)

        await aggregator.gather_insights("x", "gratitude", ["laozi", "plato"], policy=FanOutPolicy.SEQUENTIAL)

        assert sleep.delays == [0.25]


class TestOtherFlows:

    @pytest.mark.asyncio
    async def test_blessings_use_free_write_framing(self, make_aggregator):
        aggregator, provider = make_aggregator(replies())

        blessings = await aggregator.gather_blessings("今天走了很久的路")

        assert len(blessings) == 4
        _, request = provider.calls[0]
        assert "用户完成了一段自由记录" in request.messages[0].content
        assert request.messages[1].content.startswith("我的记录：")

    @pytest.mark.asyncio
    async def test_blessing_placeholder(self, make_aggregator):
        aggregator, _ = make_aggregator(replies(failing={SageKey.PLATO}))

        blessings = await aggregator.gather_blessings("x")

        assert blessings[3].text == BLESSING.placeholder_text

    @pytest.mark.asyncio
    async def test_feedback_uses_completion_framing(self, make_aggregator):
        aggregator, provider = make_aggregator(replies(failing={SageKey.CONFUCIUS}))

        feedback = await aggregator.gather_feedback("x", "philosophical")

        assert feedback[0].text == FEEDBACK.placeholder_text
        system = provider.calls[-1][1].messages[0].content
        assert "用户完成了一篇哲思日记" in system

    @pytest.mark.asyncio
    async def test_summary_quotes_each_sage(self, make_aggregator):
        aggregator, provider = make_aggregator(lambda request, model: "  合而为一  ")
        insights = [
            PersonaInsight.from_persona(SAGES[SageKey.CONFUCIUS], "仁" * 150),
            PersonaInsight.from_persona(SAGES[SageKey.LAOZI], "道"),
        ]

        summary = await aggregator.summarize("我的记录", insights)

        assert summary == "合而为一"
        user = provider.calls[0][1].messages[1].content
        assert "孔子:“" + "仁" * 100 + "...”" in user
        assert "老子:“道...”" in user

    @pytest.mark.asyncio
    async def test_summary_failure_returns_fallback(self, make_aggregator):
        aggregator, _ = make_aggregator(lambda request, model: server_error(502))

        summary = await aggregator.summarize("x", [])

        assert summary == SUMMARY_FALLBACK


class TestInsightSerialization:

    def test_to_dict_is_json_friendly(self):
        insight = PersonaInsight.from_persona(SAGES[SageKey.BUDDHA], "当下")
        assert insight.to_dict() == {
            "persona_key": "buddha",
            "display_name": "释迦牟尼",
            "emoji": "🙏",
            "style": "慈悲智慧",
            "text": "当下",
            "is_placeholder": False,
        }


class StaggeredProvider(FakeProvider):
    """Answers after a per-sage delay, so later sages can finish first"""

    DELAYS = {
        SageKey.CONFUCIUS: 0.04,
        SageKey.LAOZI: 0.03,
        SageKey.BUDDHA: 0.02,
        SageKey.PLATO: 0.01,
    }

    def __init__(self, config, failing=()):
        super().__init__(config)
        self.failing = set(failing)
        self.in_flight = 0
        self.peak_in_flight = 0
        self.finished = []

    async def _do_complete(self, request, model):
        key = sage_of(request)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.DELAYS[key])
        finally:
            self.in_flight -= 1
        self.finished.append(key)
        if key in self.failing:
            raise server_error(503)
        return CompletionResponse(content=f"{SAGES[key].display_name} says hello", model=model, provider=self.name)


class TestConcurrentFanOut:

    def make(self, config, failing=()):
        provider = StaggeredProvider(config, failing)
        invoker = ModelFallbackInvoker(provider, config, sleep=RecordingSleep())
        return PersonaAggregator(invoker, sleep=RecordingSleep()), provider

    @pytest.mark.asyncio
    @pytest.mark.parametrize("policy", [FanOutPolicy.PLACEHOLDER, FanOutPolicy.DROP_FAILED])
    async def test_calls_overlap_and_keep_request_order(self, config, policy):
        aggregator, provider = self.make(config)

        insights = await aggregator.gather_insights("x", "gratitude", policy=policy)

        assert provider.peak_in_flight == 4
        assert provider.finished == [SageKey.PLATO, SageKey.BUDDHA, SageKey.LAOZI, SageKey.CONFUCIUS]
        assert [i.persona_key for i in insights] == list(DEFAULT_SAGE_ORDER)
        assert [i.text for i in insights] == [
            "孔子 says hello", "老子 says hello", "释迦牟尼 says hello", "柏拉图 says hello",
        ]

    @pytest.mark.asyncio
    async def test_placeholder_lands_in_its_slot(self, config):
        aggregator, provider = self.make(config, failing={SageKey.PLATO})

        insights = await aggregator.gather_insights("x", "gratitude")

        assert provider.peak_in_flight == 4
        assert [i.persona_key for i in insights] == list(DEFAULT_SAGE_ORDER)
        assert [i.is_placeholder for i in insights] == [False, False, False, True]

    @pytest.mark.asyncio
    async def test_sequential_never_overlaps(self, config):
        aggregator, provider = self.make(config)

        await aggregator.gather_insights("x", "gratitude", policy=FanOutPolicy.SEQUENTIAL)

        assert provider.peak_in_flight == 1
        assert provider.finished == list(DEFAULT_SAGE_ORDER)


class TestPersonaLookup:

    def test_by_key_or_value(self):
        assert get_persona("laozi") is SAGES[SageKey.LAOZI]
        assert get_persona(SageKey.PLATO) is SAGES[SageKey.PLATO]

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            get_persona("socrates")

    @pytest.mark.asyncio
    async def test_aggregator_only_knows_its_own_personas(self, make_invoker):
        invoker, provider = make_invoker(default=replies())
        aggregator = PersonaAggregator(
            invoker,
            personas={SageKey.LAOZI: SAGES[SageKey.LAOZI]},
            sleep=RecordingSleep(),
        )

        insights = await aggregator.gather_insights("x", "gratitude", ["laozi"])
        assert [i.persona_key for i in insights] == [SageKey.LAOZI]

        with pytest.raises(ValueError):
            await aggregator.gather_insights("x", "gratitude")
        assert len(provider.calls) == 1
