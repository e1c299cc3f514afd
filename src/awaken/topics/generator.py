# src/awaken/topics/generator.py
"""Personalised gratitude-journal topics, generated on demand."""

import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..core.types import CompletionRequest, Message, MessageRole
from ..core.fallback import ModelFallbackInvoker
from ..utils import strip_json_fences
from .models import GeneratedTopic, GeneratedTopicsResponse, JournalExcerpt


logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10

SYSTEM_ROLE = (
    "You are a creative writing coach who helps users discover deeper gratitude "
    "through personalized, thought-provoking questions."
)

_JSON_SHAPE = """请以JSON格式返回:
{{
  "topics": [
    {{"id": "1", "text": "题目内容", "category": "{category}", "icon": "emoji"}}
  ]
}}"""

NO_HISTORY_PROMPT = """生成5个独特、有深度的感恩日记题目:

【核心要求】
1. 新颖有趣 - 不是普通的"你感恩什么"
2. 具体而非抽象 - 能唤起画面感
3. 情感共鸣 - 触动内心
4. 引发深思 - 鼓励更深的反思
5. 每个题目20-35字

【创意方向】
- 感官类: "今天什么声音让你会心一笑?"
- 假设类: "如果能重温这周的一个瞬间,你会选哪个?"
- 意外类: "有什么'不便'后来变成了祝福?"
- 关系类: "今天谁让你感到被看见了?"
- 成长类: "最近什么错误教会了你什么?"

""" + _JSON_SHAPE.format(category="creative")

HISTORY_PROMPT = """根据用户最近的感恩日记内容,为他们生成5个个性化的、有深度的题目。

用户最近的日记:
{entries}

【核心要求】
1. 深度个性化 - 基于用户提到过的主题、人物、事物
2. 引发深思 - 引导更深层的反思,而非表面
3. 具体而非抽象 - 不要泛泛的问题
4. 情感共鸣 - 触动内心,激发写作欲望
5. 每个题目20-35字

【题目方向参考】
- 追问提到的人: "你提到了[某人],有没有和TA之间从未说出口的感谢?"
- 深挖提到的主题: "你经常写到[某主题],它对你的意义到底是什么?"
- 探索新角度: "除了[提到的事物],你生活中还有什么值得更多感恩?"
- 连接过去与现在: "你和[提到的人/事]的关系这些年有什么变化?"

""" + _JSON_SHAPE.format(category="personalized")


class TopicGenerator:
    """Asks the model for fresh writing topics, optionally based on history"""

    def __init__(self, invoker: ModelFallbackInvoker, temperature: float = 0.8):
        self.invoker = invoker
        self.temperature = temperature

    def build_messages(self, history: Optional[Sequence[JournalExcerpt]] = None) -> List[Message]:
        if history:
            recent = list(history)[:HISTORY_LIMIT]
            prompt = HISTORY_PROMPT.replace("{entries}", "\n\n".join(e.content for e in recent))
        else:
            prompt = NO_HISTORY_PROMPT
        return [
            Message(MessageRole.SYSTEM, SYSTEM_ROLE),
            Message(MessageRole.USER, prompt),
        ]

    async def generate(self, history: Optional[Sequence[JournalExcerpt]] = None) -> List[GeneratedTopic]:
        """
        Generate five topics.

        Args:
            history: Most recent entries first; only the first ten are used

        Returns:
            The topics, or an empty list when generation fails so the
            caller can fall back to its static prompts
        """
        label = "with history" if history else "no history"
        request = CompletionRequest(
            messages=self.build_messages(history),
            temperature=self.temperature,
            extra_params={"response_format": {"type": "json_object"}},
        )

        try:
            response = await self.invoker.invoke(request)
        except Exception as e:
            logger.error(f"Error generating dynamic prompts ({label}): {e}")
            return []

        if not response.content:
            logger.warning(f"Model {response.model} returned no topics ({label})")
            return []

        try:
            parsed = GeneratedTopicsResponse.model_validate_json(strip_json_fences(response.content))
        except ValidationError as e:
            logger.error(f"Could not parse generated topics ({label}): {e}")
            return []

        logger.info(f"Generated {len(parsed.topics)} topics ({label}) with {response.model}")
        return parsed.topics
