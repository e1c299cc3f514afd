# src/awaken/analysis/analyzer.py
"""Structured analysis of a user's journal history."""

import logging
from typing import Dict, List, Sequence, Type, Union

from pydantic import BaseModel, ValidationError

from ..core.types import CompletionRequest, Message, MessageRole
from ..core.exceptions import AnalysisError
from ..core.fallback import ModelFallbackInvoker
from ..topics.models import JournalExcerpt
from ..utils import strip_json_fences
from .models import (
    AnalysisResult,
    ConflictAnalysis,
    ConsciousnessAnalysis,
    GrowthAnalysis,
    InsightType,
    MindfulnessAnalysis,
    RelationshipAnalysis,
    Theorist,
)


logger = logging.getLogger(__name__)

MAX_ENTRIES = 30
MAX_ENTRY_LENGTH = 500

SYSTEM_PROMPT = (
    "你是一位温暖而敏锐的心理与哲学分析师。你阅读用户的日记，从中发现模式，"
    "以充满慈爱、不评判的方式给出洞见。只输出一个JSON对象，不要输出其他文字。"
    "所有文本字段必须使用中文。"
)


RESULT_MODELS: Dict[InsightType, Type[BaseModel]] = {
    InsightType.RELATIONSHIPS: RelationshipAnalysis,
    InsightType.CONSCIOUSNESS: ConsciousnessAnalysis,
    InsightType.GROWTH: GrowthAnalysis,
    InsightType.MINDFULNESS: MindfulnessAnalysis,
    InsightType.INNER_CONFLICT: ConflictAnalysis,
}

THEORISTS: Dict[InsightType, Theorist] = {
    InsightType.RELATIONSHIPS: Theorist(
        name="约翰·鲍尔比", period="1907-1990", avatar="🤝",
        description="依恋理论的奠基者，认为与重要他人的情感连接塑造了我们的安全感。",
    ),
    InsightType.CONSCIOUSNESS: Theorist(
        name="大卫·霍金斯", period="1927-2012", avatar="🌟",
        description="提出意识能量层级，从恐惧与欲望到爱与喜悦，描绘心灵的成长阶梯。",
    ),
    InsightType.GROWTH: Theorist(
        name="卡尔·罗杰斯", period="1902-1987", avatar="🌱",
        description="人本主义心理学家，相信每个人都有自我实现的内在倾向。",
    ),
    InsightType.MINDFULNESS: Theorist(
        name="一行禅师", period="1926-2022", avatar="🍃",
        description="正念的传播者，教导人们在每一次呼吸中回到当下。",
    ),
    InsightType.INNER_CONFLICT: Theorist(
        name="卡尔·荣格", period="1875-1961", avatar="🌓",
        description="分析心理学创始人，主张整合阴影与对立面，走向完整的自性。",
    ),
}

INSTRUCTIONS: Dict[InsightType, str] = {
    InsightType.RELATIONSHIPS: """分析日记中出现的重要他人，以及用户对他们的感恩。
返回JSON:
{"summary": "整体关系概述", "people": [{"name": "人物", "emoji": "emoji", "count": 出现次数, "gratitude": "用户对TA的感恩"}], "insight": "关于用户人际关系的洞见"}""",
    InsightType.CONSCIOUSNESS: """以霍金斯意识层级（0-1000）评估日记中体现的意识状态。
low 为恐惧/欲望（200以下），mid 为理性/接纳（200-499），high 为爱/喜悦（500以上）。
返回JSON:
{"overallLevel": 整体层级数值, "levelName": "层级名称", "distribution": {"low": 百分比, "mid": 百分比, "high": 百分比},
 "levelBreakdown": {"high": [{"phrase": "日记原句", "level": 数值, "levelName": "层级名称"}], "mid": [], "low": []},
 "progressSummary": "进展总结", "encouragement": "鼓励的话"}""",
    InsightType.GROWTH: """按时间顺序梳理用户心态的成长与转变。
返回JSON:
{"currentLevel": "当前阶段", "journeyDescription": "成长旅程描述", "shifts": [{"date": "日期", "from": "之前的状态", "to": "之后的状态", "description": "转变说明"}], "encouragement": "鼓励的话"}""",
    InsightType.MINDFULNESS: """从日记中提炼适合用户的正念提醒。
返回JSON:
{"intro": "开场语", "reminders": [{"emoji": "emoji", "title": "标题", "coreInsight": "核心洞见", "detail": "具体练习"}], "blessing": "祝福"}""",
    InsightType.INNER_CONFLICT: """识别日记中反复出现的内在矛盾，并给出整合的方向。
返回JSON:
{"intro": "开场语", "conflicts": [{"title": "矛盾主题", "tension": "两股力量的张力", "integration": "整合之道"}], "wisdom": "一句智慧的话"}""",
}


def format_entries(entries: Sequence[JournalExcerpt]) -> str:
    lines: List[str] = []
    for entry in list(entries)[:MAX_ENTRIES]:
        content = entry.content.strip()
        if len(content) > MAX_ENTRY_LENGTH:
            content = content[:MAX_ENTRY_LENGTH] + "..."
        lines.append(f"[{entry.created_at:%Y-%m-%d}] {content}")
    return "\n\n".join(lines)


class HistoryAnalyzer:
    """Turns a set of journal entries into one structured analysis"""

    def __init__(self, invoker: ModelFallbackInvoker, temperature: float = 0.7, max_tokens: int = 2000):
        self.invoker = invoker
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_messages(self, entries: Sequence[JournalExcerpt], insight_type: InsightType) -> List[Message]:
        return [
            Message(MessageRole.SYSTEM, SYSTEM_PROMPT),
            Message(
                MessageRole.USER,
                f"{INSTRUCTIONS[insight_type]}\n\n用户的日记（共{len(entries)}篇）：\n\n{format_entries(entries)}",
            ),
        ]

    async def analyze(
        self,
        entries: Sequence[JournalExcerpt],
        insight_type: Union[InsightType, str],
    ) -> AnalysisResult:
        """
        Analyze ``entries`` from the angle of ``insight_type``.

        Raises:
            ValueError: no entries, or unknown insight type
            AnalysisError: the model's answer is not valid JSON of the expected shape
            LLMProviderError: the gateway failed after all fallbacks
        """
        insight_type = InsightType(insight_type)
        if not entries:
            raise ValueError("At least one journal entry is required for analysis")

        request = CompletionRequest(
            messages=self.build_messages(entries, insight_type),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            extra_params={"response_format": {"type": "json_object"}},
        )
        response = await self.invoker.invoke(request)

        result_model = RESULT_MODELS[insight_type]
        try:
            data = result_model.model_validate_json(strip_json_fences(response.content or ""))
        except ValidationError as e:
            logger.error(f"Invalid {insight_type.value} analysis from {response.model}: {e}")
            raise AnalysisError(
                f"Could not parse {insight_type.value} analysis",
                details={"model": response.model, "content": response.content[:500]},
            ) from e

        logger.info(f"{insight_type.value} analysis of {len(entries)} entries done with {response.model}")
        return AnalysisResult(
            type=insight_type,
            data=data,
            theorist=THEORISTS[insight_type],
            entry_count=len(entries),
            model=response.model,
        )
