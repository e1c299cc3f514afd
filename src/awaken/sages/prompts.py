# src/awaken/sages/prompts.py
"""Message builders for every flow that asks the sages to speak."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.types import Category, Message, MessageRole, PersonaConfig, PersonaInsight


WRITING_CONTEXT: Dict[Category, str] = {
    Category.GRATITUDE: "用户正在进行感恩写作练习",
    Category.PHILOSOPHICAL: "用户正在进行哲思写作练习",
}

COMPLETION_CONTEXT: Dict[Category, str] = {
    Category.GRATITUDE: "用户完成了一篇感恩日记",
    Category.PHILOSOPHICAL: "用户完成了一篇哲思日记",
}

_LOVING_VIEW = "以高维视角、不着相、充满慈爱的方式回应"


@dataclass(frozen=True)
class SageFlow:
    """
    One kind of sage request.

    ``instruction`` is appended to the persona's system prompt and may use
    ``{context}`` for the category framing. ``default_text`` replaces an
    empty model answer, ``placeholder_text`` stands in for a failed persona.
    """
    name: str
    instruction: str
    user_label: str
    default_text: str
    placeholder_text: str
    contexts: Optional[Dict[Category, str]] = None
    max_tokens: int = 500


INSIGHT = SageFlow(
    name="insight",
    instruction="{context}。请根据用户的写作内容，提供简短而有深度的引导（100-150字），帮助他们深化思考和感恩体验。",
    user_label="我的写作内容：",
    default_text="请继续你的思考...",
    placeholder_text="暂时无法获取启示，请稍后再试...",
    contexts=WRITING_CONTEXT,
)

DEEP_INSIGHT = SageFlow(
    name="deep_insight",
    instruction=(
        "{context}。请根据用户的写作内容，提供有深度的引导（150-250字），"
        f"帮助他们深化思考和感恩体验。请{_LOVING_VIEW}。"
    ),
    user_label="我的写作内容：",
    default_text="请继续你的思考...",
    placeholder_text="暂时无法获取启示，请稍后再试...",
    contexts=WRITING_CONTEXT,
    max_tokens=800,
)

BLESSING = SageFlow(
    name="blessing",
    instruction=(
        "用户完成了一段自由记录。请根据用户的内容，给出有深度的评论、建议与鼓励（100-150字）。\n\n"
        "你的回应应该：\n"
        "- 首先肯定用户愿意记录和表达的勇气\n"
        "- 对用户的内容给出有洞察力的回应\n"
        "- 提供温暖的建议或新的视角\n"
        "- 以鼓励和祝福结尾\n\n"
        f"语气要温暖、真诚，{_LOVING_VIEW}。"
    ),
    user_label="我的记录：",
    default_text="感谢你的分享，继续保持这份觉察。",
    placeholder_text="感谢你的分享，继续保持这份觉察。",
)

FEEDBACK = SageFlow(
    name="feedback",
    instruction=(
        "{context}。请根据用户的写作内容，给出有深度的寄语（80-120字）。"
        f"语气要温暖、真诚，{_LOVING_VIEW}，让用户感到被看见、被理解、被肯定。"
    ),
    user_label="我的日记内容：",
    default_text="写得真好！",
    placeholder_text="写得真好！",
    contexts=COMPLETION_CONTEXT,
)


SUMMARY_SYSTEM_PROMPT = """你是一位智慧的综合者，能够融合东西方哲学的精华。

你的任务是根据四位智者（孔子、老子、释迦牟尼、柏拉图）的寄语，给出一个简短而有力的综合总结。

要求：
- 40-60字左右
- 提炼四位智者寄语的共同主题或核心洞见
- 语言优美、富有诗意
- 给用户一个清晰的行动指引或精神导向
- 不要列举每位智者的观点，而是融合成一个统一的声音

重要：必须用纯中文回应。"""

SUMMARY_FALLBACK = "感恩你的分享，继续保持这份觉察。"
SUMMARY_EXCERPT_LENGTH = 100


def build_sage_messages(
    persona: PersonaConfig,
    flow: SageFlow,
    content: str,
    category: Optional[Category] = None,
) -> List[Message]:
    """System turn (persona + framing) followed by the user's writing"""
    instruction = flow.instruction
    if flow.contexts is not None:
        if category is None:
            raise ValueError(f"Flow {flow.name!r} needs a category")
        instruction = instruction.format(context=flow.contexts[Category(category)])

    return [
        Message(MessageRole.SYSTEM, f"{persona.system_prompt}\n\n{instruction}"),
        Message(MessageRole.USER, f"{flow.user_label}\n\n{content}"),
    ]


def build_summary_messages(content: str, insights: Sequence[PersonaInsight]) -> List[Message]:
    excerpts = "\n".join(
        f"{insight.display_name}:“{insight.text[:SUMMARY_EXCERPT_LENGTH]}...”"
        for insight in insights
    )
    return [
        Message(MessageRole.SYSTEM, SUMMARY_SYSTEM_PROMPT),
        Message(MessageRole.USER, f"用户的记录：\n{content}\n\n四位智者的寄语：\n{excerpts}"),
    ]
