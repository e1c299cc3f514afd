# src/awaken/core/types.py
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field, asdict
from enum import Enum
from datetime import datetime


class MessageRole(str, Enum):
    """Message roles for chat completions"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class SageKey(str, Enum):
    """The four sage personas"""
    CONFUCIUS = "confucius"
    LAOZI = "laozi"
    BUDDHA = "buddha"
    PLATO = "plato"


class Category(str, Enum):
    """Journal writing categories"""
    GRATITUDE = "gratitude"
    PHILOSOPHICAL = "philosophical"


class FanOutPolicy(str, Enum):
    """How the aggregator treats personas whose call failed"""
    PLACEHOLDER = "placeholder"
    DROP_FAILED = "drop_failed"
    SEQUENTIAL = "sequential"


@dataclass
class Message:
    """Chat message"""
    role: MessageRole
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class CompletionRequest:
    """Request for a chat completion, built per call and never persisted"""
    messages: List[Message]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    extra_params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class CompletionResponse:
    """Response from whichever model answered first"""
    content: str
    model: str
    provider: str
    usage: Dict[str, int] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 1
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class PersonaConfig:
    """A fixed sage persona. Defined once at import time."""
    key: SageKey
    display_name: str
    emoji: str
    style: str
    system_prompt: str


@dataclass
class PersonaInsight:
    """One sage's commentary on a piece of user writing"""
    persona_key: SageKey
    display_name: str
    emoji: str
    style: str
    text: str
    is_placeholder: bool = False

    @classmethod
    def from_persona(
        cls,
        persona: PersonaConfig,
        text: str,
        is_placeholder: bool = False
    ) -> "PersonaInsight":
        return cls(
            persona_key=persona.key,
            display_name=persona.display_name,
            emoji=persona.emoji,
            style=persona.style,
            text=text,
            is_placeholder=is_placeholder,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form stored alongside a journal entry"""
        data = asdict(self)
        data["persona_key"] = self.persona_key.value
        return data
