# src/awaken/analysis/models.py
from typing import List, Optional, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InsightType(str, Enum):
    """Kinds of history analysis"""
    RELATIONSHIPS = "relationships"
    CONSCIOUSNESS = "consciousness"
    GROWTH = "growth"
    MINDFULNESS = "mindfulness"
    INNER_CONFLICT = "inner-conflict"


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys the UI expects"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Person(CamelModel):
    name: str
    emoji: str = "🙂"
    count: int = Field(default=1, ge=0, description="How many entries mention this person")
    gratitude: str = Field(description="What the user is grateful for about them")


class RelationshipAnalysis(CamelModel):
    summary: str
    people: List[Person] = Field(default_factory=list)
    insight: str


class LevelDistribution(CamelModel):
    low: float = Field(ge=0, le=100)
    mid: float = Field(ge=0, le=100)
    high: float = Field(ge=0, le=100)


class LevelItem(CamelModel):
    phrase: str = Field(description="A short quote from the user's writing")
    level: int = Field(ge=0, le=1000)
    level_name: str


class LevelBreakdown(CamelModel):
    high: List[LevelItem] = Field(default_factory=list)
    mid: List[LevelItem] = Field(default_factory=list)
    low: List[LevelItem] = Field(default_factory=list)


class ConsciousnessAnalysis(CamelModel):
    overall_level: int = Field(ge=0, le=1000)
    level_name: str
    distribution: LevelDistribution
    level_breakdown: LevelBreakdown = Field(default_factory=LevelBreakdown)
    progress_summary: str
    encouragement: str


class Shift(CamelModel):
    date: str
    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    description: str


class GrowthAnalysis(CamelModel):
    current_level: str
    journey_description: str
    shifts: List[Shift] = Field(default_factory=list)
    encouragement: str


class Reminder(CamelModel):
    emoji: str = "🌿"
    title: str
    core_insight: str
    detail: str


class MindfulnessAnalysis(CamelModel):
    intro: str
    reminders: List[Reminder] = Field(default_factory=list)
    blessing: str


class Conflict(CamelModel):
    title: str
    tension: str
    integration: str


class ConflictAnalysis(CamelModel):
    intro: str
    conflicts: List[Conflict] = Field(default_factory=list)
    wisdom: str


AnalysisData = Union[
    RelationshipAnalysis,
    ConsciousnessAnalysis,
    GrowthAnalysis,
    MindfulnessAnalysis,
    ConflictAnalysis,
]


class Theorist(CamelModel):
    """The thinker whose lens frames an analysis"""
    name: str
    period: Optional[str] = None
    description: str
    avatar: str = "👔"


class AnalysisResult(CamelModel):
    type: InsightType
    data: AnalysisData
    theorist: Optional[Theorist] = None
    entry_count: int = 0
    model: Optional[str] = None
