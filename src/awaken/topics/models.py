# src/awaken/topics/models.py
from typing import List, Union
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class JournalExcerpt(BaseModel):
    """A past journal entry handed to the generators and analyzers"""
    content: str
    created_at: datetime = Field(default_factory=datetime.now)


class GeneratedTopic(BaseModel):
    """A writing prompt proposed by the model"""
    id: str
    text: str = Field(min_length=1)
    category: str = "creative"
    icon: str = "✨"

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Union[str, int]) -> str:
        return str(value)


class GeneratedTopicsResponse(BaseModel):
    """Shape of the JSON object the model must return"""
    topics: List[GeneratedTopic] = Field(default_factory=list)
