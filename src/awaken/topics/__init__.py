"""Dynamic journaling topics"""

from .models import JournalExcerpt, GeneratedTopic, GeneratedTopicsResponse
from .generator import TopicGenerator, HISTORY_LIMIT

__all__ = [
    "JournalExcerpt",
    "GeneratedTopic",
    "GeneratedTopicsResponse",
    "TopicGenerator",
    "HISTORY_LIMIT",
]
