"""Sage personas and the aggregator that fans writing out to them."""

from .personas import SAGES, DEFAULT_SAGE_ORDER, get_persona
from .prompts import (
    SageFlow,
    INSIGHT,
    DEEP_INSIGHT,
    BLESSING,
    FEEDBACK,
    build_sage_messages,
    build_summary_messages,
)
from .aggregator import PersonaAggregator

__all__ = [
    "SAGES",
    "DEFAULT_SAGE_ORDER",
    "get_persona",
    "SageFlow",
    "INSIGHT",
    "DEEP_INSIGHT",
    "BLESSING",
    "FEEDBACK",
    "build_sage_messages",
    "build_summary_messages",
    "PersonaAggregator",
]
