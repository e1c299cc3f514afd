"""Structured analysis of journal history"""

from .models import (
    InsightType,
    AnalysisResult,
    Theorist,
    RelationshipAnalysis,
    ConsciousnessAnalysis,
    GrowthAnalysis,
    MindfulnessAnalysis,
    ConflictAnalysis,
)
from .analyzer import HistoryAnalyzer, RESULT_MODELS, THEORISTS

__all__ = [
    "InsightType",
    "AnalysisResult",
    "Theorist",
    "RelationshipAnalysis",
    "ConsciousnessAnalysis",
    "GrowthAnalysis",
    "MindfulnessAnalysis",
    "ConflictAnalysis",
    "HistoryAnalyzer",
    "RESULT_MODELS",
    "THEORISTS",
]
