"""
Annotation Engine

Heuristic market-impact analysis for headlines: suppression gates, a
regime resolver, an ordered rule catalog and snapshot-derived levels.
"""
from newsdesk.analysis.classifier import classify_news, is_opinion_or_analysis, resolve_column
from newsdesk.analysis.engine import AnnotationEngine, AnnotationError, AnnotationStats
from newsdesk.analysis.regime import resolve_regime

__all__ = [
    "AnnotationEngine",
    "AnnotationError",
    "AnnotationStats",
    "classify_news",
    "is_opinion_or_analysis",
    "resolve_column",
    "resolve_regime",
]
