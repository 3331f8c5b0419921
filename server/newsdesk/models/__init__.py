"""
Newsdesk Data Models

Frozen dataclasses with validation.
"""
from newsdesk.models.news import (
    Analysis,
    Card,
    Column,
    Direction,
    Horizon,
    NewsItem,
    Regime,
)

__all__ = [
    "Analysis",
    "Card",
    "Column",
    "Direction",
    "Horizon",
    "NewsItem",
    "Regime",
]
