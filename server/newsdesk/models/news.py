"""
News Data Models

Core data structures for news items at different pipeline stages.
All models use frozen dataclasses with __post_init__ validation.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

MAX_IMPLICATIONS = 3
MAX_TECHNICAL_LEVELS = 3


class Column(str, Enum):
    """Routing bucket used for client-side grouping."""

    BREAKING = "breaking"
    MARKET = "market"
    MACRO = "macro"
    GEO = "geo"
    COMMODITY = "commodity"
    FX = "fx"

    @classmethod
    def from_string(cls, value: str) -> "Column":
        """Convert string to Column, raising ValueError if not found."""
        v = value.strip().lower()
        for member in cls:
            if member.value == v:
                return member
        raise ValueError(f"Unknown column: {value!r}")


class Horizon(str, Enum):
    """How soon the story is expected to move prices."""

    NOW = "NOW"
    INTRADAY = "INTRADAY"
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    NA = "N/A"


class Direction(str, Enum):
    """Directional risk bias."""

    RISK_ON = "RISK-ON"
    RISK_OFF = "RISK-OFF"
    NEUTRAL = "NEUTRAL"


class Regime(str, Enum):
    """Named macro regime."""

    REFLATIONARY = "REFLATIONARY"
    STAGFLATIONARY = "STAGFLATIONARY"
    GOLDILOCKS = "GOLDILOCKS"
    DEFLATIONARY = "DEFLATIONARY"


@dataclass(frozen=True)
class NewsItem:
    """
    Candidate story produced by a poller.

    Transient: it only lives for the poll cycle that fetched it.
    """

    headline: str
    link: str
    source: str
    published_at: Optional[datetime] = None
    body: str = ""
    guid: str = ""

    def __post_init__(self) -> None:
        if not self.headline and not self.link:
            raise ValueError("headline or link must be non-empty")
        if self.published_at is not None and self.published_at.tzinfo is None:
            raise ValueError("published_at must be timezone-aware")

    @property
    def identifier(self) -> str:
        """Dedup key: link, then guid, then headline."""
        return self.link or self.guid or self.headline

    @property
    def text(self) -> str:
        return f"{self.headline} {self.body}".strip()


@dataclass(frozen=True)
class Analysis:
    """Output of the annotation engine for one headline."""

    skip: bool = False
    headline_only: bool = False
    implications: tuple[str, ...] = ()
    impact: int = 2
    horizon: Horizon = Horizon.DAYS
    technical_levels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    confidence: int = 50
    next_events: tuple[str, ...] = ()
    direction: Direction = Direction.NEUTRAL
    regime: Optional[Regime] = None
    assets: tuple[str, ...] = ()
    sensitivity: str = "DEVELOPING"

    def __post_init__(self) -> None:
        if len(self.implications) > MAX_IMPLICATIONS:
            raise ValueError(
                f"at most {MAX_IMPLICATIONS} implications, got {len(self.implications)}"
            )
        if len(self.technical_levels) > MAX_TECHNICAL_LEVELS:
            raise ValueError(
                f"at most {MAX_TECHNICAL_LEVELS} technical levels, got {len(self.technical_levels)}"
            )
        if not (0 <= self.impact <= 3):
            raise ValueError(f"impact must be in range [0, 3], got {self.impact}")
        if not (0 <= self.confidence <= 100):
            raise ValueError(
                f"confidence must be in range [0, 100], got {self.confidence}"
            )


@dataclass(frozen=True)
class Card:
    """
    Emitted, annotated representation of an admitted story.

    Never mutated after creation. excludeFromTicker and headlineOnly only
    steer client rendering.
    """

    emitted_at: datetime
    column: Column
    headline: str
    link: str
    source: str
    pub_age: Optional[str] = None
    verified: bool = True
    implications: tuple[str, ...] = ()
    impact: int = 2
    horizon: Optional[Horizon] = Horizon.DAYS
    technical_levels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    confidence: int = 50
    next_events: tuple[str, ...] = ()
    regime: Optional[Regime] = None
    exclude_from_ticker: bool = False
    headline_only: bool = False

    def __post_init__(self) -> None:
        if not self.headline:
            raise ValueError("headline must be non-empty string")
        if len(self.implications) > MAX_IMPLICATIONS:
            raise ValueError(
                f"at most {MAX_IMPLICATIONS} implications, got {len(self.implications)}"
            )
        if len(self.technical_levels) > MAX_TECHNICAL_LEVELS:
            raise ValueError(
                f"at most {MAX_TECHNICAL_LEVELS} technical levels, got {len(self.technical_levels)}"
            )
        if not (0 <= self.impact <= 3):
            raise ValueError(f"impact must be in range [0, 3], got {self.impact}")
        if not (0 <= self.confidence <= 100):
            raise ValueError(
                f"confidence must be in range [0, 100], got {self.confidence}"
            )

    @classmethod
    def from_analysis(
        cls,
        analysis: Analysis,
        *,
        emitted_at: datetime,
        column: Column,
        headline: str,
        link: str,
        source: str,
        pub_age: Optional[str] = None,
        exclude_from_ticker: bool = False,
    ) -> Card:
        """Build a machine-ingested card, blanking the payload for headline-only stories."""
        if analysis.headline_only:
            return cls(
                emitted_at=emitted_at,
                column=column,
                headline=headline,
                link=link,
                source=source,
                pub_age=pub_age,
                implications=(),
                impact=0,
                horizon=None,
                technical_levels=(),
                tags=analysis.tags,
                confidence=0,
                next_events=(),
                regime=analysis.regime,
                exclude_from_ticker=exclude_from_ticker,
                headline_only=True,
            )
        return cls(
            emitted_at=emitted_at,
            column=column,
            headline=headline,
            link=link,
            source=source,
            pub_age=pub_age,
            implications=analysis.implications,
            impact=analysis.impact,
            horizon=analysis.horizon,
            technical_levels=analysis.technical_levels,
            tags=analysis.tags,
            confidence=analysis.confidence,
            next_events=analysis.next_events,
            regime=analysis.regime,
            exclude_from_ticker=exclude_from_ticker,
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire shape sent to subscribers."""
        return {
            "time": self.emitted_at.strftime("%H:%M"),
            "headline": self.headline,
            "link": self.link,
            "source": self.source,
            "pubDate": self.pub_age,
            "verified": self.verified,
            "implications": list(self.implications),
            "impact": self.impact,
            "horizon": self.horizon.value if self.horizon else "",
            "tripwires": list(self.technical_levels),
            "tags": list(self.tags),
            "confidence": self.confidence,
            "nextEvents": list(self.next_events),
            "regime": self.regime.value if self.regime else None,
            "excludeFromTicker": self.exclude_from_ticker,
            "headlineOnly": self.headline_only,
        }
