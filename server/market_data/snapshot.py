"""
Snapshot caches

Each data domain keeps exactly one last-known-good value. A refresh swaps
the whole value in a single attribute assignment, so readers on the event
loop never see a half-written snapshot, and a failed refresh simply leaves
the previous value in place.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generic, Iterable, Mapping, Optional, TypeVar

from market_data.symbols import SNAPSHOT_KEYS

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Quote:
    """One instrument quote as shown on a board."""

    symbol: str
    label: str
    value: str
    change: str
    direction: str  # "up" | "down" | "neutral"
    raw_value: float
    raw_change: float = 0.0
    fetched_at: datetime = field(default_factory=_utcnow)
    unit: str = ""

    def __post_init__(self) -> None:
        if self.direction not in ("up", "down", "neutral"):
            raise ValueError(f"direction must be up/down/neutral, got {self.direction!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "label": self.label,
            "value": self.value,
            "change": self.change,
            "dir": self.direction,
            "rawValue": self.raw_value,
            "rawChange": self.raw_change,
        }

    def to_board_dict(self) -> dict[str, Any]:
        """FX and commodity board row."""
        row = {
            "label": self.label,
            "price": self.value,
            "change": self.change,
            "dir": self.direction,
            "symbol": self.symbol,
        }
        if self.unit:
            row["unit"] = self.unit
        return row


@dataclass(frozen=True)
class MarketSnapshot:
    """Numeric view of the market board keyed by short names (spx, us10y, ...)."""

    values: Mapping[str, float]
    updated_at: datetime

    @classmethod
    def from_quotes(cls, quotes: Iterable[Quote], updated_at: Optional[datetime] = None) -> MarketSnapshot:
        values: dict[str, float] = {}
        for quote in quotes:
            key = SNAPSHOT_KEYS.get(quote.symbol)
            if key is None or quote.raw_value is None or math.isnan(quote.raw_value):
                continue
            values[key] = quote.raw_value
        return cls(values=values, updated_at=updated_at or _utcnow())

    def get(self, key: str) -> Optional[float]:
        return self.values.get(key)

    def to_context_text(self, now: Optional[datetime] = None) -> str:
        """Plain-text block used to ground the headline analyst in live prices."""
        now = now or _utcnow()
        age = round((now - self.updated_at).total_seconds())

        def v(key: str) -> str:
            value = self.values.get(key)
            return "N/A" if value is None else f"{value:g}"

        return (
            f"LIVE MARKET DATA (as of {age} seconds ago - USE THESE FOR ACCURACY):\n"
            f"INDICES:\n"
            f"- S&P 500: {v('spx')} | NASDAQ: {v('nasdaq')} | DOW: {v('dow')}\n"
            f"- VIX: {v('vix')}\n"
            f"TREASURIES (Yields):\n"
            f"- 2Y: {v('us2y')} | 5Y: {v('us5y')} | 10Y: {v('us10y')} | 30Y: {v('us30y')}\n"
            f"FX MAJORS:\n"
            f"- EUR/USD: {v('eurusd')} | GBP/USD: {v('gbpusd')} | USD/JPY: {v('usdjpy')}\n"
            f"- DXY (Dollar Index): {v('dxy')}\n"
            f"COMMODITIES:\n"
            f"- Gold: {v('gold')} | Silver: {v('silver')} | Copper: {v('copper')}\n"
            f"- WTI Crude: {v('wti')} | Brent: {v('brent')} | Nat Gas: {v('natgas')}\n"
            f"\n"
            f"IMPORTANT: Cross-reference any price levels mentioned in the headline against this data.\n"
            f"If the headline claims a price that contradicts this data, note the discrepancy."
        )


NO_MARKET_DATA = "Market data not yet available."


class SnapshotCache(Generic[T]):
    """Last-known-good value for one data domain."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._value: Optional[T] = None
        self._updated_at: Optional[datetime] = None

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def updated_at(self) -> Optional[datetime]:
        return self._updated_at

    @property
    def is_empty(self) -> bool:
        return self._value is None

    def replace(self, value: T, now: Optional[datetime] = None) -> None:
        self._value = value
        self._updated_at = now or _utcnow()

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """Seconds since the last successful replace; infinity when never filled."""
        if self._updated_at is None:
            return math.inf
        return ((now or _utcnow()) - self._updated_at).total_seconds()
