"""
FRED macro indicators

Each series falls back to a hardcoded value when the API key is missing or
the fetch fails, so the indicator strip is never empty.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from newsdesk.core.types import SourceError

logger = logging.getLogger(__name__)

OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"


@dataclass(frozen=True)
class FredSeries:
    series_id: str
    label: str
    tripwire: float
    fallback: float


FRED_SERIES: tuple[FredSeries, ...] = (
    FredSeries("U6RATE", "U6 RATE", tripwire=8.0, fallback=8.70),
    FredSeries("RRPONTSYAWARD", "FED RRP", tripwire=5.50, fallback=3.50),
    FredSeries("SOFR", "SOFR", tripwire=5.50, fallback=4.30),
)


@dataclass(frozen=True)
class Indicator:
    label: str
    value: float
    change: float = 0.0
    tripwire_hit: bool = False
    date: Optional[str] = None
    fallback: bool = False

    @property
    def direction(self) -> str:
        if self.change > 0:
            return "up"
        if self.change < 0:
            return "down"
        return "neutral"

    def to_dict(self) -> dict[str, Any]:
        row = {
            "label": self.label,
            "value": f"{self.value:.2f}%",
            "change": f"{'+' if self.change > 0 else ''}{self.change:.2f}%",
            "dir": self.direction,
            "tripwireHit": self.tripwire_hit,
        }
        if self.date:
            row["date"] = self.date
        return row


def fallback_indicator(series: FredSeries) -> Indicator:
    return Indicator(label=series.label, value=series.fallback, fallback=True)


def _parse(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class FredClient:
    """Latest two observations per series from the St. Louis Fed API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str = "",
        timeout_seconds: float = 5.0,
        series: tuple[FredSeries, ...] = FRED_SERIES,
    ) -> None:
        self._session = session
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._series = series

    async def fetch_series(self, series: FredSeries) -> Indicator:
        """Raises SourceError on transport failure or a non-numeric latest value."""
        params = {
            "series_id": series.series_id,
            "api_key": self._api_key,
            "file_type": "json",
            "sort_order": "desc",
            "limit": "2",
        }
        try:
            async with self._session.get(OBSERVATIONS_URL, params=params, timeout=self._timeout) as resp:
                resp.raise_for_status()
                data = await resp.json()
        except asyncio.TimeoutError as e:
            raise SourceError("FRED request timed out", source=series.series_id) from e
        except aiohttp.ClientError as e:
            raise SourceError(f"FRED request failed: {e}", source=series.series_id) from e

        observations = data.get("observations") or []
        latest = _parse(observations[0].get("value")) if observations else None
        if latest is None:
            raise SourceError("No numeric observation", source=series.series_id)

        previous = _parse(observations[1].get("value")) if len(observations) > 1 else latest
        change = 0.0 if previous is None else latest - previous
        return Indicator(
            label=series.label,
            value=latest,
            change=change,
            tripwire_hit=latest > series.tripwire,
            date=observations[0].get("date"),
        )

    async def fetch_indicators(self) -> list[Indicator]:
        """One indicator per series, substituting the fallback on any failure."""
        if not self._api_key:
            return [fallback_indicator(s) for s in self._series]

        results = await asyncio.gather(
            *(self.fetch_series(s) for s in self._series),
            return_exceptions=True,
        )
        indicators: list[Indicator] = []
        for series, result in zip(self._series, results):
            if isinstance(result, BaseException):
                logger.warning(f"{series.label} fetch failed, using fallback: {result}")
                indicators.append(fallback_indicator(series))
            else:
                indicators.append(result)
        return indicators
