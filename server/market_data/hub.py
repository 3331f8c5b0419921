"""
Snapshot Hub

Owns one SnapshotCache per data domain, refreshes them on request and
pushes the current value to subscribers. A refresh that fails or comes
back empty leaves the cache untouched so clients keep seeing the last
known values instead of a gap.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from market_data.fred import FredClient
from market_data.polymarket import PolymarketClient
from market_data.sentiment import calculate_sentiment_dashboard
from market_data.snapshot import NO_MARKET_DATA, MarketSnapshot, Quote, SnapshotCache
from market_data.symbols import (
    COMMODITIES,
    COMMODITY_DEFAULTS,
    COMMODITY_GROUPS,
    FX_DEFAULTS,
    FX_GROUPS,
    FX_PAIRS,
    MARKET_SYMBOLS,
    YIELD_SYMBOLS,
)
from market_data.yahoo import YahooChartClient
from newsdesk.ws_server.broadcaster import Broadcaster
from newsdesk.ws_server.events import (
    COMMODITY_UPDATE,
    FX_UPDATE,
    GAME_THEORY_UPDATE,
    MACRO_UPDATE,
    MARKET_UPDATE,
    PREDICTION_UPDATE,
    initial_event,
    snapshot_event,
)

logger = logging.getLogger(__name__)

# Analyst requests refresh the market board when it is older than this
ANALYST_MAX_AGE_SECONDS = 60.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _grouped(rows: list[Quote], instruments, groups: tuple[str, ...]) -> dict[str, list[dict]]:
    group_of = {i.symbol: i.group for i in instruments}
    board: dict[str, list[dict]] = {g: [] for g in groups}
    for row in rows:
        group = group_of.get(row.symbol)
        if group in board:
            board[group].append(row.to_board_dict())
    return board


def _fill_empty_groups(board: dict[str, list[dict]], previous: Optional[dict], defaults) -> None:
    """Empty groups keep the last live rows, or the hardcoded defaults before the first fill."""
    for group, rows in board.items():
        if rows:
            continue
        if previous and previous.get(group):
            board[group] = previous[group]
        else:
            board[group] = defaults(group)


def _fx_defaults(group: str) -> list[dict]:
    return [
        {"label": label, "price": price, "change": change, "dir": d}
        for label, price, change, d in FX_DEFAULTS.get(group, ())
    ]


def _commodity_defaults(group: str) -> list[dict]:
    return [
        {"label": label, "price": price, "change": change, "dir": d, "unit": unit}
        for label, price, change, d, unit in COMMODITY_DEFAULTS.get(group, ())
    ]


@dataclass
class HubStats:
    refreshes: int = 0
    refresh_failures: int = 0
    pushes: int = 0


class SnapshotHub:
    """
    Market, macro, FX, commodity and prediction snapshots, plus the
    tracked game-theory state.

    The market cache is also exposed as a numeric map for the annotation
    engine and as grounding text for the headline analyst.
    """

    def __init__(
        self,
        yahoo: YahooChartClient,
        fred: FredClient,
        polymarket: PolymarketClient,
        broadcaster: Optional[Broadcaster] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._yahoo = yahoo
        self._fred = fred
        self._polymarket = polymarket
        self._broadcaster = broadcaster
        self._clock = clock

        self.market: SnapshotCache[list[Quote]] = SnapshotCache("market")
        self.market_snapshot: SnapshotCache[MarketSnapshot] = SnapshotCache("market_snapshot")
        self.macro: SnapshotCache[dict[str, Any]] = SnapshotCache("macro")
        self.fx: SnapshotCache[dict[str, Any]] = SnapshotCache("fx")
        self.commodities: SnapshotCache[dict[str, Any]] = SnapshotCache("commodities")
        self.prediction: SnapshotCache[dict[str, Any]] = SnapshotCache("prediction")
        self.game_theory: SnapshotCache[dict[str, Any]] = SnapshotCache("game_theory")

        self._stats = HubStats()

    # ── Refresh ─────────────────────────────────────────────────────

    async def refresh_market(self) -> bool:
        try:
            quotes = await self._yahoo.fetch_quotes(MARKET_SYMBOLS)
        except Exception as e:
            return self._failed("market", e)
        if not quotes:
            return self._failed("market", "no quotes returned")

        now = self._clock()
        self.market.replace(quotes, now)
        self.market_snapshot.replace(MarketSnapshot.from_quotes(quotes, now), now)
        self._stats.refreshes += 1
        return True

    async def refresh_macro(self) -> bool:
        try:
            yields, indicators = await asyncio.gather(
                self._yahoo.fetch_quotes(s for s, _ in YIELD_SYMBOLS),
                self._fred.fetch_indicators(),
            )
        except Exception as e:
            return self._failed("macro", e)
        if not yields:
            return self._failed("macro", "no yields returned")

        labels = dict(YIELD_SYMBOLS)
        self.macro.replace(
            {
                "yields": [{**q.to_dict(), "label": labels.get(q.symbol, q.label)} for q in yields],
                "indicators": [i.to_dict() for i in indicators],
            },
            self._clock(),
        )
        self._stats.refreshes += 1
        return True

    async def refresh_fx(self) -> bool:
        try:
            rows = await self._yahoo.fetch_board(FX_PAIRS)
        except Exception as e:
            return self._failed("fx", e)
        if not rows and not self.fx.is_empty:
            return self._failed("fx", "no rows returned")

        board = _grouped(rows, FX_PAIRS, FX_GROUPS)
        _fill_empty_groups(board, self.fx.value, _fx_defaults)
        self.fx.replace(board, self._clock())
        self._stats.refreshes += 1
        return True

    async def refresh_commodities(self) -> bool:
        try:
            rows = await self._yahoo.fetch_board(COMMODITIES)
        except Exception as e:
            return self._failed("commodities", e)
        if not rows and not self.commodities.is_empty:
            return self._failed("commodities", "no rows returned")

        board = _grouped(rows, COMMODITIES, COMMODITY_GROUPS)
        _fill_empty_groups(board, self.commodities.value, _commodity_defaults)
        self.commodities.replace(board, self._clock())
        self._stats.refreshes += 1
        return True

    async def refresh_prediction(self) -> bool:
        """Prediction markets plus the sentiment dashboard off the current market snapshot."""
        sentiment = calculate_sentiment_dashboard(self.snapshot_values())
        try:
            markets = [m.to_dict() for m in await self._polymarket.fetch_markets()]
        except Exception as e:
            logger.warning(f"Prediction markets refresh failed: {e}")
            previous = self.prediction.value or {}
            markets = previous.get("markets", [])
            self._stats.refresh_failures += 1

        self.prediction.replace({"markets": markets, "sentiment": sentiment}, self._clock())
        self._stats.refreshes += 1
        return True

    def _failed(self, domain: str, error: object) -> bool:
        self._stats.refresh_failures += 1
        logger.warning(f"{domain} refresh failed, keeping last snapshot: {error}", extra={"domain": domain})
        return False

    # ── Push ────────────────────────────────────────────────────────

    async def push(self, event_type: str) -> int:
        """Broadcast the current value of one domain. No-op when it is still empty."""
        if self._broadcaster is None:
            return 0
        payload = self._payload_for(event_type)
        if payload is None:
            return 0
        self._stats.pushes += 1
        return await self._broadcaster.broadcast(snapshot_event(event_type, payload))

    def _payload_for(self, event_type: str) -> Any:
        if event_type == MARKET_UPDATE:
            return None if self.market.is_empty else [q.to_dict() for q in self.market.value]
        caches = {
            MACRO_UPDATE: self.macro,
            FX_UPDATE: self.fx,
            COMMODITY_UPDATE: self.commodities,
            PREDICTION_UPDATE: self.prediction,
            GAME_THEORY_UPDATE: self.game_theory,
        }
        return caches[event_type].value

    async def refresh_and_push_market(self) -> None:
        await self.refresh_market()
        await self.push(MARKET_UPDATE)

    async def refresh_and_push_macro(self) -> None:
        await self.refresh_macro()
        await self.push(MACRO_UPDATE)

    async def refresh_and_push_fx(self) -> None:
        await self.refresh_fx()
        await self.push(FX_UPDATE)

    async def refresh_and_push_commodities(self) -> None:
        await self.refresh_commodities()
        await self.push(COMMODITY_UPDATE)

    async def refresh_and_push_prediction(self) -> None:
        await self.refresh_prediction()
        await self.push(PREDICTION_UPDATE)

    async def refresh_all(self) -> None:
        await asyncio.gather(
            self.refresh_market(),
            self.refresh_macro(),
            self.refresh_fx(),
            self.refresh_commodities(),
        )
        await self.refresh_prediction()

    # ── Handshake ───────────────────────────────────────────────────

    async def initial_payload(self) -> dict[str, Any]:
        """
        Combined snapshot for a new subscriber.

        Domains that have never been filled are fetched now; the rest are
        served from cache.
        """
        pending = []
        if self.market.is_empty:
            pending.append(self.refresh_market())
        if self.macro.is_empty:
            pending.append(self.refresh_macro())
        if self.fx.is_empty:
            pending.append(self.refresh_fx())
        if self.commodities.is_empty:
            pending.append(self.refresh_commodities())
        if pending:
            await asyncio.gather(*pending)

        return initial_event(
            market=[q.to_dict() for q in self.market.value or []],
            macro=self.macro.value or {"yields": [], "indicators": []},
            fx=self.fx.value or {g: [] for g in FX_GROUPS},
            commodities=self.commodities.value or {g: [] for g in COMMODITY_GROUPS},
        )

    def prediction_payload(self) -> Optional[dict[str, Any]]:
        return self.prediction.value

    def game_theory_payload(self) -> Optional[dict[str, Any]]:
        return self.game_theory.value

    async def publish_game_theory(self, payload: dict[str, Any]) -> int:
        self.game_theory.replace(payload, self._clock())
        return await self.push(GAME_THEORY_UPDATE)

    # ── Readers ─────────────────────────────────────────────────────

    def snapshot_values(self) -> Optional[Mapping[str, float]]:
        """Numeric market map for the annotation engine, or None before the first fill."""
        snapshot = self.market_snapshot.value
        return snapshot.values if snapshot else None

    async def ensure_fresh_market(self, max_age_seconds: float = ANALYST_MAX_AGE_SECONDS) -> None:
        if self.market.age_seconds(self._clock()) > max_age_seconds:
            if await self.refresh_market():
                logger.info("Refreshed market snapshot for analysis")

    def market_context_text(self) -> str:
        snapshot = self.market_snapshot.value
        if snapshot is None:
            return NO_MARKET_DATA
        return snapshot.to_context_text(self._clock())

    def get_stats(self) -> dict[str, Any]:
        now = self._clock()
        return {
            "refreshes": self._stats.refreshes,
            "refresh_failures": self._stats.refresh_failures,
            "pushes": self._stats.pushes,
            "ages": {
                cache.name: round(cache.age_seconds(now), 1)
                for cache in (
                    self.market,
                    self.macro,
                    self.fx,
                    self.commodities,
                    self.prediction,
                    self.game_theory,
                )
            },
        }
