"""
Technical levels

Two sources of levels for a card:
- numeric mentions pulled out of the story text ("10y yield 4.5%")
- distances from live prices in the market snapshot to fixed benchmark
  pivots, chosen by column and story vocabulary
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Mapping, Optional

MAX_DYNAMIC_LEVELS = 3

US10Y_PIVOTS = (4.0, 4.25, 4.5, 4.75, 5.0)
SPX_PIVOTS = (5800.0, 5900.0, 6000.0, 6100.0, 6200.0)
SHALE_BREAKEVEN = 65.0
COPPER_CHINA_PIVOT = 4.0
EURUSD_PARITY = 1.0
USDJPY_CARRY_BREAK = 145
USDJPY_INTERVENTION = 160

_TEXT_LEVEL_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"(?:10y|2y|30y)\s*(?:yield|rate|at|near|breaks|holds)\s*(\d+\.?\d+)%",
        r"(?:usd|eur|gbp|jpy|aud|cad|chf)[/\s]?(?:usd|eur|gbp|jpy|aud|cad|chf)\s*"
        r"(?:at|near|breaks|holds|tests)\s*(\d+\.?\d+)",
        r"(?:s&p|spx|nasdaq|dow)\s*(?:at|near|breaks|holds|tests)\s*(\d+[,.]?\d*)",
        r"(?:gold|wti|brent|copper)\s*(?:at|near|breaks|holds|tests)\s*\$?(\d+[,.]?\d*)",
        r"vix\s*(?:at|near|breaks|spikes to|hits)\s*(\d+\.?\d*)",
    )
)

_RATES_WORDS = re.compile(r"fed|rate|yield|treasury|bond|credit")
_GEO_WORDS = re.compile(r"war|conflict|tension|sanction|military")
_JAPAN_WORDS = re.compile(r"japan|japanese|tokyo|boj|yen|nikkei|asia.*tension|china.*taiwan|korea")
_OIL_GEO_WORDS = re.compile(r"iran|iraq|saudi|opec|russia|pipeline|strait|hormuz|energy|oil")
_COMMODITY_WORDS = re.compile(r"oil|gold|copper|commodit|metal|energy")
_FX_WORDS = re.compile(r"dollar|euro|yen|fx|currency|forex")
_MARKET_WORDS = re.compile(
    r"earnings|revenue|fed|fomc|rate|inflation|gdp|employment|stock|equity|index|"
    r"nasdaq|dow|s&p|futures|rally|selloff|crash|surge|plunge|merger|acquisition|ipo|guidance"
)


@dataclass(frozen=True)
class Distance:
    points: float
    percent: float
    direction: str  # "above" or "below"


def distance_to(current: float, target: float) -> Distance:
    """Signed distance from current to target."""
    return Distance(
        points=abs(target - current),
        percent=(target - current) / current * 100,
        direction="above" if target > current else "below",
    )


def nearest_level(price: float, levels: tuple[float, ...]) -> float:
    return min(levels, key=lambda level: abs(level - price))


def extract_text_levels(text: str) -> list[str]:
    """Tradable level mentions in the text, in pattern order, without repeats."""
    found: list[str] = []
    for pattern in _TEXT_LEVEL_PATTERNS:
        for match in pattern.finditer(text):
            context = match.group(0).strip()
            if context and context not in found:
                found.append(context)
    return found


def _value(snapshot: Mapping[str, float], key: str) -> Optional[float]:
    raw = snapshot.get(key)
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or value == 0:
        return None
    return value


def _vix_stress(vix: float) -> str:
    if vix >= 30:
        return "PANIC"
    if vix >= 25:
        return "FEAR"
    if vix >= 20:
        return "CAUTION"
    if vix >= 15:
        return "NORMAL"
    return "CALM"


def _rates_levels(snapshot: Mapping[str, float]) -> list[str]:
    levels = []
    ten_y = _value(snapshot, "us10y")
    two_y = _value(snapshot, "us2y")
    vix = _value(snapshot, "vix")

    if ten_y is not None:
        nearest = nearest_level(ten_y, US10Y_PIVOTS)
        dist = distance_to(ten_y, nearest)
        levels.append(
            f"10Y: {ten_y:.2f}% | {nearest:g}% {dist.direction} ({abs(dist.percent):.2f}%)"
        )
    if ten_y is not None and two_y is not None:
        bps = round((ten_y - two_y) * 100)
        signal = "INVERTED" if bps < 0 else "FLAT" if bps < 25 else "STEEP"
        levels.append(f"2s10s: {bps}bp {signal} | Watch ±10bp for regime shift")
    if vix is not None:
        levels.append(f"VIX: {vix:.1f} ({_vix_stress(vix)}) | Triggers: 20/25/30")
    return levels


def _geo_levels(text: str, snapshot: Mapping[str, float]) -> list[str]:
    levels = []
    gold = _value(snapshot, "gold")
    usdjpy = _value(snapshot, "usdjpy")
    wti = _value(snapshot, "wti")

    if gold is not None:
        resistance = math.ceil(gold / 50) * 50
        dist = distance_to(gold, resistance)
        levels.append(
            f"Gold: ${gold:.0f} | Next resist: ${resistance} (+{abs(dist.percent):.2f}%)"
        )
    if usdjpy is not None and _JAPAN_WORDS.search(text):
        dist = distance_to(usdjpy, USDJPY_INTERVENTION)
        levels.append(
            f"USD/JPY: {usdjpy:.2f} | BOJ line: {USDJPY_INTERVENTION} "
            f"({dist.points:.2f} pts {dist.direction})"
        )
    if wti is not None and _OIL_GEO_WORDS.search(text):
        premium = "HIGH" if wti > 80 else "MODERATE" if wti > 70 else "LOW"
        levels.append(f"WTI: ${wti:.2f} | Geo premium: {premium}")
    return levels


def _commodity_levels(snapshot: Mapping[str, float]) -> list[str]:
    levels = []
    wti = _value(snapshot, "wti")
    gold = _value(snapshot, "gold")
    copper = _value(snapshot, "copper")

    if wti is not None:
        margin = (wti - SHALE_BREAKEVEN) / SHALE_BREAKEVEN * 100
        levels.append(
            f"WTI: ${wti:.2f} | Shale floor: ${SHALE_BREAKEVEN:.0f} (+{margin:.0f}% margin)"
        )
    if gold is not None:
        support = math.floor(gold / 50) * 50
        dist = distance_to(gold, support)
        levels.append(f"Gold: ${gold:.0f} | Support: ${support} ({dist.points:.2f} pts)")
    if copper is not None:
        status = "STRONG" if copper >= COPPER_CHINA_PIVOT else "WEAK"
        levels.append(
            f"Copper: ${copper:.2f} | China signal: {status} (pivot: ${COPPER_CHINA_PIVOT:g})"
        )
    return levels


def _fx_levels(snapshot: Mapping[str, float]) -> list[str]:
    levels = []
    dxy = _value(snapshot, "dxy")
    eurusd = _value(snapshot, "eurusd")
    usdjpy = _value(snapshot, "usdjpy")

    if dxy is not None:
        regime = "STRONG" if dxy >= 107 else "NEUTRAL" if dxy >= 103 else "WEAK"
        levels.append(f"DXY: {dxy:.2f} ({regime}) | Pivots: 100/103/107")
    if eurusd is not None:
        dist = distance_to(eurusd, EURUSD_PARITY)
        levels.append(
            f"EUR/USD: {eurusd:.4f} | Parity: {abs(dist.percent):.2f}% {dist.direction}"
        )
    if usdjpy is not None:
        levels.append(
            f"USD/JPY: {usdjpy:.2f} | Range: {USDJPY_CARRY_BREAK}-{USDJPY_INTERVENTION}"
        )
    return levels


def compute_key_levels(
    column: str,
    text: str,
    snapshot: Optional[Mapping[str, float]],
) -> list[str]:
    """
    Snapshot-derived levels relevant to the story.

    Sections are picked by column or by story vocabulary and may combine.
    The SPX/VIX fallback only applies to market-relevant stories when no
    other section produced a level. Returns at most three entries.
    """
    if not snapshot:
        return []

    levels: list[str] = []
    if column == "macro" or _RATES_WORDS.search(text):
        levels.extend(_rates_levels(snapshot))
    if column == "geo" or _GEO_WORDS.search(text):
        levels.extend(_geo_levels(text, snapshot))
    if column == "commodity" or _COMMODITY_WORDS.search(text):
        levels.extend(_commodity_levels(snapshot))
    if column == "fx" or _FX_WORDS.search(text):
        levels.extend(_fx_levels(snapshot))

    if not levels and _MARKET_WORDS.search(text):
        spx = _value(snapshot, "spx")
        vix = _value(snapshot, "vix")
        if spx is not None and vix is not None:
            nearest = nearest_level(spx, SPX_PIVOTS)
            dist = distance_to(spx, nearest)
            levels.append(
                f"SPX: {spx:.0f} | Key: {nearest:.0f} ({abs(dist.percent):.2f}% {dist.direction})"
            )
            levels.append(f"VIX: {vix:.1f} | Triggers: 15 (calm) / 25 (fear) / 35 (panic)")

    return levels[:MAX_DYNAMIC_LEVELS]
