"""
Sentiment dashboard derived from the market snapshot.

Missing inputs fall back to neutral-ish defaults so the dashboard always
renders.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

DEFAULTS: dict[str, float] = {
    "vix": 15.0,
    "us10y": 4.0,
    "us2y": 4.5,
    "us30y": 4.5,
    "gold": 2000.0,
    "dxy": 105.0,
    "wti": 75.0,
}

GREEN = "#22c55e"
LIME = "#84cc16"
YELLOW = "#eab308"
ORANGE = "#f97316"
RED = "#ef4444"
BLUE = "#3b82f6"


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _vix_regime(vix: float) -> tuple[str, str]:
    if vix >= 30:
        return "PANIC", RED
    if vix >= 25:
        return "FEAR", ORANGE
    if vix >= 20:
        return "CAUTION", YELLOW
    if vix >= 15:
        return "NORMAL", BLUE
    return "CALM", GREEN


def _fear_greed_label(score: float) -> tuple[str, str]:
    if score >= 75:
        return "EXTREME GREED", GREEN
    if score >= 55:
        return "GREED", LIME
    if score >= 45:
        return "NEUTRAL", YELLOW
    if score >= 25:
        return "FEAR", ORANGE
    return "EXTREME FEAR", RED


def calculate_sentiment_dashboard(snapshot: Optional[Mapping[str, float]]) -> dict[str, Any]:
    d = {**DEFAULTS, **{k: v for k, v in (snapshot or {}).items() if v is not None}}
    vix, us10y, us2y, us30y = d["vix"], d["us10y"], d["us2y"], d["us30y"]
    gold, dxy, wti = d["gold"], d["dxy"], d["wti"]

    vix_regime, vix_color = _vix_regime(vix)

    curve = us10y - us2y
    if curve < -0.5:
        curve_signal, curve_color = "INVERTED", RED
    elif curve < 0.25:
        curve_signal, curve_color = "FLAT", YELLOW
    else:
        curve_signal, curve_color = "STEEP", GREEN

    if dxy >= 107:
        dollar_signal, dollar_color = "STRONG", GREEN
    elif dxy <= 100:
        dollar_signal, dollar_color = "WEAK", RED
    else:
        dollar_signal, dollar_color = "NEUTRAL", BLUE

    fear_greed = _clamp(100 - vix * 2.5)
    if curve < 0:
        fear_greed -= 10
    if dxy > 107:
        fear_greed -= 5
    fear_greed = _clamp(fear_greed)
    fg_label, fg_color = _fear_greed_label(fear_greed)

    rate_cut = 50.0
    if us2y < 4.0:
        rate_cut += 20
    if vix > 25:
        rate_cut += 15
    if curve < -0.25:
        rate_cut += 10
    rate_cut = _clamp(rate_cut)

    if gold >= 2600:
        gold_signal, gold_color = "HAVEN BID", GREEN
    elif gold >= 2400:
        gold_signal, gold_color = "ELEVATED", LIME
    elif gold <= 1900:
        gold_signal, gold_color = "RISK-ON", ORANGE
    else:
        gold_signal, gold_color = "NEUTRAL", YELLOW

    if wti >= 90:
        oil_signal, oil_color = "SPIKE", RED
    elif wti >= 80:
        oil_signal, oil_color = "ELEVATED", ORANGE
    elif wti <= 60:
        oil_signal, oil_color = "CHEAP", GREEN
    else:
        oil_signal, oil_color = "STABLE", BLUE

    term_premium = us30y - us10y
    if term_premium >= 0.5:
        term_signal, term_color = "STEEP", GREEN
    elif term_premium <= 0:
        term_signal, term_color = "FLAT", YELLOW
    else:
        term_signal, term_color = "NORMAL", BLUE

    credit = 100 - vix * 2
    if curve < 0:
        credit -= 20
    if dxy > 107:
        credit -= 10
    credit = _clamp(credit)
    if credit <= 30:
        credit_signal, credit_color = "STRESS", RED
    elif credit <= 50:
        credit_signal, credit_color = "TIGHT", ORANGE
    elif credit <= 70:
        credit_signal, credit_color = "NORMAL", BLUE
    else:
        credit_signal, credit_color = "CALM", GREEN

    return {
        "vix": {"value": f"{vix:.1f}", "regime": vix_regime, "color": vix_color},
        "curve": {"value": f"{round(curve * 100)}bp", "signal": curve_signal, "color": curve_color},
        "dollar": {"value": f"{dxy:.2f}", "signal": dollar_signal, "color": dollar_color},
        "fearGreed": {"value": f"{fear_greed:.0f}", "label": fg_label, "color": fg_color},
        "rateCut": {"value": f"{rate_cut:.0f}%", "signal": "CUT ODDS"},
        "gold": {"value": f"${gold:.0f}", "signal": gold_signal, "color": gold_color},
        "oil": {"value": f"${wti:.1f}", "signal": oil_signal, "color": oil_color},
        "termPremium": {"value": f"{round(term_premium * 100)}bp", "signal": term_signal, "color": term_color},
        "credit": {"value": f"{credit:.0f}", "signal": credit_signal, "color": credit_color},
    }
