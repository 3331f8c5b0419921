"""
Macro regime resolver

Regimes are mutually exclusive. When several match, precedence is:

    REFLATIONARY > STAGFLATIONARY > GOLDILOCKS > DEFLATIONARY

Each regime is recognised by any one of its clauses; a clause matches when
every pattern in it is found in the text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from newsdesk.models.news import Direction, Regime

_Clause = tuple[re.Pattern[str], ...]


def _clause(*patterns: str) -> _Clause:
    return tuple(re.compile(p) for p in patterns)


REGIME_PRECEDENCE: tuple[tuple[Regime, tuple[_Clause, ...]], ...] = (
    (Regime.REFLATIONARY, (
        _clause(r"stimulus|fiscal spending|infrastructure", r"growth|gdp|expansion"),
        _clause(r"recover|rebound|boom", r"inflation|prices rising"),
    )),
    (Regime.STAGFLATIONARY, (
        _clause(r"slow|weak|contract", r"inflation|prices|cost"),
        _clause(r"stagflation|worst of both"),
    )),
    (Regime.GOLDILOCKS, (
        _clause(r"growth|strong|robust", r"inflation fall|disinfla|prices ease"),
        _clause(r"goldilocks|soft landing|perfect"),
    )),
    (Regime.DEFLATIONARY, (
        _clause(r"recession|contraction", r"deflation|prices fall"),
        _clause(r"deflationary bust|depression"),
    )),
)


@dataclass(frozen=True)
class RegimeProfile:
    """What an analysis inherits once a regime is identified."""

    implications: tuple[str, ...]
    direction: Direction
    confidence: Optional[int] = None
    impact: int = 3


REGIME_PROFILES: dict[Regime, RegimeProfile] = {
    Regime.REFLATIONARY: RegimeProfile(
        implications=(
            "Reflationary regime: Cyclicals, commodities, value outperform",
            "Short duration bonds, rotate to real assets",
            "Energy, materials, financials lead",
        ),
        direction=Direction.RISK_ON,
    ),
    Regime.STAGFLATIONARY: RegimeProfile(
        implications=(
            "Stagflation risk: Gold, TIPS, commodity producers",
            "Avoid long duration and growth stocks",
            "Real assets only hedge - tough environment",
        ),
        direction=Direction.RISK_OFF,
        confidence=75,
    ),
    Regime.GOLDILOCKS: RegimeProfile(
        implications=(
            "Goldilocks scenario: Risk-on across all assets",
            "Tech, growth stocks, extend duration",
            "Fed can pause - multiple expansion",
        ),
        direction=Direction.RISK_ON,
        confidence=80,
    ),
    Regime.DEFLATIONARY: RegimeProfile(
        implications=(
            "Deflation scenario: Cash, Treasuries, USD, JPY only",
            "Defensive sectors, avoid all cyclicals",
            "Corporate credit risk rises",
        ),
        direction=Direction.RISK_OFF,
        confidence=85,
    ),
}


def resolve_regime(text: str) -> Optional[Regime]:
    """Highest-precedence regime whose clauses match the lowercased text."""
    for regime, clauses in REGIME_PRECEDENCE:
        if any(all(p.search(text) for p in clause) for clause in clauses):
            return regime
    return None
