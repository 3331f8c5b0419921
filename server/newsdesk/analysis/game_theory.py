"""
Strategic-interaction patterns

Recognises the game a headline describes (brinkmanship, retaliation
cycles, coordination...) and supplies a one-line read plus the next move
to watch. Only the first matching pattern is used.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GamePattern:
    name: str
    pattern: re.Pattern[str]
    insight: str
    next_move: str

    @property
    def implication(self) -> str:
        return f"{self.name}: {self.insight}"


GAME_PATTERNS: tuple[GamePattern, ...] = (
    GamePattern(
        "GAME OF CHICKEN",
        re.compile(r"brinksmanship|standoff|shutdown|default|red line|ultimatum|threaten to|unless.*will|deadline"),
        "Both players signaling commitment to crash. The one with less to lose wins. High accident risk.",
        "Watch for 'Signal of Commitment' (burning bridges)",
    ),
    GamePattern(
        "PRISONER'S DILEMMA",
        re.compile(r"tariff|trade war|sanction|retaliat|counter-measure|tit-for-tat|arms race|export ban|import ban"),
        "Nash Equilibrium is mutual defection. Expect immediate retaliation unless binding agreement forced.",
        "Expect 'Tit-for-Tat' response within 24-48h",
    ),
    GamePattern(
        "COORDINATION GAME",
        re.compile(r"central bank|concerted|joint|g7|g20|opec|agreement|accord|consensus|coordinated"),
        "Success depends on synchronicity. If one major player defects (cheats), equilibrium collapses.",
        "Watch for defection signals from weakest member",
    ),
    GamePattern(
        "ZERO-SUM CONFLICT",
        re.compile(r"market share|territory|annex|banned|blockade|seize|confiscate|exclusive|monopoly"),
        "Pure conflict. My win = your loss. Negotiation unlikely; resolution requires force or capitulation.",
        "Monitor for escalation or third-party intervention",
    ),
    GamePattern(
        "REPUTATION GAME",
        re.compile(r"credibility|pledge|commit|whatever it takes|defend|peg|anchor|promise|vow"),
        "Actor fighting 'Time Inconsistency.' If they blink now, they lose power for future moves.",
        "Watch for costly signals proving commitment",
    ),
    GamePattern(
        "SIGNALING GAME",
        re.compile(r"signal|posturing|bluff|warning|demonstrate|show of force|exercise|drill"),
        "Costly signal to reveal private information. Question: Is this cheap talk or binding commitment?",
        "Assess if signal is credible (costly to fake)",
    ),
)


def detect_game_pattern(text: str) -> Optional[GamePattern]:
    for game in GAME_PATTERNS:
        if game.pattern.search(text):
            return game
    return None
