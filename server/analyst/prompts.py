"""
Headline analysis prompts

A specialist desk is chosen from the headline (and any card implications),
then the desk brief, the live market block and the headline are combined
into a single user turn.

The game prompts drive the strategic game tracker: a strict JSON move
contract for background updates, and a long-form brief for on-demand
analysis of one game.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass

PROMPT_VERSION = "v1"

# ---------------------------------------------------------------------------
# Specialist desks, checked in order; the first match wins
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Desk:
    name: str
    pattern: re.Pattern | None
    brief: str


DESKS: tuple[Desk, ...] = (
    Desk(
        "geopolitics",
        re.compile(
            r"war|conflict|invade|strike|missile|china|taiwan|russia|ukraine|iran|israel|"
            r"nato|sanction|military|defense|weapon"
        ),
        "ROLE: Geostrategic Analyst (Defense Intelligence perspective)\n"
        "FOCUS: Chokepoints (Hormuz/Suez/Malacca), supply chain shocks, escalation "
        "ladders, safe-haven flows.",
    ),
    Desk(
        "rates",
        re.compile(r"fed|rate|yield|bond|treasury|powell|fomc|inflation|cpi|liquidity|\bqt\b|\bqe\b|curve"),
        "ROLE: Fixed Income Portfolio Manager\n"
        "FOCUS: Yield curve impact (2s10s), Fed reaction function, liquidity (RRP/TGA), "
        "credit spreads.",
    ),
    Desk(
        "commodities",
        re.compile(r"oil|gold|copper|gas|wheat|corn|metal|mining|energy|opec|drilling|commodity"),
        "ROLE: Senior Commodities Trader (Physical markets)\n"
        "FOCUS: Supply/demand imbalance, inventory levels, arb windows, input cost inflation.",
    ),
    Desk(
        "fx",
        re.compile(r"currency|\bfx\b|forex|dollar|yen|euro|yuan|intervention|carry trade|exchange rate"),
        "ROLE: Global Macro FX Strategist\n"
        "FOCUS: Rate differentials, capital flows, intervention risk, Dollar Smile positioning.",
    ),
)

CROSS_ASSET = Desk(
    "cross-asset",
    None,
    "ROLE: Cross-Asset Strategist\n"
    "FOCUS: Risk-On/Risk-Off regime, sector rotation, volatility, key levels.",
)


def select_desk(headline: str, implications: list[str] | None = None) -> Desk:
    text = " ".join([headline, *(implications or [])]).lower()
    for desk in DESKS:
        if desk.pattern.search(text):
            return desk
    return CROSS_ASSET


# ---------------------------------------------------------------------------
# Output contract
# ---------------------------------------------------------------------------

RULES = (
    "RULES:\n"
    "- Use LIVE DATA above as ground truth. Never invent prices.\n"
    "- Be DETAILED: provide thorough professional analysis (2-3 sentences per bullet)\n"
    "- Include specific numbers and distances from current levels\n"
    "- Put **ticker symbols**, **asset names**, **prices**, and **support/resistance "
    "levels** in **bold**"
)

SECTIONS = (
    "PROVIDE (each section on its own line, with detailed bullets below):\n"
    "\n"
    "**IMPACT**\n- Which assets move and why (2-3 bullets)\n"
    "\n"
    "**TRADE**\n- Actionable positioning ideas with entry/exit logic (2-3 bullets)\n"
    "\n"
    "**2ND ORDER**\n- Knock-on effects and what happens next (2 bullets)\n"
    "\n"
    "**KEY LEVELS**\n- Specific support/resistance prices to watch with current distance (2-3 bullets)\n"
    "\n"
    "**TIMELINE**\n- When we'll know more, key dates/events ahead (1-2 bullets)\n"
    "\n"
    "**GAME THEORY**\n"
    "- Identify the players, their payoffs, the game pattern (Chicken, Prisoner's "
    "Dilemma, Coordination, Zero-Sum, Reputation, Signaling) and the likely next move.\n"
    '- If there is no clear strategic interaction, say "Low strategic complexity - '
    'straightforward market reaction"'
)


def build_analysis_prompt(
    headline: str,
    market_context: str,
    source: str | None = None,
    implications: list[str] | None = None,
) -> str:
    """Full user turn for one on-demand headline analysis."""
    desk = select_desk(headline, implications)
    parts = [
        desk.brief,
        market_context,
        f'HEADLINE: "{headline}"',
        f"SOURCE: {source or 'Unknown'}",
    ]
    if implications:
        parts.append(f"CONTEXT: {' | '.join(implications)}")
    parts.append(RULES)
    parts.append(SECTIONS)
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Strategic games
# ---------------------------------------------------------------------------

GAME_MOVE_CONTRACT = (
    "TASK: Decide whether any of the news represents a NEW MOVE in this game.\n"
    "\n"
    "If YES, respond with ONLY valid JSON (no markdown):\n"
    "{\n"
    '  "newMove": true,\n'
    '  "player": "Which player moved",\n'
    '  "action": "Brief description of the move (max 10 words)",\n'
    '  "type": "DEFECT or COOPERATE or SIGNAL",\n'
    '  "newPhase": "SETUP or ESCALATION or BRINKMANSHIP or CONFLICT or ATTRITION or '
    'STANDOFF or COORDINATION or POSTURING",\n'
    '  "phaseColor": "green or yellow or red",\n'
    '  "equilibriumStatus": "STABLE or SHIFTING or UNSTABLE or CRITICAL or TENSE or '
    'FROZEN CONFLICT",\n'
    '  "statusColor": "green or yellow or red",\n'
    '  "nextLikelyMove": "Predicted opponent response (max 15 words)"\n'
    "}\n"
    "\n"
    "If there is NO significant new move, respond with:\n"
    '{"newMove": false}'
)

GAME_BRIEF = (
    "ROLE: Senior Geopolitical Strategist & Game Theorist\n"
    "You are analyzing a live strategic conflict for a hedge fund's political risk desk."
)

GAME_SECTIONS = (
    "PROVIDE COMPREHENSIVE ANALYSIS:\n"
    "\n"
    "**STATECRAFT ANALYSIS**\n"
    "- Each player's objectives, constraints, red lines and escalation thresholds; "
    "instruments of power in use (DIME) (3-4 bullets)\n"
    "\n"
    "**GAME THEORY FRAMEWORK**\n"
    "- Game type, payoff matrix, Nash equilibrium if any, credible threats and "
    "commitment devices, one-shot vs iterated (4-5 bullets)\n"
    "\n"
    "**SOCIOECONOMIC IMPLICATIONS**\n"
    "- Who bears the costs, distributional effects, trade and capital flows, "
    "second-order inflation and employment effects (3-4 bullets)\n"
    "\n"
    "**GEOPOLITICAL RIPPLE EFFECTS**\n"
    "- How other powers reposition, alliance dynamics, precedent (3-4 bullets)\n"
    "\n"
    "**MACRO MARKET HEADWINDS**\n"
    "- Exposed asset classes, tickers and levels from the live data, correlation "
    "and volatility regime shifts (3-4 bullets)\n"
    "\n"
    "**META HEADWINDS & WILDCARDS**\n"
    "- Accelerants, tail risks, misread signals, timing (3-4 bullets)\n"
    "\n"
    "**TRADING PLAYBOOK**\n"
    "- Hedges, entry/exit triggers and key levels, time to next inflection (2-3 bullets)"
)


def build_game_update_prompt(game: dict, headlines: list[str]) -> str:
    """Ask whether recent headlines amount to a new move in a tracked game."""
    news = "\n".join(f"- {h}" for h in headlines)
    return "\n\n".join([
        f'You are a game theory analyst tracking the "{game["title"]}" strategic game.',
        f"CURRENT STATE:\n{json.dumps(game, indent=2)}",
        f"LATEST RELEVANT NEWS (last few hours):\n{news}",
        GAME_MOVE_CONTRACT,
    ])


def build_game_analysis_prompt(game: dict, market_context: str) -> str:
    """Full user turn for an on-demand deep dive into one game."""
    last = game.get("lastMove")
    if not isinstance(last, dict):
        last = {}
    players = game.get("players")
    if not isinstance(players, list):
        players = []
    state = "\n".join([
        f"CONFLICT: {' '.join(str(p) for p in (game.get('emoji'), game['title']) if p)}",
        f"PLAYERS: {' vs '.join(str(p) for p in players) or 'Unknown'}",
        f"CURRENT PHASE: {game.get('currentPhase', 'Unknown')}",
        f"EQUILIBRIUM STATUS: {game.get('equilibriumStatus', 'Unknown')}",
        f"LAST MOVE: {last.get('player', 'Unknown')} - {last.get('action', 'Unknown')} "
        f"({last.get('type', 'N/A')}) on {last.get('date', 'N/A')}",
        f"PREDICTED NEXT MOVE: {game.get('nextLikelyMove', 'Unknown')}",
    ])
    return "\n\n".join([GAME_BRIEF, market_context, state, GAME_SECTIONS, RULES])
