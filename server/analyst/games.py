"""
Strategic Game Tracker

Keeps a board of long-running strategic games (trade wars, chokepoint
standoffs, central bank vs market). On each run the most recent cards are
matched against every game's keywords; games with fresh headlines are
handed to the model, which either reports a new move or nothing. The
board is then published through the snapshot hub as game_theory_update.
"""
from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from analyst.prompts import build_game_update_prompt
from analyst.service import TextCompleter
from market_data.hub import SnapshotHub
from newsdesk.ws_server.card_store import CardStore

logger = logging.getLogger(__name__)

RECENT_CARD_WINDOW = 30
MAX_HEADLINES_PER_GAME = 5

MOVE_TYPES = frozenset({"DEFECT", "COOPERATE", "SIGNAL"})

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _game(
    game_id: str,
    title: str,
    emoji: str,
    players: list[str],
    phase: str,
    phase_color: str,
    last_move: tuple[str, str, str, str],
    status: str,
    status_color: str,
    next_move: str,
    keywords: list[str],
) -> dict[str, Any]:
    player, action, move_type, date = last_move
    return {
        "id": game_id,
        "title": title,
        "emoji": emoji,
        "players": players,
        "currentPhase": phase,
        "phaseColor": phase_color,
        "lastMove": {"player": player, "action": action, "type": move_type, "date": date},
        "equilibriumStatus": status,
        "statusColor": status_color,
        "nextLikelyMove": next_move,
        "keywords": keywords,
    }


DEFAULT_GAMES: tuple[dict[str, Any], ...] = (
    _game(
        "chip_war", "US-China Tech War", "🔬", ["US Commerce Dept", "Beijing/CCP"],
        "ESCALATION", "yellow",
        ("US", "New export controls on AI chips to China", "DEFECT", "2026-01-10"),
        "UNSTABLE", "yellow",
        "China restricts rare earth exports or retaliates on US firms",
        ["chip", "semiconductor", "nvidia", "export control", "huawei", "smic", "asml", "rare earth"],
    ),
    _game(
        "hormuz_standoff", "Strait of Hormuz", "⛽", ["Iran/Proxies", "US Navy/Allies"],
        "BRINKMANSHIP", "red",
        ("Iran", "Harassment of commercial tankers", "DEFECT", "2026-01-08"),
        "CRITICAL", "red",
        "US Naval convoy escorts or sanctions tightening",
        ["hormuz", "iran", "tanker", "gulf", "naval", "strait", "persian"],
    ),
    _game(
        "fed_vs_markets", "Fed vs Markets", "🏦", ["Federal Reserve", "Bond Market/Equities"],
        "STANDOFF", "yellow",
        ("Fed", "Hawkish hold, pushback on rate cut expectations", "SIGNAL", "2026-01-09"),
        "SHIFTING", "yellow",
        "Markets test Fed resolve with rally or yields repricing",
        ["fed", "powell", "fomc", "rate cut", "inflation", "cpi", "dot plot"],
    ),
    _game(
        "opec_price_war", "OPEC+ vs Shale", "🛢️", ["OPEC+ (Saudi/Russia)", "US Shale Producers"],
        "COORDINATION", "green",
        ("OPEC+", "Extended production cuts through Q1", "COOPERATE", "2026-01-05"),
        "STABLE", "green",
        "Hold pattern unless demand shock or shale ramp-up",
        ["opec", "saudi", "oil production", "oil cut", "shale", "drilling"],
    ),
    _game(
        "taiwan_strait", "Taiwan Strait", "🇹🇼", ["PLA/Beijing", "Taiwan/US Alliance"],
        "POSTURING", "yellow",
        ("PLA", "Large-scale military drills near Taiwan", "SIGNAL", "2026-01-07"),
        "TENSE", "yellow",
        "US Freedom of Navigation op or arms sale announcement",
        ["taiwan", "pla", "tsmc", "strait", "invasion", "blockade"],
    ),
    _game(
        "russia_ukraine", "Russia-Ukraine War", "⚔️", ["Russia", "Ukraine/NATO"],
        "ATTRITION", "red",
        ("Russia", "Winter offensive push in Donbas", "DEFECT", "2026-01-11"),
        "FROZEN CONFLICT", "yellow",
        "Ceasefire talks or new Western aid package",
        ["ukraine", "russia", "donbas", "crimea", "nato", "zelensky", "putin"],
    ),
    _game(
        "iran_israel", "Iran-Israel Shadow War", "🎯",
        ["Iran/Proxies (Hezbollah, Hamas)", "Israel/IDF"],
        "ESCALATION", "red",
        ("Israel", "Strikes on Iranian proxy positions in Syria", "DEFECT", "2026-01-10"),
        "VOLATILE", "red",
        "Proxy retaliation or Iranian nuclear program acceleration",
        ["israel", "hezbollah", "hamas", "gaza", "beirut", "tehran", "idf", "mossad"],
    ),
    _game(
        "eu_energy_crisis", "EU Energy Security", "🇪🇺", ["EU/Germany", "Russia/Gazprom"],
        "ADAPTATION", "yellow",
        ("EU", "LNG import diversification and storage mandates", "COOPERATE", "2026-01-08"),
        "STABILIZING", "yellow",
        "Winter demand spike test or new pipeline disputes",
        ["eu energy", "lng", "gazprom", "nord stream", "gas storage", "energy crisis", "ttf"],
    ),
    _game(
        "ecb_inflation", "ECB vs Inflation", "💶", ["ECB/Lagarde", "Eurozone Bond Markets"],
        "STANDOFF", "yellow",
        ("ECB", "Held rates, signaled data-dependency", "SIGNAL", "2026-01-09"),
        "SHIFTING", "yellow",
        "Markets price rate cuts, ECB pushback on dovish expectations",
        ["ecb", "lagarde", "eurozone", "bund", "european rates"],
    ),
    _game(
        "us_tariff_war", "US Tariff War", "🏛️", ["US Trade Policy", "China/EU/World"],
        "ESCALATION", "red",
        ("US", "Reciprocal tariffs: 60%+ on China, 10-50% global", "DEFECT", "2026-01-10"),
        "CRITICAL", "red",
        "Retaliatory tariffs from China/EU or negotiation pivot",
        ["tariff", "trade war", "reciprocal", "import duty", "customs", "wto", "trade deal"],
    ),
    _game(
        "north_korea_nuclear", "North Korea Nuclear", "☢️", ["DPRK/Kim", "US/South Korea/Japan"],
        "POSTURING", "yellow",
        ("DPRK", "Ballistic missile test over the Sea of Japan", "SIGNAL", "2026-01-06"),
        "TENSE", "yellow",
        "Joint drills or new UN sanctions push",
        ["north korea", "dprk", "kim jong un", "icbm", "nuclear test", "pyongyang"],
    ),
    _game(
        "brics_dedollarization", "BRICS De-Dollarization", "💱", ["BRICS Bloc", "US Dollar System"],
        "SETUP", "green",
        ("BRICS", "Central banks extend gold reserve buying", "SIGNAL", "2026-01-04"),
        "STABLE", "green",
        "Local-currency settlement pilots or new payment rails",
        ["brics", "dedollarization", "gold reserves", "yuan", "petrodollar", "reserve currency"],
    ),
)


def parse_move(text: str) -> Optional[dict[str, Any]]:
    """
    Extract the move object from a model reply.

    Returns None when the reply holds no JSON, the JSON is malformed, or
    the model reported no new move.
    """
    match = _JSON_OBJECT.search(text or "")
    if not match:
        return None
    try:
        result = json.loads(match.group(0))
    except ValueError:
        return None
    if not isinstance(result, dict) or not result.get("newMove"):
        return None
    if not result.get("player") or not result.get("action"):
        return None
    return result


def apply_move(game: dict[str, Any], move: dict[str, Any], today: str) -> dict[str, Any]:
    """New game state with the move recorded; unset fields keep their old values."""
    move_type = str(move.get("type", "")).upper()
    return {
        **game,
        "currentPhase": move.get("newPhase") or game["currentPhase"],
        "phaseColor": move.get("phaseColor") or game["phaseColor"],
        "lastMove": {
            "player": move["player"],
            "action": move["action"],
            "type": move_type if move_type in MOVE_TYPES else "SIGNAL",
            "date": today,
        },
        "equilibriumStatus": move.get("equilibriumStatus") or game["equilibriumStatus"],
        "statusColor": move.get("statusColor") or game["statusColor"],
        "nextLikelyMove": move.get("nextLikelyMove") or game["nextLikelyMove"],
    }


def relevant_headlines(
    events: list[dict[str, Any]],
    keywords: list[str],
    limit: int = MAX_HEADLINES_PER_GAME,
) -> list[str]:
    """Headlines whose text or implications mention any keyword, newest first, no repeats."""
    found: list[str] = []
    for event in events:
        card = event.get("data") or {}
        headline = card.get("headline") or ""
        if not headline or headline in found:
            continue
        text = " ".join([headline, *(card.get("implications") or [])]).lower()
        if any(kw in text for kw in keywords):
            found.append(headline)
            if len(found) >= limit:
                break
    return found


@dataclass
class TrackerStats:
    runs: int = 0
    games_updated: int = 0
    model_failures: int = 0
    last_run: Optional[datetime] = field(default=None)


class GameTracker:
    """
    Periodic game-board updater.

    Without a completer the board stays at its seeded state but is still
    published on every run, so subscribers always receive it.
    """

    def __init__(
        self,
        hub: SnapshotHub,
        card_store: CardStore,
        completer: Optional[TextCompleter] = None,
        games: tuple[dict[str, Any], ...] = DEFAULT_GAMES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._hub = hub
        self._card_store = card_store
        self._completer = completer
        self._clock = clock
        self._games: dict[str, dict[str, Any]] = {g["id"]: copy.deepcopy(g) for g in games}
        self._stats = TrackerStats()

        self._hub.game_theory.replace(self.payload(), self._clock())

    @property
    def games(self) -> dict[str, dict[str, Any]]:
        return self._games

    def payload(self) -> dict[str, Any]:
        return {"games": copy.deepcopy(self._games), "lastUpdate": self._clock().isoformat()}

    async def run(self) -> int:
        """Scan recent cards, update matching games, publish the board. Returns games updated."""
        events = self._card_store.latest()[:RECENT_CARD_WINDOW]
        updated = 0

        if self._completer is not None:
            for game_id, game in list(self._games.items()):
                headlines = relevant_headlines(events, game["keywords"])
                if not headlines:
                    continue
                if await self._update_game(game_id, headlines):
                    updated += 1

        self._stats.runs += 1
        self._stats.games_updated += updated
        self._stats.last_run = self._clock()

        await self._hub.publish_game_theory(self.payload())
        logger.info(
            f"Game tracker run complete: {updated} games updated",
            extra={"games_updated": updated},
        )
        return updated

    async def _update_game(self, game_id: str, headlines: list[str]) -> bool:
        game = self._games[game_id]
        try:
            reply = await self._completer.complete(
                build_game_update_prompt(game, headlines), headline=headlines[0]
            )
        except Exception as e:
            self._stats.model_failures += 1
            logger.warning(f"Game update failed for {game_id}: {e}", extra={"game": game_id})
            return False

        move = parse_move(reply)
        if move is None:
            return False

        self._games[game_id] = apply_move(game, move, self._clock().date().isoformat())
        logger.info(
            f"Game update: {game['title']} - new {self._games[game_id]['lastMove']['type']} "
            f"move by {move['player']}",
            extra={"game": game_id},
        )
        return True

    def get_stats(self) -> dict[str, Any]:
        return {
            "runs": self._stats.runs,
            "games_updated": self._stats.games_updated,
            "model_failures": self._stats.model_failures,
            "last_run": self._stats.last_run,
        }
