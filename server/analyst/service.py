"""
Headline Analyst

On-demand, request/response analysis of a single headline or a single
tracked strategic game. Not part of the broadcast pipeline: nothing it
produces is sent to subscribers.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from analyst.prompts import (
    PROMPT_VERSION,
    build_analysis_prompt,
    build_game_analysis_prompt,
    select_desk,
)
from market_data.hub import SnapshotHub
from newsdesk.core.types import AnalysisError, ValidationError

logger = logging.getLogger(__name__)


class TextCompleter(Protocol):
    async def complete(self, prompt: str, headline: str = "") -> str: ...


class HeadlineAnalyst:
    def __init__(self, completer: TextCompleter, hub: SnapshotHub) -> None:
        self._completer = completer
        self._hub = hub

    async def analyze(
        self,
        headline: str,
        source: str | None = None,
        implications: list[str] | None = None,
    ) -> str:
        """
        Ground the headline in live prices and ask the model for a desk note.

        Raises:
            ValidationError: headline missing
            AnalysisError: the model call failed
        """
        if not headline or not headline.strip():
            raise ValidationError("Headline is required", field="headline")

        await self._refresh_market()

        prompt = build_analysis_prompt(
            headline,
            self._hub.market_context_text(),
            source=source,
            implications=implications,
        )
        desk = select_desk(headline, implications)
        logger.info(
            f"Analyzing headline on {desk.name} desk",
            extra={"desk": desk.name, "prompt_version": PROMPT_VERSION},
        )

        return await self._complete(prompt, headline)

    async def analyze_game(self, game: Mapping[str, Any]) -> str:
        """
        Long-form strategic brief for one tracked game, grounded in live prices.

        Raises:
            ValidationError: game title missing
            AnalysisError: the model call failed
        """
        title = game.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Game title is required", field="title")

        await self._refresh_market()
        prompt = build_game_analysis_prompt(dict(game), self._hub.market_context_text())
        logger.info(
            f"Analyzing game {title}",
            extra={"game": game.get("gameId") or game.get("id"), "prompt_version": PROMPT_VERSION},
        )
        return await self._complete(prompt, title)

    async def _refresh_market(self) -> None:
        try:
            await self._hub.ensure_fresh_market()
        except Exception as e:
            logger.warning(f"Could not refresh market data for analysis: {e}")

    async def _complete(self, prompt: str, headline: str) -> str:
        try:
            return await self._completer.complete(prompt, headline=headline)
        except AnalysisError:
            raise
        except Exception as e:
            raise AnalysisError(f"Analysis failed: {e}", headline=headline) from e
