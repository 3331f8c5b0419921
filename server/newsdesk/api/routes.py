"""
HTTP API

    POST /api/manual-input      operator-submitted card
    POST /api/analyze-headline  on-demand desk note for one headline
    POST /api/analyze-game      on-demand strategic brief for one tracked game
    GET  /health                liveness plus component stats
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from aiohttp import web

from analyst.service import HeadlineAnalyst
from newsdesk.core.types import AnalysisError, ValidationError
from newsdesk.models.news import Column
from newsdesk.pipeline.pipeline import NewsPipeline

logger = logging.getLogger(__name__)

ANALYSIS_FAILED = "Failed to analyze headline. Please try again."
GAME_ANALYSIS_FAILED = "Failed to analyze conflict. Please try again."

StatsProvider = Callable[[], dict[str, Any]]


async def _json_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise web.HTTPBadRequest(
            text='{"error": "Body must be JSON"}', content_type="application/json"
        )
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(
            text='{"error": "Body must be a JSON object"}', content_type="application/json"
        )
    return body


class ApiHandlers:
    def __init__(
        self,
        pipeline: NewsPipeline,
        analyst: Optional[HeadlineAnalyst] = None,
        stats: Optional[StatsProvider] = None,
    ) -> None:
        self._pipeline = pipeline
        self._analyst = analyst
        self._stats = stats

    async def manual_input(self, request: web.Request) -> web.Response:
        body = await _json_body(request)
        headline = body.get("headline")
        if not isinstance(headline, str) or not headline.strip():
            return web.json_response({"error": "Headline is required"}, status=400)

        try:
            column = Column.from_string(body.get("category") or "breaking")
        except ValueError as e:
            return web.json_response({"error": str(e)}, status=400)

        source = body.get("source")
        await self._pipeline.submit_manual(
            headline, column, source if isinstance(source, str) and source else None
        )
        return web.json_response({"success": True})

    async def analyze_headline(self, request: web.Request) -> web.Response:
        body = await _json_body(request)
        headline = body.get("headline")
        if not isinstance(headline, str) or not headline.strip():
            return web.json_response({"error": "Headline is required"}, status=400)
        if self._analyst is None:
            logger.warning("Headline analysis requested but no analyst is configured")
            return web.json_response({"error": ANALYSIS_FAILED}, status=500)

        implications = body.get("implications")
        if not isinstance(implications, list):
            implications = None

        try:
            analysis = await self._analyst.analyze(
                headline,
                source=body.get("source"),
                implications=[str(i) for i in implications] if implications else None,
            )
        except ValidationError:
            return web.json_response({"error": "Headline is required"}, status=400)
        except AnalysisError as e:
            logger.error(f"Headline analysis failed: {e}")
            return web.json_response({"error": ANALYSIS_FAILED}, status=500)

        return web.json_response({"success": True, "analysis": analysis})

    async def analyze_game(self, request: web.Request) -> web.Response:
        body = await _json_body(request)
        title = body.get("title")
        if not isinstance(title, str) or not title.strip():
            return web.json_response({"error": "Game title is required"}, status=400)
        if self._analyst is None:
            logger.warning("Game analysis requested but no analyst is configured")
            return web.json_response({"error": GAME_ANALYSIS_FAILED}, status=500)

        try:
            analysis = await self._analyst.analyze_game(body)
        except ValidationError:
            return web.json_response({"error": "Game title is required"}, status=400)
        except AnalysisError as e:
            logger.error(f"Game analysis failed: {e}")
            return web.json_response({"error": GAME_ANALYSIS_FAILED}, status=500)

        return web.json_response({"success": True, "analysis": analysis})

    async def health(self, request: web.Request) -> web.Response:
        payload: dict[str, Any] = {"status": "ok"}
        if self._stats is not None:
            payload["stats"] = self._stats()
        return web.json_response(payload, dumps=_dumps)


def _dumps(obj: Any) -> str:
    return json.dumps(obj, default=str)


def create_app(
    pipeline: NewsPipeline,
    analyst: Optional[HeadlineAnalyst] = None,
    stats: Optional[StatsProvider] = None,
) -> web.Application:
    handlers = ApiHandlers(pipeline, analyst, stats)
    app = web.Application()
    app.router.add_post("/api/manual-input", handlers.manual_input)
    app.router.add_post("/api/analyze-headline", handlers.analyze_headline)
    app.router.add_post("/api/analyze-game", handlers.analyze_game)
    app.router.add_get("/health", handlers.health)
    return app


class HttpApiServer:
    """Runs the API application on its own TCP site inside the shared event loop."""

    def __init__(self, app: web.Application, host: str, port: int) -> None:
        self._app = app
        self._host = host
        self._port = port
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        logger.info(
            f"HTTP API listening on http://{self._host}:{self._port}",
            extra={"host": self._host, "port": self._port},
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("HTTP API stopped")
