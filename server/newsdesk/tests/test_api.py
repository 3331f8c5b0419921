"""
Tests for newsdesk.api.routes

Runs the aiohttp application in-process with aiohttp.test_utils.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import test_utils

from newsdesk.api.routes import ANALYSIS_FAILED, GAME_ANALYSIS_FAILED, create_app
from newsdesk.core.types import AnalysisError
from newsdesk.models.news import Column


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def pipeline():
    p = MagicMock()
    p.submit_manual = AsyncMock()
    return p


@pytest.fixture
def analyst():
    a = MagicMock()
    a.analyze = AsyncMock(return_value="**Desk note**")
    a.analyze_game = AsyncMock(return_value="**STATECRAFT ANALYSIS**")
    return a


async def _client(app):
    client = test_utils.TestClient(test_utils.TestServer(app))
    await client.start_server()
    return client


@pytest.fixture
async def client(pipeline, analyst):
    c = await _client(create_app(pipeline, analyst, stats=lambda: {"subscribers": 2}))
    yield c
    await c.close()


# ── /api/manual-input ─────────────────────────────────────────────────────────

async def test_manual_input_submits_card(client, pipeline):
    resp = await client.post(
        "/api/manual-input", json={"headline": "Flash: OPEC cuts", "category": "commodity"}
    )

    assert resp.status == 200
    assert await resp.json() == {"success": True}
    pipeline.submit_manual.assert_awaited_once_with("Flash: OPEC cuts", Column.COMMODITY, None)


async def test_manual_input_defaults_to_breaking(client, pipeline):
    await client.post("/api/manual-input", json={"headline": "Flash", "source": "Desk"})
    pipeline.submit_manual.assert_awaited_once_with("Flash", Column.BREAKING, "Desk")


async def test_manual_input_requires_headline(client, pipeline):
    resp = await client.post("/api/manual-input", json={"headline": "  "})

    assert resp.status == 400
    assert await resp.json() == {"error": "Headline is required"}
    pipeline.submit_manual.assert_not_awaited()


async def test_manual_input_unknown_category(client):
    resp = await client.post("/api/manual-input", json={"headline": "x", "category": "sports"})
    assert resp.status == 400


async def test_non_json_body_rejected(client):
    resp = await client.post("/api/manual-input", data="headline=x")
    assert resp.status == 400


# ── /api/analyze-headline ─────────────────────────────────────────────────────

async def test_analyze_headline_success(client, analyst):
    resp = await client.post(
        "/api/analyze-headline",
        json={"headline": "ECB cuts", "source": "Reuters", "implications": ["EUR lower"]},
    )

    assert resp.status == 200
    assert await resp.json() == {"success": True, "analysis": "**Desk note**"}
    analyst.analyze.assert_awaited_once_with(
        "ECB cuts", source="Reuters", implications=["EUR lower"]
    )


async def test_analyze_headline_requires_headline(client):
    resp = await client.post("/api/analyze-headline", json={})
    assert resp.status == 400


async def test_analyze_headline_failure_is_500(client, analyst):
    analyst.analyze.side_effect = AnalysisError("groq down", headline="ECB cuts")

    resp = await client.post("/api/analyze-headline", json={"headline": "ECB cuts"})

    assert resp.status == 500
    assert await resp.json() == {"error": ANALYSIS_FAILED}


async def test_analyze_headline_without_analyst(pipeline):
    client = await _client(create_app(pipeline))
    try:
        resp = await client.post("/api/analyze-headline", json={"headline": "ECB cuts"})
        assert resp.status == 500
    finally:
        await client.close()



# ── /api/analyze-game ────────────────────────────────────────────────────────

HORMUZ = {
    "gameId": "hormuz_standoff",
    "title": "Strait of Hormuz",
    "emoji": "⛽",
    "players": ["Iran/Proxies", "US Navy/Allies"],
    "currentPhase": "BRINKMANSHIP",
}


async def test_analyze_game_success(client, analyst):
    resp = await client.post("/api/analyze-game", json=HORMUZ)

    assert resp.status == 200
    assert await resp.json() == {"success": True, "analysis": "**STATECRAFT ANALYSIS**"}
    analyst.analyze_game.assert_awaited_once_with(HORMUZ)


async def test_analyze_game_requires_title(client, analyst):
    resp = await client.post("/api/analyze-game", json={"gameId": "hormuz_standoff"})

    assert resp.status == 400
    assert await resp.json() == {"error": "Game title is required"}
    analyst.analyze_game.assert_not_awaited()


async def test_analyze_game_failure_is_500(client, analyst):
    analyst.analyze_game.side_effect = AnalysisError("groq down", headline="Strait of Hormuz")

    resp = await client.post("/api/analyze-game", json=HORMUZ)

    assert resp.status == 500
    assert await resp.json() == {"error": GAME_ANALYSIS_FAILED}


# ── /health ───────────────────────────────────────────────────────────────────

async def test_health(client):
    resp = await client.get("/health")
    assert resp.status == 200
    assert await resp.json() == {"status": "ok", "stats": {"subscribers": 2}}
