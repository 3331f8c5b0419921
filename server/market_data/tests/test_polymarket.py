"""
Tests for market_data.polymarket
"""
import pytest

from market_data.polymarket import (
    PolymarketClient,
    categorize,
    is_relevant,
    parse_probability,
    to_prediction_market,
)


class FakeResponse:
    def __init__(self, payload) -> None:
        self._payload = payload

    def raise_for_status(self) -> None:
        return None

    async def json(self):
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, payload) -> None:
        self._payload = payload
        self.calls: list[tuple[str, dict]] = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return FakeResponse(self._payload)


def test_relevance_filter():
    assert is_relevant({"question": "Will the Fed cut rates in March?"})
    assert not is_relevant({"question": "Super Bowl halftime show market"})
    assert not is_relevant({"question": "Who wins Best Picture?"})


@pytest.mark.parametrize(
    "question, category",
    [
        ("Fed decision in June?", "MACRO"),
        ("Bitcoin above 100k?", "CRYPTO"),
        ("Trump wins Iowa?", "POLITICS"),
        ("Ukraine ceasefire by May?", "GEO"),
        ("Gold above $3000?", "COMMODITY"),
        ("Nvidia largest company?", "OTHER"),
    ],
)
def test_categorize(question, category):
    assert categorize(question) == category


def test_parse_probability():
    assert parse_probability('["0.63", "0.37"]') == 0.63
    assert parse_probability([0.2, 0.8]) == 0.2
    assert parse_probability(None) == 0.5
    assert parse_probability("not json") == 0.5
    assert parse_probability("[]") == 0.5


def test_direction_needs_volume():
    busy = to_prediction_market(
        {"id": 7, "question": "Fed cut in March?", "outcomePrices": '["0.3","0.7"]', "volume24hr": 50000}
    )
    quiet = to_prediction_market(
        {"id": 8, "question": "Fed cut in March?", "outcomePrices": '["0.9","0.1"]', "volume24hr": 500}
    )

    assert busy.direction == "down"
    assert busy.to_dict()["probability"] == "30.0"
    assert busy.slug == "7"
    assert quiet.direction == "neutral"


async def test_fetch_markets_filters_and_limits():
    payload = [
        {"id": 1, "question": "Fed cut in March?", "outcomePrices": '["0.4","0.6"]', "volume24hr": 20000},
        {"id": 2, "question": "NBA finals winner?", "outcomePrices": '["0.5","0.5"]'},
        {"id": 3, "question": "Oil above $100?", "outcomePrices": '["0.1","0.9"]'},
        {"id": 4, "question": "Taiwan invasion in 2025?", "outcomePrices": '["0.05","0.95"]'},
    ]
    session = FakeSession(payload)

    markets = await PolymarketClient(session).fetch_markets(limit=2)

    assert [m.id for m in markets] == ["1", "3"]
    _, kwargs = session.calls[0]
    assert kwargs["params"]["order"] == "volume24hr"
    assert kwargs["params"]["closed"] == "false"
