"""
Tests for market_data.fred
"""
import pytest

from market_data.fred import FRED_SERIES, FredClient, Indicator


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
    """Answers by series_id; unknown series raise like a dropped connection."""

    def __init__(self, observations: dict[str, list[dict]]) -> None:
        self._observations = observations
        self.calls = 0

    def get(self, url, params=None, **kwargs):
        self.calls += 1
        series_id = params["series_id"]
        if series_id not in self._observations:
            raise ConnectionResetError(series_id)
        return FakeResponse({"observations": self._observations[series_id]})


def test_indicator_dict():
    row = Indicator("SOFR", 4.31, change=-0.02, tripwire_hit=False, date="2025-03-03").to_dict()
    assert row == {
        "label": "SOFR",
        "value": "4.31%",
        "change": "-0.02%",
        "dir": "down",
        "tripwireHit": False,
        "date": "2025-03-03",
    }


async def test_no_api_key_serves_fallbacks_without_requests():
    session = FakeSession({})
    indicators = await FredClient(session).fetch_indicators()

    assert [i.value for i in indicators] == [s.fallback for s in FRED_SERIES]
    assert all(i.fallback for i in indicators)
    assert session.calls == 0


async def test_fetch_series_change_and_tripwire():
    session = FakeSession({
        "U6RATE": [{"value": "8.9", "date": "2025-02-01"}, {"value": "8.7", "date": "2025-01-01"}],
    })
    client = FredClient(session, api_key="key")

    indicator = await client.fetch_series(FRED_SERIES[0])

    assert indicator.value == 8.9
    assert indicator.change == pytest.approx(0.2)
    assert indicator.tripwire_hit is True
    assert indicator.to_dict()["change"] == "+0.20%"


async def test_failed_series_replaced_by_fallback():
    session = FakeSession({
        "U6RATE": [{"value": "7.9"}],
        "SOFR": [{"value": "."}],
    })

    indicators = await FredClient(session, api_key="key").fetch_indicators()

    u6, rrp, sofr = indicators
    assert u6.value == 7.9 and not u6.fallback and not u6.tripwire_hit
    assert rrp.fallback
    assert sofr.fallback
