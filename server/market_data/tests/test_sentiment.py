"""
Tests for market_data.sentiment
"""
from market_data.sentiment import calculate_sentiment_dashboard


def test_defaults_when_snapshot_missing():
    dash = calculate_sentiment_dashboard(None)

    assert dash["vix"] == {"value": "15.0", "regime": "NORMAL", "color": "#3b82f6"}
    assert dash["curve"]["value"] == "-50bp"
    assert dash["curve"]["signal"] == "FLAT"
    assert dash["dollar"]["signal"] == "NEUTRAL"
    assert dash["fearGreed"]["label"] == "NEUTRAL"
    assert dash["rateCut"] == {"value": "60%", "signal": "CUT ODDS"}
    assert dash["gold"]["signal"] == "NEUTRAL"
    assert dash["oil"]["signal"] == "STABLE"
    assert dash["termPremium"]["signal"] == "STEEP"
    assert dash["credit"]["signal"] == "TIGHT"


def test_stress_scenario():
    dash = calculate_sentiment_dashboard(
        {"vix": 35.0, "us10y": 4.0, "us2y": 4.8, "dxy": 108.0, "gold": 2700.0, "wti": 95.0}
    )

    assert dash["vix"]["regime"] == "PANIC"
    assert dash["curve"] == {"value": "-80bp", "signal": "INVERTED", "color": "#ef4444"}
    assert dash["dollar"]["signal"] == "STRONG"
    assert dash["fearGreed"]["value"] == "0"
    assert dash["fearGreed"]["label"] == "EXTREME FEAR"
    assert dash["rateCut"]["value"] == "75%"
    assert dash["gold"]["signal"] == "HAVEN BID"
    assert dash["oil"]["signal"] == "SPIKE"
    assert dash["credit"]["signal"] == "STRESS"


def test_calm_scenario():
    dash = calculate_sentiment_dashboard(
        {"vix": 11.0, "us10y": 4.6, "us2y": 3.9, "us30y": 4.7, "dxy": 99.0, "wti": 58.0}
    )

    assert dash["vix"]["regime"] == "CALM"
    assert dash["curve"]["signal"] == "STEEP"
    assert dash["dollar"]["signal"] == "WEAK"
    assert dash["fearGreed"]["label"] == "GREED"
    assert dash["oil"]["signal"] == "CHEAP"
    assert dash["termPremium"]["signal"] == "NORMAL"
    assert dash["credit"]["signal"] == "CALM"
