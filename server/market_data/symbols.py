"""
Instrument tables for the market, FX and commodity boards.
"""
from __future__ import annotations

from dataclasses import dataclass

# Quoted every market cycle; also the source of the annotation snapshot
MARKET_SYMBOLS: tuple[str, ...] = (
    "^TYX", "^TNX", "^FVX", "2YY=F",
    "DX-Y.NYB",
    "USDJPY=X", "EURUSD=X", "GBPUSD=X",
    "GC=F", "PL=F", "SI=F", "HG=F",
    "CL=F", "BZ=F", "NG=F",
    "^VIX",
    "^GSPC", "^DJI", "^IXIC", "^RUT",
)

MARKET_LABELS: dict[str, str] = {
    "^TYX": "US 30Y",
    "^TNX": "US 10Y",
    "^FVX": "US 5Y",
    "2YY=F": "US 2Y",
    "DX-Y.NYB": "DXY",
    "GC=F": "GOLD",
    "PL=F": "PLATINUM",
    "SI=F": "SILVER",
    "HG=F": "COPPER",
    "CL=F": "WTI",
    "BZ=F": "BRENT",
    "NG=F": "NAT GAS",
    "^GSPC": "S&P 500",
    "^IXIC": "NASDAQ",
    "^DJI": "DOW",
    "^RUT": "RUSSELL 2000",
    "USDJPY=X": "USD/JPY (BOJ)",
    "EURUSD=X": "EUR/USD (ECB)",
    "GBPUSD=X": "GBP/USD (BOE)",
    "^VIX": "VIX",
}

# Yahoo symbol -> key of the numeric snapshot read by the annotation engine
SNAPSHOT_KEYS: dict[str, str] = {
    "^GSPC": "spx",
    "^IXIC": "nasdaq",
    "^DJI": "dow",
    "^VIX": "vix",
    "^TYX": "us30y",
    "^TNX": "us10y",
    "^FVX": "us5y",
    "2YY=F": "us2y",
    "DX-Y.NYB": "dxy",
    "EURUSD=X": "eurusd",
    "GBPUSD=X": "gbpusd",
    "USDJPY=X": "usdjpy",
    "GC=F": "gold",
    "SI=F": "silver",
    "HG=F": "copper",
    "CL=F": "wti",
    "BZ=F": "brent",
    "NG=F": "natgas",
}

YIELD_SYMBOLS: tuple[tuple[str, str], ...] = (
    ("2YY=F", "US 2Y"),
    ("^FVX", "US 5Y"),
    ("^TNX", "US 10Y"),
    ("^TYX", "US 30Y"),
)


def market_label(symbol: str) -> str:
    return MARKET_LABELS.get(symbol, symbol)


@dataclass(frozen=True)
class Instrument:
    """A board row: Yahoo symbol, display label, board group and unit."""

    symbol: str
    label: str
    group: str
    unit: str = ""


# ── FX board ────────────────────────────────────────────────────────

FX_GROUPS: tuple[str, ...] = ("macro", "geo", "commodity")

FX_PAIRS: tuple[Instrument, ...] = (
    Instrument("DX-Y.NYB", "DXY", "macro"),
    Instrument("BTC-USD", "BTC/USD", "macro"),
    Instrument("ETH-USD", "ETH/USD", "macro"),
    Instrument("EURUSD=X", "EUR/USD", "macro"),
    Instrument("USDJPY=X", "USD/JPY", "macro"),
    Instrument("GBPUSD=X", "GBP/USD", "macro"),
    Instrument("USDCHF=X", "USD/CHF", "macro"),
    Instrument("EURJPY=X", "EUR/JPY", "macro"),
    Instrument("CNH=X", "USD/CNH", "geo"),
    Instrument("ILS=X", "USD/ILS", "geo"),
    Instrument("MXN=X", "USD/MXN", "geo"),
    Instrument("TRY=X", "USD/TRY", "geo"),
    Instrument("KRW=X", "USD/KRW", "geo"),
    Instrument("INR=X", "USD/INR", "geo"),
    Instrument("EURGBP=X", "EUR/GBP", "geo"),
    Instrument("USDCAD=X", "USD/CAD", "commodity"),
    Instrument("AUDUSD=X", "AUD/USD", "commodity"),
    Instrument("NOK=X", "USD/NOK", "commodity"),
    Instrument("NZDUSD=X", "NZD/USD", "commodity"),
    Instrument("BRL=X", "USD/BRL", "commodity"),
    Instrument("ZAR=X", "USD/ZAR", "commodity"),
)

# Served when a whole group fails to quote: (label, price, change%, dir)
FX_DEFAULTS: dict[str, tuple[tuple[str, str, str, str], ...]] = {
    "macro": (
        ("DXY", "107.250", "+0.15", "up"),
        ("EUR/USD", "1.0920", "+0.08", "up"),
        ("USD/JPY", "151.20", "+0.15", "up"),
        ("GBP/USD", "1.2750", "+0.12", "up"),
        ("USD/CHF", "0.8810", "-0.05", "down"),
    ),
    "geo": (
        ("USD/CNH", "7.2300", "+0.12", "up"),
        ("USD/ILS", "3.7500", "+0.08", "up"),
        ("USD/MXN", "17.100", "-0.15", "down"),
        ("USD/TRY", "32.100", "+0.25", "up"),
        ("USD/KRW", "1350.0", "-0.10", "down"),
    ),
    "commodity": (
        ("USD/CAD", "1.3400", "-0.12", "down"),
        ("AUD/USD", "0.6600", "+0.15", "up"),
        ("USD/NOK", "10.500", "-0.08", "down"),
        ("NZD/USD", "0.6100", "+0.10", "up"),
        ("USD/BRL", "5.1500", "-0.18", "down"),
    ),
}

# ── Commodity board ─────────────────────────────────────────────────

COMMODITY_GROUPS: tuple[str, ...] = ("metals", "energy", "agriculture")

COMMODITIES: tuple[Instrument, ...] = (
    Instrument("GC=F", "Gold", "metals", "$/oz"),
    Instrument("SI=F", "Silver", "metals", "$/oz"),
    Instrument("PL=F", "Platinum", "metals", "$/oz"),
    Instrument("PA=F", "Palladium", "metals", "$/oz"),
    Instrument("HG=F", "Copper", "metals", "$/lb"),
    Instrument("ALI=F", "Aluminum", "metals", "$/lb"),
    Instrument("CL=F", "WTI", "energy", "$/bbl"),
    Instrument("BZ=F", "Brent", "energy", "$/bbl"),
    Instrument("NG=F", "Nat Gas", "energy", "$/mmBtu"),
    Instrument("RB=F", "Gasoline", "energy", "$/gal"),
    Instrument("HO=F", "Heating Oil", "energy", "$/gal"),
    Instrument("URA", "URA", "energy", "$"),
    Instrument("XLE", "XLE", "energy", "$"),
    Instrument("ZW=F", "Wheat", "agriculture", "¢/bu"),
    Instrument("ZC=F", "Corn", "agriculture", "¢/bu"),
    Instrument("ZS=F", "Soybeans", "agriculture", "¢/bu"),
    Instrument("KC=F", "Coffee", "agriculture", "¢/lb"),
    Instrument("CC=F", "Cocoa", "agriculture", "$/mt"),
    Instrument("SB=F", "Sugar", "agriculture", "¢/lb"),
    Instrument("CT=F", "Cotton", "agriculture", "¢/lb"),
    Instrument("LE=F", "Live Cattle", "agriculture", "¢/lb"),
    Instrument("LBS=F", "Lumber", "agriculture", "$/mbf"),
)

COMMODITY_DEFAULTS: dict[str, tuple[tuple[str, str, str, str, str], ...]] = {
    "metals": (
        ("Gold", "2650.00", "+0.35", "up", "$/oz"),
        ("Silver", "31.50", "+0.55", "up", "$/oz"),
        ("Platinum", "985.00", "-0.20", "down", "$/oz"),
        ("Copper", "4.15", "+0.40", "up", "$/lb"),
    ),
    "energy": (
        ("WTI", "72.50", "-0.45", "down", "$/bbl"),
        ("Brent", "76.20", "-0.38", "down", "$/bbl"),
        ("Nat Gas", "3.25", "+1.20", "up", "$/mmBtu"),
    ),
    "agriculture": (
        ("Wheat", "580", "+0.45", "up", "¢/bu"),
        ("Corn", "455", "+0.28", "up", "¢/bu"),
        ("Soybeans", "1025", "-0.15", "down", "¢/bu"),
        ("Coffee", "185", "+1.50", "up", "¢/lb"),
    ),
}
