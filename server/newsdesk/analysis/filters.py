"""
Suppression gates

Checked in order before any analysis runs; the first gate that fires
decides the outcome. A gate either drops the story (skip) or lets it
through as a bare headline with no analytical payload.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from newsdesk.models.news import Analysis, Horizon


class Suppression(str, Enum):
    SKIP = "skip"
    HEADLINE_ONLY = "headline_only"


def _rx(pattern: str) -> Callable[[str], bool]:
    compiled = re.compile(pattern, re.IGNORECASE)
    return lambda text: compiled.search(text) is not None


# ── Obituaries ──────────────────────────────────────────────────────

_is_death = _rx(
    r"\b(dies|died|death|obituary|passes away|passed away|dead at|dead,|funeral|"
    r"mourning|memorial|at \d{2,3})\b"
)

MARKET_RELEVANT_PEOPLE: tuple[str, ...] = (
    # World leaders
    "trump", "biden", "xi jinping", "putin", "zelensky", "macron", "scholz",
    "sunak", "modi", "netanyahu",
    # Central bankers
    "powell", "lagarde", "yellen", "ueda", "bailey",
    # Executives and investors
    "elon musk", "musk", "bezos", "zuckerberg", "tim cook", "satya nadella",
    "jensen huang", "pichai", "jamie dimon", "buffett", "larry fink",
    "ken griffin", "dalio", "sam altman", "nadella", "hastings",
)


def is_irrelevant_obituary(text: str) -> bool:
    return _is_death(text) and not any(name in text for name in MARKET_RELEVANT_PEOPLE)


# ── Research papers ─────────────────────────────────────────────────

_academic_patterns = (
    _rx(r"\s--\s*by\s+[a-z]"),
    _rx(r"\bet al\."),
    _rx(r"working paper"),
    _rx(r"\bnber\b.*research"),
    _rx(r"\bimf\b.*working"),
    _rx(r"\bpromote\s+(high-|low-)"),
)


def is_research_paper(text: str) -> bool:
    return any(p(text) for p in _academic_patterns)


# ── Domestic / social ───────────────────────────────────────────────

_immigration = _rx(r"\b(ice|immigration|border|deportation|migrant|asylum|undocumented)\b")
_enforcement = _rx(r"\b(agent|arrest|raid|detain|killed|killing|shooting|furore|protest)\b")
_local_authority = _rx(r"\b(police|sheriff|local|municipal|county)\b")
_local_incident = _rx(r"\b(shooting|killed|murder|arrest|protest|riot)\b")
_economic_context = _rx(r"market|stock|economic|fed|recession|gdp|trade")


def is_domestic_social(text: str) -> bool:
    if _immigration(text) and _enforcement(text):
        return True
    return _local_authority(text) and _local_incident(text) and not _economic_context(text)


# ── Space / science ─────────────────────────────────────────────────

_space = _rx(
    r"\b(moon|lunar|mars|asteroid|spacecraft|satellite|rocket|space station|astronaut|"
    r"cosmonaut|orbit|telescope|galaxy|universe|planet)\b"
)
_space_business = _rx(
    r"spacex.*stock|starlink.*revenue|satellite.*contract|defense.*space|space.*ipo"
)


def is_space_science(text: str) -> bool:
    return _space(text) and not _space_business(text)


# ── Tabloid / crime / sport ─────────────────────────────────────────

# (subject, exception) pairs; the story is tabloid if any subject matches
# without its exception. The first pair also needs a violent-act match.
_minor = _rx(r"\b(teen|teenager|student|child|children|kid|boy|girl|toddler|infant|baby)\b")
_violent_act = _rx(
    r"\b(abuse|abused|assault|assaulted|rape|raped|murder|murdered|kill|killed|torture|"
    r"tortured|molest|molested|kidnap|kidnapped|stabbed|stabbing|beaten|bully|bullied)\b"
)

_TABLOID_PAIRS: tuple[tuple[Callable[[str], bool], Callable[[str], bool]], ...] = (
    (
        _rx(r"\b(probation|sentenced|jail|prison|arraigned|indicted|pleaded guilty|convicted)\b"),
        _rx(
            r"\b(ceo|cfo|executive|banker|trader|fraud|insider trading|sec|doj|"
            r"money laundering|embezzle|bribe|corruption|cartel|antitrust)\b"
        ),
    ),
    (
        _rx(r"\b(celebrity|influencer|tiktok|instagram|youtube|viral video|reality tv|kardashian|bachelor|dating show)\b"),
        _rx(r"\b(stock|ipo|revenue|earnings|acquisition|market cap)\b"),
    ),
    (
        _rx(r"\b(pet|dog|cat|animal|zoo|wildlife|puppy|kitten)\b"),
        _rx(r"\b(stock|company|earnings|acquisition|veterinary.*ipo)\b"),
    ),
    (
        _rx(r"\b(wedding|divorce|affair|cheating|relationship|dating|married|engagement)\b"),
        _rx(r"\b(merger|acquisition|ceo|executive|billionaire.*divorce)\b"),
    ),
    (
        _rx(r"\b(recipe|cooking|restaurant review|food critic|chef|michelin)\b"),
        _rx(r"\b(stock|ipo|earnings|acquisition|bankruptcy)\b"),
    ),
    (
        _rx(
            r"\b(sports|football|soccer|basketball|baseball|hockey|tennis|golf|olympics|"
            r"athlete|championship|tournament|coach|player)\b"
        ),
        _rx(r"\b(stock|ipo|earnings|acquisition|broadcast rights|tv deal|stadium.*bond|betting.*regulation)\b"),
    ),
)


def is_tabloid(text: str) -> bool:
    if _minor(text) and _violent_act(text):
        return True
    return any(subject(text) and not exception(text) for subject, exception in _TABLOID_PAIRS)


# ── Routine price chatter ───────────────────────────────────────────

_price_move = _rx(
    r"\b(gold|oil|silver|copper|wheat|corn)\b.*(rises?|falls?|edges?|ticks?|gains?|"
    r"drops?|inches?|climbs?|dips?|steady|unchanged|flat)"
)
_move_reason = _rx(r"(rises?|falls?|gains?|drops?)\s*(on|amid|as|after)\b")
_metal_or_oil = _rx(r"\b(gold|oil|silver|copper)\b")
_big_move = _rx(r"surge|plunge|crash|soar|spike|tank|collapse|record|historic")


def is_routine_price_update(text: str) -> bool:
    if _price_move(text):
        return True
    return _move_reason(text) and _metal_or_oil(text) and not _big_move(text)


# ── Market relevance ────────────────────────────────────────────────

MARKET_KEYWORDS: tuple[str, ...] = (
    "fed", "fomc", "rate", "rates", "inflation", "cpi", "ppi", "gdp", "employment",
    "jobs", "payroll", "central bank", "ecb", "boj", "pboc", "rba", "boe", "yields",
    "treasury", "bond",
    "earnings", "revenue", "profit", "guidance", "eps", "beat", "miss", "quarterly",
    "fiscal", "merger", "acquisition", "m&a", "buyout", "ipo", "offering", "dividend",
    "buyback",
    "oil", "crude", "brent", "wti", "opec", "gas", "lng", "gold", "silver", "copper",
    "wheat", "corn",
    "sanctions", "tariff", "trade war", "embargo", "export ban", "supply chain", "shortage",
    "stock", "equity", "index", "nasdaq", "dow", "s&p", "futures", "options",
    "volatility", "vix", "rally", "selloff", "crash", "surge", "plunge", "soar", "tank",
    "dollar", "euro", "yen", "yuan", "fx", "forex", "currency", "devalue",
    "aapl", "msft", "googl", "amzn", "nvda", "tsla", "apple", "microsoft", "nvidia", "tesla",
)

NOISE_KEYWORDS: tuple[str, ...] = (
    "children", "kids", "teens", "minors", "account ban", "accounts closed",
    "age verification", "content moderation", "misinformation", "disinformation",
    "fact check", "hate speech",
    "movie", "film", "actor", "actress", "celebrity", "sports", "game", "concert",
    "album", "grammy", "oscar", "emmy", "award show", "red carpet", "fashion",
    "wedding", "divorce",
    "weather", "local", "community", "school", "university", "college", "student",
    "restaurant", "recipe", "travel", "vacation", "holiday", "christmas", "thanksgiving",
    "accident", "crash", "fire", "robbery", "theft", "murder", "assault",
    "diet", "exercise", "fitness", "wellness", "mental health", "relationship",
    "pet", "pets", "companion", "gadget", "smart home", "iot", "wearable", "lifestyle",
    "crowdfunding", "kickstarter", "indiegogo", "robot vacuum", "home automation",
    "smart speaker", "smart watch", "fitness tracker", "gaming", "esports",
)


def _keyword_score(text: str, keywords: tuple[str, ...]) -> int:
    return sum(1 for kw in keywords if re.search(rf"\b{re.escape(kw)}\b", text))


def is_non_market(text: str) -> bool:
    """Noise vocabulary outweighs market vocabulary."""
    market = _keyword_score(text, MARKET_KEYWORDS)
    noise = _keyword_score(text, NOISE_KEYWORDS)
    return noise > 0 and market < 2 and noise >= market


# ── Gate table ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class SuppressionGate:
    """One pre-analysis filter and the analysis it produces when it fires."""

    name: str
    tag: str
    outcome: Suppression
    predicate: Callable[[str], bool]
    impact: int = 0
    horizon: Horizon = Horizon.NA
    confidence: int = 0

    def to_analysis(self) -> Analysis:
        return Analysis(
            skip=self.outcome is Suppression.SKIP,
            headline_only=self.outcome is Suppression.HEADLINE_ONLY,
            impact=self.impact,
            horizon=self.horizon,
            tags=(self.tag,),
            confidence=self.confidence,
            sensitivity="LOW",
        )


SUPPRESSION_GATES: tuple[SuppressionGate, ...] = (
    SuppressionGate("obituary", "OBITUARY", Suppression.SKIP, is_irrelevant_obituary),
    SuppressionGate("research", "RESEARCH", Suppression.SKIP, is_research_paper),
    SuppressionGate("domestic", "DOMESTIC", Suppression.HEADLINE_ONLY, is_domestic_social),
    SuppressionGate("science", "SCIENCE", Suppression.HEADLINE_ONLY, is_space_science),
    SuppressionGate("tabloid", "TABLOID", Suppression.SKIP, is_tabloid),
    SuppressionGate(
        "price_update",
        "PRICE-UPDATE",
        Suppression.HEADLINE_ONLY,
        is_routine_price_update,
        impact=1,
        horizon=Horizon.INTRADAY,
        confidence=10,
    ),
    SuppressionGate("non_market", "NON-MARKET", Suppression.HEADLINE_ONLY, is_non_market),
)


def check_suppression(
    text: str,
    gates: tuple[SuppressionGate, ...] = SUPPRESSION_GATES,
) -> Optional[SuppressionGate]:
    """Return the first gate that fires for the lowercased text, if any."""
    for gate in gates:
        if gate.predicate(text):
            return gate
    return None
