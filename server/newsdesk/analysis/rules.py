"""
Annotation rule catalog

Rules are plain records: a predicate (regexes that must all match, plus
regexes that must not) and an effect applied to the analysis being built.
Rules are organised in groups. An exclusive group stops at its first
matching rule; any other group lets every matching rule contribute.

Group order matters: later rules overwrite the scalar fields (impact,
confidence, direction, horizon) set by earlier ones.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from newsdesk.models.news import Direction, Horizon, Regime


@dataclass
class AnalysisDraft:
    """Mutable analysis under construction."""

    implications: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    sensitivity: str = "DEVELOPING"
    assets: list[str] = field(default_factory=list)
    direction: Direction = Direction.NEUTRAL
    impact: int = 2
    horizon: Horizon = Horizon.DAYS
    confidence: int = 50
    technical_levels: list[str] = field(default_factory=list)
    next_events: list[str] = field(default_factory=list)
    regime: Optional[Regime] = None


@dataclass(frozen=True)
class Rule:
    name: str
    all_of: tuple[str, ...]
    none_of: tuple[str, ...] = ()
    implications: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    impact: Optional[int] = None
    confidence: Optional[int] = None
    direction: Optional[Direction] = None
    horizon: Optional[Horizon] = None
    assets: tuple[str, ...] = ()
    technical_levels: tuple[str, ...] = ()
    next_events: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.all_of:
            raise ValueError(f"rule {self.name!r} needs at least one pattern")
        object.__setattr__(self, "_required", tuple(re.compile(p) for p in self.all_of))
        object.__setattr__(self, "_excluded", tuple(re.compile(p) for p in self.none_of))

    def matches(self, text: str) -> bool:
        return all(p.search(text) for p in self._required) and not any(
            p.search(text) for p in self._excluded
        )

    def apply(self, draft: AnalysisDraft) -> None:
        draft.implications.extend(self.implications)
        draft.tags.extend(self.tags)
        draft.assets.extend(self.assets)
        draft.technical_levels.extend(self.technical_levels)
        draft.next_events.extend(self.next_events)
        if self.impact is not None:
            draft.impact = self.impact
        if self.confidence is not None:
            draft.confidence = self.confidence
        if self.direction is not None:
            draft.direction = self.direction
        if self.horizon is not None:
            draft.horizon = self.horizon


@dataclass(frozen=True)
class RuleGroup:
    name: str
    rules: tuple[Rule, ...]
    exclusive: bool = False

    def evaluate(self, text: str, draft: AnalysisDraft) -> list[str]:
        """Apply matching rules to draft and return their names."""
        matched: list[str] = []
        for rule in self.rules:
            if rule.matches(text):
                rule.apply(draft)
                matched.append(rule.name)
                if self.exclusive:
                    break
        return matched


def _single(rule: Rule) -> RuleGroup:
    return RuleGroup(rule.name, (rule,))


ON = Direction.RISK_ON
OFF = Direction.RISK_OFF

# ── Central banks ───────────────────────────────────────────────────

FED_GROUP = RuleGroup("fed", (
    Rule(
        "fed_hawkish_surprise",
        all_of=(r"fed|powell|fomc", r"hawkish|aggressive|faster|hike", r"surpris|unexpect|shock"),
        implications=(
            "Hawkish surprise: 2Y yield spikes, equity selloff",
            "Dollar surges, EM under pressure",
            "Front-end repricing - expect volatility",
        ),
        tags=("FLASH",), impact=3, confidence=90, direction=OFF, horizon=Horizon.NOW,
        technical_levels=("2Y yield: 5.0% breakout level",),
        next_events=("Watch Fed speak circuit for confirmation",),
    ),
    Rule(
        "fed_dovish_pivot",
        all_of=(r"fed|powell", r"pivot|dovish|pause|patient"),
        none_of=(r"no pivot|not pivot",),
        implications=(
            "Dovish pivot: Risk assets rally, yields fall",
            "2Y/10Y curve steepens, bullish for growth",
            "Dollar weakness, EM relief rally",
        ),
        tags=("FLASH",), impact=3, confidence=85, direction=ON, horizon=Horizon.NOW,
        technical_levels=("10Y yield: 4.0% target on dovish pivot",),
        next_events=("Next CPI critical for pivot confirmation",),
    ),
    Rule(
        "fed_data_dependent",
        all_of=(r"fed|powell", r"data.dependent|monitor|watch|assess"),
        implications=(
            "Fed in wait-and-see mode: Data is king",
            "Next CPI/NFP will dictate policy path",
            "Range-bound markets until clarity",
        ),
        impact=2, horizon=Horizon.WEEKS,
        next_events=("CPI (next release)", "NFP (first Friday)"),
    ),
), exclusive=True)

HALF_POINT_HIKE = _single(Rule(
    "half_point_hike",
    all_of=(r"50.?basis|50.?bp|half.?point|50.?bps", r"hike|raise|increase"),
    implications=(
        "CRITICAL: 50bp hike = aggressive stance",
        "Recession risk rises, curve inverts deeper",
        "Financials pressure, housing weakness",
    ),
    impact=3, confidence=95, direction=OFF,
    technical_levels=("2Y: 5.25% if 50bp", "10Y: stays anchored = inversion"),
))

EMERGENCY_CUT = _single(Rule(
    "emergency_cut",
    all_of=(r"emergency|urgent|unscheduled", r"cut|lower|ease"),
    implications=(
        "EMERGENCY CUT: Crisis mode activated",
        "Major systemic stress - check credit markets",
        "Flight to quality, VIX explosion likely",
    ),
    tags=("FLASH",), impact=3, confidence=100, direction=OFF, horizon=Horizon.NOW,
    next_events=("Fed presser for details", "Check bank stocks immediately"),
))

# ── Inflation and labour ────────────────────────────────────────────

INFLATION_GROUP = RuleGroup("inflation", (
    Rule(
        "hot_cpi",
        all_of=(r"cpi|inflation", r"surge|jump|spike|soar|hot", r"above|exceed|higher than"),
        implications=(
            "Hot CPI: Fed forced to stay hawkish longer",
            "10Y yield breaks higher, growth stocks pressure",
            "Gold catches bid as inflation hedge",
        ),
        impact=3, confidence=85, direction=OFF,
        assets=("RATES", "EQUITIES", "COMMODITIES"),
        technical_levels=("10Y: 4.75% breakout", "Gold: $2,300 target"),
        next_events=("Fed response crucial", "Next CPI in 4 weeks"),
    ),
    Rule(
        "disinflation",
        all_of=(r"cpi|inflation|pce", r"fall|drop|decline|slow", r"third|fourth|consecutive|straight"),
        implications=(
            "Disinflation trend confirmed: Fed can ease",
            "Yields fall, duration extends, growth rallies",
            "Commodities under pressure on demand concerns",
        ),
        impact=3, confidence=80, direction=ON,
        technical_levels=("10Y: 4.0% target", "Gold: $2,200 support test"),
        next_events=("Fed dots revision likely dovish",),
    ),
), exclusive=True)

CORE_DIVERGENCE = _single(Rule(
    "core_divergence",
    all_of=(r"core", r"sticky|persistent|elevated", r"headline", r"fall|drop"),
    implications=(
        "Core sticky, headline falls: Fed focused on core",
        "Services inflation key - watch wages",
        "Mixed signal = Fed stays on hold longer",
    ),
    impact=2,
    next_events=("Wage data next key datapoint", "Services PMI"),
))

LABOUR_GROUP = RuleGroup("labour", (
    Rule(
        "jobs_blowout",
        all_of=(r"job|payroll|nfp|employment", r"surge|jump|blowout|beat", r"[0-9]{3}k|[0-9]{3},000"),
        implications=(
            "Jobs blowout: Fed stays higher for longer",
            "No recession, but inflation sticky",
            "2Y yield reprices higher, cut expectations fade",
        ),
        impact=3, confidence=85, direction=OFF,
        technical_levels=("2Y: retest 5.0%", "Rate cut odds collapse"),
        next_events=("JOLTS for confirmation", "Wage growth data"),
    ),
    Rule(
        "claims_spike",
        all_of=(r"jobless|unemployment|claims", r"spike|surge|jump", r"highest|worst"),
        implications=(
            "Layoffs accelerating: Recession risk rising",
            "Fed cuts coming sooner - yields fall",
            "Defensive rotation: Staples, healthcare, utilities",
        ),
        impact=3, confidence=75, direction=OFF,
        next_events=("NFP this Friday critical", "Continuing claims trend"),
    ),
), exclusive=True)

WAGE_GROWTH = _single(Rule(
    "wage_growth",
    all_of=(r"wage|earnings|compensation", r"growth|rise|increase", r"[4-9]\.[0-9]%|[0-9]{2}"),
    implications=(
        "Wage spiral risk: Fed nightmare scenario",
        "Services inflation stays elevated",
        "Margin compression for labor-intensive sectors",
    ),
    impact=2,
    next_events=("Next ECI report", "Fed speakers on wage concerns"),
))

# ── Geopolitics ─────────────────────────────────────────────────────

CONFLICT_GROUP = RuleGroup("conflict", (
    Rule(
        "russia_ukraine_escalation",
        all_of=(r"russia|ukraine", r"attack|strike|missile|escalat|invade"),
        implications=(
            "Escalation: Safe havens bid (Gold, JPY, CHF)",
            "Europe gas prices spike - energy crisis",
            "NATO response determines next leg",
        ),
        tags=("FLASH",), impact=3, confidence=80, direction=OFF, horizon=Horizon.NOW,
        assets=("COMMODITIES", "FX"),
        technical_levels=("Gold: $2,350 upside", "VIX: 25+ likely"),
        next_events=("NATO meeting response", "EU energy policy"),
    ),
    Rule(
        "middle_east_oil_threat",
        all_of=(r"iran|israel|saudi|middle.?east", r"attack|strike|threat", r"oil|energy|strait|supply"),
        implications=(
            "CRITICAL: Oil supply shock risk",
            "WTI target $100+, Brent $105+",
            "Global inflation spike, growth shock",
        ),
        tags=("FLASH",), impact=3, confidence=90, direction=OFF, horizon=Horizon.NOW,
        technical_levels=("WTI: $90 breaks to $100", "Gold: flight to safety"),
        next_events=("OPEC emergency meeting?", "SPR release decision"),
    ),
), exclusive=True)

TAIWAN_TENSIONS = _single(Rule(
    "china_taiwan_tensions",
    all_of=(r"china|taiwan", r"tension|drill|exercise|threat|military"),
    implications=(
        "Taiwan tensions: Semiconductor supply risk",
        "Safe havens: CHF, JPY, Gold strength",
        "Tech hardware exposure - check supply chains",
    ),
    impact=3, confidence=70,
    assets=("EQUITIES", "FX", "COMMODITIES"),
    next_events=("US response", "Chip stock guidance"),
))

NORTH_KOREA = _single(Rule(
    "north_korea_test",
    all_of=(r"north.?korea", r"missile|test|launch|threat"),
    implications=(
        "North Korea test: JPY safe-haven bid",
        "Regional tensions - watch South Korea, Japan",
        "Usually short-lived impact unless escalates",
    ),
    impact=1, confidence=60,
    next_events=("UN response", "South Korea military readiness"),
))

# ── Energy ──────────────────────────────────────────────────────────

OIL_SUPPLY_GROUP = RuleGroup("oil_supply", (
    Rule(
        "opec_cut",
        all_of=(r"opec", r"cut|reduce|slash", r"production|output|supply"),
        implications=(
            "OPEC cut: Bullish oil, target $90+ WTI",
            "Energy sector outperformance ahead",
            "Inflation concerns resurface, Fed watch",
        ),
        impact=3, confidence=90, direction=ON,
        assets=("COMMODITIES", "EQUITIES"),
        technical_levels=("WTI: $85 then $90", "XLE: breakout setup"),
        next_events=("Next OPEC+ meeting", "Saudi commentary"),
    ),
    Rule(
        "spr_release",
        all_of=(r"strategic.?petroleum|\bspr\b", r"release|tap|draw"),
        implications=(
            "SPR release: Short-term bearish oil",
            "Political move - watch for OPEC response",
            "Temporary supply, fundamentals unchanged",
        ),
        impact=2,
        technical_levels=("WTI: $75 support critical",),
        next_events=("OPEC response?", "Refill timeline"),
    ),
), exclusive=True)

REFINERY_OUTAGE = _single(Rule(
    "refinery_outage",
    all_of=(r"refinery|refining", r"shutdown|outage|fire|maintenance"),
    implications=(
        "Refinery issues: Gasoline/diesel spike risk",
        "Crack spreads widen - refiner margins improve",
        "Regional price impacts, check geography",
    ),
    impact=2,
    next_events=("Restart timeline", "Inventory data"),
))

# ── China ───────────────────────────────────────────────────────────

CHINA_GROWTH_GROUP = RuleGroup("china_growth", (
    Rule(
        "china_slowdown",
        all_of=(r"china", r"gdp|growth|economy", r"slow|weak|miss|disappoint"),
        implications=(
            "China slowdown: Copper sell signal, watch $3.80",
            "AUD, NZD weakness vs USD",
            "EM spillover, commodity demand concerns",
        ),
        impact=3, confidence=80, direction=OFF,
        assets=("COMMODITIES", "FX"),
        technical_levels=("Copper: $3.80 support", "AUD/USD: 0.65 test"),
        next_events=("China PMI data", "Stimulus response"),
    ),
    Rule(
        "china_stimulus",
        all_of=(r"china|pboc", r"stimulus|easing|support|inject"),
        implications=(
            "China stimulus: Risk-on, commodity bid",
            "Copper, iron ore, AUD/NZD strength",
            "Duration depends on stimulus size",
        ),
        impact=2, direction=ON,
        technical_levels=("Copper: $4.20 target", "AUD/USD: 0.68"),
    ),
), exclusive=True)

CHINA_PROPERTY = _single(Rule(
    "china_property_crisis",
    all_of=(r"china", r"property|real.?estate|evergrande|developer", r"crisis|default|collapse"),
    implications=(
        "Property crisis: Systemic China risk",
        "Bank exposure, credit contagion potential",
        "Commodities heavy sell (iron, copper, steel)",
    ),
    impact=3, confidence=75, direction=OFF,
    next_events=("Government bailout?", "Bank stress tests"),
))

# ── Credit ──────────────────────────────────────────────────────────

CREDIT_SPREADS = _single(Rule(
    "credit_spreads_widening",
    all_of=(r"spread|credit", r"widen|blow.?out|surge"),
    implications=(
        "Credit stress: Flight to quality underway",
        "HY > 500bp = caution, IG > 150bp = concern",
        "Check bank stocks, financial conditions",
    ),
    impact=3, confidence=85, direction=OFF,
    next_events=("Fed liquidity response?", "Corporate earnings"),
))

CORPORATE_DEFAULT = _single(Rule(
    "corporate_default",
    all_of=(r"default|bankruptcy|chapter.?11",),
    none_of=(r"sovereign",),
    implications=(
        "Corporate default: Sector contagion risk",
        "Check exposure in HY funds, CLOs",
        "Credit cycle turning?",
    ),
    impact=2,
    next_events=("Other companies in sector", "Covenant breaches"),
))

# ── Currencies ──────────────────────────────────────────────────────

DOLLAR_SURGE = _single(Rule(
    "dollar_surge",
    all_of=(r"dollar|dxy", r"surge|spike|rally|strength", r"110|115|break"),
    implications=(
        "Strong USD: EM crisis risk, commodity headwinds",
        "Multinational earnings hit, check FX hedges",
        "Gold pressure, emerging market debt stress",
    ),
    impact=3, confidence=80, direction=OFF,
    technical_levels=("DXY: 110 = crisis level", "Gold: $2,150 support"),
    next_events=("EM central bank responses", "Fed commentary"),
))

YEN_INTERVENTION = _single(Rule(
    "yen_intervention",
    all_of=(r"japan|boj|yen", r"interven|defend|\bact\b|step.?in"),
    implications=(
        "BOJ intervention: Temporary JPY strength",
        "Carry trade unwind risk if sustained",
        "Watch JGB yields - policy shift signal",
    ),
    impact=2,
    technical_levels=("USD/JPY: 150 line in sand", "145 intervention target"),
    next_events=("BOJ policy meeting", "More intervention likely"),
))

# ── Volatility and market structure ─────────────────────────────────

VOL_SPIKE = _single(Rule(
    "vix_spike",
    all_of=(r"vix|volatility", r"spike|surge|jump", r"20|25|30"),
    implications=(
        "Volatility spike: Regime change, reduce leverage",
        "VIX >20 = fear, >30 = panic, >40 = capitulation",
        "Option premiums elevated - vol sellers crushed",
    ),
    impact=3, confidence=90, direction=OFF, horizon=Horizon.NOW,
    technical_levels=("VIX: 25 = correction, 35 = crisis",),
    next_events=("Check vol term structure", "Gamma exposure"),
))

VOL_COLLAPSE = _single(Rule(
    "vix_complacency",
    all_of=(r"vix", r"low|collapse|fall|drop", r"<12|record.?low|historical"),
    implications=(
        "VIX <12: Extreme complacency, sell vol",
        "Mean reversion risk - position for spike",
        "Tail hedges cheap, consider protection",
    ),
    impact=2, direction=ON,
    next_events=("Catalyst for spike?", "Event risk calendar"),
))

ALL_TIME_HIGH = _single(Rule(
    "all_time_high",
    all_of=(r"all.?time.?high|record.?high|\bath\b", r"stock|s&p|nasdaq|dow"),
    implications=(
        "New ATH: Momentum strong, but watch extension",
        "FOMO kicks in, retail participation rises",
        "Take profits on extended names, raise stops",
    ),
    impact=2, confidence=70, direction=ON,
    next_events=("Pullback to support", "Check breadth"),
))

# "Clears to resume trading" style rulings are not halts
MARKET_HALT = _single(Rule(
    "market_halt",
    all_of=(r"circuit.?breaker|trading.?halt|market.?halt|suspend.*trad|trading.?stop|market.?suspend",),
    none_of=(r"clear|approv|lift|allow|restor|permit|authoriz|greenlight",),
    implications=(
        "CIRCUIT BREAKER: Extreme stress, liquidity crisis",
        "Expect volatility expansion, gap risk",
        "Fed response likely if systemic",
    ),
    impact=3, confidence=100, direction=OFF, horizon=Horizon.NOW,
))

MARGIN_CALLS = _single(Rule(
    "margin_calls",
    all_of=(r"margin.?call|deleverag|forced.?sell|liquidat",),
    implications=(
        "Margin calls: Cascading selling pressure",
        "Indiscriminate selling - quality with trash",
        "Capitulation setup - contrarian opportunity",
    ),
    impact=3, direction=OFF,
    next_events=("Check broker reports", "Fed response"),
))

RULE_GROUPS: tuple[RuleGroup, ...] = (
    FED_GROUP,
    HALF_POINT_HIKE,
    EMERGENCY_CUT,
    INFLATION_GROUP,
    CORE_DIVERGENCE,
    LABOUR_GROUP,
    WAGE_GROWTH,
    CONFLICT_GROUP,
    TAIWAN_TENSIONS,
    NORTH_KOREA,
    OIL_SUPPLY_GROUP,
    REFINERY_OUTAGE,
    CHINA_GROWTH_GROUP,
    CHINA_PROPERTY,
    CREDIT_SPREADS,
    CORPORATE_DEFAULT,
    DOLLAR_SURGE,
    YEN_INTERVENTION,
    VOL_SPIKE,
    VOL_COLLAPSE,
    ALL_TIME_HIGH,
    MARKET_HALT,
    MARGIN_CALLS,
)

# ── Follow-up watch items (accumulate, scalar fields untouched) ─────

NEXT_EVENT_GROUPS: tuple[RuleGroup, ...] = (
    RuleGroup("fed_followup", (
        Rule("fed_tightening_followup", all_of=(r"fed|fomc|powell", r"hawkish|hike|tighten"), next_events=(
            "Watch for EM currency stress if dollar continues higher",
            "Monitor credit spreads for contagion risk",
        )),
        Rule("fed_easing_followup", all_of=(r"fed|fomc|powell", r"dovish|pause|cut"), next_events=(
            "Watch for risk asset rally continuation",
            "Monitor inflation expectations rebound",
        )),
    ), exclusive=True),
    RuleGroup("conflict_followup", (
        Rule("conflict_supply_followup", all_of=(r"war|conflict|military|strike",), next_events=(
            "Monitor oil price reaction to supply risk",
            "Watch for safe-haven flows (CHF/JPY/Gold)",
        )),
        Rule("hormuz_followup", all_of=(r"war|conflict|military|strike", r"middle east|iran|israel"), next_events=(
            "If escalates: watch Strait of Hormuz closure risk",
        )),
    )),
    RuleGroup("china_followup", (
        Rule("china_tension_followup", all_of=(r"china|taiwan|xi jinping", r"tension|conflict|invasion"), next_events=(
            "Watch semiconductor supply chain disruption",
            "Monitor TSMC operations risk",
        )),
        Rule("china_support_followup", all_of=(r"china|taiwan|xi jinping", r"stimulus|easing|support"), next_events=(
            "Watch commodity demand rebound if sustained",
            "Monitor AUD/USD and base metals",
        )),
    )),
    _single(Rule("recession_followup", all_of=(r"recession|downturn|contraction",), next_events=(
        "Watch unemployment data for confirmation",
        "Monitor corporate earnings revisions",
        "If confirmed: expect Fed pivot and curve steepening",
    ))),
    _single(Rule("inflation_spike_followup", all_of=(r"inflation|cpi|pce", r"spike|surge|jump|soar"), next_events=(
        "Watch for Fed emergency meeting if sustained",
        "Monitor wage growth acceleration",
        "If persistent: expect yield curve bear steepening",
    ))),
)

# Column guidance used only when no rule produced an implication, so every
# emitted analysis carries at least one
FALLBACK_GUIDANCE: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "macro": (("Monitor rate market reaction to data",), ("Related data releases",)),
    "geo": (("Watch for escalation/de-escalation signals",), ()),
    "commodity": (("Check supply/demand fundamentals",), ()),
    "fx": (("Watch rate differentials for confirmation",), ()),
    "market": (("Watch index breadth for follow-through",), ()),
    "breaking": (("Await confirmation from follow-up reports",), ()),
}
