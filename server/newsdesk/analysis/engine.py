"""
Annotation Engine

Maps (headline, column, body) to an Analysis. No I/O: the only hidden
input is the market snapshot read once at the start of each call.

Stages, in order:
1. Suppression gates (skip / headline-only)
2. Macro regime
3. Rule catalog
4. Column fallback guidance when nothing matched
5. Asset class and direction auto-detection, tags
6. Text-extracted levels and follow-up watch items
7. Strategic pattern overlay
8. Confidence adjustments and clamp
9. Second-order implications, trim, snapshot-derived levels
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from newsdesk.analysis.filters import SUPPRESSION_GATES, SuppressionGate, check_suppression
from newsdesk.analysis.game_theory import detect_game_pattern
from newsdesk.analysis.levels import compute_key_levels, extract_text_levels
from newsdesk.analysis.regime import REGIME_PROFILES, resolve_regime
from newsdesk.analysis.rules import (
    FALLBACK_GUIDANCE,
    NEXT_EVENT_GROUPS,
    RULE_GROUPS,
    AnalysisDraft,
    RuleGroup,
)
from newsdesk.models.news import (
    MAX_IMPLICATIONS,
    MAX_TECHNICAL_LEVELS,
    Analysis,
    Column,
    Direction,
)

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Optional[Mapping[str, float]]]

MIN_CONFIDENCE = 10
MAX_CONFIDENCE = 100
MULTI_ASSET_THRESHOLD = 3

_ASSET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("RATES", re.compile(r"yield|treasury|bond|rate|inflation|cpi|fed|ecb")),
    ("EQUITIES", re.compile(r"stock|equity|nasdaq|dow|s&p|rally|selloff")),
    ("COMMODITIES", re.compile(r"oil|gold|silver|copper|wheat|commodity|crude")),
    ("FX", re.compile(r"dollar|euro|yen|currency|forex|\bfx\b")),
    ("CREDIT", re.compile(r"credit|spread|corporate.?bond")),
)

RISK_ON_WORDS = (
    "rally", "stimulus", "easing", "dovish", "cut", "growth", "recovery", "deal",
    "peace", "goldilocks",
)
RISK_OFF_WORDS = (
    "crisis", "recession", "hawkish", "hike", "war", "conflict", "default", "crash",
    "tension", "stress",
)

# (pattern, bonus) adjustments applied to the running confidence score
_CONFIDENCE_ADJUSTMENTS: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"federal reserve|ecb|treasury|official|government"), 15),
    (re.compile(r"reuters|bloomberg|wsj|\bft\b|financial times"), 10),
    (re.compile(r"\d+\.?\d*%|\d+\s*(?:bp|bps|basis points)"), 10),
    (re.compile(
        r"january|february|march|april|may|june|july|august|september|october|"
        r"november|december|\bq[1-4]\b|20\d{2}"
    ), 5),
    (re.compile(r"powell|yellen|lagarde|bailey|kuroda"), 5),
    (re.compile(r"\b(?:may|might|could|possibly|unclear|uncertain|mixed)\b"), -15),
)

# (trigger, skip if any implication already mentions, implication)
_SECOND_ORDER: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (
        re.compile(r"fed.*hawkish|fomc.*hawkish|powell.*hawkish"),
        "EM",
        "2nd order: EM central banks forced to defend currencies",
    ),
    (
        re.compile(r"oil.*(?:surge|spike|soar)"),
        "inflation",
        "2nd order: Inflation expectations likely to rise",
    ),
    (
        re.compile(r"china.*stimulus|pboc.*easing"),
        "commodity",
        "2nd order: Base metals and AUD to benefit",
    ),
)


class AnnotationError(Exception):
    """Raised when a headline cannot be annotated."""

    pass


@dataclass
class AnnotationStats:
    """Statistics for the annotation engine."""

    items_annotated: int = 0
    items_skipped: int = 0
    items_headline_only: int = 0
    items_failed: int = 0


class AnnotationEngine:
    """
    Rule-driven market-impact annotator.

    The rule catalog, suppression gates and snapshot source are injected
    so each can be swapped without touching the pipeline.
    """

    def __init__(
        self,
        snapshot_provider: Optional[SnapshotProvider] = None,
        rule_groups: tuple[RuleGroup, ...] = RULE_GROUPS,
        gates: tuple[SuppressionGate, ...] = SUPPRESSION_GATES,
    ) -> None:
        self._snapshot_provider = snapshot_provider
        self._rule_groups = rule_groups
        self._gates = gates
        self._stats = AnnotationStats()

    @property
    def stats(self) -> AnnotationStats:
        return self._stats

    def annotate(self, headline: str, column: Column | str, body: str = "") -> Analysis:
        """Run the full annotation pipeline for one story."""
        column_name = column.value if isinstance(column, Column) else column
        text = f"{headline} {body}".lower()
        try:
            analysis = self._annotate(text, column_name)
        except Exception as e:
            self._stats.items_failed += 1
            logger.error(
                f"Annotation failed for {headline[:60]!r}: {e}",
                extra={"column": column_name, "error": str(e)},
            )
            raise AnnotationError(f"Failed to annotate {headline[:60]!r}") from e

        if analysis.skip:
            self._stats.items_skipped += 1
        elif analysis.headline_only:
            self._stats.items_headline_only += 1
        else:
            self._stats.items_annotated += 1
        return analysis

    def _annotate(self, text: str, column: str) -> Analysis:
        gate = check_suppression(text, self._gates)
        if gate is not None:
            logger.debug(f"Suppressed by {gate.name} gate")
            return gate.to_analysis()

        snapshot = self._snapshot_provider() if self._snapshot_provider else None
        draft = AnalysisDraft()

        self._apply_regime(text, draft)
        for group in self._rule_groups:
            group.evaluate(text, draft)

        if not draft.implications:
            self._apply_fallback(column, draft)

        self._detect_assets(text, draft)
        self._detect_direction(text, draft)
        self._build_tags(draft)

        for level in extract_text_levels(text):
            if level not in draft.technical_levels:
                draft.technical_levels.append(level)
        for group in NEXT_EVENT_GROUPS:
            group.evaluate(text, draft)

        game = detect_game_pattern(text)
        if game is not None:
            draft.tags.append(game.name)
            draft.implications.insert(0, game.implication)
            draft.next_events.insert(0, game.next_move)
            draft.confidence += 15

        self._score_confidence(text, draft)
        self._add_second_order(text, draft)

        dynamic = compute_key_levels(column, text, snapshot)
        technical_levels = (dynamic + draft.technical_levels)[:MAX_TECHNICAL_LEVELS]

        return Analysis(
            implications=tuple(draft.implications[:MAX_IMPLICATIONS]),
            impact=draft.impact,
            horizon=draft.horizon,
            technical_levels=tuple(technical_levels),
            tags=tuple(draft.tags),
            confidence=draft.confidence,
            next_events=tuple(draft.next_events),
            direction=draft.direction,
            regime=draft.regime,
            assets=tuple(draft.assets),
            sensitivity=draft.sensitivity,
        )

    # ── Stages ──────────────────────────────────────────────────────

    @staticmethod
    def _apply_regime(text: str, draft: AnalysisDraft) -> None:
        regime = resolve_regime(text)
        if regime is None:
            return
        profile = REGIME_PROFILES[regime]
        draft.regime = regime
        draft.implications.extend(profile.implications)
        draft.direction = profile.direction
        draft.impact = profile.impact
        if profile.confidence is not None:
            draft.confidence = profile.confidence

    @staticmethod
    def _apply_fallback(column: str, draft: AnalysisDraft) -> None:
        draft.confidence = 20
        draft.impact = 1
        implications, next_events = FALLBACK_GUIDANCE.get(column, ((), ()))
        draft.implications.extend(implications)
        draft.next_events.extend(next_events)

    @staticmethod
    def _detect_assets(text: str, draft: AnalysisDraft) -> None:
        if draft.assets:
            return
        draft.assets = [name for name, pattern in _ASSET_PATTERNS if pattern.search(text)]
        if len(draft.assets) >= MULTI_ASSET_THRESHOLD:
            draft.assets = ["MULTI-ASSET"]

    @staticmethod
    def _detect_direction(text: str, draft: AnalysisDraft) -> None:
        if draft.direction is not Direction.NEUTRAL:
            return
        risk_on = sum(1 for w in RISK_ON_WORDS if w in text)
        risk_off = sum(1 for w in RISK_OFF_WORDS if w in text)
        if risk_off > risk_on + 1:
            draft.direction = Direction.RISK_OFF
        elif risk_on > risk_off + 1:
            draft.direction = Direction.RISK_ON

    @staticmethod
    def _build_tags(draft: AnalysisDraft) -> None:
        if not draft.tags:
            draft.tags.append(draft.sensitivity)
        draft.tags.extend(draft.assets)
        draft.tags.append(draft.direction.value)
        if draft.regime is not None:
            draft.tags.insert(0, draft.regime.value)

    @staticmethod
    def _score_confidence(text: str, draft: AnalysisDraft) -> None:
        for pattern, bonus in _CONFIDENCE_ADJUSTMENTS:
            if pattern.search(text):
                draft.confidence += bonus
        draft.confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, draft.confidence))

    @staticmethod
    def _add_second_order(text: str, draft: AnalysisDraft) -> None:
        if not draft.implications:
            return
        for trigger, already_covered, implication in _SECOND_ORDER:
            if trigger.search(text) and not any(
                already_covered in existing for existing in draft.implications
            ):
                draft.implications.append(implication)
