# risou/engine/scoring.py
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from types import MappingProxyType
from typing import Dict, Iterable

from .extract import FeatureExtractor, FeatureFlags, Quantity, Unit, get_default_extractor
from .keywords import KeywordConfig
from .text import contains_any, normalize

DIMENSIONS = ("clarity", "execution", "planning", "resources", "feedback")

# Integer percentages so the weighted sum is exact; DIM_WEIGHTS is the
# float view for reporting.
DIM_WEIGHT_PERCENT = MappingProxyType({
    "clarity": 25,
    "execution": 25,
    "planning": 20,
    "resources": 15,
    "feedback": 15,
})
DIM_WEIGHTS = MappingProxyType({k: v / 100 for k, v in DIM_WEIGHT_PERCENT.items()})

BASE_SCORES = MappingProxyType({
    "clarity": 20,
    "execution": 50,
    "planning": 40,
    "resources": 35,
    "feedback": 30,
})

# "週3回", "20分" and the like read as concrete execution detail.
_CADENCE_UNITS = frozenset({Unit.WEEKS, Unit.COUNT, Unit.MINUTES, Unit.HOURS})


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def clamp_score(n: float) -> int:
    return max(0, min(100, round_half_up(n)))


@dataclass(frozen=True)
class DimensionScores:
    clarity: int
    execution: int
    planning: int
    resources: int
    feedback: int
    overall: int

    @classmethod
    def from_dimensions(cls, **dims: float) -> "DimensionScores":
        clamped = {d: clamp_score(dims.get(d, 0)) for d in DIMENSIONS}
        return cls(**clamped, overall=weighted_overall(clamped))

    def dimensions(self) -> Dict[str, int]:
        return {d: getattr(self, d) for d in DIMENSIONS}

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def weighted_overall(dims: Dict[str, int]) -> int:
    """
    round(Σ weight × score) with half-up rounding, done in integer
    percent units so 58.5 never drifts to 58.49999.
    """
    total = sum(DIM_WEIGHT_PERCENT[d] * int(dims[d]) for d in DIMENSIONS)
    return max(0, min(100, (2 * total + 100) // 200))


def score_features(
    flags: FeatureFlags,
    quantities: Iterable[Quantity],
    text: str,
    config: KeywordConfig,
) -> DimensionScores:
    quantities = list(quantities)
    has_quant = bool(quantities)

    clarity = BASE_SCORES["clarity"]
    if flags.has_goal:
        clarity += 20
    if has_quant:
        clarity += 30
    if flags.has_deadline:
        clarity += 20
    if flags.has_plan:
        clarity += 10
    clarity = min(100, clarity)

    execution = BASE_SCORES["execution"]
    if flags.exec_pos:
        execution += 20
    if flags.exec_neg:
        execution -= 25
    if flags.has_obstacle:
        execution -= 10
    # overlaps the clarity quantity bonus; both are kept
    if any(q.unit in _CADENCE_UNITS for q in quantities):
        execution += 5

    planning = (
        BASE_SCORES["planning"]
        + (25 if flags.has_plan else 0)
        + (10 if flags.has_deadline else 0)
        + (10 if has_quant else 0)
    )

    resources = BASE_SCORES["resources"] + (30 if flags.has_resource else 0)
    if contains_any(text, config.environment):
        resources += 10

    feedback = BASE_SCORES["feedback"] + (40 if flags.has_feedback else 0)
    if contains_any(text, config.weekly_cadence):
        feedback += 10

    return DimensionScores.from_dimensions(
        clarity=clarity,
        execution=execution,
        planning=planning,
        resources=resources,
        feedback=feedback,
    )


def score(text: str, extractor: FeatureExtractor | None = None) -> DimensionScores:
    """
    Score a raw statement. Empty or non-string input yields the base scores
    (overall 35); nothing here raises on bad input.
    """
    extractor = extractor or get_default_extractor()
    t = normalize(text)
    return score_features(
        extractor.extract_flags(t),
        extractor.extract_quantities(t),
        t,
        extractor.config,
    )
