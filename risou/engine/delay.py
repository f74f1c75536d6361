# risou/engine/delay.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict

import numpy as np

from .scoring import DIMENSIONS, DIM_WEIGHTS, DimensionScores, round_half_up

MAX_DELAY = 120


def to_delay(score: float) -> int:
    """
    Map a 0..100 score to 0..120 delay minutes: 100 -> 0, 0 -> 120.

    Integer scores take the exact path (100 - s) * 12 / 10, whose product is
    always even so no half-way rounding case exists. Fractional scores are
    scaled by 1.2 before rounding.
    """
    if isinstance(score, int):
        deficit = max(0, min(100, 100 - score))
        return max(0, min(MAX_DELAY, (deficit * 12 + 5) // 10))
    deficit = max(0.0, min(100.0, 100 - float(score)))
    return max(0, min(MAX_DELAY, round_half_up(deficit * 1.2)))


@dataclass(frozen=True)
class DelaySet:
    overall: int
    clarity: int
    execution: int
    planning: int
    resources: int
    feedback: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def compute_delays(scores: DimensionScores) -> DelaySet:
    # six independent conversions; per-dimension values are not a split of overall
    return DelaySet(
        overall=to_delay(scores.overall),
        **{d: to_delay(getattr(scores, d)) for d in DIMENSIONS},
    )


def allocate(overall_delay: int, scores: DimensionScores) -> Dict[str, int]:
    """
    Split `overall_delay` across the five dimensions in proportion to each
    weighted deficit max(0, 100 - score) * weight.

    Shares are rounded half-up, then the whole residual is added to one
    dimension: the largest fractional part when short, the smallest when
    over. Ties go to the earliest dimension for the largest fraction and
    to the latest for the smallest. The result always sums to
    `overall_delay`.
    """
    overall_delay = int(overall_delay)
    values = np.array([getattr(scores, d) for d in DIMENSIONS], dtype=float)
    weights = np.array([DIM_WEIGHTS[d] for d in DIMENSIONS], dtype=float)

    weighted = np.maximum(0.0, 100.0 - values) * weights
    total = float(weighted.sum()) or 1.0
    raw = overall_delay * weighted / total

    rounded = np.floor(raw + 0.5).astype(int)
    diff = overall_delay - int(rounded.sum())
    if diff != 0:
        frac = raw - np.floor(raw)
        if diff > 0:
            target = int(np.argmax(frac))
        else:
            target = len(frac) - 1 - int(np.argmin(frac[::-1]))
        rounded[target] += diff

    return {d: int(v) for d, v in zip(DIMENSIONS, rounded)}
