# risou/engine/extract.py
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, asdict
from typing import List

from .keywords import KeywordConfig, get_keyword_config
from .text import contains_any


class Unit(str, enum.Enum):
    COUNT = "count"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
    KILOGRAMS = "kilograms"
    POINTS = "points"
    YEN = "yen"
    YEN_10K = "yen_10k"


@dataclass(frozen=True)
class Quantity:
    value: float
    unit: Unit

    def to_dict(self) -> dict:
        return {"value": self.value, "unit": self.unit.value}

    @classmethod
    def from_dict(cls, d: dict) -> "Quantity":
        return cls(float(d["value"]), Unit(d["unit"]))


@dataclass(frozen=True)
class FeatureFlags:
    has_goal: bool = False
    has_obstacle: bool = False
    has_plan: bool = False
    has_resource: bool = False
    has_feedback: bool = False
    exec_pos: bool = False
    exec_neg: bool = False
    has_deadline: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class FeatureExtractor:
    """
    Keyword and quantity scanner over already-normalized text.

    Digits are ASCII only; full-width numerals are not quantities.
    """

    def __init__(self, config: KeywordConfig | None = None):
        self.config = config or get_keyword_config()
        units = "|".join(re.escape(tok) for tok in self.config.unit_tokens)
        self._quantity_re = re.compile(rf"([0-9]+\.?[0-9]*)\s*({units})")

    def extract_quantities(self, text: str) -> List[Quantity]:
        out: List[Quantity] = []
        for m in self._quantity_re.finditer(text or ""):
            unit = Unit(self.config.unit_tokens[m.group(2)])
            out.append(Quantity(float(m.group(1)), unit))
        return out

    def extract_flags(self, text: str) -> FeatureFlags:
        text = text or ""
        words = self.config.flags
        return FeatureFlags(**{
            name: contains_any(text, words.get(name, ()))
            for name in FeatureFlags.__dataclass_fields__
        })


_default = FeatureExtractor()


def extract_quantities(text: str) -> List[Quantity]:
    return _default.extract_quantities(text)


def extract_flags(text: str) -> FeatureFlags:
    return _default.extract_flags(text)


def get_default_extractor() -> FeatureExtractor:
    return _default
