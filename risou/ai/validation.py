# risou/ai/validation.py
from __future__ import annotations

import json
import math
import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from risou.engine.scoring import DimensionScores, clamp_score

MAX_REMOTE_GAPS = 5
MAX_REMOTE_ACTIONS = 6

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> Optional[str]:
    """First `{` to last `}`; models like to wrap JSON in prose or fences."""
    m = _JSON_BLOCK.search(text or "")
    return m.group(0) if m else None


def _coerce_score(v: Any) -> int:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return 0
    if math.isnan(f):
        return 0
    if math.isinf(f):
        return 100 if f > 0 else 0
    return clamp_score(f)


def _string_list(v: Any, limit: int) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x) for x in v][:limit]


class RemoteBreakdown(BaseModel):
    model_config = ConfigDict(extra="ignore")

    clarity: int = 0
    execution: int = 0
    planning: int = 0
    resources: int = 0
    feedback: int = 0

    @field_validator("clarity", "execution", "planning", "resources", "feedback", mode="before")
    @classmethod
    def _clamp(cls, v: Any):
        return _coerce_score(v)


class RemoteEvaluation(BaseModel):
    """
    Full remote evaluation after clamping. Scores are forced into 0..100;
    a reply that carries no text at all is rejected.
    """
    model_config = ConfigDict(extra="ignore")

    overall: int = 0
    breakdown: RemoteBreakdown = Field(default_factory=RemoteBreakdown)
    ideal: str = ""
    gaps: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)

    @field_validator("overall", mode="before")
    @classmethod
    def _clamp_overall(cls, v: Any):
        return _coerce_score(v)

    @field_validator("breakdown", mode="before")
    @classmethod
    def _breakdown_dict(cls, v: Any):
        return v if isinstance(v, dict) else {}

    @field_validator("ideal", mode="before")
    @classmethod
    def _ideal_str(cls, v: Any):
        return str(v) if v else ""

    @field_validator("gaps", mode="before")
    @classmethod
    def _gaps_list(cls, v: Any):
        return _string_list(v, MAX_REMOTE_GAPS)

    @field_validator("actions", mode="before")
    @classmethod
    def _actions_list(cls, v: Any):
        return _string_list(v, MAX_REMOTE_ACTIONS)

    @model_validator(mode="after")
    def _needs_text(self):
        if not self.ideal and not self.gaps and not self.actions:
            raise ValueError("remote evaluation carries no text")
        return self

    def to_scores(self) -> DimensionScores:
        # remote overall is kept as reported, not re-weighted
        b = self.breakdown
        return DimensionScores(
            clarity=b.clarity,
            execution=b.execution,
            planning=b.planning,
            resources=b.resources,
            feedback=b.feedback,
            overall=self.overall,
        )


def parse_evaluation(content: str) -> RemoteEvaluation:
    """Raises ValueError (incl. pydantic ValidationError) on anything unusable."""
    block = extract_json(content)
    if not block:
        raise ValueError("no JSON object in remote reply")
    obj = json.loads(block)
    if not isinstance(obj, dict):
        raise ValueError("remote JSON is not an object")
    return RemoteEvaluation.model_validate(obj)
