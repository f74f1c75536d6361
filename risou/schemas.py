# risou/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .settings import get_settings

RemoteMode = Literal["assist", "full"]


class AnalyzeIn(BaseModel):
    text: str = Field(..., max_length=get_settings().MAX_TEXT_LENGTH)
    # "auto" or any label; unknown labels use the generic templates
    category: str = "auto"
    use_remote: bool = False
    # server default from REMOTE_MODE when the request omits it
    mode: RemoteMode = Field(default_factory=lambda: get_settings().REMOTE_MODE)

    @field_validator("category", mode="before")
    @classmethod
    def _blank_is_auto(cls, v):
        return v or "auto"


class ScoresOut(BaseModel):
    clarity: int = Field(..., ge=0, le=100)
    execution: int = Field(..., ge=0, le=100)
    planning: int = Field(..., ge=0, le=100)
    resources: int = Field(..., ge=0, le=100)
    feedback: int = Field(..., ge=0, le=100)
    overall: int = Field(..., ge=0, le=100)


class DelaysOut(BaseModel):
    overall: int = Field(..., ge=0, le=120)
    clarity: int = Field(..., ge=0, le=120)
    execution: int = Field(..., ge=0, le=120)
    planning: int = Field(..., ge=0, le=120)
    resources: int = Field(..., ge=0, le=120)
    feedback: int = Field(..., ge=0, le=120)


class QuantityOut(BaseModel):
    value: float
    unit: str


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    category: str
    line_label: str
    source: str = "local"

    scores: ScoresOut
    delays: DelaysOut
    allocation: Dict[str, int]

    ideal: str
    gaps: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)
    suggestion: Optional[str] = None

    # delay board
    status_level: Literal["ok", "warn", "alert"]
    headline: str
    breakdown: List[str] = Field(default_factory=list)
    certificate: str

    flags: Dict[str, bool] = Field(default_factory=dict)
    quantities: List[QuantityOut] = Field(default_factory=list)
    created_at: Optional[datetime] = None
