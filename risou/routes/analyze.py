# risou/routes/analyze.py
from __future__ import annotations

import json
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db import get_db
from ..logging_config import log_event
from ..settings import get_settings

from risou.ai.ai_utils import get_remote_client
from risou.engine import (
    AnalysisResult,
    Analyzer,
    DimensionScores,
    Quantity,
    assemble_result,
    generate_recommendations,
    normalize,
)
from risou.engine.recommend import Chooser, line_label
from risou.engine.report import breakdown, certificate, headline, status_level

router = APIRouter(prefix="/analyze", tags=["analyze"])
settings = get_settings()


# -------------------------
# DEPENDENCIES (overridable in tests)
# -------------------------
def get_remote():
    return get_remote_client()


def get_chooser() -> Chooser | None:
    return None


# -------------------------
# EVENTS
# -------------------------
def record_event(db: Session, action: models.ActionEnum, analysis_id: str | None, payload: dict):
    evt = models.Event(
        analysis_id=analysis_id,
        action=action,
        actor_type="SYSTEM",
        payload=json.dumps(payload, ensure_ascii=False),
        app_version=settings.APP_VERSION,
        schema_version=settings.SCHEMA_VERSION,
    )
    db.add(evt)
    db.commit()


# -------------------------
# SHAPING
# -------------------------
def _to_response(
    result: AnalysisResult,
    analysis_id: str | None,
    created_at: datetime | None,
) -> schemas.AnalysisResponse:
    delay = result.delays.overall
    when = created_at or datetime.now(timezone.utc)
    return schemas.AnalysisResponse(
        id=analysis_id,
        category=result.category,
        line_label=line_label(result.category),
        source=result.source,
        scores=schemas.ScoresOut(**result.scores.to_dict()),
        delays=schemas.DelaysOut(**result.delays.to_dict()),
        allocation=result.allocation,
        ideal=result.ideal,
        gaps=result.gaps,
        actions=result.actions,
        suggestion=result.suggestion,
        status_level=status_level(delay),
        headline=headline(result.category, delay),
        breakdown=breakdown(result.scores, result.allocation),
        certificate=certificate(result.category, delay, result.gaps, result.actions, when),
        flags=result.flags.to_dict(),
        quantities=[q.to_dict() for q in result.quantities],
        created_at=created_at,
    )


def _rebuild(row: models.Analysis, chooser: Chooser | None) -> AnalysisResult:
    """Stored scores are authoritative; text sections are regenerated."""
    scores = DimensionScores(
        clarity=row.clarity,
        execution=row.execution,
        planning=row.planning,
        resources=row.resources,
        feedback=row.feedback,
        overall=row.overall,
    )
    quantities = []
    for q in row.quantities or []:
        try:
            quantities.append(Quantity.from_dict(q))
        except (KeyError, TypeError, ValueError):
            continue
    recs = generate_recommendations(row.category, scores, quantities, chooser)
    source = row.source.value if hasattr(row.source, "value") else str(row.source)
    return assemble_result(row.input_text, row.category, scores, recs, quantities=quantities, source=source)


# -------------------------
# ANALYZE
# -------------------------
@router.post("", response_model=schemas.AnalysisResponse, status_code=201)
def create_analysis(
    inp: schemas.AnalyzeIn,
    response: Response,
    db: Session = Depends(get_db),
    remote=Depends(get_remote),
    chooser: Chooser | None = Depends(get_chooser),
):
    response.headers["X-App-Version"] = settings.APP_VERSION

    text = normalize(inp.text)
    if not text:
        raise HTTPException(400, "Empty statement")

    collaborator = remote if inp.use_remote else None
    result = Analyzer(chooser=chooser).analyze(text, inp.category, collaborator, inp.mode)

    remote_used = result.source == "remote" or result.suggestion is not None
    if collaborator is not None and not remote_used:
        record_event(db, models.ActionEnum.REMOTE_FALLBACK, None, {"mode": inp.mode, "category": result.category})
    elif inp.use_remote and collaborator is None:
        log_event("REMOTE_SKIPPED", "remote requested but not configured")

    s = result.scores
    row = models.Analysis(
        input_text=text,
        requested_category=inp.category,
        category=result.category,
        source=models.SourceEnum(result.source),
        clarity=s.clarity,
        execution=s.execution,
        planning=s.planning,
        resources=s.resources,
        feedback=s.feedback,
        overall=s.overall,
        overall_delay=result.delays.overall,
        quantities=[q.to_dict() for q in result.quantities],
        app_version=settings.APP_VERSION,
        engine_version=settings.ENGINE_VERSION,
        schema_version=settings.SCHEMA_VERSION,
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    record_event(db, models.ActionEnum.ANALYZE, row.id, {
        "category": result.category,
        "source": result.source,
        "overall": s.overall,
        "overall_delay": result.delays.overall,
        "remote_requested": inp.use_remote,
        "mode": inp.mode,
    })
    log_event("ANALYZE", "analysis stored", {"id": row.id, "overall_delay": result.delays.overall})

    return _to_response(result, row.id, row.created_at)


# -------------------------
# LOAD LAST / BY ID
# -------------------------
@router.get("/last", response_model=schemas.AnalysisResponse)
def load_last(db: Session = Depends(get_db), chooser: Chooser | None = Depends(get_chooser)):
    row = db.query(models.Analysis).order_by(models.Analysis.created_at.desc()).first()
    if not row:
        raise HTTPException(404, "No saved analysis")
    record_event(db, models.ActionEnum.LOAD_LAST, row.id, {})
    return _to_response(_rebuild(row, chooser), row.id, row.created_at)


@router.get("/{analysis_id}", response_model=schemas.AnalysisResponse)
def get_analysis(analysis_id: str, db: Session = Depends(get_db), chooser: Chooser | None = Depends(get_chooser)):
    row = db.query(models.Analysis).filter(models.Analysis.id == analysis_id).first()
    if not row:
        raise HTTPException(404, "Analysis not found")
    return _to_response(_rebuild(row, chooser), row.id, row.created_at)
