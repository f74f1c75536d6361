from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db import get_db
from .. import models
from ..settings import get_settings
from risou.engine.report import OK_MAX_DELAY, WARN_MAX_DELAY

router = APIRouter(prefix="/metrics", tags=["metrics"])
settings = get_settings()


def _parse_since(since: str | None) -> datetime | None:
    if not since:
        return None
    try:
        return datetime.strptime(since, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid 'since' date. Use YYYY-MM-DD.")


@router.get("/")
def get_metrics(
    since: str | None = Query(None, description="YYYY-MM-DD (optional)"),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    since_dt = _parse_since(since)

    base = db.query(models.Analysis)
    if since_dt:
        base = base.filter(models.Analysis.created_at >= since_dt)

    total = base.count()

    by_category_rows = (
        base.with_entities(models.Analysis.category, func.count(models.Analysis.id))
        .group_by(models.Analysis.category)
        .all()
    )
    by_category = {str(k): int(v) for k, v in by_category_rows}

    by_source_rows = (
        base.with_entities(models.Analysis.source, func.count(models.Analysis.id))
        .group_by(models.Analysis.source)
        .all()
    )
    by_source = {(k.value if hasattr(k, "value") else str(k)): int(v) for k, v in by_source_rows}

    avg_delay, avg_overall = base.with_entities(
        func.avg(models.Analysis.overall_delay),
        func.avg(models.Analysis.overall),
    ).one()

    levels = {"ok": 0, "warn": 0, "alert": 0}
    for (delay,) in base.with_entities(models.Analysis.overall_delay).all():
        if delay <= OK_MAX_DELAY:
            levels["ok"] += 1
        elif delay <= WARN_MAX_DELAY:
            levels["warn"] += 1
        else:
            levels["alert"] += 1

    return {
        "total": total,
        "by_category": by_category,
        "by_source": by_source,
        "by_status_level": levels,
        "avg_overall_delay": round(float(avg_delay), 2) if avg_delay is not None else None,
        "avg_overall_score": round(float(avg_overall), 2) if avg_overall is not None else None,
        "since": since,
        "engine_version": settings.ENGINE_VERSION,
    }
