from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from ..db import get_db
from .. import models
from ..settings import get_settings
from datetime import datetime
import csv, io, json

from .analyze import record_event

router = APIRouter(prefix="/analyses", tags=["export"])
settings = get_settings()

COLUMNS = [
    "id", "created_at", "category", "requested_category", "source",
    "clarity", "execution", "planning", "resources", "feedback",
    "overall", "overall_delay", "quantities", "input_text",
    "app_version", "engine_version", "schema_version",
]


def _parse_dt(s: str | None):
    if not s:
        return None
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        raise HTTPException(400, "Invalid date format (use YYYY-MM-DD)")


@router.get("/export.csv")
def export_csv(
    db: Session = Depends(get_db),
    category: str | None = None,
    source: str | None = None,
    min_delay: int | None = Query(None, ge=0, le=120),
    since: str | None = None,
):
    q = db.query(models.Analysis)
    if category: q = q.filter(models.Analysis.category == category)
    if source:
        try:
            q = q.filter(models.Analysis.source == models.SourceEnum(source))
        except ValueError:
            raise HTTPException(400, "Unknown source (use local or remote)")
    if min_delay is not None: q = q.filter(models.Analysis.overall_delay >= min_delay)
    dt = _parse_dt(since)
    if dt: q = q.filter(models.Analysis.created_at >= dt)

    rows = q.order_by(models.Analysis.created_at.desc()).limit(settings.MAX_EXPORT_ROWS).all()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(COLUMNS)
    for a in rows:
        writer.writerow([
            a.id, a.created_at.isoformat() if a.created_at else "",
            a.category, a.requested_category,
            a.source.value if a.source else "",
            a.clarity, a.execution, a.planning, a.resources, a.feedback,
            a.overall, a.overall_delay,
            json.dumps(a.quantities or [], ensure_ascii=False),
            a.input_text,
            a.app_version or "", a.engine_version or "", a.schema_version or "",
        ])

    record_event(db, models.ActionEnum.EXPORT_ANALYSES, None, {"rows": len(rows), "since": since})

    output.seek(0)
    return StreamingResponse(
        output, media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=analyses_export.csv"}
    )
