import json

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import ActionEnum, Event

router = APIRouter(prefix="/events", tags=["events"])


def _payload(raw: str | None) -> dict:
    try:
        parsed = json.loads(raw or "{}")
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


@router.get("/recent")
def recent_events(
    limit: int = 50,
    action: str | None = Query(None, description="Filter by action, e.g. ANALYZE"),
    db: Session = Depends(get_db),
):
    limit = max(1, min(limit, 200))
    q = db.query(Event)
    if action:
        try:
            q = q.filter(Event.action == ActionEnum(action))
        except ValueError:
            raise HTTPException(400, f"Unknown action: {action}")
    rows = q.order_by(Event.id.desc()).limit(limit).all()
    return [
        {
            "id": r.id,
            "analysis_id": r.analysis_id,
            "action": (r.action.value if hasattr(r.action, "value") else str(r.action)),
            "actor_type": r.actor_type,
            "payload": _payload(r.payload),
            "created_at": r.created_at,
        }
        for r in rows
    ]
