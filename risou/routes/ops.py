from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import text
from ..db import get_db
from ..settings import get_settings
from risou.engine.keywords import get_keyword_config
from risou.engine.scoring import BASE_SCORES, DIM_WEIGHTS
import hashlib
import json

router = APIRouter(prefix="/ops", tags=["operations"])
settings = get_settings()


# --- 1. DEPLOYMENT MONITORING (Health) ---
@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Deep health check: verifies the DB connection and reports whether the
    optional remote model is configured (it is never called here).
    """
    status = {"api": "online", "version": settings.APP_VERSION, "checks": {}}

    try:
        db.execute(text("SELECT 1"))
        status["checks"]["database"] = "ok"
    except Exception as e:
        status["checks"]["database"] = f"failed: {str(e)}"
        raise HTTPException(503, detail=status)

    status["checks"]["remote_model"] = "configured" if settings.remote_configured else "disabled"
    return status


# --- 2. ENGINE PROVENANCE ---
def _vocabulary_hash() -> str:
    cfg = get_keyword_config()
    blob = json.dumps(
        {
            "categories": {k: list(v) for k, v in cfg.categories.items()},
            "flags": {k: list(v) for k, v in cfg.flags.items()},
            "environment": list(cfg.environment),
            "weekly_cadence": list(cfg.weekly_cadence),
            "units": dict(cfg.unit_tokens),
        },
        ensure_ascii=False,
        sort_keys=True,
    )
    return hashlib.md5(blob.encode("utf-8")).hexdigest()


@router.get("/meta/engine")
def engine_metadata():
    """
    Weights, base scores and a hash of the keyword vocabulary, so a stored
    analysis can be tied to the exact engine that produced it.
    """
    return {
        "engine_version": settings.ENGINE_VERSION,
        "weights": dict(DIM_WEIGHTS),
        "base_scores": dict(BASE_SCORES),
        "vocabulary_hash": _vocabulary_hash(),
        "remote_configured": settings.remote_configured,
        "remote_model": settings.REMOTE_MODEL if settings.remote_configured else None,
    }
