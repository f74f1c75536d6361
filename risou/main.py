# risou/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .db import Base, engine
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .errors import install_error_handlers
from .logging_config import log_event
from .settings import get_settings
from .routes import analyze, dashboard, events, export, metrics, ops

settings = get_settings()


def _ensure_db_ready() -> None:
    Base.metadata.create_all(bind=engine)


# Run schema init at import time so pytest cannot bypass it
_ensure_db_ready()


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ensure_db_ready()
    log_event("STARTUP", "risou adviser ready", {
        "version": settings.APP_VERSION,
        "engine_version": settings.ENGINE_VERSION,
        "remote_configured": settings.remote_configured,
    })
    yield


app = FastAPI(title="Risou Adviser API", version=settings.APP_VERSION, lifespan=lifespan)
install_error_handlers(app)

app.include_router(analyze.router)
app.include_router(metrics.router)
app.include_router(events.router)
app.include_router(export.router)
app.include_router(ops.router)
app.include_router(dashboard.router)


@app.get("/")
def health():
    return {"status": "ok", "service": "risou-adviser"}
