# risou/models.py
from __future__ import annotations

import enum
import uuid
import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    String,
    Enum as SAEnum,
    DateTime,
    Integer,
    Text,
)
from sqlalchemy.types import TypeDecorator, TEXT

from .db import Base


# -------------------------
# SQLite-safe JSON list
# -------------------------
class JsonList(TypeDecorator):
    """List column stored as JSON text; unreadable values load as []."""

    impl = TEXT
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if not isinstance(value, (list, tuple)):
            return "[]"
        return json.dumps(list(value), ensure_ascii=False)

    def process_result_value(self, value, dialect):
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            return []
        return parsed if isinstance(parsed, list) else []


class SourceEnum(str, enum.Enum):
    LOCAL = "local"
    REMOTE = "remote"


class ActionEnum(str, enum.Enum):
    ANALYZE = "ANALYZE"
    LOAD_LAST = "LOAD_LAST"
    REMOTE_FALLBACK = "REMOTE_FALLBACK"
    EXPORT_ANALYSES = "EXPORT_ANALYSES"


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Analysis(Base):
    __tablename__ = "analyses"

    id = Column(String, primary_key=True, default=_uuid)

    input_text = Column(Text, nullable=False)
    requested_category = Column(String, nullable=False, default="auto")
    category = Column(String, nullable=False, index=True)
    source = Column(SAEnum(SourceEnum), nullable=False, default=SourceEnum.LOCAL)

    # Scores (0..100)
    clarity = Column(Integer, nullable=False)
    execution = Column(Integer, nullable=False)
    planning = Column(Integer, nullable=False)
    resources = Column(Integer, nullable=False)
    feedback = Column(Integer, nullable=False)
    overall = Column(Integer, nullable=False)

    # Headline delay (0..120); per-dimension values are recomputed on read
    overall_delay = Column(Integer, nullable=False)

    # [{"value": 20.0, "unit": "minutes"}, ...] so recommendations can be rebuilt
    quantities = Column(JsonList, default=list, nullable=False)

    # Provenance
    app_version = Column(String, nullable=True)
    engine_version = Column(String, nullable=True)
    schema_version = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_now, index=True)


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)

    analysis_id = Column(String, nullable=True, index=True)
    action = Column(SAEnum(ActionEnum), nullable=False)
    actor_type = Column(String, default="SYSTEM")
    payload = Column(Text, default="{}")

    app_version = Column(String, default="dev")
    schema_version = Column(String, default="dev")

    created_at = Column(DateTime(timezone=True), default=_now)
