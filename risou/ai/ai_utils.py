# risou/ai/ai_utils.py
"""
Entry point for the optional remote model.

Routes call get_remote_client(); it returns None unless the remote is
enabled and has both a base URL and a key, and the analysis pipeline then
runs purely locally.
"""

from typing import Optional

import httpx

from risou.settings import Settings, get_settings

from .client import RemoteClient, RemoteUnavailable
from .validation import RemoteEvaluation, extract_json, parse_evaluation


def get_remote_client(
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Optional[RemoteClient]:
    settings = settings or get_settings()
    if not settings.remote_configured:
        return None
    return RemoteClient(
        base_url=settings.REMOTE_API_BASE,
        api_key=settings.REMOTE_API_KEY,
        model=settings.REMOTE_MODEL,
        timeout=settings.REMOTE_TIMEOUT_SECONDS,
        transport=transport,
    )


__all__ = [
    "get_remote_client",
    "RemoteClient",
    "RemoteEvaluation",
    "RemoteUnavailable",
    "extract_json",
    "parse_evaluation",
]
