# risou/ai/client.py
from __future__ import annotations

import json
from typing import Optional

import httpx

from risou.engine.scoring import DimensionScores
from risou.logging_config import log_event, log_failure

from .validation import RemoteEvaluation, parse_evaluation

COACH_PROMPT = "あなたは熟練のコーチ兼プランナーです。"
ASSIST_SYSTEM = COACH_PROMPT + "入力から理想像・達成度・具体アクションを日本語で簡潔に出力してください。"
FULL_SYSTEM = (
    COACH_PROMPT
    + "日本語で、指定スキーマのJSONのみを返してください。説明文は不要です。数値は0-100の整数で返してください。"
)
FULL_SCHEMA_HINT = (
    '{"overall": number, "breakdown": {"clarity": number, "execution": number, '
    '"planning": number, "resources": number, "feedback": number}, '
    '"ideal": string, "gaps": string[], "actions": string[]}'
)


class RemoteUnavailable(RuntimeError):
    pass


class RemoteClient:
    """
    OpenAI-compatible chat-completions client.

    Public methods never raise: transport errors, non-2xx replies and
    unusable payloads are logged and returned as None so callers keep
    their local result.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model or "gpt-4o-mini"
        self.timeout = timeout
        self._transport = transport

    def _chat(self, system: str, user: str, temperature: float) -> str:
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            res = client.post(f"{self.base_url}/v1/chat/completions", json=body, headers=headers)
        if res.status_code >= 400:
            raise RemoteUnavailable(f"API {res.status_code}")
        data = res.json()
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise RemoteUnavailable("malformed completion payload")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise RemoteUnavailable("non-text completion content")
        return content.strip()

    def evaluate_full(self, text: str, category: str) -> Optional[RemoteEvaluation]:
        user = f"カテゴリ: {category}\n現状: {text}\n出力スキーマ(JSON): {FULL_SCHEMA_HINT}"
        try:
            content = self._chat(FULL_SYSTEM, user, temperature=0.2)
            result = parse_evaluation(content)
        except (httpx.HTTPError, RemoteUnavailable, ValueError) as e:
            log_failure("REMOTE_FULL_FALLBACK", {"error": str(e), "category": category})
            return None
        log_event("REMOTE_FULL", "remote evaluation accepted", {"overall": result.overall})
        return result

    def assist_suggestion(self, text: str, category: str, scores: DimensionScores) -> Optional[str]:
        hint = json.dumps(scores.to_dict(), ensure_ascii=False)
        user = f"カテゴリ: {category}\n現状: {text}\nヒント(機械推定): {hint}"
        try:
            content = self._chat(ASSIST_SYSTEM, user, temperature=0.3)
        except (httpx.HTTPError, RemoteUnavailable, ValueError) as e:
            log_failure("REMOTE_ASSIST_FALLBACK", {"error": str(e), "category": category})
            return None
        return content or None
