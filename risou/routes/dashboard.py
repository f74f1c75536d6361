# risou/routes/dashboard.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse
from jinja2 import Template
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Analysis, SourceEnum
from ..settings import get_settings
from risou.engine.classify import CATEGORIES
from risou.engine.recommend import line_label
from risou.engine.report import status_level

router = APIRouter(tags=["dashboard"])

MAX_ROWS = 100


def _parse_since(s: str | None) -> datetime | None:
    if not s:
        return None
    try:
        return datetime.strptime(s, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(400, "Invalid 'since' date. Use YYYY-MM-DD.")


def _apply_filters(q, category: str | None, source: str | None, since_dt: datetime | None):
    if category:
        q = q.filter(Analysis.category == category)
    if source:
        try:
            q = q.filter(Analysis.source == SourceEnum(source))
        except ValueError:
            raise HTTPException(400, f"Unknown source: {source}")
    if since_dt:
        q = q.filter(Analysis.created_at >= since_dt)
    return q


def _snippet(text: str, limit: int = 40) -> str:
    return text if len(text) <= limit else text[:limit] + "…"


TEMPLATE = Template(
    r"""
<!doctype html>
<html lang="ja">
<head>
  <meta charset="utf-8">
  <title>理想ダイヤ · 遅延掲示板</title>
  <style>
    :root { --bg:#f4f5f7; --surface:#fff; --border:#e2e8f0; --text:#1f2933; --muted:#6b7280; --accent:#0f766e; }
    * { box-sizing: border-box; }
    body { font-family: system-ui, -apple-system, "Hiragino Sans", "Noto Sans JP", sans-serif; margin:0; background:var(--bg); color:var(--text); }
    .shell { max-width:1100px; margin:0 auto; padding:22px 18px 40px; }
    .topbar { display:flex; justify-content:space-between; align-items:center; margin-bottom:16px; }
    .brand-title { font-size:24px; font-weight:800; color:var(--accent); }
    .badge { background:#e5e7eb; color:#4b5563; padding:6px 14px; border-radius:999px; font-size:13px; }
    .panel { background:var(--surface); border:1px solid var(--border); border-radius:14px; padding:12px 14px; margin-bottom:12px; }
    form { display:flex; gap:12px; flex-wrap:wrap; align-items:center; margin:0; }
    label { font-size:13px; color:var(--muted); font-weight:600; }
    select, input, textarea { margin-left:6px; padding:6px 8px; border-radius:8px; border:1px solid var(--border); font-size:13px; }
    textarea { width:100%; margin:0 0 8px; min-height:64px; }
    button, .linkbtn { padding:8px 14px; border-radius:10px; border:none; background:var(--accent); color:#fff; font-size:13px; font-weight:700; cursor:pointer; text-decoration:none; }
    .linkbtn.secondary { background:#334155; }
    .chip { padding:3px 10px; border-radius:999px; font-size:12px; font-weight:700; margin-right:6px; }
    .lv-ok { background:#dcfce7; color:#15803d; }
    .lv-warn { background:#fef3c7; color:#92400e; }
    .lv-alert { background:#fee2e2; color:#991b1b; }
    .chip.neutral { background:#eef2ff; color:#3730a3; }
    table { width:100%; border-collapse:collapse; background:var(--surface); border:1px solid var(--border); border-radius:14px; overflow:hidden; font-size:13px; }
    th, td { padding:10px 12px; text-align:left; border-bottom:1px solid #edf2f7; vertical-align:top; }
    th { background:#f8fafc; color:#475569; font-size:11px; letter-spacing:0.08em; }
    .mono { font-family: ui-monospace, Menlo, Consolas, monospace; color:#666; }
    .muted { color:var(--muted); }
    .err { color:#991b1b; margin-top:6px; font-size:13px; }
  </style>
</head>
<body>
  <div class="shell">
    <header class="topbar">
      <div class="brand-title">理想ダイヤ 遅延掲示板</div>
      <div class="badge">engine {{ engine_version }}</div>
    </header>

    <div class="panel">
      <textarea id="statement" placeholder="いまの状況を書いてください（例: 毎日20分、週3回英語を勉強したい。）"></textarea>
      <form id="analyze-form" onsubmit="return false;">
        <label>カテゴリ
          <select id="category">
            <option value="auto">自動判定</option>
            {% for c in categories %}<option value="{{ c }}">{{ c }}</option>{% endfor %}
          </select>
        </label>
        <button type="button" id="analyze-btn">解析する</button>
      </form>
      <div class="err" id="analyze-err"></div>
    </div>

    <div class="panel">
      <form method="get" action="/dashboard">
        <label>カテゴリ
          <select name="category">
            <option value="" {{ '' == sel_category and 'selected' or '' }}>すべて</option>
            {% for c in categories %}
              <option value="{{ c }}" {{ c == sel_category and 'selected' or '' }}>{{ c }}</option>
            {% endfor %}
          </select>
        </label>
        <label>ソース
          <select name="source">
            <option value="" {{ '' == sel_source and 'selected' or '' }}>すべて</option>
            {% for s in sources %}
              <option value="{{ s }}" {{ s == sel_source and 'selected' or '' }}>{{ s }}</option>
            {% endfor %}
          </select>
        </label>
        <label>開始日 <input type="date" name="since" value="{{ sel_since }}"></label>
        <button type="submit">絞り込む</button>
        <a class="linkbtn secondary" href="/analyses/export.csv{% if sel_since %}?since={{ sel_since }}{% endif %}">CSV</a>
      </form>
    </div>

    <div class="panel">
      <strong>件数 {{ total }}</strong>
      <span class="chip lv-ok">ok: {{ levels.ok }}</span>
      <span class="chip lv-warn">warn: {{ levels.warn }}</span>
      <span class="chip lv-alert">alert: {{ levels.alert }}</span>
      <span class="chip neutral">平均遅延: {{ avg_delay }}</span>
    </div>

    <table>
      <thead>
        <tr><th>ID</th><th>日時</th><th>路線</th><th>総合</th><th>遅延</th><th>状態</th><th>ソース</th><th>入力</th></tr>
      </thead>
      <tbody>
      {% for a in rows %}
        <tr>
          <td class="mono" title="{{ a.id }}"><a href="/analyze/{{ a.id }}">{{ a.id[:8] }}</a></td>
          <td class="mono">{{ a.created_at }}</td>
          <td>{{ a.line }}</td>
          <td class="mono">{{ a.overall }}</td>
          <td class="mono">{{ a.delay }}分</td>
          <td><span class="chip lv-{{ a.level }}">{{ a.level }}</span></td>
          <td class="mono">{{ a.source }}</td>
          <td title="{{ a.text }}">{{ a.snippet }}</td>
        </tr>
      {% else %}
        <tr><td colspan="8" class="muted">まだ解析結果がありません。</td></tr>
      {% endfor %}
      </tbody>
    </table>
  </div>

<script>
  document.getElementById("analyze-btn").addEventListener("click", async (e) => {
    const btn = e.target;
    const errBox = document.getElementById("analyze-err");
    const text = document.getElementById("statement").value.trim();
    errBox.textContent = "";
    if (!text) { errBox.textContent = "テキストを入力してください。"; return; }

    btn.disabled = true;
    try {
      const res = await fetch("/analyze", {
        method: "POST",
        headers: { "Content-Type": "application/json" },
        body: JSON.stringify({ text: text, category: document.getElementById("category").value })
      });
      if (!res.ok) {
        const data = await res.json().catch(() => ({}));
        errBox.textContent = (data && data.detail) ? JSON.stringify(data.detail) : ("Request failed (" + res.status + ")");
        return;
      }
      window.location.reload();
    } catch (err) {
      errBox.textContent = "Network error";
    } finally {
      btn.disabled = false;
    }
  });
</script>
</body>
</html>
""",
    autoescape=True,
)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    db: Session = Depends(get_db),
    category: str | None = Query(None),
    source: str | None = Query(None),
    since: str | None = Query(None),
):
    since_dt = _parse_since(since)
    base = _apply_filters(db.query(Analysis), category, source, since_dt)

    items = base.order_by(desc(Analysis.created_at)).limit(MAX_ROWS).all()

    view: list[dict[str, Any]] = []
    for a in items:
        view.append(
            {
                "id": a.id,
                "created_at": a.created_at.strftime("%Y-%m-%d %H:%M") if a.created_at else "",
                "line": line_label(a.category),
                "overall": a.overall,
                "delay": a.overall_delay,
                "level": status_level(a.overall_delay),
                "source": a.source.value if hasattr(a.source, "value") else str(a.source),
                "text": a.input_text,
                "snippet": _snippet(a.input_text),
            }
        )

    # Summary counts over the whole filtered set, not just the rendered rows
    levels = {"ok": 0, "warn": 0, "alert": 0}
    delays = [d for (d,) in base.with_entities(Analysis.overall_delay).all()]
    for d in delays:
        levels[status_level(d)] += 1
    avg_delay = f"{sum(delays) / len(delays):.1f}分" if delays else "—"

    return TEMPLATE.render(
        rows=view,
        total=len(delays),
        levels=levels,
        avg_delay=avg_delay,
        categories=list(CATEGORIES),
        sources=[s.value for s in SourceEnum],
        sel_category=category or "",
        sel_source=source or "",
        sel_since=since or "",
        engine_version=get_settings().ENGINE_VERSION,
    )
