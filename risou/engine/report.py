# risou/engine/report.py
"""
Delay-board presentation: status level, headline, per-dimension breakdown
and the pseudo "delay certificate" text.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Sequence

from .recommend import DIMENSION_LABELS, category_label, line_label
from .scoring import DIMENSIONS, DimensionScores

OK_MAX_DELAY = 10
WARN_MAX_DELAY = 30


def status_level(delay: int) -> str:
    if delay <= OK_MAX_DELAY:
        return "ok"
    if delay <= WARN_MAX_DELAY:
        return "warn"
    return "alert"


def headline(category: str, delay: int) -> str:
    return f"{line_label(category)}: {category_label(category)}の実行に {delay} 分の遅延が発生しています。"


def breakdown(scores: DimensionScores, allocation: Dict[str, int]) -> List[str]:
    return [
        f"{DIMENSION_LABELS[d]}: 遅延 {allocation.get(d, 0)}分（スコア {getattr(scores, d)}）"
        for d in DIMENSIONS
    ]


def certificate(
    category: str,
    delay: int,
    gaps: Sequence[str],
    actions: Sequence[str],
    now: datetime,
) -> str:
    line = line_label(category)
    causes = " / ".join(gaps[:2]) or "解析中"
    plan = actions[0] if actions else "—"
    return "\n".join([
        "【遅延証明（擬似）】",
        f"{now:%Y}年{now:%m}月{now:%d}日 {now:%H}:{now:%M} 現在",
        f"{line} において {delay} 分の遅延が発生していることを確認しました。",
        f"要因（上位）: {causes}",
        f"短縮プラン: {plan}",
        "※本証明は学習用の擬似表示です。実際の鉄道運行とは無関係です。",
    ])
