# risou/engine/recommend.py
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from .extract import Quantity, Unit
from .scoring import DIMENSIONS, DimensionScores, round_half_up

Chooser = Callable[[Sequence[str]], str]

TIME_SLOTS = ("朝7:00", "出勤前", "昼休み", "退勤直後", "21:00")
WEEKDAYS = ("金曜", "土曜", "日曜")
DEADLINES = ("今月末", "来月末", "6週間後", "3ヶ月後", "四半期末")

MAX_GAPS = 3
MAX_ACTIONS = 5

CATEGORY_LABELS = {
    "study": "学習", "health": "健康", "work": "仕事", "finance": "家計",
    "relationship": "関係", "habit": "習慣", "other": "取り組み",
}
LINE_LABELS = {
    "study": "学習線", "health": "健康線", "work": "仕事線", "finance": "家計線",
    "relationship": "関係線", "habit": "習慣線", "other": "一般線",
}
DIMENSION_LABELS = {
    "clarity": "目標の明確さ",
    "execution": "実行・継続",
    "planning": "計画・一貫性",
    "resources": "リソース整備",
    "feedback": "記録・振り返り",
}

GAP_SENTENCES = {
    "clarity": "数値と期限を伴う目標の言語化が不足。1つの指標と締切を決める。",
    "execution": "行動のハードルが高い/障害が未対策。行動を小さくし、妨げを事前に除去。",
    "planning": "時間帯や頻度が不安定。固定スロットと週次の見直しを設定。",
    "resources": "場所/ツール/事前準備が曖昧。物理的・デジタル環境を整える。",
    "feedback": "記録/レビューの仕組みがない。簡易な記録と週次レビューを導入。",
}

IDEAL_TEMPLATES = {
    "study": "6ヶ月後、週{freq}回×{minutes}分の学習が自動化。明確な範囲（例: 単語/長文/リスニング）を日別に配分し、朝の固定スロットに実施。記録と週次レビューで改善サイクルを回し、定量目標（例: TOEIC {points}点）を達成。",
    "health": "12週間後、週{freq}回×{minutes}分の運動ルーティンが定着。睡眠と食事の基本を整え、前日夜にウェア/水分をセット。実施は同じ時間帯、タイマーで計測、記録と週次レビューで負荷を段階的に増やす。",
    "work": "四半期内に、最重要プロジェクトへ毎日{minutes}分の集中ブロックを確保。週{freq}回の見直しで優先度を整理、会議はバッチ化。可視化ボードで進捗を管理し、締切に向けて段階ゴールを達成。",
    "finance": "3ヶ月後、月{amount}円の自動貯金と支出の可視化が定着。固定費を見直し、週{freq}回の家計チェックで予算内に運用。投資は定額積立で感情を排除。",
    "relationship": "次の8週間、週{freq}回の短い連絡/感謝メッセージと、月1回の質の高い時間を設計。相手の関心事リストを作成し、会話の質を上げる。",
    "habit": "6週間で、毎日{minutes}分の小さな行動が自動化。トリガー（行動の直前）を固定し、摩擦を徹底削減。記録と連続日数で動機づけ、徐々に拡張。",
    "other": "今後12週間で、週{freq}回×{minutes}分の集中行動を固定。実施時間帯と場所を一定にし、妨げ要因を先回り除去。記録と週次レビューで改善を継続。",
}

SHORT_ACTIONS = {
    "study": "3分音読",
    "health": "1分ストレッチ",
    "work": "30秒でタスク起票",
    "finance": "家計アプリ起動",
    "relationship": "30秒で感謝メモ",
}
ENV_PREP = {
    "study": "教材/タイマー/イヤホン",
    "health": "ウェア/シューズ/水",
    "work": "集中用デスク/Do Not Disturb",
    "finance": "家計アプリ/レシート箱",
    "relationship": "連絡先リスト/話題メモ",
}
LOG_TOOLS = {"finance": "家計簿アプリ"}


@dataclass(frozen=True)
class WorkingNumbers:
    minutes: int = 20
    freq_per_week: int = 3
    points: int = 700
    amount: int = 20000


@dataclass(frozen=True)
class Recommendations:
    ideal: str
    gaps: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"ideal": self.ideal, "gaps": list(self.gaps), "actions": list(self.actions)}


def _clamp(n: float, lo: int, hi: int) -> int:
    return max(lo, min(hi, round_half_up(n)))


def pick_numbers(quantities: Iterable[Quantity]) -> WorkingNumbers:
    """Later quantities of the same kind override earlier ones; kg is ignored."""
    minutes, freq, points, amount = 20, 3, 700, 20000
    for q in quantities:
        if q.unit == Unit.MINUTES:
            minutes = _clamp(q.value, 5, 120)
        elif q.unit == Unit.HOURS:
            minutes = _clamp(q.value * 60, 5, 180)
        elif q.unit in (Unit.COUNT, Unit.WEEKS):
            freq = _clamp(q.value, 1, 7)
        elif q.unit == Unit.POINTS:
            points = _clamp(q.value, 200, 990)
        elif q.unit in (Unit.YEN, Unit.YEN_10K):
            raw = q.value * 10000 if q.unit == Unit.YEN_10K else q.value
            amount = max(1000, round_half_up(raw))
    return WorkingNumbers(minutes, freq, points, amount)


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, CATEGORY_LABELS["other"])


def line_label(category: str) -> str:
    return LINE_LABELS.get(category, LINE_LABELS["other"])


def target_label(category: str, n: WorkingNumbers) -> str:
    if category == "study":
        chapters = max(1, round_half_up(n.freq_per_week / 2))
        return f"TOEIC {n.points}点/参考書{chapters}章"
    if category == "health":
        return f"{n.freq_per_week}回運動/体幹{n.minutes}分"
    if category == "work":
        return f"最重要タスク{n.minutes}分×{n.freq_per_week}回/週"
    if category == "finance":
        return f"月{n.amount}円の黒字維持"
    if category == "relationship":
        return f"週{n.freq_per_week}回の連絡と月1回の時間"
    return f"週{n.freq_per_week}回×{n.minutes}分の実行"


def rank_dimensions(scores: DimensionScores) -> List[str]:
    # sorted() is stable: equal scores keep clarity..feedback order
    dims = scores.dimensions()
    return sorted(DIMENSIONS, key=lambda d: dims[d])


def build_ideal(category: str, n: WorkingNumbers) -> str:
    template = IDEAL_TEMPLATES.get(category, IDEAL_TEMPLATES["other"])
    return template.format(
        freq=n.freq_per_week, minutes=n.minutes, points=n.points, amount=n.amount
    )


def build_gaps(scores: DimensionScores) -> List[str]:
    return [GAP_SENTENCES[d] for d in rank_dimensions(scores)[:MAX_GAPS]]


def build_actions(category: str, scores: DimensionScores, n: WorkingNumbers, choose: Chooser) -> List[str]:
    def per_dimension(dim: str) -> str:
        if dim == "clarity":
            return (
                f"数値×期限の目標を1つ: 「{category_label(category)}を{choose(DEADLINES)}までに"
                f"{target_label(category, n)}」と紙/メモに固定。"
            )
        if dim == "execution":
            short = SHORT_ACTIONS.get(category, "1分だけ着手")
            return f"トリガー設計: 既存習慣の直後に紐付け（例: 歯磨き後に{short}）。連続日数を可視化。"
        if dim == "planning":
            return f"週次レビューの予約: 毎週{choose(WEEKDAYS)}に15分、進捗チェックと翌週の予約を実施。"
        if dim == "resources":
            prep = ENV_PREP.get(category, "道具/アプリのショートカット")
            return f"環境の摩擦除去: {prep}を常設し、1タップ/1手で開始できる状態にする。"
        tool = LOG_TOOLS.get(category, "メモ/スプレッドシート")
        return f"ログの自動化: {tool}に○/×だけ記録。2週間ごとに小改善を1つ。"

    focused = [per_dimension(d) for d in rank_dimensions(scores)[:3]]
    unit = "単語10個" if category == "study" else "5分ウォームアップ"
    generic = [
        f"時間固定: {choose(TIME_SLOTS)}に{n.minutes}分、週{n.freq_per_week}回のスロットを2週間確保（カレンダー/リマインダー）。",
        f"行動を極小化: できる最小単位に分割（例: {unit}）。",
        "障害の先回り: 「疲れ/誘惑/場所」対策を前夜に準備（服/道具/アプリ起動）。",
        "記録: 実施/未実施のみ記録（○/×）。週1回、改善点を1つだけ決める。",
    ]
    return (focused + generic)[:MAX_ACTIONS]


def generate_recommendations(
    category: str,
    scores: DimensionScores,
    quantities: Iterable[Quantity] = (),
    chooser: Optional[Chooser] = None,
) -> Recommendations:
    """
    Ideal narrative, the three weakest-dimension gaps and up to five
    actions. Deadline, weekday and time-slot labels come from `chooser`
    (random.choice unless a deterministic one is passed).
    """
    choose = chooser or random.choice
    n = pick_numbers(quantities)
    return Recommendations(
        ideal=build_ideal(category, n),
        gaps=build_gaps(scores),
        actions=build_actions(category, scores, n, choose),
    )
