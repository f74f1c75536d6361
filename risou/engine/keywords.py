# risou/engine/keywords.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple


Words = Tuple[str, ...]


def _frozen(table: dict) -> Mapping[str, Words]:
    return MappingProxyType({k: tuple(v) for k, v in table.items()})


# Declaration order is the classification precedence.
CATEGORY_KEYWORDS = _frozen({
    "health": ["運動", "筋トレ", "体重", "睡眠", "食事", "早起き", "ジョギング", "ヨガ", "禁煙", "禁酒", "ストレッチ"],
    "study": ["勉強", "学習", "英語", "TOEIC", "資格", "試験", "読書", "単語", "受験"],
    "work": ["仕事", "キャリア", "転職", "プロジェクト", "生産性", "会議", "タスク", "締切"],
    "finance": ["貯金", "節約", "投資", "家計", "収入", "支出", "予算"],
    "relationship": ["家族", "友達", "恋人", "同僚", "人間関係", "コミュニケーション"],
    "habit": ["習慣", "毎日", "ルーティン", "継続", "三日坊主"],
})

FLAG_KEYWORDS = _frozen({
    "has_goal": ["目標", "したい", "なりたい", "達成", "上げたい", "減らしたい", "増やしたい", "合格", "伸ばしたい"],
    "has_obstacle": ["疲れ", "疲れて", "時間がない", "続かない", "難しい", "できない", "挫折", "忙しい", "眠い", "誘惑"],
    "has_plan": ["計画", "スケジュール", "毎日", "毎朝", "朝", "夜", "週", "曜日", "ルーティン", "習慣"],
    "has_resource": ["アプリ", "タイマー", "ツール", "本", "環境", "場所", "デスク", "準備", "通知"],
    "has_feedback": ["記録", "ログ", "可視化", "グラフ", "振り返り", "レビュー", "日報", "週間レビュー"],
    "exec_pos": ["続けている", "できている", "実践", "達成した", "継続中"],
    "exec_neg": ["続かない", "できていない", "サボった", "三日坊主", "未達"],
    "has_deadline": ["までに", "締切", "期限", "デッドライン", "今月", "来月", "半年", "6ヶ月", "1年"],
})

# Scorer-only vocabularies (not flags).
ENVIRONMENT_WORDS: Words = ("朝", "夜", "通勤", "自宅", "カフェ", "図書館")
WEEKLY_CADENCE_WORDS: Words = ("毎週", "週次", "週末")

# Unit token -> unit name. Order is the regex alternation order.
UNIT_TOKENS = MappingProxyType({
    "回": "count",
    "分": "minutes",
    "時間": "hours",
    "日": "days",
    "週": "weeks",
    "月": "months",
    "年": "years",
    "kg": "kilograms",
    "キロ": "kilograms",
    "点": "points",
    "万円": "yen_10k",
    "円": "yen",
})


@dataclass(frozen=True)
class KeywordConfig:
    """
    Read-only vocabulary shared by the extractor, classifier and scorer.

    Build a custom one in tests to substitute words; instances are never
    mutated after construction, so one config can serve any number of
    concurrent analyses.
    """
    categories: Mapping[str, Words] = field(default_factory=lambda: CATEGORY_KEYWORDS)
    flags: Mapping[str, Words] = field(default_factory=lambda: FLAG_KEYWORDS)
    environment: Words = ENVIRONMENT_WORDS
    weekly_cadence: Words = WEEKLY_CADENCE_WORDS
    unit_tokens: Mapping[str, str] = field(default_factory=lambda: UNIT_TOKENS)

    @classmethod
    def build(
        cls,
        categories: dict | None = None,
        flags: dict | None = None,
        environment=None,
        weekly_cadence=None,
        unit_tokens: dict | None = None,
    ) -> "KeywordConfig":
        return cls(
            categories=_frozen(categories) if categories is not None else CATEGORY_KEYWORDS,
            flags=_frozen({**FLAG_KEYWORDS, **flags}) if flags is not None else FLAG_KEYWORDS,
            environment=tuple(environment) if environment is not None else ENVIRONMENT_WORDS,
            weekly_cadence=tuple(weekly_cadence) if weekly_cadence is not None else WEEKLY_CADENCE_WORDS,
            unit_tokens=MappingProxyType(dict(unit_tokens)) if unit_tokens is not None else UNIT_TOKENS,
        )


DEFAULT_CONFIG = KeywordConfig()


def get_keyword_config() -> KeywordConfig:
    return DEFAULT_CONFIG
