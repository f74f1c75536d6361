from risou.engine import DimensionScores, Quantity, Unit, extract_quantities, generate_recommendations, score
from risou.engine.recommend import (
    GAP_SENTENCES,
    IDEAL_TEMPLATES,
    WorkingNumbers,
    build_ideal,
    category_label,
    line_label,
    pick_numbers,
    rank_dimensions,
)

EXAMPLE = "毎日20分、週3回英語を勉強したい。TOEIC800点を目指す。"


# -------------------------
# WORKING NUMBERS
# -------------------------
def test_pick_numbers_defaults_without_quantities():
    assert pick_numbers([]) == WorkingNumbers(minutes=20, freq_per_week=3, points=700, amount=20000)


def test_pick_numbers_from_example():
    n = pick_numbers(extract_quantities(EXAMPLE))
    assert (n.minutes, n.freq_per_week, n.points) == (20, 3, 800)


def test_pick_numbers_clamps_each_unit():
    n = pick_numbers([
        Quantity(2, Unit.MINUTES),
        Quantity(10, Unit.COUNT),
        Quantity(100, Unit.POINTS),
        Quantity(500, Unit.YEN),
    ])
    assert n == WorkingNumbers(minutes=5, freq_per_week=7, points=200, amount=1000)


def test_pick_numbers_hours_and_large_yen():
    assert pick_numbers([Quantity(1.5, Unit.HOURS)]).minutes == 90
    assert pick_numbers([Quantity(4, Unit.HOURS)]).minutes == 180
    assert pick_numbers([Quantity(3, Unit.YEN_10K)]).amount == 30000
    assert pick_numbers([Quantity(2, Unit.WEEKS)]).freq_per_week == 2


def test_pick_numbers_later_quantity_wins_and_kg_is_ignored():
    n = pick_numbers([Quantity(30, Unit.MINUTES), Quantity(45, Unit.MINUTES), Quantity(5, Unit.KILOGRAMS)])
    assert n.minutes == 45
    assert n.freq_per_week == 3


# -------------------------
# IDEAL / GAPS / ACTIONS
# -------------------------
def test_ideal_uses_category_template_and_numbers():
    n = WorkingNumbers(minutes=20, freq_per_week=3, points=800, amount=20000)
    ideal = build_ideal("study", n)
    assert ideal.startswith("6ヶ月後、週3回×20分の学習が自動化。")
    assert "TOEIC 800点" in ideal


def test_ideal_unknown_category_falls_back_to_other():
    n = WorkingNumbers()
    assert build_ideal("unknown", n) == IDEAL_TEMPLATES["other"].format(
        freq=3, minutes=20, points=700, amount=20000
    )
    assert category_label("unknown") == "取り組み"
    assert line_label("unknown") == "一般線"


def test_finance_ideal_uses_amount():
    n = pick_numbers([Quantity(3, Unit.YEN_10K)])
    assert build_ideal("finance", n).startswith("3ヶ月後、月30000円の自動貯金")


def test_rank_dimensions_ties_keep_declared_order():
    s = DimensionScores.from_dimensions(clarity=50, execution=50, planning=50, resources=50, feedback=50)
    assert rank_dimensions(s) == ["clarity", "execution", "planning", "resources", "feedback"]


def test_gaps_are_three_weakest_dimensions(chooser):
    recs = generate_recommendations("study", score(EXAMPLE), extract_quantities(EXAMPLE), chooser)
    # feedback 30 < resources 35 < execution 55
    assert recs.gaps == [GAP_SENTENCES["feedback"], GAP_SENTENCES["resources"], GAP_SENTENCES["execution"]]


def test_actions_for_example_statement(chooser):
    recs = generate_recommendations("study", score(EXAMPLE), extract_quantities(EXAMPLE), chooser)
    assert recs.actions == [
        "ログの自動化: メモ/スプレッドシートに○/×だけ記録。2週間ごとに小改善を1つ。",
        "環境の摩擦除去: 教材/タイマー/イヤホンを常設し、1タップ/1手で開始できる状態にする。",
        "トリガー設計: 既存習慣の直後に紐付け（例: 歯磨き後に3分音読）。連続日数を可視化。",
        "時間固定: 朝7:00に20分、週3回のスロットを2週間確保（カレンダー/リマインダー）。",
        "行動を極小化: できる最小単位に分割（例: 単語10個）。",
    ]


def test_clarity_action_uses_chooser_for_deadline(chooser):
    recs = generate_recommendations("other", score(""), (), chooser)
    assert recs.actions[0] == "数値×期限の目標を1つ: 「取り組みを今月末までに週3回×20分の実行」と紙/メモに固定。"
    assert len(recs.actions) == 5
    assert len(recs.gaps) == 3


def test_planning_action_uses_chooser_for_weekday():
    s = DimensionScores.from_dimensions(clarity=90, execution=90, planning=10, resources=90, feedback=90)
    recs = generate_recommendations("work", s, (), lambda opts: opts[-1])
    assert recs.actions[0] == "週次レビューの予約: 毎週日曜に15分、進捗チェックと翌週の予約を実施。"


def test_finance_logging_tool_label(chooser):
    s = DimensionScores.from_dimensions(clarity=90, execution=90, planning=90, resources=90, feedback=0)
    recs = generate_recommendations("finance", s, (), chooser)
    assert recs.actions[0].startswith("ログの自動化: 家計簿アプリに")


def test_default_chooser_is_random_but_bounded():
    s = score("")
    for _ in range(5):
        recs = generate_recommendations("health", s)
        assert len(recs.actions) == 5
        assert any(slot in recs.actions[3] for slot in ("朝7:00", "出勤前", "昼休み", "退勤直後", "21:00"))
