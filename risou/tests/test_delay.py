from datetime import datetime

import pytest

from risou.engine import DimensionScores, allocate, compute_delays, score, to_delay
from risou.engine.report import breakdown, certificate, headline, status_level

EXAMPLE = "毎日20分、週3回英語を勉強したい。TOEIC800点を目指す。"


def _scores(c, e, p, r, f):
    return DimensionScores.from_dimensions(clarity=c, execution=e, planning=p, resources=r, feedback=f)


# -------------------------
# DELAY CONVERTER
# -------------------------
def test_to_delay_endpoints():
    assert to_delay(100) == 0
    assert to_delay(0) == 120
    assert to_delay(35) == 78
    assert to_delay(59) == 49


def test_to_delay_range_and_monotonic():
    values = [to_delay(s) for s in range(0, 101)]
    assert all(0 <= v <= 120 for v in values)
    assert all(a >= b for a, b in zip(values, values[1:]))


def test_to_delay_clamps_out_of_range_scores():
    assert to_delay(150) == 0
    assert to_delay(-20) == 120


def test_to_delay_scales_fractional_scores_before_rounding():
    assert to_delay(98.7) == 2
    assert to_delay(59.0) == 49
    assert to_delay(0.4) == 120
    assert to_delay(100.0) == 0


def test_compute_delays_is_six_independent_conversions():
    d = compute_delays(score(EXAMPLE))
    assert d.to_dict() == {
        "overall": 49,
        "clarity": 24,
        "execution": 54,
        "planning": 30,
        "resources": 78,
        "feedback": 84,
    }


# -------------------------
# DELAY ALLOCATOR
# -------------------------
def test_allocate_baseline_scores():
    s = score("")
    assert allocate(78, s) == {
        "clarity": 24,
        "execution": 15,
        "planning": 14,
        "resources": 12,
        "feedback": 13,
    }


def test_allocate_example_statement():
    s = score(EXAMPLE)
    alloc = allocate(49, s)
    assert alloc == {"clarity": 6, "execution": 13, "planning": 6, "resources": 12, "feedback": 12}


def test_allocate_overshoot_is_removed_from_smallest_remainder():
    # raw shares 2.5, 2.5, 2.0, 1.5, 1.5 round to 12; planning has the smallest fraction
    alloc = allocate(10, _scores(0, 0, 0, 0, 0))
    assert alloc == {"clarity": 3, "execution": 3, "planning": 0, "resources": 2, "feedback": 2}


def test_allocate_shortfall_goes_to_first_largest_remainder():
    # raw shares .25, .25, .2, .15, .15 all round to 0
    alloc = allocate(1, _scores(0, 0, 0, 0, 0))
    assert alloc == {"clarity": 1, "execution": 0, "planning": 0, "resources": 0, "feedback": 0}


def test_allocate_no_deficit_gives_zeros():
    assert allocate(0, _scores(100, 100, 100, 100, 100)) == dict.fromkeys(
        ["clarity", "execution", "planning", "resources", "feedback"], 0
    )


@pytest.mark.parametrize("dims", [
    (20, 50, 40, 35, 30),
    (80, 55, 75, 35, 30),
    (0, 100, 0, 100, 0),
    (99, 98, 97, 96, 95),
    (33, 67, 12, 88, 41),
    (100, 100, 100, 100, 0),
])
def test_allocate_always_sums_to_overall(dims):
    s = _scores(*dims)
    for overall in (0, 1, 7, 49, 78, 119, 120):
        alloc = allocate(overall, s)
        assert sum(alloc.values()) == overall


# -------------------------
# DELAY BOARD
# -------------------------
def test_status_level_thresholds():
    assert status_level(0) == "ok"
    assert status_level(10) == "ok"
    assert status_level(11) == "warn"
    assert status_level(30) == "warn"
    assert status_level(31) == "alert"


def test_headline_and_breakdown_labels():
    s = score(EXAMPLE)
    assert headline("study", 49) == "学習線: 学習の実行に 49 分の遅延が発生しています。"
    assert headline("custom", 5).startswith("一般線: 取り組み")
    lines = breakdown(s, allocate(49, s))
    assert lines[0] == "目標の明確さ: 遅延 6分（スコア 80）"
    assert len(lines) == 5


def test_certificate_text():
    text = certificate("study", 49, ["g1", "g2", "g3"], ["a1"], datetime(2026, 10, 19, 7, 5))
    lines = text.split("\n")
    assert lines[0] == "【遅延証明（擬似）】"
    assert lines[1] == "2026年10月19日 07:05 現在"
    assert "学習線 において 49 分" in lines[2]
    assert lines[3] == "要因（上位）: g1 / g2"
    assert lines[4] == "短縮プラン: a1"
    assert "短縮プラン: —" in certificate("other", 0, [], [], datetime(2026, 1, 1))
