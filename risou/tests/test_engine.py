import pytest

from risou.engine import (
    DIM_WEIGHTS,
    DimensionScores,
    FeatureExtractor,
    Quantity,
    Unit,
    classify,
    extract_flags,
    extract_quantities,
    normalize,
    score,
)
from risou.engine.keywords import CATEGORY_KEYWORDS, FLAG_KEYWORDS, UNIT_TOKENS, KeywordConfig
from risou.engine.classify import CategoryClassifier

EXAMPLE = "毎日20分、週3回英語を勉強したい。TOEIC800点を目指す。"


# -------------------------
# NORMALIZER
# -------------------------
def test_normalize_collapses_all_whitespace_kinds():
    assert normalize("  毎日　　20分\t\n勉強  ") == "毎日 20分 勉強"


@pytest.mark.parametrize("raw", ["", None, 42, ["毎日"], "   　 \n"])
def test_normalize_bad_input_is_empty(raw):
    assert normalize(raw) == ""


# -------------------------
# FEATURE EXTRACTION
# -------------------------
def test_extract_quantities_example_statement():
    qs = extract_quantities(EXAMPLE)
    assert qs == [
        Quantity(20.0, Unit.MINUTES),
        Quantity(3.0, Unit.COUNT),
        Quantity(800.0, Unit.POINTS),
    ]


def test_extract_quantities_units_and_decimals():
    qs = extract_quantities("1.5時間 5 kg 10万円 500円 2週間 3キロ")
    assert [(q.value, q.unit) for q in qs] == [
        (1.5, Unit.HOURS),
        (5.0, Unit.KILOGRAMS),
        (10.0, Unit.YEN_10K),
        (500.0, Unit.YEN),
        (2.0, Unit.WEEKS),
        (3.0, Unit.KILOGRAMS),
    ]


def test_extract_quantities_ignores_unknown_units_and_fullwidth_digits():
    assert extract_quantities("6ヶ月で３０分") == []
    assert extract_quantities("") == []


def test_extract_flags_example_statement():
    f = extract_flags(EXAMPLE)
    assert f.has_goal is True      # したい
    assert f.has_plan is True      # 毎日 / 週
    assert f.has_deadline is False
    assert f.has_feedback is False
    assert f.exec_pos is False and f.exec_neg is False


def test_extract_flags_substring_matching_catches_compounds():
    f = extract_flags("週間レビューで振り返りをしている")
    assert f.has_feedback is True
    assert f.has_plan is True  # 週 inside 週間


def test_custom_keyword_config_is_injected():
    cfg = KeywordConfig.build(flags={"has_goal": ["goal"]})
    ex = FeatureExtractor(cfg)
    assert ex.extract_flags("my goal").has_goal is True
    assert ex.extract_flags("目標").has_goal is False
    # default extractor is untouched
    assert extract_flags("目標").has_goal is True


def test_default_keyword_config_shares_read_only_tables():
    cfg = KeywordConfig()
    assert cfg.categories is CATEGORY_KEYWORDS
    assert cfg.flags is FLAG_KEYWORDS
    assert cfg.unit_tokens is UNIT_TOKENS
    assert cfg == KeywordConfig()
    with pytest.raises(TypeError):
        cfg.categories["study"] = ("x",)


# -------------------------
# CATEGORY CLASSIFIER
# -------------------------
def test_classify_example_is_study():
    assert classify(EXAMPLE) == "study"


def test_classify_health_wins_tie_with_study():
    assert classify("毎日運動して勉強する") == "health"


def test_classify_override_is_returned_verbatim():
    assert classify("毎日運動して勉強する", "finance") == "finance"
    assert classify("勉強", "not-a-category") == "not-a-category"
    assert classify("勉強", "auto") == "study"
    assert classify("勉強", None) == "study"


def test_classify_no_keyword_is_other():
    assert classify("なんとなく不安") == "other"
    assert classify("") == "other"


def test_classifier_follows_injected_order():
    cfg = KeywordConfig.build(categories={"study": ["勉強"], "health": ["運動"]})
    assert CategoryClassifier(cfg).classify("運動して勉強") == "study"


# -------------------------
# DIMENSION SCORER
# -------------------------
def test_weights_sum_to_one():
    assert sum(DIM_WEIGHTS.values()) == pytest.approx(1.0)


def test_score_empty_input_is_base_values():
    s = score("")
    assert s.dimensions() == {
        "clarity": 20,
        "execution": 50,
        "planning": 40,
        "resources": 35,
        "feedback": 30,
    }
    assert s.overall == 35
    assert score(None) == s


def test_score_example_statement():
    s = score(EXAMPLE)
    assert s.clarity == 80        # goal + quantity + plan
    assert s.execution == 55      # minutes/count unit bonus
    assert s.planning == 75
    assert s.resources == 35
    assert s.feedback == 30
    assert s.overall == 59        # 58.5 rounds half up


def test_score_clarity_all_bonuses_is_exactly_100():
    s = score("毎日30分ジョギングして、来月までに体重を3kg減らしたい")
    assert s.clarity == 100


def test_score_execution_penalties():
    s = score("三日坊主で続かない。疲れて忙しい")
    assert s.execution == 15


def test_score_resources_and_feedback_bonuses():
    s = score("自宅のデスクにタイマーを準備。毎週末に記録を振り返る")
    assert s.resources == 75
    assert s.feedback == 80


def test_score_is_idempotent():
    assert score(EXAMPLE) == score(EXAMPLE)


def test_overall_matches_weighted_sum():
    for text in [EXAMPLE, "", "毎朝ヨガを続けている。アプリで記録", "仕事が忙しくてできない"]:
        s = score(text)
        total = sum(DIM_WEIGHTS[d] * v for d, v in s.dimensions().items())
        assert abs(s.overall - total) <= 0.5


def test_from_dimensions_clamps_out_of_range():
    s = DimensionScores.from_dimensions(clarity=140, execution=-30, planning=50, resources=50, feedback=50)
    assert s.clarity == 100
    assert s.execution == 0
