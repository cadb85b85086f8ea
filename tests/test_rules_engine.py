from __future__ import annotations

import pytest

from core.catalog import DEFAULT_CATALOG, FALLBACK_CATEGORY
from core.models import PostItem
from core.rules_engine import DEFAULT_RULES, build_rules, build_subject, classify, classify_batch


def test_skincare_post_is_beauty() -> None:
    result = classify(
        "护肤心得分享",
        "今天分享一下我的护肤经验，用了面膜和精华",
        ["护肤", "推荐"],
    )

    assert result.category_id == "美妆护肤"
    assert result.category_name == "美妆护肤"
    assert result.matched_keywords == ("护肤", "面膜", "精华")
    assert result.matched_patterns == ("护肤|美妆|化妆|彩妆", "面膜|精华|防晒|卸妆")
    # 3 keywords + 2 patterns * 3 + priority bonus 3.5 over 23 + 9 + 3.5
    assert result.confidence == pytest.approx(12.5 / 35.5)
    assert result.confidence > 0.1


def test_empty_input_falls_back_to_other() -> None:
    result = classify("", "", [])

    assert result.category_id == FALLBACK_CATEGORY
    assert result.category_name == "其他"
    assert result.confidence == 0.1
    assert result.matched_keywords == ()
    assert result.matched_patterns == ()


def test_none_values_are_treated_as_empty() -> None:
    result = classify(None, None, None)

    assert result.category_name == FALLBACK_CATEGORY
    assert result.confidence == 0.1


def test_unmatched_text_falls_back_to_other() -> None:
    result = classify("hello world", "nothing to see here", ["misc"])

    assert result.category_name == FALLBACK_CATEGORY
    assert result.confidence == 0.1


def test_priority_bonus_breaks_equal_hit_counts() -> None:
    # One keyword and one pattern each; 时尚穿搭 has the better priority.
    for text in ("穿搭 美食", "美食 穿搭"):
        result = classify(text, "", [])
        assert result.category_name == "时尚穿搭"


def test_tie_goes_to_earlier_rule() -> None:
    rules = build_rules(
        [
            {"name": "first", "keywords": ["alpha"], "priority": 1},
            {"name": "second", "keywords": ["alpha"], "priority": 1},
        ]
    )
    assert classify("alpha", "", [], rules).category_name == "first"

    reversed_rules = tuple(reversed(rules))
    assert classify("alpha", "", [], reversed_rules).category_name == "second"


def test_priority_bonus_alone_never_qualifies_a_rule() -> None:
    rules = build_rules([{"name": "only", "keywords": ["zzz"], "priority": 1}])

    result = classify("unrelated", "", [], rules)

    assert result.category_name == FALLBACK_CATEGORY


def test_keywords_count_presence_not_frequency() -> None:
    once = classify("面膜", "", [])
    many = classify("面膜面膜面膜", "面膜", ["面膜"])

    assert once == many


def test_keywords_match_case_insensitively() -> None:
    result = classify("weekend diy project", "", [])

    assert result.category_name == "生活方式"
    assert result.matched_keywords == ("DIY",)


def test_patterns_match_case_insensitively() -> None:
    rules = build_rules([{"name": "dev", "patterns": ["Python|Rust"], "priority": 1}])

    result = classify("", "learning PYTHON today", [], rules)

    assert result.category_name == "dev"
    assert result.matched_patterns == ("Python|Rust",)


def test_confidence_is_clamped_to_one() -> None:
    rules = build_rules([{"name": "tiny", "keywords": ["a"], "priority": 1}])

    result = classify("a", "", [], rules)

    assert result.confidence == 1.0


def test_confidence_stays_in_unit_interval_for_catalog() -> None:
    samples = [
        ("护肤 美妆 化妆 面膜 精华 防晒 口红 粉底 眼影", "", ["彩妆"]),
        ("学习", "工作 职场 考试 技能 培训 英语 编程 效率 笔记 规划 目标", []),
        ("旅行攻略", "酒店 民宿 自驾 徒步", ["海边"]),
        ("", "", []),
    ]
    for title, body, tags in samples:
        result = classify(title, body, tags)
        assert 0.0 <= result.confidence <= 1.0


def test_classify_is_deterministic() -> None:
    args = ("周末火锅", "和朋友去吃火锅，还有甜品和奶茶", ["美食"])

    assert classify(*args) == classify(*args)


def _raw_score(result) -> float:
    rule = next(rule for rule in DEFAULT_RULES if rule.name == result.category_name)
    return len(result.matched_keywords) + 3 * len(result.matched_patterns) + rule.priority_bonus


def test_extra_keyword_never_lowers_winner_score() -> None:
    base = classify("火锅", "", [])
    richer = classify("火锅", "还有烧烤", [])
    richest = classify("火锅", "还有烧烤和面条", ["甜品"])

    assert base.category_name == richer.category_name == richest.category_name == "美食"
    assert _raw_score(base) == 6.5
    assert _raw_score(richer) >= _raw_score(base)
    assert _raw_score(richest) >= _raw_score(richer)


def test_tags_are_part_of_the_subject() -> None:
    assert build_subject("A", "B", ["C", "d"]) == "a b c d"
    assert build_subject("a", "b", ["", None, "c"]) == "a b  c"

    result = classify("今天", "随便写写", ["健身"])
    assert result.category_name == "健身运动"


def test_default_bonus_matches_seven_level_catalog() -> None:
    bonuses = {rule.name: rule.priority_bonus for rule in DEFAULT_RULES}

    assert bonuses["美妆护肤"] == 3.5
    assert bonuses["学习工作"] == 0.5
    assert len(DEFAULT_RULES) == len(DEFAULT_CATALOG)


def test_bonus_scales_with_catalog_size() -> None:
    rules = build_rules(
        [
            {"name": "top", "keywords": ["x"], "priority": 1},
            {"name": "bottom", "keywords": ["y"], "priority": 10},
        ]
    )

    assert rules[0].priority_bonus == 5.0
    assert rules[1].priority_bonus == 0.5


def test_build_rules_skips_disabled_and_defaults_priority() -> None:
    rules = build_rules(
        [
            {"name": "a", "keywords": ["a"]},
            {"name": "off", "keywords": ["b"], "enabled": False},
            {"name": "c", "keywords": ["c"]},
        ]
    )

    assert [rule.name for rule in rules] == ["a", "c"]
    assert [rule.priority for rule in rules] == [1, 2]


def test_build_rules_rejects_bad_config() -> None:
    with pytest.raises(ValueError):
        build_rules([{"keywords": ["a"]}])
    with pytest.raises(ValueError):
        build_rules([{"name": "broken", "patterns": ["("]}])


def test_classify_batch_matches_single_calls() -> None:
    items = [
        PostItem("1", "护肤心得", "面膜", ("护肤",)),
        PostItem("2", "", "", ()),
        PostItem("3", "跑步打卡", "今天跑了五公里", ("健身",)),
    ]

    results = classify_batch(items)

    assert len(results) == len(items)
    for item, (post_id, result) in zip(items, results):
        assert post_id == item.post_id
        assert result == classify(item.title, item.body, item.tags)
