"""Unit tests for the weighted grade aggregation engine."""
import math
from decimal import Decimal

import pytest

from app.services.grading_engine import (
    AssessmentItem,
    Category,
    DEFAULT_WEIGHTS,
    WeightConfig,
    aggregate,
    letter_grade_for,
    parse_category,
    reduce_category,
    resolve_weights,
)

DEFAULT_CONFIG = WeightConfig(assignment_weight=20, quiz_weight=20, midterm_weight=25, final_weight=35)


def _item(category, score, max_score=100, weight=None):
    return AssessmentItem(category=category, score=score, max_score=max_score, weight=weight)


# == Weight resolution

def test_resolve_weights_without_config_uses_defaults():
    assert resolve_weights(None) == DEFAULT_WEIGHTS
    assert sum(resolve_weights(None).values()) == 100


def test_resolve_weights_fills_each_missing_field_independently():
    resolved = resolve_weights({"assignment_weight": 40, "quiz_weight": None})
    assert resolved[Category.assignment] == 40
    assert resolved[Category.quiz] == 20
    assert resolved[Category.midterm] == 25
    assert resolved[Category.final] == 35


@pytest.mark.parametrize("bad", [-5, float("nan"), float("inf"), "30", True, object()])
def test_resolve_weights_rejects_unusable_values(bad):
    assert resolve_weights({"final_weight": bad})[Category.final] == 35


def test_resolve_weights_reads_attributes_and_decimals():
    config = WeightConfig(assignment_weight=Decimal("10"), quiz_weight=0, midterm_weight=45, final_weight=45)
    resolved = resolve_weights(config)
    assert resolved == {
        Category.assignment: 10.0,
        Category.quiz: 0.0,
        Category.midterm: 45.0,
        Category.final: 45.0,
    }


# == Category reduction

def test_category_uses_mean_of_item_ratios_not_pooled_points():
    items = [_item("quiz", 5, 5), _item("quiz", 0, 95)]
    breakdown = reduce_category(items, Category.quiz, 20)
    # pooled points would give 5/100; each item is normalised first instead
    assert breakdown.mean_ratio == pytest.approx(0.5)
    assert breakdown.weighted == pytest.approx(10.0)
    assert breakdown.item_count == 2


def test_empty_category_contributes_zero():
    breakdown = reduce_category([], Category.midterm, 25)
    assert breakdown.weighted == 0.0
    assert breakdown.mean_ratio is None


def test_category_emptied_by_exclusion_contributes_zero():
    breakdown = reduce_category([_item("final", 10, 0), _item("final", 10, -1)], Category.final, 35)
    assert breakdown.weighted == 0.0
    assert breakdown.item_count == 0
    assert breakdown.excluded_count == 2


def test_override_weights_replace_even_share():
    items = [
        _item("assignment", 100, 100, weight=15),
        _item("assignment", 50, 100),
    ]
    breakdown = reduce_category(items, Category.assignment, 20)
    # 1.0 * 15 for the override, 0.5 * (20 - 15) for the rest
    assert breakdown.weighted == pytest.approx(17.5)


def test_overrides_exceeding_category_weight_leave_nothing_for_others():
    items = [
        _item("quiz", 80, 100, weight=25),
        _item("quiz", 100, 100),
    ]
    breakdown = reduce_category(items, Category.quiz, 20)
    # the 25-point override is scaled to the 20-point category: 0.8 * 20
    assert breakdown.weighted == pytest.approx(16.0)


def test_oversized_override_cannot_push_past_100_percent():
    items = [_item(c.value, 10, 10) for c in Category]
    items.append(_item("quiz", 10, 10, weight=60))
    result = aggregate(1, 1, items, DEFAULT_CONFIG)
    assert result.category_weighted["quiz"] == pytest.approx(20)
    assert result.final_percentage == pytest.approx(100)
    assert result.letter_grade == "A"


def test_several_overrides_are_scaled_together():
    items = [
        _item("final", 100, 100, weight=30),
        _item("final", 50, 100, weight=40),
    ]
    breakdown = reduce_category(items, Category.final, 35)
    # both overrides shrink by 35 / 70
    assert breakdown.weighted == pytest.approx(15 + 10)


@pytest.mark.parametrize("bad_score", [10 ** 400, Decimal("sNaN"), Decimal("Infinity")])
def test_unconvertible_numbers_are_excluded_not_raised(bad_score):
    items = [_item("quiz", bad_score, 10), _item("quiz", 5, 10)]
    result = aggregate(1, 1, items, DEFAULT_CONFIG)
    assert result.excluded_items == 1
    assert result.category_weighted["quiz"] == pytest.approx(10)


def test_unconvertible_weight_falls_back_to_default():
    resolved = resolve_weights({"midterm_weight": 10 ** 400, "quiz_weight": Decimal("sNaN")})
    assert resolved[Category.midterm] == 25
    assert resolved[Category.quiz] == 20


# == Letter mapping

@pytest.mark.parametrize("percentage,letter", [
    (100, "A"), (90, "A"), (89.99, "B"), (80, "B"), (70, "C"), (60, "D"), (59.99, "F"), (0, "F"),
])
def test_letter_grade_thresholds_are_inclusive(percentage, letter):
    assert letter_grade_for(percentage) == letter


def test_letter_grade_accepts_custom_cutoffs():
    cutoffs = {"A": 85, "A-": 80, "B+": 75}
    assert letter_grade_for(86, cutoffs) == "A"
    assert letter_grade_for(82, cutoffs) == "A-"
    assert letter_grade_for(74, cutoffs, failing_letter="NP") == "NP"


def test_parse_category_is_strict():
    assert parse_category(" Quiz ") is Category.quiz
    assert parse_category("lab") is None
    assert parse_category(None) is None


# == Aggregation properties

@pytest.mark.parametrize("config", [
    DEFAULT_CONFIG,
    WeightConfig(assignment_weight=25, quiz_weight=25, midterm_weight=25, final_weight=25),
    WeightConfig(assignment_weight=0, quiz_weight=0, midterm_weight=40, final_weight=60),
])
def test_perfect_scores_with_full_weights_give_100_and_a(config):
    items = [
        _item("assignment", 10, 10), _item("assignment", 7, 7),
        _item("quiz", 5, 5),
        _item("midterm", 100, 100),
        _item("final", 60, 60),
    ]
    result = aggregate(1, 1, items, config)
    assert result.final_percentage == pytest.approx(100)
    assert result.letter_grade == "A"


@pytest.mark.parametrize("config", [None, DEFAULT_CONFIG, {"final_weight": 90}])
def test_no_items_gives_zero_and_f(config):
    result = aggregate(7, 3, [], config)
    assert result.final_percentage == 0
    assert result.letter_grade == "F"
    assert set(result.category_weighted.values()) == {0.0}
    assert result.excluded_items == 0


def test_aggregate_is_idempotent_and_does_not_mutate_input():
    items = [_item("assignment", 85), _item("quiz", 3, 7), _item("final", 61, 80)]
    snapshot = list(items)
    first = aggregate(1, 2, items, DEFAULT_CONFIG)
    second = aggregate(1, 2, items, DEFAULT_CONFIG)
    assert first == second
    assert first.final_percentage == second.final_percentage
    assert items == snapshot


def test_scale_independence_between_categories():
    config = WeightConfig(assignment_weight=25, quiz_weight=25, midterm_weight=25, final_weight=25)
    result = aggregate(1, 1, [_item("quiz", 5, 5), _item("midterm", 50, 50)], config)
    assert result.category_weighted["quiz"] == pytest.approx(25)
    assert result.category_weighted["midterm"] == pytest.approx(25)


def test_zero_max_score_item_does_not_change_contribution():
    clean = [_item("assignment", 10, 10), _item("assignment", 20, 20)]
    dirty = clean + [_item("assignment", 3, 0)]
    without = aggregate(1, 1, clean, DEFAULT_CONFIG)
    with_bad = aggregate(1, 1, dirty, DEFAULT_CONFIG)
    assert with_bad.category_weighted["assignment"] == without.category_weighted["assignment"]
    assert with_bad.excluded_items == 1


def test_unknown_category_is_excluded_not_aggregated():
    result = aggregate(1, 1, [_item("lab", 100), _item("final", 100)], DEFAULT_CONFIG)
    assert result.excluded_items == 1
    assert result.final_percentage == pytest.approx(35)
    assert "lab" not in result.category_weighted


def test_missing_or_negative_scores_are_excluded():
    items = [
        _item("quiz", None),
        _item("quiz", -4, 10),
        _item("quiz", math.nan, 10),
        _item("quiz", 9, 10),
    ]
    result = aggregate(1, 1, items, DEFAULT_CONFIG)
    assert result.excluded_items == 3
    assert result.category_weighted["quiz"] == pytest.approx(18)


def test_missing_categories_contribute_exactly_zero():
    items = [_item("assignment", 80), _item("final", 90)]
    result = aggregate(1, 1, items, DEFAULT_CONFIG)
    assert result.category_weighted["quiz"] == 0
    assert result.category_weighted["midterm"] == 0
    assert result.final_percentage == pytest.approx(
        result.category_weighted["assignment"] + result.category_weighted["final"]
    )
    assert result.final_percentage == pytest.approx(16 + 31.5)


def test_concrete_course_scenario():
    items = [
        _item("assignment", 85, 100),
        _item("quiz", 90, 100),
        _item("midterm", 78, 100),
        _item("final", 82, 100),
    ]
    result = aggregate(42, 9, items, DEFAULT_CONFIG)
    assert result.category_weighted["assignment"] == pytest.approx(17)
    assert result.category_weighted["quiz"] == pytest.approx(18)
    assert result.category_weighted["midterm"] == pytest.approx(19.5)
    assert result.category_weighted["final"] == pytest.approx(28.7)
    assert result.final_percentage == pytest.approx(83.2)
    assert result.letter_grade == "B"
    assert result.student_id == 42
    assert result.course_id == 9


def test_weights_not_summing_to_100_are_not_renormalised():
    config = WeightConfig(assignment_weight=20, quiz_weight=20, midterm_weight=25, final_weight=25)
    items = [_item(c.value, 100) for c in Category]
    result = aggregate(1, 1, items, config)
    assert result.weight_sum == 90
    assert result.final_percentage == pytest.approx(90)
    assert result.letter_grade == "A"


def test_items_given_as_mappings_are_accepted():
    items = [{"category": "midterm", "score": 40, "max_score": 50}]
    result = aggregate(1, 1, items)
    assert result.category_weighted["midterm"] == pytest.approx(20)
