"""Weighted grade aggregation.

Turns the scored assessment items of one student in one course, plus the
course's weight configuration, into a per-category weighted contribution, a
final percentage and a letter grade.

Everything here is a pure function of its arguments: nothing is read from the
database, the clock or module state, and input records are never mutated, so
the engine can be called from any number of request handlers at once.
"""
import enum
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class Category(enum.Enum):
    assignment = "assignment"
    quiz = "quiz"
    midterm = "midterm"
    final = "final"


# Percentage points per category when a course has no (or a partial) configuration
DEFAULT_WEIGHTS: Dict[Category, float] = {
    Category.assignment: 20.0,
    Category.quiz: 20.0,
    Category.midterm: 25.0,
    Category.final: 35.0,
}

DEFAULT_LETTER_CUTOFFS: Dict[str, float] = {"A": 90.0, "B": 80.0, "C": 70.0, "D": 60.0}
DEFAULT_FAILING_LETTER = "F"

# Absorbs float noise such as 89.99999999999999 when comparing against a cut point
_CUTOFF_EPSILON = 1e-9


@dataclass(frozen=True)
class AssessmentItem:
    category: str
    score: Any
    max_score: Any
    weight: Optional[float] = None
    graded_at: Optional[datetime] = None
    assessment_id: Optional[int] = None


@dataclass(frozen=True)
class WeightConfig:
    assignment_weight: Optional[float] = None
    quiz_weight: Optional[float] = None
    midterm_weight: Optional[float] = None
    final_weight: Optional[float] = None


@dataclass(frozen=True)
class CategoryBreakdown:
    category: Category
    weight: float
    item_count: int
    excluded_count: int
    mean_ratio: Optional[float]
    weighted: float


@dataclass(frozen=True)
class AggregationResult:
    course_id: Any
    student_id: Any
    category_weighted: Dict[str, float]
    final_percentage: float
    letter_grade: str
    weights: Dict[str, float] = field(default_factory=dict)
    weight_sum: float = 0.0
    categories: Tuple[CategoryBreakdown, ...] = ()
    excluded_items: int = 0


def parse_category(raw: Any) -> Optional[Category]:
    """Map a raw category tag to a Category, or None when it is not one of the four."""
    if isinstance(raw, Category):
        return raw
    if isinstance(raw, enum.Enum):
        raw = raw.value
    if not isinstance(raw, str):
        return None
    try:
        return Category(raw.strip().lower())
    except ValueError:
        return None


def _as_finite_number(value: Any) -> Optional[float]:
    # bool is an int subclass but a True weight is never meant as 1 point
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        # huge ints and signalling Decimal NaNs cannot become floats
        return None
    if not math.isfinite(number):
        return None
    return number


def _read_field(raw: Any, name: str) -> Any:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


# == Weight configuration resolution

def resolve_weights(raw: Any = None) -> Dict[Category, float]:
    """Fill every category weight, falling back to its default field by field.

    `raw` may be None, a mapping, a WeightConfig or any object exposing
    `assignment_weight`, `quiz_weight`, `midterm_weight` and `final_weight`
    (a GradingWeight row for instance). A field is used only when it is a
    finite number >= 0.
    """
    resolved = {}
    for category, default in DEFAULT_WEIGHTS.items():
        value = _as_finite_number(_read_field(raw, f"{category.value}_weight"))
        resolved[category] = value if value is not None and value >= 0 else default
    return resolved


# == Per-category reduction

def _item_ratio(item: Any) -> Optional[float]:
    score = _as_finite_number(_read_field(item, "score"))
    max_score = _as_finite_number(_read_field(item, "max_score"))
    if score is None or max_score is None or score < 0 or max_score <= 0:
        return None
    return score / max_score


def _item_override(item: Any) -> Optional[float]:
    weight = _as_finite_number(_read_field(item, "weight"))
    if weight is None or weight < 0:
        return None
    return weight


def reduce_category(items: Iterable[Any], category: Category, weight: float) -> CategoryBreakdown:
    """Weighted contribution of one category.

    Items are expected to already belong to `category`. Each valid item is
    normalised to its own scale first, so a 5-point quiz and a 100-point quiz
    count the same. Without overrides the contribution is
    mean(score / max_score) * weight. Items carrying their own weight
    contribute ratio * override, and the others split what is left of the
    category weight evenly. When the overrides add up to more than the
    category weight they are scaled down to fit it, so a category never
    contributes more than its weight.
    """
    ratios: List[Tuple[float, Optional[float]]] = []
    excluded = 0
    for item in items:
        ratio = _item_ratio(item)
        if ratio is None:
            excluded += 1
            continue
        ratios.append((ratio, _item_override(item)))

    if not ratios:
        return CategoryBreakdown(category, weight, 0, excluded, None, 0.0)

    mean_ratio = sum(r for r, _ in ratios) / len(ratios)
    overrides = [w for _, w in ratios if w is not None]

    if not overrides:
        weighted = mean_ratio * weight
    else:
        plain = [r for r, w in ratios if w is None]
        override_sum = sum(overrides)
        # Overrides share the category weight, they never add to it
        scale = weight / override_sum if override_sum > weight else 1.0
        weighted = sum(r * w * scale for r, w in ratios if w is not None)
        if plain:
            remaining = max(weight - override_sum, 0.0)
            weighted += sum(plain) / len(plain) * remaining

    return CategoryBreakdown(category, weight, len(ratios), excluded, mean_ratio, weighted)


# == Final percentage & letter mapping

def letter_grade_for(
    percentage: float,
    cutoffs: Optional[Mapping[str, float]] = None,
    failing_letter: str = DEFAULT_FAILING_LETTER,
) -> str:
    """Highest letter whose inclusive lower bound `percentage` reaches."""
    table = DEFAULT_LETTER_CUTOFFS if cutoffs is None else cutoffs
    for letter, lower_bound in sorted(table.items(), key=lambda kv: kv[1], reverse=True):
        if percentage + _CUTOFF_EPSILON >= lower_bound:
            return letter
    return failing_letter


# == Aggregate assembly

def aggregate(
    student_id: Any,
    course_id: Any,
    items: Iterable[Any],
    weight_config: Any = None,
    cutoffs: Optional[Mapping[str, float]] = None,
    failing_letter: str = DEFAULT_FAILING_LETTER,
) -> AggregationResult:
    """Aggregate one student's items in one course into an AggregationResult.

    Never raises for bad records: malformed items (unknown category,
    max_score <= 0, missing or negative numbers) are left out and counted in
    `excluded_items`. Weights that do not sum to 100 are used as-is; the
    result is not renormalised.
    """
    weights = resolve_weights(weight_config)

    partitions: Dict[Category, List[Any]] = {category: [] for category in Category}
    rejected = 0
    for item in items:
        category = parse_category(_read_field(item, "category"))
        if category is None:
            rejected += 1
            logger.warning(
                "Excluding assessment with unknown category %r (student=%s, course=%s)",
                _read_field(item, "category"), student_id, course_id,
            )
            continue
        partitions[category].append(item)

    breakdowns = tuple(
        reduce_category(partitions[category], category, weights[category])
        for category in Category
    )

    for breakdown in breakdowns:
        if breakdown.excluded_count:
            logger.warning(
                "Excluded %d malformed %s item(s) (student=%s, course=%s)",
                breakdown.excluded_count, breakdown.category.value, student_id, course_id,
            )
            rejected += breakdown.excluded_count

    category_weighted = {b.category.value: b.weighted for b in breakdowns}
    final_percentage = sum(category_weighted.values())

    return AggregationResult(
        course_id=course_id,
        student_id=student_id,
        category_weighted=category_weighted,
        final_percentage=final_percentage,
        letter_grade=letter_grade_for(final_percentage, cutoffs, failing_letter),
        weights={category.value: w for category, w in weights.items()},
        weight_sum=sum(weights.values()),
        categories=breakdowns,
        excluded_items=rejected,
    )
