"""Deterministic 1-5 nutrition scoring for meals and drinks.

Two scorers share the intrinsic quality helper:

* ``calculate_score`` is the authoritative, time-aware score persisted with
  every logged meal or drink. It blends quality (40%) with a contextual fit
  score (60%) that considers the time of day and what was already eaten.
* ``explain`` answers how a meal fits the plain daily budget. It is not
  time-aware, blends quality at 60% and progress at 40%, and returns every
  intermediate value so advice prompts can quote them.

Score bands are ordered tables evaluated top-down.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from nutrition_coach.domain.nutrition import (
    NUTRIENTS,
    BeverageCategory,
    MacroSet,
    NutritionGoals,
    ScoreBreakdown,
    category_modifier,
)

MIN_SCORE = 1
MAX_SCORE = 5
NEUTRAL_SCORE = 3
NEGLIGIBLE_CALORIES = 5

REFERENCE_MEAL_CALORIES = 300
CRITICAL_PROGRESS = 1.2
MODERATE_PROGRESS = 1.1
CRITICAL_NUTRIENTS = ("calories", "fat")
BUDGET_NUTRIENTS = ("calories", "fat", "carbs")

# (low, high, score), both bounds inclusive; first match wins.
_PROTEIN_RATIO_BANDS = (
    (0.20, 0.35, 5),
    (0.15, 0.20, 4),
    (0.10, 0.15, 3),
    (0.05, 0.10, 2),
)
# (minimum, score); first match wins.
_FIBRE_DENSITY_BANDS = (
    (1.5, 5),
    (1.0, 4),
    (0.5, 3),
    (0.25, 2),
)
# (maximum progress after meal, score)
_NUTRIENT_FIT_BANDS = (
    (1.0, 5),
    (1.1, 3),
)
# (maximum total overage above 120%, score), checked from the top.
_OVERAGE_BANDS = (
    (0.1, 3),
    (0.3, 2),
)
# (maximum share of the remaining budget, score)
_REMAINING_BUDGET_BANDS = (
    (0.4, 5),
    (0.7, 4),
    (1.0, 3),
)
_EXPLAIN_BUDGET_BANDS = (*_REMAINING_BUDGET_BANDS, (1.2, 2))


class TimePeriod(Enum):
    """Part of the day with its violation strictness multiplier."""

    MORNING = 0.7
    AFTERNOON = 1.0
    EVENING = 1.5
    LATE_NIGHT = 2.0

    @property
    def strictness(self) -> float:
        return self.value


@dataclass(frozen=True)
class QualityScore:
    """Intrinsic quality of a meal, independent of the day's context."""

    score: float
    protein_ratio: float
    fiber_per_100_cal: float
    is_balanced: bool


def time_period(meal_time: datetime) -> TimePeriod:
    """Classify the wall-clock hour of a meal."""
    hour = meal_time.hour
    if 6 <= hour < 12:
        return TimePeriod.MORNING
    if 12 <= hour < 18:
        return TimePeriod.AFTERNOON
    if 18 <= hour < 23:
        return TimePeriod.EVENING
    return TimePeriod.LATE_NIGHT


def score_quality(actual: MacroSet) -> QualityScore:
    """Average protein ratio, fibre density and macro balance sub-scores."""
    protein_calories = actual.protein * 4
    fat_calories = actual.fat * 9
    carb_calories = actual.carbs * 4

    protein_ratio = protein_calories / actual.calories if actual.calories > 0 else 0.0
    fiber_per_100_cal = (
        actual.fibre / actual.calories * 100 if actual.calories > 0 else 0.0
    )

    protein_score = _band_between(protein_ratio, _PROTEIN_RATIO_BANDS)
    fibre_score = _band_at_least(fiber_per_100_cal, _FIBRE_DENSITY_BANDS)

    total_macro_calories = protein_calories + fat_calories + carb_calories
    is_balanced = False
    if total_macro_calories > 0:
        fat_ratio = fat_calories / total_macro_calories
        carb_ratio = carb_calories / total_macro_calories
        is_balanced = 0.15 <= fat_ratio <= 0.40 and 0.30 <= carb_ratio <= 0.70
        if is_balanced:
            balance_score = 5
        elif fat_ratio < 0.10 or fat_ratio > 0.50:
            balance_score = 2
        elif carb_ratio < 0.20 or carb_ratio > 0.80:
            balance_score = 2
        else:
            balance_score = 3
    else:
        balance_score = NEUTRAL_SCORE

    return QualityScore(
        score=(protein_score + fibre_score + balance_score) / 3,
        protein_ratio=protein_ratio,
        fiber_per_100_cal=fiber_per_100_cal,
        is_balanced=is_balanced,
    )


def calculate_score(
    actual: MacroSet,
    goals: NutritionGoals,
    todays_totals: MacroSet,
    meal_time: datetime,
    beverage_category: BeverageCategory | None = None,
) -> int:
    """Return the time-aware 1-5 score for a meal or drink.

    ``todays_totals`` is everything logged today before this entry and
    ``meal_time`` must already be in the client's local timezone.
    """
    if actual.calories < NEGLIGIBLE_CALORIES:
        return NEUTRAL_SCORE

    quality = score_quality(actual)
    context = _score_context(actual, goals, todays_totals, time_period(meal_time))
    blended = quality.score * 0.4 + context * 0.6
    blended += category_modifier(beverage_category)
    return _to_score(blended)


def explain(
    actual: MacroSet, goals: NutritionGoals, todays_totals: MacroSet
) -> ScoreBreakdown:
    """Break a meal down against the plain daily budget."""
    quality = score_quality(actual)
    remaining = MacroSet(
        **{
            nutrient: goals.target(nutrient) - todays_totals.value(nutrient)
            for nutrient in NUTRIENTS
        }
    )

    progress_total = 0
    over_budget: list[str] = []
    for nutrient in NUTRIENTS:
        budget = remaining.value(nutrient)
        if budget <= 0:
            progress_total += MIN_SCORE
            over_budget.append(nutrient)
            continue
        score = _band_share(actual.value(nutrient), budget, _EXPLAIN_BUDGET_BANDS)
        if score == MIN_SCORE:
            over_budget.append(nutrient)
        progress_total += score
    progress_score = progress_total / len(NUTRIENTS)

    return ScoreBreakdown(
        final_score=_to_score(quality.score * 0.6 + progress_score * 0.4),
        quality_score=quality.score,
        progress_score=progress_score,
        protein_ratio=quality.protein_ratio,
        fiber_per_100_cal=quality.fiber_per_100_cal,
        is_balanced=quality.is_balanced,
        remaining=remaining,
        over_budget=over_budget,
    )


def _score_context(
    actual: MacroSet,
    goals: NutritionGoals,
    todays_totals: MacroSet,
    period: TimePeriod,
) -> float:
    current = {
        nutrient: todays_totals.value(nutrient) / goals.target(nutrient)
        for nutrient in NUTRIENTS
    }
    after = {
        nutrient: (todays_totals.value(nutrient) + actual.value(nutrient))
        / goals.target(nutrient)
        for nutrient in NUTRIENTS
    }
    violations = [
        nutrient
        for nutrient in CRITICAL_NUTRIENTS
        if after[nutrient] > CRITICAL_PROGRESS
    ]

    budget_fit = _score_budget_fit(actual, goals, todays_totals, current, period)
    violation_fit = _score_violations(violations, after, period)
    overage_fit = _score_overage(actual, current, after)
    return (budget_fit + violation_fit + overage_fit) / 3


def _score_budget_fit(
    actual: MacroSet,
    goals: NutritionGoals,
    todays_totals: MacroSet,
    current: dict[str, float],
    period: TimePeriod,
) -> float:
    avg_progress = sum(current[nutrient] for nutrient in BUDGET_NUTRIENTS) / len(
        BUDGET_NUTRIENTS
    )
    calorie_intensity = actual.calories / REFERENCE_MEAL_CALORIES
    late = period in (TimePeriod.EVENING, TimePeriod.LATE_NIGHT)

    if avg_progress >= 1.0 and period is TimePeriod.LATE_NIGHT:
        return 1
    if avg_progress >= 0.9 and late:
        if calorie_intensity > 1:
            return 1
        return 4
    if avg_progress >= 0.8 and period is TimePeriod.EVENING:
        if calorie_intensity > 2:
            return 1
        if calorie_intensity > 1:
            return 2
        return 5
    if avg_progress < 0.5 and period is TimePeriod.MORNING:
        return 5

    remaining = goals.calories_target - todays_totals.calories
    if remaining <= 0:
        return 1
    return _band_share(
        actual.calories, remaining, _REMAINING_BUDGET_BANDS, overflow=2
    )


def _score_violations(
    violations: list[str], after: dict[str, float], period: TimePeriod
) -> float:
    if violations:
        penalty = len(violations) * 3 * period.strictness
        return max(MIN_SCORE, MAX_SCORE - penalty)
    fat_fit = _band_at_most(after["fat"], _NUTRIENT_FIT_BANDS)
    carb_fit = _band_at_most(after["carbs"], _NUTRIENT_FIT_BANDS)
    return (fat_fit + carb_fit) / 2


def _score_overage(
    actual: MacroSet, current: dict[str, float], after: dict[str, float]
) -> float:
    calories_after = after["calories"]
    fat_after = after["fat"]
    if calories_after > CRITICAL_PROGRESS or fat_after > CRITICAL_PROGRESS:
        total_overage = max(0.0, calories_after - CRITICAL_PROGRESS) + max(
            0.0, fat_after - CRITICAL_PROGRESS
        )
        return _band_at_most(total_overage, _OVERAGE_BANDS)
    if calories_after > MODERATE_PROGRESS or fat_after > MODERATE_PROGRESS:
        return 3
    if current["protein"] < 0.8 and actual.protein > 20:
        return 5
    return 4


def _band_between(value: float, bands: tuple[tuple[float, float, int], ...]) -> int:
    for low, high, score in bands:
        if low <= value <= high:
            return score
    return MIN_SCORE


def _band_at_least(value: float, bands: tuple[tuple[float, int], ...]) -> int:
    for minimum, score in bands:
        if value >= minimum:
            return score
    return MIN_SCORE


def _band_at_most(value: float, bands: tuple[tuple[float, int], ...]) -> int:
    for maximum, score in bands:
        if value <= maximum:
            return score
    return MIN_SCORE


def _band_share(
    amount: float,
    budget: float,
    bands: tuple[tuple[float, int], ...],
    overflow: int = MIN_SCORE,
) -> int:
    """Score an amount by the share of a positive budget it uses."""
    for share, score in bands:
        if amount <= budget * share:
            return score
    return overflow


def _to_score(value: float) -> int:
    """Clamp to 1-5 and round halves up."""
    clamped = max(MIN_SCORE, min(MAX_SCORE, value))
    return int(math.floor(clamped + 0.5))
