"""Consistency checks for estimated nutrition values."""

from nutrition_coach.domain.nutrition import MacroSet

CALORIE_VARIANCE_PERCENT = 15


def macro_calories(macros: MacroSet) -> float:
    """Return calories implied by protein, carbs and fat."""
    return macros.protein * 4 + macros.carbs * 4 + macros.fat * 9


def validate_nutrition(macros: MacroSet) -> list[str]:
    """Return human-readable warnings for implausible estimates."""
    warnings: list[str] = []
    calculated = macro_calories(macros)
    if macros.calories > 0:
        diff_percent = abs(macros.calories - calculated) / macros.calories * 100
        if diff_percent > CALORIE_VARIANCE_PERCENT:
            warnings.append(
                f"Calorie mismatch: stated {macros.calories:.0f} kcal but macros "
                f"calculate to {calculated:.0f} kcal"
            )

    max_carbs = macros.calories / 4
    if macros.carbs > max_carbs:
        warnings.append(
            f"Carbs ({macros.carbs:g}g) exceed maximum possible from calories "
            f"({max_carbs:.0f}g)"
        )
    max_protein = macros.calories / 4
    if macros.protein > max_protein:
        warnings.append(
            f"Protein ({macros.protein:g}g) exceeds maximum possible from calories "
            f"({max_protein:.0f}g)"
        )
    max_fat = macros.calories / 9
    if macros.fat > max_fat:
        warnings.append(
            f"Fat ({macros.fat:g}g) exceeds maximum possible from calories "
            f"({max_fat:.0f}g)"
        )
    if macros.fibre > macros.carbs:
        warnings.append(
            f"Fibre ({macros.fibre:g}g) cannot exceed total carbs ({macros.carbs:g}g)"
        )
    return warnings
