"""Nutrition domain models."""

from dataclasses import dataclass, field
from enum import StrEnum

NUTRIENTS = ("calories", "protein", "fat", "carbs", "fibre")


class InvalidGoalsError(ValueError):
    """Raised when a nutrition goal target is not strictly positive."""


@dataclass(frozen=True)
class MacroSet:
    """Calories and macronutrient grams for a meal, drink or day."""

    calories: float
    protein: float
    fat: float
    carbs: float
    fibre: float

    @classmethod
    def empty(cls) -> "MacroSet":
        """Return an all-zero macro set."""
        return cls(calories=0, protein=0, fat=0, carbs=0, fibre=0)

    def __add__(self, other: "MacroSet") -> "MacroSet":
        return MacroSet(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            fat=self.fat + other.fat,
            carbs=self.carbs + other.carbs,
            fibre=self.fibre + other.fibre,
        )

    def value(self, nutrient: str) -> float:
        """Return the amount for a nutrient name."""
        return float(getattr(self, nutrient))


@dataclass(frozen=True)
class NutritionGoals:
    """Daily nutrition targets for a client."""

    calories_target: float
    protein_target: float
    fat_target: float
    carbs_target: float
    fibre_target: float
    hydration_target_ml: float | None = None

    def __post_init__(self) -> None:
        for nutrient in NUTRIENTS:
            target = self.target(nutrient)
            if target <= 0:
                raise InvalidGoalsError(
                    f"{nutrient} target must be positive, got {target}"
                )

    def target(self, nutrient: str) -> float:
        """Return the daily target for a nutrient name."""
        return float(getattr(self, f"{nutrient}_target"))


class BeverageCategory(StrEnum):
    """Beverage category used to nudge drink scores."""

    WATER = "water"
    TEA_PLAIN = "tea_plain"
    COFFEE_BLACK = "coffee_black"
    HOT_BEVERAGE = "hot_beverage"
    JUICE_VEGETABLE = "juice_vegetable"
    JUICE_FRUIT = "juice_fruit"
    MILK = "milk"
    SMOOTHIE = "smoothie"
    SPORTS_DRINK = "sports_drink"
    ENERGY_DRINK = "energy_drink"
    SODA = "soda"
    DIET_SODA = "diet_soda"
    ALCOHOL_BEER = "alcohol_beer"
    ALCOHOL_WINE = "alcohol_wine"
    ALCOHOL_SPIRITS = "alcohol_spirits"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> "BeverageCategory | None":
        """Parse a stored category, mapping unknown values to OTHER."""
        if raw is None:
            return None
        cleaned = raw.strip().lower()
        if not cleaned:
            return None
        try:
            return cls(cleaned)
        except ValueError:
            return cls.OTHER


_CATEGORY_MODIFIERS: dict[BeverageCategory, float] = {
    BeverageCategory.ENERGY_DRINK: -2.0,
    BeverageCategory.SODA: -2.0,
    BeverageCategory.ALCOHOL_SPIRITS: -2.0,
    BeverageCategory.JUICE_VEGETABLE: 0.5,
    BeverageCategory.TEA_PLAIN: 0.5,
    BeverageCategory.WATER: 0.5,
}


def category_modifier(category: BeverageCategory | None) -> float:
    """Return the flat score adjustment for a beverage category."""
    if category is None:
        return 0.0
    return _CATEGORY_MODIFIERS.get(category, 0.0)


@dataclass(frozen=True)
class FoodComponent:
    """Single itemized component of a meal."""

    name: str
    macros: MacroSet


@dataclass(frozen=True)
class ScoreBreakdown:
    """Explanation of how a meal fits the plain daily budget."""

    final_score: int
    quality_score: float
    progress_score: float
    protein_ratio: float
    fiber_per_100_cal: float
    is_balanced: bool
    remaining: MacroSet
    over_budget: list[str] = field(default_factory=list)
