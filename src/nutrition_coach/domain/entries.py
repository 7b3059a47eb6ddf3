"""Domain models for logged meals and drinks."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from nutrition_coach.domain.nutrition import BeverageCategory, FoodComponent, MacroSet


class MealType(StrEnum):
    """When in the day a meal was eaten."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class MealSource(StrEnum):
    """How a meal entry was captured."""

    MEAL_PHOTO = "meal_photo"
    NUTRITION_LABEL = "nutrition_label"
    TEXT_DESCRIPTION = "text_description"


@dataclass(frozen=True)
class BeverageDetails:
    """Drink logged together with a meal."""

    drink_type: str
    volume_ml: float
    macros: MacroSet
    category: BeverageCategory | None = None


@dataclass(frozen=True)
class MealDraft:
    """Meal data submitted for scoring and persistence."""

    meal_type: MealType
    macros: MacroSet
    description: str
    confidence: int | None = None
    beverage: BeverageDetails | None = None
    components: list[FoodComponent] = field(default_factory=list)
    source: MealSource = MealSource.MEAL_PHOTO
    notes: str | None = None

    def combined_macros(self) -> MacroSet:
        """Return food macros plus any accompanying beverage."""
        if self.beverage is None:
            return self.macros
        return self.macros + self.beverage.macros


@dataclass(frozen=True)
class MealRecord:
    """Meal row as stored."""

    id: int
    client_id: int
    logged_at: datetime
    meal_type: MealType
    macros: MacroSet
    score: int | None
    description: str = ""
    beverage: BeverageDetails | None = None
    components: list[FoodComponent] = field(default_factory=list)
    source: MealSource = MealSource.MEAL_PHOTO
    notes: str | None = None

    def combined_macros(self) -> MacroSet:
        """Return food macros plus any accompanying beverage."""
        if self.beverage is None:
            return self.macros
        return self.macros + self.beverage.macros


@dataclass(frozen=True)
class DrinkDraft:
    """Standalone drink submitted for scoring and persistence."""

    drink_type: str
    volume_ml: float
    macros: MacroSet
    category: BeverageCategory | None = None
    notes: str | None = None


@dataclass(frozen=True)
class DrinkRecord:
    """Drink row as stored."""

    id: int
    client_id: int
    logged_at: datetime
    drink_type: str
    volume_ml: float
    macros: MacroSet
    score: int | None
    category: BeverageCategory | None = None
    notes: str | None = None


@dataclass(frozen=True)
class BeverageEstimate:
    """LLM estimate of a drink's nutrition."""

    drink_type: str
    volume_ml: float
    macros: MacroSet
    confidence: int
    description: str
    category: BeverageCategory


@dataclass(frozen=True)
class DailySummary:
    """Everything a client logged on one local calendar day."""

    day: date
    totals: MacroSet
    hydration_ml: float = 0.0
