"""Pydantic models for API payloads."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from nutrition_coach.domain.entries import DailySummary, MealSource, MealType
from nutrition_coach.domain.nutrition import FoodComponent, MacroSet, NutritionGoals


class MacroPayload(BaseModel):
    """Calories and macronutrient grams."""

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    fat: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fibre: float = Field(ge=0)

    def to_macros(self) -> MacroSet:
        return MacroSet(
            calories=self.calories,
            protein=self.protein,
            fat=self.fat,
            carbs=self.carbs,
            fibre=self.fibre,
        )

    @classmethod
    def from_macros(cls, macros: MacroSet) -> "MacroPayload":
        return cls(
            calories=macros.calories,
            protein=macros.protein,
            fat=macros.fat,
            carbs=macros.carbs,
            fibre=macros.fibre,
        )


class ComponentPayload(MacroPayload):
    """Itemized meal component."""

    name: str

    def to_component(self) -> FoodComponent:
        return FoodComponent(name=self.name, macros=self.to_macros())


class GoalsPayload(BaseModel):
    """Daily nutrition targets."""

    calories_target: float
    protein_target: float
    fat_target: float
    carbs_target: float
    fibre_target: float
    hydration_target_ml: float | None = None

    @classmethod
    def from_goals(cls, goals: NutritionGoals) -> "GoalsPayload":
        return cls(
            calories_target=goals.calories_target,
            protein_target=goals.protein_target,
            fat_target=goals.fat_target,
            carbs_target=goals.carbs_target,
            fibre_target=goals.fibre_target,
            hydration_target_ml=goals.hydration_target_ml,
        )


class GoalsUpdatePayload(BaseModel):
    """Partial update of daily nutrition targets."""

    calories_target: float | None = Field(default=None, gt=0)
    protein_target: float | None = Field(default=None, gt=0)
    fat_target: float | None = Field(default=None, gt=0)
    carbs_target: float | None = Field(default=None, gt=0)
    fibre_target: float | None = Field(default=None, gt=0)
    hydration_target_ml: float | None = Field(default=None, gt=0)


class TimezonePayload(BaseModel):
    """Client timezone update."""

    timezone: str


class ScoreRequest(MacroPayload):
    """Score an entry without saving it."""

    logged_at: datetime | None = None
    beverage_category: str | None = None


class BeveragePayload(MacroPayload):
    """Beverage logged with a meal."""

    drink_type: str
    volume_ml: float = Field(gt=0)
    category: str | None = None


class MealRequest(MacroPayload):
    """Meal submitted for scoring and saving."""

    meal_type: MealType
    description: str
    confidence: int | None = Field(default=None, ge=0, le=100)
    beverage: BeveragePayload | None = None
    components: list[ComponentPayload] = Field(default_factory=list)
    source: MealSource = MealSource.MEAL_PHOTO
    notes: str | None = None
    logged_at: datetime | None = None


class DrinkRequest(MacroPayload):
    """Standalone drink submitted for scoring and saving."""

    drink_type: str
    volume_ml: float = Field(gt=0)
    category: str | None = None
    notes: str | None = None
    logged_at: datetime | None = None


class AdviceRequest(MacroPayload):
    """Meal to explain and coach on."""

    description: str
    components: list[ComponentPayload] = Field(default_factory=list)


class BeverageEstimateRequest(BaseModel):
    """Drink to estimate nutrition for."""

    drink_type: str = Field(min_length=1)
    volume_ml: float = Field(gt=0)


class DailySummaryPayload(MacroPayload):
    """Macros and hydration for one local day."""

    day: date
    hydration_ml: float = Field(ge=0)

    @classmethod
    def from_summary(cls, summary: DailySummary) -> "DailySummaryPayload":
        return cls(
            day=summary.day,
            hydration_ml=summary.hydration_ml,
            **MacroPayload.from_macros(summary.totals).model_dump(),
        )
