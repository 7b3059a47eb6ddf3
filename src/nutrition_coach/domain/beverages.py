"""Models for LLM beverage nutrition estimates."""

from pydantic import BaseModel, Field

from nutrition_coach.domain.nutrition import BeverageCategory


class BeverageNutritionPayload(BaseModel):
    """Structured output for a beverage nutrition estimate."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fibre: float = Field(ge=0.0)
    confidence: float = Field(ge=0.0, le=100.0)
    description: str
    category: BeverageCategory = BeverageCategory.OTHER
