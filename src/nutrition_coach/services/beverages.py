"""Beverage nutrition estimation using LLMs."""

import logging
import math
from dataclasses import dataclass

from nutrition_coach.domain.beverages import BeverageNutritionPayload
from nutrition_coach.domain.entries import BeverageEstimate
from nutrition_coach.domain.nutrition import BeverageCategory, MacroSet
from nutrition_coach.services.llm import LlmClient, call_with_retry

_logger = logging.getLogger(__name__)

BEVERAGE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "description": "Total calories in kcal"},
        "protein": {"type": "number", "description": "Protein in grams"},
        "fat": {"type": "number", "description": "Fat in grams"},
        "carbs": {"type": "number", "description": "Carbohydrates in grams"},
        "fibre": {"type": "number", "description": "Fibre in grams"},
        "confidence": {"type": "number", "description": "Confidence 0-100"},
        "description": {
            "type": "string",
            "description": "Brief description and assumptions",
        },
        "category": {
            "type": "string",
            "enum": [category.value for category in BeverageCategory],
        },
    },
    "required": [
        "calories",
        "protein",
        "fat",
        "carbs",
        "fibre",
        "confidence",
        "description",
        "category",
    ],
    "additionalProperties": False,
}

BEVERAGE_SYSTEM_PROMPT = (
    "You are a nutrition database expert who provides accurate beverage "
    "nutrition estimates."
)

# Whole milk per ml, used when a milky drink comes back as zero calories.
_MILK_SHARE_OF_VOLUME = 0.12
_MILK_KCAL_PER_ML = 0.64
_MILK_PROTEIN_PER_ML = 0.033
_MILK_FAT_PER_ML = 0.033
_MILK_CARBS_PER_ML = 0.05
_FALLBACK_CONFIDENCE = 60

_MILK_WORDS = ("milk", "latte", "cappuccino", "cream")
_SUGAR_WORDS = ("sugar", "sweet", "honey")


@dataclass
class BeverageService:
    """Service that estimates drink nutrition and assigns a category."""

    client: LlmClient
    model: str
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.5

    async def estimate(self, drink_type: str, volume_ml: float) -> BeverageEstimate:
        """Estimate nutrition for a drink of a given volume."""
        raw = await call_with_retry(
            lambda: self.client.complete_json(
                model=self.model,
                system_prompt=BEVERAGE_SYSTEM_PROMPT,
                prompt=_build_prompt(drink_type, volume_ml),
                schema_name="beverage_nutrition",
                schema=BEVERAGE_SCHEMA,
            ),
            action="beverage_estimate",
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        category = raw.get("category")
        raw = {
            **raw,
            "category": BeverageCategory.parse(
                category if isinstance(category, str) else None
            )
            or BeverageCategory.OTHER,
        }
        payload = BeverageNutritionPayload.model_validate(raw)
        if payload.calories == 0 and _needs_milk_fallback(drink_type):
            _logger.warning(
                "LLM returned 0 kcal for milk drink, applying fallback: %s",
                drink_type,
            )
            payload = _milk_fallback(volume_ml, payload.category)

        return BeverageEstimate(
            drink_type=drink_type,
            volume_ml=volume_ml,
            macros=MacroSet(
                calories=_round_half_up(payload.calories),
                protein=_round_half_up(payload.protein, 1),
                fat=_round_half_up(payload.fat, 1),
                carbs=_round_half_up(payload.carbs, 1),
                fibre=_round_half_up(payload.fibre, 1),
            ),
            confidence=int(_round_half_up(payload.confidence)),
            description=payload.description,
            category=payload.category,
        )


def _needs_milk_fallback(drink_type: str) -> bool:
    """Return True for milky drinks that cannot plausibly be zero calories."""
    lowered = drink_type.lower().strip()
    has_milk = any(word in lowered for word in _MILK_WORDS)
    has_sugar = any(word in lowered for word in _SUGAR_WORDS)
    if lowered in {"water", "plain water"}:
        return False
    if ("tea" in lowered or "coffee" in lowered) and not has_milk and not has_sugar:
        return False
    return has_milk


def _milk_fallback(
    volume_ml: float, category: BeverageCategory
) -> BeverageNutritionPayload:
    milk_ml = volume_ml * _MILK_SHARE_OF_VOLUME
    return BeverageNutritionPayload(
        calories=_round_half_up(milk_ml * _MILK_KCAL_PER_ML),
        protein=milk_ml * _MILK_PROTEIN_PER_ML,
        fat=milk_ml * _MILK_FAT_PER_ML,
        carbs=milk_ml * _MILK_CARBS_PER_ML,
        fibre=0,
        confidence=_FALLBACK_CONFIDENCE,
        description=(
            f"Fallback estimate: assumed {milk_ml:.0f}ml whole milk in "
            f"{volume_ml:.0f}ml drink"
        ),
        category=category,
    )


def _build_prompt(drink_type: str, volume_ml: float) -> str:
    categories = ", ".join(category.value for category in BeverageCategory)
    return (
        "Estimate the nutritional content of the following beverage.\n\n"
        f"Beverage: {drink_type}\n"
        f"Volume: {volume_ml:g}ml\n\n"
        "Base the estimate on typical recipes and serving sizes, including "
        "common additions (sugar, milk type, syrups).\n"
        "Reference points:\n"
        "- Cappuccino (250ml) ~ 120 kcal, 6g protein, 4g fat, 12g carbs\n"
        "- Coca-Cola (330ml) ~ 140 kcal, 0g protein, 0g fat, 35g carbs\n"
        "- Orange juice (250ml) ~ 110 kcal, 2g protein, 0g fat, 26g carbs\n"
        "- Black tea (250ml) ~ 2 kcal\n"
        "- Water (any volume) = 0 kcal\n\n"
        "Rules:\n"
        "- Scale nutrition proportionally to the volume provided.\n"
        "- Only return zero calories for plain water, black tea, black coffee "
        "or diet/zero-calorie sodas.\n"
        "- Any drink containing milk, cream, sugar or juice must have "
        "calories > 0.\n"
        "- For tea or coffee with milk assume no more than 15% of the volume "
        "is milk unless stated.\n"
        "- Ambiguous drinks like 'coffee' are black unless milk or sugar is "
        "mentioned.\n"
        "- Confidence: 100 for water, 70-80 for common drinks, 50-60 for "
        "unusual drinks.\n"
        f"- Category must be one of: {categories}."
    )


def _round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for non-negative values."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale
