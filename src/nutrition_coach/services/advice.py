"""Improvement advice generated from a score breakdown."""

import logging
from dataclasses import dataclass

from nutrition_coach.domain.nutrition import (
    FoodComponent,
    MacroSet,
    NutritionGoals,
    ScoreBreakdown,
)
from nutrition_coach.services.llm import LlmClient, call_with_retry

_logger = logging.getLogger(__name__)

ADVICE_SYSTEM_PROMPT = (
    "You are a nutrition coach who provides direct, concise advice in British "
    "English. Be factual and practical without excessive praise."
)
FALLBACK_ADVICE = "Unable to generate advice at this time."


@dataclass(frozen=True)
class AdviceResult:
    """Advice text or the reason it could not be produced."""

    advice: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.advice is not None


@dataclass
class AdviceService:
    """Service that turns a score breakdown into coaching advice."""

    client: LlmClient
    model: str
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.5

    async def generate(  # noqa: PLR0913
        self,
        meal_description: str,
        components: list[FoodComponent],
        actual: MacroSet,
        goals: NutritionGoals,
        todays_totals: MacroSet,
        breakdown: ScoreBreakdown,
    ) -> AdviceResult:
        """Ask the LLM for 2-3 recommendations to improve a meal's score."""
        prompt = build_advice_prompt(
            meal_description, components, actual, goals, todays_totals, breakdown
        )
        try:
            text = await call_with_retry(
                lambda: self.client.complete(
                    model=self.model,
                    system_prompt=ADVICE_SYSTEM_PROMPT,
                    prompt=prompt,
                ),
                action="advice",
                retry_attempts=self.retry_attempts,
                retry_delay_seconds=self.retry_delay_seconds,
            )
        except Exception as exc:
            _logger.exception("Advice generation failed")
            return AdviceResult(error=f"{type(exc).__name__}: {exc}")
        if not text or not text.strip():
            return AdviceResult(error="LLM returned an empty response")
        return AdviceResult(advice=text.strip())


def build_advice_prompt(  # noqa: PLR0913
    meal_description: str,
    components: list[FoodComponent],
    actual: MacroSet,
    goals: NutritionGoals,
    todays_totals: MacroSet,
    breakdown: ScoreBreakdown,
) -> str:
    """Assemble the coaching prompt from meal context and breakdown fields."""
    component_lines = [
        f"- {component.name}: {component.macros.calories:g} kcal, "
        f"{component.macros.protein:g}g protein, {component.macros.fat:g}g fat, "
        f"{component.macros.carbs:g}g carbs, {component.macros.fibre:g}g fibre"
        for component in components
    ] or ["- (no itemised components)"]

    analysis = [
        f"- Overall Score: {breakdown.final_score}/5",
        f"- Intrinsic Quality Score: {breakdown.quality_score:.1f}/5 (60% weight)",
        f"- Daily Progress Score: {breakdown.progress_score:.1f}/5 (40% weight)",
        f"- Protein Ratio: {breakdown.protein_ratio * 100:.1f}% (optimal: 20-35%)",
        f"- Fibre Density: {breakdown.fiber_per_100_cal:.1f}g per 100 kcal "
        "(optimal: 1.5+)",
        f"- Macro Balance: {'Balanced' if breakdown.is_balanced else 'Imbalanced'}",
    ]
    if breakdown.over_budget:
        analysis.append(f"- Over Budget: {', '.join(breakdown.over_budget)}")

    goal_values = MacroSet(
        calories=goals.calories_target,
        protein=goals.protein_target,
        fat=goals.fat_target,
        carbs=goals.carbs_target,
        fibre=goals.fibre_target,
    )
    sections = [
        "You are a nutrition coach providing personalised advice to help a "
        "client improve their meal score.",
        f"**Current Meal:**\n{meal_description}",
        "**Food Components:**\n" + "\n".join(component_lines),
        "**Meal Totals:**\n" + _format_macros(actual),
        "**Daily Targets:**\n" + _format_macros(goal_values),
        "**Already Consumed Today (before this meal):**\n"
        + _format_macros(todays_totals),
        "**Remaining Budget for Today:**\n" + _format_macros(breakdown.remaining),
        "**Score Analysis:**\n" + "\n".join(analysis),
        "**Your Task:**\n"
        "Provide 2-3 specific, actionable recommendations to improve this "
        "meal's score.",
        "**Guidelines:**\n"
        "- Use British English spelling (fibre, optimise, etc.)\n"
        "- Be direct and concise - avoid excessive praise or enthusiasm\n"
        "- Focus on practical changes: immediate adjustments to this meal, next "
        "meal planning, or ingredient swaps\n"
        "- Consider the client's remaining daily budget\n"
        "- If quality score is low, focus on protein/fibre improvements\n"
        "- If progress score is low, focus on portion control\n"
        "- Use simple numbered list format (1., 2., 3.) with no asterisks or "
        "bold formatting\n"
        "- Keep total response under 100 words",
        "Generate the advice now:",
    ]
    return "\n\n".join(sections)


def _format_macros(macros: MacroSet) -> str:
    return (
        f"- Calories: {macros.calories:g} kcal\n"
        f"- Protein: {macros.protein:g}g\n"
        f"- Fat: {macros.fat:g}g\n"
        f"- Carbs: {macros.carbs:g}g\n"
        f"- Fibre: {macros.fibre:g}g"
    )
