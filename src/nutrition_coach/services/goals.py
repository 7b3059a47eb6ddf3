"""Nutrition goals service."""

import dataclasses
from dataclasses import dataclass
from typing import Protocol

from nutrition_coach.domain.nutrition import NutritionGoals

DEFAULT_GOALS = NutritionGoals(
    calories_target=2000,
    protein_target=150,
    fat_target=65,
    carbs_target=250,
    fibre_target=25,
    hydration_target_ml=2000,
)


class GoalsNotFoundError(LookupError):
    """Raised when a client has no nutrition goals."""

    def __init__(self, client_id: int) -> None:
        super().__init__(f"Nutrition goals not found for client {client_id}")
        self.client_id = client_id


class GoalsRepository(Protocol):
    """Persistence interface for nutrition goals."""

    def get_goals(self, client_id: int) -> NutritionGoals | None:
        """Return the client's goals if set."""

    def save_goals(self, client_id: int, goals: NutritionGoals) -> None:
        """Create or replace the client's goals."""


@dataclass
class GoalsService:
    """Service for reading and updating client goals."""

    repository: GoalsRepository

    def get(self, client_id: int) -> NutritionGoals:
        """Return the client's goals or raise GoalsNotFoundError."""
        goals = self.repository.get_goals(client_id)
        if goals is None:
            raise GoalsNotFoundError(client_id)
        return goals

    def update(self, client_id: int, changes: dict[str, float]) -> NutritionGoals:
        """Apply target changes, starting from defaults for new clients.

        Raises InvalidGoalsError if any macro target would not be positive.
        """
        current = self.repository.get_goals(client_id) or DEFAULT_GOALS
        updated = dataclasses.replace(current, **changes)
        self.repository.save_goals(client_id, updated)
        return updated
