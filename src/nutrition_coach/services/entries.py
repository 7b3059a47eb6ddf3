"""Meal and drink logging with nutrition scoring."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from nutrition_coach.domain.entries import (
    DrinkDraft,
    DrinkRecord,
    MealDraft,
    MealRecord,
)
from nutrition_coach.domain.nutrition import (
    BeverageCategory,
    FoodComponent,
    MacroSet,
    ScoreBreakdown,
)
from nutrition_coach.domain.scoring import calculate_score, explain
from nutrition_coach.domain.validation import validate_nutrition
from nutrition_coach.services.advice import AdviceResult, AdviceService
from nutrition_coach.services.client_settings import ClientSettingsService
from nutrition_coach.services.goals import GoalsService
from nutrition_coach.services.totals import (
    DailyTotalsService,
    EntryRepository,
    day_bounds,
)

_logger = logging.getLogger(__name__)


class EntryNotFoundError(LookupError):
    """Raised when a meal or drink does not exist for a client."""

    def __init__(self, kind: str, entry_id: int) -> None:
        super().__init__(f"{kind.capitalize()} {entry_id} not found")
        self.kind = kind
        self.entry_id = entry_id


class EntryWriter(Protocol):
    """Persistence interface for changing meal and drink entries."""

    def create_meal(
        self, client_id: int, draft: MealDraft, score: int, logged_at: datetime
    ) -> MealRecord:
        """Persist a scored meal."""

    def create_drink(
        self, client_id: int, draft: DrinkDraft, score: int, logged_at: datetime
    ) -> DrinkRecord:
        """Persist a scored standalone drink."""

    def get_meal(self, client_id: int, meal_id: int) -> MealRecord | None:
        """Return one of the client's meals if it exists."""

    def update_meal(
        self,
        client_id: int,
        meal_id: int,
        draft: MealDraft,
        score: int,
        logged_at: datetime,
    ) -> MealRecord:
        """Replace a meal's contents and score."""

    def delete_meal(self, client_id: int, meal_id: int) -> bool:
        """Delete a meal; return False if it did not exist."""

    def delete_drink(self, client_id: int, drink_id: int) -> bool:
        """Delete a standalone drink; return False if it did not exist."""


class EntryStore(EntryRepository, EntryWriter, Protocol):
    """Read and write access to logged entries."""


@dataclass
class EntryService:
    """Service that scores entries against goals and persists them."""

    goals_service: GoalsService
    totals_service: DailyTotalsService
    settings_service: ClientSettingsService
    advice_service: AdviceService
    repository: EntryStore

    def score_entry(
        self,
        client_id: int,
        macros: MacroSet,
        meal_time: datetime | None = None,
        beverage_category: BeverageCategory | None = None,
    ) -> int:
        """Score an entry without persisting it.

        ``meal_time`` defaults to now in the client's timezone.
        """
        goals = self.goals_service.get(client_id)
        local_time = self._local_time(client_id, meal_time)
        totals = self.totals_service.for_day(client_id, local_time)
        return calculate_score(macros, goals, totals, local_time, beverage_category)

    def save_meal(
        self, client_id: int, draft: MealDraft, logged_at: datetime | None = None
    ) -> MealRecord:
        """Score a meal together with its beverage and persist it."""
        _log_validation_warnings(client_id, draft.macros)
        local_time = self._local_time(client_id, logged_at)
        category = draft.beverage.category if draft.beverage else None
        score = self.score_entry(
            client_id, draft.combined_macros(), local_time, category
        )
        return self.repository.create_meal(client_id, draft, score, local_time)

    def log_drink(
        self, client_id: int, draft: DrinkDraft, logged_at: datetime | None = None
    ) -> DrinkRecord:
        """Score a standalone drink with its category and persist it."""
        local_time = self._local_time(client_id, logged_at)
        score = self.score_entry(client_id, draft.macros, local_time, draft.category)
        return self.repository.create_drink(client_id, draft, score, local_time)

    def update_meal(
        self,
        client_id: int,
        meal_id: int,
        draft: MealDraft,
        logged_at: datetime | None = None,
    ) -> MealRecord:
        """Replace a meal and re-score it against the rest of its day.

        The meal keeps its original time unless ``logged_at`` is given.
        """
        existing = self.repository.get_meal(client_id, meal_id)
        if existing is None:
            raise EntryNotFoundError("meal", meal_id)
        _log_validation_warnings(client_id, draft.macros)
        local_time = self._local_time(client_id, logged_at or existing.logged_at)
        goals = self.goals_service.get(client_id)
        totals = self.totals_service.for_day(
            client_id, local_time, exclude_meal_id=meal_id
        )
        category = draft.beverage.category if draft.beverage else None
        score = calculate_score(
            draft.combined_macros(), goals, totals, local_time, category
        )
        _logger.info(
            "Re-scored meal %s for client %s: %s -> %s",
            meal_id,
            client_id,
            existing.score,
            score,
        )
        return self.repository.update_meal(
            client_id, meal_id, draft, score, local_time
        )

    def delete_meal(self, client_id: int, meal_id: int) -> None:
        """Delete a meal or raise EntryNotFoundError."""
        if not self.repository.delete_meal(client_id, meal_id):
            raise EntryNotFoundError("meal", meal_id)

    def delete_drink(self, client_id: int, drink_id: int) -> None:
        """Delete a standalone drink or raise EntryNotFoundError."""
        if not self.repository.delete_drink(client_id, drink_id):
            raise EntryNotFoundError("drink", drink_id)

    def list_meals(self, client_id: int, days: int = 1) -> list[MealRecord]:
        """Return meals from the last ``days`` local days, including today."""
        start, end = day_bounds(self._local_time(client_id, None), days)
        return self.repository.list_meals(client_id, start, end)

    def list_drinks(self, client_id: int, days: int = 1) -> list[DrinkRecord]:
        """Return standalone drinks from the last ``days`` local days."""
        start, end = day_bounds(self._local_time(client_id, None), days)
        return self.repository.list_drinks(client_id, start, end)

    async def advice_for_meal(
        self,
        client_id: int,
        description: str,
        components: list[FoodComponent],
        macros: MacroSet,
    ) -> tuple[ScoreBreakdown, AdviceResult]:
        """Explain a meal against today's budget and ask for advice."""
        goals = self.goals_service.get(client_id)
        totals = self.totals_service.for_day(
            client_id, self._local_time(client_id, None)
        )
        breakdown = explain(macros, goals, totals)
        advice = await self.advice_service.generate(
            description, components, macros, goals, totals, breakdown
        )
        return breakdown, advice

    def _local_time(self, client_id: int, when: datetime | None) -> datetime:
        """Resolve a timestamp to the client's zone; naive values are local."""
        tz = ZoneInfo(self.settings_service.get_timezone(client_id))
        if when is None:
            return datetime.now(tz=tz)
        if when.tzinfo is None:
            return when.replace(tzinfo=tz)
        return when.astimezone(tz)


def _log_validation_warnings(client_id: int, macros: MacroSet) -> None:
    warnings = validate_nutrition(macros)
    if warnings:
        _logger.warning(
            "Nutrition validation warnings for client %s: %s",
            client_id,
            "; ".join(warnings),
        )
