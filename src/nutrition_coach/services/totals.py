"""Daily nutrition totals for scoring."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from nutrition_coach.domain.entries import DailySummary, DrinkRecord, MealRecord
from nutrition_coach.domain.nutrition import MacroSet


class EntryRepository(Protocol):
    """Persistence interface for logged meals and drinks."""

    def list_meals(
        self, client_id: int, start: datetime, end: datetime
    ) -> list[MealRecord]:
        """Return meals logged within a time range."""

    def list_drinks(
        self, client_id: int, start: datetime, end: datetime
    ) -> list[DrinkRecord]:
        """Return standalone drinks logged within a time range."""


def day_bounds(local_time: datetime, days: int = 1) -> tuple[datetime, datetime]:
    """Return UTC bounds for ``days`` local days ending on ``local_time``."""
    today_start = local_time.replace(hour=0, minute=0, second=0, microsecond=0)
    start = today_start - timedelta(days=days - 1)
    end = today_start + timedelta(days=1)
    return start.astimezone(UTC), end.astimezone(UTC)


@dataclass
class DailyTotalsService:
    """Service that sums everything a client logged on a local day."""

    repository: EntryRepository

    def for_day(
        self,
        client_id: int,
        local_time: datetime,
        exclude_meal_id: int | None = None,
    ) -> MacroSet:
        """Return totals for the local calendar day containing ``local_time``.

        ``exclude_meal_id`` leaves one meal out, so an edited meal is not
        counted against itself when it is re-scored.
        """
        return self.summary_for_day(client_id, local_time, exclude_meal_id).totals

    def summary_for_day(
        self,
        client_id: int,
        local_time: datetime,
        exclude_meal_id: int | None = None,
    ) -> DailySummary:
        """Return macros and hydration for the local day of ``local_time``."""
        start, end = day_bounds(local_time)
        meals = self.repository.list_meals(client_id, start, end)
        drinks = self.repository.list_drinks(client_id, start, end)
        return _summarise(
            local_time.date(), local_time.tzinfo, meals, drinks, exclude_meal_id
        )

    def today(self, client_id: int, timezone_name: str) -> DailySummary:
        """Return today's summary in the client's timezone."""
        return self.summary_for_day(
            client_id, datetime.now(tz=ZoneInfo(timezone_name))
        )

    def history(
        self, client_id: int, timezone_name: str, days: int = 7
    ) -> list[DailySummary]:
        """Return one summary per local day, oldest first, ending today.

        Days without entries are included with zero totals.
        """
        now = datetime.now(tz=ZoneInfo(timezone_name))
        start, end = day_bounds(now, days)
        meals = self.repository.list_meals(client_id, start, end)
        drinks = self.repository.list_drinks(client_id, start, end)
        today = now.date()
        return [
            _summarise(today - timedelta(days=offset), now.tzinfo, meals, drinks)
            for offset in range(days - 1, -1, -1)
        ]


def _summarise(
    day: date,
    tz: tzinfo | None,
    meals: list[MealRecord],
    drinks: list[DrinkRecord],
    exclude_meal_id: int | None = None,
) -> DailySummary:
    total = MacroSet.empty()
    hydration = 0.0
    for meal in meals:
        if meal.id == exclude_meal_id or meal.logged_at.astimezone(tz).date() != day:
            continue
        total = total + meal.combined_macros()
        if meal.beverage is not None:
            hydration += meal.beverage.volume_ml
    for drink in drinks:
        if drink.logged_at.astimezone(tz).date() != day:
            continue
        total = total + drink.macros
        hydration += drink.volume_ml
    return DailySummary(day=day, totals=total, hydration_ml=hydration)
