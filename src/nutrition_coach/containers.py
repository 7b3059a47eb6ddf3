"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_coach.adapters.openai_llm_client import OpenAILlmClient
from nutrition_coach.adapters.supabase_client_settings_repository import (
    SupabaseClientSettingsRepository,
)
from nutrition_coach.adapters.supabase_entry_repository import SupabaseEntryRepository
from nutrition_coach.adapters.supabase_goals_repository import SupabaseGoalsRepository
from nutrition_coach.config import Settings
from nutrition_coach.services.advice import AdviceService
from nutrition_coach.services.beverages import BeverageService
from nutrition_coach.services.client_settings import ClientSettingsService
from nutrition_coach.services.entries import EntryService
from nutrition_coach.services.goals import GoalsService
from nutrition_coach.services.totals import DailyTotalsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    goals_service: GoalsService
    settings_service: ClientSettingsService
    totals_service: DailyTotalsService
    entry_service: EntryService
    beverage_service: BeverageService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    goals_service = GoalsService(SupabaseGoalsRepository(supabase_client))
    settings_service = ClientSettingsService(
        SupabaseClientSettingsRepository(supabase_client),
        default_timezone=resolved_settings.default_timezone,
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    totals_service = DailyTotalsService(entry_repository)
    llm_client = OpenAILlmClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.llm_timeout_seconds,
    )
    advice_service = AdviceService(
        client=llm_client,
        model=resolved_settings.openai_model,
        retry_attempts=resolved_settings.llm_retry_attempts,
    )
    beverage_service = BeverageService(
        client=llm_client,
        model=resolved_settings.openai_model,
        retry_attempts=resolved_settings.llm_retry_attempts,
    )
    entry_service = EntryService(
        goals_service=goals_service,
        totals_service=totals_service,
        settings_service=settings_service,
        advice_service=advice_service,
        repository=entry_repository,
    )

    async def close_resources() -> None:
        await llm_client.close()

    return AppContainer(
        settings=resolved_settings,
        goals_service=goals_service,
        settings_service=settings_service,
        totals_service=totals_service,
        entry_service=entry_service,
        beverage_service=beverage_service,
        close_resources=close_resources,
    )
