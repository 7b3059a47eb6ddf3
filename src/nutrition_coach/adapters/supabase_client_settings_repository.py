"""Supabase repository for client settings."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_coach.services.client_settings import ClientSettingsRepository


@dataclass
class SupabaseClientSettingsRepository(ClientSettingsRepository):
    """Supabase implementation for client settings."""

    client: Client

    def get_timezone(self, client_id: int) -> str | None:
        """Return the stored timezone for a client."""
        response = (
            self.client.table("client_settings")
            .select("timezone")
            .eq("client_id", client_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("timezone")

    def set_timezone(self, client_id: int, timezone: str) -> None:
        """Create or update the client's timezone."""
        self.client.table("client_settings").upsert(
            {
                "client_id": client_id,
                "timezone": timezone,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="client_id",
        ).execute()
