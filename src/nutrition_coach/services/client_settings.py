"""Client settings service."""

from dataclasses import dataclass
from typing import Protocol


class ClientSettingsRepository(Protocol):
    """Persistence interface for client settings."""

    def get_timezone(self, client_id: int) -> str | None:
        """Return the client's timezone if set."""

    def set_timezone(self, client_id: int, timezone: str) -> None:
        """Update the client's timezone."""


@dataclass
class ClientSettingsService:
    """Service for client settings."""

    repository: ClientSettingsRepository
    default_timezone: str = "UTC"

    def get_timezone(self, client_id: int) -> str:
        """Return the client timezone or the default if unset."""
        return self.repository.get_timezone(client_id) or self.default_timezone

    def set_timezone(self, client_id: int, timezone: str) -> None:
        """Persist a client's timezone."""
        self.repository.set_timezone(client_id, timezone)
