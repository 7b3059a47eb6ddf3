"""LLM client interface shared by advice and beverage services."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class LlmClient(Protocol):
    """Interface for text and structured LLM completions."""

    async def complete(self, *, model: str, system_prompt: str, prompt: str) -> str:
        """Return a plain text completion."""

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return a completion parsed against a strict JSON schema."""


async def call_with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    action: str,
    retry_attempts: int,
    retry_delay_seconds: float,
) -> T:
    """Call an async function, retrying a bounded number of times."""
    attempt = 0
    while True:
        try:
            return await func()
        except Exception as exc:
            attempt += 1
            if attempt > retry_attempts:
                raise
            _logger.warning(
                "LLM %s failed (attempt %s/%s): %s",
                action,
                attempt,
                retry_attempts + 1,
                exc,
            )
            await asyncio.sleep(retry_delay_seconds)
