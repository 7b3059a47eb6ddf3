"""OpenAI Responses API client for coaching text and estimates."""

import json
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from nutrition_coach.services.llm import LlmClient


@dataclass
class OpenAILlmClient(LlmClient):
    """LLM client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAILlmClient":
        """Create an OpenAI client with an explicit timeout.

        SDK retries are disabled; services apply their own bounded retry.
        """
        return cls(
            client=AsyncOpenAI(
                api_key=api_key,
                timeout=httpx.Timeout(timeout_seconds),
                max_retries=0,
            )
        )

    async def complete(self, *, model: str, system_prompt: str, prompt: str) -> str:
        """Return plain text output for a prompt."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=prompt,
        )
        return response.output_text or ""

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=prompt,
            text={
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()
