"""OpenAI extractor using JSON mode."""

from __future__ import annotations

import logging

from openai import OpenAI

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    JSON_SHAPE_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    ExtractionClient,
    ExtractionError,
)
from mcq_scraper.models import ExtractionOutcome

logger = logging.getLogger(__name__)


class OpenAIExtractor(ExtractionClient):
    name = "openai"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the OpenAI extractor")
        self._client = OpenAI(api_key=settings.openai_api_key)

    def _chat(self, system: str, user: str) -> str:
        """Send a chat request to OpenAI and return the response text."""
        response = self._client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_output_tokens,
            response_format={"type": "json_object"},
        )
        return response.choices[0].message.content or ""

    def extract(
        self,
        content: str,
        base_locator: str | None = None,
    ) -> ExtractionOutcome:
        system = f"{SYSTEM_INSTRUCTION}\n\n{JSON_SHAPE_INSTRUCTION}"
        try:
            raw = self._chat(system, self._build_prompt(content, base_locator))
        except Exception as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ExtractionError(f"OpenAI request failed: {exc}") from exc
        return self._parse_response(raw)
