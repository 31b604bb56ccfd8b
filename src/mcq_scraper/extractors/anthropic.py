"""Anthropic Claude extractor."""

from __future__ import annotations

import logging

import anthropic

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    JSON_SHAPE_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    ExtractionClient,
    ExtractionError,
)
from mcq_scraper.models import ExtractionOutcome

logger = logging.getLogger(__name__)


class AnthropicExtractor(ExtractionClient):
    name = "anthropic"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for the Anthropic extractor")
        self._client = anthropic.Anthropic(api_key=settings.anthropic_api_key)

    def _chat(self, system: str, user: str) -> str:
        """Send a chat request to Anthropic and return the response text."""
        response = self._client.messages.create(
            model=self.settings.claude_model,
            max_tokens=self.settings.max_output_tokens,
            system=system,
            messages=[{"role": "user", "content": user}],
            temperature=self.settings.temperature,
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

    def extract(
        self,
        content: str,
        base_locator: str | None = None,
    ) -> ExtractionOutcome:
        system = f"{SYSTEM_INSTRUCTION}\n\n{JSON_SHAPE_INSTRUCTION}"
        try:
            raw = self._chat(system, self._build_prompt(content, base_locator))
        except Exception as exc:
            logger.error("Anthropic request failed: %s", exc)
            raise ExtractionError(f"Anthropic request failed: {exc}") from exc
        return self._parse_response(raw)
