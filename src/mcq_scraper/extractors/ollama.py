"""Ollama extractor for local inference."""

from __future__ import annotations

import logging

import httpx

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    JSON_SHAPE_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    ExtractionClient,
    ExtractionError,
)
from mcq_scraper.models import ExtractionOutcome

logger = logging.getLogger(__name__)


class OllamaExtractor(ExtractionClient):
    name = "ollama"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._model = settings.ollama_model

    def _chat(self, system: str, user: str, *, num_ctx: int = 16384) -> str:
        """Send a chat request to Ollama and return the response text."""
        payload: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.settings.temperature,
                "num_ctx": num_ctx,
            },
        }
        with httpx.Client(timeout=600) as client:
            response = client.post(f"{self._base_url}/api/chat", json=payload)
            response.raise_for_status()

        return response.json().get("message", {}).get("content", "")

    def extract(
        self,
        content: str,
        base_locator: str | None = None,
    ) -> ExtractionOutcome:
        system = f"{SYSTEM_INSTRUCTION}\n\n{JSON_SHAPE_INSTRUCTION}"
        try:
            raw = self._chat(system, self._build_prompt(content, base_locator))
        except Exception as exc:
            logger.error("Ollama request failed: %s", exc)
            raise ExtractionError(f"Ollama request failed: {exc}") from exc
        return self._parse_response(raw)
