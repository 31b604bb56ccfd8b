"""Extractor registry and factory with lazy imports."""

from __future__ import annotations

import importlib

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    EmptyResponseError,
    ExtractionClient,
    ExtractionError,
    MalformedResponseError,
)

__all__ = [
    "EmptyResponseError",
    "ExtractionClient",
    "ExtractionError",
    "MalformedResponseError",
    "get_extractor",
    "list_extractors",
]

_EXTRACTOR_REGISTRY: dict[str, str] = {
    "gemini": "mcq_scraper.extractors.gemini.GeminiExtractor",
    "openai": "mcq_scraper.extractors.openai.OpenAIExtractor",
    "anthropic": "mcq_scraper.extractors.anthropic.AnthropicExtractor",
    "ollama": "mcq_scraper.extractors.ollama.OllamaExtractor",
}


def get_extractor(name: str, settings: Settings) -> ExtractionClient:
    """Instantiate an extractor by name. Uses lazy imports."""
    if name not in _EXTRACTOR_REGISTRY:
        available = ", ".join(sorted(_EXTRACTOR_REGISTRY))
        raise ValueError(f"Unknown extractor '{name}'. Available: {available}")

    module_path, class_name = _EXTRACTOR_REGISTRY[name].rsplit(".", 1)
    module = importlib.import_module(module_path)
    extractor_class = getattr(module, class_name)
    return extractor_class(settings)


def list_extractors() -> list[str]:
    return sorted(_EXTRACTOR_REGISTRY)
