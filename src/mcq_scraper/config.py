"""Centralized configuration loaded from .env."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_ERROR_MARKER = "The page is temporarily unavailable"


def _load_env() -> None:
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv()


def _split_routes(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    # Extraction provider keys
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    claude_model: str = "claude-haiku-4-5-20251001"

    # Ollama config
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "phi4-mini"

    default_extractor: str = "gemini"
    temperature: float = 0.0
    max_output_tokens: int = 8192

    # Relay routes; empty = built-in pool
    proxy_routes: tuple[str, ...] = ()
    proxy_error_marker: str = DEFAULT_ERROR_MARKER
    fetch_timeout: float = 20.0

    # Seconds between pages to stay under rate limits
    page_delay: float = 2.0

    results_path: str = ".mcq_scraper/results.json"

    @classmethod
    def from_env(cls) -> Settings:
        _load_env()
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", "") or os.getenv("API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            claude_model=os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            ollama_model=os.getenv("OLLAMA_MODEL", "phi4-mini"),
            default_extractor=os.getenv("DEFAULT_EXTRACTOR", "gemini"),
            temperature=float(os.getenv("TEMPERATURE", "0.0")),
            max_output_tokens=int(os.getenv("MAX_OUTPUT_TOKENS", "8192")),
            proxy_routes=_split_routes(os.getenv("PROXY_ROUTES", "")),
            proxy_error_marker=os.getenv("PROXY_ERROR_MARKER", DEFAULT_ERROR_MARKER),
            fetch_timeout=float(os.getenv("FETCH_TIMEOUT", "20")),
            page_delay=float(os.getenv("PAGE_DELAY", "2.0")),
            results_path=os.getenv("RESULTS_PATH", ".mcq_scraper/results.json"),
        )
