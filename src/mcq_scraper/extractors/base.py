"""Abstract base class for all extraction clients."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from mcq_scraper.cleaner import clean_html
from mcq_scraper.config import Settings
from mcq_scraper.models import ExtractionOutcome

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """\
You are an expert web scraper. Your task is to parse HTML to extract \
Multiple-Choice Questions (MCQs), their source exam, relevant images, and the \
next page URL. Adhere strictly to the JSON schema provided."""

# Spelled out for providers without native response schemas
JSON_SHAPE_INSTRUCTION = """\
Return ONLY valid JSON of the form:
{"mcqs": [{"question": "...", "options": ["...", "..."], \
"correctAnswer": "...", "examName": "...", "imageUrl": "... or null"}], \
"nextUrl": "... or null"}

- "question": full question text; keep sub/superscripts (e.g. x^2).
- "options": every option, in page order.
- "correctAnswer": exact text of the correct option from "options".
- "examName": exam or context shown below the question (e.g. "UPSC IAS, \
2012"), or "" if none.
- "imageUrl": absolute URL of a diagram or figure for the question; ignore \
logos, icons and placeholders; null if none.
- "nextUrl": absolute URL of the "Next" / "Next Page" link, or null."""

USER_PROMPT = (
    "From the provided HTML, extract all MCQs, including any relevant images "
    "and the exam name for each, and the URL for the next page."
)

BASE_URL_HINT = (
    "IMPORTANT: The base URL for this page is {base_url}. You MUST convert any "
    "relative image URLs (like '/path/image.png' or 'image.png') into absolute "
    "URLs using this base URL."
)


class ExtractionError(Exception):
    """Raised when extraction fails."""


class MalformedResponseError(ExtractionError):
    """The response could not be read as an extraction outcome."""


class EmptyResponseError(ExtractionError):
    """The service produced no usable output (refused, filtered or truncated)."""


class ExtractionClient(ABC):
    """Contract for services that turn page HTML into question records."""

    name: str

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @abstractmethod
    def extract(
        self,
        content: str,
        base_locator: str | None = None,
    ) -> ExtractionOutcome:
        """
        Extract question records and the next-page link from page content.

        Args:
            content: Raw page HTML.
            base_locator: URL the content came from, used to absolutize
                relative image URLs.

        Raises:
            MalformedResponseError: the reply did not match the outcome shape.
            EmptyResponseError: the service returned nothing usable.
            ExtractionError: the request itself failed.
        """
        ...

    def _build_prompt(self, content: str, base_locator: str | None) -> str:
        hint = BASE_URL_HINT.format(base_url=base_locator) if base_locator else ""
        return f"{USER_PROMPT} {hint}\n\nHTML:\n{clean_html(content)}"

    def _parse_response(self, raw: str | None) -> ExtractionOutcome:
        """Parse the service's JSON reply into an ExtractionOutcome."""
        text = (raw or "").strip()
        if not text:
            raise EmptyResponseError("API returned an empty response.")

        # Strip markdown code fences if present (```json ... ```)
        if text.startswith("```"):
            first_nl = text.find("\n")
            if first_nl != -1:
                text = text[first_nl + 1:]
            if text.rstrip().endswith("```"):
                text = text.rstrip()[:-3].rstrip()

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError(
                "Failed to parse the API response as JSON. The data might be malformed."
            ) from exc

        if not isinstance(parsed, dict) or not isinstance(
            parsed.get("mcqs", parsed.get("records")), list
        ):
            logger.error("Parsed data does not match the outcome structure: %.200s", text)
            raise MalformedResponseError("Received malformed data from the API.")

        try:
            return ExtractionOutcome.model_validate(parsed)
        except ValidationError as exc:
            raise MalformedResponseError(f"Received malformed data from the API: {exc}") from exc
