"""Google Gemini extractor with a native JSON response schema."""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    SYSTEM_INSTRUCTION,
    EmptyResponseError,
    ExtractionClient,
    ExtractionError,
)
from mcq_scraper.models import ExtractionOutcome

logger = logging.getLogger(__name__)

THINKING_BUDGET = 2048

_STRING = types.Type.STRING

EXTRACTION_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "mcqs": types.Schema(
            type=types.Type.ARRAY,
            description="An array of all the multiple choice questions found on the page.",
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "question": types.Schema(
                        type=_STRING,
                        description=(
                            "The full text of the question. Preserve any formatting like "
                            "subscripts or superscripts if possible (e.g. x^2)."
                        ),
                    ),
                    "options": types.Schema(
                        type=types.Type.ARRAY,
                        items=types.Schema(type=_STRING),
                        description="Each multiple-choice option, in page order.",
                    ),
                    "correctAnswer": types.Schema(
                        type=_STRING,
                        description="The exact text of the correct answer from the options list.",
                    ),
                    "examName": types.Schema(
                        type=_STRING,
                        description=(
                            "The name of the examination or context usually found below the "
                            "question text (e.g. 'UPSC IAS, 2012'), or an empty string."
                        ),
                    ),
                    "imageUrl": types.Schema(
                        type=_STRING,
                        nullable=True,
                        description=(
                            "Absolute URL of a diagram or figure relevant to the question. "
                            "Ignore logos, icons, and placeholders. Null if none."
                        ),
                    ),
                },
                required=["question", "options", "correctAnswer", "examName"],
            ),
        ),
        "nextUrl": types.Schema(
            type=_STRING,
            nullable=True,
            description=(
                'The absolute URL for the "Next" or "Next Page" button, if one exists. '
                "Null if there is no next button."
            ),
        ),
    },
    required=["mcqs"],
)


def _empty_reason(response) -> str:
    """Explain an empty Gemini reply from its block / finish reasons."""
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None) if feedback else None
    if block_reason:
        return f"Request was blocked by the API. Reason: {getattr(block_reason, 'name', block_reason)}."

    candidates = getattr(response, "candidates", None) or []
    finish_reason = getattr(candidates[0], "finish_reason", None) if candidates else None
    if finish_reason:
        name = getattr(finish_reason, "name", str(finish_reason))
        if name != "STOP":
            return f"The model stopped generating for an unexpected reason: {name}."
    return "API returned an empty response."


class GeminiExtractor(ExtractionClient):
    name = "gemini"

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required for the Gemini extractor")
        self._client = genai.Client(api_key=settings.gemini_api_key)
        self._model = settings.gemini_model

    def extract(
        self,
        content: str,
        base_locator: str | None = None,
    ) -> ExtractionOutcome:
        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=self.settings.temperature,
            response_mime_type="application/json",
            response_schema=EXTRACTION_SCHEMA,
            max_output_tokens=self.settings.max_output_tokens,
            thinking_config=types.ThinkingConfig(thinking_budget=THINKING_BUDGET),
        )
        try:
            response = self._client.models.generate_content(
                model=self._model,
                config=config,
                contents=self._build_prompt(content, base_locator),
            )
        except Exception as exc:
            logger.error("Gemini request failed: %s", exc)
            raise ExtractionError(f"Gemini request failed: {exc}") from exc

        text = (response.text or "").strip()
        if not text:
            raise EmptyResponseError(_empty_reason(response))
        return self._parse_response(text)
