"""Shared fixtures for mcq-scraper tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from mcq_scraper.config import Settings
from mcq_scraper.models import ExtractionOutcome, Record


@pytest.fixture()
def settings() -> Settings:
    """Settings with dummy keys and no inter-page pause."""
    return Settings(
        gemini_api_key="test-gemini-key",
        openai_api_key="test-openai-key",
        anthropic_api_key="test-anthropic-key",
        page_delay=0,
    )


def make_record(question: str, answer: str = "A") -> Record:
    return Record(
        question=question,
        options=["A", "B", "C", "D"],
        correct_answer=answer,
        exam_name="Sample Exam, 2020",
    )


def make_outcome(*questions: str, next_locator: str | None = None) -> ExtractionOutcome:
    return ExtractionOutcome(
        records=[make_record(q) for q in questions],
        next_locator=next_locator,
    )


@pytest.fixture()
def fetcher() -> MagicMock:
    mock = MagicMock()
    mock.fetch.return_value = "<html><body>page</body></html>"
    return mock


@pytest.fixture()
def extractor() -> MagicMock:
    mock = MagicMock()
    mock.name = "fake"
    mock.extract.return_value = make_outcome("Q1")
    return mock


SAMPLE_HTML = """\
<!DOCTYPE html>
<html>
<head>
    <title>Physics MCQs</title>
    <script>var tracker = 1; console.log("hello");</script>
    <style>body { color: red; }</style>
</head>
<body>
    <div class="question">
        <p>What is the SI unit of force?</p>
        <ol><li>Newton</li><li>Joule</li><li>Watt</li><li>Pascal</li></ol>
        <img src="/img/fig1.png" alt="figure">
    </div>
    <!-- ad slot -->
    <svg><path d="M0 0L10 10"/></svg>
    <nav class="pagination"><a href="/mcq?page=2">Next</a></nav>
</body>
</html>
"""

SAMPLE_AI_RESPONSE = """\
{
    "mcqs": [
        {
            "question": "What is the SI unit of force?",
            "options": ["Newton", "Joule", "Watt", "Pascal"],
            "correctAnswer": "Newton",
            "examName": "NEET, 2019",
            "imageUrl": "https://example.com/img/fig1.png"
        },
        {
            "question": "Speed of light in vacuum is approximately?",
            "options": ["3x10^8 m/s", "3x10^6 m/s"],
            "correctAnswer": "3x10^8 m/s",
            "examName": ""
        }
    ],
    "nextUrl": "https://example.com/mcq?page=2"
}
"""
