"""Pydantic models for the scraping pipeline."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Record(BaseModel):
    """One multiple-choice question extracted from a page.

    ``correct_answer`` is expected to be one of ``options``; the extractor
    is trusted on that and it is not re-checked here.
    """

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(description="Full question text")
    options: list[str] = Field(
        default_factory=list,
        description="Answer options in page order",
    )
    correct_answer: str = Field(
        alias="correctAnswer",
        description="Exact text of the correct option",
    )
    exam_name: str = Field(
        default="",
        alias="examName",
        description="Exam or source label shown with the question",
    )
    image_url: str | None = Field(
        default=None,
        alias="imageUrl",
        description="Absolute URL of a figure attached to the question",
    )

    @field_validator("exam_name", mode="before")
    @classmethod
    def _null_label_is_blank(cls, value):
        return "" if value is None else value


class ExtractionOutcome(BaseModel):
    """What the extractor returns for each page it analyzes."""

    model_config = ConfigDict(populate_by_name=True)

    records: list[Record] = Field(alias="mcqs")
    next_locator: str | None = Field(
        default=None,
        alias="nextUrl",
        description="Absolute URL of the next page, if any",
    )

    @field_validator("next_locator", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RunStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    BLOCKED = "blocked"
    FAILED = "failed"


class RunOutcome(BaseModel):
    """Terminal result of one scrape run."""

    status: RunStatus
    records: list[Record] = Field(default_factory=list)
    pages: int = Field(default=0, description="Pages whose extraction finished")
    message: str = ""
    blocked_locator: str | None = None
    failure_kind: str | None = Field(
        default=None,
        description="malformed, empty, extraction, fetch or unexpected when status is failed",
    )
