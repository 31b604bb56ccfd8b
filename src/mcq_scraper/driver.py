"""Pagination loop: fetch a page, extract its records, follow the next link.

One run owns one ScrapeSession. Starting another run (or calling cancel())
flags the old session's token; the old loop notices at its next suspension
point (after fetch, after extract, during the pause) and stops without
touching the new session.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlparse

from mcq_scraper.config import Settings
from mcq_scraper.extractors.base import (
    EmptyResponseError,
    ExtractionClient,
    ExtractionError,
    MalformedResponseError,
)
from mcq_scraper.fetcher import BlockedError, FetchCancelled, ResilientFetcher
from mcq_scraper.models import Record, RunOutcome, RunStatus
from mcq_scraper.store import ResultStore

logger = logging.getLogger(__name__)

BLOCKED_HANDOFF = (
    'Automated scraping from "{locator}" was blocked. As a workaround, open the URL '
    "in a browser, view its page source, copy the entire HTML and run single-page "
    "mode with it."
)


class InvalidInputError(ValueError):
    """Rejected before any run starts."""


class InvalidLocatorError(InvalidInputError):
    """The starting URL is not an absolute http(s) URL."""


def validate_locator(locator: str | None) -> str:
    """Return *locator* stripped, or raise InvalidLocatorError."""
    candidate = (locator or "").strip()
    try:
        parsed = urlparse(candidate)
    except ValueError as exc:
        raise InvalidLocatorError(f"Please enter a valid starting URL: {locator!r}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidLocatorError(f"Please enter a valid starting URL: {locator!r}")
    return candidate


class CancelToken:
    """Per-run cancellation flag. Never reset once set."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to *seconds*; return True early if cancelled."""
        return self._event.wait(seconds)


@dataclass
class ScrapeSession:
    current_locator: str | None
    token: CancelToken = field(default_factory=CancelToken)
    records: list[Record] = field(default_factory=list)
    page_count: int = 0
    log: list[str] = field(default_factory=list)
    stage: str = "fetch"  # "fetch" or "extract", labels unexpected failures


class PaginationDriver:
    """Runs scrape sessions one at a time and reports progress through callbacks."""

    def __init__(
        self,
        fetcher: ResilientFetcher,
        extractor: ExtractionClient,
        settings: Settings | None = None,
        store: ResultStore | None = None,
        on_progress: Callable[[str], None] | None = None,
        on_records: Callable[[list[Record]], None] | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.extractor = extractor
        self.settings = settings or Settings()
        self.store = store
        self.on_progress = on_progress
        self.on_records = on_records
        self._session: ScrapeSession | None = None
        self._lock = threading.Lock()

    @property
    def session(self) -> ScrapeSession | None:
        """The most recently started session."""
        return self._session

    @property
    def records(self) -> list[Record]:
        return list(self._session.records) if self._session else []

    def cancel(self) -> None:
        with self._lock:
            if self._session is not None:
                self._session.token.cancel()

    # -- session plumbing -------------------------------------------------

    def _begin(self, locator: str | None) -> ScrapeSession:
        session = ScrapeSession(current_locator=locator)
        with self._lock:
            if self._session is not None:
                self._session.token.cancel()
            self._session = session
        if self.store is not None:
            self.store.clear()
        return session

    def _is_current(self, session: ScrapeSession) -> bool:
        return session is self._session and not session.token.cancelled

    def _emit(self, session: ScrapeSession, line: str, *, final: bool = False) -> None:
        if session.token.cancelled and not final:
            return
        session.log.append(line)
        logger.info(line)
        if self.on_progress is not None and session is self._session:
            self.on_progress(line)

    def _accept(self, session: ScrapeSession, records: list[Record], page: int) -> None:
        session.records.extend(records)
        session.page_count = page
        self._emit(session, f"(Page {page}) Found {len(records)} new records.")
        snapshot = list(session.records)
        if self.on_records is not None and self._is_current(session):
            self.on_records(snapshot)
        if self.store is not None and snapshot and self._is_current(session):
            self.store.save(snapshot)

    def _finish(self, session: ScrapeSession, status: RunStatus, **extra) -> RunOutcome:
        return RunOutcome(
            status=status,
            records=list(session.records),
            pages=session.page_count,
            **extra,
        )

    def _cancelled(self, session: ScrapeSession) -> RunOutcome:
        self._emit(session, "Scraping cancelled.", final=True)
        return self._finish(session, RunStatus.CANCELLED)

    def _failed(self, session: ScrapeSession, exc: Exception) -> RunOutcome:
        if session.token.cancelled:
            logger.debug("Ignoring failure from cancelled session: %s", exc)
            return self._cancelled(session)

        if isinstance(exc, MalformedResponseError):
            kind = "malformed"
        elif isinstance(exc, EmptyResponseError):
            kind = "empty"
        elif isinstance(exc, ExtractionError):
            kind = "extraction"
        elif session.stage == "fetch":
            kind = "fetch"
        else:
            kind = "unexpected"
        message = str(exc) or "An unknown error occurred during scraping."
        logger.error("Run failed (%s): %s", kind, message)
        self._emit(session, f"Error: {message}", final=True)
        return self._finish(session, RunStatus.FAILED, message=message, failure_kind=kind)

    # -- public runs ------------------------------------------------------

    def start(self, start_locator: str) -> RunOutcome:
        """Scrape from *start_locator* until there is no next page.

        Raises:
            InvalidLocatorError: before any session is created.
        """
        locator = validate_locator(start_locator)
        session = self._begin(locator)
        self._emit(session, "Starting new scraping process...")

        try:
            self._paginate(session)
        except BlockedError as exc:
            if session.token.cancelled:
                return self._cancelled(session)
            self._emit(session, BLOCKED_HANDOFF.format(locator=exc.locator), final=True)
            return self._finish(
                session,
                RunStatus.BLOCKED,
                message=str(exc),
                blocked_locator=exc.locator,
            )
        except Exception as exc:
            return self._failed(session, exc)

        if session.token.cancelled:
            return self._cancelled(session)
        self._emit(
            session,
            f"Scraping complete! Found {len(session.records)} records "
            f"across {session.page_count} pages.",
            final=True,
        )
        return self._finish(session, RunStatus.COMPLETED)

    def _paginate(self, session: ScrapeSession) -> None:
        token = session.token
        delay = self.settings.page_delay

        while session.current_locator and not token.cancelled:
            current = session.current_locator
            page = session.page_count + 1

            self._emit(session, f"Scraping page {page}: Fetching...")
            session.stage = "fetch"
            try:
                html = self.fetcher.fetch(current, is_cancelled=lambda: token.cancelled)
            except FetchCancelled:
                return
            if token.cancelled:
                return

            self._emit(session, f"(Page {page}) Extracting data via AI...")
            session.stage = "extract"
            outcome = self.extractor.extract(html, current)
            if token.cancelled:
                return

            self._accept(session, outcome.records, page)

            next_locator = outcome.next_locator
            if next_locator == current:
                logger.warning("Next URL is the same as the current URL, stopping: %s", current)
                next_locator = None
            session.current_locator = next_locator

            if next_locator and not token.cancelled:
                self._emit(session, f"Waiting for {delay:g}s to avoid API rate limits...")
                if token.wait(delay):
                    return

    def start_single_page(self, content: str, base_locator: str | None = None) -> RunOutcome:
        """Extract one page of caller-supplied HTML. No fetching, no pagination.

        Raises:
            InvalidInputError: *content* is blank or *base_locator* is not a URL.
        """
        if not content or not content.strip():
            raise InvalidInputError("Please paste HTML content before parsing.")
        base = validate_locator(base_locator) if base_locator else None

        session = self._begin(base)
        session.stage = "extract"
        self._emit(session, "Starting HTML parsing...")
        try:
            self._emit(session, "Extracting data via AI...")
            outcome = self.extractor.extract(content, base)
        except Exception as exc:
            return self._failed(session, exc)

        if session.token.cancelled:
            return self._cancelled(session)
        self._accept(session, outcome.records, 1)
        session.current_locator = None
        self._emit(session, f"Parsing complete! Found {len(outcome.records)} records.", final=True)
        return self._finish(session, RunStatus.COMPLETED)
