"""Command-line interface for mcq-scraper."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from mcq_scraper.config import Settings
from mcq_scraper.driver import InvalidInputError, PaginationDriver
from mcq_scraper.export import export_json, records_to_json
from mcq_scraper.extractors import get_extractor, list_extractors
from mcq_scraper.fetcher import ResilientFetcher
from mcq_scraper.models import Record, RunOutcome, RunStatus
from mcq_scraper.routes import DEFAULT_ROUTES, ProxyRotator
from mcq_scraper.store import ResultStore

EXIT_CODES = {
    RunStatus.COMPLETED: 0,
    RunStatus.FAILED: 1,
    RunStatus.BLOCKED: 2,
    RunStatus.CANCELLED: 130,
}


def _out(msg: str = "") -> None:
    """Print a status message to stderr so it doesn't mix with JSON output."""
    print(msg, file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcq-scraper",
        description="Scrape multiple-choice questions page by page using AI extraction.",
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="URL of the first page (with --html-file: the page the HTML came from)",
    )
    parser.add_argument(
        "-e", "--extractor",
        choices=list_extractors(),
        default=None,
        help="Extraction service to use (default: from .env DEFAULT_EXTRACTOR)",
    )
    parser.add_argument(
        "--html-file",
        default=None,
        help="Parse one page of saved HTML instead of fetching (single-page mode)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait between pages (default: 2)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-route fetch timeout in seconds (default: 20)",
    )
    parser.add_argument(
        "--restore",
        action="store_true",
        help="Print the records saved by the previous session",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete the records saved by the previous session",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file path (default: stdout)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def _write(records: list[Record], output: str | None) -> None:
    if output:
        export_json(records, output)
        _out(f"Output written to {output}")
    else:
        print(records_to_json(records))


def _interrupted(driver: PaginationDriver) -> RunOutcome:
    driver.cancel()
    session = driver.session
    _out("Scraping cancelled.")
    return RunOutcome(
        status=RunStatus.CANCELLED,
        records=list(session.records) if session else [],
        pages=session.page_count if session else 0,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = Settings.from_env()

    overrides = {}
    if args.delay is not None:
        overrides["page_delay"] = args.delay
    if args.timeout is not None:
        overrides["fetch_timeout"] = args.timeout
    if overrides:
        settings = replace(settings, **overrides)

    store = ResultStore(settings.results_path)
    has_run = bool(args.url or args.html_file)

    if args.restore and has_run:
        parser.error("--restore cannot be combined with a URL or --html-file")

    if args.clear:
        store.clear()
        _out("Saved results cleared.")
        if not has_run:
            return 0

    if args.restore:
        saved = store.load()
        if not saved:
            _out("No saved results found.")
            return 1
        _out(f"Restored {len(saved)} records from the previous session.")
        _write(saved, args.output)
        return 0

    if not has_run:
        parser.error("a URL or --html-file is required")

    try:
        extractor = get_extractor(args.extractor or settings.default_extractor, settings)
    except ValueError as exc:
        _out(f"[!] {exc}")
        return 1

    rotator = ProxyRotator(settings.proxy_routes or DEFAULT_ROUTES)
    driver = PaginationDriver(
        fetcher=ResilientFetcher(rotator, settings),
        extractor=extractor,
        settings=settings,
        store=store,
        on_progress=_out,
    )

    try:
        if args.html_file:
            try:
                html = Path(args.html_file).read_text(encoding="utf-8")
            except OSError as exc:
                parser.error(f"cannot read --html-file: {exc}")
            outcome = driver.start_single_page(html, args.url)
        else:
            outcome = driver.start(args.url)
    except InvalidInputError as exc:
        parser.error(str(exc))
    except KeyboardInterrupt:
        outcome = _interrupted(driver)

    if outcome.status is RunStatus.BLOCKED:
        _out(f"[!] {outcome.message}")
        _out("Save the page source to a file and rerun in single-page mode:")
        _out(f"    mcq-scraper {outcome.blocked_locator} --html-file page.html")
    elif outcome.status is RunStatus.FAILED:
        _out(f"[!] {outcome.failure_kind} failure: {outcome.message}")

    if outcome.records or outcome.status is RunStatus.COMPLETED:
        _write(outcome.records, args.output)

    return EXIT_CODES[outcome.status]


if __name__ == "__main__":
    sys.exit(main())
