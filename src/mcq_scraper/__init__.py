"""mcq-scraper - paginated question scraping through relay routes and AI extraction."""

__version__ = "0.1.0"

from mcq_scraper.driver import InvalidInputError, InvalidLocatorError, PaginationDriver
from mcq_scraper.fetcher import BlockedError, ResilientFetcher
from mcq_scraper.models import ExtractionOutcome, Record, RunOutcome, RunStatus
from mcq_scraper.routes import ProxyRotator, Route
from mcq_scraper.store import ResultStore

__all__ = [
    "BlockedError",
    "ExtractionOutcome",
    "InvalidInputError",
    "InvalidLocatorError",
    "PaginationDriver",
    "ProxyRotator",
    "Record",
    "ResilientFetcher",
    "ResultStore",
    "Route",
    "RunOutcome",
    "RunStatus",
]
