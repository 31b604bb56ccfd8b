"""Fetch page HTML through a rotating pool of relay routes."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from mcq_scraper.config import Settings
from mcq_scraper.routes import ProxyRotator, Route

logger = logging.getLogger(__name__)

_DEFAULT_HEADERS = {
    # Some relays refuse requests without it
    "X-Requested-With": "XMLHttpRequest",
}


class RouteFailure(Exception):
    """A single relay attempt failed; the next route is tried."""


class FetchCancelled(Exception):
    """The owning session was cancelled while routes were still being tried."""


class BlockedError(Exception):
    """Every route in the pool failed for one locator."""

    def __init__(self, locator: str, last_error: str) -> None:
        self.locator = locator
        self.last_error = last_error
        super().__init__(
            "The target website appears to be blocking automated requests. "
            f"(Last error: {last_error})"
        )


class ResilientFetcher:
    """Try each relay route in shuffled order until one returns a usable page."""

    def __init__(
        self,
        rotator: ProxyRotator,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.rotator = rotator
        self.settings = settings or Settings()
        self._client = client

    def _attempt(self, client: httpx.Client, route: Route, locator: str) -> str:
        try:
            response = client.get(route.build_url(locator))
        except httpx.HTTPError as exc:
            raise RouteFailure(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise RouteFailure(f"Proxy responded with status {response.status_code}")

        text = response.text
        if not text or not text.strip():
            raise RouteFailure("Proxy returned empty content.")
        marker = self.settings.proxy_error_marker
        if marker and marker in text:
            raise RouteFailure("Proxy returned its own error page.")
        return text

    def _try_routes(
        self,
        client: httpx.Client,
        locator: str,
        is_cancelled: Callable[[], bool] | None,
    ) -> str:
        last_error = "no routes tried"
        for route in self.rotator.shuffled_routes():
            if is_cancelled is not None and is_cancelled():
                raise FetchCancelled(locator)
            try:
                text = self._attempt(client, route, locator)
            except RouteFailure as exc:
                logger.warning("Attempt with proxy %s failed: %s", route.host, exc)
                last_error = str(exc)
                continue
            logger.info("Fetched %d bytes from %s via %s", len(text), locator, route.host)
            return text

        logger.error("All %d routes failed for %s", len(self.rotator), locator)
        raise BlockedError(locator, last_error)

    def fetch(
        self,
        locator: str,
        is_cancelled: Callable[[], bool] | None = None,
    ) -> str:
        """
        Return the page body for *locator*.

        Raises:
            BlockedError: every route failed. Carries *locator* unchanged.
            FetchCancelled: *is_cancelled* turned true between attempts.
        """
        if self._client is not None:
            return self._try_routes(self._client, locator, is_cancelled)

        with httpx.Client(
            headers=_DEFAULT_HEADERS,
            timeout=self.settings.fetch_timeout,
            follow_redirects=True,
        ) as client:
            return self._try_routes(client, locator, is_cancelled)
