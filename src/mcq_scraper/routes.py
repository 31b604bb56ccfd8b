"""Relay routes used to reach target pages indirectly, and their rotation."""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote, urlparse

DEFAULT_ROUTES: tuple[str, ...] = (
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
    "https://cors.eu.org/",
    "https://api.codetabs.com/v1/proxy?quest=",
    "https://thingproxy.freeboard.io/fetch/",
    "https://cors-proxy.htmldriven.com/?url=",
    "https://cors.zme.ink/",
    "https://cors-proxy.fringe.zone/",
    # Often rate-limited
    "https://cors-anywhere.herokuapp.com/",
)


@dataclass(frozen=True)
class Route:
    """A relay prefix; the encoded target URL is appended to it."""

    prefix: str

    @property
    def host(self) -> str:
        return urlparse(self.prefix).netloc or self.prefix

    def build_url(self, locator: str) -> str:
        return self.prefix + quote(locator, safe="")


class ProxyRotator:
    """Fixed pool of routes handed out in a fresh random order per request."""

    def __init__(
        self,
        routes: Iterable[str | Route] = DEFAULT_ROUTES,
        rng: random.Random | None = None,
    ) -> None:
        pool = tuple(r if isinstance(r, Route) else Route(r) for r in routes)
        if not pool:
            raise ValueError("ProxyRotator needs at least one route")
        self._routes = pool
        self._rng = rng or random.Random()

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def shuffled_routes(self) -> list[Route]:
        order = list(self._routes)
        self._rng.shuffle(order)
        return order
