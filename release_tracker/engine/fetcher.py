"""HTTP fetching with bounded retries, plus a scoped headless browser session."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict

import httpx
import structlog
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from ..config import BrowserConfig, FetchConfig

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@dataclass(slots=True)
class FetchResponse:
    """Standardised response wrapper."""

    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)


class AttemptFailed(Exception):
    """One fetch attempt did not produce a usable response."""


class Fetcher:
    """Retrieve textual content, degrading to ``None`` once retries are exhausted.

    Each call makes at most ``retries + 1`` attempts. Between attempts the
    fetcher sleeps ``backoff_seconds * attempt`` so waits grow linearly. A
    transport error, a malformed URL, a non-2xx status or an attempt running
    past ``timeout`` seconds in total all count as a failed attempt. Callers
    treat ``None`` as "this source contributed nothing".
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        logger: structlog.BoundLogger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.logger = logger or structlog.get_logger("release_tracker.fetcher")
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent, "Accept": ACCEPT_HEADER},
            transport=transport,
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def max_attempts(self) -> int:
        return self.config.retries + 1

    def fetch(self, url: str) -> FetchResponse | None:
        last_error: str | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._attempt(url)
            except AttemptFailed as exc:
                last_error = str(exc)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                last_error = f"{type(exc).__name__}: {exc}"

            self.logger.warning("fetch_attempt_failed", url=url, attempt=attempt, error=last_error)
            if attempt < self.max_attempts:
                time.sleep(self.config.backoff_seconds * attempt)

        self.logger.error(
            "fetch_unavailable", url=url, attempts=self.max_attempts, error=last_error
        )
        return None

    def _attempt(self, url: str) -> FetchResponse:
        # httpx limits each connect/read phase; the body loop bounds the whole attempt.
        deadline = time.monotonic() + self.config.timeout
        with self._client.stream("GET", url, timeout=self.config.timeout) as response:
            if self._is_failure(response):
                raise AttemptFailed(f"HTTP {response.status_code}")
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise AttemptFailed(f"attempt exceeded {self.config.timeout}s")
            body = b"".join(chunks)
            return FetchResponse(
                url=str(response.url),
                status_code=response.status_code,
                text=body.decode(response.encoding or "utf-8", errors="replace"),
                headers=dict(response.headers),
            )

    @staticmethod
    def _is_failure(response: Any) -> bool:
        status_code = getattr(response, "status_code", 0)
        return not 200 <= status_code < 300


class BrowserSession:
    """Headless Chromium session used as a context manager.

    Pages are loaded sequentially on a single tab. Leaving the ``with`` block
    releases the page, context, browser and driver even when a step failed.
    """

    def __init__(
        self,
        config: BrowserConfig | None = None,
        user_agent: str | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config or BrowserConfig()
        self.user_agent = user_agent
        self.logger = logger or structlog.get_logger("release_tracker.browser")
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    def __enter__(self) -> "BrowserSession":
        try:
            self._start()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _start(self) -> None:
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(headless=self.config.headless)
        width, height = self.config.viewport_size
        self._context = self._browser.new_context(
            user_agent=self.user_agent,
            viewport={"width": width, "height": height},
        )
        self._page = self._context.new_page()

    def load(self, url: str) -> FetchResponse:
        """Navigate to ``url`` and return the rendered DOM."""

        if self._page is None:
            raise RuntimeError("BrowserSession must be entered before loading pages")
        try:
            response = self._page.goto(
                url, wait_until="domcontentloaded", timeout=self.config.navigation_timeout
            )
        except PlaywrightTimeoutError as exc:
            raise RuntimeError(f"Playwright timeout loading {url}: {exc}") from exc
        self._page.wait_for_timeout(self.config.settle_ms)
        return FetchResponse(
            url=self._page.url,
            status_code=response.status if response else 200,
            text=self._page.content(),
            headers=dict(response.headers) if response else {},
        )

    def close(self) -> None:
        for attr, closer in (
            ("_page", "close"),
            ("_context", "close"),
            ("_browser", "close"),
            ("_playwright", "stop"),
        ):
            resource = getattr(self, attr)
            if resource is None:
                continue
            try:
                getattr(resource, closer)()
            except PlaywrightError as exc:
                self.logger.warning("browser_release_failed", resource=attr.strip("_"), error=str(exc))
            setattr(self, attr, None)


__all__ = ["AttemptFailed", "BrowserSession", "FetchResponse", "Fetcher"]
