"""Playwright-backed browsing resource shared by every crawl visit."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import Browser, ElementHandle, Error as PlaywrightError, Page, Playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .link_collector import LinkCollector

logger = logging.getLogger(__name__)

DEFAULT_WAIT_UNTIL = "domcontentloaded"
DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000
LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class BrowserError(RuntimeError):
    """Base class for failures raised by the browsing resource."""


class SetupError(BrowserError):
    """Raised when the browser cannot be started."""


class NavigationError(BrowserError):
    """Raised when a page cannot be loaded (timeout, DNS or network failure)."""


class PageVisit:
    """One isolated page context opened from a :class:`BrowserSession`."""

    def __init__(self, page: Page, link_collector: Optional[LinkCollector] = None) -> None:
        self._page = page
        self._link_collector = link_collector or LinkCollector()

    @property
    def url(self) -> str:
        return self._page.url

    async def goto(
        self,
        url: str,
        *,
        wait_until: str = DEFAULT_WAIT_UNTIL,
        timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
    ) -> None:
        try:
            await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(f"Timed out after {timeout_ms}ms loading {url}") from exc
        except PlaywrightError as exc:
            raise NavigationError(f"Failed to load {url}: {exc.message}") from exc

    async def query_selector(self, selector: str) -> Optional[ElementHandle]:
        return await self._page.query_selector(selector)

    async def extract_links(self) -> List[str]:
        html = await self._page.content()
        return self._link_collector.gather_from_html(html, self._page.url)

    async def close(self) -> None:
        try:
            await self._page.close()
        except PlaywrightError:
            logger.debug("Page was already closed", exc_info=True)


class BrowserSession:
    """Owns the Playwright driver and a single Chromium instance."""

    def __init__(self, playwright: Playwright, browser: Browser) -> None:
        self._playwright = playwright
        self._browser = browser
        self._closed = False

    @classmethod
    async def open(cls, *, headless: bool = True) -> "BrowserSession":
        playwright: Optional[Playwright] = None
        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(headless=headless, args=list(LAUNCH_ARGS))
        except Exception as exc:
            if playwright is not None:
                await playwright.stop()
            raise SetupError(f"Unable to launch the browser: {exc}") from exc
        return cls(playwright, browser)

    @asynccontextmanager
    async def new_page(self) -> AsyncIterator[PageVisit]:
        page = await self._browser.new_page()
        visit = PageVisit(page)
        try:
            yield visit
        finally:
            await visit.close()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
