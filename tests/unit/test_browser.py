import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from visual_regression.recon import browser as browser_module  # type: ignore[import]
from visual_regression.recon.browser import (  # type: ignore[import]
    BrowserSession,
    NavigationError,
    PageVisit,
    SetupError,
)


class _StubPage:
    def __init__(self, *, error=None, html="", url="http://x.test/"):
        self.error = error
        self.html = html
        self.url = url
        self.goto_calls = []
        self.closed = False

    async def goto(self, url, *, wait_until, timeout):
        self.goto_calls.append((url, wait_until, timeout))
        if self.error is not None:
            raise self.error

    async def content(self):
        return self.html

    async def close(self):
        if self.closed:
            raise PlaywrightError("Target page, context or browser has been closed")
        self.closed = True


def test_goto_passes_wait_condition_and_timeout():
    page = _StubPage()

    asyncio.run(PageVisit(page).goto("http://x.test/about", timeout_ms=1234))

    assert page.goto_calls == [("http://x.test/about", "domcontentloaded", 1234)]


@pytest.mark.parametrize(
    "error, message",
    [
        (PlaywrightTimeoutError("Timeout 30000ms exceeded."), "Timed out after 30000ms"),
        (PlaywrightError("net::ERR_NAME_NOT_RESOLVED"), "ERR_NAME_NOT_RESOLVED"),
    ],
)
def test_goto_maps_playwright_failures_to_navigation_error(error, message):
    visit = PageVisit(_StubPage(error=error))

    with pytest.raises(NavigationError, match=message):
        asyncio.run(visit.goto("http://x.test/"))


def test_extract_links_resolves_against_current_page_url():
    page = _StubPage(html='<a href="child">Child</a><a href="/top">Top</a>', url="http://x.test/docs/")

    links = asyncio.run(PageVisit(page).extract_links())

    assert links == ["http://x.test/docs/child", "http://x.test/top"]


def test_close_tolerates_already_closed_page():
    page = _StubPage()
    visit = PageVisit(page)

    asyncio.run(visit.close())
    asyncio.run(visit.close())

    assert page.closed is True


class _StubBrowser:
    def __init__(self, *, close_error=None):
        self.close_error = close_error
        self.pages = []
        self.close_calls = 0

    async def new_page(self):
        page = _StubPage()
        self.pages.append(page)
        return page

    async def close(self):
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class _StubChromium:
    def __init__(self, browser=None, error=None):
        self.browser = browser
        self.error = error
        self.launch_calls = []

    async def launch(self, *, headless, args):
        self.launch_calls.append((headless, args))
        if self.error is not None:
            raise self.error
        return self.browser


class _StubPlaywright:
    def __init__(self, chromium):
        self.chromium = chromium
        self.stop_calls = 0

    async def stop(self):
        self.stop_calls += 1


class _StubDriver:
    def __init__(self, playwright=None, error=None):
        self.playwright = playwright
        self.error = error

    async def start(self):
        if self.error is not None:
            raise self.error
        return self.playwright


def _install_driver(monkeypatch, driver):
    monkeypatch.setattr(browser_module, "async_playwright", lambda: driver)


def test_open_launches_chromium_with_requested_mode(monkeypatch):
    stub_browser = _StubBrowser()
    playwright = _StubPlaywright(_StubChromium(browser=stub_browser))
    _install_driver(monkeypatch, _StubDriver(playwright))

    session = asyncio.run(BrowserSession.open(headless=False))

    assert isinstance(session, BrowserSession)
    assert playwright.chromium.launch_calls == [(False, ["--no-sandbox", "--disable-setuid-sandbox"])]
    assert playwright.stop_calls == 0


def test_open_stops_driver_when_launch_fails(monkeypatch):
    playwright = _StubPlaywright(_StubChromium(error=PlaywrightError("Executable doesn't exist")))
    _install_driver(monkeypatch, _StubDriver(playwright))

    with pytest.raises(SetupError, match="Executable doesn't exist"):
        asyncio.run(BrowserSession.open())

    assert playwright.stop_calls == 1


def test_open_wraps_driver_start_failure(monkeypatch):
    _install_driver(monkeypatch, _StubDriver(error=RuntimeError("driver missing")))

    with pytest.raises(SetupError, match="Unable to launch the browser: driver missing"):
        asyncio.run(BrowserSession.open())


def test_new_page_closes_page_when_visit_fails():
    stub_browser = _StubBrowser()
    session = BrowserSession(_StubPlaywright(_StubChromium()), stub_browser)

    async def failing_visit():
        async with session.new_page():
            raise NavigationError("Failed to load http://x.test/")

    with pytest.raises(NavigationError):
        asyncio.run(failing_visit())

    assert [page.closed for page in stub_browser.pages] == [True]


def test_close_stops_driver_even_when_browser_close_fails():
    stub_browser = _StubBrowser(close_error=PlaywrightError("Browser has been closed"))
    playwright = _StubPlaywright(_StubChromium())
    session = BrowserSession(playwright, stub_browser)

    with pytest.raises(PlaywrightError):
        asyncio.run(session.close())
    asyncio.run(session.close())

    assert stub_browser.close_calls == 1
    assert playwright.stop_calls == 1
