"""Bounded-concurrency, breadth-first crawler that discovers capture targets."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Set

from ..core.config import CrawlerConfig
from ..core.models import DEFAULT_SELECTOR, FrontierEntry, Target, Viewport
from .browser import BrowserSession, NavigationError, SetupError
from .frontier import Frontier
from .targeting import OriginFilter
from .urls import InvalidUrlError, name_for_path, relative_target_url

logger = logging.getLogger(__name__)


class CrawlError(RuntimeError):
    """Raised when the crawl cannot run at all (e.g. the browser fails to start)."""


class SelectorNotFoundError(LookupError):
    """Raised when the configured selector is absent from a loaded page."""


def _open_browser(config: CrawlerConfig) -> Awaitable[BrowserSession]:
    return BrowserSession.open(headless=config.headless)


@dataclass
class Spider:
    """Turns a seed URL into a deduplicated, depth-limited list of targets."""

    config: CrawlerConfig
    open_session: Callable[[CrawlerConfig], Awaitable[BrowserSession]] = _open_browser
    frontier: Frontier = field(init=False)
    _origin: OriginFilter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.config.validate()
        self.frontier = Frontier(max_pages=self.config.max_pages, max_depth=self.config.max_depth)

    # ------------------------------------------------------------------
    # Core workflow
    # ------------------------------------------------------------------
    def run(self) -> list[Target]:
        return asyncio.run(self.crawl())

    async def crawl(self) -> list[Target]:
        self.frontier = Frontier(max_pages=self.config.max_pages, max_depth=self.config.max_depth)
        seed = self.frontier.seed(self.config.seed_url)
        self._origin = OriginFilter.from_url(seed.url)

        try:
            session = await self.open_session(self.config)
        except SetupError as exc:
            raise CrawlError(str(exc)) from exc

        in_flight: Set[asyncio.Task] = set()
        try:
            while (self.frontier.has_pending and not self.frontier.is_full) or in_flight:
                while (
                    len(in_flight) < self.config.concurrency
                    and self.frontier.has_pending
                    and not self.frontier.is_full
                ):
                    task = self._dispatch(session)
                    if task is not None:
                        in_flight.add(task)

                if not in_flight:
                    continue

                done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    self._reap(task)
        finally:
            for task in in_flight:
                task.cancel()
            if in_flight:
                await asyncio.gather(*in_flight, return_exceptions=True)
            for _ in in_flight:
                self.frontier.finish_visit()
            await session.close()

        targets = self.frontier.targets
        logger.info(
            "Crawl of %s finished: %d targets from %d discovered URLs",
            seed.url,
            len(targets),
            self.frontier.visited_count,
        )
        return targets

    def _dispatch(self, session: BrowserSession) -> Optional[asyncio.Task]:
        entry = self.frontier.next_entry()
        if entry is None:
            return None

        target = self.build_target(entry)
        if not self.frontier.record_target(target, entry):
            logger.debug("Page cap reached; dropping %s", entry.url)
            return None

        self.frontier.start_visit()
        return asyncio.create_task(self._visit(session, entry, target))

    def _reap(self, task: asyncio.Task) -> None:
        self.frontier.finish_visit()
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unexpected error in worker", exc_info=exc)

    def build_target(self, entry: FrontierEntry) -> Target:
        path = relative_target_url(entry.url)
        return Target(
            name=name_for_path(path),
            url=path,
            selector=self.config.selector,
            viewport=self.config.viewport,
        )

    # ------------------------------------------------------------------
    # Page visit
    # ------------------------------------------------------------------
    async def _visit(self, session: BrowserSession, entry: FrontierEntry, target: Target) -> None:
        logger.info("Crawling: %s (depth %d)", entry.url, entry.depth)
        try:
            async with session.new_page() as page:
                await page.goto(entry.url, timeout_ms=self.config.navigation_timeout_ms)

                if not target.is_whole_page:
                    element = await page.query_selector(target.selector)
                    if element is None:
                        raise SelectorNotFoundError(target.selector)

                if entry.depth >= self.config.max_depth:
                    return

                links = await page.extract_links()
        except SelectorNotFoundError:
            logger.warning("Skipping %s (selector %r not found)", entry.url, target.selector)
            self._fail(entry, target)
            return
        except NavigationError as exc:
            logger.warning("Error crawling %s: %s", entry.url, exc)
            self._fail(entry, target)
            return
        except Exception:
            logger.warning("Error crawling %s", entry.url, exc_info=True)
            self._fail(entry, target)
            return

        queued = self._admit_links(links, entry)
        logger.debug("%s yielded %d links, %d queued", entry.url, len(links), queued)

    def _admit_links(self, links: list[str], entry: FrontierEntry) -> int:
        queued = 0
        for link in links:
            if not self._origin.is_allowed(link):
                continue
            try:
                if self.frontier.admit(link, entry.depth):
                    queued += 1
            except InvalidUrlError:
                logger.debug("Ignoring invalid link %r on %s", link, entry.url)
        return queued

    def _fail(self, entry: FrontierEntry, target: Target) -> None:
        if self.frontier.retract(target):
            logger.debug("Retracted target %s for %s", target.name, entry.url)


async def crawl(
    seed_url: str,
    *,
    max_depth: int = 2,
    max_pages: int = 20,
    concurrency: int = 5,
    selector: str = DEFAULT_SELECTOR,
    viewport: Optional[Viewport] = None,
    open_session: Optional[Callable[[CrawlerConfig], Awaitable[BrowserSession]]] = None,
) -> list[Target]:
    """Crawls ``seed_url`` and returns the discovered targets in discovery order."""

    config = CrawlerConfig(
        seed_url=seed_url,
        max_depth=max_depth,
        max_pages=max_pages,
        concurrency=concurrency,
        selector=selector,
        viewport=viewport or Viewport(),
    )
    spider = Spider(config, open_session=open_session or _open_browser)
    return await spider.crawl()

