"""Pending-URL queue, visited set and recorded targets for one crawl."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.models import FrontierEntry, Target
from .state import CrawlerRuntimeState, CrawlRecord
from .urls import normalize_url

logger = logging.getLogger(__name__)


class Frontier:
    """Owns the crawl state and enforces the depth and page caps.

    Every operation takes the same lock, so ``admit`` for one URL can only
    succeed once even with concurrent callers. The lock is never held while
    awaiting.
    """

    def __init__(self, max_pages: int, max_depth: int) -> None:
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        if max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        self.max_pages = max_pages
        self.max_depth = max_depth
        self._state = CrawlerRuntimeState()
        self._lock = threading.Lock()

    @property
    def state(self) -> CrawlerRuntimeState:
        return self._state

    # ------------------------------------------------------------------
    # Queue management
    # ------------------------------------------------------------------
    def seed(self, url: str) -> FrontierEntry:
        normalized = normalize_url(url)
        entry = FrontierEntry(url=normalized, depth=0)
        with self._lock:
            self._state.visited_urls.add(normalized)
            self._state.pending.append(entry)
        return entry

    def admit(self, url: str, from_depth: int) -> bool:
        """Queues ``url`` one level below ``from_depth`` unless already seen."""

        normalized = normalize_url(url)
        depth = from_depth + 1
        if depth > self.max_depth:
            return False

        with self._lock:
            if normalized in self._state.visited_urls:
                return False
            self._state.visited_urls.add(normalized)
            self._state.pending.append(FrontierEntry(url=normalized, depth=depth))

        logger.debug("Queued %s at depth %d", normalized, depth)
        return True

    def next_entry(self) -> Optional[FrontierEntry]:
        with self._lock:
            if not self._state.pending:
                return None
            return self._state.pending.popleft()

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------
    def record_target(self, target: Target, entry: FrontierEntry) -> bool:
        with self._lock:
            if len(self._state.records) >= self.max_pages:
                return False
            self._state.records.append(CrawlRecord(target=target, entry=entry))
            return True

    def retract(self, target: Target) -> bool:
        with self._lock:
            for index, record in enumerate(self._state.records):
                if record.target is target:
                    del self._state.records[index]
                    return True
        return False

    def start_visit(self) -> None:
        with self._lock:
            self._state.in_flight += 1

    def finish_visit(self) -> None:
        with self._lock:
            self._state.in_flight -= 1

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------
    @property
    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._state.pending)

    @property
    def is_full(self) -> bool:
        with self._lock:
            return len(self._state.records) >= self.max_pages

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._state.in_flight

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._state.pending)

    @property
    def visited_count(self) -> int:
        with self._lock:
            return len(self._state.visited_urls)

    @property
    def records(self) -> list[CrawlRecord]:
        with self._lock:
            return list(self._state.records)

    @property
    def targets(self) -> list[Target]:
        return [record.target for record in self.records]
