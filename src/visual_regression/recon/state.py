from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from ..core.models import FrontierEntry, Target


@dataclass(frozen=True)
class CrawlRecord:
    """A recorded target together with the frontier entry that produced it."""

    target: Target
    entry: FrontierEntry


@dataclass(slots=True)
class CrawlerRuntimeState:
    """Mutable runtime bookkeeping for a single crawl."""

    pending: deque[FrontierEntry] = field(default_factory=deque)
    visited_urls: set[str] = field(default_factory=set)
    records: list[CrawlRecord] = field(default_factory=list)
    in_flight: int = 0
