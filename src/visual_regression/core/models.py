"""Shared data structures used by the crawler and the project config."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

DEFAULT_SELECTOR = "body"
DEFAULT_VIEWPORT_WIDTH = 1200
DEFAULT_VIEWPORT_HEIGHT = 800


@dataclass(frozen=True)
class Viewport:
    """Browser window size used when a target is captured."""

    width: int = DEFAULT_VIEWPORT_WIDTH
    height: int = DEFAULT_VIEWPORT_HEIGHT

    def __post_init__(self) -> None:
        for label, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"Viewport {label} must be a positive integer, got {value!r}")

    def to_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class Target:
    """A single capture instruction produced by the crawler.

    ``url`` is the path plus query string relative to the crawled origin and
    ``selector`` defaults to ``body``, which means the whole page.
    """

    name: str
    url: str
    selector: str = DEFAULT_SELECTOR
    viewport: Viewport = field(default_factory=Viewport)

    @property
    def is_whole_page(self) -> bool:
        return self.selector == DEFAULT_SELECTOR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "selector": self.selector,
            "viewport": self.viewport.to_dict(),
        }


@dataclass(frozen=True)
class FrontierEntry:
    """A pending visit: an absolute, normalized URL and its distance from the seed."""

    url: str
    depth: int

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError(f"Frontier depth must be non-negative, got {self.depth}")
