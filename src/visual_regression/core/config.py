"""Configuration loading for crawl runs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .models import DEFAULT_SELECTOR, Viewport

DEFAULT_CONFIG_PATH = Path("config") / "visual-regression.config.json"
DEFAULT_MAX_DEPTH = 2
DEFAULT_MAX_PAGES = 20
DEFAULT_CONCURRENCY = 5
DEFAULT_NAVIGATION_TIMEOUT_MS = 30_000


class ConfigurationError(ValueError):
    """Raised when crawl options are out of range."""


@dataclass(slots=True)
class CrawlerConfig:
    """Holds runtime options for a single crawl."""

    seed_url: str
    max_depth: int = DEFAULT_MAX_DEPTH
    max_pages: int = DEFAULT_MAX_PAGES
    concurrency: int = DEFAULT_CONCURRENCY
    selector: str = DEFAULT_SELECTOR
    viewport: Viewport = field(default_factory=Viewport)
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    headless: bool = True
    config_path: Path = DEFAULT_CONFIG_PATH

    def validate(self) -> "CrawlerConfig":
        if self.max_depth < 0:
            raise ConfigurationError("max depth must be zero or greater")
        if self.max_pages < 1:
            raise ConfigurationError("max pages must be at least 1")
        if self.concurrency < 1:
            raise ConfigurationError("concurrency must be at least 1")
        if self.navigation_timeout_ms < 1:
            raise ConfigurationError("navigation timeout must be a positive number of milliseconds")
        if not self.selector:
            raise ConfigurationError("selector must not be empty")
        return self


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def load_configuration(
    seed_url: str,
    *,
    max_depth: Optional[int] = None,
    max_pages: Optional[int] = None,
    concurrency: Optional[int] = None,
    selector: Optional[str] = None,
    config_path: Optional[str] = None,
) -> CrawlerConfig:
    """Builds a ``CrawlerConfig`` from CLI input and environment variables."""

    load_dotenv()  # Loads .env values if present

    config = CrawlerConfig(
        seed_url=seed_url.strip(),
        max_depth=DEFAULT_MAX_DEPTH if max_depth is None else max_depth,
        max_pages=DEFAULT_MAX_PAGES if max_pages is None else max_pages,
        concurrency=(
            concurrency
            if concurrency is not None
            else _env_int("CRAWL_CONCURRENCY", DEFAULT_CONCURRENCY)
        ),
        selector=selector or os.getenv("CRAWL_SELECTOR") or DEFAULT_SELECTOR,
        navigation_timeout_ms=_env_int("NAVIGATION_TIMEOUT_MS", DEFAULT_NAVIGATION_TIMEOUT_MS),
        headless=os.getenv("HEADLESS", "true").lower() in {"1", "true", "yes"},
        config_path=Path(config_path) if config_path else DEFAULT_CONFIG_PATH,
    )
    return config.validate()
