"""Site crawler that turns a seed URL into visual-regression targets."""

from .browser import BrowserSession, NavigationError, SetupError
from .crawler import CrawlError, SelectorNotFoundError, Spider, crawl
from .urls import InvalidUrlError, name_for_path, normalize_url

__all__ = [
    "BrowserSession",
    "CrawlError",
    "InvalidUrlError",
    "NavigationError",
    "SelectorNotFoundError",
    "SetupError",
    "Spider",
    "crawl",
    "name_for_path",
    "normalize_url",
]
