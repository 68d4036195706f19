from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

IGNORED_SCHEMES = frozenset({"javascript", "mailto", "tel", "data"})


@dataclass(slots=True)
class LinkCollector:
    """Resolves anchor hrefs found in rendered markup to absolute URLs."""

    parser: str = "html.parser"

    def gather_from_html(self, html: str, base_url: str) -> List[str]:
        if not html:
            return []

        soup = BeautifulSoup(html, self.parser)
        base_tag = soup.find("base", href=True)
        if base_tag is not None:
            base_url = urljoin(base_url, base_tag["href"])

        links: List[str] = []
        seen: set[str] = set()
        for anchor in soup.find_all("a", href=True):
            resolved = self.resolve(base_url, anchor.get("href"))
            if not resolved or resolved in seen:
                continue
            seen.add(resolved)
            links.append(resolved)
        return links

    @staticmethod
    def resolve(base_url: str, href: Optional[str]) -> Optional[str]:
        if not href:
            return None

        href = href.strip()
        if not href or href.startswith("#"):
            return None

        try:
            if urlparse(href).scheme.lower() in IGNORED_SCHEMES:
                return None
            return urljoin(base_url, href)
        except ValueError:
            return None
