"""Enumerate challenge URLs per catalog category."""

from __future__ import annotations

from typing import Dict, Iterable, List
from urllib.parse import urljoin

from .automation import AutomationSession
from .config import Selectors


class CategoryIndexer:
    """Read the challenge links listed under each category on the start page."""

    def __init__(self, session: AutomationSession, selectors: Selectors, base_url: str) -> None:
        self.session = session
        self.selectors = selectors
        self.base_url = base_url

    def index_category(self, category: str) -> List[str]:
        """Return absolute challenge URLs in document order; duplicates are kept."""
        urls: List[str] = []
        for element in self.session.query(self.selectors.question_links(category)):
            href = self.session.attribute(element, "href")
            if not href or not href.strip():
                print(f"[Indexer] Skipping link without href in {category!r}")
                continue
            urls.append(urljoin(self.base_url, href.strip()))
        return urls

    def index_all(self, categories: Iterable[str]) -> Dict[str, List[str]]:
        index: Dict[str, List[str]] = {}
        for category in categories:
            index[category] = self.index_category(category)
            print(f"[Indexer] {category}: {len(index[category])} questions")
        return index
