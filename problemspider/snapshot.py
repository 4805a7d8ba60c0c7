"""Offline automation session over saved HTML pages."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup, Tag

from .automation import AutomationSession
from .errors import ConfigError, ElementNotFoundError, NavigationError


class SnapshotSession(AutomationSession):
    """Answer queries from previously saved pages.

    Snapshots are taken after the test-case panel has been opened, so clicks
    are recorded but change nothing.
    """

    def __init__(self, pages: Mapping[str, str]) -> None:
        self.pages = dict(pages)
        self.current_url: str | None = None
        self.clicks: List[str] = []
        self._soup: BeautifulSoup | None = None

    @classmethod
    def from_directory(cls, directory: Path) -> "SnapshotSession":
        """Load ``manifest.json`` (``{url: file name}``) and the files it lists."""
        directory = Path(directory)
        manifest_path = directory / "manifest.json"
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"cannot load snapshot manifest {manifest_path}: {exc}") from exc
        if not isinstance(manifest, dict):
            raise ConfigError(f"{manifest_path} must map URLs to file names")

        pages: Dict[str, str] = {}
        for url, name in manifest.items():
            pages[url] = (directory / name).read_text(encoding="utf-8")
        return cls(pages)

    def navigate(self, url: str) -> None:
        html = self.pages.get(url)
        if html is None:
            raise NavigationError(f"no snapshot for {url}")
        self.current_url = url
        self._soup = BeautifulSoup(html, "lxml")

    def query(self, selector: str, within: Any = None) -> List[Any]:
        root = within if within is not None else self._soup
        if root is None:
            return []
        return list(root.select(_sanitize_selector(selector)))

    def text(self, element: Any) -> Optional[str]:
        if not isinstance(element, Tag):
            return None
        return element.get_text()

    def attribute(self, element: Any, name: str) -> Optional[str]:
        if not isinstance(element, Tag):
            return None
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def click(self, element: Any) -> None:
        self.clicks.append(element.name if isinstance(element, Tag) else repr(element))

    def click_with_text(self, selector: str, text: str) -> None:
        for element in self.query(selector):
            if text in element.get_text():
                self.click(element)
                return
        raise ElementNotFoundError(f"no {selector!r} with text {text!r}")


def _sanitize_selector(selector: str) -> str:
    return _CONTAINS_RE.sub(":-soup-contains", selector)


_CONTAINS_RE = re.compile(r":contains(?=\s*\()")
