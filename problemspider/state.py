"""Persistent skip-list of challenge URLs that were fully scraped."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import StateStoreError


class CrawlStateStore:
    """Newline-delimited, append-only set of committed URLs.

    The in-memory set only ever grows after the matching line reached disk,
    so an interrupted run never reports a URL it did not finish.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._urls: set[str] = set()

    def load(self) -> set[str]:
        if not self.path.exists():
            print(f"[State] {self.path} not found. Creating new file.")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text("", encoding="utf-8")
            except OSError as exc:
                raise StateStoreError(f"cannot create {self.path}: {exc}") from exc
            self._urls = set()
            return set()

        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StateStoreError(f"cannot read {self.path}: {exc}") from exc

        self._urls = {line.strip() for line in text.splitlines() if line.strip()}
        print(f"[State] Loaded {len(self._urls)} scraped URLs from {self.path}")
        return set(self._urls)

    def contains(self, url: str) -> bool:
        return url in self._urls

    __contains__ = contains

    def commit(self, url: str) -> None:
        try:
            separator = "\n" if self._missing_final_newline() else ""
            with self.path.open("a", encoding="utf-8", newline="\n") as handle:
                handle.write(separator + url + "\n")
        except OSError as exc:
            raise StateStoreError(f"cannot append to {self.path}: {exc}") from exc
        self._urls.add(url)

    def _missing_final_newline(self) -> bool:
        if not self.path.exists():
            return False
        with self.path.open("rb") as handle:
            handle.seek(0, os.SEEK_END)
            if handle.tell() == 0:
                return False
            handle.seek(-1, os.SEEK_END)
            return handle.read(1) != b"\n"

    def __len__(self) -> int:
        return len(self._urls)
