"""Settings and run configuration for ProblemSpider."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .errors import ConfigError
from .pairing import DEFAULT_LAYOUT, FragmentLayout


@dataclass
class Settings:
    cdp_url: str = field(
        default_factory=lambda: os.environ.get("PROBLEMSPIDER_CDP_URL", "http://127.0.0.1:9222")
    )
    query_timeout: float = 15.0
    navigation_timeout: float = 60.0
    max_retries: int = 1
    backoff_factor: float = 1.5


settings = Settings()


DEFAULT_CATEGORIES: Tuple[str, ...] = (
    "Arrays",
    "Binary Search Trees",
    "Binary Trees",
    "Dynamic Programming",
    "Famous Algorithms",
    "Graphs",
    "Greedy Algorithms",
    "Heaps",
    "Linked Lists",
    "Recursion",
    "Searching",
    "Sorting",
    "Stacks",
    "Strings",
    "Tries",
)

DEFAULT_LANGUAGES: Tuple[str, ...] = ("python", "javascript")


@dataclass(frozen=True)
class DelayWindow:
    """Bounds, in seconds, of a randomized pause."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low < 0 or self.high < self.low:
            raise ConfigError(f"invalid delay window: {self.low}..{self.high}")


@dataclass(frozen=True)
class Selectors:
    """CSS selectors for the catalog pages.

    ``category_links`` is scoped under the element whose id is the category
    name, see :meth:`question_links`.
    """

    category_links: str = ".XfBN006G5IBT_e4fZRcU a"
    title: str = "div h2"
    paragraph: str = ".ae-workspace-dark p"
    example: str = ".ae-workspace-dark pre"
    collapsed_test_case: str = ".Gvne7CKrNUC1MWWcgX0h .EXdCvTD_bubcEGmmHOFu"
    test_case_data: str = ".f7nTfdupWXhhK1Frxcbv .aR1l5rhU3UqdVORse042"
    test_case_text: str = ".ae-workspace-dark"
    run_button: str = "button"
    run_button_text: str = "Run Code"

    def question_links(self, category: str) -> str:
        safe = category.replace('"', '\\"')
        return f'[id="{safe}"] {self.category_links}'


@dataclass
class SpiderConfig:
    """Everything a crawl run needs, passed explicitly into :class:`Scraper`."""

    download_root: Path = Path("downloads")
    skip_list_path: Path = Path("urls_to_skip.txt")
    base_url: str = "https://www.algoexpert.io"
    start_url: str = "https://www.algoexpert.io/questions"
    categories: List[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    selectors: Selectors = field(default_factory=Selectors)
    navigation_delay: DelayWindow = DelayWindow(5.0, 12.0)
    run_code_delay: DelayWindow = DelayWindow(10.0, 13.0)
    expand_delay: DelayWindow = DelayWindow(4.0, 7.0)
    fragment_layout: FragmentLayout = DEFAULT_LAYOUT
    strict_pairing: bool = True
    max_items: int | None = None
    verbose: bool = False

    @classmethod
    def from_file(cls, path: Path) -> "SpiderConfig":
        """Load a JSON config file; keys not present keep their defaults."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"config {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must hold a JSON object")
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "SpiderConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in {"download_root", "skip_list_path"}:
                values[key] = Path(value)
            elif key == "selectors":
                values[key] = _selectors_from(value)
            elif key == "fragment_layout":
                values[key] = _layout_from(value)
            elif key.endswith("_delay"):
                values[key] = _delay_from(key, value)
            elif key in {"categories", "languages"}:
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"{key} must be a list of strings")
                values[key] = list(value)
            else:
                values[key] = value
        return cls(**values)

    def with_overrides(self, **changes: Any) -> "SpiderConfig":
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _selectors_from(value: Any) -> Selectors:
    if not isinstance(value, dict):
        raise ConfigError("selectors must be a JSON object")
    known = {f.name for f in fields(Selectors)}
    unknown = sorted(set(value) - known)
    if unknown:
        raise ConfigError(f"unknown selector keys: {', '.join(unknown)}")
    return Selectors(**value)


def _layout_from(value: Any) -> FragmentLayout:
    if not isinstance(value, dict):
        raise ConfigError("fragment_layout must be a JSON object")
    known = {f.name for f in fields(FragmentLayout)}
    unknown = sorted(set(value) - known)
    if unknown:
        raise ConfigError(f"unknown fragment_layout keys: {', '.join(unknown)}")
    try:
        return FragmentLayout(**{k: int(v) for k, v in value.items()})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"invalid fragment_layout: {exc}") from exc


def _delay_from(key: str, value: Any) -> DelayWindow:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigError(f"{key} must be a [low, high] pair of seconds")
    try:
        return DelayWindow(float(value[0]), float(value[1]))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must hold numbers: {exc}") from exc
