"""ProblemSpider package exports."""

from .models import (
    UNSET,
    ChallengeRecord,
    ExpectedKind,
    ItemOutcome,
    ItemState,
    RunReport,
    TaggedValue,
    TestCase,
)
from .config import DelayWindow, Selectors, Settings, SpiderConfig, settings
from .errors import (
    ConfigError,
    ElementNotFoundError,
    ExtractionError,
    FragmentAlignmentError,
    FragmentParseError,
    InvalidRecordError,
    NavigationError,
    SpiderError,
    StateStoreError,
)
from .automation import AutomationSession, NoPacer, Pacer, PlaywrightSession, SeleniumSession
from .snapshot import SnapshotSession
from .state import CrawlStateStore
from .indexer import CategoryIndexer
from .extractor import ChallengeExtractor
from .pairing import FragmentLayout, chunked, decode_expected, pair_test_cases, sniff_expected
from .output import ChallengeWriter, item_dir_name, render_markdown
from .pipeline import Scraper, build_scraper

__all__ = [
    "UNSET",
    "ChallengeRecord",
    "ExpectedKind",
    "ItemOutcome",
    "ItemState",
    "RunReport",
    "TaggedValue",
    "TestCase",
    "DelayWindow",
    "Selectors",
    "Settings",
    "SpiderConfig",
    "settings",
    "ConfigError",
    "ElementNotFoundError",
    "ExtractionError",
    "FragmentAlignmentError",
    "FragmentParseError",
    "InvalidRecordError",
    "NavigationError",
    "SpiderError",
    "StateStoreError",
    "AutomationSession",
    "NoPacer",
    "Pacer",
    "PlaywrightSession",
    "SeleniumSession",
    "SnapshotSession",
    "CrawlStateStore",
    "CategoryIndexer",
    "ChallengeExtractor",
    "FragmentLayout",
    "chunked",
    "decode_expected",
    "pair_test_cases",
    "sniff_expected",
    "ChallengeWriter",
    "item_dir_name",
    "render_markdown",
    "Scraper",
    "build_scraper",
]
