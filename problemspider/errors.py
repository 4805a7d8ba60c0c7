"""Exception types raised across the crawl pipeline."""

from __future__ import annotations


class SpiderError(Exception):
    """Base class for all ProblemSpider errors."""


class ConfigError(SpiderError):
    """Raised when a configuration file or value is unusable."""


class NavigationError(SpiderError):
    """Raised when the automation session cannot load a page."""


class ExtractionError(SpiderError):
    """Raised when required content cannot be read off a page."""


class ElementNotFoundError(ExtractionError):
    """Raised when an element that must be clicked is not on the page."""


class InvalidRecordError(ExtractionError):
    """Raised when a challenge record is missing its title or description."""


class FragmentParseError(SpiderError):
    """Raised when a test-case fragment is not valid JSON."""

    def __init__(self, fragment: str, reason: str) -> None:
        super().__init__(f"cannot parse fragment {fragment!r}: {reason}")
        self.fragment = fragment
        self.reason = reason


class FragmentAlignmentError(SpiderError):
    """Raised when a fragment sequence does not split into whole test cases."""


class StateStoreError(SpiderError):
    """Raised when the skip-list cannot be read or appended to.

    Never isolated per item: losing track of committed URLs stops the run.
    """
