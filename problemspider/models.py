"""Shared dataclasses and enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .metrics.system_metrics import aggregate_timings


class _Unset:
    """Marker for a test-case field whose fragment could not be parsed."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class ItemState(str, Enum):
    QUEUED = "queued"
    NAVIGATING = "navigating"
    EXTRACTING_DESCRIPTION = "extracting_description"
    EXTRACTING_TEST_CASES = "extracting_test_cases"
    PERSISTING = "persisting"
    COMMITTED = "committed"
    SKIPPED = "skipped"
    FAILED = "failed"


TERMINAL_STATES = frozenset({ItemState.COMMITTED, ItemState.SKIPPED, ItemState.FAILED})


class ExpectedKind(str, Enum):
    RAW_TEXT = "raw_text"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class TaggedValue:
    kind: ExpectedKind
    value: Any


@dataclass
class ChallengeRecord:
    title: str
    description: str
    example_input: str = ""
    example_output: str = ""

    def is_valid(self) -> bool:
        return bool(self.title and self.title.strip()) and bool(self.description and self.description.strip())


@dataclass
class TestCase:
    """One paired test case; ``inputs``/``expected`` stay UNSET on parse failure."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    inputs: Any = UNSET
    expected: Any = UNSET

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.inputs is not UNSET:
            data["inputs"] = self.inputs
        if self.expected is not UNSET:
            data["expected"] = self.expected
        data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestCase":
        return cls(
            name=data["name"],
            inputs=data.get("inputs", UNSET),
            expected=data.get("expected", UNSET),
        )


@dataclass
class ItemOutcome:
    url: str
    category: str
    position: int
    state: ItemState = ItemState.QUEUED
    history: List[ItemState] = field(default_factory=lambda: [ItemState.QUEUED])
    error: Optional[str] = None
    directory: Optional[Path] = None
    timings: Dict[str, float] = field(default_factory=dict)

    def advance(self, state: ItemState) -> None:
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"{self.url} already finished as {self.state.value}")
        self.state = state
        self.history.append(state)


@dataclass
class RunReport:
    outcomes: List[ItemOutcome] = field(default_factory=list)

    def urls_in(self, state: ItemState) -> List[str]:
        return [outcome.url for outcome in self.outcomes if outcome.state == state]

    @property
    def committed(self) -> List[str]:
        return self.urls_in(ItemState.COMMITTED)

    @property
    def failed(self) -> List[str]:
        return self.urls_in(ItemState.FAILED)

    @property
    def skipped(self) -> List[str]:
        return self.urls_in(ItemState.SKIPPED)

    def counts(self) -> Dict[str, int]:
        counts = {state.value: 0 for state in TERMINAL_STATES}
        for outcome in self.outcomes:
            counts[outcome.state.value] = counts.get(outcome.state.value, 0) + 1
        return counts

    def timing_summary(self) -> Dict[str, Dict[str, float]]:
        return aggregate_timings(outcome.timings for outcome in self.outcomes if outcome.timings)
