"""Rebuild typed test cases from the flat text fragments of the results panel.

The results panel renders, for every test case, the expected output, the
inputs, and one hidden node left over from the collapsed view. Queried
together they form a flat sequence with period three::

    [expected_0, input_0, extra_0, expected_1, input_1, extra_1, ...]

Nothing in the markup marks where one test case ends, so a sequence whose
length is not a multiple of the period is rejected instead of being paired
off-by-one.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator, List, Sequence, Tuple, TypeVar

from .errors import FragmentAlignmentError, FragmentParseError
from .models import ExpectedKind, TaggedValue, TestCase

T = TypeVar("T")


@dataclass(frozen=True)
class FragmentLayout:
    period: int = 3
    expected_offset: int = 0
    input_offset: int = 1

    def __post_init__(self) -> None:
        offsets = {self.expected_offset, self.input_offset}
        if len(offsets) != 2 or min(offsets) < 0 or max(offsets) >= self.period:
            raise ValueError(f"invalid fragment layout: {self}")


DEFAULT_LAYOUT = FragmentLayout()


def chunked(items: Sequence[T], size: int) -> Iterator[Tuple[T, ...]]:
    """Yield consecutive full windows of ``size`` items; a short tail is dropped."""
    if size <= 0:
        raise ValueError("size must be positive")
    for start in range(0, len(items) - size + 1, size):
        yield tuple(items[start : start + size])


def sniff_expected(raw: str) -> ExpectedKind:
    """Classify an expected-output fragment.

    Text starting with an ASCII letter (``True``, ``None``, free-form words)
    is not JSON and is kept verbatim; anything else is parsed as JSON.
    """
    stripped = raw.strip()
    if stripped and stripped[0].isascii() and stripped[0].isalpha():
        return ExpectedKind.RAW_TEXT
    return ExpectedKind.STRUCTURED


def decode_expected(raw: str) -> TaggedValue:
    kind = sniff_expected(raw)
    if kind is ExpectedKind.RAW_TEXT:
        return TaggedValue(kind, raw)
    return TaggedValue(kind, _load_json(raw))


def decode_inputs(raw: str) -> Any:
    return _load_json(raw)


def pair_test_cases(
    fragments: Sequence[str],
    layout: FragmentLayout = DEFAULT_LAYOUT,
    strict: bool = True,
) -> List[TestCase]:
    """Group ``fragments`` into test cases named ``Test Case 1``, ``Test Case 2``...

    A fragment that fails to parse leaves its field UNSET; the case is still
    emitted and numbered.
    """
    remainder = len(fragments) % layout.period
    if len(fragments) < layout.period:
        if fragments:
            print(f"[Pairing] Only {len(fragments)} fragment(s); no complete test case")
        return []
    if remainder:
        message = (
            f"{len(fragments)} fragments do not split into groups of {layout.period}"
            f" ({remainder} left over)"
        )
        if strict:
            raise FragmentAlignmentError(message)
        print(f"[Pairing] Warning: {message}; dropping the tail")

    cases: List[TestCase] = []
    for number, window in enumerate(chunked(fragments, layout.period), start=1):
        case = TestCase(name=f"Test Case {number}")
        try:
            case.inputs = decode_inputs(window[layout.input_offset])
        except FragmentParseError as exc:
            print(f"[Pairing] {case.name}: inputs left unset, {exc}")
        try:
            case.expected = decode_expected(window[layout.expected_offset]).value
        except FragmentParseError as exc:
            print(f"[Pairing] {case.name}: expected left unset, {exc}")
        cases.append(case)
    return cases


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FragmentParseError(raw, exc.msg) from exc

