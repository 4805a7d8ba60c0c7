"""Read challenge content and raw test-case fragments off a question page."""

from __future__ import annotations

import re
from typing import List, Optional

from .automation import AutomationSession, NoPacer, Pacer
from .config import DelayWindow, Selectors
from .errors import InvalidRecordError
from .models import ChallengeRecord

_NEWLINE_SPACES_RE = re.compile(r"\n\s+")


def remove_newline_spaces(text: str) -> str:
    """Drop the indentation that follows each newline, then trim."""
    return _NEWLINE_SPACES_RE.sub("\n", text).strip()


class ChallengeExtractor:
    """Extract a :class:`ChallengeRecord` and the test-case fragments of the current page."""

    def __init__(
        self,
        session: AutomationSession,
        selectors: Selectors,
        pacer: Pacer | None = None,
        run_code_delay: DelayWindow = DelayWindow(10.0, 13.0),
        expand_delay: DelayWindow = DelayWindow(4.0, 7.0),
    ) -> None:
        self.session = session
        self.selectors = selectors
        self.pacer = pacer or NoPacer()
        self.run_code_delay = run_code_delay
        self.expand_delay = expand_delay

    def extract_record(self) -> ChallengeRecord:
        title = self.first_text(self.selectors.title)
        if not title or not title.strip():
            raise InvalidRecordError("challenge title is missing")

        paragraphs = self.all_texts(self.selectors.paragraph)
        description = "\n\n".join(remove_newline_spaces(p) for p in paragraphs).strip()
        if not description:
            raise InvalidRecordError(f"challenge {title.strip()!r} has no description")

        examples = self.all_texts(self.selectors.example)
        if len(examples) < 2:
            print(f"[Extractor] {title.strip()!r}: expected 2 example blocks, found {len(examples)}")
        example_input = examples[0].strip() if len(examples) > 0 else ""
        example_output = examples[1].strip() if len(examples) > 1 else ""

        return ChallengeRecord(
            title=title.strip(),
            description=description,
            example_input=example_input,
            example_output=example_output,
        )

    def extract_fragments(self) -> List[str]:
        """Run the code, expand every collapsed test case, then read all fragments."""
        self.session.click_with_text(self.selectors.run_button, self.selectors.run_button_text)
        self.pacer.pause(self.run_code_delay)

        for toggle in self.session.query(self.selectors.collapsed_test_case):
            self.session.click(toggle)
            self.pacer.pause(self.expand_delay)

        fragments: List[str] = []
        for container in self.session.query(self.selectors.test_case_data):
            nested = self.session.query(self.selectors.test_case_text, within=container)
            text = self.session.text(nested[0]) if nested else None
            fragments.append(text if text is not None else "")
        return fragments

    def first_text(self, selector: str) -> Optional[str]:
        elements = self.session.query(selector)
        if not elements:
            print(f"[Extractor] Error finding element with selector {selector!r}")
            return None
        return self.session.text(elements[0])

    def all_texts(self, selector: str) -> List[str]:
        texts: List[str] = []
        for element in self.session.query(selector):
            text = self.session.text(element)
            if text is not None:
                texts.append(text)
        return texts
