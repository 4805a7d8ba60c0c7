"""Write scraped challenges to the download tree."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Sequence

from .models import ChallengeRecord, TestCase

README_NAME = "README.md"
TEST_CASES_NAME = "testcases.json"


def item_dir_name(position: int, title: str) -> str:
    """``03-Two-Number-Sum`` for position 3; positions above 9 are not padded."""
    if position < 1:
        raise ValueError(f"position must be 1-based, got {position}")
    number = f"0{position}" if position < 10 else str(position)
    return f"{number}-{title.strip().replace(' ', '-')}"


def render_markdown(record: ChallengeRecord) -> str:
    return (
        f"## {record.title}\n"
        "\n"
        f"{record.description}\n"
        "\n"
        "### Sample Input\n"
        "```\n"
        f"{record.example_input}\n"
        "```\n"
        "\n"
        "### Sample Output\n"
        "```\n"
        f"{record.example_output}\n"
        "```\n"
    )


def dump_test_cases(cases: Iterable[TestCase]) -> str:
    return json.dumps([case.to_dict() for case in cases], ensure_ascii=False, indent=2)


def load_test_cases(path: Path) -> List[TestCase]:
    with Path(path).open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return [TestCase.from_dict(item) for item in data]


class ChallengeWriter:
    """Lay out ``<root>/<category>/<NN-Title>/`` with the README, test cases and language folders."""

    def __init__(self, root: Path, languages: Sequence[str] = ()) -> None:
        self.root = Path(root)
        self.languages = list(languages)

    def item_dir(self, category: str, position: int, title: str) -> Path:
        return self.root / category / item_dir_name(position, title)

    def write(
        self,
        category: str,
        position: int,
        record: ChallengeRecord,
        cases: Sequence[TestCase],
    ) -> Path:
        if not record.is_valid():
            raise ValueError("refusing to write a record without title or description")

        directory = self.item_dir(category, position, record.title)
        directory.mkdir(parents=True, exist_ok=True)
        for language in self.languages:
            (directory / language).mkdir(exist_ok=True)

        with (directory / README_NAME).open("w", encoding="utf-8") as handle:
            handle.write(render_markdown(record))
        with (directory / TEST_CASES_NAME).open("w", encoding="utf-8") as handle:
            handle.write(dump_test_cases(cases))
        return directory
