"""Tests for the crawl pipeline against a scripted browser."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from problemspider import (
    AutomationSession,
    CrawlStateStore,
    ItemState,
    ElementNotFoundError,
    FragmentLayout,
    NavigationError,
    NoPacer,
    Scraper,
    Selectors,
    SpiderConfig,
    StateStoreError,
)
from problemspider.utils.retry import RetryPolicy

BASE_URL = "https://catalog.test"
START_URL = f"{BASE_URL}/questions"
SELECTORS = Selectors()


@dataclass
class FakeElement:
    text: str
    attrs: Dict[str, str] = field(default_factory=dict)


class ScriptedSession(AutomationSession):
    """Pages are ``{url: {selector: [FakeElement, ...]}}``."""

    def __init__(self, pages: Dict[str, Dict[str, List[FakeElement]]], broken: tuple = ()) -> None:
        self.pages = pages
        self.broken = set(broken)
        self.navigations: List[str] = []
        self.clicks: List[Any] = []
        self.current: Dict[str, List[FakeElement]] = {}

    def navigate(self, url: str) -> None:
        self.navigations.append(url)
        if url in self.broken:
            raise NavigationError(f"boom: {url}")
        self.current = self.pages[url]

    def query(self, selector: str, within: Any = None) -> List[Any]:
        if within is not None:
            return [within]
        return list(self.current.get(selector, []))

    def text(self, element: Any) -> Optional[str]:
        return element.text

    def attribute(self, element: Any, name: str) -> Optional[str]:
        return element.attrs.get(name)

    def click(self, element: Any) -> None:
        self.clicks.append(element)

    def click_with_text(self, selector: str, text: str) -> None:
        self.clicks.append((selector, text))


class NoRetry(RetryPolicy):
    def run(self, func):
        return func()


def question_page(title: str, description: str = "Some text.", fragments: Optional[List[str]] = None):
    fragments = ["1", "[1]", "x"] if fragments is None else fragments
    return {
        SELECTORS.title: [FakeElement(title)],
        SELECTORS.paragraph: [FakeElement(description)] if description else [],
        SELECTORS.example: [FakeElement("in"), FakeElement("out")],
        SELECTORS.collapsed_test_case: [FakeElement("toggle")],
        SELECTORS.test_case_data: [FakeElement(text) for text in fragments],
    }


def catalog(categories: Dict[str, List[str]], questions: Dict[str, dict]):
    start = {
        SELECTORS.question_links(category): [FakeElement(slug, {"href": f"/questions/{slug}"}) for slug in slugs]
        for category, slugs in categories.items()
    }
    pages = {START_URL: start}
    for slug, page in questions.items():
        pages[f"{BASE_URL}/questions/{slug}"] = page
    return pages


def make_scraper(tmp_path, session, categories, **overrides) -> Scraper:
    config = SpiderConfig(
        download_root=tmp_path / "out",
        skip_list_path=tmp_path / "urls_to_skip.txt",
        base_url=BASE_URL,
        start_url=START_URL,
        categories=list(categories),
        languages=["python"],
        **overrides,
    )
    return Scraper(session, config, pacer=NoPacer(), retry_policy=NoRetry())


def _three_item_catalog():
    return catalog(
        {"Arrays": ["a-one", "a-two", "a-three"]},
        {
            "a-one": question_page("First Question"),
            "a-two": question_page("Second Question"),
            "a-three": question_page("Third Question"),
        },
    )


def test_failure_in_middle_item_is_isolated(tmp_path):
    session = ScriptedSession(_three_item_catalog(), broken=(f"{BASE_URL}/questions/a-two",))
    report = make_scraper(tmp_path, session, ["Arrays"]).run()

    assert report.committed == [f"{BASE_URL}/questions/a-one", f"{BASE_URL}/questions/a-three"]
    assert report.failed == [f"{BASE_URL}/questions/a-two"]
    skip_list = (tmp_path / "urls_to_skip.txt").read_text(encoding="utf-8").splitlines()
    assert skip_list == [f"{BASE_URL}/questions/a-one", f"{BASE_URL}/questions/a-three"]
    arrays = tmp_path / "out" / "Arrays"
    assert sorted(p.name for p in arrays.iterdir()) == ["01-First-Question", "03-Third-Question"]


def test_second_run_skips_everything_and_writes_nothing(tmp_path):
    pages = _three_item_catalog()
    make_scraper(tmp_path, ScriptedSession(pages), ["Arrays"]).run()
    skip_list = tmp_path / "urls_to_skip.txt"
    before = skip_list.read_text(encoding="utf-8")
    readme = tmp_path / "out" / "Arrays" / "01-First-Question" / "README.md"
    readme_mtime = readme.stat().st_mtime_ns

    session = ScriptedSession(pages)
    report = make_scraper(tmp_path, session, ["Arrays"]).run()

    assert [o.state for o in report.outcomes] == [ItemState.SKIPPED] * 3
    assert session.navigations == [START_URL]
    assert session.clicks == []
    assert skip_list.read_text(encoding="utf-8") == before
    assert readme.stat().st_mtime_ns == readme_mtime


def test_empty_description_is_rejected_without_output(tmp_path):
    pages = catalog({"Strings": ["blank"]}, {"blank": question_page("Blank Question", description="")})
    report = make_scraper(tmp_path, ScriptedSession(pages), ["Strings"]).run()

    outcome = report.outcomes[0]
    assert outcome.state == ItemState.FAILED
    assert "InvalidRecordError" in outcome.error
    assert not (tmp_path / "out" / "Strings").exists()
    assert (tmp_path / "urls_to_skip.txt").read_text(encoding="utf-8") == ""


def test_successful_item_walks_every_state(tmp_path):
    pages = catalog({"Arrays": ["a-one"]}, {"a-one": question_page("First Question")})
    session = ScriptedSession(pages)
    report = make_scraper(tmp_path, session, ["Arrays"]).run()

    outcome = report.outcomes[0]
    assert outcome.history == [
        ItemState.QUEUED,
        ItemState.NAVIGATING,
        ItemState.EXTRACTING_DESCRIPTION,
        ItemState.EXTRACTING_TEST_CASES,
        ItemState.PERSISTING,
        ItemState.COMMITTED,
    ]
    assert outcome.directory == tmp_path / "out" / "Arrays" / "01-First-Question"
    assert (outcome.directory / "python").is_dir()
    assert set(outcome.timings) == {"navigate", "describe", "test_cases", "persist"}
    assert session.clicks[0] == (SELECTORS.run_button, SELECTORS.run_button_text)


def test_misaligned_fragments_fail_the_item(tmp_path):
    pages = catalog({"Arrays": ["odd"]}, {"odd": question_page("Odd One", fragments=["1", "[1]", "x", "2"])})
    report = make_scraper(tmp_path, ScriptedSession(pages), ["Arrays"]).run()

    outcome = report.outcomes[0]
    assert outcome.state == ItemState.FAILED
    assert outcome.history[-2] == ItemState.EXTRACTING_TEST_CASES
    assert not (tmp_path / "out" / "Arrays").exists()


def test_lenient_pairing_keeps_complete_cases(tmp_path):
    pages = catalog({"Arrays": ["odd"]}, {"odd": question_page("Odd One", fragments=["1", "[1]", "x", "2"])})
    report = make_scraper(tmp_path, ScriptedSession(pages), ["Arrays"], strict_pairing=False).run()
    assert report.outcomes[0].state == ItemState.COMMITTED


def test_duplicate_url_is_scraped_once(tmp_path):
    pages = catalog({"Arrays": ["a-one"], "Sorting": ["a-one"]}, {"a-one": question_page("First Question")})
    report = make_scraper(tmp_path, ScriptedSession(pages), ["Arrays", "Sorting"]).run()

    assert [o.state for o in report.outcomes] == [ItemState.COMMITTED, ItemState.SKIPPED]


def test_position_counts_skipped_items(tmp_path):
    (tmp_path / "urls_to_skip.txt").write_text(f"{BASE_URL}/questions/a-one\n", encoding="utf-8")
    report = make_scraper(tmp_path, ScriptedSession(_three_item_catalog()), ["Arrays"]).run()

    directories = [o.directory.name for o in report.outcomes if o.directory]
    assert directories == ["02-Second-Question", "03-Third-Question"]


def test_max_items_stops_early(tmp_path):
    report = make_scraper(tmp_path, ScriptedSession(_three_item_catalog()), ["Arrays"], max_items=2).run()
    assert len(report.outcomes) == 2
    assert len(report.committed) == 2


def test_state_store_failure_aborts_the_run(tmp_path):
    class BrokenStore(CrawlStateStore):
        def commit(self, url: str) -> None:
            raise StateStoreError("disk full")

    session = ScriptedSession(_three_item_catalog())
    scraper = make_scraper(tmp_path, session, ["Arrays"])
    scraper.store = BrokenStore(tmp_path / "urls_to_skip.txt")

    with pytest.raises(StateStoreError):
        scraper.run()
    assert session.navigations == [START_URL, f"{BASE_URL}/questions/a-one"]


def test_navigation_is_retried(tmp_path):
    class FlakySession(ScriptedSession):
        def __init__(self, pages):
            super().__init__(pages)
            self.failures = 1

        def navigate(self, url):
            if url.endswith("a-one") and self.failures:
                self.failures -= 1
                self.navigations.append(url)
                raise NavigationError("timeout")
            super().navigate(url)

    pages = catalog({"Arrays": ["a-one"]}, {"a-one": question_page("First Question")})
    session = FlakySession(pages)
    scraper = make_scraper(tmp_path, session, ["Arrays"])
    scraper.retry_policy = RetryPolicy(max_attempts=2, initial_delay=0.0)

    report = scraper.run()

    assert report.committed == [f"{BASE_URL}/questions/a-one"]
    assert session.navigations.count(f"{BASE_URL}/questions/a-one") == 2


def test_report_summarizes_stage_timings(tmp_path):
    report = make_scraper(tmp_path, ScriptedSession(_three_item_catalog()), ["Arrays"]).run()
    summary = report.timing_summary()

    assert summary["persist"]["count"] == 3.0
    assert summary["navigate"]["min"] <= summary["navigate"]["max"]
    assert report.counts() == {"committed": 3, "skipped": 0, "failed": 0}


def test_failure_while_reading_test_cases_is_isolated(tmp_path):
    class NoRunButtonSession(ScriptedSession):
        def click_with_text(self, selector, text):
            if self.navigations[-1].endswith("a-two"):
                raise ElementNotFoundError(f"no {selector!r} with text {text!r}")
            super().click_with_text(selector, text)

    report = make_scraper(tmp_path, NoRunButtonSession(_three_item_catalog()), ["Arrays"]).run()

    outcome = report.outcomes[1]
    assert outcome.state == ItemState.FAILED
    assert outcome.history[-2] == ItemState.EXTRACTING_TEST_CASES
    assert "ElementNotFoundError" in outcome.error
    assert report.committed == [f"{BASE_URL}/questions/a-one", f"{BASE_URL}/questions/a-three"]
    skip_list = (tmp_path / "urls_to_skip.txt").read_text(encoding="utf-8").splitlines()
    assert f"{BASE_URL}/questions/a-two" not in skip_list
    assert not (tmp_path / "out" / "Arrays" / "02-Second-Question").exists()


def test_configured_layout_reads_input_after_hidden_fragment(tmp_path):
    pages = catalog({"Arrays": ["shifted"]}, {"shifted": question_page("Shifted", fragments=["7", "hidden", "[7]"])})
    layout = FragmentLayout(period=3, expected_offset=0, input_offset=2)

    report = make_scraper(tmp_path, ScriptedSession(pages), ["Arrays"], fragment_layout=layout).run()

    outcome = report.outcomes[0]
    assert outcome.state == ItemState.COMMITTED
    saved = json.loads((outcome.directory / "testcases.json").read_text(encoding="utf-8"))
    assert saved == [{"inputs": [7], "expected": 7, "name": "Test Case 1"}]
