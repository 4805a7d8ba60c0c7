"""Crawl orchestration: index categories, then scrape each challenge once."""

from __future__ import annotations

import json
from typing import Dict, List

from .automation import AutomationSession, NoPacer, Pacer
from .config import SpiderConfig
from .errors import InvalidRecordError
from .extractor import ChallengeExtractor
from .indexer import CategoryIndexer
from .metrics.system_metrics import stage_timer
from .models import ItemOutcome, ItemState, RunReport
from .output import ChallengeWriter
from .pairing import pair_test_cases
from .state import CrawlStateStore
from .utils.retry import RetryPolicy


class Scraper:
    """Drive one browser page through every configured category.

    Items run strictly one at a time. A URL reaches the skip-list only after
    its README and test cases are on disk; any other failure is logged and
    the next URL is processed.
    """

    def __init__(
        self,
        session: AutomationSession,
        config: SpiderConfig,
        store: CrawlStateStore | None = None,
        pacer: Pacer | None = None,
        retry_policy: RetryPolicy | None = None,
        writer: ChallengeWriter | None = None,
    ) -> None:
        self.session = session
        self.config = config
        self.store = store or CrawlStateStore(config.skip_list_path)
        self._state_loaded = False
        self.pacer = pacer or Pacer()
        self.retry_policy = retry_policy or RetryPolicy()
        self.writer = writer or ChallengeWriter(config.download_root, config.languages)
        self.indexer = CategoryIndexer(session, config.selectors, config.base_url)
        self.extractor = ChallengeExtractor(
            session,
            config.selectors,
            pacer=self.pacer,
            run_code_delay=config.run_code_delay,
            expand_delay=config.expand_delay,
        )

    def run(self) -> RunReport:
        self._load_state()

        print(f"[Scraper] Opening {self.config.start_url}")
        self._navigate(self.config.start_url)
        index = self.indexer.index_all(self.config.categories)
        return self.run_index(index)

    def run_index(self, index: Dict[str, List[str]]) -> RunReport:
        """Process already-indexed categories in the given order."""
        self._load_state()
        report = RunReport()
        processed = 0
        total = sum(len(urls) for urls in index.values())
        seen = 0

        for category, urls in index.items():
            print(f"[Scraper] Category {category!r}: {len(urls)} questions")
            for position, url in enumerate(urls, start=1):
                seen += 1
                if self.config.max_items is not None and processed >= self.config.max_items:
                    print(f"[Scraper] Reached max_items={self.config.max_items}; stopping")
                    return self._finish(report)
                print(f"[Scraper] [{seen}/{total}] {url}")
                outcome = self.process_item(category, position, url)
                report.outcomes.append(outcome)
                if outcome.state != ItemState.SKIPPED:
                    processed += 1

        return self._finish(report)

    def process_item(self, category: str, position: int, url: str) -> ItemOutcome:
        outcome = ItemOutcome(url=url, category=category, position=position)
        if self.store.contains(url):
            outcome.advance(ItemState.SKIPPED)
            print(f"[Scraper] Skipping already scraped {url}")
            return outcome

        try:
            outcome.advance(ItemState.NAVIGATING)
            with stage_timer(outcome.timings, "navigate"):
                self._navigate(url)

            outcome.advance(ItemState.EXTRACTING_DESCRIPTION)
            with stage_timer(outcome.timings, "describe"):
                record = self.extractor.extract_record()
            if not record.is_valid():
                raise InvalidRecordError(f"incomplete record for {url}")

            outcome.advance(ItemState.EXTRACTING_TEST_CASES)
            with stage_timer(outcome.timings, "test_cases"):
                fragments = self.extractor.extract_fragments()
                cases = pair_test_cases(
                    fragments,
                    layout=self.config.fragment_layout,
                    strict=self.config.strict_pairing,
                )
            if self.config.verbose:
                print(json.dumps([case.to_dict() for case in cases], ensure_ascii=False, indent=2))

            outcome.advance(ItemState.PERSISTING)
            with stage_timer(outcome.timings, "persist"):
                outcome.directory = self.writer.write(category, position, record, cases)
        except Exception as exc:
            outcome.error = f"{type(exc).__name__}: {exc}"
            outcome.advance(ItemState.FAILED)
            print(f"[Scraper] Failed {url} during {outcome.history[-2].value}: {outcome.error}")
            return outcome

        self.store.commit(url)
        outcome.advance(ItemState.COMMITTED)
        print(f"[Scraper] Saved {record.title!r} ({len(cases)} test cases) to {outcome.directory}")
        return outcome

    def _load_state(self) -> None:
        if not self._state_loaded:
            self.store.load()
            self._state_loaded = True

    def _navigate(self, url: str) -> None:
        self.retry_policy.run(lambda: self.session.navigate(url))
        self.pacer.pause(self.config.navigation_delay)

    def _finish(self, report: RunReport) -> RunReport:
        counts = report.counts()
        print(
            "[Scraper] Done: "
            f"committed={counts['committed']} skipped={counts['skipped']} failed={counts['failed']}"
        )
        for url in report.failed:
            print(f"[Scraper] Not scraped (will retry next run): {url}")
        if self.config.verbose:
            for stage, stats in report.timing_summary().items():
                print(f"[Scraper] {stage}: mean={stats['mean']:.2f}s max={stats['max']:.2f}s n={int(stats['count'])}")
        return report


def build_scraper(session: AutomationSession, config: SpiderConfig, no_delay: bool = False) -> Scraper:
    return Scraper(session, config, pacer=NoPacer() if no_delay else Pacer())
