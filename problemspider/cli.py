"""Command line entry point for ProblemSpider."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .automation import AutomationSession, PlaywrightSession, SeleniumSession
from .config import SpiderConfig, settings
from .errors import SpiderError
from .pipeline import build_scraper
from .snapshot import SnapshotSession


def _build_session(args: argparse.Namespace) -> AutomationSession:
    if args.backend == "snapshot":
        if not args.snapshot_dir:
            raise SpiderError("--snapshot-dir is required with --backend snapshot")
        return SnapshotSession.from_directory(args.snapshot_dir)
    if args.backend == "selenium":
        return SeleniumSession(cdp_url=args.cdp_url).connect()
    return PlaywrightSession(cdp_url=args.cdp_url).connect()


def _build_config(args: argparse.Namespace) -> SpiderConfig:
    config = SpiderConfig.from_file(args.config) if args.config else SpiderConfig()
    return config.with_overrides(
        download_root=args.out,
        skip_list_path=args.skip_list,
        categories=args.category,
        languages=args.language,
        max_items=args.max_items,
        strict_pairing=False if args.lenient_pairing else None,
        verbose=True if args.verbose else None,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("problemspider", description="Scrape coding challenges into a local tree.")
    parser.add_argument("--config", type=Path, default=None, help="JSON file overriding default settings.")
    parser.add_argument("--out", type=Path, default=None, help="Download root directory.")
    parser.add_argument("--skip-list", type=Path, default=None, help="File of already scraped URLs.")
    parser.add_argument(
        "--category",
        action="append",
        default=None,
        help="Repeatable; restrict the run to these categories, in order.",
    )
    parser.add_argument(
        "--language",
        action="append",
        default=None,
        help="Repeatable; one empty solution folder is created per language.",
    )
    parser.add_argument(
        "--backend",
        default="playwright",
        choices=["playwright", "selenium", "snapshot"],
        help="How to talk to the browser.",
    )
    parser.add_argument(
        "--cdp-url",
        default=None,
        help=f"DevTools endpoint of the logged-in Chrome (default {settings.cdp_url}).",
    )
    parser.add_argument("--snapshot-dir", type=Path, default=None, help="Saved pages for --backend snapshot.")
    parser.add_argument("--no-delay", action="store_true", help="Disable the randomized pauses.")
    parser.add_argument(
        "--lenient-pairing",
        action="store_true",
        help="Drop a trailing partial test case instead of failing the question.",
    )
    parser.add_argument("--max-items", type=int, default=None, help="Stop after scraping this many questions.")
    parser.add_argument("--verbose", action="store_true", help="Print test cases and stage timings.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    session: AutomationSession | None = None
    try:
        config = _build_config(args)
        session = _build_session(args)
        scraper = build_scraper(session, config, no_delay=args.no_delay or args.backend == "snapshot")
        report = scraper.run()
    except (SpiderError, OSError) as exc:
        print(f"[ERROR] {exc}")
        return 2
    finally:
        if session is not None:
            session.close()

    return 1 if report.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
