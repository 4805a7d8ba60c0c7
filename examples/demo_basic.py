"""Minimal demo: scrape two inline pages with SnapshotSession into ./demo_out."""

from pathlib import Path

from problemspider import NoPacer, Scraper, SnapshotSession, SpiderConfig


def main() -> None:
    base_url = "https://example.com"
    pages = {
        f"{base_url}/questions": """
            <div id="Arrays"><div class="XfBN006G5IBT_e4fZRcU">
                <a href="/questions/sum">Sum</a>
            </div></div>""",
        f"{base_url}/questions/sum": """
            <div><h2>Array Sum</h2></div>
            <div class="ae-workspace-dark">
                <p>Return the sum of
                   every number in the array.</p>
                <pre>array = [1, 2]</pre><pre>3</pre>
            </div>
            <button>Run Code</button>
            <div class="f7nTfdupWXhhK1Frxcbv">
                <div class="aR1l5rhU3UqdVORse042"><div class="ae-workspace-dark">3</div></div>
                <div class="aR1l5rhU3UqdVORse042"><div class="ae-workspace-dark">{"array": [1, 2]}</div></div>
                <div class="aR1l5rhU3UqdVORse042"><div class="ae-workspace-dark">3</div></div>
            </div>""",
    }

    config = SpiderConfig(
        download_root=Path("demo_out"),
        skip_list_path=Path("demo_out") / "urls_to_skip.txt",
        base_url=base_url,
        start_url=f"{base_url}/questions",
        categories=["Arrays"],
        verbose=True,
    )
    report = Scraper(SnapshotSession(pages), config, pacer=NoPacer()).run()

    from pprint import pprint

    pprint(report.counts())


if __name__ == "__main__":
    main()
