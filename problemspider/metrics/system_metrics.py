from __future__ import annotations

import math
import time
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator


@contextmanager
def stage_timer(timings: Dict[str, float], stage: str) -> Iterator[None]:
    """Add the wall time spent in the block to ``timings[stage]``, even on error."""
    started = time.perf_counter()
    try:
        yield
    finally:
        timings[stage] = timings.get(stage, 0.0) + (time.perf_counter() - started)


def aggregate_timings(timings_list: Iterable[Dict[str, float]]) -> Dict[str, Dict[str, float]]:
    """
    Per stage (navigate, describe, test_cases, persist): count/total/mean/std/min/max
    """
    buckets: Dict[str, list] = {}

    for t in timings_list:
        for k, v in t.items():
            buckets.setdefault(k, []).append(v)

    summary: Dict[str, Dict[str, float]] = {}
    for k, vals in buckets.items():
        n = len(vals)
        total = sum(vals)
        mean = total / n
        std = math.sqrt(sum((x - mean) ** 2 for x in vals) / n)
        summary[k] = {
            "count": float(n),
            "total": total,
            "mean": mean,
            "std": std,
            "min": min(vals),
            "max": max(vals),
        }

    return summary
