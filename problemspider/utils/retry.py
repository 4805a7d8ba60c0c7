"""Retry helper for flaky browser calls."""

from __future__ import annotations

import time
from typing import Callable, Tuple, Type, TypeVar

from ..config import settings
from ..errors import NavigationError

T = TypeVar("T")


class RetryPolicy:
    """Exponential backoff around a callable, retrying only ``retry_on`` errors."""

    def __init__(
        self,
        max_attempts: int | None = None,
        backoff: float | None = None,
        initial_delay: float = 2.0,
        retry_on: Tuple[Type[BaseException], ...] = (NavigationError,),
    ) -> None:
        self.max_attempts = max(1, max_attempts if max_attempts is not None else settings.max_retries)
        self.backoff = backoff if backoff is not None else settings.backoff_factor
        self.initial_delay = initial_delay
        self.retry_on = retry_on

    def run(self, func: Callable[[], T]) -> T:
        delay = self.initial_delay
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func()
            except self.retry_on as exc:
                if attempt == self.max_attempts:
                    raise
                print(f"[Retry] Attempt {attempt}/{self.max_attempts} failed ({exc}); retrying in {delay:.1f}s")
                time.sleep(delay)
                delay *= self.backoff
        raise AssertionError("unreachable")
