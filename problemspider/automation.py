"""Browser automation sessions attached to an already-authenticated Chrome.

To start Chrome with a debugging port, run for example::

    google-chrome --remote-debugging-port=9222

then log in by hand; the sessions below only attach to that browser.
"""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .config import DelayWindow, settings
from .errors import ElementNotFoundError, NavigationError


class AutomationSession(ABC):
    """Narrow browser capability consumed by the crawl pipeline."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """Load ``url`` and wait until the page settles."""

    @abstractmethod
    def query(self, selector: str, within: Any = None) -> List[Any]:
        """Return handles matching ``selector`` in document order, or ``[]``."""

    @abstractmethod
    def text(self, element: Any) -> Optional[str]:
        """Return the text content of ``element``."""

    @abstractmethod
    def attribute(self, element: Any, name: str) -> Optional[str]:
        """Return attribute ``name`` of ``element`` or None."""

    @abstractmethod
    def click(self, element: Any) -> None:
        """Click ``element``."""

    @abstractmethod
    def click_with_text(self, selector: str, text: str) -> None:
        """Click the first element matching ``selector`` whose text contains ``text``."""

    def close(self) -> None:
        """Release the session. Attached browsers are left running."""


class Pacer:
    """Sleep for a random duration to mimic human pacing."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()

    def pause(self, window: DelayWindow) -> float:
        delay = self.rng.uniform(window.low, window.high)
        time.sleep(delay)
        return delay


class NoPacer(Pacer):
    def pause(self, window: DelayWindow) -> float:
        return 0.0


class PlaywrightSession(AutomationSession):
    """Drive a page opened in an existing Chrome via the DevTools protocol."""

    def __init__(self, cdp_url: str | None = None, query_timeout: float | None = None) -> None:
        self.cdp_url = cdp_url or settings.cdp_url
        self.query_timeout_ms = int((query_timeout or settings.query_timeout) * 1000)
        self._playwright = None
        self._browser = None
        self.page = None

    def connect(self) -> "PlaywrightSession":
        from playwright.sync_api import sync_playwright

        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.connect_over_cdp(self.cdp_url)
        contexts = self._browser.contexts
        context = contexts[0] if contexts else self._browser.new_context()
        self.page = context.new_page()
        print(f"[Playwright] Connected to {self.cdp_url}")
        return self

    def navigate(self, url: str) -> None:
        from playwright.sync_api import Error as PlaywrightError

        try:
            self.page.goto(
                url,
                wait_until="networkidle",
                timeout=int(settings.navigation_timeout * 1000),
            )
        except PlaywrightError as exc:
            raise NavigationError(f"failed to load {url}: {exc}") from exc

    def query(self, selector: str, within: Any = None) -> List[Any]:
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        root = within if within is not None else self.page
        locator = root.locator(selector)
        try:
            locator.first.wait_for(state="attached", timeout=self.query_timeout_ms)
        except PlaywrightTimeoutError:
            print(f"[Playwright] No element for selector {selector!r}")
            return []
        return locator.all()

    def text(self, element: Any) -> Optional[str]:
        return element.text_content(timeout=self.query_timeout_ms)

    def attribute(self, element: Any, name: str) -> Optional[str]:
        return element.get_attribute(name, timeout=self.query_timeout_ms)

    def click(self, element: Any) -> None:
        element.click(timeout=self.query_timeout_ms)

    def click_with_text(self, selector: str, text: str) -> None:
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        try:
            self.page.locator(selector, has_text=text).first.click(timeout=self.query_timeout_ms)
        except PlaywrightTimeoutError as exc:
            raise ElementNotFoundError(f"no {selector!r} with text {text!r}") from exc

    def close(self) -> None:
        if self.page is not None:
            self.page.close()
            self.page = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
        self._browser = None


class SeleniumSession(AutomationSession):
    """Same capability through Selenium's Chrome driver and ``debuggerAddress``."""

    def __init__(self, cdp_url: str | None = None, query_timeout: float | None = None) -> None:
        self.cdp_url = cdp_url or settings.cdp_url
        self.query_timeout = query_timeout or settings.query_timeout
        self.driver = None

    def connect(self) -> "SeleniumSession":
        from selenium import webdriver
        from selenium.webdriver.chrome.options import Options

        options = Options()
        address = self.cdp_url.split("://", 1)[-1].rstrip("/")
        options.add_experimental_option("debuggerAddress", address)
        self.driver = webdriver.Chrome(options=options)
        self.driver.set_page_load_timeout(settings.navigation_timeout)
        print(f"[Selenium] Connected to {address}")
        return self

    def navigate(self, url: str) -> None:
        from selenium.common.exceptions import WebDriverException

        try:
            self.driver.get(url)
        except WebDriverException as exc:
            raise NavigationError(f"failed to load {url}: {exc}") from exc

    def query(self, selector: str, within: Any = None) -> List[Any]:
        from selenium.common.exceptions import TimeoutException
        from selenium.webdriver.common.by import By
        from selenium.webdriver.support import expected_conditions as EC
        from selenium.webdriver.support.ui import WebDriverWait

        if within is not None:
            return within.find_elements(By.CSS_SELECTOR, selector)
        try:
            return WebDriverWait(self.driver, self.query_timeout).until(
                EC.presence_of_all_elements_located((By.CSS_SELECTOR, selector))
            )
        except TimeoutException:
            print(f"[Selenium] No element for selector {selector!r}")
            return []

    def text(self, element: Any) -> Optional[str]:
        return element.get_attribute("textContent")

    def attribute(self, element: Any, name: str) -> Optional[str]:
        return element.get_attribute(name)

    def click(self, element: Any) -> None:
        element.click()

    def click_with_text(self, selector: str, text: str) -> None:
        for element in self.query(selector):
            if text in (self.text(element) or ""):
                element.click()
                return
        raise ElementNotFoundError(f"no {selector!r} with text {text!r}")

    def close(self) -> None:
        # quit() would close the user's browser; only drop the handle
        self.driver = None
