# browser_testing/testing/provider.py
from __future__ import annotations

"""Browser provider
-------------------
Hands browsers to test callbacks and cleans up after them. The primary browser
survives between tests; extra browsers requested by a callback are closed
once it returns.
"""

import inspect
from typing import Any, Callable, List, Optional, Type

from browser_testing.core.browser import Browser
from browser_testing.utils.config import BrowserConfig, get_settings
from browser_testing.utils.logger import get_logger, log_with_context
from browser_testing.utils.timing import measure, retry

DRIVER_TRIES = 5
DRIVER_RETRY_DELAY_MS = 50


def browsers_needed_for(callback: Callable[..., Any]) -> int:
    """Number of positional parameters the callback declares."""
    params = inspect.signature(callback).parameters.values()
    return sum(
        1 for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    )


class BrowserProvider:

    def __init__(
        self,
        driver_factory: Callable[[], Any],
        config: Optional[BrowserConfig] = None,
        browser_class: Type[Browser] = Browser,
    ) -> None:
        self.driver_factory = driver_factory
        self.config = config or BrowserConfig.from_settings(get_settings())
        self.browser_class = browser_class
        self.browsers: List[Browser] = []
        self.log = get_logger(__name__)

    def browse(self, callback: Callable[..., Any], test_name: str = "browser") -> None:
        """
        Run `callback` with one browser per declared parameter.

        On failure every browser is screenshotted (`failure-<test>-<i>`) and,
        where a source assertion was made, its page source is stored. Console
        logs are stored either way.
        """
        needed = browsers_needed_for(callback)
        browsers = self.create_browsers_for(needed)
        try:
            callback(*browsers[:needed])
        except Exception:
            self.capture_failures_for(browsers, test_name)
            self.store_source_logs_for(browsers, test_name)
            raise
        finally:
            self.store_console_logs_for(browsers, test_name)
            self.browsers = self.close_all_but_primary(browsers)

    def create_browsers_for(self, needed: int) -> List[Browser]:
        if not self.browsers:
            self.browsers = [self.new_browser(self.create_web_driver())]

        for _ in range(needed - 1):
            self.browsers.append(self.new_browser(self.create_web_driver()))
        return self.browsers

    def new_browser(self, driver: Any) -> Browser:
        return self.browser_class(driver, config=self.config)

    @measure("create driver")
    def create_web_driver(self) -> Any:
        return retry(
            self.driver_factory,
            tries=DRIVER_TRIES,
            initial_delay_ms=DRIVER_RETRY_DELAY_MS,
            max_delay_ms=DRIVER_RETRY_DELAY_MS,
            factor=1.0,
            jitter=0.0,
        )

    def capture_failures_for(self, browsers: List[Browser], test_name: str) -> None:
        for key, browser in enumerate(browsers):
            if browser.fit_on_failure:
                browser.fit_content()
            log_with_context(self.log, test=test_name, browser=key).info("capturing failure screenshot")
            browser.screenshot(f"failure-{test_name}-{key}")

    def store_console_logs_for(self, browsers: List[Browser], test_name: str) -> None:
        for key, browser in enumerate(browsers):
            browser.store_console_log(f"{test_name}-{key}")

    def store_source_logs_for(self, browsers: List[Browser], test_name: str) -> None:
        for key, browser in enumerate(browsers):
            if browser.made_source_assertion:
                browser.store_source(f"{test_name}-{key}")

    def close_all_but_primary(self, browsers: List[Browser]) -> List[Browser]:
        for browser in browsers[1:]:
            browser.quit()
        return browsers[:1]

    def close_all(self) -> None:
        for browser in self.browsers:
            browser.quit()
        self.browsers = []
