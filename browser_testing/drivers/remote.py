# browser_testing/drivers/remote.py
from __future__ import annotations

from typing import Any, Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

from browser_testing.utils.config import DriverBackend, Settings, get_settings
from browser_testing.utils.logger import get_logger

log = get_logger(__name__)


def chrome_options(settings: Settings) -> ChromeOptions:
    options = ChromeOptions()
    for arg in settings.chrome_arguments():
        options.add_argument(arg)
    return options


def create_remote_driver(settings: Optional[Settings] = None) -> webdriver.Remote:
    """Connect to the WebDriver endpoint (a chromedriver on DRIVER_URL by default)."""
    s = settings or get_settings()
    log.debug(f"Connecting to WebDriver at {s.DRIVER_URL}")
    return webdriver.Remote(command_executor=s.DRIVER_URL, options=chrome_options(s))


def create_driver(settings: Optional[Settings] = None) -> Any:
    """Create a driver for the configured backend."""
    s = settings or get_settings()
    if s.DRIVER_BACKEND == DriverBackend.playwright:
        from browser_testing.drivers.playwright_driver import PlaywrightDriver

        return PlaywrightDriver.launch(s)
    return create_remote_driver(s)
