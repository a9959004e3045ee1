# browser_testing/testing/plugin.py
from __future__ import annotations

"""pytest plugin
----------------
Registered through the `pytest11` entry point. Tests request `browse`:

    def test_login(browse):
        browse(lambda browser: browser.visit("/login").assert_see("Log in"))
"""

import re
from typing import Any, Callable, Iterator, Optional

import pytest

from browser_testing.drivers.chrome import ChromeProcess
from browser_testing.drivers.remote import create_driver
from browser_testing.testing.provider import BrowserProvider
from browser_testing.utils.config import BrowserConfig, Settings, get_settings
from browser_testing.utils.logger import bind, get_logger, unbind

log = get_logger(__name__)


def caller_name(nodeid: str) -> str:
    """Filesystem-safe artifact name for a test node id."""
    return re.sub(r"[^\w\-\[\]]+", "_", nodeid).strip("_")


@pytest.fixture(scope="session")
def browser_settings() -> Settings:
    return get_settings()


@pytest.fixture(scope="session")
def browser_config(browser_settings: Settings) -> BrowserConfig:
    return BrowserConfig.from_settings(browser_settings)


@pytest.fixture(scope="session")
def chromedriver(browser_settings: Settings) -> Iterator[Optional[ChromeProcess]]:
    """A chromedriver for the session when START_CHROMEDRIVER is set."""
    if not browser_settings.START_CHROMEDRIVER:
        yield None
        return

    process = ChromeProcess(settings=browser_settings)
    with process:
        yield process


@pytest.fixture(scope="session")
def browser_driver_factory(browser_settings: Settings, chromedriver) -> Callable[[], Any]:
    return lambda: create_driver(browser_settings)


@pytest.fixture(scope="session")
def browser_provider(browser_driver_factory, browser_config: BrowserConfig) -> Iterator[BrowserProvider]:
    provider = BrowserProvider(browser_driver_factory, browser_config)
    try:
        yield provider
    finally:
        provider.close_all()


@pytest.fixture
def browse(browser_provider: BrowserProvider, request) -> Iterator[Callable[[Callable[..., Any]], None]]:
    name = caller_name(request.node.nodeid)
    bind(test=name)
    try:
        yield lambda callback: browser_provider.browse(callback, name)
    finally:
        unbind("test")
