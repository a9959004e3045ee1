# browser_testing/__init__.py
"""
browser-testing
---------------
Fluent browser tests over a WebDriver-compatible driver: short selectors,
page/component objects, polling waits and pytest fixtures.
"""

from browser_testing.core.browser import Browser
from browser_testing.core.errors import (
    BrowserTestingError,
    InvalidArgumentError,
    NotFoundError,
    UnknownExtensionError,
    WaitTimeoutError,
)
from browser_testing.core.page import Component, Page, extension
from browser_testing.selectors.resolver import ElementResolver
from browser_testing.utils.config import BrowserConfig, Settings, get_settings

__version__ = "0.1.0"

__all__ = [
    "Browser",
    "BrowserConfig",
    "BrowserTestingError",
    "Component",
    "ElementResolver",
    "InvalidArgumentError",
    "NotFoundError",
    "Page",
    "Settings",
    "UnknownExtensionError",
    "WaitTimeoutError",
    "extension",
    "get_settings",
]
