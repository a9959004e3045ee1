# browser_testing/core/errors.py
from __future__ import annotations

from typing import Optional


class BrowserTestingError(Exception):
    """Base class for errors raised by this package."""


class NotFoundError(BrowserTestingError):
    """A selector, field or button could not be resolved to an element."""

    def __init__(self, message: str, selector: Optional[str] = None):
        super().__init__(message)
        self.selector = selector


class InvalidArgumentError(BrowserTestingError, ValueError):
    """The caller did not supply enough information to resolve an element."""


class WaitTimeoutError(BrowserTestingError, TimeoutError):
    """A polling wait exceeded its deadline."""

    def __init__(self, message: str, seconds: float):
        super().__init__(message)
        self.seconds = seconds


class UnknownExtensionError(BrowserTestingError, AttributeError):
    """Neither the current component nor page registers the requested extension."""
