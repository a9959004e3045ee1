# browser_testing/core/__init__.py
"""
Core package: browser scope, waiter, interactions and assertions.
Lightweight init to avoid import cycles with the selectors package.

Consumers should import submodules directly, e.g.:
  from browser_testing.core.browser import Browser
  from browser_testing.core.page import Page, Component, extension
"""

__all__: list[str] = []
