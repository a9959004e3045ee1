# browser_testing/core/page.py
from __future__ import annotations

"""Page and component objects
-----------------------------
Pages describe a URL plus selector aliases; components describe a root
selector plus aliases scoped beneath it. Both can expose extensions: methods
marked with @extension become callable on a browser viewing them.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict

if TYPE_CHECKING:
    from browser_testing.core.browser import Browser


def extension(func: Callable) -> Callable:
    """
    Mark a page/component method as callable through the browser.

        class LoginPage(Page):
            @extension
            def login_as(self, browser, email): ...

        browser.visit(LoginPage()).login_as("a@b.c")
    """
    func.__browser_extension__ = True
    return func


class Extensible:
    """Collects @extension methods into a per-class registry."""

    _extension_names: frozenset[str] = frozenset()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        names = set()
        for klass in cls.__mro__:
            for name, attr in vars(klass).items():
                if getattr(attr, "__browser_extension__", False):
                    names.add(name)
        cls._extension_names = frozenset(names)

    def extensions(self) -> Dict[str, Callable]:
        return {name: getattr(self, name) for name in self._extension_names}


class Page(Extensible, ABC):

    @abstractmethod
    def url(self) -> str:
        """URL (absolute, or relative to the base URL) of the page."""

    def assert_on(self, browser: "Browser") -> None:
        """Assert that the browser is on the page."""

    def elements(self) -> Dict[str, str]:
        """Selector aliases for the page."""
        return {}

    @classmethod
    def site_elements(cls) -> Dict[str, str]:
        """Selector aliases shared by every page of the site."""
        return {}


class Component(Extensible, ABC):

    @abstractmethod
    def selector(self) -> str:
        """Root selector of the component."""

    def assert_on(self, browser: "Browser") -> None:
        """Assert that the current page contains the component."""

    def elements(self) -> Dict[str, str]:
        return {}

    def __str__(self) -> str:
        return ""
