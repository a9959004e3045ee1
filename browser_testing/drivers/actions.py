# browser_testing/drivers/actions.py
from __future__ import annotations

"""Mouse gestures
-----------------
Backend-neutral mouse gestures. Selenium drivers go through ActionChains;
drivers that ship their own gesture implementation expose `mouse_actions()`.
"""

from typing import Any, Optional, Protocol

from selenium.webdriver.common.action_chains import ActionChains


class MouseActions(Protocol):
    def drag_and_drop(self, source: Any, target: Any) -> None: ...

    def drag_and_drop_by_offset(self, source: Any, x: int, y: int) -> None: ...

    def move_by_offset(self, x: int, y: int) -> None: ...

    def move_to_element(self, element: Any) -> None: ...

    def click(self, element: Optional[Any] = None) -> None: ...

    def click_and_hold(self) -> None: ...

    def double_click(self, element: Optional[Any] = None) -> None: ...

    def context_click(self, element: Optional[Any] = None) -> None: ...

    def release(self) -> None: ...


class SeleniumActions:
    """Each gesture is one performed ActionChains sequence."""

    def __init__(self, driver: Any) -> None:
        self.driver = driver

    def _chain(self) -> ActionChains:
        return ActionChains(self.driver)

    def drag_and_drop(self, source: Any, target: Any) -> None:
        self._chain().drag_and_drop(source, target).perform()

    def drag_and_drop_by_offset(self, source: Any, x: int, y: int) -> None:
        self._chain().drag_and_drop_by_offset(source, x, y).perform()

    def move_by_offset(self, x: int, y: int) -> None:
        self._chain().move_by_offset(x, y).perform()

    def move_to_element(self, element: Any) -> None:
        self._chain().move_to_element(element).perform()

    def click(self, element: Optional[Any] = None) -> None:
        self._chain().click(element).perform()

    def click_and_hold(self) -> None:
        self._chain().click_and_hold().perform()

    def double_click(self, element: Optional[Any] = None) -> None:
        self._chain().double_click(element).perform()

    def context_click(self, element: Optional[Any] = None) -> None:
        self._chain().context_click(element).perform()

    def release(self) -> None:
        self._chain().release().perform()


def actions_for(driver: Any) -> MouseActions:
    factory = getattr(driver, "mouse_actions", None)
    if callable(factory):
        return factory()
    return SeleniumActions(driver)
