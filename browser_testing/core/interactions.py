# browser_testing/core/interactions.py
from __future__ import annotations

"""Element interactions
-----------------------
Typing, selecting, clicking, dragging, dialogs and cookies, all addressed with
resolver selectors. The Browser exposes these fluently.
"""

import random
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union
from urllib.parse import unquote

from selenium.common.exceptions import NoSuchCookieException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.file_detector import LocalFileDetector
from selenium.webdriver.remote.webdriver import WebDriver as RemoteWebDriver

from browser_testing.core.errors import InvalidArgumentError, NotFoundError
from browser_testing.core.waiter import DEFAULT_INTERVAL_MS, Waiter
from browser_testing.drivers.actions import actions_for
from browser_testing.selectors.resolver import ElementResolver
from browser_testing.utils.logger import get_logger

# Finds the first visible element matching arguments[0] whose text contains
# arguments[1]; clicks it when arguments[2] is true.
FIND_LINK_JS = """
var selector = arguments[0], text = arguments[1], click = arguments[2];
var link = Array.prototype.find.call(document.querySelectorAll(selector), function (el) {
    return el.textContent.indexOf(text) !== -1 && el.getClientRects().length > 0;
});
if (!link) { return false; }
if (click) { link.click(); }
return true;
"""

UNSET: Any = object()

KeyInput = Union[str, Sequence[str]]


def parse_key(key: KeyInput) -> str:
    """
    Map "{enter}"-style names to selenium key codes.

    A list is sent as a chord: ["{shift}", "taylor"] types "TAYLOR".
    """
    if isinstance(key, str):
        if key.startswith("{") and key.endswith("}"):
            name = key[1:-1].upper()
            try:
                return getattr(Keys, name)
            except AttributeError:
                raise InvalidArgumentError(f"Unknown key [{key}].") from None
        return key
    return "".join(parse_key(k) for k in key) + Keys.NULL


class ElementInteractor:

    def __init__(self, driver: Any, resolver: ElementResolver, waiter: Waiter) -> None:
        self.driver = driver
        self.resolver = resolver
        self.waiter = waiter
        self.log = get_logger(__name__)

    # ---------- Lookups ----------

    def elements(self, selector: str) -> List[Any]:
        return self.resolver.all(selector)

    def element(self, selector: str) -> Optional[Any]:
        return self.resolver.find(selector)

    def value(self, selector: str, value: Any = UNSET) -> Optional[str]:
        """Read the value of an element, or set it directly through the DOM."""
        if value is UNSET:
            return self.resolver.find_or_fail(selector).get_attribute("value")

        self.driver.execute_script(
            "document.querySelector(arguments[0]).value = arguments[1];",
            self.resolver.format(selector),
            value,
        )
        return None

    def text(self, selector: str) -> str:
        return self.resolver.find_or_fail(selector).text

    def attribute(self, selector: str, attribute: str) -> Optional[str]:
        return self.resolver.find_or_fail(selector).get_attribute(attribute)

    def input_value(self, field: str) -> Optional[str]:
        element = self.resolver.resolve_for_typing(field)
        if element.tag_name in ("input", "textarea"):
            return element.get_attribute("value")
        return element.text

    # ---------- Keyboard ----------

    def keys(self, selector: str, *keys: KeyInput) -> None:
        self.resolver.find_or_fail(selector).send_keys(*[parse_key(k) for k in keys])

    def type(self, field: str, value: str) -> None:
        element = self.resolver.resolve_for_typing(field)
        element.clear()
        element.send_keys(value)

    def type_slowly(self, field: str, value: str, pause: int = 100) -> None:
        self.clear(field)
        self.append_slowly(field, value, pause)

    def append(self, field: str, value: str) -> None:
        self.resolver.resolve_for_typing(field).send_keys(value)

    def append_slowly(self, field: str, value: str, pause: int = 100) -> None:
        for char in value:
            self.append(field, char)
            self.waiter.pause(pause)

    def clear(self, field: str) -> None:
        self.resolver.resolve_for_typing(field).clear()

    # ---------- Form controls ----------

    def select(self, field: str, value: Any = UNSET) -> None:
        """Select an option by value; without a value a random enabled option is picked."""
        element = self.resolver.resolve_for_selection(field)
        options = element.find_elements(By.CSS_SELECTOR, "option:not([disabled])")

        if value is UNSET:
            if not options:
                raise NotFoundError(f"No enabled options to select in [{field}].", selector=field)
            random.choice(options).click()
            return

        if isinstance(value, bool):
            value = "1" if value else "0"

        for option in options:
            if str(option.get_attribute("value")) == str(value):
                option.click()
                break

    def radio(self, field: str, value: str) -> None:
        self.resolver.resolve_for_radio_selection(field, value).click()

    def check(self, field: Optional[str], value: Optional[str] = None) -> None:
        element = self.resolver.resolve_for_checking(field, value)
        if not element.is_selected():
            element.click()

    def uncheck(self, field: Optional[str], value: Optional[str] = None) -> None:
        element = self.resolver.resolve_for_checking(field, value)
        if element.is_selected():
            element.click()

    def attach(self, field: str, path: str) -> None:
        element = self.resolver.resolve_for_attachment(field)
        if isinstance(self.driver, RemoteWebDriver):
            # upload from this machine to the (possibly remote) browser
            with self.driver.file_detector_context(LocalFileDetector):
                element.send_keys(path)
        else:
            element.send_keys(path)

    def press(self, button: str) -> None:
        self.resolver.resolve_for_button_press(button).click()

    def press_and_wait_for(self, button: str, seconds: Optional[float] = 5) -> None:
        element = self.resolver.resolve_for_button_press(button)
        element.click()
        self.waiter.wait_using(seconds, DEFAULT_INTERVAL_MS, element.is_enabled)

    def click_link(self, link: str, element: str = "a") -> None:
        found = self.driver.execute_script(FIND_LINK_JS, self.resolver.format(element), link, True)
        if not found:
            raise NotFoundError(f"Unable to locate link [{link}].", selector=self.resolver.format(element))

    def see_link(self, link: str) -> bool:
        return bool(self.driver.execute_script(FIND_LINK_JS, self.resolver.format("a"), link, False))

    # ---------- Mouse ----------

    def click(self, selector: Optional[str] = None) -> None:
        if selector is None:
            actions_for(self.driver).click()
        else:
            self.resolver.find_or_fail(selector).click()

    def click_at_point(self, x: int, y: int) -> None:
        self.driver.execute_script("document.elementFromPoint(arguments[0], arguments[1]).click();", x, y)

    def click_at_xpath(self, expression: str) -> None:
        self.driver.find_element(By.XPATH, expression).click()

    def click_and_hold(self) -> None:
        actions_for(self.driver).click_and_hold()

    def double_click(self, selector: Optional[str] = None) -> None:
        element = self.resolver.find_or_fail(selector) if selector is not None else None
        actions_for(self.driver).double_click(element)

    def right_click(self, selector: Optional[str] = None) -> None:
        element = self.resolver.find_or_fail(selector) if selector is not None else None
        actions_for(self.driver).context_click(element)

    def release_mouse(self) -> None:
        actions_for(self.driver).release()

    def move_mouse(self, x: int, y: int) -> None:
        actions_for(self.driver).move_by_offset(x, y)

    def mouseover(self, selector: str) -> None:
        actions_for(self.driver).move_to_element(self.resolver.find_or_fail(selector))

    def drag(self, source: str, target: str) -> None:
        actions_for(self.driver).drag_and_drop(
            self.resolver.find_or_fail(source),
            self.resolver.find_or_fail(target),
        )

    def drag_offset(self, selector: str, x: int = 0, y: int = 0) -> None:
        actions_for(self.driver).drag_and_drop_by_offset(self.resolver.find_or_fail(selector), x, y)

    def drag_up(self, selector: str, offset: int) -> None:
        self.drag_offset(selector, 0, -offset)

    def drag_down(self, selector: str, offset: int) -> None:
        self.drag_offset(selector, 0, offset)

    def drag_left(self, selector: str, offset: int) -> None:
        self.drag_offset(selector, -offset, 0)

    def drag_right(self, selector: str, offset: int) -> None:
        self.drag_offset(selector, offset, 0)

    # ---------- Dialogs ----------

    def accept_dialog(self) -> None:
        self.driver.switch_to.alert.accept()

    def type_in_dialog(self, value: str) -> None:
        self.driver.switch_to.alert.send_keys(value)

    def dismiss_dialog(self) -> None:
        self.driver.switch_to.alert.dismiss()

    # ---------- Cookies ----------

    def plain_cookie(self, name: str) -> Optional[str]:
        try:
            cookie = self.driver.get_cookie(name)
        except NoSuchCookieException:
            cookie = None

        if cookie:
            return unquote(str(cookie["value"]))
        return None

    def add_cookie(
        self,
        name: str,
        value: str,
        expiry: Optional[Union[int, datetime]] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        if isinstance(expiry, datetime):
            expiry = int(expiry.timestamp())

        cookie = dict(options or {})
        cookie.update({"name": name, "value": value})
        if expiry is not None:
            cookie["expiry"] = expiry
        self.driver.add_cookie(cookie)

    def delete_cookie(self, name: str) -> None:
        self.driver.delete_cookie(name)

    # ---------- Scripts ----------

    def script(self, scripts: Union[str, Iterable[str]]) -> List[Any]:
        if isinstance(scripts, str):
            scripts = [scripts]
        return [self.driver.execute_script(s) for s in scripts]
