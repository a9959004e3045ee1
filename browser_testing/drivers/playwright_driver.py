# browser_testing/drivers/playwright_driver.py
from __future__ import annotations

"""Playwright backend
---------------------
Adapts a Playwright sync page to the WebDriver-style surface the resolver,
waiter and browser consume (find_element(by, value), execute_script, cookies,
alerts, frames...), so tests run unchanged on either backend.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from playwright.sync_api import (
    Browser as PWBrowser,
    BrowserContext,
    Dialog,
    ElementHandle,
    Frame,
    Page,
    Playwright,
    sync_playwright,
)
from selenium.common.exceptions import NoAlertPresentException, NoSuchElementException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys

from browser_testing.utils.config import Settings, get_settings
from browser_testing.utils.logger import get_logger

log = get_logger(__name__)

# selenium sends special keys as private-use code points
_KEY_NAMES: Dict[str, str] = {
    Keys.ENTER: "Enter",
    Keys.RETURN: "Enter",
    Keys.TAB: "Tab",
    Keys.BACKSPACE: "Backspace",
    Keys.DELETE: "Delete",
    Keys.ESCAPE: "Escape",
    Keys.SPACE: "Space",
    Keys.ARROW_UP: "ArrowUp",
    Keys.ARROW_DOWN: "ArrowDown",
    Keys.ARROW_LEFT: "ArrowLeft",
    Keys.ARROW_RIGHT: "ArrowRight",
    Keys.HOME: "Home",
    Keys.END: "End",
    Keys.PAGE_UP: "PageUp",
    Keys.PAGE_DOWN: "PageDown",
}

# held until Keys.NULL or the end of the keystrokes
_MODIFIER_NAMES: Dict[str, str] = {
    Keys.SHIFT: "Shift",
    Keys.CONTROL: "Control",
    Keys.ALT: "Alt",
    Keys.COMMAND: "Meta",
}

_ATTRIBUTE_JS = """(e, name) => {
    const prop = e[name];
    if (prop !== undefined && prop !== null && typeof prop !== 'object' && typeof prop !== 'function') {
        return String(prop);
    }
    return e.getAttribute(name);
}"""

_SCRIPT_JS = "([body, args]) => (new Function(body)).apply(null, args)"


def _to_selector(by: str, value: str) -> str:
    if by == By.ID:
        return f'[id="{value}"]'
    if by == By.XPATH:
        return f"xpath={value}"
    if by in (By.CSS_SELECTOR, By.TAG_NAME):
        return value
    if by == By.NAME:
        return f'[name="{value}"]'
    if by == By.LINK_TEXT:
        return f'a:text-is("{value}")'
    raise ValueError(f"Unsupported locator strategy: {by}")


class PlaywrightElement:
    """WebElement-style wrapper around a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle) -> None:
        self.handle = handle

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlaywrightElement):
            return NotImplemented
        return bool(self.handle.evaluate("(a, b) => a === b", other.handle))

    __hash__ = object.__hash__

    @property
    def text(self) -> str:
        return self.handle.inner_text()

    @property
    def tag_name(self) -> str:
        return str(self.handle.evaluate("e => e.tagName")).lower()

    @property
    def size(self) -> Dict[str, int]:
        box = self.handle.bounding_box() or {"width": 0, "height": 0}
        return {"width": int(box["width"]), "height": int(box["height"])}

    def get_attribute(self, name: str) -> Optional[str]:
        return self.handle.evaluate(_ATTRIBUTE_JS, name)

    def is_displayed(self) -> bool:
        return self.handle.is_visible()

    def is_enabled(self) -> bool:
        return self.handle.is_enabled()

    def is_selected(self) -> bool:
        return bool(self.handle.evaluate("e => !!(e.checked || e.selected)"))

    def click(self) -> None:
        self.handle.click()

    def clear(self) -> None:
        self.handle.fill("")

    def send_keys(self, *values: Any) -> None:
        if self.get_attribute("type") == "file":
            self.handle.set_input_files([str(v) for v in values])
            return

        keyboard = self.handle.owner_frame().page.keyboard
        self.handle.focus()

        # keyboard.type ignores held modifiers, so chords press key by key
        held: List[str] = []
        buffer = ""
        try:
            for char in "".join(str(v) for v in values):
                if buffer and (char == Keys.NULL or char in _KEY_NAMES or char in _MODIFIER_NAMES):
                    keyboard.type(buffer)
                    buffer = ""

                if char == Keys.NULL:
                    while held:
                        keyboard.up(held.pop())
                elif char in _MODIFIER_NAMES:
                    keyboard.down(_MODIFIER_NAMES[char])
                    held.append(_MODIFIER_NAMES[char])
                elif char in _KEY_NAMES:
                    keyboard.press(_KEY_NAMES[char])
                elif held:
                    keyboard.press(char)
                else:
                    buffer += char
            if buffer:
                keyboard.type(buffer)
        finally:
            while held:
                keyboard.up(held.pop())

    def find_element(self, by: str, value: str) -> "PlaywrightElement":
        handle = self.handle.query_selector(_to_selector(by, value))
        if handle is None:
            raise NoSuchElementException(f"Unable to locate element: {value}")
        return PlaywrightElement(handle)

    def find_elements(self, by: str, value: str) -> List["PlaywrightElement"]:
        return [PlaywrightElement(h) for h in self.handle.query_selector_all(_to_selector(by, value))]


class PlaywrightAlert:

    def __init__(self, driver: "PlaywrightDriver", dialog: Dialog) -> None:
        self._driver = driver
        self._dialog = dialog
        self._prompt_text: Optional[str] = None

    @property
    def text(self) -> str:
        return self._dialog.message

    def send_keys(self, value: str) -> None:
        self._prompt_text = value

    def accept(self) -> None:
        if self._prompt_text is None:
            self._dialog.accept()
        else:
            self._dialog.accept(self._prompt_text)
        self._driver._dialog = None

    def dismiss(self) -> None:
        self._dialog.dismiss()
        self._driver._dialog = None


class PlaywrightSwitchTo:

    def __init__(self, driver: "PlaywrightDriver") -> None:
        self._driver = driver

    @property
    def alert(self) -> PlaywrightAlert:
        dialog = self._driver._dialog
        if dialog is None:
            raise NoAlertPresentException("No dialog is open")
        return PlaywrightAlert(self._driver, dialog)

    @property
    def active_element(self) -> PlaywrightElement:
        handle = self._driver.frame.evaluate_handle("() => document.activeElement").as_element()
        if handle is None:
            raise NoSuchElementException("No active element")
        return PlaywrightElement(handle)

    def frame(self, element: PlaywrightElement) -> None:
        frame = element.handle.content_frame()
        if frame is None:
            raise NoSuchElementException("Element is not a frame")
        self._driver.frame = frame

    def default_content(self) -> None:
        self._driver.frame = self._driver.page.main_frame


class PlaywrightActions:
    """Mouse gestures on the page's virtual mouse."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._x = 0.0
        self._y = 0.0

    def _center(self, element: PlaywrightElement) -> tuple[float, float]:
        box = element.handle.bounding_box()
        if box is None:
            raise NoSuchElementException("Element is not visible")
        return box["x"] + box["width"] / 2, box["y"] + box["height"] / 2

    def _move(self, x: float, y: float) -> None:
        self._x, self._y = x, y
        self.page.mouse.move(x, y)

    def drag_and_drop(self, source: PlaywrightElement, target: PlaywrightElement) -> None:
        self._move(*self._center(source))
        self.page.mouse.down()
        self._move(*self._center(target))
        self.page.mouse.up()

    def drag_and_drop_by_offset(self, source: PlaywrightElement, x: int, y: int) -> None:
        sx, sy = self._center(source)
        self._move(sx, sy)
        self.page.mouse.down()
        self._move(sx + x, sy + y)
        self.page.mouse.up()

    def move_by_offset(self, x: int, y: int) -> None:
        self._move(self._x + x, self._y + y)

    def move_to_element(self, element: PlaywrightElement) -> None:
        self._move(*self._center(element))

    def click(self, element: Optional[PlaywrightElement] = None) -> None:
        if element is not None:
            element.click()
        else:
            self.page.mouse.click(self._x, self._y)

    def click_and_hold(self) -> None:
        self.page.mouse.down()

    def double_click(self, element: Optional[PlaywrightElement] = None) -> None:
        if element is not None:
            element.handle.dblclick()
        else:
            self.page.mouse.dblclick(self._x, self._y)

    def context_click(self, element: Optional[PlaywrightElement] = None) -> None:
        if element is not None:
            element.handle.click(button="right")
        else:
            self.page.mouse.click(self._x, self._y, button="right")

    def release(self) -> None:
        self.page.mouse.up()


class PlaywrightDriver:
    """
    WebDriver-compatible facade over one Playwright page.

    Create with `PlaywrightDriver.launch(settings)`; `quit()` tears down the
    page, context, browser and the Playwright runtime.
    """

    def __init__(
        self,
        page: Page,
        context: Optional[BrowserContext] = None,
        browser: Optional[PWBrowser] = None,
        playwright: Optional[Playwright] = None,
        browser_name: str = "chromium",
    ) -> None:
        self.page = page
        self.frame: Frame = page.main_frame
        self._context = context or page.context
        self._browser = browser
        self._playwright = playwright
        self._dialog: Optional[Dialog] = None
        self._console: List[Dict[str, Any]] = []
        self.switch_to = PlaywrightSwitchTo(self)
        self.capabilities = {"browserName": "chrome" if browser_name == "chromium" else browser_name}

        page.on("dialog", self._on_dialog)
        page.on("console", self._on_console)

    @classmethod
    def launch(cls, settings: Optional[Settings] = None) -> "PlaywrightDriver":
        s = settings or get_settings()
        pw = sync_playwright().start()
        browser_type = getattr(pw, s.BROWSER_TYPE.value)
        browser = browser_type.launch(**s.playwright_launch_kwargs())
        context = browser.new_context(**s.playwright_context_kwargs())
        page = context.new_page()
        log.debug(f"Launched playwright {s.BROWSER_TYPE.value} (headless={s.HEADLESS})")
        return cls(page, context=context, browser=browser, playwright=pw, browser_name=s.BROWSER_TYPE.value)

    # ---------- Events ----------

    def _on_dialog(self, dialog: Dialog) -> None:
        self._dialog = dialog

    def _on_console(self, message: Any) -> None:
        self._console.append({"level": message.type.upper(), "message": message.text})

    # ---------- Navigation ----------

    def get(self, url: str) -> None:
        self.page.goto(url)
        self.frame = self.page.main_frame

    def refresh(self) -> None:
        self.page.reload()

    def back(self) -> None:
        self.page.go_back()

    def forward(self) -> None:
        self.page.go_forward()

    @property
    def current_url(self) -> str:
        return self.page.url

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def page_source(self) -> str:
        return self.page.content()

    # ---------- Elements & scripts ----------

    def find_element(self, by: str, value: str) -> PlaywrightElement:
        handle = self.frame.query_selector(_to_selector(by, value))
        if handle is None:
            raise NoSuchElementException(f"Unable to locate element: {value}")
        return PlaywrightElement(handle)

    def find_elements(self, by: str, value: str) -> List[PlaywrightElement]:
        return [PlaywrightElement(h) for h in self.frame.query_selector_all(_to_selector(by, value))]

    def execute_script(self, script: str, *args: Any) -> Any:
        values = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        return self.frame.evaluate(_SCRIPT_JS, [script, values])

    def mouse_actions(self) -> PlaywrightActions:
        return PlaywrightActions(self.page)

    # ---------- Window ----------

    def save_screenshot(self, filename: str) -> bool:
        self.page.screenshot(path=str(Path(filename)))
        return True

    def set_window_size(self, width: int, height: int) -> None:
        self.page.set_viewport_size({"width": int(width), "height": int(height)})

    def maximize_window(self) -> None:
        size = self.page.evaluate("() => [screen.availWidth, screen.availHeight]")
        self.set_window_size(size[0], size[1])

    def set_window_position(self, x: int, y: int) -> None:
        log.debug(f"Ignoring window move to ({x}, {y}); playwright pages have no window position")

    # ---------- Cookies ----------

    def get_cookie(self, name: str) -> Optional[Dict[str, Any]]:
        for cookie in self._context.cookies(self.page.url):
            if cookie["name"] == name:
                return dict(cookie)
        return None

    def add_cookie(self, cookie: Dict[str, Any]) -> None:
        data = {k: v for k, v in cookie.items() if v is not None}
        if "expiry" in data:
            data["expires"] = data.pop("expiry")
        if "domain" not in data and "url" not in data:
            data["url"] = self.page.url
        self._context.add_cookies([data])

    def delete_cookie(self, name: str) -> None:
        self._context.clear_cookies(name=name)

    # ---------- Logs & teardown ----------

    def get_log(self, log_type: str) -> List[Dict[str, Any]]:
        if log_type != "browser":
            return []
        entries, self._console = self._console, []
        return entries

    def quit(self) -> None:
        try:
            self._context.close()
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._playwright is not None:
                self._playwright.stop()
