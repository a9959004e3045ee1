from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from selenium.common.exceptions import NoAlertPresentException, NoSuchElementException

from browser_testing.core.browser import Browser
from browser_testing.utils.config import BrowserConfig


class FakeElement:
    """Just enough of a WebElement for resolver/interaction tests."""

    def __init__(
        self,
        text: str = "",
        tag_name: str = "div",
        attributes: Optional[Dict[str, str]] = None,
        displayed: bool = True,
        enabled: bool = True,
        selected: bool = False,
        size: Optional[Dict[str, int]] = None,
    ):
        self.text = text
        self.tag_name = tag_name
        self.attributes = dict(attributes or {})
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.size = size or {"width": 800, "height": 600}
        self.children: Dict[Tuple[str, str], List["FakeElement"]] = {}
        self.sent: List[str] = []
        self.clicks = 0
        self.cleared = 0

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return self.enabled

    def is_selected(self) -> bool:
        return self.selected

    def click(self) -> None:
        self.clicks += 1
        if self.attributes.get("type") in ("checkbox", "radio") or self.tag_name == "option":
            self.selected = not self.selected

    def clear(self) -> None:
        self.cleared += 1
        self.sent = []

    def send_keys(self, *values: str) -> None:
        self.sent.extend(values)

    def add(self, by: str, value: str, *elements: "FakeElement") -> "FakeElement":
        self.children.setdefault((by, value), []).extend(elements)
        return elements[0]

    def find_element(self, by: str, value: str) -> "FakeElement":
        found = self.children.get((by, value))
        if not found:
            raise NoSuchElementException(f"{by}={value}")
        return found[0]

    def find_elements(self, by: str, value: str) -> List["FakeElement"]:
        return list(self.children.get((by, value), []))


class FakeAlert:
    def __init__(self, text: str):
        self.text = text
        self.sent: List[str] = []
        self.accepted = False
        self.dismissed = False

    def send_keys(self, value: str) -> None:
        self.sent.append(value)

    def accept(self) -> None:
        self.accepted = True

    def dismiss(self) -> None:
        self.dismissed = True


class FakeSwitchTo:
    def __init__(self):
        self.dialog: Optional[FakeAlert] = None
        self.active_element: Any = None
        self.frames: List[Any] = []
        self.default_content_calls = 0

    @property
    def alert(self) -> FakeAlert:
        if self.dialog is None:
            raise NoAlertPresentException("no alert open")
        return self.dialog

    def frame(self, element: Any) -> None:
        self.frames.append(element)

    def default_content(self) -> None:
        self.default_content_calls += 1


class RecordingActions:
    def __init__(self, gestures: List[tuple]):
        self.gestures = gestures

    def drag_and_drop(self, source, target):
        self.gestures.append(("drag_and_drop", source, target))

    def drag_and_drop_by_offset(self, source, x, y):
        self.gestures.append(("drag_and_drop_by_offset", source, x, y))

    def move_by_offset(self, x, y):
        self.gestures.append(("move_by_offset", x, y))

    def move_to_element(self, element):
        self.gestures.append(("move_to_element", element))

    def click(self, element=None):
        self.gestures.append(("click", element))

    def click_and_hold(self):
        self.gestures.append(("click_and_hold",))

    def double_click(self, element=None):
        self.gestures.append(("double_click", element))

    def context_click(self, element=None):
        self.gestures.append(("context_click", element))

    def release(self):
        self.gestures.append(("release",))


class FakeDriver:
    """
    In-memory stand-in for a WebDriver.

    Elements are registered per (by, value) locator; lookups of unknown
    locators raise NoSuchElementException like a real driver.
    """

    def __init__(self):
        self.elements: Dict[Tuple[str, str], List[FakeElement]] = {}
        self.lookups: List[Tuple[str, str]] = []
        self.scripts: List[Tuple[str, tuple]] = []
        self.script_results: Dict[str, Any] = {}
        self.visited: List[str] = []
        self.cookies: Dict[str, Dict[str, Any]] = {}
        self.current_url = "http://app.test/"
        self.title = ""
        self.page_source = "<html><body></body></html>"
        self.capabilities = {"browserName": "chrome"}
        self.console: List[Dict[str, Any]] = []
        self.window_size: Optional[Tuple[int, int]] = None
        self.window_position: Optional[Tuple[int, int]] = None
        self.maximized = False
        self.screenshots: List[str] = []
        self.gestures: List[tuple] = []
        self.switch_to = FakeSwitchTo()
        self.navigation: List[str] = []
        self.quit_calls = 0

    # ---- registration ----

    def add(self, by: str, value: str, *elements: FakeElement) -> FakeElement:
        self.elements.setdefault((by, value), []).extend(elements)
        return elements[0]

    # ---- lookups ----

    def find_element(self, by: str, value: str) -> FakeElement:
        self.lookups.append((by, value))
        found = self.elements.get((by, value))
        if not found:
            raise NoSuchElementException(f"{by}={value}")
        return found[0]

    def find_elements(self, by: str, value: str) -> List[FakeElement]:
        self.lookups.append((by, value))
        return list(self.elements.get((by, value), []))

    # ---- scripts ----

    def execute_script(self, script: str, *args: Any) -> Any:
        self.scripts.append((script, args))
        result = self.script_results.get(script)
        if callable(result):
            return result(*args)
        return result

    # ---- navigation ----

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = url

    def refresh(self) -> None:
        self.navigation.append("refresh")

    def back(self) -> None:
        self.navigation.append("back")

    def forward(self) -> None:
        self.navigation.append("forward")

    # ---- window ----

    def set_window_size(self, width: int, height: int) -> None:
        self.window_size = (width, height)

    def set_window_position(self, x: int, y: int) -> None:
        self.window_position = (x, y)

    def maximize_window(self) -> None:
        self.maximized = True

    def save_screenshot(self, filename: str) -> bool:
        Path(filename).write_bytes(b"\x89PNG")
        self.screenshots.append(filename)
        return True

    # ---- cookies & logs ----

    def get_cookie(self, name: str) -> Optional[Dict[str, Any]]:
        return self.cookies.get(name)

    def add_cookie(self, cookie: Dict[str, Any]) -> None:
        self.cookies[cookie["name"]] = cookie

    def delete_cookie(self, name: str) -> None:
        self.cookies.pop(name, None)

    def get_log(self, log_type: str) -> List[Dict[str, Any]]:
        return list(self.console)

    def mouse_actions(self) -> RecordingActions:
        return RecordingActions(self.gestures)

    def quit(self) -> None:
        self.quit_calls += 1


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def config(tmp_path: Path) -> BrowserConfig:
    return BrowserConfig(
        base_url="http://app.test",
        wait_seconds=1,
        screenshots_dir=tmp_path / "screenshots",
        console_dir=tmp_path / "console",
        source_dir=tmp_path / "source",
    )


@pytest.fixture
def browser(driver: FakeDriver, config: BrowserConfig) -> Browser:
    return Browser(driver, config=config)


@pytest.fixture
def make_driver() -> Callable[[], FakeDriver]:
    return FakeDriver
