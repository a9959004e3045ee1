# browser_testing/core/browser.py
from __future__ import annotations

"""Browser scope
----------------
`Browser` wraps one driver and one resolver scope. Interaction, assertion and
wait methods return the browser so calls chain:

    browser.visit("/login").type("email", "a@b.c").press("Login").assert_path_is("/home")
"""

import json
import secrets
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from selenium.webdriver.common.by import By

from browser_testing.core.assertions import BrowserAssertions
from browser_testing.core.errors import NotFoundError, UnknownExtensionError
from browser_testing.core.interactions import UNSET, ElementInteractor
from browser_testing.core.page import Component, Page
from browser_testing.core.waiter import DEFAULT_INTERVAL_MS, Waiter, format_timeout_message
from browser_testing.selectors.resolver import ElementResolver
from browser_testing.utils.config import BrowserConfig, get_settings
from browser_testing.utils.logger import get_logger

log = get_logger(__name__)

Callback = Callable[["Browser"], Any]


def _chain(name: str, target: str = "interactor") -> Callable[..., "Browser"]:
    """Fluent wrapper: call `self.<target>.<name>` and return the browser."""

    def method(self: "Browser", *args: Any, **kwargs: Any) -> "Browser":
        getattr(getattr(self, target), name)(*args, **kwargs)
        return self

    method.__name__ = name
    method.__qualname__ = f"Browser.{name}"
    method.__doc__ = f"See {target}.{name}; returns the browser."
    return method


def _delegate(name: str, target: str = "interactor") -> Callable[..., Any]:
    """Query wrapper: call `self.<target>.<name>` and return its result."""

    def method(self: "Browser", *args: Any, **kwargs: Any) -> Any:
        return getattr(getattr(self, target), name)(*args, **kwargs)

    method.__name__ = name
    method.__qualname__ = f"Browser.{name}"
    method.__doc__ = f"See {target}.{name}."
    return method


class Browser:
    """
    A driver plus a selector scope.

    Child scopes created with `with_scope`/`within`/`elsewhere` share the
    driver and config but own a resolver whose prefix narrows lookups.
    """

    def __init__(
        self,
        driver: Any,
        resolver: Optional[ElementResolver] = None,
        config: Optional[BrowserConfig] = None,
    ) -> None:
        self.driver = driver
        self.resolver = resolver or ElementResolver(driver)
        self.config = config or BrowserConfig.from_settings(get_settings())
        self.waiter = Waiter(default_seconds=self.config.wait_seconds)
        self.interactor = ElementInteractor(driver, self.resolver, self.waiter)
        self.assertions = BrowserAssertions(self)

        self.page: Optional[Page] = None
        self.component: Optional[Component] = None
        self.fit_on_failure = self.config.fit_on_failure
        self.made_source_assertion = False

    # ---------- Navigation ----------

    def visit(self, url: Union[str, Page]) -> "Browser":
        page: Optional[Page] = None
        if isinstance(url, Page):
            page = url
            url = page.url()

        if not url.startswith(("http://", "https://")):
            url = self.config.base_url.rstrip("/") + "/" + url.lstrip("/")

        log.debug(f"visit {url}")
        self.driver.get(url)

        if page is not None:
            self.on(page)
        return self

    def visit_route(self, route: str, url_for: Callable[..., str], **parameters: Any) -> "Browser":
        """Visit the URL `url_for(route, **parameters)` generates."""
        return self.visit(url_for(route, **parameters))

    def blank(self) -> "Browser":
        self.driver.get("about:blank")
        return self

    def on(self, page: Page) -> "Browser":
        self.on_without_assert(page)
        page.assert_on(self)
        return self

    def on_without_assert(self, page: Page) -> "Browser":
        self.page = page
        elements = dict(page.site_elements())
        elements.update(page.elements())
        self.resolver.page_elements(elements)
        return self

    def refresh(self) -> "Browser":
        self.driver.refresh()
        return self

    def back(self) -> "Browser":
        self.driver.back()
        return self

    def forward(self) -> "Browser":
        self.driver.forward()
        return self

    # ---------- Window ----------

    def maximize(self) -> "Browser":
        self.driver.maximize_window()
        return self

    def resize(self, width: int, height: int) -> "Browser":
        self.driver.set_window_size(width, height)
        return self

    def move(self, x: int, y: int) -> "Browser":
        self.driver.set_window_position(x, y)
        return self

    def fit_content(self) -> "Browser":
        """Resize the window to the size of the rendered document."""
        self.driver.switch_to.default_content()
        html = self.driver.find_element(By.TAG_NAME, "html")
        size = html.size
        if size["width"] >= 0 and size["height"] >= 0:
            self.resize(size["width"], size["height"])
        return self

    def enable_fit_on_failure(self) -> "Browser":
        self.fit_on_failure = True
        return self

    def disable_fit_on_failure(self) -> "Browser":
        self.fit_on_failure = False
        return self

    def scroll_into_view(self, selector: str) -> "Browser":
        self.driver.execute_script(
            "document.querySelector(arguments[0]).scrollIntoView();",
            self.resolver.format(selector),
        )
        return self

    def scroll_to(self, selector: str) -> "Browser":
        self.driver.execute_script(
            "var el = document.querySelector(arguments[0]);"
            "window.scrollTo(0, el.getBoundingClientRect().top + window.pageYOffset);",
            self.resolver.format(selector),
        )
        return self

    # ---------- Artifacts ----------

    def screenshot(self, name: str) -> "Browser":
        path = Path(self.config.screenshots_dir) / f"{name}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        self.driver.save_screenshot(str(path))
        log.info(f"screenshot saved to {path}")
        return self

    def store_console_log(self, name: str) -> "Browser":
        browser_name = (getattr(self.driver, "capabilities", None) or {}).get("browserName")
        if browser_name not in self.config.supports_remote_logs:
            return self

        console = self.driver.get_log("browser")
        if console:
            path = Path(self.config.console_dir) / f"{name}.log"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(console, indent=4, default=str), encoding="utf-8")
        return self

    def store_source(self, name: str) -> "Browser":
        source = self.driver.page_source
        if source:
            path = Path(self.config.source_dir) / f"{name}.txt"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        return self

    # ---------- Scoping ----------

    def _child(self, prefix: str, selector: Union[str, Component]) -> "Browser":
        browser = self.__class__(
            self.driver,
            ElementResolver(self.driver, prefix),
            config=self.config,
        )
        if self.page is not None:
            browser.on_without_assert(self.page)
        if isinstance(selector, Component):
            browser.on_component(selector, self.resolver)
        return browser

    def with_scope(self, selector: Union[str, Component], callback: Callback) -> "Browser":
        """Run `callback` with a browser scoped beneath `selector`."""
        callback(self._child(self.resolver.format(str(selector)), selector))
        return self

    def within(self, selector: Union[str, Component], callback: Callback) -> "Browser":
        return self.with_scope(selector, callback)

    def elsewhere(self, selector: Union[str, Component], callback: Callback) -> "Browser":
        """Run `callback` scoped beneath `selector`, ignoring the current scope."""
        callback(self._child(f"body {selector}", selector))
        return self

    def elsewhere_when_available(
        self,
        selector: str,
        callback: Callback,
        seconds: Optional[float] = None,
    ) -> "Browser":
        return self.elsewhere("", lambda browser: browser.when_available(selector, callback, seconds))

    def within_frame(self, selector: str, callback: Callback) -> "Browser":
        self.driver.switch_to.frame(self.resolver.find_or_fail(selector))
        try:
            callback(self)
        finally:
            self.driver.switch_to.default_content()
        return self

    def on_component(self, component: Component, parent_resolver: ElementResolver) -> None:
        self.component = component

        # component aliases win over inherited ones
        elements = dict(parent_resolver.elements)
        elements.update(component.elements())
        self.resolver.page_elements(elements)

        component.assert_on(self)
        self.resolver.prefix = self.resolver.format(component.selector())

    # ---------- Waiting ----------

    def wait_using(
        self,
        seconds: Optional[float],
        interval_ms: int,
        predicate: Callable[[], Any],
        message: Optional[str] = None,
    ) -> "Browser":
        self.waiter.wait_using(seconds, interval_ms, predicate, message)
        return self

    def when_available(self, selector: str, callback: Callback, seconds: Optional[float] = None) -> "Browser":
        return self.wait_for(selector, seconds).with_scope(selector, callback)

    def wait_for(self, selector: str, seconds: Optional[float] = None) -> "Browser":
        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self.resolver.find_or_fail(selector).is_displayed(),
            format_timeout_message("Waited %s seconds for selector", selector),
        )

    def wait_until_missing(self, selector: str, seconds: Optional[float] = None) -> "Browser":
        def missing() -> bool:
            try:
                return not self.resolver.find_or_fail(selector).is_displayed()
            except NotFoundError:
                return True

        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            missing,
            format_timeout_message("Waited %s seconds for removal of selector", selector),
        )

    def _page_contains(self, texts: Sequence[str]) -> bool:
        body = self.resolver.find_or_fail("").text
        return any(text in body for text in texts)

    def wait_for_text(self, text: Union[str, Iterable[str]], seconds: Optional[float] = None) -> "Browser":
        texts = [text] if isinstance(text, str) else list(text)
        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self._page_contains(texts),
            format_timeout_message("Waited %s seconds for text", "', '".join(texts)),
        )

    def wait_until_missing_text(self, text: Union[str, Iterable[str]], seconds: Optional[float] = None) -> "Browser":
        texts = [text] if isinstance(text, str) else list(text)
        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: not self._page_contains(texts),
            format_timeout_message("Waited %s seconds for removal of text", "', '".join(texts)),
        )

    def wait_for_text_in(self, selector: str, text: str, seconds: Optional[float] = None) -> "Browser":
        def seen() -> bool:
            self.assertions.assert_see_in(selector, text)
            return True

        message = "Waited %s seconds for text \"{}\" in selector {}".format(
            text.replace("%", "%%"), selector.replace("%", "%%")
        )
        return self.wait_using(seconds, DEFAULT_INTERVAL_MS, seen, message)

    def wait_for_link(self, link: str, seconds: Optional[float] = None) -> "Browser":
        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self.interactor.see_link(link),
            format_timeout_message("Waited %s seconds for link", link),
        )

    def wait_for_location(self, path: str, seconds: Optional[float] = None) -> "Browser":
        return self.wait_until(
            f"window.location.pathname == {json.dumps(path)}",
            seconds,
            format_timeout_message("Waited %s seconds for location", path),
        )

    def wait_for_route(
        self,
        route: str,
        url_for: Callable[..., str],
        seconds: Optional[float] = None,
        **parameters: Any,
    ) -> "Browser":
        """`url_for(route, **parameters)` must return the route's path."""
        return self.wait_for_location(url_for(route, **parameters), seconds)

    def wait_until(self, script: str, seconds: Optional[float] = None, message: Optional[str] = None) -> "Browser":
        if not script.startswith("return "):
            script = "return " + script
        if not script.endswith(";"):
            script = script + ";"

        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self.driver.execute_script(script),
            message,
        )

    def wait_for_dialog(self, seconds: Optional[float] = None) -> "Browser":
        # switch_to.alert raises until a dialog is open
        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self.driver.switch_to.alert is not None,
            "Waited %s seconds for dialog.",
        )

    def wait_for_reload(self, callback: Optional[Callback] = None, seconds: Optional[float] = None) -> "Browser":
        token = secrets.token_hex(8)
        self.driver.execute_script(f"window['{token}'] = {{}};")

        if callback is not None:
            callback(self)

        return self.wait_using(
            seconds,
            DEFAULT_INTERVAL_MS,
            lambda: self.driver.execute_script(f"return typeof window['{token}'] === 'undefined';"),
            "Waited %s seconds for page reload.",
        )

    # ---------- Values ----------

    def value(self, selector: str, value: Any = UNSET) -> Any:
        """Return the element's value, or set it and return the browser."""
        if value is UNSET:
            return self.interactor.value(selector)
        self.interactor.value(selector, value)
        return self

    text = _delegate("text")
    attribute = _delegate("attribute")
    element = _delegate("element")
    elements = _delegate("elements")
    input_value = _delegate("input_value")
    see_link = _delegate("see_link")
    plain_cookie = _delegate("plain_cookie")
    script = _delegate("script")
    selected = _delegate("selected", "assertions")

    # ---------- Interactions ----------

    keys = _chain("keys")
    type = _chain("type")
    type_slowly = _chain("type_slowly")
    append = _chain("append")
    append_slowly = _chain("append_slowly")
    clear = _chain("clear")
    select = _chain("select")
    radio = _chain("radio")
    check = _chain("check")
    uncheck = _chain("uncheck")
    attach = _chain("attach")
    press = _chain("press")
    press_and_wait_for = _chain("press_and_wait_for")
    click_link = _chain("click_link")
    drag = _chain("drag")
    drag_offset = _chain("drag_offset")
    drag_up = _chain("drag_up")
    drag_down = _chain("drag_down")
    drag_left = _chain("drag_left")
    drag_right = _chain("drag_right")
    accept_dialog = _chain("accept_dialog")
    dismiss_dialog = _chain("dismiss_dialog")
    type_in_dialog = _chain("type_in_dialog")

    click = _chain("click")
    click_at_point = _chain("click_at_point")
    click_at_xpath = _chain("click_at_xpath")
    click_and_hold = _chain("click_and_hold")
    double_click = _chain("double_click")
    right_click = _chain("right_click")
    release_mouse = _chain("release_mouse")
    move_mouse = _chain("move_mouse")
    mouseover = _chain("mouseover")

    add_cookie = _chain("add_cookie")
    delete_cookie = _chain("delete_cookie")

    # ---------- Assertions ----------

    assert_title = _chain("assert_title", "assertions")
    assert_title_contains = _chain("assert_title_contains", "assertions")
    assert_has_cookie = _chain("assert_has_cookie", "assertions")
    assert_cookie_missing = _chain("assert_cookie_missing", "assertions")
    assert_cookie_value = _chain("assert_cookie_value", "assertions")
    assert_see = _chain("assert_see", "assertions")
    assert_dont_see = _chain("assert_dont_see", "assertions")
    assert_see_in = _chain("assert_see_in", "assertions")
    assert_dont_see_in = _chain("assert_dont_see_in", "assertions")
    assert_see_anything_in = _chain("assert_see_anything_in", "assertions")
    assert_see_nothing_in = _chain("assert_see_nothing_in", "assertions")
    assert_script = _chain("assert_script", "assertions")
    assert_source_has = _chain("assert_source_has", "assertions")
    assert_source_missing = _chain("assert_source_missing", "assertions")
    assert_see_link = _chain("assert_see_link", "assertions")
    assert_dont_see_link = _chain("assert_dont_see_link", "assertions")
    assert_input_value = _chain("assert_input_value", "assertions")
    assert_input_value_is_not = _chain("assert_input_value_is_not", "assertions")
    assert_checked = _chain("assert_checked", "assertions")
    assert_not_checked = _chain("assert_not_checked", "assertions")
    assert_radio_selected = _chain("assert_radio_selected", "assertions")
    assert_radio_not_selected = _chain("assert_radio_not_selected", "assertions")
    assert_selected = _chain("assert_selected", "assertions")
    assert_not_selected = _chain("assert_not_selected", "assertions")
    assert_select_has_options = _chain("assert_select_has_options", "assertions")
    assert_select_missing_options = _chain("assert_select_missing_options", "assertions")
    assert_select_has_option = _chain("assert_select_has_option", "assertions")
    assert_select_missing_option = _chain("assert_select_missing_option", "assertions")
    assert_value = _chain("assert_value", "assertions")
    assert_attribute = _chain("assert_attribute", "assertions")
    assert_aria_attribute = _chain("assert_aria_attribute", "assertions")
    assert_data_attribute = _chain("assert_data_attribute", "assertions")
    assert_visible = _chain("assert_visible", "assertions")
    assert_present = _chain("assert_present", "assertions")
    assert_missing = _chain("assert_missing", "assertions")
    assert_dialog_opened = _chain("assert_dialog_opened", "assertions")
    assert_enabled = _chain("assert_enabled", "assertions")
    assert_disabled = _chain("assert_disabled", "assertions")
    assert_button_enabled = _chain("assert_button_enabled", "assertions")
    assert_button_disabled = _chain("assert_button_disabled", "assertions")
    assert_focused = _chain("assert_focused", "assertions")
    assert_not_focused = _chain("assert_not_focused", "assertions")

    assert_url_is = _chain("assert_url_is", "assertions")
    assert_scheme_is = _chain("assert_scheme_is", "assertions")
    assert_scheme_is_not = _chain("assert_scheme_is_not", "assertions")
    assert_host_is = _chain("assert_host_is", "assertions")
    assert_host_is_not = _chain("assert_host_is_not", "assertions")
    assert_port_is = _chain("assert_port_is", "assertions")
    assert_port_is_not = _chain("assert_port_is_not", "assertions")
    assert_path_begins_with = _chain("assert_path_begins_with", "assertions")
    assert_path_is = _chain("assert_path_is", "assertions")
    assert_path_is_not = _chain("assert_path_is_not", "assertions")
    assert_route_is = _chain("assert_route_is", "assertions")
    assert_query_string_has = _chain("assert_query_string_has", "assertions")
    assert_query_string_missing = _chain("assert_query_string_missing", "assertions")
    assert_fragment_is = _chain("assert_fragment_is", "assertions")
    assert_fragment_begins_with = _chain("assert_fragment_begins_with", "assertions")
    assert_fragment_is_not = _chain("assert_fragment_is_not", "assertions")

    # ---------- Misc ----------

    def pause(self, milliseconds: int) -> "Browser":
        self.waiter.pause(milliseconds)
        return self

    def tap(self, callback: Callback) -> "Browser":
        callback(self)
        return self

    def quit(self) -> None:
        self.driver.quit()

    # ---------- Extensions ----------

    def _extension(self, name: str) -> Optional[Callable]:
        for owner in (self.component, self.page):
            if owner is None:
                continue
            ext = owner.extensions().get(name)
            if ext is not None:
                return ext
        return None

    def call(self, name: str, *args: Any, **kwargs: Any) -> "Browser":
        """Invoke a component (then page) extension with this browser as first argument."""
        ext = self._extension(name)
        if ext is None:
            raise UnknownExtensionError(f"Call to undefined method [{name}].")
        ext(self, *args, **kwargs)
        return self

    def __getattr__(self, name: str) -> Callable[..., "Browser"]:
        # only reached for names not defined on the browser itself
        if name.startswith("_") or "component" not in self.__dict__:
            raise AttributeError(name)
        if self._extension(name) is None:
            raise UnknownExtensionError(f"Call to undefined method [{name}].")
        return lambda *args, **kwargs: self.call(name, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<Browser prefix={self.resolver.prefix!r}>"
