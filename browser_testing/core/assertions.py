# browser_testing/core/assertions.py
from __future__ import annotations

"""Browser assertions
---------------------
Page, element, form and URL assertions. Failures raise AssertionError so
pytest reports them as ordinary test failures.
"""

import re
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Sequence, Union
from urllib.parse import parse_qs, urlparse

from browser_testing.core.errors import NotFoundError

if TYPE_CHECKING:
    from browser_testing.core.browser import Browser


def wildcard_pattern(expected: Any) -> "re.Pattern[str]":
    """Anchored pattern where "*" matches anything and everything else is literal."""
    return re.compile("^" + re.escape(str(expected)).replace(r"\*", ".*") + "$")


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise AssertionError(message)


def _joined(value: Union[str, Sequence[str]]) -> str:
    return value if isinstance(value, str) else ",".join(str(v) for v in value)


class BrowserAssertions:

    def __init__(self, browser: "Browser") -> None:
        self.browser = browser

    @property
    def driver(self) -> Any:
        return self.browser.driver

    @property
    def resolver(self):
        return self.browser.resolver

    # ---------- Title & cookies ----------

    def assert_title(self, title: str) -> None:
        actual = self.driver.title
        _check(actual == title, f"Expected title [{title}] does not equal actual title [{actual}].")

    def assert_title_contains(self, title: str) -> None:
        actual = self.driver.title
        _check(title in actual, f"Did not see expected text [{title}] within title [{actual}].")

    def assert_has_cookie(self, name: str) -> None:
        cookie = self.browser.interactor.plain_cookie(name)
        _check(cookie is not None, f"Did not find expected cookie [{name}].")

    def assert_cookie_missing(self, name: str) -> None:
        cookie = self.browser.interactor.plain_cookie(name)
        _check(cookie is None, f"Found unexpected cookie [{name}].")

    def assert_cookie_value(self, name: str, value: str) -> None:
        actual = self.browser.interactor.plain_cookie(name)
        _check(actual == value, f"Cookie [{name}] had value [{actual}], but expected [{value}].")

    # ---------- Text ----------

    def assert_see(self, text: str) -> None:
        self.assert_see_in("", text)

    def assert_dont_see(self, text: str) -> None:
        self.assert_dont_see_in("", text)

    def assert_see_in(self, selector: str, text: str) -> None:
        full = self.resolver.format(selector)
        element = self.resolver.find_or_fail(selector)
        _check(text in element.text, f"Did not see expected text [{text}] within element [{full}].")

    def assert_dont_see_in(self, selector: str, text: str) -> None:
        full = self.resolver.format(selector)
        element = self.resolver.find_or_fail(selector)
        _check(text not in element.text, f"Saw unexpected text [{text}] within element [{full}].")

    def assert_see_anything_in(self, selector: str) -> None:
        full = self.resolver.format(selector)
        element = self.resolver.find_or_fail(selector)
        _check(element.text != "", f"Saw unexpected text [''] within element [{full}].")

    def assert_see_nothing_in(self, selector: str) -> None:
        full = self.resolver.format(selector)
        element = self.resolver.find_or_fail(selector)
        _check(element.text == "", f"Did not see expected text [''] within element [{full}].")

    # ---------- Scripts & source ----------

    def assert_script(self, expression: str, expected: Any = True) -> None:
        if not expression.startswith("return "):
            expression = "return " + expression
        _check(
            self.driver.execute_script(expression) == expected,
            f"JavaScript expression [{expression}] mismatched.",
        )

    def assert_source_has(self, code: str) -> None:
        self.browser.made_source_assertion = True
        _check(code in self.driver.page_source, f"Did not find expected source code [{code}].")

    def assert_source_missing(self, code: str) -> None:
        self.browser.made_source_assertion = True
        _check(code not in self.driver.page_source, f"Found unexpected source code [{code}].")

    # ---------- Links ----------

    def assert_see_link(self, link: str) -> None:
        prefix = self.resolver.prefix
        message = (
            f"Did not see expected link [{link}] within [{prefix}]."
            if prefix else f"Did not see expected link [{link}]."
        )
        _check(self.browser.interactor.see_link(link), message)

    def assert_dont_see_link(self, link: str) -> None:
        prefix = self.resolver.prefix
        message = (
            f"Saw unexpected link [{link}] within [{prefix}]."
            if prefix else f"Saw unexpected link [{link}]."
        )
        _check(not self.browser.interactor.see_link(link), message)

    # ---------- Form fields ----------

    def assert_input_value(self, field: str, value: Any) -> None:
        actual = self.browser.interactor.input_value(field)
        _check(
            actual == value,
            f"Expected value [{value}] for the [{field}] input does not equal the actual value [{actual}].",
        )

    def assert_input_value_is_not(self, field: str, value: Any) -> None:
        actual = self.browser.interactor.input_value(field)
        _check(actual != value, f"Value [{value}] for the [{field}] input should not equal the actual value.")

    def assert_checked(self, field: Optional[str], value: Optional[str] = None) -> None:
        element = self.resolver.resolve_for_checking(field, value)
        _check(element.is_selected(), f"Expected checkbox [{field}] to be checked, but it wasn't.")

    def assert_not_checked(self, field: Optional[str], value: Optional[str] = None) -> None:
        element = self.resolver.resolve_for_checking(field, value)
        _check(not element.is_selected(), f"Checkbox [{field}] was unexpectedly checked.")

    def assert_radio_selected(self, field: str, value: str) -> None:
        element = self.resolver.resolve_for_radio_selection(field, value)
        _check(element.is_selected(), f"Expected radio [{field}] to be selected, but it wasn't.")

    def assert_radio_not_selected(self, field: str, value: Optional[str] = None) -> None:
        element = self.resolver.resolve_for_radio_selection(field, value)
        _check(not element.is_selected(), f"Radio [{field}] was unexpectedly selected.")

    def selected(self, field: str, value: Union[Any, Sequence[Any]]) -> bool:
        values = value if isinstance(value, (list, tuple)) else [value]
        return any(option.is_selected() for option in self.resolver.resolve_select_options(field, values))

    def assert_selected(self, field: str, value: Any) -> None:
        _check(
            self.selected(field, value),
            f"Expected value [{value}] to be selected for [{field}], but it wasn't.",
        )

    def assert_not_selected(self, field: str, value: Any) -> None:
        _check(not self.selected(field, value), f"Unexpected value [{value}] selected for [{field}].")

    def assert_select_has_options(self, field: str, values: Iterable[Any]) -> None:
        values = list(values)
        options = self.resolver.resolve_select_options(field, values)
        distinct = {option.get_attribute("value") for option in options}
        _check(
            len(distinct) == len(values),
            f"Expected options [{_joined([str(v) for v in values])}] for selection field [{field}] to be available.",
        )

    def assert_select_missing_options(self, field: str, values: Iterable[Any]) -> None:
        values = list(values)
        _check(
            len(self.resolver.resolve_select_options(field, values)) == 0,
            f"Unexpected options [{_joined([str(v) for v in values])}] for selection field [{field}].",
        )

    def assert_select_has_option(self, field: str, value: Any) -> None:
        self.assert_select_has_options(field, [value])

    def assert_select_missing_option(self, field: str, value: Any) -> None:
        self.assert_select_missing_options(field, [value])

    # ---------- Values & attributes ----------

    def assert_value(self, selector: str, value: Any) -> None:
        full = self.resolver.format(selector)
        actual = self.resolver.find_or_fail(selector).get_attribute("value")
        _check(actual == value, f"Did not see expected value [{value}] within element [{full}].")

    def assert_attribute(self, selector: str, attribute: str, value: Any) -> None:
        full = self.resolver.format(selector)
        actual = self.resolver.find_or_fail(selector).get_attribute(attribute)
        _check(actual is not None, f"Did not see expected attribute [{attribute}] within element [{full}].")
        _check(
            actual == value,
            f"Expected '{attribute}' attribute [{value}] does not equal actual value [{actual}].",
        )

    def assert_aria_attribute(self, selector: str, attribute: str, value: Any) -> None:
        self.assert_attribute(selector, "aria-" + attribute, value)

    def assert_data_attribute(self, selector: str, attribute: str, value: Any) -> None:
        self.assert_attribute(selector, "data-" + attribute, value)

    # ---------- Visibility ----------

    def assert_visible(self, selector: str) -> None:
        full = self.resolver.format(selector)
        _check(self.resolver.find_or_fail(selector).is_displayed(), f"Element [{full}] is not visible.")

    def assert_present(self, selector: str) -> None:
        full = self.resolver.format(selector)
        _check(self.resolver.find(selector) is not None, f"Element [{full}] is not present.")

    def assert_missing(self, selector: str) -> None:
        full = self.resolver.format(selector)
        try:
            missing = not self.resolver.find_or_fail(selector).is_displayed()
        except NotFoundError:
            missing = True
        _check(missing, f"Saw unexpected element [{full}].")

    # ---------- Dialogs ----------

    def assert_dialog_opened(self, message: str) -> None:
        actual = self.driver.switch_to.alert.text
        _check(
            actual == message,
            f"Expected dialog message [{message}] does not equal actual message [{actual}].",
        )

    # ---------- State ----------

    def assert_enabled(self, field: str) -> None:
        element = self.resolver.resolve_for_field(field)
        _check(element.is_enabled(), f"Expected element [{field}] to be enabled, but it wasn't.")

    def assert_disabled(self, field: str) -> None:
        element = self.resolver.resolve_for_field(field)
        _check(not element.is_enabled(), f"Expected element [{field}] to be disabled, but it wasn't.")

    def assert_button_enabled(self, button: str) -> None:
        element = self.resolver.resolve_for_button_press(button)
        _check(element.is_enabled(), f"Expected button [{button}] to be enabled, but it wasn't.")

    def assert_button_disabled(self, button: str) -> None:
        element = self.resolver.resolve_for_button_press(button)
        _check(not element.is_enabled(), f"Expected button [{button}] to be disabled, but it wasn't.")

    def assert_focused(self, field: str) -> None:
        element = self.resolver.resolve_for_field(field)
        _check(
            self.driver.switch_to.active_element == element,
            f"Expected element [{field}] to be focused, but it wasn't.",
        )

    def assert_not_focused(self, field: str) -> None:
        element = self.resolver.resolve_for_field(field)
        _check(
            self.driver.switch_to.active_element != element,
            f"Expected element [{field}] not to be focused, but it was.",
        )

    # ---------- URL ----------

    def assert_url_is(self, url: str) -> None:
        current_url = self.driver.current_url
        parts = urlparse(current_url)
        current = f"{parts.scheme}://{parts.hostname or ''}"
        if parts.port:
            current += f":{parts.port}"
        current += parts.path

        _check(
            wildcard_pattern(url).match(current) is not None,
            f"Actual URL [{current_url}] does not equal expected URL [{url}].",
        )

    def assert_scheme_is(self, scheme: str) -> None:
        actual = urlparse(self.driver.current_url).scheme
        _check(
            wildcard_pattern(scheme).match(actual) is not None,
            f"Actual scheme [{actual}] does not equal expected scheme [{scheme}].",
        )

    def assert_scheme_is_not(self, scheme: str) -> None:
        actual = urlparse(self.driver.current_url).scheme
        _check(actual != scheme, f"Scheme [{scheme}] should not equal the actual value.")

    def assert_host_is(self, host: str) -> None:
        actual = urlparse(self.driver.current_url).hostname or ""
        _check(
            wildcard_pattern(host).match(actual) is not None,
            f"Actual host [{actual}] does not equal expected host [{host}].",
        )

    def assert_host_is_not(self, host: str) -> None:
        actual = urlparse(self.driver.current_url).hostname or ""
        _check(actual != host, f"Host [{host}] should not equal the actual value.")

    def assert_port_is(self, port: Union[int, str]) -> None:
        actual = urlparse(self.driver.current_url).port
        actual_str = "" if actual is None else str(actual)
        _check(
            wildcard_pattern(port).match(actual_str) is not None,
            f"Actual port [{actual_str}] does not equal expected port [{port}].",
        )

    def assert_port_is_not(self, port: Union[int, str]) -> None:
        actual = urlparse(self.driver.current_url).port
        actual_str = "" if actual is None else str(actual)
        _check(actual_str != str(port), f"Port [{port}] should not equal the actual value.")

    def assert_path_begins_with(self, path: str) -> None:
        actual = urlparse(self.driver.current_url).path
        _check(
            actual.startswith(path),
            f"Actual path [{actual}] does not begin with expected path [{path}].",
        )

    def assert_path_is(self, path: str) -> None:
        actual = urlparse(self.driver.current_url).path
        _check(
            wildcard_pattern(path).match(actual) is not None,
            f"Actual path [{actual}] does not equal expected path [{path}].",
        )

    def assert_path_is_not(self, path: str) -> None:
        actual = urlparse(self.driver.current_url).path
        _check(actual != path, f"Path [{path}] should not equal the actual value.")

    def assert_route_is(self, route: str, url_for: Callable[..., str], **parameters: Any) -> None:
        """`url_for(route, **parameters)` must return the route's path."""
        self.assert_path_is(url_for(route, **parameters))

    def assert_query_string_has(self, name: str, value: Optional[Union[str, Sequence[str]]] = None) -> None:
        output = self._query_parameters(name)
        if value is None:
            return

        actual = _joined(output[name])
        expected = _joined(value)
        _check(
            actual == expected,
            f"Query string parameter [{name}] had value [{actual}], but expected [{expected}].",
        )

    def assert_query_string_missing(self, name: str) -> None:
        current_url = self.driver.current_url
        query = urlparse(current_url).query
        if not query:
            return

        _check(
            name not in parse_qs(query, keep_blank_values=True),
            f"Found unexpected query string parameter [{name}] in [{current_url}].",
        )

    def assert_fragment_is(self, fragment: str) -> None:
        actual = self._fragment()
        _check(
            wildcard_pattern(fragment).match(actual) is not None,
            f"Actual fragment [{actual}] does not equal expected fragment [{fragment}].",
        )

    def assert_fragment_begins_with(self, fragment: str) -> None:
        actual = self._fragment()
        _check(
            actual.startswith(fragment),
            f"Actual fragment [{actual}] does not begin with expected fragment [{fragment}].",
        )

    def assert_fragment_is_not(self, fragment: str) -> None:
        _check(self._fragment() != fragment, f"Fragment [{fragment}] should not equal the actual value.")

    def _fragment(self) -> str:
        # the driver's current URL drops the fragment on some backends
        return urlparse(self.driver.execute_script("return window.location.href;")).fragment

    def _query_parameters(self, name: str) -> dict:
        current_url = self.driver.current_url
        query = urlparse(current_url).query
        _check(bool(query), f"Did not see expected query string in [{current_url}].")

        output = parse_qs(query, keep_blank_values=True)
        _check(
            name in output,
            f"Did not see expected query string parameter [{name}] in [{current_url}].",
        )
        return output
