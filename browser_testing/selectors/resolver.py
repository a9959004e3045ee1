# browser_testing/selectors/resolver.py
from __future__ import annotations

"""Element resolver
-------------------
Turns short selectors ("@modal", "#email", "email") into scoped CSS selectors
and finds the matching elements through a WebDriver-compatible driver.
"""

import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

from browser_testing.core.errors import InvalidArgumentError, NotFoundError
from browser_testing.utils.logger import get_logger

log = get_logger(__name__)

ID_SHORTCUT = re.compile(r"^#[\w\-:]+$")

# Elements tagged with this attribute are addressable as "@<value>"
DUSK_ATTRIBUTE = "dusk"


class ElementResolver:
    """
    Resolves selectors within a scope prefix (e.g. "body .modal").

    `elements` maps alias keys to CSS fragments; keys are substituted
    longest first so "@btn-submit" is never shadowed by "@btn".
    """

    def __init__(self, driver: Any, prefix: str = "body") -> None:
        self.driver = driver
        self.prefix = prefix.strip()
        self.elements: dict[str, str] = {}
        self._button_finders: Sequence[Callable[[str], Optional[Any]]] = (
            self._find_by_id,
            self._find_button_by_name,
            self._find_button_by_value,
            self._find_button_by_text,
        )

    def page_elements(self, elements: Mapping[str, str]) -> "ElementResolver":
        """Replace the alias map used by `format`."""
        self.elements = dict(elements)
        return self

    # ---------- Formatting ----------

    def format(self, selector: str) -> str:
        original = selector

        for key in sorted(self.elements, key=len, reverse=True):
            selector = selector.replace(key, self.elements[key])

        if selector == original and selector.startswith("@"):
            selector = f'[{DUSK_ATTRIBUTE}="{selector.split("@")[1]}"]'

        return f"{self.prefix} {selector}".strip()

    # ---------- Generic lookups ----------

    def find(self, selector: str) -> Optional[Any]:
        """Find an element or return None; lookup errors are treated as "absent"."""
        try:
            return self.find_or_fail(selector)
        except Exception as e:
            log.debug(f"find({selector!r}) found nothing: {e!r}")
            return None

    def find_or_fail(self, selector: str) -> Any:
        """
        Find an element or raise NotFoundError.

        An empty selector resolves to the scope prefix itself.
        """
        if ID_SHORTCUT.match(selector):
            return self._find_by_id_or_fail(selector)

        full = self.format(selector)
        try:
            return self.driver.find_element(By.CSS_SELECTOR, full)
        except WebDriverException as e:
            raise NotFoundError(f"Unable to locate element [{full}].", selector=full) from e

    def first_or_fail(self, selectors: Iterable[str]) -> Any:
        candidates = list(selectors)
        if not candidates:
            raise InvalidArgumentError("No candidates supplied.")

        error: Optional[Exception] = None
        for selector in candidates:
            try:
                return self.find_or_fail(selector)
            except Exception as e:
                error = e

        raise error  # type: ignore[misc]

    def all(self, selector: str) -> List[Any]:
        """Find every matching element; lookup errors yield an empty list."""
        try:
            return list(self.driver.find_elements(By.CSS_SELECTOR, self.format(selector)))
        except Exception as e:
            log.debug(f"all({selector!r}) found nothing: {e!r}")
            return []

    # ---------- Form fields ----------

    def resolve_for_typing(self, field: str) -> Any:
        element = self._find_by_id(field)
        if element is not None:
            return element

        return self.first_or_fail([
            f"input[name='{field}']",
            f"textarea[name='{field}']",
            field,
        ])

    def resolve_for_selection(self, field: str) -> Any:
        element = self._find_by_id(field)
        if element is not None:
            return element

        return self.first_or_fail([
            f"select[name='{field}']",
            field,
        ])

    def resolve_select_options(self, field: str, values: Iterable[Any]) -> List[Any]:
        """Return the <option> elements of a select whose value is in `values`."""
        wanted = [str(v) for v in values]
        if not wanted:
            return []

        options = self.resolve_for_selection(field).find_elements(By.TAG_NAME, "option")
        return [option for option in options if option.get_attribute("value") in wanted]

    def resolve_for_radio_selection(self, field: str, value: Optional[str] = None) -> Any:
        if value is None:
            raise InvalidArgumentError(f"No value was provided for radio button [{field}].")

        element = self._find_by_id(field)
        if element is not None:
            return element

        return self.first_or_fail([
            f"input[type=radio][name='{field}'][value='{value}']",
            field,
        ])

    def resolve_for_checking(self, field: Optional[str], value: Optional[str] = None) -> Any:
        if field is not None:
            element = self._find_by_id(field)
            if element is not None:
                return element

        selector = "input[type=checkbox]"
        if field is not None:
            selector += f"[name='{field}']"
        if value is not None:
            selector += f"[value='{value}']"

        candidates = [selector]
        if field is not None:
            candidates.append(field)
        return self.first_or_fail(candidates)

    def resolve_for_attachment(self, field: str) -> Any:
        element = self._find_by_id(field)
        if element is not None:
            return element

        return self.first_or_fail([
            f"input[type=file][name='{field}']",
            field,
        ])

    def resolve_for_field(self, field: str) -> Any:
        element = self._find_by_id(field)
        if element is not None:
            return element

        return self.first_or_fail([
            f"input[name='{field}']",
            f"textarea[name='{field}']",
            f"select[name='{field}']",
            f"button[name='{field}']",
            field,
        ])

    def resolve_for_button_press(self, button: str) -> Any:
        for finder in self._button_finders:
            element = finder(button)
            if element is not None:
                return element

        raise InvalidArgumentError(f"Unable to locate button [{button}].")

    # ---------- Button finders ----------

    def _find_button_by_name(self, button: str) -> Optional[Any]:
        for selector in (
            f"input[type=submit][name='{button}']",
            f"input[type=button][value='{button}']",
            f"button[name='{button}']",
        ):
            element = self.find(selector)
            if element is not None:
                return element
        return None

    def _find_button_by_value(self, button: str) -> Optional[Any]:
        for element in self.all("input[type=submit]"):
            if element.get_attribute("value") == button:
                return element
        return None

    def _find_button_by_text(self, button: str) -> Optional[Any]:
        for element in self.all("button"):
            if button in (element.text or ""):
                return element
        return None

    # ---------- ID shortcuts ----------

    def _find_by_id(self, selector: str) -> Optional[Any]:
        """Direct ID lookup for "#id" selectors; None when not an ID or not found."""
        if not ID_SHORTCUT.match(selector):
            return None
        try:
            return self.driver.find_element(By.ID, selector[1:])
        except WebDriverException:
            return None

    def _find_by_id_or_fail(self, selector: str) -> Any:
        try:
            return self.driver.find_element(By.ID, selector[1:])
        except WebDriverException as e:
            raise NotFoundError(f"Unable to locate element [{selector}].", selector=selector) from e
