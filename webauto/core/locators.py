"""
Element locators: a selector string plus the strategy used to match it.

Plain strings are CSS selectors. A known strategy prefix switches strategy:
    "#dropdown"                -> css
    "id=finish"                -> id
    "xpath=//div[@id='start']" -> xpath
    "[href='/dynamic_loading/1']" stays css (no known prefix)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from selenium.webdriver.common.by import By

Strategy = Literal["css", "id", "xpath", "name", "link_text", "tag"]

_BY: dict[str, str] = {
    "css": By.CSS_SELECTOR,
    "id": By.ID,
    "xpath": By.XPATH,
    "name": By.NAME,
    "link_text": By.LINK_TEXT,
    "tag": By.TAG_NAME,
}


class Locator(BaseModel):
    """Immutable (strategy, value) pair."""

    model_config = ConfigDict(frozen=True)

    by: Strategy = "css"
    value: str = Field(..., min_length=1)

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls(by="css", value=value)

    @classmethod
    def id(cls, value: str) -> "Locator":
        return cls(by="id", value=value)

    @classmethod
    def parse(cls, selector: "str | Locator") -> "Locator":
        if isinstance(selector, Locator):
            return selector
        prefix, sep, rest = selector.partition("=")
        if sep and prefix.strip() in _BY and rest.strip():
            return cls(by=prefix.strip(), value=rest.strip())  # type: ignore[arg-type]
        return cls(by="css", value=selector.strip())

    def as_tuple(self) -> tuple[str, str]:
        """(By.*, value) as expected by find_element() and expected_conditions."""
        return _BY[self.by], self.value

    def __str__(self) -> str:
        if self.by == "css":
            return self.value
        return f"{self.by}={self.value}"


# Selectors shared by the demo site pages
DROPDOWN = Locator.css("#dropdown")
MULTI_SELECT_DROPDOWN = Locator.css("#multi-select-dropdown")
EXAMPLE_1_LINK = Locator.css("[href='/dynamic_loading/1']")
EXAMPLE_2_LINK = Locator.css("[href='/dynamic_loading/2']")
START_BUTTON = Locator.css("#start button")
LOADING_INDICATOR = Locator.id("loading")
FINISH_MESSAGE = Locator.id("finish")
