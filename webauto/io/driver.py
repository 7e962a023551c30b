"""
Browser driver protocol (abstraction).

This Protocol defines the browser control surface that action
implementations rely on, so actions can be exercised against a fake in
unit tests and against Selenium for real runs.

Notes:
- `ctx` represents one browser session for a single scenario.
  In the Selenium implementation it is a `WebDriver` created via `new_context()`.
- `locator` is either a `Locator` or a selector string (see core/locators.py).
- Failures surface as Selenium exceptions (NoSuchElementException,
  TimeoutException, ...); actions translate them into core.errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol, Sequence

from ..core.locators import Locator

SelectBy = Literal["index", "value", "text"]
WaitState = Literal["visible", "invisible", "clickable", "present"]


@dataclass(frozen=True)
class OptionInfo:
    """Snapshot of one <option>: visible text and value attribute."""

    text: str
    value: str | None = None


class BrowserDriver(Protocol):
    # -------- lifecycle --------
    def start(self) -> None: ...
    def stop(self) -> None: ...
    def new_context(self) -> Any: ...
    def close_context(self, ctx: Any) -> None: ...

    # -------- navigation & waits --------
    def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None: ...
    def wait_for(
        self,
        ctx: Any,
        locator: Locator | str,
        *,
        state: WaitState = "visible",
        timeout_ms: int | None = None,
        poll_interval_ms: int | None = None,
        ignored_exceptions: Sequence[type[BaseException]] = (),
        locate_first: bool = False,
    ) -> Any: ...

    # -------- element interactions & queries --------
    def click(self, ctx: Any, locator: Locator | str) -> None: ...
    def text_content(self, ctx: Any, locator: Locator | str) -> str: ...
    def get_attribute(self, ctx: Any, locator: Locator | str, name: str) -> str | None: ...
    def is_displayed(self, ctx: Any, locator: Locator | str) -> bool: ...
    def execute_script(
        self, ctx: Any, script: str, locator: Locator | str | None = None
    ) -> Any: ...

    # -------- dropdown helpers --------
    def select_option(
        self, ctx: Any, locator: Locator | str, value: str | int, *, by: SelectBy = "text"
    ) -> None: ...
    def deselect_option(
        self, ctx: Any, locator: Locator | str, value: str | int, *, by: SelectBy = "text"
    ) -> None: ...
    def first_selected_option(self, ctx: Any, locator: Locator | str) -> OptionInfo: ...
    def selected_options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]: ...
    def options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]: ...

    # -------- utilities --------
    def screenshot(self, ctx: Any, path: str) -> None: ...
