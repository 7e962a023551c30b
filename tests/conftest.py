import functools
import http.server
import os
import socketserver
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest
from selenium.common.exceptions import (
    NoSuchElementException,
    TimeoutException,
    WebDriverException,
)

from webauto.core.errors import DriverStartError
from webauto.core.locators import Locator
from webauto.core.settings import settings
from webauto.io.driver import OptionInfo
from webauto.io.selenium_driver import SeleniumDriver

FIXTURES = Path(__file__).resolve().parent / "fixtures"


# ------------------------------------------------------------------------------
# local copy of the demo site
# ------------------------------------------------------------------------------


class _FixtureHandler(http.server.SimpleHTTPRequestHandler):
    """Serve /dropdown as dropdown.html, /dynamic_loading/1 as dynamic_loading/1.html."""

    def translate_path(self, path: str) -> str:
        fs_path = super().translate_path(path)
        if not os.path.splitext(fs_path)[1] and os.path.isfile(fs_path.rstrip("/") + ".html"):
            return fs_path.rstrip("/") + ".html"
        return fs_path

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        pass


class _Server(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


@pytest.fixture(scope="session")
def web_server() -> Iterator[str]:
    handler = functools.partial(_FixtureHandler, directory=str(FIXTURES))
    httpd = _Server(("127.0.0.1", 0), handler)
    port = httpd.server_address[1]
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        httpd.shutdown()
        httpd.server_close()


# ------------------------------------------------------------------------------
# real browser (skipped when no browser/driver is available)
# ------------------------------------------------------------------------------


@pytest.fixture(scope="session")
def selenium_driver() -> Iterator[SeleniumDriver]:
    driver = SeleniumDriver(
        browser=settings.browser,
        headless=True,
        use_driver_manager=settings.use_driver_manager,
        default_timeout_ms=settings.wait_timeout_ms,
        poll_interval_ms=settings.poll_interval_ms,
    )
    try:
        driver.start()
        # probe once so a missing browser skips instead of failing every test
        driver.close_context(driver.new_context())
    except DriverStartError as e:
        driver.stop()
        pytest.skip(f"browser unavailable: {e}")
    try:
        yield driver
    finally:
        driver.stop()


@pytest.fixture
def session(selenium_driver: SeleniumDriver) -> Iterator[Any]:
    """One browser per test: open -> test -> quit."""
    try:
        ctx = selenium_driver.new_context()
    except DriverStartError as e:
        pytest.skip(f"browser unavailable: {e}")
    try:
        yield ctx
    finally:
        selenium_driver.close_context(ctx)


# ------------------------------------------------------------------------------
# in-memory fake for unit tests
# ------------------------------------------------------------------------------


@dataclass
class FakeOption:
    text: str
    value: str
    selected: bool = False


@dataclass
class FakeElement:
    text: str = ""
    displayed: bool = True
    clickable: bool = True
    attributes: dict[str, str] = field(default_factory=dict)
    options: list[FakeOption] | None = None
    multiple: bool = False
    on_click: Callable[[], None] | None = None


class FakeDriver:
    """
    Minimal BrowserDriver double. Elements are keyed by normalized selector;
    failures are raised as the Selenium exceptions the real driver would raise.
    """

    def __init__(self) -> None:
        self.elements: dict[str, FakeElement] = {}
        self.calls: list[tuple[Any, ...]] = []
        self.urls: list[str] = []
        self.scripts: list[tuple[str, str | None]] = []
        self.screenshots: list[str] = []
        self.opened = 0
        self.closed = 0
        self.fail_screenshot = False

    # -------- setup helpers --------
    def add(self, selector: str, **kwargs: Any) -> FakeElement:
        el = FakeElement(**kwargs)
        self.elements[self._key(selector)] = el
        return el

    def add_dropdown(
        self, selector: str, options: list[tuple[str, str]], *, multiple: bool = False
    ) -> FakeElement:
        opts = [FakeOption(text=t, value=v) for t, v in options]
        if opts and not multiple:
            opts[0].selected = True
        return self.add(selector, options=opts, multiple=multiple)

    @staticmethod
    def _key(selector: Locator | str) -> str:
        return str(Locator.parse(selector))

    def _find(self, selector: Locator | str) -> FakeElement:
        try:
            return self.elements[self._key(selector)]
        except KeyError:
            raise NoSuchElementException(f"no such element: {selector}") from None

    # -------- lifecycle --------
    def start(self) -> None:
        self.calls.append(("start",))

    def stop(self) -> None:
        self.calls.append(("stop",))

    def new_context(self) -> Any:
        self.opened += 1
        return object()

    def close_context(self, ctx: Any) -> None:
        self.closed += 1

    # -------- navigation & waits --------
    def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None:
        if "unreachable" in url:
            raise WebDriverException("net::ERR_NAME_NOT_RESOLVED")
        self.urls.append(url)

    def wait_for(self, ctx: Any, locator: Locator | str, **kwargs: Any) -> Any:
        self.calls.append(("wait_for", self._key(locator), kwargs))
        state = kwargs.get("state", "visible")
        el = self.elements.get(self._key(locator))
        if kwargs.get("locate_first") and el is None:
            raise NoSuchElementException(f"no such element: {locator}")
        ok = {
            "visible": el is not None and el.displayed,
            "invisible": el is None or not el.displayed,
            "clickable": el is not None and el.displayed and el.clickable,
            "present": el is not None,
        }[state]
        if not ok:
            raise TimeoutException(f"waiting for {locator} to be {state}")
        return el

    # -------- element interactions --------
    def click(self, ctx: Any, locator: Locator | str) -> None:
        el = self._find(locator)
        self.calls.append(("click", self._key(locator)))
        if el.on_click:
            el.on_click()

    def text_content(self, ctx: Any, locator: Locator | str) -> str:
        el = self._find(locator)
        return el.text if el.displayed else ""

    def get_attribute(self, ctx: Any, locator: Locator | str, name: str) -> str | None:
        return self._find(locator).attributes.get(name)

    def is_displayed(self, ctx: Any, locator: Locator | str) -> bool:
        return self._find(locator).displayed

    def execute_script(self, ctx: Any, script: str, locator: Locator | str | None = None) -> Any:
        key = None
        if locator is not None:
            el = self._find(locator)
            key = self._key(locator)
            if script.strip() == "arguments[0].click();" and el.on_click:
                el.on_click()
        self.scripts.append((script, key))
        return None

    # -------- dropdowns --------
    def _options(self, locator: Locator | str) -> tuple[FakeElement, list[FakeOption]]:
        el = self._find(locator)
        if el.options is None:
            raise WebDriverException("element is not a <select>")
        return el, el.options

    def _match(self, options: list[FakeOption], value: str | int, by: str) -> list[FakeOption]:
        if by == "index":
            idx = int(value)
            matched = [options[idx]] if 0 <= idx < len(options) else []
        elif by == "value":
            matched = [o for o in options if o.value == str(value)]
        else:
            matched = [o for o in options if o.text == str(value)]
        if not matched:
            raise NoSuchElementException(f"Cannot locate option with {by}: {value}")
        return matched

    def select_option(self, ctx: Any, locator: Locator | str, value: str | int, *, by: str = "text") -> None:
        el, options = self._options(locator)
        matched = self._match(options, value, by)
        if not el.multiple:
            for o in options:
                o.selected = False
            matched = matched[:1]
        for o in matched:
            o.selected = True

    def deselect_option(self, ctx: Any, locator: Locator | str, value: str | int, *, by: str = "text") -> None:
        el, options = self._options(locator)
        if not el.multiple:
            raise NotImplementedError("You may only deselect options of a multi-select")
        for o in self._match(options, value, by):
            o.selected = False

    def first_selected_option(self, ctx: Any, locator: Locator | str) -> OptionInfo:
        selected = self.selected_options(ctx, locator)
        if not selected:
            raise NoSuchElementException("No options are selected")
        return selected[0]

    def selected_options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]:
        _el, options = self._options(locator)
        return [OptionInfo(text=o.text, value=o.value) for o in options if o.selected]

    def options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]:
        _el, options = self._options(locator)
        return [OptionInfo(text=o.text, value=o.value) for o in options]

    # -------- utilities --------
    def screenshot(self, ctx: Any, path: str) -> None:
        if self.fail_screenshot:
            raise WebDriverException("screenshot failed")
        self.screenshots.append(path)


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def demo_site(fake_driver: FakeDriver) -> FakeDriver:
    """
    Fake driver pre-loaded with the demo site's dropdown and dynamic loading
    elements. Clicking start reveals #finish immediately.
    """
    d = fake_driver
    d.add_dropdown(
        "#dropdown",
        [("Please select an option", ""), ("Option 1", "1"), ("Option 2", "2")],
    )
    d.add_dropdown(
        "#multi-select-dropdown",
        [("Red", "red"), ("Green", "green"), ("Blue", "blue")],
        multiple=True,
    )
    d.add("[href='/dynamic_loading/1']", text="Example 1")
    d.add("[href='/dynamic_loading/2']", text="Example 2")
    finish = d.add("id=finish", text="Hello World!", displayed=False)

    def _start() -> None:
        finish.displayed = True

    d.add("#start button", text="Start", on_click=_start)
    return d
