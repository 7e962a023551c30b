"""
Selenium-based BrowserDriver implementation.

Conforms to io/driver.py's BrowserDriver Protocol:
- start() / stop()
- new_context() / close_context(ctx)
- goto(ctx, url)
- wait_for(ctx, locator, state=..., timeout_ms?, poll_interval_ms?, ignored_exceptions?)
- click / text_content / get_attribute / is_displayed
- execute_script(ctx, script, locator?)
- screenshot(ctx, path)

Dropdown primitives (selenium.webdriver.support.select.Select):
- select_option / deselect_option by "index" | "value" | "text"
- first_selected_option / selected_options / options
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Sequence

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.select import Select
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager

from ..core.errors import DriverStartError
from ..core.locators import Locator
from .driver import OptionInfo, SelectBy, WaitState

logger = logging.getLogger(__name__)

BrowserName = Literal["chrome", "firefox"]


class SeleniumDriver:
    """
    A concrete BrowserDriver based on Selenium WebDriver.
    - `ctx` in this implementation is a Selenium `WebDriver` session.
    - Each `new_context()` launches a fresh browser; `close_context()` quits it.
    """

    def __init__(
        self,
        *,
        browser: BrowserName = "chrome",
        headless: bool = True,
        use_driver_manager: bool = True,
        default_timeout_ms: int = 10_000,
        poll_interval_ms: int = 500,
        page_load_timeout_ms: int = 30_000,
        window_size: tuple[int, int] = (1280, 900),
    ) -> None:
        self.browser = browser
        self.headless = headless
        self.use_driver_manager = use_driver_manager
        self.default_timeout_ms = default_timeout_ms
        self.poll_interval_ms = poll_interval_ms
        self.page_load_timeout_ms = page_load_timeout_ms
        self.window_size = window_size

        self._started = False
        self._driver_path: Optional[str] = None  # None -> Selenium Manager decides
        self._sessions: list[WebDriver] = []

    # ---------------- lifecycle ----------------

    def start(self) -> None:
        """Resolve the driver binary once (webdriver-manager or Selenium Manager)."""
        if self._started:
            return
        if self.use_driver_manager:
            try:
                if self.browser == "firefox":
                    self._driver_path = GeckoDriverManager().install()
                else:
                    self._driver_path = ChromeDriverManager().install()
            except Exception as e:  # noqa: BLE001
                raise DriverStartError(f"failed to install {self.browser} driver: {e}") from e
            logger.debug("using %s driver at %s", self.browser, self._driver_path)
        self._started = True

    def stop(self) -> None:
        """Quit every session that is still open."""
        try:
            for session in list(self._sessions):
                try:
                    session.quit()
                except WebDriverException as e:
                    logger.warning("failed to quit browser session: %s", e)
            self._sessions.clear()
        finally:
            self._started = False

    def new_context(self) -> WebDriver:
        """Launch a new browser session and return it to be used as `ctx`."""
        self._ensure_started()
        try:
            if self.browser == "firefox":
                session = self._launch_firefox()
            else:
                session = self._launch_chrome()
        except WebDriverException as e:
            raise DriverStartError(f"failed to start {self.browser}: {e.msg or e}") from e
        session.set_page_load_timeout(self.page_load_timeout_ms / 1000)
        self._sessions.append(session)
        logger.debug("opened %s session %s", self.browser, session.session_id)
        return session

    def close_context(self, ctx: Any) -> None:
        """Quit the browser session; it is forgotten even if quit() fails."""
        session = self._as_session(ctx)
        try:
            session.quit()
        finally:
            if session in self._sessions:
                self._sessions.remove(session)

    # ---------------- navigation & waits ----------------

    def goto(self, ctx: Any, url: str, *, timeout_ms: Optional[int] = None) -> None:
        session = self._as_session(ctx)
        if timeout_ms:
            session.set_page_load_timeout(timeout_ms / 1000)
        try:
            session.get(url)
        finally:
            if timeout_ms:
                session.set_page_load_timeout(self.page_load_timeout_ms / 1000)

    def wait_for(
        self,
        ctx: Any,
        locator: Locator | str,
        *,
        state: WaitState = "visible",
        timeout_ms: Optional[int] = None,
        poll_interval_ms: Optional[int] = None,
        ignored_exceptions: Sequence[type[BaseException]] = (),
        locate_first: bool = False,
    ) -> WebElement | bool:
        """
        Explicit (or, with polling/ignored exceptions, fluent) wait.

        visible    -> visibility_of_element_located, or visibility_of(element)
                      when locate_first=True (element exists but is hidden)
        invisible  -> invisibility_of_element_located
        clickable  -> element_to_be_clickable
        present    -> presence_of_element_located
        Raises selenium TimeoutException when the condition never holds.
        """
        session = self._as_session(ctx)
        loc = Locator.parse(locator)
        wait = WebDriverWait(
            session,
            (timeout_ms or self.default_timeout_ms) / 1000,
            poll_frequency=(poll_interval_ms or self.poll_interval_ms) / 1000,
            ignored_exceptions=tuple(ignored_exceptions) or None,
        )
        condition: Callable[[Any], Any]
        if state == "visible" and locate_first:
            condition = EC.visibility_of(session.find_element(*loc.as_tuple()))
        elif state == "visible":
            condition = EC.visibility_of_element_located(loc.as_tuple())
        elif state == "invisible":
            condition = EC.invisibility_of_element_located(loc.as_tuple())
        elif state == "clickable":
            condition = EC.element_to_be_clickable(loc.as_tuple())
        elif state == "present":
            condition = EC.presence_of_element_located(loc.as_tuple())
        else:
            raise ValueError(f"unknown wait state: {state}")
        return wait.until(condition, message=f"waiting for {loc} to be {state}")

    # ---------------- element primitives ----------------

    def find(self, ctx: Any, locator: Locator | str) -> WebElement:
        session = self._as_session(ctx)
        return session.find_element(*Locator.parse(locator).as_tuple())

    def click(self, ctx: Any, locator: Locator | str) -> None:
        self.find(ctx, locator).click()

    def text_content(self, ctx: Any, locator: Locator | str) -> str:
        """Rendered text of the element (empty string while it is hidden)."""
        return self.find(ctx, locator).text

    def get_attribute(self, ctx: Any, locator: Locator | str, name: str) -> Optional[str]:
        return self.find(ctx, locator).get_attribute(name)

    def is_displayed(self, ctx: Any, locator: Locator | str) -> bool:
        return self.find(ctx, locator).is_displayed()

    def execute_script(
        self, ctx: Any, script: str, locator: Locator | str | None = None
    ) -> Any:
        """Run JavaScript in page context; the element (if any) is arguments[0]."""
        session = self._as_session(ctx)
        if locator is None:
            return session.execute_script(script)
        return session.execute_script(script, self.find(ctx, locator))

    def screenshot(self, ctx: Any, path: str) -> None:
        session = self._as_session(ctx)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        session.save_screenshot(path)

    # ---------------- dropdown primitives ----------------

    def select_option(
        self, ctx: Any, locator: Locator | str, value: str | int, *, by: SelectBy = "text"
    ) -> None:
        """
        Select an option by index, value attribute or visible text.
        Missing options raise NoSuchElementException.
        """
        dropdown = self._select(ctx, locator)
        if by == "index":
            dropdown.select_by_index(int(value))
        elif by == "value":
            dropdown.select_by_value(str(value))
        else:
            dropdown.select_by_visible_text(str(value))

    def deselect_option(
        self, ctx: Any, locator: Locator | str, value: str | int, *, by: SelectBy = "text"
    ) -> None:
        """Deselect on a multi-select; single selects raise NotImplementedError."""
        dropdown = self._select(ctx, locator)
        if by == "index":
            dropdown.deselect_by_index(int(value))
        elif by == "value":
            dropdown.deselect_by_value(str(value))
        else:
            dropdown.deselect_by_visible_text(str(value))

    def first_selected_option(self, ctx: Any, locator: Locator | str) -> OptionInfo:
        return self._option_info(self._select(ctx, locator).first_selected_option)

    def selected_options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]:
        return [self._option_info(o) for o in self._select(ctx, locator).all_selected_options]

    def options(self, ctx: Any, locator: Locator | str) -> list[OptionInfo]:
        return [self._option_info(o) for o in self._select(ctx, locator).options]

    # ---------------- internals ----------------

    def _launch_chrome(self) -> WebDriver:
        options = ChromeOptions()
        if self.headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument(f"--window-size={self.window_size[0]},{self.window_size[1]}")
        service = ChromeService(executable_path=self._driver_path) if self._driver_path else ChromeService()
        return webdriver.Chrome(service=service, options=options)

    def _launch_firefox(self) -> WebDriver:
        options = FirefoxOptions()
        if self.headless:
            options.add_argument("-headless")
        service = FirefoxService(executable_path=self._driver_path) if self._driver_path else FirefoxService()
        session = webdriver.Firefox(service=service, options=options)
        session.set_window_size(*self.window_size)
        return session

    def _select(self, ctx: Any, locator: Locator | str) -> Select:
        return Select(self.find(ctx, locator))

    @staticmethod
    def _option_info(option: WebElement) -> OptionInfo:
        return OptionInfo(text=option.text, value=option.get_attribute("value"))

    def _ensure_started(self) -> None:
        if not self._started:
            raise RuntimeError("Driver not started. Call start() first.")

    @staticmethod
    def _as_session(ctx: Any) -> WebDriver:
        if not isinstance(ctx, WebDriver):
            raise TypeError("ctx must be a Selenium WebDriver (returned by new_context()).")
        return ctx
