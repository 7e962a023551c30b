"""
Core action implementations bound to BrowserDriver:
- open_url / click / wait_for / extract_text / get_attribute / execute_script
- select_option / deselect_option / list_options (dropdowns)
- expect_text / expect_displayed / expect_attribute / expect_selected (assertions)
- snapshot

Each action:
  1) Expects a BrowserDriver + ctx + validated params (Pydantic v2)
  2) Returns ActionResult, or raises an ActionExecutionError subclass on failure:
     NoSuchElementException -> ElementNotFoundError
     TimeoutException       -> WaitTimeoutError
     mismatch               -> ExpectationError
"""

# @file purpose: Implement and register core actions.
from __future__ import annotations

import logging
from typing import Any

from selenium.common.exceptions import (
    ElementNotInteractableException,
    ElementNotVisibleException,
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)

from webauto.core.errors import (
    ActionExecutionError,
    ElementNotFoundError,
    ExpectationError,
    WaitTimeoutError,
)
from webauto.core.registry import action
from webauto.core.result import ActionResult
from webauto.io.driver import BrowserDriver  # Protocol

from .params import (
    ClickParams,
    DeselectOptionParams,
    ExecuteScriptParams,
    ExpectAttributeParams,
    ExpectDisplayedParams,
    ExpectSelectedParams,
    ExpectTextParams,
    ExtractTextParams,
    GetAttributeParams,
    ListOptionsParams,
    OpenUrlParams,
    SelectOptionParams,
    SnapshotParams,
    WaitForParams,
)

logger = logging.getLogger(__name__)

_IGNORABLE: dict[str, type[BaseException]] = {
    "NoSuchElementException": NoSuchElementException,
    "StaleElementReferenceException": StaleElementReferenceException,
    "ElementNotVisibleException": ElementNotVisibleException,
    "ElementNotInteractableException": ElementNotInteractableException,
}


def _failure(action_name: str, message: str, e: BaseException, **context: Any) -> ActionExecutionError:
    """Map a driver exception onto the error taxonomy, keeping the cause."""
    if isinstance(e, NoSuchElementException):
        cls: type[ActionExecutionError] = ElementNotFoundError
    elif isinstance(e, TimeoutException):
        cls = WaitTimeoutError
    else:
        cls = ActionExecutionError
    details = context.pop("details", None) or {}
    details.setdefault("cause", _cause_text(e))
    return cls(action_name, message, details=details, cause=e, **context)


def _cause_text(e: BaseException) -> str:
    text = str(getattr(e, "msg", None) or e).strip()
    # selenium messages carry a multi-line stacktrace; the first line is enough
    return text.splitlines()[0] if text else type(e).__name__


@action("open_url", params_model=OpenUrlParams)
def open_url(driver: BrowserDriver, ctx: Any, params: OpenUrlParams) -> ActionResult:
    """Navigate the session to an absolute URL."""
    url = str(params.url)
    try:
        driver.goto(ctx, url, timeout_ms=params.timeout_ms)
    except Exception as e:  # noqa: BLE001
        raise _failure("open_url", "failed to open url", e, url=url) from e
    return ActionResult.success(step="open_url", url=url)


@action("click", params_model=ClickParams)
def click(driver: BrowserDriver, ctx: Any, params: ClickParams) -> ActionResult:
    """Locate an element and click it."""
    try:
        driver.click(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure("click", "failed to click element", e, selector=params.selector) from e
    return ActionResult.success(step="click", selector=params.selector)


@action("wait_for", params_model=WaitForParams)
def wait_for(driver: BrowserDriver, ctx: Any, params: WaitForParams) -> ActionResult:
    """Explicit or fluent wait until the element reaches a state."""
    ignored = tuple(_IGNORABLE[name] for name in params.ignored_exceptions)
    try:
        driver.wait_for(
            ctx,
            params.selector,
            state=params.state,
            timeout_ms=params.timeout_ms,
            poll_interval_ms=params.poll_interval_ms,
            ignored_exceptions=ignored,
            locate_first=params.locate_first,
        )
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "wait_for",
            f"element did not become {params.state} in time",
            e,
            selector=params.selector,
            details={"timeout_ms": params.timeout_ms},
        ) from e
    return ActionResult.success(step="wait_for", selector=params.selector, state=params.state)


@action("extract_text", params_model=ExtractTextParams)
def extract_text(driver: BrowserDriver, ctx: Any, params: ExtractTextParams) -> ActionResult:
    """Read the rendered text of an element."""
    try:
        txt = driver.text_content(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure("extract_text", "failed to extract text", e, selector=params.selector) from e
    if params.strip:
        txt = txt.strip()
    logger.info("text of %s: %r", params.selector, txt)
    return ActionResult.extracted(txt, step="extract_text", selector=params.selector)


@action("get_attribute", params_model=GetAttributeParams)
def get_attribute(driver: BrowserDriver, ctx: Any, params: GetAttributeParams) -> ActionResult:
    """Read one attribute of an element."""
    try:
        value = driver.get_attribute(ctx, params.selector, params.name)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "get_attribute",
            f"failed to read attribute {params.name!r}",
            e,
            selector=params.selector,
        ) from e
    return ActionResult.extracted(
        value, step="get_attribute", selector=params.selector, attribute=params.name
    )


@action("execute_script", params_model=ExecuteScriptParams)
def execute_script(driver: BrowserDriver, ctx: Any, params: ExecuteScriptParams) -> ActionResult:
    """Run JavaScript in page context (element passed as arguments[0])."""
    try:
        value = driver.execute_script(ctx, params.script, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "execute_script",
            "script execution failed",
            e,
            selector=params.selector,
            details={"script": params.script},
        ) from e
    meta: dict[str, Any] = {"step": "execute_script"}
    if params.selector:
        meta["selector"] = params.selector
    return ActionResult.extracted(None if value is None else str(value), **meta)


# ------------------------------------------------------------------------------
# 下拉框
# ------------------------------------------------------------------------------


@action("select_option", params_model=SelectOptionParams)
def select_option(driver: BrowserDriver, ctx: Any, params: SelectOptionParams) -> ActionResult:
    """Select a dropdown option by index, value or visible text."""
    try:
        driver.select_option(ctx, params.selector, params.value, by=params.by)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "select_option",
            "failed to select option",
            e,
            selector=params.selector,
            details={"by": params.by, "value": params.value},
        ) from e
    return ActionResult.success(
        step="select_option", selector=params.selector, by=params.by, value=params.value
    )


@action("deselect_option", params_model=DeselectOptionParams)
def deselect_option(driver: BrowserDriver, ctx: Any, params: DeselectOptionParams) -> ActionResult:
    """Deselect an option of a multi-select dropdown."""
    try:
        driver.deselect_option(ctx, params.selector, params.value, by=params.by)
    except NotImplementedError as e:
        raise ActionExecutionError(
            "deselect_option",
            "dropdown is not a multi-select",
            selector=params.selector,
            cause=e,
        ) from e
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "deselect_option",
            "failed to deselect option",
            e,
            selector=params.selector,
            details={"by": params.by, "value": params.value},
        ) from e
    return ActionResult.success(
        step="deselect_option", selector=params.selector, by=params.by, value=params.value
    )


@action("list_options", params_model=ListOptionsParams)
def list_options(driver: BrowserDriver, ctx: Any, params: ListOptionsParams) -> ActionResult:
    """Read every option of a dropdown; optionally compare texts in order."""
    try:
        options = driver.options(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure("list_options", "failed to read options", e, selector=params.selector) from e

    texts = [o.text for o in options]
    for text in texts:
        logger.info("Option: %s", text)
    if params.expected is not None and texts != params.expected:
        raise ExpectationError(
            "list_options",
            "dropdown options differ",
            expected=params.expected,
            actual=texts,
            selector=params.selector,
        )
    return ActionResult.extracted(
        "\n".join(texts), step="list_options", selector=params.selector, count=len(texts)
    )


# ------------------------------------------------------------------------------
# 断言：读取失败按元素/超时错误处理，读取成功但不符 -> ExpectationError
# ------------------------------------------------------------------------------


@action("expect_text", params_model=ExpectTextParams)
def expect_text(driver: BrowserDriver, ctx: Any, params: ExpectTextParams) -> ActionResult:
    """Assert that an element's text equals the expected string."""
    try:
        actual = driver.text_content(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure("expect_text", "failed to read text", e, selector=params.selector) from e
    if params.strip:
        actual = actual.strip()
    if actual != params.expected:
        raise ExpectationError(
            "expect_text",
            "text mismatch",
            expected=params.expected,
            actual=actual,
            selector=params.selector,
        )
    return ActionResult.extracted(actual, step="expect_text", selector=params.selector)


@action("expect_displayed", params_model=ExpectDisplayedParams)
def expect_displayed(
    driver: BrowserDriver, ctx: Any, params: ExpectDisplayedParams
) -> ActionResult:
    """Assert that an element is displayed (or hidden)."""
    try:
        displayed = driver.is_displayed(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "expect_displayed", "failed to read visibility", e, selector=params.selector
        ) from e
    if displayed != params.displayed:
        raise ExpectationError(
            "expect_displayed",
            "element is not displayed" if params.displayed else "element is displayed",
            expected=params.displayed,
            actual=displayed,
            selector=params.selector,
        )
    return ActionResult.success(step="expect_displayed", selector=params.selector)


@action("expect_attribute", params_model=ExpectAttributeParams)
def expect_attribute(
    driver: BrowserDriver, ctx: Any, params: ExpectAttributeParams
) -> ActionResult:
    """Assert that an attribute equals the expected value."""
    try:
        actual = driver.get_attribute(ctx, params.selector, params.name)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "expect_attribute",
            f"failed to read attribute {params.name!r}",
            e,
            selector=params.selector,
        ) from e
    if actual != params.expected:
        raise ExpectationError(
            "expect_attribute",
            f"attribute {params.name!r} mismatch",
            expected=params.expected,
            actual=actual,
            selector=params.selector,
        )
    return ActionResult.extracted(actual, step="expect_attribute", selector=params.selector)


@action("expect_selected", params_model=ExpectSelectedParams)
def expect_selected(driver: BrowserDriver, ctx: Any, params: ExpectSelectedParams) -> ActionResult:
    """Assert the first selected option and/or the number of selected options."""
    try:
        selected = driver.selected_options(ctx, params.selector)
    except Exception as e:  # noqa: BLE001
        raise _failure(
            "expect_selected", "failed to read selection", e, selector=params.selector
        ) from e

    if params.count is not None and len(selected) != params.count:
        raise ExpectationError(
            "expect_selected",
            "selected option count mismatch",
            expected=params.count,
            actual=len(selected),
            selector=params.selector,
        )
    if params.text is not None or params.value is not None:
        if not selected:
            raise ExpectationError(
                "expect_selected",
                "no option is selected",
                expected={"text": params.text, "value": params.value},
                actual=None,
                selector=params.selector,
            )
        first = selected[0]
        if params.text is not None and first.text != params.text:
            raise ExpectationError(
                "expect_selected",
                "selected option text mismatch",
                expected=params.text,
                actual=first.text,
                selector=params.selector,
            )
        if params.value is not None and first.value != params.value:
            raise ExpectationError(
                "expect_selected",
                "selected option value mismatch",
                expected=params.value,
                actual=first.value,
                selector=params.selector,
            )
    return ActionResult.extracted(
        selected[0].text if selected else None,
        step="expect_selected",
        selector=params.selector,
        count=len(selected),
    )


@action("snapshot", params_model=SnapshotParams)
def snapshot(driver: BrowserDriver, ctx: Any, params: SnapshotParams) -> ActionResult:
    """Save a PNG screenshot of the current page."""
    try:
        driver.screenshot(ctx, params.path)
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            "snapshot",
            "failed to take screenshot",
            details={"path": params.path, "cause": repr(e)},
            cause=e,
        ) from e
    return ActionResult.success(step="snapshot", path=params.path)
