# webauto/scenarios/dynamic_loading.py
"""
Dynamic loading scenarios for the demo site's /dynamic_loading pages.

- /dynamic_loading/1: #finish is in the DOM from the start but hidden
- /dynamic_loading/2: #finish is only rendered once loading completes
- /dynamic_loading:   index page linking to both examples

In both examples clicking "#start button" shows #loading for a few seconds,
then reveals "Hello World!" in #finish.
"""

from __future__ import annotations

from typing import List

from ..core.action import ActionSpec
from ..core.locators import (
    EXAMPLE_1_LINK,
    EXAMPLE_2_LINK,
    FINISH_MESSAGE,
    LOADING_INDICATOR,
    START_BUTTON,
)
from .catalog import page_url, scenario

INDEX_PATH = "/dynamic_loading"
EXAMPLE_1_PATH = "/dynamic_loading/1"
EXAMPLE_2_PATH = "/dynamic_loading/2"

EXPECTED_MESSAGE = "Hello World!"
WAIT_MS = 10_000
SHORT_WAIT_MS = 3_000  # shorter than the page's loading time
INDEX_WAIT_MS = 6_000
POLL_MS = 500


def _assert_message(*, strip: bool = False) -> List[ActionSpec]:
    finish = str(FINISH_MESSAGE)
    return [
        ActionSpec(name="expect_displayed", args={"selector": finish}),
        ActionSpec(
            name="expect_text",
            args={"selector": finish, "expected": EXPECTED_MESSAGE, "strip": strip},
        ),
    ]


def _hidden_element_steps(wait_ms: int) -> List[ActionSpec]:
    """#finish exists but is hidden: locate it first, then wait for it to show."""
    specs = [
        ActionSpec(name="click", args={"selector": str(START_BUTTON)}),
        ActionSpec(
            name="wait_for",
            args={"selector": str(FINISH_MESSAGE), "timeout_ms": wait_ms, "locate_first": True},
        ),
    ]
    return specs + _assert_message()


def _rendered_element_steps(wait_ms: int) -> List[ActionSpec]:
    """#finish does not exist yet: wait until it is located and visible."""
    specs = [
        ActionSpec(name="click", args={"selector": str(START_BUTTON)}),
        ActionSpec(name="wait_for", args={"selector": str(FINISH_MESSAGE), "timeout_ms": wait_ms}),
    ]
    return specs + _assert_message()


@scenario("dynamic_loading_hidden_element", "Example 1: wait for a hidden element to appear")
def hidden_element(base_url: str) -> List[ActionSpec]:
    specs = [ActionSpec(name="open_url", args={"url": page_url(base_url, EXAMPLE_1_PATH)})]
    return specs + _hidden_element_steps(WAIT_MS)


@scenario("dynamic_loading_rendered_element", "Example 2: wait for an element rendered after loading")
def rendered_element(base_url: str) -> List[ActionSpec]:
    specs = [ActionSpec(name="open_url", args={"url": page_url(base_url, EXAMPLE_2_PATH)})]
    return specs + _rendered_element_steps(WAIT_MS)


@scenario("dynamic_loading_example1_via_link", "Follow the index link to example 1, then wait")
def example1_via_link(base_url: str) -> List[ActionSpec]:
    specs = [
        ActionSpec(name="open_url", args={"url": page_url(base_url, INDEX_PATH)}),
        ActionSpec(name="click", args={"selector": str(EXAMPLE_1_LINK)}),
        ActionSpec(name="wait_for", args={"selector": str(START_BUTTON), "state": "clickable"}),
    ]
    return specs + _hidden_element_steps(INDEX_WAIT_MS)


@scenario("dynamic_loading_example2_via_link", "Follow the index link to example 2, then wait")
def example2_via_link(base_url: str) -> List[ActionSpec]:
    specs = [
        ActionSpec(name="open_url", args={"url": page_url(base_url, INDEX_PATH)}),
        ActionSpec(name="click", args={"selector": str(EXAMPLE_2_LINK)}),
        ActionSpec(name="wait_for", args={"selector": str(START_BUTTON), "state": "clickable"}),
    ]
    return specs + _rendered_element_steps(INDEX_WAIT_MS)


@scenario(
    "dynamic_loading_fluent_wait",
    "Fluent wait (500 ms polling, ignoring not-found) through start, loading and finish",
)
def fluent_wait(base_url: str) -> List[ActionSpec]:
    fluent = {
        "timeout_ms": WAIT_MS,
        "poll_interval_ms": POLL_MS,
        "ignored_exceptions": ["NoSuchElementException"],
    }
    specs = [
        ActionSpec(name="open_url", args={"url": page_url(base_url, EXAMPLE_1_PATH)}),
        ActionSpec(
            name="wait_for", args={"selector": str(START_BUTTON), "state": "clickable", **fluent}
        ),
        ActionSpec(name="click", args={"selector": str(START_BUTTON)}),
        ActionSpec(
            name="wait_for",
            args={"selector": str(LOADING_INDICATOR), "state": "invisible", **fluent},
        ),
        ActionSpec(
            name="wait_for", args={"selector": str(FINISH_MESSAGE), "state": "visible", **fluent}
        ),
        # logged for debugging
        ActionSpec(name="extract_text", args={"selector": str(FINISH_MESSAGE)}),
    ]
    return specs + _assert_message(strip=True)


@scenario(
    "dynamic_loading_timeout",
    "A 3 s wait is shorter than the loading time and times out",
    expected_error="WaitTimeoutError",
)
def handle_timeout(base_url: str) -> List[ActionSpec]:
    specs = [ActionSpec(name="open_url", args={"url": page_url(base_url, EXAMPLE_1_PATH)})]
    specs.append(ActionSpec(name="click", args={"selector": str(START_BUTTON)}))
    specs.append(
        ActionSpec(
            name="wait_for", args={"selector": str(FINISH_MESSAGE), "timeout_ms": SHORT_WAIT_MS}
        )
    )
    return specs + _assert_message()


@scenario("dynamic_loading_javascript_click", "Click start through JavaScript, then wait")
def javascript_click(base_url: str) -> List[ActionSpec]:
    specs = [
        ActionSpec(name="open_url", args={"url": page_url(base_url, EXAMPLE_1_PATH)}),
        ActionSpec(
            name="execute_script",
            args={"script": "arguments[0].click();", "selector": str(START_BUTTON)},
        ),
        ActionSpec(name="wait_for", args={"selector": str(FINISH_MESSAGE), "timeout_ms": WAIT_MS}),
    ]
    return specs + _assert_message()
