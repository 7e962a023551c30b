# webauto/scenarios/dropdown.py
"""
Dropdown scenarios for the demo site's /dropdown page.

The page exposes a single <select id="dropdown">:
- "Please select an option" (disabled, value "")
- "Option 1" (value "1")
- "Option 2" (value "2")

The multi-select scenario targets a <select multiple id="multi-select-dropdown">
page that only exists in the local fixtures.
"""

from __future__ import annotations

from typing import List

from ..core.action import ActionSpec
from ..core.locators import DROPDOWN, MULTI_SELECT_DROPDOWN
from .catalog import page_url, scenario

DROPDOWN_PATH = "/dropdown"
MULTI_SELECT_PATH = "/multiselect_dropdown"

EXPECTED_SELECTED_OPTION = "Option 1"
VALUE = "1"
ALL_OPTIONS = ["Please select an option", "Option 1", "Option 2"]
MISSING_OPTION = "Non-Existent Option"


def _open_dropdown(base_url: str) -> List[ActionSpec]:
    return [ActionSpec(name="open_url", args={"url": page_url(base_url, DROPDOWN_PATH)})]


@scenario("dropdown_select_by_index", "Select the option at index 1 (index starts at 0)")
def select_by_index(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(name="select_option", args={"selector": str(DROPDOWN), "value": 1, "by": "index"})
    )
    specs.append(
        ActionSpec(
            name="expect_selected",
            args={"selector": str(DROPDOWN), "text": EXPECTED_SELECTED_OPTION},
        )
    )
    return specs


@scenario("dropdown_select_by_value", "Select an option by its value attribute")
def select_by_value(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(name="select_option", args={"selector": str(DROPDOWN), "value": VALUE, "by": "value"})
    )
    specs.append(
        ActionSpec(
            name="expect_selected",
            args={"selector": str(DROPDOWN), "text": EXPECTED_SELECTED_OPTION},
        )
    )
    return specs


@scenario("dropdown_select_by_visible_text", "Select an option by its visible text")
def select_by_visible_text(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(
            name="select_option",
            args={"selector": str(DROPDOWN), "value": EXPECTED_SELECTED_OPTION, "by": "text"},
        )
    )
    specs.append(
        ActionSpec(
            name="expect_selected",
            args={"selector": str(DROPDOWN), "text": EXPECTED_SELECTED_OPTION},
        )
    )
    return specs


@scenario(
    "dropdown_select_and_verify_value",
    "Select by visible text, then check both the text and the value of the selection",
)
def select_and_verify_value(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(
            name="select_option",
            args={"selector": str(DROPDOWN), "value": EXPECTED_SELECTED_OPTION, "by": "text"},
        )
    )
    specs.append(
        ActionSpec(
            name="expect_selected",
            args={"selector": str(DROPDOWN), "text": EXPECTED_SELECTED_OPTION, "value": VALUE},
        )
    )
    return specs


@scenario(
    "dropdown_multi_select",
    "Select two options of a multi-select, then deselect the first",
    fixture_only=True,
)
def multi_select(base_url: str) -> List[ActionSpec]:
    sel = str(MULTI_SELECT_DROPDOWN)
    return [
        ActionSpec(name="open_url", args={"url": page_url(base_url, MULTI_SELECT_PATH)}),
        ActionSpec(name="select_option", args={"selector": sel, "value": 0, "by": "index"}),
        ActionSpec(name="select_option", args={"selector": sel, "value": 1, "by": "index"}),
        ActionSpec(name="expect_selected", args={"selector": sel, "count": 2}),
        ActionSpec(name="deselect_option", args={"selector": sel, "value": 0, "by": "index"}),
        ActionSpec(name="expect_selected", args={"selector": sel, "count": 1}),
    ]


@scenario(
    "dropdown_missing_option",
    "Selecting a non-existent visible text raises a not-found error",
    expected_error="ElementNotFoundError",
)
def missing_option(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(
            name="select_option",
            args={"selector": str(DROPDOWN), "value": MISSING_OPTION, "by": "text"},
        )
    )
    return specs


@scenario("dropdown_list_options", "Read and log every option of the dropdown")
def list_all_options(base_url: str) -> List[ActionSpec]:
    specs = _open_dropdown(base_url)
    specs.append(
        ActionSpec(name="list_options", args={"selector": str(DROPDOWN), "expected": ALL_OPTIONS})
    )
    return specs
