import pytest
from pydantic import ValidationError

import webauto.actions.impl  # noqa: F401  注册动作
from webauto.actions.params import SelectOptionParams, WaitForParams
from webauto.core import registry
from webauto.core.action import ActionSpec


def _validate(name: str, **args):
    return registry.validate_spec(ActionSpec(name=name, args=args))


def test_unknown_action_is_key_error() -> None:
    with pytest.raises(KeyError):
        _validate("hover", selector="#x")


def test_open_url_requires_http_url() -> None:
    _meta, params = _validate("open_url", url="http://127.0.0.1:8765/dropdown")
    assert str(params.url).startswith("http://127.0.0.1:8765")
    with pytest.raises(ValidationError):
        _validate("open_url", url="not a url")


def test_selector_is_stripped_and_non_empty() -> None:
    _meta, params = _validate("click", selector="  #start button ")
    assert params.selector == "#start button"
    with pytest.raises(ValidationError):
        _validate("click", selector="   ")


def test_select_by_index_coerces_to_int() -> None:
    p = SelectOptionParams(selector="#dropdown", value="1", by="index")
    assert p.value == 1
    with pytest.raises(ValidationError):
        SelectOptionParams(selector="#dropdown", value="first", by="index")
    with pytest.raises(ValidationError):
        SelectOptionParams(selector="#dropdown", value=-1, by="index")


def test_select_by_text_keeps_string() -> None:
    p = SelectOptionParams(selector="#dropdown", value="Option 1")
    assert p.by == "text"
    assert p.value == "Option 1"


def test_wait_for_fluent_options() -> None:
    p = WaitForParams(
        selector="#start button",
        state="clickable",
        timeout_ms=10_000,
        poll_interval_ms=500,
        ignored_exceptions=["NoSuchElementException"],
    )
    assert p.poll_interval_ms == 500
    with pytest.raises(ValidationError):
        WaitForParams(selector="#x", ignored_exceptions=["KeyError"])
    with pytest.raises(ValidationError):
        WaitForParams(selector="#x", timeout_ms=0)


def test_locate_first_only_for_visible() -> None:
    with pytest.raises(ValidationError):
        WaitForParams(selector="id=loading", state="invisible", locate_first=True)


def test_expect_selected_needs_a_check() -> None:
    with pytest.raises(ValidationError):
        _validate("expect_selected", selector="#dropdown")
    _meta, params = _validate("expect_selected", selector="#dropdown", count=2)
    assert params.count == 2


def test_list_options_expected_is_optional() -> None:
    _meta, params = _validate("list_options", selector="#dropdown")
    assert params.expected is None
