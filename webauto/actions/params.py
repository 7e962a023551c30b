"""
入参模型: 定义动作的 Pydantic v2 参数约束。
Why: 在 场景/JSON 脚本 → 执行器 的边界先做强校验, 拦截坏数据, 统一错误结构。
- 导航/等待: OpenUrlParams, WaitForParams
- 交互/读取: ClickParams, ExtractTextParams, GetAttributeParams, ExecuteScriptParams
- 下拉框:    SelectOptionParams, DeselectOptionParams, ListOptionsParams
- 断言:      ExpectTextParams, ExpectDisplayedParams, ExpectAttributeParams, ExpectSelectedParams
- 其它:      SnapshotParams
"""
# @file purpose: Define parameter schemas for actions using Pydantic v2.

from typing import Annotated, Literal

from pydantic import AnyHttpUrl, BaseModel, Field, StringConstraints, model_validator

# 辅助约束类型
NonEmptyStr = Annotated[str, StringConstraints(min_length=1, strip_whitespace=True)]
TimeoutMs = Annotated[int, Field(gt=0, le=120_000)]
PollMs = Annotated[int, Field(gt=0, le=10_000)]

SelectBy = Literal["index", "value", "text"]
WaitState = Literal["visible", "invisible", "clickable", "present"]
IgnorableException = Literal[
    "NoSuchElementException",
    "StaleElementReferenceException",
    "ElementNotVisibleException",
    "ElementNotInteractableException",
]


class OpenUrlParams(BaseModel):
    """Parameters for open_url action."""

    url: AnyHttpUrl
    timeout_ms: TimeoutMs | None = None


class WaitForParams(BaseModel):
    """
    Parameters for wait_for action.
    poll_interval_ms + ignored_exceptions turn the explicit wait into a fluent wait.
    locate_first waits on an element found up front (present but hidden).
    """

    selector: NonEmptyStr
    state: WaitState = "visible"
    timeout_ms: TimeoutMs | None = 10_000
    poll_interval_ms: PollMs | None = None
    ignored_exceptions: list[IgnorableException] = Field(default_factory=list)
    locate_first: bool = False

    @model_validator(mode="after")
    def _locate_first_only_when_visible(self) -> "WaitForParams":
        if self.locate_first and self.state != "visible":
            raise ValueError("locate_first is only supported with state='visible'")
        return self


class ClickParams(BaseModel):
    """Parameters for click action."""

    selector: NonEmptyStr


class ExtractTextParams(BaseModel):
    """Parameters for extract_text action."""

    selector: NonEmptyStr
    strip: bool = True


class GetAttributeParams(BaseModel):
    """Parameters for get_attribute action."""

    selector: NonEmptyStr
    name: NonEmptyStr


class ExecuteScriptParams(BaseModel):
    """JavaScript to run in page context; the element of `selector` is arguments[0]."""

    script: NonEmptyStr
    selector: NonEmptyStr | None = None


class SelectOptionParams(BaseModel):
    """Select an option in <select> by index, value or visible text."""

    selector: NonEmptyStr
    value: str | int
    by: SelectBy = "text"

    @model_validator(mode="after")
    def _index_is_int(self) -> "SelectOptionParams":
        if self.by == "index":
            try:
                index = int(self.value)
            except (TypeError, ValueError):
                raise ValueError(f"index must be an integer, got {self.value!r}") from None
            if index < 0:
                raise ValueError("index must be >= 0")
            self.value = index
        return self


class DeselectOptionParams(SelectOptionParams):
    """Deselect an option in a multi-select <select>."""


class ListOptionsParams(BaseModel):
    """Read all options; optionally compare their texts (in order) to `expected`."""

    selector: NonEmptyStr
    expected: list[str] | None = None


class ExpectTextParams(BaseModel):
    """Assert the element's text equals `expected`."""

    selector: NonEmptyStr
    expected: str
    strip: bool = False


class ExpectDisplayedParams(BaseModel):
    """Assert the element is (or is not) displayed."""

    selector: NonEmptyStr
    displayed: bool = True


class ExpectAttributeParams(BaseModel):
    """Assert an attribute of the element equals `expected`."""

    selector: NonEmptyStr
    name: NonEmptyStr
    expected: str | None


class ExpectSelectedParams(BaseModel):
    """
    Assert dropdown selection:
    - text / value: compared with the first selected option
    - count: number of selected options (multi-select)
    """

    selector: NonEmptyStr
    text: str | None = None
    value: str | None = None
    count: Annotated[int, Field(ge=0)] | None = None

    @model_validator(mode="after")
    def _something_to_check(self) -> "ExpectSelectedParams":
        if self.text is None and self.value is None and self.count is None:
            raise ValueError("expect_selected needs at least one of text, value, count")
        return self


class SnapshotParams(BaseModel):
    """Take a screenshot of the current viewport."""

    path: str = Field(..., min_length=1, description="Where to save PNG file")
