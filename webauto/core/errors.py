"""
定义项目级异常类型，统一错误语义与捕获边界。
- WebAutoError: 所有自定义异常的基类
- ActionExecutionError: 动作执行期错误（元素缺失、超时、断言不符、脚本异常等）
- ElementNotFoundError / WaitTimeoutError / ExpectationError: 三类常见失败
- DriverStartError: 浏览器会话无法创建
"""
# @file purpose: Define error taxonomy for webauto.

from typing import Any


class WebAutoError(Exception):
    """Base class for all custom errors in webauto."""


class ActionExecutionError(WebAutoError):
    """
    Raised when an action fails to execute.
    动作执行期错误。统一封装上下文，便于 CLI/编排层打印一致的信息与诊断。
    """

    def __init__(
        self,
        action: str,
        message: str,
        *,
        selector: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.action: str = action
        self.selector: str | None = selector
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}
        self.cause: BaseException | None = cause

    def __str__(self) -> str:
        parts = [f"[{self.action}] {super().__str__()}"]
        if self.selector:
            parts.append(f"selector={self.selector}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.details:
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)


class ElementNotFoundError(ActionExecutionError):
    """An element (or a dropdown option) could not be located."""


class WaitTimeoutError(ActionExecutionError):
    """An explicit/fluent wait ran out of time before its condition held."""


class ExpectationError(ActionExecutionError):
    """
    Assertion mismatch: the page was readable but did not show what we expected.
    `expected` / `actual` are kept both as attributes and in `details`.
    """

    def __init__(
        self,
        action: str,
        message: str,
        *,
        expected: Any,
        actual: Any,
        selector: str | None = None,
    ) -> None:
        super().__init__(
            action,
            message,
            selector=selector,
            details={"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class DriverStartError(WebAutoError):
    """Raised when the browser driver or a browser session cannot be started."""
