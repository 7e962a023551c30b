"""
结构化的动作返回值，用于向上层（编排/CLI）汇报执行结果。
"""
# @file purpose: Define ActionResult model for action outputs.

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """
    统一的动作返回值：
    - ok: 是否成功
    - extracted_content: 动作读取到的文本（extract_text / list_options 等），其他动作通常为 None
    - meta: 其它诊断信息（selector/URL/截图路径等），便于日志与报告
    """

    ok: bool = True
    extracted_content: Optional[str] = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, **meta: Any) -> "ActionResult":
        return cls(ok=True, meta=meta)

    @classmethod
    def extracted(cls, text: str | None, **meta: Any) -> "ActionResult":
        return cls(ok=True, extracted_content=text, meta=meta)
