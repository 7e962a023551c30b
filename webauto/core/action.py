"""
定义动作层的数据契约。
- ActionSpec: 场景/脚本中的一步（name + args），执行前由 registry 校验 args
"""
# @file purpose: Define action data contracts.

from typing import Any

from pydantic import BaseModel, Field


class ActionSpec(BaseModel):
    name: str = Field(..., description="Registered action name.")
    args: dict[str, Any] = Field(
        default_factory=dict, description="Validated parameters for the action."
    )
