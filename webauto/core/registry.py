"""
动作注册表与元数据:
- 以 name 作为键注册动作函数
- 绑定 params_model (Pydantic v2) 用于参数校验
- 提供 validate_spec() 在执行前做强校验
"""
# @file purpose: Provide action registry, metadata, and spec validation.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter

from .action import ActionSpec
from .result import ActionResult

# 动作函数的标准签名（同步）：fn(driver, ctx, params) -> ActionResult
ActionFn = Callable[..., ActionResult]


@dataclass(frozen=True)
class ActionMeta:
    """动作元信息：名称 + 绑定的入参模型（可选）+ 一行说明"""

    name: str
    params_model: Optional[Type[BaseModel]] = None
    summary: str = ""


_REGISTRY: Dict[str, ActionFn] = {}
_META: Dict[str, ActionMeta] = {}


def _summary(fn: ActionFn) -> str:
    doc = (fn.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else ""


def action(
    name: str, *, params_model: Optional[Type[BaseModel]] = None
) -> Callable[[ActionFn], ActionFn]:
    """
    装饰器：注册动作函数及其参数模型。
        @action("select_option", params_model=SelectOptionParams)
        def select_option(driver, ctx, params): ...
    """

    def deco(fn: ActionFn) -> ActionFn:
        register(name, fn, params_model=params_model)
        return fn

    return deco


def register(name: str, fn: ActionFn, *, params_model: Optional[Type[BaseModel]] = None) -> None:
    """非装饰器形式注册，便于动态装配或测试。"""
    _REGISTRY[name] = fn
    _META[name] = ActionMeta(name=name, params_model=params_model, summary=_summary(fn))


def get_action(name: str) -> ActionFn:
    try:
        return _REGISTRY[name]
    except KeyError as e:
        raise KeyError(f"Action not registered: {name}") from e


def get_meta(name: str) -> ActionMeta:
    try:
        return _META[name]
    except KeyError as e:
        raise KeyError(f"Action not registered (no metadata): {name}") from e


def list_actions() -> Dict[str, ActionMeta]:
    """返回一个浅拷贝，便于调试/展示。"""
    return dict(_META)


def validate_spec(spec: ActionSpec) -> Tuple[ActionMeta, Optional[BaseModel]]:
    """
    在执行前对 ActionSpec 做强校验：
    1) 动作是否已注册（否则 KeyError）
    2) 若绑定了 params_model，则用其校验 args（失败抛 ValidationError）
    3) 成功时返回 (ActionMeta, 已解析的 params_model 实例 | None)
    """
    meta = get_meta(spec.name)

    if meta.params_model is None:
        return meta, None

    adapter = TypeAdapter(meta.params_model)
    params_obj = adapter.validate_python(spec.args)
    return meta, params_obj
