"""
Reporting data models for scenario suite runs.
"""

from __future__ import annotations

from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class StepRecord(BaseModel):
    """One executed step outcome inside a scenario."""

    index: int
    name: str
    ok: bool
    selector: Optional[str] = None
    extracted: Optional[str] = None
    error_type: Optional[str] = None
    meta: Dict[str, Any] = Field(default_factory=dict)
    artifact_path: Optional[str] = None
    detail: str = "-"


class ScenarioResult(BaseModel):
    """Verdict for a single scenario."""

    name: str
    description: str = ""
    ok: bool
    expected_error: Optional[str] = None
    steps: List[StepRecord] = Field(default_factory=list)
    error: Optional[str] = None


class SuiteReport(BaseModel):
    """A collection of scenario results for one base URL and browser."""

    base_url: str
    browser: str
    total: int
    passed: int
    failed: int
    items: List[ScenarioResult]
