# webauto/reporting/writer.py
"""
Writers to persist SuiteReport as JSON and CSV, plus the mapping from
runner outcomes to report models.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Tuple

from ..scenarios.catalog import ScenarioRun
from .schemas import ScenarioResult, StepRecord, SuiteReport


def to_result(run: ScenarioRun) -> ScenarioResult:
    steps = []
    for o in run.outcomes:
        meta = o.meta or {}
        steps.append(
            StepRecord(
                index=o.index,
                name=o.name,
                ok=o.ok,
                selector=meta.get("selector"),
                extracted=o.extracted,
                error_type=o.error_type,
                meta=meta,
                artifact_path=o.artifact_path,
                detail=o.detail,
            )
        )
    return ScenarioResult(
        name=run.scenario.name,
        description=run.scenario.description,
        ok=run.ok,
        expected_error=run.scenario.expected_error,
        steps=steps,
        error=run.error,
    )


def build_report(base_url: str, browser: str, runs: list[ScenarioRun]) -> SuiteReport:
    items = [to_result(r) for r in runs]
    return SuiteReport(
        base_url=base_url,
        browser=browser,
        total=len(items),
        passed=sum(1 for r in items if r.ok),
        failed=sum(1 for r in items if not r.ok),
        items=items,
    )


def write_report(report: SuiteReport, out_dir: Path) -> Tuple[Path, Path]:
    """
    Write a SuiteReport into out_dir as JSON and CSV.
    Returns (json_path, csv_path).
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / "report.json"
    csv_path = out_dir / "report.csv"

    json_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    # CSV: one row per scenario
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["base_url", "browser", "scenario", "ok", "steps", "expected_error", "error"])
        for item in report.items:
            writer.writerow(
                [
                    report.base_url,
                    report.browser,
                    item.name,
                    "OK" if item.ok else "FAIL",
                    len(item.steps),
                    item.expected_error or "",
                    item.error or "",
                ]
            )

    return json_path, csv_path
