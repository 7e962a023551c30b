import csv
import json
from pathlib import Path

from webauto.core.controller.runner import StepOutcome
from webauto.reporting.schemas import SuiteReport
from webauto.reporting.writer import build_report, to_result, write_report
from webauto.scenarios import catalog
from webauto.scenarios.catalog import ScenarioRun


def _runs() -> list[ScenarioRun]:
    ok = ScenarioRun(
        scenario=catalog.get_scenario("dropdown_select_by_index"),
        ok=True,
        outcomes=[
            StepOutcome(index=1, name="open_url", ok=True, meta={"url": "http://x/dropdown"}),
            StepOutcome(
                index=2,
                name="expect_selected",
                ok=True,
                extracted="Option 1",
                meta={"selector": "#dropdown", "count": 1},
            ),
        ],
    )
    bad = ScenarioRun(
        scenario=catalog.get_scenario("dynamic_loading_hidden_element"),
        ok=False,
        error="[wait_for] element did not become visible in time",
        outcomes=[
            StepOutcome(
                index=1,
                name="wait_for",
                ok=False,
                detail="[wait_for] element did not become visible in time",
                error_type="WaitTimeoutError",
                artifact_path="artifacts/x.png",
            )
        ],
    )
    return [ok, bad]


def test_to_result_maps_steps() -> None:
    result = to_result(_runs()[0])
    assert result.ok
    assert result.steps[1].selector == "#dropdown"
    assert result.steps[1].extracted == "Option 1"
    assert result.steps[0].selector is None


def test_build_report_totals() -> None:
    report = build_report("http://x", "chrome", _runs())
    assert (report.total, report.passed, report.failed) == (2, 1, 1)
    assert report.items[1].steps[0].error_type == "WaitTimeoutError"


def test_write_report(tmp_path: Path) -> None:
    report = build_report("http://x", "chrome", _runs())
    json_path, csv_path = write_report(report, tmp_path / "out")

    loaded = SuiteReport.model_validate(json.loads(json_path.read_text(encoding="utf-8")))
    assert loaded == report

    with csv_path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][:4] == ["base_url", "browser", "scenario", "ok"]
    assert rows[1][2:4] == ["dropdown_select_by_index", "OK"]
    assert rows[2][3] == "FAIL"
    assert rows[2][-1].startswith("[wait_for]")
