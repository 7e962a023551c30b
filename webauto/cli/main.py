"""
CLI entrypoint.

- doctor / actions / scenarios: environment and catalog overview
- validate: offline check of a JSON ActionSpec[] file
- run: execute a JSON ActionSpec[] file in one browser session
- scenario / suite: execute built-in scenarios (one browser session each)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from ..core.settings import settings
from ..core.action import ActionSpec
from ..core import registry
from ..core.errors import DriverStartError
from ..core.log import setup_logging
from ..core.controller.runner import Runner, StepOutcome
from ..io.selenium_driver import SeleniumDriver
from ..scenarios import catalog
from ..reporting.writer import build_report, write_report

import webauto.actions.impl  # noqa: F401  注册动作


app = typer.Typer(help="webauto CLI")
console = Console()
BROWSERS = ("chrome", "firefox")


@app.callback()
def _main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override WEBAUTO_LOG_LEVEL"),
) -> None:
    setup_logging(log_level or settings.log_level)


def _make_driver(headless: bool, browser: str) -> SeleniumDriver:
    if browser not in BROWSERS:
        raise typer.BadParameter(f"unsupported browser: {browser} (choose from {', '.join(BROWSERS)})")
    return SeleniumDriver(
        browser=browser,  # type: ignore[arg-type]
        headless=headless,
        use_driver_manager=settings.use_driver_manager,
        default_timeout_ms=settings.wait_timeout_ms,
        poll_interval_ms=settings.poll_interval_ms,
        page_load_timeout_ms=settings.page_load_timeout_ms,
        window_size=(settings.window_width, settings.window_height),
    )


def _random_delay(random_delay_ms: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    return None if (random_delay_ms[0] == 0 and random_delay_ms[1] == 0) else random_delay_ms


def _load_specs(script: Path, tag: str) -> list[ActionSpec]:
    if not script.exists():
        typer.secho(f"[{tag}] file not found: {script}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    try:
        data = json.loads(script.read_text(encoding="utf-8"))
        return TypeAdapter(list[ActionSpec]).validate_python(data)
    except json.JSONDecodeError as je:
        typer.secho(f"[{tag}] not a JSON file: {je}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    except ValidationError as ve:
        typer.secho(f"[{tag}] invalid file format for ActionSpec[]", fg=typer.colors.RED)
        console.print(ve)
        raise typer.Exit(code=2)


def _outcome_table(title: str, rows: list[StepOutcome]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("name")
    table.add_column("result")
    table.add_column("detail")
    for r in rows:
        result = "[green]OK[/]" if r.ok else f"[red]FAIL[/] {r.error_type or ''}".rstrip()
        detail = r.detail
        if (not r.ok) and r.artifact_path:
            detail = f"{detail} (artifact: {r.artifact_path})"
        table.add_row(str(r.index), r.name, result, detail)
    return table


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings to confirm CLI is usable."""
    console.print("[bold green]webauto[/] environment")
    console.print(f"- base url: {settings.base_url}")
    console.print(f"- browser:  {settings.browser} (headless: {settings.headless})")
    console.print(f"- driver:   {'webdriver-manager' if settings.use_driver_manager else 'selenium manager'}")
    console.print(f"- waits:    {settings.wait_timeout_ms}ms, polling {settings.poll_interval_ms}ms")
    console.print(f"- artifacts: {settings.artifacts_dir}")


@app.command("actions")
def actions() -> None:
    """List registered actions and their parameter models."""
    table = Table(title="Actions", show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("params")
    table.add_column("summary")
    for name, meta in sorted(registry.list_actions().items()):
        params = meta.params_model.__name__ if meta.params_model else "-"
        table.add_row(name, params, meta.summary or "-")
    console.print(table)


@app.command("scenarios")
def scenarios() -> None:
    """List built-in scenarios."""
    table = Table(title="Scenarios", show_header=True, header_style="bold")
    table.add_column("name")
    table.add_column("description")
    table.add_column("expects")
    table.add_column("fixture only")
    for sc in catalog.list_scenarios():
        table.add_row(
            sc.name, sc.description, sc.expected_error or "pass", "yes" if sc.fixture_only else "-"
        )
    console.print(table)


@app.command("validate")
def validate(script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]")) -> None:
    """
    Offline spec validation: read JSON array [{name, args}] and validate each item
    against the params model bound in the registry. Print a table result and exit
    non-zero if any failures.
    """
    specs = _load_specs(script, "validate")

    table = Table(title="Validation Results", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("name")
    table.add_column("result")
    table.add_column("detail")

    failures = 0
    for i, spec in enumerate(specs, start=1):
        try:
            registry.validate_spec(spec)
            table.add_row(str(i), spec.name, "[green]OK[/]", "-")
        except KeyError as ke:
            failures += 1
            table.add_row(str(i), spec.name, "[red]Not Registered[/]", str(ke))
        except ValidationError as ve:
            failures += 1
            msg = ve.errors()[0].get("msg", "invalid args")
            table.add_row(str(i), spec.name, "[red]Invalid Args[/]", msg)

    console.print(table)
    if failures:
        raise typer.Exit(code=1)
    typer.secho("[validate] all specs passed", fg=typer.colors.GREEN)


@app.command("run")
def run(
    script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]"),
    headless: bool = typer.Option(settings.headless, "--headless/--no-headless", help="Run browser headless"),
    browser: str = typer.Option(settings.browser, "--browser", help="chrome or firefox"),
    retries: int = typer.Option(0, "--retries", help="Retry times on ActionExecutionError"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Continue after a failed step"),
    artifacts_dir: Path = typer.Option(
        settings.artifacts_dir, "--artifacts-dir", help="Where to save failure screenshots"
    ),
    # NOTE: Typer parses tuple as two space-separated ints, e.g. "--random-delay-ms 500 1500"
    random_delay_ms: Tuple[int, int] = typer.Option(
        (0, 0),
        "--random-delay-ms",
        help="Random delay range in ms, e.g. --random-delay-ms 500 1500",
    ),
) -> None:
    """
    Execute a list of actions in one browser session:
    read JSON -> structure check -> param check -> run in browser.
    Prints a table of results; returns non-zero on any failure.
    """
    specs = _load_specs(script, "run")

    driver = _make_driver(headless, browser)
    runner = Runner(
        retries=retries,
        artifacts_dir=artifacts_dir,
        random_delay_ms=_random_delay(random_delay_ms),
        stop_on_failure=not keep_going,
    )
    try:
        driver.start()
        ctx = driver.new_context()
        try:
            rows = runner.run(driver, ctx, specs)
        finally:
            driver.close_context(ctx)
    except DriverStartError as e:
        typer.secho(f"[run] {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    finally:
        driver.stop()

    console.print(_outcome_table("Run Results", rows))
    if any(not r.ok for r in rows):
        raise typer.Exit(code=1)
    typer.secho("[run] completed successfully", fg=typer.colors.GREEN)


@app.command("scenario")
def scenario(
    name: str = typer.Argument(..., help="Scenario name (see `webauto scenarios`)"),
    base_url: str = typer.Option(settings.base_url, "--base-url", help="Site under test"),
    headless: bool = typer.Option(settings.headless, "--headless/--no-headless"),
    browser: str = typer.Option(settings.browser, "--browser", help="chrome or firefox"),
    retries: int = typer.Option(0, "--retries"),
    artifacts_dir: Path = typer.Option(settings.artifacts_dir, "--artifacts-dir"),
) -> None:
    """Run one built-in scenario in a fresh browser session."""
    try:
        sc = catalog.get_scenario(name)
    except KeyError as ke:
        typer.secho(f"[scenario] {ke.args[0]}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    driver = _make_driver(headless, browser)
    runner = Runner(retries=retries, artifacts_dir=artifacts_dir, artifact_prefix=sc.name)
    try:
        driver.start()
        result = catalog.run_scenario(driver, sc, base_url, runner)
    except DriverStartError as e:
        typer.secho(f"[scenario] {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    finally:
        driver.stop()

    console.print(_outcome_table(f"Scenario {sc.name}", result.outcomes))
    if not result.ok:
        typer.secho(f"[scenario] FAILED: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if sc.expected_error:
        typer.secho(f"[scenario] passed ({sc.expected_error} raised as expected)", fg=typer.colors.GREEN)
    else:
        typer.secho("[scenario] passed", fg=typer.colors.GREEN)


@app.command("suite")
def suite(
    base_url: str = typer.Option(settings.base_url, "--base-url", help="Site under test"),
    include_fixture_only: bool = typer.Option(
        False, "--include-fixture-only", help="Also run scenarios whose page only exists locally"
    ),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Run only these scenarios"),
    out_dir: Path = typer.Option(settings.artifacts_dir, "--out-dir", help="Report/artifact directory"),
    headless: bool = typer.Option(settings.headless, "--headless/--no-headless"),
    browser: str = typer.Option(settings.browser, "--browser", help="chrome or firefox"),
    retries: int = typer.Option(0, "--retries"),
    random_delay_ms: Tuple[int, int] = typer.Option((0, 0), "--random-delay-ms"),
) -> None:
    """Run every built-in scenario (each in its own browser) and write report.json/report.csv."""
    selected = catalog.list_scenarios(include_fixture_only=include_fixture_only or bool(only))
    if only:
        unknown = set(only) - {s.name for s in selected}
        if unknown:
            typer.secho(f"[suite] unknown scenarios: {', '.join(sorted(unknown))}", fg=typer.colors.RED)
            raise typer.Exit(code=2)
        selected = [s for s in selected if s.name in only]

    driver = _make_driver(headless, browser)
    runs: list[catalog.ScenarioRun] = []
    try:
        driver.start()
        for sc in selected:
            runner = Runner(
                retries=retries,
                artifacts_dir=out_dir,
                random_delay_ms=_random_delay(random_delay_ms),
                artifact_prefix=sc.name,
            )
            runs.append(catalog.run_scenario(driver, sc, base_url, runner))
    except DriverStartError as e:
        typer.secho(f"[suite] {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    finally:
        driver.stop()

    report = build_report(base_url, browser, runs)

    table = Table(title="Suite Results", show_header=True, header_style="bold")
    table.add_column("scenario")
    table.add_column("result")
    table.add_column("detail")
    for item in report.items:
        result = "[green]PASS[/]" if item.ok else "[red]FAIL[/]"
        table.add_row(item.name, result, item.error or "-")
    console.print(table)

    json_path, csv_path = write_report(report, out_dir)
    console.print(f"[bold green]Report written[/]: {json_path}  |  {csv_path}")
    console.print(f"{report.passed}/{report.total} passed")
    if report.failed:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
