"""
Scenario catalog.

A scenario is one self-contained UI test case: open a browser session,
run its ActionSpec list against a base URL, judge the outcome, close the
session. Builders register themselves with @scenario, the same way actions
register with @action:

    @scenario("dropdown_select_by_index", "Select option at index 1")
    def build(base_url: str) -> list[ActionSpec]: ...

`expected_error` marks scenarios that demonstrate a failure: they pass only
when a step fails with exactly that error type.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core.action import ActionSpec
from ..core.controller.runner import Runner, StepOutcome

logger = logging.getLogger(__name__)

Builder = Callable[[str], List[ActionSpec]]


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    build: Builder
    expected_error: Optional[str] = None
    # the public demo site has no page for it; run against local fixtures only
    fixture_only: bool = False


@dataclass
class ScenarioRun:
    """Verdict for one scenario plus the step outcomes that led to it."""

    scenario: Scenario
    ok: bool
    error: Optional[str] = None
    outcomes: List[StepOutcome] = field(default_factory=list)


_SCENARIOS: Dict[str, Scenario] = {}


def scenario(
    name: str,
    description: str,
    *,
    expected_error: Optional[str] = None,
    fixture_only: bool = False,
) -> Callable[[Builder], Builder]:
    def deco(fn: Builder) -> Builder:
        _SCENARIOS[name] = Scenario(
            name=name,
            description=description,
            build=fn,
            expected_error=expected_error,
            fixture_only=fixture_only,
        )
        return fn

    return deco


def load() -> None:
    """Import the scenario modules so that their builders register."""
    from . import dropdown, dynamic_loading  # noqa: F401


def get_scenario(name: str) -> Scenario:
    load()
    try:
        return _SCENARIOS[name]
    except KeyError as e:
        raise KeyError(f"Scenario not registered: {name}") from e


def list_scenarios(*, include_fixture_only: bool = True) -> List[Scenario]:
    load()
    return [s for s in _SCENARIOS.values() if include_fixture_only or not s.fixture_only]


def page_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def judge(sc: Scenario, outcomes: List[StepOutcome]) -> tuple[bool, Optional[str]]:
    """
    Decide pass/fail from step outcomes.
    - normal scenario: every step ok
    - expected_error scenario: the first failed step raised that error type
    """
    failed = next((o for o in outcomes if not o.ok), None)
    if sc.expected_error is None:
        if failed is None:
            return True, None
        return False, failed.detail
    if failed is None:
        return False, f"expected {sc.expected_error}, but every step passed"
    if failed.error_type != sc.expected_error:
        return False, f"expected {sc.expected_error}, got {failed.error_type}: {failed.detail}"
    return True, None


def run_scenario(driver: Any, sc: Scenario, base_url: str, runner: Runner) -> ScenarioRun:
    """
    open browser -> execute steps -> close browser.
    The session is closed even when a step (or the runner itself) raises.
    """
    specs = sc.build(base_url)
    if sc.expected_error and runner.retries:
        # the expected failure must not be retried away
        runner = runner.with_retries(0)
    logger.info("scenario %s: %d steps against %s", sc.name, len(specs), base_url)
    ctx = driver.new_context()
    try:
        outcomes = runner.run(driver, ctx, specs)
    finally:
        driver.close_context(ctx)
    ok, error = judge(sc, outcomes)
    if ok:
        logger.info("scenario %s passed", sc.name)
    else:
        logger.error("scenario %s failed: %s", sc.name, error)
    return ScenarioRun(scenario=sc, ok=ok, error=error, outcomes=outcomes)
