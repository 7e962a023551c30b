# webauto/core/controller/runner.py
"""
Minimal sequential runner for ActionSpec[].

Responsibilities:
- Validate each spec via registry
- Execute actions with retries
- Optional random per-step delay
- On failure: save screenshot artifact (if artifacts_dir is set)
- Stop at the first failed step unless stop_on_failure=False
- Return per-step outcomes for CLI rendering and reporting
"""

from __future__ import annotations

import copy
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .. import registry
from ..action import ActionSpec
from ..errors import ActionExecutionError

logger = logging.getLogger(__name__)

INVALID_SPEC = "InvalidSpec"


@dataclass
class StepOutcome:
    """UI-friendly outcome used by CLI and reporters."""

    index: int
    name: str
    ok: bool
    detail: str = "-"
    error_type: str | None = None  # e.g. "WaitTimeoutError"; INVALID_SPEC for bad args
    artifact_path: str | None = None
    # Filled from ActionResult on success:
    extracted: str | None = None
    meta: dict[str, Any] | None = None


class Runner:
    def __init__(
        self,
        *,
        retries: int = 0,
        artifacts_dir: Path | None = None,
        random_delay_ms: tuple[int, int] | None = None,
        stop_on_failure: bool = True,
        artifact_prefix: str = "fail",
    ) -> None:
        self.retries = max(0, retries)
        self.artifacts_dir = artifacts_dir
        self.random_delay_ms = random_delay_ms
        self.stop_on_failure = stop_on_failure
        self.artifact_prefix = artifact_prefix
        if self.artifacts_dir:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def with_retries(self, retries: int) -> Runner:
        """Same settings, different retry count."""
        clone = copy.copy(self)
        clone.retries = max(0, retries)
        return clone

    def run(self, driver: Any, ctx: Any, specs: list[ActionSpec]) -> list[StepOutcome]:
        outcomes: list[StepOutcome] = []

        for i, spec in enumerate(specs, start=1):
            name = spec.name

            # 1) validate params
            try:
                _meta, params = registry.validate_spec(spec)
            except (ValidationError, KeyError) as e:
                logger.error("step %d %s: invalid spec: %s", i, name, e)
                artifact = self._on_failure(driver, ctx, i, name)
                outcomes.append(
                    StepOutcome(
                        index=i,
                        name=name,
                        ok=False,
                        detail=f"invalid spec: {e}",
                        error_type=INVALID_SPEC,
                        artifact_path=artifact,
                    )
                )
                if self.stop_on_failure:
                    break
                self._maybe_delay()
                continue

            # 2) execute with retries
            outcome = self._execute(driver, ctx, i, name, params)
            outcomes.append(outcome)
            self._maybe_delay()
            if not outcome.ok and self.stop_on_failure:
                break

        return outcomes

    def _execute(self, driver: Any, ctx: Any, i: int, name: str, params: Any) -> StepOutcome:
        attempt = 0
        while True:
            try:
                fn = registry.get_action(name)
                res = fn(driver, ctx, params)
            except ActionExecutionError as e:
                attempt += 1
                if attempt > self.retries:
                    logger.warning("step %d %s failed: %s", i, name, e)
                    artifact = self._on_failure(driver, ctx, i, name)
                    return StepOutcome(
                        index=i,
                        name=name,
                        ok=False,
                        detail=str(e),
                        error_type=type(e).__name__,
                        artifact_path=artifact,
                    )
                logger.info("step %d %s failed (attempt %d), retrying", i, name, attempt)
                # simple backoff
                time.sleep(0.5 * attempt)
                continue

            logger.debug("step %d %s ok", i, name)
            extracted = res.extracted_content
            meta = res.meta or None
            return StepOutcome(
                index=i,
                name=name,
                ok=bool(res.ok),
                detail=_detail(extracted, meta),
                extracted=extracted,
                meta=meta,
            )

    def _maybe_delay(self) -> None:
        if not self.random_delay_ms:
            return
        low, high = self.random_delay_ms
        if low < 0 or high < 0 or high < low:
            return
        ms = random.randint(low, high)
        time.sleep(ms / 1000)

    def _on_failure(self, driver: Any, ctx: Any, index: int, name: str) -> str | None:
        """Best-effort failure artifact (screenshot)."""
        if not self.artifacts_dir:
            return None
        png = self.artifacts_dir / f"{self.artifact_prefix}-{index:02d}-{name}.png"
        try:
            driver.screenshot(ctx, str(png))
            return str(png)
        except Exception as e:  # noqa: BLE001
            logger.debug("could not save failure screenshot %s: %s", png, e)
            return None


def _detail(extracted: str | None, meta: dict[str, Any] | None) -> str:
    """Human-friendly detail for CLI."""
    if extracted:
        return (extracted[:120] + "…") if len(extracted) > 120 else extracted
    if meta:
        if "url" in meta:
            return str(meta["url"])
        if "selector" in meta:
            return f'selector="{meta["selector"]}"'
    return "-"
