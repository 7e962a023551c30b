"""
Scenarios against the public demo site. Deselected by default:
    pytest -m live
"""

import pytest

import webauto.actions.impl  # noqa: F401  注册动作
from webauto.core.controller.runner import Runner
from webauto.core.settings import settings
from webauto.scenarios import catalog

pytestmark = [pytest.mark.live, pytest.mark.browser]


@pytest.mark.parametrize(
    "name", [s.name for s in catalog.list_scenarios(include_fixture_only=False)]
)
def test_live_scenario(selenium_driver, tmp_path, name: str) -> None:
    run = catalog.run_scenario(
        selenium_driver,
        catalog.get_scenario(name),
        settings.base_url,
        Runner(retries=1, artifacts_dir=tmp_path, artifact_prefix=name),
    )
    assert run.ok, run.error
