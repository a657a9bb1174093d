# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Pytest plugin running the conformance catalog as ordinary tests.

Enable it from a ``conftest.py``::

    pytest_plugins = ["modfs.pytest_plugin"]

select backends with the same flags the command line harness uses::

    pytest --modfs-module=my_pkg.s3_plugin --modfs-scheme=s3 tests/conformance

and subclass :class:`ConformanceSuite` in a test module::

    from modfs.pytest_plugin import ConformanceSuite

    class TestBackends(ConformanceSuite):
        pass

Every scenario is instantiated once per resolved scheme. Skip verdicts
become ``pytest.skip`` and Fail verdicts ``pytest.fail``.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from .conformance import (
    SCENARIOS,
    HarnessContext,
    Scenario,
    ScenarioFailed,
    ScenarioSkipped,
    TestContext,
)
from .errors import RootPreparationError

_HARNESS_KEY = pytest.StashKey[HarnessContext]()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Expose backend module and scheme selection flags."""

    group = parser.getgroup("modfs")
    group.addoption(
        "--modfs-module",
        action="append",
        default=[],
        metavar="PATH",
        help="Backend plugin module to load before scheme resolution. Repeatable.",
    )
    group.addoption(
        "--modfs-scheme",
        action="append",
        default=[],
        metavar="SCHEME",
        help=(
            "URI scheme to exercise; an empty value selects local paths. "
            "Repeatable. Defaults to every available scheme."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    """Load plugin modules once, before any test is collected."""

    config.stash[_HARNESS_KEY] = HarnessContext.create(
        modules=config.getoption("--modfs-module"),
        schemes=config.getoption("--modfs-scheme"),
    )


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    """Parameterize ``modfs_scheme`` and ``modfs_scenario`` requests."""

    if "modfs_scheme" in metafunc.fixturenames:
        harness = metafunc.config.stash[_HARNESS_KEY]
        metafunc.parametrize(
            "modfs_scheme", harness.schemes(), ids=lambda scheme: scheme or "local"
        )
    if "modfs_scenario" in metafunc.fixturenames:
        metafunc.parametrize(
            "modfs_scenario", SCENARIOS, ids=lambda scenario: scenario.name
        )


@pytest.fixture(scope="session")
def modfs_harness(pytestconfig: pytest.Config) -> HarnessContext:
    """The process-scoped harness built from the command line flags."""

    return pytestconfig.stash[_HARNESS_KEY]


@pytest.fixture
def modfs_context(
    request: pytest.FixtureRequest, modfs_harness: HarnessContext, modfs_scheme: str
) -> Iterator[TestContext]:
    """A fresh :class:`TestContext` rooted in its own working directory."""

    if modfs_scheme not in modfs_harness.env.registry:
        pytest.skip(f"No filesystem registered for scheme {modfs_scheme!r}")
    try:
        with modfs_harness.open_context(modfs_scheme, request.node.nodeid) as context:
            yield context
    except RootPreparationError as error:
        pytest.skip(f"Cannot create working directory: {error}")
    except ScenarioSkipped as skipped:
        pytest.skip(skipped.reason)


def run_scenario(scenario: Scenario, context: TestContext) -> None:
    """Run ``scenario`` and translate its verdict into a pytest outcome."""

    try:
        scenario(context)
    except ScenarioSkipped as skipped:
        pytest.skip(skipped.reason)
    except ScenarioFailed as failed:
        pytest.fail(f"{scenario.name} [{context.scheme or 'local'}]: {failed.reason}")


class ConformanceSuite:
    """Test class running every scenario against every selected scheme."""

    def test_scenario(self, modfs_scenario: Scenario, modfs_context: TestContext) -> None:
        run_scenario(modfs_scenario, modfs_context)


__all__ = ["ConformanceSuite", "run_scenario"]
