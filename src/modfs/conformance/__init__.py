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

"""Conformance harness for :mod:`modfs.filesystem` backends.

Typical use::

    from modfs.conformance import ConformanceRunner, HarnessContext

    harness = HarnessContext.create(modules=["my_pkg.s3_plugin"], schemes=["s3"])
    report = ConformanceRunner(harness).run()
    raise SystemExit(report.exit_code)

The phases run in a fixed order: plugin modules are loaded, the scheme
selection is frozen and resolved against the registered backends, then every
scenario of :data:`SCENARIOS` runs once per scheme in its own test context.
"""

from __future__ import annotations

from ._context import HarnessContext, TestContext
from ._loader import (
    INIT_SYMBOL,
    InitFunction,
    PluginLoader,
    PluginLoadResult,
    PluginStatus,
)
from ._roots import ROOT_PREFIX, TestRootAllocator
from ._runner import ConformanceRunner, RunReport, ScenarioResult, instance_name
from ._schemes import SchemeSelection
from ._verdict import (
    Outcome,
    ScenarioFailed,
    ScenarioSkipped,
    Verdict,
    expect_code,
    judge,
    require_ok,
    unimplemented_or_returns_code,
)
from .scenarios import SCENARIOS, Scenario, select_scenarios

__all__ = [
    "INIT_SYMBOL",
    "ROOT_PREFIX",
    "SCENARIOS",
    "ConformanceRunner",
    "HarnessContext",
    "InitFunction",
    "Outcome",
    "PluginLoadResult",
    "PluginLoader",
    "PluginStatus",
    "RunReport",
    "Scenario",
    "ScenarioFailed",
    "ScenarioResult",
    "ScenarioSkipped",
    "SchemeSelection",
    "TestContext",
    "TestRootAllocator",
    "Verdict",
    "expect_code",
    "instance_name",
    "judge",
    "require_ok",
    "select_scenarios",
    "unimplemented_or_returns_code",
]
