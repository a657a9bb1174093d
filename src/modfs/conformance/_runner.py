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

"""Runs the scenario catalog against every selected scheme."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from ..errors import RootPreparationError
from ..runtime.logging import StructuredLogger, get_logger
from ._context import HarnessContext
from ._verdict import Outcome, ScenarioFailed, ScenarioSkipped, Verdict
from .scenarios import SCENARIOS, Scenario

_LOGGER: StructuredLogger = get_logger(__name__, context={"component": "runner"})


@dataclass(slots=True, frozen=True)
class ScenarioResult:
    """Verdict attached to one (scenario, scheme) pair."""

    scenario: str
    scheme: str
    verdict: Verdict

    @property
    def instance_name(self) -> str:
        return instance_name(self.scenario, self.scheme)

    def describe(self) -> str:
        scheme = self.scheme or "<local>"
        line = f"{self.verdict.outcome.value.upper():4} {self.scenario} [{scheme}]"
        if self.verdict.reason:
            line = f"{line}: {self.verdict.reason}"
        return line

    def to_dict(self) -> dict[str, str]:
        return {
            "scenario": self.scenario,
            "scheme": self.scheme,
            "outcome": self.verdict.outcome.value,
            "reason": self.verdict.reason,
        }


@dataclass(slots=True, frozen=True)
class RunReport:
    """All results of a run, in execution order."""

    schemes: tuple[str, ...]
    results: tuple[ScenarioResult, ...] = ()

    def _with(self, outcome: Outcome) -> tuple[ScenarioResult, ...]:
        return tuple(r for r in self.results if r.verdict.outcome is outcome)

    @property
    def passed(self) -> tuple[ScenarioResult, ...]:
        return self._with(Outcome.PASS)

    @property
    def skipped(self) -> tuple[ScenarioResult, ...]:
        return self._with(Outcome.SKIP)

    @property
    def failed(self) -> tuple[ScenarioResult, ...]:
        return self._with(Outcome.FAIL)

    @property
    def exit_code(self) -> int:
        """``1`` when any scenario failed, else ``0``. Skips never count."""

        return 1 if self.failed else 0

    def summary(self) -> Mapping[str, int]:
        return {
            "passed": len(self.passed),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def to_dict(self) -> dict[str, object]:
        return {
            "schemes": list(self.schemes),
            "summary": dict(self.summary()),
            "results": [result.to_dict() for result in self.results],
        }


def instance_name(scenario: str, scheme: str) -> str:
    """Fully-qualified name of a scenario instance."""

    return f"{scenario}/{scheme}"


@dataclass(slots=True)
class ConformanceRunner:
    """Executes scenarios sequentially, each in its own test context."""

    harness: HarnessContext
    scenarios: tuple[Scenario, ...] = field(default=SCENARIOS)

    def run(self, schemes: Iterable[str] | None = None) -> RunReport:
        """Run every scenario for every scheme.

        ``schemes`` defaults to the harness' resolved selection.
        """

        resolved = self.harness.schemes() if schemes is None else tuple(schemes)
        _LOGGER.info(
            "Starting conformance run.",
            event="modfs.run.started",
            context={
                "schemes": list(resolved),
                "scenarios": len(self.scenarios),
                "seed": self.harness.allocator.seed,
            },
        )
        results = [
            self.run_one(scenario, scheme)
            for scheme in resolved
            for scenario in self.scenarios
        ]
        report = RunReport(schemes=resolved, results=tuple(results))
        _LOGGER.info(
            "Conformance run finished.",
            event="modfs.run.finished",
            context=dict(report.summary()),
        )
        return report

    def run_one(self, scenario: Scenario, scheme: str) -> ScenarioResult:
        verdict = self._verdict_for(scenario, scheme)
        _LOGGER.log(
            logging.ERROR if verdict.is_failure else logging.DEBUG,
            "Scenario finished.",
            event="modfs.scenario.verdict",
            context={
                "scenario": scenario.name,
                "scheme": scheme,
                "outcome": verdict.outcome.value,
                "reason": verdict.reason,
            },
        )
        return ScenarioResult(scenario=scenario.name, scheme=scheme, verdict=verdict)

    def _verdict_for(self, scenario: Scenario, scheme: str) -> Verdict:
        if scheme not in self.harness.env.registry:
            return Verdict.skipped(f"No filesystem registered for scheme {scheme!r}")

        try:
            with self.harness.open_context(
                scheme, instance_name(scenario.name, scheme)
            ) as context:
                scenario(context)
        except RootPreparationError as error:
            return Verdict.skipped(f"Cannot create working directory: {error}")
        except ScenarioSkipped as skipped:
            return Verdict.skipped(skipped.reason)
        except ScenarioFailed as failed:
            return Verdict.failed(failed.reason)
        except Exception as error:
            _LOGGER.exception(
                "Backend raised during scenario.",
                event="modfs.scenario.error",
                context={"scenario": scenario.name, "scheme": scheme},
            )
            return Verdict.failed(f"unexpected {type(error).__name__}: {error}")
        return Verdict.passed()


__all__ = [
    "ConformanceRunner",
    "RunReport",
    "ScenarioResult",
    "instance_name",
]
