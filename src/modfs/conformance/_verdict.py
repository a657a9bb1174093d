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

"""Verdicts and the code-matching rule scenarios assert with.

Not every backend implements every operation, so an ``UNIMPLEMENTED`` outcome
is accepted wherever a specific code is expected. A scenario fails only when
the observed code is neither.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..filesystem import Code, Status


class Outcome(Enum):
    PASS = "pass"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(slots=True, frozen=True)
class Verdict:
    """Result of one (scenario, scheme) execution."""

    outcome: Outcome
    reason: str = ""

    @classmethod
    def passed(cls) -> Verdict:
        return cls(Outcome.PASS)

    @classmethod
    def skipped(cls, reason: str) -> Verdict:
        return cls(Outcome.SKIP, reason)

    @classmethod
    def failed(cls, reason: str) -> Verdict:
        return cls(Outcome.FAIL, reason)

    @property
    def is_failure(self) -> bool:
        return self.outcome is Outcome.FAIL


class ScenarioSkipped(Exception):  # noqa: N818
    """Raised inside a scenario body to end it with a Skip verdict."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ScenarioFailed(AssertionError):  # noqa: N818
    """Raised inside a scenario body to end it with a Fail verdict."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def unimplemented_or_returns_code(observed: Status | Code, expected: Code) -> bool:
    """Return whether ``observed`` satisfies an expectation of ``expected``."""

    code = observed.code if isinstance(observed, Status) else observed
    return code is Code.UNIMPLEMENTED or code is expected


def judge(observed: Status | Code, expected: Code) -> Verdict:
    """Verdict for a single expectation."""

    if unimplemented_or_returns_code(observed, expected):
        return Verdict.passed()
    code = observed.code if isinstance(observed, Status) else observed
    return Verdict.failed(_mismatch(expected, code))


def expect_code(status: Status, expected: Code, *, operation: str, path: str) -> None:
    """Fail the running scenario unless ``status`` satisfies ``expected``.

    Raises:
        ScenarioFailed: ``status`` is neither ``expected`` nor ``UNIMPLEMENTED``.
    """

    if unimplemented_or_returns_code(status, expected):
        return
    detail = f" ({status.message})" if status.message else ""
    raise ScenarioFailed(f"{operation}({path!r}): {_mismatch(expected, status.code)}{detail}")


def require_ok(status: Status, *, operation: str) -> None:
    """Skip the running scenario when a setup step did not succeed.

    Raises:
        ScenarioSkipped: ``status`` is not ``OK``.
    """

    if not status.ok:
        raise ScenarioSkipped(f"{operation}() not supported")


def _mismatch(expected: Code, observed: Code) -> str:
    return (
        f"expected {expected.value} or {Code.UNIMPLEMENTED.value}, "
        f"observed {observed.value}"
    )


__all__ = [
    "Outcome",
    "ScenarioFailed",
    "ScenarioSkipped",
    "Verdict",
    "expect_code",
    "judge",
    "require_ok",
    "unimplemented_or_returns_code",
]
