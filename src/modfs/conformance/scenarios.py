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

"""Catalog of conformance scenarios.

Each scenario exercises one operation under one precondition and asserts the
canonical code the backend must report (``UNIMPLEMENTED`` is always
accepted). When a setup step does not succeed, the rest of the scenario is
skipped: the assertion under test cannot be evaluated without it.

Scenarios share no state. Each one receives a fresh :class:`TestContext`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..filesystem import Code
from ._context import TestContext
from ._verdict import expect_code, require_ok
from .translate import check_translate_name

type ScenarioBody = Callable[[TestContext], None]


@dataclass(slots=True, frozen=True)
class Scenario:
    """A named conformance check."""

    name: str
    operation: str
    body: ScenarioBody

    def __call__(self, context: TestContext) -> None:
        self.body(context)


_CATALOG: list[Scenario] = []


def _scenario(name: str, operation: str) -> Callable[[ScenarioBody], ScenarioBody]:
    def register(body: ScenarioBody) -> ScenarioBody:
        _CATALOG.append(Scenario(name=name, operation=operation, body=body))
        return body

    return register


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_file(context: TestContext, path: str) -> None:
    """Setup step: create ``path`` as an empty file or skip."""

    handle, status = context.env.new_writable_file(context.uri_for_path(path))
    _ = context.track(handle)
    require_ok(status, operation="NewWritableFile")


def _create_dir(context: TestContext, path: str) -> None:
    """Setup step: create ``path`` as a directory or skip."""

    status = context.env.create_dir(context.uri_for_path(path))
    require_ok(status, operation="CreateDir")


def _writable(context: TestContext, path: str, expected: Code) -> None:
    uri = context.uri_for_path(path)
    handle, status = context.env.new_writable_file(uri)
    _ = context.track(handle)
    expect_code(status, expected, operation="NewWritableFile", path=uri)


def _appendable(context: TestContext, path: str, expected: Code) -> None:
    uri = context.uri_for_path(path)
    handle, status = context.env.new_appendable_file(uri)
    _ = context.track(handle)
    expect_code(status, expected, operation="NewAppendableFile", path=uri)


def _random_access(context: TestContext, path: str, expected: Code) -> None:
    uri = context.uri_for_path(path)
    handle, status = context.env.new_random_access_file(uri)
    _ = context.track(handle)
    expect_code(status, expected, operation="NewRandomAccessFile", path=uri)


def _mkdir(context: TestContext, path: str, expected: Code) -> None:
    uri = context.uri_for_path(path)
    status = context.env.create_dir(uri)
    expect_code(status, expected, operation="CreateDir", path=uri)


# ---------------------------------------------------------------------------
# Name translation
# ---------------------------------------------------------------------------

_ = _scenario("TestTranslateName", "TranslateName")(check_translate_name)


# ---------------------------------------------------------------------------
# File creation
# ---------------------------------------------------------------------------


@_scenario("TestCreateFile", "NewWritableFile")
def _create_file_ok(context: TestContext) -> None:
    _writable(context, "a_file", Code.OK)


@_scenario("TestCreateFileNonExisting", "NewWritableFile")
def _create_file_missing_parent(context: TestContext) -> None:
    _writable(context, "dir_not_found/a_file", Code.NOT_FOUND)


@_scenario("TestCreateFileExistingDir", "NewWritableFile")
def _create_file_over_dir(context: TestContext) -> None:
    _create_dir(context, "a_file")
    _writable(context, "a_file", Code.FAILED_PRECONDITION)


@_scenario("TestCreateFilePathIsInvalid", "NewWritableFile")
def _create_file_below_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _writable(context, "a_file/a_file", Code.FAILED_PRECONDITION)


# ---------------------------------------------------------------------------
# Appending
# ---------------------------------------------------------------------------


@_scenario("TestAppendFile", "NewAppendableFile")
def _append_file_ok(context: TestContext) -> None:
    _appendable(context, "a_file", Code.OK)


@_scenario("TestAppendFileNonExisting", "NewAppendableFile")
def _append_file_missing_parent(context: TestContext) -> None:
    _appendable(context, "dir_not_found/a_file", Code.NOT_FOUND)


@_scenario("TestAppendFileExistingDir", "NewAppendableFile")
def _append_file_over_dir(context: TestContext) -> None:
    _create_dir(context, "a_file")
    _appendable(context, "a_file", Code.FAILED_PRECONDITION)


@_scenario("TestCreateThenAppendFile", "NewAppendableFile")
def _append_existing_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _appendable(context, "a_file", Code.OK)


@_scenario("TestAppendFilePathIsInvalid", "NewAppendableFile")
def _append_file_below_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _appendable(context, "a_file/a_file", Code.FAILED_PRECONDITION)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


@_scenario("TestReadFile", "NewRandomAccessFile")
def _read_missing_file(context: TestContext) -> None:
    _random_access(context, "a_file", Code.NOT_FOUND)


@_scenario("TestReadFileNonExisting", "NewRandomAccessFile")
def _read_file_missing_parent(context: TestContext) -> None:
    _random_access(context, "dir_not_found/a_file", Code.NOT_FOUND)


@_scenario("TestReadFileExistingDir", "NewRandomAccessFile")
def _read_dir(context: TestContext) -> None:
    _create_dir(context, "a_file")
    _random_access(context, "a_file", Code.FAILED_PRECONDITION)


@_scenario("TestCreateThenReadFile", "NewRandomAccessFile")
def _read_existing_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _random_access(context, "a_file", Code.OK)


@_scenario("TestReadFilePathIsInvalid", "NewRandomAccessFile")
def _read_file_below_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _random_access(context, "a_file/a_file", Code.FAILED_PRECONDITION)


# ---------------------------------------------------------------------------
# Directory creation
# ---------------------------------------------------------------------------


@_scenario("TestCreateDir", "CreateDir")
def _mkdir_ok(context: TestContext) -> None:
    _mkdir(context, "a_dir", Code.OK)


@_scenario("TestCreateDirNoParent", "CreateDir")
def _mkdir_missing_parent(context: TestContext) -> None:
    _mkdir(context, "dir_not_found/a_dir", Code.NOT_FOUND)


@_scenario("TestCreateDirWhichIsFile", "CreateDir")
def _mkdir_over_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _mkdir(context, "a_file", Code.ALREADY_EXISTS)


@_scenario("TestCreateDirTwice", "CreateDir")
def _mkdir_twice(context: TestContext) -> None:
    _create_dir(context, "a_dir")
    _mkdir(context, "a_dir", Code.ALREADY_EXISTS)


@_scenario("TestCreateDirPathIsInvalid", "CreateDir")
def _mkdir_below_file(context: TestContext) -> None:
    _create_file(context, "a_file")
    _mkdir(context, "a_file/a_dir", Code.FAILED_PRECONDITION)


SCENARIOS: tuple[Scenario, ...] = tuple(_CATALOG)


def select_scenarios(names: Iterable[str] = ()) -> tuple[Scenario, ...]:
    """Return the catalog restricted to ``names``, in catalog order.

    An empty ``names`` selects every scenario.

    Raises:
        KeyError: A requested name is not in the catalog.
    """

    wanted = set(names)
    if not wanted:
        return SCENARIOS
    unknown = wanted.difference(scenario.name for scenario in SCENARIOS)
    if unknown:
        msg = f"Unknown scenario(s): {', '.join(sorted(unknown))}"
        raise KeyError(msg)
    return tuple(scenario for scenario in SCENARIOS if scenario.name in wanted)


__all__ = ["SCENARIOS", "Scenario", "ScenarioBody", "select_scenarios"]
