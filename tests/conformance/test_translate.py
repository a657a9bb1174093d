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

"""Tests for the name translation contract."""

from __future__ import annotations

from pathlib import Path

import pytest

from modfs.conformance import ScenarioFailed, ScenarioSkipped, TestContext
from modfs.conformance.translate import (
    ROOTED_CASES,
    check_corner_cases,
    check_rooted_paths,
    check_translate_name,
    corner_cases,
)
from modfs.filesystem import Env, default_env, install_providers, translate_name
from tests.helpers import BadTranslateFileSystem, SingleBackendProvider


def _context(scheme: str, root: Path, env: Env | None = None) -> TestContext:
    return TestContext(
        scheme=scheme, root=root, env=env or default_env(), name="TestTranslateName"
    )


def test_uri_for_local_path(tmp_path: Path) -> None:
    context = _context("", tmp_path)

    assert context.uri_for_path("a_file") == f"{tmp_path.as_posix()}/a_file"


def test_uri_for_scheme(tmp_path: Path) -> None:
    context = _context("ram", tmp_path)

    assert context.uri_for_path("a_dir/a_file") == f"ram://{tmp_path.as_posix()}/a_dir/a_file"


def test_relative_path(tmp_path: Path) -> None:
    context = _context("", tmp_path)

    assert context.relative_path(f"{tmp_path.as_posix()}/a_file") == "/a_file"
    assert context.relative_path("/elsewhere/a_file") == "/elsewhere/a_file"


def test_corner_cases_depend_on_scheme() -> None:
    local = dict(corner_cases(""))
    remote = dict(corner_cases("s3"))

    assert local[""] == ""
    assert local["a_dir/.."] == "."
    assert remote == {"s3://": "/", "s3:///": "/", "s3:////": "/"}


@pytest.mark.parametrize("scheme", ["", "file", "ram"])
def test_canonical_translation_satisfies_contract(tmp_path: Path, scheme: str) -> None:
    context = _context(scheme, tmp_path)
    fs = context.env.registry.lookup(scheme)

    assert check_corner_cases(fs, scheme) == []
    assert check_rooted_paths(fs, context) == []
    check_translate_name(context)


def test_rooted_cases_are_canonical() -> None:
    for _, expected in ROOTED_CASES:
        assert translate_name(expected) == expected


def test_unregistered_scheme_skips(tmp_path: Path) -> None:
    with pytest.raises(ScenarioSkipped, match="No filesystem registered"):
        check_translate_name(_context("gcs", tmp_path))


def test_identity_translation_reports_every_mismatch(tmp_path: Path) -> None:
    env = Env()
    install_providers(env.registry, [SingleBackendProvider("bad", BadTranslateFileSystem())])
    context = _context("bad", tmp_path, env)

    with pytest.raises(ScenarioFailed) as excinfo:
        check_translate_name(context)

    reason = excinfo.value.reason
    assert "translate_name('bad://'): expected '/', observed 'bad://'" in reason
    assert "bad:///" in reason
    assert "/a/path/to/a/file" in reason
    assert reason.count("; ") >= len(ROOTED_CASES) + 2


def test_local_identity_translation_mismatches() -> None:
    mismatches = check_corner_cases(BadTranslateFileSystem(), "")

    assert [m.name for m in mismatches] == ["//", "a_dir/.."]
