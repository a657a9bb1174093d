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

"""Tests for the ``modfs-conformance`` entry point."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from pytest import MonkeyPatch

from modfs.cli import conformance
from modfs.conformance import SCENARIOS


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in (
        "MODFS_MODULES",
        "MODFS_SCHEMES",
        "MODFS_SCENARIOS",
        "MODFS_TMP_DIR",
        "MODFS_FORMAT",
        "MODFS_LOG_LEVEL",
        "MODFS_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "roots"
    path.mkdir()
    return path


def test_list_scenarios(capsys: pytest.CaptureFixture[str]) -> None:
    assert conformance.main(["--list-scenarios"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == len(SCENARIOS)
    assert lines[0] == "TestTranslateName\tTranslateName"


def test_memory_backend_passes(
    work_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = conformance.main(["--scheme=ram", f"--tmp-dir={work_dir}"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert f"{len(SCENARIOS)} passed, 0 skipped, 0 failed across 1 scheme(s)." in out
    assert "PASS TestCreateDirTwice [ram]" in out
    assert list(work_dir.iterdir()) == []


def test_empty_scheme_selects_local_paths(
    work_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = conformance.main(
        ["--scheme=", "--scenario=TestCreateFile", f"--tmp-dir={work_dir}"]
    )

    assert exit_code == 0
    assert "PASS TestCreateFile [<local>]" in capsys.readouterr().out


def test_failing_plugin_reports_failures(
    work_dir: Path, plugins_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = conformance.main(
        [
            f"--module={plugins_dir / 'immutable_store.py'}",
            "--scheme=imm",
            f"--tmp-dir={work_dir}",
        ]
    )

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "3 failed" in out
    assert "Failed scenarios:" in out
    assert "  TestCreateFileNonExisting/imm: " in out


def test_json_report(work_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = conformance.main(
        [
            "--scheme=ram",
            "--scheme=file",
            "--scenario=TestCreateDir",
            "--format=json",
            f"--tmp-dir={work_dir}",
        ]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["schemes"] == ["ram", "file"]
    assert payload["summary"] == {"passed": 2, "skipped": 0, "failed": 0}


def test_unavailable_scheme_runs_nothing(
    work_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = conformance.main(["--scheme=gcs", f"--tmp-dir={work_dir}"])

    assert exit_code == 0
    assert "nothing to test" in capsys.readouterr().out


def test_unloadable_module_is_not_fatal(
    work_dir: Path, plugins_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = conformance.main(
        [
            f"--module={plugins_dir / 'broken_import.py'}",
            "--scheme=ram",
            "--scenario=TestCreateFile",
            f"--tmp-dir={work_dir}",
        ]
    )

    assert exit_code == 0
    assert "1 passed" in capsys.readouterr().out


def test_unknown_scenario_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert conformance.main(["--scenario=TestNope"]) == conformance.EXIT_USAGE

    assert "TestNope" in capsys.readouterr().err


def test_invalid_config_is_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "modfs.toml"
    path.write_text('output_format = "xml"\n')

    assert conformance.main([f"--config={path}"]) == conformance.EXIT_USAGE
    assert "output_format" in capsys.readouterr().err


def test_config_file_and_environment(
    tmp_path: Path,
    work_dir: Path,
    monkeypatch: MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    path = tmp_path / "modfs.yaml"
    path.write_text("schemes: [file]\nscenarios: [TestCreateDir]\n")
    monkeypatch.setenv("MODFS_TMP_DIR", str(work_dir))
    monkeypatch.setenv("MODFS_SCHEMES", "ram")

    assert conformance.main([f"--config={path}"]) == 0

    assert "PASS TestCreateDir [ram]" in capsys.readouterr().out


def test_bad_arguments_return_usage_code() -> None:
    assert conformance.main(["--format=xml"]) == 2
