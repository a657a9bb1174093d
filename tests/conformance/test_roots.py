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

"""Tests for per-scenario root allocation."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from modfs.conformance import ROOT_PREFIX, TestRootAllocator
from modfs.conformance._roots import SEED_UPPER_BOUND
from modfs.errors import RootPreparationError


def test_root_combines_seed_and_name(tmp_path: Path) -> None:
    allocator = TestRootAllocator(base_dir=tmp_path, _seed=42)

    root = allocator.root_for("TestCreateFile/ram")

    assert root == tmp_path / "modfs_42_TestCreateFile_ram"
    assert root.name.startswith(ROOT_PREFIX)


def test_seed_drawn_once() -> None:
    allocator = TestRootAllocator()

    seed = allocator.seed

    assert 0 <= seed < SEED_UPPER_BOUND
    assert allocator.seed == seed


def test_same_name_same_root_within_run(tmp_path: Path) -> None:
    allocator = TestRootAllocator(base_dir=tmp_path)

    assert allocator.root_for("a") == allocator.root_for("a")
    assert allocator.root_for("a") != allocator.root_for("b")


def test_default_base_is_system_temp() -> None:
    allocator = TestRootAllocator(_seed=7)

    assert allocator.root_for("x").parent == Path(tempfile.gettempdir()).absolute()


def test_relative_base_made_absolute() -> None:
    allocator = TestRootAllocator(base_dir=Path("relative"), _seed=1)

    assert allocator.root_for("x").is_absolute()


def test_prepare_and_release(tmp_path: Path) -> None:
    allocator = TestRootAllocator(base_dir=tmp_path)

    root = allocator.prepare("TestCreateDir/")
    (root / "leftover").write_text("x")

    assert root.is_dir()
    allocator.release(root)
    assert not root.exists()


def test_release_missing_root_is_silent(tmp_path: Path) -> None:
    TestRootAllocator.release(tmp_path / "never_created")


def test_prepare_twice_fails(tmp_path: Path) -> None:
    allocator = TestRootAllocator(base_dir=tmp_path)
    _ = allocator.prepare("dup")

    with pytest.raises(RootPreparationError) as excinfo:
        _ = allocator.prepare("dup")

    assert isinstance(excinfo.value.cause, FileExistsError)


def test_prepare_without_base_fails(tmp_path: Path) -> None:
    allocator = TestRootAllocator(base_dir=tmp_path / "missing")

    with pytest.raises(RootPreparationError, match="missing"):
        _ = allocator.prepare("x")
