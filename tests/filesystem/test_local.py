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

"""Tests for the local disk backend."""

from __future__ import annotations

from pathlib import Path

import pytest

from modfs.filesystem import LocalFileSystem
from tests.helpers.filesystem import FileSystemValidationSuite


class TestLocalFileSystemPlainPaths(FileSystemValidationSuite):
    @pytest.fixture
    def fs(self) -> LocalFileSystem:
        return LocalFileSystem()

    @pytest.fixture
    def base(self, fs: LocalFileSystem, tmp_path: Path) -> str:
        return tmp_path.as_posix()


class TestLocalFileSystemFileUris(FileSystemValidationSuite):
    @pytest.fixture
    def fs(self) -> LocalFileSystem:
        return LocalFileSystem()

    @pytest.fixture
    def base(self, fs: LocalFileSystem, tmp_path: Path) -> str:
        return f"file://{tmp_path.as_posix()}"


def test_file_uri_and_plain_path_reach_same_file(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    writer = fs.new_writable_file(f"file://{tmp_path.as_posix()}/a_file")
    writer.append(b"shared")
    writer.close()

    reader = fs.new_random_access_file((tmp_path / "a_file").as_posix())
    try:
        assert reader.read(0, 6) == b"shared"
    finally:
        reader.close()


def test_create_dir_uses_directory_mode(tmp_path: Path) -> None:
    fs = LocalFileSystem(directory_mode=0o700)

    fs.create_dir((tmp_path / "private").as_posix())

    assert (tmp_path / "private").stat().st_mode & 0o777 == 0o700


def test_close_is_idempotent(tmp_path: Path) -> None:
    writer = LocalFileSystem().new_writable_file((tmp_path / "a_file").as_posix())

    writer.close()
    writer.close()
