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

"""Tests for the in-memory backend."""

from __future__ import annotations

import pytest

from modfs.filesystem import (
    MEMORY_SCHEME,
    FileSystemRegistry,
    InMemoryFileSystem,
    LocalFileSystem,
    PrunableFileSystem,
)
from tests.helpers.filesystem import FileSystemValidationSuite


class TestInMemoryFileSystem(FileSystemValidationSuite):
    @pytest.fixture
    def fs(self) -> InMemoryFileSystem:
        return InMemoryFileSystem()

    @pytest.fixture
    def base(self, fs: InMemoryFileSystem) -> str:
        fs.create_dir("ram:///work")
        return "ram:///work"


def test_root_exists() -> None:
    fs = InMemoryFileSystem()

    with pytest.raises(FileExistsError):
        fs.create_dir("ram:///")


def test_host_part_is_ignored() -> None:
    fs = InMemoryFileSystem()
    fs.new_writable_file("ram://host-a/a_file").close()

    fs.new_random_access_file("ram://host-b/a_file").close()


def test_read_directory_rejected() -> None:
    fs = InMemoryFileSystem()
    fs.create_dir("ram:///a_dir")

    with pytest.raises(IsADirectoryError):
        _ = fs.new_random_access_file("ram:///a_dir")


def test_append_after_close_rejected() -> None:
    writer = InMemoryFileSystem().new_writable_file("ram:///a_file")
    writer.close()

    with pytest.raises(ValueError, match="closed file"):
        writer.append(b"late")


def test_readers_see_later_appends() -> None:
    fs = InMemoryFileSystem()
    writer = fs.new_writable_file("ram:///a_file")
    reader = fs.new_random_access_file("ram:///a_file")

    writer.append(b"abc")

    assert reader.read(0, 3) == b"abc"


def test_provider_registers_fresh_tree() -> None:
    registry = FileSystemRegistry()
    InMemoryFileSystem.provider().register_into(registry)
    InMemoryFileSystem.provider("mem2").register_into(registry)

    first = registry.lookup(MEMORY_SCHEME)
    second = registry.lookup("mem2")

    assert isinstance(first, InMemoryFileSystem)
    assert first is not second


def test_delete_recursively_drops_subtree_only() -> None:
    fs = InMemoryFileSystem()
    fs.create_dir("ram:///keep")
    fs.create_dir("ram:///work")
    fs.create_dir("ram:///work/a_dir")
    fs.new_writable_file("ram:///work/a_dir/a_file").close()
    fs.new_writable_file("ram:///workspace").close()

    fs.delete_recursively("ram:///work")

    with pytest.raises(FileNotFoundError):
        _ = fs.new_random_access_file("ram:///work/a_dir/a_file")
    fs.new_random_access_file("ram:///workspace").close()
    with pytest.raises(FileExistsError):
        fs.create_dir("ram:///keep")
    fs.create_dir("ram:///work")


def test_delete_recursively_missing_path() -> None:
    with pytest.raises(FileNotFoundError):
        InMemoryFileSystem().delete_recursively("ram:///absent")


def test_memory_backend_is_prunable() -> None:
    assert isinstance(InMemoryFileSystem(), PrunableFileSystem)
    assert not isinstance(LocalFileSystem(), PrunableFileSystem)
