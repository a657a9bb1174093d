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

"""Filesystem protocol every conformance target implements.

Paths handed to backends are full references (``[<scheme>://]<path>``);
backends call :meth:`FileSystem.translate_name` to obtain their canonical
internal path. Failures are reported by raising:

- ``FileNotFoundError``: a path component does not exist
- ``FileExistsError``: the target already exists
- ``IsADirectoryError`` / ``NotADirectoryError``: the target, or a path
  component, has the wrong type
- ``NotImplementedError``: the backend does not support the operation
- ``FileSystemError``: any other canonical code

The :class:`~modfs.filesystem.Env` facade folds these exceptions onto
canonical :class:`~modfs.filesystem.Status` values.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class WritableFile(Protocol):
    """Handle returned by ``new_writable_file`` and ``new_appendable_file``."""

    def append(self, data: bytes) -> None:
        """Append ``data`` at the end of the file."""
        ...

    def flush(self) -> None: ...

    def close(self) -> None:
        """Flush pending data and release the handle. Idempotent."""
        ...


@runtime_checkable
class RandomAccessFile(Protocol):
    """Handle returned by ``new_random_access_file``."""

    def read(self, offset: int, n: int) -> bytes:
        """Read up to ``n`` bytes starting at ``offset``.

        Returns fewer bytes than requested only at end of file.
        """
        ...

    def close(self) -> None: ...


@runtime_checkable
class FileSystem(Protocol):
    """Operations a backend must provide to be exercised by the harness.

    Example::

        class ObjectStore:
            def new_writable_file(self, path: str) -> WritableFile: ...
            def new_appendable_file(self, path: str) -> WritableFile:
                raise NotImplementedError("objects are immutable")
            ...
    """

    def new_writable_file(self, path: str) -> WritableFile:
        """Create or truncate the file at ``path``.

        Raises:
            FileNotFoundError: Parent directory does not exist.
            IsADirectoryError: ``path`` is a directory.
            NotADirectoryError: A path component is a file.
        """
        ...

    def new_appendable_file(self, path: str) -> WritableFile:
        """Open ``path`` for appending, creating it if absent.

        Raises:
            FileNotFoundError: Parent directory does not exist.
            IsADirectoryError: ``path`` is a directory.
            NotADirectoryError: A path component is a file.
        """
        ...

    def new_random_access_file(self, path: str) -> RandomAccessFile:
        """Open an existing file for reading.

        Raises:
            FileNotFoundError: ``path`` does not exist.
            IsADirectoryError: ``path`` is a directory.
            NotADirectoryError: A path component is a file.
        """
        ...

    def create_dir(self, path: str) -> None:
        """Create a single directory; parents must already exist.

        Raises:
            FileNotFoundError: Parent directory does not exist.
            FileExistsError: ``path`` already exists (file or directory).
            NotADirectoryError: A path component is a file.
        """
        ...

    def translate_name(self, name: str) -> str:
        """Return the canonical path for ``name``.

        Pure: the result depends only on ``name``, never on filesystem state.
        """
        ...


@runtime_checkable
class PrunableFileSystem(Protocol):
    """Optional capability of backends that can drop a whole subtree.

    The harness uses it to discard a scenario's root from backends that do
    not share the host disk.
    """

    def delete_recursively(self, path: str) -> None:
        """Remove ``path`` and everything below it.

        Raises:
            FileNotFoundError: ``path`` does not exist.
        """
        ...


__all__ = ["FileSystem", "PrunableFileSystem", "RandomAccessFile", "WritableFile"]
