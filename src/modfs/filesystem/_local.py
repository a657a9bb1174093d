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

"""Local disk backend.

Serves local paths (empty scheme) and ``file://`` URIs. Errors are the
``OSError`` subclasses raised by the operating system, which the ``Env``
maps onto canonical codes.

Example usage::

    from modfs.filesystem import Env, LocalFileSystem

    env = Env()
    LocalFileSystem.provider().register_into(env.registry)
    handle, status = env.new_writable_file("file:///tmp/a_file")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import BinaryIO, Final

from ._path import translate_name
from ._registry import FileSystemRegistry

LOCAL_SCHEMES: Final[tuple[str, ...]] = ("", "file")

_DIRECTORY_MODE: Final[int] = 0o755


@dataclass(slots=True)
class LocalWritableFile:
    """Writable handle over a host file object."""

    path: str
    _handle: BinaryIO

    def append(self, data: bytes) -> None:
        _ = self._handle.write(data)

    def flush(self) -> None:
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()


@dataclass(slots=True)
class LocalRandomAccessFile:
    """Read-only handle over a host file object."""

    path: str
    _handle: BinaryIO

    def read(self, offset: int, n: int) -> bytes:
        if offset < 0 or n < 0:
            msg = "offset and n must be non-negative."
            raise ValueError(msg)
        _ = self._handle.seek(offset)
        return self._handle.read(n)

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()


@dataclass(slots=True, frozen=True)
class LocalFileSystem:
    """Filesystem backed by the host operating system."""

    directory_mode: int = _DIRECTORY_MODE

    @staticmethod
    def provider(schemes: tuple[str, ...] = LOCAL_SCHEMES) -> _LocalProvider:
        """Return a provider registering a local backend for ``schemes``."""

        return _LocalProvider(schemes=schemes)

    def translate_name(self, name: str) -> str:
        return translate_name(name)

    def new_writable_file(self, path: str) -> LocalWritableFile:
        resolved = self.translate_name(path)
        return LocalWritableFile(resolved, open(resolved, "wb"))  # noqa: SIM115

    def new_appendable_file(self, path: str) -> LocalWritableFile:
        resolved = self.translate_name(path)
        return LocalWritableFile(resolved, open(resolved, "ab"))  # noqa: SIM115

    def new_random_access_file(self, path: str) -> LocalRandomAccessFile:
        resolved = self.translate_name(path)
        return LocalRandomAccessFile(resolved, open(resolved, "rb"))  # noqa: SIM115

    def create_dir(self, path: str) -> None:
        os.mkdir(self.translate_name(path), self.directory_mode)


@dataclass(slots=True, frozen=True)
class _LocalProvider:
    schemes: tuple[str, ...] = field(default=LOCAL_SCHEMES)

    def register_into(self, registry: FileSystemRegistry) -> None:
        fs = LocalFileSystem()
        for scheme in self.schemes:
            registry.register(scheme, fs)


__all__ = [
    "LOCAL_SCHEMES",
    "LocalFileSystem",
    "LocalRandomAccessFile",
    "LocalWritableFile",
]
