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

"""In-memory backend registered under the ``ram`` scheme.

Suitable for exercising the harness without touching the host disk. The
tree is a set of directories plus a mapping of file paths to byte buffers;
both are keyed by canonical absolute paths.

Example usage::

    from modfs.filesystem import Env, InMemoryFileSystem

    env = Env()
    InMemoryFileSystem.provider().register_into(env.registry)
    status = env.create_dir("ram:///data")
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Final

from ._path import SEPARATOR, clean_path, translate_name
from ._registry import FileSystemRegistry

MEMORY_SCHEME: Final[str] = "ram"


@dataclass(slots=True)
class _MemoryWritableFile:
    path: str
    _buffer: bytearray
    _lock: threading.Lock
    _closed: bool = False

    def append(self, data: bytes) -> None:
        if self._closed:
            msg = f"I/O operation on closed file: {self.path}"
            raise ValueError(msg)
        with self._lock:
            self._buffer.extend(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self._closed = True


@dataclass(slots=True)
class _MemoryRandomAccessFile:
    path: str
    _buffer: bytearray
    _lock: threading.Lock

    def read(self, offset: int, n: int) -> bytes:
        if offset < 0 or n < 0:
            msg = "offset and n must be non-negative."
            raise ValueError(msg)
        with self._lock:
            return bytes(self._buffer[offset : offset + n])

    def close(self) -> None:
        pass


@dataclass(slots=True)
class InMemoryFileSystem:
    """Process-local filesystem tree held in dictionaries."""

    _files: dict[str, bytearray] = field(default_factory=dict[str, bytearray])
    _directories: set[str] = field(default_factory=lambda: {SEPARATOR})
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @staticmethod
    def provider(scheme: str = MEMORY_SCHEME) -> _MemoryProvider:
        """Return a provider registering a fresh in-memory tree for ``scheme``."""

        return _MemoryProvider(scheme=scheme)

    def translate_name(self, name: str) -> str:
        return translate_name(name)

    def new_writable_file(self, path: str) -> _MemoryWritableFile:
        resolved = self._resolve(path)
        with self._lock:
            self._check_parents(resolved)
            self._reject_directory(resolved)
            buffer = bytearray()
            self._files[resolved] = buffer
        return _MemoryWritableFile(resolved, buffer, self._lock)

    def new_appendable_file(self, path: str) -> _MemoryWritableFile:
        resolved = self._resolve(path)
        with self._lock:
            self._check_parents(resolved)
            self._reject_directory(resolved)
            buffer = self._files.setdefault(resolved, bytearray())
        return _MemoryWritableFile(resolved, buffer, self._lock)

    def new_random_access_file(self, path: str) -> _MemoryRandomAccessFile:
        resolved = self._resolve(path)
        with self._lock:
            self._check_parents(resolved)
            self._reject_directory(resolved)
            try:
                buffer = self._files[resolved]
            except KeyError:
                raise FileNotFoundError(path) from None
        return _MemoryRandomAccessFile(resolved, buffer, self._lock)

    def create_dir(self, path: str) -> None:
        resolved = self._resolve(path)
        with self._lock:
            self._check_parents(resolved)
            if resolved in self._directories or resolved in self._files:
                raise FileExistsError(path)
            self._directories.add(resolved)

    def delete_recursively(self, path: str) -> None:
        """Drop ``path`` and every entry below it. The root itself survives."""

        resolved = self._resolve(path)
        prefix = resolved.rstrip(SEPARATOR) + SEPARATOR
        with self._lock:
            if resolved not in self._files and resolved not in self._directories:
                raise FileNotFoundError(path)
            for name in [f for f in self._files if f == resolved or f.startswith(prefix)]:
                del self._files[name]
            self._directories = {
                d
                for d in self._directories
                if d == SEPARATOR or (d != resolved and not d.startswith(prefix))
            }

    def _resolve(self, path: str) -> str:
        translated = self.translate_name(path)
        return clean_path(SEPARATOR + translated)

    def _check_parents(self, resolved: str) -> None:
        """Validate every ancestor of ``resolved``, from the root down."""

        segments = resolved.strip(SEPARATOR).split(SEPARATOR)[:-1]
        current = ""
        for segment in segments:
            current = f"{current}{SEPARATOR}{segment}"
            if current in self._files:
                msg = f"Not a directory: {current}"
                raise NotADirectoryError(msg)
            if current not in self._directories:
                raise FileNotFoundError(current)

    def _reject_directory(self, resolved: str) -> None:
        if resolved in self._directories:
            msg = f"Is a directory: {resolved}"
            raise IsADirectoryError(msg)


@dataclass(slots=True, frozen=True)
class _MemoryProvider:
    scheme: str = MEMORY_SCHEME

    def register_into(self, registry: FileSystemRegistry) -> None:
        registry.register(self.scheme, InMemoryFileSystem())


__all__ = ["MEMORY_SCHEME", "InMemoryFileSystem"]
