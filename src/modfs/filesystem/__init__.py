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

"""Filesystem collaborator layer exercised by the conformance harness.

This package provides the `FileSystem` protocol backends implement, the
scheme-keyed `FileSystemRegistry`, the `Env` facade that maps backend
exceptions onto canonical `Status` codes, and two bundled backends.

Example usage::

    from modfs.filesystem import Code, default_env

    env = default_env()
    status = env.create_dir("ram:///scratch")
    assert status.code is Code.OK

Bundled backends:

- ``LocalFileSystem``: host disk, schemes ``""`` and ``file``
- ``InMemoryFileSystem``: process memory, scheme ``ram``
"""

from __future__ import annotations

from ._env import Env
from ._local import (
    LOCAL_SCHEMES,
    LocalFileSystem,
    LocalRandomAccessFile,
    LocalWritableFile,
)
from ._memory import MEMORY_SCHEME, InMemoryFileSystem
from ._path import (
    SCHEME_MARKER,
    SEPARATOR,
    ParsedURI,
    clean_path,
    create_uri,
    join_path,
    parse_uri,
    translate_name,
)
from ._protocol import (
    FileSystem,
    PrunableFileSystem,
    RandomAccessFile,
    WritableFile,
)
from ._registry import BackendProvider, FileSystemRegistry, install_providers
from ._status import (
    Code,
    FileSystemError,
    Status,
    code_from_errno,
    status_from_error,
)


def builtin_providers() -> tuple[BackendProvider, ...]:
    """Providers for the backends shipped with modfs."""

    return (LocalFileSystem.provider(), InMemoryFileSystem.provider())


def default_env() -> Env:
    """Return an :class:`Env` with the bundled backends registered."""

    env = Env()
    install_providers(env.registry, builtin_providers())
    return env


__all__ = [
    "LOCAL_SCHEMES",
    "MEMORY_SCHEME",
    "SCHEME_MARKER",
    "SEPARATOR",
    "BackendProvider",
    "Code",
    "Env",
    "FileSystem",
    "FileSystemError",
    "FileSystemRegistry",
    "InMemoryFileSystem",
    "LocalFileSystem",
    "LocalRandomAccessFile",
    "LocalWritableFile",
    "ParsedURI",
    "PrunableFileSystem",
    "RandomAccessFile",
    "Status",
    "WritableFile",
    "builtin_providers",
    "clean_path",
    "code_from_errno",
    "create_uri",
    "default_env",
    "install_providers",
    "join_path",
    "parse_uri",
    "status_from_error",
    "translate_name",
]
