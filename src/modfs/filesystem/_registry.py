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

"""Scheme-keyed registry of filesystem backends."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..errors import SchemeNotRegisteredError
from ._protocol import FileSystem
from ._status import Code, FileSystemError


@dataclass(slots=True)
class FileSystemRegistry:
    """Association between URI schemes and backend instances.

    Registrations live until :meth:`unregister` drops them. A scheme can be
    registered only once; a second registration is rejected with
    ``ALREADY_EXISTS`` so a late plugin cannot silently replace a backend
    that scenarios already resolved.
    """

    _backends: dict[str, FileSystem] = field(default_factory=dict[str, FileSystem])
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def register(self, scheme: str, fs: FileSystem) -> None:
        """Register ``fs`` as the backend for ``scheme``.

        Raises:
            FileSystemError: ``ALREADY_EXISTS`` when the scheme is taken.
            TypeError: ``fs`` does not implement :class:`FileSystem`.
        """

        if not isinstance(fs, FileSystem):
            msg = f"{type(fs).__name__} does not implement the FileSystem protocol."
            raise TypeError(msg)
        with self._lock:
            if scheme in self._backends:
                raise FileSystemError(
                    Code.ALREADY_EXISTS,
                    f"File system for scheme {scheme!r} already registered.",
                )
            self._backends[scheme] = fs

    def unregister(self, scheme: str) -> None:
        """Remove the backend for ``scheme``.

        Raises:
            SchemeNotRegisteredError: No backend handles ``scheme``.
        """

        with self._lock:
            try:
                del self._backends[scheme]
            except KeyError:
                raise SchemeNotRegisteredError(scheme) from None

    def lookup(self, scheme: str) -> FileSystem:
        """Return the backend for ``scheme``.

        Raises:
            SchemeNotRegisteredError: No backend handles ``scheme``.
        """

        with self._lock:
            try:
                return self._backends[scheme]
            except KeyError:
                raise SchemeNotRegisteredError(scheme) from None

    def schemes(self) -> tuple[str, ...]:
        """Registered schemes in sorted order."""

        with self._lock:
            return tuple(sorted(self._backends))

    def __contains__(self, scheme: object) -> bool:
        with self._lock:
            return scheme in self._backends


@runtime_checkable
class BackendProvider(Protocol):
    """In-process registration path for statically available backends."""

    def register_into(self, registry: FileSystemRegistry) -> None:
        """Register this provider's backend(s) into ``registry``."""
        ...


def install_providers(
    registry: FileSystemRegistry, providers: Iterable[BackendProvider]
) -> None:
    """Register every provider into ``registry`` in iteration order."""

    for provider in providers:
        provider.register_into(registry)


__all__ = ["BackendProvider", "FileSystemRegistry", "install_providers"]
