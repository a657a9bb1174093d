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

"""URI-dispatching facade over the backend registry.

``Env`` is the single access point scenarios use. It selects the backend from
the scheme of each reference and converts backend exceptions into canonical
:class:`Status` values. Operations are never retried: the first observed code
is the outcome.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import SchemeNotRegisteredError
from ._path import parse_uri
from ._protocol import FileSystem, RandomAccessFile, WritableFile
from ._registry import FileSystemRegistry
from ._status import Code, Status, status_from_error


@dataclass(slots=True)
class Env:
    """Filesystem access point bound to a :class:`FileSystemRegistry`.

    Example::

        env = default_env()
        handle, status = env.new_writable_file("ram:///tmp/a_file")
        if status.ok:
            handle.append(b"data")
            handle.close()
    """

    registry: FileSystemRegistry = field(default_factory=FileSystemRegistry)

    def get_file_system_for_file(self, name: str) -> tuple[FileSystem | None, Status]:
        """Return the backend handling ``name`` and the lookup status."""

        scheme = parse_uri(name).scheme
        try:
            return self.registry.lookup(scheme), Status.OK
        except SchemeNotRegisteredError as error:
            return None, Status(Code.UNIMPLEMENTED, str(error))

    def registered_schemes(self) -> tuple[str, ...]:
        return self.registry.schemes()

    def new_writable_file(self, name: str) -> tuple[WritableFile | None, Status]:
        return self._open(name, lambda fs: fs.new_writable_file(name))

    def new_appendable_file(self, name: str) -> tuple[WritableFile | None, Status]:
        return self._open(name, lambda fs: fs.new_appendable_file(name))

    def new_random_access_file(
        self, name: str
    ) -> tuple[RandomAccessFile | None, Status]:
        return self._open(name, lambda fs: fs.new_random_access_file(name))

    def create_dir(self, name: str) -> Status:
        _, status = self._open(name, lambda fs: fs.create_dir(name))
        return status

    def translate_name(self, name: str) -> str:
        """Translate ``name`` with the backend registered for its scheme.

        Raises:
            SchemeNotRegisteredError: No backend handles the scheme.
        """

        return self.registry.lookup(parse_uri(name).scheme).translate_name(name)

    def _open[T](
        self, name: str, operation: Callable[[FileSystem], T]
    ) -> tuple[T | None, Status]:
        fs, status = self.get_file_system_for_file(name)
        if fs is None:
            return None, status
        try:
            result = operation(fs)
        except (OSError, NotImplementedError, ValueError) as error:
            return None, status_from_error(error)
        return result, Status.OK


__all__ = ["Env"]
