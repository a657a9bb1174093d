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

"""Canonical status codes shared by every filesystem backend.

Backends signal failures by raising Python exceptions; :func:`status_from_error`
folds those exceptions onto the closed :class:`Code` taxonomy so outcomes can
be compared deterministically without looking at messages.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Final

from ..errors import ModfsError


class Code(Enum):
    """Closed taxonomy of operation outcomes."""

    OK = "OK"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    UNIMPLEMENTED = "UNIMPLEMENTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNKNOWN = "UNKNOWN"


@dataclass(slots=True, frozen=True)
class Status:
    """Outcome of a single backend operation.

    Attributes:
        code: Canonical classification of the outcome.
        message: Human-readable detail; never used for classification.
    """

    code: Code
    message: str = ""

    OK: ClassVar[Status]

    @property
    def ok(self) -> bool:
        return self.code is Code.OK

    def __str__(self) -> str:
        if self.ok or not self.message:
            return self.code.value
        return f"{self.code.value}: {self.message}"


Status.OK = Status(Code.OK)


class FileSystemError(ModfsError, OSError):
    """Error raised by backends that want to report a specific canonical code.

    Example::

        raise FileSystemError(Code.FAILED_PRECONDITION, "object store has no directories")
    """

    def __init__(self, code: Code, message: str = "") -> None:
        super().__init__(message or code.value)
        self.code = code
        self.message = message


_ERRNO_CODES: Final[dict[int, Code]] = {
    errno.ENOENT: Code.NOT_FOUND,
    errno.EEXIST: Code.ALREADY_EXISTS,
    errno.ENOTDIR: Code.FAILED_PRECONDITION,
    errno.EISDIR: Code.FAILED_PRECONDITION,
    errno.ENOTEMPTY: Code.FAILED_PRECONDITION,
    errno.EACCES: Code.PERMISSION_DENIED,
    errno.EPERM: Code.PERMISSION_DENIED,
    errno.EROFS: Code.PERMISSION_DENIED,
    errno.EINVAL: Code.INVALID_ARGUMENT,
    errno.ENAMETOOLONG: Code.INVALID_ARGUMENT,
    errno.ENOSYS: Code.UNIMPLEMENTED,
    errno.EOPNOTSUPP: Code.UNIMPLEMENTED,
}

_EXCEPTION_CODES: Final[tuple[tuple[type[BaseException], Code], ...]] = (
    (FileNotFoundError, Code.NOT_FOUND),
    (FileExistsError, Code.ALREADY_EXISTS),
    (IsADirectoryError, Code.FAILED_PRECONDITION),
    (NotADirectoryError, Code.FAILED_PRECONDITION),
    (PermissionError, Code.PERMISSION_DENIED),
    (NotImplementedError, Code.UNIMPLEMENTED),
    (ValueError, Code.INVALID_ARGUMENT),
)


def code_from_errno(value: int | None) -> Code:
    """Return the canonical code for an ``errno`` value."""

    if value is None:
        return Code.UNKNOWN
    return _ERRNO_CODES.get(value, Code.UNKNOWN)


def status_from_error(error: Exception) -> Status:
    """Classify ``error`` onto a :class:`Status`.

    :class:`FileSystemError` keeps the code it carries. Other exceptions are
    classified by type first, then by ``errno`` for plain :class:`OSError`.
    Anything else is ``UNKNOWN``.
    """

    message = str(error)
    if isinstance(error, FileSystemError):
        return Status(error.code, error.message)
    for exc_type, code in _EXCEPTION_CODES:
        if isinstance(error, exc_type):
            return Status(code, message)
    if isinstance(error, OSError):
        return Status(code_from_errno(error.errno), message)
    return Status(Code.UNKNOWN, message)


__all__ = [
    "Code",
    "FileSystemError",
    "Status",
    "code_from_errno",
    "status_from_error",
]
