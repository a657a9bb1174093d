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

"""URI parsing and lexical path normalization.

These helpers define the canonical ``translate_name`` behaviour every bundled
backend uses:

- ``parse_uri`` splits ``[<scheme>://<host>]<path>``
- ``clean_path`` resolves ``.``/``..`` segments and collapses separators
- ``translate_name`` combines both and never touches the filesystem

Examples:
    >>> clean_path("a/convoluted/../path/./to/.//.///a/file")
    'a/path/to/a/file'
    >>> translate_name("ram:////")
    '/'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

SEPARATOR: Final[str] = "/"
SCHEME_MARKER: Final[str] = "://"

_SCHEME_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z][A-Za-z0-9.]*")


@dataclass(slots=True, frozen=True)
class ParsedURI:
    """Components of a ``[<scheme>://<host>]<path>`` reference."""

    scheme: str
    host: str
    path: str


def parse_uri(name: str) -> ParsedURI:
    """Split ``name`` into scheme, host and path.

    A reference without a valid ``<scheme>://`` prefix is a local path: the
    scheme and host are empty and the whole input is the path.
    """

    scheme, marker, remainder = name.partition(SCHEME_MARKER)
    if not marker or _SCHEME_PATTERN.fullmatch(scheme) is None:
        return ParsedURI(scheme="", host="", path=name)
    host, separator, path = remainder.partition(SEPARATOR)
    return ParsedURI(scheme=scheme, host=host, path=separator + path)


def create_uri(scheme: str, host: str, path: str) -> str:
    """Inverse of :func:`parse_uri`."""

    if not scheme:
        return path
    return f"{scheme}{SCHEME_MARKER}{host}{path}"


def clean_path(path: str) -> str:
    """Return the shortest lexically equivalent path.

    - Repeated separators collapse into one
    - ``.`` segments are removed
    - ``..`` removes the preceding non-``..`` segment
    - ``..`` directly after the root is dropped
    - an empty result becomes ``.`` (or ``/`` for rooted paths)
    """

    rooted = path.startswith(SEPARATOR)
    segments: list[str] = []
    for segment in path.split(SEPARATOR):
        if not segment or segment == ".":
            continue
        if segment == "..":
            if segments and segments[-1] != "..":
                _ = segments.pop()
            elif not rooted:
                segments.append(segment)
            continue
        segments.append(segment)

    cleaned = SEPARATOR.join(segments)
    if rooted:
        return SEPARATOR + cleaned
    return cleaned or "."


def join_path(*parts: str) -> str:
    """Join path fragments with exactly one separator between them.

    Empty fragments are skipped. The result is not cleaned, so ``.`` and
    ``..`` segments survive until :func:`translate_name` sees them.
    """

    result = ""
    for part in parts:
        if not part:
            continue
        if not result:
            result = part
        elif result.endswith(SEPARATOR) and part.startswith(SEPARATOR):
            result += part[1:]
        elif result.endswith(SEPARATOR) or part.startswith(SEPARATOR):
            result += part
        else:
            result += SEPARATOR + part
    return result


def translate_name(name: str) -> str:
    """Map a scheme-qualified reference onto a canonical backend path.

    The empty reference stays empty; a URI whose path part is empty (the bare
    ``<scheme>://`` marker) maps to the root separator.
    """

    if not name:
        return name
    path = parse_uri(name).path
    if not path:
        return SEPARATOR
    return clean_path(path)


__all__ = [
    "SCHEME_MARKER",
    "SEPARATOR",
    "ParsedURI",
    "clean_path",
    "create_uri",
    "join_path",
    "parse_uri",
    "translate_name",
]
