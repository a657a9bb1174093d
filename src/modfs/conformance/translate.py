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

"""Name translation contract.

A backend's ``translate_name`` must:

- map the empty local reference to itself
- collapse a bare or doubled root separator to ``/``
- map ``<scheme>://`` with zero, one or two extra separators to ``/``
- resolve ``.`` and ``..`` lexically and collapse repeated separators
- be idempotent on its own output

Every mismatch of a run is collected so a single Fail verdict reports them
all.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..filesystem import SCHEME_MARKER, FileSystem
from ._context import TestContext
from ._verdict import ScenarioFailed, ScenarioSkipped

#: Paths below the test root and their expected translation, relative to it.
ROOTED_CASES: tuple[tuple[str, str], ...] = (
    ("a_file", "/a_file"),
    ("a_dir/a_file", "/a_dir/a_file"),
    ("./a_file", "/a_file"),
    ("a/convoluted/../path/./to/.//.///a/file", "/a/path/to/a/file"),
)


@dataclass(slots=True, frozen=True)
class TranslationMismatch:
    name: str
    expected: str
    observed: str

    def __str__(self) -> str:
        return f"translate_name({self.name!r}): expected {self.expected!r}, observed {self.observed!r}"


def corner_cases(scheme: str) -> tuple[tuple[str, str], ...]:
    """Scheme-dependent corner cases as ``(name, expected)`` pairs."""

    if not scheme:
        return (
            ("", ""),
            ("/", "/"),
            ("//", "/"),
            ("a_file", "a_file"),
            ("a_dir/..", "."),
        )
    marker = f"{scheme}{SCHEME_MARKER}"
    return (
        (marker, "/"),
        (f"{marker}/", "/"),
        (f"{marker}//", "/"),
    )


def check_corner_cases(fs: FileSystem, scheme: str) -> list[TranslationMismatch]:
    mismatches: list[TranslationMismatch] = []
    for name, expected in corner_cases(scheme):
        observed = fs.translate_name(name)
        if observed != expected:
            mismatches.append(TranslationMismatch(name, expected, observed))
    return mismatches


def check_rooted_paths(fs: FileSystem, context: TestContext) -> list[TranslationMismatch]:
    mismatches: list[TranslationMismatch] = []
    for path, expected in ROOTED_CASES:
        uri = context.uri_for_path(path)
        translated = fs.translate_name(uri)
        observed = context.relative_path(translated)
        if observed != expected:
            mismatches.append(TranslationMismatch(uri, expected, observed))
            continue
        again = fs.translate_name(translated)
        if again != translated:
            mismatches.append(TranslationMismatch(translated, translated, again))
    return mismatches


def check_translate_name(context: TestContext) -> None:
    """Scenario body validating the translation contract.

    Raises:
        ScenarioSkipped: No filesystem is registered for the scheme.
        ScenarioFailed: At least one translation did not match.
    """

    fs, status = context.env.get_file_system_for_file(context.uri_for_path("some_path"))
    if fs is None or not status.ok:
        raise ScenarioSkipped("No filesystem registered")

    mismatches = [
        *check_corner_cases(fs, context.scheme),
        *check_rooted_paths(fs, context),
    ]
    if mismatches:
        raise ScenarioFailed(_describe(mismatches))


def _describe(mismatches: Sequence[TranslationMismatch]) -> str:
    return "; ".join(str(mismatch) for mismatch in mismatches)


__all__ = [
    "ROOTED_CASES",
    "TranslationMismatch",
    "check_corner_cases",
    "check_rooted_paths",
    "check_translate_name",
    "corner_cases",
]
