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

"""Isolated working directories for scenario runs."""

from __future__ import annotations

import os
import random
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..errors import RootPreparationError

ROOT_PREFIX: Final[str] = "modfs_"
SEED_UPPER_BOUND: Final[int] = 2**31 - 1

_ROOT_MODE: Final[int] = 0o755
_PLACEHOLDER: Final[str] = "_"


@dataclass(slots=True)
class TestRootAllocator:
    """Produces one collision-resistant root directory per scenario.

    Roots combine a seed drawn once per allocator (shared by every scenario of
    a run) with the scenario's fully-qualified name, so two runs are unlikely
    to clash and two scenarios of one run never do.
    """

    __test__ = False

    base_dir: Path | None = None
    _seed: int | None = None

    @property
    def seed(self) -> int:
        """Random seed for this run; drawn on first access, then fixed."""

        if self._seed is None:
            self._seed = random.SystemRandom().randrange(SEED_UPPER_BOUND)
        return self._seed

    def root_for(self, name: str) -> Path:
        """Return the root path for the scenario called ``name``.

        Path separators in ``name`` are replaced so the suffix stays a single
        path segment.
        """

        base = self.base_dir if self.base_dir is not None else Path(tempfile.gettempdir())
        return base.absolute() / f"{ROOT_PREFIX}{self.seed}_{_single_segment(name)}"

    def prepare(self, name: str) -> Path:
        """Create the root for ``name`` and return it.

        Raises:
            RootPreparationError: The directory could not be created.
        """

        root = self.root_for(name)
        try:
            root.mkdir(mode=_ROOT_MODE)
        except OSError as error:
            raise RootPreparationError(str(root), error) from error
        return root

    @staticmethod
    def release(root: Path) -> None:
        """Remove ``root`` and its contents; errors are ignored."""

        shutil.rmtree(root, ignore_errors=True)


def _single_segment(name: str) -> str:
    segment = name.replace("/", _PLACEHOLDER)
    if os.sep != "/":
        segment = segment.replace(os.sep, _PLACEHOLDER)
    if os.altsep is not None and os.altsep != "/":
        segment = segment.replace(os.altsep, _PLACEHOLDER)
    return segment


__all__ = ["ROOT_PREFIX", "SEED_UPPER_BOUND", "TestRootAllocator"]
