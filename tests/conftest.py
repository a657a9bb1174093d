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

from __future__ import annotations

from pathlib import Path

import pytest

from modfs.conformance import HarnessContext
from modfs.filesystem import BackendProvider, builtin_providers
from tests.helpers import HarnessFactory

pytest_plugins = ["modfs.pytest_plugin"]

PLUGINS_DIR = Path(__file__).parent / "helpers" / "plugins"


@pytest.fixture
def plugins_dir() -> Path:
    """Directory holding the backend plugin modules used by the tests."""

    return PLUGINS_DIR


@pytest.fixture
def harness_factory(tmp_path: Path) -> HarnessFactory:
    """Return a factory building harness contexts rooted under ``tmp_path``."""

    def factory(
        *,
        modules: tuple[str, ...] = (),
        schemes: tuple[str, ...] = (),
        providers: tuple[BackendProvider, ...] | None = None,
        base_dir: Path | None = None,
    ) -> HarnessContext:
        return HarnessContext.create(
            modules=modules,
            schemes=schemes,
            base_dir=tmp_path if base_dir is None else base_dir,
            providers=builtin_providers() if providers is None else providers,
        )

    return factory
