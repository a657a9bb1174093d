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

"""Loading of backend plugin modules.

A plugin is a Python module, named by dotted import path or by file path,
that defines the initialization entry point ``modfs_init_plugin``::

    def modfs_init_plugin(registry: FileSystemRegistry, status: PluginStatus) -> None:
        registry.register("s3", S3FileSystem())

The loader treats the module as an untrusted boundary: import errors, a
missing or non-callable entry point, a failure status and exceptions raised
by the entry point all make :meth:`PluginLoader.load` return ``False`` and
leave every other plugin unaffected. Schemes the failing plugin registered
before failing are withdrawn again.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Final, cast

from ..errors import PluginLoadError
from ..filesystem import Code, FileSystemRegistry
from ..runtime.logging import StructuredLogger, get_logger

INIT_SYMBOL: Final[str] = "modfs_init_plugin"

_LOGGER: StructuredLogger = get_logger(__name__, context={"component": "plugins"})


@dataclass(slots=True)
class PluginStatus:
    """Mutable output parameter handed to ``modfs_init_plugin``."""

    code: Code = Code.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code is Code.OK

    def set(self, code: Code, message: str = "") -> None:
        self.code = code
        self.message = message


@dataclass(slots=True, frozen=True)
class PluginLoadResult:
    """Outcome of one :meth:`PluginLoader.load` call."""

    module: str
    loaded: bool
    message: str = ""
    schemes: tuple[str, ...] = ()


type InitFunction = Callable[[FileSystemRegistry, PluginStatus], None]


@dataclass(slots=True)
class PluginLoader:
    """Loads plugin modules into ``registry``; one call per requested module."""

    registry: FileSystemRegistry
    _results: list[PluginLoadResult] = field(default_factory=list[PluginLoadResult])

    @property
    def results(self) -> tuple[PluginLoadResult, ...]:
        return tuple(self._results)

    def load(self, module_path: str) -> bool:
        """Load ``module_path`` and run its initialization entry point.

        Returns:
            ``True`` when the plugin initialized successfully and its schemes
            are registered, ``False`` otherwise (a diagnostic is logged).
        """

        before = set(self.registry.schemes())
        try:
            module = _import_plugin(module_path)
            init = _resolve_init(module_path, module)
            _initialize(module_path, init, self.registry)
        except PluginLoadError as error:
            withdrawn = _withdraw(self.registry, before)
            _LOGGER.warning(
                "Couldn't load plugin.",
                event="modfs.plugin.load_failed",
                context={
                    "module": module_path,
                    "reason": error.reason,
                    "withdrawn": list(withdrawn),
                },
            )
            self._results.append(
                PluginLoadResult(module=module_path, loaded=False, message=error.reason)
            )
            return False

        added = tuple(s for s in self.registry.schemes() if s not in before)
        _LOGGER.info(
            "Plugin loaded.",
            event="modfs.plugin.loaded",
            context={"module": module_path, "schemes": list(added)},
        )
        self._results.append(
            PluginLoadResult(module=module_path, loaded=True, schemes=added)
        )
        return True


def _withdraw(registry: FileSystemRegistry, before: set[str]) -> tuple[str, ...]:
    """Unregister every scheme added since ``before`` was taken."""

    added = tuple(s for s in registry.schemes() if s not in before)
    for scheme in added:
        registry.unregister(scheme)
    return added


def _import_plugin(module_path: str) -> ModuleType:
    if _looks_like_file(module_path):
        return _import_from_file(Path(module_path))
    try:
        return importlib.import_module(module_path)
    except ImportError as error:
        raise PluginLoadError(module_path, f"module could not be imported: {error}") from error
    except Exception as error:
        raise PluginLoadError(module_path, f"module import failed: {error!r}") from error


def _looks_like_file(module_path: str) -> bool:
    return module_path.endswith(".py") or "/" in module_path or "\\" in module_path


def _import_from_file(path: Path) -> ModuleType:
    if not path.is_file():
        raise PluginLoadError(str(path), "module file does not exist")

    digest = hashlib.sha256(str(path.resolve()).encode()).hexdigest()[:12]
    module_name = f"modfs_plugin_{path.stem}_{digest}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(str(path), "module file is not importable")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as error:
        _ = sys.modules.pop(module_name, None)
        raise PluginLoadError(str(path), f"module import failed: {error!r}") from error
    return module


def _resolve_init(module_path: str, module: ModuleType) -> InitFunction:
    init_obj = getattr(module, INIT_SYMBOL, None)
    if init_obj is None:
        raise PluginLoadError(module_path, f"module does not define {INIT_SYMBOL}")
    if not callable(init_obj):
        raise PluginLoadError(module_path, f"{INIT_SYMBOL} is not callable")
    return cast(InitFunction, init_obj)


def _initialize(
    module_path: str, init: InitFunction, registry: FileSystemRegistry
) -> None:
    status = PluginStatus()
    try:
        init(registry, status)
    except Exception as error:
        raise PluginLoadError(
            module_path, f"{INIT_SYMBOL} raised {error!r}"
        ) from error
    if not status.ok:
        detail = f": {status.message}" if status.message else ""
        raise PluginLoadError(
            module_path, f"plugin initialization failed ({status.code.value}{detail})"
        )


__all__ = [
    "INIT_SYMBOL",
    "InitFunction",
    "PluginLoadResult",
    "PluginLoader",
    "PluginStatus",
]
