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

"""Process-scoped harness state and per-scenario test contexts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from ..filesystem import (
    SCHEME_MARKER,
    BackendProvider,
    Code,
    Env,
    PrunableFileSystem,
    RandomAccessFile,
    WritableFile,
    builtin_providers,
    install_providers,
    join_path,
)
from ..runtime.logging import StructuredLogger, get_logger
from ._loader import PluginLoader
from ._roots import TestRootAllocator
from ._schemes import SchemeSelection
from ._verdict import ScenarioSkipped

_ROOT_SETUP_CODES = frozenset({Code.OK, Code.ALREADY_EXISTS, Code.UNIMPLEMENTED})

_LOGGER: StructuredLogger = get_logger(__name__, context={"component": "context"})


@dataclass(slots=True)
class TestContext:
    """State of one scenario instance: scheme, isolated root and ``Env``.

    Handles opened through :meth:`track` are closed when the context ends.
    """

    __test__ = False

    scheme: str
    root: Path
    env: Env
    name: str
    _handles: list[WritableFile | RandomAccessFile] = field(
        default_factory=list[WritableFile | RandomAccessFile]
    )

    def uri_for_path(self, path: str) -> str:
        """Return the reference for ``path`` below the root.

        Local (empty scheme) references are plain paths; otherwise the
        ``<scheme>://`` marker is prepended.
        """

        translated = join_path(self.root.as_posix(), path)
        if not self.scheme:
            return translated
        return f"{self.scheme}{SCHEME_MARKER}{translated}"

    def relative_path(self, absolute_path: str) -> str:
        """Strip the root prefix from ``absolute_path`` when present."""

        prefix = self.root.as_posix()
        if absolute_path.startswith(prefix):
            return absolute_path[len(prefix) :]
        return absolute_path

    def track[H: WritableFile | RandomAccessFile](self, handle: H | None) -> H | None:
        if handle is not None:
            self._handles.append(handle)
        return handle

    def close_handles(self) -> None:
        """Close tracked handles, newest first.

        A handle failing to close is logged and does not stop the others.
        """

        while self._handles:
            handle = self._handles.pop()
            try:
                handle.close()
            except Exception as error:
                _LOGGER.warning(
                    "Couldn't close handle.",
                    event="modfs.context.close_failed",
                    context={
                        "instance": self.name,
                        "scheme": self.scheme,
                        "error": repr(error),
                    },
                )


@dataclass(slots=True)
class HarnessContext:
    """Everything a run shares: backends, scheme selection and root seed.

    Built once at start-up, before any scenario runs, and passed explicitly
    to the resolution and execution phases.
    """

    env: Env
    selection: SchemeSelection
    allocator: TestRootAllocator
    loader: PluginLoader
    _attempts: dict[str, int] = field(default_factory=dict[str, int])

    @classmethod
    def create(
        cls,
        *,
        modules: Iterable[str] = (),
        schemes: Iterable[str] = (),
        base_dir: Path | None = None,
        providers: Iterable[BackendProvider] | None = None,
    ) -> HarnessContext:
        """Install providers, load plugin modules, then freeze the selection."""

        env = Env()
        install_providers(
            env.registry, builtin_providers() if providers is None else providers
        )
        loader = PluginLoader(env.registry)
        for module in modules:
            _ = loader.load(module)

        selection = SchemeSelection()
        selection.extend(schemes)
        selection.freeze()

        allocator = TestRootAllocator(base_dir=base_dir)
        _ = allocator.seed
        return cls(env=env, selection=selection, allocator=allocator, loader=loader)

    def schemes(self) -> tuple[str, ...]:
        """Schemes to test: the selection resolved against registered backends."""

        return self.selection.resolve(self.env.registered_schemes())

    @contextmanager
    def open_context(self, scheme: str, name: str) -> Iterator[TestContext]:
        """Yield a fresh :class:`TestContext` rooted in its own directory.

        Re-running an instance name within one harness gets a distinct root.
        On exit, tracked handles are closed, the root is pruned from backends
        that support it and the host root is released. Cleanup failures are
        logged and never replace the outcome of the scenario.

        Raises:
            RootPreparationError: The host root could not be created.
            ScenarioSkipped: The backend could not mirror the root.
        """

        attempt = self._attempts.get(name, 0) + 1
        self._attempts[name] = attempt
        root = self.allocator.prepare(name if attempt == 1 else f"{name}#{attempt}")
        context = TestContext(scheme=scheme, root=root, env=self.env, name=name)
        with ExitStack() as cleanup:
            cleanup.callback(self.allocator.release, root)
            cleanup.callback(_prune_root, context)
            cleanup.callback(context.close_handles)
            _mirror_root(context)
            yield context


def _mirror_root(context: TestContext) -> None:
    """Create the root, and its ancestors, inside the backend under test.

    Backends backed by the host disk report ``ALREADY_EXISTS``; flat object
    stores may report ``UNIMPLEMENTED``. Both are fine.
    """

    root = PurePosixPath(context.root.as_posix())
    for directory in (*reversed(root.parents[:-1]), root):
        uri = (
            str(directory)
            if not context.scheme
            else f"{context.scheme}{SCHEME_MARKER}{directory}"
        )
        status = context.env.create_dir(uri)
        if status.code not in _ROOT_SETUP_CODES:
            msg = f"Cannot create working directory {uri}: {status}"
            raise ScenarioSkipped(msg)


def _prune_root(context: TestContext) -> None:
    """Drop the root from the backend when it keeps its own tree."""

    uri = context.uri_for_path("")
    try:
        fs, _ = context.env.get_file_system_for_file(uri)
        if not isinstance(fs, PrunableFileSystem):
            return
        fs.delete_recursively(uri)
    except Exception as error:
        _LOGGER.warning(
            "Couldn't prune test root.",
            event="modfs.context.prune_failed",
            context={"instance": context.name, "uri": uri, "error": repr(error)},
        )


__all__ = ["HarnessContext", "TestContext"]
