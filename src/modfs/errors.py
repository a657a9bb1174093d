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

"""Base exception hierarchy for :mod:`modfs`."""

from __future__ import annotations


class ModfsError(Exception):
    """Base class for all modfs exceptions.

    Callers can catch every harness-specific failure with a single handler
    while standard Python exceptions propagate normally.

    Example:
        Catch any modfs-specific error::

            try:
                report = runner.run()
            except ModfsError as e:
                logger.error("Harness error: %s", e)

    Note:
        Subclasses may also inherit from standard exception types (e.g.,
        ``ValueError``, ``RuntimeError``) to enable more specific handling
        when needed.
    """


class SchemeNotRegisteredError(ModfsError, LookupError):
    """Raised when no filesystem backend is registered for a URI scheme.

    Example::

        try:
            fs = registry.lookup("s3")
        except SchemeNotRegisteredError:
            # the s3 plugin was never loaded
            ...
    """

    def __init__(self, scheme: str) -> None:
        super().__init__(f"No filesystem registered for scheme {scheme!r}.")
        self.scheme = scheme


class PluginLoadError(ModfsError, RuntimeError):
    """Raised when a backend module cannot be loaded or initialized.

    The plugin loader converts this error into a ``False`` result and a
    diagnostic log entry; it never escapes :meth:`PluginLoader.load`.
    """

    def __init__(self, module: str, reason: str) -> None:
        super().__init__(f"{module}: {reason}")
        self.module = module
        self.reason = reason


class RootPreparationError(ModfsError, OSError):
    """Raised when the isolated working directory of a scenario cannot be created.

    This indicates an environment problem, not a backend defect, so the
    conformance runner reports the affected scenario as skipped.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"{path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class SelectionFrozenError(ModfsError, RuntimeError):
    """Raised when a scheme is registered after the selection was frozen.

    Scheme selection is write-once: it is populated while processing command
    line flags and becomes read-only before resolution.
    """


__all__ = [
    "ModfsError",
    "PluginLoadError",
    "RootPreparationError",
    "SchemeNotRegisteredError",
    "SelectionFrozenError",
]
