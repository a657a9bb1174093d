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

"""Selection of the URI schemes a harness run exercises."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from ..errors import SelectionFrozenError
from ..runtime.logging import StructuredLogger, get_logger

_LOGGER: StructuredLogger = get_logger(__name__, context={"component": "schemes"})


@dataclass(slots=True)
class SchemeSelection:
    """Pending scheme selection populated from flags.

    A scheme may only become available after a plugin module is loaded, so
    :meth:`resolve` must run after every load has completed. Registration is
    write-once: call :meth:`freeze` when flag processing is done.

    Example::

        selection = SchemeSelection()
        selection.register("file")
        selection.register("gcs")
        selection.freeze()
        selection.resolve(("", "file", "s3"))  # ('file',)
    """

    _pending: list[str] = field(default_factory=list[str])
    _frozen: bool = False

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, scheme: str) -> None:
        """Add ``scheme`` to the pending selection. Duplicates are tolerated.

        Raises:
            SelectionFrozenError: The selection was already frozen.
        """

        if self._frozen:
            msg = f"Cannot register scheme {scheme!r}: selection is frozen."
            raise SelectionFrozenError(msg)
        self._pending.append(scheme)

    def extend(self, schemes: Iterable[str]) -> None:
        for scheme in schemes:
            self.register(scheme)

    def freeze(self) -> None:
        self._frozen = True

    def resolve(self, available: Iterable[str]) -> tuple[str, ...]:
        """Return the schemes to test.

        With a pending selection, the result keeps the selected schemes that
        are available, in selection order and without repeats; unavailable
        ones are dropped. Without a selection, every available scheme is
        returned in sorted order. The result may be empty.
        """

        available_set = set(available)
        if not self._pending:
            return tuple(sorted(available_set))

        resolved: list[str] = []
        for scheme in self._pending:
            if scheme not in available_set:
                _LOGGER.debug(
                    "Dropping unavailable scheme.",
                    event="modfs.scheme.dropped",
                    context={"scheme": scheme},
                )
                continue
            if scheme not in resolved:
                resolved.append(scheme)
        return tuple(resolved)


__all__ = ["SchemeSelection"]
