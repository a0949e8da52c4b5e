"""Atomic single-slot shared cell with compare-and-set updates."""

import itertools
import threading
from typing import TYPE_CHECKING, Any, Callable, Dict, Generic, Optional, Tuple

from ..exceptions import ContentionError
from ..logging import get_logger
from .interfaces import IReference, V

if TYPE_CHECKING:
    from ..config import ConfigManager

logger = get_logger(__name__)

_cell_ids = itertools.count(1)


class AtomicCell(IReference[V], Generic[V]):
    """
    Shared mutable cell holding exactly one value.

    Updates follow a compare-and-set loop: the updater runs outside the lock
    against a versioned snapshot, and the result is stored only if no other
    update committed in between. Otherwise the updater is re-run against the
    fresh value.

    Example usage:
        cell = AtomicCell({"x": 10, "y": 4})
        cell.swap(lambda m: {**m, "x": m["x"] - 1})
        cell.read()  # {"x": 9, "y": 4}
    """

    def __init__(
        self,
        initial: V,
        *,
        max_retries: Optional[int] = None,
        name: Optional[str] = None,
    ):
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be >= 0 or None")

        self.name = name or f"cell-{next(_cell_ids)}"
        self.max_retries = max_retries

        self._lock = threading.Lock()
        self._value = initial
        self._version = 0
        self._updates = 0
        self._retries = 0

    @classmethod
    def from_config(
        cls, initial: V, config: "ConfigManager", name: Optional[str] = None
    ) -> "AtomicCell[V]":
        """Build a cell from the ``cell`` configuration section."""
        cell_config = config.cell
        return cls(
            initial,
            max_retries=cell_config.max_retries,
            name=name or f"{cell_config.name_prefix}-{next(_cell_ids)}",
        )

    def _snapshot(self) -> Tuple[int, V]:
        with self._lock:
            return self._version, self._value

    def read(self) -> V:
        """Return the current value."""
        with self._lock:
            return self._value

    def atomic_update(self, f: Callable[[V], V]) -> V:
        """
        Atomically replace the value with ``f(current)``.

        Exceptions raised by ``f`` propagate and leave the cell unchanged.

        Raises:
            ContentionError: If ``max_retries`` is set and exceeded
        """
        attempt = 0
        while True:
            version, current = self._snapshot()
            new_value = f(current)

            with self._lock:
                if self._version == version:
                    self._value = new_value
                    self._version += 1
                    self._updates += 1
                    return new_value
                self._retries += 1

            attempt += 1
            if self.max_retries is not None and attempt > self.max_retries:
                logger.warning(
                    "Atomic update abandoned under contention",
                    cell=self.name,
                    retry_count=attempt - 1,
                    max_retries=self.max_retries,
                )
                raise ContentionError(
                    f"Cell {self.name} exceeded {self.max_retries} retries",
                    cell_name=self.name,
                    retries=attempt - 1,
                )
            logger.debug("Retrying atomic update", cell=self.name, attempt=attempt)

    def compare_and_set(self, expected: Any, new_value: V) -> bool:
        """
        Store ``new_value`` only if the current value is ``expected``.

        Identity comparison, not equality.

        Returns:
            True if the value was stored
        """
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new_value
            self._version += 1
            self._updates += 1
            return True

    def reset(self, value: V) -> V:
        """Store ``value`` unconditionally."""
        with self._lock:
            self._value = value
            self._version += 1
            self._updates += 1
        return value

    def get_statistics(self) -> Dict[str, Any]:
        """Get cell update statistics."""
        with self._lock:
            return {
                "name": self.name,
                "version": self._version,
                "updates": self._updates,
                "retries": self._retries,
            }

    def __repr__(self) -> str:
        return f"AtomicCell(name={self.name!r}, version={self._version})"
