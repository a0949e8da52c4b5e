"""
Interfaces for readable, atomically updatable references.

Both the shared cell and mapped references implement ``IReference``, which
is what lets a mapped reference serve as the source of another one.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

V = TypeVar("V")


class IReference(ABC, Generic[V]):
    """Interface for a single value supporting snapshot reads and atomic updates."""

    __slots__ = ()

    @abstractmethod
    def read(self) -> V:
        """Return a consistent snapshot of the current value."""
        pass

    @abstractmethod
    def atomic_update(self, f: Callable[[V], V]) -> V:
        """
        Atomically replace the current value with ``f(current)``.

        ``f`` may be called more than once under contention and must be
        free of side effects.

        Args:
            f: Function computing the new value from the current one

        Returns:
            The value that was stored
        """
        pass

    @property
    def value(self) -> V:
        """Current value."""
        return self.read()

    def swap(self, f: Callable[..., V], *args: Any, **kwargs: Any) -> V:
        """Apply ``f(current, *args, **kwargs)`` atomically."""
        return self.atomic_update(lambda current: f(current, *args, **kwargs))

    def reset(self, value: V) -> V:
        """Store ``value`` regardless of the current value."""
        return self.atomic_update(lambda _current: value)


def is_reference(obj: Any) -> bool:
    """Check whether ``obj`` exposes the read/atomic_update capability."""
    if isinstance(obj, IReference):
        return True
    return callable(getattr(obj, "read", None)) and callable(
        getattr(obj, "atomic_update", None)
    )
