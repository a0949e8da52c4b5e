"""Function forms of the reference operations, for any conforming source."""

from typing import Any, Callable

from ..exceptions import InvalidSourceError
from .interfaces import is_reference


def _require_reference(ref: Any) -> None:
    if not is_reference(ref):
        raise InvalidSourceError(
            f"{type(ref).__name__} does not provide read() and atomic_update()",
            source_type=type(ref).__name__,
        )


def read(ref: Any) -> Any:
    """Dereference a cell or mapped reference."""
    _require_reference(ref)
    return ref.read()


def update_ref(ref: Any, f: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Atomically apply ``f(current, *args, **kwargs)`` through ``ref``.

    For a mapped reference the change propagates back to the root cell.

    Returns:
        The new value as seen through ``ref``
    """
    _require_reference(ref)
    if args or kwargs:
        return ref.atomic_update(lambda current: f(current, *args, **kwargs))
    return ref.atomic_update(f)


def reset_ref(ref: Any, value: Any) -> Any:
    """Set the value seen through ``ref``, propagating to the root cell."""
    _require_reference(ref)
    return ref.atomic_update(lambda _current: value)
