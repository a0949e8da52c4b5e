"""
Reusable transform pairs for structured values.

Every ``update`` here builds a new source value and leaves the old one
untouched, so the pairs are safe to re-run when a cell retries.
"""

import copy
import dataclasses
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, Callable, Hashable

from pydantic import BaseModel

from .refs.mapping import TransformPair, compose, mapping


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def identity() -> TransformPair:
    """Pair that passes values through unchanged."""
    return compose()


def sub_mapping(key: Hashable, default: Any = MISSING) -> TransformPair:
    """
    Focus on one key of a mapping-valued source.

    Args:
        key: Key to focus on
        default: Value seen when the key is absent; without it a missing
            key raises ``KeyError``

    Returns:
        Pair whose update replaces only ``key`` in a shallow copy
    """

    def view(source: Mapping) -> Any:
        if default is MISSING:
            return source[key]
        return source.get(key, default)

    def update(source: Mapping, representation: Any) -> Mapping:
        if isinstance(source, MutableMapping):
            new_source = copy.copy(source)
        else:
            new_source = dict(source)
        new_source[key] = representation
        return new_source

    return mapping(view, update, name=f"key[{key!r}]")


def path_mapping(*keys: Hashable) -> TransformPair:
    """Focus on a nested value through a path of mapping keys."""
    return compose(*(sub_mapping(key) for key in keys))


def _require_sequence(source: Any) -> None:
    if not isinstance(source, Sequence) or isinstance(source, (str, bytes)):
        raise TypeError(
            f"Positional focus needs a list or tuple, got {type(source).__name__}"
        )


def index_mapping(index: int) -> TransformPair:
    """Focus on one position of a tuple or list."""

    def view(source: Sequence) -> Any:
        _require_sequence(source)
        return source[index]

    def update(source: Sequence, representation: Any) -> Sequence:
        _require_sequence(source)
        items = list(source)
        items[index] = representation
        if isinstance(source, tuple) and not hasattr(source, "_fields"):
            return tuple(items)
        if isinstance(source, tuple):
            return type(source)(*items)
        return items

    return mapping(view, update, name=f"index[{index}]")


def attr_mapping(name: str) -> TransformPair:
    """
    Focus on one field of a dataclass, namedtuple or pydantic model.

    Updates go through ``dataclasses.replace``, ``_replace`` or
    ``model_copy`` respectively, so the original instance is never mutated.
    """

    def view(source: Any) -> Any:
        return getattr(source, name)

    def update(source: Any, representation: Any) -> Any:
        if isinstance(source, BaseModel):
            return source.model_copy(update={name: representation})
        if dataclasses.is_dataclass(source) and not isinstance(source, type):
            return dataclasses.replace(source, **{name: representation})
        if isinstance(source, tuple) and hasattr(source, "_replace"):
            return source._replace(**{name: representation})
        raise TypeError(
            f"Cannot rebuild {type(source).__name__} with a new {name!r}"
        )

    return mapping(view, update, name=f"attr[{name}]")


def bijection(
    forward: Callable[[Any], Any], backward: Callable[[Any], Any]
) -> TransformPair:
    """
    Pair for an invertible representation.

    ``update`` ignores the old source and returns ``backward(representation)``.
    """

    def update(_source: Any, representation: Any) -> Any:
        return backward(representation)

    return mapping(
        forward,
        update,
        name=f"{getattr(forward, '__name__', 'forward')}<->"
        f"{getattr(backward, '__name__', 'backward')}",
    )
