"""
Mapped references: derived views over a shared value.

A ``TransformPair`` couples a ``view`` (source value -> representation) with
an ``update`` ((source value, new representation) -> new source value).
Applying a pair to a source yields a ``MappedReference`` whose reads fold the
views outward from the root cell and whose writes fold the updates back
inward, committed as one atomic update of the root.

``view`` and ``update`` must be pure: the root cell re-runs the whole chain
whenever a concurrent write forces a retry.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar

from ..exceptions import InvalidSourceError, InvalidTransform, TransformFailure
from ..logging import get_logger
from .interfaces import IReference, is_reference

logger = get_logger(__name__)

S = TypeVar("S")
R = TypeVar("R")


def _callable_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", type(fn).__name__)


@dataclass(frozen=True)
class TransformPair(Generic[S, R]):
    """
    Immutable (view, update) pair defining one level of representation.

    Calling the pair with a source returns a new ``MappedReference``, so the
    same pair can be reused across any number of sources.
    """

    view: Callable[[S], R]
    update: Callable[[S, R], S]
    name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        for role, fn in (("view", self.view), ("update", self.update)):
            if not callable(fn):
                raise InvalidTransform(
                    f"{role} must be callable, got {type(fn).__name__}",
                    transform=self.name,
                )
        if self.name is None:
            object.__setattr__(
                self,
                "name",
                f"{_callable_name(self.view)}/{_callable_name(self.update)}",
            )

    def __call__(self, source: Any) -> "MappedReference[S, R]":
        return MappedReference(source, self)

    def then(self, other: "TransformPair[R, Any]") -> "TransformPair[S, Any]":
        """Compose with a pair applied on top of this one's representation."""
        return compose(self, other)


def mapping(
    view: Callable[[S], R],
    update: Callable[[S, R], S],
    name: Optional[str] = None,
) -> TransformPair[S, R]:
    """
    Build a reusable reference factory from a view and an update function.

    Args:
        view: Projects a source value to its representation
        update: Given the old source value and a new representation,
            returns the new source value
        name: Optional label used in logs and errors

    Returns:
        A ``TransformPair``; call it with a source to get a ``MappedReference``

    Raises:
        InvalidTransform: If ``view`` or ``update`` is not callable
    """
    return TransformPair(view, update, name)


def _identity_view(source: Any) -> Any:
    return source


def _identity_update(_source: Any, representation: Any) -> Any:
    return representation


def compose(*pairs: TransformPair) -> TransformPair:
    """
    Collapse several pairs into one, the first pair being nearest the source.

    Composing no pairs yields the identity pair.
    """
    if not pairs:
        return TransformPair(_identity_view, _identity_update, "identity")
    if len(pairs) == 1:
        return pairs[0]

    def view(source: Any) -> Any:
        value = source
        for pair in pairs:
            value = pair.view(value)
        return value

    def update(source: Any, representation: Any) -> Any:
        olds = [source]
        for pair in pairs[:-1]:
            olds.append(pair.view(olds[-1]))
        value = representation
        for pair, old in zip(reversed(pairs), reversed(olds)):
            value = pair.update(old, value)
        return value

    return TransformPair(view, update, " -> ".join(p.name or "?" for p in pairs))


class MappedReference(IReference[R], Generic[S, R]):
    """
    Stateless lens over a shared cell or another mapped reference.

    The chain from the root cell is flattened at construction into a tuple
    of transform pairs, so the reference graph is fixed and acyclic. Reads
    take one snapshot of the root; writes are one atomic update of the root.
    """

    __slots__ = ("_source", "_transform", "_root", "_chain")

    def __init__(self, source: Any, transform: TransformPair[S, R]):
        if not is_reference(source):
            raise InvalidSourceError(
                f"Cannot map over {type(source).__name__}: "
                "source must provide read() and atomic_update()",
                source_type=type(source).__name__,
            )
        if not isinstance(transform, TransformPair):
            raise InvalidTransform(
                f"Expected a TransformPair, got {type(transform).__name__}"
            )

        self._source = source
        self._transform = transform
        if isinstance(source, MappedReference):
            self._root = source.root
            self._chain: Tuple[TransformPair, ...] = source.chain + (transform,)
        else:
            self._root = source
            self._chain = (transform,)

    @property
    def source(self) -> Any:
        """Immediate source this reference was built over."""
        return self._source

    @property
    def transform(self) -> TransformPair[S, R]:
        """Transform pair of the outermost level."""
        return self._transform

    @property
    def root(self) -> Any:
        """Root cell at the bottom of the chain."""
        return self._root

    @property
    def chain(self) -> Tuple[TransformPair, ...]:
        """Transform pairs from the root outward."""
        return self._chain

    @property
    def depth(self) -> int:
        """Number of mapping levels between this reference and the root."""
        return len(self._chain)

    def _view_chain(self, root_value: Any) -> Any:
        value = root_value
        for level, pair in enumerate(self._chain, start=1):
            try:
                value = pair.view(value)
            except Exception as e:
                logger.warning(
                    "View failed",
                    transform=pair.name,
                    level=level,
                    error_type=type(e).__name__,
                )
                raise InvalidTransform(
                    f"View {pair.name!r} at level {level} failed: {e}",
                    transform=pair.name,
                    level=level,
                ) from e
        return value

    def read(self) -> R:
        """
        Return the current representation.

        Raises:
            InvalidTransform: If a view in the chain rejects its input
        """
        return self._view_chain(self._root.read())

    def atomic_update(self, f: Callable[[R], R]) -> R:
        """
        Update the representation with ``f`` and propagate to the root.

        The whole chain is recomputed inside a single atomic update of the
        root cell, so concurrent writers never lose each other's changes.

        Args:
            f: Computes the new representation from the current one

        Returns:
            The representation of the committed root value

        Raises:
            TransformFailure: If a view, an update or ``f`` raises; the root
                keeps its previous value
        """
        chain = self._chain
        # Representation of the root value produced by the last updater run
        committed: List[Any] = []

        def updater(root_value: Any) -> Any:
            olds: List[Any] = [root_value]
            for level, pair in enumerate(chain, start=1):
                olds.append(_run_stage("view", level, pair.name, pair.view, olds[-1]))

            value = _run_stage("function", len(chain), _callable_name(f), f, olds[-1])

            for level in range(len(chain), 0, -1):
                pair = chain[level - 1]
                value = _run_stage(
                    "update", level, pair.name, pair.update, olds[level - 1], value
                )
            new_root = value

            for level, pair in enumerate(chain, start=1):
                value = _run_stage("view", level, pair.name, pair.view, value)
            committed[:] = [value]
            return new_root

        self._root.atomic_update(updater)
        logger.debug(
            "Mapped update committed",
            transform=self._transform.name,
            depth=len(chain),
        )
        return committed[0]

    def __repr__(self) -> str:
        return (
            f"MappedReference(transform={self._transform.name!r}, "
            f"depth={len(self._chain)}, root={self._root!r})"
        )


def _run_stage(
    stage: str, level: int, name: Optional[str], fn: Callable[..., Any], *args: Any
) -> Any:
    try:
        return fn(*args)
    except Exception as e:
        logger.warning(
            "Mapped update aborted",
            stage=stage,
            transform=name,
            level=level,
            error_type=type(e).__name__,
        )
        raise TransformFailure(
            f"{stage} {name!r} at level {level} failed: {e}",
            stage=stage,
            transform=name,
            level=level,
            error_type=type(e).__name__,
        ) from e
