"""Shared cells and mapped references."""

from .cell import AtomicCell
from .interfaces import IReference, is_reference
from .mapping import MappedReference, TransformPair, compose, mapping
from .operations import read, reset_ref, update_ref

__all__ = [
    "AtomicCell",
    "IReference",
    "is_reference",
    "MappedReference",
    "TransformPair",
    "compose",
    "mapping",
    "read",
    "reset_ref",
    "update_ref",
]
