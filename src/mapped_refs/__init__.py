"""
Mapped references: read and write a shared value through transformations.

A mapped reference is a derived view over an atomic shared cell (or over
another mapped reference). Reads apply the chain of ``view`` functions; writes
run the chain of ``update`` functions back to the root inside one atomic
update of the cell.

    from mapped_refs import AtomicCell, mapping, read, update_ref

    cell = AtomicCell(0.0)
    as_text = mapping(lambda x: f"{x:.2f}", lambda _old, s: float(s))(cell)
    update_ref(as_text, lambda s: "3.14159")
    read(cell)     # 3.14159
    read(as_text)  # "3.14"
"""

__version__ = "0.1.0"

from .config import ConfigManager
from .exceptions import (
    ConfigurationError,
    ContentionError,
    InvalidSourceError,
    InvalidTransform,
    MappedRefError,
    TransformFailure,
)
from .logging import get_logger, setup_logging
from .refs import (
    AtomicCell,
    IReference,
    MappedReference,
    TransformPair,
    compose,
    is_reference,
    mapping,
    read,
    reset_ref,
    update_ref,
)
from .transforms import (
    attr_mapping,
    bijection,
    identity,
    index_mapping,
    path_mapping,
    sub_mapping,
)

__all__ = [
    "__version__",
    # Core
    "AtomicCell",
    "IReference",
    "MappedReference",
    "TransformPair",
    "compose",
    "is_reference",
    "mapping",
    "read",
    "reset_ref",
    "update_ref",
    # Transforms
    "attr_mapping",
    "bijection",
    "identity",
    "index_mapping",
    "path_mapping",
    "sub_mapping",
    # Errors
    "MappedRefError",
    "InvalidTransform",
    "TransformFailure",
    "InvalidSourceError",
    "ContentionError",
    "ConfigurationError",
    # Ambient
    "ConfigManager",
    "setup_logging",
    "get_logger",
]
