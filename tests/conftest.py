"""Shared pytest fixtures for mapped-refs tests."""

import logging

import pytest

from mapped_refs import AtomicCell, mapping


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo handler changes made by setup_logging during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch):
    """Keep developer environment variables out of config-sensitive tests."""
    for var in [
        "MAPPED_REFS_CONFIG_PATH",
        "MAPPED_REFS_ENVIRONMENT",
        "MAPPED_REFS_MAX_RETRIES",
        "MAPPED_REFS_LOG_LEVEL",
        "MAPPED_REFS_LOG_FORMAT",
        "MAPPED_REFS_REDACT_VALUES",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def counter_cell() -> AtomicCell:
    """Cell holding an integer counter."""
    return AtomicCell(0, name="counter")


@pytest.fixture
def point_cell() -> AtomicCell:
    """Cell holding a mapping with two keys."""
    return AtomicCell({"x": 10, "y": 4}, name="point")


@pytest.fixture
def doubled():
    """Bijective pair: representation is twice the source."""
    return mapping(lambda s: s * 2, lambda _s, r: r // 2, name="doubled")


@pytest.fixture
def fixed_text():
    """Lossy pair: float rendered with two decimals."""
    return mapping(lambda s: f"{s:.2f}", lambda _s, r: float(r), name="fixed2")
