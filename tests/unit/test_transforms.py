"""Tests for the standard transform pairs."""

from collections import OrderedDict, namedtuple
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from mapped_refs import (
    AtomicCell,
    InvalidTransform,
    TransformFailure,
    attr_mapping,
    bijection,
    identity,
    index_mapping,
    path_mapping,
    read,
    reset_ref,
    sub_mapping,
    update_ref,
)


@dataclass(frozen=True)
class Point:
    x: int
    y: int


Pair = namedtuple("Pair", ["left", "right"])


class Settings(BaseModel):
    name: str
    retries: int = 3


class TestIdentity:
    """Test cases for the identity pair."""

    def test_passes_values_through(self, counter_cell):
        """Test identity reads and writes the root value unchanged."""
        ref = identity()(counter_cell)

        assert read(ref) == 0
        update_ref(ref, lambda v: v + 7)
        assert counter_cell.read() == 7
        assert identity().name == "identity"


class TestSubMapping:
    """Test cases for key focus."""

    def test_missing_key_without_default(self):
        """Test that a missing key is an invalid transform on read."""
        ref = sub_mapping("z")(AtomicCell({"x": 1}))

        with pytest.raises(InvalidTransform):
            read(ref)

    def test_missing_key_on_update(self):
        """Test that a missing key aborts an update."""
        cell = AtomicCell({"x": 1})
        ref = sub_mapping("z")(cell)

        with pytest.raises(TransformFailure):
            update_ref(ref, lambda v: v + 1)
        assert cell.read() == {"x": 1}

    def test_default_creates_key(self):
        """Test that a default lets updates add the key."""
        cell = AtomicCell({"x": 1})
        hits = sub_mapping("hits", default=0)(cell)

        assert read(hits) == 0
        update_ref(hits, lambda v: v + 1)
        assert cell.read() == {"x": 1, "hits": 1}

    def test_mapping_type_preserved(self):
        """Test that the source mapping type survives an update."""
        original = OrderedDict([("b", 1), ("a", 2)])
        cell = AtomicCell(original)

        reset_ref(sub_mapping("a")(cell), 20)

        assert type(cell.read()) is OrderedDict
        assert list(cell.read().items()) == [("b", 1), ("a", 20)]
        assert original == OrderedDict([("b", 1), ("a", 2)])

    def test_name(self):
        """Test pair labelling."""
        assert sub_mapping("x").name == "key['x']"


class TestPathMapping:
    """Test cases for nested key paths."""

    def test_get_and_set_in(self):
        """Test reads and writes at a nested path."""
        cell = AtomicCell({"db": {"primary": {"port": 5432, "host": "a"}}, "debug": False})
        port = path_mapping("db", "primary", "port")(cell)

        assert read(port) == 5432
        reset_ref(port, 6543)
        assert cell.read() == {
            "db": {"primary": {"port": 6543, "host": "a"}},
            "debug": False,
        }

    def test_path_is_single_level(self):
        """Test that a path pair is one chain level."""
        assert path_mapping("a", "b")(AtomicCell({"a": {"b": 1}})).depth == 1


class TestIndexMapping:
    """Test cases for sequence positions."""

    def test_list_position(self):
        """Test updating one list element."""
        cell = AtomicCell([1, 2, 3])
        update_ref(index_mapping(1)(cell), lambda v: v * 10)
        assert cell.read() == [1, 20, 3]

    def test_tuple_keeps_type(self):
        """Test tuples stay tuples."""
        cell = AtomicCell((1, 2, 3))
        reset_ref(index_mapping(-1)(cell), 9)
        assert cell.read() == (1, 2, 9)

    def test_namedtuple_keeps_type(self):
        """Test namedtuples are rebuilt with their own type."""
        cell = AtomicCell(Pair(1, 2))
        reset_ref(index_mapping(0)(cell), 5)
        assert cell.read() == Pair(5, 2)
        assert isinstance(cell.read(), Pair)

    def test_out_of_range(self):
        """Test out-of-range index on read."""
        with pytest.raises(InvalidTransform):
            read(index_mapping(5)(AtomicCell([1])))

    def test_int_keyed_mapping_rejected(self):
        """Test that a mapping with integer keys is never rebuilt as a list."""
        cell = AtomicCell({0: "ok", 1: "fail"})
        ref = index_mapping(0)(cell)

        with pytest.raises(InvalidTransform):
            read(ref)
        with pytest.raises(TransformFailure) as exc_info:
            update_ref(ref, lambda _r: "good")

        assert isinstance(exc_info.value.__cause__, TypeError)
        assert cell.read() == {0: "ok", 1: "fail"}

    def test_string_rejected(self):
        """Test that strings are not treated as positional containers."""
        with pytest.raises(InvalidTransform):
            read(index_mapping(0)(AtomicCell("abc")))


class TestAttrMapping:
    """Test cases for record fields."""

    def test_dataclass_field(self):
        """Test frozen dataclasses are replaced, not mutated."""
        original = Point(1, 2)
        cell = AtomicCell(original)

        update_ref(attr_mapping("y")(cell), lambda v: v + 1)

        assert cell.read() == Point(1, 3)
        assert original == Point(1, 2)

    def test_namedtuple_field(self):
        """Test namedtuple fields."""
        cell = AtomicCell(Pair("a", "b"))
        reset_ref(attr_mapping("right")(cell), "c")
        assert cell.read() == Pair("a", "c")

    def test_pydantic_field(self):
        """Test pydantic models are copied with the new field."""
        cell = AtomicCell(Settings(name="svc"))
        update_ref(attr_mapping("retries")(cell), lambda v: v * 2)

        assert cell.read().retries == 6
        assert cell.read().name == "svc"

    def test_unsupported_record(self):
        """Test plain objects cannot be rebuilt."""

        class Plain:
            value = 1

        cell = AtomicCell(Plain())
        ref = attr_mapping("value")(cell)

        assert read(ref) == 1
        with pytest.raises(TransformFailure) as exc_info:
            reset_ref(ref, 2)
        assert exc_info.value.stage == "update"


class TestBijection:
    """Test cases for invertible representations."""

    def test_update_ignores_old_source(self):
        """Test that backward alone defines the new source."""

        def to_kelvin(c):
            return c + 273.15

        def to_celsius(k):
            return k - 273.15

        cell = AtomicCell(0.0)
        kelvin = bijection(to_kelvin, to_celsius)(cell)

        assert read(kelvin) == pytest.approx(273.15)
        reset_ref(kelvin, 373.15)
        assert cell.read() == pytest.approx(100.0)
        assert bijection(to_kelvin, to_celsius).name == "to_kelvin<->to_celsius"
