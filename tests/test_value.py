#
# Prettyval - Value Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import array
import collections
import functools

from enum import Enum
from types import MappingProxyType

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.value import KeyKind, Value, ValueKind, classify


# Tests ----------------------------------------------------------------------------------------------------------------

class Plain:
    def method(self):
        return None


class Level(int, Enum):
    LOW = 1


def _gen():
    yield 1


class TestClassify:
    @pytest.mark.parametrize(
        "obj, kind",
        [
            pytest.param(1, ValueKind.PRIMITIVE, id="int"),
            pytest.param("a", ValueKind.PRIMITIVE, id="str"),
            pytest.param(b"a", ValueKind.PRIMITIVE, id="bytes"),
            pytest.param(None, ValueKind.PRIMITIVE, id="none"),
            pytest.param(Level.LOW, ValueKind.OTHER, id="int-enum"),
            pytest.param(len, ValueKind.FUNCTION, id="builtin"),
            pytest.param(Plain, ValueKind.FUNCTION, id="class"),
            pytest.param(Plain().method, ValueKind.FUNCTION, id="bound-method"),
            pytest.param(functools.partial(len), ValueKind.FUNCTION, id="partial"),
            pytest.param({}, ValueKind.PLAIN_OBJECT, id="dict"),
            pytest.param([], ValueKind.ARRAY, id="list"),
            pytest.param((), ValueKind.ARRAY, id="tuple"),
            pytest.param(collections.OrderedDict(), ValueKind.MAP_LIKE, id="ordered-dict"),
            pytest.param(collections.defaultdict(int), ValueKind.MAP_LIKE, id="defaultdict"),
            pytest.param(MappingProxyType({}), ValueKind.MAP_LIKE, id="mapping-proxy"),
            pytest.param(set(), ValueKind.SET_LIKE, id="set"),
            pytest.param(frozenset(), ValueKind.SET_LIKE, id="frozenset"),
            pytest.param({}.keys(), ValueKind.SET_LIKE, id="keys-view"),
            pytest.param(bytearray(), ValueKind.TYPED_ARRAY_LIKE, id="bytearray"),
            pytest.param(array.array("d"), ValueKind.TYPED_ARRAY_LIKE, id="array"),
            pytest.param(memoryview(b"a"), ValueKind.TYPED_ARRAY_LIKE, id="memoryview"),
            pytest.param(collections.deque(), ValueKind.ITERABLE, id="deque"),
            pytest.param(range(1), ValueKind.ITERABLE, id="range"),
            pytest.param(_gen(), ValueKind.OTHER, id="generator"),
            pytest.param(iter([]), ValueKind.OTHER, id="iterator"),
            pytest.param(Plain(), ValueKind.OTHER, id="instance"),
        ],
    )
    def test_kind(self, obj, kind):
        """Discriminate the kind of an object."""
        assert classify(obj) is kind

    def test_collection_kinds(self):
        """Flag kinds whose children come from iteration."""
        assert ValueKind.MAP_LIKE.is_collection
        assert ValueKind.ITERABLE.is_collection
        assert not ValueKind.ARRAY.is_collection
        assert not ValueKind.PLAIN_OBJECT.is_collection


class TestValue:
    def test_root(self):
        """Start at depth 0 with an empty key."""
        root = Value.from_root({"a": 1})
        assert root.depth == 0
        assert root.key == ""
        assert root.kind is ValueKind.PLAIN_OBJECT
        assert root.identity == id(root.content)

    @pytest.mark.parametrize(
        "key, proto_depth, is_public, key_kind",
        [
            pytest.param("a", 0, None, KeyKind.OWN_PUBLIC, id="own-public"),
            pytest.param("_a", 0, None, KeyKind.OWN_PRIVATE, id="own-private"),
            pytest.param("_a", 0, True, KeyKind.OWN_PUBLIC, id="forced-public"),
            pytest.param("a", 2, None, KeyKind.INHERITED, id="inherited"),
            pytest.param(1, 0, None, KeyKind.NON_STR, id="non-str"),
        ],
    )
    def test_property(self, key, proto_depth, is_public, key_kind):
        """Derive the key kind of a property from its key and origin."""
        root = Value.from_root({})
        child = Value.from_property(root, key, [1], proto_depth=proto_depth, is_public=is_public)
        assert child.depth == 1
        assert child.kind is ValueKind.ARRAY
        assert child.key_kind is key_kind

    def test_non_str_key_text(self):
        """Keep a one-line text of non-string keys."""
        child = Value.from_property(Value.from_root({}), (1, 2), "x")
        assert child.key == "(1, 2)"
        assert not child.has_str_key

    def test_collection_entry(self):
        """Mark collection items as synthetic."""
        parent = Value.from_property(Value.from_root({}), "a", [1])
        entry = Value.from_collection_entry(parent, "0", 1)
        assert entry.depth == 2
        assert entry.is_synthetic
        assert entry.key_kind is KeyKind.SYNTHETIC
        assert entry.is_primitive

    def test_immutable(self):
        """Refuse attribute assignment."""
        with pytest.raises(AttributeError):
            Value.from_root(1).depth = 3
