"""
Prettyval value model.

A Value wraps one node of the value graph being stringified, together with its traversal
metadata: depth in the graph, prototype depth (MRO hops) of the attribute it comes from,
originating key and kind. Values are read-only and never mutate the wrapped content.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import array
import collections.abc as abc
import functools
import inspect

from dataclasses import dataclass, field
from enum import Enum, StrEnum, unique
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Line
from .primitives import PRIMITIVE_TYPES


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class ValueKind(StrEnum):
    """
    Closed set of value kinds, discriminated once per node by `classify()`.
    """
    PRIMITIVE = "primitive"
    ARRAY = "array"
    PLAIN_OBJECT = "plain_object"
    FUNCTION = "function"
    MAP_LIKE = "map_like"
    SET_LIKE = "set_like"
    TYPED_ARRAY_LIKE = "typed_array_like"
    ITERABLE = "iterable"
    OTHER = "other"

    @property
    def is_collection(self) -> bool:
        """Kinds whose children come from iteration rather than from keys."""
        return self in _COLLECTION_KINDS


_COLLECTION_KINDS = frozenset({
    ValueKind.MAP_LIKE,
    ValueKind.SET_LIKE,
    ValueKind.TYPED_ARRAY_LIKE,
    ValueKind.ITERABLE,
})


@unique
class KeyKind(StrEnum):
    OWN_PUBLIC = "own-public"
    OWN_PRIVATE = "own-private"
    INHERITED = "inherited"
    NON_STR = "non-str"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True, eq=False)
class Value:
    """
    A node of the value graph with its traversal metadata.

    Attributes:
        content: The wrapped object.
        kind: Kind of the wrapped object, see `classify()`.
        depth: 0 at the root, parent depth + 1 for children.
        proto_depth: 0 for own attributes, k for attributes found on the k-th class of the MRO.
        key: One-line text of the originating key: attribute name, dict key, index of a
            collection item, or empty string at the root.
        key_label: Pre-rendered label of a mapping entry, used instead of `key` when present.
        is_public: False for attribute names starting with an underscore; dict keys are always public.
        has_str_key: False for dict keys which are not strings.
        is_synthetic: True for values manufactured from collection iteration.

    Examples:
        >>> root = Value.from_root({"a": 1})
        >>> child = Value.from_property(root, "a", 1)
        >>> child.depth, child.kind, child.key_kind
        (1, <ValueKind.PRIMITIVE: 'primitive'>, <KeyKind.OWN_PUBLIC: 'own-public'>)
    """
    content: Any
    kind: ValueKind
    depth: int = 0
    proto_depth: int = 0
    key: str = ""
    key_label: Line | None = field(default=None, repr=False)
    is_public: bool = True
    has_str_key: bool = True
    is_synthetic: bool = False

    # Constructors -----------------------------------

    @classmethod
    def from_root(cls, content: Any) -> "Value":
        return cls(content=content, kind=classify(content))

    @classmethod
    def from_property(cls,
                      parent: "Value",
                      key: Any,
                      content: Any,
                      proto_depth: int = 0,
                      key_label: Line | None = None,
                      is_public: bool | None = None,
                      ) -> "Value":
        """
        Create the value of a property of parent.

        Unless is_public is given, a string key starting with an underscore is private.
        A non-string key is shown through its key_label.
        """
        has_str_key = isinstance(key, str)
        if is_public is None:
            is_public = not (has_str_key and key.startswith("_"))
        return cls(
            content=content,
            kind=classify(content),
            depth=parent.depth + 1,
            proto_depth=proto_depth,
            key=key if has_str_key else _safe_str(key),
            key_label=key_label,
            is_public=is_public,
            has_str_key=has_str_key,
        )

    @classmethod
    def from_collection_entry(cls,
                              parent: "Value",
                              label: str,
                              content: Any,
                              key_label: Line | None = None,
                              ) -> "Value":
        """Create a synthetic value for an item of a collection; label is pre-rendered text."""
        return cls(
            content=content,
            kind=classify(content),
            depth=parent.depth + 1,
            key=label,
            key_label=key_label,
            is_synthetic=True,
        )

    # Properties -------------------------------------

    @property
    def identity(self) -> int:
        return id(self.content)

    @property
    def is_primitive(self) -> bool:
        return self.kind is ValueKind.PRIMITIVE

    @property
    def is_function(self) -> bool:
        return self.kind is ValueKind.FUNCTION

    @property
    def key_kind(self) -> KeyKind:
        if self.is_synthetic:
            return KeyKind.SYNTHETIC
        if not self.has_str_key:
            return KeyKind.NON_STR
        if self.proto_depth > 0:
            return KeyKind.INHERITED
        return KeyKind.OWN_PUBLIC if self.is_public else KeyKind.OWN_PRIVATE


# Methods --------------------------------------------------------------------------------------------------------------

def classify(obj: Any) -> ValueKind:
    """
    Discriminate the kind of an object.

    Checks are applied in a fixed order: primitives (enum members excluded), callables and classes, exact dicts,
    lists and tuples, mappings, sets, typed arrays, other sized collections, anything else.
    Iterators and generators are not collections and fall in the OTHER kind, so they are
    never consumed.

    Examples:
        >>> classify(1), classify([]), classify({}), classify(len)
        (<ValueKind.PRIMITIVE: 'primitive'>, <ValueKind.ARRAY: 'array'>, <ValueKind.PLAIN_OBJECT: 'plain_object'>, <ValueKind.FUNCTION: 'function'>)
    """
    if isinstance(obj, PRIMITIVE_TYPES) and not isinstance(obj, Enum):
        return ValueKind.PRIMITIVE
    if isinstance(obj, type) or inspect.isroutine(obj) or isinstance(obj, functools.partial):
        return ValueKind.FUNCTION
    if type(obj) is dict:
        return ValueKind.PLAIN_OBJECT
    if isinstance(obj, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(obj, abc.Mapping):
        return ValueKind.MAP_LIKE
    if isinstance(obj, abc.Set):
        return ValueKind.SET_LIKE
    if isinstance(obj, (array.array, bytearray, memoryview)):
        return ValueKind.TYPED_ARRAY_LIKE
    if isinstance(obj, abc.Collection):
        return ValueKind.ITERABLE
    return ValueKind.OTHER


def _safe_str(obj: Any) -> str:
    try:
        return str(obj)
    except Exception as e:
        return f"<{type(obj).__name__} object (str failed: {type(e).__name__})>"
