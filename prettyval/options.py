"""
Prettyval options.

Options bundle everything a stringification depends on: traversal limits, by-passers, the property
pipeline, per-kind record formatting, and the collaborators converting primitives, styles and marks
to text.

Per-kind record options are resolved by a fixed-priority discriminator:
    1. exact list → `array`
    2. override table, searched along the MRO (tuple is registered by default)
    3. kind → `plain_object`, `map_like`, `set_like`, `typed_array_like`, `iterable`, `array`
    4. anything else → `record`
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc

from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, Type

# Local ----------------------------------------------------------------------------------------------------------------
from .bypassers import DEFAULT_BY_PASSERS, ByPasser
from .formatting import (
    KEEP_PUBLIC,
    KEY_AND_VALUE,
    SINGLE_LINE,
    TABIFY,
    TREEIFY,
    TREEIFY_HIDE_LEAVES_PROPERTY,
    TREEIFY_PROPERTY,
    VALUE_ONLY,
    PropertyCountMode,
    PropertyFilter,
    PropertyFormatter,
    PropertyOrder,
    RecordFormatter,
    split_on_total_length,
)
from .fragments import Fragment
from .marks import MarkId, MarkMap
from .primitives import PrimitiveFormatter
from .styles import Role, StyleMap
from .utils import fmt_type, fmt_value
from .value import Value, ValueKind

DEFAULT_LINE_LENGTH = 80


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class RecordOptions:
    """
    Formatting options of one kind of record.

    Attributes:
        name: Identifier, for debugging.
        show_name: Show the class name of the record in its header.
        property_count_mode: How the number of properties is shown in the header.
        property_formatter: Composition of each child with its key.
        record_formatter: Assembly of the record, which also decides single vs multi-line.
        key_value_separator: Between a key and its value.
        prototype_mark: Appended to the key once per MRO hop of an inherited attribute.
        single_line_start, single_line_end: Delimiters of a record printed on one line.
        multi_line_start, multi_line_end: Delimiters of a record printed on several lines,
            also used for empty records.
        single_line_in_between, multi_line_in_between: Between properties.
        id_separator: Between the header and the start delimiter.
        property_count_start, property_count_end, property_count_separator: Decorations
            of the property count.

    Examples:
        >>> RecordOptions.array().single_line_start
        '[ '
        >>> RecordOptions.array().merge(single_line_start="[").single_line_start
        '['
    """
    name: str = "record"
    show_name: bool = True
    property_count_mode: PropertyCountMode = PropertyCountMode.NONE
    property_formatter: PropertyFormatter = KEY_AND_VALUE
    record_formatter: RecordFormatter = field(default_factory=lambda: split_on_total_length(DEFAULT_LINE_LENGTH))

    key_value_separator: str = ": "
    prototype_mark: str = "@"
    single_line_start: str = "{ "
    single_line_end: str = " }"
    multi_line_start: str = "{"
    multi_line_end: str = "}"
    single_line_in_between: str = ", "
    multi_line_in_between: str = ","
    id_separator: str = " "
    property_count_start: str = "("
    property_count_end: str = ")"
    property_count_separator: str = ","

    def __post_init__(self):
        try:
            object.__setattr__(self, "property_count_mode", PropertyCountMode(self.property_count_mode))
        except ValueError:
            raise ValueError(f"property_count_mode must be one of {[m.value for m in PropertyCountMode]}, "
                             f"but found {fmt_value(self.property_count_mode)}") from None
        if not isinstance(self.property_formatter, PropertyFormatter):
            raise TypeError(f"property_formatter must be a PropertyFormatter, "
                            f"but found {fmt_type(self.property_formatter)}")
        if not isinstance(self.record_formatter, RecordFormatter):
            raise TypeError(f"record_formatter must be a RecordFormatter, "
                            f"but found {fmt_type(self.record_formatter)}")
        for f in fields(self):
            if f.type in ("str", str) and not isinstance(getattr(self, f.name), str):
                raise TypeError(f"{f.name} must be str, but found {fmt_type(getattr(self, f.name))}")

    def merge(self, **kwargs: Any) -> "RecordOptions":
        """Return a validated copy with some fields replaced."""
        return replace(self, **kwargs)

    # Class Methods ------------------------------------

    @classmethod
    def record(cls) -> "RecordOptions":
        """Generic instances: `Point { x: 1, y: 2 }`."""
        return cls()

    @classmethod
    def plain_object(cls) -> "RecordOptions":
        """Exact dicts: `{ a: 1 }`."""
        return cls(name="plain_object", show_name=False)

    @classmethod
    def array(cls) -> "RecordOptions":
        """Lists: `[ 1, 2 ]`."""
        return cls(
            name="array",
            show_name=False,
            property_count_mode=PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT,
            property_formatter=VALUE_ONLY,
            single_line_start="[ ",
            single_line_end=" ]",
            multi_line_start="[",
            multi_line_end="]",
        )

    @classmethod
    def tuple_(cls) -> "RecordOptions":
        """Tuples: `( 1, 2 )`."""
        return cls.array().merge(
            name="tuple",
            single_line_start="( ",
            single_line_end=" )",
            multi_line_start="(",
            multi_line_end=")",
        )

    @classmethod
    def map_like(cls) -> "RecordOptions":
        """Mappings other than exact dicts: `OrderedDict { 'k1' => 3 }`."""
        return cls(
            name="map_like",
            property_count_mode=PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT,
            key_value_separator=" => ",
        )

    @classmethod
    def set_like(cls) -> "RecordOptions":
        """Sets: `set { 1, 2 }`."""
        return cls(
            name="set_like",
            property_count_mode=PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT,
            property_formatter=VALUE_ONLY,
        )

    @classmethod
    def typed_array_like(cls) -> "RecordOptions":
        """Typed arrays: `bytearray [ 1, 2 ]`."""
        return cls.array().merge(name="typed_array_like", show_name=True)

    @classmethod
    def iterable(cls) -> "RecordOptions":
        """Other collections: `deque [ 1, 2 ]`."""
        return cls.array().merge(name="iterable", show_name=True)


@dataclass
class Options:
    """
    Configuration of a stringification.

    Traversal:
        max_depth: Records at this depth are not expanded and render as a `[<class name>]`
            placeholder. 0 shows only the placeholder of the root.
        max_prototype_depth: Number of classes of the MRO whose attributes are added to the
            own attributes of an instance. 0 shows own attributes only.
        by_passers: Rules tried in order before expanding a value.
        omit_none: With the default by-passers, render None as nothing instead of `None`.

    Property pipeline:
        property_filter: Children failing this filter are dropped.
        property_sort_order: Optional order of the children of records and arrays. Mappings,
            sets and other collections keep their iteration order.
        dedupe_properties: Keep only the first child per key, after sorting.
        max_property_number: Keep at most this number of children per record.

    Per-kind record options:
        record, plain_object, array, map_like, set_like, typed_array_like, iterable: see
            RecordOptions; overrides maps types to RecordOptions, resolved along the MRO.

    Collaborators:
        primitive_formatter: Converts primitives to text.
        style_map: Styling function per role; StyleMap.none() for uncolored output.
        mark_map: Literal decorations (messages, cyclical markers, indentation).

    Class Methods:
        single_line(), tabify(), treeify(), treeify_hide_leaves(), dark_mode(), util_inspect_like()

    Examples:
        >>> options = Options(max_depth=2).add_override(range, RecordOptions.array())
        >>> options.get_override(range(3)).name
        'array'

        >>> Options.treeify().array.property_formatter.name
        'treeify'

    Raises:
        TypeError, ValueError: On invalid option types or values.
        KeyError: When the style map lacks a role or the mark map lacks a mark.
    """
    max_depth: int = 10
    max_prototype_depth: int = 0
    by_passers: tuple[ByPasser, ...] = DEFAULT_BY_PASSERS
    omit_none: bool = False

    property_filter: PropertyFilter = KEEP_PUBLIC
    property_sort_order: PropertyOrder | None = None
    dedupe_properties: bool = False
    max_property_number: int = 100

    record: RecordOptions = field(default_factory=RecordOptions.record)
    plain_object: RecordOptions = field(default_factory=RecordOptions.plain_object)
    array: RecordOptions = field(default_factory=RecordOptions.array)
    map_like: RecordOptions = field(default_factory=RecordOptions.map_like)
    set_like: RecordOptions = field(default_factory=RecordOptions.set_like)
    typed_array_like: RecordOptions = field(default_factory=RecordOptions.typed_array_like)
    iterable: RecordOptions = field(default_factory=RecordOptions.iterable)
    _overrides: Dict[Type, RecordOptions] = field(
        default_factory=lambda: Options.default_overrides()
    )

    primitive_formatter: Callable[..., Fragment] = field(default_factory=PrimitiveFormatter)
    style_map: StyleMap = field(default_factory=StyleMap.none)
    mark_map: MarkMap = field(default_factory=MarkMap.default)

    def __post_init__(self):
        for name in ("max_depth", "max_prototype_depth", "max_property_number"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be int, but found {fmt_type(value)}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, but found {fmt_value(value)}")
        for name in ("omit_none", "dedupe_properties"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be bool, but found {fmt_type(getattr(self, name))}")

        if not isinstance(self.by_passers, abc.Iterable):
            raise TypeError(f"by_passers must be an iterable of ByPasser, but found {fmt_type(self.by_passers)}")
        self.by_passers = tuple(self.by_passers)
        for by_passer in self.by_passers:
            if not isinstance(by_passer, ByPasser):
                raise TypeError(f"by_passers must contain ByPasser items, but found {fmt_type(by_passer)}")

        if not isinstance(self.property_filter, PropertyFilter):
            raise TypeError(f"property_filter must be a PropertyFilter, but found {fmt_type(self.property_filter)}")
        if self.property_sort_order is not None and not isinstance(self.property_sort_order, PropertyOrder):
            raise TypeError(f"property_sort_order must be a PropertyOrder or None, "
                            f"but found {fmt_type(self.property_sort_order)}")

        for name in ("record", "plain_object", "array", "map_like", "set_like", "typed_array_like", "iterable"):
            if not isinstance(getattr(self, name), RecordOptions):
                raise TypeError(f"{name} must be RecordOptions, but found {fmt_type(getattr(self, name))}")
        self.overrides = self._overrides

        if not callable(self.primitive_formatter):
            raise TypeError(f"primitive_formatter must be callable, but found {fmt_type(self.primitive_formatter)}")
        if not isinstance(self.style_map, StyleMap):
            raise TypeError(f"style_map must be a StyleMap, but found {fmt_type(self.style_map)}")
        if not isinstance(self.mark_map, MarkMap):
            raise TypeError(f"mark_map must be a MarkMap, but found {fmt_type(self.mark_map)}")

        # Undeclared roles and marks are reported now rather than halfway through a stringification
        for role in Role:
            self.style_map.styler(role)
        for mark_id in MarkId:
            self.mark_map.get(mark_id)

    # Static Methods -----------------------------------

    @staticmethod
    def default_overrides() -> Dict[Type, RecordOptions]:
        return {tuple: RecordOptions.tuple_()}

    # Class Methods ------------------------------------

    @classmethod
    def single_line(cls) -> "Options":
        """Every record on a single line."""
        return cls().with_record_formatter(SINGLE_LINE)

    @classmethod
    def tabify(cls) -> "Options":
        """Every non-empty record on several lines, indented by two spaces."""
        return cls().with_record_formatter(TABIFY)

    @classmethod
    def treeify(cls) -> "Options":
        """Records drawn as trees with their keys; leaves show `key: value`."""
        return cls().with_record_formatter(TREEIFY).with_property_formatter(TREEIFY_PROPERTY)

    @classmethod
    def treeify_hide_leaves(cls) -> "Options":
        """Records drawn as trees of keys only."""
        return cls().with_record_formatter(TREEIFY).with_property_formatter(TREEIFY_HIDE_LEAVES_PROPERTY)

    @classmethod
    def dark_mode(cls) -> "Options":
        """Default layout with ANSI colors for dark terminals."""
        return cls(style_map=StyleMap.dark_mode())

    @classmethod
    def util_inspect_like(cls) -> "Options":
        """Shallow output with `[Circular *1]` and `<Ref *1>` cyclical markers."""
        return cls(max_depth=2, mark_map=MarkMap.util_inspect_like())

    # Methods and Properties ---------------------

    def merge(self, **kwargs: Any) -> "Options":
        """Return a validated copy with some options replaced."""
        return replace(self, **kwargs)

    def with_record_formatter(self, formatter: RecordFormatter) -> "Options":
        """Return a copy using formatter for every kind of record, overrides included."""
        return self._map_record_options(lambda ro: ro.merge(record_formatter=formatter))

    def with_property_formatter(self, formatter: PropertyFormatter) -> "Options":
        """Return a copy using formatter for every kind of record, overrides included."""
        return self._map_record_options(lambda ro: ro.merge(property_formatter=formatter))

    def add_override(self, typ: type, record_options: RecordOptions) -> "Options":
        """
        Register or override the record options of a type and its subclasses.

        Returns:
            Self, to allow chaining.

        Raises:
            TypeError: If typ or record_options type is invalid.
        """
        if not isinstance(typ, type):
            raise TypeError(f"typ must be a type, got {fmt_type(typ)}")
        if not isinstance(record_options, RecordOptions):
            raise TypeError(f"record_options must be RecordOptions, got {fmt_type(record_options)}")
        self._overrides[typ] = record_options
        return self

    def remove_override(self, typ: type) -> "Options":
        """Remove the record options registered for typ, if any. Returns self."""
        if not isinstance(typ, type):
            raise TypeError(f"typ must be a type, got {fmt_type(typ)}")
        self._overrides.pop(typ, None)
        return self

    def get_override(self, obj: Any) -> RecordOptions | None:
        """
        Get the record options registered for the type of obj, exactly or via inheritance.

        Searches for the nearest ancestor via the MRO; returns None if none is registered.
        """
        obj_type = type(obj)
        if obj_type in self._overrides:
            return self._overrides[obj_type]
        for base in obj_type.__mro__[1:]:
            if base in self._overrides:
                return self._overrides[base]
        return None

    def record_options_for(self, value: Value) -> RecordOptions:
        """Resolve the record options of a non-primitive value."""
        if type(value.content) is list:
            return self.array
        override = self.get_override(value.content)
        if override is not None:
            return override
        by_kind = {
            ValueKind.PLAIN_OBJECT: self.plain_object,
            ValueKind.ARRAY: self.array,
            ValueKind.MAP_LIKE: self.map_like,
            ValueKind.SET_LIKE: self.set_like,
            ValueKind.TYPED_ARRAY_LIKE: self.typed_array_like,
            ValueKind.ITERABLE: self.iterable,
        }
        return by_kind.get(value.kind, self.record)

    @property
    def overrides(self) -> Dict[Type, RecordOptions]:
        return self._overrides

    @overrides.setter
    def overrides(self, value: abc.Mapping[Type, RecordOptions] | None) -> None:
        if value is None:
            self._overrides = Options.default_overrides()
        elif isinstance(value, abc.Mapping):
            for typ, record_options in value.items():
                if not isinstance(typ, type) or not isinstance(record_options, RecordOptions):
                    raise TypeError(f"overrides must map types to RecordOptions, but found "
                                    f"{fmt_type(typ)} → {fmt_type(record_options)}")
            self._overrides = dict(value)
        else:
            raise TypeError(f"overrides must be a mapping or None, but found {fmt_type(value)}")

    # Private Methods ----------------------------------

    def _map_record_options(self, fn: Callable[[RecordOptions], RecordOptions]) -> "Options":
        names = ("record", "plain_object", "array", "map_like", "set_like", "typed_array_like", "iterable")
        changes: dict[str, Any] = {name: fn(getattr(self, name)) for name in names}
        changes["_overrides"] = {typ: fn(ro) for typ, ro in self._overrides.items()}
        return replace(self, **changes)
