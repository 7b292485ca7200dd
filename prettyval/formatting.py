"""
Prettyval formatting pipeline.

Building blocks applied to the children of a record, in this order:
    1. PropertyFilter:    drop children failing a predicate
    2. PropertyOrder:     sort children (records and arrays only; collections keep iteration order)
    3. dedupe():          keep the first child per distinct key
    4. cap:               keep the first `max_property_number` children
    5. PropertyFormatter: combine the fragment of each child with its key
    6. RecordFormatter:   assemble the composed properties on one or several lines, with the
                          delimiters of the record styled by depth

The first four steps run when a record is expanded, the last two when it is folded.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import Any, Callable, Iterable, Sequence, TYPE_CHECKING

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Fragment, Line, Span, join_fragments
from .marks import MarkId
from .styles import Role
from .utils import class_name, fmt_type, fmt_value
from .value import Value, ValueKind

if TYPE_CHECKING:
    from .options import Options, RecordOptions


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class PropertyCountMode(StrEnum):
    """
    How the number of properties of a record is shown in its header:
        - "none": not shown
        - "all": number of children before filtering, e.g. (5)
        - "actual": number of children shown, e.g. (3)
        - "all_and_actual": both, e.g. (5,3)
        - "all_and_actual_if_different": both, only when they differ
    """
    NONE = "none"
    ALL = "all"
    ACTUAL = "actual"
    ALL_AND_ACTUAL = "all_and_actual"
    ALL_AND_ACTUAL_IF_DIFFERENT = "all_and_actual_if_different"


@dataclass(frozen=True)
class PropertyFilter:
    """
    Named predicate keeping the children for which it returns True.

    Examples:
        >>> public_data = PropertyFilter.all_of(KEEP_PUBLIC, REMOVE_FUNCTIONS)
        >>> public_data.name
        'keep_public+remove_functions'
    """
    name: str
    predicate: Callable[[Value], bool]

    def __post_init__(self):
        if not callable(self.predicate):
            raise TypeError(f"PropertyFilter predicate must be callable, but found {fmt_type(self.predicate)}")

    def __call__(self, values: Iterable[Value]) -> list[Value]:
        return [v for v in values if self.predicate(v)]

    def negate(self) -> "PropertyFilter":
        predicate = self.predicate
        return PropertyFilter(f"not_{self.name}", lambda v: not predicate(v))

    @classmethod
    def all_of(cls, *filters: "PropertyFilter") -> "PropertyFilter":
        """Combine filters; a child is kept when every filter keeps it."""
        predicates = tuple(f.predicate for f in filters)
        return cls("+".join(f.name for f in filters), lambda v: all(p(v) for p in predicates))

    @classmethod
    def from_key_predicate(cls, predicate: Callable[[str], bool], name: str = "key_predicate") -> "PropertyFilter":
        """Keep the children whose one-line key satisfies predicate."""
        return cls(name, lambda v: predicate(v.key))


KEEP_ALL = PropertyFilter("keep_all", lambda v: True)
KEEP_PUBLIC = PropertyFilter("keep_public", lambda v: v.is_public)
REMOVE_PUBLIC = PropertyFilter("remove_public", lambda v: not v.is_public)
KEEP_FUNCTIONS = PropertyFilter("keep_functions", lambda v: v.is_function)
REMOVE_FUNCTIONS = PropertyFilter("remove_functions", lambda v: not v.is_function)
KEEP_STR_KEYS = PropertyFilter("keep_str_keys", lambda v: v.has_str_key)
REMOVE_STR_KEYS = PropertyFilter("remove_str_keys", lambda v: not v.has_str_key)


@dataclass(frozen=True)
class PropertyOrder:
    """
    Named sort of children, made of one or several (key, reverse) steps.

    Steps are applied by priority: the first step decides, the next ones break ties.
    Sorting is stable, so children equal for every step keep their extraction order.

    Examples:
        >>> order = PropertyOrder.combine(BY_PROTO_DEPTH, BY_KEY)
        >>> order.name
        'by_proto_depth+by_key'
    """
    name: str
    steps: tuple[tuple[Callable[[Value], Any], bool], ...]

    def __call__(self, values: Iterable[Value]) -> list[Value]:
        result = list(values)
        for key, reverse in reversed(self.steps):
            result.sort(key=key, reverse=reverse)
        return result

    @classmethod
    def by(cls, name: str, key: Callable[[Value], Any], reverse: bool = False) -> "PropertyOrder":
        if not callable(key):
            raise TypeError(f"PropertyOrder key must be callable, but found {fmt_type(key)}")
        return cls(name, ((key, reverse),))

    @classmethod
    def combine(cls, *orders: "PropertyOrder") -> "PropertyOrder":
        return cls("+".join(o.name for o in orders), tuple(step for o in orders for step in o.steps))

    def reversed(self) -> "PropertyOrder":
        return PropertyOrder(f"{self.name}_reversed", tuple((key, not rev) for key, rev in self.steps))


BY_KEY = PropertyOrder.by("by_key", lambda v: v.key)
BY_PROTO_DEPTH = PropertyOrder.by("by_proto_depth", lambda v: v.proto_depth)
BY_CALLABILITY = PropertyOrder.by("by_callability", lambda v: v.is_function)
BY_KIND = PropertyOrder.by("by_kind", lambda v: v.kind.value)
BY_PUBLICITY = PropertyOrder.by("by_publicity", lambda v: not v.is_public)


def dedupe(values: Iterable[Value]) -> list[Value]:
    """Keep the first child per distinct key; a str key and a non-str key never collide."""
    seen: set[tuple[bool, str]] = set()
    result = []
    for v in values:
        k = (v.has_str_key, v.key)
        if k not in seen:
            seen.add(k)
            result.append(v)
    return result


@dataclass(frozen=True)
class Property:
    """Folded child of a record: its Value, its fragment, and whether it was rendered as a leaf."""
    value: Value
    fragment: Fragment
    is_leaf: bool = True


@dataclass(frozen=True)
class FoldContext:
    """
    Everything a formatter needs to know about the record being folded.

    Attributes:
        value: The record.
        params: Formatting options of the kind of the record.
        options: Global options, giving access to the style and mark maps.
        all_count: Number of children before filtering.
        actual_count: Number of children shown.
        cycle_index: Index of the record in the cycle registry, if some descendant refers back to it.
    """
    value: Value
    params: "RecordOptions"
    options: "Options"
    all_count: int = 0
    actual_count: int = 0
    cycle_index: int | None = None

    def span(self, text: str, role: str) -> Span:
        return self.options.style_map.span(text, role, self.value.depth)

    def mark(self, mark_id: str) -> Span:
        return self.options.mark_map.span(mark_id, self.options.style_map, self.value.depth)

    def delimiter(self, text: str) -> Span:
        """Record delimiters are styled by depth through the color wheel of the DELIMITERS role."""
        return self.span(text, Role.DELIMITERS)

    def key_label(self, child: Value) -> Line:
        """Rendered key of child, followed by one prototype mark per MRO hop."""
        if child.key_label is not None:
            label = child.key_label
        else:
            if child.is_function:
                role = Role.KEY_WHEN_FUNCTION
            elif not child.has_str_key:
                role = Role.KEY_WHEN_NON_STR
            else:
                role = Role.KEY_WHEN_OTHER
            label = (self.span(child.key, role),)
        if child.proto_depth > 0:
            label += (self.span(self.params.prototype_mark * child.proto_depth, Role.PROTOTYPE_MARK),)
        return label

    def header(self, with_separator: bool = True) -> Line:
        """
        Header of the record: cycle opening marker, class name and property count.

        The id separator follows the name and count when with_separator is set and they are shown.
        """
        spans: list[Span] = []
        if self.cycle_index is not None:
            spans += [
                self.mark(MarkId.CIRCULAR_REFERENCE_START),
                self.span(str(self.cycle_index), Role.MESSAGE),
                self.mark(MarkId.CIRCULAR_REFERENCE_END),
            ]

        label: list[Span] = []
        p = self.params
        if p.show_name:
            label.append(self.span(class_name(self.value.content), Role.NAME))
        count = _property_count(p.property_count_mode, self.all_count, self.actual_count, p.property_count_separator)
        if count is not None:
            label += [
                self.span(p.property_count_start, Role.PROPERTY_COUNT),
                self.span(count, Role.PROPERTY_COUNT),
                self.span(p.property_count_end, Role.PROPERTY_COUNT),
            ]
        if label and with_separator:
            label.append(self.span(p.id_separator, Role.NAME))
        return tuple(spans + label)


@dataclass(frozen=True)
class PropertyFormatter:
    """Named composition of the fragment of a child with its key."""
    name: str
    action: Callable[[Property, FoldContext], Fragment]

    def __call__(self, prop: Property, ctx: FoldContext) -> Fragment:
        return self.action(prop, ctx)


@dataclass(frozen=True)
class RecordFormatter:
    """Named assembly of the composed properties of a record into the fragment of the record."""
    name: str
    action: Callable[[Sequence[Fragment], FoldContext], Fragment] = field(repr=False)

    def __call__(self, properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
        return self.action(properties, ctx)


# Property Formatters --------------------------------------------------------------------------------------------------

def _value_only(prop: Property, ctx: FoldContext) -> Fragment:
    return prop.fragment


def _key_and_value(prop: Property, ctx: FoldContext) -> Fragment:
    key = ctx.key_label(prop.value)
    if prop.fragment.is_empty:
        return Fragment((key,))
    separator = ctx.span(ctx.params.key_value_separator, Role.KEY_VALUE_SEPARATOR)
    return prop.fragment.prepend_to_first_line(*key, separator)


def _treeify(prop: Property, ctx: FoldContext) -> Fragment:
    if prop.is_leaf:
        return _key_and_value(prop, ctx)
    return _key_above_children(prop, ctx)


def _treeify_hide_leaves(prop: Property, ctx: FoldContext) -> Fragment:
    if prop.is_leaf:
        return Fragment((ctx.key_label(prop.value),))
    return _key_above_children(prop, ctx)


def _key_above_children(prop: Property, ctx: FoldContext) -> Fragment:
    # The first line of an expanded child is its header, usually empty
    key = ctx.key_label(prop.value)
    if prop.fragment.head:
        key += (ctx.span(ctx.params.id_separator, Role.NAME),)
    return prop.fragment.prepend_to_first_line(*key)


VALUE_ONLY = PropertyFormatter("value_only", _value_only)
KEY_AND_VALUE = PropertyFormatter("key_and_value", _key_and_value)
TREEIFY_PROPERTY = PropertyFormatter("treeify", _treeify)
TREEIFY_HIDE_LEAVES_PROPERTY = PropertyFormatter("treeify_hide_leaves", _treeify_hide_leaves)


# Record Formatters ----------------------------------------------------------------------------------------------------

def _empty_record(ctx: FoldContext) -> Fragment:
    p = ctx.params
    return Fragment.of(*ctx.header(), ctx.delimiter(p.multi_line_start), ctx.delimiter(p.multi_line_end))


def _single_line(properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
    if not properties:
        return _empty_record(ctx)
    p = ctx.params
    separator = ctx.span(p.single_line_in_between, Role.IN_BETWEEN_SEPARATOR)
    spans: list[Span] = [*ctx.header(), ctx.delimiter(p.single_line_start)]
    for i, fragment in enumerate(properties):
        if i:
            spans.append(separator)
        spans.extend(span for line in fragment for span in line)
    spans.append(ctx.delimiter(p.single_line_end))
    return Fragment.of(*spans)


def _tabify(properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
    if not properties:
        return _empty_record(ctx)
    p = ctx.params
    separator = ctx.span(p.multi_line_in_between, Role.IN_BETWEEN_SEPARATOR)
    tab = ctx.mark(MarkId.TAB_INDENT)
    body = join_fragments(properties, (separator,)).prepend_to_all_lines(tab)
    first = Fragment.of(*ctx.header(), ctx.delimiter(p.multi_line_start))
    return first.concat(body, Fragment.of(ctx.delimiter(p.multi_line_end)))


def _treeify_record(properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
    init_first = ctx.mark(MarkId.TREE_INDENT_FIRST_LINE_OF_INIT_PROPS)
    init_tail = ctx.mark(MarkId.TREE_INDENT_TAIL_LINES_OF_INIT_PROPS)
    last_first = ctx.mark(MarkId.TREE_INDENT_FIRST_LINE_OF_LAST_PROP)
    last_tail = ctx.mark(MarkId.TREE_INDENT_TAIL_LINES_OF_LAST_PROP)
    last = len(properties) - 1
    body = [
        fragment.indent((last_first,), (last_tail,)) if i == last else fragment.indent((init_first,), (init_tail,))
        for i, fragment in enumerate(properties)
    ]
    return Fragment.of(*ctx.header(with_separator=False)).concat(*body)


SINGLE_LINE = RecordFormatter("single_line", _single_line)
TABIFY = RecordFormatter("tabify", _tabify)
TREEIFY = RecordFormatter("treeify", _treeify_record)


def _split(name: str, measure: Callable[[Sequence[Fragment]], int], limit: int) -> RecordFormatter:
    if not isinstance(limit, int) or isinstance(limit, bool):
        raise TypeError(f"limit must be int, but found {fmt_type(limit)}")
    if limit < 0:
        raise ValueError(f"limit must be non-negative, but found {fmt_value(limit)}")

    def action(properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
        formatter = _single_line if measure(properties) <= limit else _tabify
        return formatter(properties, ctx)

    return RecordFormatter(f"{name}_{limit}", action)


def split_on_property_count(limit: int) -> RecordFormatter:
    """Single line when the record shows at most limit properties, tabified otherwise."""
    return _split("split_on_property_count", len, limit)


def split_on_total_length(limit: int) -> RecordFormatter:
    """
    Single line when the total length of the composed properties is at most limit, tabified otherwise.

    Delimiters, separators and header are not counted.
    """
    return _split("split_on_total_length", lambda props: sum(f.width for f in props), limit)


def split_on_longest_property(limit: int) -> RecordFormatter:
    """Single line when the longest composed property is at most limit long, tabified otherwise."""
    return _split("split_on_longest_property", lambda props: max((f.width for f in props), default=0), limit)


def _split_non_arrays(properties: Sequence[Fragment], ctx: FoldContext) -> Fragment:
    formatter = _single_line if ctx.value.kind is ValueKind.ARRAY else _tabify
    return formatter(properties, ctx)


SPLIT_NON_ARRAYS = RecordFormatter("split_non_arrays", _split_non_arrays)


# Private Methods ------------------------------------------------------------------------------------------------------

def _property_count(mode: PropertyCountMode, all_count: int, actual_count: int, separator: str) -> str | None:
    if mode is PropertyCountMode.ALL:
        return str(all_count)
    if mode is PropertyCountMode.ACTUAL:
        return str(actual_count)
    if mode is PropertyCountMode.ALL_AND_ACTUAL or (
            mode is PropertyCountMode.ALL_AND_ACTUAL_IF_DIFFERENT and all_count != actual_count):
        return f"{all_count}{separator}{actual_count}"
    return None
