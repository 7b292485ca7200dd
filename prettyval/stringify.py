"""
Prettyval stringification engine.

Converts an arbitrary value into a styled Fragment without native recursion: an explicit stack of
frames drives the traversal, each expanded record owning one slot per child to receive the
children fragments in extraction order, whatever the order in which they complete.

Unfolding a value tries, in order: by-passers, primitive formatting, cycle detection, depth cap,
and finally property extraction followed by filter → sort → dedupe → cap. Values resolved by one
of the first four steps are leaves: their fragment is written straight into the slot of their
parent and no frame is pushed for them. A record is folded once all its slots are filled.

Public API:
    stringify(obj, options) -> Fragment
    as_lines(obj, options, styled=True) -> list[str]
    as_string(obj, options, styled=True) -> str
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging

from dataclasses import dataclass, field
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .bypassers import resolve as resolve_by_passers
from .cycles import CycleRegistry, FrameState, is_cycle
from .formatting import FoldContext, Property, dedupe
from .fragments import Fragment, Line
from .marks import MarkId
from .options import Options, RecordOptions
from .properties import extract
from .styles import Role
from .utils import class_name, fmt_type
from .value import Value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(eq=False)
class _Frame:
    """
    A value scheduled for expansion.

    Attributes:
        value: The value.
        ancestors: Identities of the values being expanded above this one.
        parent: Frame whose slot receives the fragment of this one; None for the root.
        slot: Index of that slot.
        children: Children kept by the property pipeline, once expanded.
        slots: One fragment per child, filled as children complete.
        leaves: Whether each child was resolved as a leaf.
        all_count: Number of children before filtering.
    """
    value: Value
    ancestors: tuple[int, ...] = ()
    parent: "_Frame | None" = None
    slot: int = 0
    state: FrameState = FrameState.UNVISITED
    children: list[Value] = field(default_factory=list)
    slots: list[Fragment | None] = field(default_factory=list)
    leaves: list[bool] = field(default_factory=list)
    all_count: int = 0


@dataclass
class _Context:
    """
    Per-call state, created fresh by each stringification and discarded when it returns.

    Attributes:
        rendering: Identities of the mapping keys whose nested stringification encloses this one.
    """
    options: Options
    rendering: tuple[int, ...] = ()
    registry: CycleRegistry = field(default_factory=CycleRegistry)
    record_options: dict[type, RecordOptions] = field(default_factory=dict)
    expanded: int = 0
    cycles: int = 0

    def record_options_for(self, value: Value) -> RecordOptions:
        typ = type(value.content)
        if typ not in self.record_options:
            self.record_options[typ] = self.options.record_options_for(value)
        return self.record_options[typ]


class Stringifier:
    """
    Reusable stringifier bound to one set of options.

    Each call owns an independent cycle registry, so a Stringifier can be shared between
    threads.

    Examples:
        >>> stringifier = Stringifier(Options.single_line())
        >>> stringifier({"a": [7, 8], "b": {"c": 8}}).to_plain()
        '{ a: [ 7, 8 ], b: { c: 8 } }'
    """

    def __init__(self, options: Options | None = None):
        if options is None:
            options = Options()
        if not isinstance(options, Options):
            raise TypeError(f"options must be Options or None, but found {fmt_type(options)}")
        self.options = options

    def __call__(self, obj: Any) -> Fragment:
        return self._run(Value.from_root(obj))

    # Private Methods ----------------------------------

    def _run(self, root: Value, rendering: tuple[int, ...] = ()) -> Fragment:
        ctx = _Context(self.options, rendering)

        state, fragment = self._resolve_leaf(root, (), ctx)
        if state is not FrameState.UNVISITED:
            return fragment

        stack = [_Frame(root)]
        while stack:
            frame = stack.pop()
            if frame.state is FrameState.UNVISITED:
                pending = self._unfold(frame, ctx)
                if pending:
                    # Post-order: the parent is folded once every child above it is
                    stack.append(frame)
                    stack.extend(reversed(pending))
                    continue

            fragment = self._fold(frame, ctx)
            if frame.parent is None:
                logger.debug("Stringified %s: %d records expanded, %d back-references",
                             class_name(root.content), ctx.expanded, ctx.cycles)
                return fragment
            frame.parent.slots[frame.slot] = fragment

        raise AssertionError("traversal stack exhausted before the root was folded")

    def _resolve_leaf(self,
                      value: Value,
                      ancestors: tuple[int, ...],
                      ctx: _Context,
                      ) -> tuple[FrameState, Fragment | None]:
        """Return the state of value with its fragment if it is a leaf, or (UNVISITED, None) if it must be expanded."""
        options = ctx.options

        fragment = resolve_by_passers(options.by_passers, value, options)
        if fragment is not None:
            return FrameState.EXPANDED, fragment

        if value.is_primitive:
            return FrameState.EXPANDED, options.primitive_formatter(value.content, options.style_map, value.depth)

        if is_cycle(value.identity, ancestors):
            return FrameState.CYCLE, self._back_reference(ctx.registry.index_of(value.identity), value)

        if value.depth >= options.max_depth:
            return FrameState.EXPANDED, self._placeholder(value)

        return FrameState.UNVISITED, None

    def _unfold(self, frame: _Frame, ctx: _Context) -> list[_Frame]:
        """Expand frame and return the frames of its children which are not leaves."""
        frame.state = FrameState.EXPANDING
        options = ctx.options
        value = frame.value

        children = extract(value, options.max_prototype_depth, lambda key: self._render_key(key, ctx))
        frame.all_count = len(children)

        children = options.property_filter(children)
        if options.property_sort_order is not None and not value.kind.is_collection:
            children = options.property_sort_order(children)
        if options.dedupe_properties:
            children = dedupe(children)
        children = children[:options.max_property_number]

        frame.children = children
        frame.slots = [None] * len(children)
        frame.leaves = [True] * len(children)

        ancestors = frame.ancestors + (value.identity,)
        pending = []
        for i, child in enumerate(children):
            state, fragment = self._resolve_leaf(child, ancestors, ctx)
            if state is FrameState.UNVISITED:
                frame.leaves[i] = False
                pending.append(_Frame(child, ancestors, parent=frame, slot=i))
                continue
            if state is FrameState.CYCLE:
                ctx.cycles += 1
            frame.slots[i] = fragment

        ctx.expanded += 1
        frame.state = FrameState.EXPANDED
        return pending

    def _fold(self, frame: _Frame, ctx: _Context) -> Fragment:
        """Combine the children fragments of frame into its own fragment."""
        value = frame.value
        params = ctx.record_options_for(value)
        fold_ctx = FoldContext(
            value=value,
            params=params,
            options=ctx.options,
            all_count=frame.all_count,
            actual_count=len(frame.children),
            cycle_index=ctx.registry.get(value.identity),
        )
        properties = [
            params.property_formatter(Property(child, fragment, is_leaf), fold_ctx)
            for child, fragment, is_leaf in zip(frame.children, frame.slots, frame.leaves)
        ]
        return params.record_formatter(properties, fold_ctx)

    def _render_key(self, key: Any, ctx: _Context) -> Line:
        """
        Render a mapping key on one line through an independent stringification.

        A key met again while its own rendering is in progress renders as its placeholder.
        """
        if id(key) in ctx.rendering:
            return self._placeholder(Value.from_root(key)).head
        return self._run(Value.from_root(key), ctx.rendering + (id(key),)).to_single_line().head

    def _back_reference(self, index: int, value: Value) -> Fragment:
        marks, styles, depth = self.options.mark_map, self.options.style_map, value.depth
        return Fragment.of(
            marks.span(MarkId.MESSAGE_START, styles, depth),
            marks.span(MarkId.CIRCULAR_OBJECT, styles, depth),
            styles.span(str(index), Role.MESSAGE, depth),
            marks.span(MarkId.MESSAGE_END, styles, depth),
        )

    def _placeholder(self, value: Value) -> Fragment:
        marks, styles, depth = self.options.mark_map, self.options.style_map, value.depth
        return Fragment.of(
            marks.span(MarkId.MESSAGE_START, styles, depth),
            styles.span(class_name(value.content), Role.MESSAGE, depth),
            marks.span(MarkId.MESSAGE_END, styles, depth),
        )


# Methods --------------------------------------------------------------------------------------------------------------

def stringify(obj: Any, options: Options | None = None) -> Fragment:
    """
    Stringify any value into a styled fragment.

    Never raises on account of the value itself: failing `__str__`, property getters or
    iterations are logged and worked around. Invalid options raise at construction time.

    Args:
        obj: The value to stringify.
        options: Options; defaults to `Options()`, uncolored.

    Returns:
        Fragment: The stringified value, see `Fragment.to_plain()` and `Fragment.to_styled()`.

    Raises:
        TypeError: If options is not an Options instance.

    Examples:
        >>> stringify({"a": [7, 8], "b": {"c": 8}}).to_plain()
        '{ a: [ 7, 8 ], b: { c: 8 } }'

        >>> from collections import OrderedDict
        >>> stringify(OrderedDict([("k1", 3), ("k2", 6)])).to_plain()
        "OrderedDict { 'k1' => 3, 'k2' => 6 }"

        >>> a = {"x": 1}
        >>> a["self"] = a
        >>> stringify(a).to_plain()
        '‹#1› { x: 1, self: [#1] }'
    """
    return Stringifier(options)(obj)


def as_lines(obj: Any, options: Options | None = None, *, styled: bool = True) -> list[str]:
    """Stringify obj and return its lines, styled per the style map of options unless styled is False."""
    fragment = stringify(obj, options)
    return fragment.to_styled_lines() if styled else fragment.to_plain_lines()


def as_string(obj: Any, options: Options | None = None, *, styled: bool = True) -> str:
    """
    Stringify obj and return a single newline-joined string.

    Examples:
        >>> print(as_string([1, {"a": None}], Options.tabify()))
        [
          1,
          {
            a: None
          }
        ]
    """
    return "\n".join(as_lines(obj, options, styled=styled))
