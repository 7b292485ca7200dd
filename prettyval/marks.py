"""
Prettyval mark maps.

A mark is a literal decoration string (message delimiters, cyclical markers, indentation fillers)
associated with a style role. Per-kind record delimiters and separators are not marks of the map:
they live in RecordOptions so that each kind of record can carry its own.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc

from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import Mapping

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Span
from .styles import Role, StyleMap
from .utils import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class MarkId(StrEnum):
    MESSAGE_START = "message_start"
    MESSAGE_END = "message_end"
    FUNCTION_NAME_START = "function_name_start"
    CLASS_NAME_START = "class_name_start"
    CIRCULAR_OBJECT = "circular_object"
    CIRCULAR_REFERENCE_START = "circular_reference_start"
    CIRCULAR_REFERENCE_END = "circular_reference_end"
    TAB_INDENT = "tab_indent"
    TREE_INDENT_FIRST_LINE_OF_INIT_PROPS = "tree_indent_first_line_of_init_props"
    TREE_INDENT_TAIL_LINES_OF_INIT_PROPS = "tree_indent_tail_lines_of_init_props"
    TREE_INDENT_FIRST_LINE_OF_LAST_PROP = "tree_indent_first_line_of_last_prop"
    TREE_INDENT_TAIL_LINES_OF_LAST_PROP = "tree_indent_tail_lines_of_last_prop"


@dataclass(frozen=True)
class Mark:
    text: str
    role: Role


_TREE_MARKS = {
    MarkId.TAB_INDENT: Mark("  ", Role.INDENTATION),
    MarkId.TREE_INDENT_FIRST_LINE_OF_INIT_PROPS: Mark("├─ ", Role.INDENTATION),
    MarkId.TREE_INDENT_TAIL_LINES_OF_INIT_PROPS: Mark("│  ", Role.INDENTATION),
    MarkId.TREE_INDENT_FIRST_LINE_OF_LAST_PROP: Mark("└─ ", Role.INDENTATION),
    MarkId.TREE_INDENT_TAIL_LINES_OF_LAST_PROP: Mark("   ", Role.INDENTATION),
}


@dataclass(frozen=True)
class MarkMap:
    """
    Map from mark identifier to Mark.

    Referencing a mark the map does not declare is a configuration error and raises KeyError.

    Examples:
        >>> marks = MarkMap.default()
        >>> marks.text(MarkId.CIRCULAR_REFERENCE_START)
        '‹#'
    """
    name: str
    marks: Mapping[str, Mark] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.marks, abc.Mapping):
            raise TypeError(f"marks must be a mapping, but found {fmt_type(self.marks)}")
        for mark_id, mark in self.marks.items():
            if not isinstance(mark, Mark):
                raise TypeError(f"mark {mark_id!r} must be a Mark, but found {fmt_type(mark)}")

    def get(self, mark_id: str) -> Mark:
        """
        Raises:
            KeyError: If the mark is not declared by this map.
        """
        try:
            return self.marks[mark_id]
        except KeyError:
            raise KeyError(f"mark map '{self.name}' does not declare mark {fmt_value(str(mark_id))}") from None

    def text(self, mark_id: str) -> str:
        return self.get(mark_id).text

    def span(self, mark_id: str, styles: StyleMap, depth: int = 0) -> Span:
        """Return the mark as a span styled per its role at the given depth."""
        mark = self.get(mark_id)
        return styles.span(mark.text, mark.role, depth)

    def with_marks(self, **marks: Mark) -> "MarkMap":
        """Return a copy with some marks overridden; keys are MarkId values."""
        merged = dict(self.marks)
        merged.update({MarkId(k): v for k, v in marks.items()})
        return MarkMap(name=f"{self.name}+", marks=merged)

    @classmethod
    def default(cls) -> "MarkMap":
        return cls(
            name="default",
            marks={
                MarkId.MESSAGE_START: Mark("[", Role.MESSAGE),
                MarkId.MESSAGE_END: Mark("]", Role.MESSAGE),
                MarkId.FUNCTION_NAME_START: Mark("Function: ", Role.MESSAGE),
                MarkId.CLASS_NAME_START: Mark("Class: ", Role.MESSAGE),
                MarkId.CIRCULAR_OBJECT: Mark("#", Role.MESSAGE),
                MarkId.CIRCULAR_REFERENCE_START: Mark("‹#", Role.MESSAGE),
                MarkId.CIRCULAR_REFERENCE_END: Mark("› ", Role.MESSAGE),
                **_TREE_MARKS,
            },
        )

    @classmethod
    def util_inspect_like(cls) -> "MarkMap":
        """Marks mimicking the output of node's util.inspect."""
        return cls(
            name="util_inspect_like",
            marks={
                MarkId.MESSAGE_START: Mark("[", Role.MESSAGE),
                MarkId.MESSAGE_END: Mark("]", Role.MESSAGE),
                MarkId.FUNCTION_NAME_START: Mark("Function: ", Role.MESSAGE),
                MarkId.CLASS_NAME_START: Mark("class ", Role.MESSAGE),
                MarkId.CIRCULAR_OBJECT: Mark("Circular *", Role.MESSAGE),
                MarkId.CIRCULAR_REFERENCE_START: Mark("<Ref *", Role.MESSAGE),
                MarkId.CIRCULAR_REFERENCE_END: Mark("> ", Role.MESSAGE),
                **_TREE_MARKS,
            },
        )
