"""
Prettyval by-passers.

A by-passer supplies a ready-made fragment for a value that should skip generic traversal.
By-passers are tried in order before a value is expanded; the first one returning a fragment wins.

Presets:
    FUNCTION_TO_NAME: functions, methods, partials and classes render as a name label
    OBJECT_AS_STR:    instances whose class overrides __str__ render through it
    NONE_TO_LABEL:    None renders as its label, or as nothing when Options.omit_none is set
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging

from dataclasses import dataclass
from typing import Callable, Iterable, TYPE_CHECKING

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Fragment
from .marks import MarkId
from .styles import Role
from .utils import fmt_type, object_name
from .value import Value, ValueKind

if TYPE_CHECKING:
    from .options import Options

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ByPasser:
    """
    Named rule supplying a fragment for some values.

    Attributes:
        name: Identifier, for debugging.
        action: Callable receiving (value, options) and returning a Fragment, or None when
            the rule does not apply to the value.
    """
    name: str
    action: Callable[[Value, "Options"], Fragment | None]

    def __post_init__(self):
        if not callable(self.action):
            raise TypeError(f"ByPasser action must be callable, but found {fmt_type(self.action)}")

    def __call__(self, value: Value, options: "Options") -> Fragment | None:
        return self.action(value, options)


# Methods --------------------------------------------------------------------------------------------------------------

def resolve(by_passers: Iterable[ByPasser], value: Value, options: "Options") -> Fragment | None:
    """Return the fragment of the first matching by-passer, or None if none matches."""
    for by_passer in by_passers:
        fragment = by_passer(value, options)
        if fragment is not None:
            return fragment
    return None


def function_label(value: Value, options: "Options") -> Fragment:
    """Render a function or class as `[Function: name]` or `[Class: name]`."""
    marks, styles, depth = options.mark_map, options.style_map, value.depth
    start = MarkId.CLASS_NAME_START if isinstance(value.content, type) else MarkId.FUNCTION_NAME_START
    return Fragment.of(
        marks.span(MarkId.MESSAGE_START, styles, depth),
        marks.span(start, styles, depth),
        styles.span(object_name(value.content), Role.FUNCTION_NAME, depth),
        marks.span(MarkId.MESSAGE_END, styles, depth),
    )


# Private Methods ------------------------------------------------------------------------------------------------------

def _function_to_name(value: Value, options: "Options") -> Fragment | None:
    if value.kind is not ValueKind.FUNCTION:
        return None
    return function_label(value, options)


def _object_as_str(value: Value, options: "Options") -> Fragment | None:
    if value.kind is not ValueKind.OTHER:
        return None
    obj = value.content
    if type(obj).__str__ is object.__str__:
        return None
    try:
        text = str(obj)
    except Exception as e:
        logger.debug("__str__ of %s failed, expanding instead: %s: %s", type(obj).__name__, type(e).__name__, e)
        return None
    return Fragment.from_text(text, options.style_map.styler(Role.TO_STRINGED, value.depth))


def _none_to_label(value: Value, options: "Options") -> Fragment | None:
    if value.content is not None:
        return None
    if options.omit_none:
        return Fragment.empty()
    return options.primitive_formatter(None, options.style_map, value.depth)


FUNCTION_TO_NAME = ByPasser("function_to_name", _function_to_name)
OBJECT_AS_STR = ByPasser("object_as_str", _object_as_str)
NONE_TO_LABEL = ByPasser("none_to_label", _none_to_label)

DEFAULT_BY_PASSERS = (FUNCTION_TO_NAME, OBJECT_AS_STR, NONE_TO_LABEL)
