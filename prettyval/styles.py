"""
Prettyval style maps.

A StyleMap associates each semantic role of the output (string values, keys, delimiters,...) with
a text-styling function. Roles that must vary with nesting depth are mapped to a ColorWheel,
a cyclic sequence of styling functions indexed by depth.

Presets:
    StyleMap.none():      identity styling, for uncolored output
    StyleMap.dark_mode(): ANSI colors suited to dark terminals, built on yachalk
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc

from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import Mapping

# Third party ----------------------------------------------------------------------------------------------------------
from yachalk import chalk

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Span, StyleFn, unstyled
from .utils import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Role(StrEnum):
    """Semantic roles of the parts of a stringified value."""
    MESSAGE = "message"
    STRING_DELIMITERS = "string_delimiters"
    STRING_VALUE = "string_value"
    BYTES_VALUE = "bytes_value"
    NUMBER_VALUE = "number_value"
    BOOLEAN_VALUE = "boolean_value"
    NONE_VALUE = "none_value"
    OTHER_VALUE = "other_value"
    KEY_WHEN_FUNCTION = "key_when_function"
    KEY_WHEN_NON_STR = "key_when_non_str"
    KEY_WHEN_OTHER = "key_when_other"
    IN_BETWEEN_SEPARATOR = "in_between_separator"
    DELIMITERS = "delimiters"
    NAME = "name"
    PROPERTY_COUNT = "property_count"
    KEY_VALUE_SEPARATOR = "key_value_separator"
    PROTOTYPE_MARK = "prototype_mark"
    INDENTATION = "indentation"
    FUNCTION_NAME = "function_name"
    TO_STRINGED = "to_stringed"


@dataclass(frozen=True)
class ColorWheel:
    """
    Depth-indexed cyclic sequence of styling functions.

    The styling function used at depth n is `styles[n % len(styles)]`.

    Examples:
        >>> wheel = ColorWheel((str.upper, str.lower))
        >>> wheel.at(2)("Ab"), wheel.at(3)("Ab")
        ('AB', 'ab')
    """
    styles: tuple[StyleFn, ...]

    def __post_init__(self):
        if not self.styles:
            raise ValueError("ColorWheel requires at least one styling function")
        for style in self.styles:
            if not callable(style):
                raise TypeError(f"ColorWheel styles must be callable, but found {fmt_type(style)}")

    def __len__(self) -> int:
        return len(self.styles)

    def at(self, depth: int) -> StyleFn:
        return self.styles[depth % len(self.styles)]

    @classmethod
    def ansi(cls) -> "ColorWheel":
        """Green, yellow, magenta, cyan, red, blue, white."""
        return cls((chalk.green, chalk.yellow, chalk.magenta, chalk.cyan, chalk.red, chalk.blue, chalk.white))


@dataclass(frozen=True)
class StyleMap:
    """
    Map from semantic role to styling function or ColorWheel.

    Referencing a role the map does not declare is a configuration error and raises KeyError.

    Attributes:
        name: Identifier of the map, for debugging.
        styles: Mapping of Role (or role name) to a styling function or a ColorWheel.
    """
    name: str
    styles: Mapping[str, StyleFn | ColorWheel] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.styles, abc.Mapping):
            raise TypeError(f"styles must be a mapping, but found {fmt_type(self.styles)}")
        for role, style in self.styles.items():
            if not (callable(style) or isinstance(style, ColorWheel)):
                raise TypeError(f"style for role {role!r} must be callable or a ColorWheel, "
                                f"but found {fmt_type(style)}")

    def __contains__(self, role: str) -> bool:
        return role in self.styles

    def styler(self, role: str, depth: int = 0) -> StyleFn:
        """
        Return the styling function of a role at the given depth.

        Raises:
            KeyError: If the role is not declared by this map.
        """
        try:
            style = self.styles[role]
        except KeyError:
            raise KeyError(f"style map '{self.name}' does not declare role {fmt_value(str(role))}") from None
        return style.at(depth) if isinstance(style, ColorWheel) else style

    def span(self, text: str, role: str, depth: int = 0) -> Span:
        """Return text as a span styled per role."""
        return Span(text, self.styler(role, depth))

    def with_styles(self, **styles: StyleFn | ColorWheel) -> "StyleMap":
        """Return a copy with some roles overridden; keys are Role values."""
        merged = dict(self.styles)
        merged.update({Role(k): v for k, v in styles.items()})
        return StyleMap(name=f"{self.name}+", styles=merged)

    @classmethod
    def none(cls) -> "StyleMap":
        """Identity styling for every role."""
        return cls(name="none", styles={role: unstyled for role in Role})

    @classmethod
    def dark_mode(cls) -> "StyleMap":
        """ANSI styling suited to terminals with a dark background."""
        return cls(
            name="dark_mode",
            styles={
                Role.MESSAGE: chalk.gray,
                Role.STRING_DELIMITERS: chalk.magenta,
                Role.STRING_VALUE: chalk.blue,
                Role.BYTES_VALUE: chalk.blue_bright,
                Role.NUMBER_VALUE: chalk.yellow,
                Role.BOOLEAN_VALUE: chalk.yellow_bright,
                Role.NONE_VALUE: chalk.green,
                Role.OTHER_VALUE: chalk.yellow,
                Role.KEY_WHEN_FUNCTION: chalk.blue,
                Role.KEY_WHEN_NON_STR: chalk.cyan,
                Role.KEY_WHEN_OTHER: chalk.red,
                Role.IN_BETWEEN_SEPARATOR: chalk.white,
                Role.DELIMITERS: ColorWheel.ansi(),
                Role.NAME: chalk.green,
                Role.PROPERTY_COUNT: chalk.gray,
                Role.KEY_VALUE_SEPARATOR: chalk.white,
                Role.PROTOTYPE_MARK: chalk.gray,
                Role.INDENTATION: chalk.gray,
                Role.FUNCTION_NAME: chalk.green,
                Role.TO_STRINGED: chalk.yellow,
            },
        )
