"""
Prettyval primitive formatting.

Leaves of the value graph which are primitives are converted to text by a PrimitiveFormatter.
The default formatter quotes strings, optionally truncates long strings and bytes, and optionally
groups the digits of numbers with a thousands separator.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math

from dataclasses import dataclass
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Fragment, Span
from .styles import Role, StyleMap
from .utils import fmt_type, fmt_value

PRIMITIVE_TYPES = (
    type(None),
    bool,  # Comes before int (is subclass of int)
    int,
    float,
    complex,
    str,
    bytes,
    type(Ellipsis),  # EllipsisType (...)
    type(NotImplemented),  # NotImplementedType
)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class PrimitiveFormatter:
    """
    Convert primitive values to styled single-line fragments.

    Attributes:
        max_string_length: Maximum number of characters of a str or bytes content before
            truncation; None disables truncation.
        thousands_separator: Separator inserted between groups of three digits of int and
            float values; empty string disables grouping.
        ellipsis: Truncation token, placed inside the quotes.

    Examples:
        >>> PrimitiveFormatter(thousands_separator="_").text(1234567)
        '1_234_567'
        >>> PrimitiveFormatter(max_string_length=3).text("abcdef")
        "'abc…'"
    """
    max_string_length: int | None = None
    thousands_separator: str = ""
    ellipsis: str = "…"

    def __post_init__(self):
        if self.max_string_length is not None:
            if not isinstance(self.max_string_length, int) or isinstance(self.max_string_length, bool):
                raise TypeError(f"max_string_length must be int or None, but found {fmt_type(self.max_string_length)}")
            if self.max_string_length < 1:
                raise ValueError(f"max_string_length must be positive, but found {fmt_value(self.max_string_length)}")
        if not isinstance(self.thousands_separator, str):
            raise TypeError(f"thousands_separator must be str, but found {fmt_type(self.thousands_separator)}")

    def __call__(self, content: Any, styles: StyleMap, depth: int = 0) -> Fragment:
        """Format a primitive as a styled single-line fragment."""
        if isinstance(content, str):
            quote, inner = self._quoted(content)
            delimiter = styles.styler(Role.STRING_DELIMITERS, depth)
            return Fragment.of(Span(quote, delimiter),
                               Span(inner, styles.styler(Role.STRING_VALUE, depth)),
                               Span(quote, delimiter))
        return Fragment.of(Span(self.text(content), styles.styler(_role_of(content), depth)))

    def text(self, content: Any) -> str:
        """Return the plain text of a primitive."""
        if isinstance(content, str):
            quote, inner = self._quoted(content)
            return f"{quote}{inner}{quote}"
        if isinstance(content, bytes):
            return _fmt_truncate(_safe_repr(content), self._bytes_budget(content), self.ellipsis)
        if isinstance(content, bool) or content is None:
            return repr(content)
        if isinstance(content, int):
            try:
                plain = int.__repr__(content)
            except ValueError:
                # More digits than sys.get_int_max_str_digits() allows in decimal
                return hex(content)
            return self._group(plain, f"{content:,}")
        if isinstance(content, float):
            if not math.isfinite(content):
                return float.__repr__(content)
            return self._group(float.__repr__(content), f"{content:,}")
        return _safe_repr(content)

    # Private Methods --------------------------------

    def _quoted(self, s: str) -> tuple[str, str]:
        repr_ = str.__repr__(s)
        quote, inner = repr_[0], repr_[1:-1]
        if self.max_string_length is not None and len(s) > self.max_string_length:
            inner = str.__repr__(s[:self.max_string_length])[1:-1] + self.ellipsis
        return quote, inner

    def _bytes_budget(self, b: bytes) -> int:
        if self.max_string_length is None:
            return len(_safe_repr(b))
        return self.max_string_length

    def _group(self, plain: str, grouped: str) -> str:
        if not self.thousands_separator or "e" in plain or "inf" in plain:
            return plain
        return grouped.replace(",", self.thousands_separator)


# Private Methods ------------------------------------------------------------------------------------------------------

def _role_of(content: Any) -> Role:
    if content is None:
        return Role.NONE_VALUE
    if isinstance(content, bool):
        return Role.BOOLEAN_VALUE
    if isinstance(content, (int, float, complex)):
        return Role.NUMBER_VALUE
    if isinstance(content, bytes):
        return Role.BYTES_VALUE
    return Role.OTHER_VALUE


def _fmt_truncate(repr_: str, max_len: int, ellipsis: str = "…") -> str:
    """
    Truncate a bytes repr to at most max_len characters of content, keeping the quotes.

    For other reprs, max_len refers to the full repr string length.
    """
    s = repr_
    if len(s) <= max_len:
        return s

    if (s.startswith("b'") or s.startswith('b"')) and len(s) >= 3:
        quote = s[1]
        inner = s[2: 2 + max(1, max_len)]
        if len(s) - 3 <= max_len:
            return s
        return f"b{quote}{inner}{ellipsis}{quote}"

    return s[:max(1, max_len)] + ellipsis


def _safe_repr(obj) -> str:
    """
    Defensive repr() call - handle broken __repr__ methods gracefully
    """
    try:
        repr_ = repr(obj)
    except Exception as e:
        exc_type = type(e).__name__
        repr_ = f"<{type(obj).__name__} object (repr failed: {exc_type})>"
    return repr_
