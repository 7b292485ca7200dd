"""
Prettyval styled text model.

A Fragment is the stringified representation of one node of a value graph: an immutable,
non-empty sequence of lines, each line being a sequence of styled spans. Styling is deferred,
so a Fragment can be measured on its plain text and flattened either to plain text or to a
styled (e.g. ANSI-escaped) string.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence

# Classes --------------------------------------------------------------------------------------------------------------

StyleFn = Callable[[str], str]


def unstyled(text: str) -> str:
    """Identity styling function."""
    return text


@dataclass(frozen=True)
class Span:
    """A run of text sharing one styling function."""
    text: str
    style: StyleFn = unstyled

    def __len__(self) -> int:
        return len(self.text)

    def render(self) -> str:
        """Return the text with its style applied; empty text is never styled."""
        return self.style(self.text) if self.text else ""


Line = tuple[Span, ...]


def line_text(line: Line) -> str:
    """Return the plain text of a line."""
    return "".join(span.text for span in line)


def line_width(line: Line) -> int:
    """Return the plain length of a line."""
    return sum(len(span) for span in line)


def render_line(line: Line) -> str:
    """Return a line with all its spans styled."""
    return "".join(span.render() for span in line)


class Fragment:
    """
    Immutable, non-empty ordered sequence of styled lines.

    Even empty content is represented as a single empty line, so joins and indentation never
    operate on a zero-length sequence.

    Examples:
        >>> Fragment.from_text("a\\nb").to_plain()
        'a\\nb'
        >>> Fragment.empty().lines
        ((),)
    """

    __slots__ = ("_lines",)

    def __init__(self, lines: Iterable[Line] = ()):
        lines = tuple(tuple(span for span in line if span.text) for line in lines)
        self._lines: tuple[Line, ...] = lines if lines else ((),)

    # Constructors -----------------------------------

    @classmethod
    def empty(cls) -> "Fragment":
        return cls()

    @classmethod
    def of(cls, *spans: Span) -> "Fragment":
        """Create a single-line fragment."""
        return cls((spans,))

    @classmethod
    def from_text(cls, text: str, style: StyleFn = unstyled) -> "Fragment":
        """Create a fragment by splitting text on line breaks, applying one style to every line."""
        return cls((Span(part, style),) for part in text.splitlines() or [""])

    # Inspection -------------------------------------

    @property
    def lines(self) -> tuple[Line, ...]:
        return self._lines

    @property
    def height(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return len(self._lines) == 1 and line_width(self._lines[0]) == 0

    @property
    def is_single_line(self) -> bool:
        return len(self._lines) == 1

    @property
    def width(self) -> int:
        """Plain length of the fragment once joined on a single line."""
        return sum(line_width(line) for line in self._lines)

    @property
    def head(self) -> Line:
        return self._lines[0]

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fragment):
            return NotImplemented
        return self.to_plain() == other.to_plain() and self.to_styled() == other.to_styled()

    def __hash__(self) -> int:
        return hash(self.to_plain())

    def __repr__(self) -> str:
        return f"Fragment({[line_text(line) for line in self._lines]!r})"

    # Transformations --------------------------------

    def prepend_to_first_line(self, *spans: Span) -> "Fragment":
        first, *tail = self._lines
        return Fragment([spans + first, *tail])

    def prepend_to_tail_lines(self, *spans: Span) -> "Fragment":
        first, *tail = self._lines
        return Fragment([first, *(spans + line for line in tail)])

    def prepend_to_all_lines(self, *spans: Span) -> "Fragment":
        return Fragment(spans + line for line in self._lines)

    def append_to_last_line(self, *spans: Span) -> "Fragment":
        *init, last = self._lines
        return Fragment([*init, last + spans])

    def indent(self, first: Sequence[Span], tail: Sequence[Span]) -> "Fragment":
        """Prefix the first line and the remaining lines with different fillers."""
        first_line, *tail_lines = self._lines
        return Fragment([tuple(first) + first_line, *(tuple(tail) + line for line in tail_lines)])

    def concat(self, *others: "Fragment") -> "Fragment":
        """Stack the lines of other fragments below this one."""
        lines = list(self._lines)
        for other in others:
            lines.extend(other.lines)
        return Fragment(lines)

    def to_single_line(self) -> "Fragment":
        """Join all lines into one, without separator."""
        return Fragment.of(*(span for line in self._lines for span in line))

    # Flattening -------------------------------------

    def to_plain_lines(self) -> list[str]:
        return [line_text(line) for line in self._lines]

    def to_styled_lines(self) -> list[str]:
        return [render_line(line) for line in self._lines]

    def to_plain(self, sep: str = "\n") -> str:
        """Flatten to text, ignoring styles."""
        return sep.join(self.to_plain_lines())

    def to_styled(self, sep: str = "\n") -> str:
        """Flatten to text with styles applied."""
        return sep.join(self.to_styled_lines())


# Methods --------------------------------------------------------------------------------------------------------------

def join_fragments(fragments: Sequence[Fragment], separator: Sequence[Span] = ()) -> Fragment:
    """
    Stack fragments, appending the separator to the last line of every fragment but the last one.

    Returns the empty fragment when no fragment is given.
    """
    if not fragments:
        return Fragment.empty()
    separator = tuple(separator)
    *init, last = fragments
    parts = [f.append_to_last_line(*separator) for f in init]
    return _stack(parts + [last])


def _stack(fragments: Sequence[Fragment]) -> Fragment:
    lines: list[Line] = []
    for f in fragments:
        lines.extend(f.lines)
    return Fragment(lines)
