"""
Prettyval cycle detection.

A value re-entered while one of its own ancestors is being expanded is a cycle. The re-entrant
node folds as a back-reference leaf carrying the index of the ancestor in the CycleRegistry,
and the ancestor shows an opening marker with the same index.

A registry is created for each top-level stringification and discarded when it returns.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from enum import StrEnum, unique


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class FrameState(StrEnum):
    """
    Lifecycle of a traversal frame:
        UNVISITED → EXPANDING → EXPANDED, or UNVISITED → CYCLE
    """
    UNVISITED = "unvisited"
    EXPANDING = "expanding"
    EXPANDED = "expanded"
    CYCLE = "cycle"


class CycleRegistry:
    """
    Map object identities to display indices, assigned once in first-seen order starting at 1.

    Examples:
        >>> registry = CycleRegistry()
        >>> registry.index_of(1001), registry.index_of(2002), registry.index_of(1001)
        (1, 2, 1)
        >>> registry.get(3003) is None
        True
    """

    def __init__(self):
        self._indices: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, identity: int) -> bool:
        return identity in self._indices

    def index_of(self, identity: int) -> int:
        """Return the index of identity, registering it on first use."""
        return self._indices.setdefault(identity, len(self._indices) + 1)

    def get(self, identity: int) -> int | None:
        """Return the index of identity if it was registered, without registering it."""
        return self._indices.get(identity)


def is_cycle(identity: int, ancestors: tuple[int, ...]) -> bool:
    """True when identity is one of the identities of the values being expanded above it."""
    return identity in ancestors
