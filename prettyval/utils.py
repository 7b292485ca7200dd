"""
Prettyval utilities shared across the package.

Contains naming and message helpers used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import functools
import inspect

from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> from collections import OrderedDict
        >>> class_name(OrderedDict)
        'OrderedDict'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    return getattr(cls, "__name__", None) or "object"


def object_name(obj: Any) -> str:
    """
    Get the display name of a callable or a class.

    Prefers `__qualname__`, then `__name__`. Partial objects are shown as `partial(<name>)`
    of the wrapped callable. Anything without a name falls back to its class name.

    Examples:
        >>> object_name(len)
        'len'
        >>> object_name(functools.partial(int, base=2))
        'partial(int)'
    """
    if isinstance(obj, functools.partial):
        return f"partial({object_name(obj.func)})"
    if inspect.ismethod(obj):
        return object_name(obj.__func__)
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if isinstance(name, str) and name:
        return name
    return class_name(obj)


def fmt_type(obj: Any) -> str:
    """
    Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<int>'
        >>> fmt_type(int)
        '<int>'
    """
    return f"<{class_name(obj)}>"


def fmt_value(obj: Any, max_repr: int = 80) -> str:
    """
    Format a single value as a type-value pair for exception messages.

    Handles broken __repr__ methods gracefully and truncates long representations.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("x" * 100, max_repr=5)
        "<str: 'xxxx…>"
    """
    try:
        repr_ = repr(obj)
    except Exception as e:
        repr_ = f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"

    if len(repr_) > max_repr:
        repr_ = repr_[:max(1, max_repr)] + "…"
    return f"<{class_name(obj)}: {repr_}>"
