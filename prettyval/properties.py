"""
Prettyval property extraction.

Produces the ordered child Values of a non-primitive Value:
    - exact dicts: their items, in insertion order
    - instances, functions and classes: own attributes (instance __dict__ then __slots__), then
      attributes of the classes of the MRO up to a maximum prototype depth
    - mappings: one synthetic Value per entry, labelled with the rendered key
    - lists, tuples, sets, typed arrays and other collections: one synthetic Value per item,
      labelled with its index

Errors raised by user code while iterating or reading attributes are logged and the
extraction keeps what it collected so far.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging

from typing import Any, Callable, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .fragments import Line, line_text
from .value import Value, ValueKind

logger = logging.getLogger(__name__)

# Attributes that link an object to its class or to its own storage; the MRO is walked explicitly
IMPLICIT_LINKS = frozenset({"__class__", "__dict__", "__weakref__", "__slots__"})

KeyRenderer = Callable[[Any], Line]


# Methods --------------------------------------------------------------------------------------------------------------

def extract(value: Value, max_prototype_depth: int, render_key: KeyRenderer) -> list[Value]:
    """
    Return the ordered child Values of a non-primitive value.

    Args:
        value: The value to extract children from.
        max_prototype_depth: Number of classes of the MRO (excluding `object`) whose attributes
            are added after the own attributes of an instance. 0 disables the climb.
        render_key: Renders a mapping key, or a non-string dict key, to a single styled line.

    Returns:
        list[Value]: Children in extraction order.
    """
    kind = value.kind
    if kind is ValueKind.PLAIN_OBJECT:
        return from_dict_items(value, render_key)
    if kind is ValueKind.MAP_LIKE:
        return from_key_value_iterable(value, render_key)
    if kind in (ValueKind.ARRAY, ValueKind.SET_LIKE, ValueKind.TYPED_ARRAY_LIKE, ValueKind.ITERABLE):
        return from_value_iterable(value)
    return from_attributes(value, max_prototype_depth)


def from_dict_items(value: Value, render_key: KeyRenderer) -> list[Value]:
    """Children of an exact dict, all public; non-string keys get a rendered label."""
    children = []
    for key, item in value.content.items():
        key_label = None if isinstance(key, str) else render_key(key)
        children.append(Value.from_property(value, key, item, key_label=key_label, is_public=True))
    return children


def from_key_value_iterable(value: Value, render_key: KeyRenderer) -> list[Value]:
    """Children of a mapping, in its natural iteration order."""
    children = []
    try:
        for key, item in value.content.items():
            label = render_key(key)
            children.append(Value.from_collection_entry(value, line_text(label), item, key_label=label))
    except Exception as e:
        logger.debug("Iteration of %s stopped: %s: %s", type(value.content).__name__, type(e).__name__, e)
    return children


def from_value_iterable(value: Value) -> list[Value]:
    """Children of a sequence or collection, labelled by index."""
    children = []
    try:
        for index, item in enumerate(value.content):
            children.append(Value.from_collection_entry(value, str(index), item))
    except Exception as e:
        logger.debug("Iteration of %s stopped: %s: %s", type(value.content).__name__, type(e).__name__, e)
    return children


def from_attributes(value: Value, max_prototype_depth: int) -> list[Value]:
    """
    Children of an object read from its attributes.

    Own attributes come first with a prototype depth of 0. Then the k-th class of the MRO
    contributes its attributes with a prototype depth of k, for k up to max_prototype_depth.
    The climb stops at `object`. Classes themselves have no prototype sources.
    """
    obj = value.content
    children = [Value.from_property(value, name, attr) for name, attr in _own_attributes(obj)]

    if max_prototype_depth <= 0 or isinstance(obj, type):
        return children

    mro = [klass for klass in type(obj).__mro__ if klass is not object]
    for proto_depth, klass in enumerate(mro[:max_prototype_depth], start=1):
        for name, attr in _class_attributes(obj, klass):
            children.append(Value.from_property(value, name, attr, proto_depth=proto_depth))
    return children


# Private Methods ------------------------------------------------------------------------------------------------------

def _own_attributes(obj: Any) -> list[tuple[Any, Any]]:
    try:
        items = [(k, v) for k, v in vars(obj).items() if k not in IMPLICIT_LINKS]
    except TypeError:
        # No __dict__
        items = []

    seen = {k for k, _ in items}
    for name in _slot_names(type(obj)):
        if name in seen or name in IMPLICIT_LINKS:
            continue
        try:
            attr = getattr(obj, name)
        except AttributeError:
            # Unset slot
            continue
        except Exception as e:
            logger.debug("Slot %r of %s skipped: %s: %s", name, type(obj).__name__, type(e).__name__, e)
            continue
        seen.add(name)
        items.append((name, attr))
    return items


def _slot_names(cls: type) -> Iterator[str]:
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name.startswith("__") and not name.endswith("__"):
                # Private names are mangled
                name = f"_{klass.__name__.lstrip('_')}{name}"
            yield name


def _class_attributes(obj: Any, klass: type) -> Iterator[tuple[str, Any]]:
    for name, attr in list(vars(klass).items()):
        if name in IMPLICIT_LINKS:
            continue
        if isinstance(attr, (staticmethod, classmethod)):
            yield name, attr.__func__
        elif isinstance(attr, property):
            try:
                resolved = getattr(obj, name)
            except Exception as e:
                logger.debug("Property %r of %s skipped: %s: %s", name, klass.__name__, type(e).__name__, e)
                continue
            yield name, resolved
        else:
            yield name, attr
