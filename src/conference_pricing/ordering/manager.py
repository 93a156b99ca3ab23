"""
Ordering Manager - keeps admin-ordered collections index-addressable.

Works on custom fields (position only), fee types, hotel options and
registration fees (explicit ``order`` / ``display_order``). Items carrying
an order attribute are renumbered 0..n-1 after every change, which is what
the editor persists. The input list is never modified.
"""
import copy
from dataclasses import is_dataclass, replace
from typing import Any, MutableMapping, Sequence, TypeVar

from ..errors import IndexOutOfRangeError

T = TypeVar('T')

ORDER_KEY = 'order'


def _has_order(item: Any, key: str) -> bool:
    if isinstance(item, MutableMapping):
        return key in item
    return hasattr(item, key)


def _with_order(item: T, key: str, position: int) -> T:
    """Copy of ``item`` with its order set; unchanged items are returned as-is."""
    if isinstance(item, MutableMapping):
        if item[key] == position:
            return item
        updated = dict(item)
        updated[key] = position
        return updated
    if getattr(item, key) == position:
        return item
    if is_dataclass(item):
        return replace(item, **{key: position})
    updated = copy.copy(item)
    setattr(updated, key, position)
    return updated


def renumber(items: Sequence[T], key: str = ORDER_KEY) -> list[T]:
    """Set every item's order to its position. Items without one are left alone."""
    return [
        _with_order(item, key, position) if _has_order(item, key) else item
        for position, item in enumerate(items)
    ]


def _check_index(index: int, length: int) -> None:
    if not 0 <= index < length:
        raise IndexOutOfRangeError(index, length)


def move(items: Sequence[T], from_index: int, to_index: int, key: str = ORDER_KEY) -> list[T]:
    """
    Move one item (remove, then insert at ``to_index``).

    Both indices must address existing items; nothing is clamped. Moving an
    item onto itself returns the list as given, orders untouched.
    """
    _check_index(from_index, len(items))
    _check_index(to_index, len(items))

    if from_index == to_index:
        return list(items)

    result = list(items)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return renumber(result, key)


def append(items: Sequence[T], item: T, key: str = ORDER_KEY) -> list[T]:
    """Add ``item`` at the end (new fields and hotels go last)."""
    return renumber([*items, item], key)


def remove(items: Sequence[T], index: int, key: str = ORDER_KEY) -> list[T]:
    """Delete the item at ``index`` and close the gap."""
    _check_index(index, len(items))
    result = list(items)
    del result[index]
    return renumber(result, key)
