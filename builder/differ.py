"""
Dirty-field detection between a fetched row and its in-memory state.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from utils.helpers import loosely_equal

_MISSING = object()


def dirty_fields(
    current: Mapping[str, Any],
    original: Optional[Mapping[str, Any]],
    exclude: Iterable[str] = ()
) -> Dict[str, Any]:
    """
    Return the entries of ``current`` that differ from ``original``.

    Values compare loosely (``1`` equals ``'1'``). A key missing from
    ``original`` is always dirty. Keys in ``exclude`` are never returned.

    Args:
        current: Row as it is now
        original: Snapshot taken when the row was fetched
        exclude: Keys to leave out (the primary key)

    Returns:
        Changed keys with their current values, in ``current`` order
    """
    original = original or {}
    excluded = set(exclude)

    changes = {}
    for key, value in current.items():
        if key in excluded:
            continue
        before = original.get(key, _MISSING)
        if before is _MISSING or not loosely_equal(value, before):
            changes[key] = value

    return changes
