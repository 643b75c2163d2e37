"""
=====================================
Value helpers shared by the builders.
=====================================

Small, explicit rules used instead of implicit truthiness:

- is_blank: None, False, '' and ' ' count as "absent"; 0 and '0' do not
- clear_values: drop blank entries from a sequence (column lists)
- string_form / loosely_equal: compare scalars by their string form, so a
  row value fetched as 1 matches an in-memory '1'
"""

from typing import Any, Iterable, List

BLANK_STRINGS = ('', ' ')


def is_blank(value: Any) -> bool:
    """Return True for the values treated as absent.

    Args:
        value: Any scalar

    Returns:
        True for None, False, '' and ' '
    """
    if value is None or value is False:
        return True
    return isinstance(value, str) and value in BLANK_STRINGS


def clear_values(values: Iterable[Any]) -> List[Any]:
    """Drop blank entries, keeping order."""
    return [value for value in values if not is_blank(value)]


def string_form(value: Any) -> str:
    """Render a scalar the way loose comparisons see it."""
    if value is None or value is False:
        return ''
    if value is True:
        return '1'
    if isinstance(value, float) and value.is_integer():
        # 1.0 renders as '1'
        return str(int(value))
    return str(value)


def loosely_equal(left: Any, right: Any) -> bool:
    """Compare two scalars by value, falling back to their string forms."""
    if left == right:
        return True
    return string_form(left) == string_form(right)
