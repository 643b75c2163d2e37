"""
===============================
Operator and value validation.
===============================

Decides whether an operator/value pair may become a WHERE predicate.

Comparison and pattern operators evaluate to unknown against NULL, so a
predicate such as ``age > NULL`` can never match. Pairing ``None`` with any
of them is rejected; only ``=``, ``<>`` and ``!=`` accept ``None``.

Usage:
    from sql.operators import prepare_value_and_operator

    value, operator = prepare_value_and_operator(18, '>')       # (18, '>')
    value, operator = prepare_value_and_operator(5, None, True)  # (5, '=')
    prepare_value_and_operator(None, 'like')   # raises InvalidOperatorCombination
"""

from typing import Any, Tuple

from core.exceptions import InvalidOperatorCombination

OPERATORS = (
    '=', '<', '>', '<=', '>=', '<>', '!=', '<=>',
    'like', 'like binary', 'not like', 'ilike',
    '&', '|', '^', '<<', '>>',
    'rlike', 'not rlike', 'regexp', 'not regexp',
    '~', '~*', '!~', '!~*', 'similar to',
    'not similar to', 'not ilike', '~~*', '!~~*',
)

# Operators that may be paired with a None value
NULL_SAFE_OPERATORS = ('=', '<>', '!=')


def is_operator(operator: Any) -> bool:
    """Return True if ``operator`` is a known operator (case-insensitive)."""
    return isinstance(operator, str) and operator.lower() in OPERATORS


def invalid_operator_and_value(operator: Any, value: Any) -> bool:
    """
    Determine if the given operator and value combination is illegal.

    Args:
        operator: Candidate SQL operator
        value: Value the predicate would bind

    Returns:
        True when value is None and operator is a known non-null-safe operator
    """
    return (
        value is None
        and is_operator(operator)
        and operator.lower() not in NULL_SAFE_OPERATORS
    )


def prepare_value_and_operator(
    value: Any,
    operator: Any,
    use_default: bool = False
) -> Tuple[Any, Any]:
    """
    Normalize the value and operator of a where clause.

    Args:
        value: Value argument as given by the caller
        operator: Operator argument as given by the caller
        use_default: True for the two-argument form, where the caller's
            "operator" argument is really the value

    Returns:
        Tuple of (value, operator)

    Raises:
        InvalidOperatorCombination: None paired with a comparison/pattern operator
    """
    if use_default:
        return operator, '='

    if invalid_operator_and_value(operator, value):
        raise InvalidOperatorCombination(operator, value)

    return value, operator
