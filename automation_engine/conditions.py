"""
Value comparison for condition steps.
"""

import logging
import operator
from typing import Any

logger = logging.getLogger(__name__)

# Operator names written by the step editor
OPERATOR_ALIASES = {
    'equals': '==',
    'eq': '==',
    'not_equals': '!=',
    'neq': '!=',
    'greater': '>',
    'less': '<',
    'greater_or_equal': '>=',
    'less_or_equal': '<=',
}

NUMERIC_OPERATORS = {
    '<': operator.lt,
    '>': operator.gt,
    '<=': operator.le,
    '>=': operator.ge,
}

# Case-insensitive; both sides are compared as text
TEXT_OPERATORS = {
    'contains': lambda actual, expected: expected in actual,
    'not_contains': lambda actual, expected: expected not in actual,
    'starts_with': lambda actual, expected: actual.startswith(expected),
    'ends_with': lambda actual, expected: actual.endswith(expected),
}

SUPPORTED_OPERATORS = frozenset(
    ['==', '!=', 'exists', 'not_exists'] + list(NUMERIC_OPERATORS) + list(TEXT_OPERATORS)
) | frozenset(OPERATOR_ALIASES)


def _equal(actual: Any, expected: Any) -> bool:
    # Values from resolved templates arrive as strings
    return actual == expected or str(actual) == str(expected)


def compare_values(actual: Any, op: str, expected: Any) -> bool:
    """
    Compare a variable's value against an expected value.

    Supported operators:
    - Comparison: <, >, <=, >=, ==, != (and equals, not_equals, greater, less, ...)
    - Text: contains, not_contains, starts_with, ends_with
    - Existence: exists, not_exists

    A missing (None) value only satisfies not_exists.
    """
    op = OPERATOR_ALIASES.get(op, op)

    if op in ('exists', 'not_exists'):
        return (actual is not None) == (op == 'exists')

    if actual is None:
        return False

    if op in NUMERIC_OPERATORS:
        try:
            return NUMERIC_OPERATORS[op](float(actual), float(expected))
        except (TypeError, ValueError):
            logger.warning(f"Cannot compare non-numeric values: {actual!r} {op} {expected!r}")
            return False

    if op == '==':
        return _equal(actual, expected)
    if op == '!=':
        return not _equal(actual, expected)

    if op in TEXT_OPERATORS:
        return TEXT_OPERATORS[op](str(actual).lower(), str(expected).lower())

    logger.warning(f"Unknown comparison operator: {op}")
    return False
