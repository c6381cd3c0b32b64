"""
Validation rule library.

Every rule takes the (already coerced) value followed by its parameters and
either returns ``True`` or raises ``RuleFailure`` with a fixed uppercase code.
Rules are registered by name in ``RULES`` so schemas can reference them as
strings (``{"rule": "minLength", "param": 8}``).

The ``match`` rule compares against another field; the model engine resolves
the field name to that field's current value before calling it.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sized
from typing import Any

from .datatypes import to_float, to_integer
from .equality import deep_equal
from .errors import RuleFailure

RuleFunc = Callable[..., Any]

# Not a full RFC 5322 validator - it catches obvious typos only.
_EMAIL_RE = re.compile(
    r"([a-z0-9+_\-]+)(\.[a-z0-9+_\-]+)*@([a-z0-9\-]+\.)+[a-z]{2,6}",
    re.IGNORECASE,
)


# =============================================================================
# Helpers
# =============================================================================


def _length_param(value: Any, param: Any, prefix: str, params: list[Any]) -> int:
    """Validate a length parameter; ``params`` is what failure records carry."""
    length = to_integer(param, None)
    if length is None:
        raise RuleFailure(f"{prefix}_NOT_INTEGER", value, params)
    if length < 0:
        raise RuleFailure(f"{prefix}_LESS_THAN_ZERO", value, params)
    return length


def _measure(value: Any, code: str, params: list[Any]) -> int:
    if value is None or not isinstance(value, Sized):
        raise RuleFailure(code, value, params)
    return len(value)


def _coerced(raw: Any) -> Any:
    coerced = to_integer(raw, None)
    return raw if coerced is None else coerced


def _numbers(value: Any, other: Any, code: str) -> tuple[float, float]:
    left = None if isinstance(value, bool) else to_float(value, None)
    right = None if isinstance(other, bool) else to_float(other, None)
    if left is None or right is None:
        raise RuleFailure(code, value, [other])
    return left, right


# =============================================================================
# Rules
# =============================================================================


def required(value: Any) -> bool:
    """Fail on ``None``, the empty string and NaN. ``0`` and ``False`` pass."""
    if value is None or value == "" or (isinstance(value, float) and math.isnan(value)):
        raise RuleFailure("VALUE_REQUIRED", value)
    return True


def email(value: Any) -> bool:
    """
    Check the value looks like an email address.

    THIS DOES NOT CHECK THE ADDRESS EXISTS, nor is it a full RFC validator.
    """
    if not isinstance(value, str):
        raise RuleFailure("VALUE_NOT_EMAIL_NOT_STRING", value)
    if _EMAIL_RE.fullmatch(value) is None:
        raise RuleFailure("VALUE_NOT_EMAIL", value)
    return True


def min_length(value: Any, length: Any) -> bool:
    """Value must have at least ``length`` items/characters."""
    params = [_coerced(length)]
    minimum = _length_param(value, length, "MIN_LENGTH", params)
    if _measure(value, "VALUE_MIN_LENGTH_NOT_STRING", params) < minimum:
        raise RuleFailure("VALUE_LESS_THAN_MIN_LENGTH", value, params)
    return True


def max_length(value: Any, length: Any) -> bool:
    """Value must have at most ``length`` items/characters."""
    params = [_coerced(length)]
    maximum = _length_param(value, length, "MAX_LENGTH", params)
    if _measure(value, "VALUE_MAX_LENGTH_NOT_STRING", params) > maximum:
        raise RuleFailure("VALUE_GREATER_THAN_MAX_LENGTH", value, params)
    return True


def length(value: Any, length: Any) -> bool:
    """Value must have exactly ``length`` items/characters."""
    params = [_coerced(length)]
    expected = _length_param(value, length, "LENGTH", params)
    if _measure(value, "VALUE_LENGTH_NOT_STRING", params) != expected:
        raise RuleFailure("VALUE_LENGTH_NOT_EQUAL", value, params)
    return True


def length_between(value: Any, min_len: Any, max_len: Any) -> bool:
    """Value length must be within ``[min_len, max_len]`` inclusive."""
    params = [_coerced(min_len), _coerced(max_len)]
    minimum = to_integer(min_len, None)
    maximum = to_integer(max_len, None)

    if minimum is None:
        raise RuleFailure("MIN_LENGTH_NOT_INTEGER", value, params)
    if maximum is None:
        raise RuleFailure("MAX_LENGTH_NOT_INTEGER", value, params)
    if minimum < 0:
        raise RuleFailure("MIN_LENGTH_LESS_THAN_ZERO", value, params)
    if maximum < 0:
        raise RuleFailure("MAX_LENGTH_LESS_THAN_ZERO", value, params)
    if minimum > maximum:
        raise RuleFailure("MIN_LENGTH_GREATER_THAN_MAX_LENGTH", value, params)

    size = _measure(value, "VALUE_LENGTH_BETWEEN_NOT_STRING", params)
    if size < minimum or size > maximum:
        raise RuleFailure("VALUE_NOT_BETWEEN_MINLENGTH_AND_MAXLENGTH", value, params)
    return True


def regex(value: Any, pattern: Any) -> bool:
    """Value must be a string in which ``pattern`` finds a match."""
    params = [pattern]
    if isinstance(pattern, str):
        try:
            compiled = re.compile(pattern)
        except re.error:
            raise RuleFailure("REGEX_NOT_REGEX_OR_STRING", value, params) from None
    elif isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        raise RuleFailure("REGEX_NOT_REGEX_OR_STRING", value, params)

    if not isinstance(value, str):
        raise RuleFailure("VALUE_REGEX_NOT_STRING", value, params)
    if compiled.search(value) is None:
        raise RuleFailure("VALUE_REGEX_FAILED", value, params)
    return True


def equal(value: Any, other: Any) -> bool:
    """Value must equal ``other`` (structurally for containers, NaN == NaN)."""
    if not deep_equal(value, other):
        raise RuleFailure("VALUE_NOT_EQUAL", value, [other])
    return True


def greater_than(value: Any, other: Any) -> bool:
    left, right = _numbers(value, other, "GREATER_THAN_NOT_NUMBER")
    if not left > right:
        raise RuleFailure("VALUE_NOT_GREATER_THAN", value, [other])
    return True


def greater_than_or_equal(value: Any, other: Any) -> bool:
    left, right = _numbers(value, other, "GREATER_THAN_OR_EQUAL_NOT_NUMBER")
    if not left >= right:
        raise RuleFailure("VALUE_NOT_GREATER_THAN_OR_EQUAL", value, [other])
    return True


def less_than(value: Any, other: Any) -> bool:
    left, right = _numbers(value, other, "LESS_THAN_NOT_NUMBER")
    if not left < right:
        raise RuleFailure("VALUE_NOT_LESS_THAN", value, [other])
    return True


def less_than_or_equal(value: Any, other: Any) -> bool:
    left, right = _numbers(value, other, "LESS_THAN_OR_EQUAL_NOT_NUMBER")
    if not left <= right:
        raise RuleFailure("VALUE_NOT_LESS_THAN_OR_EQUAL", value, [other])
    return True


def match(value: Any, other_value: Any) -> bool:
    """
    Value must equal another field's current value.

    ``other_value`` is the resolved value, not the field name.
    """
    if not deep_equal(value, other_value):
        raise RuleFailure("VALUE_DOES_NOT_MATCH", value, [other_value])
    return True


# =============================================================================
# Registry
# =============================================================================

RULES: dict[str, RuleFunc] = {
    "required": required,
    "email": email,
    "minLength": min_length,
    "maxLength": max_length,
    "length": length,
    "lengthBetween": length_between,
    "regex": regex,
    "equal": equal,
    "greaterThan": greater_than,
    "greaterThanOrEqual": greater_than_or_equal,
    "lessThan": less_than,
    "lessThanOrEqual": less_than_or_equal,
    "match": match,
}

_ALIASES: dict[str, str] = {
    "min_length": "minLength",
    "max_length": "maxLength",
    "length_between": "lengthBetween",
    "greater_than": "greaterThan",
    "greater_than_or_equal": "greaterThanOrEqual",
    "less_than": "lessThan",
    "less_than_or_equal": "lessThanOrEqual",
}

# Rules whose single parameter names another field instead of a literal.
FIELD_REFERENCE_RULES = frozenset({"match"})


def canonical_rule_name(name: str) -> str | None:
    """Return the registry name for ``name`` (camelCase or snake_case), if known."""
    if name in RULES:
        return name
    return _ALIASES.get(name)


def get_rule(name: str) -> RuleFunc | None:
    """Look up a rule function by name."""
    canonical = canonical_rule_name(name)
    if canonical is None:
        return None
    return RULES[canonical]
