"""
Coercion library.

Each ``to_*`` function converts loosely-typed input into a canonical value or
returns the supplied default unchanged (same object). Converters never raise
on bad input; only malformed configuration (an invalid pattern) raises.

Usage:
    from modelkit.core import datatypes

    datatypes.to_integer("42", None)      # 42
    datatypes.to_integer("2.5", None)     # None
    datatypes.to_boolean("yes", False)    # True
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Sequence
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from dateutil.parser import isoparse

from .errors import InvalidPatternError

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_STRINGS = frozenset({"Y", "1", "TRUE", "T", "YES"})
_FALSE_STRINGS = frozenset({"N", "0", "FALSE", "F", "NO"})

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool)


class FieldTypeKind(StrEnum):
    """Datatypes a schema field can declare by name."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"
    ENUM = "enum"
    MIXED = "mixed"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Converters
# =============================================================================


def to_array(value: Any, default: Any = None) -> Any:
    """Return ``value`` if it is a list or tuple, else ``default``."""
    if isinstance(value, (list, tuple)):
        return value
    return default


def to_boolean(value: Any, default: Any = None) -> Any:
    """Map booleans, yes/no style strings and 1/0 onto ``True``/``False``."""
    if isinstance(value, bool):
        return value

    if isinstance(value, str):
        normalized = value.upper()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False

    if _is_number(value):
        if value == 1:
            return True
        if value == 0:
            return False

    return default


def to_date(value: Any, default: Any = None) -> Any:
    """
    Return a ``datetime``/``date`` as-is or parse an ISO-8601 string.

    ``"2013-02-07"``, ``"2013-02-07 10:11:12"`` and full ISO-8601 timestamps
    (with offset or ``Z``) are accepted.
    """
    if isinstance(value, (datetime, date)):
        return value

    if isinstance(value, str):
        try:
            return isoparse(value.strip())
        except (ValueError, OverflowError):
            return default

    return default


def to_float(value: Any, default: Any = None) -> Any:
    """
    Convert numbers and numeric strings to a finite ``float``.

    NaN, infinities and Python-only literals such as ``"1_000"`` fall back to
    the default.
    """
    if _is_number(value) or isinstance(value, str):
        if isinstance(value, str) and (not value.strip() or "_" in value):
            return default
        try:
            parsed = float(value)
        except (ValueError, OverflowError):
            return default
        if not math.isfinite(parsed):
            return default
        return parsed

    return default


def to_integer(value: Any, default: Any = None) -> Any:
    """
    Convert integers and all-digit strings to ``int``.

    Anything with a fractional part (``2.5``, ``"2.5"``) falls back to the
    default. Integral floats (``2.0``) are accepted.
    """
    if isinstance(value, bool):
        return default

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return default

    if isinstance(value, str):
        text = value.strip()
        if _INTEGER_RE.fullmatch(text):
            return int(text)

    return default


def to_string(value: Any, default: Any = None, values: Sequence[Any] | None = None) -> Any:
    """
    Return strings unchanged and stringify finite numbers.

    When ``values`` is a list/tuple, the result must be one of them.
    """
    if not isinstance(values, (list, tuple)):
        values = None

    if isinstance(value, str):
        result = value
    elif _is_number(value) and math.isfinite(value):
        result = str(value)
    else:
        return default

    if values is not None and result not in values:
        return default

    return result


def to_object(value: Any, default: Any = None) -> Any:
    """
    Return any object that is not a sequence, scalar or callable.

    Mappings, datetimes and model instances pass; ``None``, lists, strings,
    numbers and functions fall back to the default.
    """
    if value is None:
        return default
    if isinstance(value, (list, tuple)) or isinstance(value, _SCALAR_TYPES):
        return default
    if callable(value):
        return default
    return value


def to_enum(value: Any, values: Sequence[Any] | None, default: Any = None) -> Any:
    """Return ``value`` when it is strictly one of ``values``."""
    if not isinstance(values, (list, tuple)):
        return default

    for candidate in values:
        if isinstance(candidate, bool) != isinstance(value, bool):
            continue
        if type(candidate) is not type(value) and not (_is_number(candidate) and _is_number(value)):
            continue
        if candidate == value:
            return value

    return default


def to_instance_of(value: Any, cls: Any, default: Any = None) -> Any:
    """Return ``value`` if ``cls`` is a class and ``value`` is an instance of it."""
    if isinstance(cls, type) and isinstance(value, cls):
        return value
    return default


def to_function(value: Any, default: Any = None) -> Any:
    """Return ``value`` if it is callable."""
    if callable(value):
        return value
    return default


def to_pattern(value: Any, pattern: str | re.Pattern[str], default: Any = None) -> Any:
    """
    Return the stringified ``value`` when ``pattern`` finds a match in it.

    Raises:
        InvalidPatternError: ``pattern`` is neither a string nor a compiled
            regular expression.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    elif not isinstance(pattern, re.Pattern):
        raise InvalidPatternError(pattern)

    text = to_string(value, None)
    if text is not None and pattern.search(text) is not None:
        return text

    return default


def to_mixed(value: Any, default: Any = None) -> Any:
    """Accept anything except ``None``."""
    if value is None:
        return default
    return value


# =============================================================================
# Dispatch
# =============================================================================

_CONVERTERS: dict[FieldTypeKind, Callable[[Any, Any], Any]] = {
    FieldTypeKind.STRING: to_string,
    FieldTypeKind.INTEGER: to_integer,
    FieldTypeKind.FLOAT: to_float,
    FieldTypeKind.BOOLEAN: to_boolean,
    FieldTypeKind.DATE: to_date,
    FieldTypeKind.ARRAY: to_array,
    FieldTypeKind.OBJECT: to_object,
    FieldTypeKind.MIXED: to_mixed,
}


def coerce(
    kind: FieldTypeKind | Callable[[Any, Any], Any],
    value: Any,
    default: Any = None,
    enum_values: Sequence[Any] | None = None,
) -> Any:
    """
    Coerce ``value`` for a field of the given kind.

    Args:
        kind: A ``FieldTypeKind`` or a callable ``(value, default) -> value``
        value: Raw input
        default: Value returned when ``value`` cannot be coerced
        enum_values: Allowed values when ``kind`` is ``enum``

    Returns:
        The coerced value, or ``default``
    """
    if isinstance(kind, str):
        kind = FieldTypeKind(kind)

    if kind == FieldTypeKind.ENUM:
        return to_enum(value, enum_values, default)

    if isinstance(kind, FieldTypeKind):
        return _CONVERTERS[kind](value, default)

    return kind(value, default)
