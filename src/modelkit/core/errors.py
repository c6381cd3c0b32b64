"""
Error types for modelkit schema compilation, coercion, and validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ModelkitError(Exception):
    """Base exception for all modelkit errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


@dataclass
class ErrorContext:
    """
    Where a configuration error was found.

    Attributes:
        model: Name of the model class being compiled
        field: Field name within the schema (if known)
    """

    model: str
    field: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "User.email"
        """
        if self.field:
            return f"{self.model}.{self.field}"
        return self.model


# =============================================================================
# Configuration errors (raised while compiling a schema)
# =============================================================================


class DefinitionError(ModelkitError):
    """
    Raised when a model schema cannot be compiled.

    These are programming mistakes in the schema and are never recovered.
    """

    pass


class InvalidDatatypeError(DefinitionError, TypeError):
    """Raised when a field has no type or names an unrecognized one."""

    def __init__(self, datatype: Any, context: ErrorContext | None = None):
        self.type = datatype
        super().__init__("DATATYPE_NOT_VALID", context)


class MultiplePrimaryKeysError(DefinitionError):
    """Raised when more than one field is flagged as the primary key."""

    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        self.fields = fields
        super().__init__("CANNOT_SET_MULTIPLE_PRIMARY_KEYS", context)


class InvalidFieldOptionError(DefinitionError):
    """Raised when a schema entry option (column, enum, settings) has the wrong shape."""

    def __init__(self, option: str, value: Any, context: ErrorContext | None = None):
        self.option = option
        self.value = value
        super().__init__(f"{option} is not valid: {value!r}", context)


class InvalidRuleError(DefinitionError):
    """
    Raised when a validation rule reference cannot be resolved.

    Examples:
    - A rule name that is not in the rule library
    - A rule that is neither a name nor a callable
    """

    def __init__(self, message: str, rule: Any = None, context: ErrorContext | None = None):
        self.rule = rule
        super().__init__(message, context)


class InvalidPatternError(ModelkitError, TypeError):
    """Raised when a pattern coercion receives neither a string nor a compiled pattern."""

    def __init__(self, pattern: Any):
        self.pattern = pattern
        super().__init__("PATTERN_NOT_REGEX_OR_STRING")


# =============================================================================
# Validation errors
# =============================================================================


class RuleFailure(ModelkitError):
    """
    A single validation rule failure.

    Raised by rule functions and collected by ``Model.validate()``; it never
    escapes a validation pass on its own.
    """

    def __init__(self, code: str, value: Any, params: list[Any] | tuple[Any, ...] | None = None):
        self.code = code
        self.value = value
        self.params = list(params) if params is not None else None
        super().__init__(code)

    def to_record(self) -> dict[str, Any]:
        """Return the failure as a ``{message, value[, params]}`` record."""
        record: dict[str, Any] = {"message": self.code, "value": self.value}
        if self.params is not None:
            record["params"] = list(self.params)
        return record


class ModelValidationError(ModelkitError):
    """
    Raised by ``Model.validate()`` when one or more fields fail their rules.

    Attributes:
        error_type: Always ``"ModelError"``
        errors: Field name -> ordered list of failure records
        model: Name of the model class that was validated
    """

    error_type = "ModelError"

    def __init__(self, errors: dict[str, list[dict[str, Any]]], model: str | None = None):
        self.errors = errors
        self.model = model
        fields = ", ".join(errors)
        super().__init__(f"Model validation failed for: {fields}")

    @property
    def trace(self) -> str:
        """Human-readable report of every failure, in declaration order."""
        header = f"{self.model or 'Model'} failed validation"
        lines = [header]
        for field_name, records in self.errors.items():
            for record in records:
                line = f"  {field_name}: {record['message']} value={record['value']!r}"
                if "params" in record:
                    line += f" params={record['params']!r}"
                lines.append(line)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation for tooling."""
        return {
            "type": self.error_type,
            "model": self.model,
            "errors": self.errors,
        }
