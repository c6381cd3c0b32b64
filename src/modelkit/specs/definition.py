"""
Field definition compiler.

Turns a declarative schema (field name -> entry) into immutable
``Definition`` objects. Compilation happens once per model class; instances
share the compiled map read-only.

Schema entry keys:
    type        Datatype name (see ``FieldTypeKind``) or a coercion callable
    value       Default value
    column      Storage column alias (defaults to the field name)
    validation  List of ``{"rule": name-or-callable, "param": ...}``
    primaryKey  Marks the primary key (``primary_key`` also accepted)
    enum        Allowed values for ``type: enum``
    settings    Free-form metadata, read back with ``get_setting``
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from modelkit.core.datatypes import FieldTypeKind
from modelkit.core.errors import (
    ErrorContext,
    InvalidDatatypeError,
    InvalidFieldOptionError,
    InvalidRuleError,
    MultiplePrimaryKeysError,
)
from modelkit.core.validation import FIELD_REFERENCE_RULES, RULES, canonical_rule_name

logger = logging.getLogger(__name__)


# =============================================================================
# Compiled validation rules
# =============================================================================


class NamedRule(BaseModel):
    """
    A rule from the rule library, referenced by name.

    Examples:
        - NamedRule(name="required")
        - NamedRule(name="lengthBetween", params=(5, 10))
    """

    kind: Literal["named"] = "named"
    name: str = Field(description="Registry name of the rule")
    params: tuple[Any, ...] = Field(default=(), description="Positional rule parameters")

    model_config = ConfigDict(frozen=True)


class CustomRule(BaseModel):
    """A user-supplied rule callable: ``func(value, *params) -> bool``."""

    kind: Literal["custom"] = "custom"
    func: Callable[..., Any] = Field(description="Rule callable")
    params: tuple[Any, ...] = Field(default=(), description="Positional rule parameters")

    model_config = ConfigDict(frozen=True)


RuleSpec = Annotated[NamedRule | CustomRule, Field(discriminator="kind")]


# =============================================================================
# Definition
# =============================================================================


class Definition(BaseModel):
    """
    Compiled description of one model field.

    Attributes:
        name: Field name
        type: Datatype kind, or a callable ``(value, default) -> value``
        default: Value used when input is absent or cannot be coerced
        column: Storage-facing alias used by ``to_data``/``to_model``
        validation: Rules run by ``Model.validate()`` in order
        primary_key: Whether this field is the model's primary key
        enum_values: Allowed values (``type == enum`` only)
        settings: Free-form metadata
    """

    name: str
    type: FieldTypeKind | Callable[[Any, Any], Any]
    default: Any = None
    column: str
    validation: tuple[RuleSpec, ...] = ()
    primary_key: bool = False
    enum_values: tuple[Any, ...] | None = None
    settings: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_custom_type(self) -> bool:
        """True when the field coerces through a user callable."""
        return not isinstance(self.type, FieldTypeKind)

    @property
    def type_name(self) -> str:
        """Printable datatype name."""
        if isinstance(self.type, FieldTypeKind):
            return self.type.value
        return getattr(self.type, "__name__", "custom")

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Read a value from the field's settings bag."""
        return self.settings.get(key, default)


# =============================================================================
# Compilation
# =============================================================================


def _normalize_params(descriptor: Mapping[str, Any]) -> tuple[Any, ...]:
    """
    Flatten a descriptor's parameter into a positional tuple.

    No parameter -> ``()``; a list/tuple -> its elements; anything else -> a
    one-element tuple.
    """
    if "param" in descriptor:
        raw = descriptor["param"]
    elif "params" in descriptor:
        raw = descriptor["params"]
    else:
        return ()

    if isinstance(raw, (list, tuple)):
        return tuple(raw)
    return (raw,)


def compile_rule(descriptor: Any, context: ErrorContext | None = None) -> NamedRule | CustomRule:
    """
    Resolve a rule descriptor to a ``NamedRule`` or ``CustomRule``.

    Raises:
        InvalidRuleError: unknown rule name, or a rule that is neither a
            string nor a callable
    """
    if not isinstance(descriptor, Mapping):
        raise InvalidRuleError(
            f"{descriptor!r} is not a validation rule descriptor", descriptor, context
        )

    rule = descriptor.get("rule")
    params = _normalize_params(descriptor)

    if isinstance(rule, str):
        name = canonical_rule_name(rule)
        if name is None:
            raise InvalidRuleError(f"{rule} is not a validation function", rule, context)
        try:
            inspect.signature(RULES[name]).bind(None, *params)
        except TypeError:
            raise InvalidRuleError(
                f"{rule} does not accept {len(params)} parameter(s)", rule, context
            ) from None
        return NamedRule(name=name, params=params)

    if callable(rule):
        return CustomRule(func=rule, params=params)

    raise InvalidRuleError(f"{rule!r} is not a function or string", rule, context)


def _resolve_type(entry: Mapping[str, Any], context: ErrorContext) -> Any:
    datatype = entry.get("type")

    if datatype is None:
        raise InvalidDatatypeError(None, context)

    if isinstance(datatype, FieldTypeKind):
        return datatype

    if isinstance(datatype, str):
        try:
            return FieldTypeKind(datatype)
        except ValueError:
            raise InvalidDatatypeError(datatype, context) from None

    if callable(datatype):
        return datatype

    raise InvalidDatatypeError(datatype, context)


def compile_definition(name: str, entry: Mapping[str, Any] | None, model: str = "Model") -> Definition:
    """
    Compile one schema entry.

    Args:
        name: Field name
        entry: Schema entry mapping (``None`` is rejected: a type is required)
        model: Model name, used in error context

    Returns:
        The compiled Definition

    Raises:
        InvalidDatatypeError: missing, ``None`` or unrecognized type
        InvalidFieldOptionError: malformed column, enum or settings
        InvalidRuleError: unresolvable validation rule
    """
    context = ErrorContext(model=model, field=name)

    if entry is None or not isinstance(entry, Mapping):
        raise InvalidDatatypeError(None, context)

    datatype = _resolve_type(entry, context)

    rules = tuple(compile_rule(descriptor, context) for descriptor in entry.get("validation") or ())

    column = entry.get("column") or name
    if not isinstance(column, str):
        raise InvalidFieldOptionError("column", column, context)

    enum_values = None
    if datatype == FieldTypeKind.ENUM:
        raw_enum = entry.get("enum") or ()
        if not isinstance(raw_enum, (list, tuple)):
            raise InvalidFieldOptionError("enum", raw_enum, context)
        enum_values = tuple(raw_enum)

    settings = entry.get("settings") or {}
    if not isinstance(settings, Mapping):
        raise InvalidFieldOptionError("settings", settings, context)

    primary_key = entry.get("primaryKey", entry.get("primary_key", False))

    return Definition(
        name=name,
        type=datatype,
        default=entry.get("value"),
        column=column,
        validation=rules,
        primary_key=bool(primary_key),
        enum_values=enum_values,
        settings=dict(settings),
    )


def compile_definitions(
    schema: Mapping[str, Any] | None,
    inherited: Mapping[str, Definition] | None = None,
    model: str = "Model",
) -> dict[str, Definition]:
    """
    Compile a whole schema, optionally on top of a parent's definitions.

    Redeclared fields replace the parent's Definition in place; new fields
    are appended in declaration order.

    Raises:
        MultiplePrimaryKeysError: more than one primary key in the merged map
        InvalidRuleError: a field-reference rule names an undeclared field
    """
    definitions: dict[str, Definition] = dict(inherited or {})

    for name, entry in (schema or {}).items():
        definitions[name] = compile_definition(name, entry, model=model)

    for name, definition in definitions.items():
        for rule in definition.validation:
            if isinstance(rule, NamedRule) and rule.name in FIELD_REFERENCE_RULES:
                missing = [ref for ref in rule.params if ref not in definitions]
                if missing:
                    raise InvalidRuleError(
                        f"{rule.name} references undeclared field(s): {missing}",
                        rule.name,
                        ErrorContext(model=model, field=name),
                    )

    primary_keys = [name for name, definition in definitions.items() if definition.primary_key]
    if len(primary_keys) > 1:
        raise MultiplePrimaryKeysError(primary_keys, ErrorContext(model=model))

    logger.debug(
        "Compiled %d field definition(s) for %s",
        len(definitions),
        model,
        extra={"component": "SCHEMA"},
    )
    return definitions
