"""
Model engine.

A ``Model`` subclass declares its fields in a ``definition`` mapping. The
schema is compiled once, when the class is created, and every instance keeps
its own attribute store of coerced values.

Usage:
    from modelkit import Model, setter

    class User(Model):
        definition = {
            "user_id": {"type": "integer", "column": "id", "primaryKey": True},
            "email": {"type": "string", "validation": [{"rule": "email"}]},
        }

    user = User({"user_id": "7", "email": "a@b.com"})
    user.to_data()       # {"id": 7, "email": "a@b.com"}
    user.validate()      # True, or raises ModelValidationError
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar

from modelkit.core.datatypes import coerce
from modelkit.core.equality import deep_equal
from modelkit.core.errors import ModelValidationError, RuleFailure
from modelkit.core.validation import FIELD_REFERENCE_RULES, RULES
from modelkit.runtime.logging import log_with_context
from modelkit.specs.definition import CustomRule, Definition, NamedRule, compile_definitions

logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound="Model")

_SETTER_ATTR = "__modelkit_setter__"
_GETTER_ATTR = "__modelkit_getter__"


# =============================================================================
# Accessor decorators
# =============================================================================


def setter(field_name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Mark a method as the custom setter for ``field_name``.

    The method is called as ``method(self, value, default)`` instead of the
    generic coercion, and is responsible for storing the result itself,
    usually via ``self.set(field_name, value, use_setter=False)``. Its return
    value is returned from ``set()``.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _SETTER_ATTR, field_name)
        return func

    return decorator


def getter(field_name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Mark a method as the custom getter for ``field_name``.

    The method is called as ``method(self, stored_value)`` and its result is
    returned from ``get()`` and the projections.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _GETTER_ATTR, field_name)
        return func

    return decorator


def _collect_accessors(cls: type, attr: str) -> dict[str, Callable[..., Any]]:
    # Keyed by attribute name so an undecorated override drops the parent's accessor
    by_attribute: dict[str, tuple[str, Callable[..., Any]]] = {}
    for klass in reversed(cls.__mro__):
        for attribute, member in vars(klass).items():
            by_attribute.pop(attribute, None)
            field_name = getattr(member, attr, None)
            if isinstance(field_name, str) and callable(member):
                by_attribute[attribute] = (field_name, member)

    accessors: dict[str, Callable[..., Any]] = {}
    for field_name, member in by_attribute.values():
        accessors[field_name] = member
    return accessors


def _fresh(default: Any) -> Any:
    # Mutable defaults must not be shared between instances
    if isinstance(default, (list, dict, set)):
        return copy.deepcopy(default)
    return default


def _project(value: Any, method: str) -> Any:
    if isinstance(value, Model):
        return getattr(value, method)()
    if isinstance(value, list) and any(isinstance(item, Model) for item in value):
        return [_project(item, method) for item in value]
    return value


# =============================================================================
# Model
# =============================================================================


class Model:
    """
    Base class for schema-driven models.

    Class attributes:
        definition: The raw schema declared by this class (own fields only;
            parent fields are inherited and may be redeclared)

    Instances compare by identity.
    """

    definition: ClassVar[Mapping[str, Any] | None] = None

    _definitions: ClassVar[Mapping[str, Definition]] = MappingProxyType({})
    _setters: ClassVar[Mapping[str, Callable[..., Any]]] = MappingProxyType({})
    _getters: ClassVar[Mapping[str, Callable[..., Any]]] = MappingProxyType({})
    _primary_key: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        inherited: dict[str, Definition] = {}
        for base in reversed(cls.__bases__):
            if issubclass(base, Model):
                inherited.update(base._definitions)

        definitions = compile_definitions(
            cls.__dict__.get("definition"),
            inherited=inherited,
            model=cls.__name__,
        )

        cls._definitions = MappingProxyType(definitions)
        cls._setters = MappingProxyType(_collect_accessors(cls, _SETTER_ATTR))
        cls._getters = MappingProxyType(_collect_accessors(cls, _GETTER_ATTR))
        cls._primary_key = next(
            (name for name, definition in definitions.items() if definition.primary_key),
            None,
        )

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._attributes: dict[str, Any] = {}

        for name, definition in self._definitions.items():
            self._attributes[name] = self._coerce(definition, None)

        if isinstance(data, Mapping):
            for name in self._definitions:
                if name in data:
                    self.set(name, data[name])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_object()!r})"

    # -------------------------------------------------------------------------
    # Class-level API
    # -------------------------------------------------------------------------

    @classmethod
    def extend(
        cls: type[TModel],
        properties: Mapping[str, Any] | None = None,
        static_properties: Mapping[str, Any] | None = None,
        name: str | None = None,
    ) -> type[TModel]:
        """
        Create a subclass dynamically.

        Args:
            properties: Instance-level members. ``"definition"`` holds the
                schema; functions become instance methods.
            static_properties: Class-level members; functions become static
                methods, everything else a class attribute.
            name: Class name (defaults to the parent's name)

        Returns:
            The new Model subclass

        Raises:
            DefinitionError: the merged schema does not compile
        """
        namespace: dict[str, Any] = dict(properties or {})
        for key, value in (static_properties or {}).items():
            namespace[key] = staticmethod(value) if inspect.isfunction(value) else value
        namespace.setdefault("__module__", cls.__module__)

        return type(name or cls.__name__, (cls,), namespace)

    @classmethod
    def to_model(cls: type[TModel], data: Mapping[str, Any] | None = None) -> TModel:
        """Build an instance from storage-shaped (column-keyed) data."""
        fields: dict[str, Any] = {}
        if isinstance(data, Mapping):
            for name, definition in cls._definitions.items():
                if definition.column in data:
                    fields[name] = data[definition.column]
        return cls(fields)

    @classmethod
    def definitions(cls) -> Mapping[str, Definition]:
        """The compiled, read-only definition map."""
        return cls._definitions

    @classmethod
    def get_definition(cls, name: str) -> Definition | None:
        return cls._definitions.get(name)

    @classmethod
    def get_primary_key(cls) -> str | None:
        """Name of the primary-key field, if one is declared."""
        return cls._primary_key

    # -------------------------------------------------------------------------
    # Attribute access
    # -------------------------------------------------------------------------

    def _coerce(self, definition: Definition, value: Any) -> Any:
        return coerce(
            definition.type,
            value,
            _fresh(definition.default),
            enum_values=definition.enum_values,
        )

    def get(self, name: str, use_getter: bool = True) -> Any:
        """Return the stored value of a field; ``None`` for undeclared names."""
        if name not in self._definitions:
            return None

        value = self._attributes.get(name)
        if use_getter:
            custom = self._getters.get(name)
            if custom is not None:
                return custom(self, value)
        return value

    def set(self, name: str, value: Any = None, use_setter: bool = True) -> Any:
        """
        Coerce and store a field value.

        Undeclared names are ignored. When the class has a custom setter for
        the field (and ``use_setter`` is true) the setter takes over and its
        return value is returned; otherwise returns ``None``.
        """
        definition = self._definitions.get(name)
        if definition is None:
            logger.debug("Ignoring set() of undeclared field %r on %s", name, type(self).__name__)
            return None

        if use_setter:
            custom = self._setters.get(name)
            if custom is not None:
                return custom(self, value, _fresh(definition.default))

        self._attributes[name] = self._coerce(definition, value)
        return None

    def get_primary_key_value(self) -> Any:
        """Value of the primary-key field, or ``None`` without a primary key."""
        if self._primary_key is None:
            return None
        return self.get(self._primary_key)

    def is_set(self) -> bool:
        """True when at least one field differs from its default."""
        return any(
            not deep_equal(self._attributes.get(name), definition.default)
            for name, definition in self._definitions.items()
        )

    # -------------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------------

    def to_object(self) -> dict[str, Any]:
        """Field-name keyed view of the attribute store."""
        return {name: _project(self.get(name), "to_object") for name in self._definitions}

    def to_data(self) -> dict[str, Any]:
        """Storage-column keyed view of the attribute store."""
        return {
            definition.column: _project(self.get(name), "to_data")
            for name, definition in self._definitions.items()
        }

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> bool:
        """
        Run every field's rules against the stored values.

        All rules of all fields run, in declaration order, and every failure
        is collected. ``None`` values only go through ``required`` and custom
        rules; the other library rules treat an empty field as valid.

        Returns:
            True when nothing failed

        Raises:
            ModelValidationError: one or more fields failed
        """
        errors: dict[str, list[dict[str, Any]]] = {}

        for name, definition in self._definitions.items():
            value = self._attributes.get(name)
            failures = []
            for rule in definition.validation:
                record = self._run_rule(rule, value)
                if record is not None:
                    failures.append(record)
            if failures:
                errors[name] = failures

        if errors:
            log_with_context(
                logger,
                logging.DEBUG,
                f"{type(self).__name__} failed validation on: {', '.join(errors)}",
                component="MODEL",
                fields=list(errors),
            )
            raise ModelValidationError(errors, model=type(self).__name__)

        return True

    def _run_rule(self, rule: NamedRule | CustomRule, value: Any) -> dict[str, Any] | None:
        """Run one rule; return its failure record, or None when it passed."""
        if isinstance(rule, NamedRule):
            if value is None and rule.name != "required":
                return None

            params = rule.params
            if rule.name in FIELD_REFERENCE_RULES:
                params = tuple(self._attributes.get(field_name) for field_name in params)

            try:
                RULES[rule.name](value, *params)
            except RuleFailure as failure:
                return failure.to_record()
            return None

        try:
            result = rule.func(value, *rule.params)
        except RuleFailure as failure:
            return failure.to_record()
        except Exception as exc:
            return {"message": str(exc), "value": value}

        if result is False:
            return {"message": "CUSTOM_VALIDATION_FAILED", "value": value}
        return None
