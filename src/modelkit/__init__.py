"""
modelkit - schema-driven models with coercion and validation.

Declare fields once, get typed coercion on every write, storage-column
aliasing, and rule-based validation that reports every failure at once.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

from .core import datatypes, validation
from .core.datatypes import FieldTypeKind
from .core.errors import (
    DefinitionError,
    InvalidDatatypeError,
    InvalidFieldOptionError,
    InvalidPatternError,
    InvalidRuleError,
    ModelkitError,
    ModelValidationError,
    MultiplePrimaryKeysError,
    RuleFailure,
)
from .runtime.collection import Collection
from .runtime.model import Model, getter, setter
from .specs.definition import CustomRule, Definition, NamedRule

try:
    __version__ = _metadata_version("modelkit")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "datatypes",
    "validation",
    "FieldTypeKind",
    "Definition",
    "NamedRule",
    "CustomRule",
    "Model",
    "Collection",
    "setter",
    "getter",
    "ModelkitError",
    "DefinitionError",
    "InvalidDatatypeError",
    "InvalidFieldOptionError",
    "InvalidPatternError",
    "InvalidRuleError",
    "MultiplePrimaryKeysError",
    "RuleFailure",
    "ModelValidationError",
]
