"""
Compiled field specifications.

Re-exports the definition types so callers can write
``from modelkit.specs import Definition``.
"""

from modelkit.core.datatypes import FieldTypeKind
from modelkit.specs.definition import (
    CustomRule,
    Definition,
    NamedRule,
    RuleSpec,
    compile_definition,
    compile_definitions,
    compile_rule,
)

__all__ = [
    "FieldTypeKind",
    "Definition",
    "NamedRule",
    "CustomRule",
    "RuleSpec",
    "compile_rule",
    "compile_definition",
    "compile_definitions",
]
