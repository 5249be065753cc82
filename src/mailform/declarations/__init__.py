"""Declaration types: field roles, validation specs and computed values.

The per-class registry lives in mailform.declarations.registry.
"""

from mailform.declarations.types import (
    Computation,
    ComputedValue,
    CustomRule,
    FieldDeclaration,
    FieldRole,
    Inclusion,
    LengthRange,
    Literal,
    MethodRef,
    Pattern,
    RequirePresence,
    ValidationSpec,
    computed,
    validation_spec,
)

__all__ = [
    "Computation",
    "ComputedValue",
    "CustomRule",
    "FieldDeclaration",
    "FieldRole",
    "Inclusion",
    "LengthRange",
    "Literal",
    "MethodRef",
    "Pattern",
    "RequirePresence",
    "ValidationSpec",
    "computed",
    "validation_spec",
]
