"""
Intermediate Representation (IR) types for the shader variant DSL.

Types are organized into submodules and re-exported from this package.
"""

from .declarations import (
    CrossProductVariant,
    Definition,
    HardCodedVariant,
    ValueEnumCase,
    ValueEnumDeclaration,
    Variant,
    VariantsDeclaration,
    VariantsModule,
)
from .location import SourceLocation
from .values import I32_MAX, I32_MIN, U32_MAX, DefValue, ScalarKind

__all__ = [
    # Values
    "ScalarKind",
    "DefValue",
    "I32_MIN",
    "I32_MAX",
    "U32_MAX",
    # Declarations
    "ValueEnumCase",
    "ValueEnumDeclaration",
    "Definition",
    "HardCodedVariant",
    "CrossProductVariant",
    "Variant",
    "VariantsDeclaration",
    "VariantsModule",
    # Locations
    "SourceLocation",
]
