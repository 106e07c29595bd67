"""
Declaration types for the shader variant DSL.

DSL Syntax:

    pub value_enum VARIANT as Variant: u32 {
        Mandelbrot = 0,
        BurningShip = 2,
    }

    pub variants MandelbrotShader from "src/wgsl/mandelbrot.wgsl" {
        shared { DEBUG: bool = false },
        Fast { ITERATIONS: u32 = 64 },
        Product(Variant),
    }
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .location import SourceLocation
from .values import DefValue, ScalarKind


class ValueEnumCase(BaseModel):
    """A single named case of a value enum, bound to one scalar literal."""

    name: str
    value: DefValue
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class ValueEnumDeclaration(BaseModel):
    """
    A finite, ordered, named set of cases each bound to a typed literal.

    Attributes:
        name: Declared name; also the definition key handed to the preprocessor
        codegen_name: Optional alternate name for the generated class
        kind: Scalar kind shared by all case literals
        values: Ordered cases
        public: Whether the declaration was marked ``pub``
    """

    name: str
    codegen_name: str | None = None
    kind: ScalarKind
    values: list[ValueEnumCase] = Field(default_factory=list)
    public: bool = False
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def type_name(self) -> str:
        """Name of the generated class, used by cross-product references."""
        return self.codegen_name or self.name

    def get_case(self, name: str) -> ValueEnumCase | None:
        for case in self.values:
            if case.name == name:
                return case
        return None


class Definition(BaseModel):
    """A named, typed shader definition (``KEY: kind = literal``)."""

    key: str
    value: DefValue
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class HardCodedVariant(BaseModel):
    """A variant with explicit definitions overriding the shared set."""

    kind: Literal["hardcoded"] = "hardcoded"
    name: str
    definitions: list[Definition] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class CrossProductVariant(BaseModel):
    """
    A variant expanded over every combination of the referenced value enums.

    Attributes:
        enum_refs: Ordered value-enum type names; the last one varies fastest
    """

    kind: Literal["cross_product"] = "cross_product"
    name: str
    enum_refs: list[str] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


Variant = Annotated[HardCodedVariant | CrossProductVariant, Field(discriminator="kind")]


class VariantsDeclaration(BaseModel):
    """
    A shader template and the closed set of variants generated from it.

    Attributes:
        name: Name of the generated base class
        template_path: Template path exactly as written in the DSL
        shared: Default definitions merged under every variant, if declared
        variants: Ordered top-level variants (``shared`` excluded)
    """

    name: str
    template_path: str
    shared: list[Definition] | None = None
    variants: list[Variant] = Field(default_factory=list)
    public: bool = False
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    def shared_definitions(self) -> dict[str, DefValue]:
        return {d.key: d.value for d in self.shared or []}


class VariantsModule(BaseModel):
    """
    Everything parsed from one declaration text.

    Value enums are global to the module: a cross product may reference an
    enum declared after it.
    """

    file: str = "<string>"
    value_enums: list[ValueEnumDeclaration] = Field(default_factory=list)
    variants_decls: list[VariantsDeclaration] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def find_value_enum(self, type_name: str) -> ValueEnumDeclaration | None:
        for value_enum in self.value_enums:
            if value_enum.type_name == type_name:
                return value_enum
        return None
