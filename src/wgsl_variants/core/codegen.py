"""
Python code emitter.

Generates one Python module from a validated declaration module and the
preprocessed source of every concrete case:

- one ``enum.Enum`` per value enum, with ``get_value``/``from_value``;
- per variants declaration a base class, one frozen dataclass per variant
  and a dict literal mapping every case to its preprocessed source.

Value-enum cases and shader cases are totally ordered by their position
in enumeration order.

The case table is total: it is checked against the expected case count
while emitting, and lookups never fall back to a default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from . import ir
from .enumerator import EnumSelection, count_cases
from .errors import CodegenError
from .strings import to_snake_case

HEADER = '''\
"""
Shader variants generated from {source}.
Generated by wgsl-variants - DO NOT EDIT.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
'''


@dataclass
class ResolvedCase:
    """
    One concrete case and its preprocessed source.

    Attributes:
        variant: Top-level variant name
        selections: Selected value-enum cases (empty for hardcoded variants)
        source: Preprocessed shader text
    """

    variant: str
    selections: tuple[EnumSelection, ...]
    source: str


@dataclass
class ResolvedDeclaration:
    """A variants declaration with its template text and every resolved case."""

    declaration: ir.VariantsDeclaration
    template: str
    cases: list[ResolvedCase] = field(default_factory=list)


def _declared_at(node: ir.ValueEnumDeclaration | ir.VariantsDeclaration) -> str:
    if node.location is None:
        return ""
    return f", declared at {node.location.anchor()}"


def case_class_name(decl: ir.VariantsDeclaration, variant_name: str) -> str:
    return f"{decl.name}{variant_name}"


def payload_field_name(value_enum: ir.ValueEnumDeclaration) -> str:
    return to_snake_case(value_enum.type_name)


class PythonEmitter:
    """Emit the generated Python module for one declaration module."""

    def __init__(self, module: ir.VariantsModule):
        self.module = module

    def emit(self, resolved: list[ResolvedDeclaration]) -> str:
        """
        Build the module source.

        Args:
            resolved: One entry per variants declaration, in declaration order

        Returns:
            Python source text

        Raises:
            CodegenError: If a case table is not total
        """
        sections = [HEADER.format(source=Path(self.module.file).name), self._emit_all()]

        for value_enum in self.module.value_enums:
            sections.append(self._emit_value_enum(value_enum))

        for entry in resolved:
            self._check_total(entry)
            sections.append(self._emit_variants(entry))

        return "\n\n\n".join(section.rstrip("\n") for section in sections) + "\n"

    def _emit_all(self) -> str:
        exported = [v.type_name for v in self.module.value_enums if v.public]
        for decl in self.module.variants_decls:
            if decl.public:
                exported.append(decl.name)
                exported.extend(case_class_name(decl, v.name) for v in decl.variants)

        lines = ["__all__ = ["]
        lines.extend(f"    {name!r}," for name in exported)
        lines.append("]")
        return "\n".join(lines)

    def _emit_value_enum(self, value_enum: ir.ValueEnumDeclaration) -> str:
        """Generate the enum class for a value enum."""
        name = value_enum.type_name
        py_type = value_enum.kind.python_type

        if value_enum.kind is ir.ScalarKind.BOOL:
            kind_check = "not isinstance(value, bool)"
        else:
            kind_check = "isinstance(value, bool) or not isinstance(value, int)"

        summary = f"Value enum {value_enum.name} ({value_enum.kind.value})"
        lines = [
            "@functools.total_ordering",
            f"class {name}(enum.Enum):",
            f'    """{summary}{_declared_at(value_enum)}."""',
            "",
        ]
        lines.extend(f"    {case.name} = {case.value.literal()}" for case in value_enum.values)
        lines.extend(
            [
                "",
                f"    def get_value(self) -> {py_type}:",
                "        return self.value",
                "",
                "    @classmethod",
                f"    def from_value(cls, value: {py_type}) -> {name}:",
                f"        if {kind_check}:",
                f'            raise ValueError(f"no matching case of {name} for {{value!r}}")',
                "        try:",
                "            return cls(value)",
                "        except ValueError:",
                f'            raise ValueError(f"no matching case of {name} for {{value!r}}") from None',
                "",
                "    @classmethod",
                f"    def cases(cls) -> tuple[{name}, ...]:",
                "        return tuple(cls)",
                "",
                "    def __lt__(self, other: object) -> bool:",
                "        if self.__class__ is not other.__class__:",
                "            return NotImplemented",
                "        cases = self.cases()",
                "        return cases.index(self) < cases.index(other)",
            ]
        )
        return "\n".join(lines)

    def _emit_variants(self, entry: ResolvedDeclaration) -> str:
        """Generate base class, case classes, raw template and the case table."""
        decl = entry.declaration
        sources = f"_SOURCES_{decl.name}"
        raw = f"_RAW_{decl.name}"
        order = f"_ORDER_{decl.name}"

        lines = [
            "@functools.total_ordering",
            f"class {decl.name}:",
            f'    """Shader variants of {decl.template_path!r}{_declared_at(decl)}."""',
            "",
            f"    TEMPLATE_PATH = {decl.template_path!r}",
            "",
            "    def get_shader(self) -> str:",
            f"        return {sources}[self]",
            "",
            "    @staticmethod",
            "    def get_raw_shader() -> str:",
            f"        return {raw}",
            "",
            "    @staticmethod",
            f"    def cases() -> tuple[{decl.name}, ...]:",
            f"        return tuple({sources})",
            "",
            "    def __lt__(self, other: object) -> bool:",
            f"        if not isinstance(other, {decl.name}):",
            "            return NotImplemented",
            f"        return {order}[self] < {order}[other]",
        ]

        for variant in decl.variants:
            lines.extend(["", ""])
            lines.extend(self._emit_case_class(decl, variant))

        lines.extend(["", ""])
        lines.extend(
            f"{decl.name}.{variant.name} = {case_class_name(decl, variant.name)}"
            for variant in decl.variants
        )
        if decl.variants:
            lines.append("")

        lines.append(f"{raw} = {entry.template!r}")
        lines.append("")
        lines.append(f"{sources}: dict[{decl.name}, str] = {{")
        for case in entry.cases:
            lines.append(f"    {self._case_expr(decl, case)}: {case.source!r},")
        lines.append("}")
        lines.append(f"{order} = {{case: index for index, case in enumerate({sources})}}")
        return "\n".join(lines)

    def _emit_case_class(self, decl: ir.VariantsDeclaration, variant: ir.Variant) -> list[str]:
        lines = [
            "@dataclasses.dataclass(frozen=True)",
            f"class {case_class_name(decl, variant.name)}({decl.name}):",
        ]

        if isinstance(variant, ir.HardCodedVariant) or not variant.enum_refs:
            lines.append(f'    """{decl.name}::{variant.name}"""')
            return lines

        for ref in variant.enum_refs:
            value_enum = self.module.find_value_enum(ref)
            if value_enum is None:
                raise CodegenError(f"Unresolved value enum '{ref}' in {decl.name}::{variant.name}")
            lines.append(f"    {payload_field_name(value_enum)}: {value_enum.type_name}")
        return lines

    def _case_expr(self, decl: ir.VariantsDeclaration, case: ResolvedCase) -> str:
        args = ", ".join(f"{s.value_enum.type_name}.{s.case.name}" for s in case.selections)
        return f"{case_class_name(decl, case.variant)}({args})"

    def _check_total(self, entry: ResolvedDeclaration) -> None:
        decl = entry.declaration
        expected = count_cases(self.module, decl)
        if len(entry.cases) != expected:
            raise CodegenError(
                f"Case table of '{decl.name}' has {len(entry.cases)} entries, "
                f"expected {expected}"
            )

        keys = [self._case_expr(decl, case) for case in entry.cases]
        if len(set(keys)) != len(keys):
            raise CodegenError(f"Case table of '{decl.name}' contains duplicate cases")

        known = {v.name for v in decl.variants}
        for case in entry.cases:
            if case.variant not in known:
                raise CodegenError(f"Case '{case.variant}' is not a variant of '{decl.name}'")
