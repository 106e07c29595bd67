"""
Combination enumerator for cross-product variants.

Expands a cross-product variant into one concrete combination per tuple of
referenced value-enum cases, in odometer order (last enum fastest).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from . import ir
from .odometer import MixedRadixCounter


@dataclass(frozen=True)
class EnumSelection:
    """One selected case of a referenced value enum."""

    value_enum: ir.ValueEnumDeclaration
    case: ir.ValueEnumCase

    @property
    def key(self) -> str:
        """Definition key the selection sets: the enum's declared name."""
        return self.value_enum.name

    def __str__(self) -> str:
        return f"{self.value_enum.type_name}.{self.case.name}"


@dataclass(frozen=True)
class Combination:
    """
    A concrete combination of a cross-product variant.

    Attributes:
        index: Position in enumeration order (0-based)
        selections: One selection per referenced enum, in reference order
    """

    index: int
    selections: tuple[EnumSelection, ...]

    def overrides(self) -> dict[str, ir.DefValue]:
        """Definitions this combination sets on top of the shared set."""
        return {s.key: s.case.value for s in self.selections}

    def definitions(self, shared: Mapping[str, ir.DefValue]) -> dict[str, ir.DefValue]:
        """Full definition set: shared, overridden by the selections."""
        merged = dict(shared)
        merged.update(self.overrides())
        return merged

    def label(self) -> str:
        return ", ".join(str(s) for s in self.selections)


def enumerate_combinations(
    value_enums: list[ir.ValueEnumDeclaration],
) -> Iterator[Combination]:
    """
    Yield every combination of cases of ``value_enums``.

    Exactly ``prod(len(e.values))`` combinations, no duplicates, the last
    enum varying fastest.
    """
    counter = MixedRadixCounter([len(e.values) for e in value_enums])
    for index, digits in enumerate(counter):
        yield Combination(
            index=index,
            selections=tuple(
                EnumSelection(value_enum=e, case=e.values[d])
                for e, d in zip(value_enums, digits, strict=True)
            ),
        )


def resolve_cross_product(
    module: ir.VariantsModule, variant: ir.CrossProductVariant
) -> list[ir.ValueEnumDeclaration]:
    """
    Look up the value enums a validated cross-product variant references.

    Raises:
        KeyError: If a reference does not resolve (the validator prevents this)
    """
    resolved = []
    for ref in variant.enum_refs:
        value_enum = module.find_value_enum(ref)
        if value_enum is None:
            raise KeyError(f"value enum '{ref}' referenced by '{variant.name}' is not declared")
        resolved.append(value_enum)
    return resolved


def count_cases(module: ir.VariantsModule, decl: ir.VariantsDeclaration) -> int:
    """Number of concrete cases a validated declaration expands to."""
    total = 0
    for variant in decl.variants:
        if isinstance(variant, ir.HardCodedVariant):
            total += 1
        else:
            total += MixedRadixCounter(
                [len(e.values) for e in resolve_cross_product(module, variant)]
            ).total
    return total
