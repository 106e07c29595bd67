"""
Semantic validation for parsed shader variant modules.

Checks cross-references and structural constraints the grammar cannot
express. Runs after parsing and before any template is read.
"""

from __future__ import annotations

import builtins
import logging
from collections import Counter

from . import ir
from .errors import ValidationError, ValidationIssue
from .strings import name_problem, to_snake_case

logger = logging.getLogger(__name__)

# Members generated on every value-enum class
VALUE_ENUM_RESERVED = frozenset({"get_value", "from_value", "cases"})

# Members generated on every variants base class
VARIANTS_RESERVED = frozenset({"get_shader", "get_raw_shader", "cases", "TEMPLATE_PATH"})

# Top-level names the generated module imports or calls
MODULE_RESERVED = frozenset({"annotations", "dataclasses", "enum", "functools"}) | frozenset(
    name for name in dir(builtins) if not name.startswith("_")
)


def _duplicates(names: list[str]) -> list[str]:
    """Names occurring more than once, in first-occurrence order."""
    counts = Counter(names)
    seen: list[str] = []
    for name in names:
        if counts[name] > 1 and name not in seen:
            seen.append(name)
    return seen


def _locations(nodes: list, attr: str = "name") -> dict[str, ir.SourceLocation | None]:
    """Location per node name; a repeated name maps to its last occurrence."""
    return {getattr(node, attr): node.location for node in nodes}


def validate_value_enums(module: ir.VariantsModule) -> list[ValidationIssue]:
    """
    Validate all value enum declarations.

    Checks:
    - Declared names are unique
    - At least one value
    - Case names are unique
    - Case literals are unique (scalar -> case must be a function)
    - Generated names are usable Python identifiers

    Returns:
        List of issues
    """
    issues: list[ValidationIssue] = []

    for name in _duplicates([v.name for v in module.value_enums]):
        issues.append(ValidationIssue(f"value_enum {name}", "duplicate value_enum declaration"))

    for value_enum in module.value_enums:
        decl = f"value_enum {value_enum.name}"

        if not value_enum.values:
            issues.append(
                ValidationIssue(
                    decl,
                    "value_enum declaration must have at least one value",
                    location=value_enum.location,
                )
            )

        for name in _duplicates([case.name for case in value_enum.values]):
            issues.append(
                ValidationIssue(
                    decl,
                    f"duplicate case name '{name}'",
                    key=name,
                    location=_locations(value_enum.values)[name],
                )
            )

        for literal in _duplicates([case.value.value for case in value_enum.values]):
            cases = [c.name for c in value_enum.values if c.value.value == literal]
            issues.append(
                ValidationIssue(
                    decl,
                    f"cases {', '.join(cases)} share the literal {literal!r}",
                    key=cases[0],
                    location=_locations(value_enum.values)[cases[-1]],
                )
            )

        problem = name_problem(value_enum.type_name)
        if problem:
            issues.append(
                ValidationIssue(
                    decl, f"invalid type name: {problem}", location=value_enum.location
                )
            )

        for case in value_enum.values:
            problem = name_problem(case.name)
            if problem:
                issues.append(
                    ValidationIssue(
                        decl,
                        f"invalid case name: {problem}",
                        key=case.name,
                        location=case.location,
                    )
                )
            elif case.name in VALUE_ENUM_RESERVED:
                issues.append(
                    ValidationIssue(
                        decl,
                        f"case name '{case.name}' clashes with a generated method",
                        key=case.name,
                        location=case.location,
                    )
                )

    return issues


def resolve_enum_ref(
    module: ir.VariantsModule, ref: str
) -> tuple[ir.ValueEnumDeclaration | None, str | None]:
    """
    Resolve a cross-product reference.

    References name a value enum by its type name (the alias when one is
    declared). Returns the declaration, or None plus an optional hint.
    """
    value_enum = module.find_value_enum(ref)
    if value_enum is not None:
        return value_enum, None

    for candidate in module.value_enums:
        if candidate.name == ref and candidate.codegen_name:
            return None, f"did you mean '{candidate.codegen_name}' (alias of '{ref}')?"
    return None, None


def validate_variants_decls(
    module: ir.VariantsModule,
) -> tuple[list[ValidationIssue], list[str]]:
    """
    Validate all variants declarations.

    Checks:
    - Variant names are unique and usable
    - Definition keys are unique within a block
    - Hardcoded overrides keep the kind of the shared key they override
    - Every cross-product reference resolves to a value enum, at most once
    - Shared keys and cross-product definition keys are disjoint
    - Payload field names are unique within a variant

    Returns:
        Tuple of (issues, warnings)
    """
    issues: list[ValidationIssue] = []
    warnings: list[str] = []

    for name in _duplicates([d.name for d in module.variants_decls]):
        issues.append(ValidationIssue(f"variants {name}", "duplicate variants declaration"))

    for decl in module.variants_decls:
        scope = f"variants {decl.name}"

        problem = name_problem(decl.name)
        if problem:
            issues.append(
                ValidationIssue(scope, f"invalid name: {problem}", location=decl.location)
            )

        if not decl.variants:
            warnings.append(f"variants '{decl.name}' declares no variants")

        shared = decl.shared or []
        for key in _duplicates([d.key for d in shared]):
            issues.append(
                ValidationIssue(
                    scope,
                    f"duplicate definition '{key}'",
                    variant="shared",
                    key=key,
                    location=_locations(shared, "key")[key],
                )
            )
        shared_kinds = {d.key: d.value.kind for d in shared}

        for name in _duplicates([v.name for v in decl.variants]):
            issues.append(
                ValidationIssue(
                    scope,
                    "duplicate variant name",
                    variant=name,
                    location=_locations(decl.variants)[name],
                )
            )

        for variant in decl.variants:
            problem = name_problem(variant.name)
            if problem:
                issues.append(
                    ValidationIssue(
                        scope,
                        f"invalid variant name: {problem}",
                        variant=variant.name,
                        location=variant.location,
                    )
                )
            elif variant.name in VARIANTS_RESERVED:
                issues.append(
                    ValidationIssue(
                        scope,
                        f"variant name '{variant.name}' clashes with a generated member",
                        variant=variant.name,
                        location=variant.location,
                    )
                )

            if isinstance(variant, ir.HardCodedVariant):
                issues.extend(_validate_hardcoded(scope, variant, shared_kinds))
            else:
                issues.extend(_validate_cross_product(module, scope, variant, shared_kinds))

    return issues, warnings


def _validate_hardcoded(
    scope: str,
    variant: ir.HardCodedVariant,
    shared_kinds: dict[str, ir.ScalarKind],
) -> list[ValidationIssue]:
    issues = []

    for key in _duplicates([d.key for d in variant.definitions]):
        issues.append(
            ValidationIssue(
                scope,
                f"duplicate definition '{key}'",
                variant=variant.name,
                key=key,
                location=_locations(variant.definitions, "key")[key],
            )
        )

    for definition in variant.definitions:
        expected = shared_kinds.get(definition.key)
        if expected is not None and expected is not definition.value.kind:
            issues.append(
                ValidationIssue(
                    scope,
                    f"definition '{definition.key}' is {definition.value.kind.value} here "
                    f"but {expected.value} in shared",
                    variant=variant.name,
                    key=definition.key,
                    location=definition.location,
                )
            )

    return issues


def _validate_cross_product(
    module: ir.VariantsModule,
    scope: str,
    variant: ir.CrossProductVariant,
    shared_kinds: dict[str, ir.ScalarKind],
) -> list[ValidationIssue]:
    issues = []

    for ref in _duplicates(variant.enum_refs):
        issues.append(
            ValidationIssue(
                scope,
                f"value enum '{ref}' is referenced more than once",
                variant=variant.name,
                key=ref,
                location=variant.location,
            )
        )

    field_names: list[str] = []
    for ref in variant.enum_refs:
        value_enum, hint = resolve_enum_ref(module, ref)
        if value_enum is None:
            message = f"value enum '{ref}' is not declared"
            if hint:
                message += f"; {hint}"
            issues.append(
                ValidationIssue(
                    scope,
                    message,
                    variant=variant.name,
                    missing_enum=ref,
                    location=variant.location,
                )
            )
            continue

        field_name = to_snake_case(value_enum.type_name)
        field_names.append(field_name)
        problem = name_problem(field_name)
        if problem is None and field_name in VARIANTS_RESERVED:
            problem = f"'{field_name}' clashes with a generated member"
        if problem:
            issues.append(
                ValidationIssue(
                    scope,
                    f"invalid payload field for value enum '{ref}': {problem}",
                    variant=variant.name,
                    key=field_name,
                    location=variant.location,
                )
            )

        if value_enum.name in shared_kinds:
            issues.append(
                ValidationIssue(
                    scope,
                    f"'{value_enum.name}' is both a shared definition and the "
                    f"definition set by value enum '{ref}'",
                    variant=variant.name,
                    key=value_enum.name,
                    location=variant.location,
                )
            )

    for field_name in _duplicates(field_names):
        issues.append(
            ValidationIssue(
                scope,
                f"two referenced enums map to the same payload field '{field_name}'",
                variant=variant.name,
                key=field_name,
                location=variant.location,
            )
        )

    return issues


def validate_generated_names(module: ir.VariantsModule) -> list[ValidationIssue]:
    """
    Check the top-level names of the generated module.

    Value-enum classes, variants base classes and the per-variant case
    classes (``<Declaration><Variant>``) share one module namespace with
    the module's imports and the builtins its methods call, so they must
    neither collide with each other nor shadow those.
    """
    owners: dict[str, list[str]] = {}
    locations: dict[str, ir.SourceLocation | None] = {}

    def claim(name: str, owner: str, location: ir.SourceLocation | None) -> None:
        owners.setdefault(name, []).append(owner)
        locations.setdefault(name, location)

    for value_enum in module.value_enums:
        claim(value_enum.type_name, f"value_enum {value_enum.name}", value_enum.location)
    for decl in module.variants_decls:
        claim(decl.name, f"variants {decl.name}", decl.location)
        for variant in decl.variants:
            claim(
                f"{decl.name}{variant.name}",
                f"variant {decl.name}::{variant.name}",
                variant.location,
            )

    issues = []
    for name, declared_by in owners.items():
        if name in MODULE_RESERVED and name_problem(name) is None:
            issues.append(
                ValidationIssue(
                    declared_by[0],
                    f"generated name '{name}' shadows a name the generated module uses",
                    key=name,
                    location=locations[name],
                )
            )
        # duplicate declarations of the same kind are reported elsewhere
        if len(set(declared_by)) > 1:
            issues.append(
                ValidationIssue(
                    declared_by[0],
                    f"generated name '{name}' collides with {', '.join(declared_by[1:])}",
                    key=name,
                    location=locations[name],
                )
            )
    return issues


def validate_module(module: ir.VariantsModule) -> list[str]:
    """
    Run every validation pass.

    Returns:
        Warnings (already logged)

    Raises:
        ValidationError: Carrying every issue found
    """
    issues = validate_value_enums(module)
    decl_issues, warnings = validate_variants_decls(module)
    issues.extend(decl_issues)
    issues.extend(validate_generated_names(module))

    for warning in warnings:
        logger.warning(warning)

    if issues:
        raise ValidationError(issues)
    return warnings
