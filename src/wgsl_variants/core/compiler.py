"""
Compiler driver.

Runs the full pipeline for one declaration text:

1. Parse (ParseError)
2. Validate (ValidationError)
3. Per variants declaration, in order: read the template (ResourceError),
   preprocess every concrete case (PreprocessingError)
4. Emit the Python module

Every error is fatal and no partial artifact is returned.
"""

from __future__ import annotations

import logging
from pathlib import Path

from . import ir
from .codegen import PythonEmitter, ResolvedCase, ResolvedDeclaration
from .dsl_parser_impl import parse_dsl
from .enumerator import enumerate_combinations, resolve_cross_product
from .errors import ResourceError
from .preprocess import JinjaPreprocessor, PreprocessingBridge, Preprocessor
from .validator import validate_module

logger = logging.getLogger(__name__)


def read_text_file(path: Path, what: str) -> str:
    """
    Read a UTF-8 file fully.

    Raises:
        ResourceError: If the file is missing, unreadable or not UTF-8
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceError(f"Cannot read {what} '{path}': {e}", path) from e


def resolve_declaration(
    module: ir.VariantsModule,
    decl: ir.VariantsDeclaration,
    template: str,
    preprocessor: Preprocessor,
) -> ResolvedDeclaration:
    """
    Preprocess every concrete case of one validated declaration.

    Hardcoded variants produce one case each, cross-product variants one
    case per combination in odometer order.
    """
    bridge = PreprocessingBridge(
        preprocessor,
        template,
        declaration=decl.name,
        shared=decl.shared_definitions(),
    )
    resolved = ResolvedDeclaration(declaration=decl, template=template)

    for variant in decl.variants:
        bridge.begin_variant(variant.name)

        if isinstance(variant, ir.HardCodedVariant):
            overrides = {d.key: d.value for d in variant.definitions}
            source = bridge.process(overrides)
            resolved.cases.append(ResolvedCase(variant.name, (), source))
            continue

        value_enums = resolve_cross_product(module, variant)
        for combination in enumerate_combinations(value_enums):
            source = bridge.process(combination.overrides(), combination.index)
            resolved.cases.append(ResolvedCase(variant.name, combination.selections, source))

    return resolved


def compile_module(
    module: ir.VariantsModule,
    base_dir: Path | None = None,
    preprocessor: Preprocessor | None = None,
) -> str:
    """
    Generate Python source for an already validated module.

    Args:
        module: Parsed and validated declarations
        base_dir: Directory template paths are relative to (default: cwd)
        preprocessor: Text preprocessor (default: JinjaPreprocessor)

    Returns:
        Generated Python module source
    """
    base_dir = base_dir or Path.cwd()
    preprocessor = preprocessor or JinjaPreprocessor()

    resolved = []
    for decl in module.variants_decls:
        template_path = base_dir / decl.template_path
        template = read_text_file(template_path, "template")

        entry = resolve_declaration(module, decl, template, preprocessor)
        logger.info(
            "Generated %s from %s (%d cases)", decl.name, decl.template_path, len(entry.cases)
        )
        resolved.append(entry)

    return PythonEmitter(module).emit(resolved)


def load_module(text: str, file: Path) -> ir.VariantsModule:
    """Parse and validate declaration text."""
    module = parse_dsl(text, file)
    validate_module(module)
    return module


def compile_source(
    text: str,
    file: Path = Path("<string>"),
    base_dir: Path | None = None,
    preprocessor: Preprocessor | None = None,
) -> str:
    """
    Parse, validate and generate Python source from declaration text.

    Raises:
        ParseError, ValidationError, ResourceError, PreprocessingError
    """
    module = load_module(text, file)
    return compile_module(module, base_dir, preprocessor)


def compile_file(
    path: Path,
    base_dir: Path | None = None,
    preprocessor: Preprocessor | None = None,
) -> str:
    """Compile a declaration file (see compile_source)."""
    text = read_text_file(path, "declaration file")
    return compile_source(text, path, base_dir, preprocessor)
