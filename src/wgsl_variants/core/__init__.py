"""Core wgsl-variants functionality: IR, parser, validator, enumerator, preprocessing, codegen."""

from . import ir
from .compiler import compile_file, compile_module, compile_source, load_module
from .dsl_parser_impl import parse_dsl
from .errors import (
    CodegenError,
    ErrorContext,
    ParseError,
    PreprocessingError,
    ResourceError,
    ValidationError,
    ValidationIssue,
    VariantsError,
)
from .manifest import ProjectManifest, load_manifest
from .preprocess import JinjaPreprocessor, PreprocessingBridge, Preprocessor
from .validator import validate_module

__all__ = [
    "ir",
    "parse_dsl",
    "validate_module",
    "load_module",
    "compile_module",
    "compile_source",
    "compile_file",
    "load_manifest",
    "ProjectManifest",
    "Preprocessor",
    "JinjaPreprocessor",
    "PreprocessingBridge",
    "VariantsError",
    "ParseError",
    "ValidationError",
    "ValidationIssue",
    "ResourceError",
    "PreprocessingError",
    "CodegenError",
    "ErrorContext",
]
