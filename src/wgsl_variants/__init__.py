"""
wgsl-variants - shader variant code generator.

Compiles ``value_enum`` / ``variants`` declarations plus WGSL templates
into a Python module holding a closed set of shader variant types and the
preprocessed source of every concrete variant.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

# Re-export commonly used types for convenience
from .core import ir
from .core.compiler import compile_file, compile_source
from .core.errors import (
    CodegenError,
    ParseError,
    PreprocessingError,
    ResourceError,
    ValidationError,
    VariantsError,
)


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    # Fall back to installed metadata
    try:
        return _metadata_version("wgsl-variants")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "compile_source",
    "compile_file",
    "VariantsError",
    "ParseError",
    "ValidationError",
    "ResourceError",
    "PreprocessingError",
    "CodegenError",
]
