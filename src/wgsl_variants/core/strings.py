"""
String utility functions for wgsl-variants.

Provides the name transformations shared by the validator and the emitter.
"""

from __future__ import annotations

import keyword
import re
import unicodedata

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """
    Convert a CamelCase or SHOUTY name to snake_case.

    Examples:
        >>> to_snake_case("Variant")
        'variant'
        >>> to_snake_case("ColorMode")
        'color_mode'
        >>> to_snake_case("MULTI")
        'multi'
        >>> to_snake_case("HTTPServer")
        'http_server'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def name_problem(name: str) -> str | None:
    """
    Describe why ``name`` cannot be used as a generated Python name.

    Returns:
        None if the name is usable
    """
    if not name.isidentifier():
        return f"'{name}' is not a valid Python identifier"
    if unicodedata.normalize("NFKC", name) != name:
        return f"'{name}' is not NFKC-normalized and would be renamed by Python"
    if keyword.iskeyword(name):
        return f"'{name}' is a Python keyword"
    if name.startswith("_"):
        return f"'{name}' starts with an underscore"
    return None
