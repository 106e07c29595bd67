"""
Preprocessing bridge.

Feeds shader templates through an external text preprocessor once per
concrete variant. The bridge owns the definitions map discipline (shared
baseline, per-variant overrides, reset between top-level variants) and
turns collaborator failures into PreprocessingError; it never interprets
conditional-compilation syntax itself.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from jinja2 import Environment, StrictUndefined

from . import ir
from .errors import PreprocessingError

logger = logging.getLogger(__name__)


def _wgsl_literal(value: object) -> object:
    """Render bools the way WGSL spells them."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


@runtime_checkable
class Preprocessor(Protocol):
    """
    External text preprocessor.

    Implementations raise any exception on failure; the bridge wraps it.
    """

    def preprocess(self, template: str, definitions: Mapping[str, ir.DefValue]) -> str: ...


class JinjaPreprocessor:
    """
    Default preprocessor backed by Jinja2.

    Templates see every definition as a plain ``bool``/``int`` variable.
    With the default line statement prefix, WGSL templates can write:

        #if DEBUG
        let color = vec4(1.0, 0.0, 0.0, 1.0);
        #else
        let color = shade(z, {{ ITERATIONS }}u);
        #endif
    """

    def __init__(
        self,
        line_statement_prefix: str | None = "#",
        trim_blocks: bool = False,
        lstrip_blocks: bool = False,
    ):
        self.jinja_env = Environment(
            undefined=StrictUndefined,  # Raise error on undefined definitions
            keep_trailing_newline=True,
            line_statement_prefix=line_statement_prefix,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            autoescape=False,
            finalize=_wgsl_literal,
        )

    def preprocess(self, template: str, definitions: Mapping[str, ir.DefValue]) -> str:
        context = {key: value.value for key, value in definitions.items()}
        return self.jinja_env.from_string(template).render(**context)


class PreprocessingBridge:
    """
    Drives the preprocessor for the variants of one declaration.

    The working definitions map starts from the shared baseline and is
    reset to it by ``begin_variant`` before every top-level variant, so no
    override leaks from one variant into the next.
    """

    def __init__(
        self,
        preprocessor: Preprocessor,
        template: str,
        declaration: str,
        shared: Mapping[str, ir.DefValue] | None = None,
    ):
        self.preprocessor = preprocessor
        self.template = template
        self.declaration = declaration
        self.shared = dict(shared or {})
        self.definitions: dict[str, ir.DefValue] = dict(self.shared)
        self._variant: str | None = None

    def begin_variant(self, name: str) -> None:
        """Reset the definitions map to the shared baseline."""
        self.definitions.clear()
        self.definitions.update(self.shared)
        self._variant = name

    def process(
        self,
        overrides: Mapping[str, ir.DefValue],
        combination_index: int | None = None,
    ) -> str:
        """
        Preprocess the template with ``overrides`` applied over the current map.

        Args:
            overrides: Variant or combination specific definitions (they win)
            combination_index: Position in enumeration order, for cross products

        Raises:
            PreprocessingError: If the collaborator fails
        """
        if self._variant is None:
            raise RuntimeError("begin_variant() must be called before process()")

        self.definitions.update(overrides)
        try:
            source = self.preprocessor.preprocess(self.template, dict(self.definitions))
        except Exception as e:
            raise PreprocessingError(
                self.declaration,
                self._variant,
                combination_index,
                reason=f"{type(e).__name__}: {e}",
            ) from e

        logger.debug(
            "Preprocessed %s::%s%s",
            self.declaration,
            self._variant,
            "" if combination_index is None else f" #{combination_index}",
        )
        return source
