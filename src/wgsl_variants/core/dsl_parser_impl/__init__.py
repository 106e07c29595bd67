"""
Shader variant DSL Parser Package.

The parser is built using mixins to separate parsing logic by construct type.

The main exports are:
- Parser: The complete parser class
- parse_dsl: Convenience function to parse declaration text

Usage:
    from wgsl_variants.core.dsl_parser_impl import parse_dsl

    module = parse_dsl(text, Path("shaders.wgslv"))
"""

from pathlib import Path

from .. import ir
from ..lexer import TokenType, tokenize
from .base import BaseParser
from .literals import LiteralParserMixin
from .value_enum import ValueEnumParserMixin
from .variants import VariantsParserMixin


class Parser(
    BaseParser,
    LiteralParserMixin,
    ValueEnumParserMixin,
    VariantsParserMixin,
):
    """
    Complete shader variant DSL Parser.

    - LiteralParserMixin: Scalar kinds and typed literals
    - ValueEnumParserMixin: value_enum declarations
    - VariantsParserMixin: variants declarations, hardcoded and cross-product variants
    """

    def parse(self) -> ir.VariantsModule:
        """
        Parse the whole input.

        Returns:
            VariantsModule with all declarations in source order
        """
        value_enums: list[ir.ValueEnumDeclaration] = []
        variants_decls: list[ir.VariantsDeclaration] = []

        while not self.match(TokenType.EOF):
            public = self.parse_visibility()

            if self.match(TokenType.VALUE_ENUM):
                value_enums.append(self.parse_value_enum(public))
            elif self.match(TokenType.VARIANTS):
                variants_decls.append(self.parse_variants(public))
            else:
                token = self.current_token()
                raise self.error(
                    f"Expected either 'value_enum' or 'variants', got '{token.value}'",
                    token,
                    "'value_enum' or 'variants'",
                )

        return ir.VariantsModule(
            file=str(self.file),
            value_enums=value_enums,
            variants_decls=variants_decls,
        )


def parse_dsl(text: str, file: Path) -> ir.VariantsModule:
    """
    Parse declaration text.

    Args:
        text: DSL source text
        file: Source file path (for error reporting)

    Returns:
        VariantsModule with every value_enum and variants declaration

    Raises:
        ParseError: On the first syntax error
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, source=text)
    return parser.parse()


__all__ = [
    "Parser",
    "parse_dsl",
    "BaseParser",
    "LiteralParserMixin",
    "ValueEnumParserMixin",
    "VariantsParserMixin",
]
