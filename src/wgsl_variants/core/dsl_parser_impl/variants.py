"""
Variants parser mixin.

DSL Syntax:

    pub variants LyapunovShader from "src/wgsl/lyapunov.wgsl" {
        shared { ITERATIONS: u32 = 512 },
        LogisticMap { FUNC: u32 = 0 },
        SinMap      { FUNC: u32 = 1 },
        Product(Variant, Multi),
    }

A variant named ``shared`` is pulled out as the default definition set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

SHARED_VARIANT_NAME = "shared"


class VariantsParserMixin:
    """Parser mixin for variants declarations."""

    if TYPE_CHECKING:
        expect: Any
        expect_name: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any
        location: Any
        parse_comma_list: Any
        parse_kind: Any
        parse_literal: Any

    def parse_variants(self, public: bool) -> ir.VariantsDeclaration:
        """
        Parse a variants declaration (visibility already consumed).

        Grammar:
            "variants" IDENTIFIER "from" STRING "{" variant,* "}"

        Returns:
            VariantsDeclaration with ``shared`` extracted from its variants
        """
        keyword = self.expect(TokenType.VARIANTS)
        name = self.expect_name("variants name").value
        self.expect(TokenType.FROM)
        template_path = self.expect(TokenType.STRING, "template path string").value
        self.expect(TokenType.LBRACE)

        shared: list[ir.Definition] | None = None
        variants: list[ir.HardCodedVariant | ir.CrossProductVariant] = []

        def parse_entry() -> None:
            nonlocal shared
            name_token = self.current_token()
            variant = self.parse_variant(name)

            if variant.name != SHARED_VARIANT_NAME:
                variants.append(variant)
                return

            if isinstance(variant, ir.CrossProductVariant):
                raise self.error(
                    f"'shared' block of variants '{name}' must use hardcoded definitions, "
                    f"not a cross product",
                    name_token,
                    "'{'",
                )
            if shared is not None:
                raise self.error(
                    f"Duplicate 'shared' block in variants '{name}'", name_token
                )
            shared = list(variant.definitions)

        self.parse_comma_list(TokenType.RBRACE, parse_entry)

        return ir.VariantsDeclaration(
            name=name,
            template_path=template_path,
            shared=shared,
            variants=variants,
            public=public,
            location=self.location(keyword),
        )

    def parse_variant(self, declaration: str) -> ir.HardCodedVariant | ir.CrossProductVariant:
        """
        Parse one variant.

        Grammar:
            IDENTIFIER "{" (IDENTIFIER ":" kind "=" literal),* "}"    # hardcoded
          | IDENTIFIER "(" IDENTIFIER,* ")"                          # cross product
        """
        name_token = self.expect_name("variant name")
        name = name_token.value

        if self.match(TokenType.LBRACE):
            self.advance()
            owner = f"variant '{declaration}::{name}'"

            def parse_definition() -> ir.Definition:
                key_token = self.expect_name("definition name")
                self.expect(TokenType.COLON)
                kind = self.parse_kind()
                self.expect(TokenType.EQUALS)
                value = self.parse_literal(kind, owner, key_token.value)
                return ir.Definition(
                    key=key_token.value,
                    value=value,
                    location=self.location(key_token),
                )

            definitions = self.parse_comma_list(TokenType.RBRACE, parse_definition)
            return ir.HardCodedVariant(
                name=name,
                definitions=definitions,
                location=self.location(name_token),
            )

        if self.match(TokenType.LPAREN):
            self.advance()
            enum_refs = self.parse_comma_list(
                TokenType.RPAREN,
                lambda: self.expect_name("value enum name").value,
            )
            return ir.CrossProductVariant(
                name=name,
                enum_refs=enum_refs,
                location=self.location(name_token),
            )

        token = self.current_token()
        raise self.error(
            f"Expected '{{' or '(' after variant '{name}', got '{token.value}'",
            token,
            "'{' or '('",
        )
