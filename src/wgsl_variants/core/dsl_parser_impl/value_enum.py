"""
Value enum parser mixin.

DSL Syntax:

    pub value_enum MULTI as Multi: bool { Disabled = false, Enabled = true }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType


class ValueEnumParserMixin:
    """Parser mixin for value_enum declarations."""

    if TYPE_CHECKING:
        expect: Any
        expect_name: Any
        advance: Any
        match: Any
        current_token: Any
        location: Any
        parse_comma_list: Any
        parse_kind: Any
        parse_literal: Any

    def parse_value_enum(self, public: bool) -> ir.ValueEnumDeclaration:
        """
        Parse a value_enum declaration (visibility already consumed).

        Grammar:
            "value_enum" IDENTIFIER ("as" IDENTIFIER)? ":" kind
              "{" (IDENTIFIER "=" literal),* "}"

        Returns:
            ValueEnumDeclaration with its cases in declared order
        """
        keyword = self.expect(TokenType.VALUE_ENUM)
        name = self.expect_name("value enum name").value

        codegen_name = None
        if self.match(TokenType.AS):
            self.advance()
            codegen_name = self.expect_name("value enum alias").value

        self.expect(TokenType.COLON)
        kind = self.parse_kind()
        self.expect(TokenType.LBRACE)

        owner = f"value_enum '{name}'"

        def parse_case() -> ir.ValueEnumCase:
            case_token = self.expect_name("case name")
            self.expect(TokenType.EQUALS)
            value = self.parse_literal(kind, owner, case_token.value)
            return ir.ValueEnumCase(
                name=case_token.value,
                value=value,
                location=self.location(case_token),
            )

        values = self.parse_comma_list(TokenType.RBRACE, parse_case)

        return ir.ValueEnumDeclaration(
            name=name,
            codegen_name=codegen_name,
            kind=kind,
            values=values,
            public=public,
            location=self.location(keyword),
        )
