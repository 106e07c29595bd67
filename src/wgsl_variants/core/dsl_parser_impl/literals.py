"""
Scalar kind and literal parser mixin.

Literal kinds are checked here, at parse time, so that a mismatch is
reported with the exact location plus the declaration and key it belongs to.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

INTEGER_LITERAL = re.compile(
    r"^(?P<digits>0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)(?P<suffix>i32|u32)?$"
)

RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}

MAX_SIGNIFICANT_DIGITS = 32

KIND_NAMES = {kind.value: kind for kind in ir.ScalarKind}


class LiteralParserMixin:
    """Parser mixin for scalar kinds and typed literals."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any

    def parse_kind(self) -> ir.ScalarKind:
        """
        Parse a scalar kind.

        Grammar:
            "bool" | "i32" | "u32"
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER and token.value in KIND_NAMES:
            self.advance()
            return KIND_NAMES[token.value]
        raise self.error(
            f"Expected bool, i32 or u32 as scalar kind, got '{token.value}'",
            token,
            "bool, i32 or u32",
        )

    def parse_literal(self, kind: ir.ScalarKind, owner: str, key: str) -> ir.DefValue:
        """
        Parse a literal of the given kind.

        Args:
            kind: Declared scalar kind the literal must match
            owner: Declaration (and variant) the literal belongs to
            key: Definition key or case name, for error messages

        Raises:
            ParseError: If the literal is malformed, of the wrong kind or out of range
        """
        token = self.current_token()

        if self.match(TokenType.TRUE, TokenType.FALSE):
            if kind is not ir.ScalarKind.BOOL:
                raise self.error(
                    f"Literal kind mismatch in {owner}: '{key}' is declared {kind.value} "
                    f"but got bool literal '{token.value}'",
                    token,
                    f"{kind.value} literal",
                )
            self.advance()
            return ir.DefValue.bool_(token.type == TokenType.TRUE)

        if not self.match(TokenType.NUMBER, TokenType.MINUS):
            raise self.error(
                f"Expected {kind.value} literal for '{key}' in {owner}, got '{token.value}'",
                token,
                f"{kind.value} literal",
            )

        if kind is ir.ScalarKind.BOOL:
            raise self.error(
                f"Literal kind mismatch in {owner}: '{key}' is declared bool "
                f"but got integer literal",
                token,
                "true or false",
            )

        negative = False
        if self.match(TokenType.MINUS):
            negative = True
            self.advance()
        number = self.expect(TokenType.NUMBER, "integer literal")

        match = INTEGER_LITERAL.match(number.value)
        if match is None:
            raise self.error(
                f"Invalid integer literal '{number.value}' for '{key}' in {owner}",
                number,
                "integer literal",
            )

        suffix = match.group("suffix")
        if suffix is not None and suffix != kind.value:
            raise self.error(
                f"Literal kind mismatch in {owner}: '{key}' is declared {kind.value} "
                f"but the literal has suffix '{suffix}'",
                number,
                f"{kind.value} literal",
            )

        digits = match.group("digits").replace("_", "")
        base = RADIX_PREFIXES.get(digits[:2], 10)
        body = digits[2:] if base != 10 else digits
        if not body:
            raise self.error(
                f"Invalid integer literal '{number.value}' for '{key}' in {owner}",
                number,
                "integer literal",
            )
        # No 32-bit value needs more significant digits than this in any radix.
        if len(body.lstrip("0")) > MAX_SIGNIFICANT_DIGITS:
            raise self.error(
                f"Invalid literal for '{key}' in {owner}: "
                f"literal '{number.value[:16]}...' is out of range for {kind.value}",
                token,
                f"{kind.value} literal",
            )
        value = int(body, base)
        if negative:
            value = -value

        problem = kind.check(value)
        if problem:
            raise self.error(
                f"Invalid literal for '{key}' in {owner}: {problem}",
                token,
                f"{kind.value} literal",
            )

        return ir.DefValue(kind=kind, value=value)
