"""
Base parser class for the shader variant DSL.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from ..errors import ParseError, make_parse_error
from ..lexer import Token, TokenType

if TYPE_CHECKING:
    from .. import ir

T = TypeVar("T")


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: Path, source: str | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            source: Source text, used to quote the offending line in errors
        """
        self.tokens = tokens
        self.file = file
        self.source = source
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def error(self, message: str, token: Token, expected: str | None = None) -> ParseError:
        """Build a ParseError located at ``token``."""
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            expected=expected,
            source=self.source,
        )

    def expect(self, token_type: TokenType, expected: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            expected = expected or f"'{token_type.value}'"
            raise self.error(f"Expected {expected}, got {describe(token)}", token, expected)
        return self.advance()

    def expect_name(self, what: str = "identifier") -> Token:
        """
        Expect an identifier.

        Keywords are rejected with a hint, since every name ends up as a
        Python identifier in generated code.
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER:
            return self.advance()

        if token.value and token.value.isidentifier():
            raise self.error(
                f"'{token.value}' is a reserved keyword and cannot be used as {what}",
                token,
                what,
            )
        raise self.error(f"Expected {what}, got {describe(token)}", token, what)

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def location(self, token: Token) -> "ir.SourceLocation":
        from .. import ir

        return ir.SourceLocation(file=str(self.file), line=token.line, column=token.column)

    def parse_visibility(self) -> bool:
        """
        Parse an optional visibility marker.

        Grammar:
            ("pub" ("(" IDENTIFIER ")")?)?

        Returns:
            True when the declaration is public
        """
        if not self.match(TokenType.PUB):
            return False
        self.advance()
        if self.match(TokenType.LPAREN):
            self.advance()
            self.expect_name("visibility scope")
            self.expect(TokenType.RPAREN)
        return True

    def parse_comma_list(
        self,
        close: TokenType,
        item: Callable[[], T],
    ) -> list[T]:
        """
        Parse ``item ("," item)* ","?`` up to (and consuming) ``close``.

        The opening delimiter must already have been consumed.
        """
        items: list[T] = []
        while not self.match(close):
            if self.match(TokenType.EOF):
                raise self.error(
                    f"Unexpected end of input, expected '{close.value}'",
                    self.current_token(),
                    f"'{close.value}'",
                )
            items.append(item())
            if not self.match(close):
                self.expect(TokenType.COMMA, f"',' or '{close.value}'")
        self.advance()
        return items


def describe(token: Token) -> str:
    """Human-readable description of a token for error messages."""
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.STRING:
        return f'string "{token.value}"'
    return f"'{token.value}'"
