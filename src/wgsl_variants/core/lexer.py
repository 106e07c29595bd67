"""
Lexer/Tokenizer for the shader variant DSL.

Converts raw declaration text into a stream of tokens with source location
tracking. The language is brace-delimited, so whitespace and newlines are
insignificant.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in the shader variant DSL."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Keywords
    PUB = "pub"
    VALUE_ENUM = "value_enum"
    VARIANTS = "variants"
    FROM = "from"
    AS = "as"
    TRUE = "true"
    FALSE = "false"

    # Operators
    COLON = ":"
    COMMA = ","
    EQUALS = "="
    MINUS = "-"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    # Special
    EOF = "EOF"


KEYWORDS = {
    "pub",
    "value_enum",
    "variants",
    "from",
    "as",
    "true",
    "false",
}

PUNCTUATION = {
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "-": TokenType.MINUS,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for the shader variant DSL.

    Converts source text into a stream of tokens.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int, column: int, expected: str | None = None):
        return make_parse_error(
            message, self.file, line, column, expected=expected, source=self.text
        )

    def skip_whitespace_and_comments(self) -> None:
        """Skip whitespace, // line comments and /* block */ comments."""
        while True:
            ch = self.current_char()
            if ch is not None and ch.isspace():
                self.advance()
            elif ch == "/" and self.peek_char() == "/":
                while self.current_char() not in (None, "\n"):
                    self.advance()
            elif ch == "/" and self.peek_char() == "*":
                start_line, start_col = self.line, self.column
                self.advance()
                self.advance()
                while not (self.current_char() == "*" and self.peek_char() == "/"):
                    if self.current_char() is None:
                        raise self.error(
                            "Unterminated block comment", start_line, start_col, expected="*/"
                        )
                    self.advance()
                self.advance()
                self.advance()
            else:
                return

    def read_string(self) -> str:
        """Read a double-quoted string."""
        start_line = self.line
        start_col = self.column
        self.advance()  # skip opening quote

        chars = []
        while True:
            current = self.current_char()
            if current is None or current == '"':
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char is not None:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != '"':
            raise self.error("Unterminated string literal", start_line, start_col, expected='"')

        self.advance()  # skip closing quote
        return "".join(chars)

    def read_number(self) -> str:
        """
        Read an integer literal.

        Consumes digits, radix prefixes, `_` separators and a type suffix
        (e.g. ``0xFF``, ``1_000``, ``5u32``); the parser interprets them.
        """
        chars = []
        current = self.current_char()
        while current is not None and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current is not None and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens terminated by EOF

        Raises:
            ParseError: If an unexpected character is encountered
        """
        while True:
            self.skip_whitespace_and_comments()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch == '"':
                value = self.read_string()
                self.tokens.append(Token(TokenType.STRING, value, token_line, token_col))

            elif ch.isdigit():
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, token_line, token_col))

            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                if value in KEYWORDS:
                    token_type = TokenType(value)
                else:
                    token_type = TokenType.IDENTIFIER
                self.tokens.append(Token(token_type, value, token_line, token_col))

            elif ch in PUNCTUATION:
                self.advance()
                self.tokens.append(Token(PUNCTUATION[ch], ch, token_line, token_col))

            else:
                raise self.error(f"Unexpected character: {ch!r}", token_line, token_col)

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
