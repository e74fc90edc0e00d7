"""xcheck Lexer — Tokenizer with line/column tracking.

Produces a stream of tokens from source code. Every token remembers where
it started so that instrumentation errors can point at the offending
declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from xcheck.errors import SourceLocation, syntax_error, CompileError


class TokenType(Enum):
    # Keywords
    FN = auto()
    PUB = auto()
    STRUCT = auto()
    ENUM = auto()
    UNION = auto()
    MOD = auto()
    IMPL = auto()
    USE = auto()
    CONST = auto()
    TYPE = auto()
    LET = auto()
    MUT = auto()
    RETURN = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    FOR = auto()
    IN = auto()
    BREAK = auto()
    CONTINUE = auto()
    TRUE = auto()
    FALSE = auto()
    AS = auto()

    # Literals
    INT_LIT = auto()
    FLOAT_LIT = auto()
    STRING_LIT = auto()

    # Identifier
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    EQ = auto()
    NEQ = auto()
    GTE = auto()
    LTE = auto()
    GT = auto()
    LT = auto()
    ARROW = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    ASSIGN = auto()
    DOT = auto()
    DOUBLE_COLON = auto()

    # Delimiters
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COLON = auto()
    COMMA = auto()
    SEMICOLON = auto()
    AT = auto()
    AT_BANG = auto()

    # Special
    EOF = auto()


KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FN,
    "pub": TokenType.PUB,
    "struct": TokenType.STRUCT,
    "enum": TokenType.ENUM,
    "union": TokenType.UNION,
    "mod": TokenType.MOD,
    "impl": TokenType.IMPL,
    "use": TokenType.USE,
    "const": TokenType.CONST,
    "type": TokenType.TYPE,
    "let": TokenType.LET,
    "mut": TokenType.MUT,
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "as": TokenType.AS,
}

_SINGLE_CHAR: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
}

_RADIX_PREFIXES = {"x": 16, "X": 16, "o": 8, "O": 8, "b": 2, "B": 2}


@dataclass
class Token:
    type: TokenType
    value: str
    location: SourceLocation

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.location})"


class Lexer:
    """Tokenizer for xcheck source code."""

    def __init__(self, source: str, filename: str = "<stdin>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def _loc(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.filename)

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def _peek_ahead(self, offset: int = 1) -> Optional[str]:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return None

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in (" ", "\t", "\r", "\n"):
                self._advance()
            elif ch == "/" and self._peek_ahead() == "/":
                while self.pos < len(self.source) and self.source[self.pos] != "\n":
                    self._advance()
            elif ch == "/" and self._peek_ahead() == "*":
                loc = self._loc()
                self._advance()
                self._advance()
                while True:
                    if self.pos >= len(self.source):
                        raise CompileError(syntax_error("Unterminated block comment", loc))
                    if self.source[self.pos] == "*" and self._peek_ahead() == "/":
                        self._advance()
                        self._advance()
                        break
                    self._advance()
            else:
                break

    def _read_string(self) -> Token:
        loc = self._loc()
        self._advance()  # opening quote
        value = ""
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                return Token(TokenType.STRING_LIT, value, loc)
            if ch == "\\":
                if self.pos >= len(self.source):
                    break
                next_ch = self._advance()
                escape_map = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"'}
                value += escape_map.get(next_ch, next_ch)
            else:
                value += ch
        raise CompileError(syntax_error("Unterminated string literal", loc))

    def _read_number(self) -> Token:
        loc = self._loc()
        value = ""
        if self._peek() == "0" and self._peek_ahead() in _RADIX_PREFIXES:
            value += self._advance()
            value += self._advance()
            while self.pos < len(self.source) and (self.source[self.pos].isalnum() or self.source[self.pos] == "_"):
                value += self._advance()
            if len(value.replace("_", "")) == 2:
                raise CompileError(syntax_error(f"Missing digits after '{value}'", loc))
            return Token(TokenType.INT_LIT, value, loc)

        is_float = False
        while self.pos < len(self.source) and (self.source[self.pos].isdigit() or self.source[self.pos] in "._"):
            if self.source[self.pos] == ".":
                if is_float:
                    break
                if self._peek_ahead() and self._peek_ahead().isdigit():
                    is_float = True
                else:
                    break
            value += self._advance()
        token_type = TokenType.FLOAT_LIT if is_float else TokenType.INT_LIT
        return Token(token_type, value, loc)

    def _read_identifier(self) -> Token:
        loc = self._loc()
        value = ""
        while self.pos < len(self.source) and (self.source[self.pos].isalnum() or self.source[self.pos] == "_"):
            value += self._advance()
        token_type = KEYWORDS.get(value, TokenType.IDENT)
        return Token(token_type, value, loc)

    def _two_char(self, loc: SourceLocation, second: str,
                  double: TokenType, single: TokenType) -> Token:
        first = self._advance()
        if self._peek() == second:
            self._advance()
            return Token(double, first + second, loc)
        return Token(single, first, loc)

    def tokenize(self) -> list[Token]:
        tokens: list[Token] = []
        while self.pos < len(self.source):
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.source):
                break

            ch = self._peek()
            loc = self._loc()

            if ch == '"':
                tokens.append(self._read_string())
            elif ch.isdigit():
                tokens.append(self._read_number())
            elif ch.isalpha() or ch == "_":
                tokens.append(self._read_identifier())
            elif ch in _SINGLE_CHAR:
                self._advance()
                tokens.append(Token(_SINGLE_CHAR[ch], ch, loc))
            elif ch == "-":
                tokens.append(self._two_char(loc, ">", TokenType.ARROW, TokenType.MINUS))
            elif ch == "=":
                tokens.append(self._two_char(loc, "=", TokenType.EQ, TokenType.ASSIGN))
            elif ch == "!":
                tokens.append(self._two_char(loc, "=", TokenType.NEQ, TokenType.NOT))
            elif ch == ">":
                tokens.append(self._two_char(loc, "=", TokenType.GTE, TokenType.GT))
            elif ch == "<":
                tokens.append(self._two_char(loc, "=", TokenType.LTE, TokenType.LT))
            elif ch == ":":
                tokens.append(self._two_char(loc, ":", TokenType.DOUBLE_COLON, TokenType.COLON))
            elif ch == "@":
                tokens.append(self._two_char(loc, "!", TokenType.AT_BANG, TokenType.AT))
            elif ch == "&":
                self._advance()
                if self._peek() == "&":
                    self._advance()
                    tokens.append(Token(TokenType.AND, "&&", loc))
                else:
                    raise CompileError(syntax_error("Unexpected character '&'", loc))
            elif ch == "|":
                self._advance()
                if self._peek() == "|":
                    self._advance()
                    tokens.append(Token(TokenType.OR, "||", loc))
                else:
                    raise CompileError(syntax_error("Unexpected character '|'", loc))
            else:
                self._advance()
                raise CompileError(syntax_error(f"Unexpected character '{ch}'", loc))

        tokens.append(Token(TokenType.EOF, "", self._loc()))
        return tokens


def parse_int_literal(text: str) -> int:
    """Value of an integer literal token (decimal, 0x, 0o or 0b, with _)."""
    digits = text.replace("_", "")
    if len(digits) > 2 and digits[0] == "0" and digits[1] in _RADIX_PREFIXES:
        return int(digits[2:], _RADIX_PREFIXES[digits[1]])
    return int(digits)


def tokenize(source: str, filename: str = "<stdin>") -> list[Token]:
    """Convenience function to tokenize xcheck source code."""
    return Lexer(source, filename).tokenize()
