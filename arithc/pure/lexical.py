"""Lexical analysis for arithc: turns source text into tokens, one at a time.

The `pure` directory contains the language itself (tokens, syntax tree, grammar). Running, lowering, and reporting
errors live in `lang`.

Token grammar:

```
<number>    ::= <digit>+            ; decimal, unsigned, leading zeros allowed, must fit in a signed 64-bit integer
<operator>  ::= "+" | "-" | "*" | "/"
<semicolon> ::= ";"
```

Whitespace between tokens is insignificant. Everything else is a LexError.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from arithc.lang.error import LexError


INT_MAX = 2 ** 63 - 1
DIGITS = "0123456789"
WHITESPACE = " \t\n\r\v\f"


class TokenType(enum.Enum):
    """Kinds of token. Values are the source spelling, or a readable name for tokens without a fixed spelling."""
    NUMBER = "number"
    ADD = "+"
    SUB = "-"
    MULT = "*"
    DIV = "/"
    SEMICOLON = ";"
    END = "end of input"

    @property
    def label(self):
        """Name used in error messages."""
        if self in (TokenType.NUMBER, TokenType.END):
            return self.value
        return f"'{self.value}'"


OPERATORS = {TokenType.ADD, TokenType.SUB, TokenType.MULT, TokenType.DIV}
SINGLE_CHAR = {kind.value: kind for kind in OPERATORS | {TokenType.SEMICOLON}}


@dataclass(frozen=True)
class Token:
    """Tagged lexical unit. Only NUMBER tokens carry a value. offset/width locate the token for error messages and are
    not part of equality.
    """
    kind: TokenType
    value: Optional[int] = None
    offset: int = field(default=0, compare=False)
    width: int = field(default=1, compare=False)

    def describe(self):
        if self.kind is TokenType.NUMBER:
            return f"number {self.value}"
        return self.kind.label

    def __str__(self):
        if self.kind is TokenType.NUMBER:
            return f"{self.kind.name} {self.value} @{self.offset}"
        return f"{self.kind.name} @{self.offset}"


class Lexer:
    """Produces tokens lazily from a read-only source string. The cursor never moves backwards, and once the input is
    exhausted every call to next_token returns END.
    """

    def __init__(self, source, trace=None, pos=0):
        self.source = source
        self.pos = pos
        self.trace = trace

    def skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def number(self):
        """Consumes a maximal run of digits starting at self.pos."""
        start = self.pos
        value = 0
        while self.pos < len(self.source) and self.source[self.pos] in DIGITS:
            value = value * 10 + int(self.source[self.pos])
            self.pos += 1

        if value > INT_MAX:
            literal = self.source[start:self.pos]
            raise LexError(literal, start, msg="integer literal '{}' out of range", length=len(literal))

        return Token(TokenType.NUMBER, value, start, self.pos - start)

    def _next(self):
        self.skip_whitespace()
        if self.pos >= len(self.source):
            return Token(TokenType.END, offset=len(self.source))

        char = self.source[self.pos]
        if char in DIGITS:
            return self.number()

        if char not in SINGLE_CHAR:
            raise LexError(char, self.pos)

        self.pos += 1
        return Token(SINGLE_CHAR[char], offset=self.pos - 1)

    def next_token(self):
        """Returns the next token in the source."""
        token = self._next()
        if self.trace is not None:
            self.trace.token(token)
        return token

    def tokens(self):
        """Yields every remaining token, ending with (and including) END."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenType.END:
                return
