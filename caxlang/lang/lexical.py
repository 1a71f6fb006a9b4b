"""Lexical analysis for the cax language. Converts source text into a lazy stream of Tokens, skipping whitespace.

All tokens can be loosely defined as follows:

```
<number>  ::= ("0" | [1-9][0-9]*) ("." [0-9]+)? ([eE] [+-]? [0-9]+)?   ; always a 64-bit float
<string>  ::= '"' (<char> | "\\" ["\\/bfnrt] | "\\u" <hex>{4})* '"'   ; no raw control characters
<ident>   ::= [A-Za-z_]+                                               ; "true", "false", "nil" are keywords
<op>      ::= "+" | "-" | "*" | "/" | "=" | "!" | "!=" | "<" | ">" | "<=" | ">=" | "=="
<group>   ::= "(" | ")"
```

Anything else (notably non-ASCII input) raises NonAsciiCharacter.
"""

import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum

from caxlang.lang.error import InvalidInteger, NonAsciiCharacter


class TokenKind(Enum):
    NUMBER = "number"
    STRING = "string"
    IDENT = "identifier"

    PLUS = "+"
    MINUS = "-"
    MULT = "*"
    DIV = "/"

    EQUAL = "="
    BANG = "!"
    NEQUAL = "!="
    LESS = "<"
    GREATER = ">"
    LEQUAL = "<="
    GEQUAL = ">="
    DEQUAL = "=="

    LPAREN = "("
    RPAREN = ")"

    TRUE = "true"
    FALSE = "false"
    NIL = "nil"


KEYWORDS = {"true": TokenKind.TRUE, "false": TokenKind.FALSE, "nil": TokenKind.NIL}


@dataclass(frozen=True)
class Token:
    """A single token. Only kind and value take part in equality, so Tokens can be compared without positions."""
    kind: TokenKind
    value: object = None
    lexeme: str = field(default="", compare=False, repr=False)
    start: int = field(default=0, compare=False, repr=False)
    end: int = field(default=0, compare=False, repr=False)

    @property
    def position(self):
        return self.start

    def __str__(self):
        return self.lexeme if self.lexeme else self.kind.value


class Lexer:
    """Lazy, restartable token stream over source. Every iteration re-lexes source from the start."""
    TOKEN_PATTERNS = [
        ("SKIP", r"[ \t\r\n]+"),
        ("NUMBER", r"(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"),
        ("STRING", r'"(?:[^"\\\x00-\x1F]|\\(?:["\\/bfnrt]|u[a-fA-F0-9]{4}))*"'),
        ("IDENT", r"[A-Za-z_]+"),
        ("OP", r"!=|<=|>=|==|[+\-*/=!<>()]"),
    ]
    PATTERN = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_PATTERNS))

    def __init__(self, source):
        self.source = source

    def __iter__(self):
        pos = 0
        while pos < len(self.source):
            match = Lexer.PATTERN.match(self.source, pos)
            if match is None:
                raise self._unmatched(pos)

            kind, lexeme = match.lastgroup, match.group()
            start, pos = pos, match.end()

            if kind == "SKIP":
                continue
            yield self._token(kind, lexeme, start, pos)

    def _token(self, kind, lexeme, start, end):
        """Converts a single regex match into a Token."""
        if kind == "NUMBER":
            value = float(lexeme)
            if math.isinf(value):
                raise InvalidInteger("overflow", self.source, start, end)
            return Token(TokenKind.NUMBER, value, lexeme, start, end)

        elif kind == "STRING":
            return Token(TokenKind.STRING, json.loads(lexeme), lexeme, start, end)  # same escapes as JSON

        elif kind == "IDENT":
            if lexeme in KEYWORDS:
                return Token(KEYWORDS[lexeme], None, lexeme, start, end)
            return Token(TokenKind.IDENT, lexeme, lexeme, start, end)

        return Token(TokenKind(lexeme), None, lexeme, start, end)

    def _unmatched(self, pos):
        """Returns the error for a character that starts no token. Malformed strings get a more specific message."""
        if self.source[pos] != '"':
            return NonAsciiCharacter(self.source, pos)

        idx = pos + 1
        while idx < len(self.source):
            char = self.source[idx]
            if char == '"':
                break
            elif ord(char) < 0x20:
                return NonAsciiCharacter(self.source, idx, msg="raw control character {} in string literal")
            elif char == "\\":
                idx += 1
            idx += 1
        else:
            return NonAsciiCharacter(self.source, pos, len(self.source), msg="unterminated string starting with {}")

        return NonAsciiCharacter(self.source, pos, idx + 1, msg="invalid escape in string starting with {}")


def tokenize(source):
    """Returns a lazy token stream over source."""
    return Lexer(source)
