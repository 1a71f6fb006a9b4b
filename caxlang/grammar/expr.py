"""Abstract syntax tree for the cax language.

Formally, cax grammar can be defined as (lowest to highest precedence, all binary rules associating by left)

```
<expression> ::= <equality>
<equality>   ::= <comparison> (("!=" | "==") <comparison>)*
<comparison> ::= <term> (("<" | ">" | "<=" | ">=") <term>)*
<term>       ::= <factor> (("+" | "-") <factor>)*
<factor>     ::= <unary> (("*" | "/") <unary>)*
<unary>      ::= ("!" | "-") <unary> | <primary>               ; prefix, binds tighter than any binary operator
<primary>    ::= NUMBER | STRING | "true" | "false" | "nil" | "(" <expression> ")"
```

Every node exclusively owns its children: trees are acyclic and never shared.

Source: https://craftinginterpreters.com/parsing-expressions.html
"""

import math
from dataclasses import dataclass
from enum import Enum


class LiteralKind(Enum):
    NUMBER = "number"
    STRING = "string"
    TRUE = "true"
    FALSE = "false"
    NIL = "nil"
    EXPR = "expr"  # never built by the parser, evaluating one is an internal error


@dataclass(frozen=True)
class Literal:
    kind: LiteralKind
    value: object = None

    def __str__(self):
        if self.kind is LiteralKind.NUMBER:
            value = float(self.value)
            return str(int(value)) if math.isfinite(value) and value.is_integer() else repr(value)
        elif self.kind is LiteralKind.STRING:
            return f'"{self.value}"'
        elif self.kind is LiteralKind.EXPR:
            return str(self.value)
        return self.kind.value


class Expr:
    """Superclass for every AST node."""

    @property
    def nodes(self):
        """Child nodes, left to right."""
        return []

    def label(self):
        """Short description of this node (without its children), used by display."""
        return type(self).__name__

    def display(self, indents=0):
        """Recursively displays Expr tree with readable format.

        Format:
        <Expr>(<label>, nodes=[
            <Expr>(<label>, nodes=[
                ...
                <Expr>(<label>)  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}({self.label()}"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


@dataclass(frozen=True)
class LiteralExpr(Expr):
    literal: Literal

    def label(self):
        return str(self.literal)

    def __str__(self):
        return str(self.literal)


@dataclass(frozen=True)
class Grouping(Expr):
    expr: Expr

    @property
    def nodes(self):
        return [self.expr]

    def label(self):
        return "()"

    def __str__(self):
        return f"(group {self.expr})"


@dataclass(frozen=True)
class Unary(Expr):
    op: object  # Token
    right: Expr

    @property
    def nodes(self):
        return [self.right]

    def label(self):
        return f"'{self.op}'"

    def __str__(self):
        return f"({self.op} {self.right})"


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    op: object  # Token
    right: Expr

    @property
    def nodes(self):
        return [self.left, self.right]

    def label(self):
        return f"'{self.op}'"

    def __str__(self):
        return f"({self.op} {self.left} {self.right})"


def number(value):
    return LiteralExpr(Literal(LiteralKind.NUMBER, float(value)))


def string(value):
    return LiteralExpr(Literal(LiteralKind.STRING, value))


TRUE = LiteralExpr(Literal(LiteralKind.TRUE))
FALSE = LiteralExpr(Literal(LiteralKind.FALSE))
NIL = LiteralExpr(Literal(LiteralKind.NIL))
