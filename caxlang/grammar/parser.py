"""Recursive descent parser for the cax language: one procedure per grammar rule, precedence encoded by call nesting.
For the grammar itself, see caxlang/grammar/expr.py.
"""

from caxlang.grammar.expr import Binary, Grouping, Literal, LiteralExpr, LiteralKind, Unary
from caxlang.lang.error import ParseError
from caxlang.lang.lexical import TokenKind, tokenize


class Parser:
    """Converts a token sequence into one AST per top-level expression. Peeks exactly one token ahead."""
    EQUALITY = (TokenKind.NEQUAL, TokenKind.DEQUAL)
    COMPARISON = (TokenKind.LESS, TokenKind.GREATER, TokenKind.LEQUAL, TokenKind.GEQUAL)
    TERM = (TokenKind.MINUS, TokenKind.PLUS)
    FACTOR = (TokenKind.DIV, TokenKind.MULT)
    UNARY = (TokenKind.BANG, TokenKind.MINUS)

    LITERALS = {
        TokenKind.NUMBER: LiteralKind.NUMBER,
        TokenKind.STRING: LiteralKind.STRING,
        TokenKind.TRUE: LiteralKind.TRUE,
        TokenKind.FALSE: LiteralKind.FALSE,
        TokenKind.NIL: LiteralKind.NIL,
    }

    def __init__(self, tokens, source=""):
        """tokens can be any iterable of Tokens (including a lazy Lexer). source is only used for error messages."""
        self.tokens = list(tokens)
        self.source = source
        self.pos = 0

    def parse(self):
        """Parses all tokens. The grammar currently allows exactly one top-level expression per program."""
        try:
            ast = [self.expression()]
        except RecursionError:
            token = self.peek()
            position = token.start if token is not None else len(self.source)
            raise ParseError("expression nested too deeply", token, position, self.source) from None

        if not self.at_end():
            self.error("expected end of input")

        return ast

    def expression(self):
        return self.equality()

    def equality(self):
        return self._binary(self.comparison, Parser.EQUALITY)

    def comparison(self):
        return self._binary(self.term, Parser.COMPARISON)

    def term(self):
        return self._binary(self.factor, Parser.TERM)

    def factor(self):
        return self._binary(self.unary, Parser.FACTOR)

    def _binary(self, operand, operators):
        """Parses a left-associative chain of operand, separated by any of operators."""
        expr = operand()

        while self.tmatch(*operators):
            op = self.previous()
            right = operand()
            expr = Binary(expr, op, right)

        return expr

    def unary(self):
        if self.tmatch(*Parser.UNARY):
            op = self.previous()
            right = self.unary()
            return Unary(op, right)

        return self.primary()

    def primary(self):
        token = self.peek()

        if token is not None and token.kind in Parser.LITERALS:
            self.advance()
            return LiteralExpr(Literal(Parser.LITERALS[token.kind], token.value))

        elif self.tmatch(TokenKind.LPAREN):
            expr = self.expression()
            self.consume(TokenKind.RPAREN, "expected ')' after expression")
            return Grouping(expr)

        self.error("expected expression")

    def error(self, msg):
        """Raises a ParseError at the current token (or at end of input)."""
        token = self.peek()
        position = token.start if token is not None else len(self.source)
        raise ParseError(msg, token, position, self.source)

    def consume(self, kind, msg):
        """Consumes a token of kind, raising a ParseError if the current token is anything else."""
        if not self.tmatch(kind):
            self.error(msg)
        return self.previous()

    def tmatch(self, *kinds):
        """If the current token is one of kinds, advances and returns True. Otherwise, returns False."""
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def check(self, kind):
        """Whether or not the current token is of kind. Does NOT consume any tokens, compared to tmatch."""
        token = self.peek()
        return token is not None and token.kind is kind

    def at_end(self):
        return self.pos >= len(self.tokens)

    def peek(self):
        """Returns the current token, or None at end of input."""
        if self.at_end():
            return None
        return self.tokens[self.pos]

    def previous(self):
        """Returns the token at self.pos - 1, or None if nothing has been consumed yet."""
        if self.pos == 0:
            return None
        return self.tokens[self.pos - 1]

    def advance(self):
        """Returns the current token and moves past it. At end of input, returns None and stays put."""
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token


def produce_ast(source):
    """Returns the list of top-level expressions in source."""
    return Parser(tokenize(source), source).parse()
