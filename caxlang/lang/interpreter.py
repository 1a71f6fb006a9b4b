"""Tree-walking interpreter for the cax language. Evaluates an AST directly, by post-order recursion, without any
intermediate form and without mutating the tree.
"""

from caxlang.grammar.expr import Binary, Grouping, LiteralExpr, LiteralKind, Unary
from caxlang.lang import values
from caxlang.lang.error import (EvaluationError, EvaluationTooDeep, InvalidBinaryOperator, InvalidUnaryOperator,
                                LiteralIsExpr)
from caxlang.lang.lexical import TokenKind


class Interpreter:
    """Evaluates a list of top-level expressions to RuntimeVals."""
    UNARY = {
        TokenKind.MINUS: values.negate,
        TokenKind.BANG: values.logical_not,
    }
    BINARY = {
        TokenKind.PLUS: values.add,
        TokenKind.MINUS: values.subtract,
        TokenKind.MULT: values.multiply,
        TokenKind.DIV: values.divide,
        TokenKind.LESS: values.less,
        TokenKind.GREATER: values.greater,
        TokenKind.LEQUAL: values.less_equal,
        TokenKind.GEQUAL: values.greater_equal,
        TokenKind.DEQUAL: values.equal,
        TokenKind.NEQUAL: values.not_equal,
    }

    def __init__(self, ast):
        self.ast = ast

    def run(self):
        """Evaluates every top-level expression in order. Raises the first error encountered."""
        try:
            return [self.evaluate(expr) for expr in self.ast]
        except RecursionError:
            raise EvaluationTooDeep() from None

    @staticmethod
    def evaluate(expr):
        """Evaluates a single Expr node and returns a RuntimeVal."""
        if isinstance(expr, LiteralExpr):
            return Interpreter.literal(expr.literal)

        elif isinstance(expr, Grouping):
            return Interpreter.evaluate(expr.expr)

        elif isinstance(expr, Unary):
            right = Interpreter.evaluate(expr.right)

            operation = Interpreter.UNARY.get(expr.op.kind)
            if operation is None:
                raise InvalidUnaryOperator(str(expr.op), right, expr.op.start, expr.op.end)
            return Interpreter._located(operation, expr.op, right)

        elif isinstance(expr, Binary):
            left = Interpreter.evaluate(expr.left)
            right = Interpreter.evaluate(expr.right)

            operation = Interpreter.BINARY.get(expr.op.kind)
            if operation is None:
                raise InvalidBinaryOperator(str(expr.op), left, right, expr.op.start, expr.op.end)
            return Interpreter._located(operation, expr.op, left, right)

        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    @staticmethod
    def literal(literal):
        if literal.kind is LiteralKind.NUMBER:
            return values.Number(literal.value)
        elif literal.kind is LiteralKind.STRING:
            return values.String(literal.value)
        elif literal.kind is LiteralKind.TRUE:
            return values.TRUE
        elif literal.kind is LiteralKind.FALSE:
            return values.FALSE
        elif literal.kind is LiteralKind.NIL:
            return values.NIL
        raise LiteralIsExpr()

    @staticmethod
    def _located(operation, op, *operands):
        """Applies operation, pointing any error it raises at op."""
        try:
            return operation(str(op), *operands)
        except EvaluationError as error:
            error.at(op.start, op.end)
            raise
