"""Runtime values of the cax language, and the operator semantics shared by the tree-walking interpreter and the VM.

Both evaluators call the functions below, so an expression gives the same result (or the same error) on either
backend. Arithmetic and ordering are only defined on Numbers; equality is defined on every value.
"""

import math
from dataclasses import dataclass

from caxlang.lang.error import BinaryOperatorOnNonNumber, UnaryOperatorOnNonNumber


class RuntimeVal:
    """Superclass of every value an expression can evaluate to: String, Number, Bool or Nil."""

    def __str__(self):
        return repr(self)


@dataclass(frozen=True)
class String(RuntimeVal):
    value: str

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Number(RuntimeVal):
    value: float

    def __str__(self):
        if math.isfinite(self.value) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


@dataclass(frozen=True)
class Bool(RuntimeVal):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Nil(RuntimeVal):

    def __str__(self):
        return "nil"


NIL = Nil()
TRUE = Bool(True)
FALSE = Bool(False)


def is_truthy(value):
    """nil and false are falsy, everything else is truthy."""
    return not (isinstance(value, Nil) or value == FALSE)


def _numbers(operator, left, right):
    """Returns the float payloads of left and right, raises BinaryOperatorOnNonNumber if either is not a Number."""
    if not (isinstance(left, Number) and isinstance(right, Number)):
        raise BinaryOperatorOnNonNumber(operator, left, right)
    return left.value, right.value


def negate(operator, value):
    if not isinstance(value, Number):
        raise UnaryOperatorOnNonNumber(operator, value)
    return Number(-value.value)


def logical_not(operator, value):
    return Bool(not is_truthy(value))


def add(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Number(a + b)


def subtract(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Number(a - b)


def multiply(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Number(a * b)


def divide(operator, left, right):
    """IEEE-754 division: dividing by zero gives an infinity (or nan for 0/0) instead of raising."""
    a, b = _numbers(operator, left, right)
    if b == 0:
        if a == 0 or math.isnan(a):
            return Number(math.nan)
        return Number(math.copysign(math.inf, a) * math.copysign(1.0, b))
    return Number(a / b)


def less(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Bool(a < b)


def greater(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Bool(a > b)


def less_equal(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Bool(a <= b)


def greater_equal(operator, left, right):
    a, b = _numbers(operator, left, right)
    return Bool(a >= b)


def equal(operator, left, right):
    """Values of different variants are never equal. Numbers compare as floats, so nan is not equal to itself."""
    if isinstance(left, Number) and isinstance(right, Number):
        return Bool(left.value == right.value)
    return Bool(left == right)


def not_equal(operator, left, right):
    return Bool(not equal(operator, left, right).value)
