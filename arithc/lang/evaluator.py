"""Tree-walking evaluator for arithc syntax trees.

Arithmetic is signed 64-bit two's complement, the same as the instructions emitted by lowering.py: +, - and * wrap
modulo 2**64, / truncates toward zero. The only division that overflows, INT_MIN / -1, wraps back to INT_MIN.
"""

from arithc.lang.error import DivisionByZero, GenericException
from arithc.pure.lexical import TokenType
from arithc.pure.syntax import BinaryOp, Number, postorder


BITS = 64
INT_MIN = -2 ** (BITS - 1)


def wrap(value):
    """Reduces value to a signed 64-bit integer."""
    return (value - INT_MIN) % 2 ** BITS + INT_MIN


def divide(left, right):
    """Signed division truncating toward zero (Python's // floors)."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def apply(op, left, right, node):
    """Applies op to already-evaluated operands. node is only used for error messages."""
    if op is TokenType.ADD:
        return wrap(left + right)
    elif op is TokenType.SUB:
        return wrap(left - right)
    elif op is TokenType.MULT:
        return wrap(left * right)
    elif op is TokenType.DIV:
        if right == 0:
            raise DivisionByZero(node)
        return wrap(divide(left, right))
    raise GenericException("'{}' is not a binary operator", op.name, internal=True)


def evaluate(node):
    """Returns the value of a syntax tree. Both operands are evaluated, left first, before the operator applies."""
    values = []
    for sub_node in postorder(node):
        if isinstance(sub_node, Number):
            values.append(sub_node.value)
        elif isinstance(sub_node, BinaryOp):
            right = values.pop()
            left = values.pop()
            values.append(apply(sub_node.op, left, right, sub_node))
        else:
            raise GenericException("expected syntax tree node, got '{}'", repr(sub_node), internal=True)
    return values.pop()
