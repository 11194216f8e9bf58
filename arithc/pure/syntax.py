"""Abstract syntax tree for arithc.

A statement's tree is made of exactly two kinds of node:

```
<node> ::= Number(value)                    ; leaf, a signed 64-bit integer
         | BinaryOp(<node>, op, <node>)     ; op is one of + - * /
```

Nodes are frozen: the parser builds them once and every consumer (evaluator, lowering, display) only reads them.
Consumers match on the two node classes explicitly instead of calling methods on the nodes.
"""

from dataclasses import dataclass, field
from typing import Tuple, Union

from arithc.lang.error import GenericException
from arithc.pure.lexical import OPERATORS, TokenType


@dataclass(frozen=True)
class Number:
    value: int
    offset: int = field(default=0, compare=False)


@dataclass(frozen=True)
class BinaryOp:
    left: "Node"
    op: TokenType
    right: "Node"
    offset: int = field(default=0, compare=False)  # position of the operator

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise GenericException("'{}' is not a binary operator", str(self.op), internal=True)


Node = Union[Number, BinaryOp]
Program = Tuple[Node, ...]


def postorder(node):
    """Yields every node of the tree under node: left subtree, right subtree, then the node itself. Uses an explicit
    stack, so a statement's length is not limited by Python's recursion depth.
    """
    stack = [(node, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, BinaryOp) and not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            yield node


def display(node, indents=0):
    """Displays a syntax tree, two spaces per level of depth.

    Format:
    Operator <op>
      <left subtree>
      <right subtree>
    """
    lines = []
    stack = [(node, indents)]
    while stack:
        node, indents = stack.pop()
        if isinstance(node, Number):
            lines.append(f"{' ' * indents}Number: {node.value}")
        elif isinstance(node, BinaryOp):
            lines.append(f"{' ' * indents}Operator {node.op.value}")
            stack.append((node.right, indents + 2))
            stack.append((node.left, indents + 2))
        else:
            raise TypeError(f"not a syntax tree node: {node!r}")
    return "\n".join(lines)


def infix(node):
    """Fully parenthesized source form of node, e.g. '((10 - 3) - 2)'."""
    parts = []
    for sub_node in postorder(node):
        if isinstance(sub_node, Number):
            parts.append(str(sub_node.value))
        elif isinstance(sub_node, BinaryOp):
            right = parts.pop()
            parts.append(f"({parts.pop()} {sub_node.op.value} {right})")
        else:
            raise TypeError(f"not a syntax tree node: {sub_node!r}")
    return parts.pop()
