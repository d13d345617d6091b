"""Abstract syntax tree for minilang. Every node is immutable and owns its children outright, so a tree compares
structurally: parsing the same text twice gives equal trees.

```
<node> ::= NumberLiteral(value)
         | VariableRef(name)
         | BinaryOp(left, operator, right)        ; operator is one of + - * / % < >
         | Assign(name, expr)
         | If(condition, then_branch, else_branch) ; else_branch may be None
         | For(init, condition, update, body)
         | Block(statements)
         | Print(expr)
```
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple

from minilang.pure.lexical import Token, TokenKind


BINARY_OPERATORS = (TokenKind.PLUS, TokenKind.MINUS, TokenKind.MULTIPLY, TokenKind.DIVIDE, TokenKind.MODULO,
                    TokenKind.LESS, TokenKind.GREATER)


class Node:
    """Superclass of all syntax tree nodes."""

    @property
    def children(self):
        """Child nodes, in evaluation order."""
        nodes = []
        for value in (getattr(self, f.name) for f in fields(self)):
            if isinstance(value, Node):
                nodes.append(value)
            elif isinstance(value, tuple):
                nodes.extend(value)
        return nodes

    def label(self):
        """Short description of this node, without its children."""
        return type(self).__name__

    def display(self, indents=0):
        """Recursively displays tree with readable format.

        Format:
        <label>[
            <label>[
                ...
                <label>  # <-- if node has no children
            ]
        ]
        """
        result = f"{'    ' * indents}{self.label()}"
        if self.children:
            result += "["
            for node in self.children:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result


@dataclass(frozen=True)
class NumberLiteral(Node):
    value: float

    def label(self):
        return f"NumberLiteral({self.value!r})"


@dataclass(frozen=True)
class VariableRef(Node):
    name: str

    def label(self):
        return f"VariableRef('{self.name}')"


@dataclass(frozen=True)
class BinaryOp(Node):
    left: Node
    operator: Token
    right: Node

    def __post_init__(self):
        assert self.operator.kind in BINARY_OPERATORS, f"{self.operator} is not a binary operator"

    def label(self):
        return f"BinaryOp('{self.operator.text}')"


@dataclass(frozen=True)
class Assign(Node):
    name: str
    expr: Node

    def label(self):
        return f"Assign('{self.name}')"


@dataclass(frozen=True)
class If(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass(frozen=True)
class For(Node):
    init: Node
    condition: Node
    update: Node
    body: Node


@dataclass(frozen=True)
class Block(Node):
    statements: Tuple[Node, ...] = ()


@dataclass(frozen=True)
class Print(Node):
    expr: Node
