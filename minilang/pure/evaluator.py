"""Tree-walking evaluator for minilang. Reduces a syntax tree to a float, performing assignments and printing as side
effects. Both operands of a binary operator are always evaluated, left first; nothing short-circuits.

A `for` loop runs until its condition is zero, with no iteration cap: an always-true condition never returns.
"""

import math
import sys

from minilang.lang.error import DivisionByZero, GenericException, ModuloByZero, NonIntegerModulus
from minilang.lang.numerical import display, is_integral
from minilang.pure.lexical import TokenKind
from minilang.pure.syntax import Assign, BinaryOp, Block, For, If, NumberLiteral, Print, VariableRef


class Evaluator:
    """Evaluates syntax trees against an Environment. print statements write to output (default: sys.stdout)."""

    def __init__(self, output=None):
        self.output = output

    def evaluate(self, node, env):
        """Returns value of node, mutating env for assignments. Raises an EvaluationError on runtime failure."""
        if isinstance(node, NumberLiteral):
            return node.value

        elif isinstance(node, VariableRef):
            return env.get(node.name)

        elif isinstance(node, Assign):
            value = self.evaluate(node.expr, env)
            env.set(node.name, value)
            return value

        elif isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply(node.operator.kind, left, right)

        elif isinstance(node, If):
            if self.evaluate(node.condition, env) != 0:
                return self.evaluate(node.then_branch, env)
            elif node.else_branch is not None:
                return self.evaluate(node.else_branch, env)
            return 0.0

        elif isinstance(node, For):
            self.evaluate(node.init, env)
            while self.evaluate(node.condition, env) != 0:
                self.evaluate(node.body, env)
                self.evaluate(node.update, env)
            return 0.0

        elif isinstance(node, Block):
            for statement in node.statements:
                self.evaluate(statement, env)
            return 0.0

        elif isinstance(node, Print):
            value = self.evaluate(node.expr, env)
            print(display(value), file=self.output if self.output is not None else sys.stdout)
            return 0.0

        raise GenericException("cannot evaluate '{}'", type(node).__name__, internal=True)

    @staticmethod
    def apply(kind, left, right):
        """Applies binary operator kind to two evaluated operands."""
        if kind is TokenKind.PLUS:
            return left + right
        elif kind is TokenKind.MINUS:
            return left - right
        elif kind is TokenKind.MULTIPLY:
            return left * right

        elif kind is TokenKind.DIVIDE:
            if right == 0:
                raise DivisionByZero()
            return left / right

        elif kind is TokenKind.MODULO:
            if right == 0:
                raise ModuloByZero()
            if not (is_integral(left) and is_integral(right)):
                raise NonIntegerModulus(repr(left), repr(right))
            return math.fmod(left, right)  # truncating: sign follows left

        elif kind is TokenKind.LESS:
            return 1.0 if left < right else 0.0
        elif kind is TokenKind.GREATER:
            return 1.0 if left > right else 0.0

        raise GenericException("unknown operator '{}'", kind.value, internal=True)
