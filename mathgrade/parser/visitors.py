"""
AST visitors.

EvalVisitor evaluates a parsed answer expression with real arithmetic only.
It resolves nothing except the variables bound by the caller and ``sqrt``;
there is no path from an answer string to arbitrary code.
"""

import math

from .ast import BinaryOp, FunctionCall, Number, UnaryOp, Variable


class EvalVisitor:
    """
    Evaluate AST to a real number.

    Args:
        bindings: Variable name → value mappings
    """

    FUNCTIONS = {
        "sqrt": math.sqrt,
    }

    def __init__(self, bindings: dict[str, float] | None = None):
        self.bindings = bindings or {}

    def visit_number(self, node: Number) -> float:
        return node.value

    def visit_variable(self, node: Variable) -> float:
        if node.name in self.bindings:
            return self.bindings[node.name]
        raise ValueError(f"Undefined variable: {node.name}")

    def visit_binary_op(self, node: BinaryOp) -> float:
        left = node.left.accept(self)
        right = node.right.accept(self)

        if node.op == "+":
            return left + right
        elif node.op == "-":
            return left - right
        elif node.op == "*":
            return left * right
        elif node.op == "/":
            return left / right
        elif node.op in ("^", "**"):
            result = left**right
            # Negative base with fractional exponent leaves the reals
            if isinstance(result, complex):
                raise ValueError(f"Non-real power: {left}^{right}")
            return result
        else:
            raise ValueError(f"Unknown operator: {node.op}")

    def visit_unary_op(self, node: UnaryOp) -> float:
        operand = node.operand.accept(self)

        if node.op == "-":
            return -operand
        elif node.op == "+":
            return +operand
        else:
            raise ValueError(f"Unknown unary operator: {node.op}")

    def visit_function_call(self, node: FunctionCall) -> float:
        args = [arg.accept(self) for arg in node.args]

        if node.name in self.FUNCTIONS:
            return self.FUNCTIONS[node.name](*args)

        raise ValueError(f"Unknown function: {node.name}")
