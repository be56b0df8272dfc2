"""
Abstract Syntax Tree (AST) node definitions for answer expressions.

The node set is deliberately small: numbers, the free variable, binary and
unary arithmetic, and function calls.  Nodes follow the Visitor pattern so
evaluation lives outside the tree.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol


class ASTVisitor(Protocol):
    """Visitor protocol for traversing AST nodes."""

    def visit_number(self, node: "Number") -> Any:
        ...

    def visit_variable(self, node: "Variable") -> Any:
        ...

    def visit_binary_op(self, node: "BinaryOp") -> Any:
        ...

    def visit_unary_op(self, node: "UnaryOp") -> Any:
        ...

    def visit_function_call(self, node: "FunctionCall") -> Any:
        ...


class ASTNode(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor for traversal."""
        pass

    @abstractmethod
    def __repr__(self) -> str:
        pass


# Leaf Nodes (terminals)


class Number(ASTNode):
    """
    Represents a numeric literal.

    Examples: 42, 3.14, .5
    """

    def __init__(self, value: float | int):
        self.value = float(value)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_number(self)

    def __repr__(self) -> str:
        return f"Number({self.value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Number) and self.value == other.value


class Variable(ASTNode):
    """Represents a single-letter variable."""

    def __init__(self, name: str):
        self.name = name

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable(self)

    def __repr__(self) -> str:
        return f"Variable('{self.name}')"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Variable) and self.name == other.name


# Composite Nodes


class BinaryOp(ASTNode):
    """
    Binary operation.

    Examples: 2 + 3, x * y, x ^ 2
    """

    def __init__(self, left: ASTNode, op: str, right: ASTNode):
        self.left = left
        self.op = op
        self.right = right

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_op(self)

    def __repr__(self) -> str:
        return f"BinaryOp({self.left!r}, '{self.op}', {self.right!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, BinaryOp)
            and self.op == other.op
            and self.left == other.left
            and self.right == other.right
        )


class UnaryOp(ASTNode):
    """Unary plus or minus."""

    def __init__(self, op: str, operand: ASTNode):
        self.op = op
        self.operand = operand

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_op(self)

    def __repr__(self) -> str:
        return f"UnaryOp('{self.op}', {self.operand!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, UnaryOp)
            and self.op == other.op
            and self.operand == other.operand
        )


class FunctionCall(ASTNode):
    """Function application, e.g. sqrt(x+1)."""

    def __init__(self, name: str, args: list[ASTNode]):
        self.name = name
        self.args = args

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_call(self)

    def __repr__(self) -> str:
        return f"FunctionCall('{self.name}', {self.args!r})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, FunctionCall)
            and self.name == other.name
            and self.args == other.args
        )
