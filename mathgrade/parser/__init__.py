"""
Answer expression parser.

Tokenization, AST construction and restricted evaluation for the
single-variable expressions that graders compare numerically.
"""

from .ast import ASTNode, BinaryOp, FunctionCall, Number, UnaryOp, Variable
from .parser import ParseError, Parser
from .tokenizer import Token, Tokenizer, TokenType
from .visitors import EvalVisitor

__all__ = [
    "ASTNode",
    "Number",
    "Variable",
    "BinaryOp",
    "UnaryOp",
    "FunctionCall",
    "Token",
    "TokenType",
    "Tokenizer",
    "Parser",
    "ParseError",
    "EvalVisitor",
]
