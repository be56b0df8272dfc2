"""
Tokenizer for single-variable answer expressions.

This module provides regex-based tokenization for the restricted grammar used
when grading typed answers: decimal numbers, single-letter variables,
``+ - * / ^``, parentheses and ``sqrt``.  Superscript glyphs are expected to
have been rewritten to ``^2``/``^3`` before tokenizing.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types for answer expressions."""

    # Literals
    NUMBER = auto()
    VARIABLE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    POWER = auto()

    # Parentheses
    LPAREN = auto()
    RPAREN = auto()

    # Special
    FUNCTION = auto()
    EOF = auto()


@dataclass
class Token:
    """
    Represents a single token in the expression.

    Attributes:
        type: The token type
        value: The string value of the token
        pos: Position in the source string (for error reporting)
    """

    type: TokenType
    value: str
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, '{self.value}', pos={self.pos})"


class Tokenizer:
    """
    Tokenizes answer expressions.

    Letters are emitted one at a time, so ``xy`` is two variable tokens
    (which the parser then rejects as adjacent).  The only multi-letter
    word recognised is ``sqrt``.
    """

    # Order matters: FUNCTION before VARIABLE, POWER before MULTIPLY
    PATTERNS = {
        "NUMBER": r"\d+\.?\d*|\.\d+",
        "FUNCTION": r"sqrt",
        "VARIABLE": r"[a-zA-Z]",
        "POWER": r"\*\*|\^",
        "PLUS": r"\+",
        "MINUS": r"-",
        "MULTIPLY": r"\*",
        "DIVIDE": r"/",
        "LPAREN": r"\(",
        "RPAREN": r"\)",
        "WHITESPACE": r"\s+",
    }

    FUNCTIONS = {"sqrt"}

    def __init__(self):
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        """Compile regex patterns for faster matching."""
        pattern_parts = []
        for name, pattern in self.PATTERNS.items():
            pattern_parts.append(f"(?P<{name}>{pattern})")

        self.combined_pattern = re.compile("|".join(pattern_parts))

    def tokenize(self, expression: str) -> list[Token]:
        """
        Tokenize an answer expression.

        Args:
            expression: The expression to tokenize

        Returns:
            List of tokens, always terminated by an EOF token

        Raises:
            ValueError: If expression contains characters outside the grammar
        """
        tokens: list[Token] = []
        pos = 0

        while pos < len(expression):
            match = self.combined_pattern.match(expression, pos)

            if not match:
                raise ValueError(
                    f"Invalid character at position {pos}: '{expression[pos]}'"
                )

            kind = match.lastgroup
            value = match.group()
            token_pos = pos
            pos = match.end()

            if kind == "WHITESPACE":
                continue

            tokens.append(Token(TokenType[kind], value, token_pos))

        tokens.append(Token(TokenType.EOF, "", pos))
        return tokens
