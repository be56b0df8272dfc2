"""
Numeric evaluation and sampling-based equivalence.

``evaluate`` runs a restricted answer expression at a point.  It goes through
``mathgrade.parser`` (numbers, ``x``, ``+ - * / ^``, parentheses, ``sqrt``)
and never hands the string to Python's own evaluator.

``numerically_equivalent`` samples both expressions at fixed points.  Two
low-degree polynomials agreeing at five or more of eight generic points are
treated as identical.  This is a heuristic suited to textbook factoring
answers, not a proof of identity.
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache

from ..parser import ASTNode, EvalVisitor, ParseError, Parser

logger = logging.getLogger(__name__)

SAMPLE_POINTS: tuple[float, ...] = (0, 1, -1, 2, -2, 3, 0.5, -0.5)
MIN_VALID_POINTS = 5
TOLERANCE = 1e-9

_SUPERSCRIPTS = {"²": "^2", "³": "^3"}


def _preprocess(expr: str) -> str:
    for glyph, caret in _SUPERSCRIPTS.items():
        expr = expr.replace(glyph, caret)
    return expr


@lru_cache(maxsize=1024)
def _compile(expr: str) -> ASTNode | None:
    try:
        return Parser().parse(_preprocess(expr))
    except (ParseError, ValueError, RecursionError):
        return None


def evaluate(expr: str, x: float) -> float | None:
    """
    Evaluate a single-variable expression at ``x``.

    Both ``x`` and ``X`` are bound to the sample value; any other letter is
    undefined and makes the evaluation fail.

    Args:
        expr: Expression text, e.g. ``"2(x+4)(x+3)"`` or ``"(x²-1)"``
        x: Value substituted for the variable

    Returns:
        The finite real result, or None if the expression cannot be parsed
        or evaluated, or evaluates to a non-finite value
    """
    ast = _compile(expr)
    if ast is None:
        return None

    visitor = EvalVisitor({"x": float(x), "X": float(x)})
    try:
        result = ast.accept(visitor)
    except (ValueError, ArithmeticError, RecursionError):
        return None

    if not isinstance(result, float) or not math.isfinite(result):
        return None
    return result


def numerically_equivalent(expr_a: str, expr_b: str) -> bool:
    """
    Decide whether two expressions agree at the fixed sample points.

    A point counts as valid when both sides evaluate.  At least
    ``MIN_VALID_POINTS`` valid points are required and every valid pair must
    agree within ``TOLERANCE``.

    Examples:
        >>> numerically_equivalent("(x-2)(x+2)(x-1)(x+1)", "(x^2-1)(x^2-4)")
        True
        >>> numerically_equivalent("(x-1)(x+6)", "(x+1)(x+6)")
        False
    """
    valid = 0
    for point in SAMPLE_POINTS:
        a = evaluate(expr_a, point)
        b = evaluate(expr_b, point)
        if a is None or b is None:
            continue
        valid += 1
        if abs(a - b) >= TOLERANCE:
            return False

    if valid < MIN_VALID_POINTS:
        logger.debug(
            "Only %d valid sample points for %r vs %r", valid, expr_a, expr_b
        )
        return False
    return True
