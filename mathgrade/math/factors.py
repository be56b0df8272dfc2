"""
Factored-form comparison.

Splits a product such as ``2(x+4)(x+3)`` into factor tokens and compares two
products while ignoring the order of their parenthesized factors.

Example:
    Match:    (x+8)(x+2)  vs  (x+2)(x+8)
    Match:    -(y+1)(2y+3) vs -(2y+3)(y+1)
    No match: 2(x+1)(x+2) vs 3(x+1)(x+2)   (coefficients differ)

Only grouped factors commute here.  A leading coefficient such as ``3x`` is
compared as written, it is never itself reordered.
"""

import re

_WHITESPACE = re.compile(r"\s")


def extract_factors(s: str) -> list[str]:
    """
    Split an expression into coefficient and parenthesized factor tokens.

    Scans left to right.  On ``(`` a balanced run is consumed (nesting depth
    is tracked) and emitted with its parentheses.  Anything else is consumed
    up to the next ``(`` and emitted as a coefficient token if non-empty.
    An unbalanced trailing group is emitted as far as it goes.

    Examples:
        >>> extract_factors("2(x+4)(x+3)")
        ['2', '(x+4)', '(x+3)']
        >>> extract_factors("(x+1)²(x-2)")
        ['(x+1)', '²', '(x-2)']
    """
    s = _WHITESPACE.sub("", s)
    factors: list[str] = []
    i = 0
    n = len(s)

    while i < n:
        if s[i] == "(":
            depth = 0
            start = i
            while i < n:
                if s[i] == "(":
                    depth += 1
                elif s[i] == ")":
                    depth -= 1
                i += 1
                if depth == 0:
                    break
            factors.append(s[start:i])
        else:
            start = i
            while i < n and s[i] != "(":
                i += 1
            coeff = s[start:i]
            if coeff:
                factors.append(coeff)

    return factors


def factors_match(a: str, b: str) -> bool:
    """
    Compare two products ignoring the order of parenthesized factors.

    Both sides must decompose into at least two factors of equal count.
    Coefficient tokens are joined in their original order and compared as
    strings; parenthesized tokens are sorted and compared element-wise.

    Args:
        a: First expression (already normalized)
        b: Second expression (already normalized)

    Returns:
        True if the factorizations are the same up to factor order
    """
    fa = extract_factors(a)
    fb = extract_factors(b)

    if len(fa) != len(fb) or len(fa) < 2:
        return False

    coeff_a = "*".join(f for f in fa if not f.startswith("("))
    coeff_b = "*".join(f for f in fb if not f.startswith("("))
    if coeff_a != coeff_b:
        return False

    parens_a = sorted(f for f in fa if f.startswith("("))
    parens_b = sorted(f for f in fb if f.startswith("("))
    return parens_a == parens_b
