"""
Answer string normalization.

Turns LaTeX-flavoured answer markup into a flat comparison token so that
``$x = \\frac{1}{2}$`` and ``x=1/2`` compare equal.  Every function here is
pure and total: constructs it does not understand pass through unchanged.
"""

from __future__ import annotations

import re

# Applied in order; later rules assume earlier ones removed markup noise
_INLINE_MATH = re.compile(r"\$([^$]+)\$")
_FRAC = re.compile(r"\\frac\{([^}]+)\}\{([^}]+)\}")
_SQRT = re.compile(r"\\sqrt\{([^}]+)\}")
_CDOT = re.compile(r"\\cdot")
_TEXT = re.compile(r"\\text\{[^}]*\}")
_NOISE = re.compile(r"[\\{}\s]")

_VARIABLE_PREFIX = re.compile(r"^[a-z]\s*=\s*", re.IGNORECASE)
_STATUS_PREFIX = re.compile(r"^(Not complete|Incomplete|Complete):\s*", re.IGNORECASE)
_COMPLETE_SENTINEL = re.compile(r"^complete$", re.IGNORECASE)

_LIGHT_NOISE = re.compile(r"[$\\\s]")


def canonicalize(s: str) -> str:
    """
    Normalize a raw answer string into a comparison token.

    Pipeline:
        1. ``$...$`` → inner content
        2. ``\\frac{A}{B}`` → ``A/B``
        3. ``\\sqrt{A}`` → ``sqrt(A)``
        4. ``\\cdot`` → ``*``
        5. ``\\text{...}`` removed with its content
        6. remaining backslashes, braces and whitespace removed
        7. lower-cased
        8. ``^2`` → ``²`` and ``^3`` → ``³``

    Higher powers stay as ``^n`` and compare literally.

    Examples:
        >>> canonicalize("$x = -\\\\frac{1}{2}$")
        'x=-1/2'
        >>> canonicalize("$(x + 2)^2$")
        '(x+2)²'
    """
    s = _INLINE_MATH.sub(r"\1", s)
    s = _FRAC.sub(r"\1/\2", s)
    s = _SQRT.sub(r"sqrt(\1)", s)
    s = _CDOT.sub("*", s)
    s = _TEXT.sub("", s)
    s = _NOISE.sub("", s)
    s = s.lower()
    return s.replace("^2", "²").replace("^3", "³")


def light_normalize(s: str) -> str:
    """
    Strip only dollar signs, backslashes and whitespace, then lower-case.

    No LaTeX construct is rewritten; this catches answers the richer
    canonicalizer would mangle.
    """
    return _LIGHT_NOISE.sub("", s).lower()


def strip_variable_prefix(s: str) -> str:
    """Remove a leading ``<letter> =`` so ``x=5`` compares equal to ``5``."""
    return _VARIABLE_PREFIX.sub("", s).strip()


def strip_status_prefix(answer: str) -> tuple[str, bool]:
    """
    Remove a ``Not complete:``/``Incomplete:``/``Complete:`` status prefix.

    Returns:
        Tuple of (remaining answer text, whether that text is exactly the
        sentinel word ``Complete``)
    """
    cleaned = _STATUS_PREFIX.sub("", answer)
    return cleaned, bool(_COMPLETE_SENTINEL.match(cleaned.strip()))
