"""
Answer comparison primitives.

- canonical: markup normalization and prefix stripping
- factors: order-independent comparison of factored products
- numeric: restricted evaluation and sampling-based equivalence
"""

from .canonical import canonicalize, light_normalize, strip_status_prefix, strip_variable_prefix
from .factors import extract_factors, factors_match
from .numeric import MIN_VALID_POINTS, SAMPLE_POINTS, TOLERANCE, evaluate, numerically_equivalent

__all__ = [
    "canonicalize",
    "light_normalize",
    "strip_status_prefix",
    "strip_variable_prefix",
    "extract_factors",
    "factors_match",
    "evaluate",
    "numerically_equivalent",
    "SAMPLE_POINTS",
    "MIN_VALID_POINTS",
    "TOLERANCE",
]
