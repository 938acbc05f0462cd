"""
Normal distribution helpers for the closed-form pricers.

Both functions take the scalar d1/d2 values produced in IEEE arithmetic,
so they may see ±inf or NaN when an option's inputs are degenerate
(zero expiry, zero volatility). Infinities saturate to the limit of the
function and NaN is passed through unchanged.
"""

import math

from scipy.stats import norm

from optsweep.utils.constants import MAX_STANDARD_DEVIATIONS, PDF_CUTOFF


def normal_cdf(x: float) -> float:
    """
    N(x), saturated to exactly 0 or 1 beyond ±MAX_STANDARD_DEVIATIONS.

    Examples:
        >>> normal_cdf(0.0)
        0.5
        >>> normal_cdf(-12.0)
        0.0
    """
    if math.isnan(x):
        return math.nan
    if abs(x) > MAX_STANDARD_DEVIATIONS:
        return 1.0 if x > 0 else 0.0
    return float(norm.cdf(x))


def normal_pdf(x: float) -> float:
    """φ(x), zero beyond ±PDF_CUTOFF."""
    if math.isnan(x):
        return math.nan
    if abs(x) > PDF_CUTOFF:
        return 0.0
    return float(norm.pdf(x))
