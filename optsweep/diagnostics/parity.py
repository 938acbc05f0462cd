"""
Put-call parity diagnostics for European options with cost of carry.

With cost of carry b the no-arbitrage identity between a call C and a put P
of the same strike and expiry reads:

    C + K·e^(-rT) = P + S·e^((b-r)T)

The checks in this module never raise; they return a ParityCheck with the
two sides of the identity and any violation found.
"""

from typing import TYPE_CHECKING

import numpy as np

from optsweep.utils.constants import PARITY_TOLERANCE
from optsweep.utils.types import OptionSide, ParityCheck

if TYPE_CHECKING:
    from optsweep.core.european import EuropeanOption


def check_put_call_parity(
    call_price: float,
    put_price: float,
    S: float,
    K: float,
    T: float,
    r: float,
    b: float,
    tolerance: float = PARITY_TOLERANCE,
    side: OptionSide = OptionSide.CALL,
) -> ParityCheck:
    """
    Validate the put-call parity relationship.

    Args:
        call_price, put_price: Option prices
        S: Spot price
        K: Strike price
        T: Time to expiration
        r: Risk-free rate
        b: Cost-of-carry rate
        tolerance: Tolerance for parity check
        side: Side the check is reported from

    Returns:
        ParityCheck with validation results
    """
    with np.errstate(over="ignore", invalid="ignore"):
        lhs = float(call_price + K * np.exp(np.float64(-r) * T))
        rhs = float(put_price + S * np.exp(np.float64(b - r) * T))
        diff = abs(lhs - rhs)

    # NaN differences compare False and fail the check
    is_valid = bool(diff < tolerance)

    violations = []
    if not is_valid:
        violations.append(
            f"Put-call parity violated: C + K·e^(-rT) = {lhs:.10f}, "
            f"P + S·e^((b-r)T) = {rhs:.10f}, diff = {diff:.3e}"
        )

    details = {"parity_lhs": lhs, "parity_rhs": rhs, "difference": diff}

    return ParityCheck(is_valid=is_valid, side=side, violations=violations, details=details)


def confirm_parity_internal(
    option: "EuropeanOption", spot: float, tolerance: float = PARITY_TOLERANCE
) -> ParityCheck:
    """
    Check an option's price against its own parity-implied opposite price.

    For a call, ``price`` is the call and ``pcp_price`` the put; for a put
    the roles are swapped.
    """
    own = option.price(spot)
    implied = option.pcp_price(spot)
    call_price, put_price = (own, implied) if option.is_call else (implied, own)

    return check_put_call_parity(
        call_price, put_price, spot, option.K, option.T, option.r, option.b,
        tolerance=tolerance, side=option.side,
    )


def confirm_parity_against(
    option: "EuropeanOption",
    other: "EuropeanOption",
    spot: float,
    tolerance: float = PARITY_TOLERANCE,
) -> ParityCheck:
    """
    Check an option against a second, independently priced option.

    ``other`` is expected to be the opposite side. The identity is evaluated
    with ``option``'s strike, expiry and rates, so a pair that disagrees on
    any of those fails even if each passes its internal check.
    """
    if other.side is option.side:
        return ParityCheck(
            is_valid=False,
            side=option.side,
            violations=[f"Both options are {option.side.value}s; parity needs a call and a put"],
        )

    own = option.price(spot)
    theirs = other.price(spot)
    call_price, put_price = (own, theirs) if option.is_call else (theirs, own)

    return check_put_call_parity(
        call_price, put_price, spot, option.K, option.T, option.r, option.b,
        tolerance=tolerance, side=option.side,
    )
