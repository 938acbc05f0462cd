"""
Generalized Black-Scholes pricing with cost of carry.

This module implements the closed-form price of a European option under
the generalized Black-Scholes model, in which the cost-of-carry rate b
replaces the usual r - q drift. Setting b = r recovers the classical
non-dividend formula, b = r - q the Merton dividend model and b = 0 the
Black (1976) futures model.

Mathematical Background:
    d1 = [ln(S/K) + (r + σ²/2)T] / (σ√T)
    d2 = d1 - σ√T
    C  = S·e^((b-r)T)·N(d1) - K·e^(-rT)·N(d2)
    P  = K·e^(-rT)·N(-d2) - S·e^((b-r)T)·N(-d1)

Degenerate inputs (T = 0, σ = 0, S = 0) are evaluated in IEEE arithmetic
and yield inf/NaN results instead of raising, so that a sweep running into
a boundary still returns a full series.

References:
    Haug, E. G. (2007). The Complete Guide to Option Pricing Formulas, 2nd ed.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import numpy as np

from optsweep.core.distributions import normal_cdf, normal_pdf
from optsweep.core.pricing_model import SideToggleMixin, sweep_spot
from optsweep.diagnostics.parity import confirm_parity_against, confirm_parity_internal
from optsweep.utils.constants import PARITY_TOLERANCE
from optsweep.utils.types import OptionSide, ParityCheck, ParityReport, SpotSweep

logger = logging.getLogger(__name__)


def _standardized_moneyness(
    S: float, K: float, T: float, drift: float, sig: float
) -> tuple[float, float]:
    """
    Return (d1, σ√T) for the given drift, evaluated in IEEE arithmetic.

    The price uses drift = r while the Greeks use drift = b.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        vol_sqrt_t = np.float64(sig) * np.sqrt(np.float64(T))
        d1 = (np.log(np.float64(S) / K) + (drift + 0.5 * sig * sig) * T) / vol_sqrt_t

    if not np.isfinite(d1):
        logger.debug("Non-finite d1=%s for S=%s K=%s T=%s sig=%s", d1, S, K, T, sig)

    return float(d1), float(vol_sqrt_t)


def _growth(rate: float, T: float) -> np.float64:
    """e^(rate·T) in IEEE arithmetic; overflows to inf."""
    with np.errstate(over="ignore"):
        return np.exp(np.float64(rate) * T)


def _check_bump(h: float) -> None:
    if not h > 0:
        raise ValueError(f"Finite-difference step must be positive, got h={h}")


@dataclass
class EuropeanOption(SideToggleMixin):
    """
    European option priced with the generalized Black-Scholes formula.

    Attributes:
        K: Strike price
        T: Time to expiration in years
        r: Risk-free interest rate (annualized, continuous)
        b: Cost-of-carry rate
        sig: Volatility (annualized standard deviation)
        q: Continuous dividend yield, carried for reference only
        side: Call or put, toggled in place by ``toggle_side``
    """

    K: float
    T: float
    r: float
    b: float
    sig: float
    q: float = 0.0
    side: OptionSide = OptionSide.CALL

    def describe(self) -> str:
        return (
            f"European {self.side.value}: K={self.K} T={self.T} r={self.r} "
            f"b={self.b} sig={self.sig} q={self.q}"
        )

    # ===========================
    # Pricing
    # ===========================

    def _call_put(self, S: float) -> tuple[float, float]:
        d1, vol_sqrt_t = _standardized_moneyness(S, self.K, self.T, self.r, self.sig)
        d2 = d1 - vol_sqrt_t

        carry = _growth(self.b - self.r, self.T)
        discount = _growth(-self.r, self.T)

        with np.errstate(over="ignore", invalid="ignore"):
            call = S * normal_cdf(d1) * carry - self.K * discount * normal_cdf(d2)
            put = self.K * discount * normal_cdf(-d2) - S * normal_cdf(-d1) * carry
        return float(call), float(put)

    def price(self, spot: float) -> float:
        """
        Price of the option on its current side.

        Args:
            spot: Current spot price of the underlying

        Returns:
            Option price

        Examples:
            >>> option = EuropeanOption(K=65, T=0.25, r=0.08, b=0.08, sig=0.30)
            >>> abs(option.price(60) - 2.13337) < 1e-4
            True
        """
        call, put = self._call_put(spot)
        return call if self.side is OptionSide.CALL else put

    def pcp_price(self, spot: float) -> float:
        """
        Price of the opposite side, from the same d1 and d2.

        The stored side is left untouched.
        """
        call, put = self._call_put(spot)
        return put if self.side is OptionSide.CALL else call

    # ===========================
    # Put-Call Parity
    # ===========================

    def confirm_parity_internal(
        self, spot: float, tolerance: float = PARITY_TOLERANCE
    ) -> ParityCheck:
        """Check parity between ``price`` and ``pcp_price``."""
        return confirm_parity_internal(self, spot, tolerance)

    def confirm_parity_against(
        self,
        other: "EuropeanOption",
        spot: float,
        tolerance: float = PARITY_TOLERANCE,
    ) -> ParityCheck:
        """Check parity between this option and an independently priced opposite side."""
        return confirm_parity_against(self, other, spot, tolerance)

    def parity_report(self, spot: float, tolerance: float = PARITY_TOLERANCE) -> ParityReport:
        """
        Price both sides at ``spot`` and run every parity check between them.

        The option itself is not modified; the call and put are copies.
        """
        call = replace(self, side=OptionSide.CALL)
        put = replace(self, side=OptionSide.PUT)

        return ParityReport(
            spot=spot,
            call_price=call.price(spot),
            put_price=put.price(spot),
            call_pcp_price=call.pcp_price(spot),
            put_pcp_price=put.pcp_price(spot),
            call_internal=call.confirm_parity_internal(spot, tolerance),
            put_internal=put.confirm_parity_internal(spot, tolerance),
            call_against_put=call.confirm_parity_against(put, spot, tolerance),
            put_against_call=put.confirm_parity_against(call, spot, tolerance),
        )

    # ===========================
    # Spot sweep
    # ===========================

    def sweep_spot(self, spots: Sequence[float]) -> SpotSweep:
        """
        Price both sides for every spot in ``spots``.

        The side is toggled to price the opposite leg and toggled back for
        each element, so the option is left on the side it started on.
        """
        return sweep_spot(self, spots)

    # ===========================
    # Greeks
    # ===========================

    def delta(self, spot: float, h: Optional[float] = None) -> float:
        """
        Option delta (∂V/∂S).

        Without ``h`` the closed form is used:
            Call: e^((b-r)T)·N(d1)
            Put:  e^((b-r)T)·(N(d1) - 1)
        with d1 built from the carry b. With ``h`` the central difference
        (V(S+h) - V(S-h)) / 2h is returned instead.
        """
        if h is not None:
            _check_bump(h)
            return (self.price(spot + h) - self.price(spot - h)) / (2.0 * h)

        d1, _ = _standardized_moneyness(spot, self.K, self.T, self.b, self.sig)
        carry = _growth(self.b - self.r, self.T)

        with np.errstate(invalid="ignore"):
            if self.side is OptionSide.CALL:
                return float(carry * normal_cdf(d1))
            return float(carry * (normal_cdf(d1) - 1.0))

    def gamma(self, spot: float, h: Optional[float] = None) -> float:
        """
        Option gamma (∂²V/∂S²), identical for calls and puts.

        Formula:
            Γ = φ(d1)·e^((b-r)T) / (S·σ·√T)

        With ``h`` the central second difference
        (V(S+h) - 2V(S) + V(S-h)) / h² is returned instead.
        """
        if h is not None:
            _check_bump(h)
            return (self.price(spot + h) - 2.0 * self.price(spot) + self.price(spot - h)) / (h * h)

        d1, vol_sqrt_t = _standardized_moneyness(spot, self.K, self.T, self.b, self.sig)
        carry = _growth(self.b - self.r, self.T)

        with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
            value = normal_pdf(d1) * carry / (np.float64(spot) * vol_sqrt_t)
        return float(value)

