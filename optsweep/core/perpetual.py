"""
Perpetual American option pricing.

A perpetual American option never expires, so the early-exercise boundary
is constant and the free-boundary ODE has a closed-form solution.

Formula:
    σ² = sig², fac = (b/σ² - 1/2)²
    Call: y1 = 1/2 - b/σ² + √(fac + 2r/σ²)
          C  = K/(y1 - 1) · ((y1 - 1)/y1 · S/K)^y1
    Put:  y2 = 1/2 - b/σ² - √(fac + 2r/σ²)
          P  = K/(1 - y2) · ((y2 - 1)/y2 · S/K)^y2

References:
    Merton, R. C. (1973). Theory of Rational Option Pricing.
    Bell Journal of Economics and Management Science, 4(1), 141-183.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from optsweep.core.pricing_model import SideToggleMixin, sweep_spot
from optsweep.utils.types import OptionSide, SpotSweep


@dataclass
class PerpetualAmericanOption(SideToggleMixin):
    """
    Perpetual American option.

    Attributes:
        K: Strike price
        r: Risk-free interest rate
        b: Cost-of-carry rate
        sig: Volatility
        q: Continuous dividend yield, carried for reference only
        side: Call or put
    """

    K: float
    r: float
    b: float
    sig: float
    q: float = 0.0
    side: OptionSide = OptionSide.CALL

    def describe(self) -> str:
        return (
            f"Perpetual American {self.side.value}: K={self.K} r={self.r} "
            f"b={self.b} sig={self.sig} q={self.q}"
        )

    def price(self, spot: float) -> float:
        """
        Price of the option on its current side.

        When the exponent degenerates (y1 == 1 for a call, y2 == 0 for a
        put) the price is the spot itself.

        Examples:
            >>> option = PerpetualAmericanOption(K=100, r=0.1, b=0.02, sig=0.1)
            >>> abs(option.price(110) - 18.5035) < 1e-3
            True
        """
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            sig2 = np.float64(self.sig) * self.sig
            fac = (self.b / sig2 - 0.5) ** 2
            root = np.sqrt(fac + 2.0 * self.r / sig2)

            if self.side is OptionSide.CALL:
                y1 = 0.5 - self.b / sig2 + root
                if y1 == 1.0:
                    return spot
                value = self.K * (((y1 - 1.0) * spot) / (y1 * self.K)) ** y1 / (y1 - 1.0)
            else:
                y2 = 0.5 - self.b / sig2 - root
                if y2 == 0.0:
                    return spot
                value = self.K * (((y2 - 1.0) * spot) / (y2 * self.K)) ** y2 / (1.0 - y2)

        return float(value)

    def sweep_spot(self, spots: Sequence[float]) -> SpotSweep:
        """Call and put prices for every spot; the side is restored afterwards."""
        return sweep_spot(self, spots)
