"""
Delta and gamma analysis for a European option.

GreeksAnalyzer wraps one EuropeanOption and produces delta/gamma series
over a spot range, either in closed form or by central finite differences,
and compares the two as the bump size shrinks.

The comparison schedule starts at h = 0.1 and squares h after every round
(0.1, 0.01, 0.0001, ...). Squaring only shrinks h while h < 1.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from optsweep.core.european import EuropeanOption
from optsweep.utils.constants import INITIAL_FD_STEP
from optsweep.utils.types import GreeksComparison, GreeksSweep, OptionSide, SweepComparison

logger = logging.getLogger(__name__)


def _check_iterations(iterations: int) -> None:
    if iterations < 0:
        raise ValueError(f"iterations cannot be negative, got {iterations}")


class GreeksAnalyzer:
    """
    Exact and finite-difference Greeks for a wrapped European option.

    The option is held by reference. Sweeps toggle its side to evaluate the
    put leg and always toggle it back before returning.
    """

    def __init__(self, option: EuropeanOption) -> None:
        self.option = option

    def delta(self, spot: float, h: Optional[float] = None) -> float:
        return self.option.delta(spot, h)

    def gamma(self, spot: float, h: Optional[float] = None) -> float:
        return self.option.gamma(spot, h)

    def sweep_spot(self, spots: Sequence[float], h: Optional[float] = None) -> GreeksSweep:
        """
        Call delta, put delta and gamma for every spot.

        Args:
            spots: Spot series
            h: Bump size; closed-form Greeks when omitted

        Returns:
            GreeksSweep aligned with ``spots``
        """
        spots = np.asarray(spots, dtype=float)
        call_delta = np.empty(len(spots))
        put_delta = np.empty(len(spots))
        gamma = np.empty(len(spots))

        option = self.option
        started_as_call = option.is_call
        if not started_as_call:
            option.toggle_side()

        try:
            for i, spot in enumerate(spots):
                call_delta[i] = option.delta(spot, h)
                option.toggle_side()
                try:
                    put_delta[i] = option.delta(spot, h)
                    gamma[i] = option.gamma(spot, h)
                finally:
                    option.toggle_side()
        finally:
            if not started_as_call:
                option.toggle_side()

        return GreeksSweep(call_delta=call_delta, put_delta=put_delta, gamma=gamma, spots=spots)

    def compare_at(self, spot: float, iterations: int) -> list[GreeksComparison]:
        """
        Compare exact and approximate Greeks at ``spot`` for a shrinking bump.

        One GreeksComparison is returned per round; h starts at 0.1 and is
        squared after each round. The wrapped option is not modified.
        """
        _check_iterations(iterations)
        comparisons = []
        h = INITIAL_FD_STEP

        call = replace(self.option, side=OptionSide.CALL)
        put = replace(self.option, side=OptionSide.PUT)

        for _ in range(iterations):
            comparison = GreeksComparison(
                h=h,
                call_delta=call.delta(spot),
                call_gamma=call.gamma(spot),
                approx_call_delta=call.delta(spot, h),
                approx_call_gamma=call.gamma(spot, h),
                put_delta=put.delta(spot),
                put_gamma=put.gamma(spot),
                approx_put_delta=put.delta(spot, h),
                approx_put_gamma=put.gamma(spot, h),
            )
            logger.debug(
                "h=%s call delta error=%.3e gamma error=%.3e",
                h, comparison.call_delta_error, comparison.call_gamma_error,
            )
            comparisons.append(comparison)
            h *= h

        return comparisons

    def compare_sweep(self, spots: Sequence[float], iterations: int) -> list[SweepComparison]:
        """Compare exact and approximate Greek sweeps over ``spots`` for a shrinking bump."""
        _check_iterations(iterations)
        comparisons = []
        h = INITIAL_FD_STEP

        for _ in range(iterations):
            exact = self.sweep_spot(spots)
            approx = self.sweep_spot(spots, h)
            comparisons.append(SweepComparison(h=h, exact=exact, approx=approx))
            h *= h

        return comparisons
