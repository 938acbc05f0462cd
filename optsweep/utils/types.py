"""
Data types and structures for option pricing sweeps.

This module defines the option side and style enumerations and the result
records returned by the pricers, the parity diagnostics and the sweep
engine. Series are stored as numpy arrays aligned with their inputs.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import pandas as pd


class OptionSide(Enum):
    """Right to buy (call) or right to sell (put)."""

    CALL = "call"
    PUT = "put"

    def opposite(self) -> "OptionSide":
        return OptionSide.PUT if self is OptionSide.CALL else OptionSide.CALL


class OptionStyle(Enum):
    """Which option variant a parameter vector describes."""

    EUROPEAN = "european"
    PERPETUAL = "perpetual"


@dataclass
class ParityCheck:
    """
    Result from a put-call parity check.

    Attributes:
        is_valid: Whether both sides of the parity identity agree within tolerance
        side: Side of the option the check was run from
        violations: List of specific violations detected
        details: Dictionary with both sides of the identity and their difference
    """

    is_valid: bool
    side: OptionSide
    violations: list[str] = field(default_factory=list)
    details: dict[str, float] = field(default_factory=dict)

    @property
    def message(self) -> str:
        if self.is_valid:
            kind = "Call" if self.side is OptionSide.CALL else "Put"
            return f"The current option is a {kind} and the Put-Call Parity is preserved."
        return "The Put-Call Parity is not preserved."


@dataclass
class ParityReport:
    """
    Full parity read-out for one European option at one spot.

    Attributes:
        spot: Spot price the report was produced at
        call_price, put_price: Prices from the pricing formula
        call_pcp_price: Put price implied by parity from the call
        put_pcp_price: Call price implied by parity from the put
        call_internal, put_internal: Internal parity checks for each side
        call_against_put, put_against_call: Cross checks between the two pricers
    """

    spot: float
    call_price: float
    put_price: float
    call_pcp_price: float
    put_pcp_price: float
    call_internal: ParityCheck
    put_internal: ParityCheck
    call_against_put: ParityCheck
    put_against_call: ParityCheck

    @property
    def is_valid(self) -> bool:
        return all(
            check.is_valid
            for check in (
                self.call_internal,
                self.put_internal,
                self.call_against_put,
                self.put_against_call,
            )
        )


@dataclass
class SpotSweep:
    """Call and put prices over a spot series."""

    spots: np.ndarray
    calls: np.ndarray
    puts: np.ndarray

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"spot": self.spots, "call": self.calls, "put": self.puts})


@dataclass
class PriceSweep:
    """Call and put prices, one entry per sweep matrix row."""

    calls: np.ndarray
    puts: np.ndarray

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({"call": self.calls, "put": self.puts})


@dataclass
class GreeksSweep:
    """
    Delta and gamma series.

    Attributes:
        call_delta: Call delta per element
        put_delta: Put delta per element
        gamma: Gamma per element (shared by both sides)
        spots: Spot series the values were produced at, if any
    """

    call_delta: np.ndarray
    put_delta: np.ndarray
    gamma: np.ndarray
    spots: np.ndarray | None = None

    def to_frame(self) -> pd.DataFrame:
        data = {}
        if self.spots is not None:
            data["spot"] = self.spots
        data["call_delta"] = self.call_delta
        data["put_delta"] = self.put_delta
        data["gamma"] = self.gamma
        return pd.DataFrame(data)


@dataclass
class GreeksComparison:
    """Exact versus finite-difference Greeks at one spot for one bump size."""

    h: float
    call_delta: float
    call_gamma: float
    approx_call_delta: float
    approx_call_gamma: float
    put_delta: float
    put_gamma: float
    approx_put_delta: float
    approx_put_gamma: float

    @property
    def call_delta_error(self) -> float:
        return abs(self.call_delta - self.approx_call_delta)

    @property
    def call_gamma_error(self) -> float:
        return abs(self.call_gamma - self.approx_call_gamma)

    @property
    def put_delta_error(self) -> float:
        return abs(self.put_delta - self.approx_put_delta)

    @property
    def put_gamma_error(self) -> float:
        return abs(self.put_gamma - self.approx_put_gamma)


@dataclass
class SweepComparison:
    """Exact versus finite-difference Greeks over a spot series for one bump size."""

    h: float
    exact: GreeksSweep
    approx: GreeksSweep

    @property
    def call_delta_error(self) -> np.ndarray:
        return np.abs(self.exact.call_delta - self.approx.call_delta)

    @property
    def put_delta_error(self) -> np.ndarray:
        return np.abs(self.exact.put_delta - self.approx.put_delta)

    @property
    def gamma_error(self) -> np.ndarray:
        return np.abs(self.exact.gamma - self.approx.gamma)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "spot": self.exact.spots,
                "call_delta_error": self.call_delta_error,
                "put_delta_error": self.put_delta_error,
                "gamma_error": self.gamma_error,
            }
        )
