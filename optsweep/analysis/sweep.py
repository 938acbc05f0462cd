"""
Parameter sweeps over option pricing inputs.

A ParameterVector is a flat, index-addressable snapshot of one option's
inputs together with the spot price. A ParameterSweepMatrix holds rows of
such vectors in which a single slot moves linearly from its base value to
an end value while every other slot stays fixed. Each row can be rebuilt
into an option and priced, giving price and Greek series per parameter.

Slot layouts (see ``optsweep.utils.constants``):
    European:  [spot, K, T, r, b, sig, q]
    Perpetual: [spot, K, r, b, sig, q]

Sweep rows are built by repeated addition of the step (row i = row i-1 + h),
matching ``mesh``. This accumulates rounding differently from a + i·h; the
two agree to within a few ulps for typical row counts.
"""

import logging
import operator
from typing import Iterator, Sequence, Union

import numpy as np
import pandas as pd

from optsweep.core.european import EuropeanOption
from optsweep.core.perpetual import PerpetualAmericanOption
from optsweep.utils.constants import EUROPEAN_SLOTS, PERPETUAL_SLOTS, SPOT_INDEX
from optsweep.utils.exceptions import InvalidStateError, OutOfRangeError
from optsweep.utils.types import GreeksSweep, OptionStyle, PriceSweep

logger = logging.getLogger(__name__)

Option = Union[EuropeanOption, PerpetualAmericanOption]

SLOT_LAYOUTS = {
    OptionStyle.EUROPEAN: EUROPEAN_SLOTS,
    OptionStyle.PERPETUAL: PERPETUAL_SLOTS,
}


def _check_steps(n) -> int:
    if n <= 0 or int(n) != n:
        raise ValueError(f"Number of steps must be a positive integer, got {n}")
    return int(n)


def mesh(start: float, end: float, n: int) -> np.ndarray:
    """
    Return n + 1 points from ``start`` to ``end`` spaced by (end - start) / n.

    Points are accumulated by repeated addition of the step.

    Examples:
        >>> mesh(50, 100, 5).tolist()
        [50.0, 60.0, 70.0, 80.0, 90.0, 100.0]
    """
    n = _check_steps(n)
    h = (end - start) / n
    points = np.empty(n + 1)
    offset = 0.0
    for i in range(n + 1):
        points[i] = start + offset
        offset += h
    return points


class ParameterVector:
    """
    Spot plus every pricing input of one option, addressable by slot index.

    Indexing is strict: negative indices and indices past the style's last
    slot raise OutOfRangeError rather than wrapping around.
    """

    def __init__(self, style: OptionStyle, values: Sequence[float]) -> None:
        if style not in SLOT_LAYOUTS:
            raise ValueError(f"Unknown option style: {style!r}")
        slots = SLOT_LAYOUTS[style]
        if len(values) != len(slots):
            raise ValueError(
                f"{style.value} vector needs {len(slots)} values, got {len(values)}"
            )
        self.style = style
        self._values = [float(v) for v in values]

    @classmethod
    def from_option(cls, spot: float, option: Option) -> "ParameterVector":
        """Snapshot ``option``'s inputs and ``spot`` into a new vector."""
        if isinstance(option, EuropeanOption):
            style = OptionStyle.EUROPEAN
        elif isinstance(option, PerpetualAmericanOption):
            style = OptionStyle.PERPETUAL
        else:
            raise TypeError(f"Cannot build a parameter vector from {type(option).__name__}")

        slots = SLOT_LAYOUTS[style]
        values = [spot] + [getattr(option, name) for name in slots[1:]]
        return cls(style, values)

    # ===========================
    # Slot access
    # ===========================

    @property
    def max_index(self) -> int:
        return len(self._values) - 1

    def _check_index(self, index) -> int:
        index = operator.index(index)
        if index < 0 or index > self.max_index:
            raise OutOfRangeError(index, self.max_index)
        return index

    def __getitem__(self, index: int) -> float:
        return self._values[self._check_index(index)]

    def __setitem__(self, index: int, value: float) -> None:
        self._values[self._check_index(index)] = float(value)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ParameterVector):
            return NotImplemented
        return self.style is other.style and self._values == other._values

    def __repr__(self) -> str:
        return f"ParameterVector({self.style.value}, {self._values})"

    def copy(self) -> "ParameterVector":
        return ParameterVector(self.style, self._values)

    @property
    def spot(self) -> float:
        return self._values[SPOT_INDEX]

    def field_name(self, index: int) -> str:
        """Name of the option field stored at ``index``."""
        return SLOT_LAYOUTS[self.style][self._check_index(index)]

    def index_of(self, name: str) -> int:
        """Slot index of the field ``name`` for this vector's style."""
        slots = SLOT_LAYOUTS[self.style]
        if name not in slots:
            raise KeyError(f"{self.style.value} vectors have no {name!r} slot; valid: {slots}")
        return slots.index(name)

    def as_dict(self) -> dict[str, float]:
        return dict(zip(SLOT_LAYOUTS[self.style], self._values))

    # ===========================
    # Reconstruction
    # ===========================

    def _fields(self, expected: OptionStyle) -> dict[str, float]:
        if self.style is not expected:
            raise InvalidStateError(
                f"Cannot rebuild a {expected.value} option from a {self.style.value} vector"
            )
        fields = self.as_dict()
        del fields["spot"]
        return fields

    def to_european(self) -> tuple[EuropeanOption, float]:
        """Rebuild a European call and its spot from the slots."""
        return EuropeanOption(**self._fields(OptionStyle.EUROPEAN)), self.spot

    def to_perpetual(self) -> tuple[PerpetualAmericanOption, float]:
        """Rebuild a perpetual American call and its spot from the slots."""
        return PerpetualAmericanOption(**self._fields(OptionStyle.PERPETUAL)), self.spot


class ParameterSweepMatrix:
    """
    Rows of parameter vectors in which one slot moves linearly.

    Args:
        option: European or perpetual American option supplying the base inputs
        spot: Base spot price
        sweep_index: Slot to sweep (0 = spot, see module docstring for the rest)
        end_value: Value the swept slot reaches on the last row
        steps: Number of increments; the matrix holds steps + 1 rows

    Raises:
        OutOfRangeError: If ``sweep_index`` is not a slot of the option's style
        ValueError: If ``steps`` is not a positive integer
    """

    def __init__(
        self,
        option: Option,
        spot: float,
        sweep_index: int,
        end_value: float,
        steps: int,
    ) -> None:
        steps = _check_steps(steps)
        base = ParameterVector.from_option(spot, option)
        start = base[sweep_index]

        self.sweep_index = sweep_index
        self.end_value = end_value
        self.step = (end_value - start) / steps

        row = base
        self._rows = [base]
        for _ in range(steps):
            row = row.copy()
            row[sweep_index] += self.step
            self._rows.append(row)

        logger.debug(
            "Built %s sweep of %s from %s to %s in %d steps",
            base.style.value, base.field_name(sweep_index), start, end_value, steps,
        )

    @property
    def style(self) -> OptionStyle:
        return self._rows[0].style

    @property
    def swept_field(self) -> str:
        return self._rows[0].field_name(self.sweep_index)

    def row_count(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def row(self, index: int) -> ParameterVector:
        """Row ``index`` itself (not a copy)."""
        index = operator.index(index)
        if index < 0 or index >= len(self._rows):
            raise OutOfRangeError(index, len(self._rows) - 1, what="row")
        return self._rows[index]

    __getitem__ = row

    def __iter__(self) -> Iterator[ParameterVector]:
        return iter(self._rows)

    def swept_values(self) -> np.ndarray:
        return np.array([row[self.sweep_index] for row in self._rows])

    def spots(self) -> np.ndarray:
        return np.array([row.spot for row in self._rows])

    # ===========================
    # Pricing passes
    # ===========================

    def price_all(self) -> PriceSweep:
        """
        Call and put price for every row.

        Each row is rebuilt into a fresh option, priced, toggled and priced
        again. If the rows carry an unrecognised style both series are
        returned as zeros.
        """
        calls = np.zeros(len(self._rows))
        puts = np.zeros(len(self._rows))

        if self.style is OptionStyle.EUROPEAN:
            rebuild = ParameterVector.to_european
        elif self.style is OptionStyle.PERPETUAL:
            rebuild = ParameterVector.to_perpetual
        else:
            logger.warning("Unrecognised option style %r; returning zero prices", self.style)
            return PriceSweep(calls=calls, puts=puts)

        for i, row in enumerate(self._rows):
            option, spot = rebuild(row)
            calls[i] = option.price(spot)
            option.toggle_side()
            puts[i] = option.price(spot)
            option.toggle_side()

        return PriceSweep(calls=calls, puts=puts)

    def price_all_greeks(self) -> GreeksSweep:
        """
        Exact call delta, put delta and gamma for every row.

        Raises:
            InvalidStateError: If the rows are not European
        """
        call_delta = np.empty(len(self._rows))
        put_delta = np.empty(len(self._rows))
        gamma = np.empty(len(self._rows))

        for i, row in enumerate(self._rows):
            option, spot = row.to_european()
            call_delta[i] = option.delta(spot)
            option.toggle_side()
            put_delta[i] = option.delta(spot)
            gamma[i] = option.gamma(spot)
            option.toggle_side()

        return GreeksSweep(
            call_delta=call_delta, put_delta=put_delta, gamma=gamma, spots=self.spots()
        )

    def to_frame(self) -> pd.DataFrame:
        """One row per sweep row, one column per slot."""
        return pd.DataFrame([row.as_dict() for row in self._rows])
