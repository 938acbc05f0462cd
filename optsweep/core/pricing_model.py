"""
Pricing contract shared by the option variants.

Both option types expose ``price(spot)``, a mutable ``side`` and
``toggle_side()``. They are independent dataclasses; the only behaviour
they share is the side flip provided by :class:`SideToggleMixin`.
"""

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from optsweep.utils.types import OptionSide, SpotSweep


@runtime_checkable
class PricingModel(Protocol):
    """Anything that can be priced at a spot and flipped between call and put."""

    side: OptionSide

    def price(self, spot: float) -> float:
        ...

    def toggle_side(self) -> None:
        ...


class SideToggleMixin:
    """Adds ``toggle_side`` to a class carrying an ``OptionSide`` attribute."""

    side: OptionSide

    def toggle_side(self) -> None:
        self.side = self.side.opposite()

    @property
    def is_call(self) -> bool:
        return self.side is OptionSide.CALL


def sweep_spot(model: PricingModel, spots: Sequence[float]) -> SpotSweep:
    """
    Price both sides of ``model`` for every spot in ``spots``.

    Each element is priced on the current side, the side is toggled to price
    the other leg and toggled back, so ``model.side`` is unchanged on return.
    """
    spots = np.asarray(spots, dtype=float)
    calls = np.empty(len(spots))
    puts = np.empty(len(spots))
    own, other = (calls, puts) if model.side is OptionSide.CALL else (puts, calls)

    for i, spot in enumerate(spots):
        own[i] = model.price(spot)
        model.toggle_side()
        try:
            other[i] = model.price(spot)
        finally:
            model.toggle_side()

    return SpotSweep(spots=spots, calls=calls, puts=puts)
