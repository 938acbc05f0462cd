"""Exceptions raised by the pricing and sweep layers."""


class OptionSweepError(Exception):
    """Base class for errors raised by optsweep."""


class OutOfRangeError(OptionSweepError, IndexError):
    """Index access outside the valid slots of a vector or rows of a matrix."""

    def __init__(self, index: int, upper: int, what: str = "slot") -> None:
        self.index = index
        self.upper = upper
        super().__init__(f"{what} index {index} out of range [0, {upper}]")


class InvalidStateError(OptionSweepError):
    """Operation requested on a parameter vector of the wrong option style."""
