"""
Pytest configuration and shared fixtures.
"""

import pytest

from optsweep.core.european import EuropeanOption
from optsweep.core.perpetual import PerpetualAmericanOption


@pytest.fixture
def batch_params():
    """Classical Black-Scholes test batch (b = r, no dividend)."""
    return {
        "K": 65.0,
        "T": 0.25,
        "r": 0.08,
        "b": 0.08,
        "sig": 0.30,
        "q": 0.0,
    }


@pytest.fixture
def batch_option(batch_params):
    """European call from the classical batch, priced at S = 60."""
    return EuropeanOption(**batch_params)


@pytest.fixture
def futures_option():
    """Option on a future (b = 0) used for the Greeks examples, priced at S = 105."""
    return EuropeanOption(K=100.0, T=0.5, r=0.1, b=0.0, sig=0.36, q=0.0)


@pytest.fixture
def perpetual_option():
    """Perpetual American call, priced at S = 110."""
    return PerpetualAmericanOption(K=100.0, r=0.1, b=0.02, sig=0.1, q=0.0)
