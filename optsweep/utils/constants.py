"""
Numerical constants, tolerances and parameter layouts for option sweeps.

This module defines the thresholds used by the distributions and parity
diagnostics, the starting step of the finite-difference comparison
schedule, and the slot layout of a parameter vector for each option style.
"""

# Normal distribution bounds
MAX_STANDARD_DEVIATIONS = 8.0  # Beyond ±8σ, CDF is effectively 0 or 1
PDF_CUTOFF = 10.0  # Beyond ±10σ, PDF is below 2e-22

# Put-call parity tolerance
PARITY_TOLERANCE = 1e-8

# Finite-difference comparison schedule
INITIAL_FD_STEP = 0.1  # First bump; squared after every round

# Parameter vector layouts (index -> field name). Index 0 is always spot.
EUROPEAN_SLOTS = ("spot", "K", "T", "r", "b", "sig", "q")
PERPETUAL_SLOTS = ("spot", "K", "r", "b", "sig", "q")

SPOT_INDEX = 0
