"""
Unit tests for parameter vectors and sweep matrices.

This module validates:
1. Slot layout and strict index bounds per option style
2. Reconstruction of options from vectors
3. Linear progression of the swept slot across matrix rows
4. Price and Greek passes over every row
"""

import logging
import math

import numpy as np
import pytest

from optsweep.analysis.sweep import ParameterSweepMatrix, ParameterVector, mesh
from optsweep.core.european import EuropeanOption
from optsweep.core.perpetual import PerpetualAmericanOption
from optsweep.utils.exceptions import InvalidStateError, OutOfRangeError
from optsweep.utils.types import OptionSide, OptionStyle


# ===========================
# Mesh Tests
# ===========================


def test_mesh_points():
    points = mesh(50.0, 100.0, 5)
    np.testing.assert_allclose(points, [50.0, 60.0, 70.0, 80.0, 90.0, 100.0])


@pytest.mark.parametrize("n", [0, -3, 2.5])
def test_mesh_rejects_bad_step_count(n):
    with pytest.raises(ValueError):
        mesh(0.0, 1.0, n)


# ===========================
# ParameterVector Tests
# ===========================


def test_european_vector_layout(batch_option):
    vec = ParameterVector.from_option(60.0, batch_option)

    assert vec.style is OptionStyle.EUROPEAN
    assert list(vec) == [60.0, 65.0, 0.25, 0.08, 0.08, 0.30, 0.0]
    assert vec.spot == 60.0
    assert vec.field_name(2) == "T"
    assert vec.index_of("sig") == 5


def test_perpetual_vector_layout(perpetual_option):
    vec = ParameterVector.from_option(110.0, perpetual_option)

    assert vec.style is OptionStyle.PERPETUAL
    assert list(vec) == [110.0, 100.0, 0.1, 0.02, 0.1, 0.0]
    assert vec.field_name(2) == "r"
    assert vec.as_dict() == {"spot": 110.0, "K": 100.0, "r": 0.1, "b": 0.02, "sig": 0.1, "q": 0.0}


def test_perpetual_vector_has_no_expiry(perpetual_option):
    vec = ParameterVector.from_option(110.0, perpetual_option)
    with pytest.raises(KeyError):
        vec.index_of("T")


@pytest.mark.parametrize("index", [7, -1, 100])
def test_european_index_out_of_range(batch_option, index):
    vec = ParameterVector.from_option(60.0, batch_option)

    with pytest.raises(OutOfRangeError):
        vec[index]
    with pytest.raises(OutOfRangeError):
        vec[index] = 1.0


@pytest.mark.parametrize("index", [6, -1])
def test_perpetual_index_out_of_range(perpetual_option, index):
    vec = ParameterVector.from_option(110.0, perpetual_option)

    with pytest.raises(OutOfRangeError):
        vec[index]


def test_out_of_range_is_an_index_error(batch_option):
    vec = ParameterVector.from_option(60.0, batch_option)
    with pytest.raises(IndexError, match="out of range"):
        vec[7]


def test_last_valid_index(batch_option, perpetual_option):
    assert ParameterVector.from_option(60.0, batch_option)[6] == 0.0
    assert ParameterVector.from_option(110.0, perpetual_option)[5] == 0.0


def test_vector_write_through_index(batch_option):
    vec = ParameterVector.from_option(60.0, batch_option)
    vec[1] = 70.0

    option, spot = vec.to_european()
    assert option.K == 70.0
    assert spot == 60.0
    # The source option is a separate object
    assert batch_option.K == 65.0


def test_vector_rejects_wrong_length():
    with pytest.raises(ValueError):
        ParameterVector(OptionStyle.PERPETUAL, [1.0, 2.0, 3.0])


def test_vector_rejects_unknown_option_type():
    with pytest.raises(TypeError):
        ParameterVector.from_option(100.0, object())


def test_rebuild_european(batch_params):
    option = EuropeanOption(**batch_params, side=OptionSide.PUT)
    rebuilt, spot = ParameterVector.from_option(60.0, option).to_european()

    assert spot == 60.0
    assert rebuilt == EuropeanOption(**batch_params)
    assert rebuilt.side is OptionSide.CALL


def test_rebuild_perpetual(perpetual_option):
    rebuilt, spot = ParameterVector.from_option(110.0, perpetual_option).to_perpetual()
    assert rebuilt == perpetual_option
    assert spot == 110.0


def test_wrong_reconstructor_raises(batch_option, perpetual_option):
    with pytest.raises(InvalidStateError):
        ParameterVector.from_option(60.0, batch_option).to_perpetual()
    with pytest.raises(InvalidStateError):
        ParameterVector.from_option(110.0, perpetual_option).to_european()


def test_copy_is_independent(batch_option):
    vec = ParameterVector.from_option(60.0, batch_option)
    dup = vec.copy()
    dup[0] = 1.0

    assert vec[0] == 60.0
    assert dup != vec


# ===========================
# ParameterSweepMatrix Tests
# ===========================


@pytest.mark.parametrize(
    "index,end",
    [(0, 100.0), (1, 100.0), (2, 1.0), (3, 0.4), (4, 0.4), (5, 0.8), (6, 0.05)],
)
def test_european_linear_progression(batch_option, index, end):
    matrix = ParameterSweepMatrix(batch_option, 50.0, index, end, 5)
    base = matrix.row(0)
    start = base[index]
    h = (end - start) / 5

    assert matrix.row_count() == 6
    assert matrix.step == pytest.approx(h)
    for i, row in enumerate(matrix):
        assert row.style is OptionStyle.EUROPEAN
        assert row[index] == pytest.approx(start + i * h, rel=1e-12, abs=1e-12)
        for j in range(len(row)):
            if j != index:
                assert row[j] == base[j]
    assert matrix.row(5)[index] == pytest.approx(end)


@pytest.mark.parametrize(
    "index,end",
    [(0, 146.0), (1, 115.0), (2, 0.6), (3, 0.5), (4, 0.86), (5, 0.01)],
)
def test_perpetual_linear_progression(perpetual_option, index, end):
    matrix = ParameterSweepMatrix(perpetual_option, 110.0, index, end, 6)

    assert len(matrix) == 7
    np.testing.assert_allclose(matrix.swept_values(), mesh(matrix.row(0)[index], end, 6))
    for row in matrix:
        for j in range(len(row)):
            if j != index:
                assert row[j] == matrix.row(0)[j]


@pytest.mark.parametrize("index", [7, -1])
def test_european_matrix_rejects_bad_index(batch_option, index):
    with pytest.raises(OutOfRangeError):
        ParameterSweepMatrix(batch_option, 60.0, index, 1.0, 5)


@pytest.mark.parametrize("index", [6, -1])
def test_perpetual_matrix_rejects_bad_index(perpetual_option, index):
    with pytest.raises(OutOfRangeError):
        ParameterSweepMatrix(perpetual_option, 110.0, index, 1.0, 5)


@pytest.mark.parametrize("steps", [0, -1])
def test_matrix_rejects_bad_step_count(batch_option, steps):
    with pytest.raises(ValueError):
        ParameterSweepMatrix(batch_option, 60.0, 0, 100.0, steps)


def test_matrix_row_bounds(batch_option):
    matrix = ParameterSweepMatrix(batch_option, 50.0, 0, 100.0, 5)

    assert matrix[5] is matrix.row(5)
    with pytest.raises(OutOfRangeError):
        matrix.row(6)
    with pytest.raises(OutOfRangeError):
        matrix[-1]


def test_matrix_does_not_touch_source_option(batch_option):
    ParameterSweepMatrix(batch_option, 50.0, 1, 100.0, 5).price_all()
    assert batch_option.K == 65.0
    assert batch_option.side is OptionSide.CALL


def test_spot_sweep_matches_option_sweep(batch_option):
    matrix = ParameterSweepMatrix(batch_option, 50.0, 0, 100.0, 5)
    prices = matrix.price_all()
    expected = batch_option.sweep_spot(mesh(50.0, 100.0, 5))

    np.testing.assert_allclose(prices.calls, expected.calls, rtol=1e-12)
    np.testing.assert_allclose(prices.puts, expected.puts, rtol=1e-12)
    assert np.all(np.diff(prices.calls) > 0)
    assert np.all(np.diff(prices.puts) < 0)


def test_price_all_row_zero_is_base_option(batch_option):
    prices = ParameterSweepMatrix(batch_option, 60.0, 5, 0.8, 5).price_all()

    assert abs(prices.calls[0] - 2.13337) < 1e-4
    assert abs(prices.puts[0] - 5.84628) < 1e-4
    # Both legs gain value with volatility
    assert np.all(np.diff(prices.calls) > 0)
    assert np.all(np.diff(prices.puts) > 0)


def test_price_all_satisfies_parity_per_row(batch_option):
    matrix = ParameterSweepMatrix(batch_option, 60.0, 2, 1.0, 5)
    prices = matrix.price_all()

    for i, row in enumerate(matrix):
        S, K, T, r, b = row[0], row[1], row[2], row[3], row[4]
        rhs = S * math.exp((b - r) * T) - K * math.exp(-r * T)
        assert abs((prices.calls[i] - prices.puts[i]) - rhs) < 1e-6


def test_perpetual_price_all(perpetual_option):
    matrix = ParameterSweepMatrix(perpetual_option, 110.0, 0, 146.0, 6)
    prices = matrix.price_all()

    assert abs(prices.calls[0] - 18.5035) < 1e-3
    assert abs(prices.puts[0] - 3.03106) < 1e-4
    assert np.all(np.diff(prices.calls) > 0)
    assert np.all(np.diff(prices.puts) < 0)


def test_mutating_a_row_changes_its_price(batch_option):
    matrix = ParameterSweepMatrix(batch_option, 50.0, 0, 100.0, 5)
    before = matrix.price_all()

    matrix.row(2)[1] = 80.0
    after = matrix.price_all()

    assert after.calls[2] < before.calls[2]
    assert after.calls[3] == before.calls[3]


def test_unrecognised_style_returns_zeros(batch_option, caplog):
    matrix = ParameterSweepMatrix(batch_option, 50.0, 0, 100.0, 5)
    matrix.row(0).style = None

    with caplog.at_level(logging.WARNING, logger="optsweep.analysis.sweep"):
        prices = matrix.price_all()

    assert np.all(prices.calls == 0.0)
    assert np.all(prices.puts == 0.0)
    assert len(prices.calls) == 6
    assert "Unrecognised option style" in caplog.text


def test_price_all_greeks(futures_option):
    matrix = ParameterSweepMatrix(futures_option, 105.0, 0, 130.0, 5)
    greeks = matrix.price_all_greeks()

    assert abs(greeks.call_delta[0] - 0.5946) < 1e-4
    assert abs(greeks.put_delta[0] - (-0.3566)) < 1e-4
    assert abs(greeks.gamma[0] - 0.0135) < 1e-4
    carry = math.exp((futures_option.b - futures_option.r) * futures_option.T)
    np.testing.assert_allclose(greeks.call_delta - greeks.put_delta, carry)
    np.testing.assert_allclose(greeks.spots, mesh(105.0, 130.0, 5))


def test_price_all_greeks_over_strike(futures_option):
    greeks = ParameterSweepMatrix(futures_option, 105.0, 1, 125.0, 5).price_all_greeks()
    # Raising the strike pushes the call out of the money
    assert np.all(np.diff(greeks.call_delta) < 0)
    assert np.all(greeks.gamma > 0)


def test_price_all_greeks_rejects_perpetual(perpetual_option):
    matrix = ParameterSweepMatrix(perpetual_option, 110.0, 0, 146.0, 6)
    with pytest.raises(InvalidStateError):
        matrix.price_all_greeks()


def test_matrix_frame(perpetual_option):
    matrix = ParameterSweepMatrix(perpetual_option, 110.0, 4, 0.86, 6)
    frame = matrix.to_frame()

    assert list(frame.columns) == ["spot", "K", "r", "b", "sig", "q"]
    assert len(frame) == 7
    assert matrix.swept_field == "sig"
    assert frame["K"].nunique() == 1


def test_long_expiry_sweep_returns_full_series():
    """The last row's carry factor e^800 overflows; earlier rows stay finite."""
    option = EuropeanOption(K=100.0, T=1.0, r=0.0, b=1.0, sig=0.2)
    prices = ParameterSweepMatrix(option, 100.0, 2, 800.0, 4).price_all()

    assert len(prices.calls) == 5
    assert np.all(np.isfinite(prices.calls[:-1]))
    assert prices.calls[-1] == math.inf
    assert prices.puts[-1] == -math.inf
