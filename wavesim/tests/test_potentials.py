# wavesim/tests/test_potentials.py
import logging
import numpy as np
import pytest
from wavesim.potentials import PotentialType, build, periodic_delta
from wavesim.operators import wave_numbers, kinetic_operator, potential_operator_half, detector_weights

def test_parse_and_fallback(caplog):
    assert PotentialType.parse("double") is PotentialType.DOUBLE
    assert PotentialType.parse(PotentialType.SINUSOID) is PotentialType.SINUSOID
    with caplog.at_level(logging.WARNING, logger="wavesim.potentials"):
        assert PotentialType.parse("volcano") is PotentialType.NONE
    assert "volcano" in caplog.text

def test_periodic_delta():
    L = 10.0
    d = periodic_delta(np.array([0.0, 1.0, 9.0, 5.0]), 0.0, L)
    assert d.tolist() == [0.0, 1.0, 1.0, 5.0]

def test_none_is_zero():
    assert not np.any(build(PotentialType.NONE, 16, 0.1))

def test_single_well_centre():
    n, dx = 64, 0.1
    V = build(PotentialType.SINGLE, n, dx, strength=2.0)
    iy, ix = np.unravel_index(np.argmin(V), V.shape)
    assert (ix, iy) == (n // 2, n // 2)
    assert V[iy, ix] == pytest.approx(-2.0)
    # symmetric about the centre
    c = n // 2
    for j in (1, 5, 12):
        assert V[c + j, c] == pytest.approx(V[c - j, c])
        assert V[c, c + j] == pytest.approx(V[c, c - j])

@pytest.mark.parametrize("n,dx", [(32, 0.2), (64, 0.1), (128, 0.05), (128, 0.1)])
def test_double_well_positions(n, dx):
    L = n * dx
    V = build(PotentialType.DOUBLE, n, dx, strength=1.0, scale=3.0)
    col = V[:, n // 2]
    lower = int(np.argmin(col[: n // 2]))
    upper = n // 2 + int(np.argmin(col[n // 2:]))
    assert abs(lower * dx - L / 3) <= dx
    assert abs(upper * dx - 2 * L / 3) <= dx
    # mirror image about L/2, both wells equally deep
    assert np.allclose(col[1:], col[1:][::-1])
    assert col[lower] == pytest.approx(col[upper])
    assert col.min() == pytest.approx(-3.0, rel=0.05)

def test_sinusoid_three_periods():
    V = build(PotentialType.SINUSOID, 64, 0.1, strength=1.0)
    col = V[:, 0]
    assert np.allclose(V, col[:, None])
    assert col[0] == pytest.approx(-1.0)
    # sign changes of cos over three periods
    assert np.count_nonzero(np.diff(np.sign(col)) != 0) == 6

def test_quadratic_grows_outward():
    V = build(PotentialType.QUADRATIC, 32, 0.1)
    assert V[16, 16] == 0.0
    assert V[16, 20] > V[16, 18] > V[16, 17] > 0

def test_scale_multiplies():
    a = build(PotentialType.SINGLE, 32, 0.1, scale=1.0)
    b = build(PotentialType.SINGLE, 32, 0.1, scale=4.0)
    assert np.allclose(b, 4.0 * a)

def test_freehand_has_no_formula():
    with pytest.raises(ValueError):
        build(PotentialType.FREEHAND, 16, 0.1)

def test_wave_numbers_ordering():
    n, dx = 8, 0.5
    L = n * dx
    k = wave_numbers(n, dx)
    assert np.allclose(k, 2 * np.pi * np.array([0, 1, 2, 3, -4, -3, -2, -1]) / L)
    assert np.allclose(k, 2 * np.pi * np.fft.fftfreq(n, d=dx))

def test_operators_unimodular():
    T = kinetic_operator(32, 0.1, 0.005, 1.0, 1.0)
    assert np.allclose(np.abs(T.data), 1.0)
    assert T.data[0, 0] == 1.0
    V = build(PotentialType.DOUBLE, 32, 0.1)
    U = potential_operator_half(V, 0.005, 1.0)
    assert np.allclose(np.abs(U.data), 1.0)
    assert np.allclose(np.angle(U.data), -V * 0.005 / 2)

def test_filter_only_damps_high_k():
    n, dx = 32, 0.1
    T = kinetic_operator(n, dx, 0.005, 1.0, 1.0, filter_enabled=True)
    mag = np.abs(T.data)
    assert mag[0, 1] == pytest.approx(1.0)
    assert mag[n // 2, n // 2] < 1.0

def test_detector_weights_wrap():
    w = detector_weights(16, 0.1, 0, 0, 0.15)
    assert w[0, 0] == pytest.approx(1.0)
    assert w[0, 15] == pytest.approx(w[0, 1])
    assert w[15, 15] == pytest.approx(w[1, 1])
