import math

import numpy as np
import pytest

from sigtools.fft import FFT
from sigtools.signal import SignalError


def _sine(n, bin_index, amp=1000):
    t = np.arange(n)
    return np.round(amp * np.sin(2 * math.pi * bin_index * t / n)).astype(np.int16)


def test_constant_input_goes_to_bin_zero():
    fft = FFT(8)
    fft.run([3] * 8, 2.0)
    assert fft.real(0) == pytest.approx(48.0)
    assert np.allclose(fft.abs(1, 8), 0.0)


def test_find_max_locates_sine_bin():
    fft = FFT(256)
    fft.run(_sine(256, 20), 1.0)
    assert fft.find_max(0, 128) == 20


def test_slices_match_scalars():
    fft = FFT(64)
    fft.run(_sine(64, 5), 0.1, True)
    re, im, ab = fft.real(2, 10), fft.imag(2, 10), fft.abs(2, 10)
    for j, i in enumerate(range(2, 10)):
        assert re[j] == pytest.approx(fft.real(i))
        assert im[j] == pytest.approx(fft.imag(i))
        assert ab[j] == pytest.approx(math.hypot(fft.real(i), fft.imag(i)))


def test_index_out_of_range():
    fft = FFT(16)
    with pytest.raises(SignalError):
        fft.real(0, 17)
    with pytest.raises(SignalError):
        fft.abs(-1, 4)


def test_run_needs_enough_data():
    with pytest.raises(SignalError):
        FFT(16).run([1, 2, 3], 1.0)


def test_get_ind_clamps_to_nyquist():
    rng = FFT(1000).get_ind(1e-3, 0, math.inf)
    assert rng.i1f == 0
    assert rng.i2f == 500
    assert rng.df == pytest.approx(1.0)
    assert rng.fmax == pytest.approx(rng.df * rng.i2f)


def test_get_ind_swaps_and_aligns():
    fft = FFT(1000)
    a = fft.get_ind(1e-3, 10.4, 50.2)
    b = fft.get_ind(1e-3, 50.2, 10.4)
    assert a == b
    assert a.i1f == math.floor(10.4 / a.df)
    assert a.fmin == pytest.approx(a.df * a.i1f)


def test_get_ind_too_small_range():
    with pytest.raises(SignalError):
        FFT(1000).get_ind(1e-3, 10.0, 10.0)


def test_blackman_window_reduces_amplitude():
    data = _sine(128, 10)
    plain, windowed = FFT(128), FFT(128)
    plain.run(data, 1.0)
    windowed.run(data, 1.0, True)
    assert windowed.abs(10) < plain.abs(10)
    assert windowed.blackman_corr() == 3.2


def test_find_max_par_vertex_near_peak():
    fft = FFT(256)
    fft.run(_sine(256, 30), 1.0, True)
    a, b, c = fft.find_max_par(1, 128, 1.0)
    assert a < 0
    assert abs(-b / (2 * a) - 30) < 1


def test_find_max_par_edge_error():
    fft = FFT(64)
    fft.run([5] * 64, 1.0)
    with pytest.raises(SignalError):
        fft.find_max_par(0, 32, 1.0)