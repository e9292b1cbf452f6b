import io
import math

import numpy as np
import pytest

from sigtools.peaks import write_sfft_peak, write_sfft_peaks
from sigtools.signal import Channel, Signal, SignalError

DT = 1e-3
WINDOW = 256
DF = 1 / DT / WINDOW


def _sine(freq=200.0, n=4096, amplitude=10000.0):
    t = np.arange(n) * DT
    data = np.round(amplitude * np.sin(2 * math.pi * freq * t)).astype(np.int16)
    return Signal(channels=[Channel(data=data, scale=1e-4)], dt=DT, t0=0.0)


def _peak_lines(signal, **kwargs):
    out = io.StringIO()
    write_sfft_peak(out, signal, **kwargs)
    return [line.split() for line in out.getvalue().splitlines()]


def test_sfft_peak_tracks_sine_frequency():
    signal = _sine()
    rows = _peak_lines(signal, times=[0.0, 4.095], freqs=[200.0, 200.0], window=WINDOW)
    assert len(rows) == len(range(0, 4095 - WINDOW, WINDOW))
    for row in rows:
        assert len(row) == 4
        assert abs(float(row[1]) - 200.0) < DF
        assert float(row[2]) > float(row[3])


def test_sfft_peak_first_time_is_window_centre():
    rows = _peak_lines(_sine(), times=[0.0, 4.095], freqs=[200.0, 200.0], window=WINDOW)
    assert float(rows[0][0]) == pytest.approx(DT * (WINDOW // 2))
    times = [float(row[0]) for row in rows]
    assert times == sorted(times)


def test_sfft_peak_step_controls_number_of_rows():
    full = _peak_lines(_sine(), times=[0.0, 4.095], freqs=[200.0, 200.0], window=WINDOW)
    half = _peak_lines(_sine(), times=[0.0, 4.095], freqs=[200.0, 200.0], window=WINDOW,
                       step=WINDOW // 2)
    assert len(half) == len(range(0, 4095 - WINDOW, WINDOW // 2))
    assert len(half) > len(full)


def test_sfft_peak_needs_two_hints():
    with pytest.raises(SignalError, match="lists of times"):
        write_sfft_peak(io.StringIO(), _sine(), times=[0.0], freqs=[200.0], window=WINDOW)


def test_sfft_peak_too_short_time_range():
    signal = _sine(n=300)
    with pytest.raises(SignalError, match="too short time range"):
        write_sfft_peak(io.StringIO(), signal, times=[0.0, 0.001], freqs=[200.0, 200.0],
                        window=WINDOW)


def test_sfft_peak_rejects_non_positive_frequency():
    with pytest.raises(SignalError, match="negative or zero frequency"):
        write_sfft_peak(io.StringIO(), _sine(), times=[0.0, 4.0], freqs=[10.0, 20.0],
                        window=WINDOW)


def test_sfft_peaks_one_line_per_window():
    signal = _sine()
    out = io.StringIO()
    write_sfft_peaks(out, signal, window=WINDOW)
    lines = out.getvalue().splitlines()
    assert len(lines) == len(range(0, signal.n_points() - WINDOW, WINDOW))
    for start, line in zip(range(0, signal.n_points() - WINDOW, WINDOW), lines):
        assert float(line.split("\t")[0]) == pytest.approx(DT * (start + WINDOW // 2))


def test_sfft_peaks_huge_threshold_reports_nothing():
    out = io.StringIO()
    write_sfft_peaks(out, _sine(), window=WINDOW, threshold=1e12)
    lines = out.getvalue().splitlines()
    assert lines
    assert all("\t" not in line for line in lines)


def test_sfft_peaks_frequencies_inside_range():
    out = io.StringIO()
    write_sfft_peaks(out, _sine(), fmin=100.0, fmax=300.0, window=WINDOW, threshold=0.5)
    for line in out.getvalue().splitlines():
        for field in line.split("\t")[1:]:
            freq, magnitude = (float(v) for v in field.split())
            assert 100.0 - DF < freq < 300.0 + DF
            assert magnitude >= 0


def test_sfft_peaks_empty_signal_writes_nothing():
    out = io.StringIO()
    write_sfft_peaks(out, Signal(channels=[], dt=DT), window=WINDOW)
    assert out.getvalue() == ""