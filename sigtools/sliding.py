"""Sliding-window spectral filters using a Blackman-windowed FFT."""

from __future__ import annotations

import math
from typing import Iterator, Sequence, TextIO

import numpy as np

from sigtools.fft import FFT, FrequencyRange
from sigtools.signal import Channel, Signal


def _is_empty(signal: Signal) -> bool:
    return signal.n_points() < 1 or signal.n_channels() < 1


def _setup(signal: Signal, window, fmin, fmax) -> tuple[FFT, FrequencyRange]:
    fft = FFT(window)
    return fft, fft.get_ind(signal.dt, fmin, fmax)


def _windows(signal: Signal, window: int) -> Iterator[tuple[int, float]]:
    """Yield start index and centre time of each consecutive window."""
    for start in range(0, signal.n_points() - window, window):
        yield start, signal.t0 + signal.dt * (start + window // 2)


def _magnitudes(fft: FFT, rng: FrequencyRange, channels: Sequence[Channel], start: int) -> np.ndarray:
    """Windowed FFT magnitude in the selected bins, averaged over ``channels``."""
    data = np.zeros(rng.i2f - rng.i1f)
    for channel in channels:
        fft.run(channel.data[start:], channel.scale, True)
        data += fft.abs(rng.i1f, rng.i2f) / len(channels)
    return data


def write_sfft_txt(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, window=1024):
    """Write time, frequency, real and imaginary part for each window of channel 0."""
    if _is_empty(signal):
        return
    window = int(window)
    fft, rng = _setup(signal, window, fmin, fmax)
    channel = signal.channels[0]
    for start, t in _windows(signal, window):
        fft.run(channel.data[start:], channel.scale, True)
        re = fft.real(rng.i1f, rng.i2f)
        im = fft.imag(rng.i1f, rng.i2f)
        for j, i in enumerate(range(rng.i1f, rng.i2f)):
            out.write(f"{t:.10e}\t{i * rng.df:.10e}\t{re[j]:.8e}\t{im[j]:.8e}\n")
        out.write("\n")


def write_sfft_pow(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, window=1024,
                   average=False):
    """Write time, frequency and magnitude for each window.

    With ``average`` the magnitudes of all channels are averaged, otherwise
    only channel 0 is used.
    """
    if _is_empty(signal):
        return
    window = int(window)
    fft, rng = _setup(signal, window, fmin, fmax)
    used = signal.channels if average else signal.channels[:1]
    for start, t in _windows(signal, window):
        data = _magnitudes(fft, rng, used, start)
        for i, value in zip(range(rng.i1f, rng.i2f), data):
            out.write(f"{t:.10e}\t{i * rng.df:.10e}\t{value:.8e}\n")
        out.write("\n")


def write_sfft_int(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, window=1024):
    """Write time and RMS magnitude over the frequency range for each window."""
    if _is_empty(signal):
        return
    window = int(window)
    fft, rng = _setup(signal, window, fmin, fmax)
    channel = signal.channels[0]
    for start, t in _windows(signal, window):
        fft.run(channel.data[start:], channel.scale, True)
        mag = fft.abs(rng.i1f, rng.i2f)
        total = float(np.sum(mag * mag))
        out.write(f"{t:.10e}\t{math.sqrt(total / len(mag)):.8e}\n")


def write_sfft_diff(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, window=1024):
    """Write time and mean squared spectrum change from the previous window."""
    if _is_empty(signal):
        return
    window = int(window)
    fft, rng = _setup(signal, window, fmin, fmax)
    channel = signal.channels[0]
    previous = np.zeros(rng.i2f - rng.i1f)
    for start, t in _windows(signal, window):
        fft.run(channel.data[start:], channel.scale, True)
        current = fft.abs(rng.i1f, rng.i2f)
        if start != 0:
            dist = float(np.sum((previous - current) ** 2)) / len(current)
            out.write(f"{t:g}\t{dist:g}\n")
        previous = current