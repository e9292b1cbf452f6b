"""Whole-signal filters: plots, spectra, peak search and simple statistics."""

from __future__ import annotations

import math
from typing import BinaryIO, Iterator, TextIO

import numpy as np

from sigtools.fft import FFT, FrequencyRange
from sigtools.signal import Signal

_COLORS = (0x00880000, 0x00008800, 0x00000088, 0x00888800, 0x00008888, 0x00880088, 0x00000000)
_AXIS_COLOR = 0x00888888
_BACKGROUND = 0xFFFFFFFF


def write_pnm(out: BinaryIO, signal: Signal, width=1024, height=768):
    """Write a binary PPM image with all channels plotted over time."""
    n = signal.n_points()
    if n < 1 or signal.n_channels() < 1:
        return
    pic = np.full((height, width), _BACKGROUND, dtype=np.uint32)

    pos = -signal.t0 / signal.dt * width
    if math.isfinite(pos):
        x0 = int(pos / n)
        if 0 <= x0 < width:
            pic[:, x0] = _AXIS_COLOR

    x = (np.arange(n, dtype=float) * width / n).astype(np.int64)
    for index, channel in enumerate(signal.channels):
        scaled = channel.data.astype(np.int64) * height
        y = height // 2 - np.sign(scaled) * (np.abs(scaled) // (1 << 16))
        inside = (y >= 0) & (y < height) & (x >= 0) & (x < width)
        pic[y[inside], x[inside]] = _COLORS[index % len(_COLORS)]

    rgb = np.stack([(pic >> shift) & 0xFF for shift in (8, 16, 24)], axis=-1).astype(np.uint8)
    out.write(f"P6\n{width} {height}\n255\n".encode("ascii"))
    out.write(rgb.tobytes())


def _spectrum_setup(signal: Signal, fmin, fmax):
    n = signal.n_points()
    fft = FFT(n)
    return fft, fft.get_ind(signal.dt, fmin, fmax)


def write_fft_txt(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, blackman=False):
    """Write frequency, then real and imaginary parts for every channel."""
    if signal.n_points() < 1 or signal.n_channels() < 1:
        return
    fft, rng = _spectrum_setup(signal, fmin, fmax)
    columns = []
    for channel in signal.channels:
        fft.run(channel.data, channel.scale, blackman)
        columns.append((fft.real(rng.i1f, rng.i2f), fft.imag(rng.i1f, rng.i2f)))
    for i in range(rng.i1f, rng.i2f):
        j = i - rng.i1f
        parts = [f"{rng.df * i:.12e}"]
        for re, im in columns:
            parts.append(f"{re[j]:.8e}")
            parts.append(f"{im[j]:.8e}")
        out.write("\t".join(parts) + "\n")


def _averaging_groups(rng: FrequencyRange, npts, log) -> Iterator[tuple[int, int]]:
    """Yield half-open bin ranges that are averaged into one output point."""
    fmin, df = rng.fmin, rng.df
    if log:
        if fmin == 0:
            fmin = df
        fstep = (rng.fmax / fmin) ** (1.0 / npts)
    else:
        fstep = (rng.fmax - fmin) / npts
    start = rng.i1f
    for i in range(rng.i1f, rng.i2f):
        edge = fmin * fstep if log else fmin + fstep
        if i * df >= edge or i == rng.i2f - 1:
            yield start, i + 1
            start = i + 1
            fmin = i * df


def _group_freq(start, end, df):
    n = end - start
    return (end - 1 - 0.5 * (n - 1)) * df


def write_fft_pow(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, npts=1024,
                  log=False, blackman=False):
    """Write power spectral density (V^2/Hz) averaged to about ``npts`` points."""
    n = signal.n_points()
    if n < 1 or signal.n_channels() < 1:
        return
    k = 2 * signal.dt / n
    fft, rng = _spectrum_setup(signal, fmin, fmax)
    if blackman:
        k *= fft.blackman_corr()
    powers = []
    for channel in signal.channels:
        fft.run(channel.data, channel.scale, blackman)
        powers.append(fft.abs(rng.i1f, rng.i2f) ** 2)
    for start, end in _averaging_groups(rng, npts, log):
        count = end - start
        parts = [f"{_group_freq(start, end, rng.df):.10e}"]
        for power in powers:
            total = float(np.sum(power[start - rng.i1f:end - rng.i1f]))
            parts.append(f"{k * total / count:.8e}")
        out.write("\t".join(parts) + "\n")


def write_fft_pow_corr(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, npts=1024,
                       log=False, blackman=False):
    """Write the averaged cross-spectrum magnitude of channels 0 and 1."""
    n = signal.n_points()
    if n < 2 or signal.n_channels() != 2:
        return
    k = 2 * signal.dt / n
    fft, rng = _spectrum_setup(signal, fmin, fmax)
    if blackman:
        k *= fft.blackman_corr()
    first, second = signal.channels
    fft.run(first.data, first.scale, blackman)
    re1, im1 = fft.real(rng.i1f, rng.i2f), fft.imag(rng.i1f, rng.i2f)
    fft.run(second.data, second.scale, blackman)
    re2, im2 = fft.real(rng.i1f, rng.i2f), fft.imag(rng.i1f, rng.i2f)
    corr_re = re1 * re2 + im1 * im2
    corr_im = im1 * re2 - re1 * im2
    for start, end in _averaging_groups(rng, npts, log):
        count = end - start
        window = slice(start - rng.i1f, end - rng.i1f)
        sre = float(np.sum(corr_re[window]))
        sim = float(np.sum(corr_im[window]))
        out.write(f"{_group_freq(start, end, rng.df):.10e}\t{k * math.hypot(sre, sim) / count:.8e}\n")


def find_peak(signal: Signal, fmin=0.0, fmax=math.inf, average=False):
    """Frequency of the spectral maximum refined by a parabola, or None at an edge."""
    if signal.n_points() < 1 or signal.n_channels() < 1:
        return None
    fft, rng = _spectrum_setup(signal, fmin, fmax)
    used = signal.channels if average else signal.channels[:1]
    data = np.zeros(rng.i2f - rng.i1f)
    for channel in used:
        fft.run(channel.data, channel.scale)
        data += fft.abs(rng.i1f, rng.i2f) / len(used)

    best = 0
    for i, value in enumerate(data):
        if value >= data[best]:
            best = i
    if best < 1 or best >= len(data) - 1:
        return None
    y1, y2, y3 = data[best - 1], data[best], data[best + 1]
    a = (y1 + y3) / 2 - y2
    b = (y3 - y1) / 2
    return rng.df * (rng.i1f + best - b / 2 / a)


def write_dc(out: TextIO, signal: Signal):
    """Write the mean value of each channel."""
    if signal.n_points() < 1 or signal.n_channels() < 1:
        return
    for channel in signal.channels:
        out.write(f"{float(np.mean(channel.values())):.6g}\n")


def write_minmax(out: TextIO, signal: Signal):
    """Write minimum and maximum of each channel."""
    if signal.n_points() < 1 or signal.n_channels() < 1:
        return
    for channel in signal.channels:
        values = channel.values()
        out.write(f"{float(values.min()):.6g} {float(values.max()):.6g}\n")


def write_overload(out: TextIO, signal: Signal):
    """Write the overload flag (0 or 1) of each channel."""
    for channel in signal.channels:
        out.write(f"{int(channel.overload)}\n")