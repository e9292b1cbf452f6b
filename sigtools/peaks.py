"""Peak detection on a sliding Blackman-windowed spectrum."""

from __future__ import annotations

import math
from typing import Iterator, Sequence, TextIO

import numpy as np

from sigtools.fft import FFT
from sigtools.signal import Signal, SignalError

_MAX_PEAK_WIDTH = 20


def _peak_scores(data: np.ndarray, df: float) -> np.ndarray:
    """Score every bin by how well it matches a Lorentzian-like peak shape.

    For widths 1..19 the neighbourhood of each bin, normalised by the bin value,
    is compared with the model; the best inverse RMS difference is kept.
    """
    n = len(data)
    scores = np.zeros(n)
    with np.errstate(all="ignore"):
        for width in range(1, _MAX_PEAK_WIDTH):
            if n <= 2 * width:
                continue
            centers = np.arange(width, n - width - 1)
            if centers.size == 0:
                continue
            offsets = np.arange(-width, width + 1)
            rel = data[centers[None, :] + offsets[:, None]] / data[centers][None, :]
            model = 1.0 / ((offsets * df) ** 2 + (4.0 * width) ** 2)
            rms = np.sqrt(np.mean((rel - model[:, None]) ** 2, axis=0))
            score = 1.0 / rms
            current = scores[centers]
            scores[centers] = np.where(score > current, score, current)
    return scores


def _peak_positions(scores: np.ndarray, threshold: float) -> np.ndarray:
    """Indices of local maxima of normalised scores that exceed ``threshold``."""
    n = len(scores)
    if n < 3:
        return np.array([], dtype=int)
    with np.errstate(all="ignore"):
        normalised = scores / np.mean(scores)
        inner = normalised[1:-1]
        mask = (inner > threshold) & (inner > normalised[:-2]) & (inner > normalised[2:])
    return np.nonzero(mask)[0] + 1


def write_sfft_peaks(out: TextIO, signal: Signal, fmin=0.0, fmax=math.inf, window=1024,
                     threshold=2.5, average=False):
    """Write, for each window, its centre time followed by detected peaks.

    Every peak is written as a tab, its frequency, a space and its magnitude.
    With ``average`` the magnitudes of all channels are averaged.
    """
    if signal.n_points() < 1 or signal.n_channels() < 1:
        return
    window = int(window)
    fft = FFT(window)
    rng = fft.get_ind(signal.dt, fmin, fmax)
    used = signal.channels if average else signal.channels[:1]
    for start in range(0, signal.n_points() - window, window):
        t = signal.t0 + signal.dt * (start + window // 2)
        data = np.zeros(rng.i2f - rng.i1f)
        for channel in used:
            fft.run(channel.data[start:], channel.scale, True)
            data += fft.abs(rng.i1f, rng.i2f) / len(used)
        scores = _peak_scores(data, rng.df)
        parts = [f"{t:g}"]
        for k in _peak_positions(scores, threshold):
            parts.append(f"{(rng.i1f + int(k)) * rng.df:.10g} {data[k]:.8g}")
        out.write("\t".join(parts) + "\n")


def _interpolate(hints: Sequence[tuple[float, float]], t: float) -> float:
    """Linear interpolation of the hint frequency at time ``t``; 0 if not covered."""
    f0 = 0.0
    for (ta, fa), (tb, fb) in zip(hints, hints[1:]):
        if ta > t or tb <= t:
            continue
        f0 = fa + (fb - fa) / (tb - ta) * (t - ta)
    return f0


def _parabola_vertex(xs: tuple[float, float, float], ys: tuple[float, float, float]):
    """Vertex x of the parabola through three points, or None if degenerate."""
    x1, x2, x3 = xs
    y1, y2, y3 = ys
    d = x1 * x1 * (x2 - x3) + x3 * x3 * (x1 - x2) + x2 * x2 * (x3 - x1)
    if d == 0:
        return None
    a = (y1 * (x2 - x3) + y3 * (x1 - x2) + y2 * (x3 - x1)) / d
    b = (x1 * x1 * (y2 - y3) + x3 * x3 * (y1 - y2) + x2 * x2 * (y3 - y1)) / d
    if a == 0:
        return math.nan if b == 0 else math.copysign(math.inf, -b)
    return -b / (2 * a)


def _window_starts(first: int, last: int, window: int, step: int) -> Iterator[int]:
    return iter(range(first, last - window, step))


def write_sfft_peak(out: TextIO, signal: Signal, times=(), freqs=(), window=1024, step=0,
                    fwin=0.0):
    """Track a peak near a line given by (time, frequency) hints.

    For each window writes time, peak frequency, mean magnitude of the three
    bins around the peak and the mean magnitude at the frequency-window edges.
    """
    name = "sfft_peak"
    window = int(window)
    step = int(step)
    times = list(times)
    freqs = list(freqs)
    if fwin == 0:
        fwin = 20.0 / (window * signal.dt)
    if step == 0:
        step = window

    hints = sorted(zip(times, freqs))
    if len(hints) < 2:
        raise SignalError(
            f"{name}: lists of times and frequencies are expected (-T and -F options)")

    n = signal.n_points()
    if n < 1 or signal.n_channels() < 1:
        return
    channel = signal.channels[0]

    i1 = math.ceil((hints[0][0] - signal.t0) / signal.dt - window / 2.0)
    i2 = math.floor((hints[-1][0] - signal.t0) / signal.dt + window / 2.0)
    i1 = max(i1, 0)
    if i2 >= n:
        i2 = n - 1
    if i2 - i1 < window:
        raise SignalError(f"{name}: too short time range")

    fmin = min(freqs) - fwin / 2
    fmax = max(freqs) + fwin / 2
    if fmin <= 0:
        raise SignalError(f"{name}: negative or zero frequency")

    fft = FFT(window)
    rng = fft.get_ind(signal.dt, fmin, fmax)
    df = rng.df

    for start in _window_starts(i1, i2, window, step):
        fft.run(channel.data[start:], channel.scale, True)
        t = signal.t0 + signal.dt * (start + window // 2)
        f0 = _interpolate(hints, t)
        if f0 == 0:
            raise SignalError(f"{name}: can't get frequency for t={t:g}")

        lo = max(int((f0 - fwin / 2) / df), rng.i1f)
        hi = min(int((f0 + fwin / 2) / df), rng.i2f)
        peak = lo
        for i in range(lo + 1, hi - 1):
            if fft.abs(peak) < fft.abs(i):
                peak = i

        xs = ((peak - 1) * df, peak * df, (peak + 1) * df)
        ys = (fft.abs(peak - 1), fft.abs(peak), fft.abs(peak + 1))
        x0 = _parabola_vertex(xs, ys)
        if x0 is None:
            continue
        if x0 < xs[0] or x0 > xs[2]:
            x0 = xs[1]
        base = (fft.abs(lo) + fft.abs(hi)) / 2
        out.write(f"{t:g} {x0:.10g} {sum(ys) / 3:.8g} {base:.8g}\n")