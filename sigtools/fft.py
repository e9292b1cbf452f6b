"""Discrete Fourier transform of a fixed length with optional Blackman window."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from sigtools.signal import SignalError

_A0, _A1, _A2 = 0.42659, 0.49656, 0.076849


@dataclass(frozen=True)
class FrequencyRange:
    """Frequency limits aligned to FFT bins, with bin indices [i1f, i2f)."""

    fmin: float
    fmax: float
    i1f: int
    i2f: int
    df: float


class FFT:
    """Forward, unnormalised complex FFT of ``length`` points."""

    def __init__(self, length):
        self.length = int(length)
        if self.length < 1:
            raise SignalError(f"bad FFT length: {length}")
        self._buf = np.zeros(self.length, dtype=complex)

    def run(self, data, scale=1.0, blackman=False):
        """Transform the first ``length`` samples of ``data`` multiplied by ``scale``."""
        samples = np.asarray(data)
        if len(samples) < self.length:
            raise SignalError("not enough data for FFT")
        values = samples[: self.length].astype(float) * scale
        if blackman:
            idx = np.arange(self.length, dtype=float)
            with np.errstate(divide="ignore", invalid="ignore"):
                phase = 2 * math.pi * idx / (self.length - 1)
                values = values * (_A0 - _A1 * np.cos(phase) + _A2 * np.cos(2 * phase))
        self._buf = np.fft.fft(values)

    def _slice(self, i1, i2):
        if i1 < 0 or i2 > self.length:
            raise SignalError("index out of range")
        return self._buf[i1:i2]

    def _item(self, i):
        if i < 0 or i >= self.length:
            raise SignalError("index out of range")
        return self._buf[i]

    def real(self, i1, i2=None):
        """Real part of bin ``i1``, or of bins [i1, i2) as an array."""
        if i2 is None:
            return float(self._item(int(i1)).real)
        return self._slice(i1, i2).real.copy()

    def imag(self, i1, i2=None):
        """Imaginary part of bin ``i1``, or of bins [i1, i2) as an array."""
        if i2 is None:
            return float(self._item(int(i1)).imag)
        return self._slice(i1, i2).imag.copy()

    def abs(self, i1, i2=None):
        """Magnitude of bin ``i1``, or of bins [i1, i2) as an array."""
        if i2 is None:
            value = self._item(int(i1))
            return math.hypot(value.real, value.imag)
        return np.abs(self._slice(i1, i2))

    def blackman_corr(self):
        """Power correction factor for the Blackman window."""
        return 3.2

    def find_max(self, i1f, i2f):
        """Index of the largest magnitude in [i1f, i2f); the last one wins ties."""
        best_index = i1f
        best_value = self.abs(i1f)
        for i in range(i1f, i2f):
            value = self.abs(i)
            if value >= best_value:
                best_value, best_index = value, i
        return best_index

    def find_max_par(self, i1f, i2f, df):
        """Coefficients (A, B, C) of a parabola through the maximum and its neighbours."""
        im = self.find_max(i1f, i2f)
        if im < i1f + 1 or im >= i2f - 1:
            raise SignalError("Maximum on the edge of the frequency range")
        x1, x2, x3 = df * (im - 1), df * im, df * (im + 1)
        y1, y2, y3 = self.abs(im - 1), self.abs(im), self.abs(im + 1)
        a = ((y1 - y2) / (x1 - x2) - (y2 - y3) / (x2 - x3)) / (x1 - x3)
        b = (y1 - y2) / (x1 - x2) - a * (x1 + x2)
        c = y1 - a * x1 * x1 - b * x1
        return a, b, c

    def get_ind(self, dt, fmin=0.0, fmax=math.inf):
        """Clamp a frequency range to [0, Nyquist] and align it to bins."""
        if fmax < fmin:
            fmin, fmax = fmax, fmin
        nyquist = 0.5 / dt
        fmax = min(fmax, nyquist)
        fmin = min(fmin, nyquist)
        fmin = max(fmin, 0.0)
        df = 1 / dt / self.length
        i1f = int(max(0.0, math.floor(fmin / df)))
        i2f = int(min(0.5 * self.length, math.ceil(fmax / df)))
        fmin = df * i1f
        fmax = df * i2f
        if i2f - i1f < 1:
            raise SignalError(f"too small frequency range: {fmin:g} - {fmax:g}")
        return FrequencyRange(fmin=fmin, fmax=fmax, i1f=i1f, i2f=i2f, df=df)