"""Multi-channel sampled signals as processed by the filters."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


class SignalError(Exception):
    """Raised when a signal cannot be processed as requested."""


@dataclass
class Channel:
    """One channel of raw 16-bit samples with a scale factor to volts."""

    data: np.ndarray
    scale: float = 1.0
    overload: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        self.data = np.asarray(self.data, dtype=np.int16)
        if self.data.ndim != 1:
            raise SignalError("channel data must be one-dimensional")

    def __len__(self) -> int:
        return len(self.data)

    def values(self) -> np.ndarray:
        """Samples converted to physical units."""
        return self.data.astype(float) * self.scale


@dataclass
class Signal:
    """A set of equally long channels sampled with step ``dt`` from ``t0``."""

    channels: list[Channel] = field(default_factory=list)
    dt: float = 1.0
    t0: float = 0.0
    t0abs_str: str = ""

    def __post_init__(self) -> None:
        lengths = {len(ch) for ch in self.channels}
        if len(lengths) > 1:
            raise SignalError("channels have different number of points")

    def n_points(self) -> int:
        """Number of samples in each channel."""
        return len(self.channels[0]) if self.channels else 0

    def n_channels(self) -> int:
        """Number of channels."""
        return len(self.channels)