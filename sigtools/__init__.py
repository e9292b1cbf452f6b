"""Analysis of sampled multi-channel signals: spectra, sliding FFT, peaks, test signals and PNG comments."""

__version__ = "1.0.0"

__all__ = [
    "fft",
    "peaks",
    "pngcomments",
    "signal",
    "sliding",
    "spectrum",
    "testsig",
    "txtload",
]