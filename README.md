# sigtools

Tools for looking at sampled signals: records of one or more channels of
16-bit samples, each with a scale factor to volts, sharing a time step and a
start time. The package computes spectra, sliding (short-time) FFTs, peak
positions and simple statistics, generates synthetic test signals in the
SIG001 format, converts PNM pictures to PNG while keeping their comments, and
reads numeric text tables.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Working with signals

Signals are built in memory from sample arrays:

```python
import io
import numpy as np
from sigtools.signal import Channel, Signal
from sigtools.spectrum import write_fft_pow, find_peak

samples = (10000 * np.sin(2 * np.pi * 1000 * np.arange(4096) * 1e-4)).astype(np.int16)
sig = Signal(channels=[Channel(samples, scale=1e-4)], dt=1e-4, t0=0.0)

out = io.StringIO()
write_fft_pow(out, sig, fmin=0, fmax=5000, npts=64)
print(find_peak(sig))
```

## Library overview

- `sigtools.signal` — `Channel` (fields `data`, `scale`, `overload`, `name`;
  `values()` gives samples in volts) and `Signal` (fields `channels`, `dt`,
  `t0`, `t0abs_str`; `n_points()`, `n_channels()`). `SignalError` is raised
  for invalid input or parameters, for example channels of different length.
- `sigtools.fft` — `FFT`, a fixed-length forward transform with an optional
  Blackman window (`run`, `real`, `imag`, `abs`, `find_max`, `find_max_par`,
  `blackman_corr`). `FFT.get_ind(dt, fmin, fmax)` clips a frequency range to
  0..Nyquist, aligns it to bins and returns a `FrequencyRange` with `fmin`,
  `fmax`, the bin range `i1f`..`i2f` and the step `df`.
- `sigtools.spectrum` — whole-signal analysis:
  `write_fft_txt` (frequency, real and imaginary part per channel),
  `write_fft_pow` (power spectral density in V²/Hz averaged to about `npts`
  points, linear or logarithmic spacing, optional Blackman window),
  `write_fft_pow_corr` (cross spectrum of channels 0 and 1 of a two-channel
  signal), `write_pnm` (binary PPM plot of all channels to a binary stream),
  `find_peak` (spectral maximum refined by a parabola, `None` when the maximum
  is at an edge of the range), `write_dc`, `write_minmax` and
  `write_overload`.
- `sigtools.sliding` — sliding FFT over consecutive windows with a Blackman
  window: `write_sfft_txt`, `write_sfft_pow` (optionally averaging all
  channels), `write_sfft_int` (RMS magnitude over the range) and
  `write_sfft_diff` (mean squared change from the previous window).
- `sigtools.peaks` — `write_sfft_peaks` detects peaks in every window above a
  threshold; `write_sfft_peak` tracks one peak near a line given by
  time/frequency hints and writes time, peak frequency, peak magnitude and
  base magnitude.
- `sigtools.testsig` — synthetic SIG001 signals written to a binary stream: a
  decaying oscillation with an optional frequency drift (`write_decay`), two
  decaying oscillations (`write_two_decay`), and two channels of partly
  correlated noise (`write_noise`). Each takes an optional numpy random
  generator `rng`.
- `sigtools.pngcomments` — `pnm_to_png` converts a binary 8-bit PNM (P6)
  image to an RGB PNG and keeps its `#` comments in a private `pnmc` chunk;
  `read_png_comments` reads them back. Errors raise `PngError`.
- `sigtools.txtload` — `load_text_file` and `load_text_columns` read a
  whitespace-separated numeric table (with `#` comments) into a `TextTable`
  (`x`, `columns`, `x_min`, `x_max`, `column_min`, `column_max`). The first
  line fixes the number of columns (at least two); shorter rows are padded
  with NaN. `parse_numbers` splits a single line. Errors raise
  `TextLoadError`.

## Commands

Generate a test signal with a decaying oscillation:

```
testsig_decay -N 150000 -D 1e-4 -F 2674 -T 1.23 -A 1.23 -n 0.01 > decay.dat
```

Options: `-N` points, `-D` time step (s), `-F` frequency (Hz), `-T` decay
time (s, 0 for no decay), `-A` amplitude (Vpp), `-n` noise amplitude (Vpp),
`-G` frequency change (Hz), `-U` frequency relaxation time (s), `-h` help.

Two decaying oscillations:

```
testsig_2decay -F 32674 -G 31234 -T 0.325 -U 0.234 > two.dat
```

Options: `-N`, `-D`, `-n` as above; `-F`/`-G` frequencies, `-T`/`-U` decay
times of the first and second oscillation, `-A` amplitude of the first one.

Two channels of noise with a given correlation (0..1):

```
testsig_noise -N 150000 -D 1e-4 -A 1 -c 0.5 > noise.dat
```

Options: `-N` points, `-D` time step, `-A` noise amplitude (V/sqrt(Hz)),
`-c` correlated fraction of the noise power, `-h` help.

The generator commands use a fixed random seed, so repeated runs give the
same output.

Convert a PNM picture on standard input to PNG on standard output, keeping
its comments:

```
sig_pnmtopng < picture.pnm > picture.png
```

Print the comments stored in a PNG file:

```
sig_pnginfo picture.png
```

## What the package does not do

- It has no reader or writer for SIG, SIGF or WAV data files, so there is no
  command that loads a recorded file and runs an analysis on it; signals for
  the analysis functions are built in memory from sample arrays.
- It does not fit decaying oscillations, does no lock-in detection and draws
  no spectrogram pictures.
- It has no graphical viewer; `sigtools.txtload` only reads tables into
  arrays.