"""Generators of synthetic SIG001 test signals: decaying oscillations and noise."""

from __future__ import annotations

import math
import re
import sys
from typing import BinaryIO, Iterator

import numpy as np

_FULL_SCALE = 1 << 15

_HELP_DECAY = (
    "testsig -- create test signals with decaying oscillations\n"
    "Usage: testsig [options] > <file>\n"
    "Options:\n"
    " -N <num>  -- number of points (default: 100000)\n"
    " -D <num>  -- time step, s  (default: 1e-5)\n"
    " -F <num>  -- signal frequency, Hz (default: 32674)\n"
    " -T <num>  -- signal decay time, s (default: 0.325), 0 for non-decaying signal\n"
    " -A <num>  -- signal amplitude,  Vpp (default: 0.582) (full scale=1V)\n"
    " -n <num>  -- noise amplitude, Vpp (default: 0)\n"
    " -G <num>  -- frequency change, Hz (default: 0)\n"
    " -U <num>  -- frequency relaxation time, s (default: 0.112)\n"
    " -h        -- write this help message and exit\n"
)

_HELP_TWO_DECAY = (
    "testsig_2decay -- create test signals with two decaying oscillations\n"
    "Usage: testsig [options] > <file>\n"
    "Options:\n"
    " -N <num>  -- number of points (default: 100000)\n"
    " -D <num>  -- time step, s  (default: 1e-5)\n"
    " -F <num>  -- signal-1 frequency, Hz (default: 32674)\n"
    " -G <num>  -- signal-2 frequency, Hz (default: 32674)\n"
    " -T <num>  -- signal-1 decay time, s (default: 0.325), 0 for non-decaying signal\n"
    " -U <num>  -- signal-2 decay time, s (default: 0.325), 0 for non-decaying signal\n"
    " -A <num>  -- signal-1 amplitude,  Vpp (default: 0.582) (full scale=1V)\n"
    " -B <num>  -- signal-2 amplitude,  Vpp (default: 0.582) (full scale=1V)\n"
    " -n <num>  -- noise amplitude, Vpp (default: 0)\n"
    " -h        -- write this help message and exit\n"
)

_HELP_NOISE = (
    "testsig -- create 2-channal test signals with noise\n"
    "Usage: testsig [options] > <file>\n"
    "Options:\n"
    " -N <num>  -- number of points (default: 100000)\n"
    " -D <num>  -- time step, s  (default: 1e-5)\n"
    " -A <num>  -- amplitude of noise, V/sqrt(Hz) (default: 1.0)\n"
    " -c <num>  -- correlation in noise power 0..1 (default: 0.5)\n"
    " -h        -- write this help message and exit\n"
)

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _atof(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else 0.0


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _options(argv, spec: str, prog: str) -> Iterator[tuple[str, str | None]]:
    """Yield (option, argument) pairs; unknown options are reported and skipped."""
    known: dict[str, bool] = {}
    for pos, ch in enumerate(spec):
        if ch != ":":
            known[ch] = spec[pos + 1:pos + 2] == ":"
    args = list(argv)
    index = 0
    while index < len(args):
        arg = args[index]
        index += 1
        if arg == "--":
            return
        if not arg.startswith("-") or arg == "-":
            continue
        pos = 1
        while pos < len(arg):
            ch = arg[pos]
            pos += 1
            if ch not in known:
                print(f"{prog}: invalid option -- '{ch}'", file=sys.stderr)
                continue
            if not known[ch]:
                yield ch, None
                continue
            if pos < len(arg):
                value = arg[pos:]
            elif index < len(args):
                value = args[index]
                index += 1
            else:
                print(f"{prog}: option requires an argument -- '{ch}'", file=sys.stderr)
                break
            yield ch, value
            break


def _num(value) -> str:
    return f"{float(value):g}"


def _count(points) -> int:
    return max(0, math.ceil(points))


def _phases(increments: np.ndarray) -> np.ndarray:
    """Phase before each sample when increments are accumulated one by one."""
    phases = np.zeros(len(increments))
    if len(increments) > 1:
        phases[1:] = np.cumsum(increments[:-1])
    return phases


def _to_int16(values: np.ndarray) -> np.ndarray:
    values = np.nan_to_num(values, nan=0.0, posinf=0.0, neginf=0.0)
    values = np.clip(np.trunc(values), -(2.0 ** 31), 2.0 ** 31 - 1)
    return values.astype(np.int64).astype("<i2")


def _rng(rng):
    return rng if rng is not None else np.random.default_rng()


def write_decay(out: BinaryIO, points=100000, dt=1e-5, freq=32674.0, tau=0.325, amp=0.582,
                noise=0.0, freq_shift=0.0, freq_tau=0.112, rng=None):
    """Write a one-channel signal with a decaying oscillation and uniform noise.

    The frequency relaxes as ``freq + freq_shift*exp(-t/freq_tau)``; ``tau`` of 0
    means no decay.
    """
    rng = _rng(rng)
    sc = (amp + noise) / _FULL_SCALE
    header = (
        "*SIG001\n"
        f"  points:   {_num(points)}\n"
        f"  dt:       {_num(dt)}\n"
        "  t0:       0\n"
        f"  chan: A {_num(sc)} 0\n"
        "*\n"
    )
    count = _count(points)
    t = np.arange(count, dtype=float) * dt
    with np.errstate(all="ignore"):
        f = freq + freq_shift * np.exp(-t / freq_tau)
        phi = _phases(2 * math.pi * f * dt)
        y = 0.5 * amp * np.sin(phi)
        if tau != 0:
            y = y * np.exp(-t / tau)
        y = y + noise * (rng.random(count) - 0.5)
        samples = _to_int16(y / sc)
    out.write(header.encode("ascii"))
    out.write(samples.tobytes())


def write_two_decay(out: BinaryIO, points=100000, dt=1e-5, freq1=32674.0, freq2=31234.0,
                    tau1=0.325, tau2=0.234, amp1=0.182, amp2=0.123, noise=0.0, rng=None):
    """Write a one-channel signal holding two decaying oscillations and noise."""
    rng = _rng(rng)
    sc = (amp1 + amp2 + noise) / _FULL_SCALE
    header = (
        "*SIG001\n"
        f"  points:   {_num(points)}\n"
        f"  dt:       {_num(dt)}\n"
        "  t0:       0\n"
        f"  chan: A {_num(sc)} 0\n"
        "# test signal parameters:\n"
        f"  fre1:  {_num(freq1)} 0\n"
        f"  tau1:  {_num(tau1)}\n"
        f"  amp1:  {_num(amp1)}\n"
        f"  fre2:  {_num(freq2)}\n"
        f"  tau2:  {_num(tau2)}\n"
        f"  amp2:  {_num(amp2)}\n"
        f"  noise: {_num(noise)}\n"
        "*\n"
    )
    count = _count(points)
    t = np.arange(count, dtype=float) * dt
    with np.errstate(all="ignore"):
        y1 = 0.5 * amp1 * np.sin(_phases(np.full(count, 2 * math.pi * freq1 * dt)))
        if tau1 != 0:
            y1 = y1 * np.exp(-t / tau1)
        y2 = 0.5 * amp2 * np.sin(_phases(np.full(count, 2 * math.pi * freq2 * dt)))
        if tau2 != 0:
            y2 = y2 * np.exp(-t / tau2)
        n = noise * (rng.random(count) - 0.5)
        samples = _to_int16((y1 + y2 + n) / sc)
    out.write(header.encode("ascii"))
    out.write(samples.tobytes())


def write_noise(out: BinaryIO, points=100000, dt=1e-5, amp=1.0, corr=0.5, rng=None):
    """Write a two-channel noise signal whose noise power is partly correlated.

    ``amp`` is in V/sqrt(Hz); ``corr`` (clamped to 0..1) is the correlated fraction.
    """
    rng = _rng(rng)
    corr = min(max(corr, 0.0), 1.0)
    k = 2 * math.sqrt(math.sqrt(2)) / math.sqrt(dt)
    a0 = k * amp * math.sqrt(corr)
    a1 = k * amp * math.sqrt(1 - corr)
    a2 = a1
    sc = (a0 + max(a1, a2)) / _FULL_SCALE
    header = (
        "*SIG001\n"
        f"  points:   {_num(points)}\n"
        f"  dt:       {_num(dt)}\n"
        "  t0:       0\n"
        f"  chan: A {_num(sc)} 0\n"
        f"  chan: B {_num(sc)} 0\n"
        "\n*\n"
    )
    count = _count(points)
    draws = rng.random((count, 3))
    with np.errstate(all="ignore"):
        n0 = a0 * (draws[:, 0] - 0.5)
        n1 = a1 * (draws[:, 1] - 0.5)
        n2 = a2 * (draws[:, 2] - 0.5)
        samples = np.column_stack([_to_int16((n0 + n1) / sc), _to_int16((n0 + n2) / sc)])
    out.write(header.encode("ascii"))
    out.write(samples.astype("<i2").tobytes())


def _stdout() -> BinaryIO:
    return sys.stdout.buffer


def main_decay(argv=None) -> int:
    """Command line entry: write a decaying test signal to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    params = {}
    for opt, value in _options(args, "hN:D:F:T:A:n:G:U:", "testsig_decay"):
        if opt == "h":
            sys.stdout.write(_HELP_DECAY)
            return 0
        if opt == "N":
            params["points"] = _atoi(value)
        else:
            key = {"D": "dt", "F": "freq", "T": "tau", "A": "amp", "n": "noise",
                   "G": "freq_shift", "U": "freq_tau"}[opt]
            params[key] = _atof(value)
    write_decay(_stdout(), rng=np.random.default_rng(1), **params)
    _stdout().flush()
    return 0


def main_two_decay(argv=None) -> int:
    """Command line entry: write a two-oscillation test signal to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    params = {}
    for opt, value in _options(args, "hN:D:F:T:A:n:G:U:", "testsig_2decay"):
        if opt == "h":
            sys.stdout.write(_HELP_TWO_DECAY)
            return 0
        if opt == "N":
            params["points"] = _atoi(value)
        else:
            key = {"D": "dt", "F": "freq1", "G": "freq2", "T": "tau1", "U": "tau2",
                   "A": "amp1", "n": "noise"}[opt]
            params[key] = _atof(value)
    write_two_decay(_stdout(), rng=np.random.default_rng(1), **params)
    _stdout().flush()
    return 0


def main_noise(argv=None) -> int:
    """Command line entry: write a two-channel noise test signal to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    params = {}
    for opt, value in _options(args, "hN:D:A:c:", "testsig_noise"):
        if opt == "h":
            sys.stdout.write(_HELP_NOISE)
            return 0
        key = {"N": "points", "D": "dt", "A": "amp", "c": "corr"}[opt]
        params[key] = _atof(value)
    write_noise(_stdout(), rng=np.random.default_rng(1), **params)
    _stdout().flush()
    return 0