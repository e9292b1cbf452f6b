"""Loading of whitespace-separated numeric text tables (x column plus data columns)."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import TextIO

import numpy as np

_DELIMITERS = re.compile(r"[\n\t ]+")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class TextLoadError(Exception):
    """Raised when a text table cannot be loaded."""


@dataclass
class TextTable:
    """A table with an x column and data columns, with their min/max values."""

    x: np.ndarray
    columns: list[np.ndarray]
    x_min: float
    x_max: float
    column_min: list[float]
    column_max: list[float]

    def __len__(self) -> int:
        return len(self.x)


def _atof(token: str) -> float:
    match = _FLOAT_PREFIX.match(token)
    return float(match.group(1)) if match else 0.0


def parse_numbers(line: str) -> list[float]:
    """Split a line on spaces, tabs and newlines and convert each token to a number.

    A token that does not start with a number converts to 0.
    """
    return [_atof(token) for token in _DELIMITERS.split(line) if token]


def _min_max(values: np.ndarray) -> tuple[float, float]:
    known = values[~np.isnan(values)]
    if known.size == 0:
        return math.inf, -math.inf
    return float(known.min()), float(known.max())


def _load(text: str, name: str) -> TextTable:
    rows: list[list[float]] = []
    width = 0
    for line in text.split("\n"):
        line = line.split("#", 1)[0]
        values = parse_numbers(line)
        if not rows:
            if len(values) < 2:
                raise TextLoadError(f"at least two data columns are needed: {name}")
            width = len(values)
        values = (values + [math.nan] * width)[:width]
        rows.append(values)

    table = np.array(rows, dtype=float)
    x = table[:, 0].copy()
    columns = [table[:, n].copy() for n in range(1, width)]
    x_min, x_max = _min_max(x)
    limits = [_min_max(col) for col in columns]
    return TextTable(
        x=x,
        columns=columns,
        x_min=x_min,
        x_max=x_max,
        column_min=[lo for lo, _ in limits],
        column_max=[hi for _, hi in limits],
    )


def load_text_columns(stream: TextIO) -> TextTable:
    """Read a table from ``stream``.

    ``#`` starts a comment. The first line fixes the number of columns (at least
    two); shorter lines, blank lines included, are padded with NaN and longer
    lines are cut.
    """
    data = stream.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8", "replace")
    return _load(data, str(getattr(stream, "name", "<stream>")))


def load_text_file(path) -> TextTable:
    """Read a table from the file at ``path``."""
    try:
        stream = open(path, "r", encoding="utf-8", errors="replace", newline="")
    except OSError:
        raise TextLoadError(f"can't open file: {path}") from None
    with stream:
        return _load(stream.read(), str(path))