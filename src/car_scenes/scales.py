from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .ingestion import EmptyDatasetError, Record


DEFAULT_TICK_COUNT = 6

# Step thresholds for 1/2/5 x 10^k tick spacing.
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def extent(values: Iterable[float]) -> tuple[float, float]:
    arr = np.fromiter((float(v) for v in values), dtype=np.float64)
    if arr.size == 0:
        raise EmptyDatasetError("Cannot compute an extent over zero values.")
    return float(arr.min()), float(arr.max())


def _tick_spec(start: float, stop: float, count: int) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1

    if power < 0:
        inc = 10 ** (-power) / factor
        i1 = round(start * inc)
        i2 = round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        return i1, i2, -inc

    inc = 10**power * factor
    i1 = round(start / inc)
    i2 = round(stop / inc)
    if i1 * inc < start:
        i1 += 1
    if i2 * inc > stop:
        i2 -= 1
    return i1, i2, float(inc)


def nice_ticks(start: float, stop: float, count: int = DEFAULT_TICK_COUNT) -> list[float]:
    """Evenly spaced, human-friendly values covering ``[start, stop]``.

    Spacing is 1, 2 or 5 times a power of ten, picked so that roughly
    ``count`` ticks fall inside the interval. The bounds themselves are only
    included when they land on the spacing.
    """
    if count <= 0:
        return []
    if start == stop:
        return [float(start)]
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    i1, i2, inc = _tick_spec(start, stop, count)
    if i2 < i1:
        return []
    steps = np.arange(i1, i2 + 1, dtype=np.float64)
    values = steps / -inc if inc < 0 else steps * inc
    ticks = [float(v) for v in values]
    return ticks[::-1] if reverse else ticks


def format_number(value: float, integer: bool = False, places: int | None = None) -> str:
    """Shortest decimal text for ``value``; whole numbers print without a fraction.

    ``integer`` rounds to the nearest whole number first, ``places`` rounds to
    that many decimals.
    """
    f = float(value)
    if integer:
        return str(int(round(f)))
    if places is not None:
        f = round(f, places)
    return str(int(f)) if f.is_integer() else repr(f)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        # Degenerate domain collapses onto the middle of the range.
        t = 0.5 if span == 0 else (float(value) - d0) / span
        return r0 + t * (r1 - r0)

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> list[float]:
        return nice_ticks(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class Scales:
    x: LinearScale
    y: LinearScale

    def position(self, record: Record) -> tuple[float, float]:
        return self.x(record.cylinders), self.y(record.highway_mpg)


def build_scales(records: Sequence[Record], plot_width: float, plot_height: float) -> Scales:
    """Shared cylinders/highway scales over the full dataset.

    Built once per session; every scene positions its marks through the same
    instance so that a record sits at the same pixel in every scene.
    """
    x_domain = extent(r.cylinders for r in records)
    y_domain = extent(r.highway_mpg for r in records)
    return Scales(
        x=LinearScale(domain=x_domain, range=(0.0, float(plot_width))),
        y=LinearScale(domain=y_domain, range=(float(plot_height), 0.0)),
    )
