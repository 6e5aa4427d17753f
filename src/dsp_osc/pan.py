"""Stereo panning gains for a position in [-1, 1] (hard left to hard right)."""

from __future__ import annotations

import math
from typing import Callable, NamedTuple

import numpy as np

from dsp_osc.breakpoints import BreakpointCursor, BreakpointSet

ROOT2_OVER_2 = math.sqrt(2.0) / 2.0


class PanPosition(NamedTuple):
    left: float
    right: float


def simple_pan(position: float) -> PanPosition:
    """Linear panning: gains sum to 1.0, with a -6 dB dip at the centre."""
    position *= 0.5
    return PanPosition(0.5 - position, 0.5 + position)


def constpower_pan(position: float) -> PanPosition:
    """Constant-power panning: ``left**2 + right**2 == 1`` at every position."""
    angle = position * (math.pi / 2.0) * 0.5
    return PanPosition(
        ROOT2_OVER_2 * (math.cos(angle) - math.sin(angle)),
        ROOT2_OVER_2 * (math.cos(angle) + math.sin(angle)),
    )


PanLaw = Callable[[float], PanPosition]


def pan_buffer(
    samples: np.ndarray,
    points: BreakpointSet,
    sample_rate: float,
    law: PanLaw = constpower_pan,
) -> np.ndarray:
    """Spread a mono buffer to stereo, following a breakpoint pan curve.

    Returns a float64 array of shape (frames, 2).
    """
    cursor = BreakpointCursor(points)
    incr = 1.0 / sample_rate
    out = np.empty((len(samples), 2), dtype=np.float64)
    for i, x in enumerate(samples):
        gains = law(cursor.value_at(i * incr))
        out[i, 0] = x * gains.left
        out[i, 1] = x * gains.right
    return out
