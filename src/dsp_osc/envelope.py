"""Peak levels, normalisation and amplitude envelopes on in-memory buffers."""

from __future__ import annotations

import math

import numpy as np

from dsp_osc.breakpoints import BreakpointCursor, BreakpointSet
from dsp_osc.models import Breakpoint

DEFAULT_WINDOW_MS = 15.0


def sample_peak(buf: np.ndarray) -> float:
    """Return the largest absolute sample value (0.0 for an empty buffer)."""
    if buf.size == 0:
        return 0.0
    return float(np.max(np.abs(buf)))


def amp_to_db(amp: float) -> float:
    return 20.0 * math.log10(amp)


def db_to_amp(db: float) -> float:
    return 10.0 ** (db / 20.0)


def normalize(buf: np.ndarray, db: float = 0.0) -> np.ndarray:
    """Scale a buffer so that its peak sits at ``db`` dBFS.

    Raises ValueError for a positive target or a silent buffer.
    """
    if db > 0.0:
        raise ValueError(f"dB must not be positive (was {db})")
    peak = sample_peak(buf)
    if peak == 0.0:
        raise ValueError("Cannot normalize a silent buffer")
    return buf * (db_to_amp(db) / peak)


def extract_envelope(
    samples: np.ndarray, sample_rate: float, window_ms: float = DEFAULT_WINDOW_MS
) -> BreakpointSet:
    """Reduce a signal to one (time, peak) breakpoint per analysis window."""
    if window_ms <= 0.0:
        raise ValueError(f"Window duration must be positive (was {window_ms})")
    window_s = window_ms / 1000.0
    window_size = max(1, int(window_s * sample_rate))

    points: list[Breakpoint] = []
    for n, start in enumerate(range(0, len(samples), window_size)):
        block = samples[start : start + window_size]
        points.append(Breakpoint(time=n * window_s, value=sample_peak(block)))
    return BreakpointSet(points)


def apply_envelope(
    samples: np.ndarray, points: BreakpointSet, sample_rate: float
) -> np.ndarray:
    """Multiply each sample by the envelope value at its time."""
    cursor = BreakpointCursor(points)
    incr = 1.0 / sample_rate
    out = np.empty(len(samples), dtype=np.float64)
    for i, x in enumerate(samples):
        out[i] = x * cursor.value_at(i * incr)
    return out
