"""Guarded single-cycle wavetables built directly or by additive synthesis."""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np

from dsp_osc.errors import ConstructionError

GUARD_SAMPLES = 2
FOURIER_WAVEFORMS = frozenset({"square", "triangle", "saw_down", "saw_up"})


class Partial(NamedTuple):
    number: int  # harmonic number, 1 = fundamental
    amplitude: float  # signed raw weight from the Fourier series
    phase: float  # offset as a fraction of the partial's cycle


def harmonic_weights(waveform: str, count: int) -> list[Partial]:
    """Return the first ``count`` partials of a waveform's Fourier series.

    Square and triangle use odd harmonics only (``1/n`` and ``1/n**2``),
    saws use every harmonic at ``1/n``. The triangle series is cosine phase
    (a quarter-cycle offset on each sine partial); ``saw_up`` is ``saw_down``
    with every weight negated.
    """
    if count < 1:
        raise ConstructionError("partials", f"Partial count must be at least 1 (was {count})")

    if waveform == "sine":
        return [Partial(1, 1.0, 0.0)]
    if waveform == "square":
        return [Partial(n, 1.0 / n, 0.0) for n in range(1, 2 * count, 2)]
    if waveform == "triangle":
        return [Partial(n, 1.0 / (n * n), 0.25) for n in range(1, 2 * count, 2)]
    if waveform in ("saw_down", "saw_up"):
        sign = -1.0 if waveform == "saw_up" else 1.0
        return [Partial(n, sign / n, 0.0) for n in range(1, count + 1)]
    raise ConstructionError("waveform", f"No harmonic series for waveform '{waveform}'")


class Wavetable:
    """A read-only single-cycle table with guard samples for interpolation.

    ``samples`` holds ``length + 2`` values; the two trailing guard samples
    repeat samples 0 and 1 so that linear and cubic lookups never wrap an
    index. One table may be shared by any number of oscillators.
    """

    __slots__ = ("samples", "length")

    def __init__(self, samples: np.ndarray, length: int) -> None:
        if length < 1 or len(samples) != length + GUARD_SAMPLES:
            raise ConstructionError(
                "table",
                f"Table of {len(samples)} samples does not match length {length} "
                f"plus {GUARD_SAMPLES} guard samples",
            )
        arr = np.array(samples, dtype=np.float64)
        arr.setflags(write=False)
        self.samples = arr
        self.length = length

    @classmethod
    def from_cycle(cls, cycle: np.ndarray | list[float]) -> Wavetable:
        """Build a table from one cycle of samples, appending the guard samples."""
        arr = np.asarray(cycle, dtype=np.float64)
        if arr.ndim != 1 or arr.size == 0:
            raise ConstructionError("length", "Wavetable cycle must be a non-empty 1-D sequence")
        return cls(_with_guards(arr), arr.size)

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"Wavetable(length={self.length})"

    @property
    def peak(self) -> float:
        return float(np.max(np.abs(self.samples[: self.length])))


def _with_guards(cycle: np.ndarray) -> np.ndarray:
    return np.concatenate([cycle, np.resize(cycle, GUARD_SAMPLES)])


def normalize_cycle(cycle: np.ndarray) -> np.ndarray:
    """Scale a cycle so its absolute peak is exactly 1.0."""
    peak = float(np.max(np.abs(cycle)))
    if peak == 0.0:
        return cycle.copy()
    return cycle / peak


def fourier_cycle(partials: list[Partial], length: int) -> np.ndarray:
    """Sum sine partials over one cycle of ``length`` samples (not normalised)."""
    step = 2.0 * math.pi / length
    j = np.arange(length, dtype=np.float64)
    cycle = np.zeros(length, dtype=np.float64)
    for p in partials:
        cycle += p.amplitude * np.sin(j * step * p.number + 2.0 * math.pi * p.phase)
    return cycle


def build_wavetable(waveform: str, length: int = 1024, harmonics: int = 1) -> Wavetable:
    """Build a guarded wavetable for a named waveform.

    ``sine`` is sampled directly and ignores ``harmonics``. Other waveforms
    are summed from ``harmonics`` partials, peak-normalised over the cycle,
    and only then given their guard samples.
    """
    if length < 1:
        raise ConstructionError("length", f"Table length must be positive (was {length})")

    if waveform == "sine":
        step = 2.0 * math.pi / length
        cycle = np.sin(np.arange(length, dtype=np.float64) * step)
        return Wavetable(_with_guards(cycle), length)

    if waveform not in FOURIER_WAVEFORMS:
        raise ConstructionError("waveform", f"Unknown wavetable waveform: '{waveform}'")
    if harmonics < 1 or harmonics >= length / 2:
        raise ConstructionError(
            "harmonics",
            f"Harmonic count ({harmonics}) must be at least 1 and less than half "
            f"of the table length ({length})",
        )

    cycle = fourier_cycle(harmonic_weights(waveform, harmonics), length)
    return Wavetable(_with_guards(normalize_cycle(cycle)), length)
