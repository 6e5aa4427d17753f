"""Table lookup oscillators with truncating, linear or cubic interpolation."""

from __future__ import annotations

from dsp_osc.errors import ConstructionError
from dsp_osc.oscillator import wrap_phase
from dsp_osc.wavetable import Wavetable


def lookup_truncate(table: list[float], phase: float, length: int) -> float:
    return table[int(phase)]


def lookup_linear(table: list[float], phase: float, length: int) -> float:
    i = int(phase)
    frac = phase - i
    y0 = table[i]
    return y0 + frac * (table[i + 1] - y0)


def lookup_cubic(table: list[float], phase: float, length: int) -> float:
    """4-point Hermite (Catmull-Rom) interpolation over table[i-1 .. i+2]."""
    i = int(phase)
    frac = phase - i
    ym1 = table[i - 1] if i > 0 else table[length - 1]
    y0 = table[i]
    y1 = table[i + 1]
    y2 = table[i + 2]
    c0 = y0
    c1 = 0.5 * (y1 - ym1)
    c2 = ym1 - 2.5 * y0 + 2.0 * y1 - 0.5 * y2
    c3 = 0.5 * (y2 - ym1) + 1.5 * (y0 - y1)
    return ((c3 * frac + c2) * frac + c1) * frac + c0


_LOOKUPS = {
    "none": lookup_truncate,
    "linear": lookup_linear,
    "cubic": lookup_cubic,
}
INTERP_MODES = tuple(_LOOKUPS)


class TableOscillator:
    """Phase-accumulator oscillator reading from a shared :class:`Wavetable`.

    Phase runs over ``[0, table.length)``. ``phase`` at construction is a
    fraction of a cycle.
    """

    def __init__(
        self,
        sample_rate: float,
        wavetable: Wavetable,
        interp: str = "linear",
        phase: float = 0.0,
    ) -> None:
        if sample_rate <= 0:
            raise ConstructionError(
                "sample_rate", f"Sample rate must be positive (was {sample_rate})"
            )
        if wavetable is None or wavetable.length < 1:
            raise ConstructionError("table", "Oscillator needs a non-empty wavetable")
        if interp not in _LOOKUPS:
            raise ConstructionError("interp", f"Unknown interpolation mode: '{interp}'")
        self.wavetable = wavetable
        self.interp = interp
        self._lookup = _LOOKUPS[interp]
        # Per-sample lookups read a plain list copy of the table
        self._table: list[float] = wavetable.samples.tolist()
        self.length = wavetable.length
        self.size_over_sr = self.length / float(sample_rate)
        self.sample_rate = float(sample_rate)
        self.phase = wrap_phase(self.length * phase, float(self.length))
        self.last_frequency = 0.0
        self.phase_increment = 0.0

    def tick(self, frequency: float) -> float:
        if frequency != self.last_frequency:
            self.last_frequency = frequency
            self.phase_increment = self.size_over_sr * frequency
        value = self._lookup(self._table, self.phase, self.length)
        self.phase = wrap_phase(self.phase + self.phase_increment, float(self.length))
        return value
