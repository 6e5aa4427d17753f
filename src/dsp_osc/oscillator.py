"""Phase-accumulator oscillators for analytic waveforms."""

from __future__ import annotations

import math
from typing import Callable

from dsp_osc.errors import ConstructionError

TWO_PI = 2.0 * math.pi

# A waveform function maps (phase in [0, 2pi), pulse width) to a sample value.
WaveFunc = Callable[[float, float], float]


def _sine(phase: float, width: float) -> float:
    return math.sin(phase)


def _square(phase: float, width: float) -> float:
    return 1.0 if phase <= math.pi else -1.0


def _saw_down(phase: float, width: float) -> float:
    return 1.0 - 2.0 * (phase / TWO_PI)


def _saw_up(phase: float, width: float) -> float:
    return 2.0 * (phase / TWO_PI) - 1.0


def _triangle(phase: float, width: float) -> float:
    # Rectified sawtooth
    t = abs(2.0 * (phase / TWO_PI) - 1.0)
    return 2.0 * (t - 0.5)


def _pwm(phase: float, width: float) -> float:
    return 1.0 if phase <= width * TWO_PI else -1.0


WAVE_FUNCS: dict[str, WaveFunc] = {
    "sine": _sine,
    "square": _square,
    "saw_down": _saw_down,
    "saw_up": _saw_up,
    "triangle": _triangle,
    "pwm": _pwm,
}


class PhaseOscillator:
    """Generates one sample of an analytic waveform per :meth:`tick`.

    ``phase`` is the starting phase as a fraction of a cycle, so 0.25 starts
    a sine oscillator at its positive peak.
    """

    def __init__(self, sample_rate: float, waveform: str = "sine", phase: float = 0.0) -> None:
        if sample_rate <= 0:
            raise ConstructionError(
                "sample_rate", f"Sample rate must be positive (was {sample_rate})"
            )
        try:
            self._wave = WAVE_FUNCS[waveform]
        except KeyError:
            raise ConstructionError("waveform", f"Unknown waveform: '{waveform}'") from None
        self.waveform = waveform
        self.sample_rate = float(sample_rate)
        self.two_pi_over_sr = TWO_PI / self.sample_rate
        self.phase = wrap_phase(TWO_PI * phase, TWO_PI)
        self.last_frequency = 0.0
        self.phase_increment = 0.0

    def tick(self, frequency: float, pulse_width: float = 0.5) -> float:
        if frequency != self.last_frequency:
            self.last_frequency = frequency
            self.phase_increment = self.two_pi_over_sr * frequency
        value = self._wave(self.phase, pulse_width)
        self.phase = wrap_phase(self.phase + self.phase_increment, TWO_PI)
        return value


def wrap_phase(phase: float, cycle: float) -> float:
    """Wrap a phase into [0, cycle) by repeated subtraction/addition."""
    while phase >= cycle:
        phase -= cycle
    while phase < 0.0:
        phase += cycle
    # a tiny negative phase plus cycle can round up to cycle itself
    if phase >= cycle:
        phase = 0.0
    return phase
