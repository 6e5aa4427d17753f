"""Additive synthesis with a bank of sine oscillators, one per partial."""

from __future__ import annotations

from dsp_osc.errors import ConstructionError
from dsp_osc.oscillator import PhaseOscillator
from dsp_osc.wavetable import harmonic_weights


class OscillatorBank:
    """Sums ``partials`` live sine oscillators to approximate a waveform.

    Relative amplitudes follow the waveform's Fourier series and are
    rescaled to sum to 1.0, so the output never exceeds unit peak. A
    negative series (``saw_up``) is expressed as ``polarity = -1``.

    A sine has a single partial, so a ``"sine"`` bank always holds one
    oscillator whatever ``partials`` asks for.
    """

    def __init__(self, waveform: str, sample_rate: float, partials: int) -> None:
        if partials < 1:
            raise ConstructionError(
                "partials", f"Number of oscillators must be positive (was {partials})"
            )
        series = harmonic_weights(waveform, partials)
        total = sum(p.amplitude for p in series)

        self.waveform = waveform
        self.sample_rate = float(sample_rate)
        self.polarity = -1.0 if total < 0.0 else 1.0
        self.amplitudes: list[float] = [p.amplitude / total for p in series]
        self.frequencies: list[float] = [float(p.number) for p in series]
        self.oscillators: list[PhaseOscillator] = [
            PhaseOscillator(sample_rate, "sine", phase=p.phase) for p in series
        ]

    def __len__(self) -> int:
        return len(self.oscillators)

    def tick(self, frequency: float) -> float:
        value = 0.0
        for amp, ratio, osc in zip(self.amplitudes, self.frequencies, self.oscillators):
            value += amp * osc.tick(frequency * ratio)
        return self.polarity * value
