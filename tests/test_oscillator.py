"""Tests for analytic phase-accumulator oscillators."""

from __future__ import annotations

import math

import pytest

from dsp_osc import ConstructionError, PhaseOscillator
from dsp_osc.oscillator import TWO_PI, WAVE_FUNCS, wrap_phase


def _ticks(osc: PhaseOscillator, freq: float, n: int, width: float = 0.5) -> list[float]:
    return [osc.tick(freq, width) for _ in range(n)]


class TestWaveforms:
    def test_sine(self) -> None:
        osc = PhaseOscillator(4, "sine")
        values = _ticks(osc, 1.0, 4)
        expected = [math.sin(0), math.sin(math.pi / 2), math.sin(math.pi), math.sin(1.5 * math.pi)]
        assert values == pytest.approx(expected, abs=1e-12)
        assert values == pytest.approx([0.0, 1.0, 0.0, -1.0], abs=1e-12)

    def test_square(self) -> None:
        osc = PhaseOscillator(7, "square")
        assert _ticks(osc, 1.0, 7) == [1.0, 1.0, 1.0, 1.0, -1.0, -1.0, -1.0]

    def test_saw_up(self) -> None:
        osc = PhaseOscillator(4, "saw_up")
        assert _ticks(osc, 1.0, 4) == pytest.approx([-1.0, -0.5, 0.0, 0.5])

    def test_saw_down(self) -> None:
        osc = PhaseOscillator(4, "saw_down")
        assert _ticks(osc, 1.0, 4) == pytest.approx([1.0, 0.5, 0.0, -0.5])

    def test_triangle(self) -> None:
        osc = PhaseOscillator(4, "triangle")
        assert _ticks(osc, 1.0, 4) == pytest.approx([1.0, 0.0, -1.0, 0.0], abs=1e-12)

    def test_pwm_quarter_width(self) -> None:
        osc = PhaseOscillator(10, "pwm")
        assert _ticks(osc, 1.0, 10, width=0.25) == [1.0] * 3 + [-1.0] * 7

    def test_pwm_width_is_a_live_input(self) -> None:
        osc = PhaseOscillator(10, "pwm")
        osc.tick(1.0, 0.25)
        osc.tick(1.0, 0.25)
        osc.tick(1.0, 0.25)
        # phase is now 0.3 of a cycle
        assert osc.tick(1.0, 0.25) == -1.0
        assert osc.tick(1.0, 0.75) == 1.0

    def test_square_ignores_width(self) -> None:
        osc = PhaseOscillator(10, "square")
        assert _ticks(osc, 1.0, 3, width=0.01) == [1.0, 1.0, 1.0]

    def test_waveform_table_complete(self) -> None:
        assert set(WAVE_FUNCS) == {"sine", "square", "saw_down", "saw_up", "triangle", "pwm"}

    @pytest.mark.parametrize("waveform", sorted(WAVE_FUNCS))
    def test_bounded(self, waveform: str) -> None:
        osc = PhaseOscillator(1000, waveform)
        values = _ticks(osc, 13.0, 1000)
        assert max(values) <= 1.0 + 1e-12
        assert min(values) >= -1.0 - 1e-12


class TestPhase:
    @pytest.mark.parametrize("waveform", ["sine", "triangle", "saw_up", "saw_down"])
    def test_exact_period(self, waveform: str) -> None:
        sr, freq = 100.0, 5.0
        period = int(sr / freq)
        values = _ticks(PhaseOscillator(sr, waveform), freq, 3 * period)
        for i in range(1, period):
            assert values[i + period] == pytest.approx(values[i], abs=1e-9)
            assert values[i + 2 * period] == pytest.approx(values[i], abs=1e-9)

    def test_square_period(self) -> None:
        values = _ticks(PhaseOscillator(7, "square"), 1.0, 21)
        assert values[1:7] == values[8:14] == values[15:21]

    def test_initial_phase(self) -> None:
        osc = PhaseOscillator(4, "sine", phase=0.25)
        assert osc.tick(1.0) == pytest.approx(1.0)

    def test_initial_phase_wraps(self) -> None:
        osc = PhaseOscillator(4, "sine", phase=1.25)
        assert osc.phase == pytest.approx(0.5 * math.pi)

    def test_increment_cached(self) -> None:
        osc = PhaseOscillator(1000, "sine")
        osc.tick(50.0)
        assert osc.last_frequency == 50.0
        assert osc.phase_increment == pytest.approx(TWO_PI * 50.0 / 1000)
        osc.tick(100.0)
        assert osc.phase_increment == pytest.approx(TWO_PI * 100.0 / 1000)

    def test_negative_frequency(self) -> None:
        osc = PhaseOscillator(4, "saw_up")
        values = _ticks(osc, -1.0, 4)
        assert values == pytest.approx([-1.0, 0.5, 0.0, -0.5])
        assert 0.0 <= osc.phase < TWO_PI

    def test_tiny_negative_frequency(self) -> None:
        osc = PhaseOscillator(44100, "square")
        assert osc.tick(-1e-15) == 1.0
        assert osc.tick(-1e-15) == 1.0
        assert 0.0 <= osc.phase < TWO_PI

    def test_phase_stays_in_range(self) -> None:
        osc = PhaseOscillator(100, "sine")
        for _ in range(50):
            osc.tick(230.0)  # above Nyquist, several cycles per sample
            assert 0.0 <= osc.phase < TWO_PI

    def test_oscillators_are_independent(self) -> None:
        a = PhaseOscillator(4, "sine")
        b = PhaseOscillator(4, "sine")
        a.tick(1.0)
        assert b.tick(1.0) == pytest.approx(0.0)
        assert a.tick(1.0) == pytest.approx(1.0)


class TestWrap:
    def test_wrap_above(self) -> None:
        assert wrap_phase(7.5, 2.0) == pytest.approx(1.5)

    def test_wrap_below(self) -> None:
        assert wrap_phase(-0.5, 2.0) == pytest.approx(1.5)

    def test_wrap_in_range(self) -> None:
        assert wrap_phase(1.0, 2.0) == 1.0

    def test_wrap_never_reaches_cycle(self) -> None:
        assert wrap_phase(-1e-18, 2.0) == 0.0
        assert wrap_phase(-1e-18, TWO_PI) == 0.0


class TestErrors:
    @pytest.mark.parametrize("sr", [0, -1])
    def test_bad_sample_rate(self, sr: float) -> None:
        with pytest.raises(ConstructionError) as exc:
            PhaseOscillator(sr)
        assert exc.value.kind == "sample_rate"

    def test_unknown_waveform(self) -> None:
        with pytest.raises(ConstructionError, match="Unknown waveform") as exc:
            PhaseOscillator(44100, "noise")
        assert exc.value.kind == "waveform"
