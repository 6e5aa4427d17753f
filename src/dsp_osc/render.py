"""Block-at-a-time rendering of a patch into a sample buffer."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, NamedTuple, Union

import numpy as np

from dsp_osc.bank import OscillatorBank
from dsp_osc.breakpoints import BreakpointSet, BreakpointStream, load_breakpoints
from dsp_osc.models import Control, OscBank, Patch, PhaseOsc, TableOsc
from dsp_osc.oscillator import PhaseOscillator
from dsp_osc.pan import constpower_pan
from dsp_osc.tableosc import TableOscillator
from dsp_osc.validate import patch_controls
from dsp_osc.wavetable import build_wavetable

BLOCK_FRAMES = 1024


class RenderResult(NamedTuple):
    samples: np.ndarray  # float32, shape (frames, channels)
    sample_rate: float


class ConstantControl:
    """A control input that never changes."""

    def __init__(self, value: float) -> None:
        self.value = float(value)

    def tick(self) -> float:
        return self.value


ControlSource = Union[ConstantControl, BreakpointStream]


def make_control(
    control: Control | BreakpointSet, sample_rate: float, base_dir: str | Path = "."
) -> ControlSource:
    """Turn a control value, breakpoint file or breakpoint set into a tickable source."""
    if isinstance(control, BreakpointSet):
        return BreakpointStream(control, sample_rate)
    if isinstance(control, str):
        return BreakpointStream(load_breakpoints(Path(base_dir) / control), sample_rate)
    return ConstantControl(control)


def build_generator(
    patch: Patch, controls: dict[str, ControlSource]
) -> Callable[[float], float]:
    """Return a ``tick(frequency)`` function for the patch's generator."""
    gen = patch.generator
    sr = patch.sample_rate

    if isinstance(gen, PhaseOsc):
        osc = PhaseOscillator(sr, gen.waveform, phase=gen.phase)
        if "pulse_width" in controls:
            width = controls["pulse_width"]
            return lambda freq: osc.tick(freq, width.tick())
        return osc.tick
    if isinstance(gen, TableOsc):
        table = build_wavetable(gen.waveform, gen.length, gen.harmonics)
        return TableOscillator(sr, table, gen.interp, phase=gen.phase).tick
    if isinstance(gen, OscBank):
        return OscillatorBank(gen.waveform, sr, gen.partials).tick
    raise TypeError(f"Unsupported generator: {type(gen).__name__}")  # pragma: no cover


def render(
    patch: Patch,
    n_samples: int | None = None,
    *,
    base_dir: str | Path = ".",
    controls: dict[str, BreakpointSet] | None = None,
) -> RenderResult:
    """Render a patch to a float32 buffer of shape (frames, channels).

    ``n_samples`` defaults to the patch duration in frames. ``controls``
    overrides named patch controls with in-memory breakpoint sets; only
    controls the patch already declares can be overridden, so a ``pan``
    override needs ``patch.pan`` set. Output is mono unless the patch has a
    ``pan`` control, in which case it is constant-power stereo.
    """
    sr = patch.sample_rate
    inputs: dict[str, Control | BreakpointSet] = dict(patch_controls(patch))
    for name, points in (controls or {}).items():
        if name not in inputs:
            raise KeyError(f"Unknown control: '{name}'")
        inputs[name] = points
    sources = {name: make_control(c, sr, base_dir) for name, c in inputs.items()}

    tick = build_generator(patch, sources)
    freq = sources["frequency"]
    amp = sources["amplitude"]
    pan = sources.get("pan")

    frames = n_samples if n_samples is not None else int(patch.duration * sr + 0.5)
    channels = 1 if pan is None else 2
    out = np.zeros((frames, channels), dtype=np.float32)
    block = np.empty((BLOCK_FRAMES, channels), dtype=np.float64)

    for start in range(0, frames, BLOCK_FRAMES):
        nframes = min(BLOCK_FRAMES, frames - start)
        for i in range(nframes):
            value = amp.tick() * tick(freq.tick())
            if pan is None:
                block[i, 0] = value
            else:
                gains = constpower_pan(pan.tick())
                block[i, 0] = value * gains.left
                block[i, 1] = value * gains.right
        out[start : start + nframes] = block[:nframes]

    return RenderResult(out, sr)
