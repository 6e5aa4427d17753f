from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

# Type alias for control inputs: a literal value or the path of a breakpoint file.
Control = Union[float, str]

Waveform = Literal["sine", "square", "saw_down", "saw_up", "triangle", "pwm"]
TableWaveform = Literal["sine", "square", "saw_down", "saw_up", "triangle"]
BankWaveform = Literal["sine", "square", "saw_down", "saw_up", "triangle"]
Interp = Literal["none", "linear", "cubic"]


# ---------------------------------------------------------------------------
# Breakpoints
# ---------------------------------------------------------------------------


class Breakpoint(BaseModel):
    time: float
    value: float


# ---------------------------------------------------------------------------
# Generators (discriminated union on "kind")
# ---------------------------------------------------------------------------


class PhaseOsc(BaseModel):
    kind: Literal["phase"] = "phase"
    waveform: Waveform = "sine"
    phase: float = 0.0
    pulse_width: Control = 0.5  # only read by the "pwm" waveform


class TableOsc(BaseModel):
    kind: Literal["table"] = "table"
    waveform: TableWaveform = "sine"
    length: int = Field(default=1024, ge=1)
    harmonics: int = Field(default=1, ge=1)
    interp: Interp = "linear"
    phase: float = 0.0


class OscBank(BaseModel):
    kind: Literal["bank"] = "bank"
    waveform: BankWaveform = "square"
    partials: int = Field(default=8, ge=1)


Generator = Annotated[
    Union[PhaseOsc, TableOsc, OscBank],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Top-level patch
# ---------------------------------------------------------------------------


class Patch(BaseModel):
    name: str
    sample_rate: float = Field(default=44100.0, gt=0.0)
    duration: float = Field(default=1.0, ge=0.0)
    frequency: Control = 440.0
    amplitude: Control = 1.0
    pan: Control | None = None  # None -> mono, otherwise constant-power stereo
    generator: Generator = Field(default_factory=PhaseOsc)
