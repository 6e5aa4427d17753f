"""Breakpoint envelopes, oscillators and wavetable synthesis."""

from dsp_osc.bank import OscillatorBank
from dsp_osc.breakpoints import (
    BreakpointCursor,
    BreakpointSet,
    BreakpointStream,
    format_breakpoints,
    load_breakpoints,
    normalize_breakpoints,
    parse_breakpoints,
)
from dsp_osc.envelope import (
    amp_to_db,
    apply_envelope,
    db_to_amp,
    extract_envelope,
    normalize,
    sample_peak,
)
from dsp_osc.errors import BreakpointParseError, ConstructionError
from dsp_osc.models import (
    Breakpoint,
    Control,
    Generator,
    OscBank,
    Patch,
    PhaseOsc,
    TableOsc,
)
from dsp_osc.oscillator import PhaseOscillator
from dsp_osc.pan import PanPosition, constpower_pan, pan_buffer, simple_pan
from dsp_osc.render import RenderResult, render
from dsp_osc.tableosc import TableOscillator
from dsp_osc.validate import PatchValidationError, validate_patch
from dsp_osc.wavetable import Partial, Wavetable, build_wavetable, harmonic_weights

__all__ = [
    "Breakpoint",
    "BreakpointCursor",
    "BreakpointParseError",
    "BreakpointSet",
    "BreakpointStream",
    "ConstructionError",
    "Control",
    "Generator",
    "OscBank",
    "OscillatorBank",
    "PanPosition",
    "Partial",
    "Patch",
    "PatchValidationError",
    "PhaseOsc",
    "PhaseOscillator",
    "RenderResult",
    "TableOsc",
    "TableOscillator",
    "Wavetable",
    "amp_to_db",
    "apply_envelope",
    "build_wavetable",
    "constpower_pan",
    "db_to_amp",
    "extract_envelope",
    "format_breakpoints",
    "harmonic_weights",
    "load_breakpoints",
    "normalize",
    "normalize_breakpoints",
    "pan_buffer",
    "parse_breakpoints",
    "render",
    "sample_peak",
    "simple_pan",
    "validate_patch",
]
