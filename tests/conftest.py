from __future__ import annotations

import json
from pathlib import Path

import pytest

from dsp_osc import BreakpointSet, Patch, PhaseOsc, parse_breakpoints


@pytest.fixture
def ramp() -> BreakpointSet:
    """Unit ramp: 0.0 at t=0 rising to 1.0 at t=1."""
    return parse_breakpoints(["0 0", "1 1"])


@pytest.fixture
def tent() -> BreakpointSet:
    """Rise to 10.0 at t=1, fall back to 0.0 at t=2."""
    return BreakpointSet([(0.0, 0.0), (1.0, 10.0), (2.0, 0.0)])


@pytest.fixture
def sine_patch() -> Patch:
    """One cycle of a 1 Hz sine at 4 Hz sample rate."""
    return Patch(
        name="sine",
        sample_rate=4.0,
        duration=1.0,
        frequency=1.0,
        generator=PhaseOsc(waveform="sine"),
    )


@pytest.fixture
def amp_file(tmp_path: Path) -> Path:
    """Write an amplitude breakpoint file (fade in, fade out) and return its path."""
    p = tmp_path / "amp.brk"
    p.write_text("0 0\n0.5 1\n1 0\n")
    return p


@pytest.fixture
def patch_json(tmp_path: Path, amp_file: Path) -> Path:
    """Write a valid patch JSON that reads amp.brk and return its path."""
    data = {
        "name": "test_patch",
        "sample_rate": 8000.0,
        "duration": 0.25,
        "frequency": 440.0,
        "amplitude": amp_file.name,
        "generator": {"kind": "table", "waveform": "saw_down", "harmonics": 16},
    }
    p = tmp_path / "patch.json"
    p.write_text(json.dumps(data))
    return p
