from __future__ import annotations

from pathlib import Path

from dsp_osc.breakpoints import BreakpointSet, load_breakpoints
from dsp_osc.errors import BreakpointParseError
from dsp_osc.models import Control, Patch, PhaseOsc, TableOsc

# (lo, hi, lo inclusive, hi inclusive) per control; hi=None means unbounded above
_CONTROL_BOUNDS: dict[str, tuple[float, float | None, bool, bool]] = {
    "frequency": (0.0, None, False, False),
    "amplitude": (0.0, 1.0, True, True),
    "pan": (-1.0, 1.0, True, True),
    "pulse_width": (0.0, 1.0, False, False),
}


class PatchValidationError(str):
    """A structured validation error that behaves as a plain string.

    Subclasses ``str`` so call sites can compare, join and print errors
    directly while still reading ``kind`` and ``control``.
    """

    kind: str
    control: str | None
    line: int | None

    def __new__(
        cls,
        kind: str,
        message: str,
        *,
        control: str | None = None,
        line: int | None = None,
    ) -> PatchValidationError:
        return super().__new__(cls, message)

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        control: str | None = None,
        line: int | None = None,
    ) -> None:
        self.kind = kind
        self.control = control
        self.line = line


def patch_controls(patch: Patch) -> dict[str, Control]:
    """Return the patch's control inputs by name (unused ones omitted)."""
    controls: dict[str, Control] = {
        "frequency": patch.frequency,
        "amplitude": patch.amplitude,
    }
    if patch.pan is not None:
        controls["pan"] = patch.pan
    if isinstance(patch.generator, PhaseOsc) and patch.generator.waveform == "pwm":
        controls["pulse_width"] = patch.generator.pulse_width
    return controls


def _in_bounds(value: float, name: str) -> bool:
    lo, hi, lo_inclusive, hi_inclusive = _CONTROL_BOUNDS[name]
    above = value >= lo if lo_inclusive else value > lo
    if hi is None:
        return above
    below = value <= hi if hi_inclusive else value < hi
    return above and below


def _describe_bounds(name: str) -> str:
    lo, hi, lo_inclusive, hi_inclusive = _CONTROL_BOUNDS[name]
    left = "[" if lo_inclusive else "("
    if hi is None:
        right = "inf)"
    else:
        right = f"{hi}]" if hi_inclusive else f"{hi})"
    return f"{left}{lo}, {right}"


def validate_patch(patch: Patch, base_dir: str | Path = ".") -> list[PatchValidationError]:
    """Validate a patch and its breakpoint files; return errors (empty = valid)."""
    errors: list[PatchValidationError] = []

    for name, control in patch_controls(patch).items():
        if isinstance(control, str):
            path = Path(base_dir) / control
            try:
                points: BreakpointSet = load_breakpoints(path)
            except FileNotFoundError:
                errors.append(
                    PatchValidationError(
                        "missing_file", f"{name}: unable to read {path}", control=name
                    )
                )
                continue
            except BreakpointParseError as e:
                errors.append(
                    PatchValidationError(
                        "parse_error", f"{name}: {path}: {e}", control=name, line=e.line
                    )
                )
                continue
            if len(points) < 2:
                errors.append(
                    PatchValidationError(
                        "too_few_points",
                        f"{name}: too few breakpoints in {path}, minimum 2 required",
                        control=name,
                    )
                )
            lo, hi = points.minmax()
            if not (_in_bounds(lo, name) and _in_bounds(hi, name)):
                errors.append(
                    PatchValidationError(
                        "out_of_range",
                        f"{name}: values out of range {_describe_bounds(name)} in {path}",
                        control=name,
                    )
                )
        elif not _in_bounds(control, name):
            errors.append(
                PatchValidationError(
                    "out_of_range",
                    f"{name}: {control} out of range {_describe_bounds(name)}",
                    control=name,
                )
            )

    gen = patch.generator
    if isinstance(gen, TableOsc) and gen.waveform != "sine" and gen.harmonics >= gen.length / 2:
        errors.append(
            PatchValidationError(
                "harmonics",
                f"Harmonic count ({gen.harmonics}) must be less than half "
                f"of the table length ({gen.length})",
            )
        )

    return errors
