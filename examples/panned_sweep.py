"""Pulse-width sweep moving from hard left to hard right."""

from pathlib import Path

from dsp_osc import BreakpointSet, Patch, PhaseOsc, format_breakpoints, render

curves = {
    "sweep.brk": BreakpointSet([(0.0, 200.0), (2.0, 800.0)]),
    "pan.brk": BreakpointSet([(0.0, -1.0), (2.0, 1.0)]),
    "width.brk": BreakpointSet([(0.0, 0.1), (1.0, 0.5), (2.0, 0.9)]),
}

patch = Patch(
    name="panned_sweep",
    duration=2.0,
    frequency="sweep.brk",
    amplitude=0.5,
    pan="pan.brk",
    generator=PhaseOsc(waveform="pwm", pulse_width="width.brk"),
)

if __name__ == "__main__":
    build = Path("build")
    build.mkdir(exist_ok=True)
    for name, points in curves.items():
        (build / name).write_text(format_breakpoints(points))
    result = render(patch, base_dir=build)
    left, right = result.samples[:, 0], result.samples[:, 1]
    n = len(result.samples)
    print(f"Rendered {n} stereo frames")
    print(f"first 100ms: left {abs(left[:4410]).max():.3f} right {abs(right[:4410]).max():.3f}")
    print(f"last 100ms:  left {abs(left[-4410:]).max():.3f} right {abs(right[-4410:]).max():.3f}")
