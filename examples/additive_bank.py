"""Additive triangle from a bank of eight sine partials, faded in and out."""

from pathlib import Path

from dsp_osc import BreakpointSet, OscBank, Patch, format_breakpoints, render

fade = BreakpointSet([(0.0, 0.0), (0.1, 1.0), (0.9, 1.0), (1.0, 0.0)])

patch = Patch(
    name="additive_bank",
    sample_rate=44100.0,
    duration=1.0,
    frequency=110.0,
    amplitude="fade.brk",
    generator=OscBank(waveform="triangle", partials=8),
)

if __name__ == "__main__":
    build = Path("build")
    build.mkdir(exist_ok=True)
    (build / "fade.brk").write_text(format_breakpoints(fade))
    (build / "additive_bank.json").write_text(patch.model_dump_json(indent=2))
    print(f"Wrote {build / 'additive_bank.json'}")
    result = render(patch, base_dir=build)
    print(f"Rendered {len(result.samples)} frames")
    print("dsp-osc render build/additive_bank.json -o additive_bank.wav")
