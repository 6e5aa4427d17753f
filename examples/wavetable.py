"""Band-limited square from a 1024-sample wavetable with cubic interpolation."""

from dsp_osc import Patch, TableOsc, render, validate_patch

patch = Patch(
    name="wavetable",
    sample_rate=44100.0,
    duration=0.5,
    frequency=220.0,
    amplitude=0.8,
    generator=TableOsc(waveform="square", length=1024, harmonics=24, interp="cubic"),
)

if __name__ == "__main__":
    errors = validate_patch(patch)
    if errors:
        print("Validation errors:")
        for e in errors:
            print(f"  - {e}")
    else:
        print("Patch is valid.")
    print()
    print(patch.model_dump_json(indent=2))
    result = render(patch)
    peak = abs(result.samples).max()
    print(f"\nRendered {len(result.samples)} frames, peak {peak:.4f}")
