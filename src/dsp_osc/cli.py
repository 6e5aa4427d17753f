"""Command-line interface for dsp-osc."""

from __future__ import annotations

import argparse
import json
import struct
import sys
from pathlib import Path

import numpy as np
from pydantic import ValidationError

from dsp_osc.breakpoints import (
    BreakpointSet,
    format_breakpoints,
    load_breakpoints,
    normalize_breakpoints,
)
from dsp_osc.envelope import (
    DEFAULT_WINDOW_MS,
    amp_to_db,
    apply_envelope,
    extract_envelope,
    normalize,
    sample_peak,
)
from dsp_osc.errors import BreakpointParseError, ConstructionError
from dsp_osc.models import OscBank, Patch, PhaseOsc, TableOsc
from dsp_osc.pan import constpower_pan, pan_buffer, simple_pan
from dsp_osc.render import render
from dsp_osc.tableosc import INTERP_MODES
from dsp_osc.validate import validate_patch

WAVEFORMS = ("sine", "square", "saw_down", "saw_up", "triangle", "pwm")


def _load_patch(path: str) -> Patch:
    """Load and parse a patch JSON file."""
    text = Path(path).read_text()
    data = json.loads(text)
    return Patch.model_validate(data)


# ---------------------------------------------------------------------------
# WAV I/O helpers (float32 via RIFF, no external deps beyond numpy)
# ---------------------------------------------------------------------------


def _read_wav(path: str) -> tuple[np.ndarray, int]:
    """Read a WAV file and return (frames, sample_rate).

    ``frames`` is a float32 array of shape (n_frames, n_channels). Supports
    PCM16, PCM32 (tag 1) and float32 (tag 3).
    """
    with open(path, "rb") as f:
        data = f.read()

    if len(data) < 44 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise ValueError(f"Not a valid WAV file: {path}")

    # Parse chunks
    pos = 12
    fmt_tag = 0
    n_channels = 0
    sample_rate = 0
    bits_per_sample = 0
    audio_data = b""

    while pos < len(data) - 8:
        chunk_id = data[pos : pos + 4]
        chunk_size = struct.unpack_from("<I", data, pos + 4)[0]
        chunk_data = data[pos + 8 : pos + 8 + chunk_size]

        if chunk_id == b"fmt ":
            fmt_tag = struct.unpack_from("<H", chunk_data, 0)[0]
            n_channels = struct.unpack_from("<H", chunk_data, 2)[0]
            sample_rate = struct.unpack_from("<I", chunk_data, 4)[0]
            bits_per_sample = struct.unpack_from("<H", chunk_data, 14)[0]
        elif chunk_id == b"data":
            audio_data = chunk_data

        pos += 8 + chunk_size
        if chunk_size % 2 == 1:
            pos += 1  # pad byte

    if not audio_data or n_channels == 0:
        raise ValueError(f"No data chunk in WAV file: {path}")

    # Decode samples
    if fmt_tag == 1:  # PCM
        if bits_per_sample == 16:
            samples = np.frombuffer(audio_data, dtype=np.int16).astype(np.float32) / 32768.0
        elif bits_per_sample == 32:
            samples = np.frombuffer(audio_data, dtype=np.int32).astype(np.float32) / 2147483648.0
        else:
            raise ValueError(f"Unsupported PCM bit depth: {bits_per_sample}")
    elif fmt_tag == 3:  # IEEE float
        samples = np.frombuffer(audio_data, dtype=np.float32).copy()
    else:
        raise ValueError(f"Unsupported WAV format tag: {fmt_tag}")

    n_frames = len(samples) // n_channels
    return samples[: n_frames * n_channels].reshape(n_frames, n_channels), sample_rate


def _write_wav(path: str, frames: np.ndarray, sample_rate: int) -> None:
    """Write a float32 WAV file from an array of shape (n_frames, n_channels)."""
    samples = np.asarray(frames, dtype=np.float32)
    if samples.ndim == 1:
        samples = samples.reshape(-1, 1)
    raw = samples.tobytes()  # C order interleaves channels
    n_channels = samples.shape[1]
    bits_per_sample = 32
    byte_rate = sample_rate * n_channels * bits_per_sample // 8
    block_align = n_channels * bits_per_sample // 8

    with open(path, "wb") as f:
        # RIFF header
        data_size = len(raw)
        file_size = 36 + data_size
        f.write(b"RIFF")
        f.write(struct.pack("<I", file_size))
        f.write(b"WAVE")
        # fmt chunk
        f.write(b"fmt ")
        f.write(struct.pack("<I", 16))  # chunk size
        f.write(struct.pack("<H", 3))  # IEEE float
        f.write(struct.pack("<H", n_channels))
        f.write(struct.pack("<I", sample_rate))
        f.write(struct.pack("<I", byte_rate))
        f.write(struct.pack("<H", block_align))
        f.write(struct.pack("<H", bits_per_sample))
        # data chunk
        f.write(b"data")
        f.write(struct.pack("<I", data_size))
        f.write(raw)


def _report_patch_errors(patch: Patch, base_dir: Path) -> bool:
    errors = validate_patch(patch, base_dir)
    for err in errors:
        print(f"error: {err}", file=sys.stderr)
    return bool(errors)


def _write_result(path: str, frames: np.ndarray, sample_rate: float) -> None:
    _write_wav(path, frames, int(sample_rate))
    print(f"wrote {path} ({len(frames)} frames, {int(sample_rate)} Hz)")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_render(args: argparse.Namespace) -> int:
    patch = _load_patch(args.file)
    base_dir = Path(args.file).parent
    if _report_patch_errors(patch, base_dir):
        return 1
    result = render(patch, n_samples=args.samples, base_dir=base_dir)
    _write_result(args.output, result.samples, result.sample_rate)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    patch = _load_patch(args.file)
    if _report_patch_errors(patch, Path(args.file).parent):
        return 1
    print("valid")
    return 0


def _cmd_tone(args: argparse.Namespace) -> int:
    if args.dur <= 0.0:
        print(f"error: duration must be positive (was {args.dur})", file=sys.stderr)
        return 1
    if args.sample_rate <= 0:
        print(f"error: sample rate must be positive (was {args.sample_rate})", file=sys.stderr)
        return 1

    # --amp is either a number or the path of an amplitude breakpoint file
    try:
        amplitude: float | str = float(args.amp)
    except ValueError:
        amplitude = str(Path(args.amp).resolve())

    if args.engine == "table":
        generator: PhaseOsc | TableOsc | OscBank = TableOsc(
            waveform=args.waveform, harmonics=args.harmonics, interp=args.interp
        )
    elif args.engine == "bank":
        generator = OscBank(waveform=args.waveform, partials=args.harmonics)
    else:
        generator = PhaseOsc(waveform=args.waveform, pulse_width=args.pulse_width)

    patch = Patch(
        name=Path(args.output).stem,
        sample_rate=args.sample_rate,
        duration=args.dur,
        frequency=args.freq,
        amplitude=amplitude,
        generator=generator,
    )
    if _report_patch_errors(patch, Path(".")):
        return 1
    result = render(patch)
    _write_result(args.output, result.samples, result.sample_rate)
    return 0


def _cmd_envx(args: argparse.Namespace) -> int:
    frames, sr = _read_wav(args.file)
    if frames.shape[1] != 1:
        print(f"error: {args.file}: envelope extraction needs a mono file", file=sys.stderr)
        return 1
    points = extract_envelope(frames[:, 0], sr, window_ms=args.window)
    text = format_breakpoints(points)
    if args.output:
        Path(args.output).write_text(text)
        print(f"wrote {args.output} ({len(points)} breakpoints)")
    else:
        sys.stdout.write(text)
    return 0


def _cmd_normalize(args: argparse.Namespace) -> int:
    frames, sr = _read_wav(args.file)
    peak = sample_peak(frames)
    if peak == 0.0:
        print(f"error: {args.file} is silent", file=sys.stderr)
        return 1
    print(f"info: peak of input at {amp_to_db(peak):.2f}dB, normalizing to {args.db:.2f}dB")
    _write_result(args.output, normalize(frames, args.db), sr)
    return 0


def _check_points(points: BreakpointSet, path: str, lo: float, hi: float) -> bool:
    """Print an error and return False unless a control file is usable."""
    if len(points) < 2:
        print(f"error: {path}: minimum of 2 breakpoints required", file=sys.stderr)
        return False
    if not points.in_range(lo, hi):
        print(f"error: {path}: breakpoint values out of range [{lo:g}, {hi:g}]", file=sys.stderr)
        return False
    return True


def _cmd_envelope(args: argparse.Namespace) -> int:
    frames, sr = _read_wav(args.file)
    points = load_breakpoints(args.brkfile)
    if args.normalize and len(points) >= 2:
        points = normalize_breakpoints(points)
    if not _check_points(points, args.brkfile, 0.0, 1.0):
        return 1
    channels = [apply_envelope(frames[:, c], points, sr) for c in range(frames.shape[1])]
    _write_result(args.output, np.column_stack(channels), sr)
    return 0


def _cmd_pan(args: argparse.Namespace) -> int:
    frames, sr = _read_wav(args.file)
    if frames.shape[1] != 1:
        print(f"error: {args.file}: panning needs a mono file", file=sys.stderr)
        return 1
    points = load_breakpoints(args.brkfile)
    if not _check_points(points, args.brkfile, -1.0, 1.0):
        return 1
    law = simple_pan if args.simple else constpower_pan
    _write_result(args.output, pan_buffer(frames[:, 0], points, sr, law), sr)
    return 0


def _cmd_brkinfo(args: argparse.Namespace) -> int:
    points = load_breakpoints(args.file)
    lo, hi = points.minmax()
    print(f"{len(points)} breakpoints, duration {points.duration:g}s, values [{lo:g}, {hi:g}]")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the dsp-osc CLI."""
    parser = argparse.ArgumentParser(
        prog="dsp-osc",
        description="Render oscillators, wavetables and breakpoint envelopes to WAV.",
    )
    sub = parser.add_subparsers(dest="command")

    # render
    p_render = sub.add_parser("render", help="Render a patch JSON file to WAV")
    p_render.add_argument("file", help="Patch JSON file")
    p_render.add_argument("-o", "--output", default="out.wav", help="Output WAV file")
    p_render.add_argument("-n", "--samples", type=int, help="Number of frames (default: duration)")

    # validate
    p_validate = sub.add_parser("validate", help="Validate a patch and its breakpoint files")
    p_validate.add_argument("file", help="Patch JSON file")

    # tone
    p_tone = sub.add_parser("tone", help="Generate a simple tone")
    p_tone.add_argument("output", help="Output WAV file")
    p_tone.add_argument("-w", "--waveform", choices=WAVEFORMS, default="sine")
    p_tone.add_argument("-f", "--freq", type=float, default=440.0, help="Frequency in Hz")
    p_tone.add_argument("-d", "--dur", type=float, default=1.0, help="Duration in seconds")
    p_tone.add_argument(
        "-a", "--amp", default="1.0", metavar="AMP|FILE", help="Amplitude or breakpoint file"
    )
    p_tone.add_argument("--sample-rate", type=float, default=44100.0)
    p_tone.add_argument("--engine", choices=("phase", "table", "bank"), default="phase")
    p_tone.add_argument(
        "--harmonics", type=int, default=8, help="Harmonics (table) or partials (bank)"
    )
    p_tone.add_argument("--interp", choices=INTERP_MODES, default="linear")
    p_tone.add_argument("--pulse-width", type=float, default=0.5, help="Duty cycle for pwm")

    # envx
    p_envx = sub.add_parser("envx", help="Extract an amplitude envelope as breakpoints")
    p_envx.add_argument("file", help="Mono WAV file")
    p_envx.add_argument("-o", "--output", help="Breakpoint file (default: stdout)")
    p_envx.add_argument(
        "-w", "--window", type=float, default=DEFAULT_WINDOW_MS, help="Window size in ms"
    )

    # normalize
    p_norm = sub.add_parser("normalize", help="Normalize a WAV file to a peak level")
    p_norm.add_argument("file", help="Input WAV file")
    p_norm.add_argument("output", help="Output WAV file")
    p_norm.add_argument("--db", type=float, default=0.0, help="Target peak in dBFS (<= 0)")

    # envelope
    p_env = sub.add_parser("envelope", help="Apply a breakpoint amplitude envelope to a WAV file")
    p_env.add_argument("file", help="Input WAV file")
    p_env.add_argument("brkfile", help="Breakpoint file with values in [0, 1]")
    p_env.add_argument("output", help="Output WAV file")
    p_env.add_argument(
        "-n", "--normalize", action="store_true", help="Scale breakpoint values to a peak of 1.0"
    )

    # pan
    p_pan = sub.add_parser("pan", help="Pan a mono WAV file to stereo from a breakpoint file")
    p_pan.add_argument("file", help="Mono WAV file")
    p_pan.add_argument("brkfile", help="Breakpoint file with positions in [-1, 1]")
    p_pan.add_argument("output", help="Output WAV file")
    p_pan.add_argument("--simple", action="store_true", help="Linear instead of constant-power")

    # brkinfo
    p_brk = sub.add_parser("brkinfo", help="Parse a breakpoint file and summarize it")
    p_brk.add_argument("file", help="Breakpoint file")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    try:
        if args.command == "render":
            return _cmd_render(args)
        elif args.command == "validate":
            return _cmd_validate(args)
        elif args.command == "tone":
            return _cmd_tone(args)
        elif args.command == "envx":
            return _cmd_envx(args)
        elif args.command == "normalize":
            return _cmd_normalize(args)
        elif args.command == "envelope":
            return _cmd_envelope(args)
        elif args.command == "pan":
            return _cmd_pan(args)
        elif args.command == "brkinfo":
            return _cmd_brkinfo(args)
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"error: invalid JSON: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"error: invalid patch: {e}", file=sys.stderr)
        return 1
    except (BreakpointParseError, ConstructionError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0  # pragma: no cover


if __name__ == "__main__":
    sys.exit(main())
