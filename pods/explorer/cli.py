"""Command line for the chord explorer.

Examples:
    python -m pods.explorer.cli identify 0 0 0 2 0 0
    python -m pods.explorer.cli suggest x 3 2 0 1 0
    python -m pods.explorer.cli progression 0 0 0 2 0 0 --seed 7
    python -m pods.explorer.cli render 0 0 0 0 0 0 --out fmaj9.wav
"""

import argparse
import logging
import random
import sys
import time
from typing import List, Optional

from fxcore.audio import AudioOutput, write_wav
from fxcore.logging import setup_logging
from fxtheory.extensions import suggest_extensions
from fxtheory.identify import identify_chord
from fxtheory.progressions import ProgressionEngine
from fxtheory.tuning import FACGCE, Fretting

from .config import Config
from .synth import KarplusStrongSynth

logger = logging.getLogger(__name__)


def _fretting(values: List[str]) -> Fretting:
    if len(values) == 1:
        return Fretting.of(values[0])
    return Fretting.of(values)


def cmd_identify(args) -> int:
    fretting = _fretting(args.frets)
    print(identify_chord(fretting))
    return 0


def cmd_suggest(args) -> int:
    fretting = _fretting(args.frets)
    chord = identify_chord(fretting)
    print(chord)
    suggestions = suggest_extensions(fretting, chord, limit=args.limit)
    if not suggestions:
        print("  (no suggestions)")
    for s in suggestions:
        print(f"  {s.description} -> {s.chord_name}  [{s.fretting}]")
    return 0


def cmd_progression(args) -> int:
    engine = ProgressionEngine(rng=random.Random(args.seed))
    progression = engine.generate(_fretting(args.frets))
    print(f"{progression.name} (key of {progression.key})")
    for step in progression.steps:
        marker = "*" if step.is_user else " "
        hints = f"  ({', '.join(step.hints)})" if step.hints else ""
        print(f" {marker} {step.degree:<5} {step.name:<12} {step.fretting}{hints}")
    return 0


def _render(args):
    synth = KarplusStrongSynth(sample_rate=Config.SAMPLE_RATE, duration=args.duration, seed=args.seed)
    return synth, synth.render_fretting(_fretting(args.frets), FACGCE, strum=Config.STRUM_SECONDS)


def cmd_render(args) -> int:
    synth, audio = _render(args)
    write_wav(args.out, audio, synth.sample_rate)
    print(f"Wrote {args.out} ({len(audio) / synth.sample_rate:.1f}s)")
    return 0


def cmd_play(args) -> int:
    synth, audio = _render(args)
    output = AudioOutput(sample_rate=synth.sample_rate)
    try:
        output.play(audio)
        # Playback is asynchronous; keep the process alive until the note ends
        time.sleep(len(audio) / synth.sample_rate)
    finally:
        output.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fx-explorer", description="FACGCE chord explorer")
    parser.add_argument("--log-level", default=None, help="Override FX_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_frets(p):
        p.add_argument("frets", nargs="+", help="Six frets low to high, x for muted (or one string like x32010 or x(10)(12)(12)(10)x)")

    p = sub.add_parser("identify", help="Name the chord")
    add_frets(p)
    p.set_defaults(func=cmd_identify)

    p = sub.add_parser("suggest", help="Suggest extensions")
    add_frets(p)
    p.add_argument("--limit", type=int, default=5)
    p.set_defaults(func=cmd_suggest)

    p = sub.add_parser("progression", help="Build a progression around the chord")
    add_frets(p)
    p.add_argument("--seed", type=int, default=None)
    p.set_defaults(func=cmd_progression)

    for name, func, help_text in (
        ("play", cmd_play, "Play the chord on the default audio device"),
        ("render", cmd_render, "Render the chord to a WAV file"),
    ):
        p = sub.add_parser(name, help=help_text)
        add_frets(p)
        p.add_argument("--duration", type=float, default=Config.NOTE_DURATION)
        p.add_argument("--seed", type=int, default=None)
        if name == "render":
            p.add_argument("--out", default="chord.wav", help="Output WAV file name")
        p.set_defaults(func=func)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    try:
        return args.func(args)
    except ValueError as exc:
        logger.error(f"Invalid input: {exc}")
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
