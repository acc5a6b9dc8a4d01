"""
Stroke Tutor - Command Line Grader

Replays recorded strokes for a character through a practice session and
prints per-stroke feedback.

Usage:
  stroke-tutor 永 --strokes strokes.json
  stroke-tutor 06f22 --strokes strokes.json --data https://example.org/kanjivg/kanji/
  stroke-tutor 十 --strokes strokes.json --source makemeahanzi --data makemeahanzi/graphics.txt

strokes.json holds a list of strokes, each a list of [x, y] pairs or
{"x": .., "y": ..} objects in the reference's coordinate space.
"""

import argparse
import json
import logging
import sys

import config
from character_data import character_from_graphics, character_from_kanjivg, load_graphics
from config import RecognizerConfig, get_config
from errors import StrokeTutorError
from practice_session import PracticeSession

logger = logging.getLogger("stroke_tutor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stroke-tutor",
        description="Grade recorded strokes against a character's reference strokes.",
    )
    parser.add_argument("char", help="Character (or 5-digit KanjiVG hex code)")
    parser.add_argument("--strokes", required=True, help="JSON file with the recorded strokes")
    parser.add_argument("--source", choices=("kanjivg", "makemeahanzi"), default="kanjivg")
    parser.add_argument("--data", default=None,
                        help="KanjiVG folder/URL or MakeMeAHanzi graphics.txt path")
    parser.add_argument("--pass-threshold", type=float, default=config.PASS_THRESHOLD)
    parser.add_argument("--start-dist-threshold", type=float, default=config.START_DIST_THRESHOLD)
    parser.add_argument("--resample-points", type=int, default=config.RESAMPLE_POINTS)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_strokes(path: str):
    with open(path, "r", encoding="utf-8") as f:
        strokes = json.load(f)
    if not isinstance(strokes, list):
        raise ValueError(f"{path}: expected a list of strokes")
    return strokes


def load_character(args):
    if args.source == "makemeahanzi":
        return character_from_graphics(args.char, load_graphics(args.data))
    return character_from_kanjivg(args.char, args.data)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, get_config("LOG_LEVEL", "WARNING")),
        format=get_config("LOG_FORMAT"),
    )

    try:
        cfg = RecognizerConfig(
            pass_threshold=args.pass_threshold,
            start_dist_threshold=args.start_dist_threshold,
            resampling_points=args.resample_points,
        )
        character = load_character(args)
        strokes = load_strokes(args.strokes)
    except (StrokeTutorError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 2

    session = PracticeSession.for_character(character, cfg)
    print(f"{config.APP_NAME}: {character.char} ({character.num_strokes} strokes)")
    print("=" * 50)

    for points in strokes:
        if session.is_complete:
            print(f"Extra stroke ignored (expected {session.num_strokes})")
            continue
        try:
            attempt = session.submit_stroke(points)
        except StrokeTutorError as e:
            logger.error("Stroke %d reference is unusable: %s", session.current_stroke_index + 1, e)
            return 2
        print(f"{session.feedback(attempt)}  [score {attempt.result.score:.2f}]")

    if not session.is_complete:
        print(f"Missing stroke {session.current_stroke_index + 1}")
    print(f"Mistakes: {session.mistakes}")
    return 0 if session.is_complete else 1


if __name__ == "__main__":
    sys.exit(main())
