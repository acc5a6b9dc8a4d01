"""
Configuration file for Stroke Tutor
Easily customize recognition strictness, data sources and logging
"""

import math
from dataclasses import dataclass, fields, replace as _dataclass_replace
from typing import Dict, Optional

from errors import InvalidConfiguration

# ===============================
# STROKE RECOGNITION
# ===============================

# Average pixel deviation allowed for success (lower = stricter)
PASS_THRESHOLD = 15.0

# Max pixels the start point can be off before the stroke is rejected outright
# (also catches strokes drawn backwards)
START_DIST_THRESHOLD = 40.0

# Allowed user/target length ratio (prevents tiny ticks passing for long lines)
LENGTH_RATIO_MIN = 0.5
LENGTH_RATIO_MAX = 1.5

# Resampling resolution (number of points per stroke)
RESAMPLE_POINTS = 64

# Score = shape_cost * SHAPE_WEIGHT + translation_cost * TRANSLATION_WEIGHT
SHAPE_WEIGHT = 0.7
TRANSLATION_WEIGHT = 0.3

# Score reported when the length gate rejects a stroke
LENGTH_MISMATCH_SCORE = 100.0

# ===============================
# PATH GEOMETRY
# ===============================

# Parameter samples used to flatten each curved SVG segment
GEOMETRY_SAMPLES_PER_SEGMENT = 48

# ===============================
# CHARACTER DATA
# ===============================

# KanjiVG files (<hex>.svg); local folder or http(s) URL
KANJIVG_BASE_URL = "kanjivg/kanji/"
KANJIVG_TIMEOUT = 10.0  # seconds

# MakeMeAHanzi graphics.txt (JSON lines)
MAKEMEAHANZI_GRAPHICS_PATH = "makemeahanzi/graphics.txt"

# ===============================
# FEEDBACK MESSAGES
# ===============================

FEEDBACK_MESSAGES = {
    "correct_stroke": "✓ Stroke {stroke_num} correct!",
    "correct_character": "🎉 Character {char} completed!",
    "incorrect_stroke": "✗ Stroke {stroke_num} incorrect. Try again!",
    "too_short": "Stroke {stroke_num} is too short. Draw the whole stroke.",
    "length_mismatch": "Stroke {stroke_num} is the wrong length. Try again!",
    "wrong_direction": "Stroke {stroke_num}: start from the right place and draw in the correct direction",
}

# ===============================
# LOGGING
# ===============================

DEBUG_MODE = False
LOG_LEVEL = "DEBUG" if DEBUG_MODE else "WARNING"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ===============================
# SYSTEM SETTINGS
# ===============================

APP_NAME = "Stroke Tutor"
APP_VERSION = "1.0.0"


# ===============================
# Recognizer configuration
# ===============================

# camelCase spellings accepted by RecognizerConfig.from_options
_OPTION_ALIASES = {
    "passThreshold": "pass_threshold",
    "startDistThreshold": "start_dist_threshold",
    "lengthRatioMin": "length_ratio_min",
    "lengthRatioMax": "length_ratio_max",
    "resamplingPoints": "resampling_points",
    "shapeWeight": "shape_weight",
    "translationWeight": "translation_weight",
}


@dataclass(frozen=True)
class RecognizerConfig:
    """Immutable thresholds for one StrokeRecognizer, validated on construction."""
    pass_threshold: float = PASS_THRESHOLD
    start_dist_threshold: float = START_DIST_THRESHOLD
    length_ratio_min: float = LENGTH_RATIO_MIN
    length_ratio_max: float = LENGTH_RATIO_MAX
    resampling_points: int = RESAMPLE_POINTS
    shape_weight: float = SHAPE_WEIGHT
    translation_weight: float = TRANSLATION_WEIGHT

    def __post_init__(self):
        problems = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append(f"{f.name} must be a number, got {value!r}")
            elif not math.isfinite(value):
                problems.append(f"{f.name} must be finite, got {value!r}")
        if problems:
            raise InvalidConfiguration("; ".join(problems))

        if self.pass_threshold <= 0:
            problems.append("pass_threshold must be > 0")
        elif self.pass_threshold > LENGTH_MISMATCH_SCORE:
            # a length-gate rejection scores LENGTH_MISMATCH_SCORE and must never pass
            problems.append(f"pass_threshold must be <= {LENGTH_MISMATCH_SCORE}, got {self.pass_threshold!r}")
        if self.start_dist_threshold < 0:
            problems.append("start_dist_threshold must be >= 0")
        if self.length_ratio_min < 0:
            problems.append("length_ratio_min must be >= 0")
        if self.length_ratio_min >= self.length_ratio_max:
            problems.append(
                f"length_ratio_min ({self.length_ratio_min}) must be < "
                f"length_ratio_max ({self.length_ratio_max})"
            )
        if int(self.resampling_points) != self.resampling_points or self.resampling_points < 2:
            problems.append(f"resampling_points must be an integer >= 2, got {self.resampling_points!r}")
        if self.shape_weight < 0 or self.translation_weight < 0:
            problems.append("shape_weight and translation_weight must be >= 0")
        elif self.shape_weight + self.translation_weight == 0:
            problems.append("shape_weight and translation_weight cannot both be 0")
        if problems:
            raise InvalidConfiguration("; ".join(problems))

        object.__setattr__(self, "resampling_points", int(self.resampling_points))

    @classmethod
    def from_options(cls, options: Optional[Dict] = None) -> "RecognizerConfig":
        """Build from a plain options dict; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        unknown = []
        for key, value in (options or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                unknown.append(key)
        if unknown:
            raise InvalidConfiguration(f"Unknown recognizer option(s): {', '.join(sorted(unknown))}")
        return cls(**kwargs)

    def replace(self, **changes) -> "RecognizerConfig":
        """Copy with some fields changed (validated again)."""
        return _dataclass_replace(self, **changes)

    def to_dict(self) -> Dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def get_config(key: str, default=None):
    """Get configuration value by key."""
    parts = key.split(".")
    obj = globals()

    for part in parts:
        if isinstance(obj, dict):
            obj = obj.get(part, default)
        else:
            return default

    return obj if obj is not None else default


if __name__ == "__main__":
    # Print all configuration
    print(f"{APP_NAME} Configuration")
    print("=" * 50)
    for name, value in RecognizerConfig().to_dict().items():
        print(f"{name}: {value}")
    print(f"KanjiVG source: {KANJIVG_BASE_URL}")
    print(f"MakeMeAHanzi source: {MAKEMEAHANZI_GRAPHICS_PATH}")
    print(f"Debug Mode: {DEBUG_MODE}")
