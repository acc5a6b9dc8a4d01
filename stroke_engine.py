"""
Stroke Recognition & Validation Engine
- Resamples strokes to fixed-size arc-length samples
- Scores a user stroke against a reference stroke (centroid-aligned)
- Gates on start position and length ratio before judging pass/fail
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np

import config
from config import RecognizerConfig
from path_geometry import GeometryFactory, PolylineGeometry, SvgPathGeometry, sample_path

logger = logging.getLogger(__name__)

# ===============================
# Geometry & Normalization Utils
# ===============================

def as_points(pts) -> np.ndarray:
    """Coerce (x, y) pairs, {'x', 'y'} dicts or an array into a float (n, 2) array."""
    if isinstance(pts, np.ndarray):
        arr = pts.astype(np.float64)
        if arr.size == 0:
            return arr.reshape(0, 2)
        if arr.ndim == 1 and arr.shape[0] == 2:
            return arr.reshape(1, 2)
        if arr.ndim != 2 or arr.shape[1] < 2:
            raise ValueError(f"Expected an (n, 2) point array, got shape {pts.shape}")
        # extra columns (timestamps, pressure) are ignored
        return arr[:, :2]
    return np.array(
        [(p["x"], p["y"]) if isinstance(p, dict) else (p[0], p[1]) for p in pts],
        dtype=np.float64,
    ).reshape(-1, 2)


def dist(a, b) -> float:
    """Euclidean distance between two points."""
    return math.hypot(float(a[0]) - float(b[0]), float(a[1]) - float(b[1]))


def polyline_length(pts) -> float:
    """Total length of a polyline."""
    arr = as_points(pts)
    if len(arr) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(arr, axis=0), axis=1).sum())


def centroid(pts) -> np.ndarray:
    """Mean position of the points; the origin for an empty sequence."""
    arr = as_points(pts)
    if len(arr) == 0:
        return np.zeros(2)
    return arr.mean(axis=0)


def resample_polyline(pts, n: int = config.RESAMPLE_POINTS) -> np.ndarray:
    """
    Resample polyline to exactly n points spaced by arc-length.

    The first and last output points are the first and last input points.
    A sequence of 0 or 1 points comes back unchanged; a zero-length one
    comes back as n copies of its first point.
    """
    if n < 2:
        raise ValueError(f"Need at least 2 resampling points, got {n}")

    arr = as_points(pts)
    if len(arr) <= 1:
        return arr

    total = polyline_length(arr)
    if total <= 0.0:
        return np.repeat(arr[:1], n, axis=0)

    step = total / (n - 1)
    out = [arr[0]]
    walked = 0.0

    for i in range(1, len(arr)):
        p0, p1 = arr[i - 1], arr[i]
        seg = dist(p0, p1)
        # A long segment may hold several targets
        while len(out) < n and seg > 0.0 and walked + seg >= len(out) * step:
            t = (len(out) * step - walked) / seg
            out.append(p0 + t * (p1 - p0))
        walked += seg
        if len(out) >= n:
            break

    # Float shortfall: pad with the last point
    while len(out) < n:
        out.append(arr[-1])

    out = np.array(out, dtype=np.float64)
    out[-1] = arr[-1]
    return out


# ===============================
# Stroke Matching
# ===============================

@dataclass
class StrokeComparison:
    """Breakdown of a shape comparison. Costs are None when the start gate fired."""
    start_dist: float
    shape_cost: Optional[float]
    translation_cost: Optional[float]
    score: float


def measure_stroke(user_pts, target_pts, cfg: RecognizerConfig) -> StrokeComparison:
    """
    Compare two already-resampled strokes of equal length.

    Strokes that start too far from the expected start score infinity; this is
    also what catches strokes drawn backwards. Otherwise the user stroke is
    shifted so its centroid lands on the target's, the mean pointwise residual
    is the shape cost, and the centroid offset is the translation cost.
    """
    user = as_points(user_pts)
    target = as_points(target_pts)

    if len(user) == 0 or len(user) != len(target):
        return StrokeComparison(math.inf, None, None, math.inf)

    start_dist = dist(user[0], target[0])
    if start_dist > cfg.start_dist_threshold:
        logger.debug("Start point %.1fpx off (limit %.1f)", start_dist, cfg.start_dist_threshold)
        return StrokeComparison(start_dist, None, None, math.inf)

    user_c = centroid(user)
    target_c = centroid(target)
    translation_cost = dist(user_c, target_c)

    aligned = user + (target_c - user_c)
    shape_cost = float(np.linalg.norm(aligned - target, axis=1).mean())

    score = shape_cost * cfg.shape_weight + translation_cost * cfg.translation_weight
    return StrokeComparison(start_dist, shape_cost, translation_cost, score)


def compare_strokes(user_pts, target_pts, cfg: RecognizerConfig) -> float:
    """
    Score how well user stroke matches template.
    Returns score (0 = perfect, higher = worse, inf = wrong start).
    """
    return measure_stroke(user_pts, target_pts, cfg).score


# ===============================
# Recognition Policy
# ===============================

class RecognitionMessage(Enum):
    TOO_SHORT = "Too short"
    LENGTH_MISMATCH = "Length mismatch"
    GOOD = "Good!"
    TRY_AGAIN = "Try again"


@dataclass
class RecognitionResult:
    success: bool
    score: float
    message: RecognitionMessage
    comparison: Optional[StrokeComparison] = None

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "score": self.score,
            "message": self.message.value,
        }


def _clean_user_points(user_pts) -> np.ndarray:
    """Drop non-finite samples; malformed input becomes an empty stroke."""
    if user_pts is None:
        return np.zeros((0, 2))
    try:
        arr = as_points(user_pts)
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed user stroke: %s", exc)
        return np.zeros((0, 2))
    finite = np.all(np.isfinite(arr), axis=1)
    if not finite.all():
        logger.debug("Dropped %d non-finite user points", int((~finite).sum()))
    return arr[finite]


def _distinct_point_count(arr: np.ndarray) -> int:
    if len(arr) == 0:
        return 0
    moved = np.any(np.diff(arr, axis=0) != 0.0, axis=1)
    return 1 + int(moved.sum())


class StrokeRecognizer:
    """
    Judges a user stroke against the expected reference stroke.

    The recognizer holds only its configuration. Each evaluate() call samples
    the reference through a fresh backend from `geometry`, so calls on one
    recognizer can run concurrently.
    """

    def __init__(self, cfg: Optional[RecognizerConfig] = None,
                 geometry: GeometryFactory = SvgPathGeometry):
        self.config = cfg if cfg is not None else RecognizerConfig()
        self.geometry = geometry

    @property
    def config(self) -> RecognizerConfig:
        return self._config

    @config.setter
    def config(self, cfg: RecognizerConfig):
        if not isinstance(cfg, RecognizerConfig):
            raise TypeError(f"Expected RecognizerConfig, got {type(cfg).__name__}")
        self._config = cfg

    def get_path_points(self, definition, num_points: Optional[int] = None) -> np.ndarray:
        """Sample a reference path definition into evenly spaced points."""
        n = num_points if num_points is not None else self._config.resampling_points
        return sample_path(self.geometry(), definition, n)

    def evaluate(self, user_pts, definition) -> RecognitionResult:
        """
        Evaluate a user's stroke against the reference path `definition`.

        Raises InvalidPathDefinition when the reference cannot be sampled;
        every problem with the user stroke comes back as a failed result.
        """
        user = _clean_user_points(user_pts)
        if _distinct_point_count(user) < 2:
            return RecognitionResult(False, math.inf, RecognitionMessage.TOO_SHORT)
        target = self.get_path_points(definition)
        return self._judge(user, target)

    def evaluate_points(self, user_pts, target_pts) -> RecognitionResult:
        """Evaluate against a reference already given as a point sequence."""
        user = _clean_user_points(user_pts)
        if _distinct_point_count(user) < 2:
            return RecognitionResult(False, math.inf, RecognitionMessage.TOO_SHORT)
        target = sample_path(PolylineGeometry(), target_pts, self._config.resampling_points)
        return self._judge(user, target)

    def _judge(self, user: np.ndarray, target: np.ndarray) -> RecognitionResult:
        cfg = self._config
        n = cfg.resampling_points
        user_rs = resample_polyline(user, n)
        target_rs = resample_polyline(target, n)
        if len(target_rs) < n:
            # Empty or single-point reference
            target_rs = np.repeat(target_rs[:1], n, axis=0) if len(target_rs) else np.zeros((n, 2))

        # Check basic length ratio to prevent tiny ticks passing for long lines
        user_len = polyline_length(user)
        target_len = polyline_length(target)
        ratio = user_len / target_len if target_len > 0 else math.inf
        if not cfg.length_ratio_min <= ratio <= cfg.length_ratio_max:
            logger.debug("Length ratio %.2f outside [%.2f, %.2f]",
                         ratio, cfg.length_ratio_min, cfg.length_ratio_max)
            return RecognitionResult(False, config.LENGTH_MISMATCH_SCORE,
                                     RecognitionMessage.LENGTH_MISMATCH)

        comparison = measure_stroke(user_rs, target_rs, cfg)
        success = comparison.score < cfg.pass_threshold
        logger.debug("Stroke score %.2f (threshold %.2f): %s",
                     comparison.score, cfg.pass_threshold, "pass" if success else "fail")
        return RecognitionResult(
            success,
            comparison.score,
            RecognitionMessage.GOOD if success else RecognitionMessage.TRY_AGAIN,
            comparison,
        )
