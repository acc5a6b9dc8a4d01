"""
Path geometry backends.

A backend turns a reference path definition into positions along its arc
length. Two are provided:

- SvgPathGeometry: SVG path data strings (KanjiVG strokes), parsed with svg.path
- PolylineGeometry: point lists (MakeMeAHanzi medians, pre-sampled strokes)

Both flatten the path into a cumulative arc-length table once per set_path()
and interpolate positions from it, so point_at_arc_length(0) is the path start,
point_at_arc_length(total_length()) is the path end, and positions move
monotonically and continuously along the path in between.

Backend instances hold the current path. Give each thread its own instance.
"""

import logging
import math
from typing import Any, Callable, Protocol, Sequence, Tuple

import numpy as np
from svg.path import Close, Line, Move, parse_path

import config
from errors import InvalidPathDefinition

logger = logging.getLogger(__name__)


class PathGeometry(Protocol):
    """Continuous-path sampling interface used by the recognizer."""

    def set_path(self, definition: Any) -> None:
        ...

    def total_length(self) -> float:
        ...

    def point_at_arc_length(self, distance: float) -> Tuple[float, float]:
        ...


# ===============================
# Arc-length tables
# ===============================

def _cumulative_lengths(vertices: np.ndarray, jumps: Sequence[int] = ()) -> np.ndarray:
    """
    Arc length from the first vertex to every vertex.
    `jumps` lists vertex indices reached by a pen-up move; the gap leading
    to them adds no length.
    """
    if len(vertices) < 2:
        return np.zeros(len(vertices))
    seg_lens = np.linalg.norm(np.diff(vertices, axis=0), axis=1)
    for idx in jumps:
        seg_lens[idx - 1] = 0.0
    return np.concatenate([[0.0], np.cumsum(seg_lens)])


def _point_on_table(vertices: np.ndarray, cum_len: np.ndarray, distance: float) -> Tuple[float, float]:
    total = cum_len[-1]
    d = min(max(float(distance), 0.0), total)
    if d >= total:
        end = vertices[-1]
        return float(end[0]), float(end[1])
    x = np.interp(d, cum_len, vertices[:, 0])
    y = np.interp(d, cum_len, vertices[:, 1])
    return float(x), float(y)


class PolylineGeometry:
    """Path geometry over a point-list definition."""

    def __init__(self):
        self._vertices = None
        self._cum_len = None

    def set_path(self, definition: Sequence) -> None:
        self._vertices = self._load_vertices(definition)
        self._cum_len = _cumulative_lengths(self._vertices)

    @staticmethod
    def _load_vertices(definition) -> np.ndarray:
        if definition is None or isinstance(definition, (str, bytes)):
            raise InvalidPathDefinition(f"Expected a list of points, got {type(definition).__name__}")
        try:
            pts = [
                (p["x"], p["y"]) if isinstance(p, dict) else (p[0], p[1])
                for p in definition
            ]
            vertices = np.array(pts, dtype=np.float64).reshape(-1, 2)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise InvalidPathDefinition(f"Malformed point list: {exc}") from exc

        if len(vertices) == 0:
            raise InvalidPathDefinition("Point list is empty")
        if not np.all(np.isfinite(vertices)):
            raise InvalidPathDefinition("Point list contains non-finite coordinates")
        return vertices

    def _require_path(self):
        if self._vertices is None:
            raise RuntimeError("set_path() must be called before sampling")

    def total_length(self) -> float:
        self._require_path()
        return float(self._cum_len[-1])

    def point_at_arc_length(self, distance: float) -> Tuple[float, float]:
        self._require_path()
        return _point_on_table(self._vertices, self._cum_len, distance)


class SvgPathGeometry:
    """Path geometry over an SVG path data string (the `d` attribute)."""

    def __init__(self, samples_per_segment: int = None):
        self.samples_per_segment = samples_per_segment or config.GEOMETRY_SAMPLES_PER_SEGMENT
        self._vertices = None
        self._cum_len = None

    def set_path(self, definition: str) -> None:
        if not isinstance(definition, str) or not definition.strip():
            raise InvalidPathDefinition(f"Expected non-empty SVG path data, got {definition!r}")
        try:
            path = parse_path(definition)
        except (ValueError, IndexError) as exc:
            raise InvalidPathDefinition(f"Cannot parse SVG path {definition!r}: {exc}") from exc
        if len(path) == 0:
            raise InvalidPathDefinition(f"SVG path {definition!r} has no segments")

        self._vertices, jumps = self._flatten(path)
        self._cum_len = _cumulative_lengths(self._vertices, jumps)
        logger.debug("Flattened SVG path into %d vertices (length %.2f)",
                     len(self._vertices), self._cum_len[-1])

    def _flatten(self, path):
        """
        Sample every drawable segment; lines need only their endpoints.
        Returns the vertex array and the indices where a new subpath begins.
        Path data without a leading moveto is accepted and drawn from the origin,
        as browsers do.
        """
        pts = []
        jumps = []
        pen_up = False
        for segment in path:
            if isinstance(segment, Move):
                if not pts:
                    pts.append(segment.start)
                else:
                    pen_up = True
                continue
            if isinstance(segment, (Line, Close)):
                ts = (0.0, 1.0)
            else:
                ts = np.linspace(0.0, 1.0, self.samples_per_segment)
            seg_pts = [segment.point(t) for t in ts]
            if pen_up:
                if seg_pts[0] != pts[-1]:
                    jumps.append(len(pts))
                pen_up = False
            if pts and seg_pts[0] == pts[-1]:
                seg_pts = seg_pts[1:]
            pts.extend(seg_pts)

        vertices = np.array([(p.real, p.imag) for p in pts], dtype=np.float64).reshape(-1, 2)
        if len(vertices) == 0 or not np.all(np.isfinite(vertices)):
            raise InvalidPathDefinition("SVG path produced no finite points")
        return vertices, jumps

    def _require_path(self):
        if self._vertices is None:
            raise RuntimeError("set_path() must be called before sampling")

    def total_length(self) -> float:
        self._require_path()
        return float(self._cum_len[-1])

    def point_at_arc_length(self, distance: float) -> Tuple[float, float]:
        self._require_path()
        return _point_on_table(self._vertices, self._cum_len, distance)


def sample_path(geometry: PathGeometry, definition: Any, n: int) -> np.ndarray:
    """
    Sample a continuous path into exactly n points evenly spaced by arc length.
    Returns an (n, 2) float array; the first and last rows are the path ends.
    """
    if n < 2:
        raise ValueError(f"Need at least 2 sample points, got {n}")
    geometry.set_path(definition)
    total = geometry.total_length()
    if not math.isfinite(total):
        raise InvalidPathDefinition(f"Path has non-finite length {total!r}")
    return np.array(
        [geometry.point_at_arc_length(total * i / (n - 1)) for i in range(n)],
        dtype=np.float64,
    )


GeometryFactory = Callable[[], PathGeometry]
