"""Shared pytest fixtures for the stroke tutor test suite.

Fixtures:
    cfg: Default RecognizerConfig
    recognizer: StrokeRecognizer over SVG path definitions
    horizontal_d: SVG path for the straight stroke (0,0) -> (100,0)
    curve_d: SVG path for a gentle cubic stroke
    kanjivg_svg: Minimal KanjiVG document with strokes out of document order
    kanjivg_dir: Folder holding kanjivg_svg as 06f22.svg
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import RecognizerConfig
from stroke_engine import StrokeRecognizer


KANJIVG_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg" xmlns:kvg="http://kanjivg.tagaini.net"
     width="109" height="109" viewBox="0 0 109 109">
<g id="kvg:StrokePaths_06f22" style="fill:none;stroke:#000000;stroke-width:3">
  <g id="kvg:06f22" kvg:element="漢">
    <path id="kvg:06f22-s2" kvg:type="㇔" d="M 50 10 L 50 90"/>
    <path id="kvg:06f22-s10" kvg:type="㇐" d="M 10 90 L 90 90"/>
    <path id="kvg:06f22-s1" kvg:type="㇐" d="M 10 20 L 90 20"/>
  </g>
</g>
<g id="kvg:StrokeNumbers_06f22" style="font-size:8;fill:#808080">
  <text transform="matrix(1 0 0 1 5 20)">1</text>
</g>
</svg>
"""


@pytest.fixture
def cfg():
    return RecognizerConfig()


@pytest.fixture
def recognizer(cfg):
    return StrokeRecognizer(cfg)


@pytest.fixture
def horizontal_d():
    return "M 0 0 L 100 0"


@pytest.fixture
def curve_d():
    return "M 10 10 C 30 40 60 40 80 10"


@pytest.fixture
def quarter_arc():
    """Dense quarter circle of radius 100 as a (200, 2) array."""
    theta = np.linspace(0.0, np.pi / 2, 200)
    return np.column_stack([100 * np.cos(theta), 100 * np.sin(theta)])


@pytest.fixture
def kanjivg_svg():
    return KANJIVG_SVG


@pytest.fixture
def kanjivg_dir(tmp_path):
    (tmp_path / "06f22.svg").write_text(KANJIVG_SVG, encoding="utf-8")
    return tmp_path
