"""
Character stroke data sources.

KanjiVG: one SVG per character (109x109 viewBox), strokes are <path> elements
with ids like "kvg:06f22-s1". Each stroke definition is an SVG path data
string, sampled with SvgPathGeometry.

MakeMeAHanzi: graphics.txt, one JSON record per line with outline "strokes"
and centerline "medians" in a 1024-unit canvas (y up, baseline at 900). Each
stroke definition is the display-transformed median point list, sampled with
PolylineGeometry.
"""

import json
import logging
import os
import re
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Dict, List
from xml.dom import minidom
from xml.parsers.expat import ExpatError

import numpy as np

import config
from errors import CharacterDataError, CharacterNotFound
from path_geometry import GeometryFactory, PolylineGeometry, SvgPathGeometry

logger = logging.getLogger(__name__)

_STROKE_ID = re.compile(r"-s(\d+)$")
_HEX_CODE = re.compile(r"^[0-9a-f]{5}$", re.IGNORECASE)


@dataclass
class CharacterData:
    char: str
    strokes: List = field(default_factory=list)
    source: str = "kanjivg"

    @property
    def num_strokes(self) -> int:
        return len(self.strokes)

    @property
    def geometry(self) -> GeometryFactory:
        """Backend able to sample this character's stroke definitions."""
        return PolylineGeometry if self.source == "makemeahanzi" else SvgPathGeometry


# ===============================
# KanjiVG
# ===============================

def unicode_hex(char: str) -> str:
    """Code point of the first character as 5 lowercase hex digits ("漢" -> "06f22")."""
    if not isinstance(char, str) or not char:
        raise ValueError("Invalid character: must be a non-empty string")
    return f"{ord(char[0]):05x}"


def resolve_kanjivg_code(char_or_hex: str) -> str:
    """Accept a single character or a 5-digit hex code; return the hex code."""
    if not isinstance(char_or_hex, str) or not char_or_hex:
        raise ValueError("Invalid character: must be a non-empty string")
    if len(char_or_hex) == 1:
        return unicode_hex(char_or_hex)
    if _HEX_CODE.match(char_or_hex):
        return char_or_hex.lower()
    raise ValueError(f"Invalid kanji hex code: {char_or_hex}")


def _stroke_number(element) -> int:
    match = _STROKE_ID.search(element.getAttribute("id"))
    return int(match.group(1)) if match else 999


def parse_kanjivg(svg_content) -> List[str]:
    """
    Parse a KanjiVG SVG document and return its stroke path data strings,
    ordered by stroke number.
    """
    try:
        doc = minidom.parseString(svg_content)
    except ExpatError as exc:
        raise CharacterDataError(f"Malformed KanjiVG SVG: {exc}") from exc

    paths = [
        el for el in doc.getElementsByTagName("path")
        if "-s" in el.getAttribute("id")
    ]
    # sort() is stable, so unnumbered strokes keep document order at the end
    paths.sort(key=_stroke_number)
    return [el.getAttribute("d") for el in paths]


def fetch_kanjivg(char: str, base_url: str = None) -> List[str]:
    """
    Load KanjiVG strokes for `char` (a character or 5-digit hex code) from
    `base_url`, which may be an http(s) URL or a local folder.
    """
    base_url = base_url if base_url is not None else config.KANJIVG_BASE_URL
    hex_code = resolve_kanjivg_code(char)
    url = f"{base_url}{hex_code}.svg"
    logger.info("Loading KanjiVG strokes from %s", url)

    if url.startswith(("http://", "https://")):
        try:
            with urllib.request.urlopen(url, timeout=config.KANJIVG_TIMEOUT) as response:
                content = response.read()
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                raise CharacterNotFound(f"No KanjiVG data for {char!r} at {url}") from exc
            raise CharacterDataError(f"Failed to fetch kanji: {exc.code} {exc.reason}") from exc
        except OSError as exc:
            raise CharacterDataError(f"Failed to fetch kanji from {url}: {exc}") from exc
    else:
        if not os.path.exists(url):
            raise CharacterNotFound(f"No KanjiVG data for {char!r} at {url}")
        try:
            with open(url, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise CharacterDataError(f"Could not read {url}: {exc}") from exc

    return parse_kanjivg(content)


def character_from_kanjivg(char: str, base_url: str = None) -> CharacterData:
    strokes = fetch_kanjivg(char, base_url)
    if not strokes:
        raise CharacterDataError(f"KanjiVG data for {char!r} has no strokes")
    if len(char) != 1:
        char = chr(int(resolve_kanjivg_code(char), 16))
    return CharacterData(char=char, strokes=strokes, source="kanjivg")


# ===============================
# MakeMeAHanzi
# ===============================

def load_graphics(path: str = None) -> Dict[str, Dict]:
    """Load graphics.txt; return dict char -> {strokes, medians}."""
    path = path if path is not None else config.MAKEMEAHANZI_GRAPHICS_PATH
    if not os.path.exists(path):
        raise CharacterDataError(
            f"Could not find {path}\n"
            f"Make sure graphics.txt is inside your makemeahanzi folder."
        )

    data = {}
    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError as exc:
                raise CharacterDataError(f"{path}:{line_no}: invalid JSON ({exc})") from exc
            char = obj.get("character")
            if char:
                data[char] = obj
            else:
                logger.warning("%s:%d: record without 'character' skipped", path, line_no)

    logger.info("Loaded %d MakeMeAHanzi characters from %s", len(data), path)
    return data


def makemeahanzi_to_display(pts) -> np.ndarray:
    """
    Apply MakeMeAHanzi display transform: scale(1,-1) translate(0,-900).
    Result: (x, 900 - y) for standard y-increases-downward display.
    """
    pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        return pts
    out = pts.copy()
    out[:, 1] = 900.0 - pts[:, 1]
    return out


def character_from_graphics(char: str, graphics: Dict[str, Dict]) -> CharacterData:
    """Build CharacterData whose strokes are display-space median polylines."""
    obj = graphics.get(char)
    if obj is None:
        raise CharacterNotFound(f"Character '{char}' not found in graphics.txt")
    medians = obj.get("medians") or []
    if not medians:
        raise CharacterDataError(f"Character '{char}' has no medians")
    strokes = [makemeahanzi_to_display(m).tolist() for m in medians]
    return CharacterData(char=char, strokes=strokes, source="makemeahanzi")
