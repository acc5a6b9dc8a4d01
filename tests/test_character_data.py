"""Unit tests for character_data.py (KanjiVG and MakeMeAHanzi sources)."""

import json

import numpy as np
import pytest

from character_data import (
    CharacterData,
    character_from_graphics,
    character_from_kanjivg,
    fetch_kanjivg,
    load_graphics,
    makemeahanzi_to_display,
    parse_kanjivg,
    resolve_kanjivg_code,
    unicode_hex,
)
from errors import CharacterDataError, CharacterNotFound
from path_geometry import PolylineGeometry, SvgPathGeometry


class TestKanjiVG:
    def test_unicode_hex(self):
        assert unicode_hex("漢") == "06f22"
        assert unicode_hex("a") == "00061"

    @pytest.mark.parametrize("value", ["", None, 5])
    def test_unicode_hex_rejects(self, value):
        with pytest.raises(ValueError):
            unicode_hex(value)

    def test_resolve_code(self):
        assert resolve_kanjivg_code("漢") == "06f22"
        assert resolve_kanjivg_code("06F22") == "06f22"
        with pytest.raises(ValueError):
            resolve_kanjivg_code("kanji")

    def test_parse_orders_by_stroke_number(self, kanjivg_svg):
        assert parse_kanjivg(kanjivg_svg) == [
            "M 10 20 L 90 20",
            "M 50 10 L 50 90",
            "M 10 90 L 90 90",
        ]

    def test_parse_unnumbered_last(self):
        svg = (
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<path id="x-s" d="M 9 9 L 1 1"/>'
            '<path id="x-s1" d="M 0 0 L 1 1"/>'
            '<path id="outline" d="M 5 5 L 6 6"/>'
            '</svg>'
        )
        assert parse_kanjivg(svg) == ["M 0 0 L 1 1", "M 9 9 L 1 1"]

    def test_parse_malformed(self):
        with pytest.raises(CharacterDataError):
            parse_kanjivg("<svg><path></svg>")

    def test_fetch_from_folder(self, kanjivg_dir):
        strokes = fetch_kanjivg("漢", base_url=f"{kanjivg_dir}/")
        assert len(strokes) == 3

    def test_fetch_missing_character(self, kanjivg_dir):
        with pytest.raises(CharacterNotFound):
            fetch_kanjivg("十", base_url=f"{kanjivg_dir}/")

    def test_character_from_hex_code(self, kanjivg_dir):
        character = character_from_kanjivg("06f22", base_url=f"{kanjivg_dir}/")
        assert character.char == "漢"
        assert character.num_strokes == 3
        assert character.geometry is SvgPathGeometry

    def test_character_without_strokes(self, tmp_path):
        (tmp_path / "00061.svg").write_text('<svg xmlns="http://www.w3.org/2000/svg"/>')
        with pytest.raises(CharacterDataError):
            character_from_kanjivg("a", base_url=f"{tmp_path}/")


@pytest.fixture
def graphics_file(tmp_path):
    records = [
        {"character": "十", "strokes": ["M 0 0 Z", "M 1 1 Z"],
         "medians": [[[100, 500], [900, 500]], [[500, 850], [500, 50]]]},
        {"character": "一", "strokes": ["M 0 0 Z"], "medians": [[[100, 400], [900, 400]]]},
    ]
    path = tmp_path / "graphics.txt"
    path.write_text("\n".join(json.dumps(r, ensure_ascii=False) for r in records) + "\n\n",
                    encoding="utf-8")
    return path


class TestMakeMeAHanzi:
    def test_load_graphics(self, graphics_file):
        data = load_graphics(str(graphics_file))
        assert set(data) == {"十", "一"}

    def test_load_graphics_missing_file(self, tmp_path):
        with pytest.raises(CharacterDataError):
            load_graphics(str(tmp_path / "nope.txt"))

    def test_load_graphics_bad_line(self, tmp_path):
        path = tmp_path / "graphics.txt"
        path.write_text('{"character": "一"}\n{oops\n', encoding="utf-8")
        with pytest.raises(CharacterDataError, match=":2:"):
            load_graphics(str(path))

    def test_display_transform(self):
        out = makemeahanzi_to_display([[0, 900], [100, 0]])
        assert out.tolist() == [[0.0, 0.0], [100.0, 900.0]]
        assert makemeahanzi_to_display([]).shape == (0, 2)

    def test_character_from_graphics(self, graphics_file):
        character = character_from_graphics("十", load_graphics(str(graphics_file)))
        assert character.source == "makemeahanzi"
        assert character.num_strokes == 2
        assert np.allclose(character.strokes[1], [[500, 50], [500, 850]])
        assert character.geometry is PolylineGeometry

    def test_unknown_character(self, graphics_file):
        with pytest.raises(CharacterNotFound):
            character_from_graphics("永", load_graphics(str(graphics_file)))

    def test_not_found_is_lookup_error(self):
        with pytest.raises(LookupError):
            character_from_graphics("永", {})


def test_character_data_defaults():
    character = CharacterData(char="一")
    assert character.num_strokes == 0
    assert character.source == "kanjivg"
