"""Unit tests for config.py (RecognizerConfig validation and get_config)."""

import dataclasses

import pytest

import config
from config import RecognizerConfig, get_config
from errors import InvalidConfiguration
from stroke_engine import RecognitionMessage, StrokeRecognizer


class TestRecognizerConfig:
    def test_defaults(self):
        cfg = RecognizerConfig()
        assert cfg.pass_threshold == 15
        assert cfg.start_dist_threshold == 40
        assert cfg.length_ratio_min == 0.5
        assert cfg.length_ratio_max == 1.5
        assert cfg.resampling_points == 64
        assert cfg.shape_weight == 0.7
        assert cfg.translation_weight == 0.3

    @pytest.mark.parametrize("changes", [
        {"length_ratio_min": 1.5, "length_ratio_max": 1.5},
        {"length_ratio_min": 2.0, "length_ratio_max": 1.0},
        {"length_ratio_min": -0.1},
        {"resampling_points": 1},
        {"resampling_points": 2.5},
        {"pass_threshold": 0},
        {"pass_threshold": 150},
        {"pass_threshold": float("nan")},
        {"start_dist_threshold": -1},
        {"start_dist_threshold": float("inf")},
        {"shape_weight": -0.7},
        {"shape_weight": 0, "translation_weight": 0},
        {"pass_threshold": "15"},
        {"resampling_points": True},
    ])
    def test_rejects_invalid_values(self, changes):
        with pytest.raises(InvalidConfiguration):
            RecognizerConfig(**changes)

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            RecognizerConfig(resampling_points=0)

    def test_highest_pass_threshold_keeps_length_mismatch_failing(self):
        cfg = RecognizerConfig(pass_threshold=config.LENGTH_MISMATCH_SCORE)
        result = StrokeRecognizer(cfg).evaluate([(0, 0), (20, 0)], "M 0 0 L 100 0")
        assert result.message is RecognitionMessage.LENGTH_MISMATCH
        assert result.success == (result.score < cfg.pass_threshold)
        assert not result.success

    def test_whole_number_float_points_accepted(self):
        cfg = RecognizerConfig(resampling_points=32.0)
        assert cfg.resampling_points == 32
        assert isinstance(cfg.resampling_points, int)

    def test_frozen(self):
        cfg = RecognizerConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.pass_threshold = 3

    def test_replace_revalidates(self):
        cfg = RecognizerConfig()
        assert cfg.replace(pass_threshold=5).pass_threshold == 5
        assert cfg.pass_threshold == 15
        with pytest.raises(InvalidConfiguration):
            cfg.replace(length_ratio_max=0.1)

    def test_from_options_accepts_both_spellings(self):
        cfg = RecognizerConfig.from_options({"passThreshold": 10, "start_dist_threshold": 50})
        assert cfg.pass_threshold == 10
        assert cfg.start_dist_threshold == 50
        assert cfg.resampling_points == config.RESAMPLE_POINTS

    def test_from_options_rejects_unknown_keys(self):
        with pytest.raises(InvalidConfiguration, match="strokeColor"):
            RecognizerConfig.from_options({"strokeColor": "#333"})

    def test_from_options_empty(self):
        assert RecognizerConfig.from_options(None) == RecognizerConfig()

    def test_to_dict(self):
        data = RecognizerConfig().to_dict()
        assert set(data) == {
            "pass_threshold", "start_dist_threshold", "length_ratio_min",
            "length_ratio_max", "resampling_points", "shape_weight", "translation_weight",
        }


class TestGetConfig:
    def test_top_level_key(self):
        assert get_config("PASS_THRESHOLD") == config.PASS_THRESHOLD

    def test_dotted_key(self):
        assert "{stroke_num}" in get_config("FEEDBACK_MESSAGES.too_short")

    def test_missing_key(self):
        assert get_config("NOPE", 7) == 7
        assert get_config("APP_NAME.nested", "x") == "x"
