"""
Stroke-by-stroke practice over one character.

The session knows which stroke is expected next, grades each submitted stroke
against it and only advances on a correct stroke. Drawing, animation and
input capture are left to the caller.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from config import get_config
from stroke_engine import RecognitionMessage, RecognitionResult, StrokeRecognizer

logger = logging.getLogger(__name__)


@dataclass
class StrokeAttempt:
    stroke_index: int
    result: RecognitionResult


class PracticeSession:
    def __init__(self, strokes: Sequence, recognizer: Optional[StrokeRecognizer] = None,
                 char: str = "", on_complete: Optional[Callable[["PracticeSession"], None]] = None):
        """
        Args:
            strokes: reference stroke definitions in drawing order
            recognizer: grades each stroke; must sample this kind of definition
            char: character label used in feedback
            on_complete: called once when the last stroke is drawn correctly
        """
        self.strokes = list(strokes)
        self.recognizer = recognizer or StrokeRecognizer()
        self.char = char
        self.on_complete = on_complete
        self.current_stroke_index = 0
        self.attempts: List[StrokeAttempt] = []

    @classmethod
    def for_character(cls, character, cfg=None, on_complete=None) -> "PracticeSession":
        """Session over a CharacterData, with a recognizer suited to its source."""
        recognizer = StrokeRecognizer(cfg, geometry=character.geometry)
        return cls(character.strokes, recognizer, char=character.char, on_complete=on_complete)

    @property
    def num_strokes(self) -> int:
        return len(self.strokes)

    @property
    def is_complete(self) -> bool:
        return self.current_stroke_index >= self.num_strokes

    @property
    def mistakes(self) -> int:
        return sum(1 for a in self.attempts if not a.result.success)

    def submit_stroke(self, points) -> StrokeAttempt:
        """Grade a drawn stroke against the expected next stroke."""
        if self.is_complete:
            raise RuntimeError("Character already complete; call clear() to practice again")

        idx = self.current_stroke_index
        result = self.recognizer.evaluate(points, self.strokes[idx])
        attempt = StrokeAttempt(idx, result)
        self.attempts.append(attempt)
        logger.info("Stroke %d/%d: %s (score %.2f)", idx + 1, self.num_strokes,
                    result.message.value, result.score)

        if result.success:
            self.current_stroke_index += 1
            if self.is_complete:
                logger.info("Character %s complete with %d mistake(s)", self.char, self.mistakes)
                if self.on_complete:
                    self.on_complete(self)
        return attempt

    def hint(self):
        """Definition of the stroke expected next, or None once complete."""
        if self.is_complete:
            return None
        return self.strokes[self.current_stroke_index]

    def clear(self):
        """Reset progress and attempts."""
        self.current_stroke_index = 0
        self.attempts = []

    def feedback(self, attempt: StrokeAttempt) -> str:
        """User-facing text for an attempt."""
        stroke_num = attempt.stroke_index + 1
        result = attempt.result
        if result.success:
            if attempt.stroke_index == self.num_strokes - 1:
                return get_config("FEEDBACK_MESSAGES.correct_character").format(char=self.char)
            return get_config("FEEDBACK_MESSAGES.correct_stroke").format(stroke_num=stroke_num)
        if result.message is RecognitionMessage.TOO_SHORT:
            key = "too_short"
        elif result.message is RecognitionMessage.LENGTH_MISMATCH:
            key = "length_mismatch"
        elif math.isinf(result.score):
            key = "wrong_direction"
        else:
            key = "incorrect_stroke"
        return get_config(f"FEEDBACK_MESSAGES.{key}").format(stroke_num=stroke_num)
