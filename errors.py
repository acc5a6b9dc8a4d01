"""
Exceptions raised by Stroke Tutor.

Recognition failures (too short, wrong length, wrong place, wrong shape) are
never exceptions; they come back as RecognitionResult values. These errors are
for problems the caller has to fix.
"""


class StrokeTutorError(Exception):
    """Base class for Stroke Tutor errors"""
    pass


class InvalidConfiguration(StrokeTutorError, ValueError):
    """Recognizer thresholds are malformed"""
    pass


class InvalidPathDefinition(StrokeTutorError, ValueError):
    """A reference path cannot be parsed or sampled"""
    pass


class CharacterDataError(StrokeTutorError):
    """Character stroke data could not be loaded or parsed"""
    pass


class CharacterNotFound(CharacterDataError, LookupError):
    """The requested character is not in the data source"""
    pass
