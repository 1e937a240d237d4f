"""Exceptions raised by snaptext.

Messages are shown to the user verbatim after a fixed prefix, so keep them
short and free of stack-trace noise.
"""


class SnaptextError(Exception):
    """Base class for all snaptext errors."""


class ConfigError(SnaptextError, ValueError):
    """Configuration file or override is invalid."""


class ImageDecodeError(SnaptextError):
    """The selected image could not be opened or decoded."""


class RecognitionError(SnaptextError):
    """The text recognition engine failed."""


class RecognitionTimeout(RecognitionError):
    """The recognition call did not complete before the configured deadline."""
