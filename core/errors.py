# core/errors.py
from __future__ import annotations


class CaptureUnavailable(RuntimeError):
    """No frame could be taken from the target window this cycle."""


class RecognitionFailure(RuntimeError):
    """The text-recognition engine failed or timed out on one bitmap."""


class ProviderIOFailure(OSError):
    """A map provider could not enumerate or read its assets."""
