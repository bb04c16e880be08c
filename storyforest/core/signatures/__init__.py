"""DSPy signatures for Storyforest."""

from .translation import TranslationSignature

__all__ = ["TranslationSignature"]
