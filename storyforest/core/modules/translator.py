"""Module for translating story content with DSPy."""

import logging
from typing import Optional

import dspy

from ...config import get_inference_lm, llm_retry
from ..signatures import TranslationSignature

logger = logging.getLogger(__name__)


class Translator(dspy.Module):
    """Translate titles, descriptions and page text into a target language."""

    def __init__(self, lm: Optional[dspy.LM] = None):
        super().__init__()
        self._lm = lm
        self.translate = dspy.Predict(TranslationSignature)

    @llm_retry
    def forward(self, text: str, target_language: str) -> str:
        """
        Translate text. Empty input returns an empty string without a model call.

        Args:
            text: Text to translate
            target_language: Language to translate into

        Returns:
            Stripped translated text
        """
        if not text or not text.strip():
            return ""

        lm = self._lm or get_inference_lm()
        with dspy.context(lm=lm):
            result = self.translate(text=text, target_language=target_language)

        return (result.translation or "").strip()
