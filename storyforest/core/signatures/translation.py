"""
DSPy Signature for translating story content.

Used for page text, titles and book descriptions when a reader picks a
language other than the one the book was written in.
"""

import dspy


class TranslationSignature(dspy.Signature):
    """
    Translate a piece of a children's picture book into the target language.

    Keep it natural and child-friendly: short sentences, simple words,
    the same warmth and rhythm as the original. Keep character names
    as they are. Do not add explanations, notes or quotation marks.
    """

    text: str = dspy.InputField(desc="Text to translate")
    target_language: str = dspy.InputField(desc="Language to translate into, e.g. 'Korean'")

    translation: str = dspy.OutputField(desc="Only the translated text")
