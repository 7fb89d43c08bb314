"""
DSPy Signature for the one-line share caption.
"""

import dspy


class ShareCaptionSignature(dspy.Signature):
    """
    Write a short, direct message for sharing an educational story on WhatsApp.

    The message must say CLEARLY which concept the story teaches and which theme
    it uses, following the form "Aprendé sobre [CONCEPT] a través de [THEME]".
    One concise line in neutral Argentine Spanish.
    No quotes, no asterisks, no emojis.

    Example: Aprendé sobre cómo se extrae el petróleo a través de Bluey
    """

    concept: str = dspy.InputField(desc="The academic concept the story teaches")
    interest: str = dspy.InputField(desc="The theme or fandom the story uses")
    title: str = dspy.InputField(desc="The title of the story")

    message: str = dspy.OutputField(desc="The share message, a single line, nothing else")
