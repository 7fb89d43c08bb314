"""Share caption generation with a deterministic fallback."""

import logging
from typing import Optional

import dspy

from ...config import get_caption_lm, share_caption_fallback
from ..signatures import ShareCaptionSignature

logger = logging.getLogger(__name__)


def _clean_caption(text: str) -> str:
    """Keep the first line and strip decoration the model sometimes adds."""
    lines = text.strip().splitlines()
    first = lines[0] if lines else ""
    return first.strip().strip('"*').strip()


def craft_share_caption(
    concept: str,
    interest: str,
    title: str,
    lm: Optional[dspy.LM] = None,
) -> str:
    """
    Craft a one-line share caption for a story.

    Any failure (missing credential, LM error, empty answer) falls back to
    share_caption_fallback(concept, interest).
    """
    try:
        lm = lm or get_caption_lm()
        predictor = dspy.Predict(ShareCaptionSignature)

        with dspy.context(lm=lm):
            result = predictor(concept=concept, interest=interest, title=title)

        caption = _clean_caption(result.message or "")
    except Exception as e:
        logger.error(f"Error generating share message: {type(e).__name__}: {e}")
        return share_caption_fallback(concept, interest)

    return caption or share_caption_fallback(concept, interest)
