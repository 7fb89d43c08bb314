"""
Story generation constants for the educational story generator.

Values shared by request validation, the text prompt and the illustrator.
"""

# Story generation constants
STORY_CONSTANTS = {
    "max_field_length": 500,  # concept / interest
    "min_word_count": 500,  # Minimum length demanded from the model
    "image_count": 3,  # Exactly this many image prompts are required
    "image_style_suffix": "modern digital illustration, vibrant colors, child-friendly, high quality",
}


def share_caption_fallback(concept: str, interest: str) -> str:
    """Templated share caption used whenever the model cannot provide one."""
    return f"Learn about {concept} through {interest}"
