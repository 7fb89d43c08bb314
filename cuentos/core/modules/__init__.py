from .story_orchestrator import StoryOrchestrator
from .illustrator import Illustrator
from .narrator import Narrator
from .share_caption import craft_share_caption

__all__ = [
    "StoryOrchestrator",
    "Illustrator",
    "Narrator",
    "craft_share_caption",
]
