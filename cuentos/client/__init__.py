"""Client side: API access, narration decoding and playback."""

from .api_client import StoryApiError, StoryClient
from .audio import PcmAudio, decode_audio, decode_pcm16, to_wav
from .playback import AudioSink, PlaybackError, PlaybackState, StoryPlayer, WavFileSink

__all__ = [
    "StoryApiError",
    "StoryClient",
    "PcmAudio",
    "decode_audio",
    "decode_pcm16",
    "to_wav",
    "AudioSink",
    "PlaybackError",
    "PlaybackState",
    "StoryPlayer",
    "WavFileSink",
]
