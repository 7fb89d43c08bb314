"""
Story narration player.

State machine:
    IDLE -> LOADING -> PLAYING -> IDLE   (stop or natural end)
    LOADING -> IDLE                      (fetch/decode failed, last_error set)

Only one stream plays at a time: toggling while PLAYING stops playback
instead of queueing another stream. Audio is fetched and decoded at most
once per player. Closing the player halts playback and releases the
output device.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Protocol

from .audio import PcmAudio, decode_audio, to_wav

logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"


class PlaybackError(Exception):
    """Narration could not be fetched or decoded."""

    pass


class AudioSink(Protocol):
    """An output device able to play one buffer at a time."""

    def play(self, audio: PcmAudio, on_finished: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


class WavFileSink:
    """Sink that "plays" by writing the buffer to a WAV file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def play(self, audio: PcmAudio, on_finished: Callable[[], None]) -> None:
        self.path.write_bytes(to_wav(audio))
        on_finished()

    def stop(self) -> None:
        pass

    def close(self) -> None:
        pass


class StoryPlayer:
    """Fetch, decode and play one story's narration.

    Args:
        fetch_audio: Returns base64 PCM for the story (or None on failure)
        sink: The output device
        on_listen_start: Optional best-effort hook run each time playback starts
    """

    def __init__(
        self,
        fetch_audio: Callable[[], Awaitable[Optional[str]]],
        sink: AudioSink,
        on_listen_start: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.fetch_audio = fetch_audio
        self.sink = sink
        self.on_listen_start = on_listen_start
        self.state = PlaybackState.IDLE
        self.last_error: Optional[Exception] = None
        self._audio: Optional[PcmAudio] = None
        self._closed = False

    async def toggle(self) -> PlaybackState:
        """Start playback, or stop it if already playing."""
        if self._closed:
            raise RuntimeError("Player is closed")

        if self.state is PlaybackState.PLAYING:
            self.stop()
            return self.state

        if self.state is PlaybackState.LOADING:
            return self.state

        self.state = PlaybackState.LOADING
        self.last_error = None

        try:
            audio = await self._load()
        except Exception as e:
            logger.error(f"Error playing audio: {type(e).__name__}: {e}")
            self.last_error = e
            self.state = PlaybackState.IDLE
            return self.state

        if self._closed:
            # Torn down while loading
            self.state = PlaybackState.IDLE
            return self.state

        self.state = PlaybackState.PLAYING
        self.sink.play(audio, on_finished=self._on_finished)

        if self.on_listen_start:
            try:
                await self.on_listen_start()
            except Exception as e:
                logger.warning(f"Listen hook failed: {e}")

        return self.state

    async def _load(self) -> PcmAudio:
        if self._audio is None:
            audio_b64 = await self.fetch_audio()
            if not audio_b64:
                raise PlaybackError("Failed to generate audio")
            self._audio = decode_audio(audio_b64)
        return self._audio

    def _on_finished(self) -> None:
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.IDLE

    def stop(self) -> None:
        """Halt the current stream, if any."""
        if self.state is PlaybackState.PLAYING:
            self.sink.stop()
            self.state = PlaybackState.IDLE

    def close(self) -> None:
        """Stop playback and release the output device. Safe to call twice."""
        if self._closed:
            return
        self.stop()
        self.sink.close()
        self._closed = True

    async def __aenter__(self) -> "StoryPlayer":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()
