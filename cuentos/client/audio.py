"""
Decoding of narration audio.

The narration endpoint returns raw PCM with no container header:
16-bit signed little-endian samples, mono, 24kHz, base64-encoded.
Decoding is pure (no audio device involved) so it can be used and tested
anywhere.
"""

import base64
import io
import wave
from dataclasses import dataclass

import numpy as np

SAMPLE_RATE = 24000
CHANNELS = 1
SAMPLE_WIDTH = 2  # bytes per 16-bit sample
PCM16_SCALE = 32768.0


@dataclass(frozen=True)
class PcmAudio:
    """Normalized mono samples in [-1.0, 1.0) plus their sample rate."""

    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return len(self.samples) / self.sample_rate


def decode_pcm16(audio_b64: str) -> np.ndarray:
    """
    Decode base64 PCM16 into float32 samples.

    bytes -> little-endian int16 -> divide by 32768.0. A trailing odd byte
    (half a sample) is dropped.
    """
    raw = base64.b64decode(audio_b64)
    usable = len(raw) - (len(raw) % SAMPLE_WIDTH)
    ints = np.frombuffer(raw[:usable], dtype="<i2")
    return ints.astype(np.float32) / np.float32(PCM16_SCALE)


def decode_audio(audio_b64: str, sample_rate: int = SAMPLE_RATE) -> PcmAudio:
    """Decode narration into a playable buffer."""
    return PcmAudio(samples=decode_pcm16(audio_b64), sample_rate=sample_rate)


def encode_pcm16(samples: np.ndarray) -> bytes:
    """Quantize normalized samples back to little-endian PCM16 bytes."""
    scaled = np.clip(np.round(samples * PCM16_SCALE), -32768, 32767)
    return scaled.astype("<i2").tobytes()


def to_wav(audio: PcmAudio) -> bytes:
    """Wrap decoded audio in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(CHANNELS)
        wav.setsampwidth(SAMPLE_WIDTH)
        wav.setframerate(audio.sample_rate)
        wav.writeframes(encode_pcm16(audio.samples))
    return buffer.getvalue()
