"""Audio I/O helpers for the chord explorer.

WAV encoding goes through soundfile; live playback goes through a single
sounddevice output stream owned by an ``AudioOutput`` instance. Waveforms
are float32 arrays in range [-1.0, 1.0].
"""

from __future__ import annotations

import base64
import io
import logging
import threading
from typing import List

import numpy as np
import soundfile as sf


logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44_100
DEFAULT_SUBTYPE = "PCM_16"


def _as_column(audio: np.ndarray) -> np.ndarray:
    audio = np.asarray(audio, dtype=np.float32)
    if audio.ndim == 1:
        audio = audio.reshape(-1, 1)
    if audio.ndim != 2 or audio.shape[1] not in (1, 2):
        raise ValueError(f"Invalid audio shape: {audio.shape} (expected mono or stereo)")
    return audio


def to_wav_bytes(audio: np.ndarray, sample_rate: int = DEFAULT_SAMPLE_RATE, subtype: str = DEFAULT_SUBTYPE) -> bytes:
    """Encode a waveform as WAV bytes."""
    buffer = io.BytesIO()
    sf.write(buffer, _as_column(audio), sample_rate, format="WAV", subtype=subtype)
    return buffer.getvalue()


def to_wav_base64(audio: np.ndarray, sample_rate: int = DEFAULT_SAMPLE_RATE) -> str:
    return base64.b64encode(to_wav_bytes(audio, sample_rate)).decode("utf-8")


def write_wav(path: str, audio: np.ndarray, sample_rate: int = DEFAULT_SAMPLE_RATE, subtype: str = DEFAULT_SUBTYPE) -> None:
    """Write audio to a WAV file.

    Accepts audio as shape (samples,) or (samples, channels).
    """
    sf.write(path, _as_column(audio), sample_rate, subtype=subtype)


def read_wav_bytes(data: bytes):
    """Read WAV from bytes and return (audio, sample_rate)."""
    with io.BytesIO(data) as buf:
        audio, sr = sf.read(buf, dtype="float32", always_2d=True)
    return audio, sr


class AudioOutput:
    """Playback handle, constructed and closed by its owner.

    The output stream is opened on the first ``play`` call and reused
    afterwards. Each call adds a voice that the stream callback mixes with
    the voices still sounding, so calls return immediately and may overlap.
    """

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE, blocksize: int = 512):
        self.sample_rate = sample_rate
        self.blocksize = blocksize
        self._voices: List[List] = []  # [buffer, position]
        self._lock = threading.Lock()
        self._stream = None
        self._stream_lock = threading.Lock()

    @property
    def active_voices(self) -> int:
        with self._lock:
            return len(self._voices)

    def _callback(self, outdata, frames, time_info, status):  # noqa: ARG002
        if status:
            logger.debug(f"Audio stream status: {status}")
        mix = np.zeros(frames, dtype=np.float32)
        with self._lock:
            remaining = []
            for voice in self._voices:
                buffer, pos = voice
                chunk = buffer[pos:pos + frames]
                mix[: len(chunk)] += chunk
                voice[1] = pos + len(chunk)
                if voice[1] < len(buffer):
                    remaining.append(voice)
            self._voices = remaining
        outdata[:, 0] = np.clip(mix, -1.0, 1.0)

    def _ensure_stream(self):
        with self._stream_lock:
            if self._stream is None:
                import sounddevice as sd

                self._stream = sd.OutputStream(
                    samplerate=self.sample_rate,
                    channels=1,
                    dtype="float32",
                    blocksize=self.blocksize,
                    callback=self._callback,
                )
                logger.info(f"Opened audio output at {self.sample_rate} Hz")
            if not self._stream.active:
                self._stream.start()
            return self._stream

    def play(self, audio: np.ndarray) -> None:
        """Queue a mono buffer for playback and return without waiting."""
        buffer = np.asarray(audio, dtype=np.float32).reshape(-1)
        with self._lock:
            self._voices.append([buffer, 0])
        self._ensure_stream()

    def close(self) -> None:
        with self._lock:
            self._voices = []
        with self._stream_lock:
            if self._stream is not None:
                self._stream.close()
                self._stream = None


__all__ = [
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_SUBTYPE",
    "to_wav_bytes",
    "to_wav_base64",
    "write_wav",
    "read_wav_bytes",
    "AudioOutput",
]
