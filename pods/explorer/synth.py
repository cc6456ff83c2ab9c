"""Plucked-string synthesis for chord playback.

Karplus-Strong string model followed by a fixed body-resonance filter chain.
Seed-driven noise keeps renders reproducible.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.signal import lfilter

from fxtheory.tuning import FACGCE, Fretting, Tuning

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_DURATION = 3.0
PICK_POSITION = 5  # pluck at 1/5 of the string length
FEEDBACK_BLEND = 0.7


@dataclass(frozen=True)
class Biquad:
    """Normalized second-order section (a0 == 1)."""

    b: Tuple[float, float, float]
    a: Tuple[float, float, float]

    @classmethod
    def _normalized(cls, b0, b1, b2, a0, a1, a2) -> "Biquad":
        return cls((b0 / a0, b1 / a0, b2 / a0), (1.0, a1 / a0, a2 / a0))

    @classmethod
    def lowpass(cls, freq: float, q: float, sample_rate: int) -> "Biquad":
        w0 = 2 * math.pi * freq / sample_rate
        cos_w0 = math.cos(w0)
        alpha = math.sin(w0) / (2 * q)
        return cls._normalized(
            (1 - cos_w0) / 2, 1 - cos_w0, (1 - cos_w0) / 2,
            1 + alpha, -2 * cos_w0, 1 - alpha,
        )

    @classmethod
    def peaking(cls, freq: float, q: float, gain_db: float, sample_rate: int) -> "Biquad":
        w0 = 2 * math.pi * freq / sample_rate
        cos_w0 = math.cos(w0)
        alpha = math.sin(w0) / (2 * q)
        amp = 10 ** (gain_db / 40)
        return cls._normalized(
            1 + alpha * amp, -2 * cos_w0, 1 - alpha * amp,
            1 + alpha / amp, -2 * cos_w0, 1 - alpha / amp,
        )

    @classmethod
    def lowshelf(cls, freq: float, gain_db: float, sample_rate: int) -> "Biquad":
        # Shelf slope S = 1
        w0 = 2 * math.pi * freq / sample_rate
        cos_w0 = math.cos(w0)
        amp = 10 ** (gain_db / 40)
        alpha = math.sin(w0) / 2 * math.sqrt(2)
        sqrt_amp_alpha = 2 * math.sqrt(amp) * alpha
        return cls._normalized(
            amp * ((amp + 1) - (amp - 1) * cos_w0 + sqrt_amp_alpha),
            2 * amp * ((amp - 1) - (amp + 1) * cos_w0),
            amp * ((amp + 1) - (amp - 1) * cos_w0 - sqrt_amp_alpha),
            (amp + 1) + (amp - 1) * cos_w0 + sqrt_amp_alpha,
            -2 * ((amp - 1) + (amp + 1) * cos_w0),
            (amp + 1) + (amp - 1) * cos_w0 - sqrt_amp_alpha,
        )

    def apply(self, audio: np.ndarray) -> np.ndarray:
        return lfilter(self.b, self.a, audio)


class ResonanceChain:
    """Guitar body coloring: lowpass, two body peaks, low shelf, master gain."""

    def __init__(self, sample_rate: int = DEFAULT_SAMPLE_RATE, gain: float = 0.4):
        self.sample_rate = sample_rate
        self.gain = gain
        self.stages: List[Biquad] = [
            Biquad.lowpass(2500.0, 0.7, sample_rate),
            Biquad.peaking(180.0, 2.0, 6.0, sample_rate),
            Biquad.peaking(350.0, 1.5, 4.0, sample_rate),
            Biquad.lowshelf(250.0, 3.0, sample_rate),
        ]

    def process(self, audio: np.ndarray) -> np.ndarray:
        out = np.asarray(audio, dtype=np.float64)
        for stage in self.stages:
            out = stage.apply(out)
        return (out * self.gain).astype(np.float32)


class KarplusStrongSynth:
    """Physically modeled plucked string."""

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        duration: float = DEFAULT_DURATION,
        seed: Optional[int] = None,
    ):
        if sample_rate <= 0 or duration <= 0:
            raise ValueError("sample_rate and duration must be positive")
        self.sample_rate = sample_rate
        self.duration = duration
        self.rng = np.random.RandomState(seed)
        self.chain = ResonanceChain(sample_rate)

    @property
    def num_samples(self) -> int:
        return int(self.sample_rate * self.duration)

    def delay_length(self, frequency: float) -> int:
        if frequency <= 0:
            raise ValueError(f"Frequency must be positive, got {frequency}")
        if frequency > self.sample_rate / 2:
            raise ValueError(f"Frequency {frequency} Hz is above Nyquist ({self.sample_rate / 2} Hz)")
        return max(2, int(round(self.sample_rate / frequency)))

    @staticmethod
    def damping(frequency: float) -> float:
        return 0.994 + 0.004 * min(1.0, frequency / 330.0)

    def excitation(self, length: int) -> np.ndarray:
        """Noise burst with the pick-position comb applied."""
        noise = self.rng.uniform(-1.0, 1.0, length)
        offset = length // PICK_POSITION
        return (noise + np.roll(noise, -offset)) / 2

    def render_raw(self, frequency: float) -> np.ndarray:
        """Run the delay-line loop and return the unfiltered output."""
        length = self.delay_length(frequency)
        damping = self.damping(frequency)
        line = self.excitation(length).tolist()

        total = self.num_samples
        out = np.empty(total, dtype=np.float64)
        prev = 0.0
        pos = 0
        for i in range(total):
            current = line[pos]
            nxt_pos = pos + 1 if pos + 1 < length else 0
            avg = 0.5 * (current + line[nxt_pos])
            prev = (FEEDBACK_BLEND * avg + (1 - FEEDBACK_BLEND) * prev) * damping
            out[i] = current
            line[pos] = prev
            pos = nxt_pos
        return out

    def render(self, frequency: float) -> np.ndarray:
        """Render one plucked note through the resonance chain."""
        return self.chain.process(self.render_raw(frequency))

    def render_frequencies(self, frequencies: Sequence[float], strum: float = 0.03) -> np.ndarray:
        """Mix several plucks, each starting ``strum`` seconds after the last."""
        total = self.num_samples
        mix = np.zeros(total, dtype=np.float32)
        step = int(strum * self.sample_rate)
        for i, freq in enumerate(frequencies):
            start = i * step
            if start >= total:
                break
            note = self.render(freq)
            mix[start:] += note[: total - start]
        peak = float(np.max(np.abs(mix))) if len(mix) else 0.0
        if peak > 1.0:
            mix /= peak
        return mix

    def render_fretting(self, fretting: Fretting, tuning: Tuning = FACGCE, strum: float = 0.03) -> np.ndarray:
        """Strum every played string from low to high."""
        freqs = [tuning.frequency_for_string(i, f) for i, f in enumerate(fretting) if f is not None]
        if not freqs:
            logger.debug("Nothing to render: all strings muted")
        return self.render_frequencies(freqs, strum=strum)


__all__ = ["Biquad", "ResonanceChain", "KarplusStrongSynth", "DEFAULT_SAMPLE_RATE", "DEFAULT_DURATION"]
