"""
Synthesized audio cues for the simulation room: a two-blast referee whistle
and a crowd roar. Cues are rendered to WAV bytes with numpy and handed to an
optional sink; without a sink, or when anything fails, a cue does nothing.
"""
from __future__ import annotations

import io
import logging
import wave
from typing import Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 24000

WHISTLE_START_HZ = 1500.0
WHISTLE_END_HZ = 800.0
WHISTLE_GAIN = 0.5
WHISTLE_FLOOR = 0.01
BLAST_SECONDS = 0.5
SECOND_BLAST_OFFSET = 0.6

CROWD_SECONDS = 2.0
CROWD_CUTOFF_HZ = 800.0


class AudioSink(Protocol):
    def play(self, wav_bytes: bytes) -> None: ...


def exponential_ramp(start: float, end: float, ramp_seconds: float, n: int, sample_rate: int) -> np.ndarray:
    """Exponential glide from start to end over ramp_seconds, then hold at end."""
    t = np.arange(n) / sample_rate
    progress = np.clip(t / ramp_seconds, 0.0, 1.0)
    return start * (end / start) ** progress


def triangle_blast(sample_rate: int, sweep_seconds: float) -> np.ndarray:
    n = int(BLAST_SECONDS * sample_rate)
    freq = exponential_ramp(WHISTLE_START_HZ, WHISTLE_END_HZ, sweep_seconds, n, sample_rate)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    wave_ = (2 / np.pi) * np.arcsin(np.sin(phase))
    gain = exponential_ramp(WHISTLE_GAIN, WHISTLE_FLOOR, BLAST_SECONDS, n, sample_rate)
    return wave_ * gain


def whistle_samples(sample_rate: int = DEFAULT_SAMPLE_RATE) -> np.ndarray:
    """Two descending triangle-wave blasts, the second 0.6s after the first."""
    first = triangle_blast(sample_rate, 0.1)
    second = triangle_blast(sample_rate, 0.2)
    offset = int(SECOND_BLAST_OFFSET * sample_rate)
    out = np.zeros(offset + len(second))
    out[: len(first)] += first
    out[offset:] += second
    return out


def lowpass(samples: np.ndarray, cutoff_hz: float, sample_rate: int, taps: int = 101) -> np.ndarray:
    """Windowed-sinc FIR low-pass filter."""
    n = np.arange(taps) - (taps - 1) / 2
    kernel = np.sinc(2 * cutoff_hz / sample_rate * n) * np.hamming(taps)
    kernel /= kernel.sum()
    return np.convolve(samples, kernel, mode="same")


def crowd_noise_samples(
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    duration: float = CROWD_SECONDS,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Low-passed white noise swelling 0.1 -> 0.5 in 0.5s, then fading to 0.01."""
    rng = rng or np.random.default_rng()
    n = int(duration * sample_rate)
    noise = lowpass(rng.uniform(-1.0, 1.0, n), CROWD_CUTOFF_HZ, sample_rate)
    rise_n = min(int(0.5 * sample_rate), n)
    envelope = np.concatenate([
        exponential_ramp(0.1, 0.5, 0.5, rise_n, sample_rate),
        exponential_ramp(0.5, 0.01, max(duration - 0.5, 1e-3), n - rise_n, sample_rate),
    ])
    return noise * envelope


def to_wav(samples: np.ndarray, sample_rate: int = DEFAULT_SAMPLE_RATE) -> bytes:
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(sample_rate)
        w.writeframes(pcm.tobytes())
    return buf.getvalue()


class AudioCueSynthesizer:
    """Fire-and-forget cues; never raises."""

    def __init__(
        self,
        sink: Optional[AudioSink] = None,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.sink = sink
        self.sample_rate = sample_rate
        self.rng = rng or np.random.default_rng()

    def play_whistle(self) -> None:
        self._play("whistle")

    def play_crowd_noise(self) -> None:
        self._play("crowd")

    def _play(self, cue: str) -> None:
        if self.sink is None:
            return
        try:
            if cue == "whistle":
                samples = whistle_samples(self.sample_rate)
            else:
                samples = crowd_noise_samples(self.sample_rate, rng=self.rng)
            self.sink.play(to_wav(samples, self.sample_rate))
        except Exception:
            logger.debug("Audio cue %s failed", cue, exc_info=True)
