"""
Live voice assistant session.

The bidirectional audio transport is injected (``LiveChannelFactory``); this
module owns what happens at its edges: microphone frames go out as 16 kHz
PCM16 blobs, inbound 24 kHz chunks are played back-to-back without gaps or
overlap, an interruption stops everything queued, and ``close()`` releases
each resource exactly once.
"""
from __future__ import annotations

import base64
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

import numpy as np

from domain.models import Language
from domain.prompts import voice_instruction
from services.config import get_settings

logger = logging.getLogger(__name__)

INPUT_SAMPLE_RATE = 16000
OUTPUT_SAMPLE_RATE = 24000
PCM_MIME_TYPE = f"audio/pcm;rate={INPUT_SAMPLE_RATE}"
VOICE_NAME = "Fenrir"


def encode_pcm_blob(frames: np.ndarray) -> Dict[str, str]:
    """Float frames in [-1, 1] -> base64 little-endian PCM16 media blob."""
    pcm = np.clip(np.asarray(frames, dtype=np.float64) * 32768, -32768, 32767).astype("<i2")
    return {"data": base64.b64encode(pcm.tobytes()).decode("ascii"), "mimeType": PCM_MIME_TYPE}


def decode_pcm(data: str) -> np.ndarray:
    """Base64 PCM16 (mono) -> float32 frames in [-1, 1)."""
    pcm = np.frombuffer(base64.b64decode(data), dtype="<i2")
    return pcm.astype(np.float32) / 32768.0


class PlaybackHandle(Protocol):
    def stop(self) -> None: ...


class AudioOutput(Protocol):
    def current_time(self) -> float: ...

    def start(self, frames: np.ndarray, sample_rate: int, at: float) -> PlaybackHandle: ...

    def close(self) -> None: ...


class Microphone(Protocol):
    def stop(self) -> None: ...


class LiveChannel(Protocol):
    def send_realtime_input(self, media: Dict[str, str]) -> None: ...

    def close(self) -> None: ...


LiveChannelFactory = Callable[[str, Dict[str, Any]], LiveChannel]


class PlaybackScheduler:
    """Queues inbound chunks end to end on the output's clock."""

    def __init__(self, output: AudioOutput, sample_rate: int = OUTPUT_SAMPLE_RATE) -> None:
        self.output = output
        self.sample_rate = sample_rate
        self.next_start_time = 0.0
        # (handle, scheduled end) for chunks that may still be sounding
        self._playing: List[Tuple[PlaybackHandle, float]] = []

    def enqueue(self, frames: np.ndarray) -> float:
        """Schedule a chunk at the later of now and the previous chunk's end; return its start."""
        now = self.output.current_time()
        self._playing = [(h, end) for h, end in self._playing if end > now]
        start = max(self.next_start_time, now)
        handle = self.output.start(frames, self.sample_rate, start)
        self.next_start_time = start + len(frames) / self.sample_rate
        self._playing.append((handle, self.next_start_time))
        return start

    def chunk_ended(self, handle: PlaybackHandle) -> None:
        self._playing = [(h, end) for h, end in self._playing if h is not handle]

    def interrupt(self) -> None:
        """Stop every queued chunk and reset the scheduling clock."""
        playing, self._playing = self._playing, []
        for handle, _ in playing:
            try:
                handle.stop()
            except Exception:
                logger.debug("Stopping a voice chunk failed", exc_info=True)
        self.next_start_time = 0.0

    @property
    def pending(self) -> int:
        return len(self._playing)


def live_session_config(language: Language = Language.EN) -> Dict[str, Any]:
    return {
        "responseModalities": ["AUDIO"],
        "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": VOICE_NAME}}},
        "systemInstruction": voice_instruction(language),
    }


class VoiceSession:
    def __init__(
        self,
        channel: LiveChannel,
        output: AudioOutput,
        microphone: Optional[Microphone] = None,
        on_active: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self.channel = channel
        self.output = output
        self.microphone = microphone
        self.on_active = on_active
        self.scheduler = PlaybackScheduler(output)
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed

    def send_microphone_frames(self, frames: np.ndarray) -> None:
        if self._closed:
            return
        self.channel.send_realtime_input(encode_pcm_blob(frames))

    def handle_message(self, message: Dict[str, Any]) -> None:
        """Route one server message: play any audio chunk, honour interruptions."""
        if self._closed:
            return
        content = message.get("serverContent") or {}
        parts = (content.get("modelTurn") or {}).get("parts") or []
        data = (parts[0].get("inlineData") or {}).get("data") if parts else None
        if data:
            self.scheduler.enqueue(decode_pcm(data))
        if content.get("interrupted"):
            self.scheduler.interrupt()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.scheduler.interrupt()
        releases = [("channel", self.channel.close), ("output", self.output.close)]
        if self.microphone is not None:
            releases.append(("microphone", self.microphone.stop))
        for name, release in releases:
            try:
                release()
            except Exception:
                logger.warning("Releasing voice %s failed", name, exc_info=True)
        if self.on_active is not None:
            self.on_active(False)
        logger.info("Voice session closed")


def connect_voice_session(
    factory: LiveChannelFactory,
    output: AudioOutput,
    microphone: Optional[Microphone] = None,
    language: Language = Language.EN,
    model: Optional[str] = None,
    on_active: Optional[Callable[[bool], None]] = None,
) -> VoiceSession:
    """Open the live channel; on failure the output and microphone are released before re-raising."""
    try:
        channel = factory(model or get_settings().GEMINI_LIVE_MODEL, live_session_config(language))
    except Exception:
        output.close()
        if microphone is not None:
            microphone.stop()
        raise
    session = VoiceSession(channel, output, microphone, on_active)
    if on_active is not None:
        on_active(True)
    logger.info("Voice session opened")
    return session
