import base64

import numpy as np
import pytest

from domain.models import Language
from services.voice import (
    PCM_MIME_TYPE,
    PlaybackScheduler,
    VoiceSession,
    connect_voice_session,
    decode_pcm,
    encode_pcm_blob,
    live_session_config,
)


class FakeHandle:
    def __init__(self):
        self.stopped = 0

    def stop(self):
        self.stopped += 1


class FakeOutput:
    def __init__(self, now=0.0):
        self.now = now
        self.started = []
        self.closed = 0

    def current_time(self):
        return self.now

    def start(self, frames, sample_rate, at):
        handle = FakeHandle()
        self.started.append((len(frames), sample_rate, at, handle))
        return handle

    def close(self):
        self.closed += 1


class FakeMicrophone:
    def __init__(self):
        self.stopped = 0

    def stop(self):
        self.stopped += 1


class FakeChannel:
    def __init__(self):
        self.sent = []
        self.closed = 0

    def send_realtime_input(self, media):
        self.sent.append(media)

    def close(self):
        self.closed += 1


def audio_message(n_frames, interrupted=False):
    pcm = np.zeros(n_frames, dtype="<i2").tobytes()
    content = {"modelTurn": {"parts": [{"inlineData": {"data": base64.b64encode(pcm).decode("ascii")}}]}}
    if interrupted:
        content["interrupted"] = True
    return {"serverContent": content}


def test_pcm_blob_encoding():
    blob = encode_pcm_blob(np.array([0.0, 0.5, -1.0, 1.0]))
    assert blob["mimeType"] == PCM_MIME_TYPE == "audio/pcm;rate=16000"
    pcm = np.frombuffer(base64.b64decode(blob["data"]), dtype="<i2")
    assert pcm.tolist() == [0, 16384, -32768, 32767]


def test_pcm_decode():
    data = base64.b64encode(np.array([0, 16384, -32768], dtype="<i2").tobytes()).decode("ascii")
    frames = decode_pcm(data)
    assert frames.dtype == np.float32
    assert frames.tolist() == [0.0, 0.5, -1.0]


def test_chunks_play_back_to_back():
    output = FakeOutput(now=1.0)
    scheduler = PlaybackScheduler(output)
    assert scheduler.enqueue(np.zeros(24000)) == 1.0
    assert scheduler.enqueue(np.zeros(12000)) == 2.0
    assert scheduler.next_start_time == pytest.approx(2.5)
    assert scheduler.pending == 2


def test_late_chunk_starts_now():
    output = FakeOutput(now=0.0)
    scheduler = PlaybackScheduler(output)
    scheduler.enqueue(np.zeros(2400))
    output.now = 5.0
    assert scheduler.enqueue(np.zeros(2400)) == 5.0


def test_interrupt_stops_everything_and_resets_clock():
    output = FakeOutput()
    scheduler = PlaybackScheduler(output)
    for _ in range(3):
        scheduler.enqueue(np.zeros(2400))
    scheduler.interrupt()
    assert all(h.stopped == 1 for *_, h in output.started)
    assert scheduler.next_start_time == 0.0
    assert scheduler.pending == 0


def test_chunk_ended_forgets_handle():
    output = FakeOutput()
    scheduler = PlaybackScheduler(output)
    scheduler.enqueue(np.zeros(10))
    handle = output.started[0][3]
    scheduler.chunk_ended(handle)
    scheduler.chunk_ended(handle)
    assert scheduler.pending == 0


def test_session_routes_audio_and_interruptions():
    output = FakeOutput()
    session = VoiceSession(FakeChannel(), output)
    session.handle_message(audio_message(2400))
    session.handle_message(audio_message(2400))
    assert [at for _, _, at, _ in output.started] == [0.0, pytest.approx(0.1)]
    session.handle_message({"serverContent": {"interrupted": True}})
    assert session.scheduler.pending == 0
    assert session.scheduler.next_start_time == 0.0
    session.handle_message({"setupComplete": {}})


def test_microphone_frames_are_sent_as_pcm():
    channel = FakeChannel()
    session = VoiceSession(channel, FakeOutput())
    session.send_microphone_frames(np.zeros(160))
    assert channel.sent[0]["mimeType"] == PCM_MIME_TYPE


def test_close_twice_releases_each_resource_once():
    channel, output, mic = FakeChannel(), FakeOutput(), FakeMicrophone()
    states = []
    session = VoiceSession(channel, output, mic, on_active=states.append)
    session.handle_message(audio_message(100))
    session.close()
    session.close()
    assert (channel.closed, output.closed, mic.stopped) == (1, 1, 1)
    assert states == [False]
    assert not session.active
    session.send_microphone_frames(np.zeros(10))
    assert channel.sent == []


def test_close_continues_past_a_failing_release():
    class BadChannel(FakeChannel):
        def close(self):
            raise ConnectionError("already gone")

    output, mic = FakeOutput(), FakeMicrophone()
    VoiceSession(BadChannel(), output, mic).close()
    assert output.closed == 1
    assert mic.stopped == 1


def test_connect_passes_model_and_config():
    seen = {}

    def factory(model, config):
        seen["model"], seen["config"] = model, config
        return FakeChannel()

    states = []
    session = connect_voice_session(factory, FakeOutput(), language=Language.TR, model="live-model", on_active=states.append)
    assert session.active
    assert states == [True]
    assert seen["model"] == "live-model"
    assert seen["config"]["responseModalities"] == ["AUDIO"]
    assert "Turkish" in seen["config"]["systemInstruction"]


def test_failed_connect_releases_output_and_microphone():
    def factory(model, config):
        raise ConnectionError("refused")

    output, mic = FakeOutput(), FakeMicrophone()
    with pytest.raises(ConnectionError):
        connect_voice_session(factory, output, mic, model="m")
    assert output.closed == 1
    assert mic.stopped == 1


def test_live_config_uses_prebuilt_voice():
    config = live_session_config(Language.EN)
    assert config["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]["voiceName"] == "Fenrir"
    assert "English" in config["systemInstruction"]


def test_finished_chunks_are_forgotten():
    output = FakeOutput()
    scheduler = PlaybackScheduler(output)
    for _ in range(1000):
        scheduler.enqueue(np.zeros(2400))
        output.now += 10.0
    assert scheduler.pending == 1
    scheduler.interrupt()
    assert sum(h.stopped for *_, h in output.started) == 1


def test_queued_chunks_survive_until_they_end():
    output = FakeOutput(now=0.0)
    scheduler = PlaybackScheduler(output)
    scheduler.enqueue(np.zeros(24000))
    output.now = 0.5
    scheduler.enqueue(np.zeros(24000))
    assert scheduler.pending == 2
    output.now = 1.5
    scheduler.enqueue(np.zeros(2400))
    assert scheduler.pending == 2
