import io
import threading

import numpy as np
import pytest
import soundfile as sf


class FakeOutputStream:
    """Stands in for sounddevice.OutputStream; records what gets written."""

    def __init__(self, samplerate, channels, device=None, blocksize=0, gate=None):
        self.samplerate = samplerate
        self.channels = channels
        self.device = device
        self.blocksize = blocksize
        self.blocks = []
        self.stopped = False
        self.aborted = False
        self.closed = False
        self._gate = gate

    def write(self, data):
        if self._gate is not None:
            self._gate.wait(5.0)
        self.blocks.append(np.array(data, copy=True))

    def stop(self):
        self.stopped = True

    def abort(self):
        self.aborted = True

    def close(self):
        self.closed = True

    @property
    def written(self):
        if not self.blocks:
            return np.zeros((0, self.channels), dtype=np.float32)
        return np.concatenate(self.blocks)


class StreamRecorder:
    """Stream factory that keeps every stream it opened."""

    def __init__(self, gate=None):
        self.streams = []
        self.gate = gate

    def __call__(self, samplerate, channels, device=None, blocksize=0):
        stream = FakeOutputStream(samplerate, channels, device, blocksize, gate=self.gate)
        self.streams.append(stream)
        return stream


@pytest.fixture
def stream_recorder():
    return StreamRecorder()


@pytest.fixture
def gated_recorder():
    gate = threading.Event()
    recorder = StreamRecorder(gate=gate)
    yield recorder
    gate.set()


def make_wav(seconds=0.1, sample_rate=16000, channels=1, amplitude=0.5):
    frames = int(seconds * sample_rate)
    t = np.arange(frames) / sample_rate
    tone = (amplitude * np.sin(2 * np.pi * 440 * t)).astype(np.float32)
    data = tone if channels == 1 else np.stack([tone] * channels, axis=1)
    buf = io.BytesIO()
    sf.write(buf, data, sample_rate, format="WAV", subtype="FLOAT")
    return buf.getvalue()


def make_mp3(seconds=0.2, sample_rate=24000, amplitude=0.5):
    """Compressed clip in the format the speech provider returns."""
    frames = int(seconds * sample_rate)
    t = np.arange(frames) / sample_rate
    tone = (amplitude * np.sin(2 * np.pi * 440 * t)).astype(np.float32)
    buf = io.BytesIO()
    sf.write(buf, tone, sample_rate, format="MP3")
    return buf.getvalue()


@pytest.fixture
def wav_bytes():
    return make_wav()
