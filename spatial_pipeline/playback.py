"""
Spatial playback: decode a synthesized speech clip and play it through a
stereo output with a fixed pan.

play() returns as soon as the clip is decoded and the output stream is
running; the clip itself is written to the device by a worker thread. The
returned PlaybackHandle lets the caller cancel or wait on it.
"""

from __future__ import annotations

import io
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

import numpy as np
import soundfile as sf

from .errors import DecodeError, EmptyInputError, OutputDeviceError
from .logging_setup import Component, get_logger
from .panner import StereoPanner, clamp_pan

logger = get_logger(Component.PLAYBACK)

OUTPUT_CHANNELS = 2

StreamFactory = Callable[..., Any]


def decode_audio(payload: Optional[bytes]) -> Tuple[np.ndarray, int]:
    """
    Decode an in-memory audio clip (MP3, WAV, OGG, FLAC, ...).

    Returns float32 frames of shape (frames, channels) and the sample rate.
    """
    if not payload:
        raise EmptyInputError("no audio payload supplied")

    try:
        data, sample_rate = sf.read(io.BytesIO(payload), dtype="float32", always_2d=True)
    except RuntimeError as exc:  # libsndfile errors
        raise DecodeError(f"could not decode audio payload: {exc}") from exc

    if data.shape[0] == 0:
        raise DecodeError("audio payload contains no frames")
    return data, int(sample_rate)


def open_output_stream(
    samplerate: int,
    channels: int = OUTPUT_CHANNELS,
    device: Optional[int] = None,
    blocksize: int = 0,
):
    """Open and start a float32 output stream on the host audio device."""
    # PortAudio is loaded only when a real device is needed.
    try:
        import sounddevice as sd
    except OSError as exc:
        raise OutputDeviceError(f"PortAudio library not available: {exc}") from exc

    try:
        stream = sd.OutputStream(
            samplerate=samplerate,
            channels=channels,
            dtype="float32",
            device=device,
            blocksize=blocksize,
        )
        stream.start()
    except (sd.PortAudioError, ValueError) as exc:
        raise OutputDeviceError(f"could not open output device: {exc}") from exc
    return stream


class PlaybackHandle:
    """
    An in-flight playback.

    A worker thread writes the rendered frames to the stream block by block.
    cancel() asks it to stop after the current block and aborts the stream;
    a clip that runs to the end is drained before the stream is closed.
    """

    def __init__(self, stream, frames: np.ndarray, sample_rate: int, block_size: int = 1024) -> None:
        self._stream = stream
        self._frames = frames
        self.sample_rate = sample_rate
        self._block_size = max(1, int(block_size))
        self._cancel = threading.Event()
        self._finished = threading.Event()
        self._frames_written = 0
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, name="spatial-playback", daemon=True)

    @property
    def total_frames(self) -> int:
        return int(self._frames.shape[0])

    @property
    def duration(self) -> float:
        """Clip length in seconds."""
        return self.total_frames / self.sample_rate if self.sample_rate > 0 else 0.0

    @property
    def frames_written(self) -> int:
        return self._frames_written

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def start(self) -> "PlaybackHandle":
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Request the playback to stop. Does not block; use wait() to join."""
        if not self._finished.is_set():
            self._cancel.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until playback finishes. Returns False on timeout."""
        return self._finished.wait(timeout)

    def _run(self) -> None:
        try:
            for offset in range(0, self.total_frames, self._block_size):
                if self._cancel.is_set():
                    break
                block = self._frames[offset:offset + self._block_size]
                self._stream.write(block)
                self._frames_written += block.shape[0]
        except Exception as exc:
            self.error = exc
            logger.exception("Playback stream write failed", frames_written=self._frames_written)
        finally:
            self._close_stream()
            self._finished.set()

        if self._cancel.is_set():
            logger.info("Playback cancelled", frames_written=self._frames_written)
        elif self.error is None:
            logger.debug("Playback finished", duration_s=round(self.duration, 3))

    def _close_stream(self) -> None:
        try:
            if self._cancel.is_set() or self.error is not None:
                self._stream.abort()
            else:
                self._stream.stop()
            self._stream.close()
        except Exception as exc:
            if self.error is None:
                self.error = exc
            logger.exception("Closing playback stream failed")


class PlaybackStatus(str, Enum):
    STARTED = "started"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class PlaybackResult:
    """Outcome of a play() call."""

    status: PlaybackStatus
    pan: float = 0.0
    handle: Optional[PlaybackHandle] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is not PlaybackStatus.FAILED

    @property
    def started(self) -> bool:
        return self.status is PlaybackStatus.STARTED


class SpatialPlayer:
    """
    Plays synthesized clips through a stereo output with a fixed pan.

    The player keeps no state between calls: every play() opens its own
    stream and returns its own handle. Overlapping requests are not
    arbitrated here; cancelling a previous handle is up to the caller.
    """

    def __init__(
        self,
        device: Optional[int] = None,
        block_size: int = 1024,
        stream_factory: StreamFactory = open_output_stream,
    ) -> None:
        self.device = device
        self.block_size = block_size
        self._stream_factory = stream_factory

    def play(self, payload: Optional[bytes], pan: float) -> PlaybackResult:
        pan = clamp_pan(pan)

        try:
            samples, sample_rate = decode_audio(payload)
        except EmptyInputError:
            logger.debug("No audio payload; playback skipped", pan=pan)
            return PlaybackResult(PlaybackStatus.SKIPPED, pan=pan)
        except DecodeError as exc:
            logger.warning("Audio decode failed; playback skipped", error=str(exc), bytes=len(payload))
            return PlaybackResult(PlaybackStatus.FAILED, pan=pan, error=exc)

        frames = StereoPanner(pan).process(samples)

        try:
            stream = self._stream_factory(
                samplerate=sample_rate,
                channels=OUTPUT_CHANNELS,
                device=self.device,
                blocksize=self.block_size,
            )
        except OutputDeviceError as exc:
            logger.error("Output device unavailable", error=str(exc))
            return PlaybackResult(PlaybackStatus.FAILED, pan=pan, error=exc)

        handle = PlaybackHandle(stream, frames, sample_rate, self.block_size).start()
        logger.info(
            "Playback started",
            pan=pan,
            sample_rate=sample_rate,
            duration_s=round(handle.duration, 3),
        )
        return PlaybackResult(PlaybackStatus.STARTED, pan=pan, handle=handle)
