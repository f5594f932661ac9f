"""
Scene narration: voice command + camera frame in, panned speech out.

Each run is described by a SceneRequest value instead of shared "last
captured" state, so a run can be reproduced from its request alone.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from .direction import clock_positions, extract_pan
from .errors import InvalidRequestError
from .logging_setup import Component, get_logger
from .playback import PlaybackHandle, PlaybackResult, SpatialPlayer
from .prompts import DEFAULT_QUERY_TYPE
from .providers import SceneProviders, Transcript, urgency_for

logger = get_logger(Component.PIPELINE)


def _decode_b64(value: str, field: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidRequestError(f"{field} is not valid base64") from exc


@dataclass(frozen=True)
class SceneRequest:
    """One capture: a JPEG frame and, optionally, the recorded voice command."""

    image: bytes
    audio: Optional[bytes] = None
    query_type: str = DEFAULT_QUERY_TYPE

    def __post_init__(self) -> None:
        if not self.image:
            raise InvalidRequestError("image is required")

    @classmethod
    def from_base64(
        cls,
        image_base64: Optional[str],
        audio_base64: Optional[str] = None,
        query_type: str = DEFAULT_QUERY_TYPE,
    ) -> "SceneRequest":
        """Build a request from the base64 fields the browser client sends."""
        if not image_base64:
            raise InvalidRequestError("imageBase64 is required")
        image = _decode_b64(image_base64, "imageBase64")
        audio = _decode_b64(audio_base64, "audioBase64") if audio_base64 else None
        return cls(image=image, audio=audio, query_type=query_type or DEFAULT_QUERY_TYPE)


@dataclass
class SceneResult:
    transcript: Optional[Transcript]
    description: str
    pan: float
    playback: PlaybackResult


class SceneNarrator:
    """
    Sequences the providers, the direction extractor and the player.

    Only one narration sounds at a time: starting a new playback cancels the
    previous one, since a fresh description supersedes an older one.
    """

    def __init__(self, providers: SceneProviders, player: SpatialPlayer) -> None:
        self._providers = providers
        self._player = player
        self._current: Optional[PlaybackHandle] = None

    @property
    def current_playback(self) -> Optional[PlaybackHandle]:
        return self._current

    def interrupt(self) -> None:
        """Cancel the playback started by the previous narration, if any."""
        if self._current is not None and not self._current.done:
            logger.info("Interrupting previous playback")
            self._current.cancel()
        self._current = None

    def narrate(self, description: str, audio: Optional[bytes]) -> PlaybackResult:
        """Pan the synthesized description according to its clock positions and play it."""
        pan = extract_pan(description)
        logger.debug("Direction extracted", pan=pan, clock_positions=clock_positions(description))

        self.interrupt()
        result = self._player.play(audio, pan)
        if result.handle is not None:
            self._current = result.handle
        return result

    def run(self, request: SceneRequest) -> SceneResult:
        """Transcribe, describe, synthesize and play one capture."""
        transcript = None
        if request.audio:
            transcript = self._providers.transcribe(request.audio)

        description = self._providers.describe_scene(request.image, request.query_type)
        audio = self._providers.synthesize(description, urgency_for(description)) if description else b""

        playback = self.narrate(description, audio)
        logger.info(
            "Scene narrated",
            query_type=request.query_type,
            pan=playback.pan,
            playback=playback.status.value,
        )
        return SceneResult(
            transcript=transcript,
            description=description,
            pan=playback.pan,
            playback=playback,
        )
