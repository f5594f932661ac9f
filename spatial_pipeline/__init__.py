"""
Spatial narration pipeline: camera frame -> scene description -> speech
played back panned toward the side the description points to.

Modules:
- direction: clock-position phrases -> stereo pan value
- panner: equal-power stereo pan node
- playback: decode + cancellable stereo playback
- providers: OpenAI speech-to-text / vision / text-to-speech adapters
- pipeline: request values and the narrator that sequences the stages
- config, logging_setup, errors, prompts, text_cleaning: supporting pieces
"""

from .direction import Direction, extract_pan, infer_direction
from .errors import DecodeError, EmptyInputError, ProviderError
from .pipeline import SceneNarrator, SceneRequest, SceneResult
from .playback import PlaybackHandle, PlaybackResult, PlaybackStatus, SpatialPlayer

__all__ = [
    "Direction",
    "extract_pan",
    "infer_direction",
    "DecodeError",
    "EmptyInputError",
    "ProviderError",
    "SceneNarrator",
    "SceneRequest",
    "SceneResult",
    "PlaybackHandle",
    "PlaybackResult",
    "PlaybackStatus",
    "SpatialPlayer",
]

__version__ = "0.1.0"
