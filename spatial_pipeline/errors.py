"""
Error taxonomy for the spatial narration pipeline.

Playback-side errors (DecodeError, EmptyInputError, OutputDeviceError) are
reported back to the caller inside a PlaybackResult; they are raised only by
the low-level helpers in playback.py. ProviderError and InvalidRequestError
are raised to the caller.
"""

from __future__ import annotations

from typing import Optional


class SpatialPipelineError(Exception):
    """Base class for every error raised by this package."""


class EmptyInputError(SpatialPipelineError):
    """No audio payload was supplied (upstream synthesis produced nothing)."""


class DecodeError(SpatialPipelineError):
    """The audio payload could not be decoded as audio."""


class OutputDeviceError(SpatialPipelineError):
    """The stereo output device could not be opened."""


class InvalidRequestError(SpatialPipelineError):
    """A scene request is missing its image or carries malformed data."""


class ProviderError(SpatialPipelineError):
    """
    An upstream AI provider call failed.

    Carries the service name ("transcription", "vision", "speech") and the
    HTTP status returned by the provider when the SDK exposes one.
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(f"{service} provider failed: {message}")
        self.service = service
        self.message = message
        self.status_code = status_code
