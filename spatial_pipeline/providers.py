"""
OpenAI-backed collaborators: speech-to-text, scene description and
text-to-speech.

Without an API key every call returns a canned answer so the pipeline can
be exercised offline; the mock speech payload is empty, which the player
treats as "nothing to play".
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import Optional

from openai import OpenAI, OpenAIError

from .config import PipelineConfig
from .errors import ProviderError
from .logging_setup import Component, get_logger
from .prompts import DEFAULT_QUERY_TYPE, prompt_for
from .text_cleaning import clean_description, clean_transcript

logger = get_logger(Component.PROVIDERS)

MOCK_TRANSCRIPT = "(mock) What do you see?"
MOCK_DESCRIPTION = "(mock) Desk at 12 o'clock, 4 feet ahead. CAUTION: none."

URGENT = "urgent"
NORMAL = "normal"

_URGENT_MARKER = re.compile(r"\bURGENT\b")


@dataclass
class Transcript:
    text: str
    confidence: float


def urgency_for(description: Optional[str]) -> str:
    """Descriptions flagged URGENT by the vision prompt are spoken urgently."""
    if description and _URGENT_MARKER.search(description):
        return URGENT
    return NORMAL


def _status_code(exc: OpenAIError) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    return status if isinstance(status, int) else None


class SceneProviders:
    """
    Wrapper around the OpenAI client for the three provider calls the
    pipeline needs. The client can be injected (tests, custom base URLs).
    """

    def __init__(self, config: PipelineConfig, client: Optional[OpenAI] = None) -> None:
        self._config = config
        if client is None and not config.mock_mode:
            client = OpenAI(api_key=config.openai_api_key)
        self._client = client

    @property
    def mock_mode(self) -> bool:
        return self._client is None

    def transcribe(self, audio: bytes, filename: str = "audio.webm") -> Transcript:
        """Transcribe a recorded voice command."""
        if self.mock_mode:
            return Transcript(MOCK_TRANSCRIPT, 0.5)

        try:
            resp = self._client.audio.transcriptions.create(
                model=self._config.transcribe_model,
                file=(filename, audio, "audio/webm"),
            )
        except OpenAIError as exc:
            logger.error("Transcription failed", error=str(exc))
            raise ProviderError("transcription", str(exc), _status_code(exc)) from exc

        text = clean_transcript(getattr(resp, "text", ""))
        logger.info("Transcribed voice command", chars=len(text))
        return Transcript(text, 1.0)

    def describe_scene(self, image: bytes, query_type: str = DEFAULT_QUERY_TYPE) -> str:
        """Describe a JPEG camera frame using clock positions."""
        if self.mock_mode:
            return MOCK_DESCRIPTION

        image_url = "data:image/jpeg;base64," + base64.b64encode(image).decode("ascii")
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt_for(query_type)},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]

        try:
            response = self._client.chat.completions.create(
                model=self._config.vision_model,
                messages=messages,
                max_tokens=self._config.vision_max_tokens,
                temperature=self._config.vision_temperature,
            )
        except OpenAIError as exc:
            logger.error("Scene analysis failed", error=str(exc))
            raise ProviderError("vision", str(exc), _status_code(exc)) from exc

        if not response.choices:
            return ""
        description = clean_description(response.choices[0].message.content)
        logger.info("Scene described", query_type=query_type, chars=len(description))
        return description

    def synthesize(self, text: str, urgency: str = NORMAL) -> bytes:
        """
        Generate speech audio for the given text and return the encoded
        clip. Empty text (or mock mode) gives an empty payload.
        """
        if not text or self.mock_mode:
            return b""

        urgent = urgency == URGENT
        try:
            resp = self._client.audio.speech.create(
                model=self._config.tts_model,
                voice=self._config.tts_urgent_voice if urgent else self._config.tts_voice,
                input=text,
                speed=1.1 if urgent else 1.0,
                response_format=self._config.tts_format,
            )
            audio = resp.read()
        except OpenAIError as exc:
            logger.error("Speech synthesis failed", error=str(exc))
            raise ProviderError("speech", str(exc), _status_code(exc)) from exc

        logger.info("Speech synthesized", urgency=urgency, bytes=len(audio))
        return audio
