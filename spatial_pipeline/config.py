"""
Pipeline configuration.

Values come from the process environment, optionally seeded from a .env
file. Without OPENAI_API_KEY the providers run in mock mode.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Union
from pathlib import Path

from dotenv import load_dotenv

PathLike = Union[str, Path]


def _env_value(key: str) -> Optional[str]:
    """Read an env var with any trailing "# comment" and whitespace removed."""
    value = os.environ.get(key)
    if value is None:
        return None
    if "#" in value:
        value = value.split("#")[0]
    value = value.strip()
    return value or None


def _parse_int_env(key: str, default: int) -> int:
    value = _env_value(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _parse_float_env(key: str, default: float) -> float:
    value = _env_value(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_bool_env(key: str, default: bool) -> bool:
    value = _env_value(key)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass
class PipelineConfig:
    """Provider, playback and logging settings."""

    openai_api_key: Optional[str] = None

    vision_model: str = "gpt-4o"
    vision_max_tokens: int = 300
    vision_temperature: float = 0.5
    transcribe_model: str = "whisper-1"

    tts_model: str = "tts-1"
    tts_voice: str = "alloy"
    tts_urgent_voice: str = "nova"
    tts_format: str = "mp3"

    output_device: Optional[int] = None  # None = system default output
    block_size: int = 1024

    log_level: str = "INFO"
    log_json: bool = True

    @property
    def mock_mode(self) -> bool:
        return not self.openai_api_key

    @classmethod
    def from_env(cls, env_path: Optional[PathLike] = None) -> "PipelineConfig":
        """
        Load configuration from the environment.

        The .env file at env_path (or the one python-dotenv finds when no path
        is given) is loaded first; variables already set in the environment win.
        """
        load_dotenv(dotenv_path=env_path)

        output_device = _parse_int_env("OUTPUT_DEVICE", -1)
        block_size = _parse_int_env("PLAYBACK_BLOCK_SIZE", cls.block_size)

        return cls(
            openai_api_key=_env_value("OPENAI_API_KEY"),
            vision_model=_env_value("VISION_MODEL") or cls.vision_model,
            vision_max_tokens=_parse_int_env("VISION_MAX_TOKENS", cls.vision_max_tokens),
            vision_temperature=_parse_float_env("VISION_TEMPERATURE", cls.vision_temperature),
            transcribe_model=_env_value("TRANSCRIBE_MODEL") or cls.transcribe_model,
            tts_model=_env_value("TTS_MODEL") or cls.tts_model,
            tts_voice=_env_value("TTS_VOICE") or cls.tts_voice,
            tts_urgent_voice=_env_value("TTS_URGENT_VOICE") or cls.tts_urgent_voice,
            tts_format=_env_value("TTS_FORMAT") or cls.tts_format,
            output_device=None if output_device < 0 else output_device,
            block_size=block_size if block_size > 0 else cls.block_size,
            log_level=(_env_value("LOG_LEVEL") or cls.log_level).upper(),
            log_json=_parse_bool_env("LOG_JSON", cls.log_json),
        )
