"""
Tests for the OpenAI provider adapters.

The OpenAI client is replaced by a small fake that records each request.
"""
import base64
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from spatial_pipeline.config import PipelineConfig
from spatial_pipeline.errors import ProviderError
from spatial_pipeline.providers import (
    MOCK_DESCRIPTION,
    MOCK_TRANSCRIPT,
    SceneProviders,
    urgency_for,
)


class _Endpoint:
    def __init__(self, response=None, error=None):
        self.calls = []
        self._response = response
        self._error = error

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return self._response


class _SpeechResponse:
    def __init__(self, data):
        self._data = data

    def read(self):
        return self._data


def fake_client(transcript="  what is   in front of me ", description="Chair at 9 o'clock", audio=b"ID3audio", error=None):
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=description))]
    )
    return SimpleNamespace(
        audio=SimpleNamespace(
            transcriptions=_Endpoint(SimpleNamespace(text=transcript), error),
            speech=_Endpoint(_SpeechResponse(audio), error),
        ),
        chat=SimpleNamespace(completions=_Endpoint(completion, error)),
    )


@pytest.fixture
def config():
    return PipelineConfig(openai_api_key="sk-test")


def test_mock_mode_without_api_key():
    providers = SceneProviders(PipelineConfig())
    assert providers.mock_mode

    transcript = providers.transcribe(b"webm")
    assert transcript.text == MOCK_TRANSCRIPT
    assert transcript.confidence == 0.5
    assert providers.describe_scene(b"jpeg") == MOCK_DESCRIPTION
    assert providers.synthesize("Desk at 12 o'clock") == b""


def test_transcribe_uses_whisper_and_cleans_text(config):
    client = fake_client()
    transcript = SceneProviders(config, client=client).transcribe(b"webm-bytes")

    assert transcript.text == "what is in front of me"
    assert transcript.confidence == 1.0
    call = client.audio.transcriptions.calls[0]
    assert call["model"] == "whisper-1"
    assert call["file"] == ("audio.webm", b"webm-bytes", "audio/webm")


def test_describe_scene_sends_prompt_and_image(config):
    client = fake_client()
    description = SceneProviders(config, client=client).describe_scene(b"\xff\xd8jpeg")

    assert description == "Chair at 9 o'clock"
    call = client.chat.completions.calls[0]
    assert call["model"] == "gpt-4o"
    assert call["max_tokens"] == 300
    assert call["temperature"] == 0.5

    content = call["messages"][0]["content"]
    assert "CLOCK POSITIONS" in content[0]["text"]
    expected_url = "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg").decode()
    assert content[1]["image_url"]["url"] == expected_url


def test_unknown_query_type_falls_back_to_full_scene(config):
    client = fake_client()
    SceneProviders(config, client=client).describe_scene(b"jpeg", query_type="read_text")
    prompt = client.chat.completions.calls[0]["messages"][0]["content"][0]["text"]
    assert prompt.startswith("Analyze this scene for someone with low vision.")


def test_missing_description_content_is_empty(config):
    client = fake_client(description=None)
    assert SceneProviders(config, client=client).describe_scene(b"jpeg") == ""


def test_synthesize_normal_voice(config):
    client = fake_client()
    audio = SceneProviders(config, client=client).synthesize("Chair at 9 o'clock")

    assert audio == b"ID3audio"
    call = client.audio.speech.calls[0]
    assert call["model"] == "tts-1"
    assert call["voice"] == "alloy"
    assert call["speed"] == 1.0
    assert call["input"] == "Chair at 9 o'clock"
    assert call["response_format"] == "mp3"


def test_synthesize_urgent_voice(config):
    client = fake_client()
    SceneProviders(config, client=client).synthesize("Stairs", urgency="urgent")
    call = client.audio.speech.calls[0]
    assert call["voice"] == "nova"
    assert call["speed"] == 1.1


def test_synthesize_empty_text_skips_request(config):
    client = fake_client()
    assert SceneProviders(config, client=client).synthesize("") == b""
    assert client.audio.speech.calls == []


@pytest.mark.parametrize(
    "method, args, service",
    [
        ("transcribe", (b"webm",), "transcription"),
        ("describe_scene", (b"jpeg",), "vision"),
        ("synthesize", ("hello",), "speech"),
    ],
)
def test_provider_errors_are_wrapped(config, method, args, service):
    client = fake_client(error=OpenAIError("quota exceeded"))
    providers = SceneProviders(config, client=client)

    with pytest.raises(ProviderError) as excinfo:
        getattr(providers, method)(*args)

    assert excinfo.value.service == service
    assert "quota exceeded" in str(excinfo.value)
    assert excinfo.value.status_code is None


def test_status_code_is_carried_over(config):
    error = OpenAIError("rate limited")
    error.status_code = 429
    providers = SceneProviders(config, client=fake_client(error=error))

    with pytest.raises(ProviderError) as excinfo:
        providers.describe_scene(b"jpeg")
    assert excinfo.value.status_code == 429


def test_urgency_for():
    assert urgency_for("Stairs at 3 o'clock. URGENT: drop-off") == "urgent"
    assert urgency_for("Desk at 12 o'clock. CAUTION: none.") == "normal"
    assert urgency_for("Desk at 12 o'clock. Nothing urgent, path is clear.") == "normal"
    assert urgency_for("") == "normal"
    assert urgency_for(None) == "normal"
