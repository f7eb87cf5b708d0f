from types import SimpleNamespace

import pytest
from google.genai import errors as genai_errors

from pinsound.errors import ConfigurationError, UpstreamError
from pinsound.infrastructure.gemini import (
    DEFAULT_MODEL,
    GenerationClient,
    build_recommendation_prompt,
    build_story_prompt,
)


class ModelsStub:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def _client(models, model=DEFAULT_MODEL):
    created = []

    def factory(key):
        created.append(key)
        return SimpleNamespace(models=models)

    return GenerationClient("gemini-key", model=model, client_factory=factory), created


@pytest.mark.unit
def test_prompts_name_emotion_and_labels():
    assert build_recommendation_prompt("joy", ["Beach", "Sunset"]) == (
        "Detected emotion: joy. Context labels: Beach, Sunset. "
        "Recommend songs matching this mood as **Song - Artist**."
    )
    assert build_story_prompt("neutral", []) == (
        "Detected emotion: neutral. Context labels: . "
        "Write a short story that reflects this mood and setting."
    )


@pytest.mark.unit
def test_recommend_and_story_use_configured_model():
    models = ModelsStub(text="**Clocks - Coldplay**")
    client, created = _client(models, model="gemini-test")

    assert client.recommend_songs("joy", ["Beach"]) == "**Clocks - Coldplay**"
    client.write_story("joy", ["Beach"])

    assert created == ["gemini-key"]
    assert [m for m, _ in models.calls] == ["gemini-test", "gemini-test"]
    assert models.calls[0][1] == build_recommendation_prompt("joy", ["Beach"])
    assert models.calls[1][1] == build_story_prompt("joy", ["Beach"])


@pytest.mark.unit
def test_empty_response_text_becomes_empty_string():
    client, _ = _client(ModelsStub(text=None))
    assert client.write_story("sorrow", ["Rain"]) == ""


@pytest.mark.unit
def test_api_error_is_wrapped_with_vendor_details():
    error = genai_errors.APIError(
        400, {"error": {"code": 400, "message": "API key not valid.", "status": "INVALID_ARGUMENT"}}
    )
    client, _ = _client(ModelsStub(error=error))

    with pytest.raises(UpstreamError) as info:
        client.recommend_songs("joy", ["Beach"])

    assert info.value.service == "gemini"
    assert info.value.status_code == 400
    assert info.value.message == "API key not valid."


@pytest.mark.unit
def test_unexpected_sdk_failure_is_wrapped():
    client, _ = _client(ModelsStub(error=RuntimeError("socket closed")))
    with pytest.raises(UpstreamError, match="socket closed"):
        client.write_story("joy", [])


@pytest.mark.unit
def test_missing_key_raises_configuration_error():
    created = []
    client = GenerationClient(None, client_factory=lambda key: created.append(key))

    with pytest.raises(ConfigurationError):
        client.recommend_songs("joy", [])
    assert created == []
