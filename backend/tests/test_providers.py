"""Tests for the vision model adapters and their factory."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest
import requests

from medside.config.settings import VisionModelConfig
from medside.domain.exceptions import (
    AnalysisTimeoutError,
    ConfigurationError,
    ProviderError,
    TransportError,
)
from medside.infrastructure.llm import (
    DummyVisionModel,
    GeminiVisionModel,
    OllamaVisionModel,
    OpenAIVisionModel,
    VisionModelFactory,
    VisionModelType,
)


def make_response(status_code: int = 200, body=None, text: str = "") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def make_session(response=None, error=None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return session


GEMINI_OK = {
    "candidates": [
        {"content": {"parts": [{"text": "1. Medicine Name: Aspirin\n"}, {"text": "2. Safety Rating: 8"}]}}
    ]
}


class TestGemini:

    def test_request_shape(self, jpeg_image):
        session = make_session(make_response(body=GEMINI_OK))
        model = GeminiVisionModel(api_key="secret", model="gemini-2.5-flash", session=session, timeout=12)

        text = model.generate("PROMPT", jpeg_image)

        assert text == "1. Medicine Name: Aspirin\n2. Safety Rating: 8"
        args, kwargs = session.post.call_args
        assert args[0] == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
        )
        assert kwargs["headers"] == {"x-goog-api-key": "secret"}
        assert kwargs["timeout"] == 12
        parts = kwargs["json"]["contents"][0]["parts"]
        assert parts[0] == {"text": "PROMPT"}
        assert parts[1]["inline_data"] == {"mime_type": "image/jpeg", "data": jpeg_image.base64_string}

    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            GeminiVisionModel(api_key=None)

    def test_http_error_is_provider_error(self, jpeg_image):
        body = {"error": {"code": 429, "message": "Resource has been exhausted"}}
        session = make_session(make_response(429, body=body))
        model = GeminiVisionModel(api_key="k", session=session)

        with pytest.raises(ProviderError) as exc_info:
            model.generate("p", jpeg_image)

        assert exc_info.value.status_code == 429
        assert exc_info.value.details["provider_message"] == "Resource has been exhausted"

    def test_blocked_prompt(self, jpeg_image):
        session = make_session(make_response(body={"promptFeedback": {"blockReason": "SAFETY"}}))
        model = GeminiVisionModel(api_key="k", session=session)

        with pytest.raises(ProviderError) as exc_info:
            model.generate("p", jpeg_image)
        assert "SAFETY" in exc_info.value.details["provider_message"]

    def test_connection_error(self, jpeg_image):
        model = GeminiVisionModel(api_key="k", session=make_session(error=requests.ConnectionError("down")))

        with pytest.raises(TransportError):
            model.generate("p", jpeg_image)

    def test_timeout(self, jpeg_image):
        model = GeminiVisionModel(api_key="k", session=make_session(error=requests.Timeout()))

        with pytest.raises(AnalysisTimeoutError):
            model.generate("p", jpeg_image)

    def test_non_json_success(self, jpeg_image):
        model = GeminiVisionModel(api_key="k", session=make_session(make_response(200, text="<html>")))

        with pytest.raises(ProviderError):
            model.generate("p", jpeg_image)


class TestOllama:

    def test_request_shape(self, jpeg_image):
        session = make_session(make_response(body={"response": "Medicine Name: X", "done": True}))
        model = OllamaVisionModel(base_url="http://gpu-box:11434/", model="llava:7b", session=session)

        assert model.generate("PROMPT", jpeg_image) == "Medicine Name: X"

        args, kwargs = session.post.call_args
        assert args[0] == "http://gpu-box:11434/api/generate"
        assert kwargs["json"]["images"] == [jpeg_image.base64_string]
        assert kwargs["json"]["stream"] is False
        assert kwargs["json"]["prompt"] == "PROMPT"

    def test_model_not_pulled(self, jpeg_image):
        body = {"error": "model 'llava:7b' not found"}
        model = OllamaVisionModel(session=make_session(make_response(404, body=body)))

        with pytest.raises(ProviderError) as exc_info:
            model.generate("p", jpeg_image)
        assert exc_info.value.status_code == 404

    def test_server_not_running(self, jpeg_image):
        model = OllamaVisionModel(session=make_session(error=requests.ConnectionError("refused")))

        with pytest.raises(TransportError):
            model.generate("p", jpeg_image)


def _openai_request() -> httpx.Request:
    return httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class TestOpenAI:

    def make_client(self, result=None, error=None) -> MagicMock:
        client = MagicMock()
        if error is not None:
            client.chat.completions.create.side_effect = error
        else:
            client.chat.completions.create.return_value = result
        return client

    def test_request_shape(self, jpeg_image):
        result = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Medicine Name: Y"))])
        client = self.make_client(result=result)
        model = OpenAIVisionModel(api_key="k", model="gpt-4o-mini", client=client)

        assert model.generate("PROMPT", jpeg_image) == "Medicine Name: Y"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        content = kwargs["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "PROMPT"}
        assert content[1]["image_url"]["url"] == jpeg_image.data_url

    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            OpenAIVisionModel(api_key=None)

    def test_timeout(self, jpeg_image):
        error = openai.APITimeoutError(request=_openai_request())
        model = OpenAIVisionModel(api_key="k", client=self.make_client(error=error))

        with pytest.raises(AnalysisTimeoutError):
            model.generate("p", jpeg_image)

    def test_connection_error(self, jpeg_image):
        error = openai.APIConnectionError(request=_openai_request())
        model = OpenAIVisionModel(api_key="k", client=self.make_client(error=error))

        with pytest.raises(TransportError):
            model.generate("p", jpeg_image)

    def test_status_error(self, jpeg_image):
        response = httpx.Response(429, request=_openai_request())
        error = openai.RateLimitError("rate limited", response=response, body=None)
        model = OpenAIVisionModel(api_key="k", client=self.make_client(error=error))

        with pytest.raises(ProviderError) as exc_info:
            model.generate("p", jpeg_image)
        assert exc_info.value.status_code == 429


class TestDummy:

    def test_canned_response(self, jpeg_image):
        model = DummyVisionModel()

        assert "Medicine Name" in model.generate("p", jpeg_image)
        assert model.calls == 1
        assert model.provider_name == "dummy"


class TestFactory:

    def test_parse_type(self):
        assert VisionModelFactory.parse_type("Gemini") == VisionModelType.GEMINI
        assert VisionModelFactory.parse_type("local") == VisionModelType.OLLAMA

    def test_parse_unknown_type(self):
        with pytest.raises(ConfigurationError):
            VisionModelFactory.parse_type("claude-vision-9000")

    def test_default_models(self):
        gemini = VisionModelFactory.create(VisionModelType.GEMINI, api_key="k")
        openai_model = VisionModelFactory.create(VisionModelType.OPENAI, api_key="k")
        ollama = VisionModelFactory.create(VisionModelType.OLLAMA)

        assert gemini.model_name == "gemini-2.5-flash"
        assert openai_model.model_name == "gpt-4o-mini"
        assert ollama.model_name == "llava:7b"

    def test_missing_key_for_remote_provider(self):
        with pytest.raises(ConfigurationError):
            VisionModelFactory.create_from_config(VisionModelConfig(provider="gemini"))

    def test_from_config(self):
        config = VisionModelConfig(provider="ollama", model="qwen2.5vl:3b", timeout_seconds=45)
        model = VisionModelFactory.create_from_config(config)

        assert isinstance(model, OllamaVisionModel)
        assert model.model_name == "qwen2.5vl:3b"
        assert model.timeout_seconds == 45

    def test_from_dict(self):
        model = VisionModelFactory.create_from_dict({"provider": "dummy"})
        assert isinstance(model, DummyVisionModel)
