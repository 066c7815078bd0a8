"""
Tests for the remote photo-analysis client.

Uses a fake HTTP session, so no network access is needed.
"""

import base64
import json

import pytest
import requests

from calcsolver.remote import AnalysisResult, ClientConfig, RemoteAnalysisClient
from calcsolver.remote.gemini import (
    API_KEY_ENV,
    PROMPT,
    build_request_body,
    decode_model_message,
    first_candidate_text,
)
from calcsolver.utils.errors import (
    InvalidResponseError,
    MissingAPIKeyError,
    RemoteServiceError,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, body=None):
        self.status_code = status_code
        self._payload = payload
        self._body = body

    def json(self):
        if self._body is not None:
            return json.loads(self._body)
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def make_client(response=None, error=None, api_key="test-key"):
    session = FakeSession(response=response, error=error)
    client = RemoteAnalysisClient(ClientConfig(api_key=api_key, timeout=5), session)
    return client, session


class TestClientConfig:
    """Tests for configuration defaults."""

    def test_key_from_environment(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        assert ClientConfig().api_key == "env-key"

    def test_no_builtin_key(self, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        assert ClientConfig().api_key == ""

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        assert ClientConfig(api_key="explicit").api_key == "explicit"


class TestAnalyze:
    """Tests for RemoteAnalysisClient.analyze()."""

    def test_success(self):
        reply = json.dumps({"explanation": "- x = 2", "suggestions": "Check by substitution"})
        client, session = make_client(FakeResponse(payload=candidate(reply)))

        result = client.analyze(b"png-bytes", "image/png")

        assert result == AnalysisResult("- x = 2", "Check by substitution")
        url, kwargs = session.calls[0]
        assert url == client.config.endpoint
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["timeout"] == 5

    def test_request_body(self):
        reply = json.dumps({"explanation": "ok"})
        client, session = make_client(FakeResponse(payload=candidate(reply)))

        client.analyze(b"\x89PNG", "image/png")

        body = session.calls[0][1]["json"]
        parts = body["contents"][0]["parts"]
        assert parts[0]["text"] == PROMPT
        assert parts[1]["inline_data"]["mime_type"] == "image/png"
        assert base64.b64decode(parts[1]["inline_data"]["data"]) == b"\x89PNG"

    def test_missing_suggestions(self):
        reply = json.dumps({"explanation": "Only this"})
        client, _ = make_client(FakeResponse(payload=candidate(reply)))
        assert client.analyze(b"x", "image/jpeg").suggestions is None

    def test_missing_key_sends_nothing(self):
        client, session = make_client(api_key="")
        with pytest.raises(MissingAPIKeyError):
            client.analyze(b"x", "image/png")
        assert session.calls == []

    def test_service_error_message(self):
        payload = {"error": {"message": "API key not valid"}}
        client, _ = make_client(FakeResponse(status_code=400, payload=payload))

        with pytest.raises(RemoteServiceError) as exc_info:
            client.analyze(b"x", "image/png")

        assert exc_info.value.status_code == 400
        assert exc_info.value.service_message == "API key not valid"

    def test_service_error_without_body(self):
        client, _ = make_client(FakeResponse(status_code=503, body="<html>"))

        with pytest.raises(RemoteServiceError) as exc_info:
            client.analyze(b"x", "image/png")

        assert exc_info.value.service_message == "HTTP 503"

    def test_transport_error(self):
        client, _ = make_client(error=requests.ConnectionError("refused"))
        with pytest.raises(RemoteServiceError):
            client.analyze(b"x", "image/png")

    def test_body_not_json(self):
        client, _ = make_client(FakeResponse(body="not json"))
        with pytest.raises(InvalidResponseError):
            client.analyze(b"x", "image/png")

    def test_no_candidates(self):
        client, _ = make_client(FakeResponse(payload={"candidates": []}))
        with pytest.raises(InvalidResponseError):
            client.analyze(b"x", "image/png")


class TestDecoding:
    """Tests for decoding the model's reply."""

    def test_plain_json(self):
        assert decode_model_message('{"explanation": "a"}') == {"explanation": "a"}

    def test_code_fence(self):
        text = '```json\n{"explanation": "fenced"}\n```'
        assert decode_model_message(text)["explanation"] == "fenced"

    def test_surrounding_prose(self):
        text = 'Here is the answer: {"explanation": "inner", "suggestions": "s"} Hope it helps'
        message = decode_model_message(text)
        assert message == {"explanation": "inner", "suggestions": "s"}

    @pytest.mark.parametrize(
        "text",
        [
            "no json here",
            '{"suggestions": "no explanation"}',
            '{"explanation": 42}',
            '{"explanation": "a", "suggestions": ["list"]}',
            "[1, 2, 3]",
        ],
    )
    def test_invalid_messages(self, text):
        with pytest.raises(InvalidResponseError):
            decode_model_message(text)

    def test_first_candidate_with_text(self):
        payload = {
            "candidates": [
                {"content": {"parts": [{"text": ""}]}},
                {"content": {"parts": [{"text": "a"}, {"text": "b"}]}},
            ]
        }
        assert first_candidate_text(payload) == "a\nb"

    def test_first_candidate_missing(self):
        assert first_candidate_text({}) is None
        assert first_candidate_text({"candidates": [{"content": {}}]}) is None

    def test_build_request_body_encodes_image(self):
        body = build_request_body(b"abc", "image/webp")
        inline = body["contents"][0]["parts"][1]["inline_data"]
        assert inline == {"mime_type": "image/webp", "data": "YWJj"}
