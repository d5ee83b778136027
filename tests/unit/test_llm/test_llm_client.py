"""
test_llm_client.py - provider transport branches and failure mapping
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from contentgen.core.errors import GenerationError
from contentgen.llm import client, service


def _response(json_data=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = "body"
    response.json.return_value = json_data
    if status_code >= 400:
        err = requests.exceptions.HTTPError(response=response)
        response.raise_for_status.side_effect = err
    return response


@pytest.fixture
def payload():
    return service.build_payload("cat")


@pytest.fixture(autouse=True)
def api_keys(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "ak-test")
    monkeypatch.setenv("GEMINI_API_KEY", "gk-test")


class TestBuildPayload:

    def test_system_and_user_messages(self, payload):
        assert payload["messages"][0]["role"] == "system"
        assert payload["messages"][1] == {"role": "user", "content": "cat"}
        assert payload["stream"] is False


class TestOpenAICompatible:

    def test_returns_stripped_content(self, payload):
        data = {"choices": [{"message": {"content": "  a small orange cat\n"}}]}

        with patch.object(client, "PROVIDER", "openai"), \
                patch.object(client.requests, "post", return_value=_response(data)) as post:
            result = client.send_request(payload)

        assert result == "a small orange cat"
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"
        assert post.call_args.kwargs["json"] is payload

    def test_missing_key_raises(self, payload, monkeypatch, tmp_path):
        monkeypatch.delenv("OPENAI_API_KEY")
        monkeypatch.chdir(tmp_path)

        with patch.object(client, "PROVIDER", "openai"), patch.object(client.requests, "post") as post:
            with pytest.raises(GenerationError, match="OPENAI KEY FILE NOT FOUND"):
                client.send_request(payload)

        post.assert_not_called()

    def test_local_provider_needs_no_key(self, payload):
        data = {"choices": [{"message": {"content": "ok"}}]}

        with patch.object(client, "PROVIDER", "local"), \
                patch.object(client.requests, "post", return_value=_response(data)) as post:
            assert client.send_request(payload) == "ok"

        assert "Authorization" not in post.call_args.kwargs["headers"]


class TestAnthropic:

    def test_system_message_remapped(self, payload):
        data = {"content": [{"text": "meow"}]}

        with patch.object(client, "PROVIDER", "anthropic"), \
                patch.object(client.requests, "post", return_value=_response(data)) as post:
            result = client.send_request(payload)

        sent = post.call_args.kwargs["json"]
        assert result == "meow"
        assert "system" in sent
        assert sent["messages"] == [{"role": "user", "content": "cat"}]
        assert sent["max_tokens"] == 1024


class TestGemini:

    def test_contents_and_system_instruction(self, payload):
        data = {"candidates": [{"content": {"parts": [{"text": "purr"}]}}]}

        with patch.object(client, "PROVIDER", "gemini"), \
                patch.object(client.requests, "post", return_value=_response(data)) as post:
            result = client.send_request(payload)

        sent = post.call_args.kwargs["json"]
        assert result == "purr"
        assert sent["contents"] == [{"role": "user", "parts": [{"text": "cat"}]}]
        assert "systemInstruction" in sent
        assert sent["generationConfig"]["topP"] == payload["top_p"]
        assert post.call_args.kwargs["headers"]["x-goog-api-key"] == "gk-test"


class TestFailures:

    def test_http_error_is_sanitized(self, payload):
        with patch.object(client, "PROVIDER", "gemini"), \
                patch.object(client.requests, "post", return_value=_response({}, status_code=429)):
            with pytest.raises(GenerationError) as exc_info:
                client.send_request(payload)

        assert exc_info.value.message == "GEMINI HTTP ERROR (429)"
        assert exc_info.value.status_code == 429

    def test_connection_error(self, payload):
        with patch.object(client, "PROVIDER", "openai"), \
                patch.object(client.requests, "post", side_effect=requests.exceptions.ConnectionError()):
            with pytest.raises(GenerationError, match="OPENAI HTTP ERROR"):
                client.send_request(payload)

    def test_malformed_body(self, payload):
        with patch.object(client, "PROVIDER", "openai"), \
                patch.object(client.requests, "post", return_value=_response({"choices": []})):
            with pytest.raises(GenerationError, match="UNEXPECTED RESPONSE"):
                client.send_request(payload)

    def test_invalid_provider(self, payload):
        with patch.object(client, "PROVIDER", "nope"):
            with pytest.raises(GenerationError, match="INVALID PROVIDER"):
                client.send_request(payload)
