"""
test_image_providers.py - image dispatch, generic client and AI Horde polling
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from contentgen.core.errors import GenerationError
from contentgen.image import client, horde_client, service


def _response(json_data=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.text = "body"
    response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
    return response


@pytest.fixture(autouse=True)
def no_sleep():
    with patch.object(horde_client.time, "sleep") as sleep:
        yield sleep


class TestGenerateImage:

    def test_ai_horde_branch(self):
        with patch.object(service, "IMAGE_PROVIDER", "ai_horde"), \
                patch.object(service, "send_ai_horde_request", return_value={"image_url": "u"}) as horde:
            assert service.generate_image("cat") == {"image_url": "u"}

        horde.assert_called_once_with("cat", 512, 512, 25)

    def test_openai_payload(self):
        with patch.object(service, "IMAGE_PROVIDER", "openai"), \
                patch.object(service, "send_image_request", return_value={"data": []}) as send:
            service.generate_image("cat")

        sent = send.call_args.args[0]
        assert sent["prompt"] == "cat"
        assert sent["size"] == "1024x1024"
        assert sent["n"] == 1

    def test_openai_size_ignores_dimensions(self):
        with patch.object(service, "IMAGE_PROVIDER", "openai"), \
                patch.object(service, "IMAGE_OPENAI_SIZE", "1792x1024"):
            payload = service.build_image_payload("cat", 512, 512, 25)

        assert payload["size"] == "1792x1024"

    def test_local_payload(self):
        with patch.object(service, "IMAGE_PROVIDER", "local"), \
                patch.object(service, "send_image_request", return_value={"images": []}) as send:
            service.generate_image("cat")

        assert send.call_args.args[0] == {"prompt": "cat", "steps": 25, "width": 512, "height": 512}


class TestSendImageRequest:

    def test_unknown_provider(self):
        with patch.object(client, "IMAGE_PROVIDER", "nope"):
            with pytest.raises(GenerationError, match="Unknown image provider"):
                client.send_image_request({"prompt": "cat"})

    def test_bearer_key_attached(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch.object(client, "IMAGE_PROVIDER", "openai"), \
                patch.object(client.requests, "post", return_value=_response({"data": [{"url": "u"}]})) as post:
            assert client.send_image_request({"prompt": "cat"}) == {"data": [{"url": "u"}]}

        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"

    def test_non_200_raises(self):
        with patch.object(client, "IMAGE_PROVIDER", "local"), \
                patch.object(client.requests, "post", return_value=_response({}, status_code=500)):
            with pytest.raises(GenerationError) as exc_info:
                client.send_image_request({"prompt": "cat"})

        assert exc_info.value.status_code == 500

    def test_transport_failure_raises(self):
        with patch.object(client, "IMAGE_PROVIDER", "local"), \
                patch.object(client.requests, "post", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(GenerationError, match="failed"):
                client.send_image_request({"prompt": "cat"})


class TestAIHorde:

    def test_polls_until_done(self, monkeypatch):
        monkeypatch.setenv("AI_HORDE_API_KEY", "horde-key")
        statuses = [
            _response({}, status_code=429),
            _response({"done": False}),
            _response({"done": True, "generations": [{"img": "https://example/cat.webp"}]}),
        ]

        with patch.object(horde_client.requests, "post", return_value=_response({"id": "job-1"})) as post, \
                patch.object(horde_client.requests, "get", side_effect=statuses) as get:
            result = horde_client.send_ai_horde_request("cat", 512, 512, 25)

        assert result == {"image_url": "https://example/cat.webp"}
        assert post.call_args.kwargs["headers"]["apikey"] == "horde-key"
        assert get.call_count == 3
        assert get.call_args.args[0].endswith("job-1")

    def test_anonymous_key_when_unset(self, monkeypatch):
        monkeypatch.delenv("AI_HORDE_API_KEY", raising=False)
        done = _response({"done": True, "generations": [{"img": "u"}]})

        with patch.object(horde_client.requests, "post", return_value=_response({"id": "job-1"})) as post, \
                patch.object(horde_client.requests, "get", return_value=done):
            horde_client.send_ai_horde_request("cat", 512, 512, 25)

        assert post.call_args.kwargs["headers"]["apikey"] == horde_client.ANONYMOUS_API_KEY

    def test_faulted_job(self):
        with patch.object(horde_client.requests, "post", return_value=_response({"id": "job-1"})), \
                patch.object(horde_client.requests, "get", return_value=_response({"faulted": True})):
            with pytest.raises(GenerationError, match="faulted"):
                horde_client.send_ai_horde_request("cat", 512, 512, 25)

    def test_missing_job_id(self):
        with patch.object(horde_client.requests, "post", return_value=_response({})):
            with pytest.raises(GenerationError, match="job id"):
                horde_client.send_ai_horde_request("cat", 512, 512, 25)

    def test_submission_http_error(self):
        with patch.object(horde_client.requests, "post", return_value=_response({}, status_code=401)):
            with pytest.raises(GenerationError) as exc_info:
                horde_client.send_ai_horde_request("cat", 512, 512, 25)

        assert exc_info.value.status_code == 401

    def test_poll_budget_exhausted(self):
        with patch.object(horde_client, "IMAGE_POLL_TIMEOUT_SECONDS", 0), \
                patch.object(horde_client.requests, "post", return_value=_response({"id": "job-1"})), \
                patch.object(horde_client.requests, "get") as get:
            with pytest.raises(GenerationError, match="timed out"):
                horde_client.send_ai_horde_request("cat", 512, 512, 25)

        get.assert_not_called()
