"""Tests for the Gemini REST client."""

import base64
from unittest.mock import Mock, patch

import pytest
import google.auth.exceptions
import requests

from hireflow_screening.infrastructure.data import ConversationTurn
from hireflow_screening.infrastructure.llm import Attachment, GeminiRestClient, GenerationError


def _response(status_code=200, payload=None, text=""):
    resp = Mock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def _candidate(text, finish_reason="STOP"):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": finish_reason}]}


@pytest.fixture
def client():
    return GeminiRestClient(api_key="test-key", model="gemini-test", timeout=7, temperature=0.5)


class TestRequestBody:
    """Test cases for translating a conversation into a request body."""

    def test_roles_and_kickoff(self, client):
        body = client.build_request_body(
            "Be a recruiter.",
            [ConversationTurn.agent("Hi"), ConversationTurn.user("Hello"), ConversationTurn.agent("Years?")],
            "Five",
        )

        contents = body["contents"]
        assert [c["role"] for c in contents] == ["user", "model", "user", "model", "user"]
        assert contents[0]["parts"] == [{"text": "Start interview."}]
        assert contents[1]["parts"] == [{"text": "Hi"}]
        assert contents[-1]["parts"] == [{"text": "Five"}]
        assert body["systemInstruction"] == {"parts": [{"text": "Be a recruiter."}]}

    def test_no_kickoff_without_prior_turns(self, client):
        body = client.build_request_body("sys", [], "Start the interview.")

        assert body["contents"] == [{"role": "user", "parts": [{"text": "Start the interview."}]}]

    def test_json_response_format(self, client):
        body = client.build_request_body("sys", [], "go")

        config = body["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["temperature"] == 0.5

    def test_text_response_format(self, client):
        body = client.build_request_body("sys", [], "go", response_format="text")

        assert "responseMimeType" not in body["generationConfig"]

    def test_attachments_sent_inline(self, client):
        pdf = b"%PDF-1.4 fake resume"
        body = client.build_request_body("sys", [], "Evaluate", attachments=[Attachment(pdf, "application/pdf")])

        parts = body["contents"][-1]["parts"]
        assert parts[0] == {"inlineData": {"mimeType": "application/pdf", "data": base64.b64encode(pdf).decode("ascii")}}
        assert parts[1] == {"text": "Evaluate"}


class TestComplete:
    """Test cases for calling the backend."""

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_returns_candidate_text(self, mock_post, client):
        mock_post.return_value = _response(payload=_candidate('{"messages": ["Hi"], "is_complete": false}'))

        text = client.complete("sys", [], "go")

        assert text == '{"messages": ["Hi"], "is_complete": false}'
        args, kwargs = mock_post.call_args
        assert args[0].endswith("/models/gemini-test:generateContent")
        assert kwargs["headers"]["x-goog-api-key"] == "test-key"
        assert kwargs["timeout"] == 7
        assert kwargs["json"]["contents"][-1]["parts"][-1]["text"] == "go"

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_joins_multiple_parts(self, mock_post, client):
        payload = {"candidates": [{"content": {"parts": [{"text": '{"a":'}, {"text": " 1}"}]}}]}
        mock_post.return_value = _response(payload=payload)

        assert client.complete("sys", [], "go") == '{"a": 1}'

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_http_error(self, mock_post, client):
        mock_post.return_value = _response(status_code=429, text="quota exceeded")

        with pytest.raises(GenerationError, match="429"):
            client.complete("sys", [], "go")

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_transport_error(self, mock_post, client):
        mock_post.side_effect = requests.Timeout("read timed out")

        with pytest.raises(GenerationError, match="timed out"):
            client.complete("sys", [], "go")

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_non_json_body(self, mock_post, client):
        mock_post.return_value = _response(payload=ValueError("no json"), text="<html>")

        with pytest.raises(GenerationError):
            client.complete("sys", [], "go")

    @pytest.mark.parametrize("payload", [
        {"promptFeedback": {"blockReason": "SAFETY"}},
        {"candidates": [{"finishReason": "MAX_TOKENS", "content": {"parts": []}}]},
        {"candidates": []},
        {},
    ])
    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_no_usable_text(self, mock_post, payload, client):
        mock_post.return_value = _response(payload=payload)

        with pytest.raises(GenerationError):
            client.complete("sys", [], "go")


class TestConstruction:
    """Test cases for endpoint selection."""

    def test_requires_project_or_key(self):
        with pytest.raises(ValueError):
            GeminiRestClient()

    def test_vertex_endpoint(self):
        client = GeminiRestClient(project="acme-hr", location="europe-west4", model="gemini-test")

        assert client.url == (
            "https://europe-west4-aiplatform.googleapis.com/v1/projects/acme-hr/locations/europe-west4"
            "/publishers/google/models/gemini-test:generateContent"
        )


class _FakeCredentials:
    """Stands in for google-auth credentials; each refresh issues a new token."""

    def __init__(self):
        self.valid = False
        self.token = None
        self.refreshes = 0

    def refresh(self, request):
        self.refreshes += 1
        self.token = f"tok{self.refreshes}"
        self.valid = True


class TestVertexAuth:
    """Test cases for OAuth token handling on Vertex AI."""

    @pytest.fixture
    def creds(self):
        return _FakeCredentials()

    @pytest.fixture
    def vertex_client(self, creds):
        client = GeminiRestClient(project="acme-hr")
        with patch.object(GeminiRestClient, "_load_credentials", return_value=creds):
            yield client

    @staticmethod
    def _bearer(call):
        return call.kwargs["headers"]["Authorization"]

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_token_reused_while_valid(self, mock_post, vertex_client, creds):
        mock_post.return_value = _response(payload=_candidate("ok"))

        vertex_client.complete("sys", [], "one")
        vertex_client.complete("sys", [], "two")

        assert creds.refreshes == 1
        assert [self._bearer(c) for c in mock_post.call_args_list] == ["Bearer tok1", "Bearer tok1"]

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_expired_token_refreshed(self, mock_post, vertex_client, creds):
        mock_post.return_value = _response(payload=_candidate("ok"))

        vertex_client.complete("sys", [], "one")
        creds.valid = False
        vertex_client.complete("sys", [], "two")

        assert creds.refreshes == 2
        assert self._bearer(mock_post.call_args) == "Bearer tok2"

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_unauthorized_retried_with_fresh_token(self, mock_post, vertex_client, creds):
        mock_post.side_effect = [
            _response(status_code=401, text="token expired"),
            _response(payload=_candidate("ok")),
        ]

        assert vertex_client.complete("sys", [], "go") == "ok"
        assert creds.refreshes == 2
        assert [self._bearer(c) for c in mock_post.call_args_list] == ["Bearer tok1", "Bearer tok2"]

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_repeated_unauthorized_refreshes_every_call(self, mock_post, vertex_client, creds):
        mock_post.return_value = _response(status_code=401, text="unauthorized")

        for _ in range(3):
            with pytest.raises(GenerationError, match="401"):
                vertex_client.complete("sys", [], "go")

        assert mock_post.call_count == 6
        assert creds.refreshes == 4
        assert self._bearer(mock_post.call_args) == "Bearer tok4"

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_auth_failure_is_generation_error(self, mock_post):
        client = GeminiRestClient(project="acme-hr")
        with patch.object(GeminiRestClient, "_load_credentials",
                          side_effect=google.auth.exceptions.DefaultCredentialsError("no ADC")):
            with pytest.raises(GenerationError, match="authentication"):
                client.complete("sys", [], "go")

        mock_post.assert_not_called()

    @patch("hireflow_screening.infrastructure.llm.client.requests.post")
    def test_api_key_not_retried_on_unauthorized(self, mock_post, client):
        mock_post.return_value = _response(status_code=401, text="bad key")

        with pytest.raises(GenerationError):
            client.complete("sys", [], "go")

        assert mock_post.call_count == 1
