"""
Gemini REST client for LLM interactions.
"""
import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Protocol, Sequence

import requests
import google.auth
import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import (
    VERTEX_LOCATION, CHAT_MODEL_NAME, CHAT_TIMEOUT, MAX_OUTPUT_TOKENS,
    GENERATIVE_LANGUAGE_URL, CHAT_TEMPERATURE,
)
from ..data.conversations import ConversationTurn

logger = logging.getLogger("llm_client")

# Gemini rejects conversations whose first content is from the model
_KICKOFF_TEXT = "Start interview."

# Keyed by TurnRole value
_ROLE_MAP = {
    "agent": "model",
    "user": "user",
}


class GenerationError(RuntimeError):
    """The generation backend failed to produce text."""


@dataclass(frozen=True)
class Attachment:
    """Binary content sent inline next to the active input."""
    data: bytes
    mime_type: str


class GenerationClient(Protocol):
    """Given a prompt and a conversation context, produce a text completion."""

    def complete(self,
                 system_instruction: str,
                 prior_turns: Sequence[ConversationTurn],
                 active_input: str,
                 response_format: str = "json",
                 attachments: Sequence[Attachment] = ()) -> str:
        ...


class GeminiRestClient:
    """REST-based client for Gemini models on Vertex AI or the Generative Language API."""

    def __init__(self,
                 project: Optional[str] = None,
                 location: str = VERTEX_LOCATION,
                 model: str = CHAT_MODEL_NAME,
                 credentials_json: Optional[str] = None,
                 api_key: Optional[str] = None,
                 timeout: int = CHAT_TIMEOUT,
                 temperature: float = CHAT_TEMPERATURE,
                 max_output_tokens: int = MAX_OUTPUT_TOKENS):
        if not project and not api_key:
            raise ValueError("Either a Google Cloud project or an API key is required")
        self.project = project
        self.location = location
        self.model = model
        self.credentials_json = credentials_json
        self.api_key = api_key
        self.timeout = timeout
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._credentials = None

        if api_key:
            self.url = f"{GENERATIVE_LANGUAGE_URL}/models/{self.model}:generateContent"
        else:
            base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
            model_resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
            self.url = f"{base_url}/{model_resource}:generateContent"

    def _load_credentials(self):
        """Service-account credentials when a key file is configured, otherwise ADC."""
        if self.credentials_json:
            return service_account.Credentials.from_service_account_file(
                self.credentials_json,
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )
        creds, _ = google.auth.default(scopes=["https://www.googleapis.com/auth/cloud-platform"])
        return creds

    def _access_token(self, force_refresh: bool = False) -> str:
        """
        Current OAuth token, refreshed whenever google-auth reports it expired.

        Raises:
            GenerationError: If credentials cannot be loaded or refreshed
        """
        try:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            if force_refresh or not self._credentials.valid:
                logger.info("Refreshing Vertex AI access token")
                self._credentials.refresh(google.auth.transport.requests.Request())
        except google.auth.exceptions.GoogleAuthError as e:
            raise GenerationError(f"Google authentication failed: {e}") from e
        return self._credentials.token

    def _headers(self, force_refresh: bool = False) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        else:
            headers["Authorization"] = f"Bearer {self._access_token(force_refresh)}"
        return headers

    def _post(self, body: Dict[str, Any], force_refresh: bool = False) -> requests.Response:
        try:
            return requests.post(self.url, headers=self._headers(force_refresh), json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

    def build_request_body(self,
                           system_instruction: str,
                           prior_turns: Sequence[ConversationTurn],
                           active_input: str,
                           response_format: str = "json",
                           attachments: Sequence[Attachment] = ()) -> Dict[str, Any]:
        """Translate a conversation into a generateContent request body."""
        contents: List[Dict[str, Any]] = [
            {"role": _ROLE_MAP[turn.role.value], "parts": [{"text": turn.text}]}
            for turn in prior_turns
        ]
        if contents and contents[0]["role"] != "user":
            contents.insert(0, {"role": "user", "parts": [{"text": _KICKOFF_TEXT}]})

        active_parts: List[Dict[str, Any]] = [
            {
                "inlineData": {
                    "mimeType": attachment.mime_type,
                    "data": base64.b64encode(attachment.data).decode("ascii"),
                }
            }
            for attachment in attachments
        ]
        active_parts.append({"text": active_input})
        contents.append({"role": "user", "parts": active_parts})

        generation_config: Dict[str, Any] = {
            "temperature": float(self.temperature),
            "maxOutputTokens": int(self.max_output_tokens),
        }
        if response_format == "json":
            generation_config["responseMimeType"] = "application/json"

        return {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": contents,
            "generationConfig": generation_config,
        }

    def complete(self,
                 system_instruction: str,
                 prior_turns: Sequence[ConversationTurn],
                 active_input: str,
                 response_format: str = "json",
                 attachments: Sequence[Attachment] = ()) -> str:
        """Generate the next completion for the conversation."""
        body = self.build_request_body(system_instruction, prior_turns, active_input,
                                       response_format, attachments)
        logger.debug("Sending %d content(s) to %s", len(body["contents"]), self.model)

        resp = self._post(body)
        if resp.status_code == 401 and not self.api_key:
            # Token revoked or expired early; retry once with a fresh one
            logger.warning("Gemini returned 401, retrying with a refreshed token")
            resp = self._post(body, force_refresh=True)

        if resp.status_code >= 400:
            raise GenerationError(f"Gemini REST error {resp.status_code}: {resp.text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise GenerationError(f"Gemini returned a non-JSON body: {resp.text[:200]}") from e

        text = self._parse_response_text(payload)
        logger.debug("Raw LLM output: %r", text)
        return text

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> str:
        """
        Parse response JSON to extract text content.

        Raises:
            GenerationError: If the prompt was blocked or no text came back
        """
        feedback = resp_json.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise GenerationError(f"Prompt blocked: {feedback['blockReason']}")

        cands = resp_json.get("candidates") or []
        if cands:
            first = cands[0]
            content = first.get("content") or {}
            parts = content.get("parts") or []
            texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
            if texts:
                return "".join(texts)
            if first.get("finishReason") not in (None, "STOP"):
                raise GenerationError(f"Generation stopped: {first['finishReason']}")

        raise GenerationError(f"No text in Gemini response: {json.dumps(resp_json, separators=(',', ':'))[:500]}")
