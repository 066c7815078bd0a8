"""
Client for the remote photo-analysis model.

Sends a photographed problem to the Gemini generateContent endpoint and
reads back a short worked explanation. The response is expected to be a
JSON object ``{"explanation": ..., "suggestions": ...}``; models often wrap
it in a Markdown code fence or surround it with prose, so decoding is
forgiving about both.
"""

import base64
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..utils.errors import (
    InvalidResponseError,
    MissingAPIKeyError,
    RemoteServiceError,
)

logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-flash:generateContent"
)
DEFAULT_TIMEOUT = 60.0

PROMPT = """You are a patient high-school mathematics tutor. Read the problem in the image, \
work out the main solution steps and give the final answer.
Reply in JSON using exactly this shape:
{
  "explanation": "A short worked solution as bullet points.",
  "suggestions": "Optional extra hints or next steps; omit this field if there are none."
}
Output only the JSON, with no extra text or comments."""


@dataclass
class AnalysisResult:
    """Worked explanation returned by the service."""

    explanation: str
    suggestions: Optional[str] = None


@dataclass
class ClientConfig:
    """
    Connection settings.

    The API key defaults to the GEMINI_API_KEY environment variable.
    """

    api_key: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        if self.api_key is None:
            self.api_key = os.environ.get(API_KEY_ENV, "")


class RemoteAnalysisClient:
    """
    Photo-analysis client.

    No retries are attempted; every failure surfaces as one of the
    RemoteAnalysisError subclasses.

    Usage:
        client = RemoteAnalysisClient()
        result = client.analyze(image_bytes, "image/png")
        print(result.explanation)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or ClientConfig()
        self.session = session or requests.Session()

    def analyze(self, image_data: bytes, mime_type: str) -> AnalysisResult:
        """
        Ask the model to solve the problem shown in *image_data*.

        Raises:
            MissingAPIKeyError: If no API key is configured.
            RemoteServiceError: If the request fails or the service reports an error.
            InvalidResponseError: If the reply cannot be decoded.
        """
        if not self.config.api_key:
            raise MissingAPIKeyError(API_KEY_ENV)

        logger.info("Sending %d byte %s image for analysis", len(image_data), mime_type)
        try:
            response = self.session.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=build_request_body(image_data, mime_type),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise RemoteServiceError(str(e)) from e

        if not 200 <= response.status_code < 300:
            raise RemoteServiceError(
                _api_error_message(response), status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidResponseError(f"Body is not JSON: {e}") from e

        text = first_candidate_text(payload)
        if text is None:
            raise InvalidResponseError("No candidate text in response")

        message = decode_model_message(text)
        return AnalysisResult(
            explanation=message["explanation"],
            suggestions=message.get("suggestions"),
        )


def build_request_body(image_data: bytes, mime_type: str) -> Dict[str, Any]:
    """Build the generateContent body: the prompt plus the inline image."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": PROMPT},
                    {
                        "inline_data": {
                            "mime_type": mime_type,
                            "data": base64.b64encode(image_data).decode("ascii"),
                        }
                    },
                ]
            }
        ]
    }


def _api_error_message(response: requests.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"HTTP {response.status_code}"


def first_candidate_text(payload: Dict[str, Any]) -> Optional[str]:
    """Join the text parts of the first candidate that has any."""
    for candidate in payload.get("candidates") or []:
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "\n".join(p["text"] for p in parts if p.get("text")).strip()
        if text:
            return text
    return None


def _strip_code_fence(text: str) -> str:
    trimmed = text.strip()
    if trimmed.startswith("```"):
        lines = trimmed.split("\n")
        if len(lines) >= 2:
            return "\n".join(lines[1:-1])
    return trimmed


def _as_message(raw: str) -> Optional[Dict[str, Any]]:
    try:
        decoded = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(decoded, dict) or not isinstance(decoded.get("explanation"), str):
        return None
    suggestions = decoded.get("suggestions")
    if suggestions is not None and not isinstance(suggestions, str):
        return None
    return decoded


def decode_model_message(text: str) -> Dict[str, Any]:
    """
    Decode the model's JSON reply.

    Falls back to the outermost ``{...}`` span when the reply has text
    around the object.

    Raises:
        InvalidResponseError: If no valid message can be found.
    """
    cleaned = _strip_code_fence(text)
    message = _as_message(cleaned)
    if message is not None:
        return message

    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start != -1 and end > start:
        message = _as_message(cleaned[start : end + 1])
        if message is not None:
            return message

    raise InvalidResponseError(f"Unexpected model reply: {text[:200]!r}")
