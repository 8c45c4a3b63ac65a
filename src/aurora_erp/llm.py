# Aurora ERP - Business management dashboard for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Thin client for the generative-AI REST endpoint.

Every call is a single blocking request/response round trip: no retries, no
caching, no streaming and no conversation state. Three response modes are
supported:

- free text          -> `LLMClient.generate_text`
- strict JSON        -> `LLMClient.generate_json` (response schema enforced
                        server-side, markdown fences stripped client-side)
- forced tool call   -> `LLMClient.call_tool` (exactly one declared function,
                        its arguments returned as a dict)

Errors
------
- `AIServiceError`          network or HTTP failure.
- `AIResponseError`         the endpoint answered but the payload cannot be
                            used (no candidates, invalid JSON, wrong shape).
- `MissingCredentialError`  no API key in the environment. Raised when the
                            client is built, so AI features fail fast while
                            the rest of the application keeps working.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Union

import requests

from .config import AIConfig

logger = logging.getLogger(__name__)

Part = dict[str, Any]
Prompt = Union[str, list[Part]]

_FENCED = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?```$", re.DOTALL)


class AIServiceError(RuntimeError):
    """Raised when the AI endpoint cannot fulfill a request."""


class AIResponseError(AIServiceError):
    """Raised when an AI response cannot be parsed into the expected shape."""


class MissingCredentialError(AIServiceError):
    """Raised when no API credential is configured."""


@dataclass(frozen=True)
class ToolDeclaration:
    """A callable tool the model may be forced to invoke."""

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


def text_part(text: str) -> Part:
    return {"text": text}


def inline_data_part(data_b64: str, mime_type: str = "image/png") -> Part:
    """Inline binary part (base64 payload, no ``data:`` URL prefix)."""
    return {"inlineData": {"mimeType": mime_type, "data": data_b64}}


def strip_code_fence(text: str) -> str:
    """
    Remove a markdown code fence around a model response.

    Handles `````json ... ````` and bare ``````` fences as well as a single
    pair of inline backticks. Unfenced text is returned stripped.
    """
    cleaned = text.strip()
    match = _FENCED.match(cleaned)
    if match:
        return match.group(1).strip()
    if len(cleaned) >= 2 and cleaned.startswith("`") and cleaned.endswith("`"):
        return cleaned[1:-1].strip()
    return cleaned


class LLMClient:
    """
    Client for the ``models/{model}:generateContent`` endpoint.

    Parameters
    ----------
    api_key:
        API credential, sent in the ``x-goog-api-key`` header.
    model:
        Model identifier.
    endpoint:
        Base URL, e.g. ``https://generativelanguage.googleapis.com/v1beta``.
    timeout:
        Request timeout in seconds.
    session:
        Optional `requests.Session` (or compatible object exposing
        ``post``), mainly for tests.
    """

    def __init__(
        self,
        api_key: str,
        model: str = AIConfig.model,
        endpoint: str = AIConfig.endpoint,
        timeout: float = AIConfig.timeout_seconds,
        session: Any = None,
    ) -> None:
        if not api_key:
            raise MissingCredentialError("AI API key is empty.")
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_config(cls, ai_config: AIConfig, session: Any = None) -> LLMClient:
        """
        Build a client from configuration, reading the credential from the
        environment variable named by ``ai_config.api_key_env``.

        Raises
        ------
        MissingCredentialError
            If the environment variable is unset or blank.
        """
        api_key = ai_config.api_key()
        if api_key is None:
            raise MissingCredentialError(
                f"AI features are unavailable: set the {ai_config.api_key_env} "
                "environment variable."
            )
        return cls(
            api_key=api_key,
            model=ai_config.model,
            endpoint=ai_config.endpoint,
            timeout=ai_config.timeout_seconds,
            session=session,
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @staticmethod
    def _contents(prompt: Prompt) -> list[dict[str, Any]]:
        parts = [text_part(prompt)] if isinstance(prompt, str) else list(prompt)
        return [{"role": "user", "parts": parts}]

    def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        logger.debug("POST %s", self.url)
        try:
            resp = self.session.post(
                self.url,
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("AI request failed: %s", exc)
            raise AIServiceError(f"AI request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise AIResponseError("AI endpoint returned a non-JSON body.") from exc

        if not isinstance(data, dict):
            raise AIResponseError("AI endpoint returned an unexpected payload.")
        return data

    @staticmethod
    def _parts(data: dict[str, Any]) -> list[Part]:
        candidates = data.get("candidates") or []
        if not candidates or not isinstance(candidates[0], dict):
            return []
        content = candidates[0].get("content") or {}
        parts = content.get("parts") or []
        return [p for p in parts if isinstance(p, dict)]

    def _text(self, data: dict[str, Any]) -> str:
        texts = [p["text"] for p in self._parts(data) if isinstance(p.get("text"), str)]
        if not texts:
            raise AIResponseError("AI response contained no text.")
        return "".join(texts)

    # ------------------------------------------------------------------
    # Response modes
    # ------------------------------------------------------------------

    def generate_text(self, prompt: Prompt) -> str:
        """Send a prompt and return the model's free-text answer."""
        return self._text(self._post({"contents": self._contents(prompt)}))

    def generate_json(self, prompt: Prompt, schema: dict[str, Any]) -> Any:
        """
        Send a prompt constrained by ``schema`` and return the decoded JSON.

        Raises
        ------
        AIResponseError
            If the (fence-stripped) response text is not valid JSON.
        """
        body = {
            "contents": self._contents(prompt),
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        raw = strip_code_fence(self._text(self._post(body)))
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise AIResponseError(f"AI response is not valid JSON: {exc.msg}") from exc

    def call_tool(self, prompt: Prompt, tool: ToolDeclaration) -> dict[str, Any] | None:
        """
        Force the model to call ``tool`` and return the call arguments.

        Returns None when the response holds no function call; callers must
        treat that as a failure.
        """
        body = {
            "contents": self._contents(prompt),
            "tools": [{"functionDeclarations": [tool.to_dict()]}],
            "toolConfig": {"functionCallingConfig": {"mode": "ANY"}},
        }
        for part in self._parts(self._post(body)):
            call = part.get("functionCall")
            if isinstance(call, dict):
                args = call.get("args")
                return args if isinstance(args, dict) else {}
        logger.info("AI response held no call to %s", tool.name)
        return None
