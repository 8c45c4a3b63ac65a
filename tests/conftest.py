import json

import pytest
import requests

from aurora_erp.llm import LLMClient
from aurora_erp.mock_data import PRODUCTS


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Records POST calls and answers them from a queue of canned replies."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    # Queue helpers -------------------------------------------------------

    def reply(self, payload, status_code=200):
        self.replies.append(FakeResponse(payload, status_code))

    def reply_text(self, text):
        self.reply({"candidates": [{"content": {"parts": [{"text": text}]}}]})

    def reply_json(self, value):
        self.reply_text(json.dumps(value))

    def reply_tool(self, name, args):
        self.reply(
            {
                "candidates": [
                    {"content": {"parts": [{"functionCall": {"name": name, "args": args}}]}}
                ]
            }
        )

    def fail(self, exc):
        self.replies.append(exc)

    @property
    def last_body(self):
        return self.calls[-1]["json"]

    @property
    def last_prompt(self):
        parts = self.last_body["contents"][0]["parts"]
        return "".join(p.get("text", "") for p in parts)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    return LLMClient(api_key="test-key", session=fake_session)


@pytest.fixture
def products():
    """Product lookup keyed by id, built from the demo catalogue."""
    return {p.id: p for p in PRODUCTS}
