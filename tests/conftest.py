"""Shared test fixtures for the OpenRouter agent bridge tests."""

import json
import pytest
from unittest.mock import MagicMock

from openrouter_model import OpenRouterConfig, OpenRouterModel


# ─────────────────────────────────────────────────────────────────────
# MOCK DATA
# ─────────────────────────────────────────────────────────────────────

MOCK_MODEL = "openai/gpt-4"
MOCK_API_KEY = "test-api-key"

MOCK_COMPLETION_RESPONSE = {
    "id": "gen-123",
    "object": "chat.completion",
    "created": 1699000000,
    "model": MOCK_MODEL,
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "The capital of France is Paris."
            },
            "finish_reason": "stop"
        }
    ],
    "usage": {
        "prompt_tokens": 10,
        "completion_tokens": 8,
        "total_tokens": 18
    }
}

MOCK_TOOL_CALL_RESPONSE = {
    "id": "gen-456",
    "object": "chat.completion",
    "model": MOCK_MODEL,
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "id": "call_abc",
                        "type": "function",
                        "function": {
                            "name": "get_weather",
                            "arguments": "{\"city\": \"Paris\"}"
                        }
                    }
                ]
            },
            "finish_reason": "tool_calls"
        }
    ],
    "usage": {
        "prompt_tokens": 20,
        "completion_tokens": 5,
        "total_tokens": 25
    }
}


def chunk(content=None, finish_reason=None, tool_calls=None):
    """Build one chat.completion.chunk object."""
    delta = {}
    if content is not None:
        delta["content"] = content
    if tool_calls is not None:
        delta["tool_calls"] = tool_calls
    return {
        "id": "gen-123",
        "object": "chat.completion.chunk",
        "model": MOCK_MODEL,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }


MOCK_STREAMING_CHUNKS = [
    chunk(content="Hel"),
    chunk(content="lo"),
    chunk(finish_reason="stop"),
]


def to_sse_lines(chunks, done=True):
    """Encode chunks the way requests' iter_lines() hands them back."""
    lines = []
    for c in chunks:
        lines.append(f"data: {json.dumps(c)}".encode("utf-8"))
        lines.append(b"")
    if done:
        lines.append(b"data: [DONE]")
    return lines


# ─────────────────────────────────────────────────────────────────────
# FIXTURES
# ─────────────────────────────────────────────────────────────────────


@pytest.fixture
def model():
    return OpenRouterModel(MOCK_MODEL, OpenRouterConfig(api_key=MOCK_API_KEY))


@pytest.fixture
def make_http_response():
    """Factory for mock requests.Response objects."""

    def _make(status_code=200, json_body=None, lines=None, text=""):
        response = MagicMock()
        response.status_code = status_code
        response.ok = status_code < 400
        response.text = text
        if json_body is not None:
            response.json.return_value = json_body
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        response.iter_lines.return_value = iter(lines or [])
        return response

    return _make
