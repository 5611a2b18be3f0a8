"""Translate OpenAI chat-completion replies to generic responses."""

import json
import logging
from typing import Dict, Any, Optional

from .types import Content, FinishReason, LLMResponse, Part, UsageMetadata

logger = logging.getLogger(__name__)


def translate_response(message: Dict[str, Any]) -> LLMResponse:
    """
    Translate an OpenAI assistant message to a generic LLMResponse.

    The caller sets turn_complete, finish_reason and usage; this only maps
    content. Malformed tool-call arguments become an empty mapping instead
    of failing the whole response.

    Args:
        message: The `message` object of a choice, or an accumulated one

    Returns:
        LLMResponse with a single 'model' turn
    """
    parts = []

    text_content = message.get('content')
    if text_content:
        parts.append(Part.from_text(text_content))

    for tc in message.get('tool_calls') or []:
        if tc.get('type') != 'function':
            continue
        func = tc.get('function') or {}
        parts.append(Part.from_function_call(
            func.get('name', ''),
            parse_tool_arguments(func.get('arguments', '')),
            call_id=tc.get('id', '')
        ))

    return LLMResponse(content=Content(role='model', parts=parts))


def parse_tool_arguments(arguments: Any) -> Dict[str, Any]:
    """Decode a JSON-encoded argument string; anything unusable yields {}."""
    if not arguments or not isinstance(arguments, str):
        return {}
    try:
        args = json.loads(arguments)
    except ValueError:
        logger.debug(f"Discarding malformed tool arguments: {arguments[:200]}")
        return {}
    if not isinstance(args, dict):
        return {}
    return args


def translate_finish_reason(finish_reason: Optional[str]) -> FinishReason:
    """Translate an OpenAI finish_reason to a generic FinishReason."""
    mapping = {
        'stop': FinishReason.STOP,
        'length': FinishReason.MAX_TOKENS,
        'tool_calls': FinishReason.STOP,  # a tool call is an orderly stop
        'function_call': FinishReason.STOP,  # legacy function calling
    }

    return mapping.get(finish_reason or '', FinishReason.UNSPECIFIED)


def translate_usage(usage: Optional[Dict[str, Any]]) -> Optional[UsageMetadata]:
    """Translate OpenAI usage counts; None when nothing was reported."""
    if not usage or not usage.get('total_tokens'):
        return None

    return UsageMetadata(
        prompt_token_count=usage.get('prompt_tokens', 0),
        candidates_token_count=usage.get('completion_tokens', 0),
        total_token_count=usage.get('total_tokens', 0)
    )
