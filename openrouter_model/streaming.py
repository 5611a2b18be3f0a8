"""Accumulate OpenAI streaming chunks into generic responses."""

import json
import logging
from typing import Dict, Any, Iterable, Iterator, List, Union
from dataclasses import dataclass, field

from .errors import StreamReadError
from .openai_to_genai import translate_finish_reason, translate_response
from .types import Content, LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class StreamState:
    """Track state accumulated over one streaming call."""
    content: str = ''
    tool_calls: List[Dict[str, Any]] = field(default_factory=list)
    closed: bool = False


class StreamAccumulator:
    """
    Turns OpenAI streaming chunks into generic LLMResponses.

    OpenAI chunk format:
        {"choices":[{"delta":{"content":"Hi"},"finish_reason":null}]}
        {"choices":[{"delta":{"tool_calls":[{"index":0,"function":{"arguments":"{\\"a\\""}}]}}]}
        {"choices":[{"delta":{},"finish_reason":"stop"}]}

    Every text delta is emitted right away as a partial response carrying
    just that delta. Tool-call deltas are merged silently into their slot.
    The first chunk with a finish_reason produces one final, complete
    response and closes the accumulator.
    """

    def __init__(self):
        self.state = StreamState()

    @property
    def closed(self) -> bool:
        return self.state.closed

    def process_chunk(self, chunk: Dict[str, Any]) -> List[LLMResponse]:
        """
        Merge a single decoded chunk.

        Args:
            chunk: One decoded `chat.completion.chunk` object

        Returns:
            Responses to emit for this chunk, in order (possibly empty)
        """
        responses = []

        if self.state.closed:
            return responses

        choices = chunk.get('choices') or []
        if not choices:
            return responses

        choice = choices[0]
        delta = choice.get('delta') or {}
        finish_reason = choice.get('finish_reason')

        text = delta.get('content')
        if text:
            self.state.content += text
            responses.append(LLMResponse(
                content=Content.from_text(text, role='model'),
                partial=True
            ))

        for tc_delta in delta.get('tool_calls') or []:
            self._merge_tool_call(tc_delta)

        if finish_reason:
            responses.append(self._finish(finish_reason))

        return responses

    def _merge_tool_call(self, tc_delta: Dict[str, Any]):
        """Merge one tool-call delta into the slot named by its index."""
        index = tc_delta.get('index')
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            return

        tool_calls = self.state.tool_calls
        while len(tool_calls) <= index:
            tool_calls.append({'id': '', 'type': '', 'function': {'name': '', 'arguments': ''}})

        slot = tool_calls[index]
        if tc_delta.get('id'):
            slot['id'] = tc_delta['id']
        if tc_delta.get('type'):
            slot['type'] = tc_delta['type']

        function = tc_delta.get('function') or {}
        if function.get('name'):
            slot['function']['name'] = function['name']
        # Arguments arrive in fragments and are only ever appended
        arguments = function.get('arguments')
        if isinstance(arguments, str):
            slot['function']['arguments'] += arguments

    def _finish(self, finish_reason: str) -> LLMResponse:
        """Build the final response from everything accumulated and close."""
        final_message = {
            'role': 'assistant',
            'content': self.state.content,
            'tool_calls': self.state.tool_calls,
        }

        response = translate_response(final_message)
        response.turn_complete = True
        response.partial = False
        response.finish_reason = translate_finish_reason(finish_reason)

        self.state.closed = True
        return response


def iter_sse_chunks(lines: Iterable[Union[bytes, str]]) -> Iterator[Dict[str, Any]]:
    """
    Decode server-sent event lines into chunk objects.

    Stops at `data: [DONE]`. Blank lines and `:` comments (keep-alives)
    are skipped.

    Raises:
        StreamReadError: On undecodable data or an error object in the stream
    """
    for raw_line in lines:
        if isinstance(raw_line, bytes):
            try:
                line = raw_line.decode('utf-8').strip()
            except UnicodeDecodeError as e:
                raise StreamReadError(f"openrouter stream recv error: {e}") from e
        else:
            line = raw_line.strip()

        if not line or line.startswith(':'):
            continue

        if not line.startswith('data:'):
            logger.debug(f"Unexpected stream line: {line[:100]}")
            continue

        payload = line[5:].strip()
        if payload == '[DONE]':
            return

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise StreamReadError(f"openrouter stream recv error: {e}") from e

        if isinstance(data, dict) and 'error' in data:
            raise StreamReadError(f"openrouter stream recv error: {_error_message(data['error'])}")

        yield data


def _error_message(error_obj: Any) -> str:
    if isinstance(error_obj, dict):
        return error_obj.get('message', str(error_obj))
    return str(error_obj)
