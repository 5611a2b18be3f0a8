"""Translate generic chat requests to OpenAI chat-completion format."""

import json
import logging
from typing import Dict, Any, List, Optional

from .errors import EncodingError
from .types import Content, FunctionDeclaration, LLMRequest, Schema

logger = logging.getLogger(__name__)


def translate_request(request: LLMRequest, model_name: str) -> Dict[str, Any]:
    """
    Translate a generic LLMRequest to an OpenAI /chat/completions request body.

    Args:
        request: The generic request (turns plus generation options)
        model_name: Provider model identifier, e.g. 'openai/gpt-4'

    Returns:
        OpenAI-compatible request body

    Raises:
        EncodingError: If function-call arguments or a function response
            cannot be serialized to JSON
    """
    openai_request: Dict[str, Any] = {'model': model_name}

    messages = []
    for content in request.contents:
        messages.extend(translate_content(content))

    config = request.config

    # System instruction always goes first, even if a system turn exists
    if config is not None and config.system_instruction is not None:
        messages.insert(0, {
            'role': 'system',
            'content': extract_text(config.system_instruction)
        })

    openai_request['messages'] = messages

    if config is not None:
        tools = []
        for tool in config.tools:
            for fn in tool.function_declarations:
                tools.append(translate_function_declaration(fn))
        if tools:
            openai_request['tools'] = tools

        if config.temperature is not None:
            openai_request['temperature'] = config.temperature
        if config.top_p is not None:
            openai_request['top_p'] = config.top_p
        if config.max_output_tokens:
            openai_request['max_completion_tokens'] = config.max_output_tokens
        if config.stop_sequences:
            openai_request['stop'] = list(config.stop_sequences)

    logger.debug(f"Translated request: model={model_name} msgs={len(messages)} "
                 f"tools={len(openai_request.get('tools', []))}")

    return openai_request


def translate_content(content: Content) -> List[Dict[str, Any]]:
    """
    Translate one generic turn into zero or more OpenAI messages.

    Function responses become standalone tool messages, in part order.
    Text and function calls are folded into a single trailing message.
    """
    messages = []
    text_parts = []
    tool_calls = []

    for part in content.parts:
        if part.text:
            text_parts.append(part.text)

        if part.function_call is not None:
            call = part.function_call
            tool_calls.append({
                'id': call.id,
                'type': 'function',
                'function': {
                    'name': call.name,
                    'arguments': _encode_json(call.args, 'function call args')
                }
            })

        if part.function_response is not None:
            response = part.function_response
            messages.append({
                'role': 'tool',
                'content': _encode_json(response.response, 'function response'),
                'tool_call_id': response.id
            })

    if text_parts or tool_calls:
        # Tool calls can only be issued by the assistant
        role = 'assistant' if tool_calls else translate_role(content.role)
        message: Dict[str, Any] = {'role': role}
        if text_parts:
            message['content'] = join_strings(text_parts)
        if tool_calls:
            message['tool_calls'] = tool_calls
        messages.append(message)

    return messages


def translate_role(role: str) -> str:
    """Map a generic role to an OpenAI role. Unknown roles become 'user'."""
    if role in ('model', 'assistant'):
        return 'assistant'
    if role == 'system':
        return 'system'
    if role == 'tool':
        return 'tool'
    return 'user'


def translate_function_declaration(fn: FunctionDeclaration) -> Dict[str, Any]:
    """Translate a function declaration to an OpenAI tool entry."""
    function: Dict[str, Any] = {'name': fn.name}
    if fn.description:
        function['description'] = fn.description

    # Structured schema wins over a pre-built JSON schema
    parameters: Optional[Dict[str, Any]] = None
    if fn.parameters is not None:
        parameters = translate_schema(fn.parameters)
    elif fn.parameters_json_schema is not None:
        parameters = fn.parameters_json_schema

    if parameters is not None:
        function['parameters'] = parameters

    return {'type': 'function', 'function': function}


def translate_schema(schema: Schema) -> Dict[str, Any]:
    """Translate a structured Schema to a JSON-schema mapping, omitting empty fields."""
    result: Dict[str, Any] = {}

    if schema.type:
        result['type'] = schema.type
    if schema.description:
        result['description'] = schema.description
    if schema.enum:
        result['enum'] = list(schema.enum)
    if schema.items is not None:
        result['items'] = translate_schema(schema.items)
    if schema.properties:
        result['properties'] = {
            name: translate_schema(prop)
            for name, prop in schema.properties.items()
        }
    if schema.required:
        result['required'] = list(schema.required)

    return result


def extract_text(content: Content) -> str:
    """Concatenate all text parts of a turn."""
    return join_strings([part.text for part in content.parts if part.text])


def join_strings(strs: List[str]) -> str:
    """Join strings with no separator."""
    return ''.join(strs)


def _encode_json(value: Any, what: str) -> str:
    try:
        return json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"failed to marshal {what}: {e}") from e
