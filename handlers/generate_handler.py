"""Generation endpoint - runs generic requests through the OpenRouter model."""

import json
import time
import itertools
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, request, jsonify, Response, stream_with_context, current_app

from openrouter_model import (
    Content, EncodingError, GenerateContentConfig, LLMRequest, LLMResponse,
    OpenRouterError, ProviderCallError, StreamReadError
)

logger = logging.getLogger(__name__)

generate_bp = Blueprint('generate', __name__)

GENERATE_PATH = '/v1/generate'


def get_config():
    """Get config from Flask app context."""
    return current_app.config['BRIDGE_CONFIG']


def get_model():
    """Get the OpenRouter model from Flask app context (None if not configured)."""
    return current_app.config.get('MODEL')


def get_log_manager():
    """Get log manager from Flask app context."""
    return current_app.config['LOG_MANAGER']


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def _error_body(error_type: str, message: str) -> Dict[str, Any]:
    return {'type': 'error', 'error': {'type': error_type, 'message': message}}


def _translate_error(e: OpenRouterError) -> Tuple[Dict[str, Any], int]:
    """Map a bridge error to an error body and HTTP status."""
    if isinstance(e, EncodingError):
        return _error_body('invalid_request_error', str(e)), 400
    if isinstance(e, ProviderCallError):
        return _error_body('api_error', str(e)), e.status_code or 502
    if isinstance(e, StreamReadError):
        return _error_body('api_error', str(e)), 502
    return _error_body('api_error', str(e)), 500


def _apply_agent_instruction(llm_request: LLMRequest, instruction: str):
    """Use the configured agent instruction when the request has none."""
    if not instruction:
        return
    if llm_request.config is None:
        llm_request.config = GenerateContentConfig()
    if llm_request.config.system_instruction is None:
        llm_request.config.system_instruction = Content.from_text(instruction, role='system')


def _usage_tokens(llm_response: Optional[LLMResponse]) -> Tuple[int, int]:
    if llm_response is None or llm_response.usage_metadata is None:
        return 0, 0
    usage = llm_response.usage_metadata
    return usage.prompt_token_count, usage.candidates_token_count


@generate_bp.route(GENERATE_PATH, methods=['POST'])
def generate():
    """
    Handle generic generation requests.

    Body: {"contents": [...], "config": {...}, "stream": bool}
    """
    start_time = time.time()
    config = get_config()
    log_manager = get_log_manager()
    model = get_model()

    body = request.get_json(silent=True)
    if not body or not isinstance(body, dict):
        error = _error_body('invalid_request_error', 'Request body must be a JSON object')
        log_manager.log_api_call('POST', GENERATE_PATH, 400, _elapsed_ms(start_time), None, error)
        return jsonify(error), 400

    if model is None:
        error = _error_body('authentication_error', 'OpenRouter API key is required')
        log_manager.log_api_call('POST', GENERATE_PATH, 503, _elapsed_ms(start_time), body, error)
        return jsonify(error), 503

    try:
        llm_request = LLMRequest.from_dict(body)
    except (AttributeError, TypeError, ValueError) as e:
        error = _error_body('invalid_request_error', f'Invalid request: {e}')
        log_manager.log_api_call('POST', GENERATE_PATH, 400, _elapsed_ms(start_time), body, error)
        return jsonify(error), 400

    _apply_agent_instruction(llm_request, config.agent_instruction)

    is_streaming = bool(body.get('stream', False))
    logger.info(f"-> {model.name} | turns={len(llm_request.contents)} | stream={is_streaming}")

    responses = model.generate_content(llm_request, stream=is_streaming)

    # Pull the first response here so request and connection errors get a real status code
    try:
        first = next(responses, None)
    except OpenRouterError as e:
        logger.error(f"Generation failed: {e}")
        error, status = _translate_error(e)
        log_manager.log_api_call('POST', GENERATE_PATH, status, _elapsed_ms(start_time), body, error)
        return jsonify(error), status

    if not is_streaming:
        return _handle_non_streaming(first, body, start_time, log_manager)

    return _handle_streaming(first, responses, body, start_time, log_manager)


def _handle_non_streaming(llm_response, body, start_time, log_manager):
    """Return the single complete response as JSON."""
    response_data = llm_response.to_dict()
    prompt_tokens, candidates_tokens = _usage_tokens(llm_response)

    log_manager.log_api_call('POST', GENERATE_PATH, 200, _elapsed_ms(start_time), body, response_data,
                             prompt_tokens=prompt_tokens, candidates_tokens=candidates_tokens)

    logger.info(f"<- finish_reason={response_data['finish_reason']} | "
                f"tokens={prompt_tokens}+{candidates_tokens}")

    return jsonify(response_data), 200


def _handle_streaming(first, responses, body, start_time, log_manager):
    """Relay each generic response as a server-sent event."""

    def event_stream():
        status = 200
        result: Dict[str, Any] = {'streaming': True}
        try:
            pending = [first] if first is not None else []
            for llm_response in itertools.chain(pending, responses):
                yield _sse_data(llm_response.to_dict())
                if llm_response.turn_complete:
                    result['finish_reason'] = llm_response.finish_reason.value
            yield 'data: [DONE]\n\n'
            logger.info(f"<- stream complete | finish_reason={result.get('finish_reason')}")
        except GeneratorExit:
            logger.warning("Client disconnected during stream")
            raise
        except OpenRouterError as e:
            logger.error(f"Streaming error: {e}")
            error, status = _translate_error(e)
            result = error
            yield f"event: error\ndata: {json.dumps(error)}\n\n"
        finally:
            responses.close()
            log_manager.log_api_call('POST', GENERATE_PATH, status, _elapsed_ms(start_time), body, result)

    return Response(
        stream_with_context(event_stream()),
        content_type='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
            'Connection': 'keep-alive'
        }
    ), 200


def _sse_data(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"
