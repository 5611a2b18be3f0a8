"""OpenRouter model: generic requests in, OpenAI-compatible calls out."""

import logging
from typing import Dict, Any, Iterator, Optional
from dataclasses import dataclass

import requests

from .errors import ConfigurationError, EncodingError, ProviderCallError, StreamReadError
from .genai_to_openai import translate_request
from .openai_to_genai import translate_finish_reason, translate_response, translate_usage
from .streaming import StreamAccumulator, iter_sse_chunks
from .types import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://openrouter.ai/api/v1'


@dataclass
class OpenRouterConfig:
    """Connection settings for an OpenRouterModel."""
    api_key: str = ''
    base_url: str = ''
    timeout: float = 120
    stream_timeout: float = 600
    verify_ssl: bool = True


class OpenRouterModel:
    """
    Chat model backed by OpenRouter's OpenAI-compatible API.

    model_name uses OpenRouter's naming, e.g. 'openai/gpt-4' or
    'anthropic/claude-3-opus'.
    """

    def __init__(self, model_name: str, config: Optional[OpenRouterConfig] = None):
        if config is None or not config.api_key:
            raise ConfigurationError('OpenRouter API key is required')

        self.model_name = model_name
        self.config = config
        self.base_url = (config.base_url or DEFAULT_BASE_URL).rstrip('/')

    @property
    def name(self) -> str:
        return self.model_name

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def generate_content(self, request: LLMRequest, stream: bool = False) -> Iterator[LLMResponse]:
        """
        Generate a reply for a generic request.

        Yields exactly one complete response when not streaming. When
        streaming, yields a partial response per text delta and then one
        final response once the provider reports a finish reason.

        Closing the iterator early releases the underlying HTTP stream.

        Raises:
            EncodingError: The request could not be serialized (no call is made)
            ProviderCallError: The call failed or the reply was unusable
            StreamReadError: The stream broke part-way through
        """
        try:
            openai_request = translate_request(request, self.model_name)
        except EncodingError as e:
            raise EncodingError(f"failed to convert request: {e}") from e

        if stream:
            yield from self._generate_streaming(openai_request)
        else:
            yield self._generate_non_streaming(openai_request)

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.config.api_key}',
        }

    def _generate_non_streaming(self, openai_request: Dict[str, Any]) -> LLMResponse:
        """Handle a non-streaming call."""
        try:
            response = requests.post(
                self.completions_url,
                json=openai_request,
                headers=self._headers(),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl
            )
        except requests.exceptions.RequestException as e:
            raise ProviderCallError(f"openrouter error: {e}") from e

        if not response.ok:
            raise ProviderCallError(
                f"openrouter error: {_extract_error_message(response)}",
                status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderCallError(f"openrouter error: invalid JSON in reply: {e}") from e

        choices = body.get('choices') or []
        if not choices:
            raise ProviderCallError('openrouter returned no choices')

        choice = choices[0]
        llm_response = translate_response(choice.get('message') or {})
        llm_response.turn_complete = True
        llm_response.finish_reason = translate_finish_reason(choice.get('finish_reason'))
        llm_response.usage_metadata = translate_usage(body.get('usage'))

        return llm_response

    def _generate_streaming(self, openai_request: Dict[str, Any]) -> Iterator[LLMResponse]:
        """Handle a streaming call."""
        openai_request = dict(openai_request, stream=True)

        try:
            response = requests.post(
                self.completions_url,
                json=openai_request,
                headers=self._headers(),
                timeout=self.config.stream_timeout,
                stream=True,
                verify=self.config.verify_ssl
            )
        except requests.exceptions.RequestException as e:
            raise ProviderCallError(f"openrouter stream error: {e}") from e

        try:
            if not response.ok:
                raise ProviderCallError(
                    f"openrouter stream error: {_extract_error_message(response)}",
                    status_code=response.status_code
                )

            accumulator = StreamAccumulator()
            try:
                for chunk in iter_sse_chunks(response.iter_lines()):
                    for llm_response in accumulator.process_chunk(chunk):
                        yield llm_response
                    if accumulator.closed:
                        return
            except requests.exceptions.RequestException as e:
                raise StreamReadError(f"openrouter stream recv error: {e}") from e

            logger.warning(
                f"Stream for {self.model_name} ended without a finish_reason; "
                f"dropping {len(accumulator.state.content)} chars and "
                f"{len(accumulator.state.tool_calls)} tool call(s)"
            )
        finally:
            response.close()


def _extract_error_message(response: requests.Response) -> str:
    """Pull a readable message out of an error reply."""
    try:
        error_data = response.json()
    except ValueError:
        return response.text or f'HTTP {response.status_code}'

    if isinstance(error_data, dict):
        error_info = error_data.get('error')
        if isinstance(error_info, str):
            return error_info
        if isinstance(error_info, dict) and error_info.get('message'):
            return error_info['message']
        if error_data.get('message'):
            return error_data['message']

    return str(error_data)
