"""Bridge between generic agent chat requests and OpenRouter's OpenAI-compatible API."""

from .errors import (
    OpenRouterError, ConfigurationError, EncodingError, ProviderCallError, StreamReadError
)
from .genai_to_openai import translate_request
from .model import DEFAULT_BASE_URL, OpenRouterConfig, OpenRouterModel
from .openai_to_genai import translate_finish_reason, translate_response
from .streaming import StreamAccumulator
from .types import (
    Content, FinishReason, FunctionCall, FunctionDeclaration, FunctionResponse,
    GenerateContentConfig, LLMRequest, LLMResponse, Part, Schema, Tool, UsageMetadata
)

__all__ = [
    'OpenRouterModel', 'OpenRouterConfig', 'DEFAULT_BASE_URL',
    'translate_request', 'translate_response', 'translate_finish_reason', 'StreamAccumulator',
    'OpenRouterError', 'ConfigurationError', 'EncodingError', 'ProviderCallError', 'StreamReadError',
    'Content', 'Part', 'FunctionCall', 'FunctionResponse', 'Schema', 'FunctionDeclaration',
    'Tool', 'GenerateContentConfig', 'LLMRequest', 'LLMResponse', 'UsageMetadata', 'FinishReason',
]
