"""Error types raised by the OpenRouter model bridge."""

from typing import Optional


class OpenRouterError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(OpenRouterError):
    """The model could not be constructed from the given configuration."""


class EncodingError(OpenRouterError):
    """A request could not be serialized for the provider."""


class ProviderCallError(OpenRouterError):
    """The chat-completion call failed or returned an unusable reply."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StreamReadError(OpenRouterError):
    """Reading the streaming reply failed part-way through."""
