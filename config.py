"""Configuration management for the OpenRouter agent bridge."""

import os
import logging

from openrouter_model import DEFAULT_BASE_URL, OpenRouterConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'x-ai/grok-code-fast-1'


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        # Server settings
        self.port = int(os.getenv('PORT', '8080'))

        # Target gateway
        self.api_key = os.getenv('OPENROUTER_API_KEY', '')
        self.base_url = os.getenv('OPENROUTER_BASE_URL') or DEFAULT_BASE_URL
        self.model_name = os.getenv('OPENROUTER_MODEL') or DEFAULT_MODEL

        # Agent behavior
        self.agent_instruction = os.getenv('AGENT_INSTRUCTION', '')

        # Timeouts (seconds)
        self.request_timeout = float(os.getenv('REQUEST_TIMEOUT', '120'))
        self.stream_timeout = float(os.getenv('STREAM_TIMEOUT', '600'))

        self.skip_ssl_verify = os.getenv('SKIP_SSL_VERIFY', 'false').lower() == 'true'

    def is_api_key_configured(self) -> bool:
        """Check if the gateway API key is configured."""
        return bool(self.api_key)

    def get_verify_ssl(self) -> bool:
        """Get SSL verification setting."""
        return not self.skip_ssl_verify

    def to_model_config(self) -> OpenRouterConfig:
        """Build connection settings for OpenRouterModel."""
        return OpenRouterConfig(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.request_timeout,
            stream_timeout=self.stream_timeout,
            verify_ssl=self.get_verify_ssl()
        )

    def to_dict(self) -> dict:
        """Return configuration as dictionary (for API response)."""
        return {
            'port': self.port,
            'base_url': self.base_url,
            'model': self.model_name,
            'agent_instruction': self.agent_instruction,
            'request_timeout': self.request_timeout,
            'stream_timeout': self.stream_timeout,
            'api_key_configured': self.is_api_key_configured(),
            'ssl_verify': self.get_verify_ssl(),
        }
