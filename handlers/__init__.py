"""Request handlers for the OpenRouter agent bridge."""

from .generate_handler import generate_bp
from .dashboard_api import dashboard_bp

__all__ = ['generate_bp', 'dashboard_bp']
