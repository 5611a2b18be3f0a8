#!/usr/bin/env python3
"""OpenRouter agent bridge - serves a generic chat agent backed by OpenRouter."""

import sys
import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

from config import Config
from logger_manager import LoggerManager
from handlers import generate_bp, dashboard_bp
from openrouter_model import ConfigurationError, OpenRouterModel

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    CORS(app)

    if config is None:
        config = Config()
    app.config['BRIDGE_CONFIG'] = config

    log_manager = LoggerManager()
    app.config['LOG_MANAGER'] = log_manager

    # A missing key leaves the dashboard up but generation unavailable
    model = None
    try:
        model = OpenRouterModel(config.model_name, config.to_model_config())
    except ConfigurationError as e:
        log_manager.log_server_event('error', f'Failed to create model: {e}')
    app.config['MODEL'] = model

    app.register_blueprint(generate_bp)
    app.register_blueprint(dashboard_bp)

    @app.route('/')
    def index():
        return jsonify({
            'service': 'openrouter-agent-bridge',
            'model': config.model_name,
            'endpoints': ['/v1/generate', '/api/status', '/api/config', '/api/logs', '/api/usage', '/health'],
        })

    log_manager.log_server_event('info', 'OpenRouter agent bridge started', {
        'port': config.port,
        'model': config.model_name,
        'base_url': config.base_url,
        'api_key': config.is_api_key_configured(),
    })

    return app


def main():
    """Main entry point."""
    app = create_app()
    config = app.config['BRIDGE_CONFIG']

    print()
    print("=" * 60)
    print("  OpenRouter Agent Bridge")
    print("=" * 60)
    print()
    print(f"  Generate:   http://localhost:{config.port}/v1/generate")
    print(f"  Status:     http://localhost:{config.port}/api/status")
    print()
    print(f"  Model:      {config.model_name}")
    print(f"  Gateway:    {config.base_url}")
    print(f"  API key:    {'Configured' if config.is_api_key_configured() else 'MISSING (set OPENROUTER_API_KEY)'}")
    print()
    print("=" * 60)
    print()

    try:
        app.run(
            host='0.0.0.0',
            port=config.port,
            debug=False,
            threaded=True
        )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
