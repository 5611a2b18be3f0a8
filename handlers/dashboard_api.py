"""Dashboard API endpoints for the OpenRouter agent bridge."""

import logging
from flask import Blueprint, request, jsonify, current_app

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)


def get_config():
    """Get config from Flask app context."""
    return current_app.config['BRIDGE_CONFIG']


def get_log_manager():
    """Get log manager from Flask app context."""
    return current_app.config['LOG_MANAGER']


def get_model():
    """Get the OpenRouter model from Flask app context."""
    return current_app.config.get('MODEL')


@dashboard_bp.route('/api/config', methods=['GET'])
def get_configuration():
    """Get current configuration (API key redacted)."""
    config = get_config()

    return jsonify({
        'port': config.port,
        'localBaseUrl': f'http://localhost:{config.port}',
        'baseUrl': config.base_url,
        'model': config.model_name,
        'agentInstruction': config.agent_instruction,
        'requestTimeout': config.request_timeout,
        'streamTimeout': config.stream_timeout,
        'apiKeyConfigured': config.is_api_key_configured(),
        'sslVerify': config.get_verify_ssl(),
    })


@dashboard_bp.route('/api/status', methods=['GET'])
def get_status():
    """Get current system status."""
    config = get_config()
    model = get_model()

    return jsonify({
        'server': {
            'running': True,
            'port': config.port,
        },
        'model': {
            'name': model.name if model else config.model_name,
            'ready': model is not None,
            'endpoint': model.completions_url if model else None,
        },
        'authentication': {
            'type': 'api_key' if config.is_api_key_configured() else 'none',
            'configured': config.is_api_key_configured(),
        }
    })


@dashboard_bp.route('/api/logs', methods=['GET'])
def get_logs():
    """Get all logs."""
    log_manager = get_log_manager()
    limit = request.args.get('limit', 50, type=int)

    return jsonify({
        'apiCalls': log_manager.get_api_calls(limit),
        'serverEvents': log_manager.get_server_events(limit),
    })


@dashboard_bp.route('/api/logs', methods=['DELETE'])
def clear_logs():
    """Clear all logs."""
    log_manager = get_log_manager()
    log_manager.clear_logs()

    return jsonify({'success': True, 'message': 'Logs cleared'})


@dashboard_bp.route('/api/usage', methods=['GET'])
def get_usage():
    """Get usage statistics."""
    log_manager = get_log_manager()

    return jsonify(log_manager.get_usage_stats())


@dashboard_bp.route('/api/usage/reset', methods=['POST'])
def reset_usage():
    """Reset usage statistics."""
    log_manager = get_log_manager()
    log_manager.reset_usage()

    return jsonify({'success': True, 'message': 'Usage statistics reset'})


@dashboard_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({'status': 'healthy', 'service': 'openrouter-agent-bridge'})
