"""
Chat Controller

Handles the HTTP endpoints used by chat platform adapters.
"""

from flask import Blueprint, jsonify

from ..services.command_service import get_command_service
from ..utils.decorators import require_chat_message
from ..utils.game_logger import game_logger
from ..utils.helpers import serialize_replies

chat_bp = Blueprint('chat', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


@chat_bp.route('/chat/message', methods=['POST'])
@require_chat_message
def chat_message(message=None):
    """Route one chat message and return the replies to post."""
    try:
        command_service = get_command_service()
        if not command_service:
            return _service_unavailable()

        replies = command_service.handle_message(message)
        response_data = {
            'success': True,
            'handled': replies is not None,
            'replies': serialize_replies(replies)
        }

        if replies is not None:
            game_logger.log_server_response(
                message, 'chat_message', True, response_data,
                reply_count=len(replies)
            )

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(message, e, 'chat_message')
        error_response = {
            'success': False,
            'error': str(e)
        }
        game_logger.log_server_response(message, 'chat_message', False, error_response)
        return jsonify(error_response), 500


@chat_bp.route('/game/<group_id>/state', methods=['GET'])
def get_state(group_id):
    """Get the current game state of a group, answer hidden while playing."""
    try:
        command_service = get_command_service()
        if not command_service:
            return _service_unavailable()

        game = command_service.engine.get_game(group_id)
        if game is None:
            return jsonify({
                'success': False,
                'error': 'Game not found'
            }), 404

        return jsonify({
            'success': True,
            'state': game.to_public_dict(),
            'bank': command_service.engine.get_bank(group_id)
        })

    except Exception as e:
        game_logger.log_error(None, e, 'get_state', group_id)
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@chat_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        command_service = get_command_service()
        engine = command_service.engine if command_service else None

        response_data = {
            'status': 'healthy' if engine else 'degraded',
            'active_games': engine.store.active_game_count() if engine else 0,
            'durable_store': bool(engine and engine.store.backend is not None),
            'words': engine.word_bank.get_statistics() if engine else {},
            'log_stats': game_logger.get_log_stats()
        }
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(None, e, 'health_check')
        return jsonify({
            'status': 'error',
            'error': str(e)
        }), 500
