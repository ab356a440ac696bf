"""
Payload Decorators

Contains decorators that validate chat payloads for HTTP and WebSocket handlers.
"""

from functools import wraps
from flask import request, jsonify
from flask_socketio import emit

from .helpers import chat_message_from_payload


def require_chat_message(f):
    """
    Decorator for HTTP endpoints that receive a chat message.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        message = chat_message_from_payload(request.get_json(silent=True))
        if message is None:
            return jsonify({
                'success': False,
                'error': 'group_id and message are required'
            }), 400

        kwargs['message'] = message
        return f(*args, **kwargs)

    return decorated_function


def websocket_message_required(f):
    """Decorator for WebSocket events that carry a chat message."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        message = chat_message_from_payload(args[0] if args else None)
        if message is None:
            emit('error', {'error': 'group_id and message are required'})
            return

        kwargs['message'] = message
        return f(*args, **kwargs)

    return decorated_function
