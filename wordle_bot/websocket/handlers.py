"""
WebSocket Event Handlers

Handles WebSocket events for chat adapters that keep a live connection.
"""

from flask_socketio import emit, join_room

from ..services.command_service import get_command_service
from ..utils.decorators import websocket_message_required
from ..utils.game_logger import game_logger
from ..utils.helpers import serialize_replies


def group_room(group_id) -> str:
    return f"group_{group_id}"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('join_group')
    def handle_join_group(data):
        """Subscribe this connection to a group's replies."""
        group_id = data.get('group_id') if isinstance(data, dict) else None
        if not group_id:
            emit('error', {'error': 'group_id is required'})
            return
        join_room(group_room(group_id))
        emit('joined_group', {'group_id': group_id})

    @socketio.on('chat_message')
    @websocket_message_required
    def handle_chat_message(data, message=None):
        """Route a chat message and broadcast replies to the group room."""
        try:
            command_service = get_command_service()
            if not command_service:
                emit('error', {'error': 'Game service unavailable'})
                return

            replies = command_service.handle_message(message)
            if replies is None:
                return

            payload = {
                'group_id': message.group_id,
                'user_id': message.user_id,
                'replies': serialize_replies(replies)
            }
            socketio.emit('chat_reply', payload, room=group_room(message.group_id))
            game_logger.log_server_response(
                message, 'chat_message', True, payload,
                transport='websocket', reply_count=len(replies)
            )

        except Exception as e:
            game_logger.log_error(message, e, 'chat_message')
            emit('error', {'error': str(e)})
