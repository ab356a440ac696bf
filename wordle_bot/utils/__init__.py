"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_chat_message, websocket_message_required
from .helpers import chat_message_from_payload, serialize_replies
from .game_logger import game_logger

__all__ = [
    'require_chat_message', 'websocket_message_required',
    'chat_message_from_payload', 'serialize_replies', 'game_logger'
]
