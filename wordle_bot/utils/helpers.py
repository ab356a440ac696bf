"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Dict, List, Optional

from ..models.chat import ChatMessage, Reply


def chat_message_from_payload(data: Optional[Dict[str, Any]]) -> Optional[ChatMessage]:
    """Build a ChatMessage from a JSON payload, or None if required fields are missing."""
    if not isinstance(data, dict):
        return None
    group_id = data.get('group_id')
    text = data.get('message')
    if group_id in (None, '') or not isinstance(text, str):
        return None
    return ChatMessage(
        group_id=str(group_id),
        user_id=str(data.get('user_id') or 'anonymous'),
        text=text,
        sender_name=data.get('sender_name')
    )


def serialize_replies(replies: Optional[List[Reply]]) -> List[Dict[str, str]]:
    return [reply.to_dict() for reply in replies or []]
