"""
Chat Data Models

Contains the inbound message and outbound reply structures exchanged
with the chat transport.
"""

import base64
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class ChatMessage:
    """Inbound chat message."""
    group_id: Optional[str]
    user_id: str
    text: str
    sender_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.sender_name or self.user_id


@dataclass
class Reply:
    """One outbound reply segment: text or a PNG image."""
    type: str
    text: Optional[str] = None
    image: Optional[bytes] = None

    @classmethod
    def text_segment(cls, text: str) -> 'Reply':
        return cls(type='text', text=text)

    @classmethod
    def image_segment(cls, image: bytes) -> 'Reply':
        return cls(type='image', image=image)

    def to_dict(self) -> Dict[str, str]:
        if self.type == 'image':
            return {'type': 'image', 'data': base64.b64encode(self.image or b'').decode('ascii')}
        return {'type': 'text', 'text': self.text or ''}
