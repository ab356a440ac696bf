"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import Game, GameOutcome, GameResult, LetterFeedback, LetterStatus, ResultStatus
from .chat import ChatMessage, Reply

__all__ = [
    'Game', 'GameOutcome', 'GameResult', 'LetterFeedback', 'LetterStatus', 'ResultStatus',
    'ChatMessage', 'Reply'
]
