"""
Services Package

Contains all business logic and service classes.
"""

from .command_service import CommandService, CooldownTracker, get_command_service, initialize_command_service
from .game_service import GameEngine, get_game_engine, initialize_game_engine
from .state_store import GameStateStore, MongoKeyValueBackend, create_state_store
from .word_bank import WordBank

__all__ = [
    'CommandService', 'CooldownTracker', 'get_command_service', 'initialize_command_service',
    'GameEngine', 'get_game_engine', 'initialize_game_engine',
    'GameStateStore', 'MongoKeyValueBackend', 'create_state_store',
    'WordBank'
]
