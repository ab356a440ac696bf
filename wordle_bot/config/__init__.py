"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Game rules and constants (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    ADAPTIVE_ATTEMPTS, BANK_MAIN, BANK_BACKUP, MIN_LETTER_COUNT, MAX_LETTER_COUNT,
    DEFAULT_LETTER_COUNT, max_attempts_for, is_valid_letter_count
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'ADAPTIVE_ATTEMPTS', 'BANK_MAIN', 'BANK_BACKUP', 'MIN_LETTER_COUNT', 'MAX_LETTER_COUNT',
    'DEFAULT_LETTER_COUNT', 'max_attempts_for', 'is_valid_letter_count'
]
