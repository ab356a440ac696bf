"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
_RESOURCES_DIR = os.path.join(_PROJECT_ROOT, 'resources')


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = _env_flag('DEBUG', 'False')

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))

    # Durable game-state store (memory-only when unset)
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB = os.getenv('MONGO_DB', 'wordle_bot')
    MONGO_COLLECTION = os.getenv('MONGO_COLLECTION', 'kv_store')

    # Word lists
    WORDS_FILE = os.getenv('WORDS_FILE', os.path.join(_RESOURCES_DIR, 'words.txt'))
    BACKUP_WORDS_FILE = os.getenv('BACKUP_WORDS_FILE', os.path.join(_RESOURCES_DIR, 'words-all.txt'))
    HELP_FILE = os.getenv('HELP_FILE', os.path.join(_RESOURCES_DIR, 'help.txt'))

    # Game Settings
    CLEANUP_DELAY_SECONDS = float(os.getenv('CLEANUP_DELAY_SECONDS', 30))
    GUESS_COOLDOWN_SECONDS = float(os.getenv('GUESS_COOLDOWN_SECONDS', 10))
    RENDER_IMAGES = _env_flag('RENDER_IMAGES', 'True')

    # Translation enrichment (Baidu translate API)
    TRANSLATE_ENABLED = _env_flag('TRANSLATE_ENABLED', 'True')
    BAIDU_TRANSLATE_APPID = os.getenv('BAIDU_TRANSLATE_APPID', '')
    BAIDU_TRANSLATE_APPKEY = os.getenv('BAIDU_TRANSLATE_APPKEY', '')
    BAIDU_TRANSLATE_FROM = os.getenv('BAIDU_TRANSLATE_FROM', 'en')
    BAIDU_TRANSLATE_TO = os.getenv('BAIDU_TRANSLATE_TO', 'zh')

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    MONGO_URI = None
    RENDER_IMAGES = False
    TRANSLATE_ENABLED = False


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
