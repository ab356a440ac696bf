"""
Game Configuration Constants Module

This module defines all game configuration constants. Rules that the engine,
store, router and renderer must agree on are centralized here so they can be
tuned in one place.
"""

from typing import Dict, Final, Tuple

# Letter count bounds for a single game
MIN_LETTER_COUNT: Final[int] = 3
MAX_LETTER_COUNT: Final[int] = 8
DEFAULT_LETTER_COUNT: Final[int] = 5

ADAPTIVE_ATTEMPTS: Final[Dict[int, int]] = {
    3: 4,
    4: 5,
    5: 6,
    6: 8,
    7: 10,
    8: 12,
}
"""
Maximum guesses per letter count. Shorter words get fewer attempts,
longer words more.
"""

DEFAULT_MAX_ATTEMPTS: Final[int] = 6

# Word banks
BANK_MAIN: Final[str] = 'main'
BANK_BACKUP: Final[str] = 'backup'
BANK_IDS: Final[Tuple[str, str]] = (BANK_MAIN, BANK_BACKUP)
BANK_NAMES: Final[Dict[str, str]] = {
    BANK_MAIN: 'Core vocabulary',
    BANK_BACKUP: 'Full dictionary',
}
BANK_DESCRIPTIONS: Final[Dict[str, str]] = {
    BANK_MAIN: 'Core vocabulary: common exam words, good for everyday practice',
    BANK_BACKUP: 'Full dictionary: a much wider vocabulary, harder to guess',
}

# Timing (seconds)
WORD_CACHE_TTL_SECONDS: Final[int] = 3600
GAME_TTL_SECONDS: Final[int] = 86400
CLEANUP_DELAY_SECONDS: Final[float] = 30
GUESS_COOLDOWN_SECONDS: Final[float] = 10
TRANSLATE_TIMEOUT_SECONDS: Final[float] = 10
RENDER_WARN_SECONDS: Final[float] = 1.0

# Store key namespaces
GAME_KEY_PREFIX: Final[str] = 'wordle:game:'
WORDBANK_KEY_PREFIX: Final[str] = 'wordle:wordbank:'

# Definition fragments from different part-of-speech markers are joined with this
DEFINITION_SEPARATOR: Final[str] = '；'

KEYBOARD_LAYOUT: Final[Tuple[str, str, str]] = (
    'QWERTYUIOP',
    'ASDFGHJKL',
    'ZXCVBNM',
)


def max_attempts_for(letter_count: int) -> int:
    """Return the attempt budget for a word length."""
    return ADAPTIVE_ATTEMPTS.get(letter_count, DEFAULT_MAX_ATTEMPTS)


def is_valid_letter_count(letter_count: int) -> bool:
    if not isinstance(letter_count, int) or isinstance(letter_count, bool):
        return False
    return MIN_LETTER_COUNT <= letter_count <= MAX_LETTER_COUNT
