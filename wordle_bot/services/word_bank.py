"""
Word Bank Service

Loads the main and backup word lists, caches them for an hour and answers
random-draw, membership and definition queries.
"""

import random
import re
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from ..config.game_settings import (
    BANK_MAIN, BANK_BACKUP, DEFINITION_SEPARATOR, WORD_CACHE_TTL_SECONDS
)
from ..utils.game_logger import game_logger

WORD_RE = re.compile(r'^[a-z]+$')
POS_MARKER_RE = re.compile(r'[a-zA-Z]+\.')


@dataclass
class WordLists:
    """Parsed word banks plus the indexes derived from them."""
    main_words: List[str] = field(default_factory=list)
    backup_words: List[str] = field(default_factory=list)
    definitions: Dict[str, str] = field(default_factory=dict)
    by_length: Dict[str, Dict[int, List[str]]] = field(default_factory=dict)
    valid_by_length: Dict[int, Set[str]] = field(default_factory=dict)

    def __post_init__(self):
        self.by_length = {
            BANK_MAIN: _index_by_length(self.main_words),
            BANK_BACKUP: _index_by_length(self.backup_words),
        }
        self.valid_by_length = {}
        for word in self.main_words + self.backup_words:
            self.valid_by_length.setdefault(len(word), set()).add(word)

    @property
    def lengths(self) -> Set[int]:
        return set(self.valid_by_length)


def _index_by_length(words: List[str]) -> Dict[int, List[str]]:
    index: Dict[int, List[str]] = {}
    for word in words:
        index.setdefault(len(word), []).append(word)
    return index


def parse_main_line(line: str):
    """
    Parse a main-bank line such as ``314| banner n. flag; banner``.

    Returns ``(word, raw_definition)`` or ``None`` for lines to skip.
    """
    text = line.strip()
    if not text:
        return None
    if '|' in text:
        text = text.split('|', 1)[1].strip()
    parts = text.split(None, 1)
    if not parts:
        return None
    word = parts[0].lower()
    if not WORD_RE.match(word):
        return None
    definition = parts[1].strip() if len(parts) > 1 else ''
    return word, definition


def parse_backup_line(line: str) -> Optional[str]:
    word = line.strip().lower()
    if not word or not WORD_RE.match(word):
        return None
    return word


def extract_definition(text: str) -> str:
    """
    Strip part-of-speech markers (``n.``, ``vt.``, ``adj.``) from a raw
    definition. Text before the first marker is dropped, and fragments that
    follow different markers are joined with a full-width semicolon.
    """
    text = (text or '').strip()
    if not text:
        return ''
    pieces = POS_MARKER_RE.split(text)
    if len(pieces) == 1:
        return text

    fragments = [piece.strip() for piece in pieces[1:] if piece.strip()]
    if fragments:
        result = DEFINITION_SEPARATOR.join(fragments)
    else:
        result = POS_MARKER_RE.sub('', text).strip()

    result = re.sub(r'\s+', ' ', result)
    result = re.sub(f'{DEFINITION_SEPARATOR}+', DEFINITION_SEPARATOR, result)
    return result.strip()


class WordBank:
    """
    Supplies word lists and answers membership queries.

    Both files are parsed together and the result is shared by every group;
    it is rebuilt wholesale once the cache interval has elapsed.
    """

    def __init__(self,
                 words_file: str,
                 backup_words_file: str,
                 cache_ttl: float = WORD_CACHE_TTL_SECONDS,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.words_file = words_file
        self.backup_words_file = backup_words_file
        self.cache_ttl = cache_ttl
        self.rng = rng or random.Random()
        self.clock = clock
        self._cache: Optional[WordLists] = None
        self._cache_time = 0.0
        self._lock = threading.Lock()

    def load_words(self) -> WordLists:
        """Load both word banks, served from cache while it is fresh."""
        with self._lock:
            now = self.clock()
            if self._cache is not None and now - self._cache_time < self.cache_ttl:
                return self._cache

            main_words, definitions = self._read_main_bank()
            backup_words = self._read_backup_bank()

            self._cache = WordLists(
                main_words=main_words,
                backup_words=backup_words,
                definitions=definitions,
            )
            self._cache_time = now
            game_logger.logger.info(
                f"Word banks loaded: {len(main_words)} main words, {len(backup_words)} backup words")
            return self._cache

    def _read_lines(self, path: str, label: str) -> List[str]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read().splitlines()
        except FileNotFoundError:
            game_logger.logger.error(f"{label} word file not found: {path}")
        except (OSError, UnicodeDecodeError) as e:
            game_logger.logger.error(f"Failed to read {label} word file {path}: {e}")
        return []

    def _read_main_bank(self):
        words: List[str] = []
        definitions: Dict[str, str] = {}
        for line in self._read_lines(self.words_file, 'Main'):
            parsed = parse_main_line(line)
            if parsed is None:
                continue
            word, definition = parsed
            if word not in definitions:
                words.append(word)
                definitions[word] = definition
        return words, definitions

    def _read_backup_bank(self) -> List[str]:
        words: List[str] = []
        seen: Set[str] = set()
        for line in self._read_lines(self.backup_words_file, 'Backup'):
            word = parse_backup_line(line)
            if word is None or word in seen:
                continue
            seen.add(word)
            words.append(word)
        return words

    def get_random_word(self, letter_count: int, bank: str = BANK_MAIN) -> Optional[str]:
        """
        Pick a uniformly random word of exactly ``letter_count`` letters.

        Returns:
            The word, or None if the bank has no word of that length
        """
        if bank not in (BANK_MAIN, BANK_BACKUP):
            game_logger.logger.warning(f"Unknown word bank '{bank}', using main bank")
            bank = BANK_MAIN

        candidates = self.load_words().by_length[bank].get(letter_count)
        if not candidates:
            return None
        word = self.rng.choice(candidates)
        game_logger.logger.debug(f"Drew target word from {bank} bank: {word}")
        return word

    def is_valid_word(self, word: str, letter_count: Optional[int] = None) -> bool:
        """Case-insensitive membership in either bank at exactly the expected length."""
        if not word:
            return False
        candidate = word.lower()
        length = letter_count or len(candidate)
        if len(candidate) != length:
            return False

        valid = self.load_words().valid_by_length.get(length)
        if not valid:
            return False
        return candidate in valid

    def get_definition(self, word: str,
                       translator: Optional[Callable[[str], str]] = None) -> str:
        """
        Look up the main-bank definition, falling back to translation.

        Never raises; an empty string means nothing was found.
        """
        definition = ''
        try:
            raw = self.load_words().definitions.get((word or '').lower(), '')
            definition = extract_definition(raw)
        except Exception as e:
            game_logger.logger.warning(f"Failed to look up definition for '{word}': {e}")

        if not definition and translator is not None:
            game_logger.logger.info(f"No local definition for '{word}', trying translation")
            try:
                translation = translator(word)
            except Exception as e:
                game_logger.logger.warning(f"Translation lookup for '{word}' failed: {e}")
                translation = ''
            if translation:
                definition = f"Translation: {translation}"

        return definition

    def get_statistics(self) -> dict:
        """Word counts per bank and per length, for monitoring."""
        words = self.load_words()
        return {
            'main_words': len(words.main_words),
            'backup_words': len(words.backup_words),
            'lengths': sorted(words.lengths),
            'main_by_length': {length: len(items) for length, items in sorted(words.by_length[BANK_MAIN].items())},
            'backup_by_length': {length: len(items) for length, items in sorted(words.by_length[BANK_BACKUP].items())},
        }
