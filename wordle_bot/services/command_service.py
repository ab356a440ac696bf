"""
Command Service

Parses inbound chat text into game engine operations and hands results to
the presenter. Also owns the per-user guess cooldown, which sits in front of
the engine and never touches game state.
"""

import math
import os
import re
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..config.game_settings import DEFAULT_LETTER_COUNT, GUESS_COOLDOWN_SECONDS
from ..models.chat import ChatMessage, Reply
from ..models.game import ResultStatus
from ..utils.game_logger import game_logger
from .game_service import GameEngine, initialize_game_engine
from .presenter_service import ChatPresenter
from .render_service import BoardRenderer
from .state_store import create_state_store
from .translate_service import BaiduTranslator
from .word_bank import WordBank

WORDLE_CMD_RE = re.compile(r'^#wordle(.*)$', re.IGNORECASE | re.DOTALL)
GUESS_RE = re.compile(r'^([#!！])?([a-zA-Z]+)$')
NUMBER_RE = re.compile(r'^\d+$')
ALPHA_RE = re.compile(r'^[a-z]+$')

ABANDON_ARGS = ('ans', 'answer', 'giveup', 'give up', 'reveal')
BANK_ARGS = ('bank', 'wordbank')

# Rejections that happen before a guess is really attempted do not start a cooldown
_NO_COOLDOWN_STATUSES = {ResultStatus.NO_GAME, ResultStatus.NON_ALPHABETIC, ResultStatus.INVALID_LENGTH}

DEFAULT_HELP = """Wordle help

Commands:
#wordle - start a new game (5 letters)
#wordle [3-8] - start a game with that many letters
#[word] or ![word] - submit a guess
#wordle ans - end the game and reveal the word
#wordle help - show this help
#wordle bank - switch word bank (saved per group)

Examples:
#wordle 7 - start a 7-letter game
#apple - guess "apple"
!apple - guess "apple"
"""


class CooldownTracker:
    """Allows each (group, user) pair one guess per interval."""

    def __init__(self, interval: float = GUESS_COOLDOWN_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self.clock = clock
        self._last: Dict[Tuple[str, str], float] = {}
        self._last_prune = float('-inf')
        self._lock = threading.Lock()

    def remaining(self, group_id: str, user_id: str) -> float:
        with self._lock:
            return self._remaining((group_id, user_id), self.clock())

    def _remaining(self, key: Tuple[str, str], now: float) -> float:
        last = self._last.get(key)
        if last is None:
            return 0.0
        return max(0.0, self.interval - (now - last))

    def try_acquire(self, group_id: str, user_id: str) -> float:
        """
        Reserve the next guess slot for a user.

        Returns:
            0 when the slot was reserved, otherwise the seconds left to wait
        """
        key = (group_id, user_id)
        with self._lock:
            now = self.clock()
            self._prune(now)
            remaining = self._remaining(key, now)
            if remaining > 0:
                return remaining
            self._last[key] = now
            return 0.0

    def release(self, group_id: str, user_id: str) -> None:
        """Give back a reservation for a guess that did not count."""
        with self._lock:
            self._last.pop((group_id, user_id), None)

    def _prune(self, now: float) -> None:
        if now - self._last_prune < self.interval:
            return
        self._last_prune = now
        stale = [key for key, last in self._last.items() if now - last >= self.interval]
        for key in stale:
            del self._last[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._last)


class CommandService:
    """
    Routes chat messages to the game engine.

    ``handle_message`` returns None for messages the bot should ignore,
    otherwise the reply segments to send back to the group.
    """

    def __init__(self,
                 engine: GameEngine,
                 presenter: Optional[ChatPresenter] = None,
                 cooldown: Optional[CooldownTracker] = None,
                 help_file: Optional[str] = None):
        self.engine = engine
        self.presenter = presenter or ChatPresenter()
        self.cooldown = cooldown or CooldownTracker()
        self.help_file = help_file

    def handle_message(self, message: ChatMessage) -> Optional[List[Reply]]:
        if not message.group_id or not isinstance(message.text, str):
            return None
        text = message.text.strip()
        if not text:
            return None

        command = WORDLE_CMD_RE.match(text)
        if command:
            return self._handle_command(message, command.group(1).strip().lower())

        guess = GUESS_RE.match(text)
        if guess:
            return self._handle_listened_guess(message, guess.group(1), guess.group(2).lower())

        return None

    def _handle_command(self, message: ChatMessage, arg: str) -> List[Reply]:
        group_id = message.group_id

        if arg in ABANDON_ARGS:
            game_logger.log_user_action(message, 'abandon_game')
            return self._present(message, self.engine.abandon_game(group_id, message.user_id))

        if 'help' in arg:
            game_logger.log_user_action(message, 'show_help')
            return [Reply.text_segment(self.help_text())]

        if arg in BANK_ARGS:
            game_logger.log_user_action(message, 'toggle_word_bank')
            return self._present(message, self.engine.toggle_word_bank(group_id, message.user_id))

        if not arg:
            game_logger.log_user_action(message, 'start_game', letter_count=DEFAULT_LETTER_COUNT)
            return self._present(message, self.engine.start_game(group_id, DEFAULT_LETTER_COUNT, message.user_id))

        if NUMBER_RE.match(arg):
            letter_count = int(arg)
            game_logger.log_user_action(message, 'start_game', letter_count=letter_count)
            return self._present(message, self.engine.start_game(group_id, letter_count, message.user_id))

        if ALPHA_RE.match(arg):
            return self._submit_guess(message, arg)

        game_logger.log_user_action(message, 'show_help')
        return [Reply.text_segment(self.help_text())]

    def _handle_listened_guess(self, message: ChatMessage, prefix: Optional[str], word: str) -> Optional[List[Reply]]:
        # Bare words are ordinary chat; only prefixed words count as guesses
        if not prefix or word.startswith('wordle'):
            return None
        game = self.engine.get_game(message.group_id)
        if game is None or game.finished:
            return None
        return self._submit_guess(message, word)

    def _submit_guess(self, message: ChatMessage, word: str) -> List[Reply]:
        remaining = self.cooldown.try_acquire(message.group_id, message.user_id)
        if remaining > 0:
            return [Reply.text_segment(f"Easy there! Wait {math.ceil(remaining)} seconds before guessing again.")]

        game_logger.log_user_action(message, 'submit_guess', guess=word, guess_length=len(word))
        result = self.engine.submit_guess(message.group_id, word, message.user_id)
        if result.status in _NO_COOLDOWN_STATUSES:
            self.cooldown.release(message.group_id, message.user_id)
        return self._present(message, result)

    def _present(self, message: ChatMessage, result) -> List[Reply]:
        return self.presenter.present(message.group_id, result, message.display_name)

    def help_text(self) -> str:
        if self.help_file and os.path.exists(self.help_file):
            try:
                with open(self.help_file, 'r', encoding='utf-8') as f:
                    return f.read()
            except OSError as e:
                game_logger.logger.warning(f"Failed to read help file {self.help_file}: {e}")
        return DEFAULT_HELP


# Global service instance
_command_service = None


def get_command_service() -> Optional[CommandService]:
    """Get the global command service instance."""
    return _command_service


def initialize_command_service(config) -> CommandService:
    """Build the word bank, store, engine and presenter from config and wire them together."""
    global _command_service

    word_bank = WordBank(config.WORDS_FILE, config.BACKUP_WORDS_FILE)
    store = create_state_store(config)
    translator = BaiduTranslator.from_config(config) if config.TRANSLATE_ENABLED else None
    engine = initialize_game_engine(
        word_bank, store,
        cleanup_delay=config.CLEANUP_DELAY_SECONDS,
        translator=translator
    )
    renderer = BoardRenderer(enabled=config.RENDER_IMAGES)
    engine.add_retire_listener(renderer.clear_cache)

    _command_service = CommandService(
        engine,
        presenter=ChatPresenter(renderer),
        cooldown=CooldownTracker(config.GUESS_COOLDOWN_SECONDS),
        help_file=config.HELP_FILE
    )
    return _command_service
