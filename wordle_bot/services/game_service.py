"""
Game Service

Contains the core Wordle game engine: the per-group lifecycle state machine
(start, guess, finish, abandon), guard conditions and deferred cleanup.
"""

import re
import threading
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Tuple

from ..config.game_settings import (
    BANK_BACKUP, BANK_MAIN, BANK_NAMES, CLEANUP_DELAY_SECONDS, DEFAULT_LETTER_COUNT,
    MAX_LETTER_COUNT, MIN_LETTER_COUNT, is_valid_letter_count, max_attempts_for
)
from ..models.game import Game, GameOutcome, GameResult, ResultStatus
from ..utils.game_logger import game_logger
from .evaluator import evaluate_guess
from .state_store import GameStateStore
from .word_bank import WordBank

_ALPHA_RE = re.compile(r'^[a-z]+$')

Scheduler = Callable[[float, Callable[[], None]], object]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Run callback on a daemon timer thread after delay seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


class GameEngine:
    """
    Core game engine managing one game per chat group.

    This class handles:
    - Game lifecycle: start, guess submission, completion, abandonment
    - Guard conditions, reported as failed GameResults rather than exceptions
    - Per-group serialization of read-modify-write cycles
    - Deferred deletion of finished games

    The engine never holds a Game between operations; every operation
    re-reads it from the store and writes it back.
    """

    def __init__(self,
                 word_bank: WordBank,
                 store: GameStateStore,
                 cleanup_delay: float = CLEANUP_DELAY_SECONDS,
                 scheduler: Optional[Scheduler] = None,
                 translator: Optional[Callable[[str], str]] = None):
        self.word_bank = word_bank
        self.store = store
        self.cleanup_delay = cleanup_delay
        self.scheduler = scheduler or timer_scheduler
        self.translator = translator
        # group id -> [lock, number of threads holding or waiting on it]
        self._locks: Dict[str, list] = {}
        self._locks_guard = threading.Lock()
        self._pending: Dict[str, object] = {}
        self._retire_listeners: List[Callable[[str], None]] = []

    @contextmanager
    def _group_lock(self, group_id: str):
        """Serialize operations on one group. The entry is dropped once no thread needs it."""
        with self._locks_guard:
            entry = self._locks.get(group_id)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._locks[group_id] = entry
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[group_id]

    def add_retire_listener(self, listener: Callable[[str], None]) -> None:
        """Register a callback invoked with the group id after a finished game is deleted."""
        self._retire_listeners.append(listener)

    def get_game(self, group_id: str) -> Optional[Game]:
        return self.store.get(group_id)

    def get_bank(self, group_id: str) -> str:
        return self.store.get_bank_selection(group_id)

    def start_game(self, group_id: str, letter_count: int = DEFAULT_LETTER_COUNT,
                   user_id: Optional[str] = None) -> GameResult:
        """
        Creates a new game for a group with a randomly selected word.

        Args:
            group_id: Chat group identifier
            letter_count: Target word length (3-8)
            user_id: Player who asked, for logging

        Returns:
            GameResult with status STARTED, or a rejection
        """
        if not is_valid_letter_count(letter_count):
            return GameResult(
                False, ResultStatus.INVALID_LETTER_COUNT,
                f"Please choose a letter count between {MIN_LETTER_COUNT} and {MAX_LETTER_COUNT}!"
            )

        with self._group_lock(group_id):
            existing = self.store.get(group_id)
            if existing is not None and not existing.finished:
                return GameResult(
                    False, ResultStatus.ALREADY_PLAYING,
                    'A game is already running in this group! Finish it first, '
                    'or end it with "#wordle ans".',
                    game=existing
                )

            bank = self.store.get_bank_selection(group_id)
            target_word = self.word_bank.get_random_word(letter_count, bank)
            if not target_word:
                return GameResult(
                    False, ResultStatus.NO_WORDS,
                    f"No words with {letter_count} letters are available! Try another letter count.",
                    bank=bank
                )

            game = Game(
                target_word=target_word,
                letter_count=letter_count,
                max_attempts=max_attempts_for(letter_count),
            )
            self.store.save(group_id, game)

        game_logger.log_game_event(
            group_id, 'game_started', user_id,
            letter_count=letter_count, max_attempts=game.max_attempts, bank=bank
        )
        return GameResult(
            True, ResultStatus.STARTED,
            f"Guess a {letter_count}-letter word. You have {game.max_attempts} attempts.",
            game=game, bank=bank
        )

    def validate_guess(self, game: Optional[Game], guess: str) -> Tuple[Optional[ResultStatus], str]:
        """
        Check a normalized guess against the current game.

        Returns:
            Tuple of (rejection status or None when valid, error message)
        """
        if game is None or game.finished:
            return ResultStatus.NO_GAME, 'There is no game running in this group! Send "#wordle" to start one.'

        if not guess or not _ALPHA_RE.match(guess):
            return ResultStatus.NON_ALPHABETIC, 'Please enter an English word using letters only.'

        if len(guess) != game.letter_count:
            return (ResultStatus.INVALID_LENGTH,
                    f"Please enter a {game.letter_count}-letter word, you entered {len(guess)} letters.")

        if game.attempts >= game.max_attempts:
            return ResultStatus.ATTEMPTS_EXHAUSTED, 'All attempts have been used up!'

        if guess in game.guesses:
            return ResultStatus.DUPLICATE_GUESS, f'"{guess}" has already been guessed! Try another word.'

        if not self.word_bank.is_valid_word(guess, game.letter_count):
            return (ResultStatus.UNKNOWN_WORD,
                    f'"{guess}" is not a valid word. Please enter a {game.letter_count}-letter English word.')

        return None, ''

    def submit_guess(self, group_id: str, guess: str, user_id: Optional[str] = None) -> GameResult:
        """
        Processes a guess and updates game state.

        Args:
            group_id: Chat group identifier
            guess: The guessed word (any case, surrounding whitespace ignored)
            user_id: Player who guessed, for logging

        Returns:
            GameResult with status GUESS_ACCEPTED, WON or LOST, or a rejection
        """
        normalized_guess = (guess or '').strip().lower()

        with self._group_lock(group_id):
            game = self.store.get(group_id)
            status, error = self.validate_guess(game, normalized_guess)
            if status is not None:
                return GameResult(False, status, error, game=game)

            game.add_guess(normalized_guess)
            feedback = evaluate_guess(normalized_guess, game.target_word)

            if normalized_guess == game.target_word or game.attempts >= game.max_attempts:
                game.finish()
            self.store.save(group_id, game)

        if not game.finished:
            return GameResult(
                True, ResultStatus.GUESS_ACCEPTED,
                f"{game.remaining_attempts} attempts left, keep going!",
                game=game, feedback=feedback
            )

        won = game.outcome == GameOutcome.WON
        game_logger.log_game_event(
            group_id, 'game_won' if won else 'game_lost', user_id,
            attempts=game.attempts, target_word=game.target_word,
            **({'winning_guess': normalized_guess} if won else {'final_guess': normalized_guess})
        )
        self._schedule_cleanup(group_id, game)

        if won:
            message = f"The answer is {game.target_word}, found in {game.attempts} attempts."
        else:
            message = f"Out of attempts. The answer was {game.target_word}."
        return GameResult(
            True, ResultStatus.WON if won else ResultStatus.LOST, message,
            game=game, feedback=feedback, definition=self._definition(game.target_word)
        )

    def abandon_game(self, group_id: str, user_id: Optional[str] = None) -> GameResult:
        """End the running game immediately and reveal the answer."""
        with self._group_lock(group_id):
            game = self.store.get(group_id)
            if game is None or game.finished:
                return GameResult(False, ResultStatus.NO_GAME, 'There is no game running in this group.')
            game.finish()
            self.store.save(group_id, game)

        game_logger.log_game_event(
            group_id, 'game_abandoned', user_id,
            attempts=game.attempts, target_word=game.target_word
        )
        self._schedule_cleanup(group_id, game)
        return GameResult(
            True, ResultStatus.ABANDONED,
            f"Game over. The word was {game.target_word}.",
            game=game, definition=self._definition(game.target_word)
        )

    def toggle_word_bank(self, group_id: str, user_id: Optional[str] = None) -> GameResult:
        """Switch the group's bank for new target words between main and backup."""
        with self._group_lock(group_id):
            current = self.store.get_bank_selection(group_id)
            new_bank = BANK_BACKUP if current == BANK_MAIN else BANK_MAIN
            self.store.set_bank_selection(group_id, new_bank)

        game_logger.log_game_event(group_id, 'bank_toggled', user_id, previous=current, bank=new_bank)
        return GameResult(
            True, ResultStatus.BANK_TOGGLED,
            f"Word bank switched: {BANK_NAMES[current]} -> {BANK_NAMES[new_bank]}",
            bank=new_bank, previous_bank=current
        )

    def _definition(self, word: str) -> str:
        return self.word_bank.get_definition(word, self.translator)

    def _schedule_cleanup(self, group_id: str, game: Game) -> None:
        finished_game = game.copy()

        def cleanup():
            self._retire(group_id, finished_game)

        handle = self.scheduler(self.cleanup_delay, cleanup)
        with self._locks_guard:
            self._pending[group_id] = handle

    def _retire(self, group_id: str, finished_game: Game) -> None:
        """Delete the finished game unless a newer game has replaced it."""
        with self._group_lock(group_id):
            current = self.store.get(group_id)
            if current is not None and not finished_game.is_same_game(current):
                game_logger.logger.info(f"Skipping cleanup for group {group_id}: a new game has started")
                return
            self.store.delete(group_id)

        with self._locks_guard:
            self._pending.pop(group_id, None)
        game_logger.log_game_event(group_id, 'game_deleted', 'system')
        for listener in self._retire_listeners:
            try:
                listener(group_id)
            except Exception as e:
                game_logger.logger.error(f"Retire listener failed for group {group_id}: {e}")

    def shutdown(self) -> None:
        """Cancel pending cleanup timers."""
        with self._locks_guard:
            pending = list(self._pending.values())
            self._pending.clear()
        for handle in pending:
            cancel = getattr(handle, 'cancel', None)
            if cancel is not None:
                cancel()


# Global service instance
_game_engine = None


def get_game_engine() -> Optional[GameEngine]:
    """Get the global game engine instance."""
    return _game_engine


def initialize_game_engine(word_bank: WordBank, store: GameStateStore, **kwargs) -> GameEngine:
    """Initialize the global game engine instance."""
    global _game_engine
    _game_engine = GameEngine(word_bank, store, **kwargs)
    return _game_engine
