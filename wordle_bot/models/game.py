"""
Game Data Models

Contains all game-related data structures and enums.
"""

import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.game_settings import MIN_LETTER_COUNT, MAX_LETTER_COUNT, max_attempts_for

_ALPHA_RE = re.compile(r'^[a-z]+$')


class LetterStatus(Enum):
    """Per-letter feedback classification."""
    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]


_STATUS_RANK = {
    LetterStatus.UNKNOWN: 0,
    LetterStatus.ABSENT: 1,
    LetterStatus.PRESENT: 2,
    LetterStatus.CORRECT: 3,
}


class GameOutcome(Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"


class ResultStatus(Enum):
    """Outcome of a single engine operation."""
    STARTED = "started"
    GUESS_ACCEPTED = "guess_accepted"
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"
    BANK_TOGGLED = "bank_toggled"
    # Rejections (no state change)
    ALREADY_PLAYING = "already_playing"
    INVALID_LETTER_COUNT = "invalid_letter_count"
    NO_WORDS = "no_words"
    NO_GAME = "no_game"
    NON_ALPHABETIC = "non_alphabetic"
    INVALID_LENGTH = "invalid_length"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    DUPLICATE_GUESS = "duplicate_guess"
    UNKNOWN_WORD = "unknown_word"


@dataclass(frozen=True)
class LetterFeedback:
    letter: str
    status: LetterStatus

    def to_dict(self) -> Dict[str, str]:
        return {'letter': self.letter, 'status': self.status.value}


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Game:
    """
    One group's game. Construction validates every invariant so a corrupt
    record can never become a live game.
    """
    target_word: str
    letter_count: int
    max_attempts: int = 0
    guesses: List[str] = field(default_factory=list)
    attempts: int = 0
    finished: bool = False
    start_time: int = field(default_factory=_now_ms)

    def __post_init__(self):
        if not isinstance(self.letter_count, int) or not (
                MIN_LETTER_COUNT <= self.letter_count <= MAX_LETTER_COUNT):
            raise ValueError(
                f"letter_count must be between {MIN_LETTER_COUNT} and {MAX_LETTER_COUNT}, "
                f"got {self.letter_count!r}")
        if not isinstance(self.target_word, str) or not _ALPHA_RE.match(self.target_word):
            raise ValueError(f"target_word must be lowercase alphabetic, got {self.target_word!r}")
        if len(self.target_word) != self.letter_count:
            raise ValueError(
                f"target_word '{self.target_word}' does not have {self.letter_count} letters")
        if not self.max_attempts:
            self.max_attempts = max_attempts_for(self.letter_count)
        if self.max_attempts != max_attempts_for(self.letter_count):
            raise ValueError(
                f"max_attempts for {self.letter_count} letters must be "
                f"{max_attempts_for(self.letter_count)}, got {self.max_attempts!r}")
        self.guesses = list(self.guesses)
        if self.attempts != len(self.guesses):
            raise ValueError(
                f"attempts ({self.attempts}) must equal number of guesses ({len(self.guesses)})")
        if self.attempts > self.max_attempts:
            raise ValueError(
                f"attempts ({self.attempts}) exceeds max_attempts ({self.max_attempts})")
        for guess in self.guesses:
            if len(guess) != self.letter_count:
                raise ValueError(f"guess '{guess}' does not have {self.letter_count} letters")
        if len(set(self.guesses)) != len(self.guesses):
            raise ValueError("guesses must not contain duplicates")

    @property
    def remaining_attempts(self) -> int:
        return self.max_attempts - self.attempts

    @property
    def won(self) -> bool:
        return bool(self.guesses) and self.guesses[-1] == self.target_word

    @property
    def outcome(self) -> GameOutcome:
        if not self.finished:
            return GameOutcome.PLAYING
        if self.won:
            return GameOutcome.WON
        if self.attempts >= self.max_attempts:
            return GameOutcome.LOST
        return GameOutcome.ABANDONED

    def add_guess(self, guess: str) -> None:
        """Append a guess, keeping attempts in step with the history."""
        if self.finished:
            raise ValueError("cannot guess on a finished game")
        if len(guess) != self.letter_count:
            raise ValueError(f"guess '{guess}' does not have {self.letter_count} letters")
        if guess in self.guesses:
            raise ValueError(f"'{guess}' was already guessed")
        if self.attempts >= self.max_attempts:
            raise ValueError("no attempts remaining")
        self.guesses.append(guess)
        self.attempts = len(self.guesses)

    def finish(self) -> None:
        self.finished = True

    def is_same_game(self, other: Optional['Game']) -> bool:
        return (other is not None
                and other.start_time == self.start_time
                and other.target_word == self.target_word)

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON record shape."""
        return {
            'targetWord': self.target_word,
            'guesses': list(self.guesses),
            'attempts': self.attempts,
            'maxAttempts': self.max_attempts,
            'finished': self.finished,
            'startTime': self.start_time,
            'letterCount': self.letter_count,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Game':
        target_word = record['targetWord']
        start_time = record.get('startTime')
        if isinstance(start_time, str):
            start_time = int(start_time, 10)
        return cls(
            target_word=target_word,
            letter_count=int(record.get('letterCount') or len(target_word)),
            max_attempts=int(record.get('maxAttempts') or 0),
            guesses=list(record.get('guesses') or []),
            attempts=int(record.get('attempts', 0)),
            finished=bool(record.get('finished', False)),
            start_time=start_time if start_time is not None else _now_ms(),
        )

    def copy(self) -> 'Game':
        return Game.from_record(self.to_record())

    def to_public_dict(self) -> Dict[str, Any]:
        """State safe to show clients: the answer stays hidden until the game ends."""
        return {
            'letter_count': self.letter_count,
            'max_attempts': self.max_attempts,
            'attempts': self.attempts,
            'remaining_attempts': self.remaining_attempts,
            'guesses': list(self.guesses),
            'finished': self.finished,
            'outcome': self.outcome.value,
            'start_time': self.start_time,
            'answer': self.target_word if self.finished else None,
        }


@dataclass
class GameResult:
    """What an engine operation hands to the presentation layer."""
    success: bool
    status: ResultStatus
    message: str = ''
    game: Optional[Game] = None
    feedback: List[LetterFeedback] = field(default_factory=list)
    definition: str = ''
    bank: Optional[str] = None
    previous_bank: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.game is not None and self.game.finished
