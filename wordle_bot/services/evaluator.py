"""
Guess Evaluator

Pure Wordle feedback functions. No state, no randomness.
"""

import string
from typing import Dict, Iterable, List, Optional

from ..models.game import LetterFeedback, LetterStatus


def evaluate_guess(guess: str, target: str) -> List[LetterFeedback]:
    """
    Implements the authentic Wordle letter evaluation algorithm.

    Each target letter can satisfy at most one guess letter: exact matches
    are consumed first, then remaining guess letters claim the leftmost
    unconsumed occurrence.
    """
    if len(guess) != len(target):
        raise ValueError(f"guess '{guess}' and target have different lengths")

    target_chars: List[Optional[str]] = list(target)
    statuses: List[Optional[LetterStatus]] = [None] * len(target)

    # First pass: exact position matches
    for i, letter in enumerate(guess):
        if letter == target_chars[i]:
            statuses[i] = LetterStatus.CORRECT
            target_chars[i] = None

    # Second pass: present letters and misses
    for i, letter in enumerate(guess):
        if statuses[i] is not None:
            continue
        if letter in target_chars:
            statuses[i] = LetterStatus.PRESENT
            target_chars[target_chars.index(letter)] = None
        else:
            statuses[i] = LetterStatus.ABSENT

    return [LetterFeedback(letter, status) for letter, status in zip(guess, statuses)]


def is_winning_feedback(feedback: Iterable[LetterFeedback]) -> bool:
    return all(item.status == LetterStatus.CORRECT for item in feedback)


def merge_letter_status(letter_status: Dict[str, LetterStatus],
                        feedback: Iterable[LetterFeedback]) -> None:
    """Status can only progress in priority order: correct > present > absent > unknown."""
    for item in feedback:
        current = letter_status.get(item.letter, LetterStatus.UNKNOWN)
        if item.status.rank > current.rank:
            letter_status[item.letter] = item.status


def aggregate_letter_status(guesses: Iterable[str], target: str) -> Dict[str, LetterStatus]:
    """Best status ever observed for every letter of the alphabet."""
    letter_status = {letter: LetterStatus.UNKNOWN for letter in string.ascii_lowercase}
    for guess in guesses:
        merge_letter_status(letter_status, evaluate_guess(guess, target))
    return letter_status
