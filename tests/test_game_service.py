"""Tests for the per-group game engine."""

import threading

import pytest

from conftest import FakeBackend, FirstWordRandom, WriteFailingBackend
from wordle_bot.models.game import Game, LetterStatus, ResultStatus
from wordle_bot.services.game_service import GameEngine
from wordle_bot.services.state_store import GameStateStore
from wordle_bot.services.word_bank import WordBank


def test_start_game(engine, store):
    result = engine.start_game("g1")
    assert result.success
    assert result.status == ResultStatus.STARTED
    assert result.bank == "main"
    assert result.game.target_word == "apple"
    assert result.game.max_attempts == 6
    assert store.get("g1").target_word == "apple"


@pytest.mark.parametrize("letter_count", [2, 9, 0])
def test_start_game_rejects_letter_count(engine, store, letter_count):
    result = engine.start_game("g1", letter_count)
    assert not result.success
    assert result.status == ResultStatus.INVALID_LETTER_COUNT
    assert store.get("g1") is None


def test_second_start_is_rejected(engine):
    first = engine.start_game("g1")
    second = engine.start_game("g1", 7)
    assert second.status == ResultStatus.ALREADY_PLAYING
    assert engine.get_game("g1").target_word == first.game.target_word


def test_groups_are_independent(engine):
    engine.start_game("g1")
    assert engine.start_game("g2", 3).game.target_word == "cat"
    assert engine.get_game("g1").target_word == "apple"


def test_start_game_without_words(tmp_path, scheduler):
    empty = WordBank(str(tmp_path / "missing.txt"), str(tmp_path / "missing-all.txt"))
    engine = GameEngine(empty, GameStateStore(FakeBackend()), scheduler=scheduler)
    result = engine.start_game("g1")
    assert result.status == ResultStatus.NO_WORDS
    assert engine.get_game("g1") is None


def test_guess_then_win(engine, scheduler):
    engine.start_game("g1")

    progress = engine.submit_guess("g1", "grape", "u1")
    assert progress.status == ResultStatus.GUESS_ACCEPTED
    assert progress.game.remaining_attempts == 5
    assert [item.status for item in progress.feedback] == [
        LetterStatus.ABSENT, LetterStatus.ABSENT, LetterStatus.PRESENT,
        LetterStatus.PRESENT, LetterStatus.CORRECT,
    ]
    assert not scheduler.handles

    win = engine.submit_guess("g1", "  APPLE ", "u2")
    assert win.status == ResultStatus.WON
    assert win.game.finished
    assert win.game.attempts == 2
    assert win.definition == "round fruit of the apple tree"
    assert len(scheduler.handles) == 1
    assert scheduler.handles[0].delay == 30


def test_loss_after_all_attempts(engine):
    engine.start_game("g1")
    words = ["alloy", "local", "crane", "grape", "lemon"]
    for word in words:
        assert engine.submit_guess("g1", word).status == ResultStatus.GUESS_ACCEPTED

    result = engine.submit_guess("g1", "llama")
    assert result.status == ResultStatus.LOST
    assert result.game.attempts == 6
    assert result.game.remaining_attempts == 0
    assert "apple" in result.message

    assert engine.submit_guess("g1", "teeth").status == ResultStatus.NO_GAME


@pytest.mark.parametrize("guess,status", [
    ("app1e", ResultStatus.NON_ALPHABETIC),
    ("", ResultStatus.NON_ALPHABETIC),
    ("cat", ResultStatus.INVALID_LENGTH),
    ("zzzzz", ResultStatus.UNKNOWN_WORD),
])
def test_guess_rejections(engine, guess, status):
    engine.start_game("g1")
    result = engine.submit_guess("g1", guess)
    assert not result.success
    assert result.status == status
    assert engine.get_game("g1").attempts == 0


def test_duplicate_guess_rejected(engine):
    engine.start_game("g1")
    engine.submit_guess("g1", "grape")
    result = engine.submit_guess("g1", "GRAPE")
    assert result.status == ResultStatus.DUPLICATE_GUESS
    assert engine.get_game("g1").attempts == 1


def test_guess_without_game(engine):
    assert engine.submit_guess("g1", "apple").status == ResultStatus.NO_GAME


def test_validate_guess_exhausted_attempts(engine):
    game = Game("cat", 3, guesses=["dog", "cow", "bat", "hat"], attempts=4)
    status, _ = engine.validate_guess(game, "rat")
    assert status == ResultStatus.ATTEMPTS_EXHAUSTED


def test_abandon_keeps_game_until_cleanup(engine, scheduler):
    engine.start_game("g1")
    result = engine.abandon_game("g1", "u1")
    assert result.status == ResultStatus.ABANDONED
    assert "apple" in result.message
    assert result.definition == "round fruit of the apple tree"

    # Finished game stays readable until the cleanup fires
    assert engine.get_game("g1").finished
    assert len(scheduler.handles) == 1
    assert engine.start_game("g1").status == ResultStatus.STARTED


def test_cleanup_deletes_finished_game(engine, scheduler):
    retired = []
    engine.add_retire_listener(retired.append)
    engine.start_game("g1")
    engine.submit_guess("g1", "apple")
    scheduler.run_all()
    assert engine.get_game("g1") is None
    assert retired == ["g1"]


def test_cleanup_skips_replacement_game(engine, store, scheduler):
    engine.start_game("g1")
    engine.abandon_game("g1")
    store.save("g1", Game("alloy", 5, start_time=1))
    scheduler.run_all()
    assert store.get("g1").target_word == "alloy"


def test_abandon_without_game(engine):
    assert engine.abandon_game("g1").status == ResultStatus.NO_GAME


def test_toggle_word_bank(engine, store):
    first = engine.toggle_word_bank("g1")
    assert first.status == ResultStatus.BANK_TOGGLED
    assert (first.previous_bank, first.bank) == ("main", "backup")
    assert engine.get_bank("g1") == "backup"

    second = engine.toggle_word_bank("g1")
    assert (second.previous_bank, second.bank) == ("backup", "main")


def test_start_uses_selected_bank(engine):
    engine.toggle_word_bank("g1")
    result = engine.start_game("g1", 4)
    assert result.bank == "backup"
    assert result.game.target_word == "bird"


def test_definition_uses_translator_when_missing(word_files, scheduler):
    bank = WordBank(*word_files, rng=FirstWordRandom())
    engine = GameEngine(bank, GameStateStore(FakeBackend()), scheduler=scheduler,
                        translator=lambda word: f"<{word}>")
    engine.start_game("g1")
    result = engine.abandon_game("g1")
    assert result.game.target_word == "apple"
    assert result.definition == "round fruit of the apple tree"

    engine.store.save("g2", Game("garden", 6))
    assert engine.abandon_game("g2").definition == "Translation: <garden>"


def test_shutdown_cancels_pending_cleanup(engine, scheduler):
    engine.start_game("g1")
    engine.abandon_game("g1")
    handle = scheduler.handles[0]
    engine.shutdown()
    assert handle.cancelled


def test_concurrent_starts_create_one_game(engine):
    barrier = threading.Barrier(8)
    results = []

    def start():
        barrier.wait()
        results.append(engine.start_game("g1").status)

    threads = [threading.Thread(target=start) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(ResultStatus.STARTED) == 1
    assert results.count(ResultStatus.ALREADY_PLAYING) == 7


def test_concurrent_guesses_are_serialized(engine):
    engine.start_game("g1")
    words = ["alloy", "local", "crane", "grape", "lemon"]
    threads = [threading.Thread(target=engine.submit_guess, args=("g1", word)) for word in words]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    game = engine.get_game("g1")
    assert game.attempts == 5
    assert sorted(game.guesses) == sorted(words)


def test_engine_keeps_game_when_durable_write_fails(word_bank, scheduler):
    engine = GameEngine(word_bank, GameStateStore(WriteFailingBackend()), scheduler=scheduler)
    assert engine.start_game("g1").status == ResultStatus.STARTED
    assert engine.get_game("g1").target_word == "apple"

    assert engine.submit_guess("g1", "grape").status == ResultStatus.GUESS_ACCEPTED
    assert engine.submit_guess("g1", "grape").status == ResultStatus.DUPLICATE_GUESS


def test_wrong_length_then_win_in_one(engine):
    engine.start_game("g1")

    rejected = engine.submit_guess("g1", "alpine")
    assert rejected.status == ResultStatus.INVALID_LENGTH
    assert engine.get_game("g1").attempts == 0

    result = engine.submit_guess("g1", "apple")
    assert result.status == ResultStatus.WON
    assert result.game.attempts == 1
    assert [item.status for item in result.feedback] == [LetterStatus.CORRECT] * 5


def test_abandon_then_cleanup_removes_game(engine, store, scheduler):
    engine.start_game("g1")
    engine.abandon_game("g1")
    assert store.get("g1").finished

    scheduler.run_all()
    assert store.get("g1") is None


@pytest.mark.parametrize("letter_count", [5.0, "5", True, None])
def test_start_game_rejects_non_integer_letter_count(engine, letter_count):
    result = engine.start_game("g1", letter_count)
    assert result.status == ResultStatus.INVALID_LETTER_COUNT


def test_group_locks_are_released(engine, scheduler):
    engine.start_game("g1")
    engine.submit_guess("g1", "grape")
    engine.abandon_game("g1")
    engine.toggle_word_bank("g2")
    scheduler.run_all()
    assert engine._locks == {}
