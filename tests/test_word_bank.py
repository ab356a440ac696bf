"""Tests for word list loading, draws and definitions."""

import random

from wordle_bot.services.word_bank import (
    WordBank,
    extract_definition,
    parse_backup_line,
    parse_main_line,
)


def test_parse_main_line():
    assert parse_main_line("314| banner n. flag; banner") == ("banner", "n. flag; banner")
    assert parse_main_line("apple n. fruit") == ("apple", "n. fruit")
    assert parse_main_line("12| Zebra") == ("zebra", "")
    assert parse_main_line("") is None
    assert parse_main_line("7| don't n. contraction") is None


def test_parse_backup_line():
    assert parse_backup_line("  Crane \n") == "crane"
    assert parse_backup_line("") is None
    assert parse_backup_line("x-ray") is None


def test_extract_definition_strips_part_of_speech_markers():
    assert extract_definition("n. flag; banner") == "flag; banner"
    assert extract_definition("n. mixture of metals v. to combine") == "mixture of metals；to combine"
    assert extract_definition("adj. complete   vt. finish") == "complete；finish"
    assert extract_definition("plain text only") == "plain text only"
    assert extract_definition("") == ""


def test_extract_definition_drops_text_before_first_marker():
    assert extract_definition("[noun] n. flag") == "flag"


def test_load_words(word_bank):
    words = word_bank.load_words()
    assert words.main_words[:3] == ["cat", "dog", "bird"]
    assert "local" in words.backup_words
    assert words.definitions["apple"] == "n. round fruit of the apple tree"
    assert words.lengths == {3, 4, 5, 6, 7, 8}


def test_load_words_is_cached(word_files):
    now = [0.0]
    bank = WordBank(*word_files, cache_ttl=3600, clock=lambda: now[0])
    first = bank.load_words()

    with open(word_files[0], "a", encoding="utf-8") as f:
        f.write("9| zebra n. striped animal\n")

    assert bank.load_words() is first
    now[0] = 3601.0
    assert "zebra" in bank.load_words().main_words


def test_missing_files_yield_empty_banks(tmp_path):
    bank = WordBank(str(tmp_path / "nope.txt"), str(tmp_path / "nope-all.txt"))
    assert bank.get_random_word(5) is None
    assert not bank.is_valid_word("apple")
    assert bank.get_definition("apple") == ""


def test_random_word_has_requested_length(word_files):
    bank = WordBank(*word_files, rng=random.Random(7))
    for length in range(3, 9):
        word = bank.get_random_word(length)
        assert word is not None
        assert len(word) == length
        assert word in bank.load_words().main_words


def test_random_word_from_backup_bank(word_files):
    bank = WordBank(*word_files, rng=random.Random(3))
    drawn = {bank.get_random_word(5, "backup") for _ in range(50)}
    assert drawn <= {"apple", "alloy", "local", "crane", "grape", "lemon", "llama", "teeth",
                     "eerie", "hello", "world", "zebra"}
    assert len(drawn) > 2


def test_random_word_unknown_bank_falls_back_to_main(word_bank):
    assert word_bank.get_random_word(5, "nonexistent") == "apple"


def test_random_word_missing_length(word_bank):
    assert word_bank.get_random_word(9) is None


def test_is_valid_word(word_bank):
    assert word_bank.is_valid_word("apple")
    assert word_bank.is_valid_word("LOCAL", 5)
    assert not word_bank.is_valid_word("local", 6)
    assert not word_bank.is_valid_word("zzzzz")
    assert not word_bank.is_valid_word("")


def test_definition_from_main_bank(word_bank):
    assert word_bank.get_definition("Alloy") == "mixture of metals；to combine"


def test_definition_falls_back_to_translation(word_bank):
    assert word_bank.get_definition("crane", translator=lambda word: "鹤") == "Translation: 鹤"
    assert word_bank.get_definition("crane", translator=lambda word: "") == ""


def test_definition_translation_errors_are_swallowed(word_bank):
    def broken(word):
        raise RuntimeError("boom")

    assert word_bank.get_definition("crane", translator=broken) == ""


def test_statistics(word_bank):
    stats = word_bank.get_statistics()
    assert stats["main_words"] == 8
    assert stats["backup_words"] == 19
    assert stats["main_by_length"][5] == 2
