"""Shared fixtures for the Wordle bot tests."""

import os
import random
import sys
import tempfile
from pathlib import Path

import pytest

# The module-level game logger opens its log file on import
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="wordle_bot_logs_"))
os.environ.setdefault("TRANSLATE_ENABLED", "False")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from wordle_bot.models.chat import ChatMessage  # noqa: E402
from wordle_bot.services.command_service import CommandService, CooldownTracker  # noqa: E402
from wordle_bot.services.game_service import GameEngine  # noqa: E402
from wordle_bot.services.state_store import GameStateStore  # noqa: E402
from wordle_bot.services.word_bank import WordBank  # noqa: E402

MAIN_WORDS = """\
1| cat n. small domestic animal
2| dog n. domestic canine animal
3| bird n. feathered animal
4| apple n. round fruit of the apple tree
5| alloy n. mixture of metals v. to combine
6| banner n. flag; headline
7| journey n. trip v. to travel
8| mountain n. very high hill
"""

BACKUP_WORDS = """\
cat
dog
bird
apple
alloy
local
crane
grape
lemon
llama
teeth
eerie
hello
world
zebra
banner
garden
journey
mountain
"""


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ManualScheduler:
    """Collects deferred callbacks instead of starting timers."""

    class Handle:
        def __init__(self, delay, callback):
            self.delay = delay
            self.callback = callback
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.handles = []

    def __call__(self, delay, callback):
        handle = self.Handle(delay, callback)
        self.handles.append(handle)
        return handle

    def run_all(self):
        handles, self.handles = self.handles, []
        for handle in handles:
            if not handle.cancelled:
                handle.callback()


class FakeBackend:
    """Dict-backed KeyValueBackend."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ttl_seconds=None):
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)


class FailingBackend:
    """Backend whose every call raises."""

    def get(self, key):
        raise ConnectionError("store unreachable")

    def set(self, key, value, ttl_seconds=None):
        raise ConnectionError("store unreachable")

    def delete(self, key):
        raise ConnectionError("store unreachable")


class WriteFailingBackend(FakeBackend):
    """Reads work, writes and deletes raise."""

    def set(self, key, value, ttl_seconds=None):
        raise ConnectionError("store is read-only")

    def delete(self, key):
        raise ConnectionError("store is read-only")


class FirstWordRandom(random.Random):
    """Deterministic draw: always the first candidate."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def word_files(tmp_path):
    words_file = tmp_path / "words.txt"
    backup_file = tmp_path / "words-all.txt"
    words_file.write_text(MAIN_WORDS, encoding="utf-8")
    backup_file.write_text(BACKUP_WORDS, encoding="utf-8")
    return str(words_file), str(backup_file)


@pytest.fixture
def word_bank(word_files):
    return WordBank(*word_files, rng=FirstWordRandom())


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store(backend):
    return GameStateStore(backend)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def engine(word_bank, store, scheduler):
    return GameEngine(word_bank, store, cleanup_delay=30, scheduler=scheduler)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def command_service(engine, clock):
    return CommandService(engine, cooldown=CooldownTracker(10, clock=clock))


@pytest.fixture
def make_message():
    def _make(text, group_id="g1", user_id="u1", sender_name="Alice"):
        return ChatMessage(group_id=group_id, user_id=user_id, text=text, sender_name=sender_name)
    return _make

