"""Pytest configuration and fixtures."""

import asyncio
import os
import sys

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.reminder.player import AudioPlayer
from domains.reminder.scheduler import ReminderScheduler


class FakeProcess:
    """Stands in for an asyncio subprocess running the audio player."""

    def __init__(self, pid: int):
        self.pid = pid
        self.returncode = None
        self.terminated = False
        self._exited = asyncio.Event()

    def terminate(self):
        self.terminated = True
        self.finish(-15)

    def finish(self, code: int = 0):
        self.returncode = code
        self._exited.set()

    async def wait(self):
        await self._exited.wait()
        return self.returncode


class FakePlayer(AudioPlayer):
    """AudioPlayer that hands out FakeProcess objects instead of spawning."""

    def __init__(self, sound_file="sound.mp3"):
        super().__init__("ffplay", sound_file)
        self.launched: list[FakeProcess] = []
        self.launch_error = None

    async def launch(self):
        if self.launch_error is not None:
            raise self.launch_error
        proc = FakeProcess(pid=1000 + len(self.launched))
        self.launched.append(proc)
        return proc


@pytest.fixture
def settings_path(tmp_path):
    """Settings file location inside a fresh temp dir (not created)."""
    return tmp_path / "settings.json"


@pytest.fixture
def fake_player():
    return FakePlayer()


@pytest.fixture
def scheduler():
    """Unstarted scheduler - jobs are registered but never run."""
    return AsyncIOScheduler()


@pytest.fixture
def reminder(scheduler, fake_player):
    return ReminderScheduler(scheduler, fake_player, timezone="UTC")


@pytest.fixture
def console():
    """Collects everything the shell prints."""
    lines = []

    def out(*args):
        lines.append(" ".join(str(a) for a in args))

    out.lines = lines
    out.text = lambda: "\n".join(lines)
    return out


def scripted(*answers):
    """Build an `ask` coroutine that replays answers, then raises EOFError."""
    queue = list(answers)
    prompts = []

    async def ask(prompt):
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    ask.prompts = prompts
    return ask


@pytest.fixture
def script():
    """Factory for scripted console input: script("1", "n", "2")."""
    return scripted
