"""Tests for the reminder job lifecycle."""

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domains.reminder.config import JOB_ID
from domains.reminder.errors import AudioLaunchError, AudioStopError, InvalidSchedule
from domains.reminder.scheduler import ReminderState, build_trigger


def test_initial_state(reminder):
    """A new reminder has no job and no sound."""
    assert reminder.state == ReminderState.IDLE
    assert reminder.job is None
    assert reminder.expression is None
    assert reminder.next_fire_time() is None


def test_arm_registers_job(reminder, scheduler):
    reminder.arm("0 30 18 * * *", label="6:30 PM")

    jobs = scheduler.get_jobs()
    assert [job.id for job in jobs] == [JOB_ID]
    assert reminder.state == ReminderState.ARMED
    assert reminder.expression == "0 30 18 * * *"
    assert reminder.label == "6:30 PM"


def test_rearm_leaves_one_job(reminder, scheduler):
    """Re-arming replaces the job instead of stacking timers."""
    for expression in ("0 0 7 * * *", "0 0 8 * * *", "0 15 21 * * *", "0 0 8 * * *"):
        reminder.arm(expression)

    jobs = scheduler.get_jobs()
    assert len(jobs) == 1
    assert reminder.expression == "0 0 8 * * *"


def test_label_defaults_to_expression(reminder):
    reminder.arm("0 0 20 * * *")

    assert reminder.label == "0 0 20 * * *"


def test_job_never_overlaps_itself(reminder):
    job = reminder.arm("0 0 20 * * *")

    assert job.max_instances == 1
    assert job.coalesce is True


@pytest.mark.parametrize("expression", ["0 61 8 * * *", "0 0 25 * * *", "0 0 20 * *", "nonsense"])
def test_invalid_expression_keeps_previous_job(reminder, scheduler, expression):
    reminder.arm("0 0 7 * * *")

    with pytest.raises(InvalidSchedule):
        reminder.arm(expression)

    assert reminder.expression == "0 0 7 * * *"
    assert len(scheduler.get_jobs()) == 1


def test_cancel(reminder, scheduler):
    reminder.arm("0 0 20 * * *")

    assert reminder.cancel() is True
    assert reminder.state == ReminderState.IDLE
    assert scheduler.get_jobs() == []


def test_cancel_when_idle(reminder):
    assert reminder.cancel() is False
    assert reminder.state == ReminderState.IDLE


def test_stop_without_audio_is_noop(reminder):
    """The stop signal with nothing playing neither raises nor changes state."""
    reminder.arm("0 0 20 * * *")

    assert reminder.stop() is False
    assert reminder.stop() is False
    assert reminder.state == ReminderState.ARMED
    assert reminder.expression == "0 0 20 * * *"


def test_stop_when_idle(reminder):
    assert reminder.stop() is False
    assert reminder.state == ReminderState.IDLE


def _midday_in_two_days():
    later = datetime.now(timezone.utc) + timedelta(days=2)
    return later.replace(hour=12, minute=0, second=0, microsecond=0)


def test_next_fire_time(reminder):
    reminder.arm("0 30 18 * * *")
    now = _midday_in_two_days()

    assert reminder.next_fire_time(now) == now.replace(hour=18, minute=30)


def test_next_fire_time_rolls_to_tomorrow(reminder):
    reminder.arm("0 30 18 * * *")
    now = _midday_in_two_days().replace(hour=19)

    expected = now.replace(hour=18, minute=30) + timedelta(days=1)
    assert reminder.next_fire_time(now) == expected


def test_build_trigger_fields():
    trigger = build_trigger("0 30 18 * * *", timezone="UTC")
    fields = {field.name: str(field) for field in trigger.fields}

    assert fields["second"] == "0"
    assert fields["minute"] == "30"
    assert fields["hour"] == "18"


@pytest.mark.asyncio
async def test_occurrence_starts_sound(reminder, fake_player, capsys):
    reminder.arm("0 0 20 * * *")

    await reminder._on_occurrence()

    assert reminder.state == ReminderState.SOUNDING
    assert len(fake_player.launched) == 1
    assert "Press ALT+F" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_stop_silences_sound_but_keeps_job(reminder, fake_player, scheduler):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()
    proc = fake_player.launched[0]

    assert reminder.stop() is True

    assert proc.terminated is True
    assert reminder.state == ReminderState.ARMED
    assert len(scheduler.get_jobs()) == 1

    # Second stop is a no-op
    assert reminder.stop() is False


@pytest.mark.asyncio
async def test_sound_ending_naturally_returns_to_armed(reminder, fake_player):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()

    fake_player.launched[0].finish(0)
    await reminder._audio_watch

    assert reminder.state == ReminderState.ARMED
    assert reminder.stop() is False


@pytest.mark.asyncio
async def test_stale_sound_is_killed_before_next(reminder, fake_player):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()
    await reminder._on_occurrence()

    first, second = fake_player.launched
    assert first.terminated is True
    assert second.terminated is False
    assert reminder.state == ReminderState.SOUNDING

    # The first process's watcher must not clear the second handle
    await first.wait()
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    assert reminder.state == ReminderState.SOUNDING


@pytest.mark.asyncio
async def test_launch_failure_stays_armed(reminder, fake_player, capsys):
    reminder.arm("0 0 20 * * *")
    fake_player.launch_error = AudioLaunchError("Failed to start ffplay: not found")

    await reminder._on_occurrence()

    assert reminder.state == ReminderState.ARMED
    assert "Could not play the reminder sound" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_stop_after_process_already_exited(reminder, fake_player):
    """Stopping a process that exited before its watcher ran is a no-op."""
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()
    fake_player.launched[0].returncode = 0

    assert reminder.stop() is False
    assert reminder.state == ReminderState.ARMED


@pytest.mark.asyncio
async def test_stop_failure_is_reported(reminder, fake_player):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()
    proc = fake_player.launched[0]

    def deny():
        raise PermissionError("denied")

    proc.terminate = deny

    with pytest.raises(AudioStopError):
        reminder.stop()

    # The handle is dropped, the job survives
    assert reminder.state == ReminderState.ARMED
    assert reminder.stop() is False


@pytest.mark.asyncio
async def test_rearm_while_sounding_kills_old_sound(reminder, fake_player, scheduler):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()
    proc = fake_player.launched[0]

    reminder.arm("0 0 21 * * *")

    assert proc.terminated is True
    assert reminder.state == ReminderState.ARMED
    assert reminder.expression == "0 0 21 * * *"
    assert len(scheduler.get_jobs()) == 1


@pytest.mark.asyncio
async def test_cancel_while_sounding_goes_idle_silently(reminder, fake_player):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()

    assert reminder.cancel() is True

    assert fake_player.launched[0].terminated is True
    assert reminder.state == ReminderState.IDLE
    assert reminder.stop() is False


@pytest.mark.asyncio
async def test_rearm_survives_unkillable_sound(reminder, fake_player):
    reminder.arm("0 0 20 * * *")
    await reminder._on_occurrence()

    def deny():
        raise PermissionError("denied")

    fake_player.launched[0].terminate = deny

    reminder.arm("0 0 21 * * *")

    assert reminder.state == ReminderState.ARMED
    assert reminder.expression == "0 0 21 * * *"
