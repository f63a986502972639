"""Single daily reminder job on APScheduler, plus the sound it plays.

States:
- IDLE: No job scheduled
- ARMED: Job scheduled, nothing playing
- SOUNDING: Job scheduled, audio process running

Transitions:
- IDLE → ARMED: arm(expression); an existing job is removed first
- ARMED → SOUNDING: The job fires and the player starts
- SOUNDING → ARMED: The sound ends by itself, or stop() terminates it
- ARMED/SOUNDING → IDLE: cancel() removes the job and kills the sound; only used when re-arming

All state lives on the asyncio event loop that runs the scheduler; other
threads (the hotkey listener) must hop onto the loop before calling in.
"""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from logger import logger
from .config import JOB_ID, JOB_NAME, MISFIRE_GRACE_SECONDS, REMINDER_BANNER
from .cron import parse_cron_fields
from .errors import AudioLaunchError, AudioStopError, InvalidSchedule
from .player import AudioPlayer


class ReminderState(Enum):
    """Reminder lifecycle states."""
    IDLE = "idle"
    ARMED = "armed"
    SOUNDING = "sounding"


def build_trigger(expression: str, timezone=None) -> CronTrigger:
    """Build a CronTrigger from a 6-field cron expression.

    Raises:
        InvalidSchedule: If the expression has the wrong shape or a field
            is rejected by APScheduler
    """
    fields = parse_cron_fields(expression)
    try:
        return CronTrigger(timezone=timezone, **fields)
    except ValueError as e:
        raise InvalidSchedule(f"Invalid cron expression {expression!r}: {e}") from e


class ReminderScheduler:
    """Owns the one reminder job and the one audio process.

    Usage:
        reminder = ReminderScheduler(AsyncIOScheduler(), AudioPlayer("ffplay", path))
        reminder.arm("0 30 18 * * *", label="6:30 PM")
        ...
        reminder.stop()  # silence the current sound, keep tomorrow's
    """

    def __init__(self, scheduler: AsyncIOScheduler, player: AudioPlayer, timezone=None):
        self.scheduler = scheduler
        self.player = player
        self.timezone = timezone

        self._job: Optional[Job] = None
        self._trigger: Optional[CronTrigger] = None
        self._expression: Optional[str] = None
        self._label: Optional[str] = None

        self._audio = None
        self._audio_watch: Optional[asyncio.Task] = None

    @property
    def state(self) -> ReminderState:
        if self._job is None:
            return ReminderState.IDLE
        if self._audio is not None:
            return ReminderState.SOUNDING
        return ReminderState.ARMED

    @property
    def job(self) -> Optional[Job]:
        return self._job

    @property
    def expression(self) -> Optional[str]:
        return self._expression

    @property
    def label(self) -> Optional[str]:
        return self._label

    def arm(self, expression: str, label: Optional[str] = None) -> Job:
        """Schedule the daily reminder, replacing any existing one.

        Args:
            expression: 6-field cron expression
            label: Human-readable time for display (defaults to expression)

        Returns:
            The APScheduler job

        Raises:
            InvalidSchedule: If the expression cannot be scheduled; the
                previous job (if any) is left untouched
        """
        trigger = build_trigger(expression, self.timezone)

        # Stop any existing job first
        self.cancel()

        self._job = self.scheduler.add_job(
            self._on_occurrence,
            trigger=trigger,
            id=JOB_ID,
            name=JOB_NAME,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=MISFIRE_GRACE_SECONDS,
            replace_existing=True,
        )
        self._trigger = trigger
        self._expression = expression
        self._label = label or expression

        logger.info(f"Reminder armed: daily at {self._label!r} (cron: {expression})")
        return self._job

    def cancel(self) -> bool:
        """Remove the scheduled job and kill its sound.

        Returns False if nothing was scheduled.
        """
        if self._job is None:
            return False

        try:
            self.stop()
        except AudioStopError as e:
            logger.warning(str(e))

        try:
            self.scheduler.remove_job(self._job.id)
        except JobLookupError:
            logger.debug(f"Job {self._job.id} already gone from scheduler")

        logger.info(f"Reminder job cancelled (was cron: {self._expression})")
        self._job = None
        self._trigger = None
        self._expression = None
        self._label = None
        return True

    def next_fire_time(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """When the reminder fires next, or None if nothing is armed."""
        if self._trigger is None:
            return None
        now = now or datetime.now(self._trigger.timezone)
        return self._trigger.get_next_fire_time(None, now)

    def stop(self) -> bool:
        """Silence the current sound. The daily job stays scheduled.

        Safe to call at any time: with nothing playing it does nothing.

        Returns:
            True if a running audio process was terminated

        Raises:
            AudioStopError: If the process could not be signalled; the
                handle is dropped either way
        """
        proc = self._audio
        if proc is None:
            return False

        self._audio = None
        return self.player.terminate(proc)

    async def _on_occurrence(self):
        """Job callback: announce the reminder and start the sound."""
        print(f"\n{REMINDER_BANNER}")
        logger.info(f"Reminder fired (cron: {self._expression})")

        # A previous sound should have ended a day ago; make sure
        if self._audio is not None:
            try:
                self.stop()
            except AudioStopError as e:
                logger.warning(str(e))

        try:
            proc = await self.player.launch()
        except AudioLaunchError as e:
            logger.error(f"Reminder sound failed: {e}")
            print(f"Could not play the reminder sound: {e}")
            return

        self._audio = proc
        self._audio_watch = asyncio.create_task(self._watch_audio(proc))
        print("Sound is now playing...")

    async def _watch_audio(self, proc):
        """Clear the audio handle once playback ends by itself."""
        returncode = await proc.wait()
        if self._audio is proc:
            self._audio = None
            logger.info(f"Audio process {proc.pid} finished (exit code {returncode})")
