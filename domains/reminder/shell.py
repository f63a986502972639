"""Console menu for viewing and changing the reminder time."""

import asyncio
import threading
from pathlib import Path
from typing import Awaitable, Callable, Optional

from logger import logger
from .config import CHANGE_PROMPT, DEFAULT_TIME, FIRST_RUN_PROMPT
from .cron import to_cron_expression
from .errors import AudioStopError, InvalidSchedule, InvalidTime, SettingsReadError, SettingsWriteError
from .scheduler import ReminderScheduler
from .store import ReminderConfig, load_or_default, load_settings, save_settings, settings_exist


async def ask_console(prompt: str) -> str:
    """Read a line on a daemon thread; the event loop keeps running meanwhile.

    The thread never blocks interpreter exit.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def deliver(result=None, error=None):
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def read():
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            loop.call_soon_threadsafe(deliver, None, e)
        else:
            loop.call_soon_threadsafe(deliver, line)

    threading.Thread(target=read, name="console-input", daemon=True).start()
    return await future


class ReminderShell:
    """Blocking text menu around a ReminderScheduler.

    `ask` is awaited for every line of input; tests swap in scripted answers.
    """

    def __init__(
        self,
        reminder: ReminderScheduler,
        settings_path: Path,
        ask: Callable[[str], Awaitable[str]] = ask_console,
        out: Callable[..., None] = print,
    ):
        self.reminder = reminder
        self.settings_path = Path(settings_path)
        self.ask = ask
        self.out = out

    async def start(self):
        """Arm from stored settings (or run first-time setup), then show the menu."""
        if not settings_exist(self.settings_path):
            try:
                await self.first_run()
            except (EOFError, KeyboardInterrupt):
                logger.info("Input closed during first-run setup")
                return
        else:
            self.restore()
        await self.run()

    def restore(self):
        """Arm the stored schedule, or the 20:00 default if it is unusable."""
        config, is_default = load_or_default(self.settings_path)
        if is_default:
            self.out(f"Could not read {self.settings_path}. Using default time ({DEFAULT_TIME}).")
        else:
            try:
                self._arm(config)
                return
            except InvalidSchedule as e:
                logger.warning(f"{e} - using default time ({DEFAULT_TIME})")
                self.out(f"{e}. Using default time ({DEFAULT_TIME}).")

        self._arm(ReminderConfig.default())

    async def run(self):
        """Menu loop. Returns when the user chooses Exit."""
        while True:
            self.out("\nChoose an option:")
            self.out("1. Settings")
            self.out("2. Exit")

            try:
                answer = (await self.ask("> ")).strip()
                if answer == "1":
                    await self.settings()
                    continue
            except (EOFError, KeyboardInterrupt):
                logger.info("Input closed, leaving menu")
                return

            if answer == "2":
                logger.info("Exit chosen from menu")
                return
            else:
                self.out("Invalid option. Please try again.")

    async def settings(self):
        """Show the current reminder and offer to change it."""
        if not settings_exist(self.settings_path):
            await self.first_run()
            return

        try:
            config = load_settings(self.settings_path)
        except SettingsReadError as e:
            logger.warning(str(e))
            self.out(f"{e}. Showing the active reminder instead.")
            config = None

        if config is None:
            config = self._active_config()

        self.out("Current reminder settings:")
        self.out(f"  Time (human): {config.time}")
        self.out(f"  Cron expr:    {config.cron_expression}")
        next_run = self.reminder.next_fire_time()
        if next_run is not None:
            self.out(f"  Next run:     {next_run.strftime('%a %d %b %H:%M')}")
        self.out("\nDo you want to change this setting? (Y/N)")

        choice = (await self.ask("> ")).strip().lower()
        if choice != "y":
            return

        new_config = await self._prompt_for_config(CHANGE_PROMPT)
        if new_config is None:
            return

        try:
            save_settings(new_config, self.settings_path)
        except SettingsWriteError as e:
            logger.error(str(e))
            self.out(f"{e}. Keeping the current reminder.")
            return

        self.out("Settings updated successfully!")
        self._arm(new_config)

    async def first_run(self):
        """Ask for a time, save it and arm it."""
        config = await self._prompt_for_config(FIRST_RUN_PROMPT)
        if config is None:
            if self.reminder.job is None:
                self._arm(ReminderConfig.default())
            return

        try:
            save_settings(config, self.settings_path)
        except SettingsWriteError as e:
            logger.error(str(e))
            self.out(f"{e}.")
            if self.reminder.job is None:
                self._arm(ReminderConfig.default())
            return

        self.out("Settings saved successfully!")
        self._arm(config)

    def handle_stop_chord(self):
        """Alt+F: silence the sound, keep tomorrow's reminder."""
        self.out("\nReminder stopped via Alt+F!")
        try:
            killed = self.reminder.stop()
        except AudioStopError as e:
            logger.error(str(e))
            self.out(f"Failed to kill the audio process: {e}")
            return
        if killed:
            self.out("Audio process killed.")

    async def _prompt_for_config(self, prompt: str) -> Optional[ReminderConfig]:
        """Ask until a valid time is entered. An empty answer cancels."""
        while True:
            answer = (await self.ask(prompt)).strip()
            if not answer:
                self.out("No time entered, nothing changed.")
                return None
            try:
                expression = to_cron_expression(answer)
            except InvalidTime as e:
                self.out(f"{e}. Try something like 8:00 PM or 20:00.")
                continue
            return ReminderConfig(time=answer, cron_expression=expression)

    def _active_config(self) -> ReminderConfig:
        if self.reminder.expression is None:
            return ReminderConfig.default()
        return ReminderConfig(time=self.reminder.label, cron_expression=self.reminder.expression)

    def _arm(self, config: ReminderConfig):
        self.reminder.arm(config.cron_expression, label=config.time)
        self.out(
            f"Reminder scheduled. It will run daily at '{config.time}' "
            f"(cron: {config.cron_expression})."
        )
