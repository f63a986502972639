"""Caffeine Reminder - Main entry point.

Schedules a daily sound at the user's chosen time, shows a small settings
menu, and listens system-wide for Alt+F to silence the sound.
"""

import asyncio

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from logger import logger
from config import SETTINGS_FILE, SOUND_FILE, PLAYER_BINARY, TIMEZONE
from domains.reminder import AudioPlayer, HotkeyListener, ReminderScheduler, ReminderShell


async def main():
    """Wire scheduler, menu and hotkey onto one event loop and run the menu."""
    loop = asyncio.get_running_loop()

    scheduler = AsyncIOScheduler(timezone=TIMEZONE)
    player = AudioPlayer(PLAYER_BINARY, SOUND_FILE)
    reminder = ReminderScheduler(scheduler, player, timezone=TIMEZONE)
    shell = ReminderShell(reminder, SETTINGS_FILE)
    hotkey = HotkeyListener(shell.handle_stop_chord, loop)

    scheduler.start()
    hotkey.start()
    logger.info(f"Caffeine Reminder started (settings: {SETTINGS_FILE})")

    try:
        await shell.start()
    finally:
        hotkey.stop()
        scheduler.shutdown(wait=False)
        logger.info("Caffeine Reminder stopped")


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    run()
