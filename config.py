"""Global configuration for Caffeine Reminder."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent

# Settings record (relative paths resolve against the working directory)
SETTINGS_FILE = Path(os.getenv("REMINDER_SETTINGS_FILE", "settings.json"))

# Audio playback
SOUND_FILE = Path(os.getenv("REMINDER_SOUND_FILE", BASE_DIR / "sound" / "sound.mp3"))
PLAYER_BINARY = os.getenv("REMINDER_PLAYER", "ffplay")

# Scheduling - None means the machine's local timezone
TIMEZONE = os.getenv("REMINDER_TIMEZONE") or None

# Logging
LOG_LEVEL = os.getenv("REMINDER_LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("LOCALAPPDATA", ".")) / "caffeine-reminder" / "logs"
LOG_DIR.mkdir(parents=True, exist_ok=True)
