"""Reminder domain configuration - defaults, job identity and console text."""

# Fallback schedule when no usable settings record exists
DEFAULT_TIME = "20:00"
DEFAULT_CRON_EXPRESSION = "0 0 20 * * *"

# APScheduler job identity (only ever one reminder job)
JOB_ID = "daily_reminder"
JOB_NAME = "Daily caffeine reminder"

# Missed occurrences within this window still fire (e.g. after a sleep/resume)
MISFIRE_GRACE_SECONDS = 300

# Audio player arguments: no video window, exit at end of file
PLAYER_ARGS = ["-nodisp", "-autoexit"]

# Hotkey: F pressed while either Alt is held
STOP_KEYS = {"f", "ƒ"}  # Option+F types ƒ on macOS
ALT_KEYS = {"alt", "alt_l", "alt_r", "alt_gr"}

# Console text
FIRST_RUN_PROMPT = "What time do you want to be reminded about caffeine? "
CHANGE_PROMPT = "Enter a new reminder time: "
REMINDER_BANNER = "Reminder time! Press ALT+F (system-wide) to stop the sound."
