"""Daily caffeine reminder domain.

A single APScheduler cron job plays a sound once a day; Alt+F silences it.
"""

from .cron import to_cron_expression, parse_clock_time, parse_cron_fields, cron_to_clock
from .errors import (
    ReminderError,
    InvalidTime,
    InvalidSchedule,
    SettingsReadError,
    SettingsWriteError,
    AudioLaunchError,
    AudioStopError,
)
from .store import ReminderConfig, load_settings, load_or_default, save_settings, settings_exist
from .player import AudioPlayer
from .scheduler import ReminderScheduler, ReminderState, build_trigger
from .hotkey import HotkeyListener, is_stop_chord
from .shell import ReminderShell

__all__ = [
    "to_cron_expression",
    "parse_clock_time",
    "parse_cron_fields",
    "cron_to_clock",
    "ReminderError",
    "InvalidTime",
    "InvalidSchedule",
    "SettingsReadError",
    "SettingsWriteError",
    "AudioLaunchError",
    "AudioStopError",
    "ReminderConfig",
    "load_settings",
    "load_or_default",
    "save_settings",
    "settings_exist",
    "AudioPlayer",
    "ReminderScheduler",
    "ReminderState",
    "build_trigger",
    "HotkeyListener",
    "is_stop_chord",
    "ReminderShell",
]
