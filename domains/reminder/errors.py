"""Error types for the reminder domain.

Every failure here degrades to "keep the previous good state and tell the
user"; none of them should end the process.
"""


class ReminderError(Exception):
    """Base class for reminder errors."""


class InvalidTime(ReminderError, ValueError):
    """A clock time could not be parsed or is out of range."""


class InvalidSchedule(ReminderError, ValueError):
    """A stored cron expression cannot be turned into a trigger."""


class SettingsReadError(ReminderError):
    """The settings file exists but is unreadable or corrupt."""


class SettingsWriteError(ReminderError):
    """The settings file could not be written."""


class AudioLaunchError(ReminderError):
    """The audio player could not be started."""


class AudioStopError(ReminderError):
    """The audio player could not be terminated."""
