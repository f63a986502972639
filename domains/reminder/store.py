"""JSON file persistence for the reminder settings record."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from logger import logger
from .config import DEFAULT_TIME, DEFAULT_CRON_EXPRESSION
from .cron import cron_to_clock
from .errors import InvalidSchedule, SettingsReadError, SettingsWriteError


@dataclass
class ReminderConfig:
    """The persisted reminder preference.

    `cron_expression` drives scheduling; `time` is what the user typed and is
    only ever displayed.
    """
    time: str
    cron_expression: str

    @classmethod
    def default(cls) -> "ReminderConfig":
        return cls(time=DEFAULT_TIME, cron_expression=DEFAULT_CRON_EXPRESSION)

    @classmethod
    def from_dict(cls, data) -> "ReminderConfig":
        """Build from the on-disk record.

        Raises:
            SettingsReadError: If the record has no usable cronExpression
        """
        if not isinstance(data, dict):
            raise SettingsReadError("Settings record is not a JSON object")

        expression = data.get("cronExpression")
        if not isinstance(expression, str) or not expression.strip():
            raise SettingsReadError("No cronExpression found")

        time = data.get("time")
        if not isinstance(time, str) or not time.strip():
            try:
                hour, minute = cron_to_clock(expression)
                time = f"{hour:02d}:{minute:02d}"
            except InvalidSchedule:
                time = expression

        return cls(time=time, cron_expression=expression.strip())

    def to_dict(self) -> dict:
        return {"time": self.time, "cronExpression": self.cron_expression}


def settings_exist(path: Path) -> bool:
    """Check whether a settings record has been written yet."""
    return Path(path).is_file()


def load_settings(path: Path) -> Optional[ReminderConfig]:
    """Read the settings record.

    Args:
        path: Settings file path

    Returns:
        ReminderConfig, or None if the file does not exist

    Raises:
        SettingsReadError: If the file exists but cannot be read or parsed
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsReadError(f"Error reading settings file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SettingsReadError(f"Failed to parse {path}: {e}") from e

    return ReminderConfig.from_dict(data)


def load_or_default(path: Path) -> tuple[ReminderConfig, bool]:
    """Read the settings record, falling back to the 20:00 default.

    Returns:
        Tuple of (config, is_default)
    """
    try:
        config = load_settings(path)
    except SettingsReadError as e:
        logger.warning(f"{e} - using default time ({DEFAULT_TIME})")
        return ReminderConfig.default(), True

    if config is None:
        logger.info(f"No settings file at {path} - using default time ({DEFAULT_TIME})")
        return ReminderConfig.default(), True

    return config, False


def save_settings(config: ReminderConfig, path: Path) -> None:
    """Overwrite the settings record.

    Raises:
        SettingsWriteError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    except OSError as e:
        raise SettingsWriteError(f"Failed to save settings to {path}: {e}") from e

    logger.info(f"Saved settings: {config.time!r} ({config.cron_expression})")
