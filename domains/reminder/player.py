"""Play the alert sound through an external player (ffplay by default).

The player runs fire-and-forget: no window, no console output, and it exits
by itself at the end of the file. The only control we keep is terminate().
"""

import asyncio
import subprocess
import sys
from pathlib import Path

from logger import logger
from .config import PLAYER_ARGS
from .errors import AudioLaunchError, AudioStopError

# Windows subprocess config
IS_WINDOWS = sys.platform == "win32"
CREATE_NO_WINDOW = subprocess.CREATE_NO_WINDOW if IS_WINDOWS else 0


class AudioPlayer:
    """Launches one-shot playback processes for a fixed sound file."""

    def __init__(self, binary: str, sound_file: Path):
        self.binary = binary
        self.sound_file = Path(sound_file)

    def command(self) -> list[str]:
        return [self.binary, *PLAYER_ARGS, str(self.sound_file)]

    async def launch(self) -> asyncio.subprocess.Process:
        """Start playback.

        Returns:
            The running player process

        Raises:
            AudioLaunchError: If the sound file is missing or the player
                cannot be spawned
        """
        if not self.sound_file.is_file():
            raise AudioLaunchError(f"Sound file not found: {self.sound_file}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                creationflags=CREATE_NO_WINDOW,
            )
        except OSError as e:
            raise AudioLaunchError(f"Failed to start {self.binary}: {e}") from e

        logger.info(f"Started {self.binary} (PID: {proc.pid}) for {self.sound_file.name}")
        return proc

    @staticmethod
    def terminate(proc) -> bool:
        """Terminate a playback process.

        Returns:
            True if a signal was sent, False if it had already exited

        Raises:
            AudioStopError: If the process could not be signalled
        """
        if proc.returncode is not None:
            return False

        try:
            proc.terminate()
        except ProcessLookupError:
            return False  # Already exited
        except OSError as e:
            raise AudioStopError(f"Failed to stop audio process {proc.pid}: {e}") from e

        logger.info(f"Audio process {proc.pid} terminated")
        return True
