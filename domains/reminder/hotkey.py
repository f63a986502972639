"""System-wide Alt+F hotkey that silences the reminder.

pynput delivers key events on its own thread. We only track which Alt keys
are held there and hand matches over to the asyncio loop, so the reminder
state is never touched off-loop.
"""

import asyncio
from typing import Callable, Optional

from logger import logger
from .config import ALT_KEYS, STOP_KEYS


def key_name(key) -> Optional[str]:
    """Normalise a pynput key to a lowercase name ("f", "alt_l", ...)."""
    char = getattr(key, "char", None)
    if char:
        return char.lower()
    name = getattr(key, "name", None)
    return name.lower() if name else None


def is_stop_chord(name: Optional[str], held: set[str]) -> bool:
    """True when the stop key goes down while either Alt is held."""
    return name in STOP_KEYS and bool(held & ALT_KEYS)


class HotkeyListener:
    """Global keyboard listener firing `callback` on Alt+F key-down.

    The pynput hook is installed once; start() on a running listener is a no-op.
    """

    def __init__(self, callback: Callable[[], None], loop: asyncio.AbstractEventLoop):
        self.callback = callback
        self.loop = loop
        self._held: set[str] = set()
        self._listener = None

    def start(self) -> bool:
        """Install the listener. Returns False if no keyboard hook is available."""
        if self._listener is not None:
            return True

        try:
            from pynput import keyboard
            self._listener = keyboard.Listener(
                on_press=self._on_press,
                on_release=self._on_release,
            )
            self._listener.daemon = True
            self._listener.start()
        except Exception as e:
            # pynput raises ImportError on headless machines (no X display)
            logger.warning(f"Global hotkey unavailable, Alt+F will not work: {e}")
            self._listener = None
            return False

        logger.info("Global hotkey listener started (Alt+F stops the sound)")
        return True

    def stop(self):
        if self._listener is not None:
            self._listener.stop()
            self._listener = None

    def _on_press(self, key):
        name = key_name(key)
        if name is None:
            return
        if name in ALT_KEYS:
            self._held.add(name)
        elif is_stop_chord(name, self._held):
            self.loop.call_soon_threadsafe(self.callback)

    def _on_release(self, key):
        name = key_name(key)
        if name is not None:
            self._held.discard(name)
