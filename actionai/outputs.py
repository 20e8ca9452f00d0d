"""Output destinations for action results and the sender that delivers them."""

from __future__ import annotations

import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from enum import Enum
from typing import Callable

from actionai.platform import Clipboard, Dialog

SpeakFunc = Callable[[str, threading.Event], None]


class OutputType(str, Enum):
    """Where an action sends its result."""

    CLIPBOARD = "clipboard"
    STDOUT = "stdout"
    VOICE = "voice"
    WINDOW = "window"

    def __str__(self) -> str:
        return self.value


def parse_output_type(value: str) -> OutputType:
    """Return the output type named by ``value``."""
    try:
        return OutputType(value)
    except ValueError:
        raise ValueError(f"invalid output type: {value}") from None


class Sender:
    """Delivers a result to the chosen destination."""

    def __init__(self, dialog: Dialog, clipboard: Clipboard, speak: SpeakFunc) -> None:
        self._dialog = dialog
        self._clipboard = clipboard
        self._speak = speak

    def send(self, output_type: OutputType, value: str) -> None:
        """Send ``value`` to ``output_type``."""
        if output_type == OutputType.STDOUT:
            print(value)
        elif output_type == OutputType.CLIPBOARD:
            self._clipboard.set_text(value)
        elif output_type == OutputType.WINDOW:
            self._dialog.show_multiline(value)
        elif output_type == OutputType.VOICE:
            self._send_voice(value)
        else:
            raise ValueError(f"unsupported output type: {output_type}")

    def _send_voice(self, value: str) -> None:
        """Speak ``value`` while a dialog lets the user cut it short.

        Whichever finishes first stops the other; its outcome is the result.
        """
        cancel = threading.Event()
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(self._dialog.show_cancellable, "Speaking...", cancel),
                pool.submit(self._speak, value, cancel),
            ]
            done, _ = wait(futures, return_when=FIRST_COMPLETED)
            cancel.set()
        next(iter(done)).result()