"""Interfaces for the desktop services that actions rely on."""

from __future__ import annotations

import threading
from typing import Protocol


class Dialog(Protocol):
    """Interactive windows for reading and showing text."""

    def prompt(self) -> str:
        """Ask the user for text and return it."""
        ...

    def show_multiline(self, text: str) -> None:
        """Show a block of text to the user."""
        ...

    def show_cancellable(self, text: str, cancel: threading.Event) -> None:
        """Show a message until the user dismisses it or ``cancel`` is set."""
        ...


class Clipboard(Protocol):
    """Access to the system clipboard."""

    def set_text(self, text: str) -> None:
        """Put text on the clipboard."""
        ...

    def get_text(self) -> str:
        """Return the clipboard content as text."""
        ...

    def is_text(self) -> bool:
        """Tell whether the clipboard holds text."""
        ...

    def get_base64(self) -> str:
        """Return the clipboard content as a base64 data URL."""
        ...


class Notifier(Protocol):
    """Desktop notifications."""

    def notify(self, title: str, text: str) -> None:
        """Show a notification."""
        ...


class AudioPlayer(Protocol):
    """Background sound playback."""

    def play_loop(self, file_name: str, stop: threading.Event) -> None:
        """Play a sound file repeatedly until ``stop`` is set."""
        ...


class Screenshotter(Protocol):
    """Screen capture."""

    def get_screen_b64(self) -> str:
        """Capture the whole screen as a base64 data URL."""
        ...

    def get_section_b64(self) -> str:
        """Capture a user-selected area as a base64 data URL."""
        ...


class SelTextProvider(Protocol):
    """Access to the currently selected text."""

    def get(self) -> str:
        """Return the selected text."""
        ...


class ShortcutsManager(Protocol):
    """Registration of global keyboard shortcuts."""

    def create(self, shortcut_id: str, command: str, binding: str) -> None:
        """Create a shortcut that runs ``command`` on ``binding``."""
        ...


class VoiceRecorder(Protocol):
    """Microphone recording."""

    def record(self) -> str:
        """Record audio and return the name of the file holding it."""
        ...