"""Desktop services for GNOME on Wayland, driven through command-line tools."""

from __future__ import annotations

import base64
import re
import signal
import subprocess
import tempfile
import threading
from concurrent.futures import CancelledError
from pathlib import Path

DIALOG_TITLE = "Action AI"
MEDIA_KEYS_SCHEMA = "org.gnome.settings-daemon.plugins.media-keys"
KEYBINDINGS_KEY = "custom-keybindings"
KEYBINDING_PATH = "/org/gnome/settings-daemon/plugins/media-keys/custom-keybindings/{}/"

_POLL_INTERVAL = 0.05
_LIST_PATTERN = re.compile(r"\[(.*)\]")


def _output(cmd: list[str]) -> bytes:
    """Run ``cmd`` and return its standard output, raising if it fails."""
    return subprocess.run(cmd, check=True, capture_output=True).stdout


class GnomeAudioPlayer:
    """Plays sound files with ``aplay``."""

    def play_loop(self, file_name: str, stop: threading.Event) -> threading.Thread | None:
        """Play ``file_name`` over and over in the background until ``stop`` is set.

        Does nothing if the file does not exist. Returns the background thread.
        """
        if not Path(file_name).exists():
            return None
        thread = threading.Thread(target=self._loop, args=(file_name, stop), daemon=True)
        thread.start()
        return thread

    @staticmethod
    def _loop(file_name: str, stop: threading.Event) -> None:
        while not stop.is_set():
            try:
                proc = subprocess.Popen(
                    ["aplay", file_name],
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError:
                return
            while proc.poll() is None:
                if stop.wait(_POLL_INTERVAL):
                    proc.terminate()
                    proc.wait()
                    return


class GnomeClipboard:
    """The Wayland clipboard, through ``wl-copy`` and ``wl-paste``."""

    def set_text(self, text: str) -> None:
        """Put text on the clipboard."""
        subprocess.run(["wl-copy"], input=text.encode(), check=True)

    def get_text(self) -> str:
        """Return the clipboard content as text."""
        return self._content().decode(errors="replace")

    def is_text(self) -> bool:
        """Tell whether any of the clipboard's offered types is textual."""
        return any("text/" in mime_type for mime_type in self._mime_types())

    def get_base64(self) -> str:
        """Return the clipboard content as a data URL of its first offered type."""
        mime_types = [mime_type for mime_type in self._mime_types() if mime_type.strip()]
        if not mime_types:
            raise RuntimeError("unable to detect clipboard content mime type")
        encoded = base64.b64encode(self._content()).decode("ascii")
        return f"data:{mime_types[0]};base64,{encoded}"

    @staticmethod
    def _mime_types() -> list[str]:
        return _output(["wl-paste", "--list-types"]).decode(errors="replace").split("\n")

    @staticmethod
    def _content() -> bytes:
        return _output(["wl-paste"])


class GnomeDialog:
    """Dialog windows shown with ``zenity``."""

    def prompt(self) -> str:
        """Open an editable text window and return what the user typed."""
        out = _output(
            [
                "zenity",
                "--text-info",
                "--editable",
                f"--title={DIALOG_TITLE}",
                "--width=500",
                "--height=500",
            ]
        )
        return out.decode(errors="replace").strip()

    def show_multiline(self, text: str) -> None:
        """Show ``text`` in a read-only window."""
        subprocess.run(
            ["zenity", "--text-info", f"--title={DIALOG_TITLE}", "--width=500", "--height=500"],
            input=text.encode(),
            check=True,
        )

    def show_cancellable(self, text: str, cancel: threading.Event) -> None:
        """Show ``text`` with a Cancel button until it is pressed or ``cancel`` is set.

        Raises ``CancelledError`` if ``cancel`` closes the window.
        """
        cmd = ["zenity", "--info", f"--title={DIALOG_TITLE}", "--text", text, "--ok-label=Cancel"]
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        while proc.poll() is None:
            if cancel.wait(_POLL_INTERVAL):
                proc.kill()
                proc.wait()
                raise CancelledError()
        if proc.returncode != 0:
            raise subprocess.CalledProcessError(proc.returncode, cmd)


class GnomeNotifier:
    """Desktop notifications through ``notify-send``."""

    def notify(self, title: str, text: str) -> None:
        """Show a notification."""
        subprocess.run(["notify-send", title, text], check=True)


class GnomeScreenshotter:
    """Screen capture through ``gnome-screenshot``."""

    def get_section_b64(self) -> str:
        """Capture an area chosen by the user as a PNG data URL."""
        return self._capture(full_screen=False)

    def get_screen_b64(self) -> str:
        """Capture the whole screen as a PNG data URL."""
        return self._capture(full_screen=True)

    @staticmethod
    def _capture(full_screen: bool) -> str:
        with tempfile.TemporaryDirectory() as tmp:
            image = Path(tmp) / "screenshot.png"
            cmd = ["gnome-screenshot"]
            if not full_screen:
                cmd.append("-a")
            cmd += ["-f", str(image)]
            subprocess.run(cmd, check=True)
            data = image.read_bytes()
        return "data:image/png;base64," + base64.b64encode(data).decode("ascii")


class GnomeSelTextProvider:
    """The primary selection, through ``wl-paste``."""

    def get(self) -> str:
        """Return the currently selected text."""
        return _output(["wl-paste", "--primary"]).decode(errors="replace")


class GnomeShortcutsManager:
    """Custom GNOME keyboard shortcuts, managed through ``gsettings``."""

    def create(self, shortcut_id: str, command: str, binding: str) -> None:
        """Register a shortcut named ``shortcut_id`` that runs ``command`` on ``binding``."""
        quoted = f"'{self.entry_path(shortcut_id)}'"
        entries = self.entries()
        if quoted in entries:
            raise ValueError(f"shortcut with id {shortcut_id} already exists")
        self._add_entry(quoted)
        self._set_params(shortcut_id, command, binding)

    def entries(self) -> list[str]:
        """Return the registered keybinding paths, quoted as gsettings prints them."""
        out = _output(["gsettings", "get", MEDIA_KEYS_SCHEMA, KEYBINDINGS_KEY])
        match = _LIST_PATTERN.search(out.decode(errors="replace").strip())
        if match is None:
            return []
        return [item.strip() for item in match.group(1).split(",") if item.strip()]

    def entry_path(self, shortcut_id: str) -> str:
        """Return the settings path of the shortcut named ``shortcut_id``."""
        return KEYBINDING_PATH.format(shortcut_id)

    def _add_entry(self, quoted: str) -> None:
        entries = self.entries()
        if quoted in entries:
            return
        entries.append(quoted)
        value = "[" + ", ".join(entries) + "]"
        subprocess.run(
            ["gsettings", "set", MEDIA_KEYS_SCHEMA, KEYBINDINGS_KEY, value], check=True
        )

    def _set_params(self, shortcut_id: str, command: str, binding: str) -> None:
        schema = f"{MEDIA_KEYS_SCHEMA}.custom-keybinding:{self.entry_path(shortcut_id)}"
        params = {"name": shortcut_id, "command": command, "binding": binding}
        for key, value in params.items():
            subprocess.run(["gsettings", "set", schema, key, value], check=True)


class GnomeVoiceRecorder:
    """Microphone recording with ``ffmpeg``, stopped from a ``zenity`` window."""

    def record(self) -> str:
        """Record until the user closes the window; return the MP3 file's name."""
        file_name = str(Path(tempfile.gettempdir()) / "audio.mp3")
        recorder = subprocess.Popen(
            [
                "ffmpeg",
                "-y",
                "-f",
                "alsa",
                "-i",
                "default",
                "-acodec",
                "libmp3lame",
                file_name,
            ],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        try:
            subprocess.run(["zenity", "--info", "--text=Recording..."], check=True)
        except (OSError, subprocess.CalledProcessError):
            recorder.kill()
            recorder.wait()
            raise
        try:
            recorder.send_signal(signal.SIGINT)
        except OSError:
            recorder.kill()
        recorder.wait()
        return file_name