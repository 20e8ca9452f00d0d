"""Actions and the runner that gathers input, queries a model and sends the result."""

from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from actionai.inputs import Input, InputType, Receiver
from actionai.outputs import OutputType, Sender
from actionai.platform import (
    AudioPlayer,
    Clipboard,
    Dialog,
    Notifier,
    Screenshotter,
    SelTextProvider,
    VoiceRecorder,
)

SOUND_FILE = "sound.wav"
APP_DIR = "actionai"


@dataclass
class Action:
    """What to run: the model, where input comes from and where output goes."""

    model: str
    inputs: list[InputType]
    output: OutputType
    shortcut: str = ""
    instructions: str = ""
    notify: bool = False


class AIModel(Protocol):
    """A model that answers instructions given some inputs."""

    def run(self, model: str, instructions: str, inputs: Sequence[Input]) -> str:
        """Return the model's reply."""
        ...


class VoiceEngine(Protocol):
    """Speech synthesis and transcription."""

    def speak(self, text: str, cancel: threading.Event) -> None:
        """Say ``text`` aloud, stopping early if ``cancel`` is set."""
        ...

    def transcribe(self, audio_file: str) -> str:
        """Return the text spoken in ``audio_file``."""
        ...


def _user_config_dir() -> Path:
    """Return the per-user configuration directory of this platform."""
    if sys.platform.startswith("win"):
        app_data = os.environ.get("AppData")
        if not app_data:
            raise OSError("%AppData% is not defined")
        return Path(app_data)
    home = os.environ.get("HOME")
    if sys.platform == "darwin":
        if not home:
            raise OSError("$HOME is not defined")
        return Path(home) / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        if not os.path.isabs(xdg):
            raise OSError("path in $XDG_CONFIG_HOME is relative")
        return Path(xdg)
    if not home:
        raise OSError("neither $XDG_CONFIG_HOME nor $HOME are defined")
    return Path(home) / ".config"


class AssetsManager:
    """Locates the files the program ships with, under the user's config directory."""

    def __init__(self, workdir: str | os.PathLike[str] | None = None) -> None:
        directory = Path(workdir) if workdir is not None else _user_config_dir() / APP_DIR
        print(f"Using directory {directory}")
        self.workdir = directory

    def sound_file(self) -> Path:
        """Return the path of the sound played while an action runs."""
        return self.workdir / SOUND_FILE


class ActionRunner:
    """Runs actions end to end."""

    def __init__(
        self,
        logger: logging.Logger,
        assets: AssetsManager,
        ai_model: AIModel,
        voice_engine: VoiceEngine,
        dialog: Dialog,
        notifier: Notifier,
        clipboard: Clipboard,
        audio_player: AudioPlayer,
        screenshotter: Screenshotter,
        voice_recorder: VoiceRecorder,
        sel_text_provider: SelTextProvider,
    ) -> None:
        self._logger = logger
        self._assets = assets
        self._ai_model = ai_model
        self._voice_engine = voice_engine
        self._notifier = notifier
        self._audio_player = audio_player
        self._receiver = Receiver(
            dialog, clipboard, screenshotter, voice_recorder, sel_text_provider
        )
        self._sender = Sender(dialog, clipboard, voice_engine.speak)

    def run_action(self, action: Action) -> None:
        """Gather the inputs, ask the model and deliver its reply."""
        inputs = self._receiver.receive(action.inputs)
        response = self._query(action, inputs)
        if action.notify:
            self._notifier.notify("Action AI", "Action completed.")
        self._sender.send(action.output, response)

    def _query(self, action: Action, inputs: list[Input]) -> str:
        stop = threading.Event()
        self._audio_player.play_loop(str(self._assets.sound_file()), stop)
        try:
            try:
                self._transcribe_voice(inputs)
            except Exception as exc:
                self._logger.warning("Voice transcription failed: %s", exc)
            return self._ai_model.run(action.model, action.instructions, inputs)
        finally:
            stop.set()

    def _transcribe_voice(self, inputs: list[Input]) -> None:
        """Replace recorded voice inputs by their transcription, in place."""
        for item in inputs:
            if item.voice_file_name is not None:
                item.text = self._voice_engine.transcribe(item.voice_file_name)
                item.voice_file_name = None