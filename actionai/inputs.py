"""Input sources for actions and the receiver that collects them."""

from __future__ import annotations

import threading
from concurrent.futures import CancelledError
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from actionai.platform import Clipboard, Dialog, Screenshotter, SelTextProvider, VoiceRecorder


class InputType(str, Enum):
    """Where an action takes its input from."""

    CLIPBOARD = "clipboard"
    SCREEN = "screen"
    SCREEN_SECTION = "screen-section"
    SELECTED_TEXT = "selected-text"
    VOICE = "voice"
    WINDOW = "window"

    def __str__(self) -> str:
        return self.value


@dataclass
class Input:
    """One piece of input: text, an image data URL or a recorded voice file."""

    text: str | None = None
    image_data: str | None = None
    voice_file_name: str | None = None


def parse_input_type(value: str) -> InputType:
    """Return the input type named by ``value``."""
    try:
        return InputType(value)
    except ValueError:
        raise ValueError(f"invalid input type: {value}") from None


def parse_input_types(values: Iterable[str]) -> list[InputType]:
    """Parse every name in ``values``, keeping their order."""
    return [parse_input_type(value) for value in values]


class Receiver:
    """Collects inputs from the platform services."""

    def __init__(
        self,
        dialog: Dialog,
        clipboard: Clipboard,
        screenshotter: Screenshotter,
        voice_recorder: VoiceRecorder,
        sel_text_provider: SelTextProvider,
    ) -> None:
        self._dialog = dialog
        self._clipboard = clipboard
        self._screenshotter = screenshotter
        self._voice_recorder = voice_recorder
        self._sel_text_provider = sel_text_provider
        self._handlers: dict[InputType, Callable[[], Input]] = {
            InputType.CLIPBOARD: self._from_clipboard,
            InputType.WINDOW: lambda: Input(text=self._dialog.prompt()),
            InputType.SELECTED_TEXT: lambda: Input(text=self._sel_text_provider.get()),
            InputType.SCREEN: lambda: Input(image_data=self._screenshotter.get_screen_b64()),
            InputType.SCREEN_SECTION: lambda: Input(
                image_data=self._screenshotter.get_section_b64()
            ),
            InputType.VOICE: lambda: Input(voice_file_name=self._voice_recorder.record()),
        }

    def receive(
        self,
        types: Iterable[InputType],
        cancel: threading.Event | None = None,
    ) -> list[Input]:
        """Gather one input for each type, in order.

        Raises ``CancelledError`` if ``cancel`` is set before all are gathered.
        """
        result = []
        for input_type in types:
            if cancel is not None and cancel.is_set():
                raise CancelledError()
            handler = self._handlers.get(input_type)
            if handler is None:
                raise ValueError(f"unsupported input source: {input_type}")
            result.append(handler())
        return result

    def _from_clipboard(self) -> Input:
        if self._clipboard.is_text():
            return Input(text=self._clipboard.get_text())
        return Input(image_data=self._clipboard.get_base64())