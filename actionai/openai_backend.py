"""Model and voice engine backed by the OpenAI HTTP API."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import threading
from concurrent.futures import CancelledError
from pathlib import Path
from typing import Iterable, Sequence

import requests

from actionai.inputs import Input

DEFAULT_BASE_URL = "https://api.openai.com/v1"
TRANSCRIPTION_MODEL = "whisper-1"
SPEECH_MODEL = "tts-1"
SPEECH_VOICE = "nova"
SAMPLE_RATE = 24000
PCM_PLAYER_COMMAND = [
    "aplay",
    "-q",
    "-t",
    "raw",
    "-f",
    "S16_LE",
    "-r",
    str(SAMPLE_RATE),
    "-c",
    "1",
]

_TIMEOUT = 600
_CHUNK_SIZE = 4096
_POLL_INTERVAL = 0.01


class MissingAPIKeyError(RuntimeError):
    """No API key was given and none is set in the environment."""


def _resolve_key(api_key: str | None) -> str:
    key = api_key if api_key is not None else os.environ.get("OPENAI_API_KEY")
    if key is None:
        raise MissingAPIKeyError("OPENAI_API_KEY not set")
    return key


def _base_url() -> str:
    return os.environ.get("OPENAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/")


class _Client:
    def __init__(self, api_key: str | None) -> None:
        self._api_key = _resolve_key(api_key)
        self._base_url = _base_url()

    def _post(self, path: str, **kwargs) -> requests.Response:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        response = requests.post(
            f"{self._base_url}{path}", headers=headers, timeout=_TIMEOUT, **kwargs
        )
        if not kwargs.get("stream"):
            response.raise_for_status()
        return response


class OpenAIModel(_Client):
    """Chat completion model."""

    def __init__(self, logger: logging.Logger, api_key: str | None = None) -> None:
        self._logger = logger
        logger.info("Initializing OpenAI model for content generation")
        super().__init__(api_key)

    def run(self, model: str, instructions: str, inputs: Sequence[Input]) -> str:
        """Send the instructions and inputs to ``model`` and return its reply."""
        self._logger.info(
            "Running OpenAI model model=%s instructions=%s inputs=%s",
            model,
            instructions,
            inputs,
        )
        messages: list[dict] = [{"role": "system", "content": instructions}]
        for item in inputs:
            if item.text is not None:
                messages.append({"role": "user", "content": item.text})
            if item.image_data is not None:
                messages.append(
                    {
                        "role": "user",
                        "content": [
                            {"type": "image_url", "image_url": {"url": item.image_data}}
                        ],
                    }
                )

        completion = self._post(
            "/chat/completions", json={"model": model, "messages": messages}
        ).json()
        choices = completion.get("choices") or []
        if not choices:
            raise RuntimeError("empty response from model")
        content = choices[0].get("message", {}).get("content") or ""
        self._logger.info("Response from OpenAI model: %s", content)
        return content


class OpenAIVoiceEngine(_Client):
    """Speech transcription and synthesis."""

    def __init__(self, logger: logging.Logger, api_key: str | None = None) -> None:
        self._logger = logger
        logger.info("Initializing OpenAI model for voice engine")
        super().__init__(api_key)

    def transcribe(self, audio_file: str) -> str:
        """Return the text spoken in ``audio_file``."""
        path = Path(audio_file)
        with path.open("rb") as handle:
            response = self._post(
                "/audio/transcriptions",
                data={"model": TRANSCRIPTION_MODEL},
                files={"file": (path.name, handle)},
            )
        return response.json()["text"]

    def speak(self, text: str, cancel: threading.Event | None = None) -> None:
        """Say ``text`` aloud; raise ``CancelledError`` if ``cancel`` is set first."""
        cancel = cancel if cancel is not None else threading.Event()
        payload = {
            "input": text,
            "model": SPEECH_MODEL,
            "voice": SPEECH_VOICE,
            "response_format": "pcm",
        }
        response = self._post(
            "/audio/speech",
            data=json.dumps(payload),
            stream=True,
        )
        with response:
            response.raise_for_status()
            self._play(response.iter_content(chunk_size=_CHUNK_SIZE), cancel)

    @staticmethod
    def _play(chunks: Iterable[bytes], cancel: threading.Event) -> None:
        player = subprocess.Popen(
            PCM_PLAYER_COMMAND,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        try:
            for chunk in chunks:
                if cancel.is_set():
                    raise CancelledError()
                player.stdin.write(chunk)
            player.stdin.close()
            while player.poll() is None:
                if cancel.wait(_POLL_INTERVAL):
                    raise CancelledError()
        except BaseException:
            player.kill()
            player.wait()
            raise
        if player.returncode:
            raise subprocess.CalledProcessError(player.returncode, PCM_PLAYER_COMMAND)