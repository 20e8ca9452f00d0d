import json
import logging
import subprocess
import threading
from concurrent.futures import CancelledError
from unittest.mock import MagicMock, patch

import pytest
import requests
import responses

from actionai.inputs import Input
from actionai.openai_backend import MissingAPIKeyError, OpenAIModel, OpenAIVoiceEngine

BASE = "https://api.openai.com/v1"
LOGGER = logging.getLogger("test")


@pytest.fixture(autouse=True)
def _default_base(monkeypatch):
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_model_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(MissingAPIKeyError, match="OPENAI_API_KEY not set"):
        OpenAIModel(LOGGER)


def test_voice_engine_requires_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(MissingAPIKeyError):
        OpenAIVoiceEngine(LOGGER)


def test_model_key_from_environment(monkeypatch, mocked):
    monkeypatch.setenv("OPENAI_API_KEY", "token")
    mocked.post(f"{BASE}/chat/completions", json={"choices": [{"message": {"content": "ok"}}]})
    assert OpenAIModel(LOGGER).run("m", "", []) == "ok"
    assert mocked.calls[0].request.headers["Authorization"] == "Bearer token"


def test_model_run_builds_messages(mocked):
    mocked.post(
        f"{BASE}/chat/completions",
        json={"choices": [{"message": {"content": "reply"}}]},
    )
    model = OpenAIModel(LOGGER, api_key="placeholder")
    inputs = [Input(text="hello"), Input(image_data="data:image/png;base64,AAAA")]
    assert model.run("gpt-4.1-mini", "be brief", inputs) == "reply"

    request = mocked.calls[0].request
    assert request.headers["Authorization"] == "Bearer placeholder"
    body = json.loads(request.body)
    assert body["model"] == "gpt-4.1-mini"
    assert body["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hello"},
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}
            ],
        },
    ]


def test_model_empty_choices(mocked):
    mocked.post(f"{BASE}/chat/completions", json={"choices": []})
    with pytest.raises(RuntimeError, match="empty response from model"):
        OpenAIModel(LOGGER, api_key="placeholder").run("m", "i", [])


def test_model_http_error(mocked):
    mocked.post(f"{BASE}/chat/completions", status=500, json={"error": "boom"})
    with pytest.raises(requests.HTTPError):
        OpenAIModel(LOGGER, api_key="placeholder").run("m", "i", [])


def test_base_url_from_environment(monkeypatch, mocked):
    monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:9999/v1/")
    mocked.post(
        "http://localhost:9999/v1/chat/completions",
        json={"choices": [{"message": {"content": "local"}}]},
    )
    assert OpenAIModel(LOGGER, api_key="placeholder").run("m", "i", []) == "local"


def test_transcribe(tmp_path, mocked):
    audio = tmp_path / "audio.mp3"
    audio.write_bytes(b"ID3 audio")
    mocked.post(f"{BASE}/audio/transcriptions", json={"text": "hello world"})
    engine = OpenAIVoiceEngine(LOGGER, api_key="placeholder")
    assert engine.transcribe(str(audio)) == "hello world"
    body = mocked.calls[0].request.body
    assert b"whisper-1" in body
    assert b"ID3 audio" in body


def test_transcribe_missing_file(tmp_path):
    engine = OpenAIVoiceEngine(LOGGER, api_key="placeholder")
    with pytest.raises(FileNotFoundError):
        engine.transcribe(str(tmp_path / "missing.mp3"))


def test_speak_streams_pcm_to_player(mocked):
    pcm = bytes(range(256)) * 40
    mocked.post(f"{BASE}/audio/speech", body=pcm)
    player = MagicMock()
    player.poll.return_value = 0
    player.returncode = 0
    with patch("subprocess.Popen", return_value=player) as popen:
        result = OpenAIVoiceEngine(LOGGER, api_key="placeholder").speak(
            "hi", threading.Event()
        )

    assert result is None
    written = b"".join(c[0][0] for c in player.stdin.write.call_args_list)
    assert written == pcm
    assert "24000" in popen.call_args[0][0]
    body = json.loads(mocked.calls[0].request.body)
    assert body == {"input": "hi", "model": "tts-1", "voice": "nova", "response_format": "pcm"}


def test_speak_cancelled(mocked):
    mocked.post(f"{BASE}/audio/speech", body=b"\x00\x01" * 100)
    player = MagicMock()
    player.poll.return_value = None
    cancel = threading.Event()
    cancel.set()
    with patch("subprocess.Popen", return_value=player):
        with pytest.raises(CancelledError):
            OpenAIVoiceEngine(LOGGER, api_key="placeholder").speak("hi", cancel)
    player.kill.assert_called_once()


def test_speak_player_failure(mocked):
    mocked.post(f"{BASE}/audio/speech", body=b"\x00\x01")
    player = MagicMock()
    player.poll.return_value = 1
    player.returncode = 1
    with patch("subprocess.Popen", return_value=player):
        with pytest.raises(subprocess.CalledProcessError):
            OpenAIVoiceEngine(LOGGER, api_key="placeholder").speak("hi")


def test_speak_http_error(mocked):
    mocked.post(f"{BASE}/audio/speech", status=401, json={"error": "denied"})
    with patch("subprocess.Popen") as popen:
        with pytest.raises(requests.HTTPError):
            OpenAIVoiceEngine(LOGGER, api_key="placeholder").speak("hi")
    popen.assert_not_called()