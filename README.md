# actionai

`actionai` runs AI actions from the command line. It gathers input from your
desktop (the screen, a selected region of it, the current text selection, the
clipboard, your voice or a text window), sends it to an OpenAI chat model
along with your instructions, and delivers the answer to the clipboard,
standard output, a window or speech.

It is meant to be bound to keyboard shortcuts on a GNOME desktop running
Wayland.

## Requirements

- Linux with GNOME on Wayland
- An OpenAI API key in the `OPENAI_API_KEY` environment variable. The API
  address can be changed with `OPENAI_BASE_URL` (default
  `https://api.openai.com/v1`).
- These programs on your `PATH`, depending on the inputs and outputs you use:
  - `wl-copy` and `wl-paste`: clipboard input and output, selected text
  - `zenity`: the text window, the result window, the recording and speaking
    dialogs
  - `gnome-screenshot`: screen capture
  - `ffmpeg`: voice recording (ALSA default device, MP3)
  - `aplay`: the sound played while waiting, and spoken answers

## Installation

```
pip install .
```

## Usage

```
actionai run --input <inputs> --output <output> [--model <model>] [--instructions <text>]
```

Options of `run`:

- `-i`, `--input`: a comma-separated list of inputs, or the option given more
  than once; inputs are gathered in the order given. Each is one of `screen`,
  `screen-section`, `selected-text`, `voice`, `window` or `clipboard`.
  Required.
- `-o`, `--output`: one of `clipboard`, `stdout`, `voice`, `window`. Required.
- `-m`, `--model`: the chat model to use. Defaults to `gpt-4.1-mini`.
- `-n`, `--instructions`: instructions passed to the model as the system
  message. Defaults to empty.

Running `actionai` with no subcommand prints the help. An unknown input or
output name, or a failure while setting up or running the action, prints
`Error: ...` to standard error and exits with status 1.

### What each input does

- `screen`: captures the whole screen as a PNG image.
- `screen-section`: lets you pick an area of the screen to capture.
- `selected-text`: takes the current primary selection.
- `clipboard`: takes the clipboard text, or, if the clipboard holds no text
  type, its content as an image of its first offered type.
- `window`: opens an editable text window; what you type is the input.
- `voice`: records from the microphone until you close the "Recording..."
  window, then transcribes the recording with `whisper-1`. If transcription
  fails, a warning is logged and the action goes on without that input.

### What each output does

- `stdout`: prints the answer.
- `clipboard`: copies the answer to the clipboard.
- `window`: shows the answer in a read-only text window.
- `voice`: speaks the answer with the `tts-1` model and the `nova` voice.
  A "Speaking..." dialog with a Cancel button is shown meanwhile; pressing it
  stops the speech, and the speech ending closes the dialog.

### Examples

Explain the selected text in a window:

```
actionai run -i selected-text -o window -n "Explain this text in simple terms"
```

Ask a question out loud about a region of the screen and hear the answer:

```
actionai run -i screen-section,voice -o voice
```

Fix the grammar of the selected text and copy the result to the clipboard:

```
actionai run -i selected-text -o clipboard -n "Fix grammar and spelling. Reply with the corrected text only."
```

### Waiting sound

While the model is working, `sound.wav` is played in a loop if it exists in
the `actionai` folder of your user configuration directory:
`$XDG_CONFIG_HOME/actionai/sound.wav`, or `~/.config/actionai/sound.wav` when
`XDG_CONFIG_HOME` is not set. The directory in use is printed on each run.

## Using it as a library

`actionai.core.ActionRunner` runs an `actionai.core.Action` end to end. It
takes a model and a voice engine (anything with the methods of
`actionai.core.AIModel` and `actionai.core.VoiceEngine`) and the desktop
services described in `actionai.platform`. `actionai.gnome` provides the GNOME
implementations and `actionai.openai_backend` provides `OpenAIModel` and
`OpenAIVoiceEngine`; both take an optional `api_key` in place of the
environment variable. An `Action` with `notify=True` also sends a desktop
notification when the model has answered.

## What it does not do

- Only OpenAI is supported as a model and voice backend.
- Only GNOME on Wayland is supported as a desktop.
- There is no command to create keyboard shortcuts. The class
  `actionai.gnome.GnomeShortcutsManager` can register a custom GNOME shortcut
  through `gsettings` from your own code, but you otherwise bind `actionai run
  ...` to a key yourself in the GNOME settings.
- The command line never sends a completion notification.