"""Command line entry point for running AI actions."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from actionai.core import Action, ActionRunner, AssetsManager
from actionai.gnome import (
    GnomeAudioPlayer,
    GnomeClipboard,
    GnomeDialog,
    GnomeNotifier,
    GnomeScreenshotter,
    GnomeSelTextProvider,
    GnomeVoiceRecorder,
)
from actionai.inputs import InputType, parse_input_types
from actionai.openai_backend import OpenAIModel, OpenAIVoiceEngine
from actionai.outputs import OutputType, parse_output_type

DEFAULT_MODEL = "gpt-4.1-mini"

VALID_INPUTS = (
    InputType.SCREEN,
    InputType.SCREEN_SECTION,
    InputType.SELECTED_TEXT,
    InputType.VOICE,
    InputType.WINDOW,
)

VALID_OUTPUTS = (
    OutputType.CLIPBOARD,
    OutputType.STDOUT,
    OutputType.VOICE,
    OutputType.WINDOW,
)


class ActionError(RuntimeError):
    """Setting up or running an action failed."""


def build_parser() -> argparse.ArgumentParser:
    """Return the parser for the ``actionai`` command and its ``run`` subcommand."""
    parser = argparse.ArgumentParser(
        prog="actionai",
        description=(
            "ActionAI is a flexible command line tool designed to execute "
            "AI-driven actions seamlessly."
        ),
    )
    subcommands = parser.add_subparsers(dest="command")
    run = subcommands.add_parser("run", help="Run an action", description="Run an action")
    run.add_argument(
        "-i",
        "--input",
        action="append",
        required=True,
        help="List of input types (" + ", ".join(str(t) for t in VALID_INPUTS) + ")",
    )
    run.add_argument(
        "-o",
        "--output",
        required=True,
        help="Output type (" + ", ".join(str(t) for t in VALID_OUTPUTS) + ")",
    )
    run.add_argument("-m", "--model", default=DEFAULT_MODEL, help="AI model to use")
    run.add_argument(
        "-n",
        "--instructions",
        default="",
        help="Instructions to pass to the AI model",
    )
    return parser


def _split_inputs(values: Sequence[str]) -> list[str]:
    """Flatten repeated and comma-separated ``--input`` values."""
    return [part for value in values for part in value.split(",") if part]


def run_action(action: Action) -> None:
    """Run ``action`` with the OpenAI backend and the GNOME desktop services."""
    logger = logging.getLogger("actionai")
    try:
        assets = AssetsManager()
    except OSError as exc:
        raise ActionError(f"Error resolving working directory: {exc}") from exc

    try:
        model = OpenAIModel(logger)
    except Exception as exc:
        raise ActionError(f"Error initializing model: {exc}") from exc

    try:
        voice_engine = OpenAIVoiceEngine(logger)
    except Exception as exc:
        raise ActionError(f"Error initializing voice engine: {exc}") from exc

    runner = ActionRunner(
        logger,
        assets,
        model,
        voice_engine,
        GnomeDialog(),
        GnomeNotifier(),
        GnomeClipboard(),
        GnomeAudioPlayer(),
        GnomeScreenshotter(),
        GnomeVoiceRecorder(),
        GnomeSelTextProvider(),
    )

    try:
        runner.run_action(action)
    except Exception as exc:
        raise ActionError(f"Error running the model: {exc}") from exc


def main(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv`` and run the requested command; return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        action = Action(
            model=args.model,
            inputs=parse_input_types(_split_inputs(args.input)),
            output=parse_output_type(args.output),
            instructions=args.instructions,
        )
        print(f"Running action: {action}")
        run_action(action)
    except (ValueError, ActionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())