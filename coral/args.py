"""Validators for the positional arguments a command accepts."""

from __future__ import annotations

import json
from typing import Any, Callable, Sequence

PositionalArgs = Callable[[Any, Sequence[str]], None]


class ArgumentError(Exception):
    """Raised when positional arguments do not match what a command accepts."""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _suggestion_text(cmd: Any, typed: str) -> str:
    if getattr(cmd, "disable_suggestions", False):
        return ""
    if getattr(cmd, "suggestions_minimum_distance", 0) <= 0:
        cmd.suggestions_minimum_distance = 2
    suggestions = cmd.suggestions_for(typed)
    if not suggestions:
        return ""
    return "\n\nDid you mean this?\n" + "".join(f"\t{name}\n" for name in suggestions)


def no_args(cmd: Any, args: Sequence[str]) -> None:
    """Reject any positional argument."""
    if args:
        raise ArgumentError(
            f"unknown command {_quote(args[0])} for {_quote(cmd.command_path())}"
        )


def arbitrary_args(cmd: Any, args: Sequence[str]) -> None:
    """Accept any number of positional arguments, provided they are strings."""
    for arg in args:
        if not isinstance(arg, str):
            raise ArgumentError(f"arguments must be strings, received {arg!r}")


def exact_args(count: int) -> PositionalArgs:
    """Return a validator that accepts exactly ``count`` positional arguments."""

    def validate(cmd: Any, args: Sequence[str]) -> None:
        if len(args) != count:
            raise ArgumentError(f"accepts {count} arg(s), received {len(args)}")

    return validate


def legacy_args(cmd: Any, args: Sequence[str]) -> None:
    """Validation used for commands that declare no validator of their own.

    Leaf commands take any arguments; a root command with sub-commands
    treats its first argument as an unknown sub-command.
    """
    if not cmd.has_sub_commands():
        return
    if not cmd.has_parent() and args:
        raise ArgumentError(
            f"unknown command {_quote(args[0])} for {_quote(cmd.command_path())}"
            f"{_suggestion_text(cmd, args[0])}"
        )