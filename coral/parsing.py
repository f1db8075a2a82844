"""Helpers that look through raw argument lists before full flag parsing."""

from __future__ import annotations

from typing import Sequence

from coral.flags import FlagSet


def has_no_opt_default(name: str, flag_set: FlagSet) -> bool:
    """Tell whether the long flag ``name`` may be given without a value."""
    flag = flag_set.lookup(name)
    return flag is not None and flag.no_opt_default != ""


def short_has_no_opt_default(name: str, flag_set: FlagSet) -> bool:
    """Tell whether the shorthand starting ``name`` may be given without a value."""
    if not name:
        return False
    flag = flag_set.shorthand_lookup(name[:1])
    return flag is not None and flag.no_opt_default != ""


def strip_flags(args: Sequence[str], flag_set: FlagSet) -> list[str]:
    """Return the non-flag words of ``args``, dropping flags and their values.

    ``flag_set`` should hold every flag that applies to the command,
    persistent flags of its parents included.
    """
    commands: list[str] = []
    remaining = list(args)
    while remaining:
        word, remaining = remaining[0], remaining[1:]
        if word == "--":
            break
        long_with_value = (
            word.startswith("--")
            and "=" not in word
            and not has_no_opt_default(word[2:], flag_set)
        )
        short_with_value = (
            word.startswith("-")
            and "=" not in word
            and len(word) == 2
            and not short_has_no_opt_default(word[1:], flag_set)
        )
        if long_with_value or short_with_value:
            if len(remaining) <= 1:
                break
            remaining = remaining[1:]
        elif word and not word.startswith("-"):
            commands.append(word)
    return commands


def args_minus_first_x(args: Sequence[str], x: str) -> list[str]:
    """Return ``args`` without the first occurrence of ``x``."""
    result = list(args)
    if x in result:
        result.remove(x)
    return result


def is_flag_arg(arg: str) -> bool:
    """Tell whether ``arg`` is a flag that carries no separate value."""
    return (len(arg) >= 3 and arg[1] == "-") or (
        len(arg) >= 2 and arg[0] == "-" and arg[1] != "-"
    )