"""Rendering of usage, help and version texts for commands."""

from __future__ import annotations

import re
from typing import Any, Callable, Union

Template = Union[str, Callable[[Any], str]]

_ACTION = re.compile(r"\{\{(.*?)\}\}", re.S)
_FIELD_CHAIN = re.compile(r"\.(\w+(?:\.\w+)*)")
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def rpad(text: str, padding: int) -> str:
    """Left-justify ``text`` in a field ``padding`` characters wide."""
    return text.ljust(padding)


def trim_trailing_whitespace(text: str) -> str:
    """Remove whitespace from the end of ``text``."""
    return text.rstrip()


def _attribute_name(field_name: str) -> str:
    return _WORD_BOUNDARY.sub("_", field_name).lower()


def _format(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(item) for item in value) + "]"
    return str(value)


def _evaluate(action: str, cmd: Any) -> str:
    match = _FIELD_CHAIN.fullmatch(action.strip())
    if match is None:
        raise ValueError(f"unsupported template action: {{{{{action}}}}}")
    value = cmd
    for field_name in match.group(1).split("."):
        attribute = _attribute_name(field_name)
        if not hasattr(value, attribute):
            raise ValueError(f"can't evaluate field {field_name}")
        value = getattr(value, attribute)
        if callable(value):
            value = value()
    return _format(value)


def render(template: Template, cmd: Any) -> str:
    """Render a template for ``cmd``.

    A callable template is called with the command. A string template may
    hold ``{{.Field}}`` references, where ``Field`` (or ``field``) names an
    attribute or a method of the command; dotted chains are followed.
    """
    if callable(template):
        return template(cmd)
    return _ACTION.sub(lambda m: _evaluate(m.group(1), cmd), template)


def default_usage(cmd: Any) -> str:
    """The standard usage text of a command."""
    parts = ["Usage:"]
    if cmd.runnable():
        parts.append(f"\n  {cmd.use_line()}")
    has_subs = cmd.has_available_sub_commands()
    if has_subs:
        parts.append(f"\n  {cmd.command_path()} [command]")
    if cmd.aliases:
        parts.append(f"\n\nAliases:\n  {cmd.name_and_aliases()}")
    if cmd.has_example():
        parts.append(f"\n\nExamples:\n{cmd.example}")
    if has_subs:
        parts.append("\n\nAvailable Commands:")
        parts.extend(
            f"\n  {rpad(sub.name(), sub.name_padding())} {sub.short}"
            for sub in cmd.commands()
            if sub.is_available_command() or sub.name() == "help"
        )
    if cmd.has_available_local_flags():
        usages = trim_trailing_whitespace(cmd.local_flags().flag_usages())
        parts.append(f"\n\nFlags:\n{usages}")
    if cmd.has_available_inherited_flags():
        usages = trim_trailing_whitespace(cmd.inherited_flags().flag_usages())
        parts.append(f"\n\nGlobal Flags:\n{usages}")
    if cmd.has_help_sub_commands():
        parts.append("\n\nAdditional help topics:")
        parts.extend(
            f"\n  {rpad(sub.command_path(), sub.command_path_padding())} {sub.short}"
            for sub in cmd.commands()
            if sub.is_additional_help_topic_command()
        )
    if has_subs:
        parts.append(
            f'\n\nUse "{cmd.command_path()} [command] --help" '
            "for more information about a command."
        )
    parts.append("\n")
    return "".join(parts)


def default_help(cmd: Any) -> str:
    """The standard help text: description followed by usage."""
    text = ""
    description = cmd.long or cmd.short
    if description:
        text += trim_trailing_whitespace(description) + "\n\n"
    if cmd.runnable() or cmd.has_sub_commands():
        text += cmd.usage_string()
    return text


def default_version(cmd: Any) -> str:
    """The standard version line."""
    name = cmd.name()
    prefix = f"{name} " if name else ""
    return f"{prefix}version {cmd.version}\n"