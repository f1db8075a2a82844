"""Typed command-line flags and the flag sets that parse them."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, TextIO

NormalizeFunc = Callable[["FlagSet", str], str]


class FlagError(Exception):
    """Raised when flags cannot be parsed, looked up or set."""


@dataclass
class ParseErrorsAllowlist:
    """Parse errors that a flag set should ignore instead of raising."""

    unknown_flags: bool = False


def _go_quote(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_BODY = re.compile(r"[0-9a-zA-Z_]+")
_INT_MIN = -(1 << 63)
_INT_MAX = (1 << 63) - 1


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"parsing {_go_quote(text)}: invalid syntax")


def _parse_int(text: str) -> int:
    negative = text.startswith("-")
    body = text[1:] if text.startswith(("+", "-")) else text
    invalid = ValueError(f"parsing {_go_quote(text)}: invalid syntax")
    if not _INT_BODY.fullmatch(body):
        raise invalid
    try:
        if len(body) > 1 and body[0] == "0" and body[1] in "0123456789_":
            value = int(body, 8)
        else:
            value = int(body, 0)
    except ValueError:
        raise invalid from None
    if negative:
        value = -value
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"parsing {_go_quote(text)}: value out of range")
    return value


_PARSERS: dict[str, Callable[[str], Any]] = {
    "bool": _parse_bool,
    "int": _parse_int,
    "string": str,
}

_ZERO_TEXT = {"bool": "false", "int": "0", "string": ""}


def _format_value(kind: str, value: Any) -> str:
    if kind == "bool":
        return "true" if value else "false"
    return str(value)


@dataclass(eq=False)
class Flag:
    """A single named flag holding a typed value."""

    name: str
    kind: str
    default: Any
    usage: str = ""
    shorthand: str = ""
    no_opt_default: str = ""
    value: Any = None
    changed: bool = False
    hidden: bool = False
    deprecated: str = ""
    shorthand_deprecated: str = ""
    annotations: dict = field(default_factory=dict)
    default_text: str = field(init=False, default="")

    def __post_init__(self) -> None:
        if self.kind not in _PARSERS:
            raise ValueError(f"unsupported flag type: {self.kind}")
        if self.value is None:
            self.value = self.default
        self.default_text = _format_value(self.kind, self.default)

    def __str__(self) -> str:
        return _format_value(self.kind, self.value)


def _display_name(flag: Flag) -> str:
    if flag.shorthand and not flag.shorthand_deprecated:
        return f"-{flag.shorthand}, --{flag.name}"
    return f"--{flag.name}"


def _unquote_usage(flag: Flag) -> tuple[str, str]:
    usage = flag.usage
    start = usage.find("`")
    if start >= 0:
        end = usage.find("`", start + 1)
        if end >= 0:
            name = usage[start + 1 : end]
            return name, usage[:start] + name + usage[end + 1 :]
    return ("" if flag.kind == "bool" else flag.kind), usage


class FlagSet:
    """An ordered collection of flags that parses argument lists."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.sort_flags = True
        self.parse_errors_allowlist = ParseErrorsAllowlist()
        self.output: Optional[TextIO] = None
        self.parsed = False
        self._normalize: Optional[NormalizeFunc] = None
        self._formal: dict[str, Flag] = {}
        self._shorthands: dict[str, Flag] = {}
        self._args: list[str] = []
        self._args_len_at_dash = -1

    def __iter__(self) -> Iterator[Flag]:
        flags = list(self._formal.values())
        if self.sort_flags:
            flags.sort(key=lambda f: f.name)
        return iter(flags)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __len__(self) -> int:
        return len(self._formal)

    @property
    def normalize_func(self) -> Optional[NormalizeFunc]:
        return self._normalize

    def _normalized(self, name: str) -> str:
        if self._normalize is None:
            return name
        return str(self._normalize(self, name))

    def _write(self, text: str) -> None:
        (self.output if self.output is not None else sys.stderr).write(text)

    def add_flag(self, flag: Flag) -> None:
        """Add a flag, sharing the object with any other set holding it."""
        key = self._normalized(flag.name)
        if key in self._formal:
            raise ValueError(f"{self.name} flag redefined: {flag.name}")
        flag.name = key
        self._formal[key] = flag
        if not flag.shorthand:
            return
        if len(flag.shorthand) > 1:
            raise ValueError(
                f"{_go_quote(flag.shorthand)} shorthand is more than one ASCII character"
            )
        used = self._shorthands.get(flag.shorthand)
        if used is not None:
            raise ValueError(
                f"unable to redefine {_go_quote(flag.shorthand)} shorthand in "
                f"{_go_quote(self.name)} flagset: it's already used for "
                f"{_go_quote(used.name)} flag"
            )
        self._shorthands[flag.shorthand] = flag

    def add_flag_set(self, other: Optional["FlagSet"]) -> None:
        """Add every flag of another set that this set does not yet have."""
        if other is None:
            return
        for flag in other:
            if self.lookup(flag.name) is None:
                self.add_flag(flag)

    def lookup(self, name: str) -> Optional[Flag]:
        return self._formal.get(self._normalized(name))

    def shorthand_lookup(self, shorthand: str) -> Optional[Flag]:
        if not shorthand:
            return None
        if len(shorthand) > 1:
            raise ValueError(
                f"can not look up shorthand which is more than one ASCII character: "
                f"{_go_quote(shorthand)}"
            )
        return self._shorthands.get(shorthand)

    def _define(
        self, kind: str, name: str, default: Any, usage: str, shorthand: str, no_opt: str = ""
    ) -> Flag:
        flag = Flag(
            name=name,
            kind=kind,
            default=default,
            usage=usage,
            shorthand=shorthand,
            no_opt_default=no_opt,
        )
        self.add_flag(flag)
        return flag

    def bool(self, name: str, default=False, usage: str = "", shorthand: str = "") -> Flag:
        return self._define("bool", name, default, usage, shorthand, "true")

    def int(self, name: str, default=0, usage: str = "", shorthand: str = "") -> Flag:
        return self._define("int", name, default, usage, shorthand)

    def string(self, name: str, default="", usage: str = "", shorthand: str = "") -> Flag:
        return self._define("string", name, default, usage, shorthand)

    def get(self, name: str) -> Any:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag accessed but not defined: {name}")
        return flag.value

    def get_bool(self, name: str):
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag accessed but not defined: {name}")
        if flag.kind != "bool":
            raise FlagError(f"trying to get bool value of flag of type {flag.kind}")
        return flag.value

    def set(self, name: str, value: Any) -> None:
        """Set a flag from text (or a plain value) and mark it changed."""
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        text = value if isinstance(value, str) else _format_value(
            "bool" if isinstance(value, type(True)) else flag.kind, value
        )
        try:
            flag.value = _PARSERS[flag.kind](text)
        except ValueError as exc:
            raise FlagError(
                f"invalid argument {_go_quote(text)} for "
                f"{_go_quote(_display_name(flag))} flag: {exc}"
            ) from None
        flag.changed = True
        if flag.deprecated:
            self._write(f"Flag --{flag.name} has been deprecated, {flag.deprecated}\n")

    def parse(self, args) -> None:
        """Parse an argument list; positional arguments are kept for args()."""
        self.parsed = True
        self._args = []
        remaining = list(args)
        while remaining:
            arg, remaining = remaining[0], remaining[1:]
            if len(arg) < 2 or arg[0] != "-":
                self._args.append(arg)
                continue
            if arg[1] == "-":
                if len(arg) == 2:
                    self._args_len_at_dash = len(self._args)
                    self._args.extend(remaining)
                    break
                remaining = self._parse_long(arg, remaining)
            else:
                shorthands = arg[1:]
                while shorthands:
                    shorthands, remaining = self._parse_short(shorthands, remaining)

    @staticmethod
    def _strip_unknown_value(args: list[str]) -> list[str]:
        if not args or args[0].startswith("-"):
            return args
        return args[1:]

    def _parse_long(self, arg: str, rest: list[str]) -> list[str]:
        name = arg[2:]
        if not name or name[0] in "-=":
            raise FlagError(f"bad flag syntax: {arg}")
        name, has_value, inline = name.partition("=")
        flag = self.lookup(name)
        if flag is None:
            if self.parse_errors_allowlist.unknown_flags:
                return rest if has_value else self._strip_unknown_value(rest)
            raise FlagError(f"unknown flag: --{name}")
        if has_value:
            value = inline
        elif flag.no_opt_default:
            value = flag.no_opt_default
        elif rest:
            value, rest = rest[0], rest[1:]
        else:
            raise FlagError(f"flag needs an argument: {arg}")
        self.set(flag.name, value)
        return rest

    def _parse_short(self, shorthands: str, rest: list[str]) -> tuple[str, list[str]]:
        char, remainder = shorthands[0], shorthands[1:]
        flag = self._shorthands.get(char)
        if flag is None:
            if self.parse_errors_allowlist.unknown_flags:
                if len(shorthands) > 2 and shorthands[1] == "=":
                    return "", rest
                return remainder, self._strip_unknown_value(rest)
            raise FlagError(f"unknown shorthand flag: '{char}' in -{shorthands}")
        if len(shorthands) > 2 and shorthands[1] == "=":
            value, remainder = shorthands[2:], ""
        elif flag.no_opt_default:
            value = flag.no_opt_default
        elif len(shorthands) > 1:
            value, remainder = shorthands[1:], ""
        elif rest:
            value, rest = rest[0], rest[1:]
        else:
            raise FlagError(f"flag needs an argument: '{char}' in -{shorthands}")
        if flag.shorthand_deprecated:
            self._write(
                f"Flag shorthand -{flag.shorthand} has been deprecated, "
                f"{flag.shorthand_deprecated}\n"
            )
        self.set(flag.name, value)
        return remainder, rest

    def args(self) -> list[str]:
        return list(self._args)

    def args_len_at_dash(self):
        return self._args_len_at_dash

    def has_flags(self):
        return bool(self._formal)

    def has_available_flags(self):
        return any(not flag.hidden for flag in self._formal.values())

    def mark_deprecated(self, name: str, message: str) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag {_go_quote(name)} does not exist")
        if not message:
            raise FlagError(f"deprecated message for flag {_go_quote(name)} must be set")
        flag.deprecated = message
        flag.hidden = True

    def mark_hidden(self, name: str) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag {_go_quote(name)} does not exist")
        flag.hidden = True

    def set_normalize_func(self, func: Optional[NormalizeFunc]) -> None:
        """Install a name normalizer and re-key the flags already defined."""
        self._normalize = func
        renamed: dict[str, Flag] = {}
        for flag in self._formal.values():
            flag.name = self._normalized(flag.name)
            renamed[flag.name] = flag
        self._formal = renamed

    def flag_usages(self) -> str:
        """Render the usage lines of every visible flag, aligned in columns."""
        entries: list[tuple[str, str]] = []
        width = 0
        for flag in self:
            if flag.hidden:
                continue
            if flag.shorthand and not flag.shorthand_deprecated:
                head = f"  -{flag.shorthand}, --{flag.name}"
            else:
                head = f"      --{flag.name}"
            varname, usage = _unquote_usage(flag)
            if varname:
                head += " " + varname
            if flag.no_opt_default:
                if flag.kind == "string":
                    head += f'[="{flag.no_opt_default}"]'
                elif flag.kind == "bool":
                    if flag.no_opt_default != "true":
                        head += f"[={flag.no_opt_default}]"
                else:
                    head += f"[={flag.no_opt_default}]"
            width = max(width, len(head) + 1)
            if flag.default_text != _ZERO_TEXT[flag.kind]:
                if flag.kind == "string":
                    usage += f" (default {_go_quote(flag.default_text)})"
                else:
                    usage += f" (default {flag.default_text})"
            if flag.deprecated:
                usage += f" (DEPRECATED: {flag.deprecated})"
            entries.append((head, usage))
        lines = []
        for head, usage in entries:
            spacing = " " * (width - len(head))
            usage = usage.replace("\n", "\n" + " " * (width + 2))
            lines.append(f"{head} {spacing} {usage}\n")
        return "".join(lines)


_command_line = FlagSet(sys.argv[0] if sys.argv else "")


def command_line() -> FlagSet:
    """Return the process-wide flag set merged into every root command."""
    return _command_line


def reset_command_line() -> FlagSet:
    """Replace the process-wide flag set with an empty one and return it."""
    global _command_line
    _command_line = FlagSet(sys.argv[0] if sys.argv else "")
    return _command_line