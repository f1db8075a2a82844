"""The command tree: parent/child links, naming and flag bookkeeping."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterator, Optional, Sequence

from coral.flags import Flag, FlagError, FlagSet, NormalizeFunc, command_line
from coral.suggestions import levenshtein

REQUIRED_FLAG_ANNOTATION = "coral_annotation_one_required_flag"

MIN_USAGE_PADDING = 25
MIN_COMMAND_PATH_PADDING = 11
MIN_NAME_PADDING = 11

RunFunc = Callable[[Any, Sequence[str]], Any]


@dataclass(eq=False)
class CommandNode:
    """A node of the command tree with its names, children and flag sets."""

    use: str = ""
    aliases: list[str] = field(default_factory=list)
    suggest_for: list[str] = field(default_factory=list)
    short: str = ""
    long: str = ""
    example: str = ""
    deprecated: str = ""
    hidden: bool = False
    run: Optional[RunFunc] = field(default=None, repr=False)
    run_e: Optional[RunFunc] = field(default=None, repr=False)
    disable_flags_in_use_line: bool = False
    disable_suggestions: bool = False
    suggestions_minimum_distance: int = 0
    help_command: Optional["CommandNode"] = field(default=None, repr=False)

    enable_prefix_matching: ClassVar[bool] = False
    enable_command_sorting: ClassVar[bool] = True

    flag_error_buffer: io.StringIO = field(
        default_factory=io.StringIO, init=False, repr=False
    )
    _parent: Optional["CommandNode"] = field(default=None, init=False, repr=False)
    _commands: list = field(default_factory=list, init=False, repr=False)
    _commands_are_sorted: bool = field(default=False, init=False, repr=False)
    _max_use_len: int = field(default=0, init=False, repr=False)
    _max_path_len: int = field(default=0, init=False, repr=False)
    _max_name_len: int = field(default=0, init=False, repr=False)
    _called_as_name: str = field(default="", init=False, repr=False)
    _called: bool = field(default=False, init=False, repr=False)
    _flags: Optional[FlagSet] = field(default=None, init=False, repr=False)
    _pflags: Optional[FlagSet] = field(default=None, init=False, repr=False)
    _lflags: Optional[FlagSet] = field(default=None, init=False, repr=False)
    _iflags: Optional[FlagSet] = field(default=None, init=False, repr=False)
    _parents_pflags: Optional[FlagSet] = field(default=None, init=False, repr=False)
    _glob_norm_func: Optional[NormalizeFunc] = field(default=None, init=False, repr=False)

    # ----- naming -------------------------------------------------------

    def name(self) -> str:
        """The first word of the use line."""
        return self.use.split(" ", 1)[0]

    def has_alias(self, alias: str) -> bool:
        return alias in self.aliases

    def name_and_aliases(self) -> str:
        return ", ".join([self.name(), *self.aliases])

    def has_example(self) -> bool:
        return bool(self.example)

    def runnable(self) -> bool:
        return self.run is not None or self.run_e is not None

    def called_as(self) -> str:
        """The name or alias used to invoke this command, or "" if not called."""
        return self._called_as_name if self._called else ""

    def _has_name_or_alias_prefix(self, prefix: str) -> bool:
        if self.name().startswith(prefix):
            self._called_as_name = self.name()
            return True
        for alias in self.aliases:
            if alias.startswith(prefix):
                self._called_as_name = alias
                return True
        return False

    def _find_next(self, word: str) -> Optional["CommandNode"]:
        matches = []
        for cmd in self._commands:
            if cmd.name() == word or cmd.has_alias(word):
                cmd._called_as_name = word
                return cmd
            if self.enable_prefix_matching and cmd._has_name_or_alias_prefix(word):
                matches.append(cmd)
        return matches[0] if len(matches) == 1 else None

    # ----- tree ---------------------------------------------------------

    @property
    def parent(self) -> Optional["CommandNode"]:
        return self._parent

    def has_parent(self) -> bool:
        return self._parent is not None

    def _ancestors(self) -> Iterator["CommandNode"]:
        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def root(self) -> "CommandNode":
        node = self
        for node in self._ancestors():
            pass
        return node

    def visit_parents(self, fn: Callable[["CommandNode"], Any]) -> None:
        for ancestor in self._ancestors():
            fn(ancestor)

    def command_path(self) -> str:
        if self._parent is not None:
            return f"{self._parent.command_path()} {self.name()}"
        return self.name()

    def use_line(self) -> str:
        """The full usage line, including the names of the parents."""
        if self._parent is not None:
            line = f"{self._parent.command_path()} {self.use}"
        else:
            line = self.use
        if self.disable_flags_in_use_line:
            return line
        if self.has_available_flags() and "[flags]" not in line:
            line += " [flags]"
        return line

    def commands(self) -> list["CommandNode"]:
        """The child commands, sorted by name unless sorting is disabled."""
        if self.enable_command_sorting and not self._commands_are_sorted:
            self._commands.sort(key=lambda cmd: cmd.name())
            self._commands_are_sorted = True
        return self._commands

    def _track_lengths(self, cmd: "CommandNode") -> None:
        self._max_use_len = max(self._max_use_len, len(cmd.use))
        self._max_path_len = max(self._max_path_len, len(cmd.command_path()))
        self._max_name_len = max(self._max_name_len, len(cmd.name()))

    def add_command(self, *args: "CommandNode") -> None:
        """Attach one or more child commands."""
        for cmd in args:
            if cmd is self:
                raise ValueError("Command can't be a child of itself")
            cmd._parent = self
            self._track_lengths(cmd)
            if self._glob_norm_func is not None:
                cmd.set_global_normalization_func(self._glob_norm_func)
            self._commands.append(cmd)
            self._commands_are_sorted = False

    def remove_command(self, *args: "CommandNode") -> None:
        """Detach the given child commands."""
        kept = []
        for cmd in self._commands:
            if any(cmd is removed for removed in args):
                cmd._parent = None
            else:
                kept.append(cmd)
        self._commands = kept
        self._max_use_len = self._max_path_len = self._max_name_len = 0
        for cmd in self._commands:
            self._track_lengths(cmd)

    def reset_commands(self) -> None:
        """Forget the parent, the children and the help command."""
        self._parent = None
        self._commands = []
        self.help_command = None
        self._parents_pflags = None

    def has_sub_commands(self) -> bool:
        return bool(self._commands)

    def is_available_command(self) -> bool:
        """Tell whether the command is listed: not hidden, deprecated or help."""
        if self.deprecated or self.hidden:
            return False
        if self._parent is not None and self._parent.help_command is self:
            return False
        return self.runnable() or self.has_available_sub_commands()

    def is_additional_help_topic_command(self) -> bool:
        """Tell whether the command only carries help text."""
        if self.runnable() or self.deprecated or self.hidden:
            return False
        return all(sub.is_additional_help_topic_command() for sub in self._commands)

    def has_help_sub_commands(self) -> bool:
        return any(sub.is_additional_help_topic_command() for sub in self._commands)

    def has_available_sub_commands(self) -> bool:
        return any(sub.is_available_command() for sub in self._commands)

    def usage_padding(self) -> int:
        if self._parent is None:
            return MIN_USAGE_PADDING
        return max(MIN_USAGE_PADDING, self._parent._max_use_len)

    def command_path_padding(self) -> int:
        if self._parent is None:
            return MIN_COMMAND_PATH_PADDING
        return max(MIN_COMMAND_PATH_PADDING, self._parent._max_path_len)

    def name_padding(self) -> int:
        if self._parent is None:
            return MIN_NAME_PADDING
        return max(MIN_NAME_PADDING, self._parent._max_name_len)

    def suggestions_for(self, typed_name: str) -> list[str]:
        """Names of available children close to ``typed_name``."""
        suggestions = []
        lowered = typed_name.lower()
        for cmd in self._commands:
            if not cmd.is_available_command():
                continue
            close = levenshtein(typed_name, cmd.name(), True) <= self.suggestions_minimum_distance
            if close or cmd.name().lower().startswith(lowered):
                suggestions.append(cmd.name())
            suggestions.extend(
                cmd.name()
                for explicit in cmd.suggest_for
                if explicit.casefold() == typed_name.casefold()
            )
        return suggestions

    # ----- flags --------------------------------------------------------

    def _new_flag_set(self) -> FlagSet:
        flag_set = FlagSet(self.name())
        flag_set.output = self.flag_error_buffer
        return flag_set

    def flags(self) -> FlagSet:
        """Every flag that applies to this command."""
        if self._flags is None:
            self._flags = self._new_flag_set()
        return self._flags

    def persistent_flags(self) -> FlagSet:
        """The flags declared here that children inherit."""
        if self._pflags is None:
            self._pflags = self._new_flag_set()
        return self._pflags

    def _merged_parents_pflags(self) -> FlagSet:
        self._update_parents_pflags()
        assert self._parents_pflags is not None
        return self._parents_pflags

    def local_flags(self) -> FlagSet:
        """The flags declared on this command itself."""
        self.merge_persistent_flags()
        parents = self._merged_parents_pflags()
        if self._lflags is None:
            self._lflags = self._new_flag_set()
        local = self._lflags
        local.sort_flags = self.flags().sort_flags
        if self._glob_norm_func is not None:
            local.set_normalize_func(self._glob_norm_func)
        for flag in [*self.flags(), *self.persistent_flags()]:
            if local.lookup(flag.name) is None and parents.lookup(flag.name) is None:
                local.add_flag(flag)
        return local

    def local_non_persistent_flags(self) -> FlagSet:
        """Local flags that children do not inherit."""
        persistent = self.persistent_flags()
        result = FlagSet(self.name())
        for flag in self.local_flags():
            if persistent.lookup(flag.name) is None:
                result.add_flag(flag)
        return result

    def inherited_flags(self) -> FlagSet:
        """The flags inherited from the parents."""
        self.merge_persistent_flags()
        if self._iflags is None:
            self._iflags = self._new_flag_set()
        inherited = self._iflags
        local = self.local_flags()
        if self._glob_norm_func is not None:
            inherited.set_normalize_func(self._glob_norm_func)
        for flag in self._merged_parents_pflags():
            if inherited.lookup(flag.name) is None and local.lookup(flag.name) is None:
                inherited.add_flag(flag)
        return inherited

    def non_inherited_flags(self) -> FlagSet:
        return self.local_flags()

    def reset_flags(self) -> None:
        """Drop every flag of this command."""
        self.flag_error_buffer = io.StringIO()
        self._flags = self._new_flag_set()
        self._pflags = self._new_flag_set()
        self._lflags = None
        self._iflags = None
        self._parents_pflags = None

    def has_flags(self) -> bool:
        return self.flags().has_flags()

    def has_persistent_flags(self) -> bool:
        return self.persistent_flags().has_flags()

    def has_local_flags(self) -> bool:
        return self.local_flags().has_flags()

    def has_inherited_flags(self) -> bool:
        return self.inherited_flags().has_flags()

    def has_available_flags(self) -> bool:
        return self.flags().has_available_flags()

    def has_available_persistent_flags(self) -> bool:
        return self.persistent_flags().has_available_flags()

    def has_available_local_flags(self) -> bool:
        return self.local_flags().has_available_flags()

    def has_available_inherited_flags(self) -> bool:
        return self.inherited_flags().has_available_flags()

    def flag(self, name: str) -> Optional[Flag]:
        """Find a flag here or among the persistent flags up the tree."""
        found = self.flags().lookup(name)
        if found is None:
            found = self._persistent_flag(name)
        return found

    def _persistent_flag(self, name: str) -> Optional[Flag]:
        found = None
        if self.has_persistent_flags():
            found = self.persistent_flags().lookup(name)
        if found is None:
            found = self._merged_parents_pflags().lookup(name)
        return found

    def merge_persistent_flags(self) -> None:
        """Merge own and inherited persistent flags into ``flags()``."""
        parents = self._merged_parents_pflags()
        self.flags().add_flag_set(self.persistent_flags())
        self.flags().add_flag_set(parents)

    def _update_parents_pflags(self) -> None:
        if self._parents_pflags is None:
            parents = FlagSet(self.name())
            parents.output = self.flag_error_buffer
            parents.sort_flags = False
            self._parents_pflags = parents
        if self._glob_norm_func is not None:
            self._parents_pflags.set_normalize_func(self._glob_norm_func)
        self.root().persistent_flags().add_flag_set(command_line())
        for ancestor in self._ancestors():
            self._parents_pflags.add_flag_set(ancestor.persistent_flags())

    def set_global_normalization_func(self, func: Optional[NormalizeFunc]) -> None:
        """Apply a flag name normalizer here and to every descendant."""
        self.flags().set_normalize_func(func)
        self.persistent_flags().set_normalize_func(func)
        self._glob_norm_func = func
        for cmd in self._commands:
            cmd.set_global_normalization_func(func)

    def global_normalization_func(self) -> Optional[NormalizeFunc]:
        return self._glob_norm_func

    @staticmethod
    def _mark_required(flag_set: FlagSet, name: str) -> None:
        flag = flag_set.lookup(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        flag.annotations[REQUIRED_FLAG_ANNOTATION] = ["true"]

    def mark_flag_required(self, name: str) -> None:
        """Require a local flag to be given on the command line."""
        self._mark_required(self.flags(), name)

    def mark_persistent_flag_required(self, name: str) -> None:
        """Require a persistent flag to be given on the command line."""
        self._mark_required(self.persistent_flags(), name)