# coral

coral provides the building blocks of a command-line interface. These are:

- a tree of commands, with names, aliases, descriptions and flags;
- typed flag sets that parse argument lists;
- validators for positional arguments;
- helpers that look through raw arguments for sub-command names;
- rendering of usage, help and version text;
- edit-distance suggestions for mistyped command names.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Example

```python
from coral.node import CommandNode
from coral.parsing import strip_flags
from coral.help import default_usage

root = CommandNode(use="app", short="A small example", run=lambda cmd, args: None)
hello = CommandNode(use="hello NAME", short="Greet someone",
                    run=lambda cmd, args: None)
hello.flags().bool("loud", False, "shout the greeting", "l")
root.add_command(hello)

strip_flags(["-l", "world"], hello.flags())   # ["world"]

flag_set = hello.flags()
flag_set.parse(["--loud", "world"])
flag_set.get_bool("loud")                      # True
flag_set.args()                                # ["world"]

print(default_usage(root))
```

## Modules

### `coral.flags`

- `FlagSet(name)` is an ordered set of flags.
- `bool`, `int` and `string` each define a flag. Their arguments are the name, the default, the usage text and an optional one-character shorthand.
- `parse(args)` accepts these forms:
  - `--name=value` and `--name value`;
  - `-n value`, `-nvalue` and `-n=value`;
  - grouped boolean shorthands such as `-ab`.
- `--` ends flag parsing. `args()` returns the positional arguments. `args_len_at_dash()` returns how many positional arguments came before `--`, or `-1` if there was no `--`.
- Boolean flags may be given without a value.
- Integers are parsed in decimal, and in octal, hex or binary when the text has the prefix for that base.
- `get`, `get_bool` and `set` read and write values. `set` marks a flag as changed.
- `lookup`, `shorthand_lookup` and `in` find flags.
- Iterating over a set yields its flags. They are sorted by name unless `sort_flags` is false.
- `mark_hidden` hides a flag. `mark_deprecated` hides a flag and makes it print a notice when it is used.
- `set_normalize_func` installs a function that rewrites flag names.
- `flag_usages()` renders aligned usage lines for the visible flags, with their defaults.
- Errors raise `FlagError`, for example "unknown flag: --x" and "unknown shorthand flag: 'v' in -v".
- Setting `parse_errors_allowlist = ParseErrorsAllowlist(unknown_flags=True)` makes `parse` skip unknown flags instead of raising.
- `command_line()` returns a process-wide flag set that is merged into every root command's persistent flags. `reset_command_line()` replaces that set with an empty one.

### `coral.node`

`CommandNode` is a dataclass. Its fields are `use`, `aliases`, `suggest_for`, `short`, `long`, `example`, `deprecated`, `hidden`, `run`, `run_e` and related options.

The tree:

- `add_command`, `remove_command` and `reset_commands` change the children.
- `commands()` returns the children, sorted by name unless `CommandNode.enable_command_sorting` is false.
- `parent`, `root()` and `visit_parents` move up the tree.
- `name()`, `command_path()`, `use_line()` and `name_and_aliases()` give names and paths.
- `runnable()`, `is_available_command()` and `is_additional_help_topic_command()` classify commands.
- The padding helpers give column widths for usage text.

Flags:

- `flags()` holds every flag that applies to the command. `persistent_flags()` holds the flags that children inherit.
- `local_flags()`, `inherited_flags()` and `local_non_persistent_flags()` are views over those sets. `merge_persistent_flags()` brings the inherited flags into `flags()`.
- `flag(name)` searches the command's own flags and then the persistent flags up the tree.
- `set_global_normalization_func` applies a flag name normalizer to the command and all of its descendants.
- `mark_flag_required` and `mark_persistent_flag_required` add a required-flag annotation to a flag.

`suggestions_for(name)` lists available children that match the name in any of these ways:

- their edit distance to the name is at most `suggestions_minimum_distance` (default 0);
- they start with the name, ignoring case;
- they list the name in `suggest_for`.

### `coral.args`

These validators have the form `(cmd, args)` and raise `ArgumentError` when the arguments do not fit:

- `no_args`
- `arbitrary_args`
- `exact_args(n)`, which returns a validator
- `legacy_args`

`legacy_args` rejects the first argument of a root command that has children, as an unknown command. Its error includes "Did you mean this?" suggestions, which use a minimum distance of 2 unless another is set.

### `coral.parsing`

- `strip_flags(args, flag_set)` returns the words of `args` that are not flags or flag values.
- `args_minus_first_x(args, x)` drops the first occurrence of `x`.
- `is_flag_arg(arg)` tells whether `arg` is a flag.
- `has_no_opt_default` and `short_has_no_opt_default` tell whether a long or short flag may be given without a value.

### `coral.help`

- `default_usage(cmd)` renders the standard usage text for a `CommandNode`. The text has the sections Usage, Aliases, Examples, Available Commands, Flags, Global Flags and Additional help topics.
- `default_help(cmd)` renders the long or short description, followed by the command's `usage_string()`.
- `default_version(cmd)` renders `"<name> version <version>"` from the command's `name()` and `version`.
- `render(template, cmd)` works in one of two ways:
  - it calls a callable template with the command;
  - it fills `{{.Field}}` references in a string template from the command's attributes or methods. For example, `{{.CommandPath}}` becomes `command_path()`.
- `rpad` and `trim_trailing_whitespace` are small text helpers.

### `coral.suggestions`

`levenshtein(first, second, ignore_case)` returns the edit distance between two strings.

## What is not included

The package has no part that executes a command tree. Nothing takes an argument list and does the following:

- finds the target command;
- runs its `run` or `run_e` function and the surrounding hooks;
- adds `--help`, `--version` or a `help` sub-command automatically;
- prints errors and usage when something fails.

`run` and `run_e` are stored on `CommandNode` only so that `runnable()` can report them. Applications that need dispatch must build it from the parts above: `CommandNode`, `FlagSet.parse`, the validators in `coral.args` and the renderers in `coral.help`. `CommandNode` has no `usage_string()` or `version` of its own, so `default_help` and `default_version` need an object that provides them.