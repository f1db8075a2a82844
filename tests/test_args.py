from dataclasses import dataclass, field

import pytest

from coral.args import (
    ArgumentError,
    arbitrary_args,
    exact_args,
    legacy_args,
    no_args,
)


@dataclass
class FakeCommand:
    path: str = "root"
    subcommands: bool = True
    parent: bool = False
    suggestions: list = field(default_factory=list)
    disable_suggestions: bool = False
    suggestions_minimum_distance: int = 0
    asked: list = field(default_factory=list)

    def command_path(self):
        return self.path

    def has_sub_commands(self):
        return self.subcommands

    def has_parent(self):
        return self.parent

    def suggestions_for(self, typed):
        self.asked.append((typed, self.suggestions_minimum_distance))
        return list(self.suggestions)


def test_no_args_accepts_empty_and_rejects_any():
    cmd = FakeCommand()
    assert no_args(cmd, []) is None
    with pytest.raises(ArgumentError) as info:
        no_args(cmd, ["one"])
    assert str(info.value) == 'unknown command "one" for "root"'


def test_arbitrary_args_accepts_everything():
    cmd = FakeCommand()
    assert arbitrary_args(cmd, ["one", "two", "--", "three"]) is None


@pytest.mark.parametrize("given", [[], ["one"], ["one", "two", "three"]])
def test_exact_args_rejects_wrong_count(given):
    validate = exact_args(2)
    with pytest.raises(ArgumentError) as info:
        validate(FakeCommand(), given)
    assert str(info.value) == f"accepts 2 arg(s), received {len(given)}"


def test_exact_args_accepts_matching_count():
    validate = exact_args(2)
    assert validate(FakeCommand(), ["one", "two"]) is None
    with pytest.raises(ArgumentError):
        validate(FakeCommand(), ["one"])


def test_legacy_args_leaf_takes_any_args():
    cmd = FakeCommand(subcommands=False)
    assert legacy_args(cmd, ["one", "two"]) is None
    assert cmd.asked == []


def test_legacy_args_child_with_subcommands_takes_args():
    cmd = FakeCommand(path="root child", parent=True)
    assert legacy_args(cmd, ["one"]) is None
    assert cmd.asked == []


def test_legacy_args_unknown_command_without_suggestions():
    cmd = FakeCommand()
    with pytest.raises(ArgumentError) as info:
        legacy_args(cmd, ["unknown"])
    assert str(info.value) == 'unknown command "unknown" for "root"'


def test_legacy_args_unknown_command_with_suggestion():
    cmd = FakeCommand(suggestions=["times"])
    with pytest.raises(ArgumentError) as info:
        legacy_args(cmd, ["time"])
    assert str(info.value) == (
        'unknown command "time" for "root"\n\nDid you mean this?\n\ttimes\n'
    )


def test_legacy_args_sets_default_minimum_distance():
    cmd = FakeCommand()
    with pytest.raises(ArgumentError):
        legacy_args(cmd, ["tiems"])
    assert cmd.suggestions_minimum_distance == 2
    assert cmd.asked == [("tiems", 2)]


def test_legacy_args_keeps_configured_minimum_distance():
    cmd = FakeCommand(suggestions_minimum_distance=4)
    with pytest.raises(ArgumentError):
        legacy_args(cmd, ["x"])
    assert cmd.asked == [("x", 4)]


def test_legacy_args_suggestions_disabled():
    cmd = FakeCommand(suggestions=["times"], disable_suggestions=True)
    with pytest.raises(ArgumentError) as info:
        legacy_args(cmd, ["time"])
    assert str(info.value) == 'unknown command "time" for "root"'
    assert cmd.asked == []


def test_legacy_args_root_without_args_is_accepted():
    cmd = FakeCommand()
    assert legacy_args(cmd, []) is None
    assert cmd.asked == []