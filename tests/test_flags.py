import io

import pytest

from coral.flags import (
    Flag,
    FlagError,
    FlagSet,
    ParseErrorsAllowlist,
    command_line,
    reset_command_line,
)


def _upper(_fs, name):
    return name.upper()


def _identity(_fs, name):
    return name


def test_long_flags_and_dash():
    fs = FlagSet("c")
    fs.int("intf", -1)
    fs.string("sf", "")
    fs.parse(["--intf=7", "--sf=abc", "one", "--", "two"])
    assert fs.get("intf") == 7
    assert fs.get("sf") == "abc"
    assert fs.args() == ["one", "two"]
    assert fs.args_len_at_dash() == 1


def test_short_flags():
    fs = FlagSet("c")
    fs.int("intf", -1, shorthand="i")
    fs.string("sf", "", shorthand="s")
    fs.parse(["-i", "7", "-sabc", "one", "two"])
    assert fs.get("intf") == 7
    assert fs.get("sf") == "abc"
    assert fs.args() == ["one", "two"]
    assert fs.args_len_at_dash() == -1


def test_short_equals_and_combined_bool():
    fs = FlagSet("c")
    fs.int("int", -1, shorthand="i")
    fs.bool("bool", shorthand="b")
    fs.parse(["-bi=10", "rest"])
    assert fs.get_bool("bool") is True
    assert fs.get("int") == 10
    assert fs.args() == ["rest"]


def test_invalid_int_input():
    fs = FlagSet("root")
    fs.int("intf", -1, shorthand="i")
    with pytest.raises(FlagError) as info:
        fs.parse(["-iabc"])
    assert "invalid syntax" in str(info.value)
    assert str(info.value).startswith('invalid argument "abc" for "-i, --intf" flag')


def test_unknown_shorthand_message():
    fs = FlagSet("root")
    with pytest.raises(FlagError, match="unknown shorthand flag: 'v' in -v"):
        fs.parse(["-v"])


def test_unknown_long_message():
    fs = FlagSet("root")
    with pytest.raises(FlagError, match="unknown flag: --version"):
        fs.parse(["--version"])


def test_flag_needs_argument():
    fs = FlagSet("root")
    fs.string("notversion", "", shorthand="v")
    with pytest.raises(FlagError, match="flag needs an argument: 'v' in -v"):
        fs.parse(["-v"])
    with pytest.raises(FlagError, match="flag needs an argument: --notversion"):
        fs.parse(["--notversion"])


def test_bad_flag_syntax():
    fs = FlagSet("root")
    with pytest.raises(FlagError, match="bad flag syntax: ---x"):
        fs.parse(["---x"])


def test_empty_inputs_are_positional():
    fs = FlagSet("c")
    fs.int("intf", -1, shorthand="i")
    fs.parse(["", "-i7", ""])
    assert fs.get("intf") == 7
    assert fs.args() == ["", ""]


def test_unknown_flags_allowlisted():
    fs = FlagSet("c")
    fs.bool("boola", shorthand="a")
    fs.parse_errors_allowlist = ParseErrorsAllowlist(unknown_flags=True)
    fs.parse(["c", "-a", "--unknown", "flag"])
    assert fs.args() == ["c"]
    assert fs.get_bool("boola") is True


def test_unknown_flags_not_allowlisted():
    fs = FlagSet("c")
    fs.bool("boola", shorthand="a")
    with pytest.raises(FlagError, match="unknown flag: --unknown"):
        fs.parse(["c", "-a", "--unknown", "flag"])


def test_deprecated_flag_writes_warning():
    fs = FlagSet("c")
    fs.bool("deprecated", usage="deprecated flag", shorthand="d")
    fs.mark_deprecated("deprecated", "This flag is deprecated")
    out = io.StringIO()
    fs.output = out
    fs.parse(["c", "-d"])
    assert out.getvalue() == "Flag --deprecated has been deprecated, This flag is deprecated\n"
    assert fs.has_available_flags() is False


def test_mark_deprecated_errors():
    fs = FlagSet("c")
    fs.bool("x")
    with pytest.raises(FlagError, match='flag "missing" does not exist'):
        fs.mark_deprecated("missing", "gone")
    with pytest.raises(FlagError, match="must be set"):
        fs.mark_deprecated("x", "")


def test_normalize_upper_shares_lookup():
    fs = FlagSet("c")
    fs.bool("flagname", True)
    fs.set_normalize_func(_upper)
    assert fs.lookup("flagname") is fs.lookup("FLAGNAME")
    assert fs.lookup("flagname").name == "FLAGNAME"


def test_normalize_consistent_names():
    fs = FlagSet("c")
    fs.bool("flagname", True)
    fs.set_normalize_func(_upper)
    fs.set_normalize_func(_identity)
    assert fs.lookup("flagname") is None
    assert fs.lookup("FLAGNAME").name == "FLAGNAME"


@pytest.mark.parametrize(
    "sort_flags, expected",
    [(False, ["C", "B", "A", "D"]), (True, ["A", "B", "C", "D"])],
)
def test_iteration_order(sort_flags, expected):
    fs = FlagSet("c")
    fs.sort_flags = sort_flags
    for name in ["C", "B", "A", "D"]:
        fs.bool(name)
    assert [f.name for f in fs] == expected


def test_add_flag_set_shares_and_skips_existing():
    a = FlagSet("a")
    b = FlagSet("b")
    shared = a.bool("persist", shorthand="p")
    own = b.int("persist", 3)
    a.string("extra", "x")
    b.add_flag_set(a)
    assert b.lookup("persist") is own
    assert b.lookup("extra") is a.lookup("extra")
    assert "extra" in b
    assert shared is a.lookup("persist")


def test_redefinition_raises():
    fs = FlagSet("c")
    fs.bool("x")
    with pytest.raises(ValueError):
        fs.int("x")


def test_shorthand_conflict_raises():
    fs = FlagSet("c")
    fs.bool("one", shorthand="o")
    with pytest.raises(ValueError, match="already used"):
        fs.bool("other", shorthand="o")


def test_shorthand_lookup():
    fs = FlagSet("c")
    flag = fs.string("notversion", "", shorthand="v")
    assert fs.shorthand_lookup("v") is flag
    assert fs.shorthand_lookup("") is None
    with pytest.raises(ValueError):
        fs.shorthand_lookup("vv")


def test_flag_usages_single():
    fs = FlagSet("root")
    fs.bool("help", usage="help for root", shorthand="h")
    assert fs.flag_usages() == "  -h, --help   help for root\n"


def test_get_errors():
    fs = FlagSet("c")
    fs.int("num", 1)
    with pytest.raises(FlagError, match="flag accessed but not defined: nope"):
        fs.get("nope")
    with pytest.raises(FlagError, match="trying to get bool value of flag of type int"):
        fs.get_bool("num")


def test_set_marks_changed_and_formats():
    fs = FlagSet("c")
    flag = fs.bool("bool", shorthand="b")
    assert flag.changed is False
    fs.set("bool", "true")
    assert flag.changed is True
    assert str(flag) == "true"
    assert flag.default_text == "false"
    with pytest.raises(FlagError) as info:
        fs.set("bool", "x")
    assert str(info.value) == 'invalid argument "x" for "-b, --bool" flag: parsing "x": invalid syntax'
    with pytest.raises(FlagError, match="no such flag -zzz"):
        fs.set("zzz", "1")


@pytest.mark.parametrize(
    "text, expected", [("0x10", 16), ("010", 8), ("-5", -5), ("0b11", 3), ("42", 42)]
)
def test_int_bases(text, expected):
    fs = FlagSet("c")
    fs.int("n", 0)
    fs.parse([f"--n={text}"])
    assert fs.get("n") == expected


def test_int_out_of_range():
    fs = FlagSet("c")
    fs.int("n", 0)
    with pytest.raises(FlagError, match="value out of range"):
        fs.parse(["--n=9223372036854775808"])


def test_flag_default_text_and_kind():
    flag = Flag(name="intf", kind="int", default=-1)
    assert flag.default_text == "-1"
    assert flag.value == -1
    with pytest.raises(ValueError):
        Flag(name="f", kind="float", default=1.0)


def test_command_line_reset():
    command_line().bool("boolflag")
    assert command_line().lookup("boolflag") is not None
    fresh = reset_command_line()
    assert fresh is command_line()
    assert fresh.lookup("boolflag") is None