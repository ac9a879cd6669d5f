import pytest

from services.lathe_sim.app.core.commands import MAX_TIMES, Command, CommandConfigError, times_action

pytestmark = pytest.mark.unit


def _noop(*args):
    return None


def test_min_greater_than_max_is_rejected():
    with pytest.raises(CommandConfigError):
        Command("bad", _noop, min_arg_count=2, max_arg_count=1)


def test_default_bounds_accept_exactly_zero_args():
    cmd = Command("plain", _noop)
    assert (cmd.min_arg_count, cmd.max_arg_count) == (0, 0)
    assert cmd() is None
    assert cmd("x") == "Too many argument. Maximum required: 0. Got: 1"


def test_max_defaults_to_min():
    cmd = Command("two", _noop, min_arg_count=2)
    assert cmd.max_arg_count == 2


def test_arity_errors_are_reported_verbatim():
    calls = []
    cmd = Command("ranged", lambda *a: calls.append(a), min_arg_count=1, max_arg_count=2)

    assert cmd() == "Not enough argument. Minimum required: 1. Got: 0"
    assert cmd("a", "b", "c") == "Too many argument. Maximum required: 2. Got: 3"
    assert calls == []

    assert cmd("a", "b") is None
    assert calls == [("a", "b")]


def test_action_error_is_passed_through():
    cmd = Command("oops", lambda: "went wrong")
    assert cmd() == "went wrong"


class Counter:
    def __init__(self):
        self.n = 0

    def __call__(self):
        self.n += 1
        return self.n


def test_times_without_argument_runs_once():
    c = Counter()
    assert times_action(c)() is None
    assert c.n == 1


@pytest.mark.parametrize(
    "arg, runs",
    [("3", 3), ("0", 0), ("2.5", 3), ("0.1", 1), ("1e1", 10), ("0x3", 3), ("0B11", 3), ("0o7", 7)],
)
def test_times_runs_counted_loop(arg, runs):
    c = Counter()
    assert times_action(c)(arg) is None
    assert c.n == runs


@pytest.mark.parametrize("arg", ["abc", "nan", "inf", "-inf", "Infinity", "3x", "1_0", "0xZZ", "-0x3", "0b2"])
def test_times_rejects_non_numbers(arg):
    c = Counter()
    assert times_action(c)(arg) == f"{arg} is not a number"
    assert c.n == 0


def test_times_rejects_negative():
    c = Counter()
    assert times_action(c)("-1") == "-1 is negative"
    assert c.n == 0


def test_times_refuses_counts_above_limit():
    c = Counter()
    assert times_action(c)("1e12") == f"1e12 is too large. Maximum: {MAX_TIMES}"
    assert c.n == 0


def test_times_accepts_count_at_limit():
    c = Counter()
    assert times_action(c)(str(MAX_TIMES)) is None
    assert c.n == MAX_TIMES
