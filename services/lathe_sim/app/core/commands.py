from __future__ import annotations
import math
import re
from typing import Callable, Optional

CommandAction = Callable[..., Optional[str]]


class CommandConfigError(ValueError):
    pass


class Command:
    """
    Named console command.

    The wrapped action only runs when the argument count is within
    [min_arg_count, max_arg_count]; otherwise an error message is returned.
    The action itself returns None on success or an error message.
    """

    def __init__(
        self,
        name: str,
        action: CommandAction,
        *,
        min_arg_count: int = 0,
        max_arg_count: int | None = None,
        description: str | None = None,
    ):
        if max_arg_count is None:
            max_arg_count = min_arg_count
        if min_arg_count > max_arg_count:
            raise CommandConfigError("min_arg_count cannot be greater than max_arg_count")

        self.name = name
        self.min_arg_count = min_arg_count
        self.max_arg_count = max_arg_count
        self.description = description
        self._action = action

    def __call__(self, *args: str) -> str | None:
        if len(args) < self.min_arg_count:
            return f"Not enough argument. Minimum required: {self.min_arg_count}. Got: {len(args)}"
        if len(args) > self.max_arg_count:
            return f"Too many argument. Maximum required: {self.max_arg_count}. Got: {len(args)}"
        return self._action(*args)

    def __repr__(self) -> str:
        return f"Command(name={self.name!r}, args={self.min_arg_count}..{self.max_arg_count})"


MAX_TIMES = 1_000_000

_PREFIXED = re.compile(r"0([xob])([0-9a-z]+)", re.IGNORECASE)
_BASES = {"x": 16, "o": 8, "b": 2}


def parse_count(text: str) -> float | None:
    """
    Parse a repeat count: decimal or exponent notation, or an unsigned
    0x/0o/0b literal. Digit separators, nan and infinities are not numbers.
    """
    s = text.strip()
    if "_" in s:
        return None

    m = _PREFIXED.fullmatch(s)
    if m:
        try:
            return float(int(m.group(2), _BASES[m.group(1).lower()]))
        except ValueError:
            return None

    try:
        value = float(s)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def times_action(op: Callable[[], object]) -> CommandAction:
    """
    Wrap a zero-argument operation as `<cmd> [times]`.

    A fractional count is not rounded: the loop runs while the counter is
    below it, so `2.5` runs three times. Counts above MAX_TIMES are refused.
    """
    def action(times_string: str | None = None) -> str | None:
        if times_string is None:
            op()
            return None

        times = parse_count(times_string)
        if times is None:
            return f"{times_string} is not a number"
        if times < 0:
            return f"{times_string} is negative"
        if times > MAX_TIMES:
            return f"{times_string} is too large. Maximum: {MAX_TIMES}"

        i = 0
        while i < times:
            op()
            i += 1
        return None

    return action
