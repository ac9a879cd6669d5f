from __future__ import annotations
import logging
import re
from typing import Awaitable, Callable, Iterable, Optional

from prompt_toolkit import PromptSession

from .commands import Command, times_action
from .lathe import Lathe

out = logging.getLogger("lathe_sim.console")
log = logging.getLogger(__name__)

_WS = re.compile(r"\s+")

ReadLine = Callable[[], Awaitable[Optional[str]]]


def prompt_reader(on_interrupt: Callable[[], None], message: str = "> ") -> ReadLine:
    """
    read_line backed by a prompt_toolkit session.

    End of input (Ctrl-D) reads as None. Ctrl-C calls on_interrupt and also
    reads as None.
    """
    session: PromptSession | None = None

    async def read_line() -> str | None:
        nonlocal session
        if session is None:
            session = PromptSession()
        try:
            return await session.prompt_async(message)
        except EOFError:
            return None
        except KeyboardInterrupt:
            on_interrupt()
            return None

    return read_line


def parse_line(line: str) -> tuple[str, list[str]]:
    """Split an input line into (lower-cased command name, arguments)."""
    parts = _WS.split(line.strip())
    return parts[0].lower(), parts[1:]


class Console:
    """
    Command dispatcher for one lathe.

    Commands are matched by exact name in registration order; the first match
    wins, so a later command with the same name is never reached.
    """

    def __init__(self, lathe: Lathe, commands: Iterable[Command] | None = None):
        self.lathe = lathe
        self.running = True
        self.commands: list[Command] = list(commands) if commands is not None else default_commands(self)

        seen: set[str] = set()
        for command in self.commands:
            if command.name in seen:
                log.warning("command %r is registered more than once; only the first is reachable", command.name)
            seen.add(command.name)

    def stop(self) -> None:
        self.running = False

    def find(self, name: str) -> Command | None:
        for command in self.commands:
            if command.name == name:
                return command
        return None

    def dispatch(self, line: str) -> str | None:
        """
        Run one input line. Returns the error reported to the operator, if any.
        """
        name, args = parse_line(line)
        command = self.find(name)

        if command is None:
            out.error("Invalid command")
            out.info("Type help to see command list")
            return "Invalid command"

        result = command(*args)
        if result is not None:
            out.error(result)
        return result

    async def run(self, read_line: ReadLine | None = None) -> None:
        """
        Dispatch lines until stopped. Without read_line, lines come from an
        interactive prompt where Ctrl-C stops the console.
        """
        if read_line is None:
            read_line = prompt_reader(self.stop)
        while self.running:
            line = await read_line()
            if line is None:
                log.debug("input closed")
                self.stop()
                break
            self.dispatch(line)

    def print_help(self) -> None:
        for command in self.commands:
            if command.description is not None:
                out.info(f"{command.name}\t{command.description}")
            else:
                out.info(command.name)

    def print_status(self) -> None:
        out.info(f"State:    {self.lathe.status.value}")
        out.info(f"Produced: {self.lathe.produced}")
        out.info(f"Rejected: {self.lathe.rejected}")


def default_commands(console: Console) -> list[Command]:
    lathe = console.lathe

    def enable() -> None:
        lathe.enabled = True

    def disable() -> None:
        lathe.enabled = False

    def toggle() -> None:
        lathe.enabled = not lathe.enabled

    def fail() -> None:
        lathe.failure = True

    return [
        Command("produce", times_action(lathe.produce), max_arg_count=1,
                description="Produces given number of times or once"),
        Command("reject", times_action(lathe.reject), max_arg_count=1,
                description="Rejects given number of times or once"),
        Command("help", console.print_help, description="Prints help"),
        Command("stop", console.stop, description="Stops the server"),
        Command("status", console.print_status, description="Shows current status of lathe"),
        Command("disable", disable, description="Disables the lathe"),
        Command("enable", enable, description="Enables the lathe"),
        Command("toggle", toggle, description="Toggles the lathe"),
        Command("reset", lathe.reset, description="Resets produce and reject counters"),
        Command("fail", fail, description="Sets lathe to failure mode"),
    ]
