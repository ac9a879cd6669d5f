from __future__ import annotations
import asyncio
import contextlib
import logging
import signal
import sys

import uvicorn
from prompt_toolkit.patch_stdout import patch_stdout

from services.lathe_sim.app.api import create_app
from services.lathe_sim.app.core.clock import LoopScheduler
from services.lathe_sim.app.core.console import Console, ReadLine, prompt_reader
from services.lathe_sim.app.core.lathe import Lathe
from services.lathe_sim.app.logging_setup import configure_logging, redirect_console_logging
from services.lathe_sim.app.settings import SimSettings, get_settings

log = logging.getLogger("lathe_sim")

_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the simulator."""

    @contextlib.contextmanager
    def capture_signals(self):
        yield

    def install_signal_handlers(self) -> None:
        return None


class Simulator:
    """
    Runs the lathe, its HTTP telemetry surface and the operator console on
    one event loop. read_line replaces the interactive prompt when given.
    """

    def __init__(self, settings: SimSettings, *, read_line: ReadLine | None = None):
        self.settings = settings
        self.lathe: Lathe | None = None
        self.console: Console | None = None
        self.server: _Server | None = None
        self._read_line = read_line
        self._console_task: asyncio.Task | None = None
        self._stopping = False

    def request_shutdown(self) -> None:
        # a second signal while shutting down is ignored
        if self._stopping:
            return
        self._stopping = True
        if self.console is not None:
            self.console.stop()
        task = self._console_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SIGNALS:
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, self.request_shutdown)
        try:
            await self._run()
        finally:
            for sig in _SIGNALS:
                with contextlib.suppress(NotImplementedError):
                    loop.remove_signal_handler(sig)
            if self.lathe is not None:
                self.lathe.enabled = False

    async def _run(self) -> None:
        s = self.settings

        self.lathe = Lathe(
            s.start_enabled,
            scheduler=LoopScheduler(asyncio.get_running_loop()),
            production_interval_s=s.production_interval_s,
            reject_chance=s.reject_chance,
        )
        app = create_app(self.lathe, sampling_interval_ms=s.sampling_interval_ms)

        log.info("Starting server...")
        self.server = _Server(uvicorn.Config(app, host=s.http_host, port=s.http_port, log_level="warning"))
        server_task = asyncio.create_task(self._serve())
        while not self.server.started:
            if server_task.done():
                server_task.result()
                raise RuntimeError("server exited during startup")
            await asyncio.sleep(0.05)
        log.info("Started")

        log.info(f"Listening at http://{s.http_host}:{s.http_port}")
        log.info("Press Ctrl-C or type stop to quit")

        if not self._stopping:
            self.console = Console(self.lathe)
            self._console_task = asyncio.create_task(self._run_console())
            with contextlib.suppress(asyncio.CancelledError):
                await self._console_task

        await self.shutdown(server_task)

    async def _serve(self) -> None:
        assert self.server is not None
        try:
            await self.server.serve()
        except SystemExit as exc:
            # uvicorn exits the process when it cannot bind
            raise RuntimeError(f"server exited with status {exc.code}") from exc

    async def _run_console(self) -> None:
        assert self.console is not None
        if self._read_line is not None:
            await self.console.run(self._read_line)
            return

        with patch_stdout(raw=True):
            previous = redirect_console_logging(sys.stdout)
            try:
                await self.console.run(prompt_reader(self.request_shutdown))
            finally:
                if previous is not None:
                    redirect_console_logging(previous)

    async def shutdown(self, server_task: asyncio.Task) -> None:
        self._stopping = True
        if self.lathe is not None:
            self.lathe.enabled = False

        log.info("Shutting server down...")
        if self.server is not None:
            self.server.should_exit = True
        await server_task
        log.info("Shut down")


def main(read_line: ReadLine | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        asyncio.run(Simulator(settings, read_line=read_line).run())
    except Exception:
        log.exception("Simulator failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
