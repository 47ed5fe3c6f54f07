"""Service that runs the HTTP application in the background."""

from __future__ import annotations

import errno
import logging
import signal
import threading
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, ClassVar

from werkzeug.serving import make_server

from rootservice.config import Config, ConfigError
from rootservice.service_base import EventType, ServiceBase, ServiceError
from rootservice.tools import exe_dir, read_file
from rootservice.web import create_app

_log = logging.getLogger(__name__)

SERVICE_NAME = "TemplateService"
CONFIG_FILE = Path("Config") / "config.json"
DEFAULT_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 80

CONSOLE_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGBREAK")
    if hasattr(signal, name)
)


def queue_work_item(func: Callable[[], Any]) -> threading.Thread:
    """Run ``func`` on a background thread and return that thread."""
    thread = threading.Thread(target=func, daemon=True)
    try:
        thread.start()
    except RuntimeError as exc:
        raise ServiceError(errno.EAGAIN, f"cannot queue work item: {exc}") from exc
    return thread


class RootService(ServiceBase):
    """A service whose work is serving the HTTP application."""

    instance: ClassVar[RootService | None] = None
    start_delay: float = 1.0
    poll_interval: float = 0.5

    def __init__(
        self,
        name: str | None = None,
        argv: Sequence[str] = (),
        config_dir: str | Path | None = None,
        can_stop: bool = True,
        can_shutdown: bool = True,
        can_pause_continue: bool = False,
    ) -> None:
        super().__init__(name, can_stop, can_shutdown, can_pause_continue)
        self.argv = list(argv)
        self.config_dir = Path(exe_dir() if config_dir is None else config_dir)
        self.url: str | None = None
        self._stop_event = threading.Event()
        RootService.instance = self
        self.config = read_file(self.config_dir / CONFIG_FILE)

    def on_start(self, argv: list[str]) -> None:
        self.write_event_log_entry("Service starting...", EventType.INFORMATION)
        try:
            queue_work_item(self.run_server)
            time.sleep(self.start_delay)
            self.write_event_log_entry("Service started successfully", EventType.INFORMATION)
        except Exception as exc:
            self.write_event_log_entry(f"Failed to start Service: {exc}", EventType.ERROR)
            raise

    def on_start_debug(self, argv: list[str]) -> None:
        self.run_server()

    def on_stop(self) -> None:
        self.write_event_log_entry("Service stopping...", EventType.INFORMATION)
        self.stop_server()
        self.write_event_log_entry("Service stopped", EventType.INFORMATION)

    def on_pause(self) -> None:
        self.write_event_log_entry("Service paused", EventType.INFORMATION)

    def run_server(self) -> None:
        """Serve until ``stop_server`` is called; errors are logged, not raised."""
        self._stop_event.clear()
        try:
            host, port = self.init_server()
            self.write_event_log_entry("Server initialised", EventType.INFORMATION)
            with make_server(host, port, create_app(), threaded=True) as server:
                server.timeout = self.poll_interval
                self.url = f"http://{host}:{server.port}"
                _log.info("%s is running at %s", self.name, self.url)
                try:
                    while not self._stop_event.is_set():
                        server.handle_request()
                finally:
                    self.url = None
        except Exception as exc:
            self.write_event_log_entry(f"Server runtime error: {exc}", EventType.ERROR)

    def init_server(self) -> tuple[str, int]:
        """Read the listener from the config file and install console handlers."""
        document = Config(read_file(self.config_dir / CONFIG_FILE)).document
        listeners = document.get("listeners")
        if not isinstance(listeners, list) or not listeners or not isinstance(listeners[0], dict):
            raise ConfigError("config defines no listeners")
        listener = listeners[0]
        host = listener.get("address", DEFAULT_ADDRESS)
        port = listener.get("port", DEFAULT_PORT)
        if not isinstance(host, str):
            raise ConfigError("listener address must be a string")
        if isinstance(port, bool) or not isinstance(port, int):
            raise ConfigError("listener port must be an integer")

        if threading.current_thread() is threading.main_thread():
            for signum in CONSOLE_SIGNALS:
                signal.signal(signum, self.console_ctrl_handler)
        return host, port

    def stop_server(self) -> None:
        """Ask the running server to quit."""
        self.write_event_log_entry("Server quitting...", EventType.INFORMATION)
        self._stop_event.set()
        self.write_event_log_entry("Server quit", EventType.INFORMATION)

    def console_ctrl_handler(self, signum: int, frame: Any) -> None:
        """Stop the service on an interrupt, break or termination signal."""
        self.stop()


class TemplateService(RootService):
    """The concrete service built on ``RootService``."""

    def run_server(self) -> None:
        """Serve the application with the loaded configuration."""
        super().run_server()