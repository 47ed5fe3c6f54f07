"""Service lifecycle base class: start, stop, pause, continue and shutdown."""

from __future__ import annotations

import enum
import itertools
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

_log = logging.getLogger(__name__)

SERVICE_WIN32_OWN_PROCESS = 0x10
ACCEPT_STOP = 0x1
ACCEPT_PAUSE_CONTINUE = 0x2
ACCEPT_SHUTDOWN = 0x4
NO_ERROR = 0


class ServiceState(enum.IntEnum):
    """Current state of a service as reported to the controller."""

    STOPPED = 1
    START_PENDING = 2
    STOP_PENDING = 3
    RUNNING = 4
    CONTINUE_PENDING = 5
    PAUSE_PENDING = 6
    PAUSED = 7


class ControlCode(enum.IntEnum):
    """Control requests a service controller may send."""

    STOP = 1
    PAUSE = 2
    CONTINUE = 3
    INTERROGATE = 4
    SHUTDOWN = 5


class EventType(enum.IntEnum):
    """Kinds of event-log entries."""

    SUCCESS = 0x0
    ERROR = 0x1
    WARNING = 0x2
    INFORMATION = 0x4
    AUDIT_SUCCESS = 0x8
    AUDIT_FAILURE = 0x10


_LEVELS = {
    EventType.SUCCESS: logging.INFO,
    EventType.ERROR: logging.ERROR,
    EventType.WARNING: logging.WARNING,
    EventType.INFORMATION: logging.INFO,
    EventType.AUDIT_SUCCESS: logging.INFO,
    EventType.AUDIT_FAILURE: logging.WARNING,
}


class ServiceError(Exception):
    """A service operation failed with a numeric error code."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"service error 0x{code:08x}")
        self.code = code


@dataclass
class ServiceStatus:
    """Status block of a service."""

    service_type: int = SERVICE_WIN32_OWN_PROCESS
    current_state: ServiceState = ServiceState.START_PENDING
    controls_accepted: int = 0
    exit_code: int = NO_ERROR
    service_specific_exit_code: int = 0
    check_point: int = 0
    wait_hint: int = 0


class ServiceBase:
    """Base class for a service; subclasses override the ``on_*`` hooks."""

    active: ClassVar[ServiceBase | None] = None

    _check_points = itertools.count(1)
    _check_point_lock = threading.Lock()

    def __init__(
        self,
        name: str | None = None,
        can_stop: bool = True,
        can_shutdown: bool = True,
        can_pause_continue: bool = False,
    ) -> None:
        self.name = "" if name is None else name
        accepted = 0
        if can_stop:
            accepted |= ACCEPT_STOP
        if can_shutdown:
            accepted |= ACCEPT_SHUTDOWN
        if can_pause_continue:
            accepted |= ACCEPT_PAUSE_CONTINUE
        self.status = ServiceStatus(controls_accepted=accepted)

    # Lifecycle drivers

    def start(self, argv: Sequence[str] = ()) -> None:
        """Run ``on_start``; on failure log it and mark the service stopped."""
        try:
            self.set_service_status(ServiceState.START_PENDING)
            self.on_start(list(argv))
            self.set_service_status(ServiceState.RUNNING)
        except ServiceError as exc:
            self.write_error_log_entry("Service Start", exc.code)
            self.set_service_status(ServiceState.STOPPED, exc.code)
        except Exception:
            self.write_event_log_entry("Service failed to start.", EventType.ERROR)
            self.set_service_status(ServiceState.STOPPED)

    def stop(self) -> None:
        """Run ``on_stop``; on failure log it and restore the previous state."""
        original = self.status.current_state
        try:
            self.set_service_status(ServiceState.STOP_PENDING)
            self.on_stop()
            self.set_service_status(ServiceState.STOPPED)
        except ServiceError as exc:
            self.write_error_log_entry("Service Stop", exc.code)
            self.set_service_status(original)
        except Exception:
            self.write_event_log_entry("Service failed to stop.", EventType.ERROR)
            self.set_service_status(original)

    def pause(self) -> None:
        """Run ``on_pause``; on failure the service stays running."""
        try:
            self.set_service_status(ServiceState.PAUSE_PENDING)
            self.on_pause()
            self.set_service_status(ServiceState.PAUSED)
        except ServiceError as exc:
            self.write_error_log_entry("Service Pause", exc.code)
            self.set_service_status(ServiceState.RUNNING)
        except Exception:
            self.write_event_log_entry("Service failed to pause.", EventType.ERROR)
            self.set_service_status(ServiceState.RUNNING)

    def resume(self) -> None:
        """Run ``on_continue``; on failure the service stays paused."""
        try:
            self.set_service_status(ServiceState.CONTINUE_PENDING)
            self.on_continue()
            self.set_service_status(ServiceState.RUNNING)
        except ServiceError as exc:
            self.write_error_log_entry("Service Continue", exc.code)
            self.set_service_status(ServiceState.PAUSED)
        except Exception:
            self.write_event_log_entry("Service failed to resume.", EventType.ERROR)
            self.set_service_status(ServiceState.PAUSED)

    def shutdown(self) -> None:
        """Run ``on_shutdown`` and mark the service stopped; failures are logged."""
        try:
            self.on_shutdown()
            self.set_service_status(ServiceState.STOPPED)
        except ServiceError as exc:
            self.write_error_log_entry("Service Shutdown", exc.code)
        except Exception:
            self.write_event_log_entry("Service failed to shut down.", EventType.ERROR)

    def handle_control(self, code: int) -> None:
        """Dispatch a control request; unknown codes are ignored."""
        try:
            control = ControlCode(code)
        except ValueError:
            return
        if control is ControlCode.STOP:
            self.stop()
        elif control is ControlCode.PAUSE:
            self.pause()
        elif control is ControlCode.CONTINUE:
            self.resume()
        elif control is ControlCode.SHUTDOWN:
            self.shutdown()

    # Hooks

    def on_start(self, argv: list[str]) -> None:
        self.write_event_log_entry("Service failed to stop.", EventType.ERROR)

    def on_start_debug(self, argv: list[str]) -> None:
        """Debug start hook; the base service only records the call."""
        _log.debug("%s: debug start with %r", self.name, argv)

    def on_stop(self) -> None:
        """Stop hook; the base service only records the call."""
        _log.debug("%s: stop requested", self.name)

    def on_pause(self) -> None:
        """Pause hook; the base service only records the call."""
        _log.debug("%s: pause requested", self.name)

    def on_continue(self) -> None:
        """Continue hook; the base service only records the call."""
        _log.debug("%s: continue requested", self.name)

    def on_shutdown(self) -> None:
        """Shutdown hook; the base service only records the call."""
        _log.debug("%s: shutdown requested", self.name)

    # Helpers

    def set_service_status(
        self,
        state: ServiceState,
        exit_code: int = NO_ERROR,
        wait_hint: int = 0,
    ) -> None:
        """Record a new state; pending states get a fresh check point."""
        state = ServiceState(state)
        self.status.current_state = state
        self.status.exit_code = exit_code
        self.status.wait_hint = wait_hint
        if state in (ServiceState.RUNNING, ServiceState.STOPPED):
            self.status.check_point = 0
        else:
            with ServiceBase._check_point_lock:
                self.status.check_point = next(ServiceBase._check_points)
        _log.debug("%s: state %s", self.name, state.name)

    def write_event_log_entry(self, message: str, event_type: EventType) -> None:
        """Log ``message`` under the service's name."""
        level = _LEVELS.get(EventType(event_type), logging.INFO)
        _log.log(level, "%s: %s", self.name, message)

    def write_error_log_entry(self, function: str, error: int) -> None:
        """Log that ``function`` failed with ``error``."""
        self.write_event_log_entry(
            f"{function} failed w/err 0x{error:08x}", EventType.ERROR
        )


def run_debug(service: ServiceBase) -> None:
    """Make ``service`` the active one and run its debug start hook."""
    ServiceBase.active = service
    service.on_start_debug([])