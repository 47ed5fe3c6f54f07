"""Command-line entry point of the service."""

from __future__ import annotations

import os
import signal
import sys
import threading
import time
from collections.abc import Sequence

from rootservice.root_service import CONSOLE_SIGNALS, SERVICE_NAME, TemplateService
from rootservice.service_base import ServiceBase, ServiceState, run_debug

_POLL_SECONDS = 0.5


def service_name_from_path(path: str) -> str:
    """Program file name without its directory and extension."""
    base = path[max(path.rfind("/"), path.rfind("\\")) + 1:]
    return os.path.splitext(base)[0]


def _run(service: TemplateService, args: Sequence[str]) -> int:
    ServiceBase.active = service
    if threading.current_thread() is threading.main_thread():
        for signum in CONSOLE_SIGNALS:
            signal.signal(signum, service.console_ctrl_handler)
    service.start(args)
    if service.status.current_state is ServiceState.STOPPED:
        print(f"Failed to run service: {service.name}", file=sys.stderr)
        return 1
    while service.status.current_state is not ServiceState.STOPPED:
        time.sleep(_POLL_SECONDS)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the service, or handle a ``-option`` / ``/option`` command."""
    program = sys.argv[0] if sys.argv else ""
    args = list(sys.argv[1:] if argv is None else argv)
    name = service_name_from_path(program) or SERVICE_NAME
    service = TemplateService(name, args)

    if args and args[0][:1] in ("-", "/"):
        command = args[0][1:].lower()
        if command in ("install", "remove"):
            print(
                f"{command}: service registration is not available on this system",
                file=sys.stderr,
            )
            return 1
        if command == "debug":
            run_debug(service)
        return 0
    return _run(service, args)


if __name__ == "__main__":
    sys.exit(main())