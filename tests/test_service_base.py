import logging

import pytest

from rootservice.service_base import (
    ACCEPT_PAUSE_CONTINUE,
    ACCEPT_SHUTDOWN,
    ACCEPT_STOP,
    ControlCode,
    EventType,
    ServiceBase,
    ServiceError,
    ServiceState,
    run_debug,
)


class Recorder(ServiceBase):
    def __init__(self, *args, fail=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []
        self.fail = fail or {}

    def _hook(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise self.fail[name]

    def on_start(self, argv):
        self._hook("start", argv)

    def on_start_debug(self, argv):
        self._hook("start_debug", argv)

    def on_stop(self):
        self._hook("stop")

    def on_pause(self):
        self._hook("pause")

    def on_continue(self):
        self._hook("continue")

    def on_shutdown(self):
        self._hook("shutdown")


def messages(caplog):
    return [r.getMessage() for r in caplog.records]


def test_initial_status_and_accepted_controls():
    svc = ServiceBase("svc", can_pause_continue=True)
    assert svc.status.current_state == ServiceState.START_PENDING
    assert svc.status.controls_accepted == ACCEPT_STOP | ACCEPT_SHUTDOWN | ACCEPT_PAUSE_CONTINUE
    assert svc.status.check_point == 0
    assert svc.status.exit_code == 0


def test_controls_accepted_respects_flags():
    svc = ServiceBase("svc", can_stop=False, can_shutdown=False)
    assert svc.status.controls_accepted == 0


def test_missing_name_becomes_empty():
    assert ServiceBase(None).name == ""


def test_start_success_runs_hook_and_is_running():
    svc = Recorder("svc")
    ServiceBase.start(svc, ["a", "b"])
    assert svc.calls == [("start", ["a", "b"])]
    assert svc.status.current_state == ServiceState.RUNNING
    assert svc.status.check_point == 0


def test_start_service_error_stops_with_exit_code(caplog):
    svc = Recorder("svc", fail={"start": ServiceError(5)})
    with caplog.at_level(logging.DEBUG):
        svc.start()
    assert svc.status.current_state == ServiceState.STOPPED
    assert svc.status.exit_code == 5
    assert "svc: Service Start failed w/err 0x00000005" in messages(caplog)


def test_start_other_error_stops(caplog):
    svc = Recorder("svc", fail={"start": RuntimeError("boom")})
    with caplog.at_level(logging.DEBUG):
        ServiceBase.start(svc)
    assert svc.status.current_state == ServiceState.STOPPED
    assert svc.status.exit_code == 0
    assert "svc: Service failed to start." in messages(caplog)


def test_stop_success():
    svc = Recorder("svc")
    ServiceBase.start(svc)
    ServiceBase.stop(svc)
    assert svc.calls[-1] == ("stop",)
    assert svc.status.current_state == ServiceState.STOPPED


def test_stop_failure_restores_previous_state(caplog):
    svc = Recorder("svc", fail={"stop": ServiceError(7)})
    svc.start()
    with caplog.at_level(logging.DEBUG):
        svc.stop()
    assert svc.status.current_state == ServiceState.RUNNING
    assert "svc: Service Stop failed w/err 0x00000007" in messages(caplog)


def test_stop_generic_failure_restores_previous_state(caplog):
    svc = Recorder("svc", fail={"stop": ValueError()})
    ServiceBase.start(svc)
    with caplog.at_level(logging.DEBUG):
        ServiceBase.stop(svc)
    assert svc.status.current_state == ServiceState.RUNNING
    assert "svc: Service failed to stop." in messages(caplog)


def test_pause_and_resume():
    svc = Recorder("svc", can_pause_continue=True)
    ServiceBase.start(svc)
    ServiceBase.pause(svc)
    assert svc.status.current_state == ServiceState.PAUSED
    ServiceBase.resume(svc)
    assert svc.status.current_state == ServiceState.RUNNING
    assert [c[0] for c in svc.calls] == ["start", "pause", "continue"]


def test_pause_failure_keeps_running():
    svc = Recorder("svc", fail={"pause": RuntimeError()})
    ServiceBase.start(svc)
    ServiceBase.pause(svc)
    assert svc.status.current_state == ServiceState.RUNNING


def test_resume_failure_stays_paused(caplog):
    svc = Recorder("svc", fail={"continue": ServiceError(2)})
    svc.start()
    svc.pause()
    with caplog.at_level(logging.DEBUG):
        svc.resume()
    assert svc.status.current_state == ServiceState.PAUSED
    assert "svc: Service Continue failed w/err 0x00000002" in messages(caplog)


def test_shutdown_stops_and_failure_keeps_state():
    ok = Recorder("ok")
    ServiceBase.start(ok)
    ServiceBase.shutdown(ok)
    assert ok.status.current_state == ServiceState.STOPPED

    bad = Recorder("bad", fail={"shutdown": RuntimeError()})
    ServiceBase.start(bad)
    ServiceBase.shutdown(bad)
    assert bad.status.current_state == ServiceState.RUNNING


@pytest.mark.parametrize(
    "code, hook",
    [
        (ControlCode.STOP, "stop"),
        (ControlCode.PAUSE, "pause"),
        (ControlCode.CONTINUE, "continue"),
        (ControlCode.SHUTDOWN, "shutdown"),
    ],
)
def test_handle_control_dispatches(code, hook):
    svc = Recorder("svc")
    svc.handle_control(int(code))
    assert svc.calls == [(hook,)]


def test_handle_control_ignores_interrogate_and_unknown():
    svc = Recorder("svc")
    ServiceBase.handle_control(svc, ControlCode.INTERROGATE)
    ServiceBase.handle_control(svc, 200)
    assert svc.calls == []
    assert svc.status.current_state == ServiceState.START_PENDING


def test_pending_states_get_increasing_check_points():
    svc = ServiceBase("svc")
    svc.set_service_status(ServiceState.START_PENDING)
    first = svc.status.check_point
    svc.set_service_status(ServiceState.STOP_PENDING, wait_hint=300)
    second = svc.status.check_point
    assert first > 0
    assert second > first
    assert svc.status.wait_hint == 300
    svc.set_service_status(ServiceState.RUNNING)
    assert svc.status.check_point == 0


def test_write_event_log_entry_levels(caplog):
    svc = ServiceBase("svc")
    with caplog.at_level(logging.DEBUG):
        svc.write_event_log_entry("hello", EventType.INFORMATION)
        svc.write_event_log_entry("bad", EventType.ERROR)
    levels = {r.getMessage(): r.levelno for r in caplog.records}
    assert levels["svc: hello"] == logging.INFO
    assert levels["svc: bad"] == logging.ERROR


def test_base_on_start_logs_error(caplog):
    svc = ServiceBase("svc")
    with caplog.at_level(logging.DEBUG):
        svc.start()
    assert svc.status.current_state == ServiceState.RUNNING
    assert "svc: Service failed to stop." in messages(caplog)


def test_run_debug_sets_active_and_calls_hook():
    svc = Recorder("svc")
    run_debug(svc)
    assert ServiceBase.active is svc
    assert svc.calls == [("start_debug", [])]


def test_service_error_carries_code():
    err = ServiceError(12)
    assert err.code == 12
    assert "0x0000000c" in str(err)