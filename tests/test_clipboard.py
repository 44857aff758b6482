"""Tests for clipboard tools, the lifecycle manager and auto-clear scheduling."""

from __future__ import annotations

import io
import json
import subprocess
import sys
import threading

import pytest

from conftest import FakeClipboardSystem
from shared.config import ClipboardConfig
from clipcrypt.clipboard.manager import ClipboardLifecycle, run_auto_clear_job
from clipcrypt.clipboard.scheduler import DetachedProcessScheduler, ThreadScheduler
from clipcrypt.clipboard.tools import KNOWN_TOOLS, resolve_tools, run_tool
from clipcrypt.core.errors import ClipboardToolFailed, NoClipboardTool
from clipcrypt.core.models import AutoClearJob


class TestTools:
    def test_resolve_preserves_order(self):
        assert [t.name for t in resolve_tools(["xsel", "wl-copy"])] == ["xsel", "wl-copy"]

    def test_resolve_rejects_unknown(self):
        with pytest.raises(ValueError, match="clippy"):
            resolve_tools(["xclip", "clippy"])

    def test_copy_discards_stdout(self, clipboard_system):
        run_tool("xclip", KNOWN_TOOLS["xclip"].copy_command, input_text="hi",
                 timeout=1, runner=clipboard_system)
        _, kwargs = clipboard_system.calls[0]
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["input"] == b"hi"
        assert kwargs["timeout"] == 1

    @pytest.mark.parametrize(
        "exc, reason",
        [
            (FileNotFoundError("xsel"), "not installed"),
            (subprocess.TimeoutExpired(["xsel"], 4), "timed out"),
            (BrokenPipeError("pipe"), "pipe"),
        ],
    )
    def test_failures_become_tool_failed(self, exc, reason):
        def runner(argv, **kwargs):
            raise exc

        with pytest.raises(ClipboardToolFailed, match=reason) as excinfo:
            run_tool("xsel", ["xsel"], input_text="x", timeout=4, runner=runner)
        assert excinfo.value.tool == "xsel"

    def test_nonzero_exit_is_failure(self):
        system = FakeClipboardSystem(failing=("xclip",))
        with pytest.raises(ClipboardToolFailed, match="exit status 1"):
            run_tool("xclip", ["xclip"], input_text="x", timeout=1, runner=system)


class TestCopy:
    def test_first_working_tool_wins(self, make_lifecycle):
        system = FakeClipboardSystem(installed=("xclip", "xsel"))
        lifecycle = make_lifecycle(system)

        assert lifecycle.copy("secret result") == "xclip"
        assert system.programs == ["wl-copy", "xclip"]
        assert system.content == "secret result"

    def test_falls_back_after_failure(self, make_lifecycle):
        system = FakeClipboardSystem(installed=("xclip", "xsel"), failing=("xclip",))
        assert make_lifecycle(system).copy("value") == "xsel"
        assert system.programs == ["wl-copy", "xclip", "xsel"]

    def test_all_failing_raises_with_attempts(self, make_lifecycle):
        system = FakeClipboardSystem(installed=("xsel",), failing=("xsel",))
        with pytest.raises(NoClipboardTool) as excinfo:
            make_lifecycle(system).copy("value")

        assert [a.tool for a in excinfo.value.attempts] == ["wl-copy", "xclip", "xsel"]
        assert "not installed" in excinfo.value.attempts[0].reason
        assert excinfo.value.attempts[2].reason == "exit status 1"

    def test_no_tools_configured(self, make_lifecycle):
        with pytest.raises(NoClipboardTool, match="no tools configured"):
            make_lifecycle(FakeClipboardSystem(), tools=()).copy("value")

    def test_empty_text_clears(self, make_lifecycle):
        system = FakeClipboardSystem(installed=("xclip",), content="old")
        make_lifecycle(system).copy("")
        assert system.content == ""
        argv, kwargs = system.calls[-1]
        assert argv[0] == "xclip" and kwargs["input"] == b""

    def test_wayland_clear_uses_clear_flag(self, make_lifecycle, clipboard_system):
        clipboard_system.content = "old"
        assert make_lifecycle(clipboard_system).clear() == "wl-copy"
        assert clipboard_system.calls[-1][0] == ["wl-copy", "--clear"]
        assert clipboard_system.content == ""


class TestRead:
    def test_reads_via_paste_command(self, make_lifecycle, clipboard_system):
        clipboard_system.content = "on the clipboard"
        assert make_lifecycle(clipboard_system).read() == "on the clipboard"
        assert clipboard_system.calls[0][0] == ["wl-paste", "--no-newline"]

    def test_read_falls_back(self, make_lifecycle):
        system = FakeClipboardSystem(installed=("xsel",), content="abc")
        assert make_lifecycle(system).read() == "abc"
        assert system.calls[-1][0] == ["xsel", "--clipboard", "--output"]

    def test_read_without_tools(self, make_lifecycle):
        with pytest.raises(NoClipboardTool):
            make_lifecycle(FakeClipboardSystem(installed=())).read()


class TestAutoClear:
    def test_clears_when_unchanged(self, make_lifecycle, clipboard_system):
        lifecycle = make_lifecycle(clipboard_system)
        lifecycle.copy("token")
        assert lifecycle.clear_if_unchanged("token") is True
        assert clipboard_system.content == ""

    def test_leaves_newer_copy_alone(self, make_lifecycle, clipboard_system):
        lifecycle = make_lifecycle(clipboard_system)
        lifecycle.copy("token")
        clipboard_system.content = "user copied something else"

        assert lifecycle.clear_if_unchanged("token") is False
        assert clipboard_system.content == "user copied something else"

    def test_schedule_hands_job_to_scheduler(self, make_lifecycle, clipboard_system, fake_scheduler):
        lifecycle = make_lifecycle(clipboard_system)
        lifecycle.copy("token")

        assert lifecycle.schedule_auto_clear("token", 11) is True
        delay, job = fake_scheduler.jobs[0]
        assert delay == 11
        assert job.original_text == "token"
        assert job.tools == ["wl-copy", "xclip", "xsel"]

        assert fake_scheduler.fire(clipboard_system) == [True]
        assert clipboard_system.content == ""

    @pytest.mark.parametrize("text, delay", [("", 11), ("token", 0), ("token", -1)])
    def test_nothing_to_schedule(self, make_lifecycle, clipboard_system, fake_scheduler, text, delay):
        assert make_lifecycle(clipboard_system).schedule_auto_clear(text, delay) is False
        assert fake_scheduler.jobs == []

    def test_run_job_uses_job_tools(self):
        system = FakeClipboardSystem(installed=("xsel",), content="token")
        job = AutoClearJob(original_text="token", tools=["xsel"], exec_timeout=2)
        assert run_auto_clear_job(job, runner=system) is True
        assert system.programs == ["xsel", "xsel"]

    def test_from_config(self):
        lifecycle = ClipboardLifecycle.from_config(
            ClipboardConfig(tools=["xsel"], exec_timeout=2.5)
        )
        assert [t.name for t in lifecycle.tools] == ["xsel"]
        assert lifecycle.timeout == 2.5
        assert isinstance(lifecycle.scheduler, DetachedProcessScheduler)


class _StdinPipe(io.BytesIO):
    was_closed = False

    def close(self):
        self.was_closed = True


class _FakePopen:
    instances: list[_FakePopen] = []

    def __init__(self, argv, **kwargs):
        self.argv = argv
        self.kwargs = kwargs
        self.stdin = _StdinPipe()
        self.waited = False
        _FakePopen.instances.append(self)

    def wait(self):
        self.waited = True


class TestSchedulers:
    def test_detached_process_gets_job_on_stdin(self):
        _FakePopen.instances.clear()
        scheduler = DetachedProcessScheduler(python="/usr/bin/python3", popen=_FakePopen)
        job = AutoClearJob(original_text="top secret", tools=["xclip"])

        scheduler.schedule(11, job)

        proc = _FakePopen.instances[0]
        assert proc.argv == ["/usr/bin/python3", "-m", "clipcrypt", "auto-clear", "--delay", "11"]
        assert "top secret" not in " ".join(proc.argv)
        assert proc.kwargs["start_new_session"] is True
        assert proc.stdin.was_closed and not proc.waited
        assert json.loads(proc.stdin.getvalue())["original_text"] == "top secret"

    def test_default_interpreter(self):
        assert DetachedProcessScheduler().command(2.5)[0] == sys.executable

    def test_thread_scheduler_fires(self):
        fired = threading.Event()
        seen: list[AutoClearJob] = []

        def runner(job):
            seen.append(job)
            fired.set()

        scheduler = ThreadScheduler(runner)
        job = AutoClearJob(original_text="x")
        scheduler.schedule(0.01, job)

        assert fired.wait(2.0)
        assert seen == [job]
        assert scheduler.timers[0].daemon

    def test_thread_scheduler_forgets_finished_timers(self):
        scheduler = ThreadScheduler(lambda job: None)
        scheduler.schedule(0.0, AutoClearJob(original_text="first"))
        scheduler.timers[0].join(2.0)

        scheduler.schedule(60.0, AutoClearJob(original_text="second"))
        try:
            assert len(scheduler.timers) == 1
            assert scheduler.timers[0].is_alive()
        finally:
            scheduler.timers[0].cancel()
