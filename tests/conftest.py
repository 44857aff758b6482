"""Shared fixtures: fake clipboard programs, schedulers and byte sources."""

from __future__ import annotations

import os
import subprocess
from typing import Any, Optional

import pytest

from shared.config import ClipCryptConfig
from clipcrypt.clipboard.manager import ClipboardLifecycle, run_auto_clear_job
from clipcrypt.clipboard.tools import resolve_tools
from clipcrypt.core.models import AutoClearJob
from clipcrypt.terminal.indicators import KeyboardStateDetector
from clipcrypt.terminal.reader import FdByteReader

READ_FLAGS = ("-o", "--output")
PASTE_PROGRAMS = ("wl-paste", "pbpaste")


class FakeClipboardSystem:
    """Stands in for ``subprocess.run`` and the clipboard programs it runs.

    Programs not in *installed* raise ``FileNotFoundError``; programs in
    *failing* exit with status 1.
    """

    def __init__(
        self,
        installed: tuple[str, ...] = ("wl-copy", "wl-paste", "xclip", "xsel"),
        failing: tuple[str, ...] = (),
        content: str = "",
    ) -> None:
        self.installed = set(installed)
        self.failing = set(failing)
        self.content = content
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    @property
    def programs(self) -> list[str]:
        return [argv[0] for argv, _ in self.calls]

    def __call__(self, argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
        self.calls.append((list(argv), kwargs))
        program = argv[0]
        if program not in self.installed:
            raise FileNotFoundError(program)
        if program in self.failing:
            return subprocess.CompletedProcess(argv, 1)

        if program in PASTE_PROGRAMS or any(flag in argv for flag in READ_FLAGS):
            return subprocess.CompletedProcess(argv, 0, stdout=self.content.encode("utf-8"))
        if "--clear" in argv:
            self.content = ""
        else:
            data: Optional[bytes] = kwargs.get("input")
            self.content = (data or b"").decode("utf-8")
        return subprocess.CompletedProcess(argv, 0)


class FakeScheduler:
    """Records scheduled jobs; :meth:`fire` runs them against a system."""

    def __init__(self) -> None:
        self.jobs: list[tuple[float, AutoClearJob]] = []

    def schedule(self, delay: float, job: AutoClearJob) -> None:
        self.jobs.append((delay, job))

    def fire(self, system: FakeClipboardSystem) -> list[bool]:
        return [run_auto_clear_job(job, runner=system) for _, job in self.jobs]


@pytest.fixture
def clipboard_system() -> FakeClipboardSystem:
    return FakeClipboardSystem()


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def make_lifecycle(fake_scheduler):
    def factory(system: FakeClipboardSystem, tools=("wl-copy", "xclip", "xsel")) -> ClipboardLifecycle:
        return ClipboardLifecycle(
            resolve_tools(tools),
            timeout=1.0,
            scheduler=fake_scheduler,
            runner=system,
        )
    return factory


@pytest.fixture
def config(tmp_path) -> ClipCryptConfig:
    cfg = ClipCryptConfig()
    cfg.editor.caps_lock_glob = str(tmp_path / "no-leds" / "*::capslock" / "brightness")
    return cfg


@pytest.fixture
def caps_led(tmp_path):
    """Create a fake sysfs caps-lock LED and return (glob, path)."""
    led_dir = tmp_path / "leds" / "input3::capslock"
    led_dir.mkdir(parents=True)
    brightness = led_dir / "brightness"
    brightness.write_text("0\n")
    return str(tmp_path / "leds" / "input*::capslock" / "brightness"), brightness


@pytest.fixture
def quiet_detector(tmp_path) -> KeyboardStateDetector:
    return KeyboardStateDetector(str(tmp_path / "absent" / "*"))


@pytest.fixture
def pipe_reader():
    """Return a factory: bytes -> FdByteReader over a pipe holding them."""
    fds: list[int] = []

    def factory(data: bytes, *, close: bool = False, cancel=None) -> FdByteReader:
        read_fd, write_fd = os.pipe()
        fds.append(read_fd)
        os.write(write_fd, data)
        if close:
            os.close(write_fd)
        else:
            fds.append(write_fd)
        return FdByteReader(read_fd, cancel)

    yield factory
    for fd in fds:
        os.close(fd)
