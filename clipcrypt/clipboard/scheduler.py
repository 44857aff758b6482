"""
Auto-Clear Schedulers
======================

A scheduler runs an :class:`~clipcrypt.core.models.AutoClearJob` after a
delay. Schedulers are fire-and-forget: nothing waits on the job, it
cannot be cancelled, and if it dies early the clipboard simply is not
cleared.

Implementations:
    - :class:`DetachedProcessScheduler` -- production. Spawns
      ``python -m clipcrypt auto-clear`` in its own session so the wipe
      outlives the interactive process. The job (including the text to
      compare against) travels as JSON on stdin, never on argv.
    - :class:`ThreadScheduler` -- in-process daemon timer, for embedding
      ClipCrypt in a long-running program.
"""

from __future__ import annotations

import subprocess
import sys
import threading
from typing import Any, Callable, Optional, Protocol

from clipcrypt.core.models import AutoClearJob


class Scheduler(Protocol):
    def schedule(self, delay: float, job: AutoClearJob) -> None:
        ...


class DetachedProcessScheduler:
    """Runs each job in a detached worker process."""

    def __init__(
        self,
        python: str = sys.executable,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self.python = python
        self._popen = popen

    def command(self, delay: float) -> list[str]:
        return [self.python, "-m", "clipcrypt", "auto-clear", "--delay", f"{delay:g}"]

    def schedule(self, delay: float, job: AutoClearJob) -> None:
        proc = self._popen(
            self.command(delay),
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
            close_fds=True,
        )
        try:
            proc.stdin.write(job.model_dump_json().encode("utf-8"))
        finally:
            proc.stdin.close()


class ThreadScheduler:
    """Runs each job on a daemon :class:`threading.Timer`.

    Daemon timers die with the interpreter, so a job still pending at
    exit never fires.
    """

    def __init__(self, runner: Optional[Callable[[AutoClearJob], Any]] = None) -> None:
        self._runner = runner
        self.timers: list[threading.Timer] = []

    def _run(self, job: AutoClearJob) -> Any:
        if self._runner is not None:
            return self._runner(job)
        from clipcrypt.clipboard.manager import run_auto_clear_job
        return run_auto_clear_job(job)

    def schedule(self, delay: float, job: AutoClearJob) -> None:
        timer = threading.Timer(delay, self._run, args=(job,))
        timer.daemon = True
        timer.start()
        # Only timers still pending are kept.
        self.timers = [t for t in self.timers if t.is_alive()]
        self.timers.append(timer)
