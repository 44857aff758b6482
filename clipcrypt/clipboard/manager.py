"""
Clipboard Lifecycle
====================

Copies a result to the system clipboard through the first external tool
that works, and arranges for it to be wiped again after a delay.

Each tool's failure is independent and non-fatal; only when the whole
ordered list is exhausted does :meth:`ClipboardLifecycle.copy` raise
:class:`~clipcrypt.core.errors.NoClipboardTool`, at which point the
caller still holds the result and prints it instead.

The delayed wipe only clears the clipboard if it still holds the text
that was copied, so a newer manual copy is never clobbered.
"""

from __future__ import annotations

import subprocess
from typing import Optional, Sequence

from shared.config import ClipboardConfig
from shared.logger import CryptLogger

from clipcrypt.clipboard.scheduler import DetachedProcessScheduler, Scheduler
from clipcrypt.clipboard.tools import ClipboardTool, Runner, resolve_tools, run_tool
from clipcrypt.core.errors import ClipboardToolFailed, NoClipboardTool
from clipcrypt.core.models import AutoClearJob


class ClipboardLifecycle:
    """Ordered-fallback clipboard writer/reader with scheduled auto-clear.

    Usage::

        clipboard = ClipboardLifecycle.from_config(config.clipboard)
        tool = clipboard.copy(result)
        clipboard.schedule_auto_clear(result, delay=11)

    Args:
        tools:     Ordered tool definitions to try.
        timeout:   Seconds each tool invocation may take.
        scheduler: Executes :class:`AutoClearJob` after a delay.
        runner:    ``subprocess.run``-compatible callable.
    """

    def __init__(
        self,
        tools: Sequence[ClipboardTool],
        *,
        timeout: float = 4.0,
        scheduler: Optional[Scheduler] = None,
        runner: Runner = subprocess.run,
        logger: Optional[CryptLogger] = None,
    ) -> None:
        self.tools = list(tools)
        self.timeout = timeout
        self.scheduler: Scheduler = scheduler or DetachedProcessScheduler()
        self._runner = runner
        self.logger = logger or CryptLogger("clipboard", console_output=False)

    @classmethod
    def from_config(cls, config: ClipboardConfig, **kwargs) -> ClipboardLifecycle:
        return cls(resolve_tools(config.tools), timeout=config.exec_timeout, **kwargs)

    @classmethod
    def from_job(cls, job: AutoClearJob, **kwargs) -> ClipboardLifecycle:
        return cls(resolve_tools(job.tools), timeout=job.exec_timeout, **kwargs)

    # ------------------------------------------------------------------ #
    #  Copy / clear
    # ------------------------------------------------------------------ #

    def copy(self, text: str) -> str:
        """Put *text* on the clipboard; an empty *text* clears it instead.

        Returns:
            Name of the tool that succeeded.

        Raises:
            NoClipboardTool: Every tool failed or none is configured.
        """
        if text == "":
            return self.clear()
        with self.logger.operation("copy"):
            return self._write_first(text, clearing=False)

    def clear(self) -> str:
        """Empty the clipboard through the first tool that works."""
        with self.logger.operation("clear"):
            return self._write_first("", clearing=True)

    def _write_first(self, text: str, *, clearing: bool) -> str:
        attempts: list[ClipboardToolFailed] = []
        for tool in self.tools:
            if clearing and tool.clear_command:
                argv, input_text = tool.clear_command, None
            else:
                argv, input_text = tool.copy_command, text
            try:
                run_tool(
                    tool.name,
                    argv,
                    input_text=input_text,
                    timeout=self.timeout,
                    runner=self._runner,
                )
            except ClipboardToolFailed as failure:
                self.logger.debug("Clipboard tool failed", tool=tool.name, reason=failure.reason)
                attempts.append(failure)
                continue
            self.logger.info("Clipboard written", tool=tool.name, length=len(text))
            return tool.name

        self.logger.warning("No clipboard tool succeeded", attempts=len(attempts))
        raise NoClipboardTool(attempts)

    # ------------------------------------------------------------------ #
    #  Read
    # ------------------------------------------------------------------ #

    def read(self) -> str:
        """Return the clipboard contents via the first tool that can paste.

        Raises:
            NoClipboardTool: No tool could read the clipboard.
        """
        attempts: list[ClipboardToolFailed] = []
        for tool in self.tools:
            try:
                return run_tool(
                    tool.name,
                    tool.read_command,
                    capture=True,
                    timeout=self.timeout,
                    runner=self._runner,
                )
            except ClipboardToolFailed as failure:
                attempts.append(failure)
        raise NoClipboardTool(attempts)

    # ------------------------------------------------------------------ #
    #  Auto-clear
    # ------------------------------------------------------------------ #

    def clear_if_unchanged(self, original_text: str) -> bool:
        """Clear the clipboard only if it still holds *original_text*.

        Returns:
            ``True`` if the clipboard was cleared.
        """
        current = self.read()
        if current != original_text:
            self.logger.info("Clipboard changed since copy; leaving it alone")
            return False
        self.clear()
        return True

    def schedule_auto_clear(self, original_text: str, delay: float) -> bool:
        """Hand a delayed :meth:`clear_if_unchanged` to the scheduler.

        Once scheduled the job cannot be cancelled and nothing waits on it.

        Returns:
            ``False`` when there is nothing to schedule (empty text or a
            non-positive delay).
        """
        if original_text == "" or delay <= 0:
            return False
        job = AutoClearJob(
            original_text=original_text,
            tools=[tool.name for tool in self.tools],
            exec_timeout=self.timeout,
        )
        self.scheduler.schedule(delay, job)
        self.logger.info("Auto-clear scheduled", delay=delay)
        return True


def run_auto_clear_job(job: AutoClearJob, **kwargs) -> bool:
    """Execute *job* now: the body of every scheduler's delayed action."""
    return ClipboardLifecycle.from_job(job, **kwargs).clear_if_unchanged(job.original_text)
