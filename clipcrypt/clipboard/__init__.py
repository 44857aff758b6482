"""
ClipCrypt Clipboard Module
===========================
"""

from clipcrypt.clipboard.manager import ClipboardLifecycle, run_auto_clear_job
from clipcrypt.clipboard.scheduler import DetachedProcessScheduler, Scheduler, ThreadScheduler
from clipcrypt.clipboard.tools import KNOWN_TOOLS, ClipboardTool, resolve_tools

__all__ = [
    "ClipboardLifecycle",
    "ClipboardTool",
    "DetachedProcessScheduler",
    "KNOWN_TOOLS",
    "Scheduler",
    "ThreadScheduler",
    "resolve_tools",
    "run_auto_clear_job",
]
