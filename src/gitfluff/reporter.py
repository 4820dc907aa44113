"""
Line-oriented diagnostics for the command line.

Output format:

    gitfluff: error: <description> (line N)
    gitfluff: info: applied cleanup: <summary>
"""

import os
import sys
from enum import Enum
from typing import Optional, TextIO

from .commit import Verdict

RED = "\033[31m"
CYAN = "\033[36m"
BOLD = "\033[1m"
RESET = "\033[0m"


class ColorMode(Enum):
    """When to colour diagnostics."""
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


class Reporter:
    """
    Writes diagnostics to a stream (stderr by default).
    """

    def __init__(self, color: ColorMode = ColorMode.AUTO, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr
        self.color = self._use_color(color)

    def _use_color(self, mode: ColorMode) -> bool:
        if mode == ColorMode.ALWAYS:
            return True
        if mode == ColorMode.NEVER or os.getenv("NO_COLOR"):
            return False
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{BOLD}{color}{text}{RESET}"

    def _write(self, label: str, color: str, message: str) -> None:
        self.stream.write(f"gitfluff: {self._paint(label, color)}: {message}\n")

    def error(self, message: str) -> None:
        self._write("error", RED, message)

    def info(self, message: str) -> None:
        self._write("info", CYAN, message)

    def report_verdict(self, verdict: Verdict) -> None:
        """Print cleanups and violations in evaluation order."""
        for summary in verdict.applied_cleanups:
            self.info(f"applied cleanup: {summary}")
        for summary in verdict.pending_cleanups:
            self.info(f"cleanup available: {summary} (run with --write to apply)")
        for violation in verdict.violations:
            self.error(str(violation))
        self.stream.flush()
