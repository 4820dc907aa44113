"""
Exception types raised by gitfluff.

Rule violations are never exceptions; they are collected into a Verdict.
These types cover the conditions that stop an invocation before (or instead of)
evaluating a message.
"""

from typing import Optional


class GitfluffError(Exception):
    """Base class for errors that abort a gitfluff invocation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ConfigError(GitfluffError):
    """Unknown preset, invalid regex, contradictory or malformed settings."""
    pass


class MessageSourceError(GitfluffError):
    """The commit message could not be read or written back."""
    pass


class HookInstallError(GitfluffError):
    """Raised when a git hook cannot be installed."""
    pass
