"""
gitfluff - commit message linter.

Parses commit messages following Conventional Commits, applies preset,
project and command line rules, optionally rewrites the message with regex
cleanups, and reports violations with git hook friendly exit codes.
"""

__version__ = "0.3.0"

from .commit import CommitMessage, Verdict, Violation, evaluate, lint, parse
from .rules import CliOverrides, EffectiveConfig, resolve

__all__ = [
    "__version__",
    "CommitMessage",
    "Verdict",
    "Violation",
    "evaluate",
    "lint",
    "parse",
    "CliOverrides",
    "EffectiveConfig",
    "resolve",
]
