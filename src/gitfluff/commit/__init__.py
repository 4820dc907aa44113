"""
Commit message parsing, cleanup and evaluation.

**Main Components:**
- **message**: Conventional Commits structure (header, body, footers)
- **cleanup**: Ordered regex rewrites of the raw message
- **evaluator**: Rule checks producing a Verdict and exit code
"""

from .message import (
    CommitMessage,
    ConventionalHeader,
    Footer,
    conventional_header,
    parse,
)

from .cleanup import (
    CleanupResult,
    apply,
    pending_cleanups,
    is_idempotent,
)

from .evaluator import (
    MAX_MESSAGE_LENGTH,
    Violation,
    Verdict,
    evaluate,
    lint,
)

__all__ = [
    "CommitMessage",
    "ConventionalHeader",
    "Footer",
    "conventional_header",
    "parse",
    "CleanupResult",
    "apply",
    "pending_cleanups",
    "is_idempotent",
    "MAX_MESSAGE_LENGTH",
    "Violation",
    "Verdict",
    "evaluate",
    "lint",
]
