"""
Cleanup engine: ordered regex find/replace over raw commit message text.

Each cleanup sees the output of the one before it, so the configured order is
significant. The built-in AI attribution cleanups are written so that a second
pass over already-cleaned text changes nothing.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from ..rules.models import Cleanup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    """Outcome of running a cleanup list over one message."""

    text: str
    changed: bool
    applied: Tuple[str, ...] = ()


def apply(raw: str, cleanups: Sequence[Cleanup]) -> CleanupResult:
    """
    Apply cleanups in order.

    Args:
        raw: Commit message text
        cleanups: Ordered cleanup rules

    Returns:
        CleanupResult with the final text, whether any cleanup changed its
        input, and the summaries of the cleanups that did
    """
    text = raw
    applied = []

    for cleanup in cleanups:
        updated = cleanup.apply(text)
        if updated != text:
            logger.debug(f"Cleanup changed message: {cleanup.summary}")
            applied.append(cleanup.summary)
            text = updated

    return CleanupResult(text=text, changed=bool(applied), applied=tuple(applied))


def pending_cleanups(raw: str, cleanups: Sequence[Cleanup]) -> Tuple[str, ...]:
    """Summaries of the cleanups that would change `raw`, without keeping the result."""
    return apply(raw, cleanups).applied


def is_idempotent(raw: str, cleanups: Sequence[Cleanup]) -> bool:
    """True when a second pass over the cleaned text changes nothing."""
    once = apply(raw, cleanups)
    return apply(once.text, cleanups).text == once.text
