"""
Evaluator: checks a parsed commit message against an effective config.

The checks run in a fixed order so that violations are always reported in the
same sequence for the same input:

1. cleanups (rewrite and re-parse when writing is enabled)
2. header presence and header pattern
3. excludes, against the original message
4. body policy
5. title prefix / suffix
6. character hygiene (emoji, non-ASCII)
7. Conventional Commits layout checks
8. exit code
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import EXIT_OK, EXIT_VIOLATION
from ..rules.models import EMOJI_PATTERN
from ..rules.resolver import EffectiveConfig
from . import cleanup as cleanup_engine
from .message import BREAKING_CHANGE_TOKENS, COMMENT_CHAR, CommitMessage, parse

logger = logging.getLogger(__name__)

# Messages above this size are rejected before any user regex runs
MAX_MESSAGE_LENGTH = 262_144

HEADER_EMPTY = "header-empty"
HEADER_PATTERN = "header-pattern"
EXCLUDE = "exclude"
SINGLE_LINE = "single-line"
REQUIRE_BODY = "require-body"
TITLE_PREFIX = "title-prefix"
TITLE_SUFFIX = "title-suffix"
NO_EMOJIS = "no-emojis"
ASCII_ONLY = "ascii-only"
HEADER_SEPARATOR = "header-separator"
BREAKING_CHANGE_TOKEN = "breaking-change-token"
FOOTER_SEPARATOR = "footer-separator"
MESSAGE_TOO_LARGE = "message-too-large"


@dataclass(frozen=True)
class Violation:
    """A broken rule and where in the message it was found."""

    code: str
    description: str
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def location(self) -> Optional[str]:
        if self.line is None:
            return None
        if self.column is None:
            return f"line {self.line}"
        return f"line {self.line}, column {self.column}"

    def __str__(self) -> str:
        if self.location:
            return f"{self.description} ({self.location})"
        return self.description

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True)
class Verdict:
    """Result of evaluating one commit message."""

    violations: Tuple[Violation, ...]
    rewritten: bool
    final_message: str
    exit_code: int
    applied_cleanups: Tuple[str, ...] = ()
    pending_cleanups: Tuple[str, ...] = ()
    message: Optional[CommitMessage] = field(default=None, repr=False)

    @property
    def passed(self) -> bool:
        return self.exit_code == EXIT_OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "exit_code": self.exit_code,
            "rewritten": self.rewritten,
            "final_message": self.final_message,
            "violations": [violation.to_dict() for violation in self.violations],
            "applied_cleanups": list(self.applied_cleanups),
            "pending_cleanups": list(self.pending_cleanups),
        }


def _line_of(message: CommitMessage, offset: int) -> Optional[int]:
    # Map an offset in message.text back to a line number in the raw message
    lines = message.content_lines()
    if not lines:
        return None
    index = message.text.count("\n", 0, offset)
    return lines[min(index, len(lines) - 1)][0]


def _check_header(message: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    if message.is_empty:
        return [Violation(HEADER_EMPTY, "Commit message must have a non-empty header")]

    header_pattern = config.rules.header_pattern
    if header_pattern is not None and not header_pattern.matches(message.header):
        return [Violation(HEADER_PATTERN, header_pattern.description, line=message.header_line)]
    return []


def _check_excludes(original: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    violations = []
    text = original.text
    for exclude in config.rules.excludes:
        match = exclude.regex.search(text)
        if match:
            violations.append(
                Violation(EXCLUDE, exclude.description, line=_line_of(original, match.start()))
            )
    return violations


def _check_body_policy(message: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    policy = config.rules.body_policy
    if message.is_empty:
        return []

    if policy.single_line and (message.body or message.footers):
        return [Violation(
            SINGLE_LINE,
            "Commit message must be a single line",
            line=message.first_line_after_header(),
        )]
    if policy.require_body and not message.body:
        return [Violation(
            REQUIRE_BODY,
            "Commit message must include a body separated from the header by a blank line",
            line=message.header_line,
        )]
    return []


def _check_title_affix(message: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    affix = config.rules.title_affix
    if affix is None or message.is_empty:
        return []

    violations = []
    if not affix.has_prefix(message.header):
        violations.append(
            Violation(TITLE_PREFIX, affix.prefix_description, line=message.header_line)
        )
    if not affix.has_suffix(message.header):
        violations.append(
            Violation(TITLE_SUFFIX, affix.suffix_description, line=message.header_line)
        )
    return violations


def _first_emoji(message: CommitMessage) -> Optional[Tuple[int, int]]:
    for number, line in message.content_lines():
        match = EMOJI_PATTERN.search(line)
        if match:
            return number, match.start() + 1
    return None


def _first_non_ascii(message: CommitMessage) -> Optional[Tuple[int, int]]:
    for number, line in message.content_lines():
        for column, char in enumerate(line, start=1):
            if ord(char) > 127:
                return number, column
    return None


def _check_hygiene(message: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    flags = config.rules.flags
    violations = []

    if flags.no_emojis:
        position = _first_emoji(message)
        if position:
            violations.append(Violation(
                NO_EMOJIS, "Commit message must not contain emoji",
                line=position[0], column=position[1],
            ))

    if flags.ascii_only:
        position = _first_non_ascii(message)
        if position:
            violations.append(Violation(
                ASCII_ONLY, "Commit message must contain only ASCII characters",
                line=position[0], column=position[1],
            ))

    return violations


def _is_miscased_breaking_token(token: str) -> bool:
    return (
        token not in BREAKING_CHANGE_TOKENS
        and token.upper().replace("-", " ") == "BREAKING CHANGE"
    )


def _check_conventional_layout(message: CommitMessage, config: EffectiveConfig) -> List[Violation]:
    if not config.rules.enforce_conventional or message.is_empty:
        return []

    violations = []
    if not message.header_separated:
        violations.append(Violation(
            HEADER_SEPARATOR,
            "Commit header must be followed by a blank line",
            line=message.first_line_after_header(),
        ))

    for footer in message.footers:
        if _is_miscased_breaking_token(footer.token):
            violations.append(Violation(
                BREAKING_CHANGE_TOKEN,
                f"Footer token `{footer.token}` must be written as `BREAKING CHANGE` "
                "or `BREAKING-CHANGE`",
                line=footer.line,
            ))

    if message.footers and message.footer_gap > 1:
        violations.append(Violation(
            FOOTER_SEPARATOR,
            "Footers must be separated from the body by exactly one blank line",
            line=message.footers[0].line,
        ))

    return violations


def evaluate(
    message: CommitMessage,
    raw: str,
    config: EffectiveConfig,
    comment_char: Optional[str] = COMMENT_CHAR,
) -> Verdict:
    """
    Evaluate a parsed commit message.

    Args:
        message: Result of `parse(raw, comment_char)`
        raw: Original message text
        config: Effective configuration for this run
        comment_char: Comment character used when re-parsing a rewritten
            message; None when comment lines are part of the message

    Returns:
        Verdict with every violation found, the (possibly rewritten) message and
        the exit code
    """
    if len(raw) > MAX_MESSAGE_LENGTH:
        violation = Violation(
            MESSAGE_TOO_LARGE,
            f"Commit message is larger than {MAX_MESSAGE_LENGTH} characters",
        )
        return Verdict(
            violations=(violation,),
            rewritten=False,
            final_message=raw,
            exit_code=EXIT_VIOLATION,
            message=message,
        )

    rules = config.rules
    current = message
    final_message = raw
    rewritten = False
    applied: Tuple[str, ...] = ()
    pending: Tuple[str, ...] = ()

    if rules.cleanups:
        result = cleanup_engine.apply(raw, rules.cleanups)
        if config.write and result.changed:
            final_message = result.text
            current = parse(result.text, comment_char)
            rewritten = True
            applied = result.applied
        elif result.changed:
            pending = result.applied

    violations: List[Violation] = []
    violations.extend(_check_header(current, config))
    violations.extend(_check_excludes(message, config))
    violations.extend(_check_body_policy(current, config))
    violations.extend(_check_title_affix(current, config))
    violations.extend(_check_hygiene(current, config))
    violations.extend(_check_conventional_layout(current, config))

    if violations or (rewritten and config.exit_nonzero_on_rewrite):
        exit_code = EXIT_VIOLATION
    else:
        exit_code = EXIT_OK

    logger.debug(
        f"Evaluated message: {len(violations)} violation(s), rewritten={rewritten}, "
        f"exit_code={exit_code}"
    )

    return Verdict(
        violations=tuple(violations),
        rewritten=rewritten,
        final_message=final_message,
        exit_code=exit_code,
        applied_cleanups=applied,
        pending_cleanups=pending,
        message=current,
    )


def lint(raw: str, config: EffectiveConfig, comment_char: Optional[str] = COMMENT_CHAR) -> Verdict:
    """
    Parse and evaluate a raw commit message.

    Git strips `comment_char` lines only from messages it opened in an editor
    or read from a file, so callers pass None for literal messages.
    """
    return evaluate(parse(raw, comment_char), raw, config, comment_char)
