"""
Commit message model for gitfluff.

Parses raw commit message text into header, body paragraphs and footers
following the Conventional Commits specification
(https://www.conventionalcommits.org/en/v1.0.0/).

Standard layout:

    type(scope)!: description
    <blank line>
    body paragraphs...
    <blank line>
    Token: value
    Token #value
    BREAKING CHANGE: value

Footers are only recognised as the trailing paragraph of the message, and only
when every line of that paragraph is trailer-shaped or an indented
continuation of the trailer above it.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

COMMENT_CHAR = "#"
BREAKING_CHANGE_TOKENS = ("BREAKING CHANGE", "BREAKING-CHANGE")

# Token: value | Token #value. The spaced BREAKING CHANGE token is accepted in
# any case so a wrongly-cased one is still seen as a footer and can be reported.
FOOTER_PATTERN = re.compile(
    r"^(?P<token>(?i:BREAKING CHANGE)|[A-Za-z0-9][A-Za-z0-9-]*)"
    r"(?P<separator>: | #)(?P<value>.*)$"
)

# Pattern: ^(type)(\(scope\))?(!)?: (description)$
CONVENTIONAL_HEADER_PATTERN = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^()]*)\))?(?P<breaking>!)?: (?P<description>.+)$"
)

NumberedLine = Tuple[int, str]


def scissors_line(comment_char: str = COMMENT_CHAR) -> str:
    """Line below which git discards everything (`git commit -v`)."""
    return f"{comment_char} {'-' * 24} >8 {'-' * 24}"


@dataclass(frozen=True)
class ConventionalHeader:
    """Parts of a Conventional Commits header."""

    type: str
    scope: Optional[str]
    breaking: bool
    description: str


@dataclass(frozen=True)
class Footer:
    """A single trailer from the footer block."""

    token: str
    value: str
    separator: str = ": "
    line: Optional[int] = None

    @property
    def is_breaking_change(self) -> bool:
        """True only for the literal `BREAKING CHANGE` / `BREAKING-CHANGE` tokens."""
        return self.token in BREAKING_CHANGE_TOKENS

    def format(self) -> str:
        """Format as trailer text, indenting continuation lines."""
        value = self.value.replace("\n", "\n  ")
        return f"{self.token}{self.separator}{value}"


@dataclass(frozen=True)
class CommitMessage:
    """Parsed structure of one commit message. Built by `parse()`."""

    raw: str
    header: str = ""
    body: Tuple[str, ...] = ()
    footers: Tuple[Footer, ...] = ()
    header_line: Optional[int] = None
    header_separated: bool = True
    footer_gap: int = 0
    numbered_lines: Tuple[NumberedLine, ...] = ()

    @property
    def is_empty(self) -> bool:
        """No discernible header (empty or whitespace-only message)."""
        return not self.header

    @property
    def breaking(self) -> bool:
        """Breaking change signalled by `!` in the header or a footer."""
        parts = conventional_header(self.header)
        if parts and parts.breaking:
            return True
        return any(footer.is_breaking_change for footer in self.footers)

    @property
    def text(self) -> str:
        """Message text without git comment lines."""
        return "\n".join(line for _, line in self.numbered_lines)

    def content_lines(self) -> Tuple[NumberedLine, ...]:
        """(line number, text) pairs for every non-comment line."""
        return self.numbered_lines

    def first_line_after_header(self) -> Optional[int]:
        """Line number of the first non-blank line below the header."""
        if self.header_line is None:
            return None
        for number, line in self.numbered_lines:
            if number > self.header_line and line.strip():
                return number
        return None

    def footer(self, token: str) -> Optional[Footer]:
        """First footer whose token matches, ignoring case."""
        wanted = token.lower()
        for footer in self.footers:
            if footer.token.lower() == wanted:
                return footer
        return None


def conventional_header(header: str) -> Optional[ConventionalHeader]:
    """
    Split a Conventional Commits header into its parts.

    Args:
        header: First line of a commit message

    Returns:
        ConventionalHeader or None if the header is not conventional
    """
    match = CONVENTIONAL_HEADER_PATTERN.match(header.strip())
    if not match:
        return None

    return ConventionalHeader(
        type=match.group("type"),
        scope=match.group("scope"),
        breaking=bool(match.group("breaking")),
        description=match.group("description"),
    )


def _is_blank(line: NumberedLine) -> bool:
    return not line[1].strip()


def _is_continuation(text: str) -> bool:
    return text[:1] in (" ", "\t") and bool(text.strip())


def _split_footers(rest: List[NumberedLine]) -> Tuple[Tuple[Footer, ...], int, int]:
    """
    Find the footer block at the end of the lines below the header.

    Scans upward from the last line. Trailer-shaped lines and indented
    continuations extend the block; a blank line ends the paragraph, and any
    other line means the last paragraph is prose.

    Returns:
        (footers, index of the first footer line in `rest`, blank lines above it)
    """
    index = len(rest)
    first_trailer = None

    while index > 0:
        text = rest[index - 1][1]
        if not text.strip():
            break
        if FOOTER_PATTERN.match(text):
            first_trailer = index - 1
        elif not _is_continuation(text):
            return (), len(rest), 0
        index -= 1

    # The paragraph must open with a trailer, not a dangling continuation
    if first_trailer is None or first_trailer != index:
        return (), len(rest), 0

    gap = 0
    cursor = index
    while cursor > 0 and _is_blank(rest[cursor - 1]):
        gap += 1
        cursor -= 1

    footers: List[Footer] = []
    for number, text in rest[index:]:
        match = FOOTER_PATTERN.match(text)
        if match:
            footers.append(Footer(
                token=match.group("token"),
                value=match.group("value").strip(),
                separator=match.group("separator"),
                line=number,
            ))
        else:
            previous = footers[-1]
            footers[-1] = Footer(
                token=previous.token,
                value=f"{previous.value}\n{text.strip()}",
                separator=previous.separator,
                line=previous.line,
            )

    return tuple(footers), index, gap


def _paragraphs(lines: List[NumberedLine]) -> Tuple[str, ...]:
    paragraphs = []
    current: List[str] = []
    for _, text in lines:
        if text.strip():
            current.append(text)
        elif current:
            paragraphs.append("\n".join(current))
            current = []
    if current:
        paragraphs.append("\n".join(current))
    return tuple(paragraphs)


def parse(raw: str, comment_char: Optional[str] = COMMENT_CHAR) -> CommitMessage:
    """
    Parse a commit message into header, body and footers.

    Git comment lines and everything below the scissors line are ignored, as
    git drops them when it records the commit. Pass `comment_char=None` to keep
    every line.

    Args:
        raw: Full commit message text

    Returns:
        CommitMessage (with an empty header when there is no content)
    """
    normalized = raw.replace("\r\n", "\n").replace("\r", "\n")
    scissors = scissors_line(comment_char) if comment_char else None

    numbered: List[NumberedLine] = []
    for number, line in enumerate(normalized.split("\n"), start=1):
        if comment_char:
            if line.rstrip() == scissors:
                break
            if line.startswith(comment_char):
                continue
        numbered.append((number, line))

    start = 0
    while start < len(numbered) and _is_blank(numbered[start]):
        start += 1
    end = len(numbered)
    while end > start and _is_blank(numbered[end - 1]):
        end -= 1

    content = numbered[start:end]
    if not content:
        return CommitMessage(raw=raw, numbered_lines=tuple(numbered))

    header_number, header_text = content[0]
    rest = content[1:]
    header_separated = not rest or _is_blank(rest[0])

    footers, footer_start, footer_gap = _split_footers(rest)
    body = _paragraphs(rest[:footer_start])

    return CommitMessage(
        raw=raw,
        header=header_text.strip(),
        body=body,
        footers=footers,
        header_line=header_number,
        header_separated=header_separated,
        footer_gap=footer_gap,
        numbered_lines=tuple(numbered),
    )
