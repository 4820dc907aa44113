"""
Rule types for commit message linting.

Rules form a closed set of variants, one frozen dataclass per `RuleKind`.
A `RuleSet` holds the fully resolved rules for one evaluation: header pattern,
body policy, flags and title affix are singletons; excludes and cleanups are
ordered sequences.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, Optional, Tuple, Union

from ..errors import ConfigError


class RuleKind(Enum):
    """Kinds of rules a RuleSet can hold."""
    HEADER_PATTERN = "header_pattern"
    EXCLUDE = "exclude"
    CLEANUP = "cleanup"
    BODY_POLICY = "body_policy"
    FLAG = "flag"
    TITLE_AFFIX = "title_affix"


# Code point ranges treated as emoji
EMOJI_RANGES = (
    (0x2300, 0x23FF),    # misc technical: watch, hourglass, media controls
    (0x2600, 0x27BF),    # misc symbols and dingbats: sun, sparkles, check marks
    (0x2B00, 0x2BFF),    # arrows and stars
    (0x1F000, 0x1FAFF),  # pictographs, emoticons, transport, flags
)
EMOJI_CLASS = "[" + "".join(f"{chr(low)}-{chr(high)}" for low, high in EMOJI_RANGES) + "]"
VARIATION_SELECTOR = chr(0xFE0F)
EMOJI_PATTERN = re.compile(EMOJI_CLASS + "|" + VARIATION_SELECTOR)


def compile_pattern(pattern: str, field_name: str) -> re.Pattern:
    """
    Compile a user-supplied regex.

    Args:
        pattern: Regular expression source
        field_name: Where the pattern came from, used in the error message

    Returns:
        Compiled pattern

    Raises:
        ConfigError: If the pattern is not a valid regular expression
    """
    if not isinstance(pattern, str):
        raise ConfigError(f"{field_name} must be a string (got {type(pattern).__name__})")
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"invalid {field_name} regex `{pattern}`: {e}", cause=e)


# $1, ${1}, ${name} and $$ as used in replacement strings of config files
_GROUP_REFERENCE = re.compile(r"\$(?:(?P<dollar>\$)|\{(?P<braced>\w+)\}|(?P<bare>\w+))")


def expand_replacement(template: str, match: "re.Match[str]") -> str:
    """
    Render a replacement template for one match.

    Unknown or unmatched groups expand to an empty string; backslashes are
    literal.
    """
    def substitute(reference: "re.Match[str]") -> str:
        if reference.group("dollar"):
            return "$"
        name = reference.group("braced") or reference.group("bare")
        key: Union[int, str] = int(name) if name.isdigit() else name
        try:
            value = match.group(key)
        except IndexError:
            return ""
        return value or ""

    return _GROUP_REFERENCE.sub(substitute, template)


@dataclass(frozen=True)
class HeaderPattern:
    """The header line must match this regex in full."""

    regex: re.Pattern
    description: str
    kind: ClassVar[RuleKind] = RuleKind.HEADER_PATTERN

    @classmethod
    def build(cls, pattern: str, description: Optional[str] = None,
              field_name: str = "message pattern") -> "HeaderPattern":
        return cls(
            regex=compile_pattern(pattern, field_name),
            description=description or f"Commit message must match pattern `{pattern}`",
        )

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    def matches(self, header: str) -> bool:
        return self.regex.fullmatch(header) is not None


@dataclass(frozen=True)
class Exclude:
    """A regex whose match anywhere in the message is a violation."""

    regex: re.Pattern
    message: Optional[str] = None
    kind: ClassVar[RuleKind] = RuleKind.EXCLUDE

    @classmethod
    def build(cls, pattern: str, message: Optional[str] = None) -> "Exclude":
        return cls(regex=compile_pattern(pattern, "exclude"), message=message or None)

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def description(self) -> str:
        if self.message:
            return self.message
        return f"Commit message matches excluded pattern `{self.pattern}`"


@dataclass(frozen=True)
class Cleanup:
    """An ordered find/replace applied to the raw message text."""

    regex: re.Pattern
    replace: str = ""
    description: Optional[str] = None
    kind: ClassVar[RuleKind] = RuleKind.CLEANUP

    @classmethod
    def build(cls, find: str, replace: str = "", description: Optional[str] = None) -> "Cleanup":
        if not isinstance(replace, str):
            raise ConfigError(f"cleanup replacement for `{find}` must be a string")
        return cls(
            regex=compile_pattern(find, "cleanup"),
            replace=replace,
            description=description or None,
        )

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def summary(self) -> str:
        return self.description or f"Applied cleanup `{self.pattern}`"

    def apply(self, text: str) -> str:
        return self.regex.sub(lambda match: expand_replacement(self.replace, match), text)


@dataclass(frozen=True)
class BodyPolicy:
    """Body requirements. `single_line` and `require_body` exclude each other."""

    single_line: bool = False
    require_body: bool = False
    kind: ClassVar[RuleKind] = RuleKind.BODY_POLICY

    def __post_init__(self):
        if self.single_line and self.require_body:
            raise ConfigError(
                "configuration cannot enable both `single_line` and `require_body` rules"
            )


@dataclass(frozen=True)
class Flags:
    """Character hygiene and rewrite behaviour switches."""

    no_emojis: bool = False
    ascii_only: bool = False
    exit_nonzero_on_rewrite: bool = False
    kind: ClassVar[RuleKind] = RuleKind.FLAG


def _affix_regex(value: Optional[str], field_name: str) -> Optional[re.Pattern]:
    # Values written as /regex/ are patterns, anything else is literal text
    if value is None or len(value) < 2 or not (value.startswith("/") and value.endswith("/")):
        return None
    return compile_pattern(value[1:-1], field_name)


@dataclass(frozen=True)
class TitleAffix:
    """Required text before and/or after the commit title."""

    prefix: Optional[str] = None
    suffix: Optional[str] = None
    separator: str = " "
    prefix_regex: Optional[re.Pattern] = None
    suffix_regex: Optional[re.Pattern] = None
    kind: ClassVar[RuleKind] = RuleKind.TITLE_AFFIX

    @classmethod
    def build(cls, prefix: Optional[str] = None, suffix: Optional[str] = None,
              separator: Optional[str] = None) -> "TitleAffix":
        return cls(
            prefix=prefix or None,
            suffix=suffix or None,
            separator=" " if separator is None else separator,
            prefix_regex=_affix_regex(prefix, "title_prefix"),
            suffix_regex=_affix_regex(suffix, "title_suffix"),
        )

    def has_prefix(self, header: str) -> bool:
        if self.prefix is None:
            return True
        if self.prefix_regex is None:
            return header.startswith(self.prefix + self.separator)

        # Try every separator position so the regex is matched in full
        return any(
            self.prefix_regex.fullmatch(header, 0, position)
            for position in self._separator_positions(header)
        )

    def has_suffix(self, header: str) -> bool:
        if self.suffix is None:
            return True
        if self.suffix_regex is None:
            return header.endswith(self.separator + self.suffix)

        return any(
            self.suffix_regex.fullmatch(header, position + len(self.separator))
            for position in self._separator_positions(header)
        )

    def _separator_positions(self, header: str):
        return [
            index for index in range(len(header) + 1)
            if header.startswith(self.separator, index)
        ]

    @property
    def prefix_description(self) -> str:
        return f"Commit title must start with `{self.prefix}` followed by {self.separator!r}"

    @property
    def suffix_description(self) -> str:
        return f"Commit title must end with {self.separator!r} followed by `{self.suffix}`"


Rule = Union[HeaderPattern, Exclude, Cleanup, BodyPolicy, Flags, TitleAffix]


@dataclass(frozen=True)
class RuleSet:
    """Fully resolved rules for one evaluation."""

    header_pattern: Optional[HeaderPattern] = None
    excludes: Tuple[Exclude, ...] = ()
    cleanups: Tuple[Cleanup, ...] = ()
    body_policy: BodyPolicy = field(default_factory=BodyPolicy)
    flags: Flags = field(default_factory=Flags)
    title_affix: Optional[TitleAffix] = None
    # Conventional Commits footer and separator checks
    enforce_conventional: bool = False

    def rules(self, kind: RuleKind) -> Tuple[Rule, ...]:
        """Ordered rules of one kind."""
        return self.as_mapping()[kind]

    def as_mapping(self) -> Dict[RuleKind, Tuple[Rule, ...]]:
        singletons = {
            RuleKind.HEADER_PATTERN: self.header_pattern,
            RuleKind.BODY_POLICY: self.body_policy,
            RuleKind.FLAG: self.flags,
            RuleKind.TITLE_AFFIX: self.title_affix,
        }
        mapping: Dict[RuleKind, Tuple[Rule, ...]] = {
            kind: (rule,) if rule is not None else () for kind, rule in singletons.items()
        }
        mapping[RuleKind.EXCLUDE] = self.excludes
        mapping[RuleKind.CLEANUP] = self.cleanups
        return mapping
