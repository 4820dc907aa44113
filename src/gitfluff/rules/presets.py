"""
Preset catalog.

Each preset is a named, immutable RuleSet template. Presets are looked up by
their exact name or one of their aliases; an unknown name is a ConfigError.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..errors import ConfigError
from .models import EMOJI_CLASS, VARIATION_SELECTOR, BodyPolicy, Cleanup, HeaderPattern, RuleSet

DEFAULT_PRESET = "conventional"

# Same shape as commitlint's default headerPattern, with a non-empty type
CONVENTIONAL_PATTERN = (
    r"^(?P<type>\w+)(\((?P<scope>.*)\))?(?P<breaking>!)?: (?P<description>.+)$"
)

SIMPLE_PATTERN = r"^[A-Za-z][^\n]+$"

# :shortcode: or a unicode emoji, optional (scope), then the summary
GITMOJI_PATTERN = (
    r"^(?::[a-z0-9_+-]+:|" + EMOJI_CLASS + VARIATION_SELECTOR + r"?)"
    r"(?:\s?\((?P<scope>[^()]+)\))?:? (?P<description>.+)$"
)

AI_NAMES = r"(?:Claude|Anthropic|ChatGPT|GPT-\d|OpenAI|Copilot|Gemini|Codex|Aider|Cursor)"
AI_ASSISTANTS = r"\b" + AI_NAMES

# Indented lines that wrap onto the line before them
CONTINUATION = r"(?:\n[ \t]+(?=\S)[^\n]*)"

# (find, replace, description); run in order, later rules tidy up after earlier ones
AI_CLEANUP_RULES: Tuple[Tuple[str, str, str], ...] = (
    (
        r"(?im)^[ \t]*\U0001f916[^\n]*(?:generated|" + AI_NAMES + r")[^\n]*"
        + CONTINUATION + r"*(?:\n|\Z)",
        "",
        "Remove AI generation banner",
    ),
    (
        r"(?im)^[ \t]*Generated (?:with|by|using) \[[^\]\n]*" + AI_ASSISTANTS
        + r"[^\]\n]*\]\([^)\n]*\)[^\n]*" + CONTINUATION + r"*(?:\n|\Z)",
        "",
        "Remove Markdown AI generation banner",
    ),
    (
        r"(?im)^[ \t]*Generated (?:with|by|using) " + AI_ASSISTANTS + r"[^\n]*"
        + CONTINUATION + r"*(?:\n|\Z)",
        "",
        "Remove plain AI generation banner",
    ),
    (
        r"(?im)^[ \t]*Co-Authored-By:"
        r"(?:[^\n]*" + AI_ASSISTANTS + r"[^\n]*" + CONTINUATION + r"*"
        r"|[^\n]*" + CONTINUATION + r"*?\n[ \t]+(?=\S)[^\n]*" + AI_ASSISTANTS + r"[^\n]*"
        + CONTINUATION + r"*)"
        r"(?:\n|\Z)",
        "",
        "Drop Co-Authored-By lines referencing AI assistants",
    ),
    (
        r"\A(?:[ \t]*\n)+",
        "",
        "Trim leading blank lines introduced by cleanup",
    ),
    (
        r"\n(?:[ \t]*\n){2,}",
        "\n\n",
        "Collapse excessive blank lines",
    ),
    (
        r"\n(?:[ \t]*\n)+[ \t]*\Z",
        "\n",
        "Trim trailing blank lines introduced by cleanup",
    ),
)


@dataclass(frozen=True)
class Preset:
    """A named rule set template."""

    name: str
    summary: str
    rules: RuleSet
    aliases: Tuple[str, ...] = ()


def _conventional_header(description: str) -> HeaderPattern:
    return HeaderPattern.build(CONVENTIONAL_PATTERN, description)


def _ai_cleanups() -> Tuple[Cleanup, ...]:
    return tuple(
        Cleanup.build(find, replace, description)
        for find, replace, description in AI_CLEANUP_RULES
    )


_PRESETS: Tuple[Preset, ...] = (
    Preset(
        name="conventional",
        summary="Conventional Commits header, any body",
        aliases=("default", "angular", "commitlint", "commitizen"),
        rules=RuleSet(
            header_pattern=_conventional_header(
                "Commit header must follow Conventional Commits: type(scope)!: description"
            ),
            enforce_conventional=True,
        ),
    ),
    Preset(
        name="conventional-body",
        summary="Conventional Commits header with a required body",
        aliases=("conventional_detailed", "conventional-with-body"),
        rules=RuleSet(
            header_pattern=_conventional_header(
                "Conventional Commits header with a required body section"
            ),
            body_policy=BodyPolicy(require_body=True),
            enforce_conventional=True,
        ),
    ),
    Preset(
        name="simple",
        summary="Single-line summary starting with a letter",
        aliases=("simple-single-line",),
        rules=RuleSet(
            header_pattern=HeaderPattern.build(
                SIMPLE_PATTERN, "Single-line summary starting with a letter"
            ),
            body_policy=BodyPolicy(single_line=True),
        ),
    ),
    Preset(
        name="no-ai",
        summary="Conventional Commits header; strips AI attribution banners and co-author trailers",
        aliases=("noai", "no-ai-attribution"),
        rules=RuleSet(
            header_pattern=_conventional_header(
                "Conventional Commits header (AI signatures are cleaned automatically)"
            ),
            cleanups=_ai_cleanups(),
            enforce_conventional=True,
        ),
    ),
    Preset(
        name="gitmoji",
        summary="Gitmoji header: :emoji: or unicode emoji followed by a summary",
        rules=RuleSet(
            header_pattern=HeaderPattern.build(
                GITMOJI_PATTERN,
                "Commit header must start with a gitmoji (:sparkles: or ✨) followed by a summary",
            ),
        ),
    ),
)

_BY_NAME: Dict[str, Preset] = {}
for _preset in _PRESETS:
    for _name in (_preset.name,) + _preset.aliases:
        _BY_NAME[_name] = _preset


def get_preset(name: str) -> Preset:
    """
    Look up a preset by exact name or alias.

    Raises:
        ConfigError: If no preset has that name
    """
    if not isinstance(name, str) or name not in _BY_NAME:
        known = ", ".join(preset.name for preset in _PRESETS)
        raise ConfigError(f"unknown preset `{name}` (available: {known})")
    return _BY_NAME[name]


def list_presets() -> List[Preset]:
    """All presets in catalog order."""
    return list(_PRESETS)
