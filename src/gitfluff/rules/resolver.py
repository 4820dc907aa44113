"""
Config resolution: preset defaults, then project file, then CLI flags.

Singleton settings are folded field by field, so a file that sets
`require_body` keeps it when the command line only adds `--no-emojis`.
Excludes and cleanups accumulate in layer order (preset, file, CLI).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import ConfigError
from .models import BodyPolicy, Cleanup, Exclude, Flags, HeaderPattern, RuleSet, TitleAffix
from .presets import DEFAULT_PRESET, Preset, get_preset

logger = logging.getLogger(__name__)

PRESET_LAYER = "preset"
FILE_LAYER = "file"
CLI_LAYER = "cli"

BOOLEAN_RULE_KEYS = (
    "single_line",
    "require_body",
    "no_emojis",
    "ascii_only",
    "exit_nonzero_on_rewrite",
)
STRING_RULE_KEYS = ("title_prefix", "title_suffix", "title_prefix_separator")
KNOWN_RULE_KEYS = set(BOOLEAN_RULE_KEYS + STRING_RULE_KEYS) | {"message", "excludes", "cleanup"}
KNOWN_TOP_LEVEL_KEYS = {"preset", "write", "rules"}


@dataclass(frozen=True)
class CliOverrides:
    """Settings given on the command line (or in a lint service request)."""

    msg_pattern: Optional[str] = None
    msg_pattern_description: Optional[str] = None
    excludes: Tuple[Tuple[str, Optional[str]], ...] = ()
    cleanups: Tuple[Tuple[str, str, Optional[str]], ...] = ()
    write: Optional[bool] = None
    single_line: Optional[bool] = None
    require_body: Optional[bool] = None
    no_emojis: Optional[bool] = None
    ascii_only: Optional[bool] = None
    exit_nonzero_on_rewrite: Optional[bool] = None
    title_prefix: Optional[str] = None
    title_suffix: Optional[str] = None
    title_prefix_separator: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], write: Optional[bool] = None) -> "CliOverrides":
        """
        Build overrides from a JSON-style mapping.

        `excludes` entries are `{"pattern", "message"?}` tables and `cleanups`
        entries are `{"find", "replace"?, "description"?}` tables, as in the
        project file.
        """
        if not isinstance(data, Mapping):
            raise ConfigError("overrides must be a table")

        values: Dict[str, Any] = {}
        for key in ("msg_pattern", "msg_pattern_description") + STRING_RULE_KEYS:
            values[key] = _optional_str(data, key, "overrides")
        for key in BOOLEAN_RULE_KEYS:
            values[key] = _optional_bool(data, key, "overrides")

        values["excludes"] = tuple(
            (entry["pattern"], entry.get("message"))
            for entry in _rule_tables(data, "excludes", ("pattern",), "overrides")
        )
        values["cleanups"] = tuple(
            (entry["find"], entry.get("replace", ""), entry.get("description"))
            for entry in _rule_tables(data, "cleanups", ("find",), "overrides")
        )
        if write is not None and not isinstance(write, bool):
            raise ConfigError("`write` must be a boolean")
        return cls(write=write, **values)


@dataclass(frozen=True)
class EffectiveConfig:
    """Merged rules and global flags for one invocation."""

    rules: RuleSet
    preset_name: str
    write: bool = False
    sources: Tuple[Tuple[str, str], ...] = field(default=(), compare=False)

    @property
    def exit_nonzero_on_rewrite(self) -> bool:
        return self.rules.flags.exit_nonzero_on_rewrite

    def source_of(self, setting: str) -> Optional[str]:
        """Layer (preset, file or cli) that decided a singleton setting."""
        return dict(self.sources).get(setting)


@dataclass
class _Layer:
    name: str
    settings: Dict[str, Any] = field(default_factory=dict)
    excludes: List[Exclude] = field(default_factory=list)
    cleanups: List[Cleanup] = field(default_factory=list)


def _optional_bool(table: Mapping[str, Any], key: str, path: str) -> Optional[bool]:
    value = table.get(key)
    if value is not None and not isinstance(value, bool):
        raise ConfigError(f"`{path}.{key}` must be a boolean (got {value!r})")
    return value


def _optional_str(table: Mapping[str, Any], key: str, path: str) -> Optional[str]:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"`{path}.{key}` must be a string (got {value!r})")
    return value


def _rule_tables(table: Mapping[str, Any], key: str, required: Tuple[str, ...],
                 path: str) -> List[Mapping[str, Any]]:
    entries = table.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ConfigError(f"`{path}.{key}` must be an array of tables")

    tables = []
    for index, entry in enumerate(entries):
        location = f"{path}.{key}[{index}]"
        if not isinstance(entry, Mapping):
            raise ConfigError(f"`{location}` must be a table")
        for name in required:
            if not isinstance(entry.get(name), str):
                raise ConfigError(f"`{location}.{name}` is required and must be a string")
        for name, value in entry.items():
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"`{location}.{name}` must be a string (got {value!r})")
        tables.append(entry)
    return tables


def _preset_layer(preset: Preset) -> _Layer:
    rules = preset.rules
    layer = _Layer(name=PRESET_LAYER)
    layer.settings = {
        "single_line": rules.body_policy.single_line,
        "require_body": rules.body_policy.require_body,
        "no_emojis": rules.flags.no_emojis,
        "ascii_only": rules.flags.ascii_only,
        "exit_nonzero_on_rewrite": rules.flags.exit_nonzero_on_rewrite,
        "write": False,
    }
    if rules.header_pattern is not None:
        layer.settings["header_regex"] = rules.header_pattern.regex
        layer.settings["header_description"] = rules.header_pattern.description
    if rules.title_affix is not None:
        layer.settings["title_prefix"] = rules.title_affix.prefix
        layer.settings["title_suffix"] = rules.title_affix.suffix
        layer.settings["title_prefix_separator"] = rules.title_affix.separator
    layer.excludes = list(rules.excludes)
    layer.cleanups = list(rules.cleanups)
    return layer


def _file_layer(config: Mapping[str, Any]) -> _Layer:
    layer = _Layer(name=FILE_LAYER)

    unknown = set(config) - KNOWN_TOP_LEVEL_KEYS
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

    layer.settings["write"] = _optional_bool(config, "write", "config")

    rules = config.get("rules", {})
    if not isinstance(rules, Mapping):
        raise ConfigError("`rules` must be a table")

    unknown = set(rules) - KNOWN_RULE_KEYS
    if unknown:
        logger.warning(f"Ignoring unknown rule keys: {', '.join(sorted(unknown))}")

    for key in BOOLEAN_RULE_KEYS:
        layer.settings[key] = _optional_bool(rules, key, "rules")
    for key in STRING_RULE_KEYS:
        layer.settings[key] = _optional_str(rules, key, "rules")

    message = rules.get("message")
    if message is not None:
        if not isinstance(message, Mapping) or not isinstance(message.get("pattern"), str):
            raise ConfigError("`rules.message.pattern` is required and must be a string")
        description = _optional_str(message, "description", "rules.message")
        header = HeaderPattern.build(message["pattern"], description, "rules.message.pattern")
        layer.settings["header_regex"] = header.regex
        layer.settings["header_description"] = header.description

    for entry in _rule_tables(rules, "excludes", ("pattern",), "rules"):
        layer.excludes.append(Exclude.build(entry["pattern"], entry.get("message")))

    for entry in _rule_tables(rules, "cleanup", ("find",), "rules"):
        layer.cleanups.append(
            Cleanup.build(entry["find"], entry.get("replace", ""), entry.get("description"))
        )

    return layer


def _cli_layer(overrides: CliOverrides) -> _Layer:
    layer = _Layer(name=CLI_LAYER)

    for key in BOOLEAN_RULE_KEYS + STRING_RULE_KEYS + ("write",):
        layer.settings[key] = getattr(overrides, key)

    if overrides.msg_pattern is not None:
        header = HeaderPattern.build(
            overrides.msg_pattern, overrides.msg_pattern_description, "--msg-pattern"
        )
        layer.settings["header_regex"] = header.regex
        layer.settings["header_description"] = header.description
    elif overrides.msg_pattern_description is not None:
        layer.settings["header_description"] = overrides.msg_pattern_description

    for pattern, message in overrides.excludes:
        layer.excludes.append(Exclude.build(pattern, message))
    for find, replace, description in overrides.cleanups:
        layer.cleanups.append(Cleanup.build(find, replace, description))

    return layer


def _resolve_body_policy(resolved: Dict[str, Tuple[Any, str]]) -> BodyPolicy:
    single_line, single_source = resolved.get("single_line", (False, PRESET_LAYER))
    require_body, require_source = resolved.get("require_body", (False, PRESET_LAYER))

    if single_line and require_body:
        # A preset default gives way to an explicit setting above it
        if single_source == PRESET_LAYER:
            single_line = False
        elif require_source == PRESET_LAYER:
            require_body = False
        else:
            raise ConfigError(
                "configuration cannot enable both `single_line` and `require_body` rules "
                f"(single_line from {single_source}, require_body from {require_source})"
            )

    return BodyPolicy(single_line=bool(single_line), require_body=bool(require_body))


def fold(layers: List[_Layer], enforce_conventional: bool) -> Tuple[RuleSet, bool, Tuple[Tuple[str, str], ...]]:
    """
    Fold layers, lowest precedence first, into one RuleSet.

    Returns:
        (rule set, write flag, (setting, winning layer) pairs)
    """
    resolved: Dict[str, Tuple[Any, str]] = {}
    excludes: List[Exclude] = []
    cleanups: List[Cleanup] = []

    for layer in layers:
        for key, value in layer.settings.items():
            if value is not None:
                resolved[key] = (value, layer.name)
        excludes.extend(layer.excludes)
        cleanups.extend(layer.cleanups)

    def value_of(key: str, default: Any = None) -> Any:
        return resolved[key][0] if key in resolved else default

    header_pattern = None
    if "header_regex" in resolved:
        header_pattern = HeaderPattern(
            regex=value_of("header_regex"),
            description=value_of("header_description")
            or f"Commit message must match pattern `{value_of('header_regex').pattern}`",
        )
        # A custom header pattern means the message no longer has to be conventional
        if resolved["header_regex"][1] != PRESET_LAYER:
            enforce_conventional = False

    title_affix = None
    if value_of("title_prefix") or value_of("title_suffix"):
        title_affix = TitleAffix.build(
            prefix=value_of("title_prefix"),
            suffix=value_of("title_suffix"),
            separator=value_of("title_prefix_separator"),
        )

    rules = RuleSet(
        header_pattern=header_pattern,
        excludes=tuple(excludes),
        cleanups=tuple(cleanups),
        body_policy=_resolve_body_policy(resolved),
        flags=Flags(
            no_emojis=bool(value_of("no_emojis", False)),
            ascii_only=bool(value_of("ascii_only", False)),
            exit_nonzero_on_rewrite=bool(value_of("exit_nonzero_on_rewrite", False)),
        ),
        title_affix=title_affix,
        enforce_conventional=enforce_conventional,
    )
    sources = tuple(sorted((key, layer_name) for key, (_, layer_name) in resolved.items()))
    return rules, bool(value_of("write", False)), sources


def resolve(
    preset_name: Optional[str] = None,
    file_config: Optional[Mapping[str, Any]] = None,
    cli_overrides: Optional[CliOverrides] = None,
) -> EffectiveConfig:
    """
    Merge a preset, the project file and CLI overrides into one config.

    Args:
        preset_name: Preset chosen on the command line (falls back to the
                     file's `preset`, then to `conventional`)
        file_config: Decoded `.gitfluff.toml` contents
        cli_overrides: Command line settings

    Returns:
        EffectiveConfig

    Raises:
        ConfigError: Unknown preset, invalid regex, malformed or contradictory settings
    """
    file_config = file_config or {}
    if not isinstance(file_config, Mapping):
        raise ConfigError("configuration must be a table")
    cli_overrides = cli_overrides or CliOverrides()

    name = preset_name or _optional_str(file_config, "preset", "config") or DEFAULT_PRESET
    preset = get_preset(name)
    logger.debug(f"Using preset `{preset.name}` (requested `{name}`)")

    layers = [_preset_layer(preset), _file_layer(file_config), _cli_layer(cli_overrides)]
    rules, write, sources = fold(layers, enforce_conventional=preset.rules.enforce_conventional)

    logger.debug(
        f"Resolved {len(rules.excludes)} exclude(s), {len(rules.cleanups)} cleanup(s), "
        f"write={write}"
    )
    return EffectiveConfig(rules=rules, preset_name=preset.name, write=write, sources=sources)
