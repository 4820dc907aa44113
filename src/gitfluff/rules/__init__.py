"""
Rule model, preset catalog and config resolution.
"""

from .models import (
    RuleKind,
    HeaderPattern,
    Exclude,
    Cleanup,
    BodyPolicy,
    Flags,
    TitleAffix,
    Rule,
    RuleSet,
)
from .presets import DEFAULT_PRESET, Preset, get_preset, list_presets
from .resolver import CliOverrides, EffectiveConfig, resolve

__all__ = [
    "RuleKind",
    "HeaderPattern",
    "Exclude",
    "Cleanup",
    "BodyPolicy",
    "Flags",
    "TitleAffix",
    "Rule",
    "RuleSet",
    "DEFAULT_PRESET",
    "Preset",
    "get_preset",
    "list_presets",
    "CliOverrides",
    "EffectiveConfig",
    "resolve",
]
