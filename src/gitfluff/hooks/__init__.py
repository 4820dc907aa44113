"""
Git hook installation and repository state checks.
"""

from .installer import HookKind, hooks_dir, render_hook_script, install_hook, is_merge_in_progress

__all__ = ["HookKind", "hooks_dir", "render_hook_script", "install_hook", "is_merge_in_progress"]
