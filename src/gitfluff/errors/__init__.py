"""
Error types, categories and formatting for gitfluff.
"""

from .exceptions import GitfluffError, ConfigError, MessageSourceError, HookInstallError
from .categories import ErrorCategory, categorize_error, EXIT_OK, EXIT_VIOLATION
from .formatter import ErrorFormatter, format_error_for_user

__all__ = [
    "GitfluffError",
    "ConfigError",
    "MessageSourceError",
    "HookInstallError",
    "ErrorCategory",
    "categorize_error",
    "EXIT_OK",
    "EXIT_VIOLATION",
    "ErrorFormatter",
    "format_error_for_user",
]
