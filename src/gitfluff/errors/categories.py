"""
Error categorization and exit codes.
"""

from enum import Enum
from typing import Tuple

from .exceptions import ConfigError, HookInstallError, MessageSourceError

EXIT_OK = 0
EXIT_VIOLATION = 1


class ErrorCategory(Enum):
    """Categories of errors that can abort gitfluff"""
    CONFIGURATION = "configuration"
    MESSAGE_SOURCE = "message_source"
    HOOK = "hook"
    INTERNAL = "internal"

    @property
    def exit_code(self) -> int:
        """Process exit status for this category (always > 1)."""
        codes = {
            ErrorCategory.CONFIGURATION: 2,
            ErrorCategory.MESSAGE_SOURCE: 3,
            ErrorCategory.HOOK: 3,
            ErrorCategory.INTERNAL: 4,
        }
        return codes[self]


def categorize_error(error: BaseException) -> Tuple[ErrorCategory, str]:
    """
    Categorize an error and provide a user-friendly explanation.

    Args:
        error: The exception to categorize

    Returns:
        Tuple of (ErrorCategory, explanation)
    """
    if isinstance(error, ConfigError):
        return (
            ErrorCategory.CONFIGURATION,
            "Configuration error - check the preset name, patterns and .gitfluff.toml"
        )

    if isinstance(error, MessageSourceError):
        return (
            ErrorCategory.MESSAGE_SOURCE,
            "Could not read or write the commit message"
        )

    if isinstance(error, HookInstallError):
        return (
            ErrorCategory.HOOK,
            "Hook installation failed"
        )

    if isinstance(error, OSError):
        return (
            ErrorCategory.MESSAGE_SOURCE,
            "File system error"
        )

    return (
        ErrorCategory.INTERNAL,
        "An unexpected error occurred"
    )
