"""
Error message formatting for terminal output.
"""

import logging
from typing import List

from .categories import ErrorCategory, categorize_error

logger = logging.getLogger(__name__)


class ErrorFormatter:
    """
    Formats errors into messages for stderr.
    """

    # Hints for each error category
    SUGGESTIONS = {
        ErrorCategory.CONFIGURATION: [
            "Run `gitfluff presets` to see the available preset names",
            "Check regular expressions in .gitfluff.toml and on the command line",
        ],
        ErrorCategory.MESSAGE_SOURCE: [
            "Pass COMMIT_FILE, --from-file, --stdin or --message",
            "Check that the commit message file exists and is writable",
        ],
        ErrorCategory.HOOK: [
            "Run the command from inside a git repository",
            "Use --force to replace an existing hook",
        ],
        ErrorCategory.INTERNAL: [
            "Re-run with GITFLUFF_LOG_LEVEL=DEBUG for more details",
        ],
    }

    @staticmethod
    def cause_chain(error: BaseException) -> List[str]:
        """Collect messages of chained causes, outermost first."""
        causes = []
        current = error.__cause__ or error.__context__
        seen = {id(error)}
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            causes.append(str(current) or type(current).__name__)
            current = current.__cause__ or current.__context__
        return causes

    @staticmethod
    def format_error_concise(error: BaseException) -> str:
        """
        Format an error for a single stderr diagnostic.

        Args:
            error: The exception to format

        Returns:
            Error text followed by its `caused by:` chain
        """
        message = str(error) or type(error).__name__
        for cause in ErrorFormatter.cause_chain(error):
            message += f"\n  caused by: {cause}"
        return message

    @staticmethod
    def format_error_detailed(error: BaseException) -> str:
        """
        Format an error with its category explanation and hints.

        Args:
            error: The exception to format

        Returns:
            Multi-line text for terminal display
        """
        category, explanation = categorize_error(error)
        lines = [
            f"{explanation}: {ErrorFormatter.format_error_concise(error)}",
        ]
        for suggestion in ErrorFormatter.SUGGESTIONS.get(category, []):
            lines.append(f"  hint: {suggestion}")
        return "\n".join(lines)


def format_error_for_user(error: BaseException, detailed: bool = False) -> str:
    """
    Convenience function to format an error for display to users.

    Args:
        error: The exception to format
        detailed: Include the category explanation and hints

    Returns:
        Formatted error message
    """
    if detailed:
        return ErrorFormatter.format_error_detailed(error)
    return ErrorFormatter.format_error_concise(error)
