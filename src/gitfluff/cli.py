"""
Command line interface for gitfluff.

    gitfluff lint COMMIT_FILE [options]
    gitfluff hook install commit-msg [--write] [--force]
    gitfluff presets
    gitfluff serve [--host HOST] [--port PORT]
"""

import argparse
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .commit import lint
from .commit.message import COMMENT_CHAR
from .config import load_config
from .errors import (
    EXIT_OK,
    ConfigError,
    GitfluffError,
    MessageSourceError,
    categorize_error,
    format_error_for_user,
)
from .hooks import HookKind, install_hook, is_merge_in_progress
from .logging_config import configure_logging, get_logger
from .reporter import ColorMode, Reporter
from .rules import CliOverrides, list_presets, resolve

logger = get_logger(__name__)


@dataclass(frozen=True)
class MessageData:
    """
    Commit message text and the file it came from (None for stdin/--message).

    Only file messages come from git's editor flow, so only they have their
    comment lines stripped.
    """

    text: str
    path: Optional[Path] = None
    comment_char: Optional[str] = None


def parse_exclude_arg(raw: str) -> Tuple[str, Optional[str]]:
    """Split `PATTERN[:MESSAGE]` at the first colon."""
    pattern, _, message = raw.partition(":")
    return pattern, message or None


def parse_cleanup_arg(raw: str) -> Tuple[str, str, Optional[str]]:
    """Split `FIND->REPLACE`."""
    find, arrow, replace = raw.partition("->")
    if not arrow:
        raise ConfigError(f"cleanup argument must use `find->replace` format (got `{raw}`)")
    return find, replace, None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitfluff",
        description="Lint and clean up commit messages",
    )
    parser.add_argument("--version", action="version", version=f"gitfluff {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Debug logging and detailed error hints",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint_parser = subparsers.add_parser("lint", help="Lint a commit message")
    lint_parser.add_argument("commit_file", nargs="?", metavar="COMMIT_FILE",
                             help="Commit message file (as passed to the commit-msg hook)")
    source = lint_parser.add_mutually_exclusive_group()
    source.add_argument("--from-file", metavar="PATH", help="Read the message from a file")
    source.add_argument("--stdin", action="store_true", help="Read the message from stdin")
    source.add_argument("--message", metavar="TEXT", help="Lint a literal message")

    lint_parser.add_argument("--preset", help="Preset name (default: conventional)")
    lint_parser.add_argument("--msg-pattern", metavar="REGEX", help="Custom header pattern")
    lint_parser.add_argument("--msg-pattern-description", metavar="TEXT",
                             help="Description reported when the header pattern fails")
    lint_parser.add_argument("--exclude", action="append", default=[], metavar="PATTERN[:MESSAGE]",
                             help="Reject messages matching PATTERN (repeatable)")
    lint_parser.add_argument("--cleanup", action="append", default=[], metavar="FIND->REPLACE",
                             help="Regex rewrite applied with --write (repeatable)")
    lint_parser.add_argument("--cleanup-pattern", metavar="REGEX")
    lint_parser.add_argument("--cleanup-replacement", metavar="TEXT")
    lint_parser.add_argument("--cleanup-description", metavar="TEXT")
    lint_parser.add_argument("--config", metavar="PATH", help="Config file (default: discovered)")
    lint_parser.add_argument("--write", action="store_true", default=None,
                             help="Write cleaned message back")
    lint_parser.add_argument("--color", choices=[mode.value for mode in ColorMode],
                             default=ColorMode.AUTO.value)

    body = lint_parser.add_mutually_exclusive_group()
    body.add_argument("--single-line", action="store_true", default=None)
    body.add_argument("--require-body", action="store_true", default=None)

    lint_parser.add_argument("--exit-nonzero-on-rewrite", action="store_true", default=None)
    lint_parser.add_argument("--no-emojis", action="store_true", default=None)
    lint_parser.add_argument("--ascii-only", action="store_true", default=None)
    lint_parser.add_argument("--title-prefix", metavar="TEXT")
    lint_parser.add_argument("--title-suffix", metavar="TEXT")
    lint_parser.add_argument("--title-prefix-separator", metavar="TEXT")

    hook_parser = subparsers.add_parser("hook", help="Manage git hooks")
    hook_subparsers = hook_parser.add_subparsers(dest="hook_command", required=True)
    install_parser = hook_subparsers.add_parser("install", help="Install a git hook")
    install_parser.add_argument("kind", choices=[kind.value for kind in HookKind])
    install_parser.add_argument("--write", action="store_true",
                                help="Hook rewrites messages with cleanups")
    install_parser.add_argument("--force", action="store_true", help="Overwrite an existing hook")

    subparsers.add_parser("presets", help="List available presets")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP lint service")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def _overrides_from_args(args: argparse.Namespace) -> CliOverrides:
    cleanups = [parse_cleanup_arg(raw) for raw in args.cleanup]
    if args.cleanup_pattern is not None:
        cleanups.append(
            (args.cleanup_pattern, args.cleanup_replacement or "", args.cleanup_description)
        )

    return CliOverrides(
        msg_pattern=args.msg_pattern,
        msg_pattern_description=args.msg_pattern_description,
        excludes=tuple(parse_exclude_arg(raw) for raw in args.exclude),
        cleanups=tuple(cleanups),
        write=args.write,
        single_line=args.single_line,
        require_body=args.require_body,
        no_emojis=args.no_emojis,
        ascii_only=args.ascii_only,
        exit_nonzero_on_rewrite=args.exit_nonzero_on_rewrite,
        title_prefix=args.title_prefix,
        title_suffix=args.title_suffix,
        title_prefix_separator=args.title_prefix_separator,
    )


def _read_file(path: Path) -> MessageData:
    try:
        return MessageData(
            text=path.read_text(encoding="utf-8"), path=path, comment_char=COMMENT_CHAR
        )
    except (OSError, UnicodeDecodeError) as e:
        raise MessageSourceError(f"failed to read commit message from {path}", cause=e)


def load_message(args: argparse.Namespace) -> MessageData:
    """
    Read the commit message from the selected source.

    Raises:
        MessageSourceError: No source given, or the source can't be read
    """
    if args.from_file is not None:
        return _read_file(Path(args.from_file))
    if args.commit_file is not None:
        return _read_file(Path(args.commit_file))
    if args.stdin:
        try:
            return MessageData(text=sys.stdin.read())
        except (OSError, UnicodeDecodeError) as e:
            raise MessageSourceError("failed to read commit message from stdin", cause=e)
    if args.message is not None:
        return MessageData(text=args.message)

    raise MessageSourceError(
        "no commit message source provided "
        "(pass COMMIT_FILE, --from-file, --stdin, or --message)"
    )


def write_message(source: MessageData, text: str) -> None:
    """Write a rewritten message back to its file, or to stdout."""
    if source.path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    try:
        source.path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise MessageSourceError(
            f"failed to write cleaned commit message to {source.path}", cause=e
        )
    logger.debug(f"Wrote cleaned message to {source.path}")


def run_lint(args: argparse.Namespace, reporter: Reporter) -> int:
    source = load_message(args)
    cwd = Path.cwd()

    if is_merge_in_progress(cwd):
        logger.info("Merge in progress, skipping commit message checks")
        return EXIT_OK

    loaded = load_config(args.config, cwd)
    file_config = loaded[1] if loaded else None

    config = resolve(
        preset_name=args.preset,
        file_config=file_config,
        cli_overrides=_overrides_from_args(args),
    )
    verdict = lint(source.text, config, comment_char=source.comment_char)
    reporter.report_verdict(verdict)

    if verdict.rewritten:
        write_message(source, verdict.final_message)
        if not verdict.violations and config.exit_nonzero_on_rewrite:
            reporter.info("commit message was rewritten; please re-run the commit to review changes")

    return verdict.exit_code


def run_hook_install(args: argparse.Namespace) -> int:
    path = install_hook(Path.cwd(), HookKind(args.kind), write=args.write, force=args.force)
    print(f"Installed {args.kind} hook at {path}")
    return EXIT_OK


def run_presets() -> int:
    for preset in list_presets():
        aliases = f" (aliases: {', '.join(preset.aliases)})" if preset.aliases else ""
        print(f"{preset.name}{aliases}")
        print(f"    {preset.summary}")
    return EXIT_OK


def run_serve(args: argparse.Namespace) -> int:
    import uvicorn
    from dotenv import load_dotenv

    load_dotenv()
    host = args.host or os.getenv("GITFLUFF_HOST", "127.0.0.1")
    port = args.port or int(os.getenv("GITFLUFF_PORT", "8000"))

    logger.info(f"Starting lint service on http://{host}:{port}")
    uvicorn.run(
        "gitfluff.main:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        configure_logging(level="DEBUG" if args.verbose else None)
    else:
        configure_logging(level="DEBUG" if args.verbose else None, default_level="WARNING")

    if args.command == "lint" and args.commit_file and (args.from_file or args.stdin or args.message):
        parser.error("COMMIT_FILE cannot be combined with --from-file, --stdin or --message")

    reporter = Reporter(ColorMode(getattr(args, "color", ColorMode.AUTO.value)))

    try:
        if args.command == "lint":
            return run_lint(args, reporter)
        if args.command == "hook":
            return run_hook_install(args)
        if args.command == "presets":
            return run_presets()
        return run_serve(args)
    except GitfluffError as e:
        category, _ = categorize_error(e)
        reporter.error(format_error_for_user(e, detailed=args.verbose))
        return category.exit_code
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        category, _ = categorize_error(e)
        reporter.error(format_error_for_user(e, detailed=args.verbose))
        return category.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
