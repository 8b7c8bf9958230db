"""
Terminal color helpers for the gitgate CLI.

Respects NO_COLOR, FORCE_COLOR, TTY detection and TERM=dumb.

Usage:
    from colors import success, error, hint, dim

    print(success("✅ git 2.43 meets the minimum"))
    print(error("❌ git not found"))
"""
import os
import sys


class Colors:
    """ANSI escape code constants."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    GRAY = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    CYAN = '\033[36m'


def colors_enabled() -> bool:
    """
    Decide whether to emit ANSI codes.

    Checked on every call so NO_COLOR/FORCE_COLOR changes take effect
    immediately.
    """
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    return os.environ.get('TERM', '') != 'dumb'


def _wrap(text: str, color: str) -> str:
    if not colors_enabled():
        return text
    return f"{color}{text}{Colors.RESET}"


def success(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_GREEN)


def error(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_RED)


def warning(text: str) -> str:
    return _wrap(text, Colors.BRIGHT_YELLOW)


def hint(text: str) -> str:
    return _wrap(text, Colors.CYAN)


def dim(text: str) -> str:
    return _wrap(text, Colors.GRAY)


def bold(text: str) -> str:
    return _wrap(text, Colors.BOLD)
