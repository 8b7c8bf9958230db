#!/usr/bin/env python3
"""
gitgate CLI Tool

Verifies that git is installed and meets the minimum supported version.

Usage:
    gitgate                     # Same as `gitgate check`
    gitgate check               # Check git, print result, exit 1 on failure
    gitgate check --json        # Machine-readable result
    gitgate check --git PATH    # Check a specific git executable
    gitgate config              # Show effective configuration

Shell Alias (add to ~/.zshrc or ~/.bashrc):
    alias gitgate='python3 ~/.gitgate/gitgate-cli.py'
"""
import argparse
import os
import sys
from pathlib import Path

import yaml

# Add lib to path (resolve symlinks to find actual location)
lib_path = Path(__file__).resolve().parent / 'lib'
sys.path.insert(0, str(lib_path))

from colors import bold, dim, error, hint, success, warning
from config import GateConfig
from console import build_console, emit_json, emit_text, silent_console
from git_requirement import (
    MIN_GIT_VERSION,
    GitNotInstalledError,
    GitRequirementError,
    GitVersionTooLowError,
    validate_git,
)
from logger import get_logger
from messages import DEFAULT_MESSAGES, MessageValidationError, load_messages


def _load_messages(project_dir: str):
    try:
        return load_messages(project_dir)
    except MessageValidationError as e:
        print(warning(f"⚠️  {e}"), file=sys.stderr)
        print(dim("   Using built-in messages"), file=sys.stderr)
        return DEFAULT_MESSAGES


def _check_git(config: GateConfig, command: str, quiet: bool) -> dict:
    """Run the git requirement and describe the outcome as a check dict."""
    check = {
        'id': 'git_requirement',
        'status': 'pass',
        'code': None,
        'message': '',
        'version': None,
        'minimum': str(MIN_GIT_VERSION),
        'fix': None,
    }

    if not config.is_enabled():
        check['status'] = 'skipped'
        check['message'] = 'git requirement check disabled'
        return check

    messages = _load_messages(config.project_dir)
    logger = get_logger(config.get_logging_config(), base_context={'project_dir': config.project_dir})
    console = silent_console() if quiet else build_console(config.get_console_config())
    install_hint = messages.format(minimum=MIN_GIT_VERSION).how_to_install

    try:
        version = validate_git(command, logger=logger, console=console, messages=messages)
    except GitVersionTooLowError as e:
        check['version'] = str(e.found)
        check['fix'] = {'description': install_hint, 'safe': False, 'command': None}
        return _fail(check, e, str(e))
    except GitNotInstalledError as e:
        check['fix'] = {'description': install_hint, 'safe': False, 'command': None}
        return _fail(check, e, messages.not_installed)

    check['version'] = str(version)
    check['message'] = f"git {version} >= {MIN_GIT_VERSION}"
    return check


def _fail(check: dict, exc: GitRequirementError, message: str) -> dict:
    check['status'] = 'fail'
    check['code'] = exc.code
    check['message'] = message
    return check


def cmd_check(args) -> int:
    """
    Check the git requirement.

    Returns:
        Exit code (0 if git is usable or the check is disabled, 1 otherwise)
    """
    config = GateConfig(os.getcwd())
    command = args.git or config.get_git_command()
    quiet = getattr(args, 'quiet', False)
    check = _check_git(config, command, quiet or args.json)
    exit_code = 1 if check['status'] == 'fail' else 0

    if args.json:
        emit_json(check)
        return exit_code
    if quiet:
        return exit_code

    if check['status'] == 'skipped':
        emit_text(dim(f"⏭️  {check['message']}"))
    elif check['status'] == 'pass':
        emit_text(success(f"✅ {check['message']}"))
    else:
        emit_text(error(f"❌ {check['message']}"), stream=sys.stderr)
        # version_too_low guidance was already written through the console
        if check['code'] == GitNotInstalledError.code:
            emit_text(hint(f"💡 {check['fix']['description']}"), stream=sys.stderr)
    return exit_code


def cmd_config(args) -> int:
    """Show the effective configuration and, with --sources, where it came from."""
    config = GateConfig(os.getcwd())

    if args.sources:
        emit_text(bold("Config sources (lowest priority first):"))
        if not config.sources:
            emit_text(dim("  (none - using built-in defaults)"))
        for path in config.sources:
            emit_text(f"  {path}")
        emit_text("")

    emit_text(yaml.safe_dump(config.get_raw_config(), default_flow_style=False, sort_keys=False).rstrip())
    return 1 if config.get_validation_errors() else 0


def main() -> int:
    """
    CLI entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog='gitgate',
        description=f'gitgate - Verify git >= {MIN_GIT_VERSION} is installed',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    gitgate                             # Check git
    gitgate check --json                # JSON result for scripting
    gitgate check --git /opt/git/bin/git
    gitgate config --sources            # Show merged config and its files

Environment Variables:
    GITGATE_SKIP=1                      # Skip the git check entirely
'''
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')

    check_parser = subparsers.add_parser('check', help='Check that git is installed and new enough')
    check_parser.add_argument('--git', metavar='PATH', help='git executable to check (default: from config, else "git")')
    check_parser.add_argument('--json', action='store_true', help='Output result as JSON')
    check_parser.add_argument('--quiet', '-q', action='store_true', help='No output; exit code only')

    config_parser = subparsers.add_parser('config', help='Show effective configuration')
    config_parser.add_argument('--sources', action='store_true', help='List config files that were loaded')

    args = parser.parse_args()

    if not args.command:
        args = parser.parse_args(['check'])

    commands = {
        'check': cmd_check,
        'config': cmd_config,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
