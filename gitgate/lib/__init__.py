"""
gitgate Library

Verifies that git is installed and new enough before tooling that needs it runs.

Architecture:
- git_requirement.py: Version banner parsing and the minimum-version gate
- messages.py: Guidance text (global → project → local cascade)
- config.py: Configuration loading (global → project → local)
- logger.py: JSON structured logging
- console.py: Plain-text user notices
- colors.py: Terminal color helpers for the CLI

Usage (with this directory on sys.path, as gitgate-cli.py does):
    from git_requirement import validate_git, GitRequirementError

    try:
        validate_git()
    except GitRequirementError as e:
        print(f"git requirement not met: {e}")
"""

__version__ = "1.0.0"
