#!/usr/bin/env python3
"""
Git installation and minimum-version gate.

Checks that `git --version` runs and reports at least MIN_GIT_VERSION:
- exec_git_version(): run the binary, return lowercased combined output
- evaluate_git_output(): pure decision over that output (no I/O)
- emit_events(): replay the decision's log events onto logger/console
- validate_git(): all of the above; raises on failure, returns the version

Version parsing is fixed-position: the major is the single character right
after "git version ", the minor comes from the two characters after the
dot. Multi-digit majors (10.x) do not fit those positions and are
reported as not installed. Known limitation.
"""
import re
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Optional

from console import Console
from logger import JsonLogger, get_logger
from messages import DEFAULT_MESSAGES, GateMessages


GIT_VERSION_MARKER = "git version "
MIN_GIT_MAJOR = 2
MIN_GIT_MINOR = 1


@dataclass(frozen=True, order=True)
class GitVersion:
    """Major/minor pair parsed from a git version banner."""
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


MIN_GIT_VERSION = GitVersion(MIN_GIT_MAJOR, MIN_GIT_MINOR)


class GitRequirementError(Exception):
    """Base class for git requirement failures."""

    code = "git_requirement"


class GitNotInstalledError(GitRequirementError):
    """git could not be run, or its output had no parseable version banner."""

    code = "not_installed"

    def __init__(self, message: str = "git not found. Please check and try again"):
        super().__init__(message)


class GitVersionTooLowError(GitRequirementError):
    """git is installed but older than the minimum."""

    code = "version_too_low"

    def __init__(self, found: GitVersion, minimum: GitVersion = MIN_GIT_VERSION):
        self.found = found
        self.minimum = minimum
        super().__init__(
            f"git version is lower of {minimum.major}.{minimum.minor:02d}. "
            "Please check and try again"
        )


@dataclass(frozen=True)
class LogEvent:
    """A log record decided by evaluation, emitted later."""
    level: str
    message: str
    fields: dict = field(default_factory=dict)


@dataclass
class GitCheckResult:
    """
    Outcome of evaluating git's version output.

    Attributes:
        version: Parsed version, if the banner could be parsed
        error: The failure, or None when the requirement is met
        events: Log events to emit (in order) for this outcome
    """
    version: Optional[GitVersion] = None
    error: Optional[GitRequirementError] = None
    events: list[LogEvent] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def exec_git_version(command: str = "git") -> str:
    """
    Run `<command> --version` and return its lowercased output.

    stdout and stderr are captured together.

    Raises:
        OSError: If the executable cannot be started
        subprocess.CalledProcessError: On a non-zero exit status
    """
    result = subprocess.run(
        [command, "--version"],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=True,
    )
    return result.stdout.decode("utf-8", errors="replace").lower()


def contains_git_version(output: str) -> bool:
    return GIT_VERSION_MARKER in output.lower()


def extract_git_version(output: str) -> GitVersion:
    """
    Parse the major/minor pair out of a `git --version` banner.

    "git version 2.39.2" -> GitVersion(2, 39)
    "git version 2.01.0" -> GitVersion(2, 1)
    "git version 3.5.0"  -> GitVersion(3, 5)

    Raises:
        GitNotInstalledError: If the banner is missing, too short, or the
            fixed positions do not hold digits
    """
    parts = output.lower().split(GIT_VERSION_MARKER)
    if len(parts) < 2 or len(parts[1]) < 3:
        raise GitNotInstalledError()

    remainder = parts[1]
    major_text = remainder[0:1]
    minor_match = re.match(r"\d+", remainder[2:4])
    if not major_text.isdecimal() or minor_match is None:
        raise GitNotInstalledError()

    return GitVersion(int(major_text), int(minor_match.group()))


def meets_minimum(version: GitVersion, minimum: GitVersion = MIN_GIT_VERSION) -> bool:
    # Field order (major, minor) makes dataclass ordering a version comparison
    return version >= minimum


def evaluate_git_output(output: str, messages: GateMessages = DEFAULT_MESSAGES) -> GitCheckResult:
    """
    Decide whether `git --version` output satisfies the requirement.

    Pure: no process execution and no logging. Side effects are returned as
    `events` for the caller to emit.
    """
    if not contains_git_version(output):
        return GitCheckResult(error=GitNotInstalledError())

    try:
        version = extract_git_version(output)
    except GitNotInstalledError as e:
        return GitCheckResult(error=e)

    if meets_minimum(version):
        return GitCheckResult(version=version)

    text = messages.format(minimum=MIN_GIT_VERSION)
    return GitCheckResult(
        version=version,
        error=GitVersionTooLowError(version),
        events=[
            LogEvent("error", text.version_too_low,
                     {"minimum": str(MIN_GIT_VERSION), "found": str(version)}),
            LogEvent("info", text.how_to_install),
        ],
    )


def exec_failed_event(error: Exception, messages: GateMessages = DEFAULT_MESSAGES) -> LogEvent:
    text = messages.format(error=error)
    return LogEvent("error", text.exec_failed, {"error": str(error)})


def emit_events(events: list[LogEvent], logger: JsonLogger, console: Optional[Console] = None) -> None:
    """
    Write events to the JSON logger; info-level guidance also goes to the console.

    Never raises: both channels are fail-open.
    """
    for event in events:
        logger.log(event.level, event.message, **event.fields)
        if console is not None and event.level == "info":
            console.info(event.message)


def validate_git(
    command: str = "git",
    logger: Optional[JsonLogger] = None,
    console: Optional[Console] = None,
    messages: GateMessages = DEFAULT_MESSAGES,
    executor: Callable[[str], str] = exec_git_version,
) -> GitVersion:
    """
    Verify git is installed and at least MIN_GIT_VERSION.

    Every call runs the executable again; nothing is cached.

    Args:
        command: git executable to run
        logger: JSON logger for events (defaults to info-level JSON on stderr)
        console: Optional plain-text channel for the install guidance
        messages: Message templates
        executor: Runs `<command> --version` and returns lowercased output

    Returns:
        The parsed git version

    Raises:
        GitNotInstalledError: git could not run or its banner was not parseable
        GitVersionTooLowError: git is older than the minimum
    """
    if logger is None:
        logger = get_logger({"level": "info", "destinations": ["stderr"]})
    logger = logger.bind(check="git_requirement", command=command)

    try:
        output = executor(command)
    except (OSError, subprocess.SubprocessError) as e:
        emit_events([exec_failed_event(e, messages)], logger)
        raise GitNotInstalledError() from e

    result = evaluate_git_output(output, messages)
    emit_events(result.events, logger, console)
    if result.error is not None:
        raise result.error

    logger.debug("git requirement satisfied", version=str(result.version))
    return result.version
