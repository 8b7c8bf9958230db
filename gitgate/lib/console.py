"""
Plain-text console output for user-facing notices.

Kept apart from JSON logging: install guidance is for a human reading a
terminal, log records are for machines. Output errors are swallowed.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from logger import LEVELS


DEFAULT_CONSOLE_CONFIG = {
    "level": "info",
    "destinations": ["stderr"],
}
DEFAULT_CONSOLE_FILE = Path.home() / ".gitgate" / "gitgate-console.log"


class OutputHandler:
    """Base handler for emitting plain-text output."""

    def emit(self, message: str) -> None:
        raise NotImplementedError


class StreamHandler(OutputHandler):
    """Handler that writes messages to a stream (stderr by default)."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stderr

    def emit(self, message: str) -> None:
        try:
            self.stream.write(_ensure_trailing_newline(message))
            self.stream.flush()
        except Exception:
            pass


class FileHandler(OutputHandler):
    """Handler that appends messages to a file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass

    def emit(self, message: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(_ensure_trailing_newline(message))
        except Exception:
            pass


@dataclass(frozen=True)
class Console:
    """Level-aware console output."""

    level_name: str
    level: int
    handlers: tuple[OutputHandler, ...]

    def debug(self, message: str) -> None:
        self.log("debug", message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def warning(self, message: str) -> None:
        self.log("warning", message)

    def error(self, message: str) -> None:
        self.log("error", message)

    def log(self, level: str, message: str) -> None:
        if LEVELS.get(level, 0) < self.level:
            return

        text = message if isinstance(message, str) else str(message)
        for handler in self.handlers:
            try:
                handler.emit(text)
            except Exception:
                pass


def _ensure_trailing_newline(message: str) -> str:
    return message if message.endswith("\n") else f"{message}\n"


def _build_handlers(console_config: dict) -> list[OutputHandler]:
    destinations = console_config.get("destinations") or []
    if isinstance(destinations, str):
        destinations = [destinations]

    handlers: list[OutputHandler] = []
    for destination in destinations:
        dest = (destination or "").lower().strip()
        if dest == "stdout":
            handlers.append(StreamHandler(stream=sys.stdout))
        elif dest == "stderr":
            handlers.append(StreamHandler(stream=sys.stderr))
        elif dest == "file":
            handlers.append(FileHandler(Path(console_config.get("file") or DEFAULT_CONSOLE_FILE)))

    return handlers


def build_console(config: Optional[dict] = None) -> Console:
    """Build a Console from a `console:` config section (defaults fill gaps)."""
    merged = dict(DEFAULT_CONSOLE_CONFIG)
    if isinstance(config, dict):
        merged.update(config)

    level_name = str(merged.get("level", DEFAULT_CONSOLE_CONFIG["level"])).lower()
    level = LEVELS.get(level_name, LEVELS[DEFAULT_CONSOLE_CONFIG["level"]])
    return Console(level_name=level_name, level=level, handlers=tuple(_build_handlers(merged)))


def silent_console() -> Console:
    """Console that drops everything (used by `check --quiet`)."""
    return Console(level_name="error", level=LEVELS["error"], handlers=())


def emit_text(message: str, stream: Optional[TextIO] = None) -> None:
    """Write text to a stream (stdout by default)."""
    target = stream or sys.stdout
    try:
        target.write(_ensure_trailing_newline(message))
        target.flush()
    except Exception:
        pass


def emit_json(payload: dict, stream: Optional[TextIO] = None) -> None:
    """Write a JSON payload to a stream (stdout by default)."""
    emit_text(json.dumps(payload, indent=2), stream=stream)
