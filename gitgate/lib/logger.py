"""
Structured JSON logging for gitgate.

Records are written one JSON object per line. Destinations come from the
`logging` config section:

    logging:
      level: error            # debug | info | warning | error
      destinations: [file]    # any of stdout, stderr, file
      file: ~/.gitgate/gitgate.log

Writing a record never raises. A check that passed stays passed even when
the log file is unwritable or a stream is closed.
"""
import json
import sys
from datetime import datetime, timezone
from functools import partialmethod
from pathlib import Path
from typing import Callable, Iterable, Optional


LEVELS = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "error": 40,
}

DEFAULT_LEVEL = "error"
DEFAULT_LOG_FILE = Path.home() / ".gitgate" / "gitgate.log"


def make_record(level: str, message: str, context: dict, fields: dict) -> dict:
    """
    Build one log record.

    Per-call fields win over bound context; None values are left out.
    """
    record = {
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "level": level,
        "message": message,
    }
    for source in (context, fields):
        record.update((key, value) for key, value in source.items() if value is not None)
    return record


class Handler:
    """Destination for serialized records."""

    def emit(self, record: dict) -> None:
        try:
            self.write_line(json.dumps(record, default=str))
        except (OSError, ValueError):
            # Closed stream or unwritable file
            pass

    def write_line(self, line: str) -> None:
        raise NotImplementedError


class StreamHandler(Handler):
    """Writes records to a text stream (stdout unless given)."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def write_line(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()


class FileHandler(Handler):
    """Appends records to a log file, creating its directory on first use."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def write_line(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")


class JsonLogger:
    """Level-filtered logger fanning records out to handlers."""

    def __init__(
        self,
        level: str = DEFAULT_LEVEL,
        handlers: Optional[Iterable[Handler]] = None,
        context: Optional[dict] = None,
    ) -> None:
        self.level_name = level.lower() if level.lower() in LEVELS else DEFAULT_LEVEL
        self.level = LEVELS[self.level_name]
        self.handlers = list(handlers or [])
        self.context = dict(context or {})

    def bind(self, **context: object) -> "JsonLogger":
        """Child logger sharing handlers, with extra context fields."""
        bound = {key: value for key, value in context.items() if value is not None}
        return JsonLogger(self.level_name, self.handlers, {**self.context, **bound})

    def is_enabled_for(self, level: str) -> bool:
        return LEVELS.get(level, 0) >= self.level

    def log(self, level: str, message: str, **fields: object) -> None:
        if not self.is_enabled_for(level):
            return
        record = make_record(level, message, self.context, fields)
        for handler in self.handlers:
            try:
                handler.emit(record)
            except Exception:
                # A custom handler must not take the check down with it
                pass

    debug = partialmethod(log, "debug")
    info = partialmethod(log, "info")
    warning = partialmethod(log, "warning")
    error = partialmethod(log, "error")


HANDLER_FACTORIES: dict[str, Callable[[dict], Handler]] = {
    "stdout": lambda cfg: StreamHandler(sys.stdout),
    "stderr": lambda cfg: StreamHandler(sys.stderr),
    "file": lambda cfg: FileHandler(Path(cfg.get("file") or DEFAULT_LOG_FILE)),
}


def get_logger(logging_config: Optional[dict] = None, base_context: Optional[dict] = None) -> JsonLogger:
    """
    Build a JsonLogger from a `logging` config section.

    A single destination may be given as a plain string. Unknown
    destinations are ignored.
    """
    cfg = logging_config or {}
    destinations = cfg.get("destinations", ["file"])
    if isinstance(destinations, str):
        destinations = [destinations]

    handlers = []
    for name in destinations or []:
        factory = HANDLER_FACTORIES.get(str(name).strip().lower())
        if factory is not None:
            handlers.append(factory(cfg))

    return JsonLogger(str(cfg.get("level", DEFAULT_LEVEL)), handlers, base_context)
