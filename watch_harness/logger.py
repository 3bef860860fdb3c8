"""Structured logging configuration using loguru.

Two sinks are installed:
- a colourised, human-readable console sink on stderr
- an append-only JSON-lines file per exchange id, so repeated runs against
  the same exchange accumulate in one diagnostic log
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger

from config.settings import HarnessConfig, get_config
from watch_harness.exceptions import LoggingInitializationError

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan> | "
    "<level>{message}</level>"
)

# Keys every record carries that are not run context.
_INTERNAL_EXTRA = frozenset({"serialized", "module"})


def _to_json_line(record: dict[str, Any]) -> str:
    """Render one loguru record as a JSON object without a trailing newline."""
    extra = record["extra"]
    entry: dict[str, Any] = {
        "timestamp": record["time"].astimezone(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": extra.get("module", record["name"]),
        "location": f"{record['function']}:{record['line']}",
    }

    context = {key: value for key, value in extra.items() if key not in _INTERNAL_EXTRA}
    if context:
        entry["context"] = context

    error = record["exception"]
    if error is not None:
        entry["exception"] = {
            "type": error.type.__name__ if error.type else None,
            "value": str(error.value) if error.value else None,
        }

    return json.dumps(entry, default=str)


def _serialize(record: dict[str, Any]) -> bool:
    record["extra"]["serialized"] = _to_json_line(record)
    return True


def _ensure_writable(log_dir: Path) -> None:
    """Create ``log_dir`` and prove a file can be written there.

    Raises:
        LoggingInitializationError: If the directory is unusable.
    """
    probe = log_dir / f".probe-{datetime.now(timezone.utc):%Y%m%d%H%M%S%f}"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        probe.touch()
        probe.unlink()
    except OSError as exc:
        raise LoggingInitializationError(log_dir=str(log_dir), reason=str(exc)) from exc


def log_file_path(config: HarnessConfig, exchange_id: str) -> Path:
    """Return the append-only log file for one exchange id."""
    return config.log_dir / f"{exchange_id}.log"


def configure_logging(config: HarnessConfig | None = None, exchange_id: str | None = None) -> None:
    """Install the console sink and, for a known exchange, its file sink.

    Must run once at bootstrap; any sinks installed earlier are removed.

    Args:
        config: Optional HarnessConfig instance. If None, uses singleton.
        exchange_id: Exchange being tested; selects the log file.

    Raises:
        LoggingInitializationError: If the log directory is not writable.
    """
    config = config or get_config()

    logger.remove()
    logger.configure(extra={"module": config.app_name})
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=config.log_level,
        colorize=True,
        backtrace=config.debug,
        diagnose=config.debug,
    )

    if exchange_id is None:
        return

    _ensure_writable(config.log_dir)
    logger.add(
        str(log_file_path(config, exchange_id)),
        format="{extra[serialized]}",
        level=config.log_level,
        mode="a",
        encoding="utf-8",
        filter=_serialize,
    )

    logger.debug(
        "Log file attached",
        exchange_id=exchange_id,
        path=str(log_file_path(config, exchange_id)),
        log_level=config.log_level,
    )


def get_logger(name: str) -> "logger":
    """Return the shared logger tagged with ``name`` as its module."""
    return logger.bind(module=name)
