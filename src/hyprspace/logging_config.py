# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

APP_NAME = "hyprspace"
LOG_FILE_NAME = "hyprspace.jsonl"

# Correlation ID for the running session
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)


def json_sink(message):
    """JSONL sink for machine analysis - writes to stderr."""
    record = message.record
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                   if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    sys.stderr.write(json.dumps(log_entry, default=str) + "\n")


def default_log_dir() -> Path:
    """
    Per-user log directory.

    Linux: ~/.local/state/hyprspace/log/
    """
    return Path(platformdirs.user_log_dir(appname=APP_NAME, ensure_exists=True))


def setup_logger(level: str = "INFO", console: bool = False, log_dir: Path | None = None):
    """
    Configure Loguru for machine-readable JSONL output.

    The file sink is always installed. The stderr sink is opt-in because the
    selector owns the terminal while it runs.

    Args:
        level: Minimum level for the stderr sink
        console: Also emit JSONL records on stderr
        log_dir: Override for the log directory (defaults to platformdirs)

    Returns:
        The configured loguru logger
    """
    logger.remove()

    if console:
        logger.add(
            json_sink,
            level=level.upper()
        )

    if log_dir is None:
        log_dir = default_log_dir()
    else:
        log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(log_dir / LOG_FILE_NAME),
        format="{message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
        compression="gz",
        level="DEBUG"
    )

    return logger
