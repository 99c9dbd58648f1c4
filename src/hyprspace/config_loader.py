# =============================================================================
# Configuration Loading
# =============================================================================

import copy
import re
import time
import tomllib
from pathlib import Path

import platformdirs
from loguru import logger

from hyprspace.errors import Error, ErrorType, Result

APP_NAME = "hyprspace"
CONFIG_DIR = Path(platformdirs.user_config_dir(APP_NAME))
CONFIG_PATH = CONFIG_DIR / "config.toml"

# Default configuration - safe values that work without user config
DEFAULT_CONFIG = {
    "storage": {
        "directory": "",  # Empty -> CONFIG_DIR
    },
    "logging": {
        "level": "INFO",
        "console": False,  # The selector owns the terminal
    },
    "launcher": {
        "exit_after_launch": False,
    },
}

# Loguru's built-in level names
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def extract_toml_error_context(error: tomllib.TOMLDecodeError, file_path: Path) -> dict:
    """
    Extract line context from TOML parse error.

    Args:
        error: The TOMLDecodeError exception
        file_path: Path to the TOML file

    Returns:
        Dict with line_number, line_content, and formatted_message
    """
    error_str = str(error)
    line_number = None
    line_content = None

    # Common formats: "line 15", "at line 15", "(line 15)"
    line_match = re.search(r'line\s+(\d+)', error_str, re.IGNORECASE)
    if line_match:
        line_number = int(line_match.group(1))

    if line_number and file_path.exists():
        try:
            with open(file_path, "r") as f:
                lines = f.readlines()
                if 0 < line_number <= len(lines):
                    line_content = lines[line_number - 1].rstrip()
        except OSError:
            pass

    if line_number:
        formatted = f"Error on line {line_number}"
        if line_content:
            display_line = line_content[:50] + "..." if len(line_content) > 50 else line_content
            formatted += f": {display_line}"
        formatted += f"\n\nDetails: {error_str}"
    else:
        formatted = f"TOML parse error: {error_str}"

    return {
        "line_number": line_number,
        "line_content": line_content,
        "formatted_message": formatted,
        "raw_error": error_str
    }


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dictionary."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(config: dict) -> str | None:
    """
    Check value types of a merged config.

    Returns:
        Description of the first invalid value, or None when the config is usable
    """
    for section, defaults in DEFAULT_CONFIG.items():
        values = config.get(section)
        if not isinstance(values, dict):
            return f"[{section}] must be a table"
        for key, default in defaults.items():
            value = values.get(key)
            # bool is checked by type so 0/1 are not taken for false/true
            if type(value) is not type(default):
                expected = type(default).__name__
                return f"{section}.{key} must be a {expected}, got {value!r}"

    level = config["logging"]["level"]
    if level.upper() not in LOG_LEVELS:
        return f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}"

    return None


def load_config(config_path: Path = CONFIG_PATH) -> Result[dict]:
    """
    Load configuration from TOML file with defaults fallback.

    A missing file is not an error: the defaults are returned as-is.

    Args:
        config_path: Path to the config TOML file

    Returns:
        Result[dict]: Ok with merged config, or Err with parse details
    """
    start_time = time.perf_counter()
    logger.debug(
        "Loading config",
        operation="load_config",
        status="started",
        config_path=str(config_path)
    )

    if not config_path.exists():
        logger.debug(
            "Config file does not exist, using defaults",
            operation="load_config",
            status="default",
            config_path=str(config_path)
        )
        return Result.ok(copy.deepcopy(DEFAULT_CONFIG))

    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        error_context = extract_toml_error_context(e, config_path)
        logger.error(
            "Invalid TOML syntax in configuration file",
            operation="load_config",
            status="failed",
            file=str(config_path),
            line_number=error_context["line_number"],
            line_content=error_context["line_content"],
            error=error_context["formatted_message"]
        )
        return Result.err(Error(
            error_type=ErrorType.PARSE_ERROR,
            message=error_context["formatted_message"],
            context={"config_path": str(config_path), "line_number": error_context["line_number"]},
            original_exception=e
        ))
    except OSError as e:
        logger.error(
            "Config file unreadable",
            operation="load_config",
            status="failed",
            file=str(config_path),
            error=str(e)
        )
        return Result.err(Error(
            error_type=ErrorType.IO_ERROR,
            message=f"Cannot read config file {config_path}: {e}",
            context={"config_path": str(config_path)},
            original_exception=e
        ))

    merged = deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

    problem = validate_config(merged)
    if problem:
        logger.bind(
            operation="load_config",
            status="failed",
            file=str(config_path)
        ).error(problem)
        return Result.err(Error(
            error_type=ErrorType.VALIDATION_ERROR,
            message=problem,
            context={"config_path": str(config_path)}
        ))

    duration_ms = int((time.perf_counter() - start_time) * 1000)

    logger.debug(
        "Config loaded successfully",
        operation="load_config",
        status="success",
        config_path=str(config_path),
        metrics={"duration_ms": duration_ms}
    )

    return Result.ok(merged)


def storage_directory(config: dict) -> Path:
    """
    Resolve the workspace script directory from config.

    Args:
        config: Merged configuration dict

    Returns:
        Expanded directory path (CONFIG_DIR when not configured)
    """
    configured = config.get("storage", {}).get("directory") or ""
    if not configured:
        return CONFIG_DIR
    return Path(configured).expanduser()
