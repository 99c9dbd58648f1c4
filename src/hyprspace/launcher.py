# =============================================================================
# Script Launcher
# =============================================================================

import subprocess
import time

from loguru import logger

from hyprspace.errors import Error, ErrorType, Result
from hyprspace.script_store import WorkspaceScript


def launch(script: WorkspaceScript) -> Result[int]:
    """
    Run a workspace script in the current terminal and wait for it.

    The child inherits stdin/stdout/stderr. Call this with the selector
    suspended so the script gets the real terminal.

    Args:
        script: Script to execute

    Returns:
        Result[int]: Ok with exit code 0, or Err (LAUNCH_FAILURE) when the
        script could not start or exited non-zero
    """
    start_time = time.perf_counter()
    path = script.path

    print(f"Launching: {script.file_name}")
    print(f"Path: {path}")
    print()

    logger.info(
        "Launching script",
        operation="launch",
        status="started",
        path=str(path)
    )

    try:
        completed = subprocess.run([str(path)], check=False)
    except FileNotFoundError as e:
        return _launch_failed(script, f"Script not found: {path}", e)
    except PermissionError as e:
        return _launch_failed(script, f"Permission denied: {path} (is it executable?)", e)
    except OSError as e:
        return _launch_failed(script, f"Cannot execute {path}: {e}", e)

    duration_ms = int((time.perf_counter() - start_time) * 1000)

    if completed.returncode != 0:
        logger.warning(
            "Script exited with non-zero status",
            operation="launch",
            status="failed",
            path=str(path),
            exit_code=completed.returncode,
            metrics={"duration_ms": duration_ms}
        )
        return Result.err(Error(
            error_type=ErrorType.LAUNCH_FAILURE,
            message=f"{script.file_name} exited with status {completed.returncode}",
            context={"path": str(path), "exit_code": completed.returncode}
        ))

    logger.info(
        "Script finished",
        operation="launch",
        status="success",
        path=str(path),
        metrics={"duration_ms": duration_ms}
    )
    return Result.ok(completed.returncode)


def _launch_failed(script: WorkspaceScript, message: str, exc: OSError) -> Result[int]:
    logger.bind(
        operation="launch",
        status="failed",
        path=str(script.path),
        error_type=type(exc).__name__
    ).error(message)
    return Result.err(Error(
        error_type=ErrorType.LAUNCH_FAILURE,
        message=message,
        context={"path": str(script.path)},
        original_exception=exc
    ))
