# =============================================================================
# Workspace Script Store
# =============================================================================

import errno
import os
import re
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from loguru import logger

from hyprspace.errors import Error, ErrorType, Result
from hyprspace.generator import parse_workspace_number

WORKSPACE_PATTERN = "workspace-*.sh"
SCRIPT_MODE = 0o755

_FILE_NAME_RE = re.compile(r"^workspace-(.+)\.sh$")
_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


@dataclass(frozen=True)
class WorkspaceScript:
    name: str
    path: Path
    workspace_number: int | None = None

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def display(self) -> str:
        ws_info = f"[ws {self.workspace_number}]" if self.workspace_number is not None else "[ws ?]"
        return f"{ws_info} {self.name} ({self.file_name})"


def is_valid_name(name: str) -> bool:
    """True if `name` can be used as the <name> part of workspace-<name>.sh."""
    return bool(_NAME_RE.fullmatch(name))


class ScriptStore:
    """
    Workspace scripts stored as workspace-<name>.sh files in one directory.

    The directory is the only source of truth: every list() re-reads it.
    Scripts are never overwritten; save() only ever creates new files.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def resolve_path(self, name: str) -> Path:
        return self.directory / f"workspace-{name}.sh"

    def ensure_directory(self) -> Result[Path]:
        """
        Create the storage directory if needed and check it is usable.

        Returns:
            Result[Path]: Ok with the directory, or Err when it cannot be
            created or is not readable/writable
        """
        try:
            if not self.directory.exists():
                logger.info(
                    "Workspace directory does not exist, creating it",
                    operation="ensure_directory",
                    status="creating",
                    directory=str(self.directory)
                )
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "Cannot create workspace directory",
                operation="ensure_directory",
                status="failed",
                directory=str(self.directory),
                error=str(e)
            )
            return Result.err(Error(
                error_type=ErrorType.IO_ERROR,
                message=f"Cannot create workspace directory {self.directory}: {e}",
                context={"directory": str(self.directory)},
                original_exception=e
            ))

        if not self.directory.is_dir() or not os.access(self.directory, os.R_OK | os.W_OK | os.X_OK):
            logger.error(
                "Workspace directory is not accessible",
                operation="ensure_directory",
                status="failed",
                directory=str(self.directory)
            )
            return Result.err(Error(
                error_type=ErrorType.PERMISSION_ERROR,
                message=f"Workspace directory is not accessible: {self.directory}",
                context={"directory": str(self.directory)}
            ))

        return Result.ok(self.directory)

    def scan(self) -> Result[list[WorkspaceScript]]:
        """
        Discover workspace scripts in the storage directory.

        Scans for files matching WORKSPACE_PATTERN and reads the workspace
        number out of each. Files that cannot be read are still listed,
        with workspace_number=None.

        Returns:
            Result[list[WorkspaceScript]]: Ok with scripts sorted by file
            name (empty if the directory is missing), or Err (IO_ERROR)
            when the directory cannot be scanned
        """
        start_time = time.perf_counter()
        op_trace_id = str(uuid4())
        scripts = []

        logger.debug(
            "Starting script discovery",
            operation="list_scripts",
            status="started",
            trace_id=op_trace_id,
            directory=str(self.directory),
            pattern=WORKSPACE_PATTERN
        )

        try:
            candidates = sorted(self.directory.glob(WORKSPACE_PATTERN), key=lambda p: p.name)
        except OSError as e:
            logger.warning(
                "Cannot scan workspace directory",
                operation="list_scripts",
                status="failed",
                trace_id=op_trace_id,
                directory=str(self.directory),
                error=str(e)
            )
            return Result.err(Error(
                error_type=ErrorType.IO_ERROR,
                message=f"Cannot read workspace directory {self.directory}: {e}",
                context={"directory": str(self.directory)},
                original_exception=e
            ))

        for path in candidates:
            match = _FILE_NAME_RE.match(path.name)
            if not match or not path.is_file():
                logger.debug(
                    "Skipping entry - not a script file",
                    operation="list_scripts",
                    trace_id=op_trace_id,
                    file=path.name
                )
                continue

            scripts.append(WorkspaceScript(
                name=match.group(1),
                path=path,
                workspace_number=self._read_workspace_number(path, op_trace_id),
            ))

        duration_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            "Script discovery complete",
            operation="list_scripts",
            status="success",
            trace_id=op_trace_id,
            metrics={"scripts_found": len(scripts), "duration_ms": duration_ms}
        )

        return Result.ok(scripts)

    def list(self) -> list[WorkspaceScript]:
        """Scripts sorted by file name; empty if the directory cannot be scanned."""
        result = self.scan()
        return result.value if result.is_ok() else []

    def _read_workspace_number(self, path: Path, op_trace_id: str) -> int | None:
        try:
            text = path.read_text(errors="replace")
        except OSError as e:
            logger.debug(
                "Script unreadable, workspace number unknown",
                operation="list_scripts",
                status="parse_skip",
                trace_id=op_trace_id,
                file=path.name,
                error=str(e)
            )
            return None

        number = parse_workspace_number(text)
        if number is None:
            logger.debug(
                "No workspace dispatch line found",
                operation="list_scripts",
                status="parse_skip",
                trace_id=op_trace_id,
                file=path.name
            )
        return number

    def exists(self, name: str) -> bool:
        return os.path.lexists(self.resolve_path(name))

    def save(self, name: str, content: str) -> Result[WorkspaceScript]:
        """
        Create a new executable script.

        Writes through a temp file in the same directory, then hard-links it
        into place. The link fails if the target already exists, so an
        existing script is never replaced.

        Args:
            name: Script name (the <name> in workspace-<name>.sh)
            content: Full script text

        Returns:
            Result[WorkspaceScript]: Ok with the new script, or Err with
            INVALID_NAME, ALREADY_EXISTS or IO_ERROR
        """
        if not is_valid_name(name):
            return Result.err(Error(
                error_type=ErrorType.INVALID_NAME,
                message=f"Invalid script name: {name!r}",
                context={"name": name}
            ))

        path = self.resolve_path(name)
        if self.exists(name):
            logger.warning(
                "Refusing to overwrite existing script",
                operation="save_script",
                status="already_exists",
                path=str(path)
            )
            return Result.err(Error(
                error_type=ErrorType.ALREADY_EXISTS,
                message=f"File {path} already exists",
                context={"name": name, "path": str(path)}
            ))

        temp_path = None
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.directory,
                prefix=f".{path.name}.",
                suffix=".tmp"
            )
            with os.fdopen(temp_fd, "w") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(temp_path, SCRIPT_MODE)
            os.link(temp_path, path)
        except FileExistsError as e:
            return Result.err(Error(
                error_type=ErrorType.ALREADY_EXISTS,
                message=f"File {path} already exists",
                context={"name": name, "path": str(path)},
                original_exception=e
            ))
        except OSError as e:
            if e.errno == errno.ENOSPC:
                message = f"Disk full - cannot write to {path}"
            else:
                message = f"Cannot write {path}: {e}"
            logger.error(
                "Failed to save script",
                operation="save_script",
                status="failed",
                path=str(path),
                error=str(e)
            )
            return Result.err(Error(
                error_type=ErrorType.IO_ERROR,
                message=message,
                context={"name": name, "path": str(path)},
                original_exception=e
            ))
        finally:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass

        script = WorkspaceScript(
            name=name,
            path=path,
            workspace_number=parse_workspace_number(content),
        )
        logger.info(
            "Script created",
            operation="save_script",
            status="success",
            path=str(path),
            workspace_number=script.workspace_number
        )
        return Result.ok(script)
