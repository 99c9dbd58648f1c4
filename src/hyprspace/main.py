# =============================================================================
# Entry Point
# =============================================================================

import sys
from pathlib import Path
from uuid import uuid4

from loguru import logger

from hyprspace import __version__
from hyprspace.config_loader import CONFIG_PATH, load_config, storage_directory
from hyprspace.errors import ErrorReport
from hyprspace.logging_config import setup_logger, trace_id_var
from hyprspace.script_store import ScriptStore
from hyprspace.selector import SelectorApp

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1


def main(config_path: Path = CONFIG_PATH, log_dir: Path | None = None) -> int:
    """
    Start the workspace selector.

    Flow:
    1. Load config (defaults when no file exists)
    2. Configure logging
    3. Make sure the script directory exists and is usable
    4. Run the selector until the user quits

    Returns:
        Process exit code: 0 on normal quit, 1 on startup failure
    """
    main_trace_id = str(uuid4())
    trace_id_var.set(main_trace_id)
    report = ErrorReport()

    config_result = load_config(config_path)
    if config_result.is_err():
        setup_logger(log_dir=log_dir)
        report.add_error(config_result.error)
        print(f"hyprspace: invalid config {config_path}\n{config_result.error.message}", file=sys.stderr)
        return EXIT_STARTUP_FAILURE

    config = config_result.value
    setup_logger(
        level=config["logging"]["level"],
        console=config["logging"]["console"],
        log_dir=log_dir,
    )

    logger.info(
        "Hyprspace starting",
        operation="main",
        status="started",
        trace_id=main_trace_id,
        version=__version__
    )

    store = ScriptStore(storage_directory(config))
    dir_result = store.ensure_directory()
    if dir_result.is_err():
        report.add_error(dir_result.error)
        report.log_summary(main_trace_id)
        print(f"hyprspace: {dir_result.error.message}", file=sys.stderr)
        return EXIT_STARTUP_FAILURE

    app = SelectorApp(store=store, settings=config, report=report)
    exit_code = app.run()

    report.log_summary(main_trace_id)
    return exit_code if exit_code is not None else EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
