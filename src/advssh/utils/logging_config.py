"""Logging configuration for advssh.

Provides configurable logging with:
- File-based logging with rotation
- Console output (stderr) so generated output on stdout stays clean
- A timing decorator for config loading and generation

Environment Variables:
    ADVSSH_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
    ADVSSH_LOG_FILE: Path to log file (default: ~/.advssh/advssh.log)
    ADVSSH_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    ADVSSH_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from advssh.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("build")
    def build(self):
        ...
"""
import functools
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("advssh.perf")
main_logger = logging.getLogger("advssh")


def get_log_level(default: str = "WARNING") -> int:
    """Get log level from environment."""
    level_str = os.environ.get("ADVSSH_LOG_LEVEL", default).upper()
    return getattr(logging, level_str, logging.WARNING)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".advssh" / "advssh.log"
    path_str = os.environ.get("ADVSSH_LOG_FILE", str(default_path))
    return Path(path_str).expanduser()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (WARNING+ by default, respects ADVSSH_LOG_LEVEL,
      DEBUG when verbose)
    - File handler with rotation (DEBUG level - captures everything)

    Calling it again replaces the handlers installed by a previous call.
    """
    log_level = logging.DEBUG if verbose else get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("ADVSSH_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("ADVSSH_LOG_BACKUPS", "5"))

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    handlers: list[logging.Handler] = [console_handler]
    file_error: Optional[OSError] = None

    # An unwritable log location must not stop the tool
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(main_format)
        handlers.append(file_handler)
    except OSError as e:
        file_error = e

    main_logger.handlers.clear()
    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    for handler in handlers:
        main_logger.addHandler(handler)

    if file_error is not None:
        main_logger.warning(f"Cannot open log file {log_file}: {file_error}")

    main_logger.debug(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def timed(operation: str, target: Optional[str] = None):
    """Decorator to log execution time of a function on the perf logger.

    Args:
        operation: Name of the operation (e.g., "load", "build")
        target: Optional label (can also be inferred from self.name)

    Usage:
        @timed("build")
        def save_ssh_config(self):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            label = target
            if label is None and args and hasattr(args[0], "name"):
                label = args[0].name

            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000  # ms
                perf_logger.debug(
                    f"{operation:20s} | {label or 'N/A':15s} | {elapsed:8.2f}ms | OK"
                )
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(
                    f"{operation:20s} | {label or 'N/A':15s} | {elapsed:8.2f}ms | FAIL: {e}"
                )
                raise

        return wrapper

    return decorator
