# firflow/utils/logging_config.py

"""
Configures the logging system for firflow based on loaded settings.
Uses Rich for enhanced console logging.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from firflow.config import FirflowConfig
from firflow.version import __version__

# --- Constants ---
# Map verbosity levels (from CLI flags) to logging levels
VERBOSITY_MAP = {
    0: logging.WARNING,  # Default (normal)
    1: logging.INFO,     # -v (verbose)
    2: logging.DEBUG,    # -vv (debug)
    -1: logging.CRITICAL + 10  # -q (quiet) - above CRITICAL, nothing is shown
}

PACKAGE_LOGGER = "firflow"

# --- Setup Function ---

def setup_logging(config: FirflowConfig, verbosity: int = 0) -> Optional[Path]:
    """
    Configures the package logger based on the configuration and verbosity level.

    Args:
        config: The loaded FirflowConfig object.
        verbosity: Console verbosity (0 normal, 1 verbose, 2 debug, -1 quiet).
                   Values above 2 are treated as debug.

    Returns:
        Path of the log file if file logging is enabled and was set up, else None.
    """
    log_cfg = config.logging
    console_level = VERBOSITY_MAP.get(min(verbosity, 2), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    # Handlers filter by their own level; the logger passes everything.
    package_logger.setLevel(logging.DEBUG)
    package_logger.handlers.clear()

    if console_level <= logging.CRITICAL:
        console_handler = RichHandler(
            level=console_level,
            show_time=False,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(console_handler)

    log_filepath: Optional[Path] = None
    if log_cfg.log_file_enabled:
        try:
            log_dir = config.paths.log_directory
            log_dir.mkdir(parents=True, exist_ok=True)
            log_filename = log_cfg.log_filename_template.format(timestamp=datetime.now())
            log_filepath = log_dir / log_filename

            file_handler = logging.FileHandler(log_filepath, encoding='utf-8')
            file_handler.setLevel(log_cfg.log_level_file)
            file_handler.setFormatter(logging.Formatter(log_cfg.log_format))
            package_logger.addHandler(file_handler)

            file_logger = logging.getLogger(f"{PACKAGE_LOGGER}.init")
            file_logger.info(f"--- firflow v{__version__} Log Start ---")
            file_logger.info(f"Console logging level set to: {logging.getLevelName(console_level)}")
            file_logger.debug(f"Full configuration loaded: {config.model_dump()}")
        except OSError as e:
            logging.getLogger(f"{PACKAGE_LOGGER}.error").error(f"Failed to configure file logging: {e}", exc_info=True)
            log_filepath = None

    init_logger = logging.getLogger(f"{PACKAGE_LOGGER}.init")
    init_logger.info(f"firflow v{__version__} initialized.")
    if log_filepath is not None:
        init_logger.info(f"Logging to file: {log_filepath}")
    return log_filepath
