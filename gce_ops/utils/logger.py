"""
GCE Ops - Logging Setup

This module sets up logging for GCE Ops commands.

Logging Strategy:
- INFO (default): Batch progress and summaries for end users
- DEBUG (--verbosity=debug): API calls, every poll, operation timings
- WARNING: Provider warnings attached to operations, timeouts
- ERROR: Failed operations
"""

import logging
import sys
import time
from pathlib import Path
from typing import Any

LOGGER_NAME = 'gce_ops'


class CleanFormatter(logging.Formatter):
    """
    Formatter for user-facing console output.

    INFO lines are printed bare; other levels get a short marker so warnings
    attached to operations stand out in a long batch.
    """

    PREFIXES = {
        logging.DEBUG: "[DEBUG] ",
        logging.WARNING: "[!]  WARNING: ",
        logging.ERROR: "[X] ERROR: ",
        logging.CRITICAL: "[!!] CRITICAL: ",
    }

    def format(self, record):
        return self.PREFIXES.get(record.levelno, "") + record.getMessage()


def setup_logging(level='INFO', log_file=None, debug=False):
    """
    Setup logging for GCE Ops.

    Logs go to stderr so that emitted result objects on stdout stay
    machine-readable.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file. If None, only logs to console.
        debug: If True, use DEBUG level and detailed format

    Returns:
        logging.Logger: Configured logger instance

    Example:
        logger = setup_logging('INFO')
        logger.info("Waiting for 3 operations...")
    """

    if debug:
        level = 'DEBUG'

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Remove existing handlers (in case setup_logging called multiple times)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)

    if debug:
        # Format: [2025-11-02 10:30:45] DEBUG [wait_until_terminal:45]: Poll 2: RUNNING
        console_format = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(funcName)s:%(lineno)d]: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        console_format = CleanFormatter(
            '%(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)

        # File format includes more details
        file_format = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

        logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger():
    """
    Get the GCE Ops logger instance.

    Returns:
        logging.Logger: Logger instance
    """
    return logging.getLogger(LOGGER_NAME)


# Debug logging helpers

def log_api_call(logger, method_name: str, **params):
    """
    Log an API call (DEBUG level).

    Example:
        log_api_call(logger, 'zoneOperations.get', project='p', zone='z', operation='op-1')
        # Output: API call: zoneOperations.get(project=p, zone=z, operation=op-1)
    """
    if logger is None:
        return
    param_str = ', '.join(f'{k}={v}' for k, v in params.items())
    logger.debug(f"API call: {method_name}({param_str})")


def log_api_response(logger, response: Any, truncate: int = 200):
    """
    Log an API response (DEBUG level), truncated to `truncate` characters.
    """
    if logger is None:
        return
    response_str = str(response)
    if len(response_str) > truncate:
        response_str = response_str[:truncate] + '...'
    logger.debug(f"API response: {response_str}")


def log_operation_start(logger, operation_name: str):
    """
    Log the start of a wait (DEBUG level).

    Returns:
        float: Start time (for use with log_operation_end)
    """
    if logger is not None:
        logger.debug(f"Waiting for operation: {operation_name}")
    return time.time()


def log_operation_end(logger, operation_name: str, outcome: str, start_time: float):
    """
    Log the end of a wait with timing (DEBUG level).

    Example:
        # Output: Operation Delete instance a: SUCCEEDED (took 10.50s)
    """
    if logger is None:
        return
    duration = time.time() - start_time
    logger.debug(f"Operation {operation_name}: {outcome} (took {duration:.2f}s)")
